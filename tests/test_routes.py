"""
Route tests.
Authentication, JSON error handling and the booking/admin endpoints.
"""

import io

API = '/booking/api'


class TestPublicRoutes:
    """Routes that need no authenticated user."""

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'ok'
        assert data['app'] == 'GageBook'

    def test_csrf_token(self, client):
        response = client.get('/api/csrf-token')
        assert response.status_code == 200
        assert response.get_json()['csrf_token']

    def test_unknown_route_is_json_404(self, client):
        response = client.get('/does-not-exist')
        assert response.status_code == 404
        assert response.get_json()['success'] is False

    def test_wrong_method_is_json_405(self, client):
        response = client.delete('/api/health')
        assert response.status_code == 405
        assert response.get_json()['success'] is False


class TestAuthentication:
    """The authenticated-user header gates every booking route."""

    def test_missing_header(self, client):
        response = client.get(f'{API}/equipment')
        assert response.status_code == 401
        assert response.get_json()['kind'] == 'unauthorized'

    def test_unknown_user(self, app, client):
        headers = {app.config['AUTH_USER_HEADER']: 'user-nobody'}
        assert client.get(f'{API}/equipment', headers=headers).status_code == 401

    def test_me(self, tech_client):
        response = tech_client.get(f'{API}/me')
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['id'] == 'user-2'
        assert 'password_hash' not in data

    def test_technician_cannot_use_admin(self, tech_client):
        response = tech_client.get('/admin/users')
        assert response.status_code == 403
        assert response.get_json()['kind'] == 'forbidden'

    def test_users_are_isolated_between_requests(self, admin_client, tech_client):
        """Each request resolves its own user."""
        assert admin_client.get('/admin/users').status_code == 200
        assert tech_client.get('/admin/users').status_code == 403


class TestReservationRoutes:

    def booking(self, **overrides):
        data = {'equipment_id': 'eq-1', 'technician_id': 'user-2', 'company_id': 'comp-1',
                'pickup_date': '2024-07-31', 'return_date': '2024-08-01', 'notes': 'Line 4'}
        data.update(overrides)
        return data

    def test_create(self, tech_client):
        response = tech_client.post(f'{API}/reservations', json=self.booking())
        assert response.status_code == 201
        reservation = response.get_json()['reservation']
        assert reservation['id'].startswith('res-')
        assert reservation['staged'] is False

    def test_create_on_return_day_conflicts(self, tech_client):
        """The return day is still booked."""
        response = tech_client.post(f'{API}/reservations', json=self.booking(pickup_date='2024-07-30'))
        assert response.status_code == 409
        assert response.get_json()['kind'] == 'conflict'

    def test_create_requires_json(self, tech_client):
        response = tech_client.post(f'{API}/reservations', data='not json')
        assert response.status_code == 400

    def test_create_invalid_range(self, tech_client):
        response = tech_client.post(
            f'{API}/reservations',
            json=self.booking(pickup_date='2024-08-05', return_date='2024-08-01')
        )
        assert response.status_code == 400
        assert response.get_json()['kind'] == 'validation'

    def test_create_with_list_id(self, tech_client):
        response = tech_client.post(f'{API}/reservations', json=self.booking(equipment_id=['eq-1']))
        assert response.status_code == 400
        assert response.get_json()['kind'] == 'validation'

    def test_create_with_object_company(self, tech_client):
        response = tech_client.post(f'{API}/reservations',
                                    json=self.booking(company_id={'id': 'comp-1'}))
        assert response.status_code == 400

    def test_batch_with_nested_ids(self, tech_client):
        response = tech_client.post(f'{API}/reservations/batch', json={
            'equipment_ids': [['eq-5']], 'technician_id': 'user-2', 'company_id': 'comp-1',
            'pickup_date': '2030-01-01', 'return_date': '2030-01-02',
        })
        assert response.status_code == 400
        assert response.get_json()['kind'] == 'validation'

    def test_check_availability_with_nested_ids(self, tech_client):
        response = tech_client.post(f'{API}/reservations/check-availability', json={
            'equipment_ids': [{'id': 'eq-1'}],
            'pickup_date': '2024-07-29', 'return_date': '2024-07-29',
        })
        assert response.status_code == 400

    def test_create_with_trailing_date_text(self, tech_client):
        response = tech_client.post(f'{API}/reservations',
                                    json=self.booking(pickup_date='2031-01-01garbage',
                                                      return_date='2031-01-02'))
        assert response.status_code == 400

    def test_detail_and_missing(self, tech_client):
        data = tech_client.get(f'{API}/reservations/res-1').get_json()['data']
        assert data['equipment']['gage_id'] == 'G-1001'
        assert data['company']['name'] == 'Global Tech Inc.'
        assert tech_client.get(f'{API}/reservations/res-missing').status_code == 404

    def test_list_window(self, tech_client):
        response = tech_client.get(f'{API}/reservations?from=2024-07-30&to=2024-07-31')
        ids = {r['id'] for r in response.get_json()['data']}
        assert ids == {'res-1', 'res-2'}

    def test_list_bad_date(self, tech_client):
        assert tech_client.get(f'{API}/reservations?from=soon').status_code == 400

    def test_batch_conflict_books_nothing(self, tech_client):
        response = tech_client.post(f'{API}/reservations/batch', json={
            'equipment_ids': ['eq-5', 'eq-1'], 'technician_id': 'user-2', 'company_id': 'comp-1',
            'pickup_date': '2024-07-29', 'return_date': '2024-07-29',
        })
        assert response.status_code == 409
        assert response.get_json()['gage_ids'] == ['G-1001']

        history = tech_client.get(f'{API}/equipment/eq-5/reservations?all=true').get_json()
        assert history['count'] == 0

    def test_batch_success(self, tech_client):
        response = tech_client.post(f'{API}/reservations/batch', json={
            'equipment_ids': ['eq-5', 'eq-6', 'eq-5'], 'technician_id': 'user-2',
            'company_id': 'comp-1', 'pickup_date': '2024-07-29', 'return_date': '2024-07-29',
        })
        assert response.status_code == 201
        assert response.get_json()['count'] == 2

    def test_update_and_delete(self, tech_client):
        response = tech_client.put(f'{API}/reservations/res-3', json={'notes': 'Bring probes'})
        assert response.status_code == 200
        assert response.get_json()['reservation']['notes'] == 'Bring probes'

        assert tech_client.delete(f'{API}/reservations/res-3').status_code == 200
        assert tech_client.delete(f'{API}/reservations/res-3').status_code == 404

    def test_check_availability(self, tech_client):
        response = tech_client.post(f'{API}/reservations/check-availability', json={
            'equipment_ids': ['eq-1', 'eq-5'],
            'pickup_date': '2024-07-29', 'return_date': '2024-07-29',
        })
        data = response.get_json()
        assert data['all_available'] is False
        assert [u['gage_id'] for u in data['unavailable']] == ['G-1001']


class TestStagingRoutes:

    def test_list_and_toggle(self, tech_client):
        response = tech_client.get(f'{API}/staging?date=2024-07-29')
        summary = response.get_json()['data']
        assert [i['reservation']['id'] for i in summary['items']] == ['res-2']
        assert summary['progress']['staged_count'] == 0

        response = tech_client.post(f'{API}/staging/res-2', json={'staged': True})
        assert response.status_code == 200
        assert response.get_json()['reservation']['staged'] is True

        summary = tech_client.get(f'{API}/staging?date=2024-07-29').get_json()['data']
        assert summary['progress']['percent'] == 100.0

    def test_toggle_requires_boolean(self, tech_client):
        response = tech_client.post(f'{API}/staging/res-2', json={'staged': 'yes'})
        assert response.status_code == 400

    def test_bad_date(self, tech_client):
        assert tech_client.get(f'{API}/staging?date=2024-99-01').status_code == 400


class TestCalendarAndLookupRoutes:

    def test_month_calendar(self, tech_client):
        response = tech_client.get(f'{API}/calendar?date=2024-07-15&mode=month')
        assert response.status_code == 200
        data = response.get_json()
        assert len(data['days']) == 35
        assert data['days'][0] == '2024-06-30'

    def test_week_calendar(self, tech_client):
        data = tech_client.get(f'{API}/calendar?date=2024-07-31&mode=week').get_json()
        assert [g['technician_id'] for g in data['projection']] == ['user-2', 'user-3']

    def test_calendar_bad_mode(self, tech_client):
        assert tech_client.get(f'{API}/calendar?mode=year').status_code == 400

    def test_equipment_search(self, tech_client):
        data = tech_client.get(f'{API}/equipment?q=fluke').get_json()
        assert {e['gage_id'] for e in data['data']} >= {'G-1001'}

    def test_equipment_available(self, tech_client):
        data = tech_client.get(f'{API}/equipment/available?date=2024-07-29').get_json()
        ids = {e['id'] for e in data['data']}
        assert 'eq-1' not in ids and 'eq-3' not in ids
        assert 'eq-5' in ids

    def test_equipment_missing(self, tech_client):
        assert tech_client.get(f'{API}/equipment/eq-missing').status_code == 404

    def test_company_history(self, tech_client):
        response = tech_client.get(f'{API}/companies/comp-1/history')
        assert response.status_code == 200
        assert response.get_json()['company']['name'] == 'Global Tech Inc.'
        assert tech_client.get(f'{API}/companies/comp-missing/history').status_code == 404

    def test_technician_reservations(self, tech_client):
        data = tech_client.get(f'{API}/technicians/user-2/reservations').get_json()['data']
        assert {r['id'] for r in data['upcoming'] + data['past']} == {'res-1', 'res-3'}

    def test_users_have_colors(self, tech_client):
        users = tech_client.get(f'{API}/users').get_json()['data']
        assert all(u['color'].startswith('#') for u in users)
        assert all('password_hash' not in u for u in users)


class TestAdminRoutes:

    def test_user_list_hides_credentials(self, admin_client):
        response = admin_client.get('/admin/users')
        assert response.status_code == 200
        users = response.get_json()['data']
        assert len(users) == 3
        assert all('password_hash' not in u for u in users)

    def test_user_list_role_filter_any_case(self, admin_client):
        users = admin_client.get('/admin/users?role=admin').get_json()['data']
        assert [u['id'] for u in users] == ['user-1']

    def test_create_user_and_set_password(self, admin_client):
        response = admin_client.post('/admin/users', json={'name': 'Dana Field'})
        assert response.status_code == 201
        user_id = response.get_json()['user']['id']

        response = admin_client.post(f'/admin/users/{user_id}/password', json={'password': 'x'})
        assert response.status_code == 400
        response = admin_client.post(f'/admin/users/{user_id}/password',
                                     json={'password': 'calibrate-me'})
        assert response.status_code == 200
        assert response.get_json()['user']['has_password'] is True

    def test_delete_referenced_company(self, admin_client):
        response = admin_client.delete('/admin/companies/comp-1')
        assert response.status_code == 409
        assert response.get_json()['kind'] == 'in_use'

    def test_duplicate_gage_id(self, admin_client):
        response = admin_client.post('/admin/equipment',
                                     json={'gage_id': 'g-1001', 'description': 'Copy'})
        assert response.status_code == 409

    def test_equipment_import(self, admin_client):
        csv_data = (
            'gageId,description,manufacturer,model,range,uom\n'
            'G-9001,Bore Gauge,Mitutoyo,511-701,2-6 in,in\n'
        ).encode('utf-8')
        response = admin_client.post(
            '/admin/equipment/import',
            data={'file': (io.BytesIO(csv_data), 'gages.csv')},
            content_type='multipart/form-data'
        )
        assert response.status_code == 200
        assert response.get_json()['created_count'] == 1

    def test_import_rejects_extension(self, admin_client):
        response = admin_client.post(
            '/admin/equipment/import',
            data={'file': (io.BytesIO(b'x'), 'gages.txt')},
            content_type='multipart/form-data'
        )
        assert response.status_code == 400

    def test_import_requires_file(self, admin_client):
        response = admin_client.post('/admin/companies/import', data={},
                                     content_type='multipart/form-data')
        assert response.status_code == 400
