"""
Database seed data.
Initial data population for fresh database installations.
"""

from datetime import date, timedelta


def seed_database(store):
    """Insert initial seed data through the store."""

    with store.transaction():
        # 1. Users (no credentials; an admin sets them)
        users_data = [
            ('user-1', 'Mike Smith', 'mike@atiquality.com', 'ADMIN'),
            ('user-2', 'Bob Jones', 'bob@atiquality.com', 'TECHNICIAN'),
            ('user-3', 'Charlie Brown', 'charlie@atiquality.com', 'TECHNICIAN'),
        ]
        for user_id, name, email, role in users_data:
            store.users.insert({'id': user_id, 'name': name, 'email': email, 'role': role})

        # 2. Companies
        companies_data = [
            ('comp-1', 'Global Tech Inc.'),
            ('comp-2', 'Innovate Solutions'),
            ('comp-3', 'Future Systems'),
        ]
        for company_id, name in companies_data:
            store.companies.insert({'id': company_id, 'name': name})

        # 3. Equipment
        equipment_data = [
            ('eq-1', 'G-1001', 'Digital Multimeter', 'Fluke', '87V', '1000V', 'Volts', '2025-08-15'),
            ('eq-2', 'G-1002', 'Oscilloscope', 'Tektronix', 'TBS1052B', '50 MHz', 'MHz', '2025-06-20'),
            ('eq-3', 'G-1003', 'Calipers', 'Mitutoyo', 'CD-6" ASX', '6 inch', 'in', '2024-12-01'),
            ('eq-4', 'G-2001', 'Power Supply', 'Keysight', 'E3631A', '0-6V/0-25V', 'V/A', '2025-02-10'),
            ('eq-5', 'G-2002', 'Torque Wrench', 'Snap-on', 'TECH2FR100', '5-100 ft-lb', 'ft-lb', '2024-11-22'),
            ('eq-6', 'G-3001', 'Infrared Thermometer', 'Flir', 'TG165', '-25 to 380°C', '°C', '2025-09-05'),
            ('eq-7', 'G-1004', 'Digital Multimeter', 'Fluke', '87V', '1000V', 'Volts', '2025-08-15'),
        ]
        for eq_id, gage_id, description, manufacturer, model, rng, uom, due in equipment_data:
            store.equipment.insert({
                'id': eq_id,
                'gage_id': gage_id,
                'description': description,
                'manufacturer': manufacturer,
                'model': model,
                'range': rng,
                'uom': uom,
                'calibration_due_date': due,
            })

        # 4. Reservations (three historical, one starting tomorrow)
        tomorrow = date.today() + timedelta(days=1)
        next_week = date.today() + timedelta(days=7)
        reservations_data = [
            ('res-1', 'eq-1', 'user-2', 'comp-1', '2024-07-28', '2024-07-30', 'Need all probes included.', True),
            ('res-2', 'eq-3', 'user-3', 'comp-2', '2024-07-29', '2024-08-02', 'Please verify calibration cert.', False),
            ('res-3', 'eq-2', 'user-2', 'comp-1', '2024-08-05', '2024-08-09', '', False),
            ('res-4', 'eq-4', 'user-3', 'comp-3', tomorrow.isoformat(), next_week.isoformat(),
             'Critical project, requires immediate staging.', False),
        ]
        for res_id, eq_id, tech_id, company_id, pickup, ret, notes, staged in reservations_data:
            store.reservations.insert({
                'id': res_id,
                'equipment_id': eq_id,
                'technician_id': tech_id,
                'company_id': company_id,
                'pickup_date': pickup,
                'return_date': ret,
                'notes': notes,
                'staged': staged,
            })
