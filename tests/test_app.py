"""
Test application factory and configuration.
"""

import pytest
from app import create_app
from config import ProductionConfig


class TestAppFactory:
    """Test Flask application factory."""

    def test_create_app_development(self):
        """Test app creation with development config."""
        app = create_app('development')
        assert app is not None
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_test(self):
        """Test app creation with test config."""
        app = create_app('test')
        assert app is not None
        assert app.config['TESTING'] is True
        assert app.config['WTF_CSRF_ENABLED'] is False

    def test_create_app_default(self):
        """Test app creation with default config (FLASK_ENV=test in conftest)."""
        app = create_app()
        assert app is not None
        assert app.config['TESTING'] is True

    def test_app_has_blueprints(self):
        """Test that all blueprints are registered."""
        app = create_app('test')
        blueprint_names = list(app.blueprints.keys())

        assert 'admin' in blueprint_names
        assert 'booking' in blueprint_names
        assert 'api' in blueprint_names

    def test_app_has_extensions(self):
        """Test that extensions are initialized."""
        app = create_app('test')
        assert hasattr(app, 'login_manager')

    def test_cli_commands_registered(self):
        """Test that CLI commands are registered."""
        app = create_app('test')
        assert 'init-db' in app.cli.commands
        assert 'create-user' in app.cli.commands
        assert 'import-equipment' in app.cli.commands


class TestAppConfiguration:
    """Test application configuration."""

    def test_defaults(self):
        """Test configuration defaults used by the domain."""
        app = create_app('test')
        assert app.config['APP_NAME'] == 'GageBook'
        assert app.config['AUTH_USER_HEADER'] == 'X-Authenticated-User'
        assert app.config['ALLOWED_IMPORT_EXTENSIONS'] == {'csv', 'xlsx'}
        assert app.config['MIN_PASSWORD_LENGTH'] == 6

    def test_production_requires_secret_key(self, monkeypatch):
        """Production refuses to start without a strong secret key."""
        monkeypatch.delenv('SECRET_KEY', raising=False)
        with pytest.raises(ValueError):
            ProductionConfig.validate()

        monkeypatch.setenv('SECRET_KEY', 'short')
        with pytest.raises(ValueError):
            ProductionConfig.validate()

    def test_production_requires_database_path(self, monkeypatch):
        """Production refuses to start without an explicit database path."""
        monkeypatch.setenv('SECRET_KEY', 'x' * 40)
        monkeypatch.delenv('DATABASE_PATH', raising=False)
        with pytest.raises(ValueError):
            ProductionConfig.validate()


class TestCliCommands:
    """Test Flask CLI commands."""

    def test_init_db_command(self, app, tmp_path):
        """init-db builds and seeds the database."""
        runner = app.test_cli_runner()
        result = runner.invoke(args=['init-db'])
        assert result.exit_code == 0
        assert 'Database initialized successfully!' in result.output

    def test_create_user_command(self, app):
        """create-user adds a user without a password."""
        from database import get_store

        runner = app.test_cli_runner()
        result = runner.invoke(args=['create-user', 'Dana Field', '--email', 'dana@example.com'])
        assert result.exit_code == 0
        assert 'User created successfully!' in result.output

        with app.app_context():
            users = get_store().users.query(email='dana@example.com')
        assert len(users) == 1
        assert users[0]['role'] == 'TECHNICIAN'
        assert users[0]['password_hash'] is None

    def test_create_user_command_duplicate_email(self, app):
        """create-user reports a duplicate email."""
        runner = app.test_cli_runner()
        result = runner.invoke(args=['create-user', 'Mike Again', '--email', 'MIKE@atiquality.com'])
        assert 'Error creating user' in result.output

    def test_import_equipment_command(self, app, tmp_path):
        """import-equipment upserts rows from a CSV file."""
        csv_path = tmp_path / 'gages.csv'
        csv_path.write_text(
            'gageId,description,manufacturer,model,range,uom\n'
            'G-9001,Bore Gauge,Mitutoyo,511-701,2-6 in,in\n'
            'g-1001,Digital Multimeter (rev),Fluke,87V,1000V,Volts\n',
            encoding='utf-8'
        )

        runner = app.test_cli_runner()
        result = runner.invoke(args=['import-equipment', str(csv_path)])
        assert result.exit_code == 0
        assert 'Created: 1  Updated: 1' in result.output
