"""
GageBook - Gage Reservation and Staging System
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import login_manager, csrf

# Import database functions
from database import close_db, init_db, get_store

from utils.api_response import api_error
from utils.messages import get_message


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    config_class = config[config_name]
    if hasattr(config_class, 'validate'):
        config_class.validate()

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config_class)

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize Flask-Login
    login_manager.init_app(app)
    # Initialize CSRF Protection
    csrf.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    # Import blueprints
    from blueprints.admin.routes import admin_bp
    from blueprints.booking import booking_bp
    from blueprints.api.routes import api_bp

    # Register blueprints
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(booking_bp, url_prefix='/booking')
    app.register_blueprint(api_bp, url_prefix='/api')


def register_error_handlers(app):
    """Register JSON error handlers."""

    @app.errorhandler(400)
    def bad_request_error(error):
        """Handle 400 errors (including CSRF failures)."""
        return api_error(getattr(error, 'description', None) or get_message('json_required'), 400)

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error(get_message('not_found'), 404, kind='not_found')

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 errors."""
        return api_error(get_message('method_not_allowed'), 405)

    @app.errorhandler(413)
    def too_large_error(error):
        """Handle uploads above MAX_CONTENT_LENGTH."""
        return api_error(getattr(error, 'description', 'Request too large'), 413)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        app.logger.error(f'Unhandled error: {error}', exc_info=True)
        return api_error(get_message('internal_error'), 500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    @click.option('--no-seed', is_flag=True, help='Create the schema without sample data.')
    def init_db_command(no_seed):
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db(seed=not no_seed)
        click.echo('Database initialized successfully!')

    @app.cli.command('create-user')
    @click.argument('name')
    @click.option('--email', default=None, help='Email address (optional).')
    @click.option('--role', type=click.Choice(['ADMIN', 'TECHNICIAN'], case_sensitive=False),
                  default='TECHNICIAN', show_default=True)
    def create_user_command(name, email, role):
        """Create a new user (without a password)."""
        from models.user import create_user

        with app.app_context():
            result = create_user(get_store(), {'name': name, 'email': email, 'role': role})

        if result['success']:
            click.echo(f"User created successfully! ID: {result['user']['id']}")
        else:
            click.echo(f"Error creating user: {result['error']}", err=True)

    @app.cli.command('import-equipment')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    def import_equipment_command(path):
        """Create or update equipment from a CSV or XLSX file."""
        from blueprints.admin.services import import_equipment_file

        with app.app_context(), open(path, 'rb') as stream:
            result = import_equipment_file(get_store(), stream, os.path.basename(path))

        if not result['success']:
            click.echo(f"Import failed: {result['error']}", err=True)
            return

        click.echo(f"Created: {result['created_count']}  Updated: {result['updated_count']}")
        for error in result['errors']:
            click.echo(f"  Row skipped ({error['message']}): {error['row_data']}", err=True)


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/gagebook.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        logging.getLogger('models').addHandler(file_handler)
        logging.getLogger('models').setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('GageBook startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
