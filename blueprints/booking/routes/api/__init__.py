"""
Booking API routes package.
Split into smaller modules by entity for maintainability.
"""

from flask import Blueprint

# Create the API blueprint
api_bp = Blueprint('api', __name__)

# Import and register routes from submodules
from blueprints.booking.routes.api import reservations  # noqa: E402
from blueprints.booking.routes.api import staging  # noqa: E402
from blueprints.booking.routes.api import calendar  # noqa: E402
from blueprints.booking.routes.api import equipment  # noqa: E402
from blueprints.booking.routes.api import companies  # noqa: E402
from blueprints.booking.routes.api import users  # noqa: E402

# Register all route functions on the blueprint
reservations.register_routes(api_bp)
staging.register_routes(api_bp)
calendar.register_routes(api_bp)
equipment.register_routes(api_bp)
companies.register_routes(api_bp)
users.register_routes(api_bp)
