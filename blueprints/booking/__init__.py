"""
Booking blueprint initialization.
Assembles the JSON endpoints used by technicians and admins to book,
stage and browse equipment.

Individual route logic is in routes/api/:
- reservations.py - Reservation CRUD, batch booking, availability
- staging.py - Pickup-day staging list and toggle
- calendar.py - Week/month calendar projection
- equipment.py - Equipment catalogue and per-equipment reservations
- companies.py - Companies and their equipment history
- users.py - Technician list and per-technician reservations
"""

from flask import Blueprint

# Create main booking blueprint
booking_bp = Blueprint('booking', __name__)

# =============================================================================
# REGISTER SUB-BLUEPRINTS
# =============================================================================

# API routes (all JSON endpoints)
from blueprints.booking.routes.api import api_bp  # noqa: E402
booking_bp.register_blueprint(api_bp, url_prefix='/api')
