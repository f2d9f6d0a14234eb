"""Admin services package."""

from blueprints.admin.services.import_service import (  # noqa: F401
    allowed_file,
    read_rows,
    validate_import_file,
    import_equipment_file,
    import_companies_file,
    EQUIPMENT_REQUIRED_HEADERS,
    COMPANY_REQUIRED_HEADERS,
)
