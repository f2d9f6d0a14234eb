"""
Database schema definitions.
Table creation, indexes, and the column layout shared by every store.
"""

# Column layout per entity table. Both store implementations read this so
# that records look the same whichever backend is in use.
TABLES = {
    'users': {
        'prefix': 'user',
        'columns': ('id', 'name', 'email', 'role', 'password_hash', 'display_color'),
        'nocase': ('email',),
        'booleans': (),
        'defaults': {'role': 'TECHNICIAN'},
    },
    'companies': {
        'prefix': 'comp',
        'columns': ('id', 'name'),
        'nocase': ('name',),
        'booleans': (),
        'defaults': {},
    },
    'equipment': {
        'prefix': 'eq',
        'columns': (
            'id', 'gage_id', 'description', 'manufacturer', 'model', 'range',
            'uom', 'image_url', 'calibration_due_date',
        ),
        'nocase': ('gage_id',),
        'booleans': (),
        'defaults': {'manufacturer': '', 'model': '', 'range': '', 'uom': ''},
    },
    'reservations': {
        'prefix': 'res',
        'columns': (
            'id', 'equipment_id', 'technician_id', 'company_id',
            'pickup_date', 'return_date', 'notes', 'staged',
        ),
        'nocase': (),
        'booleans': ('staged',),
        'defaults': {'notes': '', 'staged': False},
    },
}


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    for table in ('reservations', 'equipment', 'companies', 'users'):
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Users (credentials are managed separately from the profile)
    db.execute('''
        CREATE TABLE users (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT UNIQUE COLLATE NOCASE,
            role TEXT NOT NULL DEFAULT 'TECHNICIAN'
                CHECK (role IN ('ADMIN', 'TECHNICIAN')),
            password_hash TEXT,
            display_color TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 2. Companies (customers the equipment is booked against)
    db.execute('''
        CREATE TABLE companies (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL UNIQUE COLLATE NOCASE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 3. Equipment
    db.execute('''
        CREATE TABLE equipment (
            id TEXT PRIMARY KEY,
            gage_id TEXT NOT NULL UNIQUE COLLATE NOCASE,
            description TEXT NOT NULL,
            manufacturer TEXT NOT NULL DEFAULT '',
            model TEXT NOT NULL DEFAULT '',
            "range" TEXT NOT NULL DEFAULT '',
            uom TEXT NOT NULL DEFAULT '',
            image_url TEXT,
            calibration_due_date DATE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 4. Reservations (deleting equipment cascades; users and companies are guarded)
    db.execute('''
        CREATE TABLE reservations (
            id TEXT PRIMARY KEY,
            equipment_id TEXT NOT NULL REFERENCES equipment(id) ON DELETE CASCADE,
            technician_id TEXT NOT NULL REFERENCES users(id),
            company_id TEXT NOT NULL REFERENCES companies(id),
            pickup_date DATE NOT NULL,
            return_date DATE NOT NULL,
            notes TEXT NOT NULL DEFAULT '',
            staged INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK (return_date >= pickup_date)
        )
    ''')


def create_indexes(db):
    """Create indexes for the common lookups."""
    db.execute('CREATE INDEX IF NOT EXISTS idx_res_equipment_dates '
               'ON reservations(equipment_id, pickup_date, return_date)')
    db.execute('CREATE INDEX IF NOT EXISTS idx_res_pickup ON reservations(pickup_date)')
    db.execute('CREATE INDEX IF NOT EXISTS idx_res_technician ON reservations(technician_id)')
    db.execute('CREATE INDEX IF NOT EXISTS idx_res_company ON reservations(company_id)')
