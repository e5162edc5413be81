"""Initial schema - user wines, ratings and scan history.

Revision ID: 001
Revises: None
Create Date: 2026-10-17

Creates core tables: wines, user_ratings, scan_history, scan_history_wines.

Note: the read-only reference catalog is created in migration 002.
"""
from typing import Sequence, Union

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Complete schema SQL inlined for immutability.
SCHEMA_SQL = """
-- Wines the user has scanned, rated or added
CREATE TABLE IF NOT EXISTS wines (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    vintage INTEGER,
    region TEXT,
    grape_variety TEXT,
    average_rating REAL,
    winery TEXT,
    country TEXT,
    price_usd REAL,
    wine_type TEXT,
    body TEXT,
    acidity TEXT,
    food_pairings TEXT NOT NULL DEFAULT '[]',
    catalog_id INTEGER,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Personal ratings; re-tasting adds a row instead of overwriting
CREATE TABLE IF NOT EXISTS user_ratings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    wine_id INTEGER NOT NULL,
    rating REAL NOT NULL CHECK (rating >= 0 AND rating <= 5),
    rated_at TEXT NOT NULL,
    notes TEXT,
    vintage INTEGER,
    FOREIGN KEY (wine_id) REFERENCES wines(id) ON DELETE CASCADE
);

-- One row per scan; entries is a JSON list of {"name", "variety"} objects
CREATE TABLE IF NOT EXISTS scan_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    scanned_at TEXT NOT NULL,
    photo BLOB,
    entries TEXT NOT NULL DEFAULT '[]'
);

-- Wines matched by a scan
CREATE TABLE IF NOT EXISTS scan_history_wines (
    scan_id INTEGER NOT NULL,
    wine_id INTEGER NOT NULL,
    position INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (scan_id, wine_id),
    FOREIGN KEY (scan_id) REFERENCES scan_history(id) ON DELETE CASCADE,
    FOREIGN KEY (wine_id) REFERENCES wines(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_wines_name_lower ON wines(LOWER(name));
CREATE INDEX IF NOT EXISTS idx_wines_catalog_id ON wines(catalog_id);
CREATE INDEX IF NOT EXISTS idx_user_ratings_wine_id ON user_ratings(wine_id);
CREATE INDEX IF NOT EXISTS idx_user_ratings_rated_at ON user_ratings(rated_at);
CREATE INDEX IF NOT EXISTS idx_scan_history_scanned_at ON scan_history(scanned_at);
"""


def upgrade() -> None:
    # Use raw DBAPI connection for multi-statement SQL
    conn = op.get_bind()
    raw_conn = conn.connection.dbapi_connection
    raw_conn.executescript(SCHEMA_SQL)


def downgrade() -> None:
    conn = op.get_bind()
    raw_conn = conn.connection.dbapi_connection

    # Drop tables in reverse dependency order
    tables = [
        "scan_history_wines",
        "scan_history",
        "user_ratings",
        "wines",
    ]
    for table in tables:
        raw_conn.execute(f"DROP TABLE IF EXISTS {table}")
