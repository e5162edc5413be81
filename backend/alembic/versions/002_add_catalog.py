"""Add reference wine catalog.

Revision ID: 002
Revises: 001
Create Date: 2026-10-17

Creates catalog_wines, the read-only reference set searched by the
menu matcher and the rating importer.
"""
from typing import Sequence, Union

from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CATALOG_SQL = """
CREATE TABLE IF NOT EXISTS catalog_wines (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    winery TEXT,
    variety TEXT,
    region TEXT,
    country TEXT,
    vintage INTEGER,
    rating REAL,
    price REAL,
    type TEXT,
    body TEXT,
    acidity TEXT,
    food_pairings TEXT NOT NULL DEFAULT '[]'
);

CREATE INDEX IF NOT EXISTS idx_catalog_rating ON catalog_wines(rating DESC);
CREATE INDEX IF NOT EXISTS idx_catalog_country ON catalog_wines(country);
CREATE INDEX IF NOT EXISTS idx_catalog_region ON catalog_wines(region);
CREATE INDEX IF NOT EXISTS idx_catalog_variety ON catalog_wines(variety);
CREATE INDEX IF NOT EXISTS idx_catalog_winery ON catalog_wines(winery);
"""


def upgrade() -> None:
    conn = op.get_bind()
    raw_conn = conn.connection.dbapi_connection
    raw_conn.executescript(CATALOG_SQL)


def downgrade() -> None:
    conn = op.get_bind()
    raw_conn = conn.connection.dbapi_connection
    raw_conn.execute("DROP TABLE IF EXISTS catalog_wines")
