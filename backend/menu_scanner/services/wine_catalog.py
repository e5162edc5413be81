"""
Reference wine catalog with SQLite backend.

Read-only from the scanner's point of view; populated in bulk by the
catalog bootstrap importer. Search semantics:
- Case-insensitive, query tokenized on whitespace
- Each token must match name, winery, variety, region or country
  (AND across tokens, OR across fields)
- Ranked by community rating, highest first
"""

import json
import logging
import sqlite3
from typing import Iterable, Optional, Protocol

from ..config import Config
from ..db import BaseRepository
from ..models.domain import CatalogRecord

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "winery", "variety", "region", "country")
DISTINCT_FIELDS = ("variety", "country", "region", "winery")

_SELECT = """
    SELECT id, name, winery, variety, region, country, vintage, rating, price,
           type, body, acidity, food_pairings
    FROM catalog_wines
"""


class CatalogSearch(Protocol):
    """What matchers and importers need from a catalog (allows fakes in tests)."""

    def search(self, query: str, limit: int = Config.DEFAULT_SEARCH_LIMIT) -> list[CatalogRecord]: ...

    def distinct_values(self, field: str, limit: Optional[int] = None) -> list[str]: ...


def search_terms(query: str) -> list[str]:
    """Lowercase whitespace tokens reduced to letters and digits; empty tokens dropped."""
    terms = []
    for token in query.lower().split():
        cleaned = "".join(ch for ch in token if ch.isalnum())
        if cleaned:
            terms.append(cleaned)
    return terms


class WineCatalog(BaseRepository):
    """
    Thread-safe SQLite catalog of reference wines.

    Search is read-only and safe to call from concurrent requests;
    each thread gets its own connection.
    """

    def search(self, query: str, limit: int = Config.DEFAULT_SEARCH_LIMIT) -> list[CatalogRecord]:
        """
        Token AND / field OR search ranked by rating descending.

        Args:
            query: Free text, e.g. "caymus cabernet"
            limit: Maximum results to return
        """
        terms = search_terms(query)
        if not terms:
            return []

        conditions = []
        params: list = []
        for term in terms:
            conditions.append(
                "(" + " OR ".join(f"ULOWER({column}) LIKE ?" for column in SEARCH_FIELDS) + ")"
            )
            params.extend([f"%{term}%"] * len(SEARCH_FIELDS))
        params.append(limit)

        cursor = self._get_connection().cursor()
        cursor.execute(
            f"""{_SELECT}
            WHERE {' AND '.join(conditions)}
            ORDER BY rating DESC, id
            LIMIT ?
            """,
            tuple(params),
        )
        return [self._row_to_record(row) for row in cursor.fetchall()]

    def find_by_name(self, name: str) -> Optional[CatalogRecord]:
        """First wine whose name contains the given text (case-insensitive)."""
        cursor = self._get_connection().cursor()
        cursor.execute(
            f"{_SELECT} WHERE instr(ULOWER(name), ?) > 0 ORDER BY id LIMIT 1",
            (name.lower(),),
        )
        row = cursor.fetchone()
        return self._row_to_record(row) if row else None

    def get(self, wine_id: int) -> Optional[CatalogRecord]:
        """Find catalog wine by ID."""
        cursor = self._get_connection().cursor()
        cursor.execute(f"{_SELECT} WHERE id = ?", (wine_id,))
        row = cursor.fetchone()
        return self._row_to_record(row) if row else None

    def wines_by_country(self, country: str, limit: int = 100) -> list[CatalogRecord]:
        """Top-rated wines from one country."""
        cursor = self._get_connection().cursor()
        cursor.execute(
            f"{_SELECT} WHERE country = ? ORDER BY rating DESC, id LIMIT ?",
            (country, limit),
        )
        return [self._row_to_record(row) for row in cursor.fetchall()]

    def distinct_values(self, field: str, limit: Optional[int] = None) -> list[str]:
        """
        Sorted distinct non-empty values of one column (for pickers).

        Raises:
            ValueError: If field is not a filterable column
        """
        if field not in DISTINCT_FIELDS:
            raise ValueError(f"Unsupported catalog field: {field}")

        sql = f"""
            SELECT DISTINCT {field} AS value
            FROM catalog_wines
            WHERE {field} IS NOT NULL AND {field} != ''
            ORDER BY {field}
        """
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)

        cursor = self._get_connection().cursor()
        cursor.execute(sql, params)
        return [row["value"] for row in cursor.fetchall()]

    def distinct_regions(self, country: str, limit: int = 300) -> list[str]:
        """Sorted regions for one country."""
        cursor = self._get_connection().cursor()
        cursor.execute(
            """
            SELECT DISTINCT region
            FROM catalog_wines
            WHERE country = ? AND region IS NOT NULL AND region != ''
            ORDER BY region
            LIMIT ?
            """,
            (country, limit),
        )
        return [row["region"] for row in cursor.fetchall()]

    def count(self) -> int:
        """Get total catalog size."""
        cursor = self._get_connection().cursor()
        cursor.execute("SELECT COUNT(*) FROM catalog_wines")
        return cursor.fetchone()[0]

    def bulk_insert(self, records: Iterable[dict], batch_size: int = Config.CATALOG_BATCH_SIZE) -> int:
        """
        Insert catalog rows, committing every batch_size rows.

        Args:
            records: Dicts with a name key and optional catalog columns;
                     food_pairings is a list of strings

        Returns:
            Number of inserted rows
        """
        inserted = 0
        conn = self._get_connection()
        cursor = conn.cursor()

        try:
            for record in records:
                cursor.execute(
                    """
                    INSERT INTO catalog_wines
                    (name, winery, variety, region, country, vintage, rating, price,
                     type, body, acidity, food_pairings)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record["name"],
                        record.get("winery"),
                        record.get("variety"),
                        record.get("region"),
                        record.get("country"),
                        record.get("vintage"),
                        record.get("rating"),
                        record.get("price"),
                        record.get("wine_type"),
                        record.get("body"),
                        record.get("acidity"),
                        json.dumps(record.get("food_pairings") or []),
                    ),
                )
                inserted += 1

                # Commit in batches
                if inserted % batch_size == 0:
                    conn.commit()
                    logger.info(f"Inserted {inserted} catalog wines...")
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

        return inserted

    def clear(self) -> None:
        """Remove every catalog wine (used before a forced re-import)."""
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM catalog_wines")

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> CatalogRecord:
        """Convert database row to CatalogRecord."""
        return CatalogRecord(
            id=row["id"],
            name=row["name"],
            winery=row["winery"],
            variety=row["variety"],
            region=row["region"],
            country=row["country"],
            vintage=row["vintage"],
            rating=row["rating"],
            price=row["price"],
            wine_type=row["type"],
            body=row["body"],
            acidity=row["acidity"],
            food_pairings=tuple(json.loads(row["food_pairings"] or "[]")),
        )
