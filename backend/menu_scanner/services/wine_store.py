"""
Persistent store for the user's wines, ratings and scan history.

Ownership rules:
- A rating belongs to exactly one wine; deleting a wine deletes its ratings
  and removes it from every scan's matched set
- Deleting a scan deletes only the scan
- Re-tasting a wine adds a rating row, existing rows are never overwritten
"""

import json
import logging
import sqlite3
from datetime import datetime
from typing import Any, Optional

from ..config import Config
from ..db import BaseRepository
from ..errors import RatingNotFoundError, ScanNotFoundError, WineNotFoundError
from ..models.domain import CatalogRecord, MenuEntry, ScanHistory, UserRating, Wine

logger = logging.getLogger(__name__)

# Columns that update_wine accepts
WINE_FIELDS = (
    "name", "vintage", "region", "grape_variety", "average_rating", "winery",
    "country", "price_usd", "wine_type", "body", "acidity", "food_pairings",
    "catalog_id",
)


class WineStore(BaseRepository):
    """
    SQLite-backed CRUD for Wine, UserRating and ScanHistory.

    Returned objects are snapshots; mutate through the store methods.
    """

    # Wines

    def add_wine(self, wine: Wine) -> Wine:
        """
        Insert a wine and return it with its new id.

        Ratings attached to the passed object are not persisted.
        """
        with self._transaction() as cursor:
            cursor.execute(
                """
                INSERT INTO wines
                (name, vintage, region, grape_variety, average_rating, winery, country,
                 price_usd, wine_type, body, acidity, food_pairings, catalog_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    wine.name,
                    wine.vintage,
                    wine.region,
                    wine.grape_variety,
                    wine.average_rating,
                    wine.winery,
                    wine.country,
                    wine.price_usd,
                    wine.wine_type,
                    wine.body,
                    wine.acidity,
                    json.dumps(list(wine.food_pairings)),
                    wine.catalog_id,
                ),
            )
            wine_id = cursor.lastrowid

        logger.debug(f"Stored wine {wine_id}: {wine.display_name}")
        return self.get_wine(wine_id)

    def get_wine(self, wine_id: int) -> Wine:
        """
        Load a wine with its ratings.

        Raises:
            WineNotFoundError: If no wine has this id
        """
        cursor = self._get_connection().cursor()
        cursor.execute("SELECT * FROM wines WHERE id = ?", (wine_id,))
        row = cursor.fetchone()
        if row is None:
            raise WineNotFoundError(wine_id)
        wine = self._row_to_wine(row)
        wine.ratings = self._ratings_for(wine)
        return wine

    def list_wines(self) -> list[Wine]:
        """All stored wines with ratings, by name."""
        cursor = self._get_connection().cursor()
        cursor.execute("SELECT * FROM wines ORDER BY name COLLATE NOCASE, id")
        wines = [self._row_to_wine(row) for row in cursor.fetchall()]
        for wine in wines:
            wine.ratings = self._ratings_for(wine)
        return wines

    def update_wine(self, wine_id: int, **fields: Any) -> Wine:
        """
        Update selected wine columns.

        Raises:
            WineNotFoundError: If no wine has this id
            ValueError: If a field is not a wine column
        """
        unknown = set(fields) - set(WINE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown wine fields: {', '.join(sorted(unknown))}")

        # Existence check before writing
        self.get_wine(wine_id)
        if not fields:
            return self.get_wine(wine_id)

        if "food_pairings" in fields:
            fields["food_pairings"] = json.dumps(list(fields["food_pairings"] or []))

        assignments = ", ".join(f"{column} = ?" for column in fields)
        with self._transaction() as cursor:
            cursor.execute(
                f"UPDATE wines SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (*fields.values(), wine_id),
            )
        return self.get_wine(wine_id)

    def delete_wine(self, wine_id: int) -> None:
        """
        Delete a wine, its ratings and its scan links.

        Raises:
            WineNotFoundError: If no wine has this id
        """
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM wines WHERE id = ?", (wine_id,))
            if cursor.rowcount == 0:
                raise WineNotFoundError(wine_id)
        logger.info(f"Deleted wine {wine_id}")

    def find_by_name_containing(self, name: str) -> Optional[Wine]:
        """First stored wine (by id) whose name contains the text, case-insensitive."""
        if not name:
            return None
        cursor = self._get_connection().cursor()
        cursor.execute(
            "SELECT * FROM wines WHERE instr(ULOWER(name), ?) > 0 ORDER BY id LIMIT 1",
            (name.lower(),),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        wine = self._row_to_wine(row)
        wine.ratings = self._ratings_for(wine)
        return wine

    def find_by_name_and_vintage(self, name: str, vintage: Optional[int]) -> Optional[Wine]:
        """Exact name match with the same vintage (both NULL counts as equal)."""
        cursor = self._get_connection().cursor()
        cursor.execute(
            "SELECT * FROM wines WHERE name = ? AND vintage IS ? ORDER BY id LIMIT 1",
            (name, vintage),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        wine = self._row_to_wine(row)
        wine.ratings = self._ratings_for(wine)
        return wine

    def get_or_create_from_catalog(
        self,
        record: CatalogRecord,
        vintage: Optional[int] = None,
        community_rating: Optional[float] = None,
    ) -> Wine:
        """
        Materialize a catalog wine locally, keyed by (name, vintage).

        An existing wine gains community_rating only if it has none.
        A new wine takes community_rating, else the catalog rating.
        """
        effective_vintage = vintage if vintage is not None else record.vintage
        existing = self.find_by_name_and_vintage(record.name, effective_vintage)
        if existing is not None:
            if existing.average_rating is None and community_rating is not None:
                return self.update_wine(existing.id, average_rating=community_rating)
            return existing

        return self.add_wine(record.to_wine(vintage=effective_vintage, average_rating=community_rating))

    # Ratings

    def add_rating(
        self,
        wine_id: int,
        rating: float,
        notes: Optional[str] = None,
        vintage: Optional[int] = None,
        rated_at: Optional[datetime] = None,
    ) -> UserRating:
        """
        Record a tasting. Ratings are rounded to 0.1.

        Raises:
            ValueError: If rating is outside 0-5
            WineNotFoundError: If no wine has this id
        """
        if not 0.0 <= rating <= Config.MAX_RATING:
            raise ValueError(f"Rating must be between 0 and {Config.MAX_RATING}, got {rating}")

        self.get_wine(wine_id)
        rated_at = rated_at or datetime.now()

        with self._transaction() as cursor:
            cursor.execute(
                """
                INSERT INTO user_ratings (wine_id, rating, rated_at, notes, vintage)
                VALUES (?, ?, ?, ?, ?)
                """,
                (wine_id, round(rating, 1), rated_at.isoformat(), notes, vintage),
            )
            rating_id = cursor.lastrowid

        return UserRating(
            id=rating_id,
            wine_id=wine_id,
            rating=round(rating, 1),
            rated_at=rated_at,
            notes=notes,
            vintage=vintage,
        )

    def ratings_for_wine(self, wine_id: int) -> list[UserRating]:
        """
        Ratings of one wine, oldest first.

        Raises:
            WineNotFoundError: If no wine has this id
        """
        return self.get_wine(wine_id).ratings

    def delete_rating(self, rating_id: int) -> None:
        """
        Delete a single rating.

        Raises:
            RatingNotFoundError: If no rating has this id
        """
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM user_ratings WHERE id = ?", (rating_id,))
            if cursor.rowcount == 0:
                raise RatingNotFoundError(rating_id)

    def all_ratings(self) -> list[UserRating]:
        """Every rating with its wine attached (the preference model input)."""
        wines = {wine.id: wine for wine in self.list_wines()}
        ratings = []
        for wine in wines.values():
            ratings.extend(wine.ratings)
        ratings.sort(key=lambda r: (r.rated_at, r.id))
        return ratings

    def rating_count(self, wine_id: int) -> int:
        cursor = self._get_connection().cursor()
        cursor.execute("SELECT COUNT(*) FROM user_ratings WHERE wine_id = ?", (wine_id,))
        return cursor.fetchone()[0]

    # Scan history

    def add_scan(self, scan: ScanHistory) -> ScanHistory:
        """
        Persist a scan with its entries and stored matched wines.

        Matched wines without a local id (unsaved catalog hits) are not linked.
        """
        entries = [{"name": e.name, "variety": e.variety} for e in scan.entries]
        with self._transaction() as cursor:
            cursor.execute(
                "INSERT INTO scan_history (scanned_at, photo, entries) VALUES (?, ?, ?)",
                (scan.scanned_at.isoformat(), scan.photo, json.dumps(entries)),
            )
            scan_id = cursor.lastrowid

            position = 0
            linked = set()
            for wine in scan.matched_wines:
                if wine.id is None or wine.id in linked:
                    continue
                cursor.execute(
                    "INSERT INTO scan_history_wines (scan_id, wine_id, position) VALUES (?, ?, ?)",
                    (scan_id, wine.id, position),
                )
                linked.add(wine.id)
                position += 1

        logger.info(f"Saved scan {scan_id} with {len(entries)} entries, {len(linked)} matched wines")
        return self.get_scan(scan_id)

    def get_scan(self, scan_id: int) -> ScanHistory:
        """
        Load one scan with entries and matched wines.

        Raises:
            ScanNotFoundError: If no scan has this id
        """
        cursor = self._get_connection().cursor()
        cursor.execute("SELECT * FROM scan_history WHERE id = ?", (scan_id,))
        row = cursor.fetchone()
        if row is None:
            raise ScanNotFoundError(scan_id)
        return self._row_to_scan(row)

    def list_scans(self) -> list[ScanHistory]:
        """All scans, newest first."""
        cursor = self._get_connection().cursor()
        cursor.execute("SELECT * FROM scan_history ORDER BY scanned_at DESC, id DESC")
        return [self._row_to_scan(row) for row in cursor.fetchall()]

    def delete_scan(self, scan_id: int) -> None:
        """
        Delete a scan; matched wines are kept.

        Raises:
            ScanNotFoundError: If no scan has this id
        """
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM scan_history WHERE id = ?", (scan_id,))
            if cursor.rowcount == 0:
                raise ScanNotFoundError(scan_id)

    # Row mapping

    def _ratings_for(self, wine: Wine) -> list[UserRating]:
        cursor = self._get_connection().cursor()
        cursor.execute(
            "SELECT * FROM user_ratings WHERE wine_id = ? ORDER BY rated_at, id",
            (wine.id,),
        )
        return [
            UserRating(
                id=row["id"],
                wine_id=row["wine_id"],
                rating=row["rating"],
                rated_at=datetime.fromisoformat(row["rated_at"]),
                notes=row["notes"],
                vintage=row["vintage"],
                wine=wine,
            )
            for row in cursor.fetchall()
        ]

    def _row_to_scan(self, row: sqlite3.Row) -> ScanHistory:
        cursor = self._get_connection().cursor()
        cursor.execute(
            """
            SELECT w.* FROM scan_history_wines sw
            JOIN wines w ON w.id = sw.wine_id
            WHERE sw.scan_id = ?
            ORDER BY sw.position
            """,
            (row["id"],),
        )
        matched = [self._row_to_wine(wine_row) for wine_row in cursor.fetchall()]
        for wine in matched:
            wine.ratings = self._ratings_for(wine)

        entries = [
            MenuEntry(name=item["name"], variety=item.get("variety"))
            for item in json.loads(row["entries"] or "[]")
        ]
        return ScanHistory(
            id=row["id"],
            scanned_at=datetime.fromisoformat(row["scanned_at"]),
            photo=row["photo"],
            entries=entries,
            matched_wines=matched,
        )

    @staticmethod
    def _row_to_wine(row: sqlite3.Row) -> Wine:
        """Convert database row to Wine (ratings not loaded)."""
        return Wine(
            id=row["id"],
            name=row["name"],
            vintage=row["vintage"],
            region=row["region"],
            grape_variety=row["grape_variety"],
            average_rating=row["average_rating"],
            winery=row["winery"],
            country=row["country"],
            price_usd=row["price_usd"],
            wine_type=row["wine_type"],
            body=row["body"],
            acidity=row["acidity"],
            food_pairings=json.loads(row["food_pairings"] or "[]"),
            catalog_id=row["catalog_id"],
        )
