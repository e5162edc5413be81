"""
Import personal ratings from an exported CSV (e.g. a Vivino export).

Each row is matched to a catalog wine, materialized as a local wine and
given one imported rating. Rows are processed in file order; a wine that
already has a rating is never rated again by an import.

Match order for a row:
1. Name search results with the same (or overlapping) winery
2. Name search results from the same country
3. Winery search results whose name overlaps the row's name
4. The top name result, only when the names overlap
"""

import logging
from typing import Optional

from ..config import Config
from ..models.domain import CatalogRecord
from ..services.wine_catalog import CatalogSearch
from ..services.wine_store import WineStore
from .normalizers import field_at, find_column, optional_text, parse_float, parse_int, read_rows
from .protocols import RatingImportResult

logger = logging.getLogger(__name__)


def _mutually_contains(a: str, b: str) -> bool:
    a = a.lower()
    b = b.lower()
    return a in b or b in a


class ImportReconciler:
    """Matches CSV rating rows against the catalog and records them in the store."""

    def __init__(self, catalog: CatalogSearch, store: WineStore):
        self._catalog = catalog
        self._store = store

    def match_row(
        self,
        name: str,
        winery: Optional[str] = None,
        country: Optional[str] = None,
    ) -> Optional[CatalogRecord]:
        """
        Find the catalog wine for one CSV row.

        Args:
            name: Wine name from the row
            winery: Producer hint, empty treated as absent
            country: Country hint, empty treated as absent
        """
        name_results = self._search(name, Config.IMPORT_NAME_SEARCH_LIMIT)

        if winery:
            for record in name_results:
                if record.winery and _mutually_contains(record.winery, winery):
                    return record

        if country:
            country_lower = country.lower()
            for record in name_results:
                if record.country and country_lower in record.country.lower():
                    return record

        if winery:
            winery_results = self._search(winery, Config.IMPORT_WINERY_SEARCH_LIMIT)
            for record in winery_results:
                if _mutually_contains(record.name, name):
                    return record

        # Only trust the top hit when the names overlap
        if name_results and _mutually_contains(name_results[0].name, name):
            return name_results[0]

        return None

    def _search(self, query: str, limit: int) -> list[CatalogRecord]:
        try:
            return self._catalog.search(query, limit)
        except Exception as e:
            logger.warning(f"Catalog search failed for '{query}': {e}")
            return []

    def import_ratings(self, csv_text: str) -> RatingImportResult:
        """
        Import every row of a ratings CSV.

        Returns:
            Counts plus one note per unmatched or unrated row
        """
        result = RatingImportResult()
        rows = read_rows(csv_text)
        if not rows:
            result.errors.append("Empty file")
            return result

        headers = [header.lower() for header in rows[0]]
        name_index = find_column(headers, ("name",))
        rating_index = find_column(headers, ("rating", "score"), exclude=("average",))
        average_index = find_column(headers, ("average",))
        vintage_index = find_column(headers, ("vintage", "year"))
        winery_index = find_column(headers, ("winery", "producer"))
        country_index = find_column(headers, ("country",))

        if name_index is None:
            result.errors.append("Could not find wine name column")
            return result

        for fields in rows[1:]:
            result.total_rows += 1

            wine_name = field_at(fields, name_index)
            if not wine_name:
                continue

            rating = parse_float(field_at(fields, rating_index))
            community = parse_float(field_at(fields, average_index))
            vintage = parse_int(field_at(fields, vintage_index))
            winery = field_at(fields, winery_index)
            country = optional_text(field_at(fields, country_index))

            record = self.match_row(wine_name, winery or None, country)
            if record is None:
                result.errors.append(f"{wine_name} - {winery or 'unknown winery'} (not found)")
                continue

            result.matched_wines += 1
            if rating is None or rating <= 0:
                result.errors.append(f"{wine_name} - no rating value")
                continue

            wine = self._store.get_or_create_from_catalog(record, vintage=vintage, community_rating=community)
            if wine.ratings:
                result.skipped_duplicates += 1
                continue

            self._store.add_rating(
                wine.id,
                min(Config.MAX_RATING, rating),
                notes=Config.IMPORT_NOTE,
                vintage=vintage if vintage is not None else record.vintage,
            )
            result.imported_ratings += 1

        logger.info(f"Rating import complete: {result.to_dict()}")
        return result
