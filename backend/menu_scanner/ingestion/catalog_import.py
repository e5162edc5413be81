"""
Bulk imports: catalog bootstrap and local wine lists.

Catalog CSV layout (positional, header row skipped):
    name,winery,variety,region,country,vintage,rating,price,type,body,acidity,food_pairings

Local wine CSVs are header-sniffed instead, since they come from users.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional

from ..models.domain import Wine
from ..services.wine_catalog import WineCatalog
from ..services.wine_store import WineStore
from .normalizers import (
    field_at,
    find_column,
    optional_text,
    parse_float,
    parse_food_pairings,
    parse_int,
    read_rows,
)
from .protocols import CatalogImportStats, WineImportResult

logger = logging.getLogger(__name__)

MIN_CATALOG_FIELDS = 5


def parse_catalog_row(fields: list[str]) -> Optional[dict]:
    """
    Convert one positional catalog row to insertable column values.

    Returns None for rows with fewer than 5 fields or an empty name.
    """
    if len(fields) < MIN_CATALOG_FIELDS:
        return None
    name = fields[0].strip()
    if not name:
        return None

    def text(index: int) -> Optional[str]:
        return optional_text(fields[index]) if index < len(fields) else None

    def value(index: int) -> Optional[str]:
        return fields[index] if index < len(fields) else None

    return {
        "name": name,
        "winery": text(1),
        "variety": text(2),
        "region": text(3),
        "country": text(4),
        "vintage": parse_int(value(5)),
        "rating": parse_float(value(6)),
        "price": parse_float(value(7)),
        "wine_type": text(8),
        "body": text(9),
        "acidity": text(10),
        "food_pairings": parse_food_pairings(value(11)),
    }


class CatalogImporter:
    """Populates the reference catalog from the bundled CSV."""

    def __init__(self, catalog: WineCatalog):
        self._catalog = catalog

    def import_file(self, csv_path: str | Path, force: bool = False) -> CatalogImportStats:
        """
        Import a catalog CSV file.

        Args:
            csv_path: Path to the positional catalog CSV
            force: Clear and re-import even if the catalog has rows
        """
        text = Path(csv_path).read_text(encoding="utf-8")
        return self.import_text(text, source=str(csv_path), force=force)

    def import_text(self, text: str, source: str = "upload", force: bool = False) -> CatalogImportStats:
        stats = CatalogImportStats(source=source)

        if not force and self._catalog.count() > 0:
            stats.already_populated = True
            logger.info(f"Catalog already populated, skipping import of {source}")
            return stats

        if force:
            self._catalog.clear()

        rows = read_rows(text)[1:]  # Skip header
        stats.rows_read = len(rows)
        stats.rows_imported = self._catalog.bulk_insert(self._iter_records(rows, stats))

        logger.info(f"Catalog import complete: {stats.to_dict()}")
        return stats

    def _iter_records(self, rows: list[list[str]], stats: CatalogImportStats) -> Iterator[dict]:
        for fields in rows:
            record = parse_catalog_row(fields)
            if record is None:
                stats.rows_skipped += 1
                continue
            yield record


class WineImporter:
    """Adds wines from a user CSV to the local store, skipping names already stored."""

    def __init__(self, store: WineStore):
        self._store = store

    def import_text(self, text: str) -> WineImportResult:
        result = WineImportResult()
        rows = read_rows(text)
        if not rows:
            result.errors.append("File is empty")
            return result

        headers = [header.lower() for header in rows[0]]
        name_index = find_column(headers, ("name",))
        if name_index is None:
            name_index = 0
        winery_index = find_column(headers, ("winery",))
        variety_index = find_column(headers, ("variety", "grape"))
        region_index = find_column(headers, ("region",))
        country_index = find_column(headers, ("country",))
        vintage_index = find_column(headers, ("vintage", "year"))
        rating_index = find_column(headers, ("rating",))
        type_index = find_column(headers, ("type",))

        existing = {wine.name for wine in self._store.list_wines()}

        for line_number, fields in enumerate(rows[1:], start=2):
            if name_index >= len(fields):
                result.errors.append(f"Line {line_number}: Not enough columns")
                continue

            name = fields[name_index].strip()
            if not name:
                continue
            if name in existing:
                result.skipped += 1
                continue

            self._store.add_wine(Wine(
                name=name,
                vintage=parse_int(field_at(fields, vintage_index)),
                region=optional_text(field_at(fields, region_index)),
                grape_variety=optional_text(field_at(fields, variety_index)),
                average_rating=parse_float(field_at(fields, rating_index)),
                winery=optional_text(field_at(fields, winery_index)),
                country=optional_text(field_at(fields, country_index)),
                wine_type=optional_text(field_at(fields, type_index)),
            ))
            existing.add(name)
            result.imported += 1

        logger.info(f"Wine import complete: {result.imported} imported, {result.skipped} skipped")
        return result
