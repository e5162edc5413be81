"""
Pytest configuration for the wine menu scanner tests.
"""

from datetime import datetime, timedelta
from typing import Optional

import pytest

from menu_scanner.db import ensure_schema
from menu_scanner.models.domain import CatalogRecord, UserRating, Wine
from menu_scanner.services.wine_catalog import WineCatalog
from menu_scanner.services.wine_store import WineStore


def pytest_configure(config):
    # Mark the service as ready for tests (bypasses warmup middleware)
    # This is needed because TestClient doesn't trigger lifespan events
    from main import set_ready
    set_ready(True)


@pytest.fixture
def db_path(tmp_path):
    """Temp database with schema pre-applied."""
    path = str(tmp_path / "test.db")
    ensure_schema(path)
    return path


@pytest.fixture
def store(db_path):
    repo = WineStore(db_path)
    yield repo
    repo.close()


@pytest.fixture
def catalog(db_path):
    repo = WineCatalog(db_path)
    yield repo
    repo.close()


CATALOG_ROWS = [
    {"name": "Opus One", "winery": "Opus One Winery", "variety": "Cabernet Sauvignon",
     "region": "Napa Valley", "country": "United States", "vintage": 2018, "rating": 4.6,
     "price": 320.0, "wine_type": "Red", "food_pairings": ["Beef", "Lamb"]},
    {"name": "Caymus Cabernet Sauvignon", "winery": "Caymus Vineyards", "variety": "Cabernet Sauvignon",
     "region": "Napa Valley", "country": "United States", "vintage": 2021, "rating": 4.4,
     "wine_type": "Red"},
    {"name": "Cloudy Bay Sauvignon Blanc", "winery": "Cloudy Bay", "variety": "Sauvignon Blanc",
     "region": "Marlborough", "country": "New Zealand", "vintage": 2022, "rating": 4.1,
     "wine_type": "White"},
    {"name": "Château Margaux", "winery": "Château Margaux", "variety": "Bordeaux Blend",
     "region": "Margaux", "country": "France", "vintage": 2015, "rating": 4.7, "wine_type": "Red"},
    {"name": "Casa Silva Carmenere Reserva", "winery": "Casa Silva", "variety": "Carmenere",
     "region": "Colchagua", "country": "Chile", "vintage": 2020, "rating": None, "wine_type": "Red"},
    {"name": "Test Wine", "winery": "Test Winery", "variety": "Malbec",
     "region": "Mendoza", "country": "Argentina", "vintage": 2019, "rating": 3.9, "wine_type": "Red"},
]


@pytest.fixture
def seeded_catalog(catalog):
    """Catalog holding a handful of well-known wines."""
    catalog.bulk_insert(CATALOG_ROWS)
    return catalog


class FakeCatalog:
    """In-memory catalog that records every query, for call-order assertions."""

    def __init__(self, responses: Optional[dict[str, list[CatalogRecord]]] = None, fail: bool = False):
        self.responses = responses or {}
        self.fail = fail
        self.queries: list[tuple[str, int]] = []

    def search(self, query: str, limit: int = 50) -> list[CatalogRecord]:
        self.queries.append((query, limit))
        if self.fail:
            raise RuntimeError("catalog unavailable")
        return list(self.responses.get(query, []))[:limit]

    def distinct_values(self, field: str, limit: Optional[int] = None) -> list[str]:
        return []


def make_record(record_id: int, name: str, **fields) -> CatalogRecord:
    return CatalogRecord(id=record_id, name=name, **fields)


def make_rating(
    value: float,
    variety: Optional[str] = None,
    wine_type: Optional[str] = None,
    region: Optional[str] = None,
    country: Optional[str] = None,
    winery: Optional[str] = None,
    minutes_ago: int = 0,
) -> UserRating:
    """A rating attached to an in-memory wine."""
    wine = Wine(
        name=f"{variety or 'Wine'} {value}",
        grape_variety=variety,
        wine_type=wine_type,
        region=region,
        country=country,
        winery=winery,
    )
    rating = UserRating(rating=value, rated_at=datetime(2024, 1, 1) - timedelta(minutes=minutes_ago), wine=wine)
    wine.ratings.append(rating)
    return rating
