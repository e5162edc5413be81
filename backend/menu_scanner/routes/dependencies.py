"""
FastAPI dependency factories.

Each collaborator is a process-wide singleton (lru_cache); tests replace
them through app.dependency_overrides.
"""

import logging
from functools import lru_cache

from fastapi import Depends

from ..config import Config
from ..db import ensure_schema
from ..feature_flags import FeatureFlags, get_feature_flags
from ..services.pairing import PairingService
from ..services.recommender import ScanService
from ..services.text_recognizer import MockTextRecognizer, TextRecognizerProtocol, VisionTextRecognizer
from ..services.wine_catalog import WineCatalog
from ..services.wine_store import WineStore

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _migrated_database() -> str:
    """Run migrations once per process and return the database path."""
    db_path = Config.database_path()
    ensure_schema(db_path)
    return db_path


@lru_cache(maxsize=1)
def get_wine_store() -> WineStore:
    """Get or create wine store instance (singleton via lru_cache)."""
    return WineStore(_migrated_database())


@lru_cache(maxsize=1)
def get_wine_catalog() -> WineCatalog:
    """Get or create catalog instance (singleton via lru_cache)."""
    return WineCatalog(_migrated_database())


@lru_cache(maxsize=1)
def get_text_recognizer() -> TextRecognizerProtocol:
    """Pick the OCR backend from USE_MOCKS / OCR_PROVIDER."""
    if Config.use_mocks() or Config.ocr_provider() == "mock":
        logger.info("Using mock text recognizer")
        return MockTextRecognizer()
    return VisionTextRecognizer()


@lru_cache(maxsize=1)
def get_pairing_service() -> PairingService:
    return PairingService()


def get_scan_service(
    catalog: WineCatalog = Depends(get_wine_catalog),
    store: WineStore = Depends(get_wine_store),
    recognizer: TextRecognizerProtocol = Depends(get_text_recognizer),
    flags: FeatureFlags = Depends(get_feature_flags),
) -> ScanService:
    """Scan service wired from the current collaborators (cheap, built per request)."""
    return ScanService(catalog, store, recognizer, flags)
