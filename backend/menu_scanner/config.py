"""
Centralized configuration for the Wine Menu Scanner backend.

All constants are defined here to avoid scattered magic numbers
and enable easy configuration management.
"""

import os
from pathlib import Path
from typing import List


class Config:
    """Application configuration constants."""

    # === Preference Scoring ===
    # Evidence weights for the personal score (variety is most predictive)
    WEIGHT_VARIETY = 3.0
    WEIGHT_WINERY = 2.5
    WEIGHT_REGION = 2.0
    WEIGHT_COUNTRY = 1.0

    # Variety similarity tiers
    SIMILARITY_EXACT = 1.0
    SIMILARITY_SAME_GROUP = 0.6  # Same style family gets 60% of the score
    SIMILARITY_SAME_COLOR = 0.3  # Same color gets 30% of the score

    # Color-bias penalty (0 at 70% one color, 0.5 at 100%)
    COLOR_MIN_RATINGS = 3
    COLOR_BIAS_THRESHOLD = 0.7
    COLOR_PENALTY_SLOPE = 1.67
    COLOR_PENALTY_CAP = 0.5
    SCORE_FLOOR = 1.0

    # Personal/community blend: 5% per rating, capped so community keeps >= 20%
    PERSONAL_WEIGHT_PER_RATING = 0.05
    PERSONAL_WEIGHT_CAP = 0.8

    TOP_PREFERENCES = 5

    # === Menu Text Classification ===
    MIN_LINE_LENGTH = 4
    MAX_LINE_LENGTH = 100
    MAX_CODE_LENGTH = 6  # Single tokens shorter than this starting with a digit are codes

    # === Matching ===
    SCAN_FUZZY_THRESHOLD = 0.90  # Fuzzy score to reuse a wine already matched in this scan
    WEIGHT_RATIO = 0.45
    WEIGHT_PARTIAL = 0.30
    WEIGHT_TOKEN_SORT = 0.25
    PHONETIC_BONUS = 0.05

    # === Catalog / Import ===
    CATALOG_MATCH_LIMIT = 1
    IMPORT_NAME_SEARCH_LIMIT = 20
    IMPORT_WINERY_SEARCH_LIMIT = 50
    DEFAULT_SEARCH_LIMIT = 50
    CATALOG_BATCH_SIZE = 250
    MAX_RATING = 5.0
    IMPORT_NOTE = "Imported"

    # === Scan History ===
    PHOTO_JPEG_QUALITY = 70

    # === Environment ===
    @staticmethod
    def use_mocks() -> bool:
        """Check if mock mode is enabled (mock OCR, no cloud calls)."""
        return os.getenv("USE_MOCKS", "false").lower() == "true"

    @staticmethod
    def ocr_provider() -> str:
        """OCR provider (google or mock). Default: google."""
        return os.getenv("OCR_PROVIDER", "google").lower()

    @staticmethod
    def log_level() -> str:
        """Log level (DEBUG, INFO, WARNING, ERROR)."""
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @staticmethod
    def is_dev() -> bool:
        """Development mode flag."""
        return os.getenv("DEV_MODE", "false").lower() == "true"

    # === Database Persistence ===
    @staticmethod
    def database_path() -> str:
        """Path to SQLite database file.
        Default: backend/menu_scanner/data/wines.db (relative to the package).
        Override with DATABASE_PATH env var for container deployments.
        """
        default = str(Path(__file__).parent / "data" / "wines.db")
        return os.getenv("DATABASE_PATH", default)

    @staticmethod
    def catalog_csv_path() -> str:
        """Bundled catalog CSV used to bootstrap an empty catalog."""
        default = str(Path(__file__).parent / "data" / "wines.csv")
        return os.getenv("CATALOG_CSV_PATH", default)

    # === Security ===
    MAX_IMAGE_SIZE_MB = 10
    MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024
    MAX_CSV_SIZE_BYTES = 20 * 1024 * 1024
    ALLOWED_CONTENT_TYPES: List[str] = [
        "image/jpeg",
        "image/png",
        "image/heic",
        "image/heif",
    ]
