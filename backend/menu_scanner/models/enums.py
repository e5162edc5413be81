"""
Enums for type-safe string constants in Wine Menu Scanner.
"""

from enum import Enum


class WineType(str, Enum):
    """Wine style as stored in the catalog."""
    RED = "Red"
    WHITE = "White"
    ROSE = "Rosé"
    SPARKLING = "Sparkling"
    DESSERT = "Dessert"
    FORTIFIED = "Fortified"


class MatchStrategy(str, Enum):
    """Which resolution step produced a wine match."""
    SCAN = "scan"            # Already resolved earlier in the same scan
    LOCAL = "local"          # Wine already in the user's store
    CATALOG = "catalog"      # Catalog search on the cleaned name
    REORDERED = "reordered"  # "Winery, Name" searched as "Name Winery"
    WINERY = "winery"        # Winery part of a comma-separated name


class LineOutcome(str, Enum):
    """Classification outcome for a single OCR line."""
    HEADER = "header"
    LENGTH = "too_short_or_long"
    NOISE = "noise"
    PRICE = "price"
    NUMERIC = "numeric"
    CODE = "code"
    REGION = "region"
    NO_INDICATOR = "no_indicator"
    CANDIDATE = "candidate"
