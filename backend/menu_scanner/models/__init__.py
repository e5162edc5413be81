from .enums import (
    LineOutcome,
    MatchStrategy,
    WineType,
)
from .domain import (
    CatalogRecord,
    MenuEntry,
    ScanHistory,
    UserRating,
    Wine,
)
from .response import (
    CatalogWineOut,
    PreferencesResponse,
    RatingOut,
    ScanEntry,
    ScanResponse,
    ScanSummary,
    WineDetail,
    WineOut,
)

__all__ = [
    "LineOutcome",
    "MatchStrategy",
    "WineType",
    "CatalogRecord",
    "MenuEntry",
    "ScanHistory",
    "UserRating",
    "Wine",
    "CatalogWineOut",
    "PreferencesResponse",
    "RatingOut",
    "ScanEntry",
    "ScanResponse",
    "ScanSummary",
    "WineDetail",
    "WineOut",
]
