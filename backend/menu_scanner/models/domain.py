"""
Domain records shared by the scoring, matching and import code.

These are plain dataclasses: snapshots read from the store or catalog.
The scoring core never writes them back; persistence goes through WineStore.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class UserRating:
    """A single tasting rating owned by one wine."""
    rating: float
    rated_at: datetime = field(default_factory=datetime.now)
    notes: Optional[str] = None
    vintage: Optional[int] = None
    id: Optional[int] = None
    wine_id: Optional[int] = None
    # Back-reference populated by the store; excluded from repr/eq to avoid cycles
    wine: Optional["Wine"] = field(default=None, repr=False, compare=False)


@dataclass
class Wine:
    """A wine the user has scanned, rated or added."""
    name: str
    vintage: Optional[int] = None
    region: Optional[str] = None
    grape_variety: Optional[str] = None
    average_rating: Optional[float] = None  # Community rating (0-5)
    winery: Optional[str] = None
    country: Optional[str] = None
    price_usd: Optional[float] = None
    wine_type: Optional[str] = None  # Red, White, Rosé, Sparkling, Dessert, Fortified
    body: Optional[str] = None
    acidity: Optional[str] = None
    food_pairings: list[str] = field(default_factory=list)
    id: Optional[int] = None
    catalog_id: Optional[int] = None
    ratings: list[UserRating] = field(default_factory=list, repr=False, compare=False)

    @property
    def display_name(self) -> str:
        if self.vintage is not None:
            return f"{self.name} ({self.vintage})"
        return self.name

    @property
    def most_recent_rating(self) -> Optional[UserRating]:
        """Latest rating by timestamp; ties go to the later insertion."""
        if not self.ratings:
            return None
        indexed = list(enumerate(self.ratings))
        _, latest = max(indexed, key=lambda pair: (pair[1].rated_at, pair[1].id or 0, pair[0]))
        return latest


@dataclass(frozen=True)
class CatalogRecord:
    """A read-only wine from the reference catalog."""
    id: int
    name: str
    winery: Optional[str] = None
    variety: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    vintage: Optional[int] = None
    rating: Optional[float] = None
    price: Optional[float] = None
    wine_type: Optional[str] = None
    body: Optional[str] = None
    acidity: Optional[str] = None
    food_pairings: tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        if self.vintage is not None:
            return f"{self.name} {self.vintage}"
        return self.name

    def to_wine(
        self,
        vintage: Optional[int] = None,
        average_rating: Optional[float] = None,
    ) -> Wine:
        """Build an unsaved Wine from this record, optionally overriding vintage/community rating."""
        return Wine(
            name=self.name,
            vintage=vintage if vintage is not None else self.vintage,
            region=self.region,
            grape_variety=self.variety,
            average_rating=average_rating if average_rating is not None else self.rating,
            winery=self.winery,
            country=self.country,
            price_usd=self.price,
            wine_type=self.wine_type,
            body=self.body,
            acidity=self.acidity,
            food_pairings=list(self.food_pairings),
            catalog_id=self.id,
        )


@dataclass(frozen=True)
class MenuEntry:
    """A candidate wine line from a menu, with the section's grape variety if any."""
    name: str
    variety: Optional[str] = None


@dataclass
class ScanHistory:
    """One scan event: detected entries plus the wines they resolved to."""
    scanned_at: datetime = field(default_factory=datetime.now)
    photo: Optional[bytes] = field(default=None, repr=False)
    entries: list[MenuEntry] = field(default_factory=list)
    matched_wines: list[Wine] = field(default_factory=list)
    id: Optional[int] = None

    @property
    def detected_names(self) -> list[str]:
        return [entry.name for entry in self.entries]

