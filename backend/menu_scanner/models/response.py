"""
Pydantic models for the Wine Menu Scanner API responses.

Domain dataclasses are converted at the route boundary through the
from_domain constructors below; predictions are computed per request and
never stored.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .domain import CatalogRecord, ScanHistory, UserRating, Wine


class RatingOut(BaseModel):
    """A single personal rating."""
    id: int
    wine_id: int
    rating: float = Field(..., ge=0, le=5)
    rated_at: datetime
    notes: Optional[str] = None
    vintage: Optional[int] = None

    @classmethod
    def from_domain(cls, rating: UserRating) -> "RatingOut":
        return cls(
            id=rating.id,
            wine_id=rating.wine_id,
            rating=rating.rating,
            rated_at=rating.rated_at,
            notes=rating.notes,
            vintage=rating.vintage,
        )


class WineOut(BaseModel):
    """A wine from the store, or an unsaved catalog hit (id is None)."""
    id: Optional[int] = Field(None, description="Local id, None for unsaved catalog matches")
    name: str
    display_name: str
    vintage: Optional[int] = None
    winery: Optional[str] = None
    grape_variety: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    average_rating: Optional[float] = Field(None, description="Community rating (0-5)")
    price_usd: Optional[float] = None
    wine_type: Optional[str] = Field(None, description="Red, White, Rosé, Sparkling, Dessert, Fortified")
    body: Optional[str] = None
    acidity: Optional[str] = None
    food_pairings: list[str] = Field(default_factory=list)
    catalog_id: Optional[int] = None
    rating_count: int = 0
    latest_rating: Optional[float] = Field(None, description="Most recent personal rating")

    @classmethod
    def from_domain(cls, wine: Wine) -> "WineOut":
        latest = wine.most_recent_rating
        return cls(
            id=wine.id,
            name=wine.name,
            display_name=wine.display_name,
            vintage=wine.vintage,
            winery=wine.winery,
            grape_variety=wine.grape_variety,
            region=wine.region,
            country=wine.country,
            average_rating=wine.average_rating,
            price_usd=wine.price_usd,
            wine_type=wine.wine_type,
            body=wine.body,
            acidity=wine.acidity,
            food_pairings=list(wine.food_pairings),
            catalog_id=wine.catalog_id,
            rating_count=len(wine.ratings),
            latest_rating=latest.rating if latest else None,
        )


class WineDetail(WineOut):
    """A wine with its ratings, prediction and pairing suggestions."""
    predicted_score: Optional[float] = None
    pairings: list[str] = Field(default_factory=list)
    ratings: list[RatingOut] = Field(default_factory=list)


class CatalogWineOut(BaseModel):
    """A reference catalog wine."""
    id: int
    name: str
    display_name: str
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
    food_pairings: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, record: CatalogRecord) -> "CatalogWineOut":
        return cls(
            id=record.id,
            name=record.name,
            display_name=record.display_name,
            winery=record.winery,
            variety=record.variety,
            region=record.region,
            country=record.country,
            vintage=record.vintage,
            rating=record.rating,
            price=record.price,
            wine_type=record.wine_type,
            body=record.body,
            acidity=record.acidity,
            food_pairings=list(record.food_pairings),
        )


class ScanEntry(BaseModel):
    """A detected menu entry with its match and predicted score."""
    detected_name: str
    variety: Optional[str] = Field(None, description="Grape variety from the menu section header")
    wine: Optional[WineOut] = None
    match_strategy: Optional[str] = Field(None, description="scan, local, catalog, reordered or winery")
    predicted_score: Optional[float] = None
    is_top_pick: bool = False


class ScanResponse(BaseModel):
    """Response from /scan, /scan/text and /history/{id}."""
    scan_id: Optional[int] = Field(None, description="History id, None when history is disabled")
    scanned_at: datetime
    line_count: int = 0
    entries: list[ScanEntry] = Field(default_factory=list)
    top_pick: Optional[ScanEntry] = None


class ScanSummary(BaseModel):
    """Scan history list item."""
    id: int
    scanned_at: datetime
    detected_names: list[str] = Field(default_factory=list)
    matched_count: int = 0
    has_photo: bool = False

    @classmethod
    def from_domain(cls, scan: ScanHistory) -> "ScanSummary":
        return cls(
            id=scan.id,
            scanned_at=scan.scanned_at,
            detected_names=scan.detected_names,
            matched_count=len(scan.matched_wines),
            has_photo=scan.photo is not None,
        )


class PreferenceItem(BaseModel):
    name: str
    score: float


class PreferencesResponse(BaseModel):
    """Taste profile summary derived from rating history."""
    rating_count: int
    red_count: int
    white_count: int
    red_avg_rating: float
    white_avg_rating: float
    top_varieties: list[PreferenceItem] = Field(default_factory=list)
    top_regions: list[PreferenceItem] = Field(default_factory=list)
    top_countries: list[PreferenceItem] = Field(default_factory=list)


class RatingImportResponse(BaseModel):
    total_rows: int
    matched_wines: int
    imported_ratings: int
    skipped_duplicates: int
    errors: list[str] = Field(default_factory=list)


class WineImportResponse(BaseModel):
    imported: int
    skipped: int
    errors: list[str] = Field(default_factory=list)


class CatalogImportResponse(BaseModel):
    source: str
    rows_read: int
    rows_imported: int
    rows_skipped: int
    already_populated: bool
