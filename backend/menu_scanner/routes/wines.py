"""
Wine and rating endpoints for Wine Menu Scanner.

Wines can be added by hand or materialized from a catalog entry; each
tasting adds a rating. Predicted scores are computed per request from the
full rating history.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field, field_validator

from ..errors import RatingNotFoundError, WineNotFoundError
from ..feature_flags import FeatureFlags, get_feature_flags
from ..models.domain import Wine
from ..models.response import PreferenceItem, PreferencesResponse, RatingOut, WineDetail, WineOut
from ..services.pairing import PairingService
from ..services.preferences import PreferenceModel
from ..services.score_blender import predict_score
from ..services.wine_catalog import WineCatalog
from ..services.wine_store import WineStore
from .dependencies import get_pairing_service, get_wine_catalog, get_wine_store

logger = logging.getLogger(__name__)
router = APIRouter()


class WineCreate(BaseModel):
    """New wine, either from a catalog id or described by hand."""
    catalog_id: Optional[int] = Field(None, description="Materialize this catalog wine")
    name: Optional[str] = None
    vintage: Optional[int] = None
    winery: Optional[str] = None
    grape_variety: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    average_rating: Optional[float] = Field(None, ge=0, le=5)
    price_usd: Optional[float] = Field(None, ge=0)
    wine_type: Optional[str] = None
    body: Optional[str] = None
    acidity: Optional[str] = None
    food_pairings: list[str] = Field(default_factory=list)


class WineUpdate(BaseModel):
    """Partial wine update; only fields sent are changed."""
    name: Optional[str] = None
    vintage: Optional[int] = None
    winery: Optional[str] = None
    grape_variety: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    average_rating: Optional[float] = Field(None, ge=0, le=5)
    price_usd: Optional[float] = Field(None, ge=0)
    wine_type: Optional[str] = None
    body: Optional[str] = None
    acidity: Optional[str] = None
    food_pairings: Optional[list[str]] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("name must not be empty")
        return v.strip() if v is not None else v


class RatingCreate(BaseModel):
    """A tasting note."""
    rating: float = Field(..., ge=0, le=5, description="Personal rating (0-5, stored at 0.1 steps)")
    notes: Optional[str] = None
    vintage: Optional[int] = None


def _wine_detail(
    wine: Wine,
    store: WineStore,
    pairing: PairingService,
    flags: FeatureFlags,
) -> WineDetail:
    model = PreferenceModel.calculate(store.all_ratings())
    return WineDetail(
        **WineOut.from_domain(wine).model_dump(),
        predicted_score=predict_score(model, wine),
        pairings=pairing.get_pairings(wine) if flags.feature_pairings else [],
        ratings=[RatingOut.from_domain(r) for r in wine.ratings],
    )


@router.get("/wines", response_model=list[WineOut])
def list_wines(store: WineStore = Depends(get_wine_store)) -> list[WineOut]:
    """All stored wines by name."""
    return [WineOut.from_domain(wine) for wine in store.list_wines()]


@router.post("/wines", response_model=WineDetail, status_code=201)
def create_wine(
    request: WineCreate,
    store: WineStore = Depends(get_wine_store),
    catalog: WineCatalog = Depends(get_wine_catalog),
    pairing: PairingService = Depends(get_pairing_service),
    flags: FeatureFlags = Depends(get_feature_flags),
) -> WineDetail:
    """
    Add a wine to the store.

    With catalog_id the catalog wine is reused when a wine with the same
    name and vintage already exists.
    """
    if request.catalog_id is not None:
        record = catalog.get(request.catalog_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Catalog wine not found")
        wine = store.get_or_create_from_catalog(record, vintage=request.vintage)
    else:
        if not request.name or not request.name.strip():
            raise HTTPException(status_code=400, detail="Wine name is required")
        wine = store.add_wine(Wine(
            name=request.name.strip(),
            vintage=request.vintage,
            winery=request.winery,
            grape_variety=request.grape_variety,
            region=request.region,
            country=request.country,
            average_rating=request.average_rating,
            price_usd=request.price_usd,
            wine_type=request.wine_type,
            body=request.body,
            acidity=request.acidity,
            food_pairings=request.food_pairings,
        ))
    return _wine_detail(wine, store, pairing, flags)


@router.get("/wines/{wine_id}", response_model=WineDetail)
def get_wine(
    wine_id: int,
    store: WineStore = Depends(get_wine_store),
    pairing: PairingService = Depends(get_pairing_service),
    flags: FeatureFlags = Depends(get_feature_flags),
) -> WineDetail:
    """A wine with its ratings, predicted score and pairings."""
    try:
        wine = store.get_wine(wine_id)
    except WineNotFoundError:
        raise HTTPException(status_code=404, detail="Wine not found")
    return _wine_detail(wine, store, pairing, flags)


@router.patch("/wines/{wine_id}", response_model=WineDetail)
def update_wine(
    wine_id: int,
    request: WineUpdate,
    store: WineStore = Depends(get_wine_store),
    pairing: PairingService = Depends(get_pairing_service),
    flags: FeatureFlags = Depends(get_feature_flags),
) -> WineDetail:
    fields = request.model_dump(exclude_unset=True)
    if "name" in fields and fields["name"] is None:
        raise HTTPException(status_code=400, detail="Wine name is required")
    try:
        wine = store.update_wine(wine_id, **fields)
    except WineNotFoundError:
        raise HTTPException(status_code=404, detail="Wine not found")
    return _wine_detail(wine, store, pairing, flags)


@router.delete("/wines/{wine_id}", status_code=204)
def delete_wine(wine_id: int, store: WineStore = Depends(get_wine_store)) -> Response:
    """Delete a wine with its ratings; scans that matched it keep their other wines."""
    try:
        store.delete_wine(wine_id)
    except WineNotFoundError:
        raise HTTPException(status_code=404, detail="Wine not found")
    return Response(status_code=204)


@router.post("/wines/{wine_id}/ratings", response_model=RatingOut, status_code=201)
def add_rating(
    wine_id: int,
    request: RatingCreate,
    store: WineStore = Depends(get_wine_store),
) -> RatingOut:
    """Record a tasting; earlier ratings are kept."""
    try:
        rating = store.add_rating(wine_id, request.rating, notes=request.notes, vintage=request.vintage)
    except WineNotFoundError:
        raise HTTPException(status_code=404, detail="Wine not found")
    return RatingOut.from_domain(rating)


@router.get("/wines/{wine_id}/ratings", response_model=list[RatingOut])
def list_ratings(wine_id: int, store: WineStore = Depends(get_wine_store)) -> list[RatingOut]:
    try:
        ratings = store.ratings_for_wine(wine_id)
    except WineNotFoundError:
        raise HTTPException(status_code=404, detail="Wine not found")
    return [RatingOut.from_domain(r) for r in ratings]


@router.delete("/ratings/{rating_id}", status_code=204)
def delete_rating(rating_id: int, store: WineStore = Depends(get_wine_store)) -> Response:
    try:
        store.delete_rating(rating_id)
    except RatingNotFoundError:
        raise HTTPException(status_code=404, detail="Rating not found")
    return Response(status_code=204)


@router.get("/preferences", response_model=PreferencesResponse)
def get_preferences(store: WineStore = Depends(get_wine_store)) -> PreferencesResponse:
    """Taste profile summary from the full rating history."""
    model = PreferenceModel.calculate(store.all_ratings())
    return PreferencesResponse(
        rating_count=model.rating_count,
        red_count=model.red_count,
        white_count=model.white_count,
        red_avg_rating=model.red_avg_rating,
        white_avg_rating=model.white_avg_rating,
        top_varieties=[PreferenceItem(name=n, score=s) for n, s in model.top_varieties],
        top_regions=[PreferenceItem(name=n, score=s) for n, s in model.top_regions],
        top_countries=[PreferenceItem(name=n, score=s) for n, s in model.top_countries],
    )
