"""
CSV import endpoints: personal ratings, local wines and the catalog.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from ..config import Config
from ..ingestion.catalog_import import CatalogImporter, WineImporter
from ..ingestion.reconciler import ImportReconciler
from ..models.response import CatalogImportResponse, RatingImportResponse, WineImportResponse
from ..services.wine_catalog import WineCatalog
from ..services.wine_store import WineStore
from .dependencies import get_wine_catalog, get_wine_store

logger = logging.getLogger(__name__)
router = APIRouter()


def _read_csv(upload: UploadFile) -> str:
    """Read an uploaded CSV as UTF-8 text."""
    try:
        data = upload.file.read()
    except IOError as e:
        logger.error(f"Failed to read uploaded CSV: {e}")
        raise HTTPException(status_code=400, detail="Failed to read CSV file")

    if len(data) > Config.MAX_CSV_SIZE_BYTES:
        raise HTTPException(status_code=400, detail="CSV file too large")

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV must be UTF-8 encoded")


@router.post("/import/ratings", response_model=RatingImportResponse)
def import_ratings(
    file: UploadFile = File(..., description="Ratings export CSV"),
    catalog: WineCatalog = Depends(get_wine_catalog),
    store: WineStore = Depends(get_wine_store),
) -> RatingImportResponse:
    """Match each row to the catalog and import one rating per wine."""
    result = ImportReconciler(catalog, store).import_ratings(_read_csv(file))
    return RatingImportResponse(**result.to_dict())


@router.post("/import/wines", response_model=WineImportResponse)
def import_wines(
    file: UploadFile = File(..., description="Wine list CSV"),
    store: WineStore = Depends(get_wine_store),
) -> WineImportResponse:
    """Add wines from a CSV, skipping names already stored."""
    result = WineImporter(store).import_text(_read_csv(file))
    return WineImportResponse(**result.to_dict())


@router.post("/import/catalog", response_model=CatalogImportResponse)
def import_catalog(
    file: UploadFile = File(..., description="Positional catalog CSV"),
    force: bool = Query(default=False, description="Replace an existing catalog"),
    catalog: WineCatalog = Depends(get_wine_catalog),
) -> CatalogImportResponse:
    """Bootstrap the reference catalog from an uploaded CSV."""
    stats = CatalogImporter(catalog).import_text(_read_csv(file), source=file.filename or "upload", force=force)
    return CatalogImportResponse(**stats.to_dict())
