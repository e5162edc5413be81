"""
Reference catalog endpoints: search and picker values.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import Config
from ..models.response import CatalogWineOut
from ..services.wine_catalog import DISTINCT_FIELDS, WineCatalog
from .dependencies import get_wine_catalog

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/catalog/search", response_model=list[CatalogWineOut])
def search_catalog(
    q: str = Query(..., description="Search text, e.g. 'caymus cabernet'"),
    limit: int = Query(default=Config.DEFAULT_SEARCH_LIMIT, ge=1, le=200),
    catalog: WineCatalog = Depends(get_wine_catalog),
) -> list[CatalogWineOut]:
    """Every query word must appear in name, winery, variety, region or country."""
    return [CatalogWineOut.from_domain(r) for r in catalog.search(q, limit)]


@router.get("/catalog/values/{field}", response_model=list[str])
def catalog_values(
    field: str,
    limit: Optional[int] = Query(default=None, ge=1),
    country: Optional[str] = Query(default=None, description="Restrict regions to one country"),
    catalog: WineCatalog = Depends(get_wine_catalog),
) -> list[str]:
    """Sorted distinct values of variety, country, region or winery."""
    if field not in DISTINCT_FIELDS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported field. Use one of: {', '.join(DISTINCT_FIELDS)}"
        )
    if field == "region" and country:
        return catalog.distinct_regions(country, limit or 300)
    return catalog.distinct_values(field, limit)


@router.get("/catalog/{catalog_id}", response_model=CatalogWineOut)
def get_catalog_wine(
    catalog_id: int,
    catalog: WineCatalog = Depends(get_wine_catalog),
) -> CatalogWineOut:
    record = catalog.get(catalog_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Catalog wine not found")
    return CatalogWineOut.from_domain(record)
