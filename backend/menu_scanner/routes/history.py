"""
/history endpoints: saved scans, re-scored on demand.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ..errors import ScanNotFoundError
from ..models.response import ScanResponse, ScanSummary
from ..services.recommender import ScanService
from ..services.wine_store import WineStore
from .dependencies import get_scan_service, get_wine_store
from .scan import to_scan_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/history", response_model=list[ScanSummary])
def list_history(store: WineStore = Depends(get_wine_store)) -> list[ScanSummary]:
    """All saved scans, newest first."""
    return [ScanSummary.from_domain(scan) for scan in store.list_scans()]


@router.get("/history/{scan_id}", response_model=ScanResponse)
def get_history_scan(
    scan_id: int,
    service: ScanService = Depends(get_scan_service),
) -> ScanResponse:
    """Re-rank a saved scan against the current rating history."""
    try:
        return to_scan_response(service.rescore(scan_id))
    except ScanNotFoundError:
        raise HTTPException(status_code=404, detail="Scan not found")


@router.get("/history/{scan_id}/photo")
def get_history_photo(scan_id: int, store: WineStore = Depends(get_wine_store)) -> Response:
    """The JPEG kept with a scan."""
    try:
        scan = store.get_scan(scan_id)
    except ScanNotFoundError:
        raise HTTPException(status_code=404, detail="Scan not found")
    if scan.photo is None:
        raise HTTPException(status_code=404, detail="No photo stored for this scan")
    return Response(content=scan.photo, media_type="image/jpeg")


@router.delete("/history/{scan_id}", status_code=204)
def delete_history_scan(scan_id: int, store: WineStore = Depends(get_wine_store)) -> Response:
    """Delete a scan; its matched wines and their ratings are kept."""
    try:
        store.delete_scan(scan_id)
    except ScanNotFoundError:
        raise HTTPException(status_code=404, detail="Scan not found")
    logger.info(f"Deleted scan {scan_id}")
    return Response(status_code=204)
