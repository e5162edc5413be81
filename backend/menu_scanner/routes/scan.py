"""
/scan endpoints for Wine Menu Scanner.

Receives a menu photo (or already-recognized text lines) and returns the
detected wines ranked by predicted score.
"""

import io
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from PIL import Image
from pillow_heif import register_heif_opener
from pydantic import BaseModel, Field

from ..config import Config
from ..feature_flags import FeatureFlags, get_feature_flags
from ..models.response import ScanEntry, ScanResponse, WineOut
from ..services.recommender import ScanResult, ScanService, ScoredEntry
from .dependencies import get_scan_service

logger = logging.getLogger(__name__)
router = APIRouter()

# Register HEIF/HEIC support with Pillow
register_heif_opener()


class TextScanRequest(BaseModel):
    """Menu text already recognized on the client."""
    lines: list[str] = Field(..., description="OCR text lines in reading order")


def convert_heic_to_jpeg(image_bytes: bytes, content_type: str) -> bytes:
    """
    Convert HEIC/HEIF images to JPEG. Pass through other formats unchanged.

    Args:
        image_bytes: Raw image bytes
        content_type: MIME type of the image

    Returns:
        JPEG bytes if HEIC/HEIF, otherwise original bytes
    """
    if content_type not in ("image/heic", "image/heif"):
        return image_bytes
    return encode_jpeg(image_bytes, quality=90)


def encode_jpeg(image_bytes: bytes, quality: int = Config.PHOTO_JPEG_QUALITY) -> bytes:
    """Re-encode any Pillow-readable image as JPEG."""
    img = Image.open(io.BytesIO(image_bytes))

    # Convert to RGB (PNG/HEIC may have alpha channel)
    if img.mode in ("RGBA", "P", "LA"):
        img = img.convert("RGB")

    output = io.BytesIO()
    img.save(output, format="JPEG", quality=quality)
    return output.getvalue()


def _to_scan_entry(entry: ScoredEntry) -> ScanEntry:
    return ScanEntry(
        detected_name=entry.detected_name,
        variety=entry.variety,
        wine=WineOut.from_domain(entry.wine) if entry.wine else None,
        match_strategy=entry.strategy.value if entry.strategy else None,
        predicted_score=entry.predicted_score,
        is_top_pick=entry.is_top_pick,
    )


def to_scan_response(result: ScanResult) -> ScanResponse:
    """Convert a ranked ScanResult for the API response."""
    entries = [_to_scan_entry(entry) for entry in result.entries]
    top_pick = next((entry for entry in entries if entry.is_top_pick), None)
    return ScanResponse(
        scan_id=result.scan_id,
        scanned_at=result.scanned_at,
        line_count=result.line_count,
        entries=entries,
        top_pick=top_pick,
    )


# === Endpoints ===


@router.post("/scan", response_model=ScanResponse)
def scan_menu(
    image: UploadFile = File(..., description="Wine menu photo"),
    service: ScanService = Depends(get_scan_service),
    flags: FeatureFlags = Depends(get_feature_flags),
) -> ScanResponse:
    """
    Scan a wine menu photo and return detected wines ranked for this user.

    Args:
        image: The menu photo (JPEG, PNG or HEIC)

    Returns:
        ScanResponse with ranked entries and the top pick
    """
    # Validate content type
    if image.content_type not in Config.ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Invalid image type. Only JPEG, PNG and HEIC are supported."
        )

    # Read and validate image
    try:
        image_bytes = image.file.read()
    except IOError as e:
        logger.error(f"Failed to read uploaded image: {e}")
        raise HTTPException(status_code=400, detail="Failed to read image file")

    if not image_bytes:
        raise HTTPException(status_code=400, detail="Empty image file")

    # Validate file size
    if len(image_bytes) > Config.MAX_IMAGE_SIZE_BYTES:
        raise HTTPException(
            status_code=400,
            detail=f"Image too large. Maximum size is {Config.MAX_IMAGE_SIZE_MB}MB."
        )

    try:
        # Convert HEIC/HEIF to JPEG
        image_bytes = convert_heic_to_jpeg(image_bytes, image.content_type)
        photo = None
        if flags.feature_scan_history and flags.feature_store_scan_photos:
            photo = encode_jpeg(image_bytes)
    except (OSError, ValueError) as e:
        logger.warning(f"Invalid image format: {e}")
        raise HTTPException(status_code=400, detail="Invalid image format")

    # Process image
    try:
        result = service.scan_image(image_bytes, photo=photo)
    except Exception as e:
        logger.error(f"Unexpected error processing image: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return to_scan_response(result)


@router.post("/scan/text", response_model=ScanResponse)
def scan_menu_text(
    request: TextScanRequest,
    service: ScanService = Depends(get_scan_service),
) -> ScanResponse:
    """Rank wines from menu text lines without running OCR."""
    try:
        result = service.scan_lines(request.lines)
    except Exception as e:
        logger.error(f"Unexpected error processing menu text: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
    return to_scan_response(result)
