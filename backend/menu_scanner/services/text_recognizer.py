"""
Google Cloud Vision OCR client for wine menu photos.

Recognizers return the menu's text as ordered lines. Failures are logged
and yield no lines, so a bad photo produces an empty scan rather than an error.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class TextRecognizerProtocol(Protocol):
    """Protocol for OCR services (allows mocking)."""
    def recognize(self, image_bytes: bytes) -> list[str]: ...


def split_lines(raw_text: str) -> list[str]:
    """Split a full-text annotation into trimmed non-empty lines, in reading order."""
    return [line.strip() for line in raw_text.splitlines() if line.strip()]


class VisionTextRecognizer:
    """Google Cloud Vision document text detection."""

    def __init__(self):
        self._client = None

    def _get_client(self):
        """Lazy load Vision client."""
        if self._client is None:
            from google.cloud import vision
            self._client = vision.ImageAnnotatorClient()
        return self._client

    def recognize(self, image_bytes: bytes) -> list[str]:
        """
        Run OCR on a menu photo.

        Args:
            image_bytes: Raw image bytes (JPEG or PNG)

        Returns:
            Text lines in reading order, or [] on any failure
        """
        try:
            return self._call_vision_api(image_bytes)
        except Exception as e:
            logger.error(f"Text recognition failed: {e}", exc_info=True)
            return []

    def _call_vision_api(self, image_bytes: bytes) -> list[str]:
        """Make the actual Vision API call."""
        from google.cloud import vision

        client = self._get_client()
        image = vision.Image(content=image_bytes)
        response = client.document_text_detection(image=image)

        if response.error and response.error.message:
            logger.warning(f"Vision API returned error: {response.error.message}")
            return []

        # Prefer the structured full-text annotation; fall back to the first text annotation
        raw_text = ""
        if response.full_text_annotation and response.full_text_annotation.text:
            raw_text = response.full_text_annotation.text
        elif response.text_annotations:
            raw_text = response.text_annotations[0].description

        lines = split_lines(raw_text)
        logger.info(f"OCR recognized {len(lines)} lines")
        return lines


class MockTextRecognizer:
    """Mock recognizer for testing without API calls."""

    MENU_LINES = [
        "WINE LIST",
        "Red Wines",
        "Cabernet Sauvignon",
        "Caymus Vineyards Napa Valley 2021",
        "$95",
        "Opus One 2018",
        "$320",
        "Pinot Noir",
        "Domaine Drouhin Dundee Hills 2019",
        "Meiomi, Coastal",
        "58",
        "White Wines",
        "Chardonnay",
        "Kistler Vineyards Les Noisetiers 2020",
        "Sauvignon Blanc",
        "Cloudy Bay Marlborough 2022",
        "www.restaurant.com",
    ]

    def __init__(self, scenario: str = "menu"):
        self.scenario = scenario

    def recognize(self, image_bytes: bytes) -> list[str]:
        """Return mock OCR lines."""
        if self.scenario == "menu":
            return list(self.MENU_LINES)
        return []


class ReplayTextRecognizer:
    """
    Replay captured OCR output for deterministic testing.

    The fixture is a JSON object with either a "lines" list or a "raw_text" string.
    """

    def __init__(self, fixture_path: str | Path):
        self._fixture_path = Path(fixture_path)
        self._data: Optional[dict] = None

    def _load_fixture(self) -> dict:
        """Lazy load fixture data."""
        if self._data is None:
            with open(self._fixture_path) as f:
                self._data = json.load(f)
        return self._data

    def recognize(self, image_bytes: bytes) -> list[str]:
        data = self._load_fixture()
        if "lines" in data:
            return [str(line) for line in data["lines"]]
        return split_lines(data.get("raw_text", ""))
