"""
Scan orchestration: OCR lines to ranked wine recommendations.

Pipeline:
1. Recognize text lines (skipped for text scans)
2. Classify lines into (name, variety) menu entries
3. Resolve each entry with a per-scan WineMatcher
4. Predict a score per resolved wine from the current rating history
5. Rank and mark the top pick; optionally save the scan to history

Predictions are never stored; reopening a scan from history re-scores it
against the ratings as they are now.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..feature_flags import FeatureFlags
from ..models.domain import MenuEntry, ScanHistory, Wine
from ..models.enums import MatchStrategy
from .menu_classifier import MenuTextClassifier
from .preferences import PreferenceModel
from .score_blender import predict_score
from .text_recognizer import TextRecognizerProtocol
from .wine_catalog import CatalogSearch
from .wine_matcher import WineMatcher
from .wine_store import WineStore

logger = logging.getLogger(__name__)


@dataclass
class ScoredEntry:
    """One detected menu entry with its resolved wine and prediction."""
    detected_name: str
    variety: Optional[str] = None
    wine: Optional[Wine] = None
    strategy: Optional[MatchStrategy] = None
    predicted_score: Optional[float] = None
    is_top_pick: bool = False


@dataclass
class ScanResult:
    """Ranked results for one scan."""
    entries: list[ScoredEntry] = field(default_factory=list)
    scan_id: Optional[int] = None
    scanned_at: datetime = field(default_factory=datetime.now)
    line_count: int = 0

    @property
    def top_pick(self) -> Optional[ScoredEntry]:
        return next((entry for entry in self.entries if entry.is_top_pick), None)

    @property
    def matched_count(self) -> int:
        return sum(1 for entry in self.entries if entry.wine is not None)


def _rank_key(entry: ScoredEntry):
    community = entry.wine.average_rating if entry.wine else None
    return (
        entry.predicted_score is None,
        -(entry.predicted_score or 0.0),
        community is None,
        -(community or 0.0),
        entry.detected_name,
    )


def rank_entries(entries: list[ScoredEntry]) -> list[ScoredEntry]:
    """
    Sort by predicted score, then community rating, then detected name.

    Entries with a score sort before entries without one. The top pick is
    the first entry with both a wine and a predicted score.
    """
    ranked = sorted(entries, key=_rank_key)
    for entry in ranked:
        entry.is_top_pick = False
    for entry in ranked:
        if entry.wine is not None and entry.predicted_score is not None:
            entry.is_top_pick = True
            break
    return ranked


class ScanService:
    """Runs scans and re-scores saved scans."""

    def __init__(
        self,
        catalog: CatalogSearch,
        store: WineStore,
        recognizer: Optional[TextRecognizerProtocol] = None,
        flags: Optional[FeatureFlags] = None,
    ):
        self._catalog = catalog
        self._store = store
        self._recognizer = recognizer
        self._flags = flags or FeatureFlags()
        self._classifier = MenuTextClassifier()

    def scan_image(self, image_bytes: bytes, photo: Optional[bytes] = None) -> ScanResult:
        """
        OCR a menu photo and rank the detected wines.

        Args:
            image_bytes: Image sent to the recognizer
            photo: JPEG to keep with the scan history, if enabled
        """
        if self._recognizer is None:
            raise RuntimeError("No text recognizer configured")
        lines = self._recognizer.recognize(image_bytes)
        logger.info(f"Recognized {len(lines)} lines from menu photo")
        return self.scan_lines(lines, photo=photo)

    def scan_lines(self, lines: list[str], photo: Optional[bytes] = None) -> ScanResult:
        """Classify, match and rank already-recognized menu lines."""
        menu_entries = self._classifier.extract(lines)
        matcher = self._new_matcher()
        result = self._score(menu_entries, matcher)
        result.line_count = len(lines)

        if self._flags.feature_scan_history:
            scan = ScanHistory(
                scanned_at=result.scanned_at,
                photo=photo if self._flags.feature_store_scan_photos else None,
                entries=menu_entries,
                matched_wines=list(matcher.resolved),
            )
            saved = self._store.add_scan(scan)
            result.scan_id = saved.id

        logger.info(
            f"Scan complete: {len(lines)} lines, {len(menu_entries)} entries, "
            f"{result.matched_count} matched"
        )
        return result

    def rescore(self, scan_id: int) -> ScanResult:
        """
        Re-run matching and scoring for a saved scan.

        Raises:
            ScanNotFoundError: If no scan has this id
        """
        scan = self._store.get_scan(scan_id)
        matcher = self._new_matcher(resolved=scan.matched_wines)
        result = self._score(scan.entries, matcher)
        result.scan_id = scan.id
        result.scanned_at = scan.scanned_at
        return result

    def _new_matcher(self, resolved: Optional[list[Wine]] = None) -> WineMatcher:
        return WineMatcher(
            self._catalog,
            self._store,
            resolved=resolved,
            fuzzy_scan_match=self._flags.feature_scan_fuzzy_match,
        )

    def _score(self, menu_entries: list[MenuEntry], matcher: WineMatcher) -> ScanResult:
        model = PreferenceModel.calculate(self._store.all_ratings())

        scored = []
        for menu_entry in menu_entries:
            entry = ScoredEntry(detected_name=menu_entry.name, variety=menu_entry.variety)
            match = matcher.resolve_with_strategy(menu_entry.name, menu_entry.variety)
            if match is not None:
                entry.wine = match.wine
                entry.strategy = match.strategy
                entry.predicted_score = predict_score(model, match.wine)
            scored.append(entry)

        return ScanResult(entries=rank_entries(scored))
