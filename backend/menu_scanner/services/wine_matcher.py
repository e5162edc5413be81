"""
Resolve detected menu entries to wine records.

Uses tiered matching, cheapest first:
1. Wines already resolved in this scan (name containment, then fuzzy)
2. Wines in the local store (name containment)
3. Catalog search with the cleaned name plus section variety
4. Comma-form names ("Winery, Wine"): reordered, then winery alone

A matcher is built per scan; every hit joins the scan's resolved list so
repeated menu lines resolve to the same wine.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import jellyfish
from rapidfuzz import fuzz

from ..config import Config
from ..models.domain import Wine
from ..models.enums import MatchStrategy
from .wine_catalog import CatalogSearch

logger = logging.getLogger(__name__)


class LocalWineLookup(Protocol):
    """The part of the store the matcher needs (allows fakes in tests)."""
    def find_by_name_containing(self, name: str) -> Optional[Wine]: ...


@dataclass
class WineMatch:
    """A resolved wine with the strategy and query that found it."""
    wine: Wine
    strategy: MatchStrategy
    query: str


def clean_name(name: str) -> str:
    """Keep letters, digits and spaces only."""
    return "".join(ch for ch in name if ch.isalnum() or ch == " ")


def with_variety(query: str, variety: Optional[str]) -> str:
    """Append section variety context to a catalog query."""
    return f"{query} {variety}" if variety else query


def compute_fuzzy_score(query: str, candidate: str) -> float:
    """
    Compute weighted fuzzy score using multiple algorithms.

    Uses rapidfuzz for accuracy with configurable weights, plus a
    metaphone bonus when the two names sound alike.
    """
    query = query.lower()
    candidate = candidate.lower()

    # Multi-algorithm scoring
    ratio = fuzz.ratio(query, candidate) / 100.0
    partial_ratio = fuzz.partial_ratio(query, candidate) / 100.0
    token_sort = fuzz.token_sort_ratio(query, candidate) / 100.0

    # Weighted combination
    weighted = (
        Config.WEIGHT_RATIO * ratio +
        Config.WEIGHT_PARTIAL * partial_ratio +
        Config.WEIGHT_TOKEN_SORT * token_sort
    )

    # Phonetic bonus if sounds similar
    query_metaphone = jellyfish.metaphone(query[:20])  # Limit for performance
    candidate_metaphone = jellyfish.metaphone(candidate[:20])
    if query_metaphone and candidate_metaphone:
        if query_metaphone == candidate_metaphone:
            weighted += Config.PHONETIC_BONUS
        elif query_metaphone[:3] == candidate_metaphone[:3]:
            weighted += Config.PHONETIC_BONUS / 2

    return min(1.0, weighted)


class WineMatcher:
    """
    Per-scan resolver from detected names to Wine records.

    Catalog hits are returned as unsaved Wine values with catalog_id set;
    the caller decides whether to persist them.
    """

    def __init__(
        self,
        catalog: CatalogSearch,
        store: Optional[LocalWineLookup] = None,
        resolved: Optional[list[Wine]] = None,
        fuzzy_scan_match: bool = True,
    ):
        """
        Args:
            catalog: Catalog search collaborator
            store: Local wine lookup, or None to skip the local step
            resolved: Wines already matched for this scan (seeded from history)
            fuzzy_scan_match: Also accept fuzzy hits among resolved wines
        """
        self._catalog = catalog
        self._store = store
        self.resolved: list[Wine] = list(resolved or [])
        self._fuzzy_scan_match = fuzzy_scan_match

    def resolve(self, name: str, variety: Optional[str] = None) -> Optional[Wine]:
        """Resolve a detected name, or None when nothing matches."""
        match = self.resolve_with_strategy(name, variety)
        return match.wine if match else None

    def resolve_with_strategy(self, name: str, variety: Optional[str] = None) -> Optional[WineMatch]:
        """
        Resolve a detected name and report which strategy found it.

        Args:
            name: Detected menu entry name
            variety: Grape variety from the enclosing section header, if any
        """
        if not name or not name.strip():
            return None

        match = (
            self._match_scan_local(name)
            or self._match_local_store(name)
            or self._match_catalog(name, variety)
        )
        if match is None:
            logger.debug(f"No match for '{name}'")
            return None

        logger.debug(f"Matched '{name}' via {match.strategy.value}: {match.wine.display_name}")
        if not any(wine is match.wine for wine in self.resolved):
            self.resolved.append(match.wine)
        return match

    def _match_scan_local(self, name: str) -> Optional[WineMatch]:
        name_lower = name.lower()
        for wine in self.resolved:
            wine_lower = wine.name.lower()
            if name_lower in wine_lower or wine_lower in name_lower:
                return WineMatch(wine, MatchStrategy.SCAN, name)

        if not self._fuzzy_scan_match or not self.resolved:
            return None

        best_wine = None
        best_score = 0.0
        for wine in self.resolved:
            score = compute_fuzzy_score(name, wine.name)
            if score > best_score:
                best_score = score
                best_wine = wine

        if best_wine is not None and best_score >= Config.SCAN_FUZZY_THRESHOLD:
            return WineMatch(best_wine, MatchStrategy.SCAN, name)
        return None

    def _match_local_store(self, name: str) -> Optional[WineMatch]:
        if self._store is None:
            return None
        wine = self._store.find_by_name_containing(name)
        if wine is None:
            return None
        return WineMatch(wine, MatchStrategy.LOCAL, name)

    def _match_catalog(self, name: str, variety: Optional[str]) -> Optional[WineMatch]:
        query = with_variety(clean_name(name), variety)
        match = self._search_first(query, MatchStrategy.CATALOG)
        if match:
            return match

        # Menus often print "Winery, Wine Name"; the catalog stores wine name first
        if "," not in name:
            return None
        parts = [part.strip() for part in name.split(",")]
        parts = [part for part in parts if part]
        if len(parts) < 2:
            return None

        reordered = " ".join(parts[1:] + parts[:1])
        match = self._search_first(with_variety(reordered, variety), MatchStrategy.REORDERED)
        if match:
            return match

        return self._search_first(with_variety(parts[0], variety), MatchStrategy.WINERY)

    def _search_first(self, query: str, strategy: MatchStrategy) -> Optional[WineMatch]:
        try:
            results = self._catalog.search(query, Config.CATALOG_MATCH_LIMIT)
        except Exception as e:
            logger.warning(f"Catalog search failed for '{query}': {e}")
            return None
        if not results:
            return None
        return WineMatch(results[0].to_wine(), strategy, query)
