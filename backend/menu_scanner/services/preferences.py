"""
User taste profile derived from rating history.

The model is recomputed from the full history on every request and never
persisted, so a new or deleted rating shows up in the next prediction.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from statistics import fmean
from typing import Iterable

from ..config import Config
from ..models.domain import UserRating
from . import variety_similarity


@dataclass
class PreferenceModel:
    """Per-dimension average ratings keyed by lowercase category."""
    variety_scores: dict[str, float] = field(default_factory=dict)
    region_scores: dict[str, float] = field(default_factory=dict)
    country_scores: dict[str, float] = field(default_factory=dict)
    winery_scores: dict[str, float] = field(default_factory=dict)
    rating_count: int = 0

    red_count: int = 0
    white_count: int = 0
    red_avg_rating: float = 0.0
    white_avg_rating: float = 0.0

    @classmethod
    def calculate(cls, ratings: Iterable[UserRating]) -> "PreferenceModel":
        """
        Build the model from a rating history snapshot.

        Ratings without a wine are skipped for every bucket but still count
        toward rating_count. A wine that is neither clearly red nor white
        lands in no color bucket.
        """
        ratings = list(ratings)
        model = cls(rating_count=len(ratings))

        by_variety: dict[str, list[float]] = defaultdict(list)
        by_region: dict[str, list[float]] = defaultdict(list)
        by_country: dict[str, list[float]] = defaultdict(list)
        by_winery: dict[str, list[float]] = defaultdict(list)
        reds: list[float] = []
        whites: list[float] = []

        for rating in ratings:
            wine = rating.wine
            if wine is None:
                continue

            if wine.grape_variety:
                by_variety[wine.grape_variety.lower()].append(rating.rating)

            if variety_similarity.is_red(wine.grape_variety, wine.wine_type):
                reds.append(rating.rating)
            elif variety_similarity.is_white(wine.grape_variety, wine.wine_type):
                whites.append(rating.rating)

            if wine.region:
                by_region[wine.region.lower()].append(rating.rating)
            if wine.country:
                by_country[wine.country.lower()].append(rating.rating)
            if wine.winery:
                by_winery[wine.winery.lower()].append(rating.rating)

        model.variety_scores = {key: fmean(values) for key, values in by_variety.items()}
        model.region_scores = {key: fmean(values) for key, values in by_region.items()}
        model.country_scores = {key: fmean(values) for key, values in by_country.items()}
        model.winery_scores = {key: fmean(values) for key, values in by_winery.items()}

        model.red_count = len(reds)
        model.white_count = len(whites)
        if reds:
            model.red_avg_rating = fmean(reds)
        if whites:
            model.white_avg_rating = fmean(whites)

        return model

    @property
    def colored_count(self) -> int:
        return self.red_count + self.white_count

    @property
    def top_varieties(self) -> list[tuple[str, float]]:
        return _top(self.variety_scores)

    @property
    def top_regions(self) -> list[tuple[str, float]]:
        return _top(self.region_scores)

    @property
    def top_countries(self) -> list[tuple[str, float]]:
        return _top(self.country_scores)


def _top(scores: dict[str, float]) -> list[tuple[str, float]]:
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    return [(name.title(), score) for name, score in ranked[:Config.TOP_PREFERENCES]]
