"""
Predicted score for a wine, blending personal taste with the community rating.

Steps:
1. Personal score: weighted mean of matching variety/winery/region/country
   averages, falling back to the most similar rated variety.
2. Color-bias penalty: users who rate mostly one color get cross-color
   wines marked down (0 at 70%, 0.5 at 100%).
3. Blend: each rating adds 5% personal weight, capped at 80%.

- 1 rating: 5% personal, 95% community
- 10 ratings: 50% personal, 50% community
- 16+ ratings: 80% personal, 20% community (cap)
"""

from typing import Optional

from ..config import Config
from ..models.domain import Wine
from . import variety_similarity
from .preferences import PreferenceModel


def personal_weight(rating_count: int) -> float:
    """Share of the blended score taken by the personal score."""
    return min(Config.PERSONAL_WEIGHT_CAP, rating_count * Config.PERSONAL_WEIGHT_PER_RATING)


def color_penalty(dominant_ratio: float) -> float:
    """Penalty for a cross-color wine given the share of the user's dominant color."""
    if dominant_ratio < Config.COLOR_BIAS_THRESHOLD:
        return 0.0
    return min(
        Config.COLOR_PENALTY_CAP,
        (dominant_ratio - Config.COLOR_BIAS_THRESHOLD) * Config.COLOR_PENALTY_SLOPE,
    )


def _variety_evidence(model: PreferenceModel, variety: str) -> Optional[tuple[float, float]]:
    """(score, weight) from the exact variety, or the most similar rated one."""
    target = variety.lower()
    if target in model.variety_scores:
        return model.variety_scores[target], Config.WEIGHT_VARIETY

    best_score: Optional[float] = None
    best_similarity = 0.0
    for rated_variety, score in model.variety_scores.items():
        sim = variety_similarity.similarity(rated_variety, target)
        if sim > best_similarity:
            best_similarity = sim
            best_score = score

    if best_score is not None and best_similarity > 0:
        return best_score, Config.WEIGHT_VARIETY * best_similarity
    return None


def personal_score(model: PreferenceModel, wine: Wine) -> Optional[float]:
    """Weighted mean of the personal evidence for this wine, None without evidence."""
    evidence: list[tuple[float, float]] = []

    if wine.grape_variety:
        variety = _variety_evidence(model, wine.grape_variety)
        if variety is not None:
            evidence.append(variety)

    for value, scores, weight in (
        (wine.winery, model.winery_scores, Config.WEIGHT_WINERY),
        (wine.region, model.region_scores, Config.WEIGHT_REGION),
        (wine.country, model.country_scores, Config.WEIGHT_COUNTRY),
    ):
        if value and value.lower() in scores:
            evidence.append((scores[value.lower()], weight))

    if not evidence:
        return None

    total_weight = sum(weight for _, weight in evidence)
    return sum(score * weight for score, weight in evidence) / total_weight


def _apply_color_bias(
    model: PreferenceModel,
    wine: Wine,
    personal: Optional[float],
) -> Optional[float]:
    total = model.colored_count
    if total < Config.COLOR_MIN_RATINGS:
        return personal

    target_red = variety_similarity.is_red(wine.grape_variety, wine.wine_type)
    target_white = variety_similarity.is_white(wine.grape_variety, wine.wine_type)
    if not (target_red or target_white):
        return personal

    red_ratio = model.red_count / total
    white_ratio = model.white_count / total

    if target_white and red_ratio >= Config.COLOR_BIAS_THRESHOLD:
        penalty = color_penalty(red_ratio)
    elif target_red and white_ratio >= Config.COLOR_BIAS_THRESHOLD:
        penalty = color_penalty(white_ratio)
    else:
        return personal

    if personal is not None:
        return max(Config.SCORE_FLOOR, personal - penalty)
    # No personal evidence: start from the community score
    if wine.average_rating is not None:
        return max(Config.SCORE_FLOOR, wine.average_rating - penalty)
    return None


def predict_score(model: PreferenceModel, wine: Wine) -> Optional[float]:
    """
    Predict how much the user will like a wine.

    Returns None when there is neither personal evidence nor a community
    rating; callers treat that as "cannot recommend".
    """
    personal = _apply_color_bias(model, wine, personal_score(model, wine))
    community = wine.average_rating

    if personal is not None and community is not None:
        weight = personal_weight(model.rating_count)
        return personal * weight + community * (1.0 - weight)
    if personal is not None:
        return personal
    return community
