"""
Tests for predicted scores: evidence weighting, color bias and blending.
"""

import pytest

from menu_scanner.models.domain import Wine
from menu_scanner.services.preferences import PreferenceModel
from menu_scanner.services.score_blender import (
    color_penalty,
    personal_score,
    personal_weight,
    predict_score,
)

from conftest import make_rating


class TestPersonalWeight:

    def test_no_ratings(self):
        assert personal_weight(0) == 0.0

    def test_ten_ratings_is_half(self):
        assert personal_weight(10) == pytest.approx(0.5)

    def test_cap_reached_at_sixteen(self):
        assert personal_weight(16) == pytest.approx(0.8)
        assert personal_weight(100) == 0.8


class TestColorPenalty:

    def test_zero_at_threshold(self):
        assert color_penalty(0.7) == 0.0

    def test_below_threshold(self):
        assert color_penalty(0.5) == 0.0

    def test_capped_at_full_bias(self):
        assert color_penalty(1.0) == 0.5

    def test_linear_between(self):
        assert color_penalty(0.85) == pytest.approx(0.15 * 1.67)


class TestPredictScore:

    def test_no_history_returns_community_exactly(self):
        model = PreferenceModel.calculate([])
        wine = Wine(name="Opus One", grape_variety="Cabernet Sauvignon", average_rating=4.6)
        assert predict_score(model, wine) == 4.6

    def test_no_evidence_and_no_community(self):
        model = PreferenceModel.calculate([])
        assert predict_score(model, Wine(name="Mystery")) is None

    def test_blend_example(self):
        ratings = [make_rating(value, variety="Cabernet Sauvignon") for value in (3.5, 4.0, 4.5, 4.0, 4.0)]
        model = PreferenceModel.calculate(ratings)
        wine = Wine(name="Candidate", grape_variety="Cabernet Sauvignon", average_rating=3.5)
        assert predict_score(model, wine) == pytest.approx(3.625)

    def test_personal_only_without_community(self):
        model = PreferenceModel.calculate([make_rating(4.2, variety="Merlot")])
        wine = Wine(name="House Merlot", grape_variety="Merlot")
        assert predict_score(model, wine) == pytest.approx(4.2)

    def test_similar_variety_fallback_weight(self):
        model = PreferenceModel.calculate([
            make_rating(4.0, variety="Malbec"),
            make_rating(2.0, winery="Bodega X"),
        ])
        wine = Wine(name="Syrah", grape_variety="Syrah", winery="Bodega X")
        # variety 4.0 at weight 3.0*0.6, winery 2.0 at weight 2.5
        expected = (4.0 * 1.8 + 2.0 * 2.5) / (1.8 + 2.5)
        assert personal_score(model, wine) == pytest.approx(expected)

    def test_similarity_ties_keep_first_key(self):
        model = PreferenceModel.calculate([
            make_rating(5.0, variety="Malbec"),
            make_rating(1.0, variety="Syrah"),
        ])
        wine = Wine(name="Tannat", grape_variety="Tannat")
        assert personal_score(model, wine) == pytest.approx(5.0)

    def test_all_dimensions_weighted(self):
        model = PreferenceModel.calculate([
            make_rating(4.0, variety="Merlot", winery="Duckhorn", region="Napa Valley", country="United States"),
        ])
        wine = Wine(
            name="Duckhorn Merlot",
            grape_variety="Merlot",
            winery="Duckhorn",
            region="Napa Valley",
            country="United States",
        )
        assert personal_score(model, wine) == pytest.approx(4.0)

    def test_cross_color_penalty_applied(self):
        ratings = [make_rating(4.0, variety="Malbec") for _ in range(4)]
        ratings.append(make_rating(4.0, variety="Chardonnay"))
        model = PreferenceModel.calculate(ratings)
        # red ratio 0.8 -> penalty 0.167; personal from same-color similarity
        wine = Wine(name="White", grape_variety="Chardonnay", average_rating=4.0)
        personal = 4.0 - (0.8 - 0.7) * 1.67
        weight = 5 * 0.05
        assert predict_score(model, wine) == pytest.approx(personal * weight + 4.0 * (1 - weight))

    def test_penalty_seeds_personal_from_community(self):
        ratings = [make_rating(4.5, variety="Malbec") for _ in range(3)]
        model = PreferenceModel.calculate(ratings)
        wine = Wine(name="Plain White", wine_type="White", average_rating=4.0)
        # No personal evidence: community minus full penalty, blended again with community
        personal = max(1.0, 4.0 - 0.5)
        weight = 3 * 0.05
        assert predict_score(model, wine) == pytest.approx(personal * weight + 4.0 * (1 - weight))

    def test_penalty_floor(self):
        ratings = [make_rating(1.2, variety="Chardonnay") for _ in range(20)]
        model = PreferenceModel.calculate(ratings)
        wine = Wine(name="Red", wine_type="Red", grape_variety="Chardonnay")
        assert predict_score(model, wine) == pytest.approx(1.0)

    def test_no_penalty_below_minimum_colored_ratings(self):
        ratings = [make_rating(4.0, variety="Malbec") for _ in range(2)]
        model = PreferenceModel.calculate(ratings)
        wine = Wine(name="White", wine_type="White", average_rating=3.0)
        assert predict_score(model, wine) == pytest.approx(3.0)

    def test_no_penalty_for_neither_color(self):
        ratings = [make_rating(4.0, variety="Malbec") for _ in range(5)]
        model = PreferenceModel.calculate(ratings)
        wine = Wine(name="Bubbles", wine_type="Sparkling", average_rating=4.2)
        assert predict_score(model, wine) == pytest.approx(4.2)
