"""
Tests for the preference model built from rating history.
"""

import pytest

from menu_scanner.models.domain import UserRating
from menu_scanner.services.preferences import PreferenceModel

from conftest import make_rating


class TestCalculate:

    def test_empty_history(self):
        model = PreferenceModel.calculate([])
        assert model.rating_count == 0
        assert model.variety_scores == {}
        assert model.red_count == 0
        assert model.white_count == 0

    def test_groups_by_lowercase_keys(self):
        model = PreferenceModel.calculate([
            make_rating(4.0, variety="Malbec", region="Mendoza", country="Argentina", winery="Catena"),
            make_rating(3.0, variety="MALBEC", region="mendoza", country="Argentina", winery="Catena"),
        ])
        assert model.variety_scores == {"malbec": pytest.approx(3.5)}
        assert model.region_scores == {"mendoza": pytest.approx(3.5)}
        assert model.country_scores == {"argentina": pytest.approx(3.5)}
        assert model.winery_scores == {"catena": pytest.approx(3.5)}

    def test_missing_categories_have_no_entry(self):
        model = PreferenceModel.calculate([make_rating(4.0, variety="Merlot")])
        assert "merlot" in model.variety_scores
        assert model.region_scores == {}
        assert model.country_scores == {}
        assert model.winery_scores == {}

    def test_color_buckets(self):
        model = PreferenceModel.calculate([
            make_rating(4.0, variety="Malbec"),
            make_rating(5.0, variety="Syrah"),
            make_rating(2.0, variety="Chardonnay"),
            make_rating(3.0, variety="Bordeaux Blend"),  # neither color
        ])
        assert model.red_count == 2
        assert model.white_count == 1
        assert model.red_avg_rating == pytest.approx(4.5)
        assert model.white_avg_rating == pytest.approx(2.0)
        assert model.colored_count == 3

    def test_explicit_type_overrides_variety(self):
        model = PreferenceModel.calculate([make_rating(4.0, variety="Chardonnay", wine_type="Red")])
        assert model.red_count == 1
        assert model.white_count == 0

    def test_rating_without_wine_still_counted(self):
        orphan = UserRating(rating=5.0)
        model = PreferenceModel.calculate([orphan, make_rating(3.0, variety="Merlot")])
        assert model.rating_count == 2
        assert model.variety_scores == {"merlot": pytest.approx(3.0)}
        assert model.red_count == 1


class TestTopPreferences:

    def test_top_varieties_are_title_cased_and_limited(self):
        ratings = [
            make_rating(float(score), variety=variety)
            for score, variety in [
                (5, "malbec"), (4, "merlot"), (3, "syrah"), (2, "gamay"),
                (1, "riesling"), (1, "chardonnay"),
            ]
        ]
        model = PreferenceModel.calculate(ratings)
        top = model.top_varieties
        assert len(top) == 5
        assert top[0] == ("Malbec", pytest.approx(5.0))
        assert top[1][0] == "Merlot"
