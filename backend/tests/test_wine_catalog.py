"""
Tests for the reference catalog.
"""

import pytest

from menu_scanner.services.wine_catalog import search_terms


class TestSearchTerms:

    def test_tokens_lowercased_and_cleaned(self):
        assert search_terms("  Caymus, CABERNET!  ") == ["caymus", "cabernet"]

    def test_punctuation_only_tokens_dropped(self):
        assert search_terms("- & -") == []


class TestSearch:

    def test_tokens_match_across_fields(self, seeded_catalog):
        results = seeded_catalog.search("napa cabernet")
        assert [r.name for r in results] == ["Opus One", "Caymus Cabernet Sauvignon"]

    def test_all_tokens_required(self, seeded_catalog):
        assert seeded_catalog.search("caymus marlborough") == []

    def test_ranked_by_rating(self, seeded_catalog):
        ratings = [r.rating for r in seeded_catalog.search("a") if r.rating is not None]
        assert ratings == [4.7, 4.6, 4.4, 4.1, 3.9]

    def test_unrated_sorted_last(self, seeded_catalog):
        results = seeded_catalog.search("a")
        assert results[-1].name == "Casa Silva Carmenere Reserva"

    def test_limit(self, seeded_catalog):
        assert len(seeded_catalog.search("a", limit=2)) == 2

    def test_empty_query(self, seeded_catalog):
        assert seeded_catalog.search("") == []
        assert seeded_catalog.search("   ") == []

    def test_unicode_case_folding(self, seeded_catalog):
        results = seeded_catalog.search("CHÂTEAU")
        assert [r.name for r in results] == ["Château Margaux"]

    def test_record_fields(self, seeded_catalog):
        record = seeded_catalog.search("opus")[0]
        assert record.winery == "Opus One Winery"
        assert record.vintage == 2018
        assert record.wine_type == "Red"
        assert record.food_pairings == ("Beef", "Lamb")
        assert record.display_name == "Opus One 2018"


class TestLookups:

    def test_get(self, seeded_catalog):
        record = seeded_catalog.search("cloudy")[0]
        assert seeded_catalog.get(record.id) == record
        assert seeded_catalog.get(99999) is None

    def test_find_by_name(self, seeded_catalog):
        assert seeded_catalog.find_by_name("test wine").winery == "Test Winery"
        assert seeded_catalog.find_by_name("nothing like this") is None
        assert seeded_catalog.find_by_name("test%wine") is None
        assert seeded_catalog.find_by_name("test_wine") is None

    def test_wines_by_country(self, seeded_catalog):
        names = [r.name for r in seeded_catalog.wines_by_country("United States")]
        assert names == ["Opus One", "Caymus Cabernet Sauvignon"]

    def test_distinct_values(self, seeded_catalog):
        assert seeded_catalog.distinct_values("country") == [
            "Argentina", "Chile", "France", "New Zealand", "United States",
        ]
        assert seeded_catalog.distinct_values("variety", limit=2) == ["Bordeaux Blend", "Cabernet Sauvignon"]

    def test_distinct_values_rejects_other_columns(self, seeded_catalog):
        with pytest.raises(ValueError):
            seeded_catalog.distinct_values("name; DROP TABLE catalog_wines")

    def test_distinct_regions(self, seeded_catalog):
        assert seeded_catalog.distinct_regions("United States") == ["Napa Valley"]
        assert seeded_catalog.distinct_regions("Italy") == []


class TestBulk:

    def test_count_and_clear(self, seeded_catalog):
        assert seeded_catalog.count() == 6
        seeded_catalog.clear()
        assert seeded_catalog.count() == 0

    def test_small_batches(self, catalog):
        rows = [{"name": f"Wine {i}", "rating": 3.0} for i in range(7)]
        assert catalog.bulk_insert(rows, batch_size=3) == 7
        assert catalog.count() == 7
