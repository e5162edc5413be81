"""
Tests for wine matcher.
"""

import pytest

from menu_scanner.models.domain import Wine
from menu_scanner.models.enums import MatchStrategy
from menu_scanner.services.wine_matcher import WineMatcher, clean_name, compute_fuzzy_score, with_variety

from conftest import FakeCatalog, make_record


class TestHelpers:

    def test_clean_name_strips_punctuation(self):
        assert clean_name("Château Ducru-Beaucaillou!") == "Château DucruBeaucaillou"
        assert clean_name("Smith, John 2019") == "Smith John 2019"

    def test_with_variety(self):
        assert with_variety("Opus One", "cabernet sauvignon") == "Opus One cabernet sauvignon"
        assert with_variety("Opus One", None) == "Opus One"

    def test_fuzzy_identical(self):
        assert compute_fuzzy_score("Opus One", "opus one") == 1.0

    def test_fuzzy_unrelated_is_low(self):
        assert compute_fuzzy_score("Opus One", "Cloudy Bay Sauvignon Blanc") < 0.5


class TestCatalogStep:

    def test_empty_name(self):
        catalog = FakeCatalog()
        matcher = WineMatcher(catalog)
        assert matcher.resolve("") is None
        assert matcher.resolve("   ") is None
        assert catalog.queries == []

    def test_cleaned_name_plus_variety(self):
        record = make_record(7, "Opus One", variety="Cabernet Sauvignon", rating=4.6, vintage=2018)
        catalog = FakeCatalog({"Opus One 2018 cabernet sauvignon": [record]})
        matcher = WineMatcher(catalog)

        match = matcher.resolve_with_strategy("Opus One 2018", "cabernet sauvignon")

        assert match.strategy is MatchStrategy.CATALOG
        assert match.wine.catalog_id == 7
        assert match.wine.id is None
        assert match.wine.average_rating == 4.6
        assert catalog.queries == [("Opus One 2018 cabernet sauvignon", 1)]

    def test_no_comma_single_query(self):
        catalog = FakeCatalog()
        assert WineMatcher(catalog).resolve("Unknown Estate 2019") is None
        assert [q for q, _ in catalog.queries] == ["Unknown Estate 2019"]

    def test_comma_form_query_order(self):
        catalog = FakeCatalog()
        assert WineMatcher(catalog).resolve("Smith, John Estate Malbec 2019") is None
        assert [q for q, _ in catalog.queries] == [
            "Smith John Estate Malbec 2019",
            "John Estate Malbec 2019 Smith",
            "Smith",
        ]

    def test_comma_form_keeps_variety(self):
        catalog = FakeCatalog()
        WineMatcher(catalog).resolve("Montes, Alpha", "carmenere")
        assert [q for q, _ in catalog.queries] == [
            "Montes Alpha carmenere",
            "Alpha Montes carmenere",
            "Montes carmenere",
        ]

    def test_reordered_match(self):
        record = make_record(3, "Alpha", winery="Montes")
        catalog = FakeCatalog({"Alpha Montes": [record]})
        match = WineMatcher(catalog).resolve_with_strategy("Montes, Alpha")
        assert match.strategy is MatchStrategy.REORDERED
        assert match.wine.name == "Alpha"

    def test_winery_fallback(self):
        record = make_record(4, "Montes Classic", winery="Montes")
        catalog = FakeCatalog({"Montes": [record]})
        match = WineMatcher(catalog).resolve_with_strategy("Montes, Unheard Of")
        assert match.strategy is MatchStrategy.WINERY
        assert match.query == "Montes"

    def test_catalog_failure_is_no_match(self):
        catalog = FakeCatalog(fail=True)
        assert WineMatcher(catalog).resolve("Opus One 2018") is None
        assert len(catalog.queries) == 1

    def test_real_catalog(self, seeded_catalog):
        wine = WineMatcher(seeded_catalog).resolve("Caymus", "cabernet sauvignon")
        assert wine is not None
        assert wine.name == "Caymus Cabernet Sauvignon"
        assert wine.winery == "Caymus Vineyards"


class TestScanLocal:

    def test_repeat_line_reuses_match(self):
        record = make_record(1, "Opus One")
        catalog = FakeCatalog({"Opus One": [record]})
        matcher = WineMatcher(catalog)

        first = matcher.resolve("Opus One")
        second = matcher.resolve_with_strategy("opus one")

        assert second.strategy is MatchStrategy.SCAN
        assert second.wine is first
        assert len(catalog.queries) == 1
        assert matcher.resolved == [first]

    def test_fuzzy_scan_match(self):
        seeded = Wine(name="Caymus Cabernet Sauvignon")
        catalog = FakeCatalog()
        matcher = WineMatcher(catalog, resolved=[seeded])

        match = matcher.resolve_with_strategy("Caymus Cabernet Sauvignn")

        assert match.strategy is MatchStrategy.SCAN
        assert match.wine is seeded
        assert catalog.queries == []

    def test_fuzzy_scan_match_disabled(self):
        catalog = FakeCatalog()
        matcher = WineMatcher(catalog, resolved=[Wine(name="Caymus Cabernet Sauvignon")], fuzzy_scan_match=False)
        assert matcher.resolve("Caymus Cabernet Sauvignn") is None
        assert len(catalog.queries) == 1

    def test_seeded_list_is_copied(self):
        seeded = [Wine(name="Opus One")]
        matcher = WineMatcher(FakeCatalog({"Caymus": [make_record(2, "Caymus")]}), resolved=seeded)
        matcher.resolve("Caymus")
        assert len(seeded) == 1
        assert len(matcher.resolved) == 2


class TestLocalStore:

    def test_store_before_catalog(self, store):
        stored = store.add_wine(Wine(name="Opus One Magnum", vintage=2018))
        catalog = FakeCatalog({"Opus One": [make_record(1, "Opus One")]})

        match = WineMatcher(catalog, store=store).resolve_with_strategy("opus one")

        assert match.strategy is MatchStrategy.LOCAL
        assert match.wine.id == stored.id
        assert catalog.queries == []

    def test_store_miss_falls_through(self, store):
        catalog = FakeCatalog({"Opus One": [make_record(1, "Opus One")]})
        match = WineMatcher(catalog, store=store).resolve_with_strategy("Opus One")
        assert match.strategy is MatchStrategy.CATALOG

    def test_wildcards_in_text_are_literal(self, store):
        store.add_wine(Wine(name="Catena Alta Malbec 2019"))
        matcher = WineMatcher(FakeCatalog(), store=store)
        assert matcher.resolve("Catena%2019") is None
        assert matcher.resolve("Catena_Alta") is None

    @pytest.mark.parametrize("name", ["Opus One", "OPUS ONE 2018"])
    def test_scan_local_beats_store(self, store, name):
        store.add_wine(Wine(name="Opus One"))
        seeded = Wine(name="Opus One 2018")
        match = WineMatcher(FakeCatalog(), store=store, resolved=[seeded]).resolve_with_strategy(name)
        assert match.strategy is MatchStrategy.SCAN
