"""
Tests for rating CSV import and catalog reconciliation.
"""

import pytest

from menu_scanner.ingestion.reconciler import ImportReconciler

from conftest import FakeCatalog, make_record

HEADER = "Winery,Wine name,Vintage,Region,Country,Your rating,Average rating\n"


@pytest.fixture
def reconciler(seeded_catalog, store):
    return ImportReconciler(seeded_catalog, store)


class TestMatchRow:

    def test_winery_match_wins(self, store):
        catalog = FakeCatalog({"Reserva": [
            make_record(1, "Reserva", winery="Other", country="Argentina"),
            make_record(2, "Reserva", winery="Casa Silva Estates", country="Chile"),
        ]})
        record = ImportReconciler(catalog, store).match_row("Reserva", winery="casa silva", country="Argentina")
        assert record.id == 2

    def test_country_fallback(self, store):
        catalog = FakeCatalog({"Reserva": [
            make_record(1, "Reserva", country="Chile"),
            make_record(2, "Reserva Especial", country="Argentina"),
        ]})
        record = ImportReconciler(catalog, store).match_row("Reserva", country="argentina")
        assert record.id == 2

    def test_winery_search(self, store):
        catalog = FakeCatalog({
            "Gran Cuvee": [make_record(1, "Other", winery="X")],
            "Bodega Y": [make_record(5, "Gran Cuvee Reserve", winery="Bodega Y Estates")],
        })
        record = ImportReconciler(catalog, store).match_row("Gran Cuvee", winery="Bodega Y")
        assert record.id == 5
        assert catalog.queries == [("Gran Cuvee", 20), ("Bodega Y", 50)]

    def test_top_hit_needs_name_overlap(self, store):
        catalog = FakeCatalog({
            "Malbec": [make_record(1, "Catena Zapata")],
            "Opus": [make_record(2, "Opus One")],
        })
        reconciler = ImportReconciler(catalog, store)
        assert reconciler.match_row("Malbec") is None
        assert reconciler.match_row("Opus").id == 2

    def test_blank_winery_skips_winery_search(self, store):
        catalog = FakeCatalog()
        ImportReconciler(catalog, store).match_row("Nothing", winery="")
        assert catalog.queries == [("Nothing", 20)]

    def test_catalog_failure_is_no_match(self, store):
        catalog = FakeCatalog(fail=True)
        assert ImportReconciler(catalog, store).match_row("Test Wine", "Test Winery") is None
        assert catalog.queries == [("Test Wine", 20), ("Test Winery", 50)]


class TestImportRatings:

    def test_round_trip(self, reconciler, store):
        csv_text = HEADER + "Test Winery,Test Wine,2019,Mendoza,Argentina,4.5,3.9\n"

        result = reconciler.import_ratings(csv_text)

        assert result.to_dict() == {
            "total_rows": 1,
            "matched_wines": 1,
            "imported_ratings": 1,
            "skipped_duplicates": 0,
            "errors": [],
        }
        wine = store.find_by_name_and_vintage("Test Wine", 2019)
        assert wine.average_rating == 3.9
        assert wine.winery == "Test Winery"
        assert wine.catalog_id is not None
        assert len(wine.ratings) == 1
        assert wine.ratings[0].rating == 4.5
        assert wine.ratings[0].notes == "Imported"
        assert wine.ratings[0].vintage == 2019

    def test_second_import_is_duplicate(self, reconciler):
        csv_text = HEADER + "Test Winery,Test Wine,2019,Mendoza,Argentina,4.5,3.9\n"
        reconciler.import_ratings(csv_text)
        result = reconciler.import_ratings(csv_text)
        assert result.imported_ratings == 0
        assert result.skipped_duplicates == 1
        assert result.matched_wines == 1

    def test_error_notes(self, reconciler):
        csv_text = HEADER + (
            "Nobody Winery,Nonexistent Cuvee,2020,,,4.0,\n"
            ",Imaginary Red,,,,3.0,\n"
            "Caymus Vineyards,Caymus Cabernet Sauvignon,2021,Napa Valley,United States,,4.4\n"
            "Cloudy Bay,Cloudy Bay Sauvignon Blanc,2022,Marlborough,New Zealand,0,4.1\n"
        )
        result = reconciler.import_ratings(csv_text)

        assert result.total_rows == 4
        assert result.matched_wines == 2
        assert result.imported_ratings == 0
        assert result.errors == [
            "Nonexistent Cuvee - Nobody Winery (not found)",
            "Imaginary Red - unknown winery (not found)",
            "Caymus Cabernet Sauvignon - no rating value",
            "Cloudy Bay Sauvignon Blanc - no rating value",
        ]

    def test_blank_name_counted_not_processed(self, reconciler):
        result = reconciler.import_ratings(HEADER + "Test Winery,,2019,,,4.0,\n")
        assert result.total_rows == 1
        assert result.matched_wines == 0
        assert result.errors == []

    def test_rating_capped_at_five(self, reconciler, store):
        reconciler.import_ratings(HEADER + "Opus One Winery,Opus One,,,,7,\n")
        wine = store.find_by_name_and_vintage("Opus One", 2018)
        assert wine.ratings[0].rating == 5.0
        # Vintage falls back to the catalog record
        assert wine.ratings[0].vintage == 2018
        assert wine.average_rating == 4.6

    def test_empty_file(self, reconciler):
        assert reconciler.import_ratings("").errors == ["Empty file"]
        assert reconciler.import_ratings("\n\n").errors == ["Empty file"]

    def test_missing_name_column(self, reconciler):
        result = reconciler.import_ratings("Winery,Rating\nCaymus,4\n")
        assert result.errors == ["Could not find wine name column"]
        assert result.total_rows == 0

    def test_bom_and_quoted_fields(self, reconciler):
        csv_text = "\ufeff" + HEADER + '"Caymus Vineyards","Caymus Cabernet Sauvignon",2021,"Napa Valley, CA",,4.2,\n'
        result = reconciler.import_ratings(csv_text)
        assert result.imported_ratings == 1

    def test_average_column_not_used_as_rating(self, reconciler):
        csv_text = "Wine name,Average rating\nTest Wine,3.9\n"
        result = reconciler.import_ratings(csv_text)
        assert result.errors == ["Test Wine - no rating value"]

    def test_catalog_failure_reported_per_row(self, store):
        csv_text = HEADER + (
            "Test Winery,Test Wine,2019,Mendoza,Argentina,4.5,3.9\n"
            ",Other Wine,,,,4.0,\n"
        )
        result = ImportReconciler(FakeCatalog(fail=True), store).import_ratings(csv_text)
        assert result.total_rows == 2
        assert result.matched_wines == 0
        assert result.errors == [
            "Test Wine - Test Winery (not found)",
            "Other Wine - unknown winery (not found)",
        ]
        assert store.list_wines() == []
