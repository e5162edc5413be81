"""
Wine data import package.

Catalog bootstrap from the bundled CSV, local wine lists, and personal
rating exports reconciled against the catalog.
"""

from .protocols import CatalogImportStats, RatingImportResult, WineImportResult
from .catalog_import import CatalogImporter, WineImporter
from .reconciler import ImportReconciler

__all__ = [
    "CatalogImportStats",
    "RatingImportResult",
    "WineImportResult",
    "CatalogImporter",
    "WineImporter",
    "ImportReconciler",
]
