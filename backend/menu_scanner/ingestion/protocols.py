"""
Result records for wine imports.
"""

from dataclasses import dataclass, field


@dataclass
class RatingImportResult:
    """Outcome of importing a personal ratings CSV."""
    total_rows: int = 0
    matched_wines: int = 0
    imported_ratings: int = 0
    skipped_duplicates: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/API responses."""
        return {
            "total_rows": self.total_rows,
            "matched_wines": self.matched_wines,
            "imported_ratings": self.imported_ratings,
            "skipped_duplicates": self.skipped_duplicates,
            "errors": list(self.errors),
        }


@dataclass
class WineImportResult:
    """Outcome of importing wines into the local store."""
    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "errors": list(self.errors),
        }


@dataclass
class CatalogImportStats:
    """Statistics from a catalog bootstrap run."""
    source: str
    rows_read: int = 0
    rows_imported: int = 0
    rows_skipped: int = 0
    already_populated: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/storage."""
        return {
            "source": self.source,
            "rows_read": self.rows_read,
            "rows_imported": self.rows_imported,
            "rows_skipped": self.rows_skipped,
            "already_populated": self.already_populated,
        }
