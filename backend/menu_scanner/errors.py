"""
Domain errors raised by the persistent store.

Matching and scoring never raise for missing evidence; they return None.
These errors cover lookups of ids that do not exist.
"""


class StoreError(Exception):
    """Base class for store lookup failures."""


class WineNotFoundError(StoreError):
    def __init__(self, wine_id: int):
        super().__init__(f"Wine {wine_id} not found")
        self.wine_id = wine_id


class RatingNotFoundError(StoreError):
    def __init__(self, rating_id: int):
        super().__init__(f"Rating {rating_id} not found")
        self.rating_id = rating_id


class ScanNotFoundError(StoreError):
    def __init__(self, scan_id: int):
        super().__init__(f"Scan {scan_id} not found")
        self.scan_id = scan_id
