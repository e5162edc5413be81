from .text_recognizer import MockTextRecognizer, VisionTextRecognizer
from .menu_classifier import MenuTextClassifier
from .wine_catalog import WineCatalog
from .wine_store import WineStore
from .wine_matcher import WineMatcher
from .recommender import ScanService

__all__ = [
    "MockTextRecognizer",
    "VisionTextRecognizer",
    "MenuTextClassifier",
    "WineCatalog",
    "WineStore",
    "WineMatcher",
    "ScanService",
]
