"""
Menu OCR text classification: wine entries vs. noise.

Menus are bilingual, priced and multi-column, so the cascade favors
precision. A line is rejected at the first matching rule and only
accepted when it carries a positive signal (estate keyword, vintage
year, or "Winery, Wine" comma). Grape-variety section headers are not
emitted; they tag the entries that follow them.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from ..config import Config
from ..models.domain import MenuEntry
from ..models.enums import LineOutcome

logger = logging.getLogger(__name__)


# Menu section labels and boilerplate (Spanish/English)
NOISE_PHRASES = (
    # Spanish menu terms
    "otros tintos", "otros blancos", "medias botellas", "por copa", "tintos por copa",
    "blancos por copa", "vinos tintos", "vinos blancos", "espumantes", "postres",
    "carta de vinos", "nuestra selección", "selección de", "media botella",
    # English menu terms
    "by the glass", "red wines", "white wines", "sparkling wines", "dessert wines",
    "wine list", "our selection", "half bottle", "bottle", "glass",
    # Food sections
    "appetizers", "entradas", "principales", "main courses", "desserts",
    # Websites and social
    ".com", ".net", ".org", "www.", "http", "foodsherpas", "instagram", "facebook",
)

# Price formats across currencies
PRICE_PATTERNS = (
    re.compile(r"^\$\s*\d+"),           # $50, $ 50
    re.compile(r"^\d+\s*\$"),           # 50$
    re.compile(r"^S\s*[\d,.]+$"),       # S 28,500 (Sol)
    re.compile(r"^S/\s*[\d,.]+$"),      # S/ 28,500
    re.compile(r"^\d+[.,]\d{3}$"),      # 28,500 or 28.500
    re.compile(r"^[\d,.]+\s*€"),        # 50 €
    re.compile(r"^€\s*[\d,.]+"),        # €50
    re.compile(r"^\d+\.\d{2}$"),        # 50.00
    re.compile(r"^E\s*[\d,.]+$"),       # E 38,000
    re.compile(r"^[A-Z]\s*[\d,.]+$"),   # Single letter currency + number
)

# Grape varieties: exact-line section headers and the context they set
GRAPE_VARIETIES = frozenset({
    "cabernet sauvignon", "cabernet franc", "cabernet", "merlot",
    "pinot noir", "pinot grigio", "pinot gris", "pinot",
    "chardonnay", "sauvignon blanc", "sauvignon",
    "syrah", "shiraz", "riesling", "malbec", "zinfandel",
    "carmenere", "carménère", "carmenère",
    "tempranillo", "sangiovese", "garnacha", "grenache",
    "cinsault", "cinsaut", "mourvèdre", "mourvedre",
    "pais", "país", "viognier", "gewürztraminer", "gewurztraminer",
    "semillon", "sémillon", "muscat", "moscatel",
    "torrontés", "torrontes", "touriga nacional",
    "carignan", "petit verdot", "petit sirah", "petite sirah",
    "blanc", "rosé", "rose", "tinto", "blanco", "noir",
    "red blend", "white blend",
})

# Region names that appear alone as labels
REGION_NAMES = frozenset({
    # Chile
    "cachapoal", "colchagua", "maipo", "casablanca", "aconcagua",
    "cauquenes", "itata", "curicó", "curico", "rapel", "maule",
    "san antonio", "leyda", "limarí", "limari", "elqui", "bío-bío",
    "malleco", "marchigüe", "marchigue", "apalta", "millahue",
    "maipo andes", "central valley", "millahue cachapoal",
    # France
    "bordeaux", "burgundy", "bourgogne", "champagne", "rhône",
    "alsace", "loire", "provence", "languedoc", "roussillon",
    # Italy
    "tuscany", "toscana", "piedmont", "piemonte", "veneto", "sicily",
    # Spain
    "rioja", "ribera del duero", "priorat", "galicia", "penedès",
    # Argentina
    "mendoza", "salta", "patagonia", "uco valley",
    # USA
    "napa valley", "sonoma", "willamette", "paso robles",
})

# Winery/estate terms marking a wine entry (grape varieties are deliberately absent)
ENTRY_KEYWORDS = (
    "château", "chateau", "domaine", "estate", "vineyard", "winery",
    "reserve", "reserva", "gran reserva", "grand cru", "premier cru",
    "viña", "vina", "bodega", "finca", "clos", "casa", "quinta",
)

_YEAR_PATTERN = re.compile(r"\b(19|20)\d{2}\b")


@dataclass(frozen=True)
class LineClassification:
    """Outcome for one OCR line, with the variety context in effect."""
    text: str
    outcome: LineOutcome
    variety: Optional[str] = None

    @property
    def is_candidate(self) -> bool:
        return self.outcome is LineOutcome.CANDIDATE


def _is_price(text: str) -> bool:
    if "$" in text:
        return True
    return any(pattern.search(text) for pattern in PRICE_PATTERNS)


def _is_numeric(text: str) -> bool:
    return all(ch.isdigit() or ch.isspace() or ch in ",." for ch in text)


def _is_code(text: str) -> bool:
    """A single short token starting with a digit (price or item code)."""
    return len(text.split()) == 1 and len(text) < Config.MAX_CODE_LENGTH and text[0].isdigit()


def _has_entry_signal(text: str, lowered: str) -> bool:
    has_keyword = any(keyword in lowered for keyword in ENTRY_KEYWORDS)
    return has_keyword or bool(_YEAR_PATTERN.search(text)) or "," in text


class MenuTextClassifier:
    """Turns ordered OCR lines into deduplicated (name, variety) menu entries."""

    def classify_lines(self, lines: Iterable[str]) -> list[LineClassification]:
        """Classify every line in order, tracking section-header variety context."""
        results = []
        current_variety: Optional[str] = None

        for line in lines:
            text = line.strip()
            lowered = text.lower()

            if not Config.MIN_LINE_LENGTH <= len(text) <= Config.MAX_LINE_LENGTH:
                outcome = LineOutcome.LENGTH
            elif lowered in GRAPE_VARIETIES:
                current_variety = lowered
                outcome = LineOutcome.HEADER
            elif any(phrase in lowered for phrase in NOISE_PHRASES):
                outcome = LineOutcome.NOISE
            elif _is_price(text):
                outcome = LineOutcome.PRICE
            elif _is_numeric(text):
                outcome = LineOutcome.NUMERIC
            elif _is_code(text):
                outcome = LineOutcome.CODE
            elif lowered in REGION_NAMES:
                outcome = LineOutcome.REGION
            elif _has_entry_signal(text, lowered):
                outcome = LineOutcome.CANDIDATE
            else:
                outcome = LineOutcome.NO_INDICATOR

            variety = current_variety if outcome in (LineOutcome.CANDIDATE, LineOutcome.HEADER) else None
            results.append(LineClassification(text=text, outcome=outcome, variety=variety))

        return results

    def extract(self, lines: Iterable[str]) -> list[MenuEntry]:
        """
        Extract candidate wine entries from OCR lines.

        Entries are deduplicated by name only (case-insensitive); the first
        occurrence and its variety tag win.
        """
        entries = []
        seen: set[str] = set()

        for result in self.classify_lines(lines):
            if not result.is_candidate:
                continue
            key = result.text.lower()
            if key in seen:
                continue
            seen.add(key)
            entries.append(MenuEntry(name=result.text, variety=result.variety))

        logger.debug(f"Extracted {len(entries)} menu entries")
        return entries


def extract_menu_entries(lines: Iterable[str]) -> list[MenuEntry]:
    """Convenience wrapper around MenuTextClassifier.extract()."""
    return MenuTextClassifier().extract(lines)
