"""
Grape variety style groups and similarity scoring.

Varieties are partitioned into style families. Two varieties in the same
family score 0.6, two of the same color score 0.3, anything else 0.0.
Membership uses substring matching in both directions so compound names
like "Cabernet Sauvignon Blend" still resolve.
"""

from typing import Optional

from ..config import Config


FULL_BODIED_REDS = (
    "carmenere", "malbec", "syrah", "shiraz", "cabernet sauvignon", "cabernet franc",
    "petit verdot", "tannat", "mourvedre", "petite sirah",
)
MEDIUM_BODIED_REDS = (
    "merlot", "tempranillo", "sangiovese", "grenache", "zinfandel", "primitivo",
    "barbera", "dolcetto",
)
LIGHT_BODIED_REDS = ("pinot noir", "gamay", "nebbiolo", "zweigelt")
FULL_BODIED_WHITES = ("chardonnay", "viognier", "roussanne", "marsanne", "semillon")
CRISP_WHITES = (
    "sauvignon blanc", "pinot grigio", "pinot gris", "albarino", "vermentino",
    "gruner veltliner", "muscadet",
)
AROMATIC_WHITES = ("riesling", "gewurztraminer", "torrontes", "muscat", "moscato")
ROSE_STYLES = ("rose", "rosé", "rosado")

STYLE_GROUPS: dict[str, tuple[str, ...]] = {
    "full-bodied reds": FULL_BODIED_REDS,
    "medium-bodied reds": MEDIUM_BODIED_REDS,
    "light-bodied reds": LIGHT_BODIED_REDS,
    "full-bodied whites": FULL_BODIED_WHITES,
    "light whites": CRISP_WHITES,
    "aromatic whites": AROMATIC_WHITES,
    "rosé styles": ROSE_STYLES,
}

RED_VARIETIES = FULL_BODIED_REDS + MEDIUM_BODIED_REDS + LIGHT_BODIED_REDS
WHITE_VARIETIES = FULL_BODIED_WHITES + CRISP_WHITES + AROMATIC_WHITES


def _in_group(variety: str, group: tuple[str, ...]) -> bool:
    """Substring match in either direction against every term of the group."""
    if not variety.strip():
        return False
    return any(term in variety or variety in term for term in group)


def style_group(variety: str) -> Optional[str]:
    """Name of the first style group containing the variety, if any."""
    lowered = variety.lower()
    for name, group in STYLE_GROUPS.items():
        if _in_group(lowered, group):
            return name
    return None


def similarity(a: str, b: str) -> float:
    """
    Similarity between two grape varieties in [0, 1].

    1.0 for case-insensitive equality, 0.6 when some style group contains
    both, 0.3 when both are reds or both are whites, otherwise 0.0.
    """
    rated = a.lower()
    target = b.lower()

    if rated == target:
        return Config.SIMILARITY_EXACT

    for group in STYLE_GROUPS.values():
        if _in_group(rated, group) and _in_group(target, group):
            return Config.SIMILARITY_SAME_GROUP

    both_red = _in_group(rated, RED_VARIETIES) and _in_group(target, RED_VARIETIES)
    both_white = _in_group(rated, WHITE_VARIETIES) and _in_group(target, WHITE_VARIETIES)
    if both_red or both_white:
        return Config.SIMILARITY_SAME_COLOR

    return 0.0


def is_red(variety: Optional[str], wine_type: Optional[str] = None) -> bool:
    """Red if the explicit type says so; without a type, fall back to the variety."""
    # A blank type counts as absent, so the variety decides
    if wine_type:
        return wine_type.lower() == "red"
    if variety is None:
        return False
    return _in_group(variety.lower(), RED_VARIETIES)


def is_white(variety: Optional[str], wine_type: Optional[str] = None) -> bool:
    """White if the explicit type says so; without a type, fall back to the variety."""
    # Blank type: same fallback as is_red
    if wine_type:
        return wine_type.lower() == "white"
    if variety is None:
        return False
    return _in_group(variety.lower(), WHITE_VARIETIES)
