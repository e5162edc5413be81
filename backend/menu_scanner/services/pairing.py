"""
Food pairing suggestions for wines.

Tier 1: The wine's own catalog pairings.
Tier 2: Variety lookup table, then wine type fallback.
"""

from typing import Optional

from ..models.domain import Wine

VARIETY_PAIRINGS: dict[str, tuple[str, ...]] = {
    "cabernet sauvignon": ("Beef", "Lamb", "Aged cheese"),
    "cabernet franc": ("Pork", "Roasted vegetables", "Goat cheese"),
    "merlot": ("Roast chicken", "Mushrooms", "Pasta"),
    "malbec": ("Grilled steak", "Empanadas", "Blue cheese"),
    "carmenere": ("Grilled meats", "Roasted peppers", "Beans"),
    "syrah": ("Smoked meats", "Stew", "BBQ"),
    "shiraz": ("Smoked meats", "Stew", "BBQ"),
    "petit verdot": ("Lamb", "Game", "Dark chocolate"),
    "tannat": ("Beef", "Cured meats", "Hard cheese"),
    "mourvedre": ("Grilled meats", "Stew", "Hard cheese"),
    "tempranillo": ("Tapas", "Chorizo", "Manchego"),
    "sangiovese": ("Tomato pasta", "Pizza", "Salami"),
    "grenache": ("Roasted vegetables", "Lamb", "Mediterranean dishes"),
    "garnacha": ("Roasted vegetables", "Lamb", "Mediterranean dishes"),
    "zinfandel": ("Burgers", "Pizza", "BBQ"),
    "primitivo": ("Burgers", "Pizza", "BBQ"),
    "barbera": ("Tomato pasta", "Pizza", "Grilled meats"),
    "pinot noir": ("Salmon", "Duck", "Mushrooms"),
    "gamay": ("Charcuterie", "Poultry", "Soft cheese"),
    "nebbiolo": ("Truffles", "Braised meat", "Risotto"),
    "chardonnay": ("Lobster", "Creamy pasta", "Roast chicken"),
    "viognier": ("Rich fish", "Mild curry", "Apricot dishes"),
    "semillon": ("Roast chicken", "Rich seafood", "Foie gras"),
    "sauvignon blanc": ("Goat cheese", "Shellfish", "Salads"),
    "pinot grigio": ("Light fish", "Sushi", "Antipasto"),
    "pinot gris": ("Light fish", "Sushi", "Antipasto"),
    "albarino": ("Ceviche", "Shrimp", "Paella"),
    "vermentino": ("Seafood", "Pesto", "Salads"),
    "gruner veltliner": ("Schnitzel", "Asian food", "White fish"),
    "muscadet": ("Oysters", "Mussels", "Light seafood"),
    "riesling": ("Spicy food", "Pork", "Thai food"),
    "gewurztraminer": ("Asian food", "Foie gras", "Spicy food"),
    "torrontes": ("Ceviche", "Sushi", "Light salads"),
    "moscato": ("Fruit desserts", "Spicy food", "Brunch"),
}

WINE_TYPE_PAIRINGS: dict[str, tuple[str, ...]] = {
    "red": ("Red meat", "Aged cheese", "Hearty dishes"),
    "white": ("Seafood", "Poultry", "Light dishes"),
    "rosé": ("Salads", "Appetizers", "Grilled fish"),
    "rose": ("Salads", "Appetizers", "Grilled fish"),
    "sparkling": ("Appetizers", "Oysters", "Fried food"),
    "dessert": ("Fruit tarts", "Blue cheese", "Dark chocolate"),
    "fortified": ("Nuts", "Aged cheese", "Dark chocolate"),
}

# Menu and catalog spellings that differ from the table keys
_ACCENT_FOLDS = str.maketrans("éèüñáíó", "eeunaio")


def _normalize(value: str) -> str:
    return value.strip().lower().translate(_ACCENT_FOLDS)


class PairingService:
    """Food pairing lookup. Wine's own pairings first, then variety, then wine type."""

    def get_pairings(self, wine: Wine) -> list[str]:
        """Return pairing suggestions, or [] if nothing is known."""
        if wine.food_pairings:
            return list(wine.food_pairings)
        return list(self.lookup(wine.grape_variety, wine.wine_type))

    def lookup(self, variety: Optional[str], wine_type: Optional[str]) -> tuple[str, ...]:
        if variety:
            result = VARIETY_PAIRINGS.get(_normalize(variety))
            if result:
                return result

        if wine_type:
            result = WINE_TYPE_PAIRINGS.get(wine_type.strip().lower())
            if result:
                return result

        return ()
