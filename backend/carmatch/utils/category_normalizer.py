"""
Body-type normalization into a closed set of canonical categories.

Inventory feeds describe body types in free text ("Sedã", "SUV compacto",
"Picape cabine dupla"). Every comparison in the engine goes through
normalize_category() so that all of these land on one of CANONICAL_CATEGORIES.
"""

from types import MappingProxyType

CANONICAL_CATEGORIES: tuple[str, ...] = ("sedan", "suv", "hatch", "pickup", "minivan")

# Returned for empty input and used wherever a category is required but unknown
DEFAULT_CATEGORY = "hatch"

# Synonym -> canonical category (Portuguese and English variants)
CATEGORY_SYNONYMS = MappingProxyType(
    {
        # Sedan
        "sedan": "sedan",
        "sedã": "sedan",
        "seda": "sedan",
        "fastback": "sedan",
        # SUV
        "suv": "suv",
        "utilitario": "suv",
        "utilitário": "suv",
        "crossover": "suv",
        "jipe": "suv",
        "jeep": "suv",
        # Hatch
        "hatch": "hatch",
        "hatchback": "hatch",
        "compacto": "hatch",
        # Pickup
        "pickup": "pickup",
        "picape": "pickup",
        "pick-up": "pickup",
        "caminhonete": "pickup",
        "cabine": "pickup",
        # Minivan
        "minivan": "minivan",
        "van": "minivan",
        "monovolume": "minivan",
        "mpv": "minivan",
    }
)


def normalize_category(raw_body_type: str | None) -> str:
    """
    Map a raw body-type string to its canonical category.

    1. Direct lookup of the lowercased, trimmed input.
    2. Substring containment in either direction against every synonym
       ("cabine dupla" contains "cabine").
    3. Otherwise the normalized input is returned unchanged.
    """
    if not raw_body_type or not raw_body_type.strip():
        return DEFAULT_CATEGORY

    normalized = raw_body_type.lower().strip()

    direct = CATEGORY_SYNONYMS.get(normalized)
    if direct:
        return direct

    for synonym, category in CATEGORY_SYNONYMS.items():
        if synonym in normalized or normalized in synonym:
            return category

    return normalized
