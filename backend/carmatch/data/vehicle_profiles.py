"""
Static profile table for common Brazilian-market models.

Each profile gives the model's canonical category, market segment and typical
price range (BRL). The table feeds the fallback chain with a price anchor and a
category when the requested model is not in stock. Unknown models fall back to
DEFAULT_PRICE_RANGE / DEFAULT_CATEGORY so every tier still has an anchor.

Adding a model is a data change: append a row to _PROFILE_ROWS.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

from carmatch.utils.category_normalizer import DEFAULT_CATEGORY
from carmatch.utils.vehicle_normalizer import normalize_model_name

Segment = Literal["entry", "compact", "midsize", "fullsize", "premium"]


@dataclass(frozen=True)
class PriceRange:
    min: float
    max: float

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


@dataclass(frozen=True)
class VehicleProfile:
    model: str  # normalized key
    category: str
    segment: Segment
    typical_price_range: PriceRange


DEFAULT_PRICE_RANGE = PriceRange(80_000, 120_000)

# (key, category, segment, min price, max price)
_PROFILE_ROWS: tuple[tuple[str, str, Segment, int, int], ...] = (
    # Sedans - midsize
    ("civic", "sedan", "midsize", 100_000, 180_000),
    ("corolla", "sedan", "midsize", 110_000, 190_000),
    ("cruze", "sedan", "midsize", 90_000, 150_000),
    ("sentra", "sedan", "midsize", 100_000, 160_000),
    ("jetta", "sedan", "midsize", 130_000, 200_000),
    # Sedans - compact
    ("virtus", "sedan", "compact", 80_000, 130_000),
    ("cronos", "sedan", "compact", 75_000, 120_000),
    ("hb20s", "sedan", "compact", 75_000, 115_000),
    ("prisma", "sedan", "compact", 70_000, 100_000),
    ("voyage", "sedan", "compact", 65_000, 95_000),
    ("city", "sedan", "compact", 90_000, 140_000),
    ("versa", "sedan", "compact", 85_000, 130_000),
    # SUVs - midsize
    ("compass", "suv", "midsize", 140_000, 220_000),
    ("tiguan", "suv", "midsize", 160_000, 250_000),
    ("crv", "suv", "midsize", 180_000, 280_000),
    ("rav4", "suv", "midsize", 200_000, 300_000),
    ("taos", "suv", "midsize", 150_000, 200_000),
    # SUVs - compact
    ("creta", "suv", "compact", 100_000, 160_000),
    ("tracker", "suv", "compact", 100_000, 150_000),
    ("tcross", "suv", "compact", 110_000, 160_000),
    ("kicks", "suv", "compact", 100_000, 150_000),
    ("hrv", "suv", "compact", 120_000, 180_000),
    ("renegade", "suv", "compact", 110_000, 170_000),
    ("duster", "suv", "compact", 90_000, 140_000),
    ("captur", "suv", "compact", 100_000, 150_000),
    ("ecosport", "suv", "compact", 90_000, 130_000),
    ("pulse", "suv", "compact", 90_000, 140_000),
    ("fastback", "suv", "compact", 100_000, 150_000),
    ("nivus", "suv", "compact", 100_000, 150_000),
    # Hatches - compact
    ("onix", "hatch", "compact", 70_000, 100_000),
    ("hb20", "hatch", "compact", 70_000, 100_000),
    ("polo", "hatch", "compact", 75_000, 110_000),
    ("argo", "hatch", "compact", 70_000, 100_000),
    ("gol", "hatch", "compact", 60_000, 85_000),
    ("sandero", "hatch", "compact", 70_000, 100_000),
    ("ka", "hatch", "compact", 60_000, 85_000),
    ("fit", "hatch", "compact", 80_000, 120_000),
    ("yaris", "hatch", "compact", 85_000, 120_000),
    ("fox", "hatch", "compact", 55_000, 80_000),
    # Hatches - entry
    ("mobi", "hatch", "entry", 50_000, 70_000),
    ("kwid", "hatch", "entry", 55_000, 75_000),
    ("up", "hatch", "entry", 55_000, 75_000),
    # Pickups - fullsize
    ("hilux", "pickup", "fullsize", 180_000, 300_000),
    ("s10", "pickup", "fullsize", 160_000, 280_000),
    ("ranger", "pickup", "fullsize", 170_000, 290_000),
    ("amarok", "pickup", "fullsize", 180_000, 320_000),
    ("frontier", "pickup", "fullsize", 170_000, 280_000),
    # Pickups - midsize / compact
    ("toro", "pickup", "midsize", 120_000, 180_000),
    ("strada", "pickup", "compact", 80_000, 130_000),
    ("saveiro", "pickup", "compact", 75_000, 110_000),
    ("montana", "pickup", "compact", 85_000, 130_000),
    ("oroch", "pickup", "compact", 90_000, 130_000),
    # Minivans
    ("spin", "minivan", "compact", 90_000, 130_000),
    ("livina", "minivan", "compact", 70_000, 100_000),
)

VEHICLE_PROFILES = MappingProxyType(
    {
        key: VehicleProfile(
            model=key,
            category=category,
            segment=segment,
            typical_price_range=PriceRange(low, high),
        )
        for key, category, segment, low, high in _PROFILE_ROWS
    }
)


def get_vehicle_profile(model: str | None) -> VehicleProfile | None:
    """
    Look up a model's profile.

    Direct key match on the normalized name first, then substring containment
    in either direction so "hb 20 s" and "Onix Plus" still resolve.
    """
    key = normalize_model_name(model)
    if not key:
        return None

    profile = VEHICLE_PROFILES.get(key)
    if profile:
        return profile

    for profile_key, candidate in VEHICLE_PROFILES.items():
        if profile_key in key or key in profile_key:
            return candidate

    return None


def get_typical_price_range(model: str | None) -> PriceRange:
    profile = get_vehicle_profile(model)
    return profile.typical_price_range if profile else DEFAULT_PRICE_RANGE


def get_model_category(model: str | None) -> str:
    profile = get_vehicle_profile(model)
    return profile.category if profile else DEFAULT_CATEGORY


def estimate_reference_price(model: str | None) -> float:
    """Midpoint of the model's typical price range, rounded to whole currency units."""
    return float(round(get_typical_price_range(model).midpoint))
