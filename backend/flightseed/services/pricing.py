"""
Three-tier fare derivation.

Each tier starts from a multiple of the tier below plus a non-negative
jitter, so economy < business < first holds for every draw.
"""

import math

from ..models import BasePriceModel
from .random_source import RandomSource

BUSINESS_MULTIPLIER = 2.5
FIRST_MULTIPLIER = 1.8


def derive_base_price(rng: RandomSource) -> BasePriceModel:
    """Draw an economy/business/first base price for one flight."""
    economy = math.floor(rng.uniform(100, 400))
    business = math.floor(economy * BUSINESS_MULTIPLIER + rng.uniform(0, 200))
    first = math.floor(business * FIRST_MULTIPLIER + rng.uniform(0, 500))
    return BasePriceModel(economy=economy, business=business, first=first)
