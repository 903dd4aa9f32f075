"""Decay curve and auction pricing"""
from rda.core.pricing.decay import (
    SCALE,
    DECAY_UNIT,
    TABLE_SIZE,
    DECAY_HORIZON,
    DECAY_TABLE,
    decay_multiplier,
)
from rda.core.pricing.price import current_price, decayed_price

__all__ = [
    "SCALE",
    "DECAY_UNIT",
    "TABLE_SIZE",
    "DECAY_HORIZON",
    "DECAY_TABLE",
    "decay_multiplier",
    "current_price",
    "decayed_price",
]
