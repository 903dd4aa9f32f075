"""
Decay Curve - fixed-point exponential decay for auction pricing.

Conceptual Background:
---------------------
The price of an auction falls by half for every unit of scaled elapsed
time, i.e. it follows ``2^-k``. Exact real-valued exponentiation is not
available in integer arithmetic, so the curve is approximated:

1. **Table**: ``DECAY_TABLE[0] = SCALE`` and each later entry is the
   previous one halved, rounded half up, for ``k = 0..60``. Generated
   once at import time.
2. **Interpolation**: between two integer steps the curve is a straight
   line between adjacent table entries.

Input units:
-----------
``x = elapsed_seconds * decay_rate``. A decay rate of ``DECAY_UNIT``
(100_000) means one halving per second, so one table step is ``x``
advancing by ``DECAY_UNIT``. Past ``TABLE_SIZE * DECAY_UNIT`` the curve
is fully decayed and evaluates to 0.

The result is non-increasing in ``x`` and exact at integer steps. It is
an approximation of the continuous curve and is reproduced as such.
"""

from typing import Tuple

# =============================================================================
# Constants
# =============================================================================

SCALE = 10**18          # Fixed-point one (18 decimals)
DECAY_UNIT = 10**5      # Scaled units per table step
TABLE_SIZE = 61         # Entries for k = 0..60

DECAY_HORIZON = TABLE_SIZE * DECAY_UNIT


def _build_table(size: int) -> Tuple[int, ...]:
    """SCALE, then repeated halving (half rounded up) for k in [1, size)."""
    table = [SCALE]
    for _ in range(1, size):
        table.append((table[-1] + 1) // 2)
    return tuple(table)


DECAY_TABLE: Tuple[int, ...] = _build_table(TABLE_SIZE)


# =============================================================================
# Curve
# =============================================================================


def decay_multiplier(x: int) -> int:
    """
    Fixed-point multiplier in [0, SCALE] after ``x`` scaled units of decay.

    Args:
        x: elapsed_seconds * decay_rate (non-negative)

    Returns:
        Multiplier scaled by SCALE
    """
    if x < 0:
        raise ValueError(f"Decay input must be non-negative, got {x}")

    if x >= DECAY_HORIZON:
        return 0

    index, remainder = divmod(x, DECAY_UNIT)
    upper = DECAY_TABLE[index]
    if remainder == 0:
        return upper

    lower = DECAY_TABLE[index + 1] if index + 1 < TABLE_SIZE else 0
    return upper - (upper - lower) * remainder // DECAY_UNIT
