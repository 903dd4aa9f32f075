"""
Pricing - current price of an auction from its decay parameters.

    price = reserved + (starting - reserved) * decay_multiplier(x) / SCALE
    x     = (now - created_at) * decay_rate

Guarantees while an auction is active: the price lies in
[reserved_price, starting_price], equals starting_price at creation and
never increases as time advances.
"""

from rda.core.errors import AuctionEnded
from rda.core.pricing.decay import SCALE, decay_multiplier
from rda.utils.logger import get_logger

logger = get_logger("pricing")


def decayed_price(record, now: int) -> int:
    """
    Price given by the decay formula alone.

    No deadline or settlement check; ``now`` earlier than creation is
    treated as creation time.
    """
    elapsed = max(0, now - record.created_at)
    multiplier = decay_multiplier(elapsed * record.decay_rate)
    spread = record.starting_price - record.reserved_price
    return record.reserved_price + spread * multiplier // SCALE


def current_price(record, now: int) -> int:
    """
    Current price of an auction.

    Args:
        record: AuctionRecord to price
        now: Current time in seconds

    Returns:
        The price, or 0 once the deadline has passed

    Raises:
        AuctionEnded: the auction is already settled
    """
    if record.settled:
        raise AuctionEnded(record.auction_id, "price is undefined after settlement")

    if now >= record.deadline:
        return 0

    price = decayed_price(record, now)
    logger.debug(f"Auction {record.auction_id}: price={price} at t={now}")
    return price
