"""
Unit tests for auction pricing.

Tests cover:
1. Starting price at creation
2. Worked example (halving per second)
3. Bounds and monotonicity while active
4. Deadline and settlement handling
5. Convergence to the reserve
"""

import pytest

from rda.core.auction import AssetKind, AuctionParams, AuctionRecord
from rda.core.errors import AuctionEnded
from rda.core.pricing import SCALE, current_price, decayed_price
from rda.crypto import address_from_label


def make_record(starting=100 * SCALE, reserved=0, decay_rate=100_000, duration=120, created_at=1_000):
    party = address_from_label("alice")
    params = AuctionParams(
        name="lot",
        description="",
        image_ref="",
        auctioneer=party,
        asset_kind=AssetKind.NON_FUNGIBLE,
        asset_ref=address_from_label("collection"),
        asset_id_or_amount=1,
        settlement_token=address_from_label("usd"),
        starting_price=starting,
        reserved_price=reserved,
        decay_rate=decay_rate,
        duration=duration,
    )
    return AuctionRecord.open(1, params, created_at)


class TestWorkedExample:
    """start=100, reserve=0, rate=1.0 (100000), duration=120."""

    def test_price_at_creation(self):
        record = make_record()
        assert current_price(record, 1_000) == 100 * SCALE

    def test_price_after_one_second(self):
        """One second is one full halving."""
        record = make_record()
        assert current_price(record, 1_001) == 50 * SCALE

    def test_price_after_two_seconds(self):
        record = make_record()
        assert current_price(record, 1_002) == 25 * SCALE

    def test_price_fully_decayed(self):
        """61 seconds reaches the horizon: price is the reserve (0)."""
        record = make_record()
        assert current_price(record, 1_061) == 0


class TestPriceBounds:
    """Tests for price invariants while active."""

    def test_within_bounds_and_non_increasing(self):
        """reserve <= price <= start, never rising."""
        record = make_record(starting=100 * SCALE, reserved=10 * SCALE, decay_rate=7_300, duration=3_600)
        previous = record.starting_price
        for now in range(1_000, 1_000 + 3_600, 13):
            price = current_price(record, now)
            assert record.reserved_price <= price <= record.starting_price
            assert price <= previous
            previous = price

    def test_converges_to_reserve(self):
        """Past the decay horizon the price is exactly the reserve."""
        record = make_record(starting=100 * SCALE, reserved=10 * SCALE)
        assert current_price(record, 1_061) == 10 * SCALE
        assert current_price(record, 1_119) == 10 * SCALE

    def test_short_duration_does_not_reach_reserve(self):
        """A slow curve can still be above the reserve at the deadline."""
        record = make_record(starting=100 * SCALE, reserved=10 * SCALE, decay_rate=1_000, duration=60)
        assert current_price(record, 1_059) > 10 * SCALE

    def test_zero_decay_rate_holds_price(self):
        """With no decay the price stays at the start until the deadline."""
        record = make_record(decay_rate=0)
        assert current_price(record, 1_100) == 100 * SCALE

    def test_equal_start_and_reserve(self):
        """A flat auction is priced at the reserve throughout."""
        record = make_record(starting=5 * SCALE, reserved=5 * SCALE)
        assert current_price(record, 1_000) == 5 * SCALE
        assert current_price(record, 1_030) == 5 * SCALE


class TestDeadlineAndSettlement:
    """Tests for terminal conditions."""

    def test_zero_at_deadline(self):
        """Price is 0 once the deadline is reached."""
        record = make_record(reserved=10 * SCALE)
        assert current_price(record, record.deadline) == 0
        assert current_price(record, record.deadline + 500) == 0

    def test_settled_raises(self):
        """Price is undefined after settlement."""
        record = make_record()
        record.settled = True
        with pytest.raises(AuctionEnded):
            current_price(record, 1_000)

    def test_decayed_price_ignores_deadline(self):
        """The bare formula keeps decaying past the deadline."""
        record = make_record(reserved=10 * SCALE, decay_rate=1_000, duration=60)
        assert decayed_price(record, record.deadline) > 10 * SCALE

    def test_decayed_price_before_creation(self):
        """Times before creation price as the start."""
        record = make_record()
        assert decayed_price(record, 0) == record.starting_price
