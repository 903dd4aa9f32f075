"""Shared fixtures: parties, a funded vault and a house on a manual clock."""

import pytest

from rda.core.auction import AssetKind, AuctionParams, DutchAuctionHouse
from rda.core.clock import ManualClock
from rda.core.custody import InMemoryVault
from rda.core.pricing import SCALE
from rda.crypto import address_from_label

START_TIME = 1_000


@pytest.fixture
def alice():
    """Auctioneer."""
    return address_from_label("alice")


@pytest.fixture
def bob():
    return address_from_label("bob")


@pytest.fixture
def carol():
    return address_from_label("carol")


@pytest.fixture
def art():
    return address_from_label("collection.art")


@pytest.fixture
def usd():
    return address_from_label("token.usd")


@pytest.fixture
def vault(alice, bob, art, usd):
    """Alice owns art #7 (approved for custody); Bob holds 1000 USD (approved)."""
    vault = InMemoryVault()
    vault.mint_nft(art, 7, alice)
    vault.approve_nft(art, 7, alice)
    vault.mint(usd, bob, 1_000 * SCALE)
    vault.approve(usd, bob, 1_000 * SCALE)
    return vault


@pytest.fixture
def clock():
    return ManualClock(start=START_TIME)


@pytest.fixture
def house(vault, clock):
    return DutchAuctionHouse(custody=vault, clock=clock)


@pytest.fixture
def params(alice, art, usd):
    """100 USD halving every second toward 0 over two minutes."""
    return AuctionParams(
        name="Sunset #7",
        description="One of one",
        image_ref="ipfs://sunset-7",
        auctioneer=alice,
        asset_kind=AssetKind.NON_FUNGIBLE,
        asset_ref=art,
        asset_id_or_amount=7,
        settlement_token=usd,
        starting_price=100 * SCALE,
        reserved_price=0,
        decay_rate=100_000,
        duration=120,
    )
