"""Reverse Dutch auction records and settlement"""
from rda.core.auction.record import (
    AssetKind,
    AuctionStatus,
    AuctionParams,
    AuctionRecord,
)
from rda.core.auction.events import (
    AuctionCreated,
    ItemWithdrawn,
    FundsWithdrawn,
    EventLog,
    event_to_dict,
)
from rda.core.auction.repository import AuctionRepository
from rda.core.auction.house import Claim, DutchAuctionHouse

__all__ = [
    "AssetKind",
    "AuctionStatus",
    "AuctionParams",
    "AuctionRecord",
    "AuctionCreated",
    "ItemWithdrawn",
    "FundsWithdrawn",
    "EventLog",
    "event_to_dict",
    "AuctionRepository",
    "Claim",
    "DutchAuctionHouse",
]
