"""
Auction Record - the state of a single reverse Dutch auction.

Lifecycle:
---------
    Created -> Active --(claim)--> Settled --(withdraw)--> Drained
                  |
                  +--(deadline)--> Expired (reclaimable by auctioneer only)

A record is created once and mutated in place; it is never deleted.
``winner``, ``escrowed_funds`` and ``settled`` are written together by the
claim step and never change again, except that withdrawal zeroes
``escrowed_funds`` once.
"""

from dataclasses import asdict, dataclass, replace
from enum import Enum, IntEnum
from typing import Any, Dict

from rda.crypto import bytes_to_hex, hex_to_bytes


class AssetKind(IntEnum):
    """Kind of asset put up for auction"""
    NON_FUNGIBLE = 0    # asset_id_or_amount is a token id
    FUNGIBLE = 1        # asset_id_or_amount is an amount


class AuctionStatus(Enum):
    """Derived lifecycle state of a record at a point in time"""
    ACTIVE = "active"
    EXPIRED = "expired"
    SETTLED = "settled"
    DRAINED = "drained"


@dataclass(frozen=True)
class AuctionParams:
    """Creation parameters for an auction."""
    name: str
    description: str
    image_ref: str
    auctioneer: bytes
    asset_kind: AssetKind
    asset_ref: bytes                # Collection or token contract address
    asset_id_or_amount: int
    settlement_token: bytes
    starting_price: int             # Fixed-point, 18 decimals
    reserved_price: int             # Fixed-point, 18 decimals
    decay_rate: int                 # Scaled by DECAY_UNIT (1e5 = one halving per second)
    duration: int                   # Seconds

    @property
    def is_fungible(self) -> bool:
        return self.asset_kind == AssetKind.FUNGIBLE


@dataclass
class AuctionRecord:
    """
    One auction, keyed by ``auction_id``.

    ``winner`` starts as the auctioneer, meaning "unclaimed".
    """
    auction_id: int
    name: str
    description: str
    image_ref: str
    auctioneer: bytes
    asset_kind: AssetKind
    asset_ref: bytes
    asset_id_or_amount: int
    settlement_token: bytes
    starting_price: int
    reserved_price: int
    decay_rate: int
    created_at: int
    deadline: int
    escrowed_funds: int = 0
    winner: bytes = b""
    settled: bool = False

    @classmethod
    def open(cls, auction_id: int, params: AuctionParams, created_at: int) -> "AuctionRecord":
        """Build a fresh, unclaimed record from creation parameters."""
        return cls(
            auction_id=auction_id,
            name=params.name,
            description=params.description,
            image_ref=params.image_ref,
            auctioneer=bytes(params.auctioneer),
            asset_kind=AssetKind(params.asset_kind),
            asset_ref=bytes(params.asset_ref),
            asset_id_or_amount=params.asset_id_or_amount,
            settlement_token=bytes(params.settlement_token),
            starting_price=params.starting_price,
            reserved_price=params.reserved_price,
            decay_rate=params.decay_rate,
            created_at=created_at,
            deadline=created_at + params.duration,
            winner=bytes(params.auctioneer),
        )

    @property
    def is_nft(self) -> bool:
        return self.asset_kind == AssetKind.NON_FUNGIBLE

    @property
    def duration(self) -> int:
        return self.deadline - self.created_at

    def status(self, now: int) -> AuctionStatus:
        if self.settled:
            return AuctionStatus.SETTLED if self.escrowed_funds else AuctionStatus.DRAINED
        if now >= self.deadline:
            return AuctionStatus.EXPIRED
        return AuctionStatus.ACTIVE

    def copy(self) -> "AuctionRecord":
        return replace(self)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly dict: bytes as 0x-hex, enum as name."""
        data = asdict(self)
        for key in ("auctioneer", "asset_ref", "settlement_token", "winner"):
            data[key] = bytes_to_hex(data[key])
        data["asset_kind"] = self.asset_kind.name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuctionRecord":
        values = dict(data)
        for key in ("auctioneer", "asset_ref", "settlement_token", "winner"):
            values[key] = hex_to_bytes(values[key])
        values["asset_kind"] = AssetKind[values["asset_kind"]]
        return cls(**values)
