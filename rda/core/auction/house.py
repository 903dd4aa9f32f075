"""
Auction House - settlement state machine for reverse Dutch auctions.

Operations:
----------
1. **create**: validate parameters, take the asset into custody, store
   a fresh record.
2. **claim_and_withdraw_asset**: the only way to acquire the asset. The
   claim is the bid: the caller pays the current price and receives the
   asset at once. The auctioneer may claim their own asset back at any
   time, even after the deadline.
3. **withdraw_funds**: the auctioneer drains the escrowed proceeds.

Ordering:
--------
Checks, then effects, then interactions. The price is captured and the
record marked settled *before* any transfer is attempted, so a transfer
callback that re-enters the house finds a terminal auction and fails
with AuctionEnded. If a transfer fails, the record fields are restored
and the custody block reverts, leaving no trace of the attempt.

Concurrency:
-----------
Every read-then-mutate step runs under the auction's own lock, so of two
simultaneous claims exactly one succeeds. Locks are always taken in the
same order: the custody block first, then the auction lock. Transfer
hooks run with custody held and may query or claim any auction.

Events:
------
The event an operation produces is written together with the record
change, inside the custody block. Subscribers are notified only after
the operation has committed.
"""

from dataclasses import dataclass
from typing import List, Optional

from rda.core.auction.events import AuctionCreated, EventLog, FundsWithdrawn, ItemWithdrawn
from rda.core.auction.record import AssetKind, AuctionParams, AuctionRecord, AuctionStatus
from rda.core.auction.repository import AuctionRepository
from rda.core.clock import Clock, SystemClock
from rda.core.config import AuctionHouseConfig
from rda.core.custody.agent import TransferAgent
from rda.core.errors import (
    AuctionEnded,
    AuctionStillOngoing,
    InvalidParams,
    NoFundsAvailable,
    NotAuctioneer,
)
from rda.core.pricing.price import current_price
from rda.crypto import short_hex
from rda.utils.logger import get_logger
from rda.utils.validation import validate_auction_params

logger = get_logger("house")


@dataclass(frozen=True)
class Claim:
    """Outcome of a successful claim."""
    auction_id: int
    receiver: bytes
    asset_ref: bytes
    asset_id_or_amount: int
    price: int


class DutchAuctionHouse:
    """
    Creates, settles and pays out reverse Dutch auctions.

    Collaborators are injected: custody (value movement), clock (time),
    repository (record ownership) and event log (notifications).
    """

    def __init__(
        self,
        custody: TransferAgent,
        clock: Optional[Clock] = None,
        repository: Optional[AuctionRepository] = None,
        events: Optional[EventLog] = None,
        config: Optional[AuctionHouseConfig] = None,
    ):
        self.custody = custody
        self.clock = clock if clock is not None else SystemClock()
        self.repository = repository if repository is not None else AuctionRepository()
        self.events = events if events is not None else EventLog()
        self.config = config if config is not None else AuctionHouseConfig()

    @classmethod
    def from_config(
        cls,
        config: AuctionHouseConfig,
        custody: TransferAgent,
        clock: Optional[Clock] = None,
    ) -> "DutchAuctionHouse":
        """Build a house whose records and events are SQLite-backed when ``config.persist`` is set."""
        storage = None
        if config.persist:
            from rda.core.storage import StorageManager

            config.ensure_directories()
            storage = StorageManager(config.data_dir, config.db_name)

        return cls(
            custody=custody,
            clock=clock,
            repository=AuctionRepository(storage),
            config=config,
        )

    # =========================================================================
    # Creation
    # =========================================================================

    def create(self, params: AuctionParams) -> int:
        """
        Open an auction.

        The auctioneer must already own the asset and have approved
        custody to take it.

        Returns:
            The new auction id

        Raises:
            InvalidParams: a parameter failed validation
            TransferError: the asset could not be taken into custody
        """
        valid, error = validate_auction_params(
            params,
            max_name_length=self.config.max_name_length,
            max_description_length=self.config.max_description_length,
        )
        if not valid:
            logger.warning(f"Rejected auction: {error}")
            raise InvalidParams(error)

        with self.custody.atomic():
            self.custody.receive_funds(
                params.asset_kind == AssetKind.NON_FUNGIBLE,
                params.asset_ref,
                params.auctioneer,
                params.asset_id_or_amount,
            )
            record = self.repository.insert(params, self.clock.now(), event_for=self._creation_event)

        self.events.emit(self._creation_event(record))
        logger.info(
            f"Auction {record.auction_id} created by {short_hex(record.auctioneer)}: "
            f"{record.starting_price} -> {record.reserved_price}, deadline={record.deadline}"
        )
        return record.auction_id

    def create_auction(
        self,
        auctioneer: bytes,
        name: str,
        description: str,
        image_ref: str,
        asset_kind: AssetKind,
        asset_ref: bytes,
        asset_id_or_amount: int,
        settlement_token: bytes,
        starting_price: int,
        reserved_price: int,
        decay_rate: int,
        duration: int,
    ) -> int:
        """Keyword form of create()."""
        return self.create(AuctionParams(
            name=name,
            description=description,
            image_ref=image_ref,
            auctioneer=auctioneer,
            asset_kind=asset_kind,
            asset_ref=asset_ref,
            asset_id_or_amount=asset_id_or_amount,
            settlement_token=settlement_token,
            starting_price=starting_price,
            reserved_price=reserved_price,
            decay_rate=decay_rate,
            duration=duration,
        ))

    @staticmethod
    def _creation_event(record: AuctionRecord) -> AuctionCreated:
        return AuctionCreated(
            auction_id=record.auction_id,
            name=record.name,
            description=record.description,
            image_ref=record.image_ref,
            auctioneer=record.auctioneer,
            asset_kind=int(record.asset_kind),
            asset_ref=record.asset_ref,
            asset_id_or_amount=record.asset_id_or_amount,
            settlement_token=record.settlement_token,
            starting_price=record.starting_price,
            reserved_price=record.reserved_price,
            decay_rate=record.decay_rate,
            duration=record.duration,
            deadline=record.deadline,
        )

    # =========================================================================
    # Pricing
    # =========================================================================

    def get_current_price(self, auction_id: int) -> int:
        """
        Current price of an auction (0 past its deadline).

        Raises:
            InvalidAuctionId: unknown auction
            AuctionEnded: auction already settled
        """
        with self.repository.lock(auction_id):
            record = self.repository.require(auction_id)
            return current_price(record, self.clock.now())

    # =========================================================================
    # Settlement
    # =========================================================================

    def claim_and_withdraw_asset(self, auction_id: int, caller: bytes) -> Claim:
        """
        Buy the asset at the current price, or reclaim it as auctioneer.

        A non-auctioneer pays the current price into escrow. The asset
        goes to the caller either way.

        Raises:
            InvalidAuctionId: unknown auction
            AuctionEnded: already settled, or past the deadline for a
                caller other than the auctioneer
            TransferError: payment or asset transfer failed (no state kept)
        """
        with self.custody.atomic(), self.repository.lock(auction_id):
            record = self.repository.require(auction_id)

            if record.settled:
                logger.warning(f"Claim on settled auction {auction_id} by {short_hex(caller)}")
                raise AuctionEnded(auction_id, "already settled")

            now = self.clock.now()
            is_auctioneer = caller == record.auctioneer
            if now >= record.deadline and not is_auctioneer:
                logger.warning(f"Claim on expired auction {auction_id} by {short_hex(caller)}")
                raise AuctionEnded(auction_id, "deadline passed")

            price = current_price(record, now)

            previous = (record.winner, record.escrowed_funds, record.settled)
            record.winner = caller
            record.escrowed_funds = price
            record.settled = True

            event = ItemWithdrawn(
                auction_id=auction_id,
                receiver=caller,
                asset_ref=record.asset_ref,
                asset_id_or_amount=record.asset_id_or_amount,
            )
            try:
                if not is_auctioneer:
                    self.custody.receive_funds(False, record.settlement_token, caller, price)
                self.custody.send_funds(record.is_nft, record.asset_ref, caller, record.asset_id_or_amount)
                self.repository.save(record, event)
            except Exception:
                record.winner, record.escrowed_funds, record.settled = previous
                logger.warning(f"Claim on auction {auction_id} by {short_hex(caller)} reverted")
                raise

        self.events.emit(event)
        logger.info(f"Auction {auction_id} settled: winner={short_hex(caller)}, price={price}")
        return Claim(
            auction_id=auction_id,
            receiver=caller,
            asset_ref=record.asset_ref,
            asset_id_or_amount=record.asset_id_or_amount,
            price=price,
        )

    def withdraw_funds(self, auction_id: int, caller: bytes) -> int:
        """
        Pay the escrowed proceeds out to the auctioneer.

        Returns:
            The amount withdrawn

        Raises:
            InvalidAuctionId: unknown auction
            NotAuctioneer: caller is not the auctioneer
            NoFundsAvailable: nothing escrowed
            AuctionStillOngoing: neither settled nor past the deadline
            TransferError: payout failed (no state kept)
        """
        with self.custody.atomic(), self.repository.lock(auction_id):
            record = self.repository.require(auction_id)

            if caller != record.auctioneer:
                logger.warning(f"Withdrawal from auction {auction_id} by non-auctioneer {short_hex(caller)}")
                raise NotAuctioneer(auction_id, "only the auctioneer may withdraw")

            if record.escrowed_funds == 0:
                raise NoFundsAvailable(auction_id, "nothing to withdraw")

            if not (self.clock.now() >= record.deadline or record.settled):
                raise AuctionStillOngoing(auction_id, "not settled and deadline not reached")

            amount = record.escrowed_funds
            record.escrowed_funds = 0

            event = FundsWithdrawn(auction_id=auction_id, amount=amount)
            try:
                self.custody.send_funds(False, record.settlement_token, caller, amount)
                self.repository.save(record, event)
            except Exception:
                record.escrowed_funds = amount
                raise

        self.events.emit(event)
        logger.info(f"Auction {auction_id}: {amount} withdrawn by auctioneer")
        return amount

    # =========================================================================
    # Views
    # =========================================================================

    def get_auction(self, auction_id: int) -> AuctionRecord:
        """Snapshot of an auction record."""
        with self.repository.lock(auction_id):
            return self.repository.require(auction_id).copy()

    def list_auctions(self) -> List[AuctionRecord]:
        return self.repository.list()

    def status(self, auction_id: int) -> AuctionStatus:
        return self.get_auction(auction_id).status(self.clock.now())

    def stats(self) -> dict:
        """Get auction statistics."""
        now = self.clock.now()
        records = self.repository.list()
        counts = {status: 0 for status in AuctionStatus}
        for record in records:
            counts[record.status(now)] += 1

        return {
            "auctions": len(records),
            "active": counts[AuctionStatus.ACTIVE],
            "expired": counts[AuctionStatus.EXPIRED],
            "settled": counts[AuctionStatus.SETTLED],
            "drained": counts[AuctionStatus.DRAINED],
            "escrowed": sum(r.escrowed_funds for r in records),
            "events": len(self.events),
        }
