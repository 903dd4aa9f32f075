"""
In-memory vault implementing TransferAgent.

Tracks fungible balances and allowances per (token, holder), and
non-fungible ownership and approvals per (collection, token id). A
dedicated custody address holds escrowed assets and payments.

Atomicity:
---------
Every state write inside ``atomic()`` is journaled as (table, key,
previous value). If the block raises, the journal is replayed backwards
and the exception propagates. Blocks nest; only the outermost block
discards the journal on success. The vault lock is held for the whole
block and is reentrant, so transfer hooks may call back into the house.
"""

import threading
from contextlib import contextmanager
from typing import Callable, Dict, List, Optional, Tuple

from rda.core.custody.agent import TransferAgent
from rda.core.custody.errors import InsufficientAllowance, InsufficientBalance, NotAssetOwner
from rda.crypto import address_from_label, short_hex
from rda.utils.logger import get_logger

logger = get_logger("custody")

_MISSING = object()

# (direction, is_nft, token, party, id_or_amount)
TransferHook = Callable[[str, bool, bytes, bytes, int], None]


class InMemoryVault(TransferAgent):
    """
    Reference custody for both asset kinds.

    Attributes:
        custody: Address holding assets and escrow on behalf of the house
    """

    def __init__(self, custody: Optional[bytes] = None):
        self.custody = custody or address_from_label("rda.custody")

        self.balances: Dict[Tuple[bytes, bytes], int] = {}             # (token, holder) -> amount
        self.allowances: Dict[Tuple[bytes, bytes], int] = {}           # (token, owner) -> amount for custody
        self.nft_owners: Dict[Tuple[bytes, int], bytes] = {}           # (collection, id) -> owner
        self.nft_approvals: Dict[Tuple[bytes, int], bytes] = {}        # (collection, id) -> approved

        self._hooks: List[TransferHook] = []
        self._journal: List[Tuple[dict, tuple, object]] = []
        self._depth = 0
        self._lock = threading.RLock()

    # =========================================================================
    # Setup (token issuance and approvals)
    # =========================================================================

    def mint(self, token: bytes, holder: bytes, amount: int) -> None:
        with self._lock:
            self._write(self.balances, (token, holder), self.balance_of(token, holder) + amount)

    def approve(self, token: bytes, owner: bytes, amount: int) -> None:
        """Allow custody to pull up to ``amount`` of ``token`` from ``owner``."""
        with self._lock:
            self._write(self.allowances, (token, owner), amount)

    def mint_nft(self, collection: bytes, token_id: int, owner: bytes) -> None:
        with self._lock:
            if (collection, token_id) in self.nft_owners:
                raise ValueError(f"Token {token_id} already minted in {short_hex(collection)}")
            self._write(self.nft_owners, (collection, token_id), owner)

    def approve_nft(self, collection: bytes, token_id: int, owner: bytes) -> None:
        """Let custody take ``token_id``; only the current owner may approve."""
        with self._lock:
            if self.owner_of(collection, token_id) != owner:
                raise NotAssetOwner(f"{short_hex(owner)} does not own token {token_id}")
            self._write(self.nft_approvals, (collection, token_id), self.custody)

    def add_hook(self, hook: TransferHook) -> None:
        """Register a callback run after every applied transfer."""
        self._hooks.append(hook)

    # =========================================================================
    # Queries
    # =========================================================================

    def balance_of(self, token: bytes, holder: bytes) -> int:
        return self.balances.get((token, holder), 0)

    def allowance(self, token: bytes, owner: bytes) -> int:
        return self.allowances.get((token, owner), 0)

    def owner_of(self, collection: bytes, token_id: int) -> Optional[bytes]:
        return self.nft_owners.get((collection, token_id))

    def escrow_balance(self, token: bytes) -> int:
        return self.balance_of(token, self.custody)

    # =========================================================================
    # TransferAgent
    # =========================================================================

    def receive_funds(self, is_nft: bool, token: bytes, sender: bytes, id_or_amount: int) -> None:
        with self._lock:
            if is_nft:
                self._take_nft(token, sender, id_or_amount)
            else:
                self._pull(token, sender, id_or_amount)
            logger.debug(f"Received {'nft' if is_nft else 'amount'} {id_or_amount} of {short_hex(token)} from {short_hex(sender)}")
            self._notify("in", is_nft, token, sender, id_or_amount)

    def send_funds(self, is_nft: bool, token: bytes, recipient: bytes, id_or_amount: int) -> None:
        with self._lock:
            if is_nft:
                if self.owner_of(token, id_or_amount) != self.custody:
                    raise NotAssetOwner(f"Custody does not hold token {id_or_amount} of {short_hex(token)}")
                self._write(self.nft_owners, (token, id_or_amount), recipient)
            else:
                self._move(token, self.custody, recipient, id_or_amount)
            logger.debug(f"Sent {'nft' if is_nft else 'amount'} {id_or_amount} of {short_hex(token)} to {short_hex(recipient)}")
            self._notify("out", is_nft, token, recipient, id_or_amount)

    @contextmanager
    def atomic(self):
        with self._lock:
            start = len(self._journal)
            self._depth += 1
            try:
                yield self
            except Exception:
                self._undo(start)
                raise
            finally:
                self._depth -= 1
                if self._depth == 0:
                    self._journal.clear()

    # =========================================================================
    # Internals
    # =========================================================================

    def _pull(self, token: bytes, owner: bytes, amount: int) -> None:
        allowed = self.allowance(token, owner)
        if allowed < amount:
            raise InsufficientAllowance(f"Allowance {allowed} below {amount} for {short_hex(owner)}")
        self._move(token, owner, self.custody, amount)
        self._write(self.allowances, (token, owner), allowed - amount)

    def _move(self, token: bytes, source: bytes, target: bytes, amount: int) -> None:
        if amount < 0:
            raise ValueError("Transfer amount must be non-negative")
        available = self.balance_of(token, source)
        if available < amount:
            raise InsufficientBalance(f"{short_hex(source)} has {available}, needs {amount}")
        self._write(self.balances, (token, source), available - amount)
        self._write(self.balances, (token, target), self.balance_of(token, target) + amount)

    def _take_nft(self, collection: bytes, owner: bytes, token_id: int) -> None:
        key = (collection, token_id)
        if self.nft_owners.get(key) != owner:
            raise NotAssetOwner(f"{short_hex(owner)} does not own token {token_id}")
        if self.nft_approvals.get(key) != self.custody:
            raise InsufficientAllowance(f"Token {token_id} not approved for custody")
        self._write(self.nft_owners, key, self.custody)
        self._delete(self.nft_approvals, key)

    def _notify(self, direction: str, is_nft: bool, token: bytes, party: bytes, id_or_amount: int) -> None:
        for hook in self._hooks:
            hook(direction, is_nft, token, party, id_or_amount)

    def _write(self, table: dict, key: tuple, value) -> None:
        if self._depth:
            self._journal.append((table, key, table.get(key, _MISSING)))
        table[key] = value

    def _delete(self, table: dict, key: tuple) -> None:
        if key not in table:
            return
        if self._depth:
            self._journal.append((table, key, table[key]))
        del table[key]

    def _undo(self, start: int) -> None:
        while len(self._journal) > start:
            table, key, previous = self._journal.pop()
            if previous is _MISSING:
                table.pop(key, None)
            else:
                table[key] = previous
        logger.debug("Rolled back vault changes")
