"""
Transfer Agent - the custody interface consumed by the auction house.

The house never moves value itself. It asks a transfer agent to pull
value into custody (``receive_funds``) or pay it out of custody
(``send_funds``). ``is_nft`` selects the asset kind: True moves one
non-fungible token by id, False moves an amount of a fungible token.

Each call is atomic and raises a TransferError on failure. ``atomic()``
groups several calls so that an exception anywhere inside the block
reverts all of them.
"""

from contextlib import contextmanager


class TransferAgent:
    """Abstract custody collaborator"""

    def receive_funds(self, is_nft: bool, token: bytes, sender: bytes, id_or_amount: int) -> None:
        raise NotImplementedError

    def send_funds(self, is_nft: bool, token: bytes, recipient: bytes, id_or_amount: int) -> None:
        raise NotImplementedError

    @contextmanager
    def atomic(self):
        """All-or-nothing scope for transfers. Agents without undo support run the block as-is."""
        yield self
