"""Asset custody: transfer interface and in-memory vault"""
from rda.core.custody.agent import TransferAgent
from rda.core.custody.errors import (
    TransferError,
    InsufficientBalance,
    InsufficientAllowance,
    NotAssetOwner,
)
from rda.core.custody.vault import InMemoryVault

__all__ = [
    "TransferAgent",
    "TransferError",
    "InsufficientBalance",
    "InsufficientAllowance",
    "NotAssetOwner",
    "InMemoryVault",
]
