"""
Hashing and address primitives for RDA.

Addresses follow the EVM convention: 20 raw bytes, rendered as a
0x-prefixed hex string. The zero address is reserved and never a valid
party, token or collection.

Keccak-256 (Ethereum-style) is used for address derivation.
"""

from Crypto.Hash import keccak


# =============================================================================
# Constants
# =============================================================================

ADDRESS_SIZE = 20
ZERO_ADDRESS = bytes(ADDRESS_SIZE)


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: address derivation.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Addresses
# =============================================================================


def address_from_label(label: str) -> bytes:
    """
    Derive a deterministic address from a human-readable label.

    Takes the last 20 bytes of keccak256(label), like an EVM address is
    taken from the hash of a public key. Handy for demos and tests where
    parties are named ("alice", "bob") rather than keyed.
    """
    return keccak256(label.encode("utf-8"))[-ADDRESS_SIZE:]


def is_zero_address(address: bytes) -> bool:
    return address == ZERO_ADDRESS


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)


def short_hex(data: bytes, length: int = 10) -> str:
    """Abbreviated hex for log lines."""
    return bytes_to_hex(data)[:length]
    if len(address) != 42:  # 0x + 40 hex chars
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


__all__ = [
    "ADDRESS_SIZE",
    "ZERO_ADDRESS",
    "keccak256",
    "address_from_label",
    "is_zero_address",
    "bytes_to_hex",
    "hex_to_bytes",
    "short_hex",
]
