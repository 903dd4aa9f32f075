"""
Input Validation - sanity checks for auction parameters.

Every external input to auction creation passes through here before any
state is touched. Validators return ``(is_valid, error_message)`` so the
caller decides how to surface a failure.
"""

from typing import Any, Optional, Tuple

from rda.crypto import ADDRESS_SIZE, is_zero_address

# =============================================================================
# Constants
# =============================================================================

MAX_STRING_LENGTH = 1024
MAX_NAME_LENGTH = 128

# Amounts mirror an unsigned 256-bit word
MIN_AMOUNT = 0
MAX_AMOUNT = 2**256 - 1
MAX_DURATION = 2**64 - 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.

    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"

    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"

    return True, ""


def validate_address(address: Any, name: str = "address") -> Tuple[bool, str]:
    """Validate a non-zero 20-byte address."""
    valid, err = validate_bytes(address, name, expected_length=ADDRESS_SIZE)
    if not valid:
        return False, err

    if is_zero_address(bytes(address)):
        return False, f"{name} must not be the zero address"

    return True, ""


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass; never a meaningful amount
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate a token amount."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_string(
    value: Any,
    name: str,
    max_length: int = MAX_STRING_LENGTH,
    allow_empty: bool = True,
) -> Tuple[bool, str]:
    """
    Validate string input.

    Args:
        value: Value to validate
        name: Field name for errors
        max_length: Maximum string length
        allow_empty: Whether "" (or whitespace only) is acceptable

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    if not allow_empty and not value.strip():
        return False, f"{name} must not be empty"

    if len(value) > max_length:
        return False, f"{name} exceeds max length {max_length}"

    return True, ""


# =============================================================================
# Composite Validators
# =============================================================================


def validate_auction_params(params: Any, max_name_length: int = MAX_NAME_LENGTH,
                            max_description_length: int = MAX_STRING_LENGTH) -> Tuple[bool, str]:
    """
    Validate the full parameter set of a new auction.

    Checks, in order: metadata strings, party/asset/token addresses,
    the asset id-or-amount, price ordering, decay rate and duration.

    Args:
        params: An AuctionParams instance (duck-typed)

    Returns:
        (is_valid, error_message) for the first failing check
    """
    checks = [
        validate_string(params.name, "name", max_length=max_name_length, allow_empty=False),
        validate_string(params.description, "description", max_length=max_description_length),
        validate_string(params.image_ref, "image_ref", max_length=MAX_STRING_LENGTH),
        validate_address(params.auctioneer, "auctioneer"),
        validate_address(params.asset_ref, "asset_ref"),
        validate_address(params.settlement_token, "settlement_token"),
        validate_amount(params.asset_id_or_amount, "asset_id_or_amount"),
        validate_amount(params.starting_price, "starting_price"),
        validate_amount(params.reserved_price, "reserved_price"),
        validate_amount(params.decay_rate, "decay_rate"),
        validate_integer(params.duration, "duration", 1, MAX_DURATION),
    ]
    for valid, err in checks:
        if not valid:
            return False, err

    if params.is_fungible and params.asset_id_or_amount == 0:
        return False, "asset_id_or_amount must be > 0 for a fungible asset"

    if params.starting_price < params.reserved_price:
        return False, (
            f"starting_price {params.starting_price} is below "
            f"reserved_price {params.reserved_price}"
        )

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_address",
    "validate_integer",
    "validate_amount",
    "validate_string",
    "validate_auction_params",
    "MAX_STRING_LENGTH",
    "MAX_NAME_LENGTH",
    "MAX_AMOUNT",
    "MAX_DURATION",
]
