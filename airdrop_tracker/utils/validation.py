"""Address validation utilities."""

import re

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")

# Zero address - never a real recipient
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def is_valid_address(address: str | None) -> bool:
    """
    Check EVM address format (0x + 40 hex chars).

    Args:
        address: Wallet address

    Returns:
        True if valid
    """
    return bool(address) and bool(ADDRESS_PATTERN.match(address))


def normalize_address(address: str) -> str:
    """
    Lower-case an address after validating it.

    Raises:
        ValueError: If address format is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid address: {address}")
    return address.lower()
