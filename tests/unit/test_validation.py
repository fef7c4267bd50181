"""Unit tests for address validation utilities."""

import pytest

from airdrop_tracker.utils.validation import (
    ZERO_ADDRESS,
    is_valid_address,
    normalize_address,
)


class TestAddressValidation:
    """Tests for EVM address format checks."""

    def test_empty_address_invalid(self):
        assert not is_valid_address("")
        assert not is_valid_address(None)

    def test_short_address_invalid(self):
        assert not is_valid_address("0x1234")

    def test_no_0x_prefix_invalid(self):
        """Address without 0x prefix should be invalid."""
        assert not is_valid_address("1" * 40)

    def test_invalid_hex_characters(self):
        assert not is_valid_address("0x" + "z" * 40)

    def test_too_long_address(self):
        assert not is_valid_address("0x" + "1" * 41)

    @pytest.mark.parametrize(
        "address",
        [
            "0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0",
            ZERO_ADDRESS,
            "0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF",
        ],
    )
    def test_valid_addresses(self, address):
        """Mixed-case and checksum-free addresses pass."""
        assert is_valid_address(address)


class TestNormalizeAddress:
    """Tests for normalize_address."""

    def test_lowercases(self):
        assert (
            normalize_address("0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0")
            == "0x742d35cc6634c0532925a3b844bc9e7595f0beb0"
        )

    def test_rejects_invalid(self):
        with pytest.raises(ValueError, match="Invalid address"):
            normalize_address("0x1234")
