"""
Standard type definitions for database models.

Provides consistent column types for addresses, hashes and on-chain amounts.
"""

from sqlalchemy import String

# Lower-cased 0x-prefixed address (42 chars)
AddressType = String(42)

# 0x-prefixed transaction hash (66 chars)
TxHashType = String(66)

# Amount in the smallest unit, stored as a base-10 integer string
# Strings keep full precision on every backend; uint256 fits in 78 digits
RawAmountType = String(80)
