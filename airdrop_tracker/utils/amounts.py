"""
Amount conversions.

Amounts are held as integers in the smallest unit everywhere inside the
system. These helpers are the only places where they are scaled to whole
tokens (for presentation) or parsed back.
"""

from decimal import Decimal, localcontext

from airdrop_tracker.config.constants import TOKEN_DECIMALS

# Enough digits for any uint256 with 18 decimals
_PRECISION = 100


def parse_raw(raw: int | str | None) -> int:
    """
    Parse an integer amount in the smallest unit.

    Args:
        raw: Integer or base-10 integer string (None means zero)

    Returns:
        Non-negative integer amount

    Raises:
        ValueError: If the value is not a non-negative integer
    """
    if raw is None or raw == "":
        return 0
    value = int(raw)
    if value < 0:
        raise ValueError(f"Negative amount: {raw}")
    return value


def add_raw(current: int | str | None, delta: int | str) -> str:
    """
    Add two smallest-unit amounts.

    Returns:
        Sum as an integer string
    """
    return str(parse_raw(current) + parse_raw(delta))


def from_smallest_unit(
    raw: int | str | None, decimals: int = TOKEN_DECIMALS
) -> Decimal:
    """
    Scale a smallest-unit amount to whole tokens.

    Examples:
        >>> from_smallest_unit("12500000000000000000")
        Decimal('12.5')
        >>> from_smallest_unit(0)
        Decimal('0')
    """
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(parse_raw(raw)) / (Decimal(10) ** decimals)


def to_smallest_unit(
    amount: Decimal | str | int, decimals: int = TOKEN_DECIMALS
) -> int:
    """
    Convert a whole-token amount to the smallest unit.

    Raises:
        ValueError: If the amount has more fractional digits than decimals
    """
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        scaled = Decimal(str(amount)) * (Decimal(10) ** decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(
            f"Amount {amount} has more than {decimals} fractional digits"
        )
    return parse_raw(int(scaled))


def format_tokens(raw: int | str | None, decimals: int = TOKEN_DECIMALS) -> str:
    """
    Human-scaled string of a smallest-unit amount.

    Examples:
        >>> format_tokens(5 * 10**18)
        '5'
        >>> format_tokens(1234500000000000000)
        '1.2345'
    """
    return format(from_smallest_unit(raw, decimals), "f")


def format_number(amount: Decimal) -> str:
    """Format with thousand separators and two decimals: 1,234.56"""
    return f"{amount:,.2f}"
