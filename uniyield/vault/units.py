"""Token unit conversion and display formatting.

Amounts are parsed with Decimal, never float, so "100.00" becomes exactly
100_000_000 base units for a 6-decimal token.
"""

from decimal import Decimal, InvalidOperation

from uniyield.constants import USDC_DECIMALS


def parse_units(amount: str, decimals: int = USDC_DECIMALS) -> int:
    """Parse a human-readable token amount into base units.

    Args:
        amount: Decimal string such as "1000.50"
        decimals: Token decimals (default: 6 for USDC)

    Returns:
        Amount in base units

    Raises:
        ValueError: If the amount is not a finite non-negative decimal or has
            more fractional digits than the token supports
    """
    try:
        value = Decimal(amount.strip())
    except (InvalidOperation, AttributeError):
        raise ValueError(f"Invalid token amount: {amount!r}") from None

    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid token amount: {amount!r}")

    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {amount} has more than {decimals} decimal places")
    return int(scaled)


def format_units(value: int, decimals: int = USDC_DECIMALS) -> str:
    """Format base units with thousands separators and full precision.

    Example: 1_000_000_000 (6 decimals) -> "1,000.000000"
    """
    sign = "-" if value < 0 else ""
    digits = str(abs(value)).rjust(decimals + 1, "0")
    int_part = digits[:-decimals] if decimals else digits
    frac_part = digits[-decimals:] if decimals else ""
    grouped = f"{int(int_part):,}"
    return f"{sign}{grouped}.{frac_part}" if frac_part else f"{sign}{grouped}"


def format_rate_bps(rate_bps: int) -> str:
    """Basis points as a percentage: 388 -> "3.88%"."""
    return f"{Decimal(rate_bps) / 100:.2f}%"
