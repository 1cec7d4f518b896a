"""Annotated field types and amount/address helpers shared by the models.

Amounts on the wire are token base units written as decimal strings. Two
entry points read them:

- `Uint256` validates fields we produce or require (request bodies, route
  totals) and rejects anything malformed
- `parse_base_units` reads best-effort upstream estimate fields and returns
  None instead of raising
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

UINT256_MAX = 2**256 - 1

ZERO_ADDRESS = "0x" + "0" * 40

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def parse_base_units(value: object) -> int | None:
    """Read a base-unit amount, or None if `value` is not one.

    Accepts non-negative ints (not bools) and strings of plain ASCII digits.
    Signs, whitespace, underscores, decimals, hex and floats are all rejected:
    int() would accept several of those, but none is a valid base-unit amount.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None


def validate_uint256(value: Any) -> str:
    """Pydantic validator for `Uint256`: canonical decimal string in range.

    Raises:
        ValueError: If value is not a non-negative integer (int or digit
            string) no larger than 2^256-1
    """
    amount = parse_base_units(value)
    if amount is None:
        raise ValueError(f"Uint256 must be a non-negative decimal integer, got {value!r}")
    if amount > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return str(amount)


# Token amount in base units, as a decimal string
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]

# 20-byte account or contract address, any casing
Address = Annotated[str, Field(pattern=_ADDRESS_RE.pattern)]

# ABI-encoded calldata
Bytes = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]*$")]

# Vault strategy ids
Bytes32 = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{64}$")]


def is_valid_address(address: object) -> bool:
    """True for a 0x-prefixed 40-hex-digit string (checksum not enforced)."""
    return isinstance(address, str) and _ADDRESS_RE.match(address) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address and make sure it has the 0x prefix.

    Used as the key for balance lookups and zero-address checks.

    Raises:
        ValueError: If validate=True and the result is not a valid address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr
    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")
    return addr
