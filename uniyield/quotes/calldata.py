"""Vault deposit calldata encoding and amount patching.

Patched mode encodes a sentinel in place of the deposit amount. An execution
engine that supports amount patching replaces the sentinel word with the
actually bridged amount right before sending the destination call.
"""

from eth_abi import encode  # type: ignore[attr-defined]

from uniyield.models.types import UINT256_MAX, is_valid_address

# ERC-4626 deposit(uint256 assets, address receiver)
DEPOSIT_SELECTOR = "0x6e553f65"

# Sentinel amount substituted at execution time. Recognizable in calldata
# dumps and far above any real token supply.
PATCH_MAGIC_AMOUNT = int("deadbeef" * 8, 16)

_WORD_HEX_LEN = 64
_SELECTOR_HEX_LEN = 8


def encode_deposit(assets: int, receiver: str) -> str:
    """Encode deposit(assets, receiver) calldata.

    Args:
        assets: Amount of the vault asset in base units
        receiver: Address receiving the minted shares

    Returns:
        0x-prefixed calldata

    Raises:
        ValueError: If the amount is out of uint256 range or the receiver is invalid
    """
    if not 0 <= assets <= UINT256_MAX:
        raise ValueError(f"Deposit amount out of uint256 range: {assets}")
    if not is_valid_address(receiver):
        raise ValueError(f"Invalid receiver address: {receiver}")

    encoded_args = encode(["uint256", "address"], [assets, bytes.fromhex(receiver[2:])])
    return DEPOSIT_SELECTOR + encoded_args.hex()


def encode_patchable_deposit(receiver: str) -> str:
    """Encode deposit calldata with the patch sentinel as the amount."""
    return encode_deposit(PATCH_MAGIC_AMOUNT, receiver)


def _magic_word_offsets(body: str) -> list[int]:
    magic_word = f"{PATCH_MAGIC_AMOUNT:064x}"
    return [
        offset
        for offset in range(_SELECTOR_HEX_LEN, len(body) - _WORD_HEX_LEN + 1, _WORD_HEX_LEN)
        if body[offset : offset + _WORD_HEX_LEN] == magic_word
    ]


def has_patch_sentinel(call_data: str) -> bool:
    """True if the calldata has at least one argument word equal to the sentinel."""
    body = call_data[2:].lower() if call_data.startswith("0x") else call_data.lower()
    return bool(_magic_word_offsets(body))


def patch_amount(call_data: str, amount: int) -> str:
    """Replace every sentinel argument word in `call_data` with `amount`.

    Only 32-byte aligned argument words are considered, so a sentinel-like
    byte sequence straddling two words is never touched.

    Raises:
        ValueError: If the calldata carries no sentinel or amount is out of range
    """
    if not 0 <= amount <= UINT256_MAX:
        raise ValueError(f"Patched amount out of uint256 range: {amount}")

    body = call_data[2:].lower() if call_data.startswith("0x") else call_data.lower()
    offsets = _magic_word_offsets(body)
    if not offsets:
        raise ValueError("Calldata has no patch sentinel")

    amount_word = f"{amount:064x}"
    for offset in offsets:
        body = body[:offset] + amount_word + body[offset + _WORD_HEX_LEN :]
    return "0x" + body
