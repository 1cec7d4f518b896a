"""Quote negotiation with the routing service.

Module structure:
- client.py: RoutingClient protocol and the LI.FI implementation
- extraction.py: guaranteed destination amount from a quote
- calldata.py: vault deposit calldata and amount patching
- assembler.py: two-pass and patched deposit quotes, bridge-to-self routes
"""

from uniyield.quotes.assembler import (
    DepositQuote,
    build_deposit_contract_call,
    build_deposit_quote,
    build_patched_deposit_quote,
    bridge_to_self_request,
    get_bridge_to_self_routes,
)
from uniyield.quotes.calldata import (
    PATCH_MAGIC_AMOUNT,
    encode_deposit,
    has_patch_sentinel,
    patch_amount,
)
from uniyield.quotes.client import (
    ContractCallsQuoteRequest,
    LifiClient,
    RoutesRequest,
    RoutingClient,
)
from uniyield.quotes.extraction import AmountSource, extract_guaranteed_amount

__all__ = [
    "AmountSource",
    "ContractCallsQuoteRequest",
    "DepositQuote",
    "LifiClient",
    "PATCH_MAGIC_AMOUNT",
    "RoutesRequest",
    "RoutingClient",
    "bridge_to_self_request",
    "build_deposit_contract_call",
    "build_deposit_quote",
    "build_patched_deposit_quote",
    "encode_deposit",
    "extract_guaranteed_amount",
    "get_bridge_to_self_routes",
    "has_patch_sentinel",
    "patch_amount",
]
