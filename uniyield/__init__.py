"""UniYield - cross-chain USDC deposits into a yield vault."""

from uniyield.quotes.assembler import DepositQuote, build_deposit_quote
from uniyield.quotes.extraction import extract_guaranteed_amount
from uniyield.routing.explanation import explanation_for, labels_for
from uniyield.routing.ranking import RouteRanking, compute_rankings

__version__ = "0.1.0"
__all__ = [
    "DepositQuote",
    "RouteRanking",
    "build_deposit_quote",
    "compute_rankings",
    "explanation_for",
    "extract_guaranteed_amount",
    "labels_for",
    "__version__",
]
