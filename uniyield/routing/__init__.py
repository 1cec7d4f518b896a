"""Route evaluation and selection.

Module structure:
- ranking.py: per-route metrics and cheapest/fastest/recommended ranking
- explanation.py: labels and rationale text derived from a ranking
- details.py: fee lines, approval requirement and step rows for display
"""

from uniyield.routing.details import (
    ApprovalInfo,
    FeeLine,
    StepDetail,
    approval_info,
    fee_breakdown,
    format_duration,
    format_usd,
    route_title,
    step_details,
)
from uniyield.routing.explanation import RouteLabel, explanation_for, labels_for
from uniyield.routing.ranking import (
    RouteMetrics,
    RouteRanking,
    compute_rankings,
    compute_route_metrics,
)

__all__ = [
    "ApprovalInfo",
    "FeeLine",
    "RouteLabel",
    "RouteMetrics",
    "RouteRanking",
    "StepDetail",
    "approval_info",
    "compute_rankings",
    "compute_route_metrics",
    "explanation_for",
    "fee_breakdown",
    "format_duration",
    "format_usd",
    "labels_for",
    "route_title",
    "step_details",
]
