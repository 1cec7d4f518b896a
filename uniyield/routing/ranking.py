"""Route ranking: cheapest, fastest and recommended route selection.

Ranking is a pure function of the route list. It never mutates the routes
and returns identical output for identical input, so the same result can
drive both route selection and the explanation text.

Ranking rules:
- cheapest: lowest total fee; ties by lowest total time, then lowest index
- fastest: lowest total time; ties by lowest total fee, then lowest index
- recommended: the cheapest route if its total time is within
  `time_tolerance` x the fastest route's time, otherwise the fastest route
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

import structlog

from uniyield.config import DEFAULT_RANKING_CONFIG, RankingConfig
from uniyield.models.route import Route, Step

logger = structlog.get_logger()


@dataclass(frozen=True)
class RouteMetrics:
    """Per-route totals used for ranking.

    Attributes:
        total_fee_usd: Sum of every fee and gas line item across all steps (USD)
        total_duration: Sum of step execution durations (seconds)
        step_count: Number of top-level steps
    """

    total_fee_usd: Decimal
    total_duration: float
    step_count: int


@dataclass(frozen=True)
class RouteRanking:
    """Ranking of a route list.

    All indices are positions in the ranked list, or None when the list was
    empty. `metrics[i]` holds the totals for route i.
    """

    metrics: tuple[RouteMetrics, ...]
    cheapest_index: int | None
    fastest_index: int | None
    recommended_index: int | None
    time_tolerance: float = DEFAULT_RANKING_CONFIG.time_tolerance

    @property
    def route_count(self) -> int:
        return len(self.metrics)

    @property
    def is_empty(self) -> bool:
        return not self.metrics

    @classmethod
    def empty(cls, time_tolerance: float = DEFAULT_RANKING_CONFIG.time_tolerance) -> "RouteRanking":
        """Ranking of an empty route list."""
        return cls(
            metrics=(),
            cheapest_index=None,
            fastest_index=None,
            recommended_index=None,
            time_tolerance=time_tolerance,
        )


def step_fee_usd(step: Step) -> Decimal:
    """USD total of a step's fee and gas line items.

    Uses the USD amount embedded in each line item; items without one count
    as zero. No price lookups happen here.
    """
    total = Decimal(0)
    for fee in step.estimate.fee_costs:
        if fee.amount_usd is not None:
            total += fee.amount_usd
    for gas in step.estimate.gas_costs:
        if gas.amount_usd is not None:
            total += gas.amount_usd
    return total


def step_duration(step: Step, default_duration: int) -> float:
    """Execution duration of a step, `default_duration` when not estimated."""
    duration = step.estimate.execution_duration
    return float(default_duration) if duration is None else float(duration)


def compute_route_metrics(
    route: Route,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> RouteMetrics:
    """Compute fee, time and step-count totals for one route."""
    total_fee = sum((step_fee_usd(step) for step in route.steps), Decimal(0))
    total_duration = sum(step_duration(step, config.default_step_duration) for step in route.steps)
    return RouteMetrics(
        total_fee_usd=total_fee,
        total_duration=total_duration,
        step_count=len(route.steps),
    )


def compute_rankings(
    routes: Sequence[Route],
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> RouteRanking:
    """Rank candidate routes for the same transfer intent.

    Args:
        routes: Candidate routes (not modified)
        config: Tolerance factor and default step duration

    Returns:
        RouteRanking with cheapest/fastest/recommended indices, all None for
        an empty list
    """
    if not routes:
        return RouteRanking.empty(config.time_tolerance)

    metrics = tuple(compute_route_metrics(route, config) for route in routes)
    indices = range(len(metrics))

    def by_cost(i: int) -> tuple[Decimal, float, int]:
        return (metrics[i].total_fee_usd, metrics[i].total_duration, i)

    def by_time(i: int) -> tuple[float, Decimal, int]:
        return (metrics[i].total_duration, metrics[i].total_fee_usd, i)

    cheapest = min(indices, key=by_cost)
    fastest = min(indices, key=by_time)

    time_limit = metrics[fastest].total_duration * config.time_tolerance
    cheapest_in_time = metrics[cheapest].total_duration <= time_limit
    recommended = cheapest if cheapest_in_time else fastest

    logger.debug(
        "routes_ranked",
        route_count=len(metrics),
        cheapest_index=cheapest,
        fastest_index=fastest,
        recommended_index=recommended,
        cheapest_in_time=cheapest_in_time,
    )

    return RouteRanking(
        metrics=metrics,
        cheapest_index=cheapest,
        fastest_index=fastest,
        recommended_index=recommended,
        time_tolerance=config.time_tolerance,
    )
