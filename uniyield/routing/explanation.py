"""Human-readable labels and rationale for ranked routes.

Text is assembled from the metrics already stored in a RouteRanking; nothing
here recomputes fees or durations from the route itself. The route is only
consulted for its tool names.
"""

from decimal import Decimal
from enum import Enum

from uniyield.models.route import Route
from uniyield.routing.details import format_duration, format_usd, tool_names
from uniyield.routing.ranking import RouteMetrics, RouteRanking


class RouteLabel(str, Enum):
    """Badges a route can carry, in display order."""

    RECOMMENDED = "Recommended"
    CHEAPEST = "Cheapest"
    FASTEST = "Fastest"


def _check_index(index: int, ranking: RouteRanking) -> None:
    if not 0 <= index < ranking.route_count:
        raise IndexError(f"Route index {index} out of range for {ranking.route_count} routes")


def labels_for(index: int, ranking: RouteRanking) -> list[str]:
    """Labels for the route at `index`: Recommended, then Cheapest, then Fastest.

    Raises:
        IndexError: If index is not a position in the ranked list
    """
    _check_index(index, ranking)
    labels = []
    if index == ranking.recommended_index:
        labels.append(RouteLabel.RECOMMENDED.value)
    if index == ranking.cheapest_index:
        labels.append(RouteLabel.CHEAPEST.value)
    if index == ranking.fastest_index:
        labels.append(RouteLabel.FASTEST.value)
    return labels


def _summary(metrics: RouteMetrics, route: Route) -> str:
    steps = "step" if metrics.step_count == 1 else "steps"
    text = (
        f"{format_usd(metrics.total_fee_usd)} in fees, "
        f"{format_duration(metrics.total_duration)} across {metrics.step_count} {steps}"
    )
    names = tool_names(route)
    if names:
        text += " via " + " → ".join(names)
    return text


def _lead(labels: list[str], ranking: RouteRanking) -> str | None:
    count = ranking.route_count
    tolerance = f"{ranking.time_tolerance:g}×"
    cheapest = RouteLabel.CHEAPEST.value in labels
    fastest = RouteLabel.FASTEST.value in labels

    if RouteLabel.RECOMMENDED.value in labels:
        if cheapest and fastest:
            return f"Recommended: cheapest and fastest of {count} routes."
        if cheapest:
            return f"Recommended: the cheapest route, within {tolerance} of the fastest time."
        return (
            f"Recommended: the fastest route; the cheapest takes more than {tolerance} "
            "its time."
        )
    if cheapest and fastest:
        return f"Cheapest and fastest of {count} routes."
    if cheapest:
        return f"Cheapest of {count} routes."
    if fastest:
        return f"Fastest of {count} routes."
    return None


def _versus_fastest(metrics: RouteMetrics, fastest: RouteMetrics) -> str:
    slower_by = metrics.total_duration - fastest.total_duration
    saving = fastest.total_fee_usd - metrics.total_fee_usd

    if slower_by > 0:
        timing = f"Slower than the fastest option by {format_duration(slower_by)}"
    else:
        timing = "As fast as the fastest option"

    if saving > 0:
        return f"{timing} but saves {format_usd(saving)} in fees."
    if saving < 0:
        return f"{timing} and costs {format_usd(-saving)} more in fees."
    return f"{timing} at the same fees."


def _versus_cheapest(metrics: RouteMetrics, cheapest: RouteMetrics) -> str:
    extra = metrics.total_fee_usd - cheapest.total_fee_usd
    faster_by = cheapest.total_duration - metrics.total_duration

    if extra > Decimal(0):
        costs = f"Costs {format_usd(extra)} more than the cheapest option"
    else:
        costs = "Matches the cheapest option's fees"

    if faster_by > 0:
        return f"{costs} but is {format_duration(faster_by)} faster."
    return f"{costs}."


def explanation_for(index: int, ranking: RouteRanking, route: Route) -> str:
    """One-paragraph rationale for the route at `index`.

    Compares the route against the fastest and cheapest candidates using the
    ranking's stored metrics. With a single route there is nothing to compare,
    so the text only describes that route's own totals.

    Raises:
        IndexError: If index is not a position in the ranked list
        ValueError: If a ranking of several routes has no cheapest or fastest index
    """
    _check_index(index, ranking)
    metrics = ranking.metrics[index]

    if ranking.route_count == 1:
        return f"Only route available: {_summary(metrics, route)}."

    cheapest, fastest = ranking.cheapest_index, ranking.fastest_index
    if cheapest is None or fastest is None:
        raise ValueError("Ranking has no cheapest or fastest route")

    sentences = []
    lead = _lead(labels_for(index, ranking), ranking)
    if lead:
        sentences.append(lead)
    if index != fastest:
        sentences.append(_versus_fastest(metrics, ranking.metrics[fastest]))
    if index != cheapest:
        sentences.append(_versus_cheapest(metrics, ranking.metrics[cheapest]))
    sentences.append(f"Total: {_summary(metrics, route)}.")
    return " ".join(sentences)
