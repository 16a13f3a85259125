"""Route selection and categorization"""

import dataclasses
from datetime import datetime
from typing import List
from transfer_router.domain.costs import normalize_costs
from transfer_router.domain.exceptions import EmptyRouteSetError
from transfer_router.domain.models import Route, RouteCategory
from transfer_router.domain.risk import HIGH_RISK_THRESHOLD
from transfer_router.utils.date_utils import ensure_aware

COST_WEIGHT = 0.4
TIME_WEIGHT = 0.3
RISK_WEIGHT = 0.3


def _require_routes(routes: List[Route], category: str) -> None:
    if not routes:
        raise EmptyRouteSetError(f"Cannot select {category} route from empty list")


def select_cheapest_route(routes: List[Route]) -> Route:
    """Lowest total fees; the first minimum wins ties"""
    _require_routes(routes, "cheapest")
    return min(routes, key=lambda route: route.total_fees_cents)


def select_fastest_route(routes: List[Route]) -> Route:
    """Earliest estimated arrival; the first minimum wins ties"""
    _require_routes(routes, "fastest")
    return min(routes, key=lambda route: route.estimated_arrival)


def _delays_seconds(routes: List[Route], current_time: datetime) -> List[float]:
    now = ensure_aware(current_time)
    return [(route.estimated_arrival - now).total_seconds() for route in routes]


def normalize_times(routes: List[Route], current_time: datetime) -> List[float]:
    """Each route's delay as a percentage of the slowest delay, positional"""
    if not routes:
        return []

    delays = _delays_seconds(routes, current_time)
    max_delay = max(delays)
    if max_delay == 0:
        return [0.0 for _ in routes]

    return [delay / max_delay * 100 for delay in delays]


def calculate_recommended_score(route: Route, normalized_cost: float, normalized_time: float) -> float:
    """Desirability from 0 to 100, higher is better"""
    return (
        (100 - normalized_cost) * COST_WEIGHT
        + (100 - normalized_time) * TIME_WEIGHT
        + (100 - route.risk_score) * RISK_WEIGHT
    )


def score_routes(routes: List[Route], current_time: datetime) -> List[float]:
    costs = normalize_costs(routes)
    times = normalize_times(routes, current_time)
    return [
        calculate_recommended_score(route, cost, time)
        for route, cost, time in zip(routes, costs, times)
    ]


def select_recommended_route(routes: List[Route], current_time: datetime) -> Route:
    """
    Best balance of cost (40%), speed (30%) and risk (30%).

    Cost and time are normalized against the most expensive and slowest
    candidates. The first maximum wins ties.
    """
    _require_routes(routes, "recommended")
    scores = score_routes(routes, current_time)
    best_index = max(range(len(routes)), key=lambda i: scores[i])
    return routes[best_index]


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _dollars(cents: int) -> str:
    return f"${cents / 100:.2f}"


def _cheapest_reasoning(route: Route, routes: List[Route]) -> str:
    total_fees = route.total_fees_cents
    step_count = len(route.steps)

    if total_fees == 0:
        return (
            f"This route has zero fees, making it the most cost-effective option "
            f"with {_plural(step_count, 'transfer step')}."
        )

    savings = max(r.total_fees_cents for r in routes) - total_fees
    if savings == 0:
        return f"This route costs {_dollars(total_fees)} in fees across {_plural(step_count, 'step')}."

    return (
        f"This route minimizes costs at {_dollars(total_fees)} in total fees, "
        f"saving {_dollars(savings)} compared to the most expensive option."
    )


def _describe_delay(delay_seconds: float) -> str:
    hours = int(delay_seconds // 3600)
    minutes = int((delay_seconds % 3600) // 60)

    if hours == 0 and minutes <= 5:
        return "within minutes"
    if hours == 0:
        return f"in {minutes} minutes"
    if hours < 24:
        return f"in {_plural(hours, 'hour')}"
    return f"in {_plural(hours // 24, 'day')}"


def _fastest_reasoning(route: Route, routes: List[Route], current_time: datetime) -> str:
    delay = (route.estimated_arrival - ensure_aware(current_time)).total_seconds()
    description = _describe_delay(delay)

    slowest_arrival = max(r.estimated_arrival for r in routes)
    time_saved = (slowest_arrival - route.estimated_arrival).total_seconds()
    hours_saved = int(time_saved // 3600)

    if time_saved == 0:
        return f"This route arrives {description}, matching the fastest possible delivery time."
    if hours_saved < 1:
        return f"This route arrives {description}, the fastest option available."

    days_saved = hours_saved // 24
    if days_saved > 0:
        return f"This route arrives {description}, {_plural(days_saved, 'day')} faster than the slowest option."
    return f"This route arrives {description}, {_plural(hours_saved, 'hour')} faster than the slowest option."


def _recommended_reasoning(route: Route, routes: List[Route], current_time: datetime) -> str:
    index = next(i for i, candidate in enumerate(routes) if candidate is route)
    normalized_cost = normalize_costs(routes)[index]
    normalized_time = normalize_times(routes, current_time)[index]
    score = calculate_recommended_score(route, normalized_cost, normalized_time)

    strengths = []
    if (100 - normalized_cost) * COST_WEIGHT >= 30:
        strengths.append("competitive fees")
    if (100 - normalized_time) * TIME_WEIGHT >= 20:
        strengths.append("fast delivery")
    if (100 - route.risk_score) * RISK_WEIGHT >= 20:
        strengths.append("low risk")

    strengths_text = ", ".join(strengths) if strengths else "balanced characteristics"
    return (
        f"This route offers the best overall balance with {strengths_text}. "
        f"It scores {score:.1f}/100 on our weighted evaluation (cost 40%, speed 30%, risk 30%)."
    )


def generate_reasoning(
    route: Route,
    category: RouteCategory,
    routes: List[Route],
    current_time: datetime,
) -> str:
    """Plain-language justification for picking `route` in `category`"""
    if category == RouteCategory.CHEAPEST:
        return _cheapest_reasoning(route, routes)
    if category == RouteCategory.FASTEST:
        return _fastest_reasoning(route, routes, current_time)
    return _recommended_reasoning(route, routes, current_time)


def categorize_routes(routes: List[Route], current_time: datetime) -> List[Route]:
    """
    Pick the cheapest, fastest and recommended candidates.

    Each pick is copied before it is tagged so a route chosen for several
    categories never shares state between them.
    """
    selections = [
        (RouteCategory.CHEAPEST, select_cheapest_route(routes)),
        (RouteCategory.FASTEST, select_fastest_route(routes)),
        (RouteCategory.RECOMMENDED, select_recommended_route(routes, current_time)),
    ]
    return [
        dataclasses.replace(
            route,
            category=category,
            steps=list(route.steps),
            reasoning=generate_reasoning(route, category, routes, current_time),
        )
        for category, route in selections
    ]


def check_all_routes_risky(routes: List[Route]) -> bool:
    """True when every route scores strictly above the high-risk threshold"""
    if not routes:
        return False
    return all(route.risk_score > HIGH_RISK_THRESHOLD for route in routes)
