"""End-to-end routing scenarios through calculate_optimal_routes"""

import pytest
from datetime import datetime, timedelta, timezone
from transfer_router.domain.exceptions import StructuralValidationError
from transfer_router.domain.models import (
    RiskLevel,
    RouteCategory,
    RoutingError,
    RoutingErrorKind,
    RoutingResult,
    TransferSpeed,
)
from transfer_router.domain.paths import PathCache
from transfer_router.domain.routing import calculate_optimal_routes


def test_single_instant_route(make_account, make_rule, make_goal, now):
    """Checking -> savings over one free instant transfer; all categories agree"""
    accounts = [make_account("checking", 100000), make_account("savings", 50000)]
    matrix = [make_rule("checking", "savings", TransferSpeed.INSTANT)]
    goal = make_goal("savings", 10000, deadline=now + timedelta(hours=8))

    result = calculate_optimal_routes(goal, accounts, matrix, now)

    assert isinstance(result, RoutingResult)
    assert [r.category for r in result.routes] == [
        RouteCategory.CHEAPEST,
        RouteCategory.FASTEST,
        RouteCategory.RECOMMENDED,
    ]
    for route in result.routes:
        assert route.total_fees_cents == 0
        assert route.estimated_arrival == now + timedelta(minutes=5)
        assert len(route.steps) == 1
        assert route.steps[0].amount_cents == 10000
        # ~8h buffer: timing 50, instant, single step
        assert route.risk_score == pytest.approx(25)
        assert route.risk_level == RiskLevel.LOW
    assert not result.all_routes_risky
    assert "all_routes_risky" not in result.to_dict()


def test_past_deadline(make_account, make_rule, make_goal, now):
    accounts = [make_account("checking", 100000), make_account("savings", 0)]
    matrix = [make_rule("checking", "savings")]
    goal = make_goal("savings", 10000, deadline=now - timedelta(hours=1))

    result = calculate_optimal_routes(goal, accounts, matrix, now)

    assert isinstance(result, RoutingError)
    assert result.error == RoutingErrorKind.PAST_DEADLINE
    assert result.message == "Deadline has already passed"


def test_insufficient_funds(make_account, make_rule, make_goal, now):
    accounts = [make_account("checking", 5000), make_account("savings", 50000)]
    matrix = [make_rule("checking", "savings")]
    goal = make_goal("savings", 100000)

    result = calculate_optimal_routes(goal, accounts, matrix, now)

    assert result.error == RoutingErrorKind.INSUFFICIENT_FUNDS
    assert result.shortfall_cents == 45000
    assert result.message == "Insufficient funds available. Shortfall: $450.00"


def test_no_path(make_account, make_rule, make_goal, now):
    accounts = [make_account("checking", 100000), make_account("venmo", 0), make_account("savings", 0)]
    matrix = [make_rule("checking", "venmo")]
    goal = make_goal("savings", 10000)

    result = calculate_optimal_routes(goal, accounts, matrix, now)

    assert result.error == RoutingErrorKind.NO_PATH
    assert result.message.startswith("No transfer path exists to the target account")
    assert "routes" not in result.to_dict()


def test_all_routes_risky(make_account, make_rule, make_goal, now):
    """Four 3-day hops against a 30 minute deadline: 100*.5 + 50*.3 + 40*.2 = 73"""
    accounts = [
        make_account("a", 100000),
        make_account("b", 0),
        make_account("c", 0),
        make_account("d", 0),
        make_account("target", 0),
    ]
    matrix = [
        make_rule("a", "b", TransferSpeed.THREE_DAY),
        make_rule("b", "c", TransferSpeed.THREE_DAY),
        make_rule("c", "d", TransferSpeed.THREE_DAY),
        make_rule("d", "target", TransferSpeed.THREE_DAY),
    ]
    goal = make_goal("target", 10000, deadline=now + timedelta(minutes=30))

    result = calculate_optimal_routes(goal, accounts, matrix, now)

    assert result.all_routes_risky
    assert result.to_dict()["all_routes_risky"] is True
    for route in result.routes:
        assert len(route.steps) == 4
        assert route.risk_score == pytest.approx(73)
        assert route.risk_level == RiskLevel.HIGH
    # Each hop waits for the previous one: Thu 18, Tue 23, Fri 26, Wed 31 at 5pm EST
    assert result.routes[0].estimated_arrival == datetime(2024, 1, 31, 22, 0, tzinfo=timezone.utc)


def test_split_across_accounts(make_account, make_rule, make_goal, now):
    """Neither account covers the goal alone, so both contribute proportionally"""
    accounts = [
        make_account("checking", 30000),
        make_account("savings", 25000),
        make_account("venmo", 0),
    ]
    matrix = [
        make_rule("checking", "venmo", TransferSpeed.INSTANT, fee_cents=50),
        make_rule("savings", "venmo", TransferSpeed.SAME_DAY),
    ]
    goal = make_goal("venmo", 50000)

    result = calculate_optimal_routes(goal, accounts, matrix, now)

    route = result.routes[0]
    assert [(s.from_account_id, s.amount_cents) for s in route.steps] == [("checking", 27272), ("savings", 22728)]
    assert route.total_fees_cents == 50
    assert route.estimated_arrival == datetime(2024, 1, 15, 22, 0, tzinfo=timezone.utc)


def test_cheapest_and_fastest_differ(make_account, make_rule, make_goal, now):
    """Instant paid relationship vs free 3-day relationship from separate accounts"""
    accounts = [
        make_account("checking", 60000),
        make_account("savings", 80000),
        make_account("venmo", 0),
    ]
    matrix = [
        make_rule("checking", "venmo", TransferSpeed.INSTANT, fee_cents=175),
        make_rule("savings", "venmo", TransferSpeed.THREE_DAY),
    ]
    goal = make_goal("venmo", 50000)

    result = calculate_optimal_routes(goal, accounts, matrix, now)

    cheapest, fastest, _ = result.routes
    assert cheapest.total_fees_cents == 0
    assert cheapest.steps[0].from_account_id == "savings"
    assert fastest.steps[0].from_account_id == "checking"
    assert fastest.estimated_arrival == now + timedelta(minutes=5)
    assert "zero fees" in cheapest.reasoning


def test_weekend_initiation_one_day(make_account, make_rule, make_goal):
    """Friday 4pm EST one-day transfer settles Tuesday"""
    friday = datetime(2024, 1, 19, 21, 0, tzinfo=timezone.utc)
    accounts = [make_account("checking", 100000), make_account("savings", 0)]
    matrix = [make_rule("checking", "savings", TransferSpeed.ONE_DAY)]
    goal = make_goal("savings", 10000, deadline=datetime(2024, 1, 26, 12, 0, tzinfo=timezone.utc))

    result = calculate_optimal_routes(goal, accounts, matrix, friday)

    assert result.routes[0].estimated_arrival == datetime(2024, 1, 23, 22, 0, tzinfo=timezone.utc)


def test_funded_accounts_that_cannot_reach_target(make_account, make_rule, make_goal, now):
    """Total funds suffice but only an underfunded account is connected"""
    accounts = [
        make_account("checking", 5000),
        make_account("savings", 100000),
        make_account("venmo", 0),
    ]
    matrix = [make_rule("checking", "venmo")]
    goal = make_goal("venmo", 50000)

    result = calculate_optimal_routes(goal, accounts, matrix, now)

    assert result.error == RoutingErrorKind.NO_PATH


def test_combination_size_cap_reports_shortfall(make_account, make_rule, make_goal, now):
    accounts = [
        make_account("checking", 30000),
        make_account("savings", 30000),
        make_account("venmo", 0),
    ]
    matrix = [make_rule("checking", "venmo"), make_rule("savings", "venmo")]
    goal = make_goal("venmo", 50000)

    result = calculate_optimal_routes(goal, accounts, matrix, now, max_combination_size=1)

    assert result.error == RoutingErrorKind.INSUFFICIENT_FUNDS
    assert result.shortfall_cents == 50000


def test_unavailable_relationship_is_not_used(make_account, make_rule, make_goal, now):
    accounts = [make_account("checking", 100000), make_account("savings", 0)]
    matrix = [
        make_rule("checking", "savings", TransferSpeed.INSTANT, is_available=False),
        make_rule("checking", "savings", TransferSpeed.THREE_DAY),
    ]
    goal = make_goal("savings", 10000)

    result = calculate_optimal_routes(goal, accounts, matrix, now)

    assert all(r.steps[0].method == TransferSpeed.THREE_DAY for r in result.routes)


def test_path_cache_reused_across_calls(make_account, make_rule, make_goal, now):
    cache = PathCache()
    accounts = [make_account("checking", 100000), make_account("savings", 0)]
    matrix = [make_rule("checking", "savings")]
    goal = make_goal("savings", 10000)

    first = calculate_optimal_routes(goal, accounts, matrix, now, path_cache=cache)
    second = calculate_optimal_routes(goal, accounts, matrix, now, path_cache=cache)

    assert len(cache) == 1
    assert first.to_dict() == second.to_dict()


def test_structural_errors_raise(make_account, make_rule, make_goal, now):
    accounts = [make_account("checking", 100000)]
    matrix = [make_rule("checking", "ghost")]

    with pytest.raises(StructuralValidationError) as exc_info:
        calculate_optimal_routes(make_goal("checking", 10000), accounts, matrix, now)

    assert exc_info.value.subject == "transfer matrix"
    assert len(exc_info.value.errors) == 1
