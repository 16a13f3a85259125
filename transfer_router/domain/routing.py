"""Routing pipeline - main entry point for route calculation"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Union
from transfer_router.config import settings
from transfer_router.domain.balance import identify_source_accounts
from transfer_router.domain.combinations import generate_valid_combinations
from transfer_router.domain.exceptions import StructuralValidationError
from transfer_router.domain.models import (
    Account,
    Goal,
    RoutingError,
    RoutingErrorKind,
    RoutingResult,
    TransferRelationship,
)
from transfer_router.domain.outcomes import (
    check_insufficient_funds,
    check_no_path,
    check_past_deadline,
    create_error_response,
)
from transfer_router.domain.paths import PathCache, find_all_paths_to_target
from transfer_router.domain.risk import apply_risk_assessment
from transfer_router.domain.routes import build_route
from transfer_router.domain.selection import categorize_routes, check_all_routes_risky
from transfer_router.domain.validation import validate_accounts, validate_goal, validate_transfer_matrix
from transfer_router.utils.date_utils import ensure_aware

logger = logging.getLogger(__name__)


def _validate_structure(goal: Goal, accounts: List[Account], transfer_matrix: List[TransferRelationship]) -> None:
    checks = (
        ("accounts", validate_accounts(accounts)),
        ("transfer matrix", validate_transfer_matrix(transfer_matrix, accounts)),
        ("goal", validate_goal(goal)),
    )
    for subject, result in checks:
        if not result.is_valid:
            raise StructuralValidationError(subject, result.errors)


def calculate_optimal_routes(
    goal: Goal,
    accounts: List[Account],
    transfer_matrix: List[TransferRelationship],
    current_time: Optional[datetime] = None,
    *,
    path_cache: Optional[PathCache] = None,
    max_combination_size: Optional[int] = None,
    max_combinations: Optional[int] = None,
    max_eligible_accounts: Optional[int] = None,
) -> Union[RoutingResult, RoutingError]:
    """
    Compute cheapest, fastest and recommended routes for a transfer goal.

    Flow:
    1. Structural validation (raises StructuralValidationError)
    2. Past deadline, insufficient funds and no path checks (returned as RoutingError)
    3. Path discovery, combination generation, route building
    4. Risk scoring and categorization
    5. High-risk warning when every selected route scores above 70

    Tunables left as None fall back to settings. Pass a PathCache to memoize
    path discovery across calls over the same transfer matrix.
    """
    current_time = ensure_aware(current_time) if current_time is not None else datetime.now(timezone.utc)
    if max_combination_size is None:
        max_combination_size = settings.max_combination_size
    if max_combinations is None:
        max_combinations = settings.max_combinations
    if max_eligible_accounts is None:
        max_eligible_accounts = settings.max_eligible_accounts

    _validate_structure(goal, accounts, transfer_matrix)

    # 1. Deadline
    if check_past_deadline(goal.deadline, current_time):
        logger.info("Deadline already passed", extra={"target_account_id": goal.target_account_id})
        return create_error_response(RoutingErrorKind.PAST_DEADLINE)

    # 2. Funds
    insufficient, shortfall = check_insufficient_funds(accounts, goal.amount_cents)
    if insufficient:
        logger.info("Insufficient funds", extra={"shortfall_cents": shortfall})
        return create_error_response(RoutingErrorKind.INSUFFICIENT_FUNDS, shortfall_cents=shortfall)

    # 3. Reachability
    paths_to_target = find_all_paths_to_target(goal.target_account_id, transfer_matrix, cache=path_cache)

    source_accounts = identify_source_accounts(accounts)
    source_ids = [account.id for account in source_accounts]
    no_path, suggestion = check_no_path(goal.target_account_id, transfer_matrix, source_ids)
    if no_path:
        logger.info("No path to target", extra={"suggestion": suggestion})
        return create_error_response(RoutingErrorKind.NO_PATH, suggestion=suggestion)

    # 4. Candidate combinations
    combinations = generate_valid_combinations(
        accounts,
        goal.amount_cents,
        paths_to_target,
        max_combination_size=max_combination_size,
        max_combinations=max_combinations,
        max_eligible_accounts=max_eligible_accounts,
    )

    if not combinations:
        # Funded accounts exist but the ones that can reach the target cannot cover the goal
        funded_but_unreachable = any(not paths_to_target.get(account.id) for account in source_accounts)
        if funded_but_unreachable:
            _, suggestion = check_no_path(goal.target_account_id, transfer_matrix, source_ids)
            logger.info("Funded accounts cannot reach target", extra={"suggestion": suggestion})
            return create_error_response(RoutingErrorKind.NO_PATH, suggestion=suggestion)

        logger.info("No combination covers goal", extra={"shortfall_cents": goal.amount_cents})
        return create_error_response(RoutingErrorKind.INSUFFICIENT_FUNDS, shortfall_cents=goal.amount_cents)

    # 5. Build and score
    routes = [build_route(combination, paths_to_target, goal.amount_cents, current_time) for combination in combinations]
    for route in routes:
        apply_risk_assessment(route, goal.deadline)

    # 6. Categorize
    selected = categorize_routes(routes, current_time)
    all_routes_risky = check_all_routes_risky(selected)

    logger.info(
        "Routes calculated",
        extra={
            "target_account_id": goal.target_account_id,
            "candidate_routes": len(routes),
            "all_routes_risky": all_routes_risky,
        },
    )
    return RoutingResult(routes=selected, all_routes_risky=all_routes_risky)
