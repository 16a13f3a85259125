"""Route construction from an account combination"""

from datetime import datetime
from typing import Dict, List, Tuple
from transfer_router.domain.balance import calculate_available_balance
from transfer_router.domain.costs import calculate_total_fees
from transfer_router.domain.exceptions import MissingPathError
from transfer_router.domain.models import (
    Account,
    AccountCombination,
    Route,
    RouteCategory,
    TransferRelationship,
    TransferStep,
)
from transfer_router.domain.timing import estimate_arrival_time
from transfer_router.utils.date_utils import ensure_aware


def allocate_amounts(combination: AccountCombination, goal_amount_cents: int) -> List[Tuple[Account, int]]:
    """
    Split the goal across the combination proportionally to available balance.

    Every account but the last gets floor(goal * share) cents, capped by its
    available balance and by what is still unallocated. The last account
    absorbs the remainder (capped by its own balance). Cents the last account
    cannot take are topped up on earlier accounts in order, so allocations
    sum to the goal whenever the combination can cover it.

    Example:
        goal $100.00, balances $200.00 / $100.00
        10000 * 20000 // 30000 = 6666, last account: 10000 - 6666 = 3334
    """
    accounts = combination.accounts
    total_available = combination.total_available_cents
    remaining = goal_amount_cents
    allocations: List[Tuple[Account, int]] = []

    for account in accounts[:-1]:
        available = calculate_available_balance(account)
        proportional = goal_amount_cents * available // total_available if total_available > 0 else 0
        amount = max(min(proportional, available, remaining), 0)
        allocations.append((account, amount))
        remaining -= amount

    last = accounts[-1]
    last_amount = max(min(remaining, calculate_available_balance(last)), 0)
    allocations.append((last, last_amount))
    remaining -= last_amount

    # Floor rounding can leave cents the last account cannot absorb
    for index, (account, amount) in enumerate(allocations):
        if remaining <= 0:
            break
        extra = min(calculate_available_balance(account) - amount, remaining)
        if extra > 0:
            allocations[index] = (account, amount + extra)
            remaining -= extra

    return allocations


def create_steps_for_path(
    path: List[TransferRelationship],
    amount_cents: int,
    initiation_time: datetime,
) -> List[TransferStep]:
    """
    One step per hop. The full amount flows through every hop and each hop
    starts when the previous one arrives.
    """
    steps = []
    step_start = initiation_time
    for rel in path:
        arrival = estimate_arrival_time(rel.speed, step_start)
        steps.append(
            TransferStep(
                from_account_id=rel.from_account_id,
                to_account_id=rel.to_account_id,
                amount_cents=amount_cents,
                method=rel.speed,
                fee_cents=rel.fee_cents or 0,
                estimated_arrival=arrival,
            )
        )
        step_start = arrival
    return steps


def build_route(
    combination: AccountCombination,
    paths_to_target: Dict[str, List[TransferRelationship]],
    goal_amount_cents: int,
    current_time: datetime,
) -> Route:
    """
    Turn a combination into concrete transfer steps.

    Category, risk and reasoning are placeholders filled in by the risk and
    selection stages.
    """
    current_time = ensure_aware(current_time)
    steps: List[TransferStep] = []

    for account, amount in allocate_amounts(combination, goal_amount_cents):
        path = paths_to_target.get(account.id)
        if not path:
            raise MissingPathError(f"No path found for account {account.id}")
        steps.extend(create_steps_for_path(path, amount, current_time))

    return Route(
        category=RouteCategory.RECOMMENDED,
        steps=steps,
        total_fees_cents=calculate_total_fees(steps),
        estimated_arrival=max(step.estimated_arrival for step in steps),
    )
