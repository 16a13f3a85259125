"""Generation of source account combinations able to fund a goal"""

import logging
from typing import Dict, List, Optional
from transfer_router.domain.balance import calculate_available_balance
from transfer_router.domain.models import Account, AccountCombination, TransferRelationship

logger = logging.getLogger(__name__)

DEFAULT_MAX_COMBINATION_SIZE = 5


def select_eligible_accounts(
    accounts: List[Account],
    paths_to_target: Dict[str, List[TransferRelationship]],
    max_eligible_accounts: Optional[int] = None,
) -> List[Account]:
    """
    Accounts with positive available balance and a path to the target,
    largest available balance first.

    max_eligible_accounts keeps only the top-K by balance, which bounds the
    2^n subset enumeration.
    """
    eligible = [
        account
        for account in accounts
        if calculate_available_balance(account) > 0 and paths_to_target.get(account.id)
    ]
    eligible.sort(key=calculate_available_balance, reverse=True)

    if max_eligible_accounts is not None:
        eligible = eligible[:max_eligible_accounts]
    return eligible


def generate_valid_combinations(
    accounts: List[Account],
    goal_amount_cents: int,
    paths_to_target: Dict[str, List[TransferRelationship]],
    max_combination_size: int = DEFAULT_MAX_COMBINATION_SIZE,
    max_combinations: Optional[int] = None,
    max_eligible_accounts: Optional[int] = None,
) -> List[AccountCombination]:
    """
    Enumerate every subset of eligible accounts whose combined available
    balance meets the goal.

    Subsets are visited by bitmask over the balance-sorted accounts, so
    combinations built from larger balances surface first. Subsets larger
    than max_combination_size are skipped; enumeration stops once
    max_combinations results are collected.
    """
    eligible = select_eligible_accounts(accounts, paths_to_target, max_eligible_accounts)
    if not eligible:
        return []

    balances = [calculate_available_balance(account) for account in eligible]
    n = len(eligible)
    combinations: List[AccountCombination] = []

    for mask in range(1, 1 << n):
        if max_combinations is not None and len(combinations) >= max_combinations:
            break

        members = [j for j in range(n) if mask & (1 << j)]
        if len(members) > max_combination_size:
            continue

        total_available = sum(balances[j] for j in members)
        if total_available >= goal_amount_cents:
            combinations.append(
                AccountCombination(
                    accounts=[eligible[j] for j in members],
                    total_available_cents=total_available,
                )
            )

    logger.debug(
        "Combinations generated",
        extra={"eligible_accounts": n, "combinations": len(combinations)},
    )
    return combinations
