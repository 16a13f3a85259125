"""Detection of goals that cannot be met, returned as RoutingError values"""

from datetime import datetime
from typing import List, Optional, Tuple
from transfer_router.domain.balance import calculate_total_available
from transfer_router.domain.models import Account, RoutingError, RoutingErrorKind, TransferRelationship
from transfer_router.domain.paths import build_adjacency_list, get_reachable_accounts, has_path
from transfer_router.utils.date_utils import ensure_aware


def check_past_deadline(deadline: datetime, current_time: datetime) -> bool:
    return ensure_aware(deadline) < ensure_aware(current_time)


def check_insufficient_funds(accounts: List[Account], goal_amount_cents: int) -> Tuple[bool, int]:
    """Returns (insufficient, shortfall_cents); shortfall is 0 when funds suffice"""
    total_available = calculate_total_available(accounts)
    if total_available < goal_amount_cents:
        return True, goal_amount_cents - total_available
    return False, 0


def find_intermediate_account(
    source_account_ids: List[str],
    target_account_id: str,
    transfer_matrix: List[TransferRelationship],
) -> Optional[str]:
    """
    An account reachable from some source that can itself reach the target.

    The target is never suggested. Candidates are tried in the order they are
    reached from the sources.
    """
    adjacency = build_adjacency_list(transfer_matrix)

    reachable_from_sources: dict = {}
    for source_id in source_account_ids:
        for account_id in get_reachable_accounts(source_id, adjacency):
            reachable_from_sources.setdefault(account_id)

    for account_id in reachable_from_sources:
        if account_id != target_account_id and has_path(account_id, target_account_id, adjacency):
            return account_id
    return None


def check_no_path(
    target_account_id: str,
    transfer_matrix: List[TransferRelationship],
    source_account_ids: List[str],
) -> Tuple[bool, Optional[str]]:
    """Returns (no_path, suggestion); the suggestion is only searched when no source reaches the target"""
    adjacency = build_adjacency_list(transfer_matrix)
    if any(has_path(source_id, target_account_id, adjacency) for source_id in source_account_ids):
        return False, None

    return True, find_intermediate_account(source_account_ids, target_account_id, transfer_matrix)


def create_error_response(
    kind: RoutingErrorKind,
    shortfall_cents: Optional[int] = None,
    suggestion: Optional[str] = None,
) -> RoutingError:
    """Build the user-facing error for a failed goal"""
    kind = RoutingErrorKind(kind)

    if kind == RoutingErrorKind.PAST_DEADLINE:
        return RoutingError(error=kind, message="Deadline has already passed")

    if kind == RoutingErrorKind.INSUFFICIENT_FUNDS:
        return RoutingError(
            error=kind,
            message=f"Insufficient funds available. Shortfall: ${(shortfall_cents or 0) / 100:.2f}",
            shortfall_cents=shortfall_cents,
        )

    message = "No transfer path exists to the target account"
    if suggestion:
        message += f". Consider adding a transfer relationship through account: {suggestion}"
    return RoutingError(error=kind, message=message, suggestion=suggestion or None)
