"""Fee arithmetic for transfer steps and routes"""

from typing import List, Optional
from transfer_router.domain.models import Route, TransferRelationship, TransferSpeed, TransferStep


def calculate_total_fees(steps: List[TransferStep]) -> int:
    """Sum of step fees in cents"""
    return sum(step.fee_cents or 0 for step in steps)


def normalize_costs(routes: List[Route]) -> List[float]:
    """
    Each route's fees as a percentage of the most expensive route's fees.

    Positional: result[i] belongs to routes[i]. All zeros when no route
    charges a fee.
    """
    if not routes:
        return []

    max_fees = max(route.total_fees_cents for route in routes)
    if max_fees == 0:
        return [0.0 for _ in routes]

    return [route.total_fees_cents / max_fees * 100 for route in routes]


def lookup_transfer_fee(
    transfer_matrix: List[TransferRelationship],
    from_account_id: str,
    to_account_id: str,
    speed: Optional[TransferSpeed] = None,
) -> Optional[int]:
    """
    Fee in cents for a direct transfer, None when no available relationship
    connects the two accounts.

    Without a speed, the cheapest matching relationship is used.
    """
    fees = [
        rel.fee_cents or 0
        for rel in transfer_matrix
        if rel.is_available
        and rel.from_account_id == from_account_id
        and rel.to_account_id == to_account_id
        and (speed is None or rel.speed == speed)
    ]
    return min(fees) if fees else None
