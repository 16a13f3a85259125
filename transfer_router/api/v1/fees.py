"""POST /v1/fees/lookup - direct transfer fee lookup"""

from fastapi import APIRouter, HTTPException

from transfer_router.api.v1.schemas import FeeLookupRequest, FeeLookupResponse
from transfer_router.domain.costs import lookup_transfer_fee

router = APIRouter()


@router.post("/fees/lookup", response_model=FeeLookupResponse)
def lookup_fee(request_body: FeeLookupRequest):
    """
    Fee for moving money directly between two accounts.

    Without a speed the cheapest available relationship is quoted.

    Returns:
        Fee in cents (0 for free relationships), 404 when the accounts are
        not directly connected
    """
    fee_cents = lookup_transfer_fee(
        [rule.to_domain() for rule in request_body.transfer_matrix],
        request_body.from_account_id,
        request_body.to_account_id,
        request_body.speed,
    )

    if fee_cents is None:
        raise HTTPException(status_code=404, detail="No transfer relationship between accounts")

    return FeeLookupResponse(
        from_account_id=request_body.from_account_id,
        to_account_id=request_body.to_account_id,
        speed=request_body.speed,
        fee_cents=fee_cents,
    )
