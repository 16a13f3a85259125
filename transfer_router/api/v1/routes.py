"""POST /v1/routes - transfer route calculation endpoints"""

import time
import logging
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from transfer_router.api.v1.schemas import (
    LiveRouteCalculationRequest,
    RouteCalculationRequest,
    RouteCalculationResponse,
)
from transfer_router.api.dependencies import get_request_id, get_path_cache_registry, get_transfer_data_client
from transfer_router.domain.exceptions import StructuralValidationError, TransferDataAPIError
from transfer_router.domain.models import Account, Goal, RoutingError, TransferRelationship
from transfer_router.domain.paths import PathCache, PathCacheRegistry
from transfer_router.domain.routing import calculate_optimal_routes
from transfer_router.infrastructure.clients.transfer_data import TransferDataClient
from transfer_router.infrastructure.observability.logging import log_routing_outcome
from transfer_router.infrastructure.observability.metrics import record_routing_outcome

router = APIRouter()


def _calculate(
    request_id: str,
    goal: Goal,
    accounts: List[Account],
    transfer_matrix: List[TransferRelationship],
    current_time: Optional[datetime],
    path_cache: PathCache,
) -> RouteCalculationResponse:
    """Run the routing pipeline and record metrics/logs for the outcome"""
    start_time = time.time()

    try:
        outcome = calculate_optimal_routes(
            goal,
            accounts,
            transfer_matrix,
            current_time,
            path_cache=path_cache,
        )

    except StructuralValidationError as e:
        record_routing_outcome("invalid_input")
        logging.warning(f"Invalid routing input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail={"subject": e.subject, "errors": e.errors})

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000

    if isinstance(outcome, RoutingError):
        record_routing_outcome(outcome.error.value)
        log_routing_outcome(request_id, goal.target_account_id, outcome.error.value, 0, duration_ms)
    else:
        cheapest = outcome.routes[0]
        record_routing_outcome("routed", outcome.all_routes_risky, cheapest.total_fees_cents)
        log_routing_outcome(
            request_id,
            goal.target_account_id,
            "routed",
            len(outcome.routes),
            duration_ms,
            all_routes_risky=outcome.all_routes_risky,
        )

    return RouteCalculationResponse.from_outcome(outcome)


@router.post("/routes", response_model=RouteCalculationResponse, response_model_exclude_none=True)
def calculate_routes(request_body: RouteCalculationRequest, request: Request):
    """
    Calculate cheapest, fastest and recommended routes for a goal.

    Accounts and transfer rules come with the request, so paths are memoized
    only for the lifetime of this request.

    Returns:
        Three categorized routes, or a routing error (past_deadline,
        insufficient_funds, no_path) with HTTP 200
    """
    request_id = get_request_id(request)
    loaded_at = datetime.now(timezone.utc)

    return _calculate(
        request_id,
        request_body.goal.to_domain(),
        [record.to_domain(loaded_at) for record in request_body.accounts],
        [rule.to_domain() for rule in request_body.transfer_matrix],
        request_body.current_time,
        PathCache(),
    )


@router.post("/routes/live", response_model=RouteCalculationResponse, response_model_exclude_none=True)
async def calculate_live_routes(
    request_body: LiveRouteCalculationRequest,
    request: Request,
    client: TransferDataClient = Depends(get_transfer_data_client),
    path_caches: PathCacheRegistry = Depends(get_path_cache_registry),
):
    """
    Calculate routes over the snapshot served by the transfer data service.

    Flow:
    1. Fetch accounts and transfer rules
    2. Run the routing pipeline in the threadpool with the path cache of
       this snapshot's transfer matrix
    3. Return categorized routes or a routing error

    Paths are only reused for an identical transfer matrix, so different
    users and changed rules never share cached paths.
    """
    request_id = get_request_id(request)

    try:
        snapshot = await client.get_snapshot(request_body.user_id)
    except TransferDataAPIError as e:
        logging.error(f"Transfer data error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Transfer data service unavailable")

    # CPU-bound combination search stays off the event loop
    return await run_in_threadpool(
        _calculate,
        request_id,
        request_body.goal.to_domain(),
        snapshot.accounts,
        snapshot.transfer_matrix,
        request_body.current_time,
        path_caches.for_matrix(snapshot.transfer_matrix),
    )
