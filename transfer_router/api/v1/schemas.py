"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional
from transfer_router.domain.models import (
    Goal,
    RiskLevel,
    Route,
    RouteCategory,
    RoutingError,
    RoutingErrorKind,
    RoutingResult,
    TransferSpeed,
    TransferStep,
)
from transfer_router.infrastructure.snapshots import AccountRecord, TransferRuleRecord
from transfer_router.utils.date_utils import ensure_aware


class GoalSchema(BaseModel):
    """Where the money must end up, how much, and by when"""

    target_account_id: str = Field(..., min_length=1, description="Destination account")
    amount_cents: int = Field(..., gt=0, description="Amount to move in cents")
    deadline: datetime

    def to_domain(self) -> Goal:
        return Goal(
            target_account_id=self.target_account_id,
            amount_cents=self.amount_cents,
            deadline=ensure_aware(self.deadline),
        )


class RouteCalculationRequest(BaseModel):
    """Request body for POST /v1/routes"""

    goal: GoalSchema
    accounts: List[AccountRecord] = Field(..., min_length=1)
    transfer_matrix: List[TransferRuleRecord] = Field(default_factory=list)
    current_time: Optional[datetime] = Field(None, description="Defaults to now")


class LiveRouteCalculationRequest(BaseModel):
    """Request body for POST /v1/routes/live - accounts come from the transfer data service"""

    goal: GoalSchema
    user_id: Optional[str] = None
    current_time: Optional[datetime] = None


class TransferStepSchema(BaseModel):
    from_account_id: str
    to_account_id: str
    amount_cents: int
    method: TransferSpeed
    fee_cents: int
    estimated_arrival: datetime

    @classmethod
    def from_domain(cls, step: TransferStep) -> "TransferStepSchema":
        return cls(
            from_account_id=step.from_account_id,
            to_account_id=step.to_account_id,
            amount_cents=step.amount_cents,
            method=step.method,
            fee_cents=step.fee_cents,
            estimated_arrival=step.estimated_arrival,
        )


class RouteSchema(BaseModel):
    category: RouteCategory
    steps: List[TransferStepSchema]
    total_fees_cents: int
    estimated_arrival: datetime
    risk_level: RiskLevel
    risk_score: float
    reasoning: str

    @classmethod
    def from_domain(cls, route: Route) -> "RouteSchema":
        return cls(
            category=route.category,
            steps=[TransferStepSchema.from_domain(step) for step in route.steps],
            total_fees_cents=route.total_fees_cents,
            estimated_arrival=route.estimated_arrival,
            risk_level=route.risk_level,
            risk_score=route.risk_score,
            reasoning=route.reasoning,
        )


class RouteCalculationResponse(BaseModel):
    """
    Either three categorized routes or a routing error, never both.

    Serialized with exclude_none so an error response has no `routes` key and
    `all_routes_risky` only appears when true.
    """

    routes: Optional[List[RouteSchema]] = None
    all_routes_risky: Optional[bool] = None
    error: Optional[RoutingErrorKind] = None
    message: Optional[str] = None
    shortfall_cents: Optional[int] = None
    suggestion: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: RoutingResult | RoutingError) -> "RouteCalculationResponse":
        if isinstance(outcome, RoutingError):
            return cls(
                error=outcome.error,
                message=outcome.message,
                shortfall_cents=outcome.shortfall_cents,
                suggestion=outcome.suggestion,
            )
        return cls(
            routes=[RouteSchema.from_domain(route) for route in outcome.routes],
            all_routes_risky=True if outcome.all_routes_risky else None,
        )


class FeeLookupRequest(BaseModel):
    """Request body for POST /v1/fees/lookup"""

    transfer_matrix: List[TransferRuleRecord]
    from_account_id: str = Field(..., min_length=1)
    to_account_id: str = Field(..., min_length=1)
    speed: Optional[TransferSpeed] = None


class FeeLookupResponse(BaseModel):
    from_account_id: str
    to_account_id: str
    speed: Optional[TransferSpeed] = None
    fee_cents: int


class CacheInvalidationResponse(BaseModel):
    cleared: int
