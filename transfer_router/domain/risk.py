"""Risk scoring engine for built routes"""

from datetime import datetime
from transfer_router.domain.models import ACH_SPEEDS, RiskAssessment, RiskLevel, Route, TransferSpeed
from transfer_router.utils.date_utils import ensure_aware

TIMING_WEIGHT = 0.5
RELIABILITY_WEIGHT = 0.3
COMPLEXITY_WEIGHT = 0.2

HIGH_RISK_THRESHOLD = 70


def calculate_timing_risk(estimated_arrival: datetime, deadline: datetime) -> int:
    """
    Risk from the buffer between arrival and deadline.

    Buckets:
    - after deadline: 100
    - more than 48h:  0
    - 24h to 48h:     20
    - 6h to 24h:      50
    - under 6h:       80
    """
    buffer_hours = (ensure_aware(deadline) - ensure_aware(estimated_arrival)).total_seconds() / 3600

    if buffer_hours < 0:
        return 100
    if buffer_hours > 48:
        return 0
    elif buffer_hours >= 24:
        return 20
    elif buffer_hours >= 6:
        return 50
    else:
        return 80


def calculate_reliability_risk(route: Route) -> int:
    """0 for all-instant routes, 50 for all-ACH, 30 for a mix"""
    methods = {step.method for step in route.steps}
    has_instant = TransferSpeed.INSTANT in methods
    has_ach = bool(methods & ACH_SPEEDS)

    if has_instant and not has_ach:
        return 0
    elif has_instant and has_ach:
        return 30
    else:
        return 50


def calculate_complexity_risk(route: Route) -> int:
    step_count = len(route.steps)
    if step_count <= 1:
        return 0
    elif step_count <= 3:
        return 20
    else:
        return 40


def calculate_risk_score(route: Route, deadline: datetime) -> RiskAssessment:
    """
    Weighted risk score from 0 (safest) to 100.

    Weights: timing 50%, reliability 30%, complexity 20%.
    """
    timing = calculate_timing_risk(route.estimated_arrival, deadline)
    reliability = calculate_reliability_risk(route)
    complexity = calculate_complexity_risk(route)

    score = (timing * TIMING_WEIGHT) + (reliability * RELIABILITY_WEIGHT) + (complexity * COMPLEXITY_WEIGHT)

    return RiskAssessment(
        score=score,
        timing=timing,
        reliability=reliability,
        complexity=complexity,
    )


def classify_risk_level(risk_score: float) -> RiskLevel:
    if risk_score <= 30:
        return RiskLevel.LOW
    elif risk_score <= 60:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.HIGH


def apply_risk_assessment(route: Route, deadline: datetime) -> RiskAssessment:
    """Score a route in place and return the breakdown"""
    assessment = calculate_risk_score(route, deadline)
    route.risk_score = assessment.score
    route.risk_level = classify_risk_level(assessment.score)
    return assessment
