"""Domain models - pure Python dataclasses representing routing entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CASH_APP = "cash_app"
    VENMO = "venmo"
    PAYPAL = "paypal"
    OTHER = "other"


class InstitutionType(str, Enum):
    TRADITIONAL_BANK = "traditional_bank"
    NEOBANK = "neobank"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    CLEARED = "cleared"
    FAILED = "failed"


class TransferSpeed(str, Enum):
    INSTANT = "instant"
    SAME_DAY = "same_day"
    ONE_DAY = "1_day"
    THREE_DAY = "3_day"


# Every method slower than instant settles through the ACH network
ACH_SPEEDS = frozenset({TransferSpeed.SAME_DAY, TransferSpeed.ONE_DAY, TransferSpeed.THREE_DAY})


class RouteCategory(str, Enum):
    CHEAPEST = "cheapest"
    FASTEST = "fastest"
    RECOMMENDED = "recommended"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RoutingErrorKind(str, Enum):
    PAST_DEADLINE = "past_deadline"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NO_PATH = "no_path"


@dataclass
class Transaction:
    """Transaction on an account; negative amounts are debits"""

    id: str
    account_id: str
    amount_cents: int
    date: datetime
    status: TransactionStatus
    description: str = ""
    category: Optional[str] = None


@dataclass
class AccountMetadata:
    last_updated: datetime
    is_active: bool = True


@dataclass(eq=False)
class Account:
    """Funding account; compared by identity so the same object can key allocations"""

    id: str
    name: str
    type: AccountType
    balance_cents: int
    pending_transactions: List[Transaction]
    institution_type: InstitutionType
    metadata: AccountMetadata


@dataclass(frozen=True)
class TransferRelationship:
    """Directed transfer option between two accounts"""

    from_account_id: str
    to_account_id: str
    speed: TransferSpeed
    fee_cents: Optional[int] = None  # None = free
    is_available: bool = True

    @property
    def key(self) -> tuple:
        """Identity used for duplicate detection"""
        return (self.from_account_id, self.to_account_id, self.speed)


@dataclass
class Goal:
    target_account_id: str
    amount_cents: int
    deadline: datetime


@dataclass
class TransferStep:
    """One hop of a route"""

    from_account_id: str
    to_account_id: str
    amount_cents: int
    method: TransferSpeed
    fee_cents: int
    estimated_arrival: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from_account_id": self.from_account_id,
            "to_account_id": self.to_account_id,
            "amount_cents": self.amount_cents,
            "method": self.method.value,
            "fee_cents": self.fee_cents,
            "estimated_arrival": self.estimated_arrival.isoformat(),
        }


@dataclass
class Route:
    """Complete set of steps moving the goal amount into the target account"""

    category: RouteCategory
    steps: List[TransferStep]
    total_fees_cents: int
    estimated_arrival: datetime
    risk_level: RiskLevel = RiskLevel.LOW
    risk_score: float = 0.0
    reasoning: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "steps": [step.to_dict() for step in self.steps],
            "total_fees_cents": self.total_fees_cents,
            "estimated_arrival": self.estimated_arrival.isoformat(),
            "risk_level": self.risk_level.value,
            "risk_score": self.risk_score,
            "reasoning": self.reasoning,
        }


@dataclass
class AccountCombination:
    """Candidate set of source accounts able to fund the goal"""

    accounts: List[Account]
    total_available_cents: int


@dataclass
class TransferPath:
    source_account_id: str
    target_account_id: str
    hops: List[TransferRelationship]

    @property
    def total_steps(self) -> int:
        return len(self.hops)


@dataclass
class RiskAssessment:
    """Composite risk score with its components"""

    score: float
    timing: int
    reliability: int
    complexity: int


@dataclass
class RoutingResult:
    routes: List[Route]
    all_routes_risky: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"routes": [route.to_dict() for route in self.routes]}
        if self.all_routes_risky:
            result["all_routes_risky"] = True
        return result


@dataclass
class RoutingError:
    """Expected business outcome when the goal cannot be met; never carries routes"""

    error: RoutingErrorKind
    message: str
    shortfall_cents: Optional[int] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"error": self.error.value, "message": self.message}
        if self.shortfall_cents is not None:
            result["shortfall_cents"] = self.shortfall_cents
        if self.suggestion is not None:
            result["suggestion"] = self.suggestion
        return result


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors
