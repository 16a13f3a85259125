"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional
from fastapi.testclient import TestClient
from transfer_router.api.main import create_app
from transfer_router.api.dependencies import path_cache_registry
from transfer_router.domain.models import (
    Account,
    AccountMetadata,
    AccountType,
    Goal,
    InstitutionType,
    Transaction,
    TransactionStatus,
    TransferRelationship,
    TransferSpeed,
)

# Monday 2024-01-15, 05:00 EST
MONDAY_10AM_UTC = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return MONDAY_10AM_UTC


@pytest.fixture
def make_account(now: datetime) -> Callable[..., Account]:
    """Factory for accounts with sensible defaults"""

    def _make(
        account_id: str,
        balance_cents: int,
        pending: Optional[List[Transaction]] = None,
        account_type: AccountType = AccountType.CHECKING,
    ) -> Account:
        return Account(
            id=account_id,
            name=f"{account_id.title()} Account",
            type=account_type,
            balance_cents=balance_cents,
            pending_transactions=pending or [],
            institution_type=InstitutionType.TRADITIONAL_BANK,
            metadata=AccountMetadata(last_updated=now, is_active=True),
        )

    return _make


@pytest.fixture
def make_transaction(now: datetime) -> Callable[..., Transaction]:
    counter = iter(range(1, 10_000))

    def _make(
        amount_cents: int,
        status: TransactionStatus = TransactionStatus.PENDING,
        account_id: str = "checking",
    ) -> Transaction:
        return Transaction(
            id=f"tx_{next(counter)}",
            account_id=account_id,
            amount_cents=amount_cents,
            date=now,
            status=status,
            description="Test transaction",
        )

    return _make


@pytest.fixture
def make_rule() -> Callable[..., TransferRelationship]:
    def _make(
        from_id: str,
        to_id: str,
        speed: TransferSpeed = TransferSpeed.INSTANT,
        fee_cents: Optional[int] = None,
        is_available: bool = True,
    ) -> TransferRelationship:
        return TransferRelationship(
            from_account_id=from_id,
            to_account_id=to_id,
            speed=speed,
            fee_cents=fee_cents,
            is_available=is_available,
        )

    return _make


@pytest.fixture
def make_goal(now: datetime) -> Callable[..., Goal]:
    def _make(target: str, amount_cents: int, deadline: Optional[datetime] = None) -> Goal:
        return Goal(
            target_account_id=target,
            amount_cents=amount_cents,
            deadline=deadline or now + timedelta(days=7),
        )

    return _make


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with empty path caches"""
    path_cache_registry.clear()
    app = create_app()
    return TestClient(app)


@pytest.fixture
def snapshot_document() -> dict:
    """Transfer data snapshot: checking -> venmo -> cash_app, savings -> checking"""
    return {
        "accounts": [
            {
                "id": "checking",
                "name": "Checking",
                "type": "checking",
                "balance_cents": 120000,
                "institution_type": "traditional_bank",
                "pending_transactions": [
                    {
                        "id": "tx_rent",
                        "account_id": "checking",
                        "amount_cents": -20000,
                        "date": "2024-01-14T12:00:00Z",
                        "status": "pending",
                        "description": "Rent hold",
                    }
                ],
            },
            {
                "id": "savings",
                "name": "Savings",
                "type": "savings",
                "balance_cents": 50000,
                "institution_type": "traditional_bank",
            },
            {
                "id": "venmo",
                "name": "Venmo",
                "type": "venmo",
                "balance_cents": 0,
                "institution_type": "neobank",
            },
            {
                "id": "cash_app",
                "name": "Cash App",
                "type": "cash_app",
                "balance_cents": 0,
                "institution_type": "neobank",
            },
        ],
        "transfer_rules": [
            {"from": "checking", "to": "venmo", "speed": "instant", "fee_cents": 175},
            {"from": "checking", "to": "venmo", "speed": "3_day", "fee_cents": None},
            {"from": "venmo", "to": "cash_app", "speed": "instant", "fee_cents": 0},
            {"from": "savings", "to": "checking", "speed": "1_day"},
        ],
        "metadata": {"version": "2024.01", "notes": "test fixture"},
    }
