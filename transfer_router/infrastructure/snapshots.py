"""Account and transfer-rule snapshot documents

A snapshot is the JSON document describing every account and transfer rule
available to the router:

    {
      "accounts": [{"id": "chk", "name": "Checking", "type": "checking",
                    "balance_cents": 120000, "institution_type": "traditional_bank",
                    "pending_transactions": [...]}],
      "transfer_rules": [{"from": "chk", "to": "venmo", "speed": "instant", "fee_cents": 25}],
      "metadata": {"version": "1", "last_updated": "...", "notes": "..."}
    }
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from transfer_router.domain.exceptions import InvalidSnapshotError
from transfer_router.domain.models import (
    Account,
    AccountMetadata,
    AccountType,
    InstitutionType,
    Transaction,
    TransactionStatus,
    TransferRelationship,
    TransferSpeed,
)
from transfer_router.utils.date_utils import ensure_aware


class TransactionRecord(BaseModel):
    """Pending transaction as it appears on the wire"""

    id: str = Field(..., min_length=1)
    account_id: str
    amount_cents: int = Field(..., description="Negative for debits")
    date: datetime
    status: TransactionStatus
    description: str = ""
    category: Optional[str] = None

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            account_id=self.account_id,
            amount_cents=self.amount_cents,
            date=ensure_aware(self.date),
            status=self.status,
            description=self.description,
            category=self.category,
        )


class AccountMetadataRecord(BaseModel):
    last_updated: Optional[datetime] = None
    is_active: bool = True


class AccountRecord(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: AccountType
    balance_cents: int
    institution_type: InstitutionType
    pending_transactions: List[TransactionRecord] = Field(default_factory=list)
    metadata: AccountMetadataRecord = Field(default_factory=AccountMetadataRecord)

    def to_domain(self, loaded_at: datetime) -> Account:
        return Account(
            id=self.id,
            name=self.name,
            type=self.type,
            balance_cents=self.balance_cents,
            pending_transactions=[txn.to_domain() for txn in self.pending_transactions],
            institution_type=self.institution_type,
            metadata=AccountMetadata(
                last_updated=ensure_aware(self.metadata.last_updated or loaded_at),
                is_active=self.metadata.is_active,
            ),
        )


class TransferRuleRecord(BaseModel):
    """Transfer relationship; accepts the short "from"/"to" keys or the full names"""

    model_config = ConfigDict(populate_by_name=True)

    from_account_id: str = Field(..., alias="from", min_length=1)
    to_account_id: str = Field(..., alias="to", min_length=1)
    speed: TransferSpeed
    fee_cents: Optional[int] = Field(None, ge=0, description="None means free")
    is_available: bool = True

    def to_domain(self) -> TransferRelationship:
        return TransferRelationship(
            from_account_id=self.from_account_id,
            to_account_id=self.to_account_id,
            speed=self.speed,
            fee_cents=self.fee_cents,
            is_available=self.is_available,
        )


class SnapshotDocument(BaseModel):
    accounts: List[AccountRecord]
    transfer_rules: List[TransferRuleRecord] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


@dataclass
class TransferSnapshot:
    """Domain view of a snapshot document"""

    accounts: List[Account]
    transfer_matrix: List[TransferRelationship]
    metadata: Dict[str, Any] = field(default_factory=dict)


def parse_snapshot(data: Dict[str, Any], loaded_at: Optional[datetime] = None) -> TransferSnapshot:
    """
    Convert a decoded snapshot document into domain objects.

    Accounts without metadata are stamped with `loaded_at` (default: now).

    Raises:
        InvalidSnapshotError: When the document does not match the format
    """
    try:
        document = SnapshotDocument.model_validate(data)
    except ValidationError as e:
        raise InvalidSnapshotError(f"Invalid snapshot document: {e.error_count()} error(s)") from e

    loaded_at = loaded_at or datetime.now(timezone.utc)
    return TransferSnapshot(
        accounts=[record.to_domain(loaded_at) for record in document.accounts],
        transfer_matrix=[rule.to_domain() for rule in document.transfer_rules],
        metadata=document.metadata,
    )


def load_snapshot(path: str | Path) -> TransferSnapshot:
    """Read and parse a snapshot JSON file"""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidSnapshotError(f"Cannot read snapshot {path}: {e}") from e
    return parse_snapshot(data)
