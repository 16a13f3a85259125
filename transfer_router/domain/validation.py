"""Structural validation of routing inputs

Every problem found is collected so a caller sees the full list at once.
Business outcomes (past deadline, insufficient funds, no path) are not
structural problems and are handled by the outcomes module.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Type
from transfer_router.domain.models import (
    Account,
    AccountMetadata,
    AccountType,
    Goal,
    InstitutionType,
    TransactionStatus,
    TransferRelationship,
    TransferSpeed,
    ValidationResult,
)
from transfer_router.utils.date_utils import ensure_aware


def _is_member(enum_cls: Type[Enum], value) -> bool:
    try:
        enum_cls(value)
    except ValueError:
        return False
    return True


def _is_cents(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _display(value) -> str:
    return str(getattr(value, "value", value))


def _is_non_empty_str(value) -> bool:
    return isinstance(value, str) and value.strip() != ""


def validate_goal(
    goal: Goal,
    current_time: Optional[datetime] = None,
    allow_past_deadline: bool = True,
) -> ValidationResult:
    result = ValidationResult()

    if not _is_non_empty_str(goal.target_account_id):
        result.errors.append("Target account ID must be a non-empty string")

    if not _is_cents(goal.amount_cents) or goal.amount_cents <= 0:
        result.errors.append("Goal amount must be a positive whole number of cents")

    if not isinstance(goal.deadline, datetime):
        result.errors.append("Deadline must be a datetime")
    elif not allow_past_deadline and current_time is not None:
        if ensure_aware(goal.deadline) < ensure_aware(current_time):
            result.errors.append("Deadline cannot be in the past")

    return result


def validate_accounts(accounts: List[Account]) -> ValidationResult:
    result = ValidationResult()
    errors = result.errors

    if not accounts:
        errors.append("Accounts list must be non-empty")
        return result

    seen_ids = set()
    for index, account in enumerate(accounts):
        prefix = f"Account at index {index}"

        if not _is_non_empty_str(account.id):
            errors.append(f"{prefix}: ID must be a non-empty string")
        else:
            if account.id in seen_ids:
                errors.append(f'{prefix}: Duplicate account ID "{account.id}"')
            seen_ids.add(account.id)

        if not _is_non_empty_str(account.name):
            errors.append(f"{prefix}: Name must be a non-empty string")

        if not _is_member(AccountType, account.type):
            errors.append(f'{prefix}: Invalid account type "{_display(account.type)}"')

        if not _is_cents(account.balance_cents):
            errors.append(f"{prefix}: Balance must be a whole number of cents")

        if not isinstance(account.pending_transactions, list):
            errors.append(f"{prefix}: Pending transactions must be a list")
        else:
            for txn_index, txn in enumerate(account.pending_transactions):
                txn_prefix = f"{prefix}, Transaction {txn_index}"
                if not _is_non_empty_str(txn.id):
                    errors.append(f"{txn_prefix}: ID must be a non-empty string")
                if not _is_cents(txn.amount_cents):
                    errors.append(f"{txn_prefix}: Amount must be a whole number of cents")
                if not isinstance(txn.date, datetime):
                    errors.append(f"{txn_prefix}: Date must be a datetime")
                if not _is_member(TransactionStatus, txn.status):
                    errors.append(f'{txn_prefix}: Invalid status "{_display(txn.status)}"')

        if not _is_member(InstitutionType, account.institution_type):
            errors.append(f'{prefix}: Institution type must be "traditional_bank" or "neobank"')

        metadata = account.metadata
        if not isinstance(metadata, AccountMetadata):
            errors.append(f"{prefix}: Metadata must be an AccountMetadata")
        else:
            if not isinstance(metadata.last_updated, datetime):
                errors.append(f"{prefix}: Metadata last_updated must be a datetime")
            if not isinstance(metadata.is_active, bool):
                errors.append(f"{prefix}: Metadata is_active must be a boolean")

    return result


def validate_transfer_matrix(
    transfer_matrix: List[TransferRelationship],
    accounts: List[Account],
) -> ValidationResult:
    result = ValidationResult()
    errors = result.errors

    if not isinstance(transfer_matrix, list):
        errors.append("Transfer matrix must be a list")
        return result

    known_ids = {account.id for account in accounts}
    seen_keys = set()

    for index, rel in enumerate(transfer_matrix):
        prefix = f"Transfer relationship at index {index}"

        for field_name in ("from_account_id", "to_account_id"):
            value = getattr(rel, field_name)
            if not _is_non_empty_str(value):
                errors.append(f"{prefix}: {field_name} must be a non-empty string")
            elif value not in known_ids:
                errors.append(f'{prefix}: {field_name} "{value}" does not exist in accounts')

        if not _is_member(TransferSpeed, rel.speed):
            errors.append(f'{prefix}: Invalid transfer speed "{_display(rel.speed)}"')

        if rel.fee_cents is not None:
            if not _is_cents(rel.fee_cents):
                errors.append(f"{prefix}: Fee must be None or a whole number of cents")
            elif rel.fee_cents < 0:
                errors.append(f"{prefix}: Fee must be non-negative")

        if not isinstance(rel.is_available, bool):
            errors.append(f"{prefix}: is_available must be a boolean")

        if rel.key in seen_keys:
            errors.append(
                f'{prefix}: Duplicate relationship from "{rel.from_account_id}" '
                f'to "{rel.to_account_id}" with speed "{_display(rel.speed)}"'
            )
        seen_keys.add(rel.key)

    return result
