"""Available balance and source account identification"""

from typing import List
from transfer_router.domain.models import Account, TransactionStatus


def calculate_available_balance(account: Account) -> int:
    """
    Spendable balance in cents: ledger balance minus pending debits.

    Pending credits and cleared/failed transactions are ignored.
    """
    pending_debits = sum(
        t.amount_cents
        for t in account.pending_transactions
        if t.status == TransactionStatus.PENDING and t.amount_cents < 0
    )
    return account.balance_cents + pending_debits


def identify_source_accounts(accounts: List[Account]) -> List[Account]:
    """Accounts with positive available balance, in input order"""
    return [account for account in accounts if calculate_available_balance(account) > 0]


def calculate_total_available(accounts: List[Account]) -> int:
    return sum(calculate_available_balance(account) for account in accounts)
