"""Apply classified instructions to an account snapshot."""

from __future__ import annotations

from typing import Iterable

from payment_instructions.payments.constants import TransactionStatus
from payment_instructions.payments.records import FinalInstruction
from payment_instructions.payments.validator import index_accounts
from payment_instructions.schemas.instruction import Account, ResultAccount, TransactionResponse


def involved_accounts(record: FinalInstruction, accounts: Iterable[Account]) -> list[Account]:
    """Accounts named by the instruction, debit first, skipping unknown ids."""

    by_id = index_accounts(accounts)
    found = []
    for account_id in (record.fields.debit_account, record.fields.credit_account):
        if account_id and account_id in by_id:
            found.append(by_id[account_id])
    return found


class TransactionExecutor:
    """Compute post-transaction balances without touching the input accounts."""

    def execute(self, record: FinalInstruction, accounts: Iterable[Account]) -> TransactionResponse:
        involved = involved_accounts(record, accounts)

        if record.status != TransactionStatus.SUCCESSFUL:
            views = [
                ResultAccount(
                    account_id=account.account_id,
                    balance=account.balance,
                    balance_before=account.balance,
                    currency=account.currency.upper(),
                )
                for account in involved
            ]
            return TransactionResponse.from_instruction(record, views)

        amount = int(record.fields.amount)
        views = []
        for account in involved:
            balance = account.balance
            if account.account_id == record.fields.debit_account:
                balance = account.balance - amount
            elif account.account_id == record.fields.credit_account:
                balance = account.balance + amount
            views.append(
                ResultAccount(
                    account_id=account.account_id,
                    balance=balance,
                    balance_before=account.balance,
                    currency=account.currency.upper(),
                )
            )
        return TransactionResponse.from_instruction(record, views)
