from __future__ import annotations

from decimal import Decimal

import pytest

from payment_instructions.payments.constants import StatusCode, TransactionStatus, TransactionType
from payment_instructions.payments.executor import TransactionExecutor, involved_accounts
from payment_instructions.payments.records import FinalInstruction, InstructionFields
from payment_instructions.schemas.instruction import Account, TransactionResponse

FIELDS = InstructionFields(
    type=TransactionType.DEBIT,
    amount=Decimal("30"),
    currency="USD",
    debit_account="a",
    credit_account="b",
)


def _final(status: TransactionStatus, code: StatusCode, fields: InstructionFields = FIELDS) -> FinalInstruction:
    return FinalInstruction(fields=fields, status=status, status_code=code, status_reason="reason")


def _accounts() -> list[Account]:
    # Snapshot order deliberately differs from debit/credit order.
    return [
        Account(account_id="b", balance=300, currency="usd"),
        Account(account_id="x", balance=5, currency="USD"),
        Account(account_id="a", balance=230, currency="usd"),
    ]


def test_successful_transfer_moves_amount_and_keeps_order() -> None:
    accounts = _accounts()
    result = TransactionExecutor().execute(_final(TransactionStatus.SUCCESSFUL, StatusCode.SUCCESS), accounts)

    assert [view.account_id for view in result.accounts] == ["a", "b"]
    debit, credit = result.accounts
    assert (debit.balance_before, debit.balance) == (230, 200)
    assert (credit.balance_before, credit.balance) == (300, 330)
    assert debit.currency == "USD"
    assert credit.currency == "USD"
    assert debit.balance + 30 == debit.balance_before
    assert credit.balance - 30 == credit.balance_before


def test_input_accounts_are_not_mutated() -> None:
    accounts = _accounts()
    TransactionExecutor().execute(_final(TransactionStatus.SUCCESSFUL, StatusCode.SUCCESS), accounts)

    assert [account.balance for account in accounts] == [300, 5, 230]
    assert [account.currency for account in accounts] == ["usd", "USD", "usd"]


@pytest.mark.parametrize(
    ("status", "code"),
    [
        (TransactionStatus.PENDING, StatusCode.PENDING),
        (TransactionStatus.FAILED, StatusCode.INSUFFICIENT_FUNDS),
    ],
)
def test_pending_and_failed_leave_balances_unchanged(status: TransactionStatus, code: StatusCode) -> None:
    result = TransactionExecutor().execute(_final(status, code), _accounts())

    assert [(view.account_id, view.balance, view.balance_before) for view in result.accounts] == [
        ("a", 230, 230),
        ("b", 300, 300),
    ]
    assert result.status == status
    assert result.status_code == code


def test_record_fields_pass_through() -> None:
    result = TransactionExecutor().execute(_final(TransactionStatus.SUCCESSFUL, StatusCode.SUCCESS), _accounts())

    assert result.type == TransactionType.DEBIT
    assert result.amount == Decimal("30")
    assert result.currency == "USD"
    assert result.debit_account == "a"
    assert result.credit_account == "b"
    assert result.execute_by is None
    assert result.status_reason == "reason"


def test_only_resolved_accounts_are_listed() -> None:
    fields = FIELDS.evolve(debit_account="missing")
    record = _final(TransactionStatus.FAILED, StatusCode.ACCOUNT_NOT_FOUND, fields)

    assert [account.account_id for account in involved_accounts(record, _accounts())] == ["b"]


def test_no_accounts_when_parsing_failed() -> None:
    record = FinalInstruction.failed(InstructionFields(), StatusCode.MALFORMED_INSTRUCTION)
    result = TransactionExecutor().execute(record, _accounts())

    assert result.accounts == []
    assert result.model_dump(mode="json")["amount"] is None


@pytest.mark.parametrize(
    ("amount", "rendered"),
    [
        (Decimal("30"), 30),
        (Decimal("1E+20"), 10**20),
        (Decimal("10.5"), 10.5),
        (Decimal("Infinity"), None),
        (Decimal("-Infinity"), None),
        (None, None),
    ],
)
def test_response_amount_rendering(amount, rendered) -> None:
    record = FinalInstruction.failed(FIELDS.evolve(amount=amount), StatusCode.INVALID_AMOUNT)
    response = TransactionResponse.from_instruction(record, [])

    dumped = response.model_dump(mode="json")["amount"]

    assert dumped == rendered
    assert type(dumped) is type(rendered)
