from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from settleup.models import Balance, Expense, Participant
from settleup.services.money import ZERO, round_cents, to_decimal


class ExpenseSplitError(ValueError):
    """Raised for an expense whose split group is empty."""

    def __init__(self, expense_id: str) -> None:
        super().__init__(f"expense {expense_id!r} has no participants to split between")
        self.expense_id = expense_id


@dataclass(slots=True)
class _Account:
    name: str
    balance: Decimal = ZERO


def _account(accounts: dict[str, _Account], participant: Participant) -> _Account:
    account = accounts.get(participant.id)
    if account is None:
        account = accounts[participant.id] = _Account(name=participant.name)
    return account


def split_share(expense: Expense) -> Decimal:
    if not expense.participants:
        raise ExpenseSplitError(expense.id)
    return to_decimal(expense.amount) / len(expense.participants)


def calculate_balances(expenses: Iterable[Expense]) -> list[Balance]:
    # dict keeps insertion order, so balances come out in first-seen order
    accounts: dict[str, _Account] = {}

    for expense in expenses:
        share = split_share(expense)

        _account(accounts, expense.payer).balance += to_decimal(expense.amount)
        for participant in expense.participants:
            _account(accounts, participant).balance -= share

    return [
        Balance(
            participant_id=participant_id,
            participant_name=account.name,
            balance=round_cents(account.balance),
        )
        for participant_id, account in accounts.items()
    ]
