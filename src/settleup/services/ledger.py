from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from settleup.models import Balance, DebtSettlement, Expense, Participant
from settleup.services.balances import calculate_balances
from settleup.services.money import ZERO, to_decimal
from settleup.services.settlement import optimize_debts
from settleup.services.validation import validate_participant_name
from settleup.utils.ids import generate_unique_id


@dataclass(slots=True)
class LedgerSummary:
    expenses: Sequence[Expense]
    balances: list[Balance]
    settlements: list[DebtSettlement]
    total: Decimal


def total_amount(expenses: Iterable[Expense]) -> Decimal:
    return sum((to_decimal(expense.amount) for expense in expenses), ZERO)


def build_summary(expenses: Sequence[Expense]) -> LedgerSummary:
    balances = calculate_balances(expenses)
    return LedgerSummary(
        expenses=expenses,
        balances=balances,
        settlements=optimize_debts(balances),
        total=total_amount(expenses),
    )


def make_participant(name: str) -> Participant:
    return Participant(id=generate_unique_id(), name=validate_participant_name(name))
