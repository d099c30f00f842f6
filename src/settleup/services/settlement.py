from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List

from settleup.models import Balance, DebtSettlement
from settleup.services.money import SETTLED_EPSILON, round_cents, to_decimal


def optimize_debts(balances: Iterable[Balance]) -> List[DebtSettlement]:
    # Working copies as (name, remaining); caller balances stay untouched.
    creditors: list[tuple[str, Decimal]] = []
    debtors: list[tuple[str, Decimal]] = []

    for entry in balances:
        amount = to_decimal(entry.balance)
        if amount > SETTLED_EPSILON:
            creditors.append((entry.participant_name, amount))
        elif amount < -SETTLED_EPSILON:
            debtors.append((entry.participant_name, amount))

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1])

    settlements: list[DebtSettlement] = []
    i, j = 0, 0

    while i < len(creditors) and j < len(debtors):
        cred_name, cred_amount = creditors[i]
        debt_name, debt_amount = debtors[j]

        transfer_amount = min(cred_amount, -debt_amount)
        if transfer_amount > SETTLED_EPSILON:
            settlements.append(
                DebtSettlement(from_name=debt_name, to_name=cred_name, amount=round_cents(transfer_amount))
            )

        cred_amount -= transfer_amount
        debt_amount += transfer_amount

        if cred_amount < SETTLED_EPSILON:
            i += 1
        else:
            creditors[i] = (cred_name, cred_amount)

        if debt_amount > -SETTLED_EPSILON:
            j += 1
        else:
            debtors[j] = (debt_name, debt_amount)

    return settlements
