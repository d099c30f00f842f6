from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Sequence


@dataclass(slots=True, frozen=True)
class Participant:
    id: str
    name: str


@dataclass(slots=True)
class Expense:
    id: str
    amount: Decimal
    description: str
    payer: Participant
    participants: Sequence[Participant]
    date: datetime


@dataclass(slots=True)
class Balance:
    participant_id: str
    participant_name: str
    balance: Decimal  # positive = owed money, negative = owes money


@dataclass(slots=True)
class DebtSettlement:
    from_name: str
    to_name: str
    amount: Decimal


@dataclass(slots=True)
class LedgerData:
    expenses: list[Expense] = field(default_factory=list)
    participants: list[Participant] = field(default_factory=list)
