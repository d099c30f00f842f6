from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from settleup.models import Expense, Participant
from settleup.utils.ids import generate_unique_id


@pytest.fixture
def people() -> tuple[Participant, Participant, Participant]:
    return (
        Participant(id="1", name="Alice"),
        Participant(id="2", name="Bob"),
        Participant(id="3", name="Charlie"),
    )


def make_expense(amount, payer: Participant, participants, description: str = "Test expense") -> Expense:
    return Expense(
        id=generate_unique_id(),
        amount=Decimal(str(amount)),
        description=description,
        payer=payer,
        participants=list(participants),
        date=datetime(2024, 5, 10, 18, 0, tzinfo=timezone.utc),
    )
