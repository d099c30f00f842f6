from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence, Union

from settleup.models import Participant
from settleup.services.money import to_decimal
from settleup.utils.parse import parse_amount


class ExpenseValidationError(ValueError):
    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))
        self.errors = errors


def _validate_amount(amount: Union[Decimal, int, float, str, None]) -> tuple[Optional[Decimal], Optional[str]]:
    if amount is None or (isinstance(amount, str) and not amount.strip()):
        return None, "Amount is required"
    try:
        value = parse_amount(amount) if isinstance(amount, str) else to_decimal(amount)
    except (TypeError, ValueError):
        return None, "Please enter a valid amount"
    if value <= 0:
        return None, "Please enter a valid amount"
    return value, None


def validate_expense(
    amount: Union[Decimal, int, float, str, None],
    description: str,
    payer: Optional[Participant],
    participants: Sequence[Participant],
) -> tuple[Decimal, str]:
    errors: dict[str, str] = {}

    value, amount_error = _validate_amount(amount)
    if amount_error:
        errors["amount"] = amount_error

    clean_description = (description or "").strip()
    if not clean_description:
        errors["description"] = "Description is required"

    if payer is None:
        errors["payer"] = "Please select who paid"

    if not participants:
        errors["participants"] = "Please select at least one participant"

    if errors:
        raise ExpenseValidationError(errors)

    assert value is not None
    return value, clean_description


def validate_participant_name(name: str) -> str:
    clean = (name or "").strip()
    if not clean:
        raise ExpenseValidationError({"name": "Participant name is required"})
    return clean
