from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

_AMOUNT_RE = re.compile(r"^[+-]?(\d+([.,]\d*)?|[.,]\d+)$")


def parse_amount(text: str) -> Decimal:
    """
    Parse a user-typed amount such as ``12``, ``12.5`` or ``12,50``.

    A leading currency sign and surrounding whitespace are ignored.
    """
    value = text.strip().lstrip("$").strip()
    if not _AMOUNT_RE.match(value):
        raise ValueError(f"not an amount: {text!r}")
    try:
        return Decimal(value.replace(",", "."))
    except InvalidOperation as exc:
        raise ValueError(f"not an amount: {text!r}") from exc


def parse_timestamp(value: str) -> datetime:
    # Stored dates are ISO-8601; a trailing "Z" comes from JavaScript clients.
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
