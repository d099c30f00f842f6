from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

import asyncpg

from settleup.logging import get_logger, sql_logger
from settleup.models import Expense, LedgerData, Participant
from settleup.services.money import Amount, to_decimal
from settleup.services.validation import validate_expense
from settleup.utils.ids import generate_unique_id
from settleup.utils.parse import parse_timestamp


class Database:
    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None
        self._log = get_logger(__name__)

    async def connect(self) -> None:
        if self._pool is None:
            # asyncpg expects a plain postgresql:// scheme, without "+asyncpg"
            dsn = self._dsn.replace("+asyncpg", "")
            self._pool = await asyncpg.create_pool(dsn)
            self._log.info("db.pool.created")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            self._log.info("db.pool.closed")

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        pool = await self._ensure_pool()
        sql_logger.info("sql.fetchrow", query=query, args=args)
        return await pool.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        pool = await self._ensure_pool()
        sql_logger.info("sql.fetchval", query=query, args=args)
        return await pool.fetchval(query, *args)

    async def execute(self, query: str, *args: Any) -> str:
        pool = await self._ensure_pool()
        sql_logger.info("sql.execute", query=query)
        return await pool.execute(query, *args)

    async def _ensure_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            await self.connect()
        if self._pool is None:
            raise RuntimeError("database pool is not available")
        return self._pool


def participant_to_dict(participant: Participant) -> dict[str, str]:
    return {"id": participant.id, "name": participant.name}


def participant_from_dict(raw: Mapping[str, Any]) -> Participant:
    return Participant(id=str(raw["id"]), name=str(raw["name"]))


def expense_to_dict(expense: Expense) -> dict[str, Any]:
    return {
        "id": expense.id,
        "amount": str(expense.amount),
        "description": expense.description,
        "payer": participant_to_dict(expense.payer),
        "participants": [participant_to_dict(p) for p in expense.participants],
        "date": expense.date.isoformat(),
    }


def expense_from_dict(raw: Mapping[str, Any]) -> Expense:
    return Expense(
        id=str(raw["id"]),
        amount=to_decimal(raw["amount"]),
        description=str(raw.get("description", "")),
        payer=participant_from_dict(raw["payer"]),
        participants=[participant_from_dict(p) for p in raw["participants"]],
        date=parse_timestamp(raw["date"]),
    )


def ledger_to_dict(data: LedgerData) -> dict[str, Any]:
    return {
        "expenses": [expense_to_dict(e) for e in data.expenses],
        "participants": [participant_to_dict(p) for p in data.participants],
    }


def ledger_from_dict(raw: Mapping[str, Any]) -> LedgerData:
    return LedgerData(
        expenses=[expense_from_dict(e) for e in raw.get("expenses", [])],
        participants=[participant_from_dict(p) for p in raw.get("participants", [])],
    )


def merge_participants(existing: Sequence[Participant], incoming: Sequence[Participant]) -> list[Participant]:
    merged: dict[str, Participant] = {p.id: p for p in existing}
    for participant in incoming:
        merged[participant.id] = participant
    return list(merged.values())


class LedgerRepository:
    def __init__(self, db: Database, key: str = "@ExpenseSplitter:data") -> None:
        self.db = db
        self.key = key
        self._log = get_logger(__name__)

    async def load_data(self) -> LedgerData:
        value = await self.db.fetchval("SELECT value FROM app_storage WHERE key = $1", self.key)
        if value is None:
            return LedgerData()

        try:
            raw = json.loads(value) if isinstance(value, (str, bytes)) else value
            data = ledger_from_dict(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            self._log.warning("storage.load.corrupt", key=self.key, error=str(exc))
            return LedgerData()

        self._log.info("storage.loaded", expenses=len(data.expenses), participants=len(data.participants))
        return data

    async def save_data(self, data: LedgerData) -> None:
        await self.db.execute(
            """
            INSERT INTO app_storage (key, value, updated_at)
            VALUES ($1, $2::jsonb, now())
            ON CONFLICT (key) DO UPDATE
                SET value = EXCLUDED.value,
                    updated_at = EXCLUDED.updated_at
            """,
            self.key,
            json.dumps(ledger_to_dict(data)),
        )
        self._log.info("storage.saved", expenses=len(data.expenses), participants=len(data.participants))

    async def add_expense(
        self,
        data: LedgerData,
        *,
        amount: Amount,
        description: str,
        payer: Optional[Participant],
        participants: Sequence[Participant],
        date: Optional[datetime] = None,
    ) -> LedgerData:
        value, clean_description = validate_expense(amount, description, payer, participants)
        assert payer is not None

        expense = Expense(
            id=generate_unique_id(),
            amount=value,
            description=clean_description,
            payer=payer,
            participants=list(participants),
            date=date or datetime.now(timezone.utc),
        )
        updated = LedgerData(
            expenses=[*data.expenses, expense],
            participants=merge_participants(data.participants, [payer, *participants]),
        )
        await self.save_data(updated)
        self._log.info("expense.added", expense_id=expense.id)
        return updated

    async def add_participant(self, data: LedgerData, participant: Participant) -> LedgerData:
        if any(p.id == participant.id for p in data.participants):
            return data

        updated = LedgerData(expenses=list(data.expenses), participants=[*data.participants, participant])
        await self.save_data(updated)
        return updated

    async def delete_expense(self, data: LedgerData, expense_id: str) -> LedgerData:
        updated = LedgerData(
            expenses=[e for e in data.expenses if e.id != expense_id],
            participants=list(data.participants),
        )
        await self.save_data(updated)
        self._log.info("expense.deleted", expense_id=expense_id)
        return updated

    async def clear_all_data(self) -> None:
        await self.db.execute("DELETE FROM app_storage WHERE key = $1", self.key)
        self._log.info("storage.cleared", key=self.key)
