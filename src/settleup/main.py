from __future__ import annotations

import asyncio

from settleup.config import get_settings
from settleup.db.repo import Database, LedgerRepository
from settleup.logging import configure_logging, get_logger
from settleup.services.ledger import build_summary
from settleup.services.report import create_share_message, write_html_report


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)
    log = get_logger(__name__)

    db = Database(settings.database_url)
    await db.connect()
    repo = LedgerRepository(db, settings.storage_key)
    try:
        data = await repo.load_data()
        summary = build_summary(data.expenses)
        print(create_share_message(summary, recent_limit=settings.recent_expenses))
        path = write_html_report(summary, settings.report_dir)
        log.info("summary.done", report=str(path), settlements=len(summary.settlements))
    finally:
        await db.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
