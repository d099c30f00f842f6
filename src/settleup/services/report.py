from __future__ import annotations

import time
from datetime import date
from html import escape
from pathlib import Path
from typing import Iterable, Optional

from settleup.logging import get_logger
from settleup.models import Balance
from settleup.services.ledger import LedgerSummary
from settleup.services.money import format_currency, is_settled

APP_NAME = "Expense Splitter"
DATE_FORMAT = "%Y-%m-%d"

log = get_logger(__name__)


def _balance_line(balance: Balance) -> str:
    status = "is owed" if balance.balance > 0 else "owes"
    return f"{balance.participant_name} {status} {format_currency(abs(balance.balance))}"


def _open_balances(balances: Iterable[Balance]) -> list[Balance]:
    return [balance for balance in balances if not is_settled(balance.balance)]


def create_share_message(
    summary: LedgerSummary,
    generated_on: Optional[date] = None,
    recent_limit: int = 5,
) -> str:
    generated_on = generated_on or date.today()
    lines = [
        "🧾 EXPENSE REPORT",
        f"Generated on: {generated_on.strftime(DATE_FORMAT)}",
        "",
        "📊 SUMMARY",
        f"Total Expenses: {format_currency(summary.total)}",
        f"Number of Expenses: {len(summary.expenses)}",
        f"Participants: {len(summary.balances)}",
        "",
    ]

    if summary.expenses and recent_limit > 0:
        lines.append("💳 RECENT EXPENSES")
        for expense in list(summary.expenses)[-recent_limit:]:
            lines.append(
                f"• {expense.description}: {format_currency(expense.amount)} (paid by {expense.payer.name})"
            )
        lines.append("")

    open_balances = _open_balances(summary.balances)
    if open_balances:
        lines.append("💰 BALANCES")
        lines.extend(f"• {_balance_line(balance)}" for balance in open_balances)
        lines.append("")

    if summary.settlements:
        lines.append("🔄 SUGGESTED PAYMENTS")
        for settlement in summary.settlements:
            lines.append(f"• {settlement.from_name} → {settlement.to_name}: {format_currency(settlement.amount)}")
        lines.append("")

    lines.append(f"📱 Shared from {APP_NAME} App")
    return "\n".join(lines)


def create_balance_message(balances: Iterable[Balance]) -> str:
    open_balances = _open_balances(balances)
    lines = ["💰 Current Balances:", ""]
    lines.extend(_balance_line(balance) for balance in open_balances)
    if not open_balances:
        lines.append("🎉 All balances are settled!")
    lines.extend(["", f"📱 Shared from {APP_NAME}"])
    return "\n".join(lines)


_HTML_STYLE = """
        body { font-family: Arial, sans-serif; margin: 20px; }
        .header { text-align: center; margin-bottom: 30px; }
        .section { margin-bottom: 25px; }
        .section h2 { color: #2196F3; border-bottom: 2px solid #2196F3; padding-bottom: 5px; }
        table { width: 100%; border-collapse: collapse; margin-top: 10px; }
        th, td { padding: 8px; text-align: left; border-bottom: 1px solid #ddd; }
        th { background-color: #f5f5f5; font-weight: bold; }
        .positive { color: #4CAF50; font-weight: bold; }
        .negative { color: #F44336; font-weight: bold; }
        .summary { background-color: #f9f9f9; padding: 15px; border-radius: 5px; }
"""


def _table(headers: list[str], rows: list[list[str]], cell_classes: Optional[list[list[str]]] = None) -> str:
    head = "".join(f"<th>{escape(header)}</th>" for header in headers)
    body = []
    for row_index, row in enumerate(rows):
        cells = []
        for col_index, cell in enumerate(row):
            css = cell_classes[row_index][col_index] if cell_classes else ""
            attr = f' class="{css}"' if css else ""
            cells.append(f"<td{attr}>{escape(cell)}</td>")
        body.append(f"<tr>{''.join(cells)}</tr>")
    return f"<table><thead><tr>{head}</tr></thead><tbody>{''.join(body)}</tbody></table>"


def _balance_status(balance: Balance) -> str:
    if balance.balance > 0:
        return "Is owed"
    if balance.balance < 0:
        return "Owes"
    return "Settled"


def create_html_report(summary: LedgerSummary, generated_on: Optional[date] = None) -> str:
    generated_on = generated_on or date.today()

    expense_rows = [
        [
            expense.date.strftime(DATE_FORMAT),
            expense.description,
            format_currency(expense.amount),
            expense.payer.name,
            ", ".join(p.name for p in expense.participants),
        ]
        for expense in summary.expenses
    ]
    balance_rows = [
        [balance.participant_name, format_currency(abs(balance.balance)), _balance_status(balance)]
        for balance in summary.balances
    ]
    balance_classes = [
        ["", "positive" if balance.balance >= 0 else "negative", ""] for balance in summary.balances
    ]

    sections = [
        '<div class="section"><div class="summary">'
        "<h2>Summary</h2>"
        f"<p><strong>Total Expenses:</strong> {format_currency(summary.total)}</p>"
        f"<p><strong>Number of Expenses:</strong> {len(summary.expenses)}</p>"
        f"<p><strong>Number of Participants:</strong> {len(summary.balances)}</p>"
        "</div></div>",
        '<div class="section"><h2>Expenses</h2>'
        + _table(["Date", "Description", "Amount", "Paid By", "Participants"], expense_rows)
        + "</div>",
        '<div class="section"><h2>Balances</h2>'
        + _table(["Participant", "Balance", "Status"], balance_rows, balance_classes)
        + "</div>",
    ]
    if summary.settlements:
        settlement_rows = [
            [s.from_name, s.to_name, format_currency(s.amount)] for s in summary.settlements
        ]
        sections.append(
            '<div class="section"><h2>Suggested Settlements</h2>'
            + _table(["From", "To", "Amount"], settlement_rows)
            + "</div>"
        )
    sections.append(
        '<div class="section" style="text-align: center; margin-top: 40px; color: #666;">'
        f"<p>Generated by {APP_NAME} App</p></div>"
    )

    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        '<meta charset="utf-8">\n<title>Expense Report</title>\n'
        f"<style>{_HTML_STYLE}</style>\n</head>\n<body>\n"
        '<div class="header"><h1>Expense Report</h1>'
        f"<p>Generated on {generated_on.strftime(DATE_FORMAT)}</p></div>\n"
        + "\n".join(sections)
        + "\n</body>\n</html>\n"
    )


def write_html_report(summary: LedgerSummary, directory: Path | str) -> Path:
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / f"expense_report_{time.time_ns() // 1_000_000}.html"
    path.write_text(create_html_report(summary), encoding="utf-8")
    log.info("report.written", path=str(path))
    return path


def delete_report_file(path: Path | str) -> bool:
    target = Path(path)
    if not target.exists():
        return False
    target.unlink()
    log.info("report.deleted", path=str(target))
    return True
