"""Monthly totals and the tables printed from them."""

from __future__ import annotations

from dataclasses import dataclass, field

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from models import BUG_FIXING, NEW_DEVELOPMENT, Entry, MonthlyLedger
from storage import format_number

SEEDED_TASK_TYPES = (BUG_FIXING, NEW_DEVELOPMENT)


def percentage(hours: float, actual_working_hours: float) -> float:
    """Share of actual working hours, 0 when there are none."""
    if not actual_working_hours:
        return 0.0
    return hours / actual_working_hours * 100


def format_percentage(value: float) -> str:
    return f"{value:.2f}%"


@dataclass
class LedgerSummary:
    max_monthly_hours: float
    scheduled_pto_hours: float
    total_time_off_hours: float = 0.0
    total_task_hours: float = 0.0
    category_totals: dict[tuple[str, str], float] = field(default_factory=dict)
    entries: list[Entry] = field(default_factory=list)

    @property
    def actual_working_hours(self) -> float:
        return self.max_monthly_hours - self.total_time_off_hours

    @property
    def utilisation(self) -> float:
        return percentage(self.total_task_hours, self.actual_working_hours)

    def category_percentage(self, category: str, task_type: str) -> float:
        return percentage(self.category_totals.get((category, task_type), 0.0), self.actual_working_hours)


def summarize(ledger: MonthlyLedger, categories: list[str] | None = None) -> LedgerSummary:
    """Aggregate a ledger into totals and per category/type buckets.

    Configured categories are seeded with zero buckets so they always show in
    the report; categories or types not in the config are added as they are met.
    """
    result = LedgerSummary(
        max_monthly_hours=ledger.max_monthly_hours,
        scheduled_pto_hours=ledger.scheduled_pto_hours,
        entries=list(ledger.entries),
    )
    for category in categories or []:
        for task_type in SEEDED_TASK_TYPES:
            result.category_totals[(category, task_type)] = 0.0

    for entry in ledger.entries:
        if entry.is_task:
            result.total_task_hours += entry.hours
            key = (entry.category, entry.task_type)
            result.category_totals[key] = result.category_totals.get(key, 0.0) + entry.hours
        elif entry.is_time_off:
            result.total_time_off_hours += entry.hours

    return result


def build_totals(summary: LedgerSummary) -> Text:
    text = Text()
    text.append(f"Max Monthly Hours: {format_number(summary.max_monthly_hours)}\n")
    text.append(f"Scheduled PTO Hours: {format_number(summary.scheduled_pto_hours)}\n")
    text.append(f"Total Time Off Hours (Unscheduled): {format_number(summary.total_time_off_hours)}\n")
    text.append(f"Actual Working Hours: {format_number(summary.actual_working_hours)}\n", style="bold")
    text.append(f"Total Task Hours: {format_number(summary.total_task_hours)}\n")
    text.append(f"Percentage of Actual Working Hours Used: {format_percentage(summary.utilisation)}")
    return text


def build_summary_table(summary: LedgerSummary) -> Table:
    table = Table(title="Summary", box=box.ASCII, title_style="bold")
    table.add_column("Category")
    table.add_column("Hours", justify="right")
    table.add_column("Percentage of Actual Working Hours", justify="right")

    for (category, task_type), hours in summary.category_totals.items():
        pct = summary.category_percentage(category, task_type)
        # Dim empty buckets so the hours worked stand out
        style = "dim" if hours == 0 else ""
        table.add_row(escape(f"{category} {task_type}"), format_number(hours), format_percentage(pct), style=style)

    return table


def build_entries_table(entries: list[Entry]) -> Table:
    """Entry listing; the Index column is what edit and delete ask for."""
    table = Table(title="All Entries", box=box.ASCII, title_style="bold")
    for name in ("Index", "Date", "Category", "Description", "Type", "Hours", "Entry Type"):
        table.add_column(name, justify="right" if name in ("Index", "Hours") else "left")

    for index, entry in enumerate(entries):
        table.add_row(
            str(index),
            escape(entry.date),
            escape(entry.category) or "-",
            escape(entry.task_description),
            escape(entry.task_type) or "-",
            format_number(entry.hours),
            escape(entry.entry_type),
        )

    return table


def describe_entry(entry: Entry) -> str:
    return (
        f"Date: {entry.date}\n"
        f"Category: {entry.category or '-'}\n"
        f"Description: {entry.task_description}\n"
        f"Type: {entry.task_type or '-'}\n"
        f"Hours: {format_number(entry.hours)}\n"
        f"Entry Type: {entry.entry_type}"
    )


def print_report(console: Console, ledger: MonthlyLedger, categories: list[str] | None = None) -> LedgerSummary:
    summary = summarize(ledger, categories)
    console.print()
    console.print(build_totals(summary))
    console.print()
    console.print(build_summary_table(summary))
    console.print()
    if summary.entries:
        console.print(build_entries_table(summary.entries))
    else:
        console.print("No entries.")
    return summary
