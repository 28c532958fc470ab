from __future__ import annotations

from dataclasses import dataclass, field

TASK = "Task"
TIME_OFF = "Time Off"

NEW_DEVELOPMENT = "New Development"
BUG_FIXING = "Bug Fixing"

HOURS_IN_A_DAY = 8


@dataclass
class Entry:
    date: str
    category: str
    task_description: str
    task_type: str
    hours: float
    entry_type: str

    @classmethod
    def task(cls, date: str, category: str, description: str, task_type: str, hours: float) -> Entry:
        return cls(date, category, description, task_type, hours, TASK)

    @classmethod
    def time_off(cls, date: str, description: str, hours: float) -> Entry:
        """Time off carries no category or task type."""
        return cls(date, "", description, "", hours, TIME_OFF)

    @property
    def is_task(self) -> bool:
        return self.entry_type == TASK

    @property
    def is_time_off(self) -> bool:
        return self.entry_type == TIME_OFF

    @property
    def ticket(self) -> str:
        """Ticket reference at the start of a task description, e.g. 'JIRA-12'."""
        return self.task_description.split(":", 1)[0].strip()

    @property
    def note(self) -> str:
        """Free text following the ticket reference, if any."""
        if ":" not in self.task_description:
            return ""
        return self.task_description.split(":", 1)[1].strip()


@dataclass
class MonthlyLedger:
    year: int
    month: int
    work_days_in_month: int
    scheduled_pto_days: int
    max_monthly_hours: float
    entries: list[Entry] = field(default_factory=list)

    @property
    def filename(self) -> str:
        return ledger_filename(self.year, self.month)

    @property
    def scheduled_pto_hours(self) -> float:
        return self.scheduled_pto_days * HOURS_IN_A_DAY


@dataclass
class Config:
    categories: list[str] = field(default_factory=list)
    project_key: str = "JIRA"
    holiday_country: str = "US"
    holiday_subdiv: str | None = None
    spinner_seconds: float = 0.5


def ledger_filename(year: int, month: int) -> str:
    return f"entries_{year}_{month}.csv"


def max_hours_for(work_days: int, pto_days: int) -> float:
    """Hours available in a month once scheduled PTO is taken out."""
    return float((work_days - pto_days) * HOURS_IN_A_DAY)


def build_task_description(project_key: str, ticket_number: str, note: str = "") -> str:
    description = f"{project_key}-{ticket_number}"
    if note:
        description += f": {note}"
    return description
