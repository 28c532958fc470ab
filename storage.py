from __future__ import annotations

import json
import logging
import math
import os
from pathlib import Path

from models import Config, Entry, MonthlyLedger, ledger_filename

logger = logging.getLogger(__name__)

WORK_DAYS_LABEL = "Working Days in Month"
PTO_DAYS_LABEL = "Scheduled PTO Days"
MAX_HOURS_LABEL = "Max Monthly Hours"
COLUMN_HEADER = "Date,Category,Task Description,Task Type,Hours,Entry Type"
FIELD_COUNT = 6


class LedgerError(Exception):
    """Base class for ledger file problems."""


class LedgerHeaderError(LedgerError):
    pass


class LedgerNotFoundError(LedgerError):
    pass


class ConfigError(Exception):
    pass


def _get_data_dir() -> Path:
    """Get ledger directory from environment variable or default location."""
    if env_path := os.environ.get("TIMETRACK_DATA_DIR"):
        return Path(env_path)
    return Path.cwd()


def _get_config_path() -> Path:
    if env_path := os.environ.get("TIMETRACK_CONFIG"):
        return Path(env_path)
    return Path.cwd() / "config.json"


DATA_DIR = _get_data_dir()
CONFIG_PATH = _get_config_path()


def ledger_path(year: int, month: int) -> Path:
    return DATA_DIR / ledger_filename(year, month)


def format_number(value: float) -> str:
    """Render hours the way they are written to the ledger: 4 not 4.0."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _header_value(line: str, label: str, convert):
    parts = line.split(",")
    if len(parts) < 2:
        raise LedgerHeaderError(f"Missing value for '{label}' in ledger header.")
    try:
        value = convert(parts[1].strip())
    except ValueError:
        raise LedgerHeaderError(f"Invalid value for '{label}' in ledger header: {parts[1]!r}") from None
    if isinstance(value, float) and math.isnan(value):
        raise LedgerHeaderError(f"Invalid value for '{label}' in ledger header: {parts[1]!r}")
    return value


def _parse_row(line: str) -> Entry | None:
    columns = line.split(",")
    if len(columns) != FIELD_COUNT:
        return None

    date_str, category, description, task_type, hours_str, entry_type = columns
    try:
        hours = float(hours_str)
    except ValueError:
        return None
    if not math.isfinite(hours):
        return None

    return Entry(
        date=date_str,
        category=category,
        task_description=description,
        task_type=task_type,
        hours=hours,
        entry_type=entry_type,
    )


def parse_ledger(text: str, year: int, month: int) -> MonthlyLedger:
    """Parse ledger file contents.

    The first three lines are positional ``Label,value`` header pairs. Data
    rows follow the column header; rows that do not split into exactly six
    fields or whose hours are not numeric are dropped.
    """
    lines = text.split("\n")
    if len(lines) < 3 or not all(line.strip() for line in lines[:3]):
        raise LedgerHeaderError("Error parsing header information from the CSV.")

    work_days = _header_value(lines[0], WORK_DAYS_LABEL, int)
    pto_days = _header_value(lines[1], PTO_DAYS_LABEL, int)
    max_hours = _header_value(lines[2], MAX_HOURS_LABEL, float)

    entries = []
    for line_no, line in enumerate(lines[3:], start=4):
        stripped = line.strip()
        if not stripped or stripped.startswith("Date,Category"):
            continue
        entry = _parse_row(stripped)
        if entry is None:
            logger.debug("Skipping malformed row %d: %r", line_no, stripped)
            continue
        entries.append(entry)

    return MonthlyLedger(
        year=year,
        month=month,
        work_days_in_month=work_days,
        scheduled_pto_days=pto_days,
        max_monthly_hours=max_hours,
        entries=entries,
    )


def _format_header(work_days: int, pto_days: int, max_hours: float) -> str:
    return (
        f"{WORK_DAYS_LABEL},{work_days}\n"
        f"{PTO_DAYS_LABEL},{pto_days}\n"
        f"{MAX_HOURS_LABEL},{format_number(max_hours)}\n"
        f"{COLUMN_HEADER}\n"
    )


def _field(value: str) -> str:
    # A comma inside a field would turn the row into one that loading drops
    return value.replace(",", ";")


def format_ledger(ledger: MonthlyLedger) -> str:
    lines = [_format_header(ledger.work_days_in_month, ledger.scheduled_pto_days, ledger.max_monthly_hours)]
    for entry in ledger.entries:
        lines.append(
            f"{_field(entry.date)},{_field(entry.category)},{_field(entry.task_description)},"
            f"{_field(entry.task_type)},{format_number(entry.hours)},{_field(entry.entry_type)}\n"
        )
    return "".join(lines)


def initialize_ledger(year: int, month: int, work_days: int, pto_days: int, max_hours: float) -> bool:
    """Create the month's ledger with an empty body. Returns False if it already exists."""
    path = ledger_path(year, month)
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_format_header(work_days, pto_days, max_hours), encoding="utf-8")
    logger.info("Initialised ledger %s", path)
    return True


def load_ledger(year: int, month: int) -> MonthlyLedger | None:
    """Load a month's ledger, or None if it has not been initialised."""
    path = ledger_path(year, month)
    if not path.exists():
        return None
    return parse_ledger(path.read_text(encoding="utf-8"), year, month)


def save_ledger(ledger: MonthlyLedger) -> None:
    """Rewrite the whole ledger file."""
    path = ledger_path(ledger.year, ledger.month)
    if not path.exists():
        raise LedgerNotFoundError("Monthly data not initialized. Please restart the script.")
    path.write_text(format_ledger(ledger), encoding="utf-8")
    logger.debug("Wrote %d entries to %s", len(ledger.entries), path)


def _require_ledger(year: int, month: int) -> MonthlyLedger:
    ledger = load_ledger(year, month)
    if ledger is None:
        raise LedgerNotFoundError("Monthly data not initialized. Please restart the script.")
    return ledger


def _check_index(ledger: MonthlyLedger, index: int) -> None:
    if index < 0 or index >= len(ledger.entries):
        raise IndexError("Invalid index selected.")


def add_entry(year: int, month: int, entry: Entry) -> MonthlyLedger:
    ledger = _require_ledger(year, month)
    ledger.entries.append(entry)
    save_ledger(ledger)
    return ledger


def update_entry(year: int, month: int, index: int, entry: Entry) -> MonthlyLedger:
    ledger = _require_ledger(year, month)
    _check_index(ledger, index)
    ledger.entries[index] = entry
    save_ledger(ledger)
    return ledger


def delete_entry(year: int, month: int, index: int) -> Entry:
    """Remove the entry at index; later entries shift down by one."""
    ledger = _require_ledger(year, month)
    _check_index(ledger, index)
    removed = ledger.entries.pop(index)
    save_ledger(ledger)
    return removed


def load_config(path: Path | None = None) -> Config:
    """Load categories and the ticket project key from the JSON config file."""
    path = path or CONFIG_PATH
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from None

    categories = data.get("categories") if isinstance(data, dict) else None
    if not categories or not isinstance(categories, list):
        raise ConfigError(f"Config file {path} must define a non-empty 'categories' list.")

    config = Config(categories=[str(c) for c in categories])
    if data.get("JIRA_PROJECT_KEY"):
        config.project_key = str(data["JIRA_PROJECT_KEY"])
    # Both end up inside ledger rows, which are split on commas
    for value in [*config.categories, config.project_key]:
        if "," in value:
            raise ConfigError(f"Config file {path}: {value!r} must not contain a comma.")
    if data.get("holiday_country"):
        config.holiday_country = str(data["holiday_country"])
    if data.get("holiday_subdiv"):
        config.holiday_subdiv = str(data["holiday_subdiv"])
    if "spinner_seconds" in data:
        try:
            config.spinner_seconds = float(data["spinner_seconds"])
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid spinner_seconds in {path}: {data['spinner_seconds']!r}") from None

    return config
