"""Shared fixtures for tests."""

from __future__ import annotations

import io
from datetime import date
from pathlib import Path
from typing import Generator

import pytest
from rich.console import Console


@pytest.fixture(autouse=True)
def data_dir(tmp_path: Path, monkeypatch) -> Generator[Path, None, None]:
    """Point ledger files at a temporary directory for every test."""
    import storage

    monkeypatch.setattr(storage, "DATA_DIR", tmp_path)
    yield tmp_path


@pytest.fixture
def sample_task_entry():
    """Create a sample task Entry for testing."""
    from models import Entry

    return Entry.task(
        date="2026-01-15",
        category="CatA",
        description="JIRA-101: Build login form",
        task_type="New Development",
        hours=4.0,
    )


@pytest.fixture
def sample_time_off_entry():
    """Create a sample time off Entry for testing."""
    from models import Entry

    return Entry.time_off(date="2026-01-16", description="Sick Time", hours=2.0)


@pytest.fixture
def sample_ledger(sample_task_entry, sample_time_off_entry):
    """A January 2026 ledger with 22 working days, 2 PTO days and 160 hours."""
    from models import MonthlyLedger

    return MonthlyLedger(
        year=2026,
        month=1,
        work_days_in_month=22,
        scheduled_pto_days=2,
        max_monthly_hours=160.0,
        entries=[sample_task_entry, sample_time_off_entry],
    )


@pytest.fixture
def sample_config():
    """Create a sample Config for testing."""
    from models import Config

    return Config(
        categories=["CatA", "CatB"],
        project_key="JIRA",
        holiday_country="US",
        spinner_seconds=0,
    )


class ScriptedInput:
    """Feeds canned answers to prompts and records what was asked."""

    def __init__(self, answers: list[str]):
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def make_session(sample_config):
    """Build a Session that reads scripted answers and prints to a buffer."""
    from app import Session

    def factory(answers: list[str], today: date = date(2026, 1, 20), config=None):
        output = io.StringIO()
        console = Console(file=output, width=200, color_system=None)
        ask = ScriptedInput(answers)
        session = Session(
            config=config or sample_config,
            console=console,
            ask=ask,
            today=today,
            delay=0,
        )
        return session, ask, output

    return factory
