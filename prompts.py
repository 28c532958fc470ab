"""Linear prompt forms.

A form is a list of :class:`Step` objects asked one after another. Each step
parses its answer; the first answer that fails to parse aborts the whole form
with :class:`InvalidInput`, so callers never see a half-filled result.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from models import BUG_FIXING, NEW_DEVELOPMENT
from utils import TASK_TYPE_CHOICES

Ask = Callable[[str], str]

_NO_KEEP = object()
CLEAR = "-"


class InvalidInput(Exception):
    """An answer could not be turned into the value a step needs."""


@dataclass
class Step:
    key: str
    prompt: str
    parse: Callable[[str], Any] = str
    error: str = "Invalid input."
    keep: Any = _NO_KEEP

    def resolve(self, answer: str) -> Any:
        if self.keep is not _NO_KEEP and answer.strip() == "":
            return self.keep
        try:
            return self.parse(answer)
        except (ValueError, IndexError):
            raise InvalidInput(self.error) from None


def run_form(steps: list[Step], ask: Ask, before: Callable[[], None] | None = None) -> dict[str, Any]:
    """Ask every step in order and return parsed answers keyed by step key.

    ``before`` runs ahead of each question; the menu uses it for the loading spinner.
    """
    answers = {}
    for step in steps:
        if before is not None:
            before()
        answers[step.key] = step.resolve(ask(step.prompt))
    return answers


def parse_hours(text: str) -> float:
    hours = float(text.strip())
    if not math.isfinite(hours) or hours < 0:
        raise ValueError(f"not a usable number of hours: {text!r}")
    return hours


def parse_int(text: str) -> int:
    return int(text.strip())


def parse_day(text: str) -> int:
    day = int(text.strip())
    if day < 1 or day > 31:
        raise ValueError(f"day out of range: {day}")
    return day


def parse_iso_date(text: str) -> str:
    return date.fromisoformat(text.strip()).isoformat()


def parse_text(text: str) -> str:
    """Free text; commas would split the ledger row so they become semicolons."""
    return text.strip().replace(",", ";")


def parse_clearable_text(text: str) -> str:
    """Free text where a lone "-" clears the value."""
    if text.strip() == CLEAR:
        return ""
    return parse_text(text)


def choice_parser(options: list[str]) -> Callable[[str], str]:
    """Parser for a 1-based pick from options."""

    def parse(text: str) -> str:
        index = int(text.strip()) - 1
        if index < 0:
            raise IndexError(index)
        return options[index]

    return parse


def index_parser(count: int) -> Callable[[str], int]:
    """Parser for a 0-based entry index below count."""

    def parse(text: str) -> int:
        index = int(text.strip())
        if index < 0 or index >= count:
            raise IndexError(index)
        return index

    return parse


def parse_task_type(text: str) -> str:
    # Any answer other than 1 is recorded as bug fixing
    return NEW_DEVELOPMENT if text.strip() == "1" else BUG_FIXING


def task_type_parser(keep: str) -> Callable[[str], str]:
    """Edit-mode task type: 1 or 2 pick a type, anything else keeps the old one."""

    def parse(text: str) -> str:
        return dict(TASK_TYPE_CHOICES).get(text.strip(), keep)

    return parse


def numbered(options: list[str]) -> str:
    return "".join(f"{i}: {option}\n" for i, option in enumerate(options, start=1))


def category_prompt(categories: list[str], keep: str | None = None) -> str:
    if keep is None:
        return f"Select a category:\n{numbered(categories)}Please enter your choice (1-{len(categories)}):\n> "
    return (
        f"Select a category or press Enter to keep [{keep}]:\n{numbered(categories)}"
        f"Please enter your choice (1-{len(categories)}) or press Enter to keep:\n> "
    )


def task_type_prompt(keep: str | None = None) -> str:
    options = "".join(f"{key}: {label}\n" for key, label in TASK_TYPE_CHOICES)
    if keep is None:
        return f"Was this new development or bug fixing?\n{options}Please enter your choice (1 or 2):\n> "
    return f"Was this new development or bug fixing?\n{options}Press Enter to keep [{keep}]:\n> "
