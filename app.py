#!/usr/bin/env python3
"""Interactive time tracking menu."""

from __future__ import annotations

import logging
import os
import sys
import time
from dataclasses import dataclass
from datetime import date
from enum import Enum, auto

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

import storage
from models import Config, Entry, build_task_description, max_hours_for
from prompts import (
    CLEAR,
    Ask,
    InvalidInput,
    Step,
    category_prompt,
    choice_parser,
    index_parser,
    parse_clearable_text,
    parse_day,
    parse_hours,
    parse_int,
    parse_iso_date,
    parse_task_type,
    parse_text,
    run_form,
    task_type_parser,
    task_type_prompt,
)
from summary import describe_entry, print_report
from utils import date_for_day, get_working_days

logger = logging.getLogger(__name__)

SEPARATOR = "\n*******"
FAREWELL = "Have a nice day!"

MENU_PROMPT = (
    "Please select an option:\n"
    "1: New Entry Today\n"
    "2: New Entry on Date\n"
    "3: View Data\n"
    "4: Add Time Off\n"
    "5: Edit an Entry\n"
    "6: Delete an Entry\n"
    "7: Quit\n"
    "Enter your choice (1-7):\n> "
)


class State(Enum):
    SETUP = auto()
    MENU = auto()
    ANOTHER = auto()
    QUIT = auto()


@dataclass
class Session:
    """Everything a menu run needs: where to read input, where to print, which month."""

    config: Config
    console: Console
    ask: Ask
    today: date
    delay: float = 0.5

    @property
    def year(self) -> int:
        return self.today.year

    @property
    def month(self) -> int:
        return self.today.month


class MenuDriver:
    """Finite-state menu loop.

    Each state handler returns the next state. Actions chosen from the menu
    return ANOTHER after a successful save, or MENU when they stop early.
    """

    def __init__(self, session: Session):
        self.session = session
        self.console = session.console
        self.handlers = {
            State.SETUP: self.setup,
            State.MENU: self.menu,
            State.ANOTHER: self.another,
        }
        self.actions = {
            "1": self.new_entry_today,
            "2": self.new_entry_on_date,
            "3": self.view_data,
            "4": self.add_time_off,
            "5": self.edit_entry,
            "6": self.delete_entry,
            "7": self.quit,
        }

    def run(self, state: State = State.MENU) -> None:
        while state is not State.QUIT:
            try:
                state = self.handlers[state]()
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                state = State.QUIT

    # --- helpers ---

    def ask(self, prompt: str) -> str:
        return self.session.ask(prompt)

    def pause(self) -> None:
        """Cosmetic spinner between questions."""
        if self.session.delay > 0:
            with self.console.status("Loading...", spinner="line"):
                time.sleep(self.session.delay)
        self.console.print(SEPARATOR)

    def error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")

    def load(self):
        return storage.load_ledger(self.session.year, self.session.month)

    def show(self):
        """Print the month's report and return the ledger it was built from."""
        ledger = self.load()
        if ledger is not None:
            print_report(self.console, ledger, self.session.config.categories)
        return ledger

    def saved(self, message: str) -> State:
        self.console.print(message)
        self.show()
        return State.ANOTHER

    def date_for(self, day: int) -> str:
        try:
            return date_for_day(self.session.year, self.session.month, day)
        except ValueError:
            raise InvalidInput(f"Day {day} does not exist in this month.") from None

    def suggested_work_days(self) -> int | None:
        config = self.session.config
        try:
            days = get_working_days(self.session.year, self.session.month, config.holiday_country, config.holiday_subdiv)
        except NotImplementedError:
            logger.warning("No holiday calendar for %s; not suggesting working days", config.holiday_country)
            return None
        return len(days)

    # --- states ---

    def setup(self) -> State:
        self.console.print("Monthly setup: Please enter the following information.")
        suggested = self.suggested_work_days()
        if suggested is None:
            work_days_step = Step(
                "work_days",
                "Enter the number of working days in the month:\n> ",
                parse_int,
                "Invalid input for working days.",
            )
        else:
            work_days_step = Step(
                "work_days",
                f"Enter the number of working days in the month or press Enter for [{suggested}]:\n> ",
                parse_int,
                "Invalid input for working days.",
                keep=suggested,
            )
        steps = [
            work_days_step,
            Step(
                "pto_days",
                "Enter the number of scheduled PTO days this month:\n> ",
                parse_int,
                "Invalid input for scheduled PTO days.",
            ),
        ]
        try:
            answers = run_form(steps, self.ask)
        except InvalidInput as exc:
            self.error(str(exc))
            return State.SETUP

        max_hours = max_hours_for(answers["work_days"], answers["pto_days"])
        self.console.print(f"Max monthly hours calculated as {storage.format_number(max_hours)} hours.")
        storage.initialize_ledger(
            self.session.year, self.session.month, answers["work_days"], answers["pto_days"], max_hours
        )
        return State.MENU

    def menu(self) -> State:
        if not storage.ledger_path(self.session.year, self.session.month).exists():
            return State.SETUP

        self.console.print(SEPARATOR)
        option = self.ask(MENU_PROMPT).strip()
        action = self.actions.get(option)
        if action is None:
            self.error("Invalid option selected.")
            return State.MENU

        try:
            return action()
        except (InvalidInput, storage.LedgerError, IndexError) as exc:
            self.error(str(exc))
            return State.MENU

    def another(self) -> State:
        self.pause()
        response = self.ask("Do you want to perform another action? Enter 1 for yes, 2 for no:\n> ")
        if response.strip() == "1":
            return State.MENU
        self.console.print(FAREWELL)
        return State.QUIT

    # --- actions ---

    def new_entry_today(self) -> State:
        return self.task_form(self.session.today.isoformat())

    def new_entry_on_date(self) -> State:
        self.pause()
        answers = run_form(
            [Step("day", "Enter the day of the month (1-31):\n> ", parse_day,
                  "Invalid day. Please enter a number between 1 and 31.")],
            self.ask,
        )
        return self.task_form(self.date_for(answers["day"]))

    def task_form(self, entry_date: str) -> State:
        config = self.session.config
        steps = [
            Step("category", category_prompt(config.categories), choice_parser(config.categories),
                 "Invalid category selected."),
            Step("ticket", "Enter the Jira ticket number:\n> ", parse_text),
            Step("note", "Enter a description of the task you worked on (optional):\n> ", parse_text),
            Step("hours", "Enter the number of hours worked on this ticket:\n> ", parse_hours,
                 "Invalid input for hours."),
            Step("task_type", task_type_prompt(), parse_task_type),
        ]
        answers = run_form(steps, self.ask, before=self.pause)

        entry = Entry.task(
            date=entry_date,
            category=answers["category"],
            description=build_task_description(config.project_key, answers["ticket"], answers["note"]),
            task_type=answers["task_type"],
            hours=answers["hours"],
        )
        storage.add_entry(self.session.year, self.session.month, entry)
        logger.info("Added %s hours to %s on %s", entry.hours, entry.ticket, entry.date)
        return self.saved("Entry saved!")

    def view_data(self) -> State:
        if self.show() is None:
            self.console.print("No data available for the current month.")
        return State.MENU

    def add_time_off(self) -> State:
        steps = [
            Step("day", "Enter the day of the time off (1-31):\n> ", parse_day,
                 "Invalid day. Please enter a number between 1 and 31."),
            Step("description",
                 "Enter a description for the time off (e.g., Sick Time, Unscheduled PTO):\n> ", parse_text),
            Step("hours", "Enter the number of hours to subtract:\n> ", parse_hours, "Invalid input for hours."),
        ]
        answers = run_form(steps, self.ask, before=self.pause)

        entry = Entry.time_off(self.date_for(answers["day"]), answers["description"], answers["hours"])
        storage.add_entry(self.session.year, self.session.month, entry)
        return self.saved("Entry saved!")

    def pick_entry(self, verb: str) -> tuple[int, Entry] | None:
        """Show the ledger and ask which entry to act on."""
        self.pause()
        ledger = self.show()
        if ledger is None or not ledger.entries:
            self.console.print(f"No entries available to {verb}.")
            return None

        answers = run_form(
            [Step("index", f"Enter the index number of the entry you want to {verb}:\n> ",
                  index_parser(len(ledger.entries)), "Invalid index selected.")],
            self.ask,
        )
        index = answers["index"]
        return index, ledger.entries[index]

    def edit_entry(self) -> State:
        picked = self.pick_entry("edit")
        if picked is None:
            return State.MENU
        index, entry = picked

        self.console.print("\n--- Editing Entry ---\n")
        self.console.print(describe_entry(entry), markup=False)

        if entry.is_task:
            updated = self.edit_task(entry)
        elif entry.is_time_off:
            updated = self.edit_time_off(entry)
        else:
            self.error("Unknown entry type.")
            return State.MENU

        storage.update_entry(self.session.year, self.session.month, index, updated)
        return self.saved("Entry updated!")

    def edit_task(self, entry: Entry) -> Entry:
        config = self.session.config
        project_key = config.project_key
        steps = [
            Step("date", f"Enter new date (YYYY-MM-DD) or press Enter to keep [{entry.date}]:\n> ",
                 parse_iso_date, "Invalid date.", keep=entry.date),
            Step("category", category_prompt(config.categories, keep=entry.category),
                 choice_parser(config.categories), "Invalid category selected.", keep=entry.category),
            Step("ticket", f"Enter the Jira ticket number or press Enter to keep [{entry.ticket}]:\n> ",
                 lambda text: f"{project_key}-{parse_text(text)}", keep=entry.ticket),
            Step("note", f"Enter a description of the task, press Enter to keep [{entry.note}] "
                         f"or enter {CLEAR} to clear it:\n> ",
                 parse_clearable_text, keep=entry.note),
            Step("hours", f"Enter the number of hours worked or press Enter to keep "
                          f"[{storage.format_number(entry.hours)}]:\n> ",
                 parse_hours, "Invalid input for hours.", keep=entry.hours),
            Step("task_type", task_type_prompt(keep=entry.task_type), task_type_parser(entry.task_type),
                 keep=entry.task_type),
        ]
        answers = run_form(steps, self.ask)

        description = answers["ticket"] + (f": {answers['note']}" if answers["note"] else "")
        return Entry.task(answers["date"], answers["category"], description, answers["task_type"], answers["hours"])

    def edit_time_off(self, entry: Entry) -> Entry:
        steps = [
            Step("date", f"Enter new date (YYYY-MM-DD) or press Enter to keep [{entry.date}]:\n> ",
                 parse_iso_date, "Invalid date.", keep=entry.date),
            Step("description", f"Enter a description or press Enter to keep [{entry.task_description}]:\n> ",
                 parse_text, keep=entry.task_description),
            Step("hours", f"Enter the number of hours or press Enter to keep "
                          f"[{storage.format_number(entry.hours)}]:\n> ",
                 parse_hours, "Invalid input for hours.", keep=entry.hours),
        ]
        answers = run_form(steps, self.ask)
        return Entry.time_off(answers["date"], answers["description"], answers["hours"])

    def delete_entry(self) -> State:
        picked = self.pick_entry("delete")
        if picked is None:
            return State.MENU
        index, entry = picked

        self.console.print("\n--- Entry to Delete ---\n")
        self.console.print(describe_entry(entry), markup=False)

        confirmation = self.ask("Are you sure you want to delete this entry? Enter 'yes' to confirm:\n> ")
        if confirmation.strip().lower() != "yes":
            self.console.print("Deletion cancelled.")
            return State.MENU

        storage.delete_entry(self.session.year, self.session.month, index)
        return self.saved("Entry deleted!")

    def quit(self) -> State:
        self.console.print(FAREWELL)
        return State.QUIT


def configure_logging() -> None:
    level_name = os.environ.get("TIMETRACK_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def main():
    configure_logging()
    console = Console()
    try:
        config = storage.load_config()
    except storage.ConfigError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        sys.exit(1)

    session = Session(
        config=config,
        console=console,
        ask=lambda prompt: console.input(escape(prompt)),
        today=date.today(),
        delay=config.spinner_seconds,
    )
    MenuDriver(session).run()


if __name__ == "__main__":
    main()
