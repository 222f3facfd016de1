"""Terminal front end for the scheduling engine.

Usage:
    carehire slots [booked.json]
    carehire propose "<hours estimate>" <availability.json>
    carehire status <profiles.json> <interviews.json> <employees.json>
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.theme import Theme

from carehire.config import Config, load_config
from carehire.pipeline import (
    build_pipeline,
    is_actionable,
    next_step,
    rejection_funnel,
    status_counts,
    time_to_reject,
)
from carehire.proposals import SCHEDULE_MESSAGE_KEY, is_placeholder, propose_schedule
from carehire.schemas import (
    WEEK_ORDER,
    BookedAppointment,
    CandidateProfile,
    EmployeeRecord,
    Interview,
)
from carehire.slots import compute_available_slots
from carehire.templates import WeekdayTemplate, load_template, static_template

custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
})

console = Console(theme=custom_theme)

log = logging.getLogger(__name__)


class UsageError(Exception):
    pass


def main(argv: list[str] | None = None) -> None:
    """Entry point for the carehire CLI."""
    args = sys.argv[1:] if argv is None else argv
    try:
        config = load_config()
        _setup_logging(config)
    except ValueError as e:
        console.print(f"[error]Error: {e}[/error]")
        sys.exit(1)

    if not args or args[0] in ("-h", "--help", "help"):
        console.print(__doc__)
        return

    command, rest = args[0], args[1:]
    handlers = {
        "slots": _cmd_slots,
        "propose": _cmd_propose,
        "status": _cmd_status,
    }
    handler = handlers.get(command)
    if handler is None:
        console.print(f"[error]Unknown command: {command}[/error]")
        sys.exit(1)

    try:
        handler(config, rest)
    except UsageError as e:
        console.print(f"[error]{e}[/error]")
        console.print(__doc__)
        sys.exit(1)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        console.print(f"[error]Error: {e}[/error]")
        sys.exit(1)


def _setup_logging(config: Config) -> None:
    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.log_level}")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _read_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


# -- Commands -----------------------------------------------------------------

def _cmd_slots(config: Config, args: list[str]) -> None:
    booked = [BookedAppointment.model_validate(a) for a in _read_json(args[0])] if args else []
    template = _template_for(config)

    days = compute_available_slots(template, booked, config.horizon_weeks, datetime.now().astimezone())
    if not days:
        console.print("[warning]No open interview slots in the next "
                      f"{config.horizon_weeks} week(s).[/warning]")
        return

    table = Table(title="Open interview slots")
    table.add_column("Date", style="bold")
    table.add_column("Slots")
    for day in days:
        table.add_row(
            day.date.strftime("%a %Y-%m-%d"),
            ", ".join(s.strftime("%H:%M") for s in day.slots),
        )
    console.print(table)


def _template_for(config: Config) -> WeekdayTemplate:
    if config.template_source == "static":
        return static_template()

    def fetch() -> dict | None:
        if not config.settings_file.exists():
            return None
        return _read_json(str(config.settings_file))

    return load_template(fetch)


def _cmd_propose(config: Config, args: list[str]) -> None:
    if len(args) != 2:
        raise UsageError("propose needs an hours estimate and an availability file")
    estimate, grid_path = args
    grid = _read_json(grid_path)

    schedule = propose_schedule(estimate, grid, chunk_hours=config.shift_chunk_hours)
    if is_placeholder(schedule):
        console.print(f"[warning]{schedule[SCHEDULE_MESSAGE_KEY]}[/warning]")
        return
    if not schedule:
        console.print("[warning]No shifts could be proposed.[/warning]")
        return

    table = Table(title=f"Proposed schedule ({estimate})")
    table.add_column("Day", style="bold")
    table.add_column("Shift")
    for day in WEEK_ORDER:
        if day in schedule:
            table.add_row(day.capitalize(), schedule[day])
    console.print(table)


def _cmd_status(config: Config, args: list[str]) -> None:
    if len(args) != 3:
        raise UsageError("status needs profiles, interviews and employees files")
    profiles = [CandidateProfile.model_validate(p) for p in _read_json(args[0])]
    interviews = [Interview.model_validate(i) for i in _read_json(args[1])]
    employees = [EmployeeRecord.model_validate(e) for e in _read_json(args[2])]

    rows = build_pipeline(profiles, interviews, employees)
    log.info("Resolved %d candidates", len(rows))

    table = Table(title="Candidate status report")
    table.add_column("Candidate", style="bold")
    table.add_column("Status")
    table.add_column("Next step")
    table.add_column("Actionable", justify="center")
    for row in rows:
        table.add_row(
            row.profile.full_name or row.profile.id,
            row.status.value,
            next_step(row),
            "yes" if is_actionable(row.status) else "",
        )
    console.print(table)

    counts = status_counts(rows)
    summary = ", ".join(f"{s.value}: {n}" for s, n in counts.items() if n)
    console.print(f"[info]{summary or 'No candidates.'}[/info]")

    funnel = rejection_funnel(profiles, interviews, employees)
    stages = ", ".join(f"{stage}: {n}" for stage, n in funnel.items())
    console.print(f"[info]Funnel: {stages}[/info]")

    delays = time_to_reject(profiles, interviews)
    if delays:
        reasons = ", ".join(f"{reason}: {days}" for reason, days in delays)
        console.print(f"[info]Days to rejection: {reasons}[/info]")


if __name__ == "__main__":
    main()
