"""
Due-date grouping for the calendar view.

Tasks are grouped by due date one month at a time. Tasks without a due date
never appear on a day; they are counted separately so views can mention them.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

from taskboard.core.tasks.models import Task


@dataclass
class CalendarMonth:
    """Tasks due in one month, keyed by day in date order."""

    year: int
    month: int
    days: dict[date, list[Task]] = field(default_factory=dict)
    undated: list[Task] = field(default_factory=list)

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    @property
    def count(self) -> int:
        return sum(len(tasks) for tasks in self.days.values())

    def tasks_on(self, day: date) -> list[Task]:
        return list(self.days.get(day, []))


def parse_month(value: str) -> tuple[int, int]:
    """
    Parse a ``YYYY-MM`` month.

    Raises:
        ValueError: If the value is not a valid month
    """
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except ValueError as e:
        raise ValueError(f"Invalid month {value!r}, expected YYYY-MM") from e
    return parsed.year, parsed.month


def group_by_due_date(tasks: Iterable[Task], year: int, month: int) -> CalendarMonth:
    """
    Group tasks due in the given month by day.

    Tasks keep their board order within a day. Tasks due in other months
    are left out.
    """
    result = CalendarMonth(year=year, month=month)
    for task in tasks:
        due = task.due_date
        if due is None:
            result.undated.append(task)
        elif (due.year, due.month) == (year, month):
            result.days.setdefault(due, []).append(task)
    result.days = dict(sorted(result.days.items()))
    return result
