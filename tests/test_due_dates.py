"""
Tests for due-date grouping used by the calendar view.
"""

from datetime import date

import pytest

from taskboard.core.board import BoardState, group_by_due_date, parse_month

from conftest import make_task


@pytest.fixture
def dated_board():
    return BoardState(
        [
            make_task("a", "Draft", dueDate="2024-06-14T00:00:00.000Z"),
            make_task("b", "Review", "in-progress", dueDate="2024-06-03"),
            make_task("c", "Launch", "done", dueDate="2024-06-14"),
            make_task("d", "Next month", dueDate="2024-07-01"),
            make_task("e", "Someday"),
        ]
    )


class TestGroupByDueDate:
    def test_groups_month_by_day_in_date_order(self, dated_board):
        month = group_by_due_date(dated_board.tasks(), 2024, 6)

        assert list(month.days) == [date(2024, 6, 3), date(2024, 6, 14)]
        assert [t.id for t in month.tasks_on(date(2024, 6, 14))] == ["a", "c"]
        assert month.count == 3
        assert month.title == "June 2024"

    def test_other_months_left_out(self, dated_board):
        month = group_by_due_date(dated_board.tasks(), 2024, 7)

        assert [t.id for t in month.tasks_on(date(2024, 7, 1))] == ["d"]
        assert month.count == 1

    def test_undated_tasks_kept_apart(self, dated_board):
        month = group_by_due_date(dated_board.tasks(), 2024, 6)

        assert [t.id for t in month.undated] == ["e"]
        assert all(t.due_date is not None for ts in month.days.values() for t in ts)

    def test_empty_month(self, dated_board):
        month = group_by_due_date(dated_board.tasks(), 2023, 1)

        assert month.days == {}
        assert month.count == 0
        assert month.tasks_on(date(2023, 1, 1)) == []


class TestParseMonth:
    def test_valid(self):
        assert parse_month("2024-06") == (2024, 6)

    @pytest.mark.parametrize("value", ["2024-13", "June", "2024/06", ""])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="YYYY-MM"):
            parse_month(value)
