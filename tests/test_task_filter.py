from datetime import date, datetime, timedelta
import itertools

import pytest

from core.categories import CATEGORIES
from models.task import Task
from services.task_filter import TIME_WINDOWS, FilterState, filter_tasks, is_visible

NOW = date(2024, 6, 1)
USERS = ["John Doe", "Jane Smith"]


def _task(offset_days=0, *, category="To Do", user="John Doe", length=2):
    start = NOW + timedelta(days=offset_days)
    return Task(
        name="t",
        start_date=start,
        end_date=start + timedelta(days=length),
        category=category,
        assigned_user=user,
    )


def _filters(time_window="all", categories=CATEGORIES, users=USERS):
    return FilterState(categories=frozenset(categories), users=frozenset(users), time_window=time_window)


def test_hidden_when_category_not_selected():
    task = _task(category="Review")
    assert not is_visible(task, _filters(categories=["To Do", "Completed"]), NOW)
    assert is_visible(task, _filters(categories=["Review"]), NOW)


def test_hidden_when_assignee_not_selected():
    task = _task(user="Jane Smith")
    assert not is_visible(task, _filters(users=["John Doe"]), NOW)


def test_assignee_missing_from_directory_is_hidden_by_user_filter():
    task = _task(user="Someone Removed")
    assert not is_visible(task, _filters(), NOW)


def test_all_window_ignores_dates():
    assert is_visible(_task(400), _filters("all"), NOW)
    assert is_visible(_task(-400), _filters("all"), NOW)


@pytest.mark.parametrize("window,limit", [("1week", 7), ("2weeks", 14), ("3weeks", 21)])
def test_window_limits_how_far_ahead_a_task_starts(window, limit):
    assert is_visible(_task(limit), _filters(window), NOW)
    assert not is_visible(_task(limit + 1), _filters(window), NOW)


@pytest.mark.parametrize("window", ["1week", "2weeks", "3weeks"])
def test_window_is_one_sided_past_tasks_stay_visible(window):
    assert is_visible(_task(-1), _filters(window), NOW)
    assert is_visible(_task(-90, length=1), _filters(window), NOW)


def test_now_with_time_of_day_counts_whole_days():
    late_evening = datetime(2024, 6, 1, 23, 59)
    assert is_visible(_task(7), _filters("1week"), late_evening)
    assert not is_visible(_task(8), _filters("1week"), late_evening)


def test_unknown_window_is_rejected():
    with pytest.raises(ValueError):
        FilterState(categories=frozenset(), users=frozenset(), time_window="1month")


def test_filter_matches_conjunction_for_all_combinations():
    offsets = [-10, 0, 7, 8, 14, 15, 21, 22]
    tasks = [
        _task(off, category=cat, user=user)
        for off, cat, user in itertools.product(offsets, CATEGORIES, USERS)
    ]
    category_choices = [CATEGORIES, CATEGORIES[:2], ()]
    user_choices = [USERS, USERS[:1], ()]
    for cats, users, window in itertools.product(category_choices, user_choices, TIME_WINDOWS):
        filters = _filters(window, cats, users)
        limit = TIME_WINDOWS[window]
        for task in tasks:
            expected = (
                task.category in cats
                and task.assigned_user in users
                and (limit is None or (task.start_date - NOW).days <= limit)
            )
            assert is_visible(task, filters, NOW) == expected


def test_filter_tasks_keeps_order():
    a, b, c = _task(1), _task(30, category="Review"), _task(2)
    result = filter_tasks([a, b, c], _filters("1week"), NOW)
    assert result == [a, c]
    assert result[0] is a


def test_all_for_shows_everything():
    filters = FilterState.all_for(USERS)
    assert filters.time_window == "all"
    assert filters.categories == frozenset(CATEGORIES)
    assert is_visible(_task(100, category="Completed", user="Jane Smith"), filters, NOW)
