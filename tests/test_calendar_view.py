from datetime import date

import pytest

from core.categories import CATEGORIES
from services.calendar_view import (
    CELL_DROP_TARGET,
    CELL_RESIZE_PREVIEW,
    CELL_SELECTED,
    CalendarView,
)
from services.interaction import EDGE_END, ResizingTask
from services.task_filter import FilterState
from services.tasks import TaskService

TODAY = date(2024, 6, 1)
USERS = ["John Doe", "Jane Smith"]


class Harness:
    def __init__(self):
        self.tasks = TaskService()
        self.filters = FilterState.all_for(USERS)
        self.committed = []
        self.edits = []
        self.view = CalendarView(
            self.tasks,
            lambda: self.filters,
            anchor=date(2024, 6, 15),
            today=lambda: TODAY,
            on_range_committed=lambda s, e: self.committed.append((s, e)),
            on_edit_requested=self.edits.append,
        )
        # 100 px per day column, 140 px per week row
        self.view.set_metrics(700, 140)


@pytest.fixture
def h():
    return Harness()


def test_rows_cover_the_month(h):
    rows = h.view.render()
    assert len(rows) == 6
    assert rows[0].days[0] == date(2024, 5, 26)
    assert rows[-1].days[-1] == date(2024, 7, 6)
    assert h.view.is_in_month(date(2024, 6, 30))
    assert not h.view.is_in_month(date(2024, 7, 1))
    assert h.view.is_today(TODAY)


def test_day_at_maps_grid_coordinates(h):
    assert h.view.day_at(250, 150) == date(2024, 6, 4)
    assert h.view.day_at(0, 0) == date(2024, 5, 26)
    assert h.view.day_at(699, 839) == date(2024, 7, 6)
    assert h.view.day_at(750, 150) is None
    assert h.view.day_at(750, 150, clamp=True) == date(2024, 6, 8)
    assert h.view.day_at(-5, -5, clamp=True) == date(2024, 5, 26)


def test_segment_at_finds_strip_and_local_offset(h):
    task = h.tasks.add("Design", date(2024, 6, 10), date(2024, 6, 12), assigned_user="John Doe")
    h.view.render()
    seg, local_x, bar_width = h.view.segment_at(250, 2 * 140 + 30)
    assert seg.task is task
    assert local_x == pytest.approx(150)
    assert bar_width == pytest.approx(300)
    # above the strip, inside the day number band
    assert h.view.segment_at(250, 2 * 140 + 10) is None
    # right of the strip
    assert h.view.segment_at(450, 2 * 140 + 30) is None


def test_drag_through_pointer_events(h):
    task = h.tasks.add("Design", date(2024, 6, 10), date(2024, 6, 12), assigned_user="John Doe")
    h.view.render()
    assert h.view.pointer_down(250, 2 * 140 + 30)
    assert h.view.cell_state(date(2024, 6, 11)) == CELL_DROP_TARGET

    h.view.pointer_move(450, 3 * 140 + 70)
    assert (task.start_date, task.end_date) == (date(2024, 6, 19), date(2024, 6, 21))
    assert h.view.cell_state(date(2024, 6, 20)) == CELL_DROP_TARGET

    h.view.pointer_up()
    assert h.view.controller.is_idle
    assert h.edits == []
    assert h.view.cell_state(date(2024, 6, 20)) is None


def test_moves_within_one_cell_are_ignored(h):
    updates = []
    h.tasks.subscribe("after_update", updates.append)
    h.tasks.add("Design", date(2024, 6, 10), date(2024, 6, 12), assigned_user="John Doe")
    h.view.render()
    h.view.pointer_down(250, 2 * 140 + 30)
    assert not h.view.pointer_move(260, 2 * 140 + 100)
    assert updates == []


def test_resize_from_strip_edge(h):
    task = h.tasks.add("Design", date(2024, 6, 10), date(2024, 6, 12), assigned_user="John Doe")
    h.view.render()
    h.view.pointer_down(395, 2 * 140 + 30)
    h.view.pointer_move(550, 2 * 140 + 70)
    assert task.end_date == date(2024, 6, 14)
    assert h.view.cell_state(date(2024, 6, 13)) == CELL_RESIZE_PREVIEW
    h.view.pointer_up()
    assert task.end_date == date(2024, 6, 14)


def test_selecting_empty_cells_commits_range(h):
    assert h.view.pointer_down(650, 2 * 140 + 70)  # Jun 15
    h.view.pointer_move(350, 2 * 140 + 70)  # Jun 12
    assert h.view.cell_state(date(2024, 6, 13)) == CELL_SELECTED
    assert h.view.cell_state(date(2024, 6, 16)) is None
    h.view.pointer_up()
    assert h.committed == [(date(2024, 6, 12), date(2024, 6, 15))]


def test_leaving_grid_keeps_moved_task(h):
    task = h.tasks.add("Design", date(2024, 6, 10), date(2024, 6, 12), assigned_user="John Doe")
    h.view.render()
    h.view.pointer_down(150, 2 * 140 + 30)
    h.view.pointer_move(350, 2 * 140 + 70)
    h.view.pointer_leave()
    assert (task.start_date, task.end_date) == (date(2024, 6, 12), date(2024, 6, 14))
    assert h.view.controller.is_idle


def test_click_on_strip_requests_edit(h):
    task = h.tasks.add("Design", date(2024, 6, 10), date(2024, 6, 12), assigned_user="John Doe")
    h.view.render()
    h.view.pointer_down(250, 2 * 140 + 30)
    h.view.pointer_up()
    assert h.edits == [task]


def test_render_reads_filters_fresh(h):
    h.tasks.add("Mine", date(2024, 6, 10), date(2024, 6, 12), assigned_user="John Doe")
    h.tasks.add("Hers", date(2024, 6, 10), date(2024, 6, 12), assigned_user="Jane Smith")
    assert len(h.view.render()[2].segments) == 2
    h.filters = FilterState(categories=frozenset(CATEGORIES), users=frozenset(["Jane Smith"]))
    segments = h.view.render()[2].segments
    assert [s.task.name for s in segments] == ["Hers"]
    assert segments[0].lane == 0


def test_time_window_uses_today(h):
    h.tasks.add("Soon", date(2024, 6, 8), date(2024, 6, 9), assigned_user="John Doe")
    h.tasks.add("Later", date(2024, 6, 20), date(2024, 6, 21), assigned_user="John Doe")
    h.filters = FilterState(categories=frozenset(CATEGORIES), users=frozenset(USERS), time_window="1week")
    assert [t.name for t in h.view.visible_tasks()] == ["Soon"]


def test_navigation(h):
    assert h.view.title() == "June 2024"
    h.view.show_next()
    assert h.view.title() == "July 2024"
    h.view.show_previous()
    h.view.show_previous()
    assert h.view.title() == "May 2024"
    h.view.show_today()
    assert h.view.anchor == TODAY


def test_no_hits_before_metrics_are_known():
    view = CalendarView(TaskService(), lambda: FilterState.all_for(USERS), today=lambda: TODAY)
    assert view.day_at(10, 10) is None
    assert view.segment_at(10, 10) is None
    assert not view.pointer_down(10, 10)


def _crowd(h, count):
    return [
        h.tasks.add(f"T{i}", date(2024, 6, 10), date(2024, 6, 12), assigned_user="John Doe")
        for i in range(count)
    ]


def _reachable(view, row_index):
    found = set()
    for y in range(row_index * 140, (row_index + 1) * 140):
        for x in range(0, 700, 10):
            hit = view.segment_at(x, y)
            if hit is not None:
                found.add(hit[0].task.name)
    return found


def test_crowded_week_hides_what_does_not_fit(h):
    _crowd(h, 6)
    row = h.view.render()[2]
    assert [s.task.name for s in row.segments] == ["T0", "T1", "T2"]
    assert row.layout.hidden == 3
    assert all(s.top_offset + h.view.strip_height <= 140 for s in row.segments)
    assert _reachable(h.view, 2) == {"T0", "T1", "T2"}


def test_taller_rows_show_more_lanes(h):
    _crowd(h, 6)
    h.view.set_metrics(700, 240)
    row = h.view.render()[2]
    assert row.layout.hidden == 0
    assert [s.lane for s in row.segments] == [0, 1, 2, 3, 4, 5]


def test_explicit_lane_limit_wins():
    view = CalendarView(TaskService(), lambda: FilterState.all_for(USERS), today=lambda: TODAY, max_lanes=1)
    assert view.lane_limit() == 1


def test_drag_started_late_uses_press_point(h):
    task = h.tasks.add("Design", date(2024, 6, 10), date(2024, 6, 12), assigned_user="John Doe")
    h.view.render()
    # pressed 5 px inside the right end, drag reported two columns further on
    assert h.view.pointer_drag_start((395, 2 * 140 + 30), (595, 2 * 140 + 30))
    assert h.view.controller.state == ResizingTask(task_id=task.id, edge=EDGE_END)
    assert task.end_date == date(2024, 6, 14)
    h.view.pointer_up()
    assert h.edits == []


def test_drag_start_on_empty_space_outside_grid_does_nothing(h):
    assert not h.view.pointer_drag_start((750, 10), (760, 10))
    assert h.view.controller.is_idle
