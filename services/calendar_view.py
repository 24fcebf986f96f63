"""Month view: filtering, projection and pointer routing without any widgets.

Coordinates are relative to the top-left corner of the week rows: the grid
is ``width`` pixels wide and every week row is ``row_height`` pixels tall.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import math
from typing import Callable, List, Optional, Tuple

from core.settings import UI
from models.task import Task
from services.date_grid import is_in_month, month_weeks, shift_month
from services.interaction import (
    DayMapper,
    DraggingTask,
    InteractionController,
    PointerCapture,
)
from services.task_filter import FilterState, filter_tasks
from services.tasks import TaskService
from services.week_projector import WeekLayout, WeekSegment, lanes_that_fit, project_week

CAL_UI = UI.calendar

CELL_SELECTED = "selected"
CELL_DROP_TARGET = "drop"
CELL_RESIZE_PREVIEW = "resize"


@dataclass
class WeekRow:
    index: int
    days: List[date]
    layout: WeekLayout

    @property
    def segments(self) -> List[WeekSegment]:
        return self.layout.segments


class CalendarView:
    def __init__(
        self,
        tasks: TaskService,
        filters: Callable[[], FilterState],
        *,
        anchor: Optional[date] = None,
        today: Callable[[], date] = date.today,
        on_range_committed: Optional[Callable[[date, date], None]] = None,
        on_edit_requested: Optional[Callable[[Task], None]] = None,
        capture: Optional[PointerCapture] = None,
        mapper: Optional[DayMapper] = None,
        max_lanes: Optional[int] = CAL_UI.max_lanes,
    ):
        self.tasks = tasks
        self._filters = filters
        self._today = today
        self.anchor: date = anchor or today()
        self.max_lanes = max_lanes
        self.controller = InteractionController(
            tasks,
            mapper=mapper,
            capture=capture,
            on_range_committed=on_range_committed,
            on_edit_requested=on_edit_requested,
        )

        self.width: float = 0.0
        self.row_height: float = float(CAL_UI.cell_min_height)
        self.strip_height: float = float(CAL_UI.strip_height)
        self.hovered_day: Optional[date] = None
        self._rows: List[WeekRow] = []

    # ===== navigation =====
    def title(self) -> str:
        return self.anchor.strftime("%B %Y")

    def show_previous(self) -> None:
        self.anchor = shift_month(self.anchor, -1)

    def show_next(self) -> None:
        self.anchor = shift_month(self.anchor, 1)

    def show_today(self) -> None:
        self.anchor = self._today()

    # ===== layout =====
    def visible_tasks(self) -> List[Task]:
        return filter_tasks(self.tasks.list(), self._filters(), self._today())

    def render(self) -> List[WeekRow]:
        """Re-read filters and tasks and lay out every week of the month."""
        visible = self.visible_tasks()
        limit = self.lane_limit()
        self._rows = [
            WeekRow(index=i, days=week, layout=project_week(week, visible, max_lanes=limit))
            for i, week in enumerate(month_weeks(self.anchor))
        ]
        return self._rows

    def lane_limit(self) -> int:
        if self.max_lanes is not None:
            return self.max_lanes
        return lanes_that_fit(self.row_height, strip_height=int(self.strip_height))

    @property
    def rows(self) -> List[WeekRow]:
        if not self._rows:
            self.render()
        return self._rows

    def set_metrics(self, width: float, row_height: Optional[float] = None) -> None:
        self.width = float(width)
        if row_height is not None:
            self.row_height = float(row_height)

    def is_in_month(self, day: date) -> bool:
        return is_in_month(day, self.anchor)

    def is_today(self, day: date) -> bool:
        return day == self._today()

    def cell_state(self, day: date) -> Optional[str]:
        """Highlight for a day cell while a gesture is running."""
        ctl = self.controller
        if ctl.is_in_selection(day):
            return CELL_SELECTED
        if isinstance(ctl.state, DraggingTask) and day == self.hovered_day:
            return CELL_DROP_TARGET
        if ctl.is_in_resize_preview(day):
            return CELL_RESIZE_PREVIEW
        return None

    # ===== hit testing =====
    def day_at(self, x: float, y: float, *, clamp: bool = False) -> Optional[date]:
        rows = self.rows
        if self.width <= 0 or self.row_height <= 0 or not rows:
            return None
        row = math.floor(y / self.row_height)
        col = math.floor(x / (self.width / 7))
        if clamp:
            row = max(0, min(len(rows) - 1, row))
            col = max(0, min(6, col))
        elif not (0 <= row < len(rows) and 0 <= col < 7):
            return None
        return rows[row].days[col]

    def segment_at(self, x: float, y: float) -> Optional[Tuple[WeekSegment, float, float]]:
        """The strip under the pointer with the x offset inside it and its width."""
        rows = self.rows
        if self.width <= 0 or self.row_height <= 0:
            return None
        row = math.floor(y / self.row_height)
        if not 0 <= row < len(rows):
            return None
        local_y = y - row * self.row_height
        for seg in rows[row].segments:
            if not seg.top_offset <= local_y < seg.top_offset + self.strip_height:
                continue
            left = seg.left_percent / 100 * self.width
            bar_width = seg.width_percent / 100 * self.width
            if left <= x < left + bar_width:
                return seg, x - left, bar_width
        return None

    # ===== pointer routing =====
    def pointer_down(self, x: float, y: float) -> bool:
        ctl = self.controller
        if not ctl.is_idle:
            return False
        hit = self.segment_at(x, y)
        if hit is not None:
            seg, local_x, bar_width = hit
            started = ctl.press_task(
                seg.task,
                local_x,
                bar_width,
                visible_start=seg.visible_start,
                visible_end=seg.visible_end,
            )
        else:
            day = self.day_at(x, y)
            if day is None:
                return False
            started = ctl.press_day(day)
        if started:
            self.hovered_day = self.day_at(x, y, clamp=True)
        return started

    def pointer_drag_start(self, press: Tuple[float, float], current: Tuple[float, float]) -> bool:
        """A drag reported after the pointer already travelled from ``press`` to ``current``.

        The gesture is decided at the press point, so a press in an edge zone
        still resizes even when the drag is detected outside it.
        """
        if not self.pointer_down(*press):
            return False
        self.pointer_move(*current)
        return True

    def pointer_move(self, x: float, y: float) -> bool:
        if self.controller.is_idle:
            return False
        day = self.day_at(x, y, clamp=True)
        if day is None or day == self.hovered_day:
            return False
        self.hovered_day = day
        return self.controller.enter_day(day)

    def pointer_up(self) -> None:
        self.hovered_day = None
        self.controller.release()

    def pointer_leave(self) -> None:
        self.hovered_day = None
        self.controller.leave()

    def cancel(self) -> None:
        self.hovered_day = None
        self.controller.cancel()


__all__ = [
    "CELL_DROP_TARGET",
    "CELL_RESIZE_PREVIEW",
    "CELL_SELECTED",
    "CalendarView",
    "WeekRow",
]
