"""Pointer gestures on the calendar: select a range, move a task, resize a task.

The controller owns the only gesture state. Task changes go straight to the
:class:`TaskService` on every step of a gesture and are never rolled back;
the last applied position stands when the pointer is released, leaves the
grid or the gesture is cancelled.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
import math
from typing import Callable, Optional, Protocol, Tuple, Union

from core.log import get_logger
from core.settings import UI
from models.task import Task
from services.tasks import TaskService
from utils.datetime_utils import add_days

logger = get_logger("interaction")

CAL_UI = UI.calendar

EDGE_START = "start"
EDGE_END = "end"


# ----- gesture state -----
@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Selecting:
    anchor_day: date
    current_day: date

    @property
    def start(self) -> date:
        return min(self.anchor_day, self.current_day)

    @property
    def end(self) -> date:
        return max(self.anchor_day, self.current_day)


@dataclass(frozen=True)
class DraggingTask:
    task_id: str
    # grabbed day minus the task's start, fixed for the whole gesture
    day_offset: int
    duration_days: int
    moved: bool = False


@dataclass(frozen=True)
class ResizingTask:
    task_id: str
    edge: str


GestureState = Union[Idle, Selecting, DraggingTask, ResizingTask]

IDLE = Idle()


# ----- coordinate mapping -----
class DayMapper(Protocol):
    edge_zone: int

    def locate(self, x: float, width: float, span_days: int) -> int:
        """Index of the day under ``x`` within a bar spanning ``span_days`` days."""


def _clamp_index(index: int, span_days: int) -> int:
    return max(0, min(span_days - 1, index))


@dataclass(frozen=True)
class FractionDayMapper:
    """Week strips: the bar's width is split evenly across its visible days."""

    edge_zone: int = CAL_UI.strip_edge_zone

    def locate(self, x: float, width: float, span_days: int) -> int:
        if width <= 0 or span_days <= 0:
            return 0
        return _clamp_index(math.floor(x / width * span_days), span_days)


@dataclass(frozen=True)
class PixelDayMapper:
    """Single-day bars: a fixed number of pixels per day."""

    day_width: float = CAL_UI.bar_day_width
    edge_zone: int = CAL_UI.bar_edge_zone

    def locate(self, x: float, width: float, span_days: int) -> int:
        if self.day_width <= 0 or span_days <= 0:
            return 0
        return _clamp_index(math.floor(x / self.day_width), span_days)


class PointerCapture(Protocol):
    """Receives pointer events outside the grid for as long as a gesture runs."""

    def attach(self) -> None: ...

    def release(self) -> None: ...


def edge_at(x: float, width: float, edge_zone: float, *, true_start: bool, true_end: bool) -> Optional[str]:
    """Which resize edge ``x`` falls on, if any.

    Only margins at the task's real boundaries count; a side cut off by the
    week row has no handle.
    """
    if x < edge_zone and true_start:
        return EDGE_START
    if x > width - edge_zone and true_end:
        return EDGE_END
    return None


class InteractionController:
    def __init__(
        self,
        tasks: TaskService,
        *,
        mapper: Optional[DayMapper] = None,
        capture: Optional[PointerCapture] = None,
        on_range_committed: Optional[Callable[[date, date], None]] = None,
        on_edit_requested: Optional[Callable[[Task], None]] = None,
    ):
        self.tasks = tasks
        self.mapper: DayMapper = mapper or FractionDayMapper()
        self.capture = capture
        self.on_range_committed = on_range_committed
        self.on_edit_requested = on_edit_requested
        self._state: GestureState = IDLE

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return isinstance(self._state, Idle)

    def _set_state(self, new_state: GestureState) -> None:
        was_idle = self.is_idle
        self._state = new_state
        now_idle = self.is_idle
        if was_idle and not now_idle:
            logger.debug("Gesture started: %s", new_state)
            if self.capture is not None:
                self.capture.attach()
        elif not was_idle and now_idle:
            logger.debug("Gesture ended")
            if self.capture is not None:
                self.capture.release()

    # ----- pointer down -----
    def press_day(self, day: date) -> bool:
        """Pointer down on an empty cell: start selecting a range."""
        if not self.is_idle:
            return False
        self._set_state(Selecting(anchor_day=day, current_day=day))
        return True

    def press_task(
        self,
        task: Task,
        x: float,
        width: float,
        *,
        visible_start: Optional[date] = None,
        visible_end: Optional[date] = None,
    ) -> bool:
        """Pointer down on a rendered bar at ``x`` pixels from its left end.

        ``visible_start``/``visible_end`` are the days the bar covers; they
        default to the whole task. Presses in an eligible edge zone start a
        resize, anything else starts a move.
        """
        if not self.is_idle:
            return False
        shown_start = visible_start or task.start_date
        shown_end = visible_end or task.end_date

        edge = edge_at(
            x,
            width,
            self.mapper.edge_zone,
            true_start=shown_start == task.start_date,
            true_end=shown_end == task.end_date,
        )
        if edge is not None:
            self._set_state(ResizingTask(task_id=task.id, edge=edge))
            return True

        span_days = (shown_end - shown_start).days + 1
        grabbed = add_days(shown_start, self.mapper.locate(x, width, span_days))
        self._set_state(
            DraggingTask(
                task_id=task.id,
                day_offset=(grabbed - task.start_date).days,
                duration_days=task.duration_days,
            )
        )
        return True

    # ----- pointer move -----
    def enter_day(self, day: date) -> bool:
        """The pointer moved onto ``day``; returns True when something changed."""
        state = self._state
        if isinstance(state, Selecting):
            if state.current_day == day:
                return False
            self._state = replace(state, current_day=day)
            return True
        if isinstance(state, DraggingTask):
            return self._drag_to(state, day)
        if isinstance(state, ResizingTask):
            return self._resize_to(state, day)
        return False

    def _drag_to(self, state: DraggingTask, day: date) -> bool:
        task = self.tasks.get(state.task_id)
        if task is None:
            self._set_state(IDLE)
            return False
        new_start = add_days(day, -state.day_offset)
        new_end = add_days(new_start, state.duration_days)
        if new_start == task.start_date and new_end == task.end_date:
            return False
        if self.tasks.update(task.id, start_date=new_start, end_date=new_end) is None:
            return False
        self._state = replace(state, moved=True)
        return True

    def _resize_to(self, state: ResizingTask, day: date) -> bool:
        task = self.tasks.get(state.task_id)
        if task is None:
            self._set_state(IDLE)
            return False
        if state.edge == EDGE_START:
            if day > task.end_date or day == task.start_date:
                return False
            return self.tasks.update(task.id, start_date=day) is not None
        if day < task.start_date or day == task.end_date:
            return False
        return self.tasks.update(task.id, end_date=day) is not None

    # ----- gesture end -----
    def release(self) -> None:
        """Pointer up: commit a selection, finish a move or resize."""
        state = self._state
        self._set_state(IDLE)
        if isinstance(state, Selecting):
            logger.debug("Range committed: %s..%s", state.start, state.end)
            if self.on_range_committed is not None:
                self.on_range_committed(state.start, state.end)
        elif isinstance(state, DraggingTask) and not state.moved:
            task = self.tasks.get(state.task_id)
            if task is not None and self.on_edit_requested is not None:
                self.on_edit_requested(task)

    def leave(self) -> None:
        """Pointer left the grid: moves and resizes stand, a selection is dropped."""
        self._set_state(IDLE)

    def cancel(self) -> None:
        """Abort the gesture (Escape). Already applied changes are kept."""
        if not self.is_idle:
            logger.debug("Gesture cancelled: %s", self._state)
        self._set_state(IDLE)

    # ----- highlighting -----
    def selection_range(self) -> Optional[Tuple[date, date]]:
        state = self._state
        if isinstance(state, Selecting):
            return state.start, state.end
        return None

    def is_in_selection(self, day: date) -> bool:
        rng = self.selection_range()
        return rng is not None and rng[0] <= day <= rng[1]

    def active_task_id(self) -> Optional[str]:
        state = self._state
        if isinstance(state, (DraggingTask, ResizingTask)):
            return state.task_id
        return None

    def is_in_resize_preview(self, day: date) -> bool:
        state = self._state
        if not isinstance(state, ResizingTask):
            return False
        task = self.tasks.get(state.task_id)
        return task is not None and task.start_date <= day <= task.end_date


__all__ = [
    "EDGE_END",
    "EDGE_START",
    "DayMapper",
    "DraggingTask",
    "FractionDayMapper",
    "GestureState",
    "IDLE",
    "Idle",
    "InteractionController",
    "PixelDayMapper",
    "PointerCapture",
    "ResizingTask",
    "Selecting",
    "edge_at",
]
