"""Clip tasks to one week row and lay them out as horizontal strips."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Sequence

from core.settings import UI
from models.task import Task

CAL_UI = UI.calendar

SHAPE_SINGLE = "single"
SHAPE_START = "start"
SHAPE_END = "end"
SHAPE_MIDDLE = "middle"


@dataclass(frozen=True)
class WeekSegment:
    """The part of a task that falls inside one week, with its geometry."""

    task: Task
    visible_start: date
    visible_end: date
    is_true_start: bool
    is_true_end: bool
    start_index: int
    end_index: int
    lane: int
    top_offset: int

    @property
    def span_days(self) -> int:
        return self.end_index - self.start_index + 1

    @property
    def left_percent(self) -> float:
        return self.start_index / 7 * 100

    @property
    def width_percent(self) -> float:
        return self.span_days / 7 * 100

    @property
    def shape(self) -> str:
        """Rounded-corner class: single-day, start of span, end of span or middle."""
        if self.is_true_start and self.is_true_end:
            return SHAPE_SINGLE
        if self.is_true_start:
            return SHAPE_START
        if self.is_true_end:
            return SHAPE_END
        return SHAPE_MIDDLE


@dataclass
class WeekLayout:
    days: List[date]
    segments: List[WeekSegment] = field(default_factory=list)
    # segments cut by ``max_lanes``; shown as a "+N more" badge
    hidden: int = 0


def clip_to_week(task: Task, week_start: date, week_end: date):
    """Return ``(visible_start, visible_end)`` or ``None`` when the task misses the week."""
    visible_start = max(task.start_date, week_start)
    visible_end = min(task.end_date, week_end)
    if visible_start > visible_end:
        return None
    return visible_start, visible_end


def lanes_that_fit(
    row_height: float,
    *,
    base_offset: int = CAL_UI.strip_base_offset,
    row_pitch: int = CAL_UI.strip_row_height,
    strip_height: int = CAL_UI.strip_height,
) -> int:
    """How many strips fit completely inside a week row of ``row_height`` pixels."""
    room = row_height - base_offset - strip_height
    if room < 0:
        return 0
    return int(room // row_pitch) + 1


def project_week(
    week: Sequence[date],
    tasks: Iterable[Task],
    *,
    base_offset: int = CAL_UI.strip_base_offset,
    row_height: int = CAL_UI.strip_row_height,
    max_lanes: Optional[int] = CAL_UI.max_lanes,
) -> WeekLayout:
    """Project ``tasks`` onto a 7-day ``week``.

    Lanes follow the order of ``tasks``: the n-th task touching the week gets
    lane n, whether or not it overlaps the tasks above it. With
    ``max_lanes`` set, tasks past the cutoff are only counted in
    ``WeekLayout.hidden``.
    """

    days = list(week)
    if len(days) != 7:
        raise ValueError(f"A week has 7 days, got {len(days)}")
    week_start, week_end = days[0], days[-1]
    layout = WeekLayout(days=days)

    lane = 0
    for task in tasks:
        clipped = clip_to_week(task, week_start, week_end)
        if clipped is None:
            continue
        if max_lanes is not None and lane >= max_lanes:
            layout.hidden += 1
            continue
        visible_start, visible_end = clipped
        layout.segments.append(
            WeekSegment(
                task=task,
                visible_start=visible_start,
                visible_end=visible_end,
                is_true_start=visible_start == task.start_date,
                is_true_end=visible_end == task.end_date,
                start_index=(visible_start - week_start).days,
                end_index=(visible_end - week_start).days,
                lane=lane,
                top_offset=base_offset + lane * row_height,
            )
        )
        lane += 1
    return layout


__all__ = [
    "SHAPE_END",
    "SHAPE_MIDDLE",
    "SHAPE_SINGLE",
    "SHAPE_START",
    "WeekLayout",
    "WeekSegment",
    "clip_to_week",
    "lanes_that_fit",
    "project_week",
]
