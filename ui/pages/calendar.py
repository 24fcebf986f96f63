# ui/pages/calendar.py
from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional, Tuple

import flet as ft

from core.categories import color_hex
from core.log import get_logger
from core.priorities import priority_color
from core.settings import UI
from models.task import Task, TaskDraft
from services.calendar_view import (
    CELL_DROP_TARGET,
    CELL_RESIZE_PREVIEW,
    CELL_SELECTED,
    CalendarView,
    WeekRow,
)
from services.users import default_assignee, first_name
from services.week_projector import SHAPE_END, SHAPE_SINGLE, SHAPE_START, WeekSegment
from ui.task_dialog import TaskDialog

logger = get_logger("ui.calendar")

# ===== settings =====
CAL_UI = UI.calendar
THEME = UI.theme

ROW_H = CAL_UI.cell_min_height
STRIP_H = CAL_UI.strip_height
HEADER_H = CAL_UI.header_height
GRID_PAD = CAL_UI.grid_padding

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

ROUND = 14
SQUARE = 3

CELL_COLORS = {
    CELL_SELECTED: (THEME.selection_bg, THEME.selection_border),
    CELL_DROP_TARGET: (THEME.drop_bg, THEME.drop_border),
    CELL_RESIZE_PREVIEW: (THEME.resize_bg, THEME.resize_border),
}


class EscapeKeyCapture:
    """Routes Escape to the calendar while a gesture is running.

    The page-level keyboard handler is installed on ``attach`` and the previous
    one restored on ``release``, so nothing listens once the grid is idle.
    """

    def __init__(self, page: ft.Page, on_escape: Callable[[], None]):
        self.page = page
        self.on_escape = on_escape
        self._previous = None
        self._attached = False

    def _on_key(self, e: ft.KeyboardEvent):
        if e.key == "Escape":
            self.on_escape()

    def attach(self) -> None:
        if self._attached:
            return
        self._previous = self.page.on_keyboard_event
        self.page.on_keyboard_event = self._on_key
        self._attached = True

    def release(self) -> None:
        if not self._attached:
            return
        self.page.on_keyboard_event = self._previous
        self._previous = None
        self._attached = False


def _strip_radius(shape: str) -> ft.BorderRadius:
    if shape == SHAPE_SINGLE:
        return ft.border_radius.all(ROUND)
    if shape == SHAPE_START:
        return ft.border_radius.only(top_left=ROUND, bottom_left=ROUND, top_right=SQUARE, bottom_right=SQUARE)
    if shape == SHAPE_END:
        return ft.border_radius.only(top_left=SQUARE, bottom_left=SQUARE, top_right=ROUND, bottom_right=ROUND)
    return ft.border_radius.all(SQUARE)


class CalendarPage:
    """
    Month grid with task strips.
    - One GestureDetector over all week rows; coordinates go to CalendarView.
    - Strips are positioned from the week layout, cells are only highlighted.
    - Escape aborts the running gesture.
    """

    def __init__(self, app):
        self.app = app
        self.capture = EscapeKeyCapture(app.page, self._on_escape)
        self.view = CalendarView(
            app.tasks,
            app.filter_panel.snapshot,
            on_range_committed=self._open_create_dialog,
            on_edit_requested=self._open_edit_dialog,
            capture=self.capture,
        )

        # ---------- header ----------
        self.title_text = ft.Text("", size=24, weight=ft.FontWeight.BOLD)
        self.prev_btn = ft.IconButton(icon=ft.Icons.CHEVRON_LEFT, tooltip="Previous month", on_click=lambda e: self.shift_month(-1))
        self.next_btn = ft.IconButton(icon=ft.Icons.CHEVRON_RIGHT, tooltip="Next month", on_click=lambda e: self.shift_month(1))
        self.today_btn = ft.OutlinedButton("Today", on_click=lambda e: self.go_today())

        header = ft.Row(
            controls=[self.title_text, ft.Row([self.prev_btn, self.today_btn, self.next_btn], spacing=6)],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )

        self._press_point: Optional[Tuple[float, float]] = None
        self.grid = ft.Container()
        self.control = ft.Container(
            content=ft.Column(
                [header, ft.Divider(height=1), ft.Column([self.grid], scroll=ft.ScrollMode.AUTO, expand=True)],
                spacing=12,
                expand=True,
            ),
            expand=True,
            padding=20,
        )

    # ===== navigation =====
    def shift_month(self, delta: int):
        self.view.cancel()
        if delta < 0:
            self.view.show_previous()
        else:
            self.view.show_next()
        self.load()

    def go_today(self):
        self.view.cancel()
        self.view.show_today()
        self.load()

    # ===== loading =====
    def _grid_width(self) -> float:
        page_w = self.app.page.width or UI.window_min_width
        return max(7 * 48, page_w - UI.filter_panel_width - 2 * 20 - 2 * GRID_PAD - 16)

    def load(self):
        width = self._grid_width()
        self.view.set_metrics(width, ROW_H)
        rows = self.view.render()
        self.title_text.value = self.view.title()
        self.grid.content = self._build_grid(rows, width)
        self.app.page.update()

    # ===== grid =====
    def _build_grid(self, rows: List[WeekRow], width: float) -> ft.Control:
        col_w = width / 7
        weekday_row = ft.Row(
            [
                ft.Container(
                    content=ft.Text(name, size=13, weight=ft.FontWeight.W_500, color=THEME.text_subtle),
                    width=col_w,
                    height=HEADER_H,
                    alignment=ft.alignment.center,
                )
                for name in WEEKDAYS
            ],
            spacing=0,
        )
        weeks = ft.Column([self._build_week(row, width) for row in rows], spacing=0)
        detector = ft.GestureDetector(
            content=weeks,
            on_tap_down=self._on_tap_down,
            on_tap_up=self._on_release,
            on_pan_start=self._on_pan_start,
            on_pan_update=self._on_pan_update,
            on_pan_end=self._on_release,
            on_exit=self._on_exit,
            on_hover=self._on_hover,
            drag_interval=10,
        )
        return ft.Container(
            content=ft.Column([weekday_row, detector], spacing=0),
            padding=GRID_PAD,
            border=ft.border.all(0.5, THEME.outline),
            border_radius=8,
            bgcolor="#ffffff",
        )

    def _build_week(self, row: WeekRow, width: float) -> ft.Control:
        col_w = width / 7
        cells = ft.Row([self._build_cell(d, col_w) for d in row.days], spacing=0)
        strips = [self._build_strip(seg, width) for seg in row.segments]
        controls: List[ft.Control] = [cells, *strips]
        if row.layout.hidden:
            controls.append(
                ft.Container(
                    content=ft.Text(f"+{row.layout.hidden} more", size=11, color=THEME.text_subtle),
                    right=6,
                    bottom=4,
                )
            )
        return ft.Stack(controls, width=width, height=ROW_H)

    def _build_cell(self, day: date, col_w: float) -> ft.Control:
        bg: Optional[str] = None
        border_color = THEME.outline
        border_w = 0.5
        if not self.view.is_in_month(day):
            bg = THEME.muted_bg
        if self.view.is_today(day):
            bg, border_color = THEME.today_bg, THEME.today_border
        state = self.view.cell_state(day)
        if state is not None:
            bg, border_color = CELL_COLORS[state]
            border_w = 2
        return ft.Container(
            content=ft.Text(
                str(day.day),
                size=13,
                weight=ft.FontWeight.W_500,
                color=None if self.view.is_in_month(day) else THEME.text_subtle,
            ),
            width=col_w,
            height=ROW_H,
            padding=ft.padding.only(left=6, top=4),
            alignment=ft.alignment.top_left,
            bgcolor=bg,
            border=ft.border.all(border_w, border_color),
        )

    def _build_strip(self, seg: WeekSegment, width: float) -> ft.Control:
        task = seg.task
        active = self.view.controller.active_task_id() == task.id
        badge = ft.Container(
            content=ft.Text(task.priority, size=10, color=THEME.strip_text),
            bgcolor=priority_color(task.priority),
            padding=ft.padding.symmetric(horizontal=5, vertical=1),
            border_radius=ft.border_radius.all(8),
        )
        parts: List[ft.Control] = [
            badge,
            ft.Text(task.name, size=12, color=THEME.strip_text, no_wrap=True, overflow=ft.TextOverflow.ELLIPSIS, expand=True),
        ]
        if seg.is_true_start and task.assigned_user:
            parts.append(ft.Text(first_name(task.assigned_user), size=10, color=THEME.strip_text, no_wrap=True))
        return ft.Container(
            content=ft.Row(parts, spacing=6, vertical_alignment=ft.CrossAxisAlignment.CENTER),
            left=seg.left_percent / 100 * width + 2,
            top=seg.top_offset,
            width=max(4, seg.width_percent / 100 * width - 4),
            height=STRIP_H,
            padding=ft.padding.symmetric(horizontal=8),
            bgcolor=color_hex(task.color),
            border_radius=_strip_radius(seg.shape),
            opacity=0.6 if active else 1.0,
            tooltip=f"{task.name}\n{task.start_date:%b %d} - {task.end_date:%b %d}\n"
                    f"Category: {task.category}\nAssigned: {task.assigned_user}",
        )

    # ===== gestures =====
    def _on_hover(self, e: ft.HoverEvent):
        # last pointer position before the button went down
        self._press_point = (e.local_x, e.local_y)

    def _on_tap_down(self, e: ft.TapEvent):
        self._press_point = (e.local_x, e.local_y)
        if self.view.pointer_down(e.local_x, e.local_y):
            self.load()

    def _on_pan_start(self, e: ft.DragStartEvent):
        if not self.view.controller.is_idle:
            return
        # the pan is reported past the drag slop; start from where the press was
        press = self._press_point or (e.local_x, e.local_y)
        if self.view.pointer_drag_start(press, (e.local_x, e.local_y)):
            self.load()

    def _on_pan_update(self, e: ft.DragUpdateEvent):
        before = self.view.hovered_day
        self.view.pointer_move(e.local_x, e.local_y)
        if self.view.hovered_day != before:
            self.load()

    def _on_release(self, e=None):
        if self.view.controller.is_idle:
            return
        self.view.pointer_up()
        self.load()

    def _on_exit(self, e=None):
        if self.view.controller.is_idle:
            return
        self.view.pointer_leave()
        self.load()

    def _on_escape(self):
        self.view.cancel()
        self.load()

    # ===== dialogs =====
    def _open_create_dialog(self, start: date, end: date):
        draft = TaskDraft(name="", assigned_user=default_assignee(self.app.users))

        def on_save(result: TaskDraft):
            task = self.app.tasks.add_from_draft(result, start, end)
            if task is None:
                logger.info("Create from %s..%s rejected", start, end)
                self.app.toast("Task was not created")
            self.load()

        TaskDialog(
            self.app.page,
            self.app.users,
            draft=draft,
            title="New task",
            subtitle=f"{start:%b %d} - {end:%b %d}",
            on_save=on_save,
            on_close=self.load,
        ).open()

    def _open_edit_dialog(self, task: Task):
        task_id = task.id

        def on_save(result: TaskDraft):
            if self.app.tasks.apply_draft(task_id, result) is None:
                self.app.toast("Task not found")
            self.load()

        def on_delete():
            self.app.tasks.delete(task_id)
            self.app.toast("Deleted")
            self.load()

        TaskDialog(
            self.app.page,
            self.app.users,
            draft=TaskDraft.from_task(task),
            title="Edit task",
            subtitle=f"{task.start_date:%b %d} - {task.end_date:%b %d}",
            on_save=on_save,
            on_delete=on_delete,
        ).open()
