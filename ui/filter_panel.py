# ui/filter_panel.py
from __future__ import annotations

from typing import Callable, Optional, Sequence, Set

import flet as ft

from core.categories import CATEGORIES, CATEGORY_META
from core.settings import UI
from models.user import User
from services.task_filter import TIME_WINDOW_LABELS, FilterState


class FilterPanel:
    """Category, assignee and time-window selections.

    The panel is the only writer of the filter state; the calendar reads a
    fresh ``snapshot()`` on every render.
    """

    def __init__(self, users: Sequence[User], on_change: Optional[Callable[[], None]] = None):
        self.on_change = on_change
        self._categories: Set[str] = set(CATEGORIES)
        self._users: Set[str] = {u.name for u in users}
        self._time_window = "all"

        category_boxes = [
            ft.Checkbox(
                label=c,
                value=True,
                fill_color=CATEGORY_META[c]["color"],
                on_change=lambda e, _c=c: self._toggle(self._categories, _c, e.control.value),
            )
            for c in CATEGORIES
        ]
        user_boxes = [
            ft.Checkbox(
                label=u.name,
                value=True,
                on_change=lambda e, _n=u.name: self._toggle(self._users, _n, e.control.value),
            )
            for u in users
        ]
        time_group = ft.RadioGroup(
            value=self._time_window,
            content=ft.Column([ft.Radio(value=key, label=label) for key, label in TIME_WINDOW_LABELS.items()], spacing=0),
            on_change=self._on_time_change,
        )

        self.control = ft.Container(
            width=UI.filter_panel_width,
            padding=16,
            content=ft.Column(
                [
                    ft.Text("Filters", size=18, weight=ft.FontWeight.W_600),
                    ft.Divider(height=1),
                    ft.Text("Category", weight=ft.FontWeight.W_500),
                    *category_boxes,
                    ft.Divider(height=1),
                    ft.Text("Assigned to", weight=ft.FontWeight.W_500),
                    *user_boxes,
                    ft.Divider(height=1),
                    ft.Text("Time range", weight=ft.FontWeight.W_500),
                    time_group,
                ],
                spacing=6,
                scroll=ft.ScrollMode.AUTO,
                expand=True,
            ),
        )

    def snapshot(self) -> FilterState:
        return FilterState(
            categories=frozenset(self._categories),
            users=frozenset(self._users),
            time_window=self._time_window,
        )

    def _toggle(self, target: Set[str], value: str, checked: bool):
        if checked:
            target.add(value)
        else:
            target.discard(value)
        self._changed()

    def _on_time_change(self, e: ft.ControlEvent):
        self._time_window = e.control.value or "all"
        self._changed()

    def _changed(self):
        if self.on_change is not None:
            self.on_change()
