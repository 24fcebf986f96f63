# ui/task_dialog.py
from __future__ import annotations

from typing import Callable, Optional, Sequence

import flet as ft

from core.categories import CATEGORIES, COLORS, color_hex
from core.priorities import priority_options
from core.settings import UI
from models.task import TaskDraft
from models.user import User
from services.users import user_names


class TaskDialog:
    """Create/edit form. Collects the task fields and hands back a ``TaskDraft``."""

    def __init__(
        self,
        page: ft.Page,
        users: Sequence[User],
        *,
        draft: TaskDraft,
        on_save: Callable[[TaskDraft], None],
        on_delete: Optional[Callable[[], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
        title: str = "Task",
        subtitle: str = "",
    ):
        self.page = page
        self.on_save = on_save
        self.on_delete = on_delete
        self.on_close = on_close

        field_w = UI.dialog_width - 40
        self.name_tf = ft.TextField(label="Name", value=draft.name, width=field_w, autofocus=True)
        self.category_dd = ft.Dropdown(
            label="Category",
            width=field_w,
            value=draft.category,
            options=[ft.dropdown.Option(c) for c in CATEGORIES],
        )
        names = user_names(users)
        if draft.assigned_user and draft.assigned_user not in names:
            # assignee was removed from the directory; keep it selectable
            names.append(draft.assigned_user)
        self.user_dd = ft.Dropdown(
            label="Assigned to",
            width=field_w,
            value=draft.assigned_user or None,
            options=[ft.dropdown.Option(n) for n in names],
        )
        self.priority_dd = ft.Dropdown(
            label="Priority",
            width=field_w,
            value=draft.priority,
            options=[ft.dropdown.Option(key, label) for key, label in priority_options().items()],
        )
        self.color_dd = ft.Dropdown(
            label="Color",
            width=field_w,
            value=draft.color,
            options=[
                ft.dropdown.Option(
                    c,
                    content=ft.Row(
                        [ft.Container(width=12, height=12, border_radius=6, bgcolor=color_hex(c)), ft.Text(c)],
                        spacing=8,
                    ),
                )
                for c in COLORS
            ],
        )

        actions = [
            ft.TextButton("Cancel", on_click=lambda e: self.close()),
            ft.FilledButton("Save", icon=ft.Icons.SAVE, on_click=self._on_save),
        ]
        if on_delete is not None:
            actions.insert(0, ft.TextButton("Delete", icon=ft.Icons.DELETE_OUTLINE, on_click=self._on_delete))

        self.dialog = ft.AlertDialog(
            modal=False,
            title=ft.Column([ft.Text(title), ft.Text(subtitle, size=12, color=UI.theme.text_subtle)], tight=True, spacing=2),
            content=ft.Container(
                width=UI.dialog_width,
                content=ft.Column(
                    [self.name_tf, self.category_dd, self.user_dd, self.priority_dd, self.color_dd],
                    spacing=12,
                    tight=True,
                ),
            ),
            actions=actions,
            actions_alignment=ft.MainAxisAlignment.END,
            on_dismiss=lambda e: self._closed(),
        )

    def open(self):
        self.page.open(self.dialog)

    def close(self):
        self.page.close(self.dialog)

    def _closed(self):
        if self.on_close is not None:
            self.on_close()

    def _on_save(self, e=None):
        name = (self.name_tf.value or "").strip()
        if not name:
            self.name_tf.error_text = "Enter a name"
            self.page.update()
            return
        draft = TaskDraft(
            name=name,
            category=self.category_dd.value,
            assigned_user=self.user_dd.value or "",
            priority=self.priority_dd.value,
            color=self.color_dd.value,
        )
        self.close()
        self.on_save(draft)

    def _on_delete(self, e=None):
        self.close()
        if self.on_delete is not None:
            self.on_delete()
