# ui/app_shell.py
from __future__ import annotations

from typing import Optional, Sequence

import flet as ft

from core.log import get_logger
from core.settings import UI
from models.user import User
from services.task_repository import TaskRepository
from services.tasks import TaskService
from services.users import DEFAULT_USERS

from .filter_panel import FilterPanel
from .pages.calendar import CalendarPage

logger = get_logger("ui.shell")


class AppShell:
    def __init__(
        self,
        page: ft.Page,
        *,
        repository: Optional[TaskRepository] = None,
        users: Sequence[User] = DEFAULT_USERS,
    ):
        self.page = page
        self.page.title = UI.app_title
        self.page.horizontal_alignment = ft.CrossAxisAlignment.STRETCH
        self.page.vertical_alignment = ft.MainAxisAlignment.START

        self.users = list(users)
        self.repository = repository or TaskRepository(users=self.users)
        self.tasks = TaskService(self.repository.load())
        if self.repository.last_dropped:
            logger.warning("%d stored task(s) could not be loaded", self.repository.last_dropped)
        for event in TaskService.EVENTS:
            self.tasks.subscribe(event, self._persist)

        self.filter_panel = FilterPanel(self.users)
        self.calendar = CalendarPage(self)
        self.filter_panel.on_change = self.calendar.load

        self.root = ft.Row(
            controls=[
                self.filter_panel.control,
                ft.VerticalDivider(width=1),
                self.calendar.control,
            ],
            expand=True,
            spacing=0,
        )

    def _persist(self, task_id: str) -> None:
        self.repository.save(self.tasks.list())

    def mount(self):
        self.page.add(self.root)
        self.page.on_resized = lambda e: self.calendar.load()
        self.calendar.load()
        if self.repository.last_dropped:
            self.toast(f"{self.repository.last_dropped} saved task(s) could not be read")

    def toast(self, text: str):
        self.page.open(ft.SnackBar(ft.Text(text)))
