"""Main menu screen for the graphical front end."""

from typing import ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.widgets import Button, Static

import structlog

from slm.services.errors import AppError

from .base import BaseScreen

log = structlog.stdlib.get_logger()


class MainMenuScreen(BaseScreen):
    """Main menu: settings, release check, catalog refresh and quit."""

    SCREEN_TITLE: ClassVar[str] = "Main Menu"
    SCREEN_NAME: ClassVar[str] = "main_menu"

    CSS: ClassVar[str] = """
    MainMenuScreen {
        align: center middle;
    }

    #menu-container {
        width: 60;
        height: auto;
        padding: 2 4;
        border: solid $primary;
        background: $surface;
    }

    #menu-title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 2;
    }

    .menu-button {
        width: 100%;
        margin-bottom: 1;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("1", "open_settings", "Settings", show=False),
        Binding("2", "check_for_updates", "Check for updates", show=False),
        Binding("3", "refresh_catalogs", "Refresh catalogs", show=False),
    ]

    # (button id, label, action name)
    MENU_OPTIONS: ClassVar[list[tuple[str, str, str]]] = [
        ("settings", "1. Settings", "open_settings"),
        ("updates", "2. Check for updates", "check_for_updates"),
        ("catalogs", "3. Refresh catalogs", "refresh_catalogs"),
        ("quit", "Quit", "quit"),
    ]

    @override
    def compose(self) -> ComposeResult:
        with Container(id="menu-container"):
            yield Static("Switch Library Manager", id="menu-title")
            with Vertical(id="menu-buttons"):
                for option_id, label, _ in self.MENU_OPTIONS:
                    yield Button(label, id=f"btn-{option_id}", classes="menu-button")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if not button_id:
            return

        option = button_id.removeprefix("btn-")
        for opt_id, _, action in self.MENU_OPTIONS:
            if opt_id == option:
                log.info("Menu option selected", option=option)
                await self.run_action(action)
                return

        log.warning("Unknown menu option", button_id=button_id)

    async def action_open_settings(self) -> None:
        await self.library_app.push_screen_with_tracking("settings")

    async def action_check_for_updates(self) -> None:
        if self.library_app.context is None:
            self.notify_warning("Update check is not available")
            return
        _ = self.run_worker(self._check_for_updates(), name="update_check", exclusive=True)

    async def action_refresh_catalogs(self) -> None:
        if self.library_app.context is None:
            self.notify_warning("Catalog refresh is not available")
            return
        _ = self.run_worker(self._refresh_catalogs(), name="catalog_refresh", exclusive=True)

    async def action_quit(self) -> None:
        self.library_app.exit()

    async def _check_for_updates(self) -> None:
        context = self.library_app.context
        if context is None:
            return
        try:
            newer = await context.freshness_checker.check_for_newer_release()
        except AppError as e:
            _ = self.handle_exception(e, "check_for_updates")
            return
        if newer:
            self.notify_success("A newer release is available")
        else:
            self.notify_success("You are running the latest version")

    async def _refresh_catalogs(self) -> None:
        context = self.library_app.context
        if context is None:
            return
        try:
            await context.catalog_service.refresh_all()
        except AppError as e:
            _ = self.handle_exception(e, "refresh_catalogs")
            return
        self.notify_success("Catalogs are up to date")

    @override
    async def action_go_back(self) -> None:
        """From the main menu, back quits the application."""
        log.info("Quit requested from main menu")
        self.library_app.exit()
