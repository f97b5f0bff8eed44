"""Settings screen: edit settings.json in place."""

import json
from typing import ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import Button, Static, TextArea

import structlog

from slm.services.errors import AppError, ConfigCorruptError
from slm.services.settings import SettingsStore, settings_from_dict

from .base import BaseScreen

log = structlog.stdlib.get_logger()


class SettingsScreen(BaseScreen):
    """Shows the raw settings document and saves edits through the store.

    Saved documents go through the same repair step as a load, so an
    emptied catalog URL comes back as its default.
    """

    SCREEN_TITLE: ClassVar[str] = "Settings"
    SCREEN_NAME: ClassVar[str] = "settings"

    CSS: ClassVar[str] = """
    #settings-container {
        height: 100%;
        padding: 1 2;
    }

    #settings-editor {
        height: 1fr;
    }

    #button-row {
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #button-row Button {
        margin: 0 1;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("ctrl+s", "save_settings", "Save", show=True),
        Binding("ctrl+r", "reload_settings", "Reload", show=True),
    ]

    @override
    def compose(self) -> ComposeResult:
        with Container(id="settings-container"):
            yield self.create_title_widget()
            yield Static("", id="settings-path", classes="hint")
            yield TextArea("", id="settings-editor")
            with Horizontal(id="button-row"):
                yield Button("Save", id="btn-save", variant="primary")
                yield Button("Reload", id="btn-reload", variant="default")
                yield Button("Cancel", id="btn-cancel", variant="error")

    @override
    async def on_mount(self) -> None:
        await super().on_mount()
        self._load_text()

    def _get_store(self) -> SettingsStore | None:
        try:
            return self.library_app.store
        except RuntimeError:
            return None

    def _load_text(self) -> None:
        store = self._get_store()
        if store is None:
            self.notify_warning("Settings are not available")
            return
        self.query_one("#settings-path", Static).update(str(store.settings_path))
        self.query_one("#settings-editor", TextArea).load_text(store.load_as_raw_text())

    def _save_text(self) -> None:
        store = self._get_store()
        if store is None:
            self.notify_warning("Settings are not available")
            return

        text = self.query_one("#settings-editor", TextArea).text
        try:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ConfigCorruptError("Settings must be a JSON object.")
            store.save(store.verify(settings_from_dict(data)))
        except (json.JSONDecodeError, AppError) as e:
            _ = self.handle_exception(e, "save_settings", {"path": str(store.settings_path)})
            return

        self._load_text()
        self.notify_success("Settings saved, some changes apply on next start")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "btn-save":
            self._save_text()
        elif button_id == "btn-reload":
            self._load_text()
        elif button_id == "btn-cancel":
            await self.action_go_back()

    async def action_save_settings(self) -> None:
        self._save_text()

    async def action_reload_settings(self) -> None:
        self._load_text()
