"""Main Textual application with screen management."""

from typing import TYPE_CHECKING, ClassVar, override

from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Footer, Header

import structlog

from slm import __version__
from slm.services.settings import SettingsStore

if TYPE_CHECKING:
    from slm.main import ApplicationContext


log = structlog.stdlib.get_logger()


class LibraryManagerApp(App[None]):
    """Graphical front end of the Switch Library Manager.

    Services come from the ``ApplicationContext`` built by the bootstrap;
    screens reach them through ``library_app``.
    """

    CSS_PATH = "app.tcss"

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("q", "quit", "Quit", show=True, priority=True),
        Binding("escape", "go_back", "Back", show=True),
        Binding("?", "show_help", "Help", show=True),
    ]

    _context: "ApplicationContext | None"
    _navigation_stack: list[str]

    def __init__(self, context: "ApplicationContext | None" = None) -> None:
        super().__init__()
        self.title = "Switch Library Manager"  # type: ignore[assignment]
        self.sub_title = f"v{__version__}"  # type: ignore[assignment]
        self._context = context
        self._navigation_stack = []

        log.info("LibraryManagerApp initialized")

    @property
    def context(self) -> "ApplicationContext | None":
        """Get the application context."""
        return self._context

    @property
    def store(self) -> SettingsStore | None:
        """Get the settings store, if the app was started with a context."""
        return self._context.store if self._context is not None else None

    @property
    def navigation_stack(self) -> list[str]:
        """Get the current navigation stack."""
        return self._navigation_stack.copy()

    @override
    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    async def on_mount(self) -> None:
        await self.push_screen_with_tracking("main_menu")

    async def push_screen_with_tracking(self, screen_name: str) -> None:
        """Push a screen and track it in the navigation stack.

        Args:
            screen_name: Name of the screen to push
        """
        from slm.ui.screens import get_screen_by_name

        screen = get_screen_by_name(screen_name)
        if screen:
            self._navigation_stack.append(screen_name)
            await self.push_screen(screen)
            log.info("Screen pushed", screen=screen_name, stack_depth=len(self._navigation_stack))
        else:
            log.warning("Unknown screen requested", screen=screen_name)

    async def action_go_back(self) -> None:
        """Navigate back to the previous screen."""
        if len(self._navigation_stack) > 1:
            current = self._navigation_stack.pop()
            log.info("Navigating back", from_screen=current, stack_depth=len(self._navigation_stack))
            _ = self.pop_screen()
        else:
            log.debug("Already at root screen, cannot go back")

    async def action_show_help(self) -> None:
        self.notify("Press 'q' to quit, 'escape' to go back")
