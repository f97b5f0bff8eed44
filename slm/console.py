"""Text front end: prints the library setup and checks for a newer release."""

import sys
from typing import TYPE_CHECKING, TextIO

from slm import __version__
from slm.models import CatalogFeed
from slm.services.errors import AppError, get_error_service, handle_error

if TYPE_CHECKING:
    from slm.main import ApplicationContext


class ConsoleFrontEnd:
    """Non-interactive console front end."""

    def __init__(self, context: "ApplicationContext", out: TextIO | None = None) -> None:
        self._context = context
        self._out = out or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self._out)

    async def start(self) -> int:
        """Print a summary of the setup and run one update check.

        Returns:
            Exit code; network failures are reported but do not fail the run
        """
        store = self._context.store
        settings = store.load()
        self._context.log.info("Console front end started")

        self._print(f"Switch Library Manager v{__version__}")
        self._print(f"Working directory: {self._context.working_directory}")
        self._print(f"Settings file: {store.settings_path}")

        folders = settings.library_folders
        if folders:
            self._print("Library folders:")
            for folder in folders:
                self._print(f"  {folder}")
        else:
            self._print("Library folders: none configured, edit settings.json to add one")

        for feed in CatalogFeed:
            state = "cached" if store.cache_path(feed).exists() else "not downloaded yet"
            self._print(f"{feed.value.capitalize()} catalog: {state} ({settings.url_for(feed)})")

        self._print("Checking for a newer release...")
        try:
            newer = await self._context.freshness_checker.check_for_newer_release()
        except AppError as e:
            user_error = handle_error(e, operation="check_for_updates", component="console")
            self._print(get_error_service().create_user_message(user_error))
            return 0

        if newer:
            self._print("A newer release is available.")
        else:
            self._print("You are running the latest version.")
        return 0
