"""Main entry point for the Switch Library Manager.

This module provides the application bootstrap:
- Resolving the working directory from the executable location
- Logging initialization
- Settings loading and front-end selection
"""

import argparse
import asyncio
import sys
from enum import Enum
from importlib import resources
from pathlib import Path
from typing import Any

import structlog

from slm import __version__
from slm.services.catalog import CatalogService
from slm.services.errors import PlatformError
from slm.services.freshness import FreshnessChecker
from slm.services.http_client import HttpClientService
from slm.services.logging import LoggingService
from slm.services.settings import SettingsStore


log = structlog.stdlib.get_logger()

GUI_STYLESHEET = "app.tcss"


class FrontEnd(Enum):
    """The two mutually exclusive user interfaces."""
    CONSOLE = "console"
    GUI = "gui"


class ApplicationContext:
    """Container for the services handed to the selected front end.

    Network services are created lazily so a front end that never goes
    online never opens a connection pool.
    """

    def __init__(
        self,
        working_directory: Path,
        store: SettingsStore,
        logger: Any = None,
        http_timeout: float = 10.0,
    ) -> None:
        """Initialize the application context.

        Args:
            working_directory: Home directory for settings, logs and caches
            store: Settings store bound to the working directory
            logger: Logger handed to the front end
            http_timeout: Timeout in seconds for every remote request
        """
        self.working_directory: Path = working_directory
        self.store: SettingsStore = store
        self.log = logger or log
        self._http_timeout = http_timeout

        self._http_client: HttpClientService | None = None
        self._freshness_checker: FreshnessChecker | None = None
        self._catalog_service: CatalogService | None = None

    @property
    def http_client(self) -> HttpClientService:
        """Get the HTTP client service (lazy initialization)."""
        if self._http_client is None:
            self._http_client = HttpClientService(timeout=self._http_timeout)
        return self._http_client

    @property
    def freshness_checker(self) -> FreshnessChecker:
        """Get the release freshness checker (lazy initialization)."""
        if self._freshness_checker is None:
            self._freshness_checker = FreshnessChecker(self.http_client)
        return self._freshness_checker

    @property
    def catalog_service(self) -> CatalogService:
        """Get the catalog download service (lazy initialization)."""
        if self._catalog_service is None:
            self._catalog_service = CatalogService(self.store, self.http_client)
        return self._catalog_service

    async def cleanup(self) -> None:
        """Close network connections."""
        if self._http_client is not None:
            await self._http_client.close()
            self._http_client = None
        self.log.info("Application cleanup complete")


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(self, mode: str | None, working_dir: Path | None) -> None:
        # None means the flag was not given at all
        self.mode: str | None = mode
        self.working_dir: Path | None = working_dir

    @property
    def mode_is_set(self) -> bool:
        return self.mode is not None


def parse_arguments(argv: list[str] | None = None) -> ParsedArgs:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="slm",
        description="Manage a local Nintendo Switch library against the public title database",
    )

    _ = parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    _ = parser.add_argument(
        "--mode",
        choices=[front_end.value for front_end in FrontEnd],
        default=None,
        help="Front end for this run; overrides the 'gui' setting without saving it",
    )

    _ = parser.add_argument(
        "--working-dir",
        type=Path,
        default=None,
        help="Directory for settings.json, slm.log and catalogs (default: next to the executable)",
    )

    ns = parser.parse_args(argv)
    return ParsedArgs(mode=ns.mode, working_dir=ns.working_dir)


def resolve_executable_path() -> Path:
    """Return the path of the running executable.

    Frozen builds report their own binary; otherwise the launching script
    stands in for it.

    Raises:
        PlatformError: If the path cannot be determined
    """
    candidate = sys.executable if getattr(sys, "frozen", False) else sys.argv[0]
    if not candidate:
        raise PlatformError(
            "failed to get executable directory, please ensure app has sufficient permissions. aborting"
        )
    try:
        return Path(candidate).resolve()
    except (OSError, RuntimeError) as e:
        raise PlatformError(
            "failed to get executable directory, please ensure app has sufficient permissions. aborting",
            original_error=e,
        ) from e


def resolve_working_directory(executable: Path, platform: str = sys.platform) -> Path:
    """Directory the application uses for its settings, log and caches.

    On macOS an executable inside ``Name.app/Contents/MacOS`` uses the
    folder that contains the bundle.
    """
    directory = Path(executable).parent
    if platform == "darwin":
        parts = directory.parts
        for index, part in enumerate(parts):
            if part.endswith(".app"):
                return Path(*parts[:index])
    return directory


def gui_assets_available() -> bool:
    """Check that the stylesheet shipped with the graphical front end is readable."""
    try:
        stylesheet = resources.files("slm.ui").joinpath(GUI_STYLESHEET)
        return bool(stylesheet.read_text(encoding="utf-8").strip())
    except (OSError, UnicodeDecodeError) as e:
        log.warning("GUI assets unavailable", error=str(e))
        return False


def resolve_front_end(prefer_gui: bool, mode: str | None, assets_available: bool = True) -> FrontEnd:
    """Pick the front end for this run.

    Args:
        prefer_gui: The persisted ``gui`` setting
        mode: The ``--mode`` flag, or None when not given
        assets_available: Whether the graphical front end can start at all

    Returns:
        The front end to start
    """
    if not assets_available:
        return FrontEnd.CONSOLE
    if mode == FrontEnd.CONSOLE.value:
        return FrontEnd.CONSOLE
    if mode == FrontEnd.GUI.value:
        return FrontEnd.GUI
    return FrontEnd.GUI if prefer_gui else FrontEnd.CONSOLE


async def run_front_end(front_end: FrontEnd, context: ApplicationContext) -> int:
    """Run the selected front end until it exits.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        if front_end is FrontEnd.GUI:
            from slm.ui.app import LibraryManagerApp

            app = LibraryManagerApp(context)
            await app.run_async()
            return app.return_code or 0

        from slm.console import ConsoleFrontEnd

        return await ConsoleFrontEnd(context).start()
    finally:
        await context.cleanup()


def bootstrap(args: ParsedArgs, executable: Path, working_directory: Path, logging_service: LoggingService) -> int:
    """Load settings, choose a front end and run it.

    Returns:
        Exit code of the front end
    """
    logger = logging_service.get_logger("slm")

    store = SettingsStore(working_directory, logger=logger)
    settings = store.load()
    logging_service.set_debug(settings.debug)

    logger.info("[SLM starts]", version=__version__)
    logger.info("Executable", path=str(executable))
    logger.info("Working directory", path=str(working_directory))
    logger.info(
        "Command line flags",
        mode_is_set=args.mode_is_set,
        mode=args.mode,
        working_dir=str(args.working_dir) if args.working_dir else None,
    )

    assets_available = gui_assets_available()
    front_end = resolve_front_end(settings.gui, args.mode, assets_available)
    if args.mode_is_set and args.mode != front_end.value:
        logger.warning("GUI requested but its assets are missing, starting the console")
    logger.info("Starting front end", front_end=front_end.value, gui_setting=settings.gui)

    context = ApplicationContext(working_directory, store, logger=logger)
    try:
        return asyncio.run(run_front_end(front_end, context))
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        return 130
    except Exception as e:
        logger.error("Unhandled exception", error=str(e), exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    args = parse_arguments(argv)

    try:
        executable = resolve_executable_path()
    except PlatformError as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)

    working_directory = args.working_dir or resolve_working_directory(executable)

    logging_service = LoggingService(working_directory)
    try:
        working_directory.mkdir(parents=True, exist_ok=True)
        logging_service.configure()
    except OSError as e:
        print(f"failed to create logger - {e}", file=sys.stderr)
        sys.exit(1)

    with logging_service:
        exit_code = bootstrap(args, executable, working_directory, logging_service)
        log.info("Application exiting", exit_code=exit_code)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
