"""Logging configuration for the Switch Library Manager."""

import logging
from pathlib import Path
from typing import Any

import structlog

LOG_FILENAME = "slm.log"


class LoggingService:
    """Configures structlog to write one log file per run.

    The log file lives in the working directory and is recreated at every
    start. Use the service as a context manager so the file is flushed and
    closed however the application exits.
    """

    def __init__(self, working_directory: Path, debug: bool = False) -> None:
        """Initialize the logging service.

        Args:
            working_directory: Directory that receives ``slm.log``
            debug: Log DEBUG events with call site details
        """
        self.log_path: Path = Path(working_directory) / LOG_FILENAME
        self.debug = debug
        self._handler: logging.FileHandler | None = None

    @property
    def is_configured(self) -> bool:
        return self._handler is not None

    def configure(self) -> None:
        """Delete the previous log file and start logging to a fresh one.

        Raises:
            OSError: If the log file cannot be removed or created
        """
        self.log_path.unlink(missing_ok=True)

        root_logger = logging.getLogger()
        root_logger.handlers.clear()

        handler = logging.FileHandler(self.log_path, mode="w", encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
        self._handler = handler

        self.set_debug(self.debug)

    def set_debug(self, debug: bool) -> None:
        """Switch between INFO and DEBUG verbosity."""
        self.debug = debug
        level = logging.DEBUG if debug else logging.INFO
        logging.getLogger().setLevel(level)
        if self._handler is not None:
            self._handler.setLevel(level)

        structlog.configure(
            processors=self._get_processors(),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            # set_debug may reconfigure after loggers were first used
            cache_logger_on_first_use=False,
        )

    def _get_processors(self) -> list[Any]:
        processors: list[Any] = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
        if self.debug:
            processors.append(
                structlog.processors.CallsiteParameterAdder(
                    {
                        structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO,
                        structlog.processors.CallsiteParameter.FUNC_NAME,
                    }
                )
            )
        processors.append(structlog.processors.JSONRenderer())
        return processors

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        """Get a configured logger instance."""
        return structlog.stdlib.get_logger(name)

    def shutdown(self) -> None:
        """Flush and close the log file."""
        if self._handler is None:
            return
        self._handler.flush()
        logging.getLogger().removeHandler(self._handler)
        self._handler.close()
        self._handler = None

    def __enter__(self) -> "LoggingService":
        if not self.is_configured:
            self.configure()
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.shutdown()


def setup_logging(working_directory: Path, debug: bool = False) -> LoggingService:
    """Set up application logging in ``working_directory``.

    Returns:
        Configured LoggingService instance
    """
    service = LoggingService(working_directory, debug=debug)
    service.configure()
    return service
