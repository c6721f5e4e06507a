from __future__ import annotations

import logging
import sys
import warnings
from logging import Formatter, NullHandler, StreamHandler
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, ClassVar, Final, Literal, Self, TextIO

if TYPE_CHECKING:
    from pathlib import Path

__all__: list[str] = ["LoggerUtils"]

type LevelType = Literal[
    "NOTSET",
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
]

_LOG_FILE_SIZE: Final[int] = 2 * 1024 * 1024  # 2MB
_LOG_BACKUP_COUNT: Final[int] = 2  # Number of backup files to keep

DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
DEFAULT_NAMESPACE: Final[str] = "ChatTranslator"


class LoggerUtils:
    """Singleton that configures the translator's namespaced logger.

    Console output is kept to warnings and above; the optional rotating log file records
    everything down to DEBUG. Module loggers are children of the namespace and are obtained
    with `get_logger(__name__)`.

    Attributes:
        _LOGGER_NAMESPACE (str): The namespace for the logger.
        _configured (bool): Indicates whether the logger has been configured.
        _instance (LoggerUtils | None): The singleton instance of LoggerUtils.
    """

    _LOGGER_NAMESPACE: ClassVar[str] = DEFAULT_NAMESPACE
    _configured: ClassVar[bool] = False  # reconfiguration-proof
    _instance: ClassVar[Self | None] = None  # Singleton instance

    def __new__(cls, *args, **kwargs) -> Self:
        """Create or reuse the singleton instance.

        Returns:
            Self: The singleton instance of LoggerUtils.
        """
        _ = args, kwargs
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, filename: str | Path = "", *, use_null_console: bool = False) -> None:
        """Configure console and file logging once per process.

        Args:
            filename (str | Path): Absolute path of the log file. If empty, logging to a file is not performed.
            use_null_console (bool): If True, uses NullHandler instead of StreamHandler for console output.
        """
        if LoggerUtils._configured:
            return

        self.root_logger: logging.Logger = logging.getLogger(self._LOGGER_NAMESPACE)
        self._use_null_console: bool = bool(use_null_console) or sys.stderr is None
        filename = str(filename)
        # must be set to a lower level than the level set in the handler
        # otherwise, logs will not be output
        self.root_logger.setLevel(DEFAULT_LOG_LEVEL)

        self._console_logging()
        if filename.strip():
            self._file_logging(filename)
        else:
            self.root_logger.debug("Log file name is empty. Logging to the file is not performed.")

        warnings.showwarning = self.warning_to_log
        LoggerUtils._configured = True

    def warning_to_log(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        """Redirect `warnings` output to the logger. Matches the `warnings.showwarning` signature."""
        _ = file, line
        self.root_logger.warning("%s:%d: %s: %s", filename, lineno, category.__name__, message)

    def _console_logging(self) -> None:
        """Configure log output to console at WARNING level with a bare message format."""
        if self._use_null_console:
            if not self._has_handler(NullHandler):
                self.root_logger.addHandler(NullHandler())
            return

        if self._has_handler(StreamHandler):
            self.root_logger.warning("Console logging is already configured.")
            return

        console_handler: StreamHandler[TextIO] = StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(Formatter("%(message)s"))
        self.root_logger.addHandler(console_handler)

    def _file_logging(self, filename: str) -> None:
        """Configure UTF-8 rotating log output to file.

        Args:
            filename (str): Absolute path to the log file.
        """
        if self._has_handler(RotatingFileHandler):
            self.root_logger.warning("File logging is already configured.")
            return

        try:
            file_handler = RotatingFileHandler(
                filename=filename,
                maxBytes=_LOG_FILE_SIZE,
                backupCount=_LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        except (FileNotFoundError, PermissionError):
            self.root_logger.error("Incorrect log file name: %s\nLogging to the file is not performed.", filename)
            return

        file_handler.setLevel(logging.DEBUG)
        file_formatter = Formatter(
            "%(asctime)s %(levelname)-8s %(process)5d %(lineno)4d %(name)-40s\t%(funcName)s\t%(message)s"
        )
        file_handler.setFormatter(file_formatter)
        self.root_logger.addHandler(file_handler)

    def _has_handler(self, handler_type: type) -> bool:
        return any(isinstance(h, handler_type) for h in self.root_logger.handlers)

    def set_level(self, level: LevelType | str) -> None:
        """Set the logging level for the namespace logger.

        If an unknown level is specified, the logging level is set to 'INFO' and a warning is logged.

        Args:
            level (LevelType | str): The logging level to set.
        """
        level_map: dict[str, int] = logging.getLevelNamesMapping()
        try:
            self.root_logger.setLevel(level_map[level.upper()])
        except KeyError:
            self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
            self.root_logger.warning("Unknown logging level '%s' specified.\nLogging level set to 'INFO'.", level)

    @staticmethod
    def get_logger(name: str | None = None) -> logging.Logger:
        """Get a logger below the translator namespace.

        Args:
            name (str | None): The logger name. If None, the namespace logger itself is returned.

        Returns:
            logging.Logger: The logger instance.
        """
        full_name: str | None
        if LoggerUtils._LOGGER_NAMESPACE:
            full_name = f"{LoggerUtils._LOGGER_NAMESPACE}.{name}" if name else LoggerUtils._LOGGER_NAMESPACE
        else:
            full_name = name or None
        return logging.getLogger(full_name)
