"""Utility modules for the chat translator.

This package provides logging setup, small string helpers, file path helpers and the
periodic task runner used for cache maintenance.
"""

from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils
from utils.periodic_task import PeriodicTask
from utils.string_utils import StringUtils

__all__: list[str] = ["FileUtils", "LoggerUtils", "PeriodicTask", "StringUtils"]
