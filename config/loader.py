"""Configuration file loader and validator.

Handles reading, formatting, and validating settings from the INI configuration file.
Raises exceptions for any issues encountered during loading.
"""

from __future__ import annotations

import ast
import configparser
from configparser import ConfigParser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from core.trans.interface import TransInterface
from models.config_models import Config
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable
    from dataclasses import Field as DataclassField
else:
    from dataclasses import Field as DataclassField

__all__: list[str] = [
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

LOG_LEVELS: list[str] = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigLoaderError(Exception):
    """An error occurred while processing the configuration file."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The specified configuration file does not exist."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file is not formatted correctly."""


class ConfigValueError(ConfigFormatError):
    """The configuration file contains an invalid value."""


class ConfigTypeError(ConfigFormatError):
    """The configuration file contains an invalid type."""


class ConfigLoader:
    """Handles loading and validation of configuration settings.

    This class reads the configuration file, applies formatting rules, and validates settings.
    It raises exceptions for any issues encountered during the loading process.

    Args:
        config_filename (str): INI file name to load.
        script_name (str): Executing script name, used in error messaging.
        debug (bool): Force debug mode regardless of the file setting.

    Raises:
        ConfigFileNotFoundError: If the configuration file does not exist.
        ConfigFormatError: If the file cannot be parsed or contains invalid values/types.
    """

    def __init__(
        self,
        *,
        config_filename: str,
        script_name: str,
        **args,
    ) -> None:
        config_path = Path(config_filename)
        msg: str
        if not config_path.exists():
            msg = (
                f"Configuration file '{config_filename}' not found. "
                f"Please create '{config_filename}' in the same directory as '{script_name}'."
            )
            raise ConfigFileNotFoundError(msg)

        parser: ConfigParser = ConfigParser()

        try:
            parser.read(config_filename, encoding="utf-8")
        except configparser.Error as err:
            msg = f"Failed to parse configuration file '{config_filename}': {err}"
            raise ConfigFormatError(msg) from None

        self.config = Config()
        self.config.GENERAL.SCRIPT_NAME = script_name
        self._convert_settings(parser)
        # Apply command-line argument overrides
        if args.get("debug", False):
            self.config.GENERAL.DEBUG = True
        self._validate_settings()

    def _convert_settings(self, parser: ConfigParser) -> None:
        """Convert configuration settings from the parser to the Config object.

        Args:
            parser (ConfigParser): Parsed INI data.

        Raises:
            ConfigFormatError: If a value cannot be parsed or coerced to the expected type.
        """
        formatter = _ConfigFormatter(self.config, parser)
        for section in fields(self.config):
            if not parser.has_section(section.name):
                logger.debug("Section '%s' is not defined, using defaults", section.name)
                continue
            self._convert_section_field(parser, formatter, section)

    def _convert_section_field(
        self, parser: ConfigParser, formatter: _ConfigFormatter, section: DataclassField[Any]
    ) -> None:
        """Convert all fields in a configuration section.

        Keys missing from the INI file keep their dataclass defaults.

        Args:
            parser (ConfigParser): Parsed INI data.
            formatter (_ConfigFormatter): Formatter used to coerce string values to typed values.
            section (Field[Any]): Target configuration section dataclass field.

        Raises:
            ConfigFormatError: If a value fails to format correctly.
        """
        for key in fields(getattr(self.config, section.name)):
            if key.name == "SCRIPT_NAME":
                continue
            try:
                parser[section.name][key.name]
            except KeyError:
                logger.debug("Skipping undefined setting: '%s.%s'", section.name, key.name)
                continue

            formatted_value = formatter.apply_format(section, key)
            setattr(getattr(self.config, section.name), key.name, formatted_value)

    def _validate_settings(self) -> None:
        """Validate value ranges and cross-field consistency.

        Raises:
            ConfigFormatError: If validation fails for any setting.
        """
        for section_name in ("DETECTION_CACHE", "TRANSLATION_CACHE"):
            self._validate_positive(section_name, "MAX_SIZE")
            self._validate_positive(section_name, "TTL_SECONDS")
            self._validate_positive(section_name, "SWEEP_INTERVAL")
        self._validate_positive("TRANSLATION", "REQUEST_TIMEOUT")
        self._validate_positive("STATISTICS", "HISTORY_LIMIT")
        self._validate_positive("STATISTICS", "LOG_INTERVAL")
        self._validate_non_negative("RETRY", "MAX_RETRIES")
        self._validate_non_negative("RETRY", "BASE_DELAY")
        self._validate_confidence_threshold()
        self._validate_languages()
        self._inspect_defined_item("TRANSLATION", "ENGINE", list(TransInterface.registered))
        self._inspect_defined_item("GENERAL", "LOG_LEVEL", LOG_LEVELS)

    def _get_value(self, section_name: str, key_name: str) -> Any:
        return getattr(getattr(self.config, section_name), key_name)

    def _validate_positive(self, section_name: str, key_name: str) -> None:
        value: int | float = self._get_value(section_name, key_name)
        if value <= 0:
            msg: str = f"'{section_name}.{key_name}' must be greater than 0: {value}"
            raise ConfigValueError(msg)

    def _validate_non_negative(self, section_name: str, key_name: str) -> None:
        value: int | float = self._get_value(section_name, key_name)
        if value < 0:
            msg: str = f"'{section_name}.{key_name}' must not be negative: {value}"
            raise ConfigValueError(msg)

    def _validate_confidence_threshold(self) -> None:
        value: float = self.config.DETECTION_CACHE.CONFIDENCE_THRESHOLD
        if not 0.0 <= value <= 1.0:
            msg: str = f"'DETECTION_CACHE.CONFIDENCE_THRESHOLD' must be between 0 and 1: {value}"
            raise ConfigValueError(msg)

    def _validate_languages(self) -> None:
        """Check the supported language list and that the default target is part of it.

        Raises:
            ConfigTypeError: If SUPPORTED_LANGUAGES is not a list of strings.
            ConfigValueError: If the list is empty or does not contain the default target language.
        """
        languages: Any = self.config.TRANSLATION.SUPPORTED_LANGUAGES
        if not isinstance(languages, list) or not all(isinstance(lang, str) for lang in languages):
            msg: str = f"'TRANSLATION.SUPPORTED_LANGUAGES' must be a list of language codes: {languages!r}"
            raise ConfigTypeError(msg)
        if not languages:
            msg = "'TRANSLATION.SUPPORTED_LANGUAGES' must not be empty"
            raise ConfigValueError(msg)

        default_target: str = self.config.TRANSLATION.DEFAULT_TARGET_LANGUAGE
        if default_target not in languages:
            msg = f"'TRANSLATION.DEFAULT_TARGET_LANGUAGE' ({default_target}) is not in SUPPORTED_LANGUAGES"
            raise ConfigValueError(msg)

    def _inspect_defined_item(self, section_name: str, key_name: str, defined_list: list[str]) -> None:
        """Verify that configuration values match allowed options.

        Logs warnings for unrecognized values but does not raise exceptions.

        Args:
            section_name (str): Section name in the config model.
            key_name (str): Field name to inspect.
            defined_list (list[str]): Allowed values.

        Raises:
            ConfigTypeError: If the configured value is neither list nor str.
        """
        value: str | list[str] = self._get_value(section_name, key_name)
        field_name: str = f"{section_name}.{key_name}"

        if isinstance(value, (list, str)):
            values: list[str] = value if isinstance(value, list) else [value]
            for val in values:
                if val not in defined_list:
                    logger.warning("Unknown value '%s' is set for '%s'", val, field_name)
        else:
            msg: str = f"Unsupported type used for '{field_name}': {type(value)}"
            raise ConfigTypeError(msg)


class _ConfigFormatter:
    """Converts INI string values to typed Python objects (bool, int, float, str, list)."""

    def __init__(self, config: Config, parser: ConfigParser) -> None:
        self.config: Config = config
        self.parser: ConfigParser = parser

    def apply_format(self, section: DataclassField[Any], key: DataclassField[Any]) -> Any:
        """Convert INI value to the expected Python type based on the Config field type.

        Args:
            section (DataclassField[Any]): Configuration section field containing the key.
            key (DataclassField[Any]): Target field within the section.

        Returns:
            Any: Parsed value coerced to the type declared in the config dataclass.

        Raises:
            ConfigValueError: If a value cannot be coerced to the expected type.
            ConfigFormatError: If literal evaluation fails due to invalid syntax.
            ConfigTypeError: If the evaluated literal does not match the expected type.
        """
        formatters: dict[
            type[bool | int | float], Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float]
        ] = {
            bool: self.parse_as_boolean,
            int: self.parse_as_integer,
            float: self.parse_as_float,
        }

        default: Any = getattr(getattr(self.config, section.name), key.name)
        formatter: Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float] | None = formatters.get(
            type(default)
        )
        if formatter:
            try:
                return formatter(section, key)
            except ValueError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigValueError(msg) from err
            except TypeError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigTypeError(msg) from err

        value_str: str = self.parser[section.name][key.name]
        try:
            value: Any = ast.literal_eval(value_str)
        except ValueError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigValueError(msg) from err
        except SyntaxError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigFormatError(msg) from err

        if isinstance(default, list) and isinstance(value, tuple):
            value = list(value)
        if not isinstance(value, type(default)):
            msg = f"Expected {type(default).__name__} for {section.name}.{key.name}, got {type(value).__name__}"
            raise ConfigTypeError(msg)
        return value

    def parse_as_float(self, section: DataclassField[Any], key: DataclassField[Any]) -> float:
        """Convert INI string to float."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"', "%"):
            value = value.removeprefix(char).removesuffix(char)
        return float(value)

    def parse_as_integer(self, section: DataclassField[Any], key: DataclassField[Any]) -> int:
        """Convert INI string to integer."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"', "%"):
            value = value.removeprefix(char).removesuffix(char)
        return int(float(value))

    def parse_as_boolean(self, section: DataclassField[Any], key: DataclassField[Any]) -> bool:
        """Convert INI string to boolean."""
        return self.parser.getboolean(section.name, key.name)
