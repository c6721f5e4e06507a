"""Translate text from the command line.

Loads translator.ini, builds the translation service and translates the given text.
The API key is read from the GOOGLE_V2_API_OAUTH environment variable.

Console output is the translation result; log messages go to the file set in
GENERAL.LOG_FILE, with warnings and errors also shown on stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final, NoReturn

from config.loader import ConfigLoader, ConfigLoaderError
from core.shared_data import SharedData
from core.trans.interface import TranslateExceptionError
from utils.file_utils import FileUtils, FileUtilsError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from models.cache_models import CacheStatistics
    from models.config_models import Config
    from models.statistics_models import OperationSnapshot
    from models.translation_models import DetectionResult, TranslationResult

CFG_FILE: Final[str] = "translator.ini"


def check_python_version() -> None:
    """Check if Python version is 3.12 or later.

    Raises:
        RuntimeError: If Python version is below 3.12.
    """
    if sys.version_info < (3, 12):
        msg = "Python 3.12 or later is required"
        raise RuntimeError(msg)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(2)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed arguments.
    """
    parser = _ArgumentParser(
        description="Detect the language of a text and translate it",
        epilog='Example: python translate_text.py --target ja "Hello, world"',
    )
    parser.add_argument("text", help="Text to translate")
    parser.add_argument("--target", dest="target", metavar="LANG", help="Target language code")
    parser.add_argument("--source", dest="source", metavar="LANG", help="Source language code (detected if omitted)")
    parser.add_argument("--detect-only", dest="detect_only", action="store_true", help="Only detect the language")
    parser.add_argument("--stats", dest="stats", action="store_true", help="Print cache and request statistics")
    parser.add_argument("--config", dest="config", metavar="FILE", default=CFG_FILE, help="Configuration file")
    parser.add_argument("--debug", dest="debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    """Load the configuration file and apply CLI overrides.

    Raises:
        FileUtilsError: If the configuration path is not an existing .ini file.
        ConfigLoaderError: If the configuration file cannot be loaded.
    """
    config_path: Path = FileUtils.resolve_path(args.config)
    FileUtils.validate_file_path(config_path, ".ini")
    script_name: str = Path(sys.argv[0]).name
    return ConfigLoader(config_filename=str(config_path), script_name=script_name, debug=args.debug).config


def setup_logging(config: Config) -> None:
    log_file: str = str(FileUtils.resolve_path(config.GENERAL.LOG_FILE)) if config.GENERAL.LOG_FILE else ""
    logger_utils = LoggerUtils(log_file)
    logger_utils.set_level("DEBUG" if config.GENERAL.DEBUG else config.GENERAL.LOG_LEVEL)


def format_confidence(confidence: float | None) -> str:
    """Describe a detection confidence for display."""
    if confidence is None:
        return "n/a"
    if confidence >= 0.8:
        label = "high"
    elif confidence >= 0.6:
        label = "medium"
    else:
        label = "low"
    return f"{confidence * 100:.1f}% ({label})"


def print_detection(result: DetectionResult) -> None:
    print(f"Language: {result.language}")
    print(f"Confidence: {format_confidence(result.confidence)}")
    print(f"From cache: {result.from_cache}")


def print_translation(result: TranslationResult) -> None:
    print(result.translated_text)
    print("-" * 50)
    if result.is_translated:
        print(f"{result.source_language} -> {result.target_language}")
    else:
        print(f"{result.source_language}: already in the target language, not translated")
    print(f"Confidence: {format_confidence(result.confidence)}")
    print(f"Translation from cache: {result.from_cache}, language from cache: {result.language_from_cache}")


def print_statistics(shared: SharedData) -> None:
    print("-" * 50)
    cache_stats: dict[str, CacheStatistics] = shared.trans_manager.get_stats()
    for name, stats in cache_stats.items():
        print(f"Cache '{name}': {stats.size}/{stats.max_size} entries, TTL {stats.ttl:.0f} sec")

    figures: OperationSnapshot
    for name, figures in (
        ("Translation", shared.monitor.get_stats().translation),
        ("Language detection", shared.monitor.get_stats().language_detection),
    ):
        print(
            f"{name}: {figures.total_requests} requests, success rate {figures.success_rate:.1f}%, "
            f"average {figures.average_response_time:.1f} ms, cache hit rate {figures.cache_hit_rate:.1f}%"
        )


async def run(args: argparse.Namespace, config: Config) -> int:
    """Translate or detect once and print the result.

    Returns:
        int: Process exit status.
    """
    shared = SharedData(config)
    if not shared.trans_manager.is_available():
        print("\nError: GOOGLE_V2_API_OAUTH environment variable is not set.", file=sys.stderr)
        await shared.trans_manager.shutdown()
        return 1

    await shared.component_load()
    try:
        if args.detect_only:
            print_detection(await shared.trans_manager.detect_language(args.text))
        else:
            print_translation(
                await shared.trans_manager.translate_text(
                    args.text, target_language=args.target, source_language=args.source
                )
            )
    except TranslateExceptionError as err:
        print(f"\nError: {err}", file=sys.stderr)
        return 1
    finally:
        if args.stats:
            print_statistics(shared)
        await shared.component_teardown()
    return 0


def main(argv: list[str] | None = None) -> int:
    check_python_version()
    args: argparse.Namespace = parse_arguments(argv)
    try:
        config: Config = load_config(args)
    except (ConfigLoaderError, FileUtilsError) as err:
        print("\nError: Failed to load configuration file.", file=sys.stderr)
        print(f"Details: {err}", file=sys.stderr)
        return 1

    setup_logging(config)
    try:
        return asyncio.run(run(args, config))
    except TranslateExceptionError as err:
        print(f"\nError: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nCancelled by user.", file=sys.stderr)
        sys.exit(130)
