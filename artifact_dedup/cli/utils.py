"""Shared CLI utilities.

Provides common functionality for all CLI commands.
"""

import functools
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

import structlog
import typer

from artifact_dedup.models.dedup import SimilarityConfig
from artifact_dedup.models.metadata import BaseMetadata
from artifact_dedup.observability.logging import configure_logging
from artifact_dedup.services.config_manager import ConfigManager, ConfigValidationError
from artifact_dedup.services.record_loader import load_records
from artifact_dedup.utils.exceptions import RecordLoadError

configure_logging(level="WARNING")
logger = structlog.get_logger()

F = TypeVar("F", bound=Callable)


def load_config(config_path: Optional[Path]) -> SimilarityConfig:
    """Load configuration, or the defaults when no path is given.

    Raises:
        typer.Exit: If configuration is invalid.
    """
    if config_path is None:
        return SimilarityConfig()

    config_manager = ConfigManager(config_path=str(config_path))
    try:
        return config_manager.load_config()
    except (FileNotFoundError, ConfigValidationError) as e:
        typer.secho(f"Configuration Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def read_records(records_path: Path) -> List[BaseMetadata]:
    """Load input records.

    Raises:
        typer.Exit: If the file is missing or invalid.
    """
    try:
        return load_records(records_path)
    except (FileNotFoundError, RecordLoadError) as e:
        typer.secho(f"Input Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def handle_errors(func: F) -> F:
    """Decorator for consistent error handling.

    Catches exceptions and displays user-friendly error messages.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            logger.exception("command_failed")
            typer.secho(f"Error: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=1)

    return wrapper  # type: ignore[return-value]


def display_success(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN)


def display_warning(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW)


def display_error(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)


def display_info(message: str) -> None:
    typer.secho(message, fg=typer.colors.CYAN)
