"""Validate command for similarity configuration files.

Validates configuration syntax and reports questionable tuning.
"""

from pathlib import Path

import typer

from artifact_dedup.cli.utils import (
    display_error,
    display_success,
    display_warning,
    handle_errors,
)
from artifact_dedup.services.config_manager import ConfigManager, check_config


@handle_errors
def validate_command(
    config_path: Path = typer.Argument(..., help="Config file to validate"),
):
    """Validate configuration file syntax and semantics."""
    try:
        manager = ConfigManager(config_path=str(config_path))
        config = manager.load_config()
    except Exception as e:
        display_error(f"Validation failed: {e}")
        raise typer.Exit(code=1)

    warnings = check_config(config)
    for warning in warnings:
        display_warning(f"Warning: {warning}")

    display_success("Configuration is valid! ✅")
