"""Artifact Dedup CLI Package.

Usage:
    python -m artifact_dedup.cli scan records.json
    python -m artifact_dedup.cli compare records.json wf-1 wf-2
    python -m artifact_dedup.cli merge records.json --output merged.json
    python -m artifact_dedup.cli validate config/dedup_config.yaml
"""

import typer

from artifact_dedup.cli.scan import scan_command
from artifact_dedup.cli.compare import compare_command
from artifact_dedup.cli.merge import merge_command
from artifact_dedup.cli.validate import validate_command

app = typer.Typer(help="Artifact Dedup: near-duplicate detection for automation metadata")

app.command(name="scan")(scan_command)
app.command(name="compare")(compare_command)
app.command(name="merge")(merge_command)
app.command(name="validate")(validate_command)

__all__ = [
    "app",
    "scan_command",
    "compare_command",
    "merge_command",
    "validate_command",
]
