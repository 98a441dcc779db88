"""Compare command: score a single pair of records."""

from pathlib import Path
from typing import Optional

import typer

from artifact_dedup.cli.utils import (
    display_error,
    handle_errors,
    load_config,
    read_records,
)
from artifact_dedup.services.dedup_service import DeduplicationService


@handle_errors
def compare_command(
    records_path: Path = typer.Argument(..., help="JSON/YAML file of metadata records"),
    left_id: str = typer.Argument(..., help="Id of the record treated as primary"),
    right_id: str = typer.Argument(..., help="Id of the candidate record"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to similarity config YAML"
    ),
):
    """Show the similarity breakdown for two records."""
    config = load_config(config_path)
    records = {record.id: record for record in read_records(records_path)}

    missing = [rid for rid in (left_id, right_id) if rid not in records]
    if missing:
        display_error(f"Record(s) not found: {', '.join(missing)}")
        raise typer.Exit(code=1)

    comparison = DeduplicationService(config).compare(
        records[left_id], records[right_id]
    )

    tier = comparison.match_type.value if comparison.match_type else "no match"
    typer.echo(f"{left_id} vs {right_id}")
    typer.echo(f"  score:          {comparison.similarity_score}")
    typer.echo(f"  match type:     {tier}")
    typer.echo(f"  confidence:     {comparison.confidence}")
    typer.echo(f"  matched fields: {', '.join(comparison.matched_fields) or '-'}")
