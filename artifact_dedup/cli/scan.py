"""Scan command: find duplicate groups in a records file."""

from pathlib import Path
from typing import Optional

import typer

from artifact_dedup.cli.utils import (
    display_info,
    display_success,
    display_warning,
    handle_errors,
    load_config,
    read_records,
)
from artifact_dedup.models.dedup import DeduplicationResult
from artifact_dedup.observability.context import correlation_id_context
from artifact_dedup.observability.metrics import get_metrics_text
from artifact_dedup.services.dedup_service import DeduplicationService


@handle_errors
def scan_command(
    records_path: Path = typer.Argument(..., help="JSON/YAML file of metadata records"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to similarity config YAML"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the full result as JSON"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    metrics: bool = typer.Option(
        False, "--metrics", help="Print Prometheus metrics after the run"
    ),
):
    """Detect near-duplicate records and print the duplicate groups."""
    config = load_config(config_path)
    records = read_records(records_path)

    with correlation_id_context():
        result = DeduplicationService(config).find_duplicates(records)

    if output:
        output.write_text(result.model_dump_json(indent=2), encoding="utf-8")

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        _display_result(result, len(records))
        if output:
            display_success(f"Result written to {output}")

    if metrics:
        typer.echo(get_metrics_text().decode("utf-8"))


def _display_result(result: DeduplicationResult, record_count: int) -> None:
    stats = result.statistics
    display_info(
        f"Scanned {record_count} records: {result.total_groups} groups, "
        f"{result.total_duplicates} duplicates "
        f"({result.processing_time_ms:.1f} ms)"
    )
    typer.echo(
        f"  exact={stats.exact_matches} near_exact={stats.near_exact_matches} "
        f"similar={stats.similar_matches} potential={stats.potential_matches}"
    )

    if result.truncated:
        display_warning(
            f"Comparison budget reached after {result.comparisons} pairs; "
            "result is partial"
        )

    for group in result.groups:
        typer.echo(
            f"\n{group.id} [{group.merge_strategy.value}] "
            f"quality={group.quality_score} items={group.total_items}"
        )
        typer.echo(f"  primary: {group.primary.id} ({group.primary.name})")
        for candidate in group.duplicates:
            fields = ", ".join(candidate.matched_fields) or "-"
            typer.echo(
                f"  - {candidate.id} ({candidate.metadata.name}) "
                f"{candidate.match_type.value} score={candidate.similarity_score} "
                f"confidence={candidate.confidence} fields=[{fields}]"
            )
