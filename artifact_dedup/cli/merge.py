"""Merge command: consolidate duplicate groups into single records."""

import json
from pathlib import Path
from typing import Optional

import typer

from artifact_dedup.cli.utils import (
    display_success,
    handle_errors,
    load_config,
    read_records,
)
from artifact_dedup.observability.context import correlation_id_context
from artifact_dedup.services.content_merger import ContentMerger
from artifact_dedup.services.dedup_service import DeduplicationService


@handle_errors
def merge_command(
    records_path: Path = typer.Argument(..., help="JSON/YAML file of metadata records"),
    output: Path = typer.Option(
        ..., "--output", "-o", help="Where to write the consolidated records (JSON)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to similarity config YAML"
    ),
):
    """Resolve every duplicate group and write the consolidated record set."""
    config = load_config(config_path)
    records = read_records(records_path)
    merger = ContentMerger()

    with correlation_id_context():
        result = DeduplicationService(config).find_duplicates(records)

    # Tracked by object so a standalone record reusing a grouped id survives
    grouped = {
        id(member)
        for group in result.groups
        for member in [group.primary] + [d.metadata for d in group.duplicates]
    }
    consolidated = [merger.resolve_group(group).record for group in result.groups]
    consolidated.extend(r for r in records if id(r) not in grouped)

    payload = [record.model_dump(mode="json") for record in consolidated]
    output.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    display_success(
        f"Wrote {len(consolidated)} records to {output} "
        f"({len(records) - len(consolidated)} duplicates merged)"
    )
