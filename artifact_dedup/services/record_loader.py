"""Read metadata record files produced by the ingestion pipeline."""

import json
from pathlib import Path
from typing import Any, List

import structlog
import yaml
from pydantic import ValidationError

from artifact_dedup.models.metadata import RECORD_LIST_ADAPTER, BaseMetadata
from artifact_dedup.utils.exceptions import RecordLoadError

logger = structlog.get_logger()


def parse_records(data: Any) -> List[BaseMetadata]:
    """
    Validate raw record data.

    Args:
        data: A list of record dicts, or a mapping with a "records" list

    Returns:
        Records typed by their "type" discriminator

    Raises:
        RecordLoadError: If the structure or any record is invalid
    """
    if isinstance(data, dict):
        data = data.get("records")

    if not isinstance(data, list):
        raise RecordLoadError(
            'Expected a list of records or a {"records": [...]} mapping'
        )

    try:
        return list(RECORD_LIST_ADAPTER.validate_python(data))
    except ValidationError as e:
        raise RecordLoadError(f"Invalid record data: {e}")


def load_records(path: Path) -> List[BaseMetadata]:
    """
    Load records from a JSON or YAML file.

    Args:
        path: File path; .yaml/.yml is parsed as YAML, anything else as JSON

    Returns:
        Validated records in file order

    Raises:
        FileNotFoundError: If the file does not exist
        RecordLoadError: If the file cannot be parsed or validated
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Records file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise RecordLoadError(f"Failed to parse {path}: {e}")

    records = parse_records(data)
    logger.info("records_loaded", path=str(path), count=len(records))
    return records
