"""Custom exceptions for the deduplication engine

The scoring and grouping path never raises for malformed or partial
records; missing fields are treated as empty. These exceptions cover the
explicit operations around it (merging, strategy lookup, loading input).

All exceptions inherit from DedupError so callers can catch every
engine-related error in a single except block:
```python
try:
    merged = merger.resolve_group(group)
except DedupError as e:
    logger.error("resolution_failed", error=str(e))
```
"""


class DedupError(Exception):
    """Base exception for all deduplication errors"""

    pass


class MergeError(DedupError):
    """Two records could not be merged

    Raised when:
    - The records have different artifact types
    - The record type has no content merger registered
    """

    pass


class ManualReviewRequired(DedupError):
    """Group is tagged for manual review and cannot be auto-resolved"""

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"Group {group_id} requires manual review")


class UnknownStrategyError(DedupError):
    """No merge strategy registered under the requested name"""

    pass


class RecordLoadError(DedupError):
    """Input records could not be read or validated

    Raised when:
    - The file is not valid JSON/YAML
    - The top-level structure is not a list or a {"records": [...]} mapping
    - A record fails schema validation
    """

    pass
