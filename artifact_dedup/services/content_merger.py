"""
Type-aware content merging for resolved duplicate groups.

Merging collapses two records of the same artifact type:
- List fields are unioned, first occurrence wins, order preserved
- The longer description is kept
- The highest quality score is kept
- The latest updated_at is kept
- Every other scalar comes from the primary unchanged
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field

from artifact_dedup.models.dedup import DuplicateGroup, MergeStrategyType
from artifact_dedup.models.metadata import ArtifactType, BaseMetadata, UnifiedMetadata
from artifact_dedup.utils.exceptions import ManualReviewRequired, MergeError

logger = structlog.get_logger()

MERGED_LIST_FIELDS: Dict[ArtifactType, Tuple[str, ...]] = {
    ArtifactType.WORKFLOW: ("integrations", "triggers", "actions", "tags"),
    ArtifactType.AI_AGENT: ("capabilities", "use_cases", "industries", "tags"),
    ArtifactType.TOOL: ("features", "capabilities", "integrations", "tags"),
}


class MergedRecord(BaseModel):
    """A consolidated record and the ids folded into it"""

    model_config = ConfigDict(frozen=True)

    record: UnifiedMetadata
    merged_from: List[str] = Field(default_factory=list)


def union_preserving_order(*lists: Iterable[str]) -> List[str]:
    """Concatenate lists, dropping repeated entries."""
    seen = set()
    merged = []
    for values in lists:
        for value in values:
            if value not in seen:
                seen.add(value)
                merged.append(value)
    return merged


def _later(a: Optional[datetime], b: Optional[datetime]) -> Optional[datetime]:
    if a is None:
        return b
    if b is None:
        return a
    return a if a > b else b


class ContentMerger:
    """Merges records field by field, dispatched on artifact type."""

    def merge(self, primary: BaseMetadata, duplicate: BaseMetadata) -> BaseMetadata:
        """
        Merge a duplicate into the primary.

        Args:
            primary: Record whose scalars are kept
            duplicate: Record contributing list entries and newer data

        Returns:
            New record of the primary's type

        Raises:
            MergeError: If the records have different types
        """
        primary_type = getattr(primary, "type", None)
        if primary_type != getattr(duplicate, "type", None):
            raise MergeError(
                f"Cannot merge {getattr(duplicate, 'type', None)} record "
                f"'{duplicate.id}' into {primary_type} record '{primary.id}'"
            )

        try:
            list_fields = MERGED_LIST_FIELDS[ArtifactType(primary_type)]
        except (KeyError, ValueError):
            raise MergeError(f"No content merger for record type: {primary_type}")

        updates = {
            field_name: union_preserving_order(
                getattr(primary, field_name), getattr(duplicate, field_name)
            )
            for field_name in list_fields
        }

        updates["description"] = (
            primary.description
            if len(primary.description) > len(duplicate.description)
            else duplicate.description
        )
        updates["quality_score"] = max(primary.quality_score, duplicate.quality_score)
        updates["updated_at"] = _later(primary.updated_at, duplicate.updated_at)

        return primary.model_copy(update=updates)

    def merge_group(self, group: DuplicateGroup) -> MergedRecord:
        """Fold every duplicate of a group into its primary, in group order."""
        merged = group.primary
        for candidate in group.duplicates:
            merged = self.merge(merged, candidate.metadata)

        logger.debug(
            "group_merged",
            group_id=group.id,
            primary_id=group.primary.id,
            merged=len(group.duplicates),
        )

        return MergedRecord(
            record=merged, merged_from=[d.id for d in group.duplicates]
        )

    def resolve_group(self, group: DuplicateGroup) -> MergedRecord:
        """
        Apply the resolution recorded on a group.

        Args:
            group: Group tagged by the merge strategy selector

        Returns:
            Merged record for merge_content, the untouched primary for
            keep_primary

        Raises:
            ManualReviewRequired: If the group is tagged manual_review
        """
        if group.merge_strategy == MergeStrategyType.MERGE_CONTENT:
            return self.merge_group(group)

        if group.merge_strategy == MergeStrategyType.KEEP_PRIMARY:
            return MergedRecord(
                record=group.primary, merged_from=[d.id for d in group.duplicates]
            )

        raise ManualReviewRequired(group.id)
