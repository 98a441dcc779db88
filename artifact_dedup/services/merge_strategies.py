"""
Merge strategy catalogue and group resolution selector.

The catalogue is advisory: the selector only tags a group with a
resolution category and never runs a strategy's merge function. Callers
that want a specific policy invoke it by name via MergeStrategyCatalog.apply;
content merging for the default pipeline goes through ContentMerger.
"""

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

import structlog

from artifact_dedup.models.dedup import MergeStrategyType
from artifact_dedup.models.metadata import ArtifactType, BaseMetadata
from artifact_dedup.services.content_merger import ContentMerger
from artifact_dedup.utils.exceptions import UnknownStrategyError

logger = structlog.get_logger()

MergeFunction = Callable[[BaseMetadata, BaseMetadata], BaseMetadata]


@dataclass(frozen=True)
class MergeStrategy:
    """A named resolution policy for a pair of duplicate records."""

    name: str
    description: str
    priority: int
    condition: Callable[[BaseMetadata], bool]
    merge: MergeFunction

    def applies_to(self, record: BaseMetadata) -> bool:
        return self.condition(record)


def _any_type(record: BaseMetadata) -> bool:
    return True


def _of_type(artifact_type: ArtifactType) -> Callable[[BaseMetadata], bool]:
    def condition(record: BaseMetadata) -> bool:
        return getattr(record, "type", None) == artifact_type

    return condition


def keep_highest_quality(primary: BaseMetadata, duplicate: BaseMetadata) -> BaseMetadata:
    return primary if primary.quality_score >= duplicate.quality_score else duplicate


def keep_most_recent(primary: BaseMetadata, duplicate: BaseMetadata) -> BaseMetadata:
    if duplicate.updated_at is None:
        return primary
    if primary.updated_at is None:
        return duplicate
    return primary if primary.updated_at >= duplicate.updated_at else duplicate


def keep_verified(primary: BaseMetadata, duplicate: BaseMetadata) -> BaseMetadata:
    return primary if primary.is_verified and not duplicate.is_verified else duplicate


def default_strategies(merger: Optional[ContentMerger] = None) -> List[MergeStrategy]:
    """Built-in strategies: three type-agnostic keeps, one merge per type."""
    merger = merger or ContentMerger()
    return [
        MergeStrategy(
            name="keep_highest_quality",
            description="Keep the item with the highest quality score",
            priority=1,
            condition=_any_type,
            merge=keep_highest_quality,
        ),
        MergeStrategy(
            name="keep_most_recent",
            description="Keep the most recently updated item",
            priority=2,
            condition=_any_type,
            merge=keep_most_recent,
        ),
        MergeStrategy(
            name="keep_verified",
            description="Keep verified items over unverified ones",
            priority=3,
            condition=_any_type,
            merge=keep_verified,
        ),
        MergeStrategy(
            name="merge_workflow_content",
            description="Merge workflow integrations, triggers, actions and tags",
            priority=4,
            condition=_of_type(ArtifactType.WORKFLOW),
            merge=merger.merge,
        ),
        MergeStrategy(
            name="merge_ai_agent_content",
            description="Merge AI agent capabilities, use cases, industries and tags",
            priority=4,
            condition=_of_type(ArtifactType.AI_AGENT),
            merge=merger.merge,
        ),
        MergeStrategy(
            name="merge_tool_content",
            description="Merge tool features, capabilities, integrations and tags",
            priority=4,
            condition=_of_type(ArtifactType.TOOL),
            merge=merger.merge,
        ),
    ]


class MergeStrategyCatalog:
    """Priority-ordered registry of merge strategies."""

    def __init__(self, strategies: Optional[List[MergeStrategy]] = None):
        self._lock = threading.Lock()
        initial = default_strategies() if strategies is None else list(strategies)
        self._strategies = sorted(initial, key=lambda s: s.priority)

    def register(self, strategy: MergeStrategy) -> None:
        """Add a strategy; the catalogue stays sorted by priority."""
        with self._lock:
            strategies = [s for s in self._strategies if s.name != strategy.name]
            strategies.append(strategy)
            self._strategies = sorted(strategies, key=lambda s: s.priority)
        logger.info(
            "merge_strategy_registered",
            name=strategy.name,
            priority=strategy.priority,
        )

    def strategies(self) -> List[MergeStrategy]:
        return list(self._strategies)

    def get(self, name: str) -> MergeStrategy:
        for strategy in self._strategies:
            if strategy.name == name:
                return strategy
        raise UnknownStrategyError(f"Unknown merge strategy: {name}")

    def applicable(self, record: BaseMetadata) -> List[MergeStrategy]:
        """Strategies whose condition holds for the record, by priority."""
        return [s for s in self._strategies if s.applies_to(record)]

    def apply(
        self, name: str, primary: BaseMetadata, duplicate: BaseMetadata
    ) -> BaseMetadata:
        """Run a named strategy on a pair of records."""
        return self.get(name).merge(primary, duplicate)


def select_merge_strategy(
    primary: BaseMetadata, catalog: MergeStrategyCatalog
) -> MergeStrategyType:
    """
    Pick the resolution category for a group.

    Args:
        primary: Group primary
        catalog: Strategy catalogue to consult

    Returns:
        merge_content if any strategy applies to the primary, else keep_primary
    """
    if catalog.applicable(primary):
        return MergeStrategyType.MERGE_CONTENT
    return MergeStrategyType.KEEP_PRIMARY
