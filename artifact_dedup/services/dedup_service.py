"""
Artifact deduplication service.

Pipeline for one run:
1. Pairwise weighted similarity (SimilarityScorer)
2. Match tier + confidence (MatchClassifier, ConfidenceCalculator)
3. Grouping (greedy by default, transitive on request)
4. Resolution tag per group (merge strategy selector)

find_duplicates() is the pure entry point; DeduplicationService wraps it
with a replaceable config and run metrics.
"""

import threading
import time
from typing import List, Optional, Sequence

import structlog
from pydantic import BaseModel, ConfigDict, Field

from artifact_dedup.models.dedup import (
    DeduplicationResult,
    GroupingMode,
    MatchType,
    SimilarityConfig,
)
from artifact_dedup.models.metadata import BaseMetadata
from artifact_dedup.observability.metrics import record_run
from artifact_dedup.services.group_builder import GroupBuilder, TransitiveGroupBuilder
from artifact_dedup.services.match_classifier import (
    ConfidenceCalculator,
    MatchClassifier,
)
from artifact_dedup.services.merge_strategies import MergeStrategyCatalog
from artifact_dedup.services.similarity_scorer import SimilarityScorer

logger = structlog.get_logger()


class PairComparison(BaseModel):
    """Score breakdown for a single pair of records"""

    model_config = ConfigDict(frozen=True)

    left_id: str
    right_id: str
    similarity_score: int = Field(..., ge=0, le=100)
    match_type: Optional[MatchType] = None
    matched_fields: List[str] = Field(default_factory=list)
    confidence: int = Field(..., ge=0, le=100)


def find_duplicates(
    items: Sequence[BaseMetadata],
    config: Optional[SimilarityConfig] = None,
    catalog: Optional[MergeStrategyCatalog] = None,
) -> DeduplicationResult:
    """
    Detect and group near-duplicate records.

    Args:
        items: Records in scan order
        config: Thresholds, weights and toggles (defaults if None)
        catalog: Merge strategy catalogue (built-in strategies if None)

    Returns:
        DeduplicationResult; records outside every group are standalone
    """
    if len(items) < 2:
        return DeduplicationResult()

    config = config or SimilarityConfig()
    start = time.perf_counter()

    if config.grouping_mode == GroupingMode.TRANSITIVE:
        builder: GroupBuilder = TransitiveGroupBuilder(config, catalog)
    else:
        builder = GroupBuilder(config, catalog)

    outcome = builder.build(items)
    processing_time_ms = (time.perf_counter() - start) * 1000

    if outcome.truncated:
        logger.warning(
            "dedup_budget_exhausted",
            max_comparisons=config.max_comparisons,
            records=len(items),
            groups=len(outcome.groups),
        )

    result = DeduplicationResult(
        groups=outcome.groups,
        total_duplicates=sum(len(g.duplicates) for g in outcome.groups),
        total_groups=len(outcome.groups),
        processing_time_ms=processing_time_ms,
        statistics=outcome.statistics,
        comparisons=outcome.comparisons,
        truncated=outcome.truncated,
    )

    logger.info(
        "deduplication_complete",
        records=len(items),
        groups=result.total_groups,
        duplicates=result.total_duplicates,
        comparisons=result.comparisons,
        grouping_mode=config.grouping_mode.value,
        duration_ms=round(processing_time_ms, 2),
    )

    return result


class DeduplicationService:
    """
    Deduplication engine with a replaceable configuration.

    Each run captures the config once, so a concurrent update_config()
    only affects runs started after it.
    """

    def __init__(
        self,
        config: Optional[SimilarityConfig] = None,
        catalog: Optional[MergeStrategyCatalog] = None,
    ):
        """
        Initialize deduplication service.

        Args:
            config: Similarity configuration (defaults if None)
            catalog: Merge strategy catalogue (built-in strategies if None)
        """
        self._config = config or SimilarityConfig()
        self._config_lock = threading.Lock()
        self.catalog = catalog or MergeStrategyCatalog()

        if self._config.enable_semantic_matching:
            logger.warning("semantic_matching_not_supported")

        logger.info(
            "dedup_service_initialized",
            grouping_mode=self._config.grouping_mode.value,
            potential_threshold=self._config.potential_match_threshold,
        )

    def get_config(self) -> SimilarityConfig:
        return self._config

    def update_config(self, config: SimilarityConfig) -> None:
        """Replace the configuration wholesale for subsequent runs."""
        with self._config_lock:
            self._config = config
        logger.info(
            "dedup_config_updated",
            exact=config.exact_match_threshold,
            near_exact=config.near_exact_match_threshold,
            similar=config.similar_match_threshold,
            potential=config.potential_match_threshold,
        )

    def find_duplicates(self, items: Sequence[BaseMetadata]) -> DeduplicationResult:
        """Run deduplication with the current config and record metrics."""
        with self._config_lock:
            config = self._config

        result = find_duplicates(items, config, self.catalog)
        record_run(result, len(items), config.grouping_mode.value)
        return result

    def compare(self, left: BaseMetadata, right: BaseMetadata) -> PairComparison:
        """
        Score one pair without grouping. Records no run metrics.

        Args:
            left: Record treated as primary
            right: Record treated as candidate

        Returns:
            PairComparison with score, tier (None below the potential
            threshold), matched fields and confidence
        """
        with self._config_lock:
            config = self._config

        similarity = SimilarityScorer(config).score(left, right)
        return PairComparison(
            left_id=left.id,
            right_id=right.id,
            similarity_score=similarity.score,
            match_type=MatchClassifier(config).classify(similarity.score),
            matched_fields=similarity.matched_fields,
            confidence=ConfidenceCalculator().calculate(left, right, similarity.score),
        )
