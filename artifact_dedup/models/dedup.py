"""Data models for the deduplication engine."""

from enum import Enum
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from artifact_dedup.models.metadata import UnifiedMetadata


class MatchType(str, Enum):
    """Match tier derived from a similarity score"""

    EXACT = "exact"
    NEAR_EXACT = "near_exact"
    SIMILAR = "similar"
    POTENTIAL = "potential"


class MergeStrategyType(str, Enum):
    """Resolution category recorded on a duplicate group"""

    KEEP_PRIMARY = "keep_primary"
    MERGE_CONTENT = "merge_content"
    MANUAL_REVIEW = "manual_review"


class GroupingMode(str, Enum):
    GREEDY = "greedy"  # Leftmost primary wins, non-transitive
    TRANSITIVE = "transitive"  # Union-find clusters over all matching pairs


class FieldWeights(BaseModel):
    """Per-field weights for the similarity score.

    Weights are taken as-is; keeping their sum at or below 1.0 is the
    caller's responsibility.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: float = 0.30
    description: float = 0.20
    tags: float = 0.15
    category: float = 0.10
    type_specific: float = 0.10
    source: float = 0.05
    version: float = 0.05

    @property
    def total(self) -> float:
        return (
            self.name
            + self.description
            + self.tags
            + self.category
            + self.type_specific
            + self.source
            + self.version
        )


class SimilarityConfig(BaseModel):
    """Thresholds, weights and toggles for one deduplication run.

    Immutable: tuning between runs means building a new config and handing
    it to the engine as a whole.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    exact_match_threshold: float = 95.0
    near_exact_match_threshold: float = 85.0
    similar_match_threshold: float = 70.0
    potential_match_threshold: float = 50.0

    field_weights: FieldWeights = Field(default_factory=FieldWeights)

    enable_fuzzy_matching: bool = True
    # Reserved: lexical similarity only, no embedding backend is wired
    enable_semantic_matching: bool = False

    grouping_mode: GroupingMode = GroupingMode.GREEDY
    max_comparisons: Optional[int] = Field(
        default=None,
        ge=1,
        description="Stop the pairwise scan after this many scorings",
    )


class SimilarityResult(BaseModel):
    """Raw pairwise score with the fields that matched"""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    matched_fields: List[str] = Field(default_factory=list)


class DuplicateCandidate(BaseModel):
    """A record matched against a group's primary"""

    model_config = ConfigDict(frozen=True)

    id: str
    metadata: UnifiedMetadata
    similarity_score: int = Field(..., ge=0, le=100)
    match_type: MatchType
    matched_fields: List[str] = Field(default_factory=list)
    confidence: int = Field(..., ge=0, le=100)


class DuplicateGroup(BaseModel):
    """A primary record plus every duplicate it claimed"""

    model_config = ConfigDict(frozen=True)

    id: str
    primary: UnifiedMetadata
    duplicates: List[DuplicateCandidate]
    merge_strategy: MergeStrategyType
    quality_score: int
    total_items: int

    @property
    def member_ids(self) -> List[str]:
        return [self.primary.id] + [d.id for d in self.duplicates]


class MatchStatistics(BaseModel):
    """Candidate counts per match tier"""

    model_config = ConfigDict(frozen=True)

    exact_matches: int = 0
    near_exact_matches: int = 0
    similar_matches: int = 0
    potential_matches: int = 0

    @classmethod
    def from_counts(cls, counts: Mapping[MatchType, int]) -> "MatchStatistics":
        return cls(
            exact_matches=counts.get(MatchType.EXACT, 0),
            near_exact_matches=counts.get(MatchType.NEAR_EXACT, 0),
            similar_matches=counts.get(MatchType.SIMILAR, 0),
            potential_matches=counts.get(MatchType.POTENTIAL, 0),
        )

    @property
    def total(self) -> int:
        return (
            self.exact_matches
            + self.near_exact_matches
            + self.similar_matches
            + self.potential_matches
        )


class DeduplicationResult(BaseModel):
    """Outcome of one deduplication run"""

    model_config = ConfigDict(frozen=True)

    groups: List[DuplicateGroup] = Field(default_factory=list)
    total_duplicates: int = 0
    total_groups: int = 0
    processing_time_ms: float = 0.0
    statistics: MatchStatistics = Field(default_factory=MatchStatistics)
    comparisons: int = 0
    truncated: bool = False

    @property
    def grouped_ids(self) -> List[str]:
        return [record_id for group in self.groups for record_id in group.member_ids]
