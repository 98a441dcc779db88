"""
Pairwise similarity scoring for metadata records.

Weighted field-by-field comparison:
1. name, description (string similarity)
2. tags (array similarity)
3. category (binary equality)
4. type-specific payload (only when both records share a type)
5. version (equality, only when both records carry one)
6. source (same-source boost)

Final score = round(weighted_sum / applicable_weight * 100), clamped to 0-100.
A field is applicable when at least one record has a value for it, so two
sparse records are not penalized for data neither of them has.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from artifact_dedup.models.dedup import SimilarityConfig, SimilarityResult
from artifact_dedup.models.metadata import ArtifactType, BaseMetadata
from artifact_dedup.utils.similarity import (
    array_similarity,
    normalize_text,
    string_similarity,
    weighted_ratio,
)

# Local similarity above which a field is reported as matched
NAME_MATCH_THRESHOLD = 0.8
DESCRIPTION_MATCH_THRESHOLD = 0.7
TAGS_MATCH_THRESHOLD = 0.6

# Fraction of the source weight credited when both records share a source
SAME_SOURCE_FACTOR = 0.2

# Node counts within this distance are considered the same workflow size
NODE_COUNT_TOLERANCE = 2


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set)):
        return len(value) > 0
    return True


def _equality(a: Any, b: Any) -> float:
    return 1.0 if a is not None and a == b else 0.0


def _node_closeness(a: Optional[int], b: Optional[int]) -> float:
    return 1.0 if abs(a - b) <= NODE_COUNT_TOLERANCE else 0.0  # type: ignore[operator]


# (attribute, weight, comparator, needs_both_values)
SubField = Tuple[str, float, Callable[[Any, Any], float], bool]

TYPE_SUBFIELDS: Dict[ArtifactType, Sequence[SubField]] = {
    ArtifactType.WORKFLOW: (
        ("node_count", 0.2, _node_closeness, True),
        ("integrations", 0.3, array_similarity, False),
        ("complexity", 0.2, _equality, False),
        ("execution_mode", 0.1, _equality, False),
        ("triggers", 0.2, array_similarity, False),
    ),
    ArtifactType.AI_AGENT: (
        ("model", 0.3, _equality, False),
        ("provider", 0.2, _equality, False),
        ("capabilities", 0.3, array_similarity, False),
        ("use_cases", 0.2, array_similarity, False),
    ),
    ArtifactType.TOOL: (
        ("tool_type", 0.2, _equality, False),
        ("platform", 0.2, _equality, False),
        ("features", 0.3, array_similarity, False),
        ("capabilities", 0.3, array_similarity, False),
    ),
}


class TypeSpecificScorer:
    """Sub-score in [0, 1] over the payload fields of a shared artifact type."""

    def score(self, item1: BaseMetadata, item2: BaseMetadata) -> Optional[float]:
        """
        Compare the type payloads of two same-type records.

        Args:
            item1: First record
            item2: Second record of the same type

        Returns:
            Weighted sub-score, or None when the types differ or neither
            record carries any comparable payload field
        """
        record_type = getattr(item1, "type", None)
        if record_type is None or record_type != getattr(item2, "type", None):
            return None

        subfields = TYPE_SUBFIELDS.get(ArtifactType(record_type))
        if not subfields:
            return None

        total = 0.0
        weight = 0.0
        for attribute, sub_weight, comparator, needs_both in subfields:
            value1 = getattr(item1, attribute, None)
            value2 = getattr(item2, attribute, None)

            if needs_both:
                applicable = value1 is not None and value2 is not None
            else:
                applicable = _has_value(value1) or _has_value(value2)

            if not applicable:
                continue

            total += comparator(value1, value2) * sub_weight
            weight += sub_weight

        if weight == 0:
            return None

        return weighted_ratio(total, weight)


class SimilarityScorer:
    """
    Weighted similarity between two metadata records.

    Configuration is captured at construction; build a new scorer to apply
    a different SimilarityConfig.
    """

    def __init__(
        self,
        config: SimilarityConfig,
        type_scorer: Optional[TypeSpecificScorer] = None,
    ):
        self.config = config
        self.weights = config.field_weights
        self.type_scorer = type_scorer or TypeSpecificScorer()

    def score(self, item1: BaseMetadata, item2: BaseMetadata) -> SimilarityResult:
        """
        Score two records.

        Args:
            item1: First record
            item2: Second record

        Returns:
            SimilarityResult with the 0-100 score and matched field names
        """
        matched_fields: List[str] = []
        total = 0.0
        weight = 0.0
        fuzzy = self.config.enable_fuzzy_matching

        # Name
        if _has_value(item1.name) or _has_value(item2.name):
            name_score = string_similarity(item1.name, item2.name, fuzzy=fuzzy)
            if name_score > NAME_MATCH_THRESHOLD:
                matched_fields.append("name")
            total += name_score * self.weights.name
            weight += self.weights.name

        # Description
        if _has_value(item1.description) or _has_value(item2.description):
            description_score = string_similarity(
                item1.description, item2.description, fuzzy=fuzzy
            )
            if description_score > DESCRIPTION_MATCH_THRESHOLD:
                matched_fields.append("description")
            total += description_score * self.weights.description
            weight += self.weights.description

        # Tags
        if _has_value(item1.tags) or _has_value(item2.tags):
            tags_score = array_similarity(item1.tags, item2.tags)
            if tags_score > TAGS_MATCH_THRESHOLD:
                matched_fields.append("tags")
            total += tags_score * self.weights.tags
            weight += self.weights.tags

        # Category (binary)
        if _has_value(item1.category) or _has_value(item2.category):
            category_score = _equality(item1.category, item2.category)
            if category_score > 0:
                matched_fields.append("category")
            total += category_score * self.weights.category
            weight += self.weights.category

        # Type-specific payload
        type_score = self.type_scorer.score(item1, item2)
        if type_score is not None:
            total += type_score * self.weights.type_specific
            weight += self.weights.type_specific

        # Version
        if _has_value(item1.version) and _has_value(item2.version):
            version_score = _equality(
                normalize_text(item1.version), normalize_text(item2.version)
            )
            total += version_score * self.weights.version
            weight += self.weights.version

        # Source: boost only, never part of the applicable weight
        if _has_value(item1.source) and item1.source == item2.source:
            total += SAME_SOURCE_FACTOR * self.weights.source

        final_score = round(weighted_ratio(total, weight) * 100)
        final_score = min(100, max(0, final_score))

        return SimilarityResult(score=final_score, matched_fields=matched_fields)
