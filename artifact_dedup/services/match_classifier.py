"""Match tier classification and confidence adjustment."""

from typing import Optional

from artifact_dedup.models.dedup import MatchType, SimilarityConfig
from artifact_dedup.models.metadata import BaseMetadata
from artifact_dedup.utils.similarity import normalize_text

NAME_MATCH_BONUS = 10
CATEGORY_MATCH_BONUS = 5
SAME_SOURCE_PENALTY = 5
BOTH_VERIFIED_BONUS = 5
HIGH_QUALITY_BONUS = 5
HIGH_QUALITY_THRESHOLD = 80


class MatchClassifier:
    """Maps a raw similarity score onto a match tier."""

    def __init__(self, config: SimilarityConfig):
        self.config = config

    def classify(self, score: float) -> Optional[MatchType]:
        """
        Classify a score against the configured thresholds.

        Args:
            score: Similarity score (0-100)

        Returns:
            The match tier, or None when the score is below the potential
            threshold and the pair is not a candidate
        """
        if score >= self.config.exact_match_threshold:
            return MatchType.EXACT
        if score >= self.config.near_exact_match_threshold:
            return MatchType.NEAR_EXACT
        if score >= self.config.similar_match_threshold:
            return MatchType.SIMILAR
        if score >= self.config.potential_match_threshold:
            return MatchType.POTENTIAL
        return None

    def is_candidate(self, score: float) -> bool:
        return score >= self.config.potential_match_threshold


class ConfidenceCalculator:
    """
    Adjusts a raw similarity score into a duplicate confidence.

    Cross-source agreement counts as stronger evidence than same-source
    agreement: two records from one source that look alike are more often
    distinct artifacts published side by side.
    """

    def calculate(
        self, primary: BaseMetadata, duplicate: BaseMetadata, score: int
    ) -> int:
        """
        Args:
            primary: Group primary
            duplicate: Candidate duplicate
            score: Raw similarity score for the pair

        Returns:
            Confidence clamped to 0-100
        """
        confidence = score

        primary_name = normalize_text(primary.name)
        if primary_name and primary_name == normalize_text(duplicate.name):
            confidence += NAME_MATCH_BONUS

        if primary.category is not None and primary.category == duplicate.category:
            confidence += CATEGORY_MATCH_BONUS

        if primary.source == duplicate.source:
            confidence -= SAME_SOURCE_PENALTY

        if primary.is_verified and duplicate.is_verified:
            confidence += BOTH_VERIFIED_BONUS

        if (
            primary.quality_score > HIGH_QUALITY_THRESHOLD
            and duplicate.quality_score > HIGH_QUALITY_THRESHOLD
        ):
            confidence += HIGH_QUALITY_BONUS

        return min(100, max(0, confidence))
