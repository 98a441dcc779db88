"""Tests for match tier classification and confidence adjustment"""

import pytest

from artifact_dedup.models.dedup import MatchType, SimilarityConfig
from artifact_dedup.services.match_classifier import (
    ConfidenceCalculator,
    MatchClassifier,
)

TIER_RANK = {
    None: 0,
    MatchType.POTENTIAL: 1,
    MatchType.SIMILAR: 2,
    MatchType.NEAR_EXACT: 3,
    MatchType.EXACT: 4,
}


class TestMatchClassifier:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (100, MatchType.EXACT),
            (95, MatchType.EXACT),
            (94, MatchType.NEAR_EXACT),
            (85, MatchType.NEAR_EXACT),
            (84, MatchType.SIMILAR),
            (70, MatchType.SIMILAR),
            (69, MatchType.POTENTIAL),
            (50, MatchType.POTENTIAL),
            (49, None),
            (0, None),
        ],
    )
    def test_default_thresholds(self, default_config, score, expected):
        assert MatchClassifier(default_config).classify(score) == expected

    def test_custom_thresholds(self):
        config = SimilarityConfig(
            exact_match_threshold=90,
            near_exact_match_threshold=80,
            similar_match_threshold=60,
            potential_match_threshold=30,
        )
        classifier = MatchClassifier(config)

        assert classifier.classify(90) == MatchType.EXACT
        assert classifier.classify(79) == MatchType.SIMILAR
        assert classifier.classify(30) == MatchType.POTENTIAL
        assert classifier.classify(29) is None

    def test_monotonic_in_score(self, default_config):
        classifier = MatchClassifier(default_config)
        ranks = [TIER_RANK[classifier.classify(score)] for score in range(101)]

        assert ranks == sorted(ranks)

    def test_is_candidate(self, default_config):
        classifier = MatchClassifier(default_config)

        assert classifier.is_candidate(50)
        assert not classifier.is_candidate(49)


class TestConfidenceCalculator:
    @pytest.fixture
    def calculator(self):
        return ConfidenceCalculator()

    def test_no_adjustments(self, calculator, make_workflow):
        primary = make_workflow(id="a", name="Slack Alert", source="n8n")
        duplicate = make_workflow(id="b", name="Slack Alerts", source="zapier")

        assert calculator.calculate(primary, duplicate, 60) == 60

    def test_case_folded_name_match(self, calculator, make_workflow):
        primary = make_workflow(id="a", name="Slack Bot", source="n8n")
        duplicate = make_workflow(id="b", name=" slack bot", source="zapier")

        assert calculator.calculate(primary, duplicate, 60) == 70

    def test_category_match(self, calculator, make_workflow):
        primary = make_workflow(id="a", name="x", category="comms", source="n8n")
        duplicate = make_workflow(id="b", name="y", category="comms", source="zapier")

        assert calculator.calculate(primary, duplicate, 60) == 65

    def test_same_source_penalty(self, calculator, make_workflow):
        primary = make_workflow(id="a", name="x", source="n8n")
        duplicate = make_workflow(id="b", name="y", source="n8n")

        assert calculator.calculate(primary, duplicate, 60) == 55

    def test_both_verified(self, calculator, make_workflow):
        primary = make_workflow(id="a", name="x", source="n8n", is_verified=True)
        both = make_workflow(id="b", name="y", source="make", is_verified=True)
        one = make_workflow(id="c", name="y", source="make", is_verified=False)

        assert calculator.calculate(primary, both, 60) == 65
        assert calculator.calculate(primary, one, 60) == 60

    def test_both_high_quality(self, calculator, make_workflow):
        primary = make_workflow(id="a", name="x", source="n8n", quality_score=85)
        high = make_workflow(id="b", name="y", source="make", quality_score=81)
        boundary = make_workflow(id="c", name="y", source="make", quality_score=80)

        assert calculator.calculate(primary, high, 60) == 65
        assert calculator.calculate(primary, boundary, 60) == 60

    def test_clamped_high(self, calculator, slack_pair):
        assert calculator.calculate(*slack_pair, 98) == 100

    def test_clamped_low(self, calculator, make_workflow):
        primary = make_workflow(id="a", name="x", source="n8n")
        duplicate = make_workflow(id="b", name="y", source="n8n")

        assert calculator.calculate(primary, duplicate, 2) == 0
