"""Tests for the merge strategy catalogue and selector"""

from datetime import datetime, timezone

import pytest

from artifact_dedup.models.dedup import MergeStrategyType
from artifact_dedup.services.merge_strategies import (
    MergeStrategy,
    MergeStrategyCatalog,
    keep_highest_quality,
    keep_most_recent,
    keep_verified,
    select_merge_strategy,
)
from artifact_dedup.utils.exceptions import UnknownStrategyError


class TestPolicies:
    def test_keep_highest_quality(self, make_workflow):
        low = make_workflow(id="a", quality_score=30)
        high = make_workflow(id="b", quality_score=70)

        assert keep_highest_quality(low, high) is high
        assert keep_highest_quality(high, low) is high

    def test_keep_highest_quality_tie_keeps_primary(self, make_workflow):
        primary = make_workflow(id="a", quality_score=50)
        duplicate = make_workflow(id="b", quality_score=50)

        assert keep_highest_quality(primary, duplicate) is primary

    def test_keep_most_recent(self, make_workflow):
        older = make_workflow(id="a", updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
        newer = make_workflow(id="b", updated_at=datetime(2024, 3, 1, tzinfo=timezone.utc))
        undated = make_workflow(id="c")

        assert keep_most_recent(older, newer) is newer
        assert keep_most_recent(newer, older) is newer
        assert keep_most_recent(older, undated) is older
        assert keep_most_recent(undated, older) is older

    def test_keep_verified(self, make_workflow):
        verified = make_workflow(id="a", is_verified=True)
        unverified = make_workflow(id="b")

        assert keep_verified(verified, unverified) is verified
        assert keep_verified(unverified, verified) is verified


class TestMergeStrategyCatalog:
    def test_default_catalogue(self):
        names = [s.name for s in MergeStrategyCatalog().strategies()]

        assert names == [
            "keep_highest_quality",
            "keep_most_recent",
            "keep_verified",
            "merge_workflow_content",
            "merge_ai_agent_content",
            "merge_tool_content",
        ]

    def test_applicable_filters_by_type(self, make_tool):
        names = [s.name for s in MergeStrategyCatalog().applicable(make_tool(id="t"))]

        assert "merge_tool_content" in names
        assert "merge_workflow_content" not in names

    def test_register_keeps_priority_order(self, make_workflow):
        catalog = MergeStrategyCatalog()
        catalog.register(
            MergeStrategy(
                name="keep_first",
                description="Always keep the primary",
                priority=0,
                condition=lambda record: True,
                merge=lambda primary, duplicate: primary,
            )
        )

        assert catalog.strategies()[0].name == "keep_first"

    def test_register_replaces_same_name(self):
        catalog = MergeStrategyCatalog()
        replacement = MergeStrategy(
            name="keep_verified",
            description="Replacement",
            priority=9,
            condition=lambda record: False,
            merge=lambda primary, duplicate: primary,
        )

        catalog.register(replacement)

        assert catalog.get("keep_verified") is replacement
        assert len(catalog.strategies()) == 6

    def test_get_unknown_raises(self):
        with pytest.raises(UnknownStrategyError, match="nope"):
            MergeStrategyCatalog().get("nope")

    def test_apply_by_name(self, make_workflow):
        primary = make_workflow(id="a", tags=["x"])
        duplicate = make_workflow(id="b", tags=["y"])

        merged = MergeStrategyCatalog().apply("merge_workflow_content", primary, duplicate)

        assert merged.tags == ["x", "y"]


class TestSelectMergeStrategy:
    def test_merge_content_when_any_strategy_applies(self, make_agent):
        assert (
            select_merge_strategy(make_agent(id="a"), MergeStrategyCatalog())
            == MergeStrategyType.MERGE_CONTENT
        )

    def test_keep_primary_when_none_apply(self, make_agent):
        catalog = MergeStrategyCatalog(strategies=[])

        assert (
            select_merge_strategy(make_agent(id="a"), catalog)
            == MergeStrategyType.KEEP_PRIMARY
        )

    def test_never_manual_review(self, make_workflow, make_agent, make_tool):
        catalog = MergeStrategyCatalog()
        records = [make_workflow(id="w"), make_agent(id="a"), make_tool(id="t")]

        assert all(
            select_merge_strategy(r, catalog) != MergeStrategyType.MANUAL_REVIEW
            for r in records
        )
