"""End-to-end: load records, detect duplicates, resolve groups."""

import pytest

from artifact_dedup.models.dedup import GroupingMode, MatchType, SimilarityConfig
from artifact_dedup.observability.context import correlation_id_context
from artifact_dedup.services.config_manager import ConfigManager
from artifact_dedup.services.content_merger import ContentMerger
from artifact_dedup.services.dedup_service import DeduplicationService
from artifact_dedup.services.record_loader import load_records


@pytest.fixture
def service():
    return DeduplicationService()


def _consolidate(records, result):
    merger = ContentMerger()
    grouped = {
        id(member)
        for group in result.groups
        for member in [group.primary] + [d.metadata for d in group.duplicates]
    }
    merged = [merger.resolve_group(group) for group in result.groups]
    return [m.record for m in merged] + [r for r in records if id(r) not in grouped]


def test_catalogue_pipeline(records_file, service):
    records = load_records(records_file)

    with correlation_id_context("e2e-run"):
        result = service.find_duplicates(records)

    assert result.total_groups == 2
    assert result.total_duplicates == 2
    assert not result.truncated

    slack, pdf = result.groups
    assert slack.primary.id == "wf-n8n"
    assert slack.duplicates[0].match_type == MatchType.EXACT

    assert pdf.primary.id == "tool-pdf"
    assert pdf.duplicates[0].id == "tool-pdf-pro"
    assert pdf.duplicates[0].match_type == MatchType.NEAR_EXACT
    assert pdf.duplicates[0].similarity_score == 93
    assert pdf.duplicates[0].confidence == 98
    assert pdf.duplicates[0].matched_fields == ["name", "tags", "category"]

    assert result.statistics.exact_matches == 1
    assert result.statistics.near_exact_matches == 1


def test_consolidated_record_set(records_file, service):
    records = load_records(records_file)

    consolidated = _consolidate(records, service.find_duplicates(records))

    assert len(consolidated) == 5
    ids = [r.id for r in consolidated]
    assert "wf-zapier" not in ids
    assert "tool-pdf-pro" not in ids

    pdf = next(r for r in consolidated if r.id == "tool-pdf")
    assert pdf.name == "PDF Converter"
    assert pdf.features == ["merge", "split", "compress"]
    assert pdf.quality_score == 70


def test_transitive_mode_matches_greedy_on_clean_pairs(records_file):
    records = load_records(records_file)
    greedy = DeduplicationService().find_duplicates(records)
    transitive = DeduplicationService(
        SimilarityConfig(grouping_mode=GroupingMode.TRANSITIVE)
    ).find_duplicates(records)

    assert [g.member_ids for g in transitive.groups] == [
        g.member_ids for g in greedy.groups
    ]
    assert transitive.comparisons == 21


def test_configured_pipeline(records_file, tmp_path):
    config_path = tmp_path / "dedup_config.yaml"
    config_path.write_text(
        "similarity:\n"
        "  exact_match_threshold: 99\n"
        "  near_exact_match_threshold: 97\n"
        "  similar_match_threshold: 96\n"
        "  potential_match_threshold: 95\n"
    )
    config = ConfigManager(config_path=str(config_path)).load_config()

    result = DeduplicationService(config).find_duplicates(load_records(records_file))

    # Only the identical-content Slack pair clears a 95 floor
    assert [g.id for g in result.groups] == ["group_wf-n8n"]
