"""Prometheus metrics for deduplication runs.

Usage:
    from artifact_dedup.observability.metrics import (
        DEDUP_RUN_DURATION,
        DUPLICATE_MATCHES,
    )

    DUPLICATE_MATCHES.labels(match_type="exact").inc()

    with DEDUP_RUN_DURATION.labels(grouping_mode="greedy").time():
        run_scan()
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from artifact_dedup.models.dedup import DeduplicationResult

# Custom registry keeps test runs and embedded use isolated
REGISTRY = CollectorRegistry(auto_describe=True)

# =============================================================================
# COUNTERS
# =============================================================================

DEDUP_RUNS = Counter(
    name="artifact_dedup_runs_total",
    documentation="Total deduplication runs",
    labelnames=["status"],  # complete, truncated
    registry=REGISTRY,
)

RECORDS_SCANNED = Counter(
    name="artifact_dedup_records_scanned_total",
    documentation="Total metadata records submitted for deduplication",
    registry=REGISTRY,
)

PAIRWISE_COMPARISONS = Counter(
    name="artifact_dedup_pairwise_comparisons_total",
    documentation="Total record pairs scored",
    registry=REGISTRY,
)

DUPLICATE_MATCHES = Counter(
    name="artifact_dedup_matches_total",
    documentation="Duplicate candidates found by match tier",
    labelnames=["match_type"],  # exact, near_exact, similar, potential
    registry=REGISTRY,
)

DUPLICATE_GROUPS = Counter(
    name="artifact_dedup_groups_total",
    documentation="Duplicate groups emitted by merge strategy",
    labelnames=["merge_strategy"],  # keep_primary, merge_content, manual_review
    registry=REGISTRY,
)

# =============================================================================
# GAUGES
# =============================================================================

LAST_RUN_GROUPS = Gauge(
    name="artifact_dedup_last_run_groups",
    documentation="Number of groups in the most recent run",
    registry=REGISTRY,
)

# =============================================================================
# HISTOGRAMS
# =============================================================================

DEDUP_RUN_DURATION = Histogram(
    name="artifact_dedup_run_duration_seconds",
    documentation="Deduplication run duration in seconds",
    labelnames=["grouping_mode"],  # greedy, transitive
    buckets=(0.001, 0.01, 0.05, 0.1, 0.5, 1, 5, 30, 120, float("inf")),
    registry=REGISTRY,
)

MATCH_CONFIDENCE = Histogram(
    name="artifact_dedup_match_confidence",
    documentation="Distribution of duplicate confidence scores",
    buckets=(10, 20, 30, 40, 50, 60, 70, 80, 90, 100),
    registry=REGISTRY,
)


def record_run(result: DeduplicationResult, records: int, grouping_mode: str) -> None:
    """Update all run metrics from a finished result."""
    DEDUP_RUNS.labels(status="truncated" if result.truncated else "complete").inc()
    RECORDS_SCANNED.inc(records)
    PAIRWISE_COMPARISONS.inc(result.comparisons)

    stats = result.statistics
    DUPLICATE_MATCHES.labels(match_type="exact").inc(stats.exact_matches)
    DUPLICATE_MATCHES.labels(match_type="near_exact").inc(stats.near_exact_matches)
    DUPLICATE_MATCHES.labels(match_type="similar").inc(stats.similar_matches)
    DUPLICATE_MATCHES.labels(match_type="potential").inc(stats.potential_matches)

    for group in result.groups:
        DUPLICATE_GROUPS.labels(merge_strategy=group.merge_strategy.value).inc()
        for candidate in group.duplicates:
            MATCH_CONFIDENCE.observe(candidate.confidence)

    LAST_RUN_GROUPS.set(result.total_groups)
    DEDUP_RUN_DURATION.labels(grouping_mode=grouping_mode).observe(
        result.processing_time_ms / 1000
    )


def get_metrics_text() -> bytes:
    """Prometheus exposition text for the dedup registry."""
    return generate_latest(REGISTRY)
