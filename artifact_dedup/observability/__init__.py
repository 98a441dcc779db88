"""Observability for deduplication runs.

Provides:
- Correlation ID context management for tracing a run through its logs
- Structured logging with context propagation
- Prometheus metrics for run throughput and match tiers
"""

from artifact_dedup.observability.context import (
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
    correlation_id_context,
)
from artifact_dedup.observability.logging import (
    get_logger,
    configure_logging,
    add_correlation_id_processor,
)
from artifact_dedup.observability.metrics import (
    DEDUP_RUNS,
    RECORDS_SCANNED,
    PAIRWISE_COMPARISONS,
    DUPLICATE_MATCHES,
    DUPLICATE_GROUPS,
    LAST_RUN_GROUPS,
    DEDUP_RUN_DURATION,
    MATCH_CONFIDENCE,
    record_run,
    get_metrics_text,
)

__all__ = [
    # Context
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "correlation_id_context",
    # Logging
    "get_logger",
    "configure_logging",
    "add_correlation_id_processor",
    # Metrics
    "DEDUP_RUNS",
    "RECORDS_SCANNED",
    "PAIRWISE_COMPARISONS",
    "DUPLICATE_MATCHES",
    "DUPLICATE_GROUPS",
    "LAST_RUN_GROUPS",
    "DEDUP_RUN_DURATION",
    "MATCH_CONFIDENCE",
    "record_run",
    "get_metrics_text",
]
