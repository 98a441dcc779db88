"""Tests for structured logging."""

import structlog
import structlog.testing

from artifact_dedup.observability.context import (
    clear_correlation_id,
    set_correlation_id,
)
from artifact_dedup.observability.logging import (
    add_correlation_id_processor,
    configure_logging,
    get_logger,
)


class TestAddCorrelationIdProcessor:
    """Tests for add_correlation_id_processor."""

    def test_adds_correlation_id_when_set(self):
        set_correlation_id("test-corr-id")
        event_dict = {"event": "test_event"}

        result = add_correlation_id_processor(None, "info", event_dict)

        assert result["correlation_id"] == "test-corr-id"
        clear_correlation_id()

    def test_adds_none_marker_when_not_set(self):
        """Should add 'none' as correlation_id when not set."""
        clear_correlation_id()

        result = add_correlation_id_processor(None, "info", {"event": "test_event"})

        assert result["correlation_id"] == "none"

    def test_preserves_existing_event_dict_fields(self):
        clear_correlation_id()
        event_dict = {"event": "test", "groups": 3}

        result = add_correlation_id_processor(None, "info", event_dict)

        assert result["event"] == "test"
        assert result["groups"] == 3


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self):
        configure_logging(level="INFO", json_output=True)

        processors = structlog.get_config()["processors"]

        assert add_correlation_id_processor in processors
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_output_without_timestamp(self):
        configure_logging(level="DEBUG", json_output=False, add_timestamp=False)

        processors = structlog.get_config()["processors"]

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert not any(
            isinstance(p, structlog.processors.TimeStamper) for p in processors
        )

    def test_level_filters_lower_events(self):
        configure_logging(level="WARNING", json_output=True)

        with structlog.testing.capture_logs() as captured:
            logger = get_logger("tests")
            logger.info("hidden_event")
            logger.warning("visible_event", groups=2)

        assert [entry["event"] for entry in captured] == ["visible_event"]
        assert captured[0]["component"] == "tests"
        assert captured[0]["groups"] == 2


class TestGetLogger:
    def test_binds_initial_context(self):
        logger = get_logger("merger", group_id="group_a")

        context = structlog.get_context(logger)

        assert context["component"] == "merger"
        assert context["group_id"] == "group_a"
