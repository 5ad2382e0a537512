"""
Unit tests for logging helpers.
"""

import json
import logging

import pytest
import structlog

from coatpath.core.logging import (
    PLANNER_LOGGER,
    configure_logging,
    get_logger,
    round_floats,
    shape_context,
)


@pytest.fixture
def restore_logging():
    yield
    configure_logging(level="WARNING")


class TestLogging:
    """Tests for structlog processors, levels and context binding."""

    def test_round_floats(self):
        event = {"event": "fill_planned", "x": 1.23456789, "segments": 5}
        assert round_floats(None, "debug", event) == {
            "event": "fill_planned",
            "x": 1.235,
            "segments": 5,
        }

    def test_shape_context_binds_and_clears(self):
        with shape_context("panel", "fill"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["shape"] == "panel"
            assert bound["coating"] == "fill"
        assert "shape" not in structlog.contextvars.get_contextvars()

    def test_planner_logs_held_at_info(self, restore_logging):
        configure_logging(level="DEBUG")
        assert logging.getLogger(PLANNER_LOGGER).level == logging.INFO
        assert logging.getLogger("coatpath.pipeline").isEnabledFor(logging.DEBUG)

        configure_logging(level="DEBUG", planner_level="DEBUG")
        assert logging.getLogger(PLANNER_LOGGER).level == logging.DEBUG

    def test_log_file_is_json(self, temp_dir, restore_logging):
        path = temp_dir / "coatpath.log"
        configure_logging(level="INFO", log_file=str(path))

        get_logger("coatpath.pipeline").info("coating_job_started", shapes=2, masks=0.12345)
        for handler in logging.root.handlers:
            handler.flush()

        record = json.loads(path.read_text().splitlines()[-1])
        assert record["event"] == "coating_job_started"
        assert record["shapes"] == 2
        assert record["masks"] == 0.123
