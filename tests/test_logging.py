from __future__ import annotations

import io
import json
import logging

from flowctl_core.config import LoggingConfig
from flowctl_core.logging import get_logger, setup_from_config, setup_logging


class TestLogging:
    def test_child_loggers_share_namespace(self):
        assert get_logger("agent.executor").name == "flowctl.agent.executor"

    def test_plain_output(self):
        stream = io.StringIO()
        setup_logging(level="info", stream=stream)

        get_logger("test").info("hello %s", "world")

        assert "flowctl.test: hello world" in stream.getvalue()

    def test_level_filters(self):
        stream = io.StringIO()
        setup_logging(level="WARNING", stream=stream)

        get_logger("test").info("quiet")

        assert stream.getvalue() == ""

    def test_json_output_carries_context(self):
        stream = io.StringIO()
        setup_logging(level="INFO", json_output=True, stream=stream)

        get_logger("test").warning("skipped", extra={"agent": "coder"})

        record = json.loads(stream.getvalue())
        assert record["level"] == "WARNING"
        assert record["logger"] == "flowctl.test"
        assert record["msg"] == "skipped"
        assert record["agent"] == "coder"
        assert "path" not in record

    def test_reconfigure_replaces_handler(self):
        first, second = io.StringIO(), io.StringIO()
        setup_logging(level="INFO", stream=first)
        logger = setup_logging(level="INFO", stream=second)

        get_logger("test").info("once")

        assert len(logger.handlers) == 1
        assert first.getvalue() == ""
        assert "once" in second.getvalue()

    def test_from_config_with_override(self):
        logger = setup_from_config(LoggingConfig(level="ERROR"), level="DEBUG")

        assert logger.level == logging.DEBUG
