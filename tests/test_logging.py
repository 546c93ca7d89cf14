"""Tests for structured logging and logging context."""

import json
import logging

from dishplanner.logging_config import (
    ContextualFormatter,
    LoggingContext,
    StructuredJsonFormatter,
    clear_context,
    combination_id_ctx,
    plan_id_ctx,
    request_id_ctx,
    set_context,
)


def _record(message: str = "Generated meal plan") -> logging.LogRecord:
    return logging.LogRecord(
        name="dishplanner.plan.meal_plan",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestLoggingContext:
    """Tests for LoggingContext and the context helpers."""

    def test_sets_and_restores(self):
        with LoggingContext(plan_id="meal_plan_1234abcd"):
            assert plan_id_ctx.get() == "meal_plan_1234abcd"
            with LoggingContext(combination_id="combination_99"):
                assert plan_id_ctx.get() == "meal_plan_1234abcd"
                assert combination_id_ctx.get() == "combination_99"
            assert combination_id_ctx.get() is None
        assert plan_id_ctx.get() is None

    def test_set_and_clear(self):
        set_context(request_id="req-1", plan_id="meal_plan_1")
        assert request_id_ctx.get() == "req-1"
        assert plan_id_ctx.get() == "meal_plan_1"
        clear_context()
        assert request_id_ctx.get() is None
        assert plan_id_ctx.get() is None


class TestFormatters:
    def test_json_includes_context(self):
        with LoggingContext(request_id="abc", plan_id="meal_plan_42"):
            data = json.loads(StructuredJsonFormatter().format(_record()))

        assert data["message"] == "Generated meal plan"
        assert data["level"] == "INFO"
        assert data["request_id"] == "abc"
        assert data["plan_id"] == "meal_plan_42"
        assert data["timestamp"].endswith("Z")

    def test_text_includes_short_ids(self):
        with LoggingContext(request_id="0123456789abcdef", combination_id="combination_deadbeef"):
            line = ContextualFormatter().format(_record("Scored"))

        assert "req=01234567" in line
        assert "combo=deadbeef" in line
        assert line.endswith("| Scored")

    def test_text_without_context(self):
        line = ContextualFormatter().format(_record("Plain"))
        assert "[" not in line
