"""Tests for structured logging helpers."""
from __future__ import annotations

import json
import logging
from uuid import UUID

import pytest

from blog_service.core.services.base import BaseService
from blog_service.infra.logging import (
    ContextInjectingFilter,
    JSONFormatter,
    clear_log_context,
    get_lazy_logger,
    get_log_context,
    set_log_context,
)


@pytest.fixture(autouse=True)
def _clean_context():
    clear_log_context()
    yield
    clear_log_context()


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("blog_service.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_emits_one_line_with_extras():
    formatter = JSONFormatter(static={"service": "blog-service"})

    line = formatter.format(_record("listed", post_count=3))

    data = json.loads(line)
    assert "\n" not in line
    assert data["message"] == "listed"
    assert data["level"] == "INFO"
    assert data["service"] == "blog-service"
    assert data["post_count"] == 3
    assert data["timestamp"].endswith("Z")


def test_context_filter_injects_without_overwriting():
    set_log_context(request_id="req-1", path="/api/v1/posts")
    record = _record(path="/explicit")

    assert ContextInjectingFilter().filter(record) is True

    assert record.request_id == "req-1"
    assert record.path == "/explicit"


def test_context_is_cleared():
    set_log_context(request_id="req-1")
    clear_log_context()

    assert get_log_context() == {}


def test_lazy_logger_skips_disabled_levels(caplog: pytest.LogCaptureFixture):
    calls = []
    logger = get_lazy_logger("blog_service.test.lazy", model="Post")

    def expensive() -> str:
        calls.append(1)
        return "expensive"

    with caplog.at_level(logging.INFO, logger="blog_service.test.lazy"):
        logger.debug(expensive)
        logger.info(expensive)

    assert calls == [1]
    assert [r.getMessage() for r in caplog.records] == ["expensive"]
    assert caplog.records[0].model == "Post"


class _WidgetService(BaseService):
    pass


def test_service_records_writes_with_string_ids(caplog: pytest.LogCaptureFixture):
    service = _WidgetService()
    widget_id = UUID("01948f1e-0000-7000-8000-0000000000aa")

    with caplog.at_level(logging.INFO, logger=service.logger.name):
        service._record("Widget updated", widget_id=widget_id, fields=["name"])

    assert service.logger.name.endswith("._WidgetService")
    record = caplog.records[0]
    assert record.getMessage() == "Widget updated"
    assert record.widget_id == str(widget_id)
    assert record.fields == ["name"]
