import json
import logging

import pytest
from httpx import AsyncClient

from stockroom.core.logging import JsonFormatter, RequestIdFilter, current_request_id, request_context
from stockroom.models.user import User


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def _record(message: str = "Stock entry recorded", **extra) -> logging.LogRecord:
    record = logging.makeLogRecord({"name": "stockroom.test", "levelname": "INFO", "msg": message})
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_puts_request_id_at_top_level():
    log_filter = RequestIdFilter()
    formatter = JsonFormatter()

    with request_context("req-1"):
        assert current_request_id() == "req-1"
        record = _record(quantity=3)
        log_filter.filter(record)
    assert current_request_id() is None

    line = json.loads(formatter.format(record))
    assert line["request_id"] == "req-1"
    assert line["message"] == "Stock entry recorded"
    assert line["environment"] == "test"
    assert line["extra"] == {"quantity": 3}


def test_filter_keeps_explicit_request_id_and_skips_outside_requests():
    log_filter = RequestIdFilter()

    explicit = _record(request_id="from-extra")
    with request_context("ctx"):
        log_filter.filter(explicit)
    assert explicit.request_id == "from-extra"

    outside = _record()
    log_filter.filter(outside)
    assert outside.request_id is None
    assert "request_id" not in json.loads(JsonFormatter().format(outside))


@pytest.mark.asyncio
async def test_security_alert_carries_request_id(client: AsyncClient, manager_user: User):
    handler = _ListHandler()
    handler.addFilter(RequestIdFilter())
    security_logger = logging.getLogger("stockroom.security")
    security_logger.addHandler(handler)
    try:
        r = await client.post(
            "/api/v1/auth/login",
            data={"username": manager_user.email, "password": "nope-nope"},
            headers={"X-Request-ID": "login-42"},
        )
    finally:
        security_logger.removeHandler(handler)

    assert r.status_code == 401
    assert r.headers["x-request-id"] == "login-42"
    assert handler.records
    assert {record.request_id for record in handler.records} == {"login-42"}
