"""Unit tests for onelove.utils (errors, json_reply, concurrency, logging)."""

from __future__ import annotations

import asyncio
import io
import logging

import pytest
import structlog

from onelove.utils.concurrency import gather_named
from onelove.utils.errors import (
    AuthRequiredError,
    BackendError,
    NotFoundError,
    OneLoveError,
    ParseError,
    RateLimitError,
    UpstreamError,
    UsageLimitError,
    ValidationError,
)
from onelove.utils.json_reply import parse_json_reply
from onelove.utils.logging import configure_logging

# ─── Errors ────────────────────────────────────────────────────────


class TestErrors:
    def test_str_includes_provider(self) -> None:
        err = BackendError(message="update failed", provider_name="supabase")
        assert str(err) == "[supabase] update failed"
        assert err.message == "update failed"

    def test_str_without_provider(self) -> None:
        assert str(OneLoveError(message="plain")) == "plain"

    @pytest.mark.parametrize(
        ("cls", "status"),
        [
            (OneLoveError, 500),
            (ValidationError, 400),
            (AuthRequiredError, 401),
            (NotFoundError, 404),
            (BackendError, 500),
            (UpstreamError, 500),
            (RateLimitError, 429),
            (UsageLimitError, 402),
        ],
    )
    def test_http_status(self, cls: type, status: int) -> None:
        assert cls().http_status == status

    def test_limit_errors_are_upstream_errors(self) -> None:
        assert isinstance(RateLimitError(), UpstreamError)
        assert RateLimitError().status_code == 429
        assert UsageLimitError().message == "AI usage limit reached."


# ─── JSON replies ──────────────────────────────────────────────────


class TestParseJsonReply:
    def test_plain_object(self) -> None:
        assert parse_json_reply('{"isExplicit": false}') == {"isExplicit": False}

    def test_fenced_object(self) -> None:
        assert parse_json_reply('```json\n{"a": 1}\n```') == {"a": 1}

    def test_object_inside_prose(self) -> None:
        assert parse_json_reply('Sure! Here you go: {"a": 2} Hope it helps.') == {"a": 2}

    @pytest.mark.parametrize("reply", ["", "no json here", "[1, 2]", '{"a": '])
    def test_unrecoverable(self, reply: str) -> None:
        with pytest.raises(ParseError):
            parse_json_reply(reply)


# ─── Fan-out ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_gather_named_keeps_keys() -> None:
    async def value(v, delay):
        await asyncio.sleep(delay)
        return v

    results = await gather_named({"slow": value(1, 0.02), "fast": value(2, 0)})

    assert results == {"slow": 1, "fast": 2}
    assert list(results) == ["slow", "fast"]


@pytest.mark.asyncio
async def test_gather_named_cancels_siblings_on_failure() -> None:
    cancelled = asyncio.Event()

    async def boom():
        raise BackendError(message="read failed")

    async def hang():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    with pytest.raises(BackendError):
        await gather_named({"hang": hang(), "boom": boom()})

    assert cancelled.is_set()


# ─── Logging ───────────────────────────────────────────────────────


@pytest.fixture
def restore_logging():
    yield
    configure_logging()


def test_configure_logging_writes_to_given_stream(restore_logging) -> None:
    stream = io.StringIO()
    configure_logging(log_level="INFO", json_output=True, stream=stream)

    structlog.get_logger(logger_name="onelove.test").info("scan_finished", scanned=3)
    logging.getLogger("httpx").warning("stdlib record")

    lines = stream.getvalue().splitlines()
    assert '"event": "scan_finished"' in lines[0]
    assert '"scanned": 3' in lines[0]
    assert "stdlib record" in lines[1]


def test_configure_logging_filters_below_level(restore_logging) -> None:
    stream = io.StringIO()
    configure_logging(log_level="WARNING", json_output=True, stream=stream)

    structlog.get_logger().info("quiet_event")

    assert stream.getvalue() == ""
