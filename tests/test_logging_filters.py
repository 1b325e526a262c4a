"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from authgate.core.logging import (
    JsonFormatter,
    SensitiveDataFilter,
    clear_request_id,
    hash_identifier,
    set_request_id,
)


@pytest.fixture
def capture() -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_credentials_are_redacted(capture) -> None:
    logger, stream = capture

    logger.info(
        "auth.debug",
        extra={
            "password": "Correct-Horse-9",
            "password_hash": "$2b$04$abcdefghijklmnopqrstuv",
            "email": "alice@example.com",
            "attempts": 3,
        },
    )

    output = stream.getvalue()
    assert "Correct-Horse-9" not in output
    assert "$2b$04$" not in output
    assert "alice@example.com" not in output
    assert "[REDACTED]" in output
    assert json.loads(output)["attempts"] == 3


def test_safe_fields_pass_through(capture) -> None:
    logger, stream = capture

    logger.info(
        "auth.failure",
        extra={"origin_hash": "0123abcd", "attempts": 2, "route": "/v1/auth/login"},
    )

    payload = json.loads(stream.getvalue())
    assert payload["message"] == "auth.failure"
    assert payload["origin_hash"] == "0123abcd"
    assert payload["route"] == "/v1/auth/login"
    assert "[REDACTED]" not in stream.getvalue()


def test_nested_sensitive_fields_are_redacted(capture) -> None:
    logger, stream = capture

    logger.info(
        "request.body",
        extra={"body": {"email": "bob@example.com", "password": "hunter2", "remember": True}},
    )

    output = stream.getvalue()
    assert "bob@example.com" not in output
    assert "hunter2" not in output
    assert json.loads(output)["body"]["remember"] is True


def test_request_id_from_context_is_included(capture) -> None:
    logger, stream = capture

    set_request_id("req-42")
    try:
        logger.info("auth.success")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-42"


def test_hash_identifier_is_stable_and_opaque() -> None:
    digest = hash_identifier("203.0.113.7")

    assert digest == hash_identifier("203.0.113.7")
    assert digest != hash_identifier("203.0.113.8")
    assert len(digest) == 16
    int(digest, 16)
