"""Unit tests for credential redaction in logs."""

import logging

from shopify_rest_client.utils.security import (
    SanitizingFormatter,
    sanitize_headers,
    sanitize_string,
)


def test_sanitize_string_redacts_tokens():
    text = "token shpat_abc123 and Bearer eyJ.abc.def"

    sanitized = sanitize_string(text)

    assert "shpat_abc123" not in sanitized
    assert "eyJ.abc.def" not in sanitized
    assert "<shopify_token:REDACTED>" in sanitized
    assert "Bearer <REDACTED>" in sanitized


def test_sanitize_string_redacts_header_dump():
    text = "{'X-Shopify-Access-Token': 'secret-value', 'Accept': 'application/json'}"

    sanitized = sanitize_string(text)

    assert "secret-value" not in sanitized
    assert "application/json" in sanitized


def test_sanitize_string_empty():
    assert sanitize_string("") == ""


def test_sanitize_headers():
    headers = {
        "X-Shopify-Access-Token": "abcdef",
        "Authorization": "",
        "Accept": "application/json",
    }

    sanitized = sanitize_headers(headers)

    assert sanitized["X-Shopify-Access-Token"] == "<REDACTED:length=6>"
    assert sanitized["Authorization"] == "<REDACTED>"
    assert sanitized["Accept"] == "application/json"
    assert headers["X-Shopify-Access-Token"] == "abcdef"


def test_sanitizing_formatter():
    formatter = SanitizingFormatter("%(message)s")
    record = logging.LogRecord(
        "test", logging.INFO, __file__, 1, "using %s", ("shpca_secret",), None
    )

    assert formatter.format(record) == "using <shopify_token:REDACTED>"


def test_setup_secure_logging_installs_redacting_handler(monkeypatch):
    from shopify_rest_client.utils import security

    monkeypatch.setattr(security, "_LOGGING_CONFIGURED", False)
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        security.setup_secure_logging("debug")

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, SanitizingFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

        handler = root.handlers[0]
        security.setup_secure_logging("ERROR")
        assert root.handlers[0] is handler
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_setup_secure_logging_defaults_to_settings_level(monkeypatch):
    from shopify_rest_client.utils import security

    monkeypatch.setattr(security, "_LOGGING_CONFIGURED", False)
    monkeypatch.setenv("SHOPIFY_LOG_LEVEL", "error")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        security.setup_secure_logging()

        assert root.level == logging.ERROR
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
