from __future__ import annotations

from pysubway._redact import mask_email, redact_for_log


def test_mask_email_keeps_domain_only() -> None:
    assert mask_email("rider@example.com") == "r***@example.com"
    assert mask_email("not-an-address") == "<redacted>"


def test_redact_for_log_masks_sensitive_keys() -> None:
    payload = {
        "email": "rider@example.com",
        "line": "A",
        "headers": {"Authorization": "Bearer abc", "Cookie": "sid=1"},
    }

    redacted = redact_for_log(payload)
    assert redacted["email"] == "r***@example.com"
    assert redacted["line"] == "A"
    assert redacted["headers"]["Authorization"] == "<redacted>"
    assert redacted["headers"]["Cookie"] == "<redacted>"
    assert payload["email"] == "rider@example.com"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"description": long_value}, max_string=10)
    assert redacted["description"].startswith("x" * 10)
    assert "<truncated>" in redacted["description"]


def test_redact_for_log_walks_lists() -> None:
    assert redact_for_log([{"email": "a@b.c"}, None, 3]) == [{"email": "a***@b.c"}, None, 3]
