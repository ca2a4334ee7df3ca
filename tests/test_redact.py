from __future__ import annotations

from pyrobovac._redact import REDACTED, redact_for_log, redact_headers, redact_params


def test_redact_headers_masks_credentials() -> None:
    headers = {"apikey": "anon-key", "Authorization": "Bearer user-jwt", "accept": "application/json"}

    redacted = redact_headers(headers)

    assert redacted["apikey"] == REDACTED
    assert redacted["Authorization"] == REDACTED
    assert redacted["accept"] == "application/json"
    assert headers["apikey"] == "anon-key"


def test_redact_params_keeps_filter_operator() -> None:
    params = {"select": "*", "user_id": "eq.user-1", "order": "created_at.desc"}

    redacted = redact_params(params)

    assert redacted == {"select": "*", "user_id": f"eq.{REDACTED}", "order": "created_at.desc"}


def test_redact_for_log_masks_identity_in_rows() -> None:
    body = [{"user_id": "user-1", "mapped_area": 142, "detected_zones": [{"id": "zone_1"}]}]

    redacted = redact_for_log(body)

    assert redacted[0]["user_id"] == REDACTED
    assert redacted[0]["mapped_area"] == 142
    assert redacted[0]["detected_zones"] == [{"id": "zone_1"}]


def test_redact_for_log_truncates_long_strings() -> None:
    redacted = redact_for_log({"message": "x" * 600}, max_string=10)
    assert redacted["message"].startswith("x" * 10)
    assert "<truncated>" in redacted["message"]
