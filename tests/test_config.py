"""Tests for configuration helpers."""

import json

from seminar_tickets.config import Settings, parse_service_account_info


def test_settings_defaults(settings: Settings) -> None:
    assert settings.ticket_price == 100
    assert settings.currency == "ZAR"
    assert settings.email_backend == "brevo"
    assert settings.google_spreadsheet_id is None


def test_parse_service_account_inline_json() -> None:
    raw = json.dumps({"client_email": "a@b.c", "private_key": "pem"})

    assert parse_service_account_info(raw) == {
        "client_email": "a@b.c",
        "private_key": "pem",
    }


def test_parse_service_account_file(tmp_path) -> None:
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps({"client_email": "a@b.c"}), encoding="utf-8")

    assert parse_service_account_info(str(path)) == {"client_email": "a@b.c"}


def test_parse_service_account_empty() -> None:
    assert parse_service_account_info(None) is None
    assert parse_service_account_info("  ") is None
