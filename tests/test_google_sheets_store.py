"""Tests for the Google Sheets record store."""

import asyncio
import json
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import parse_qs

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwt

from seminar_tickets.adapters.google_sheets_store import (
    DEFAULT_HEADER,
    GoogleServiceAccountTokenProvider,
    GoogleSheetsRecordStore,
    record_to_row,
    row_to_record,
)
from seminar_tickets.domain.errors import SinkError
from seminar_tickets.domain.tickets import FulfillmentRecord


@dataclass
class StaticTokenProvider:
    token: str = "ya29.token"

    async def get_access_token(self) -> str:
        return self.token


def _record(**overrides) -> FulfillmentRecord:  # type: ignore[no-untyped-def]
    values = {
        "reference": "MG-1A2B3C4D",
        "email": "thabo@example.com",
        "quantity": 2,
        "amount": 20000,
        "first_name": "Thabo",
        "last_name": "Mokoena",
        "created_at": datetime(2026, 3, 1, 9, 30, tzinfo=UTC),
    }
    values.update(overrides)
    return FulfillmentRecord(**values)


def _store(handler) -> GoogleSheetsRecordStore:  # type: ignore[no-untyped-def]
    return GoogleSheetsRecordStore(
        spreadsheet_id="sheet-123",
        sheet_name="Sales",
        token_provider=StaticTokenProvider(),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        base_url="https://sheets.test/v4",
    )


def test_record_to_row_follows_existing_header() -> None:
    header = ["Date", "Name", "Reference", "Qty", "Status", "Total", "Notes"]

    row = record_to_row(_record(), header)

    assert row == [
        "2026-03-01",
        "Thabo Mokoena",
        "MG-1A2B3C4D",
        2,
        "PAID",
        "200.00",
        "",
    ]


def test_row_to_record_round_trips_known_columns() -> None:
    header = ["Timestamp", "First Name", "Last Name", "Email", "Reference", "Quantity"]
    row = [
        "2026-03-01T09:30:00+00:00",
        "Thabo",
        "Mokoena",
        "t@example.com",
        "MG-1",
        "3",
    ]

    record = row_to_record(row, header)

    assert record is not None
    assert record.reference == "MG-1"
    assert record.quantity == 3
    assert record.name == "Thabo Mokoena"
    assert record.created_at == datetime(2026, 3, 1, 9, 30, tzinfo=UTC)


def test_row_to_record_rejects_incomplete_rows() -> None:
    header = ["Email", "Reference", "Quantity"]

    assert row_to_record(["a@example.com", "MG-1"], header) is None
    assert row_to_record(["a@example.com", "MG-1", "many"], header) is None


def test_append_writes_row_under_header() -> None:
    appended: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer ya29.token"
        if request.method == "GET":
            return httpx.Response(
                200, json={"values": [["Timestamp", "Email", "Reference", "Quantity"]]}
            )
        appended["path"] = request.url.path
        appended["query"] = parse_qs(request.url.query.decode())
        appended["payload"] = json.loads(request.content.decode())
        return httpx.Response(200, json={"updates": {"updatedRows": 1}})

    asyncio.run(_store(handler).append(_record()))

    assert appended["path"].endswith(":append")
    assert appended["query"]["valueInputOption"] == ["USER_ENTERED"]
    assert appended["payload"]["values"] == [
        ["2026-03-01T09:30:00+00:00", "thabo@example.com", "MG-1A2B3C4D", 2]
    ]


def test_append_to_empty_sheet_writes_default_header() -> None:
    appended: list[list[object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"range": "Sales!A1:Z1"})
        appended.extend(json.loads(request.content.decode())["values"])
        return httpx.Response(200, json={})

    asyncio.run(_store(handler).append(_record()))

    assert appended[0] == DEFAULT_HEADER
    assert appended[1][3] == "MG-1A2B3C4D"


def test_list_records_skips_unreadable_rows() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "values": [
                    ["Date", "Email", "Reference", "Quantity"],
                    ["2026-03-01", "a@example.com", "MG-AAAAAAAA", "1"],
                    ["2026-03-02", "b@example.com"],
                    ["2026-03-02", "c@example.com", "MG-CCCCCCCC", "4"],
                ]
            },
        )

    records = asyncio.run(_store(handler).list_records())

    assert [record.reference for record in records] == ["MG-AAAAAAAA", "MG-CCCCCCCC"]
    assert sum(record.quantity for record in records) == 5


def test_store_raises_sink_error_on_api_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": {"status": "PERMISSION_DENIED"}})

    with pytest.raises(SinkError):
        asyncio.run(_store(handler).append(_record()))


@pytest.fixture(scope="module")
def private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def test_token_provider_exchanges_signed_assertion(private_key) -> None:
    pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    requests: list[dict[str, list[str]]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(parse_qs(request.content.decode()))
        return httpx.Response(
            200, json={"access_token": "ya29.fresh", "expires_in": 3599}
        )

    provider = GoogleServiceAccountTokenProvider(
        service_account_info={
            "client_email": "sales@project.iam.gserviceaccount.com",
            "private_key": pem,
            "private_key_id": "key-1",
            "token_uri": "https://oauth2.test/token",
        },
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    first = asyncio.run(provider.get_access_token())
    second = asyncio.run(provider.get_access_token())

    assert first == second == "ya29.fresh"
    assert len(requests) == 1
    form = requests[0]
    assert form["grant_type"] == ["urn:ietf:params:oauth:grant-type:jwt-bearer"]
    assertion = form["assertion"][0]
    assert jwt.get_unverified_header(assertion)["kid"] == "key-1"
    claims = jwt.decode(
        assertion,
        public_pem,
        algorithms=["RS256"],
        audience="https://oauth2.test/token",
    )
    assert claims["iss"] == "sales@project.iam.gserviceaccount.com"
    assert claims["scope"] == "https://www.googleapis.com/auth/spreadsheets"


def test_token_provider_raises_sink_error(private_key) -> None:
    pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "invalid_grant"})

    provider = GoogleServiceAccountTokenProvider(
        service_account_info={"client_email": "x@y.z", "private_key": pem},
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(SinkError):
        asyncio.run(provider.get_access_token())


@pytest.mark.parametrize(
    "service_account_info",
    [
        {"client_email": "x@y.z", "private_key": "not a pem key"},
        {"private_key": "not a pem key"},
    ],
)
def test_token_provider_wraps_bad_credentials(service_account_info) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"access_token": "unused"})

    provider = GoogleServiceAccountTokenProvider(
        service_account_info=service_account_info,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(SinkError):
        asyncio.run(provider.get_access_token())

    assert requests == []
