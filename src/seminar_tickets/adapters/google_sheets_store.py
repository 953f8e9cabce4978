"""Google Sheets backed fulfillment record store."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from urllib.parse import quote

import httpx
from jose import jwt
from jose.exceptions import JOSEError

from seminar_tickets.domain.errors import SinkError
from seminar_tickets.domain.tickets import STATUS_PAID, FulfillmentRecord
from seminar_tickets.services.cache import Cache, InMemoryCache
from seminar_tickets.services.records import FulfillmentRecordStore

_logger = logging.getLogger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
TOKEN_LIFETIME_SECONDS = 3600
TOKEN_EXPIRY_MARGIN_SECONDS = 60

DEFAULT_HEADER = ["Timestamp", "Name", "Email", "Reference", "Quantity", "Status"]

_COLUMN_VALUES: dict[str, Callable[[FulfillmentRecord], object]] = {
    "date": lambda record: record.created_at.date().isoformat(),
    "timestamp": lambda record: record.created_at.isoformat(),
    "name": lambda record: record.name,
    "first name": lambda record: record.first_name or "",
    "last name": lambda record: record.last_name or "",
    "email": lambda record: record.email,
    "reference": lambda record: record.reference,
    "ref": lambda record: record.reference,
    "quantity": lambda record: record.quantity,
    "qty": lambda record: record.quantity,
    "status": lambda record: record.status,
    "total": lambda record: f"{record.amount / 100:.2f}",
}


class AccessTokenProvider(Protocol):
    """Interface for obtaining OAuth access tokens."""

    async def get_access_token(self) -> str:
        """Return a bearer token valid for the Sheets API."""


@dataclass
class GoogleServiceAccountTokenProvider(AccessTokenProvider):
    """Exchanges a signed service-account assertion for an access token."""

    service_account_info: dict[str, str]
    http_client: httpx.AsyncClient
    cache: Cache = field(default_factory=InMemoryCache)

    async def get_access_token(self) -> str:
        """Return a cached token or fetch a new one."""
        cached = self.cache.get("access_token")
        if isinstance(cached, str):
            return cached
        token_uri = self.service_account_info.get("token_uri", DEFAULT_TOKEN_URI)
        try:
            assertion = self.assertion()
            response = await self.http_client.post(
                token_uri,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
                timeout=10,
            )
            response.raise_for_status()
            payload = response.json()
            token = payload["access_token"]
            expires_in = int(payload.get("expires_in", TOKEN_LIFETIME_SECONDS))
        except (httpx.HTTPError, JOSEError, ValueError, KeyError) as exc:
            raise SinkError("Google token exchange failed") from exc
        self.cache.set(
            "access_token", token, max(expires_in - TOKEN_EXPIRY_MARGIN_SECONDS, 0)
        )
        return token

    def assertion(self) -> str:
        """Return an RS256-signed JWT asserting the service account identity."""
        issued_at = int(time.time())
        claims = {
            "iss": self.service_account_info["client_email"],
            "scope": SHEETS_SCOPE,
            "aud": self.service_account_info.get("token_uri", DEFAULT_TOKEN_URI),
            "iat": issued_at,
            "exp": issued_at + TOKEN_LIFETIME_SECONDS,
        }
        headers = {}
        if self.service_account_info.get("private_key_id"):
            headers["kid"] = self.service_account_info["private_key_id"]
        return jwt.encode(
            claims,
            self.service_account_info["private_key"],
            algorithm="RS256",
            headers=headers or None,
        )


@dataclass
class GoogleSheetsRecordStore(FulfillmentRecordStore):
    """Appends one row per sale to a spreadsheet via the Sheets v4 API.

    Values are placed under whichever of the known column names the sheet's
    header row uses, so existing sheets keep their own layout. Columns the
    store does not recognise are left blank.
    """

    spreadsheet_id: str
    sheet_name: str
    token_provider: AccessTokenProvider
    http_client: httpx.AsyncClient
    base_url: str = "https://sheets.googleapis.com/v4"

    @classmethod
    def create(
        cls,
        spreadsheet_id: str,
        sheet_name: str,
        service_account_info: dict[str, str],
    ) -> "GoogleSheetsRecordStore":
        """Create a store authenticated with a service account."""
        http_client = httpx.AsyncClient()
        return cls(
            spreadsheet_id=spreadsheet_id,
            sheet_name=sheet_name,
            token_provider=GoogleServiceAccountTokenProvider(
                service_account_info=service_account_info, http_client=http_client
            ),
            http_client=http_client,
        )

    async def append(self, record: FulfillmentRecord) -> None:
        """Append a sale under the sheet's existing header row."""
        header = await self._read_header()
        rows: list[list[object]] = []
        if not header:
            header = DEFAULT_HEADER
            rows.append(list(DEFAULT_HEADER))
        rows.append(record_to_row(record, header))
        url = f"{self._values_url(self._quoted_sheet())}:append"
        await self._request(
            "POST",
            url,
            params={
                "valueInputOption": "USER_ENTERED",
                "insertDataOption": "INSERT_ROWS",
            },
            json={"values": rows},
        )
        _logger.info("Sale recorded in sheet: ref=%s", record.reference)

    async def list_records(self) -> list[FulfillmentRecord]:
        """Read every sale row back from the sheet."""
        data = await self._request("GET", self._values_url(self._quoted_sheet()))
        values = data.get("values", [])
        if not values:
            return []
        header, *rows = values
        records = []
        for row in rows:
            record = row_to_record(row, header)
            if record is None:
                _logger.warning("Skipping unreadable sheet row: %s", row)
                continue
            records.append(record)
        return records

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _read_header(self) -> list[str]:
        data = await self._request(
            "GET", self._values_url(f"{self._quoted_sheet()}!1:1")
        )
        values = data.get("values", [])
        return [str(cell) for cell in values[0]] if values else []

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
    ) -> dict[str, object]:
        token = await self.token_provider.get_access_token()
        try:
            response = await self.http_client.request(
                method,
                url,
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
                timeout=15,
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise SinkError(f"Sheets API {method} failed") from exc

    def _values_url(self, cell_range: str) -> str:
        return (
            f"{self.base_url}/spreadsheets/{self.spreadsheet_id}"
            f"/values/{quote(cell_range, safe='')}"
        )

    def _quoted_sheet(self) -> str:
        escaped = self.sheet_name.replace("'", "''")
        return f"'{escaped}'"


def record_to_row(record: FulfillmentRecord, header: list[str]) -> list[object]:
    """Return the record's cell values ordered to match ``header``."""
    row: list[object] = []
    for column in header:
        value_for = _COLUMN_VALUES.get(column.strip().lower())
        row.append(value_for(record) if value_for else "")
    return row


def row_to_record(row: list[object], header: list[str]) -> FulfillmentRecord | None:
    """Parse a sheet row back into a record, or return None if it is unusable."""
    cells = {
        column.strip().lower(): str(row[index]).strip()
        for index, column in enumerate(header)
        if index < len(row)
    }
    reference = cells.get("reference") or cells.get("ref")
    email = cells.get("email")
    raw_quantity = cells.get("quantity") or cells.get("qty")
    if not reference or not email or not raw_quantity:
        return None
    try:
        quantity = int(raw_quantity)
        amount = round(float(cells["total"]) * 100) if cells.get("total") else 0
    except ValueError:
        return None
    first_name = cells.get("first name")
    last_name = cells.get("last name")
    if not first_name and not last_name and cells.get("name"):
        first_name = cells["name"]
    return FulfillmentRecord(
        reference=reference,
        email=email,
        quantity=quantity,
        amount=amount,
        first_name=first_name or None,
        last_name=last_name or None,
        status=cells.get("status") or STATUS_PAID,
        created_at=_parse_timestamp(cells.get("timestamp") or cells.get("date")),
    )


def _parse_timestamp(raw: str | None) -> datetime:
    if raw:
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            pass
        else:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.fromtimestamp(0, tz=UTC)
