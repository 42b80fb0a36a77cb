import json
from functools import cached_property
from typing import Any

import httplib2
from anystore.exceptions import DoesNotExist
from anystore.io import smart_read
from anystore.logging import BoundLogger, get_logger
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from queue_mincer.exceptions import AuthenticationError, StorageError
from queue_mincer.loaders.base import BaseLoader
from queue_mincer.model import Items
from queue_mincer.settings import QueueSettings
from queue_mincer.util import coerce_cell, dump_cell

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def make_range(sheet: str) -> str:
    """
    Quote a sheet title for A1 notation

    Examples:
        >>> make_range("Tasks")
        "'Tasks'"
        >>> make_range("Bob's list")
        "'Bob''s list'"
    """
    return "'{}'".format(sheet.replace("'", "''"))


def make_items(rows: list[list[Any]]) -> Items:
    """Convert sheet rows (first row = headers) into items. Missing trailing
    cells become `None`."""
    if not rows:
        return []
    headers, *rows = rows
    items = []
    for row in rows:
        item = {}
        for ix, header in enumerate(headers):
            item[header] = coerce_cell(row[ix]) if ix < len(row) else None
        items.append(item)
    return items


def make_rows(items: Items) -> list[list[Any]]:
    """Convert items into sheet rows with a header row from the first item"""
    if not items:
        return []
    headers = list(items[0].keys())
    rows: list[list[Any]] = [headers]
    for item in items:
        row = []
        for header in headers:
            value = item.get(header)
            if value is None or isinstance(value, (dict, list, tuple)):
                value = dump_cell(value)
            row.append(value)
        rows.append(row)
    return rows


class SheetsLoader(BaseLoader):
    """
    Loader for a Google spreadsheet: each sheet (tab) is a template, its first
    row holds the headers.

    The spreadsheet and authentication are read from a local credentials
    json file with a `spreadsheetId` and either an `apiKey` or a service
    account key (`client_email`, `private_key`).
    """

    name = "googleSheet"

    def __init__(self, settings: QueueSettings, service: Any | None = None) -> None:
        super().__init__(settings)
        self.service = service
        self.spreadsheet_id: str | None = settings.spreadsheet_id
        self.sheets: list[str] = []

    @cached_property
    def log(self) -> BoundLogger:
        name = f"queue_mincer.{self.__class__.__name__}"
        return get_logger(name, loader=self.name)

    def load_credentials(self) -> dict[str, Any]:
        uri = self.settings.credentials_uri
        try:
            credentials = json.loads(smart_read(uri, "r"))
        except (DoesNotExist, FileNotFoundError) as e:
            raise AuthenticationError(f"Credentials file not found: `{uri}`", uri) from e
        except json.JSONDecodeError as e:
            raise AuthenticationError(f"Invalid credentials file: `{uri}`", uri) from e
        if not isinstance(credentials, dict):
            raise AuthenticationError(f"Invalid credentials file: `{uri}`", uri)
        return credentials

    def make_service(self, credentials: dict[str, Any]) -> Any:
        uri = self.settings.credentials_uri
        if credentials.get("apiKey"):
            return build(
                "sheets", "v4", developerKey=credentials["apiKey"], cache_discovery=False
            )
        if credentials.get("client_email") and credentials.get("private_key"):
            info = {k: v for k, v in credentials.items() if k != "spreadsheetId"}
            info.setdefault("token_uri", "https://oauth2.googleapis.com/token")
            try:
                creds = service_account.Credentials.from_service_account_info(
                    info, scopes=SCOPES
                )
            except (GoogleAuthError, ValueError) as e:
                raise AuthenticationError(
                    f"Invalid service account credentials: `{uri}`", uri
                ) from e
            return build("sheets", "v4", credentials=creds, cache_discovery=False)
        raise AuthenticationError(
            "Invalid credentials format, provide `apiKey` or "
            f"`client_email` and `private_key`: `{uri}`",
            uri,
        )

    def setup(self) -> None:
        credentials = self.load_credentials()
        self.spreadsheet_id = self.spreadsheet_id or credentials.get("spreadsheetId")
        if not self.spreadsheet_id:
            raise AuthenticationError(
                f"Missing `spreadsheetId` in credentials: `{self.settings.credentials_uri}`",
                self.settings.credentials_uri,
            )
        if self.service is None:
            self.service = self.make_service(credentials)
        self.log = self.log.bind(spreadsheet=self.spreadsheet_id)
        self.sheets = self.fetch_sheets()
        self.log.debug("Available sheets", sheets=self.sheets)
        self.active = self.resolve_active(self.sheets)
        self.ensure_schema(self.get_items())

    def execute(self, request: Any, sheet: str | None = None) -> dict[str, Any]:
        try:
            return request.execute()
        except HttpError as e:
            if e.resp.status in (401, 403):
                raise AuthenticationError(
                    f"Access denied to spreadsheet `{self.spreadsheet_id}`", sheet
                ) from e
            raise StorageError(
                f"Spreadsheet request failed for sheet `{sheet}`: {e}", sheet
            ) from e
        except GoogleAuthError as e:
            raise AuthenticationError(
                f"Authentication failed for spreadsheet `{self.spreadsheet_id}`", sheet
            ) from e
        except (OSError, httplib2.HttpLib2Error) as e:
            raise StorageError(
                f"Spreadsheet request failed for sheet `{sheet}`: {e}", sheet
            ) from e

    def fetch_sheets(self) -> list[str]:
        request = self.service.spreadsheets().get(spreadsheetId=self.spreadsheet_id)
        res = self.execute(request)
        titles = (s.get("properties", {}).get("title") for s in res.get("sheets", []))
        return [t for t in titles if t]

    def list_templates(self) -> list[str]:
        return list(self.sheets)

    def has_template(self, template_id: str) -> bool:
        return template_id in self.sheets

    def read_template(self, template_id: str) -> Items:
        return self.read(template_id)

    def read(self, sheet: str) -> Items:
        request = (
            self.service.spreadsheets()
            .values()
            .get(spreadsheetId=self.spreadsheet_id, range=make_range(sheet))
        )
        res = self.execute(request, sheet)
        return make_items(res.get("values", []))

    def ensure_sheet(self, sheet: str) -> None:
        if sheet in self.sheets:
            return
        body = {"requests": [{"addSheet": {"properties": {"title": sheet}}}]}
        request = self.service.spreadsheets().batchUpdate(
            spreadsheetId=self.spreadsheet_id, body=body
        )
        self.execute(request, sheet)
        self.sheets.append(sheet)
        self.log.info("Created sheet", sheet=sheet)

    def write(self, sheet: str, items: Items) -> None:
        self.ensure_sheet(sheet)
        values = self.service.spreadsheets().values()
        self.execute(
            values.clear(
                spreadsheetId=self.spreadsheet_id, range=make_range(sheet), body={}
            ),
            sheet,
        )
        rows = make_rows(items)
        if rows:
            self.execute(
                values.update(
                    spreadsheetId=self.spreadsheet_id,
                    range=f"{make_range(sheet)}!A1",
                    valueInputOption="RAW",
                    body={"values": rows},
                ),
                sheet,
            )
        self.log.debug("Saved items", sheet=sheet, items=len(items))

    def get_items(self) -> Items:
        sheet = self.resolve_active(self.sheets)
        if sheet not in self.sheets:
            return []
        return self.read(sheet)

    def save_items(self, items: Items) -> None:
        self.write(self.resolve_active(self.sheets), items)
