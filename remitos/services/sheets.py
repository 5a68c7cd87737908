from __future__ import annotations

from typing import Any, List

from google.oauth2 import service_account
from googleapiclient.discovery import build

from remitos.constants import SHEETS_SCOPES


def get_sheets_client(credentials_info: dict[str, Any]):
    """
    Read-only Sheets v4 client. Built on every call, nothing is cached.
    """
    creds = service_account.Credentials.from_service_account_info(
        credentials_info, scopes=SHEETS_SCOPES
    )
    return build("sheets", "v4", credentials=creds, cache_discovery=False)


def read_range(client, spreadsheet_id: str, cell_range: str) -> List[List[str]]:
    resp = (
        client.spreadsheets()
        .values()
        .get(spreadsheetId=spreadsheet_id, range=cell_range)
        .execute()
    )
    return resp.get("values") or []
