"""
Google Sheets access for the results portal.

The rest of the application only depends on the ``SheetAccessor`` capability
(list the tabs, read a range). ``GoogleSheetsAccessor`` implements it with
gspread on top of a google-auth service account.
"""
import logging
import threading
from typing import Any, List, Optional, Protocol

from fastapi import Depends
import gspread
from gspread.exceptions import APIError, SpreadsheetNotFound
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from results_portal.config.settings import Settings, SheetsConfig, get_settings
from results_portal.exceptions import SheetsAccessError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]
TOKEN_URI = "https://oauth2.googleapis.com/token"
DEFAULT_COLUMNS = "A:Z"


class SheetAccessor(Protocol):
    def list_tabs(self) -> List[str]:
        ...

    def read_range(self, range_name: str) -> List[List[str]]:
        ...


def sheet_range(sheet_name: str, columns: str = DEFAULT_COLUMNS) -> str:
    """Build an A1 range such as ``'Mock Test 1'!A:Z`` for a whole tab."""
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{columns}"


def normalize_private_key(private_key: str) -> str:
    # Keys pasted into env files usually carry literal "\n" sequences
    return private_key.replace("\\n", "\n")


def _api_error_message(exc: APIError) -> str:
    response = getattr(exc, "response", None)
    try:
        return response.json()["error"]["message"]
    except (AttributeError, KeyError, TypeError, ValueError):
        return str(exc)


def describe_api_error(exc: APIError, config: SheetsConfig) -> SheetsAccessError:
    """Map a Sheets API error to a message a maintainer can act on."""
    status_code = getattr(getattr(exc, "response", None), "status_code", None)
    detail = _api_error_message(exc)

    if status_code == 403:
        message = (
            "Access denied to the spreadsheet. Share it with "
            f"{config.service_account_email} (Viewer access is enough)."
        )
    elif status_code == 404:
        message = "Spreadsheet not found. Check GOOGLE_SPREADSHEET_ID."
    elif status_code == 400 and "parse range" in detail.lower():
        message = f"Sheet not found: {detail}"
    else:
        message = f"Google Sheets API error: {detail}"
    return SheetsAccessError(message)


class GoogleSheetsAccessor:
    """Read-only accessor for one spreadsheet, built from an explicit config."""

    def __init__(self, config: SheetsConfig, client: Optional[Any] = None):
        self.config = config
        self._spreadsheet = None
        self._lock = threading.Lock()

        if client is None:
            client = self._authorize(config)
        self.client = client

    @staticmethod
    def _authorize(config: SheetsConfig):
        info = {
            "type": "service_account",
            "client_email": config.service_account_email,
            "private_key": normalize_private_key(config.private_key),
            "token_uri": TOKEN_URI,
        }
        try:
            credentials = Credentials.from_service_account_info(info, scopes=SCOPES)
        except ValueError as e:
            logger.error(f"Could not load service account key: {e}")
            raise SheetsAccessError(
                "Invalid GOOGLE_PRIVATE_KEY format. Paste the full PEM key including "
                "the BEGIN/END PRIVATE KEY lines."
            ) from e
        return gspread.authorize(credentials)

    def _open(self):
        with self._lock:
            if self._spreadsheet is None:
                logger.info(f"Opening spreadsheet {self.config.spreadsheet_id}")
                try:
                    self._spreadsheet = self.client.open_by_key(self.config.spreadsheet_id)
                except SpreadsheetNotFound as e:
                    raise SheetsAccessError("Spreadsheet not found. Check GOOGLE_SPREADSHEET_ID.") from e
                except APIError as e:
                    raise describe_api_error(e, self.config) from e
                except GoogleAuthError as e:
                    raise SheetsAccessError(f"Google authentication failed: {e}") from e
            return self._spreadsheet

    def list_tabs(self) -> List[str]:
        spreadsheet = self._open()
        try:
            worksheets = spreadsheet.worksheets()
        except APIError as e:
            raise describe_api_error(e, self.config) from e
        except GoogleAuthError as e:
            raise SheetsAccessError(f"Google authentication failed: {e}") from e
        return [worksheet.title or "" for worksheet in worksheets]

    def read_range(self, range_name: str) -> List[List[str]]:
        spreadsheet = self._open()
        logger.info(f"Reading range {range_name}")
        try:
            response = spreadsheet.values_get(range_name)
        except APIError as e:
            raise describe_api_error(e, self.config) from e
        except GoogleAuthError as e:
            raise SheetsAccessError(f"Google authentication failed: {e}") from e

        values = response.get("values") or []
        return [["" if cell is None else str(cell) for cell in row] for row in values]


def get_sheet_accessor(settings: Settings = Depends(get_settings)) -> SheetAccessor:
    """FastAPI dependency provider for the spreadsheet accessor."""
    return GoogleSheetsAccessor(settings.sheets_config())
