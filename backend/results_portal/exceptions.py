from typing import Optional


class ResultsPortalError(Exception):
    """Base error rendered to clients as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(ResultsPortalError):
    """Spreadsheet id or service account credentials are missing."""


class SheetsAccessError(ResultsPortalError):
    """The spreadsheet service rejected or failed a request."""


class SheetNotFoundError(ResultsPortalError):
    status_code = 404


class InvalidRequestError(ResultsPortalError):
    status_code = 400
