import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from results_portal.exceptions import InvalidRequestError, ResultsPortalError
from results_portal.results.schemas import AttendanceResponse, ErrorResponse, SheetListResponse
from results_portal.results.service import ResultsService, get_results_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["sheets"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

INVALID_ACTION_MESSAGE = 'Invalid action. Use "list", "get", or "check-attendance"'


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


@router.get("/sheets")
async def sheets_endpoint(
    action: Optional[str] = None,
    roll_number: Optional[str] = Query(None, alias="rollNumber"),
    sheet: Optional[str] = None,
    service: ResultsService = Depends(get_results_service),
):
    """
    Single entry point used by the frontend.

    - ``action=list``: names of all tests (spreadsheet tabs)
    - ``action=check-attendance&rollNumber=...``: test name -> attended
    - ``action=get&sheet=...&rollNumber=...``: the student's result with rank
      and percentile, or ``found: false`` when they were absent
    """
    roll_number = _clean(roll_number)

    try:
        if action == "list":
            return SheetListResponse(sheets=await service.list_tests())

        if action == "check-attendance":
            if not roll_number:
                raise InvalidRequestError("Missing roll number")
            return AttendanceResponse(attendance=await service.check_attendance(roll_number))

        if action == "get":
            if not sheet or not roll_number:
                raise InvalidRequestError("Missing sheet name or roll number")
            return await service.get_result(sheet, roll_number)

        raise InvalidRequestError(INVALID_ACTION_MESSAGE)

    except ResultsPortalError:
        raise
    except Exception as e:
        logger.error(f"Google Sheets API error: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": str(e) or "Failed to fetch data from Google Sheets"},
        )
