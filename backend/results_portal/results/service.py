import asyncio
import logging
from typing import Dict, List, Union

from fastapi import Depends

from results_portal.exceptions import SheetNotFoundError
from results_portal.results import ranking
from results_portal.results.schemas import ResultAbsent, ResultFound, StudentResult
from results_portal.sheets.client import SheetAccessor, get_sheet_accessor, sheet_range

logger = logging.getLogger(__name__)

# Tabs read in parallel during an attendance check; they share one gspread session
MAX_CONCURRENT_READS = 4


class ResultsService:
    """Looks up student results in a spreadsheet where every tab is one test."""

    def __init__(self, accessor: SheetAccessor, max_concurrent_reads: int = MAX_CONCURRENT_READS):
        self.accessor = accessor
        self.max_concurrent_reads = max_concurrent_reads

    async def _run(self, func, *args):
        # gspread is blocking, keep it off the event loop
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    async def list_tests(self) -> List[str]:
        return await self._run(self.accessor.list_tabs)

    async def get_sheet_data(self, sheet_name: str) -> List[List[str]]:
        return await self._run(self.accessor.read_range, sheet_range(sheet_name))

    async def _attended(self, sheet_name: str, roll_number: str, semaphore: asyncio.Semaphore) -> bool:
        try:
            async with semaphore:
                table = await self.get_sheet_data(sheet_name)
        except Exception as e:
            logger.warning(f"Attendance check failed for sheet '{sheet_name}', marking absent: {e}")
            return False

        if not table:
            return False
        return ranking.find_student_by_roll_number(table, roll_number) is not None

    async def check_attendance(self, roll_number: str) -> Dict[str, bool]:
        """
        Check in which tests a roll number appears.

        Tabs are fetched concurrently, at most ``max_concurrent_reads`` at a
        time. A tab that is empty or fails to load counts as absent and does not
        abort the others.
        """
        sheet_names = await self.list_tests()
        semaphore = asyncio.Semaphore(self.max_concurrent_reads)
        results = await asyncio.gather(
            *(self._attended(sheet_name, roll_number, semaphore) for sheet_name in sheet_names)
        )
        attendance = dict(zip(sheet_names, results))
        logger.info(f"Attendance for {roll_number}: {sum(results)} of {len(sheet_names)} tests")
        return attendance

    async def get_result(self, sheet_name: str, roll_number: str) -> Union[ResultFound, ResultAbsent]:
        table = await self.get_sheet_data(sheet_name)
        if not table:
            raise SheetNotFoundError("Sheet is empty or not found")

        headers = table[0]
        match = ranking.find_student_by_roll_number(table, roll_number)
        if match is None:
            logger.info(f"Roll number {roll_number} not found in sheet '{sheet_name}'")
            return ResultAbsent()

        student_data = ranking.parse_student_data(match.row, headers)

        rank = None
        score_column = ranking.find_score_column(headers)
        if score_column >= 0:
            rank = ranking.calculate_rank(table, match.index, score_column)

        total_students = len(table) - 1
        percentile = ranking.calculate_percentile(rank, total_students)

        roll_header = headers[0] if headers else ""
        student = StudentResult(
            name=ranking.first_present(student_data, "Name", "Student Name"),
            roll_number=student_data.get(roll_header) or roll_number,
            score=ranking.first_present(student_data, "Total Score", "Score"),
            accuracy=ranking.first_present(student_data, "Accuracy", "Accuracy %"),
            rank=rank,
            percentile=percentile,
            top_percent=None if percentile is None else 100 - percentile,
            total_students=total_students,
            average_q_per_hour=ranking.first_present(student_data, "Average Q/hour", "Avg Q/hour"),
            attempt_status=ranking.first_present(student_data, "Attempt Status", "Status"),
            raw_data=student_data,
        )
        return ResultFound(student=student)


def get_results_service(accessor: SheetAccessor = Depends(get_sheet_accessor)) -> ResultsService:
    """FastAPI dependency provider for the results service."""
    return ResultsService(accessor)
