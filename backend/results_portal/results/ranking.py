"""
Roll number matching, rank and percentile over a sheet table.

A table is the raw 2-D array returned by the spreadsheet: row 0 holds the
headers and every following row is one student. Cells are positional and a
short row simply lacks its trailing cells.
"""
import math
import re
from typing import Dict, List, NamedTuple, Optional, Sequence

ROLL_NUMBER_COLUMN = 0

# Leading numeric prefix, e.g. "12", "-3.5", ".75", "9 marks"
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class StudentMatch(NamedTuple):
    row: List[str]
    index: int


def normalize_roll_number(roll_number: str) -> str:
    return roll_number.strip().upper()


def _cell(row: Sequence[str], index: int) -> str:
    if index < 0 or index >= len(row):
        return ""
    value = row[index]
    return "" if value is None else str(value)


def find_student_by_roll_number(table: List[List[str]], roll_number: str) -> Optional[StudentMatch]:
    """
    Find the first data row whose roll number matches.

    A cell matches when it equals the query after trim/upper-case, or when it
    is the query followed by an ``@account`` suffix (``OPEN183@user``).

    Returns:
        StudentMatch with the row and its index in ``table``, or None
    """
    if not table:
        return None

    query = normalize_roll_number(roll_number)

    for index in range(1, len(table)):
        row = table[index]
        raw_value = _cell(row, ROLL_NUMBER_COLUMN)
        if not row or not raw_value:
            continue

        value = normalize_roll_number(raw_value)
        if value == query or value.startswith(query + "@"):
            return StudentMatch(row=row, index=index)

    return None


def parse_score(value: Optional[str]) -> Optional[float]:
    """
    Parse a score cell.

    ``"12"`` -> 12.0 and ``"9/15"`` -> 9.0 (only the numerator counts). A
    fraction with a blank numerator reads as 0. Cells without a numeric
    prefix return None.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    if "/" in text:
        text = text.split("/", 1)[0].strip() or "0"

    match = _NUMBER_PREFIX.match(text)
    if not match:
        return None
    return float(match.group(0))


def collect_scores(table: List[List[str]], score_column: int) -> List[tuple]:
    """Return ``(score, row_index)`` pairs for every parseable data row."""
    scores = []
    for index in range(1, len(table)):
        row = table[index]
        if not row:
            continue
        score = parse_score(_cell(row, score_column))
        if score is not None:
            scores.append((score, index))
    return scores


def calculate_rank(table: List[List[str]], student_index: int, score_column: int) -> Optional[int]:
    """
    1-based rank of ``student_index`` by descending score.

    Ties keep the original row order. A student whose own score does not
    parse gets the count of parsed scores; with no parseable score at all
    there is no rank.
    """
    if not table or len(table) < 2:
        return 1

    scores = collect_scores(table, score_column)
    if not scores:
        return None

    # sorted() is stable and rows were collected top to bottom
    ranked = sorted(scores, key=lambda item: -item[0])

    for position, (_, index) in enumerate(ranked, start=1):
        if index == student_index:
            return position
    return len(ranked)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_percentile(rank: Optional[int], total_students: int) -> Optional[int]:
    """Percentage of the cohort ranked below ``rank`` (rank 2 of 45 -> 96)."""
    if rank is None or total_students <= 0:
        return None
    return round_half_up(((total_students - rank) / total_students) * 100)


def find_score_column(headers: Sequence[str]) -> int:
    for index, header in enumerate(headers):
        lowered = (header or "").lower()
        if "total" in lowered and "score" in lowered:
            return index
    return -1


def parse_student_data(row: Sequence[str], headers: Sequence[str]) -> Dict[str, str]:
    return {header: _cell(row, index) for index, header in enumerate(headers)}


def first_present(data: Dict[str, str], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return ""
