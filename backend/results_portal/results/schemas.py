from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SheetListResponse(BaseModel):
    sheets: List[str]


class AttendanceResponse(BaseModel):
    attendance: Dict[str, bool]


class StudentResult(CamelModel):
    name: str = ""
    roll_number: str
    score: str = ""
    accuracy: str = ""
    rank: Optional[int] = None
    percentile: Optional[int] = None
    top_percent: Optional[int] = None
    total_students: int
    average_q_per_hour: str = ""
    attempt_status: str = ""
    raw_data: Dict[str, str]


class ResultFound(BaseModel):
    found: Literal[True] = True
    student: StudentResult


class ResultAbsent(BaseModel):
    found: Literal[False] = False
    message: str = "You were absent for this test."


class ErrorResponse(BaseModel):
    error: str
