from datetime import datetime

from pydantic import BaseModel, Field


class StudentBase(BaseModel):
    student_id: str
    student_name: str
    total_marks: float
    marks_obtained: float
    percentage: float


class StudentResponse(StudentBase):
    id: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class StudentUpdateRequest(BaseModel):
    """All fields optional; only provided fields are written.

    ``percentage`` is accepted for compatibility but always recomputed.
    """

    student_id: str | None = Field(None, min_length=1)
    student_name: str | None = Field(None, min_length=1)
    total_marks: float | None = None
    marks_obtained: float | None = None
    percentage: float | None = None
