from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from grade_api.schemas.student import StudentResponse


class UploadResponse(BaseModel):
    message: str
    count: int
    students: list[StudentResponse]


class UploadHistoryResponse(BaseModel):
    id: int
    filename: str
    file_type: Literal["CSV", "Excel"]
    students_count: int
    upload_date: datetime
    file_size: int
    status: Literal["success", "error"]

    model_config = {"from_attributes": True}
