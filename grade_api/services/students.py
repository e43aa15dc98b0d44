from sqlalchemy.orm import Session

from grade_api.core.database import Database
from grade_api.core.errors import ConnectivityError, NotFoundError, ValidationError
from grade_api.core.repository import students
from grade_api.models.student import StudentRecord
from grade_api.schemas.student import StudentUpdateRequest
from grade_api.services.normalizer import compute_percentage


def require_connection(database: Database) -> None:
    if not database.is_connected():
        raise ConnectivityError("Database not connected")


def list_students(db: Session) -> list[StudentRecord]:
    return students.find_all_sorted(db, "created_at")


def update_student(db: Session, record_id: int, payload: StudentUpdateRequest) -> StudentRecord:
    student = students.get(db, record_id)
    if student is None:
        raise NotFoundError(error="Student not found")

    patch = payload.model_dump(exclude_none=True, exclude={"percentage"})
    total_marks = patch.get("total_marks", student.total_marks)
    marks_obtained = patch.get("marks_obtained", student.marks_obtained)
    if not total_marks:
        raise ValidationError("total_marks must be non-zero")
    # never trust a client percentage, derive it from the marks being written
    patch["percentage"] = compute_percentage(marks_obtained, total_marks)

    student = students.update_by_id(db, record_id, patch)
    db.commit()
    return student


def delete_student(db: Session, record_id: int) -> dict:
    if not students.delete_by_id(db, record_id):
        raise NotFoundError(error="Student not found")
    db.commit()
    return {"message": "Student deleted successfully"}


def recompute_percentages(db: Session) -> int:
    """Re-derive every stored percentage; returns how many rows changed."""
    changed = 0
    for student in students.find_all_sorted(db, "id", descending=False):
        if not student.total_marks:
            continue
        percentage = compute_percentage(student.marks_obtained, student.total_marks)
        if student.percentage != percentage:
            student.percentage = percentage
            changed += 1
    db.commit()
    return changed
