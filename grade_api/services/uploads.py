import logging
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from grade_api.core.database import Database
from grade_api.core.errors import ConnectivityError, GradeApiError, UploadFailedError, ValidationError
from grade_api.core.repository import students, upload_history
from grade_api.models.student import StudentRecord
from grade_api.models.upload_history import UploadHistory
from grade_api.services.normalizer import process_csv_file, process_excel_file

logger = logging.getLogger(__name__)

ACCEPTED_MEDIA_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/csv",
    "application/vnd.ms-excel",
}


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def file_type(self) -> str:
        return "CSV" if "csv" in self.content_type else "Excel"


def media_type(content_type: str | None) -> str:
    """Declared media type without parameters such as ``charset``."""
    return (content_type or "").split(";")[0].strip().lower()


def check_media_type(content_type: str | None) -> str:
    mime = media_type(content_type)
    if mime not in ACCEPTED_MEDIA_TYPES:
        raise ValidationError(
            "Invalid file type. Only Excel and CSV files allowed.",
            error="Invalid file type",
        )
    return mime


def select_parser(content_type: str) -> Callable[[bytes], list[dict]]:
    if "sheet" in content_type or "excel" in content_type:
        return process_excel_file
    if "csv" in content_type:
        return process_csv_file
    raise ValidationError("Unsupported file format", error="Unsupported file format")


def replace_students(
    db: Session, database: Database, upload: UploadedFile
) -> list[StudentRecord]:
    """Parse the upload and swap it in for the current student set.

    The delete, the insert and the success history entry share one
    transaction. On any failure that transaction is rolled back and an error
    entry is written on its own before ``UploadFailedError`` is raised.
    """
    logger.info(
        "Upload received: filename=%s content_type=%s size=%d",
        upload.filename,
        upload.content_type,
        upload.size,
    )
    parse = select_parser(upload.content_type)
    try:
        records = parse(upload.data)
        logger.info("Processed students: %d", len(records))

        if not database.is_connected():
            raise ConnectivityError("Database not connected")

        removed = students.delete_all(db)
        created = students.insert_many(db, records)
        upload_history.create(
            db,
            filename=upload.filename,
            file_type=upload.file_type,
            students_count=len(created),
            file_size=upload.size,
            status="success",
        )
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.error("Upload error: %s", exc)
        _record_failure(db, upload)
        details = exc.details if isinstance(exc, GradeApiError) else str(exc)
        raise UploadFailedError(details) from exc

    logger.info(
        "Replaced %d student(s) with %d from %s and recorded history",
        removed,
        len(created),
        upload.filename,
    )
    return created


def _record_failure(db: Session, upload: UploadedFile) -> None:
    # best effort: the request already failed, a second failure is only logged
    try:
        upload_history.create(
            db,
            filename=upload.filename,
            file_type=upload.file_type,
            students_count=0,
            file_size=upload.size,
            status="error",
        )
        db.commit()
    except (SQLAlchemyError, GradeApiError):
        db.rollback()
        logger.exception("Failed to save upload history")


def list_upload_history(db: Session, limit: int = 10) -> list[UploadHistory]:
    return upload_history.find_limited(db, "upload_date", limit)
