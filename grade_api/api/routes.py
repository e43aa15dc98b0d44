import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from grade_api.core.database import Database, get_database, get_db
from grade_api.core.errors import ValidationError
from grade_api.schemas.common import MessageResponse
from grade_api.schemas.student import StudentResponse, StudentUpdateRequest
from grade_api.schemas.upload import UploadHistoryResponse, UploadResponse
from grade_api.services.students import (
    delete_student,
    list_students,
    require_connection,
    update_student,
)
from grade_api.services.uploads import (
    UploadedFile,
    check_media_type,
    list_upload_history,
    replace_students,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/upload", response_model=UploadResponse)
def upload_endpoint(
    request: Request,
    file: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    database: Database = Depends(get_database),
):
    if file is None:
        logger.info("No file in request")
        raise ValidationError(error="No file uploaded")
    content_type = check_media_type(file.content_type)

    settings = request.app.state.settings
    data = file.file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413, detail=f"File exceeds {settings.max_upload_mb} MB limit."
        )

    upload = UploadedFile(
        filename=file.filename or "upload",
        content_type=content_type,
        data=data,
    )
    created = replace_students(db, database, upload)
    return UploadResponse(
        message="File uploaded successfully",
        count=len(created),
        students=[StudentResponse.model_validate(s) for s in created],
    )


# ── Students ──────────────────────────────────────────────────────────────────

@router.get("/students", response_model=list[StudentResponse])
def list_students_endpoint(
    db: Session = Depends(get_db),
    database: Database = Depends(get_database),
):
    require_connection(database)
    found = list_students(db)
    logger.info("Found students: %d", len(found))
    return found


@router.put("/students/{record_id}", response_model=StudentResponse)
def update_student_endpoint(
    record_id: int,
    payload: StudentUpdateRequest,
    db: Session = Depends(get_db),
):
    return update_student(db, record_id, payload)


@router.delete("/students/{record_id}", response_model=MessageResponse)
def delete_student_endpoint(record_id: int, db: Session = Depends(get_db)):
    return delete_student(db, record_id)


# ── Upload history ────────────────────────────────────────────────────────────

@router.get("/upload-history", response_model=list[UploadHistoryResponse])
def upload_history_endpoint(
    request: Request,
    db: Session = Depends(get_db),
    database: Database = Depends(get_database),
):
    require_connection(database)
    history = list_upload_history(db, request.app.state.settings.history_limit)
    logger.info("Found upload history: %d", len(history))
    return history
