from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Integer, String

from grade_api.models.base import Base


class UploadHistory(Base):
    __tablename__ = "upload_history"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String, nullable=False)
    file_type = Column(String, nullable=False)  # CSV / Excel
    students_count = Column(Integer, nullable=False)
    upload_date = Column(DateTime, default=datetime.utcnow, index=True)
    file_size = Column(Integer, nullable=False)
    status = Column(
        Enum("success", "error", name="upload_status", native_enum=False),
        nullable=False,
        default="success",
    )
