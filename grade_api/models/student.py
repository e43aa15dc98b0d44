from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String

from grade_api.models.base import Base


class StudentRecord(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String, nullable=False, unique=True, index=True)
    student_name = Column(String, nullable=False)
    total_marks = Column(Float, nullable=False)
    marks_obtained = Column(Float, nullable=False)
    percentage = Column(Float, nullable=False)  # derived, see compute_percentage
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
