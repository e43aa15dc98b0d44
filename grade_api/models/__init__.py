from grade_api.models.student import StudentRecord
from grade_api.models.upload_history import UploadHistory

__all__ = ["StudentRecord", "UploadHistory"]
