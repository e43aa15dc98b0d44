from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    message: str
    status: str
    # key name kept for existing clients; reports the SQL database
    mongoStatus: str
