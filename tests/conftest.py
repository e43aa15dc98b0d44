# tests/conftest.py

from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from grade_api.core.config import Settings
from grade_api.core.database import Database
from grade_api.main import create_app

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SAMPLE_CSV = (
    "Student_ID,Student_Name,Total_Marks,Marks_Obtained\n"
    "S1,Alice,100,80\n"
    "S2,Bob,50,40\n"
)


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("MONGODB_URI", raising=False)
    return Settings(database_url="sqlite://", _env_file=None)


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.init()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def upload_csv(client):
    def upload(content: str, filename: str = "grades.csv"):
        return client.post(
            "/api/upload",
            files={"file": (filename, content.encode("utf-8"), CSV_MEDIA_TYPE)},
        )

    return upload


@pytest.fixture
def xlsx_bytes():
    def build(rows: list[list]) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        for row in rows:
            sheet.append(row)
        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    return build
