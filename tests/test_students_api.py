# tests/test_students_api.py

from tests.conftest import SAMPLE_CSV


def _ids_by_student(client):
    return {s["student_id"]: s["id"] for s in client.get("/api/students").json()}


def test_list_students_newest_first(client, upload_csv):
    upload_csv(SAMPLE_CSV)

    students = client.get("/api/students").json()

    assert [s["student_id"] for s in students] == ["S2", "S1"]


def test_list_students_empty(client):
    response = client.get("/api/students")

    assert response.status_code == 200
    assert response.json() == []


def test_update_recomputes_percentage(client, upload_csv):
    upload_csv(SAMPLE_CSV)
    record_id = _ids_by_student(client)["S1"]

    response = client.put(
        f"/api/students/{record_id}",
        json={"total_marks": 50, "marks_obtained": 25, "percentage": 99.5},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["percentage"] == 50.0
    assert body["total_marks"] == 50
    assert body["marks_obtained"] == 25
    assert body["student_name"] == "Alice"


def test_update_merges_other_fields(client, upload_csv):
    upload_csv(SAMPLE_CSV)
    record_id = _ids_by_student(client)["S2"]

    response = client.put(f"/api/students/{record_id}", json={"student_name": "Robert"})

    body = response.json()
    assert body["student_name"] == "Robert"
    assert body["percentage"] == 80.0


def test_update_only_marks_obtained_uses_stored_total(client, upload_csv):
    upload_csv(SAMPLE_CSV)
    record_id = _ids_by_student(client)["S2"]

    body = client.put(f"/api/students/{record_id}", json={"marks_obtained": 10}).json()

    assert body["percentage"] == 20.0


def test_update_zero_total_marks_rejected(client, upload_csv):
    upload_csv(SAMPLE_CSV)
    record_id = _ids_by_student(client)["S1"]

    response = client.put(
        f"/api/students/{record_id}", json={"total_marks": 0, "marks_obtained": 0}
    )

    assert response.status_code == 400
    student = next(s for s in client.get("/api/students").json() if s["id"] == record_id)
    assert student["total_marks"] == 100


def test_update_duplicate_student_id(client, upload_csv):
    upload_csv(SAMPLE_CSV)
    record_id = _ids_by_student(client)["S1"]

    response = client.put(f"/api/students/{record_id}", json={"student_id": "S2"})

    assert response.status_code == 500
    assert sorted(_ids_by_student(client)) == ["S1", "S2"]


def test_update_missing_student(client, upload_csv):
    upload_csv(SAMPLE_CSV)
    before = client.get("/api/students").json()

    response = client.put("/api/students/9999", json={"total_marks": 50, "marks_obtained": 25})

    assert response.status_code == 404
    assert response.json() == {"error": "Student not found"}
    assert client.get("/api/students").json() == before


def test_update_non_numeric_id(client):
    response = client.put("/api/students/abc", json={"student_name": "X"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_delete_student(client, upload_csv):
    upload_csv(SAMPLE_CSV)
    record_id = _ids_by_student(client)["S1"]

    response = client.delete(f"/api/students/{record_id}")

    assert response.status_code == 200
    assert response.json() == {"message": "Student deleted successfully"}
    assert list(_ids_by_student(client)) == ["S2"]


def test_delete_missing_student(client, upload_csv):
    upload_csv(SAMPLE_CSV)

    response = client.delete("/api/students/9999")

    assert response.status_code == 404
    assert response.json() == {"error": "Student not found"}
    assert len(client.get("/api/students").json()) == 2


def test_upload_history_keeps_latest_ten(client, upload_csv):
    for n in range(12):
        upload_csv(SAMPLE_CSV, filename=f"upload{n}.csv")

    history = client.get("/api/upload-history").json()

    assert len(history) == 10
    assert history[0]["filename"] == "upload11.csv"
    assert history[-1]["filename"] == "upload2.csv"


def test_list_students_when_database_disconnected(client, database, monkeypatch):
    monkeypatch.setattr(database, "is_connected", lambda: False)

    response = client.get("/api/students")

    assert response.status_code == 500
    assert response.json()["error"] == "Database connection error"


def test_health(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Student Grade Management API is running!",
        "status": "OK",
        "mongoStatus": "Connected",
    }


def test_unknown_route(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Route not found"}
