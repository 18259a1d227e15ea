from conftest import STUDENT_A, STUDENT_C, TEACHER_ID, auth


def test_create_session(client, seeded):
    resp = client.post(
        "/v1/attendance/sessions",
        json={"group_id": 3, "date": "2025-09-02", "topic": "Clases y objetos"},
        headers=auth(TEACHER_ID),
    )
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["group_id"] == 3
    assert body["data"]["date"] == "2025-09-02"


def test_create_session_unknown_group(client, seeded):
    body = client.post(
        "/v1/attendance/sessions", json={"group_id": 99, "date": "2025-09-02"}, headers=auth(TEACHER_ID)
    ).json()
    assert body["success"] is False


def test_session_attendees(client, seeded):
    data = client.get("/v1/attendance/sessions/1/attendees", headers=auth(TEACHER_ID)).json()["data"]
    assert [a["student_id"] for a in data] == [10, 11, 12]
    assert data[2]["method"] == "manual"


def test_student_stats(client, seeded):
    data = client.get(f"/v1/attendance/stats/1/{STUDENT_A}", headers=auth(TEACHER_ID)).json()["data"]
    assert data == {"total_sessions": 2, "attended": 2, "percentage": 100, "absences": 0}

    # 회차 없는 그룹
    data = client.get(f"/v1/attendance/stats/3/{STUDENT_C}", headers=auth(TEACHER_ID)).json()["data"]
    assert data == {"total_sessions": 0, "attended": 0, "percentage": 0, "absences": 0}


def test_student_attendance_records(client, seeded):
    data = client.get(f"/v1/attendance/students/{STUDENT_A}", headers=auth(TEACHER_ID)).json()["data"]
    assert len(data) == 3
    assert data[-1]["topic"] == "Límites"


def test_session_detail(client, seeded):
    data = client.get("/v1/attendance/sessions/1", headers=auth(TEACHER_ID)).json()["data"]
    assert data["topic"] == "Límites"
    assert data["subject_name"] == "Cálculo Diferencial"
    assert data["teacher_name"] == "Tomás Docente"
    assert data["period"] == "2025-1"

    body = client.get("/v1/attendance/sessions/999", headers=auth(TEACHER_ID)).json()
    assert body["error"]["code"] == 404
