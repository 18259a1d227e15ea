from models.subjects import Subject
from conftest import ADMIN_ID, STUDENT_A, auth


def new_subject(**overrides):
    payload = {"name": "Química General", "code": "QUI-101", "credits": 6, "semester": 2}
    payload.update(overrides)
    return payload


def test_subjects_require_login(client, seeded):
    assert client.get("/v1/subjects/").status_code == 401


def test_read_subjects_sorted_by_name(client, seeded):
    data = client.get("/v1/subjects/", headers=auth(STUDENT_A)).json()["data"]
    assert [s["code"] for s in data] == ["MAT-101", "FIS-101", "INF-201"]
    assert data[0]["credits"] == 8


def test_read_missing_subject(client, seeded):
    body = client.get("/v1/subjects/999", headers=auth(STUDENT_A)).json()
    assert body["success"] is False
    assert body["error"]["code"] == 404


def test_subject_changes_require_admin(client, seeded):
    assert client.post("/v1/subjects/", json=new_subject(), headers=auth(STUDENT_A)).status_code == 403


def test_create_update_delete_subject(client, seeded):
    body = client.post("/v1/subjects/", json=new_subject(), headers=auth(ADMIN_ID)).json()
    assert body["success"] is True
    subject_id = body["data"]["id"]
    assert body["data"]["semester"] == 2

    resp = client.put(f"/v1/subjects/{subject_id}", json={"description": "Estequiometría"}, headers=auth(ADMIN_ID))
    assert resp.json()["data"]["description"] == "Estequiometría"
    assert resp.json()["data"]["name"] == "Química General"

    assert client.delete(f"/v1/subjects/{subject_id}", headers=auth(ADMIN_ID)).json()["success"] is True
    assert seeded.get(Subject, subject_id) is None


def test_subject_validation(client, seeded):
    assert client.post("/v1/subjects/", json=new_subject(credits=11), headers=auth(ADMIN_ID)).status_code == 422
    assert client.post("/v1/subjects/", json=new_subject(name="Qu"), headers=auth(ADMIN_ID)).status_code == 422
    assert client.put("/v1/subjects/1", json={"name": None}, headers=auth(ADMIN_ID)).status_code == 422


def test_subject_code_is_unique(client, seeded):
    assert client.post("/v1/subjects/", json=new_subject(code="MAT-101"), headers=auth(ADMIN_ID)).status_code == 409
    assert client.put("/v1/subjects/2", json={"code": "MAT-101"}, headers=auth(ADMIN_ID)).status_code == 409
    # 자기 자신의 코드로 수정은 허용
    assert client.put("/v1/subjects/2", json={"code": "FIS-101"}, headers=auth(ADMIN_ID)).json()["success"] is True


def test_subject_with_groups_cannot_be_deleted(client, seeded):
    assert client.delete("/v1/subjects/1", headers=auth(ADMIN_ID)).status_code == 409
    assert client.delete("/v1/subjects/999", headers=auth(ADMIN_ID)).json()["error"]["code"] == 404
