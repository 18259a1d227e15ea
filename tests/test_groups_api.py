from models.groups import Group
from conftest import ADMIN_ID, STUDENT_A, TEACHER_ID, auth


def new_group(**overrides):
    payload = {"subject_id": 2, "teacher_id": TEACHER_ID, "period": "2025-2", "capacity": 2}
    payload.update(overrides)
    return payload


def test_group_management_requires_admin(client, seeded):
    assert client.get("/v1/groups/", headers=auth(TEACHER_ID)).status_code == 403
    assert client.post("/v1/groups/", json=new_group(), headers=auth(STUDENT_A)).status_code == 403


def test_read_groups_latest_period_first(client, seeded):
    data = client.get("/v1/groups/", headers=auth(ADMIN_ID)).json()["data"]
    assert [g["id"] for g in data] == [3, 1, 2, 4]

    group_1 = data[1]
    # 중도포기 수강은 정원에서 제외
    assert group_1["enrolled"] == 2
    assert group_1["available"] == 28
    assert group_1["teacher_name"] == "Tomás Docente"
    assert group_1["subject_code"] == "MAT-101"


def test_read_groups_filters(client, seeded):
    inactive = client.get("/v1/groups/", params={"active": False}, headers=auth(ADMIN_ID)).json()["data"]
    assert [g["id"] for g in inactive] == [4]
    by_period = client.get("/v1/groups/", params={"period": "2025-1"}, headers=auth(ADMIN_ID)).json()["data"]
    assert [g["id"] for g in by_period] == [1, 2]


def test_read_missing_group(client, seeded):
    assert client.get("/v1/groups/999", headers=auth(ADMIN_ID)).json()["error"]["code"] == 404


def test_teacher_groups(client, seeded):
    data = client.get("/v1/groups/teacher/me", headers=auth(TEACHER_ID)).json()["data"]
    assert data["total_groups"] == 3
    assert data["total_students"] == 5
    assert [g["id"] for g in data["groups"]] == [3, 1, 2]

    assert client.get("/v1/groups/teacher/me", headers=auth(ADMIN_ID)).status_code == 403


def test_create_update_delete_group(client, seeded):
    body = client.post("/v1/groups/", json=new_group(classroom="B-12"), headers=auth(ADMIN_ID)).json()
    assert body["success"] is True
    group_id = body["data"]["id"]
    assert body["data"]["enrolled"] == 0
    assert body["data"]["available"] == 2
    assert body["data"]["active"] is True

    body = client.put(f"/v1/groups/{group_id}", json={"active": False, "schedule": "Lun 08:00-10:00"}, headers=auth(ADMIN_ID)).json()
    assert body["data"]["active"] is False
    assert body["data"]["classroom"] == "B-12"

    assert client.delete(f"/v1/groups/{group_id}", headers=auth(ADMIN_ID)).json()["success"] is True
    assert seeded.get(Group, group_id) is None


def test_create_group_defaults_capacity(client, seeded):
    payload = new_group()
    del payload["capacity"]
    data = client.post("/v1/groups/", json=payload, headers=auth(ADMIN_ID)).json()["data"]
    assert data["capacity"] == 30


def test_group_validation(client, seeded):
    assert client.post("/v1/groups/", json=new_group(capacity=0), headers=auth(ADMIN_ID)).status_code == 422
    assert client.post("/v1/groups/", json=new_group(capacity=101), headers=auth(ADMIN_ID)).status_code == 422
    assert client.post("/v1/groups/", json=new_group(subject_id=99), headers=auth(ADMIN_ID)).status_code == 422
    # 담당자는 교사여야 함
    assert client.post("/v1/groups/", json=new_group(teacher_id=STUDENT_A), headers=auth(ADMIN_ID)).status_code == 422
    assert client.put("/v1/groups/1", json={"period": None}, headers=auth(ADMIN_ID)).status_code == 422


def test_capacity_cannot_drop_below_enrolled(client, seeded):
    assert client.put("/v1/groups/1", json={"capacity": 1}, headers=auth(ADMIN_ID)).status_code == 422
    assert seeded.get(Group, 1).capacity == 30
    assert client.put("/v1/groups/1", json={"capacity": 2}, headers=auth(ADMIN_ID)).json()["data"]["available"] == 0


def test_group_with_history_cannot_be_deleted(client, seeded):
    assert client.delete("/v1/groups/1", headers=auth(ADMIN_ID)).status_code == 409
    assert client.delete("/v1/groups/999", headers=auth(ADMIN_ID)).json()["error"]["code"] == 404
