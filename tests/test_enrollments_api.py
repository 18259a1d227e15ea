from models.enrollments import Enrollment
from models.groups import Group
from conftest import STUDENT_A, STUDENT_B, STUDENT_C, TEACHER_ID, auth


def enroll(client, student_id, group_id):
    return client.post("/v1/students/me/enrollments", json={"group_id": group_id}, headers=auth(student_id))


def test_enrollments_require_student(client, seeded):
    assert client.get("/v1/students/me/enrollments", headers=auth(TEACHER_ID)).status_code == 403
    assert enroll(client, TEACHER_ID, 3).status_code == 403


def test_my_enrollments(client, seeded):
    data = client.get("/v1/students/me/enrollments", headers=auth(STUDENT_A)).json()["data"]
    assert [e["group_id"] for e in data] == [1, 2]
    assert data[0]["group"]["subject_name"] == "Cálculo Diferencial"
    assert data[0]["group"]["teacher_name"] == "Tomás Docente"
    assert data[0]["group"]["enrolled"] == 2


def test_available_groups_exclude_enrolled_and_inactive(client, seeded):
    data = client.get("/v1/students/me/available-groups", headers=auth(STUDENT_A)).json()["data"]
    assert [g["id"] for g in data] == [3]
    # 중도포기한 그룹은 다시 신청 가능
    data = client.get("/v1/students/me/available-groups", headers=auth(STUDENT_C)).json()["data"]
    assert [g["id"] for g in data] == [1, 2]


def test_enroll_and_duplicate(client, seeded):
    body = enroll(client, STUDENT_A, 3).json()
    assert body["success"] is True
    assert body["data"]["status"] == "active"

    assert enroll(client, STUDENT_A, 3).status_code == 409


def test_enroll_reactivates_dropped_enrollment(client, seeded):
    body = enroll(client, STUDENT_C, 1).json()
    assert body["data"]["id"] == 5
    assert seeded.query(Enrollment).filter_by(student_id=STUDENT_C, group_id=1).count() == 1


def test_enroll_full_group(client, seeded):
    group = seeded.get(Group, 3)
    group.capacity = 2
    seeded.commit()

    assert enroll(client, STUDENT_A, 3).status_code == 409
    assert client.get("/v1/students/me/available-groups", headers=auth(STUDENT_A)).json()["data"] == []


def test_enroll_unknown_or_inactive_group(client, seeded):
    assert enroll(client, STUDENT_A, 4).json()["error"]["code"] == 404
    assert enroll(client, STUDENT_A, 999).json()["success"] is False


def test_drop_enrollment(client, seeded):
    body = client.delete("/v1/students/me/enrollments/1", headers=auth(STUDENT_A)).json()
    assert body["data"]["status"] == "dropped"

    # 이미 취소된 수강 / 다른 학생의 수강
    assert client.delete("/v1/students/me/enrollments/1", headers=auth(STUDENT_A)).json()["success"] is False
    assert client.delete("/v1/students/me/enrollments/3", headers=auth(STUDENT_B)).json()["error"]["code"] == 404
    assert seeded.get(Enrollment, 3).status == "active"

    # 성적 기록은 유지, 집계에서만 제외
    data = client.get("/v1/students/me/enrollments", headers=auth(STUDENT_A)).json()["data"]
    assert [e["group_id"] for e in data] == [2]
