import os

# 앱 import 전에 로컬 SQLite로 전환 (MySQL 드라이버 연결 방지)
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")

from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from main import app
from models.attendance import Attendance
from models.class_sessions import ClassSession
from models.enrollments import Enrollment
from models.grades import Grade
from models.groups import Group
from models.profiles import Profile
from models.subjects import Subject
from scripts.init_db import create_tables

ADMIN_ID = 1
TEACHER_ID = 2
STUDENT_A = 10
STUDENT_B = 11
STUDENT_C = 12

LONG_SUBJECT = "Programación Orientada a Objetos y Estructuras"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth(user_id: int) -> dict:
    return {"X-User-Id": str(user_id)}


# ==========================================================
# [시드 데이터]
# - 그룹 1(Cálculo, 2025-1): 학생 A, B 활성 / 학생 C 중도포기
# - 그룹 2(Física, 2025-1): 학생 A
# - 그룹 3(긴 과목명, 2025-2): 학생 C, B (성적은 C만)
# - 그룹 4(Cálculo, 2024-2): 비활성
# ==========================================================
@pytest.fixture()
def seeded(db):
    db.add_all([
        Profile(id=ADMIN_ID, first_name="Ana", last_name="Admin", email="admin@school.mx", role="admin"),
        Profile(id=TEACHER_ID, first_name="Tomás", last_name="Docente", email="t@school.mx", role="teacher"),
        Profile(id=STUDENT_A, first_name="Luis", last_name="Pérez", enrollment_number="A001", role="student"),
        Profile(id=STUDENT_B, first_name="María", last_name="López", enrollment_number="A002", role="student"),
        Profile(id=STUDENT_C, first_name="Sofía", last_name="Ruiz", enrollment_number="A003", role="student"),
    ])
    db.add_all([
        Subject(id=1, name="Cálculo Diferencial", code="MAT-101", credits=8),
        Subject(id=2, name="Física", code="FIS-101", credits=6),
        Subject(id=3, name=LONG_SUBJECT, code="INF-201", credits=8),
    ])
    db.add_all([
        Group(id=1, subject_id=1, teacher_id=TEACHER_ID, period="2025-1", active=True),
        Group(id=2, subject_id=2, teacher_id=TEACHER_ID, period="2025-1", active=True),
        Group(id=3, subject_id=3, teacher_id=TEACHER_ID, period="2025-2", active=True),
        Group(id=4, subject_id=1, teacher_id=TEACHER_ID, period="2024-2", active=False),
    ])
    db.add_all([
        Enrollment(id=1, student_id=STUDENT_A, group_id=1, status="active"),
        Enrollment(id=2, student_id=STUDENT_B, group_id=1, status="active"),
        Enrollment(id=3, student_id=STUDENT_A, group_id=2, status="active"),
        Enrollment(id=4, student_id=STUDENT_C, group_id=3, status="active"),
        Enrollment(id=5, student_id=STUDENT_C, group_id=1, status="dropped"),
        Enrollment(id=6, student_id=STUDENT_B, group_id=3, status="active"),
    ])
    db.add_all([
        # 수강 1: (9×50 + 10×50) / 100 = 9.5
        Grade(enrollment_id=1, name="Parcial 1", grade_type="exam", value=9, max_value=10, weight=50, date=date(2025, 2, 3)),
        Grade(enrollment_id=1, name="Tarea 1", grade_type="homework", value=10, max_value=10, weight=50, date=date(2025, 2, 5)),
        # 수강 2: 6.0
        Grade(enrollment_id=2, name="Parcial 1", grade_type="exam", value=6, max_value=10, weight=100, date=date(2025, 2, 4)),
        # 수강 3: 8.0 → (8×30 + 7×70) / 100 = 7.3
        Grade(enrollment_id=3, name="Examen Final", grade_type="exam", value=40, max_value=50, weight=30, date=date(2025, 3, 10)),
        Grade(enrollment_id=3, name="Proyecto", grade_type="project", value=7, max_value=10, weight=70, date=date(2025, 3, 20)),
        # 수강 4: 5.0
        Grade(enrollment_id=4, name="Participación", grade_type="participation", value=5, max_value=10, weight=10, date=date(2025, 9, 1)),
        # 수강 5 (중도포기): 집계 제외
        Grade(enrollment_id=5, name="Parcial 1", grade_type="exam", value=10, max_value=10, weight=10, date=date(2025, 2, 3)),
    ])
    db.add_all([
        ClassSession(id=1, group_id=1, date=date(2025, 2, 3), topic="Límites"),
        ClassSession(id=2, group_id=1, date=date(2025, 2, 10), topic="Derivadas"),
        ClassSession(id=3, group_id=2, date=date(2025, 3, 10), topic="Cinemática"),
    ])
    db.add_all([
        Attendance(session_id=1, student_id=STUDENT_A, registered_at=datetime(2025, 2, 3, 8, 5), method="qr"),
        Attendance(session_id=1, student_id=STUDENT_B, registered_at=datetime(2025, 2, 3, 8, 7), method="qr"),
        Attendance(session_id=1, student_id=STUDENT_C, registered_at=datetime(2025, 2, 3, 8, 9), method="manual"),
        Attendance(session_id=2, student_id=STUDENT_A, registered_at=datetime(2025, 2, 10, 8, 2), method="qr"),
        Attendance(session_id=3, student_id=STUDENT_A, registered_at=datetime(2025, 3, 10, 10, 1), method="geolocated"),
    ])
    db.commit()
    return db
