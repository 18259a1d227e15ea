"""
services/dashboard_service.py

관리자 대시보드용 조회 + 집계
- 필터(period, subject_id, group_id)로 활성 그룹을 좁힌 뒤 수강/성적/회차/출석을 IN 조회
- 집계는 services/dashboard_calculations.py 순수 함수에 위임
- DB 오류는 로그 후 빈 리스트 / 0 으로 대체
"""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from config.constants import ENROLLMENT_ACTIVE, ROLE_STUDENT, ROLE_TEACHER
from config.settings import settings
from models.attendance import Attendance
from models.class_sessions import ClassSession
from models.enrollments import Enrollment
from models.grades import Grade
from models.groups import Group
from models.profiles import Profile
from models.subjects import Subject
from schemas.dashboard import DashboardFilters
from services import dashboard_calculations as calc

logger = logging.getLogger(__name__)


# ==========================================================
# [공통] 조회 헬퍼
# ==========================================================

def _has_filters(filters: DashboardFilters) -> bool:
    return bool(filters.period or filters.subject_id or filters.group_id)


def _filtered_groups_query(db: Session, filters: DashboardFilters, use_group_id: bool = True):
    query = db.query(Group).filter(Group.active.is_(True))
    if filters.period:
        query = query.filter(Group.period == filters.period)
    if filters.subject_id:
        query = query.filter(Group.subject_id == filters.subject_id)
    if use_group_id and filters.group_id:
        query = query.filter(Group.id == filters.group_id)
    return query


def _grade_snapshot(g: Grade) -> dict:
    return {
        "id": g.id,
        "enrollment_id": g.enrollment_id,
        "value": g.value,
        "max_value": g.max_value,
        "weight": g.weight,
        "date": g.date,
    }


def _active_enrollments(db: Session, group_ids: Optional[List[int]] = None) -> List[dict]:
    query = db.query(Enrollment).filter(Enrollment.status == ENROLLMENT_ACTIVE)
    if group_ids is not None:
        if not group_ids:
            return []
        query = query.filter(Enrollment.group_id.in_(group_ids))
    return [
        {"id": e.id, "student_id": e.student_id, "group_id": e.group_id}
        for e in query.all()
    ]


def _population_grades(db: Session, filters: DashboardFilters, order_by_date: bool = False):
    """
    분포/추이 대상 수강 + 성적
    - 필터가 없으면 전체 활성 수강
    - 필터가 있으면 필터된 활성 그룹의 활성 수강
    """
    query = db.query(Enrollment.id).filter(Enrollment.status == ENROLLMENT_ACTIVE)
    if _has_filters(filters):
        group_ids = [g.id for g in _filtered_groups_query(db, filters).all()]
        if not group_ids:
            return [], []
        query = query.filter(Enrollment.group_id.in_(group_ids))

    enrollment_ids = [row[0] for row in query.order_by(Enrollment.id).limit(settings.ENROLLMENT_FETCH_LIMIT).all()]
    if not enrollment_ids:
        return [], []

    grade_query = db.query(Grade).filter(Grade.enrollment_id.in_(enrollment_ids))
    if order_by_date:
        grade_query = grade_query.order_by(Grade.date.asc())
    grades = [_grade_snapshot(g) for g in grade_query.all()]
    return enrollment_ids, grades


def _count_profiles(db: Session, role: str) -> int:
    try:
        return db.query(func.count(Profile.id)).filter(Profile.role == role).scalar() or 0
    except SQLAlchemyError:
        logger.exception(f"프로필 수 조회 실패: role={role}")
        return 0


# ==========================================================
# [1] 전체 지표
# ==========================================================

def get_global_metrics(db: Session, filters: DashboardFilters) -> dict:
    total_students = _count_profiles(db, ROLE_STUDENT)
    total_teachers = _count_profiles(db, ROLE_TEACHER)

    try:
        total_groups = _filtered_groups_query(db, filters).count()
    except SQLAlchemyError:
        logger.exception("그룹 수 조회 실패")
        total_groups = 0

    try:
        enrollment_ids, grades = _population_grades(db, filters)
        averages = calc.averages_by_enrollment(enrollment_ids, grades)
        general_average = calc.mean(averages.values())
    except SQLAlchemyError:
        logger.exception("전체 평균 계산 실패")
        general_average = 0

    group_rates = [
        g["attendance"] for g in get_attendance_by_group(db, filters, use_group_id=True)
        if g["sessions"] > 0 and g["students"] > 0
    ]

    return {
        "total_students": total_students,
        "total_teachers": total_teachers,
        "total_groups": total_groups,
        "general_average": general_average,
        "attendance_average": calc.mean(group_rates),
    }


# ==========================================================
# [2] 성적 분포
# ==========================================================

def get_grade_distribution(db: Session, filters: DashboardFilters) -> List[dict]:
    try:
        enrollment_ids, grades = _population_grades(db, filters)
    except SQLAlchemyError:
        logger.exception("성적 분포 조회 실패")
        return []

    # 평균이 정의된 수강이 하나도 없으면 (성적 없음, 가중치 합 0) 빈 분포
    averages = calc.averages_by_enrollment(enrollment_ids, grades)
    if not averages:
        return []
    return calc.grade_distribution(averages.values())


# ==========================================================
# [3] 그룹별 출석률
# ==========================================================

def get_attendance_by_group(db: Session, filters: DashboardFilters, use_group_id: bool = False) -> List[dict]:
    try:
        groups = (
            _filtered_groups_query(db, filters, use_group_id=use_group_id)
            .options(joinedload(Group.subject))
            .order_by(Group.id)
            .all()
        )
        if not groups:
            return []

        group_ids = [g.id for g in groups]
        enrollments = _active_enrollments(db, group_ids)
        sessions = [
            {"id": s.id, "group_id": s.group_id, "date": s.date}
            for s in db.query(ClassSession).filter(ClassSession.group_id.in_(group_ids)).all()
        ]

        attendance = []
        session_ids = [s["id"] for s in sessions]
        student_ids = list({e["student_id"] for e in enrollments})
        if session_ids and student_ids:
            attendance = [
                {"session_id": a.session_id, "student_id": a.student_id}
                for a in db.query(Attendance)
                .filter(Attendance.session_id.in_(session_ids))
                .filter(Attendance.student_id.in_(student_ids))
                .all()
            ]
    except SQLAlchemyError:
        logger.exception("그룹별 출석률 조회 실패")
        return []

    return calc.attendance_by_group(
        [{"id": g.id, "label": g.label} for g in groups],
        sessions,
        enrollments,
        attendance,
    )


# ==========================================================
# [4] 성적 추이
# ==========================================================

def get_grade_trends(db: Session, filters: DashboardFilters) -> List[dict]:
    try:
        _, grades = _population_grades(db, filters, order_by_date=True)
    except SQLAlchemyError:
        logger.exception("성적 추이 조회 실패")
        return []

    if not grades:
        return []
    return calc.grade_trends(grades, filters.group_by)


# ==========================================================
# [5] 출석 추이
# ==========================================================

def get_attendance_trends(db: Session, filters: DashboardFilters) -> List[dict]:
    try:
        group_ids = [g.id for g in _filtered_groups_query(db, filters).all()]
        if not group_ids:
            return []

        sessions = [
            {"id": s.id, "group_id": s.group_id, "date": s.date}
            for s in db.query(ClassSession)
            .filter(ClassSession.group_id.in_(group_ids))
            .order_by(ClassSession.date.asc())
            .all()
        ]
        if not sessions:
            return []

        enrollments = _active_enrollments(db, group_ids)
        student_ids = list({e["student_id"] for e in enrollments})
        attendance = []
        if student_ids:
            attendance = [
                {"session_id": a.session_id, "student_id": a.student_id}
                for a in db.query(Attendance)
                .filter(Attendance.session_id.in_([s["id"] for s in sessions]))
                .filter(Attendance.student_id.in_(student_ids))
                .all()
            ]
    except SQLAlchemyError:
        logger.exception("출석 추이 조회 실패")
        return []

    return calc.attendance_trends(sessions, enrollments, attendance, filters.group_by)


# ==========================================================
# [6] 인기 과목
# ==========================================================

def get_popular_subjects(db: Session, filters: DashboardFilters) -> List[dict]:
    try:
        query = db.query(Group).options(joinedload(Group.subject)).filter(Group.active.is_(True))
        if filters.period:
            query = query.filter(Group.period == filters.period)
        groups = [
            {
                "id": g.id,
                "subject_id": g.subject_id,
                "subject_name": g.subject.name if g.subject else None,
                "subject_code": g.subject.code if g.subject else None,
            }
            for g in query.order_by(Group.id).all()
        ]
        if not groups:
            return []
        enrollments = _active_enrollments(db, [g["id"] for g in groups])
    except SQLAlchemyError:
        logger.exception("인기 과목 조회 실패")
        return []

    limit = filters.limit or settings.POPULAR_SUBJECTS_LIMIT
    return calc.popular_subjects(groups, enrollments, limit=limit)


# ==========================================================
# [7] 선택 가능한 필터 목록
# ==========================================================

def get_available_filters(db: Session) -> dict:
    periods, subjects, groups = [], [], []

    try:
        rows = db.query(Group.period).distinct().order_by(Group.period.desc()).all()
        periods = [r[0] for r in rows]
    except SQLAlchemyError:
        logger.exception("학기 목록 조회 실패")

    try:
        subjects = [
            {"id": s.id, "name": s.name, "code": s.code}
            for s in db.query(Subject).order_by(Subject.name).all()
        ]
    except SQLAlchemyError:
        logger.exception("과목 목록 조회 실패")

    try:
        groups = [
            {
                "id": g.id,
                "name": g.label,
                "subject": g.subject.name if g.subject else None,
                "period": g.period,
            }
            for g in db.query(Group)
            .options(joinedload(Group.subject))
            .filter(Group.active.is_(True))
            .order_by(Group.period.desc(), Group.id)
            .all()
        ]
    except SQLAlchemyError:
        logger.exception("그룹 목록 조회 실패")

    return {"periods": periods, "subjects": subjects, "groups": groups}
