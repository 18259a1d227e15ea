"""
services/grades_service.py

- 학생 "내 성적" 화면 데이터 구성 (수강 → 성적 → 통계/추이/차트)
- 교사용 성적 CRUD, 그룹별 성적 통계
"""

import logging
from collections import defaultdict
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from config.constants import ENROLLMENT_ACTIVE
from models.enrollments import Enrollment
from models.grades import Grade
from models.groups import Group
from schemas.grades import GradeCreate, GradeUpdate
from services import grade_calculations as gc

logger = logging.getLogger(__name__)


def grade_to_dict(g: Grade) -> dict:
    return {
        "id": g.id,
        "enrollment_id": g.enrollment_id,
        "name": g.name,
        "grade_type": g.grade_type,
        "value": g.value,
        "max_value": g.max_value,
        "weight": g.weight,
        "date": g.date,
        "comment": g.comment,
    }


def _grades_by_enrollment(db: Session, enrollment_ids: List[int]) -> dict:
    grouped = defaultdict(list)
    if not enrollment_ids:
        return grouped
    rows = (
        db.query(Grade)
        .filter(Grade.enrollment_id.in_(enrollment_ids))
        .order_by(Grade.date.desc(), Grade.id.desc())
        .all()
    )
    for g in rows:
        grouped[g.enrollment_id].append(grade_to_dict(g))
    return grouped


# ==========================================================
# [1] 학생 "내 성적"
# ==========================================================

def get_student_subjects(db: Session, student_id: int) -> List[dict]:
    """활성 수강별 과목 정보 + 성적 목록 + 가중 평균"""
    try:
        enrollments = (
            db.query(Enrollment)
            .options(joinedload(Enrollment.group).joinedload(Group.subject))
            .filter(Enrollment.student_id == student_id)
            .filter(Enrollment.status == ENROLLMENT_ACTIVE)
            .order_by(Enrollment.id)
            .all()
        )
        grades = _grades_by_enrollment(db, [e.id for e in enrollments])
    except SQLAlchemyError:
        logger.exception(f"학생 성적 조회 실패: student_id={student_id}")
        return []

    subjects = []
    for e in enrollments:
        subject = e.group.subject if e.group else None
        items = grades.get(e.id, [])
        average = gc.subject_average(items)
        subjects.append({
            "enrollment_id": e.id,
            "group_id": e.group_id,
            "period": e.group.period if e.group else None,
            "subject_name": subject.name if subject else None,
            "subject_code": subject.code if subject else None,
            "credits": subject.credits if subject else None,
            "grades": items,
            "average": average,
            "level": gc.performance_level(average),
        })
    return subjects


def get_student_grades(db: Session, student_id: int, enrollment_id="all", search: str = "") -> dict:
    subjects = get_student_subjects(db, student_id)

    # 과목 정보를 붙여 전체 성적 평탄화
    all_grades = [
        {**g, "subject_name": s["subject_name"]}
        for s in subjects
        for g in s["grades"]
    ]

    if enrollment_id == "all":
        evolution = gc.merge_evolutions(gc.weekly_evolution(s["grades"]) for s in subjects)
        selected = all_grades
    else:
        subject = next((s for s in subjects if s["enrollment_id"] == enrollment_id), None)
        evolution = [
            {"period": p["period"], "average": p["cumulative_average"]}
            for p in gc.weekly_evolution(subject["grades"] if subject else [])
        ]
        selected = [g for g in all_grades if g["enrollment_id"] == enrollment_id]

    return {
        "stats": gc.summary_stats(subjects),
        "subjects": subjects,
        "grades": gc.filter_grades(all_grades, enrollment_id, search),
        "evolution": evolution,
        "charts": {
            "subjects": gc.subject_bar_chart(subjects),
            "by_type": gc.summary_by_type(selected),
            "radar": gc.radar_by_type(all_grades),
        },
    }


# ==========================================================
# [2] 성적 관리 (교사/관리자)
# ==========================================================

def list_enrollment_grades(db: Session, enrollment_id: int) -> List[dict]:
    try:
        return _grades_by_enrollment(db, [enrollment_id]).get(enrollment_id, [])
    except SQLAlchemyError:
        logger.exception(f"수강 성적 조회 실패: enrollment_id={enrollment_id}")
        return []


def create_grade(db: Session, payload: GradeCreate) -> Optional[Grade]:
    """수강이 없으면 None"""
    if db.get(Enrollment, payload.enrollment_id) is None:
        return None
    grade = Grade(**payload.model_dump())
    db.add(grade)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(grade)
    logger.info(f"성적 등록: grade_id={grade.id}, enrollment_id={grade.enrollment_id}")
    return grade


def update_grade(db: Session, grade_id: int, payload: GradeUpdate) -> Optional[Grade]:
    grade = db.get(Grade, grade_id)
    if grade is None:
        return None

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(grade, key, value)
    if grade.value > grade.max_value:
        raise ValueError("value는 max_value를 넘을 수 없습니다")

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(grade)
    return grade


def delete_grade(db: Session, grade_id: int) -> bool:
    grade = db.get(Grade, grade_id)
    if grade is None:
        return False
    db.delete(grade)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info(f"성적 삭제: grade_id={grade_id}")
    return True


def get_group_statistics(db: Session, group_id: int) -> List[dict]:
    """그룹 활성 수강생별 프로필 + 성적 + 가중 평균"""
    try:
        enrollments = (
            db.query(Enrollment)
            .options(joinedload(Enrollment.student))
            .filter(Enrollment.group_id == group_id)
            .filter(Enrollment.status == ENROLLMENT_ACTIVE)
            .order_by(Enrollment.id)
            .all()
        )
        if not enrollments:
            return []

        grades = _grades_by_enrollment(db, [e.id for e in enrollments])
    except SQLAlchemyError:
        logger.exception(f"그룹 성적 통계 조회 실패: group_id={group_id}")
        return []

    result = []
    for e in enrollments:
        profile = e.student
        items = grades.get(e.id, [])
        result.append({
            "enrollment_id": e.id,
            "student_id": e.student_id,
            "student": {
                "full_name": profile.full_name,
                "first_name": profile.first_name,
                "last_name": profile.last_name,
                "enrollment_number": profile.enrollment_number,
            } if profile else None,
            "grades": items,
            "average": gc.subject_average(items),
        })
    return result
