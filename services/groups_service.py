"""
services/groups_service.py

그룹(과목 개설) 관리
- 관리자: 그룹 목록/상세/생성/수정/삭제 (과목, 담당 교사, 학기, 정원, 운영 여부)
- 교사: 본인 담당 활성 그룹 + 활성 수강생 수
- 정원 계산용 활성 수강 수 집계 (수강 신청에서도 사용)
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from config.constants import ENROLLMENT_ACTIVE, ROLE_TEACHER
from models.class_sessions import ClassSession
from models.enrollments import Enrollment
from models.groups import Group
from models.profiles import Profile
from models.subjects import Subject
from schemas.groups import GroupCreate, GroupUpdate

logger = logging.getLogger(__name__)


# ==========================================================
# [공통] 헬퍼
# ==========================================================

def active_enrollment_counts(db: Session, group_ids: List[int]) -> Dict[int, int]:
    """그룹별 활성 수강 수 (수강이 없으면 키 없음)"""
    if not group_ids:
        return {}
    rows = (
        db.query(Enrollment.group_id, func.count(Enrollment.id))
        .filter(Enrollment.group_id.in_(group_ids))
        .filter(Enrollment.status == ENROLLMENT_ACTIVE)
        .group_by(Enrollment.group_id)
        .all()
    )
    return {group_id: count for group_id, count in rows}


def group_to_dict(g: Group, enrolled: int = 0) -> dict:
    return {
        "id": g.id,
        "subject_id": g.subject_id,
        "subject_name": g.subject.name if g.subject else None,
        "subject_code": g.subject.code if g.subject else None,
        "teacher_id": g.teacher_id,
        "teacher_name": g.teacher.full_name if g.teacher else None,
        "period": g.period,
        "schedule": g.schedule,
        "classroom": g.classroom,
        "capacity": g.capacity,
        "active": g.active,
        "enrolled": enrolled,
        "available": max(g.capacity - enrolled, 0),
    }


def _with_relations(db: Session):
    return db.query(Group).options(joinedload(Group.subject), joinedload(Group.teacher))


def _check_references(db: Session, subject_id: Optional[int], teacher_id: Optional[int]):
    """과목이 없거나 담당자가 교사가 아니면 ValueError"""
    if subject_id is not None and db.get(Subject, subject_id) is None:
        raise ValueError(f"과목을 찾을 수 없습니다: subject_id={subject_id}")
    if teacher_id is not None:
        teacher = db.get(Profile, teacher_id)
        if teacher is None or teacher.role != ROLE_TEACHER:
            raise ValueError(f"교사를 찾을 수 없습니다: teacher_id={teacher_id}")


def _commit(db: Session):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


# ==========================================================
# [1] 조회
# ==========================================================

def list_groups(db: Session, period: Optional[str] = None, active: Optional[bool] = None) -> List[dict]:
    """최근 학기 우선"""
    try:
        query = _with_relations(db)
        if period:
            query = query.filter(Group.period == period)
        if active is not None:
            query = query.filter(Group.active.is_(active))
        groups = query.order_by(Group.period.desc(), Group.id).all()
        counts = active_enrollment_counts(db, [g.id for g in groups])
    except SQLAlchemyError:
        logger.exception("그룹 목록 조회 실패")
        return []

    return [group_to_dict(g, counts.get(g.id, 0)) for g in groups]


def get_group(db: Session, group_id: int) -> Optional[dict]:
    group = _with_relations(db).filter(Group.id == group_id).first()
    if group is None:
        return None
    counts = active_enrollment_counts(db, [group.id])
    return group_to_dict(group, counts.get(group.id, 0))


def list_teacher_groups(db: Session, teacher_id: int) -> dict:
    """교사 본인 담당 활성 그룹 + 합계"""
    try:
        groups = (
            _with_relations(db)
            .filter(Group.teacher_id == teacher_id)
            .filter(Group.active.is_(True))
            .order_by(Group.period.desc(), Group.id)
            .all()
        )
        counts = active_enrollment_counts(db, [g.id for g in groups])
    except SQLAlchemyError:
        logger.exception(f"담당 그룹 조회 실패: teacher_id={teacher_id}")
        groups, counts = [], {}

    items = [group_to_dict(g, counts.get(g.id, 0)) for g in groups]
    return {
        "groups": items,
        "total_groups": len(items),
        "total_students": sum(g["enrolled"] for g in items),
    }


# ==========================================================
# [2] 생성 / 수정 / 삭제 (관리자)
# ==========================================================

def create_group(db: Session, payload: GroupCreate) -> Group:
    _check_references(db, payload.subject_id, payload.teacher_id)
    group = Group(**payload.model_dump())
    db.add(group)
    _commit(db)
    db.refresh(group)
    logger.info(f"그룹 생성: group_id={group.id}, subject_id={group.subject_id}, period={group.period}")
    return group


def update_group(db: Session, group_id: int, payload: GroupUpdate) -> Optional[Group]:
    group = db.get(Group, group_id)
    if group is None:
        return None

    changes = payload.model_dump(exclude_unset=True)
    _check_references(db, changes.get("subject_id"), changes.get("teacher_id"))

    # 정원은 현재 활성 수강 수보다 작게 줄일 수 없음
    if "capacity" in changes:
        enrolled = active_enrollment_counts(db, [group_id]).get(group_id, 0)
        if changes["capacity"] < enrolled:
            raise ValueError(f"정원은 현재 수강생 수({enrolled})보다 작을 수 없습니다")

    for key, value in changes.items():
        setattr(group, key, value)
    _commit(db)
    db.refresh(group)
    return group


def delete_group(db: Session, group_id: int) -> bool:
    """수강/회차 기록이 있는 그룹은 삭제 대신 비활성화해야 함 (ValueError)"""
    group = db.get(Group, group_id)
    if group is None:
        return False
    has_history = (
        db.query(Enrollment.id).filter(Enrollment.group_id == group_id).first() is not None
        or db.query(ClassSession.id).filter(ClassSession.group_id == group_id).first() is not None
    )
    if has_history:
        raise ValueError("수강 기록이나 수업 회차가 있는 그룹은 삭제할 수 없습니다 (비활성화하세요)")

    db.delete(group)
    _commit(db)
    logger.info(f"그룹 삭제: group_id={group_id}")
    return True
