"""
services/enrollments_service.py

학생 본인 수강 관리
- 내 활성 수강 목록 / 신청 가능한 그룹 (활성, 미수강, 정원 미달)
- 수강 신청: 기존 중도포기 수강은 재활성화, 정원 초과/중복 신청은 거부
- 수강 취소: 상태만 dropped로 변경 (성적/출석 기록 유지)
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from config.constants import ENROLLMENT_ACTIVE, ENROLLMENT_DROPPED
from models.enrollments import Enrollment
from models.groups import Group
from services.groups_service import active_enrollment_counts, group_to_dict

logger = logging.getLogger(__name__)


def enrollment_to_dict(e: Enrollment, enrolled: int = 0) -> dict:
    return {
        "id": e.id,
        "student_id": e.student_id,
        "group_id": e.group_id,
        "status": e.status,
        "group": group_to_dict(e.group, enrolled) if e.group else None,
    }


def _commit(db: Session):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


# ✅ [READ] 내 활성 수강
def list_student_enrollments(db: Session, student_id: int) -> List[dict]:
    try:
        enrollments = (
            db.query(Enrollment)
            .options(
                joinedload(Enrollment.group).joinedload(Group.subject),
                joinedload(Enrollment.group).joinedload(Group.teacher),
            )
            .filter(Enrollment.student_id == student_id)
            .filter(Enrollment.status == ENROLLMENT_ACTIVE)
            .order_by(Enrollment.id)
            .all()
        )
        counts = active_enrollment_counts(db, [e.group_id for e in enrollments])
    except SQLAlchemyError:
        logger.exception(f"수강 목록 조회 실패: student_id={student_id}")
        return []

    return [enrollment_to_dict(e, counts.get(e.group_id, 0)) for e in enrollments]


# ✅ [READ] 신청 가능한 그룹
def list_available_groups(db: Session, student_id: int) -> List[dict]:
    try:
        enrolled_ids = [
            row[0]
            for row in db.query(Enrollment.group_id)
            .filter(Enrollment.student_id == student_id)
            .filter(Enrollment.status == ENROLLMENT_ACTIVE)
            .all()
        ]
        query = (
            db.query(Group)
            .options(joinedload(Group.subject), joinedload(Group.teacher))
            .filter(Group.active.is_(True))
        )
        if enrolled_ids:
            query = query.filter(Group.id.notin_(enrolled_ids))
        groups = query.order_by(Group.period.desc(), Group.id).all()
        counts = active_enrollment_counts(db, [g.id for g in groups])
    except SQLAlchemyError:
        logger.exception(f"신청 가능 그룹 조회 실패: student_id={student_id}")
        return []

    return [
        group_to_dict(g, counts.get(g.id, 0))
        for g in groups
        if counts.get(g.id, 0) < g.capacity
    ]


# ✅ [CREATE] 수강 신청 (그룹이 없거나 비활성이면 None)
def enroll(db: Session, student_id: int, group_id: int) -> Optional[Enrollment]:
    group = db.query(Group).filter(Group.id == group_id).with_for_update().first()
    if group is None or not group.active:
        return None

    existing = (
        db.query(Enrollment)
        .filter(Enrollment.student_id == student_id)
        .filter(Enrollment.group_id == group_id)
        .order_by(Enrollment.id.desc())
        .first()
    )
    if existing is not None and existing.status == ENROLLMENT_ACTIVE:
        raise ValueError("이미 수강 중인 그룹입니다")

    if active_enrollment_counts(db, [group_id]).get(group_id, 0) >= group.capacity:
        raise ValueError("정원이 가득 찬 그룹입니다")

    if existing is not None:
        # 이전에 취소한 수강은 새로 만들지 않고 재활성화
        existing.status = ENROLLMENT_ACTIVE
        enrollment = existing
    else:
        enrollment = Enrollment(student_id=student_id, group_id=group_id, status=ENROLLMENT_ACTIVE)
        db.add(enrollment)

    _commit(db)
    db.refresh(enrollment)
    logger.info(f"수강 신청: enrollment_id={enrollment.id}, student_id={student_id}, group_id={group_id}")
    return enrollment


# ✅ [UPDATE] 수강 취소 (본인의 활성 수강만)
def drop(db: Session, student_id: int, enrollment_id: int) -> Optional[Enrollment]:
    enrollment = db.get(Enrollment, enrollment_id)
    if (
        enrollment is None
        or enrollment.student_id != student_id
        or enrollment.status != ENROLLMENT_ACTIVE
    ):
        return None

    enrollment.status = ENROLLMENT_DROPPED
    _commit(db)
    db.refresh(enrollment)
    logger.info(f"수강 취소: enrollment_id={enrollment_id}, student_id={student_id}")
    return enrollment
