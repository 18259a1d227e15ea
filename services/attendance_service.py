import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from models.attendance import Attendance
from models.class_sessions import ClassSession
from models.groups import Group
from schemas.attendance import SessionCreate

logger = logging.getLogger(__name__)


# ==========================================================
# [1] 학생 출석 통계 (그룹 기준)
# ==========================================================
def get_student_stats(db: Session, group_id: int, student_id: int) -> dict:
    try:
        session_ids = [
            row[0] for row in db.query(ClassSession.id).filter(ClassSession.group_id == group_id).all()
        ]
        attended = 0
        if session_ids:
            attended = (
                db.query(Attendance.session_id)
                .filter(Attendance.student_id == student_id)
                .filter(Attendance.session_id.in_(session_ids))
                .distinct()
                .count()
            )
    except SQLAlchemyError:
        logger.exception(f"출석 통계 조회 실패: group_id={group_id}, student_id={student_id}")
        session_ids, attended = [], 0

    total = len(session_ids)
    return {
        "total_sessions": total,
        "attended": attended,
        "percentage": round(attended / total * 100) if total else 0,
        "absences": total - attended,
    }


# ==========================================================
# [2] 학생 출석 기록 (최근 등록순)
# ==========================================================
def get_student_attendance(db: Session, student_id: int, group_id: Optional[int] = None) -> List[dict]:
    try:
        query = (
            db.query(Attendance)
            .join(ClassSession, Attendance.session_id == ClassSession.id)
            .options(
                joinedload(Attendance.session)
                .joinedload(ClassSession.group)
                .joinedload(Group.subject)
            )
            .filter(Attendance.student_id == student_id)
        )
        if group_id:
            query = query.filter(ClassSession.group_id == group_id)
        records = query.order_by(Attendance.registered_at.desc()).all()
    except SQLAlchemyError:
        logger.exception(f"학생 출석 기록 조회 실패: student_id={student_id}")
        return []

    result = []
    for a in records:
        session = a.session
        group = session.group if session else None
        subject = group.subject if group else None
        result.append({
            "id": a.id,
            "session_id": a.session_id,
            "date": session.date if session else None,
            "topic": session.topic if session else None,
            "group_id": group.id if group else None,
            "period": group.period if group else None,
            "subject_name": subject.name if subject else None,
            "subject_code": subject.code if subject else None,
            "registered_at": a.registered_at,
            "method": a.method,
        })
    return result


# ==========================================================
# [3] 회차 출석자 목록
# ==========================================================
def get_session_attendees(db: Session, session_id: int) -> List[dict]:
    try:
        records = (
            db.query(Attendance)
            .options(joinedload(Attendance.student))
            .filter(Attendance.session_id == session_id)
            .order_by(Attendance.registered_at.asc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception(f"출석자 조회 실패: session_id={session_id}")
        return []

    return [
        {
            "student_id": a.student_id,
            "first_name": a.student.first_name if a.student else None,
            "last_name": a.student.last_name if a.student else None,
            "enrollment_number": a.student.enrollment_number if a.student else None,
            "registered_at": a.registered_at,
            "method": a.method,
        }
        for a in records
    ]


# ==========================================================
# [4] 회차 상세 (그룹/과목/담당 교사 포함)
# ==========================================================
def get_session(db: Session, session_id: int) -> Optional[dict]:
    session = (
        db.query(ClassSession)
        .options(
            joinedload(ClassSession.group).joinedload(Group.subject),
            joinedload(ClassSession.group).joinedload(Group.teacher),
        )
        .filter(ClassSession.id == session_id)
        .first()
    )
    if session is None:
        return None

    group = session.group
    subject = group.subject if group else None
    return {
        "id": session.id,
        "group_id": session.group_id,
        "date": session.date,
        "topic": session.topic,
        "period": group.period if group else None,
        "subject_name": subject.name if subject else None,
        "subject_code": subject.code if subject else None,
        "credits": subject.credits if subject else None,
        "teacher_name": group.teacher.full_name if group and group.teacher else None,
    }


# ==========================================================
# [5] 수업 회차 생성
# ==========================================================
def create_session(db: Session, payload: SessionCreate) -> Optional[ClassSession]:
    """그룹이 없으면 None"""
    if db.get(Group, payload.group_id) is None:
        return None
    session = ClassSession(**payload.model_dump())
    db.add(session)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(session)
    logger.info(f"수업 회차 생성: session_id={session.id}, group_id={session.group_id}")
    return session
