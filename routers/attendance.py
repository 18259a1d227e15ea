from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.constants import ROLE_ADMIN, ROLE_TEACHER
from database.db import get_db
from dependencies.security import require_role
from schemas.attendance import SessionCreate
from services import attendance_service

router = APIRouter(
    prefix="/attendance",
    tags=["출결"],
    dependencies=[Depends(require_role(ROLE_TEACHER, ROLE_ADMIN))],
)


# ✅ [CREATE] 수업 회차 생성
@router.post("/sessions")
def create_session(payload: SessionCreate, db: Session = Depends(get_db)):
    session = attendance_service.create_session(db, payload)
    if session is None:
        return {
            "success": False,
            "error": {"code": 404, "message": "그룹 정보를 찾을 수 없습니다"}
        }
    return {
        "success": True,
        "data": {
            "id": session.id,
            "group_id": session.group_id,
            "date": session.date,
            "topic": session.topic
        },
        "message": "수업 회차가 생성되었습니다"
    }


# ✅ [READ] 회차 상세
@router.get("/sessions/{session_id}")
def read_session(session_id: int, db: Session = Depends(get_db)):
    session = attendance_service.get_session(db, session_id)
    if session is None:
        return {
            "success": False,
            "error": {"code": 404, "message": "수업 회차를 찾을 수 없습니다"}
        }
    return {"success": True, "data": session, "message": "수업 회차 조회 완료"}


# ✅ [READ] 회차 출석자 목록
@router.get("/sessions/{session_id}/attendees")
def read_session_attendees(session_id: int, db: Session = Depends(get_db)):
    attendees = attendance_service.get_session_attendees(db, session_id)
    return {"success": True, "data": attendees, "message": "출석자 조회 완료"}


# ✅ [READ] 학생 출석 통계 (그룹 기준)
@router.get("/stats/{group_id}/{student_id}")
def read_student_stats(group_id: int, student_id: int, db: Session = Depends(get_db)):
    stats = attendance_service.get_student_stats(db, group_id, student_id)
    return {"success": True, "data": stats, "message": "출석 통계 조회 완료"}


# ✅ [READ] 학생 출석 기록
@router.get("/students/{student_id}")
def read_student_attendance(student_id: int, group_id: Optional[int] = None, db: Session = Depends(get_db)):
    records = attendance_service.get_student_attendance(db, student_id, group_id)
    return {"success": True, "data": records, "message": "출석 기록 조회 완료"}
