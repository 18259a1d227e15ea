from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from config.constants import ROLE_STUDENT
from database.db import get_db
from dependencies.security import require_role
from models.profiles import Profile
from schemas.enrollments import EnrollmentCreate
from services import attendance_service, enrollments_service, grades_service

router = APIRouter(prefix="/students/me", tags=["학생 본인"])


# ==========================================================
# [내 성적] 통계 / 과목별 평균 / 추이 / 차트
# ==========================================================
@router.get("/grades")
def read_my_grades(
    enrollment_id: Optional[int] = Query(None, description="특정 수강만 (미지정 시 전체)"),
    search: str = Query("", description="평가명/과목명 검색어"),
    profile: Profile = Depends(require_role(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    data = grades_service.get_student_grades(
        db, profile.id, enrollment_id=enrollment_id or "all", search=search
    )
    return {"success": True, "data": data, "message": "내 성적 조회 성공"}


# ==========================================================
# [내 출석] 기록 / 그룹별 통계
# ==========================================================
@router.get("/attendance")
def read_my_attendance(
    group_id: Optional[int] = Query(None, description="그룹 ID"),
    profile: Profile = Depends(require_role(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    records = attendance_service.get_student_attendance(db, profile.id, group_id)
    return {"success": True, "data": records, "message": "내 출석 기록 조회 성공"}


@router.get("/attendance/stats/{group_id}")
def read_my_attendance_stats(
    group_id: int,
    profile: Profile = Depends(require_role(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    stats = attendance_service.get_student_stats(db, group_id, profile.id)
    return {"success": True, "data": stats, "message": "출석 통계 조회 성공"}


# ==========================================================
# [내 수강] 목록 / 신청 가능 그룹 / 신청 / 취소
# ==========================================================
@router.get("/enrollments")
def read_my_enrollments(
    profile: Profile = Depends(require_role(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    enrollments = enrollments_service.list_student_enrollments(db, profile.id)
    return {"success": True, "data": enrollments, "message": "내 수강 목록 조회 성공"}


@router.get("/available-groups")
def read_available_groups(
    profile: Profile = Depends(require_role(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    groups = enrollments_service.list_available_groups(db, profile.id)
    return {"success": True, "data": groups, "message": "신청 가능 그룹 조회 성공"}


@router.post("/enrollments")
def enroll(
    payload: EnrollmentCreate,
    profile: Profile = Depends(require_role(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    try:
        enrollment = enrollments_service.enroll(db, profile.id, payload.group_id)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))

    if enrollment is None:
        db.rollback()
        return {
            "success": False,
            "error": {"code": 404, "message": "신청할 수 있는 그룹을 찾을 수 없습니다"}
        }
    return {
        "success": True,
        "data": {"id": enrollment.id, "group_id": enrollment.group_id, "status": enrollment.status},
        "message": "수강 신청이 완료되었습니다"
    }


@router.delete("/enrollments/{enrollment_id}")
def drop_enrollment(
    enrollment_id: int,
    profile: Profile = Depends(require_role(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    enrollment = enrollments_service.drop(db, profile.id, enrollment_id)
    if enrollment is None:
        return {
            "success": False,
            "error": {"code": 404, "message": "수강 정보를 찾을 수 없습니다"}
        }
    return {
        "success": True,
        "data": {"id": enrollment.id, "group_id": enrollment.group_id, "status": enrollment.status},
        "message": "수강이 취소되었습니다"
    }
