from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from config.constants import ROLE_ADMIN, ROLE_TEACHER
from database.db import get_db
from dependencies.security import require_role
from schemas.grades import Grade as GradeSchema, GradeCreate, GradeUpdate
from services import grades_service

router = APIRouter(
    prefix="/grades",
    tags=["성적 관리"],
    dependencies=[Depends(require_role(ROLE_TEACHER, ROLE_ADMIN))],
)


# ✅ [READ] 수강별 성적 목록 (최신순)
@router.get("/enrollment/{enrollment_id}")
def read_enrollment_grades(enrollment_id: int, db: Session = Depends(get_db)):
    grades = grades_service.list_enrollment_grades(db, enrollment_id)
    return {"success": True, "data": grades, "message": "수강 성적 조회 완료"}


# ✅ [READ] 그룹 성적 통계 (학생별 평균)
@router.get("/group/{group_id}/statistics")
def read_group_statistics(group_id: int, db: Session = Depends(get_db)):
    stats = grades_service.get_group_statistics(db, group_id)
    return {"success": True, "data": stats, "message": "그룹 성적 통계 조회 완료"}


# ✅ [CREATE] 성적 등록
@router.post("/")
def create_grade(payload: GradeCreate, db: Session = Depends(get_db)):
    grade = grades_service.create_grade(db, payload)
    if grade is None:
        return {
            "success": False,
            "error": {"code": 404, "message": "수강 정보를 찾을 수 없습니다"}
        }
    return {
        "success": True,
        "data": GradeSchema.model_validate(grade).model_dump(),
        "message": "성적이 성공적으로 등록되었습니다"
    }


# ✅ [UPDATE] 성적 수정
@router.put("/{grade_id}")
def update_grade(grade_id: int, payload: GradeUpdate, db: Session = Depends(get_db)):
    try:
        grade = grades_service.update_grade(db, grade_id, payload)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))

    if grade is None:
        return {
            "success": False,
            "error": {"code": 404, "message": "성적 정보를 찾을 수 없습니다"}
        }
    return {
        "success": True,
        "data": GradeSchema.model_validate(grade).model_dump(),
        "message": "성적이 성공적으로 수정되었습니다"
    }


# ✅ [DELETE] 성적 삭제
@router.delete("/{grade_id}")
def delete_grade(grade_id: int, db: Session = Depends(get_db)):
    if not grades_service.delete_grade(db, grade_id):
        return {
            "success": False,
            "error": {"code": 404, "message": "성적 정보를 찾을 수 없습니다"}
        }
    return {"success": True, "message": "성적이 삭제되었습니다"}
