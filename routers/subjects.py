from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from config.constants import ROLE_ADMIN
from database.db import get_db
from dependencies.security import get_current_profile, require_role
from schemas.subjects import Subject as SubjectSchema, SubjectCreate, SubjectUpdate
from services import subjects_service

# 조회는 로그인 사용자 전체, 변경은 관리자만
router = APIRouter(
    prefix="/subjects",
    tags=["과목 정보"],
    dependencies=[Depends(get_current_profile)],
)
admin_only = [Depends(require_role(ROLE_ADMIN))]


def _to_data(subject) -> dict:
    return SubjectSchema.model_validate(subject).model_dump()


# ✅ [READ] 전체 과목 조회 (이름순)
@router.get("/")
def read_subjects(db: Session = Depends(get_db)):
    records = subjects_service.list_subjects(db)
    return {
        "success": True,
        "data": [_to_data(s) for s in records],
        "message": "전체 과목 조회 완료"
    }


# ✅ [READ] 특정 과목 조회
@router.get("/{subject_id}")
def read_subject(subject_id: int, db: Session = Depends(get_db)):
    subject = subjects_service.get_subject(db, subject_id)
    if subject is None:
        return {
            "success": False,
            "error": {"code": 404, "message": "과목 정보를 찾을 수 없습니다"}
        }
    return {"success": True, "data": _to_data(subject), "message": "과목 상세 조회 성공"}


# ✅ [CREATE] 과목 추가
@router.post("/", dependencies=admin_only)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db)):
    try:
        subject = subjects_service.create_subject(db, payload)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {
        "success": True,
        "data": _to_data(subject),
        "message": "과목 정보가 성공적으로 추가되었습니다"
    }


# ✅ [UPDATE] 과목 정보 수정
@router.put("/{subject_id}", dependencies=admin_only)
def update_subject(subject_id: int, payload: SubjectUpdate, db: Session = Depends(get_db)):
    try:
        subject = subjects_service.update_subject(db, subject_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if subject is None:
        return {
            "success": False,
            "error": {"code": 404, "message": "과목 정보를 찾을 수 없습니다"}
        }
    return {
        "success": True,
        "data": _to_data(subject),
        "message": "과목 정보가 성공적으로 수정되었습니다"
    }


# ✅ [DELETE] 과목 삭제
@router.delete("/{subject_id}", dependencies=admin_only)
def delete_subject(subject_id: int, db: Session = Depends(get_db)):
    try:
        deleted = subjects_service.delete_subject(db, subject_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not deleted:
        return {
            "success": False,
            "error": {"code": 404, "message": "과목 정보를 찾을 수 없습니다"}
        }
    return {"success": True, "message": "과목 정보가 삭제되었습니다"}
