from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from config.constants import ROLE_ADMIN, ROLE_TEACHER
from database.db import get_db
from dependencies.security import require_role
from models.profiles import Profile
from schemas.groups import GroupCreate, GroupUpdate
from services import groups_service

router = APIRouter(prefix="/groups", tags=["그룹 관리"])
admin_only = [Depends(require_role(ROLE_ADMIN))]

NOT_FOUND = {
    "success": False,
    "error": {"code": 404, "message": "그룹 정보를 찾을 수 없습니다"}
}


# ✅ [READ] 교사 본인 담당 그룹 (활성 수강생 수 포함)
@router.get("/teacher/me")
def read_my_groups(
    profile: Profile = Depends(require_role(ROLE_TEACHER)),
    db: Session = Depends(get_db),
):
    data = groups_service.list_teacher_groups(db, profile.id)
    return {"success": True, "data": data, "message": "담당 그룹 조회 완료"}


# ✅ [READ] 전체 그룹 (최근 학기 우선)
@router.get("/", dependencies=admin_only)
def read_groups(
    period: Optional[str] = Query(None, description="학기 (예: 2025-1)"),
    active: Optional[bool] = Query(None, description="운영 여부"),
    db: Session = Depends(get_db),
):
    groups = groups_service.list_groups(db, period=period, active=active)
    return {"success": True, "data": groups, "message": "전체 그룹 조회 완료"}


# ✅ [READ] 특정 그룹 조회
@router.get("/{group_id}", dependencies=admin_only)
def read_group(group_id: int, db: Session = Depends(get_db)):
    group = groups_service.get_group(db, group_id)
    if group is None:
        return NOT_FOUND
    return {"success": True, "data": group, "message": "그룹 상세 조회 성공"}


# ✅ [CREATE] 그룹 생성
@router.post("/", dependencies=admin_only)
def create_group(payload: GroupCreate, db: Session = Depends(get_db)):
    try:
        group = groups_service.create_group(db, payload)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {
        "success": True,
        "data": groups_service.get_group(db, group.id),
        "message": "그룹이 성공적으로 생성되었습니다"
    }


# ✅ [UPDATE] 그룹 수정
@router.put("/{group_id}", dependencies=admin_only)
def update_group(group_id: int, payload: GroupUpdate, db: Session = Depends(get_db)):
    try:
        group = groups_service.update_group(db, group_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if group is None:
        return NOT_FOUND
    return {
        "success": True,
        "data": groups_service.get_group(db, group.id),
        "message": "그룹이 성공적으로 수정되었습니다"
    }


# ✅ [DELETE] 그룹 삭제
@router.delete("/{group_id}", dependencies=admin_only)
def delete_group(group_id: int, db: Session = Depends(get_db)):
    try:
        deleted = groups_service.delete_group(db, group_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not deleted:
        return NOT_FOUND
    return {"success": True, "message": "그룹이 삭제되었습니다"}
