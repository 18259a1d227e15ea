from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.constants import ROLE_ADMIN
from database.db import get_db
from dependencies.security import require_role
from schemas.dashboard import DashboardFilters
from services import dashboard_service

router = APIRouter(
    prefix="/dashboard",
    tags=["관리자 대시보드"],
    dependencies=[Depends(require_role(ROLE_ADMIN))],
)


# ✅ 공통 필터 (쿼리 파라미터 → DashboardFilters)
def get_filters(
    period: Optional[str] = Query(None, description="학기 (예: 2025-1)"),
    subject_id: Optional[int] = Query(None, description="과목 ID"),
    group_id: Optional[int] = Query(None, description="그룹 ID"),
    group_by: Literal["week", "month"] = Query("month", description="추이 집계 단위"),
    limit: Optional[int] = Query(None, ge=1, le=50, description="인기 과목 개수"),
) -> DashboardFilters:
    return DashboardFilters(
        period=period, subject_id=subject_id, group_id=group_id, group_by=group_by, limit=limit
    )


# ==========================================================
# [카드] 전체 지표
# ==========================================================
@router.get("/metrics")
def read_global_metrics(filters: DashboardFilters = Depends(get_filters), db: Session = Depends(get_db)):
    return {
        "success": True,
        "data": dashboard_service.get_global_metrics(db, filters),
        "message": "전체 지표 조회 성공",
    }


# ==========================================================
# [차트] 성적 분포 / 그룹별 출석률 / 추이 / 인기 과목
# ==========================================================
@router.get("/grade-distribution")
def read_grade_distribution(filters: DashboardFilters = Depends(get_filters), db: Session = Depends(get_db)):
    return {
        "success": True,
        "data": dashboard_service.get_grade_distribution(db, filters),
        "message": "성적 분포 조회 성공",
    }


@router.get("/attendance-by-group")
def read_attendance_by_group(filters: DashboardFilters = Depends(get_filters), db: Session = Depends(get_db)):
    return {
        "success": True,
        "data": dashboard_service.get_attendance_by_group(db, filters),
        "message": "그룹별 출석률 조회 성공",
    }


@router.get("/grade-trends")
def read_grade_trends(filters: DashboardFilters = Depends(get_filters), db: Session = Depends(get_db)):
    return {
        "success": True,
        "data": dashboard_service.get_grade_trends(db, filters),
        "message": "성적 추이 조회 성공",
    }


@router.get("/attendance-trends")
def read_attendance_trends(filters: DashboardFilters = Depends(get_filters), db: Session = Depends(get_db)):
    return {
        "success": True,
        "data": dashboard_service.get_attendance_trends(db, filters),
        "message": "출석 추이 조회 성공",
    }


@router.get("/popular-subjects")
def read_popular_subjects(filters: DashboardFilters = Depends(get_filters), db: Session = Depends(get_db)):
    return {
        "success": True,
        "data": dashboard_service.get_popular_subjects(db, filters),
        "message": "인기 과목 조회 성공",
    }


# ==========================================================
# [필터] 선택 가능한 학기/과목/그룹
# ==========================================================
@router.get("/filters")
def read_available_filters(db: Session = Depends(get_db)):
    return {
        "success": True,
        "data": dashboard_service.get_available_filters(db),
        "message": "필터 목록 조회 성공",
    }
