from typing import Literal, Optional

from pydantic import BaseModel, Field


# ✅ 대시보드 공통 필터 (쿼리 파라미터)
class DashboardFilters(BaseModel):
    period: Optional[str] = None                       # 학기 (예: 2025-1)
    subject_id: Optional[int] = None                   # 과목 ID
    group_id: Optional[int] = None                     # 그룹 ID
    group_by: Literal["week", "month"] = "month"       # 추이 집계 단위
    limit: Optional[int] = Field(default=None, ge=1, le=50)  # 인기 과목 개수
