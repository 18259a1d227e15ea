from typing import Optional

from pydantic import BaseModel, Field, field_validator

from config.constants import DEFAULT_GROUP_CAPACITY, MAX_GROUP_CAPACITY
from schemas.common import reject_null


# ✅ 그룹 생성용 (POST 요청)
class GroupCreate(BaseModel):
    subject_id: int                                          # 과목 ID
    teacher_id: int                                          # 담당 교사 ID
    period: str = Field(..., min_length=4, max_length=20)    # 학기 (예: 2025-1)
    schedule: Optional[str] = Field(default=None, max_length=100)   # 시간표
    classroom: Optional[str] = Field(default=None, max_length=50)   # 강의실
    capacity: int = Field(DEFAULT_GROUP_CAPACITY, ge=1, le=MAX_GROUP_CAPACITY)  # 정원
    active: bool = True                                      # 운영 여부


# ✅ 그룹 수정용 (PUT 요청, 부분 수정)
class GroupUpdate(BaseModel):
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    period: Optional[str] = Field(default=None, min_length=4, max_length=20)
    schedule: Optional[str] = Field(default=None, max_length=100)
    classroom: Optional[str] = Field(default=None, max_length=50)
    capacity: Optional[int] = Field(default=None, ge=1, le=MAX_GROUP_CAPACITY)
    active: Optional[bool] = None

    @field_validator("subject_id", "teacher_id", "period", "capacity", "active")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)
