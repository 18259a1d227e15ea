from datetime import date as date_type
from typing import Optional

from pydantic import BaseModel, Field


# ✅ 수업 회차 생성용 (POST 요청)
class SessionCreate(BaseModel):
    group_id: int                                    # 그룹 ID
    date: date_type                                  # 수업 일자
    topic: Optional[str] = Field(default=None, max_length=200)  # 수업 주제

