from datetime import date as date_type
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from config.constants import DEFAULT_MAX_VALUE, DEFAULT_WEIGHT
from schemas.common import reject_null

GradeType = Literal["exam", "homework", "project", "participation", "presentation"]


# ✅ 성적 등록용 (POST 요청)
class GradeCreate(BaseModel):
    enrollment_id: int                               # 수강 ID
    name: str = Field(..., min_length=1, max_length=150)  # 평가 이름
    grade_type: GradeType                            # 평가 유형
    value: float = Field(..., ge=0)                  # 획득 점수
    max_value: float = Field(DEFAULT_MAX_VALUE, gt=0)               # 만점
    weight: float = Field(DEFAULT_WEIGHT, ge=0)                  # 가중치
    date: date_type                                  # 평가 일자
    comment: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _check_value(self):
        if self.value > self.max_value:
            raise ValueError("value는 max_value를 넘을 수 없습니다")
        return self


# ✅ 성적 수정용 (PUT 요청, 부분 수정)
class GradeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    grade_type: Optional[GradeType] = None
    value: Optional[float] = Field(default=None, ge=0)
    max_value: Optional[float] = Field(default=None, gt=0)
    weight: Optional[float] = Field(default=None, ge=0)
    date: Optional[date_type] = None
    comment: Optional[str] = Field(default=None, max_length=500)

    # comment만 null로 비울 수 있음
    @field_validator("name", "grade_type", "value", "max_value", "weight", "date")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


# ✅ 성적 조회/응답용
class Grade(BaseModel):
    id: int
    enrollment_id: int
    name: str
    grade_type: str
    value: float
    max_value: float
    weight: float
    date: date_type
    comment: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)  # SQLAlchemy 모델 연동 허용
