from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.common import reject_null


# ✅ 입력용: POST 요청에서 사용할 스키마
class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=150)      # 과목 이름
    code: str = Field(..., min_length=2, max_length=20)       # 과목 코드 (고유)
    credits: int = Field(..., ge=1, le=10)                    # 학점
    semester: Optional[int] = Field(default=None, ge=1, le=10)  # 권장 학기
    description: Optional[str] = None                         # 과목 설명


# ✅ 수정용: PUT 요청 (보낸 필드만 반영)
class SubjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3, max_length=150)
    code: Optional[str] = Field(default=None, min_length=2, max_length=20)
    credits: Optional[int] = Field(default=None, ge=1, le=10)
    semester: Optional[int] = Field(default=None, ge=1, le=10)
    description: Optional[str] = None

    @field_validator("name", "code", "credits")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


# ✅ 출력용: GET, POST 응답 등에서 사용할 스키마
class Subject(BaseModel):
    id: int
    name: str
    code: str
    credits: Optional[int] = None
    semester: Optional[int] = None
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
