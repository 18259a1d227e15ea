from sqlalchemy import Column, Integer, Float, String, Date, ForeignKey
from config.constants import DEFAULT_MAX_VALUE, DEFAULT_WEIGHT
from database.db import Base
from models.enrollments import Enrollment  # noqa: F401  (FK 대상 등록)

class Grade(Base):
    __tablename__ = "grades"  # 평가 항목별 성적 기록

    id = Column(Integer, primary_key=True, index=True)                               # 성적 고유 ID (Primary Key)
    enrollment_id = Column(Integer, ForeignKey("enrollments.id"), nullable=False, index=True)  # 수강 ID
    name = Column(String(150), nullable=False)                                       # 평가 이름 (예: Parcial 1)
    grade_type = Column(String(20), nullable=False)                                  # 평가 유형 (exam, homework ...)
    value = Column(Float, nullable=False)                                            # 획득 점수
    max_value = Column(Float, nullable=False, default=DEFAULT_MAX_VALUE)             # 만점
    weight = Column(Float, nullable=False, default=DEFAULT_WEIGHT)                   # 가중치
    date = Column(Date, nullable=False, index=True)                                  # 평가 일자
    comment = Column(String(500))                                                    # 코멘트
