from sqlalchemy import Column, Integer, String, Text
from database.db import Base

class Subject(Base):
    __tablename__ = "subjects"  # 과목 정보 테이블

    id = Column(Integer, primary_key=True, index=True)         # 과목 고유 ID (Primary Key)
    name = Column(String(150), nullable=False)                # 과목 이름 (예: Cálculo, Física)
    code = Column(String(20), unique=True, nullable=False)    # 과목 코드 (예: MAT-101)
    credits = Column(Integer, default=0)                      # 학점
    semester = Column(Integer)                                # 권장 학기 (1~10, 선택)
    description = Column(Text)                                # 과목 설명
