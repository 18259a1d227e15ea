from sqlalchemy import Column, Integer, String
from database.db import Base

class Profile(Base):
    __tablename__ = "profiles"  # 사용자 프로필 (관리자/교사/학생 공통)

    id = Column(Integer, primary_key=True, index=True)              # 사용자 고유 ID (Primary Key)
    first_name = Column(String(100), nullable=False)               # 이름
    last_name = Column(String(100), nullable=False)                # 성
    enrollment_number = Column(String(30), unique=True)            # 학번 (학생만)
    email = Column(String(200), unique=True)                       # 이메일
    role = Column(String(20), nullable=False, index=True)          # 역할 (admin, teacher, student)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
