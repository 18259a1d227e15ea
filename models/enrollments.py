from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from config.constants import ENROLLMENT_ACTIVE
from database.db import Base
from models.groups import Group  # noqa: F401  (relationship 대상 등록)

class Enrollment(Base):
    __tablename__ = "enrollments"  # 수강 (학생 × 그룹)

    id = Column(Integer, primary_key=True, index=True)                          # 수강 고유 ID (PK)
    student_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)   # 학생 ID
    group_id = Column(Integer, ForeignKey("class_groups.id"), nullable=False, index=True) # 그룹 ID
    status = Column(String(20), nullable=False, default=ENROLLMENT_ACTIVE)               # 상태 (active, completed, dropped)

    group = relationship("Group")
    student = relationship("Profile")
