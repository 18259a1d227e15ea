from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from config.constants import DEFAULT_GROUP_CAPACITY
from database.db import Base
from models.profiles import Profile  # noqa: F401  (relationship 대상 등록)
from models.subjects import Subject  # noqa: F401

class Group(Base):
    # "groups"는 MySQL 예약어라서 class_groups 사용
    __tablename__ = "class_groups"

    id = Column(Integer, primary_key=True, index=True)                     # 그룹 고유 ID (PK)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)  # 과목 ID (FK)
    teacher_id = Column(Integer, ForeignKey("profiles.id"))                # 담당 교사 ID (FK)
    period = Column(String(20), nullable=False, index=True)                # 학기 (예: 2025-1)
    schedule = Column(String(100))                                         # 시간표 (예: "Lun-Mie 08:00-10:00")
    classroom = Column(String(50))                                         # 강의실
    capacity = Column(Integer, nullable=False, default=DEFAULT_GROUP_CAPACITY)  # 정원
    active = Column(Boolean, nullable=False, default=True)                 # 운영 여부

    # ==========================================================
    # [관계 설정]
    # ==========================================================

    # ✅ 과목과의 관계 (N:1)
    subject = relationship("Subject")

    # ✅ 담당 교사와의 관계 (N:1)
    teacher = relationship("Profile", foreign_keys=[teacher_id])

    @property
    def label(self) -> str:
        # 대시보드 표시용 이름 (예: "Cálculo - 2025-1")
        subject_name = self.subject.name if self.subject else "Group"
        return f"{subject_name} - {self.period}"
