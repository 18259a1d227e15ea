from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from models.groups import Group  # noqa: F401  (relationship 대상 등록)

class ClassSession(Base):
    __tablename__ = "class_sessions"  # 수업 회차

    id = Column(Integer, primary_key=True, index=True)                                  # 회차 고유 ID (PK)
    group_id = Column(Integer, ForeignKey("class_groups.id"), nullable=False, index=True)  # 그룹 ID
    date = Column(Date, nullable=False, index=True)                                     # 수업 일자
    topic = Column(String(200))                                                         # 수업 주제

    group = relationship("Group")
