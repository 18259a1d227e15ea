from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base
from models.class_sessions import ClassSession  # noqa: F401  (relationship 대상 등록)

class Attendance(Base):
    __tablename__ = "attendance"  # 출석 기록 (회차 × 학생)
    __table_args__ = (UniqueConstraint("session_id", "student_id", name="uq_attendance_session_student"),)

    id = Column(Integer, primary_key=True, index=True)                                    # 출석 고유 ID (Primary Key)
    session_id = Column(Integer, ForeignKey("class_sessions.id"), nullable=False, index=True)  # 회차 ID
    student_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)   # 학생 ID
    registered_at = Column(DateTime, nullable=False)                                      # 등록 시각
    method = Column(String(20), nullable=False, default="qr")                             # 등록 방식 (qr, manual, geolocated)

    session = relationship("ClassSession")
    student = relationship("Profile")
