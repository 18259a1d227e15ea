import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.groups import Group
from models.subjects import Subject
from schemas.subjects import SubjectCreate, SubjectUpdate

logger = logging.getLogger(__name__)


def _commit(db: Session):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def _code_taken(db: Session, code: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Subject.id).filter(Subject.code == code)
    if exclude_id is not None:
        query = query.filter(Subject.id != exclude_id)
    return query.first() is not None


# ✅ [READ] 과목 목록 (이름순)
def list_subjects(db: Session) -> List[Subject]:
    try:
        return db.query(Subject).order_by(Subject.name).all()
    except SQLAlchemyError:
        logger.exception("과목 목록 조회 실패")
        return []


def get_subject(db: Session, subject_id: int) -> Optional[Subject]:
    return db.get(Subject, subject_id)


# ✅ [CREATE] 과목 추가 (코드 중복이면 ValueError)
def create_subject(db: Session, payload: SubjectCreate) -> Subject:
    if _code_taken(db, payload.code):
        raise ValueError(f"이미 존재하는 과목 코드입니다: {payload.code}")
    subject = Subject(**payload.model_dump())
    db.add(subject)
    _commit(db)
    db.refresh(subject)
    logger.info(f"과목 추가: subject_id={subject.id}, code={subject.code}")
    return subject


# ✅ [UPDATE] 과목 수정 (보낸 필드만)
def update_subject(db: Session, subject_id: int, payload: SubjectUpdate) -> Optional[Subject]:
    subject = db.get(Subject, subject_id)
    if subject is None:
        return None

    changes = payload.model_dump(exclude_unset=True)
    if "code" in changes and _code_taken(db, changes["code"], exclude_id=subject_id):
        raise ValueError(f"이미 존재하는 과목 코드입니다: {changes['code']}")

    for key, value in changes.items():
        setattr(subject, key, value)
    _commit(db)
    db.refresh(subject)
    return subject


# ✅ [DELETE] 과목 삭제 (개설된 그룹이 있으면 ValueError)
def delete_subject(db: Session, subject_id: int) -> bool:
    subject = db.get(Subject, subject_id)
    if subject is None:
        return False
    if db.query(Group.id).filter(Group.subject_id == subject_id).first() is not None:
        raise ValueError("개설된 그룹이 있는 과목은 삭제할 수 없습니다")

    db.delete(subject)
    _commit(db)
    logger.info(f"과목 삭제: subject_id={subject_id}")
    return True
