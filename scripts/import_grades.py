import csv
import logging
import sys
from datetime import date

from sqlalchemy.orm import Session
from config.constants import DEFAULT_MAX_VALUE, DEFAULT_WEIGHT
from database.db import SessionLocal
from models.grades import Grade as GradeModel  # ✅ 모델 import

logger = logging.getLogger(__name__)

CSV_PATH = "data/grades.csv"  # ✅ 기본 파일 경로


def migrate_grades(db: Session, csv_path: str = CSV_PATH) -> int:
    """
    CSV → grades 테이블
    컬럼: enrollment_id,name,grade_type,value,max_value,weight,date,comment
    """
    count = 0
    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            grade = GradeModel(
                enrollment_id=int(row["enrollment_id"]),                 # 수강 ID
                name=row["name"].strip(),                                # 평가 이름
                grade_type=row["grade_type"].strip(),                    # 평가 유형
                value=float(row["value"]),                               # 획득 점수
                max_value=float(row.get("max_value") or DEFAULT_MAX_VALUE),  # 만점 (기본 10)
                weight=float(row.get("weight") or DEFAULT_WEIGHT),       # 가중치 (기본 10)
                date=date.fromisoformat(row["date"].strip()),            # 평가 일자
                comment=(row.get("comment") or "").strip() or None       # 코멘트
            )
            db.add(grade)
            count += 1

    db.commit()
    logger.info(f"성적 CSV → DB 마이그레이션 완료: {count}건")
    return count


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    session = SessionLocal()
    try:
        migrate_grades(session, sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
    finally:
        session.close()
