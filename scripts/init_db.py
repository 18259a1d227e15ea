from database.db import Base, engine

# ✅ 모든 모델을 import 해야 metadata에 테이블이 등록됨
from models import attendance, class_sessions, enrollments, grades, groups, profiles, subjects  # noqa: F401


def create_tables(bind=engine):
    Base.metadata.create_all(bind=bind)


if __name__ == "__main__":
    create_tables()
    print("✅ 테이블 생성 완료")
