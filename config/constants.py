# ✅ 사용자 역할
ROLE_ADMIN = "admin"
ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"

# ✅ 수강 상태 (active, completed, dropped 중 집계 대상은 active만)
ENROLLMENT_ACTIVE = "active"
ENROLLMENT_DROPPED = "dropped"

# ✅ 평가 유형 (표시 순서 고정)
GRADE_TYPES = ("exam", "homework", "project", "participation", "presentation")
GRADE_TYPE_LABELS = {
    "exam": "Exam",
    "homework": "Homework",
    "project": "Project",
    "participation": "Participation",
    "presentation": "Presentation",
}

# ✅ 성적 기본값
DEFAULT_MAX_VALUE = 10.0
DEFAULT_WEIGHT = 10.0

# ✅ 그룹 정원 (기본 30, 1~100)
DEFAULT_GROUP_CAPACITY = 30
MAX_GROUP_CAPACITY = 100

# ✅ 추이 집계 단위
GROUP_BY_WEEK = "week"
