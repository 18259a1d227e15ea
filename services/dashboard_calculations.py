"""
services/dashboard_calculations.py

- 대시보드 집계용 순수 함수 모음 (DB 접근 없음)
- 입력은 이미 조회된 dict 리스트(스냅샷), 출력은 차트/카드용 dict 리스트
- 성적 정규화: value / max_value × 10, weight 가중 평균
- 주 번호는 ISO 8601 기준 (연말/연초 경계 포함)
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from config.constants import GROUP_BY_WEEK
from config.settings import settings

# ✅ 분포 구간 (상위 구간부터, 하한 포함)
GRADE_RANGES = [
    ("9.5-10", 9.5),
    ("9.0-9.4", 9.0),
    ("8.5-8.9", 8.5),
    ("8.0-8.4", 8.0),
    ("7.5-7.9", 7.5),
    ("7.0-7.4", 7.0),
    ("6.5-6.9", 6.5),
    ("6.0-6.4", 6.0),
    ("5.0-5.9", 5.0),
    ("0-4.9", float("-inf")),
]


# ==========================================================
# [1단계] 기본 계산
# ==========================================================

def to_date(value) -> date:
    """date / datetime / ISO 문자열을 date로 변환"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def normalize_grade(value, max_value, scale: Optional[int] = None) -> Optional[float]:
    """점수를 scale(기본 10)점 만점으로 환산. 만점이 0 이하이면 None"""
    scale = scale or settings.GRADE_SCALE
    max_value = float(max_value or 0)
    if max_value <= 0:
        return None
    return float(value or 0) / max_value * scale


def weighted_average(grades: Iterable[dict]) -> Optional[float]:
    """
    가중 평균 (0~10)
    - weight 누락 시 0으로 처리
    - 가중치 합이 0이면 None
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for g in grades:
        normalized = normalize_grade(g.get("value"), g.get("max_value"))
        if normalized is None:
            continue
        weight = float(g.get("weight") or 0)
        weighted_sum += normalized * weight
        total_weight += weight
    if total_weight <= 0:
        return None
    return weighted_sum / total_weight


def averages_by_enrollment(enrollment_ids: Iterable[int], grades: Iterable[dict]) -> Dict[int, float]:
    """수강별 가중 평균. 가중치 합이 0인 수강은 제외"""
    grouped = defaultdict(list)
    for g in grades:
        grouped[g["enrollment_id"]].append(g)

    averages = {}
    for enrollment_id in enrollment_ids:
        avg = weighted_average(grouped.get(enrollment_id, []))
        if avg is not None:
            averages[enrollment_id] = avg
    return averages


def mean(values: Iterable[float], ndigits: int = 2) -> float:
    values = list(values)
    if not values:
        return 0
    return round(sum(values) / len(values), ndigits)


def percentage(part: float, total: float, ndigits: int = 2) -> float:
    return round(part / total * 100, ndigits) if total > 0 else 0


# ==========================================================
# [2단계] 성적 분포 (10구간 히스토그램)
# ==========================================================

def grade_bucket(average: float) -> str:
    for name, lower in GRADE_RANGES:
        if average >= lower:
            return name
    return GRADE_RANGES[-1][0]


def grade_distribution(averages: Iterable[float]) -> List[dict]:
    counts = {name: 0 for name, _ in GRADE_RANGES}
    for avg in averages:
        counts[grade_bucket(avg)] += 1

    total = sum(counts.values())
    return [
        {"name": name, "value": counts[name], "percentage": percentage(counts[name], total)}
        for name, _ in GRADE_RANGES
    ]


# ==========================================================
# [3단계] 기간 버킷 (주/월)
# ==========================================================

def iso_week(value) -> tuple:
    """(ISO 연도, ISO 주 번호)"""
    iso_year, week, _ = to_date(value).isocalendar()
    return iso_year, week


def period_key(value, group_by: str) -> str:
    """정렬 가능한 기간 키: 주 → 2025-W03, 월 → 2025-01"""
    d = to_date(value)
    if group_by == GROUP_BY_WEEK:
        iso_year, week = iso_week(d)
        return f"{iso_year}-W{week:02d}"
    return f"{d.year}-{d.month:02d}"


def period_label(key: str, group_by: str) -> str:
    """기간 키 → 표시용 라벨 (Week 3, 2025 / Jan 2025)"""
    if group_by == GROUP_BY_WEEK:
        year, week = key.split("-W")
        return f"Week {int(week)}, {year}"
    return datetime.strptime(key, "%Y-%m").strftime("%b %Y")


# ==========================================================
# [4단계] 출석률
# ==========================================================

def attended_pairs(attendance: Iterable[dict], allowed: set) -> set:
    """(session_id, student_id) 중복 제거 후 허용 쌍만 남김"""
    return {
        (a["session_id"], a["student_id"])
        for a in attendance
        if (a["session_id"], a["student_id"]) in allowed
    }


def attendance_by_group(groups: List[dict], sessions: List[dict],
                        enrollments: List[dict], attendance: List[dict]) -> List[dict]:
    """
    그룹별 출석률 = 출석 쌍 / (회차 수 × 활성 학생 수) × 100
    - groups: {id, label}
    - enrollments: 활성 수강만 {group_id, student_id}
    """
    sessions_by_group = defaultdict(list)
    for s in sessions:
        sessions_by_group[s["group_id"]].append(s["id"])

    students_by_group = defaultdict(set)
    for e in enrollments:
        students_by_group[e["group_id"]].add(e["student_id"])

    result = []
    for group in groups:
        session_ids = sessions_by_group.get(group["id"], [])
        student_ids = students_by_group.get(group["id"], set())
        if not session_ids or not student_ids:
            result.append({
                "group": group["label"],
                "attendance": 0,
                "students": len(student_ids),
                "sessions": len(session_ids),
            })
            continue

        allowed = {(sid, stu) for sid in session_ids for stu in student_ids}
        attended = attended_pairs(attendance, allowed)
        result.append({
            "group": group["label"],
            "attendance": percentage(len(attended), len(session_ids) * len(student_ids)),
            "students": len(student_ids),
            "sessions": len(session_ids),
        })
    return result


# ==========================================================
# [5단계] 추이 (성적 / 출석)
# ==========================================================

def grade_trends(grades: List[dict], group_by: str) -> List[dict]:
    """
    기간별 평균 추이
    - 각 (수강, 기간)마다 해당 기간 말까지의 누적 가중 평균
    - 기간 값 = 수강별 누적 평균의 평균
    """
    ordered = sorted(grades, key=lambda g: to_date(g["date"]))

    by_enrollment = defaultdict(list)
    for g in ordered:
        by_enrollment[g["enrollment_id"]].append(g)

    buckets = defaultdict(list)
    for items in by_enrollment.values():
        seen = []
        for idx, g in enumerate(items):
            seen.append(g)
            key = period_key(g["date"], group_by)
            is_last_in_bucket = idx == len(items) - 1 or period_key(items[idx + 1]["date"], group_by) != key
            if not is_last_in_bucket:
                continue
            avg = weighted_average(seen)
            bucket = buckets[key]
            if avg is not None:
                bucket.append(avg)

    return [
        {
            "period": period_label(key, group_by),
            "average": mean(buckets[key]),
            "students": len(buckets[key]),
        }
        for key in sorted(buckets)
    ]


def attendance_trends(sessions: List[dict], enrollments: List[dict],
                      attendance: List[dict], group_by: str) -> List[dict]:
    """
    기간별 출석률 추이
    - 분모: 기간 내 회차마다 해당 그룹의 활성 수강생 수를 합산
    - 분자: 수강 중인 학생의 (회차, 학생) 출석 쌍
    """
    students_by_group = defaultdict(set)
    for e in enrollments:
        students_by_group[e["group_id"]].add(e["student_id"])

    buckets = defaultdict(list)
    for s in sorted(sessions, key=lambda s: to_date(s["date"])):
        buckets[period_key(s["date"], group_by)].append(s)

    result = []
    for key in sorted(buckets):
        bucket_sessions = buckets[key]
        allowed = {
            (s["id"], stu)
            for s in bucket_sessions
            for stu in students_by_group.get(s["group_id"], set())
        }
        attended = attended_pairs(attendance, allowed)
        result.append({
            "period": period_label(key, group_by),
            "percentage": percentage(len(attended), len(allowed)),
            "sessions": len(bucket_sessions),
        })
    return result


# ==========================================================
# [6단계] 인기 과목
# ==========================================================

def popular_subjects(groups: List[dict], enrollments: List[dict], limit: int = 5) -> List[dict]:
    """
    과목별 고유 수강생 수 순위
    - groups: {id, subject_id, subject_name, subject_code}
    - enrollments: 활성 수강 {group_id, student_id}
    """
    subjects = {}
    group_to_subject = {}
    for g in groups:
        entry = subjects.setdefault(g["subject_id"], {
            "id": g["subject_id"],
            "name": (g.get("subject_name") or "Subject")[:25],
            "code": g.get("subject_code"),
            "groups": set(),
            "students": set(),
        })
        entry["groups"].add(g["id"])
        group_to_subject[g["id"]] = g["subject_id"]

    for e in enrollments:
        subject_id = group_to_subject.get(e["group_id"])
        if subject_id is not None:
            subjects[subject_id]["students"].add(e["student_id"])

    ranked = sorted(subjects.values(), key=lambda s: len(s["students"]), reverse=True)
    return [
        {
            "id": s["id"],
            "name": s["name"],
            "code": s["code"],
            "students": len(s["students"]),
            "groups": len(s["groups"]),
        }
        for s in ranked[:limit]
    ]
