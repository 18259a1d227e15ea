"""
services/grade_calculations.py

- 학생 "내 성적" 화면용 집계 (순수 함수)
- 과목별 평균 → 전체 평균/통과·미달 수, 주간 누적 평균 추이, 차트용 데이터
"""

from collections import defaultdict
from datetime import timedelta
from typing import Iterable, List, Optional

from config.constants import GRADE_TYPES, GRADE_TYPE_LABELS, GROUP_BY_WEEK
from config.settings import settings
from services.dashboard_calculations import (
    mean,
    normalize_grade,
    period_key,
    to_date,
    weighted_average,
)


def subject_average(grades: Iterable[dict]) -> float:
    """과목(수강) 가중 평균, 소수 둘째 자리. 성적이 없으면 0"""
    avg = weighted_average(grades)
    return round(avg, 2) if avg is not None else 0


def summary_stats(subjects: List[dict], passing: Optional[float] = None) -> dict:
    """
    subjects: [{"average": float, ...}]
    - overall_average: 0보다 큰 과목 평균들의 평균
    - passed: 평균 >= 통과 기준 / failed: 0 < 평균 < 통과 기준
    """
    passing = settings.PASSING_AVERAGE if passing is None else passing
    averages = [s["average"] for s in subjects]
    return {
        "overall_average": mean(a for a in averages if a > 0),
        "passed": sum(1 for a in averages if a >= passing),
        "failed": sum(1 for a in averages if 0 < a < passing),
        "total_subjects": len(subjects),
    }


def performance_level(average: float) -> str:
    if average >= 9:
        return "excellent"
    if average >= 8:
        return "good"
    if average >= 7:
        return "fair"
    return "low"


# ==========================================================
# [추이] 주간 누적 평균
# ==========================================================

def week_start(value):
    d = to_date(value)
    return d - timedelta(days=d.weekday())


def weekly_evolution(grades: List[dict]) -> List[dict]:
    """한 수강의 ISO 주별 누적 가중 평균 (주 시작 월요일 기준)"""
    ordered = sorted(grades, key=lambda g: to_date(g["date"]))
    result = []
    seen = []
    for idx, g in enumerate(ordered):
        seen.append(g)
        key = period_key(g["date"], GROUP_BY_WEEK)
        if idx + 1 < len(ordered) and period_key(ordered[idx + 1]["date"], GROUP_BY_WEEK) == key:
            continue
        avg = weighted_average(seen)
        result.append({
            "period": week_start(g["date"]).isoformat(),
            "cumulative_average": round(avg, 2) if avg is not None else 0,
        })
    return result


def merge_evolutions(series: Iterable[List[dict]]) -> List[dict]:
    """여러 과목 추이를 같은 주끼리 묶어 평균 (0 값 제외)"""
    by_period = defaultdict(list)
    for items in series:
        for item in items:
            by_period[item["period"]].append(item["cumulative_average"])

    return [
        {"period": period, "average": mean(v for v in by_period[period] if v > 0)}
        for period in sorted(by_period)
    ]


# ==========================================================
# [차트] 막대 / 유형별 요약 / 레이더
# ==========================================================

def subject_bar_chart(subjects: List[dict]) -> List[dict]:
    return [
        {"subject": (s.get("subject_name") or "Subject")[:15], "average": s["average"]}
        for s in subjects
        if s["average"] > 0
    ]


def _type_average(grades: List[dict]) -> Optional[float]:
    values = [normalize_grade(g["value"], g["max_value"]) for g in grades]
    values = [v for v in values if v is not None]
    if not values:
        return None
    return sum(values) / len(values)


def summary_by_type(grades: List[dict]) -> List[dict]:
    """유형별 건수와 평균 (단순 평균, 가중치 미적용)"""
    result = []
    for grade_type in GRADE_TYPES:
        items = [g for g in grades if g.get("grade_type") == grade_type]
        if not items:
            continue
        avg = _type_average(items)
        result.append({
            "type": grade_type,
            "count": len(items),
            "average": round(avg, 2) if avg is not None else 0,
        })
    return result


def radar_by_type(grades: List[dict]) -> List[dict]:
    result = []
    for grade_type in GRADE_TYPES:
        avg = _type_average([g for g in grades if g.get("grade_type") == grade_type])
        value = round(avg, 2) if avg is not None else 0
        if value > 0:
            result.append({"type": GRADE_TYPE_LABELS[grade_type], "value": value})
    return result


def filter_grades(grades: List[dict], enrollment_id="all", search: str = "") -> List[dict]:
    """수강 선택 + 평가명/과목명 검색 (대소문자 무시)"""
    term = (search or "").lower()
    result = []
    for g in grades:
        if enrollment_id != "all" and g["enrollment_id"] != enrollment_id:
            continue
        if term and term not in (g.get("name") or "").lower() \
                and term not in (g.get("subject_name") or "").lower():
            continue
        result.append(g)
    return result
