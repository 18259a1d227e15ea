from datetime import date

import pytest

from services import grade_calculations as gc


def grade(enrollment_id, value, grade_type="exam", day=date(2025, 2, 3), weight=10, max_value=10, name="Parcial", subject="Cálculo"):
    return {
        "enrollment_id": enrollment_id,
        "name": name,
        "grade_type": grade_type,
        "value": value,
        "max_value": max_value,
        "weight": weight,
        "date": day,
        "subject_name": subject,
    }


def test_subject_average_rounds_and_defaults_to_zero():
    assert gc.subject_average([grade(1, 2, max_value=3)]) == 6.67
    assert gc.subject_average([]) == 0


def test_summary_stats_pass_fail_counts():
    subjects = [{"average": 9.5}, {"average": 6.0}, {"average": 5.99}, {"average": 0}]
    stats = gc.summary_stats(subjects)

    assert stats == {
        # 0은 평균 계산에서 제외
        "overall_average": round((9.5 + 6.0 + 5.99) / 3, 2),
        "passed": 2,
        "failed": 1,
        "total_subjects": 4,
    }


def test_summary_stats_without_grades():
    assert gc.summary_stats([]) == {"overall_average": 0, "passed": 0, "failed": 0, "total_subjects": 0}


@pytest.mark.parametrize("average,level", [(9.2, "excellent"), (8, "good"), (7.5, "fair"), (6.9, "low")])
def test_performance_level(average, level):
    assert gc.performance_level(average) == level


def test_weekly_evolution_is_cumulative_per_iso_week():
    grades = [
        grade(1, 10, day=date(2025, 3, 12)),
        grade(1, 6, day=date(2025, 3, 10)),
        grade(1, 5, day=date(2025, 3, 17)),
    ]
    assert gc.weekly_evolution(grades) == [
        {"period": "2025-03-10", "cumulative_average": 8.0},
        {"period": "2025-03-17", "cumulative_average": 7.0},
    ]


def test_weekly_evolution_crosses_year_boundary():
    grades = [grade(1, 8, day=date(2024, 12, 31)), grade(1, 6, day=date(2025, 1, 2))]
    # 같은 ISO 주(2025-W01) → 한 점
    assert gc.weekly_evolution(grades) == [{"period": "2024-12-30", "cumulative_average": 7.0}]


def test_merge_evolutions_averages_same_week_and_ignores_zero():
    a = [{"period": "2025-03-10", "cumulative_average": 8.0}, {"period": "2025-03-17", "cumulative_average": 7.0}]
    b = [{"period": "2025-03-10", "cumulative_average": 6.0}, {"period": "2025-02-03", "cumulative_average": 0}]

    assert gc.merge_evolutions([a, b]) == [
        {"period": "2025-02-03", "average": 0},
        {"period": "2025-03-10", "average": 7.0},
        {"period": "2025-03-17", "average": 7.0},
    ]


def test_subject_bar_chart_truncates_names():
    subjects = [
        {"subject_name": "Cálculo Diferencial e Integral", "average": 8.5},
        {"subject_name": "Física", "average": 0},
    ]
    assert gc.subject_bar_chart(subjects) == [{"subject": "Cálculo Diferen", "average": 8.5}]


def test_summary_by_type_keeps_fixed_order():
    grades = [
        grade(1, 8, grade_type="project"),
        grade(1, 9, grade_type="exam"),
        grade(1, 40, grade_type="exam", max_value=50),
    ]
    assert gc.summary_by_type(grades) == [
        {"type": "exam", "count": 2, "average": 8.5},
        {"type": "project", "count": 1, "average": 8.0},
    ]


def test_radar_by_type_uses_labels_and_drops_zero():
    grades = [grade(1, 10, grade_type="homework"), grade(1, 0, grade_type="participation")]
    assert gc.radar_by_type(grades) == [{"type": "Homework", "value": 10.0}]


def test_filter_grades_by_enrollment_and_search():
    grades = [
        grade(1, 9, name="Parcial 1", subject="Cálculo"),
        grade(1, 8, name="Tarea 1", subject="Cálculo"),
        grade(2, 7, name="Proyecto", subject="Física"),
    ]
    assert len(gc.filter_grades(grades)) == 3
    assert [x["name"] for x in gc.filter_grades(grades, search="TAREA")] == ["Tarea 1"]
    assert [x["name"] for x in gc.filter_grades(grades, search="física")] == ["Proyecto"]
    assert [x["name"] for x in gc.filter_grades(grades, enrollment_id=1, search="parcial")] == ["Parcial 1"]
