"""Admin Reporting — pure aggregations over lesson facts.

Invariants:
    - Revenue figures (quarterly, distribution) exclude Cancelled lessons
    - Activity figures (popular instruments, user metrics, repeat rate) count every lesson
    - Percentages are rounded to 2 decimal places; an empty input yields 0, never a division error
    - Rankings sort by value descending, ties broken by name ascending (deterministic output)
    - pareto_cutoff returns the SHORTEST ranked prefix reaching >= share of total

Design Decisions:
    - LessonFact decouples aggregation from ORM rows: the service projects rows once,
      every report is a pure function (ADR: functional core, imperative shell)
    - Aggregation in Python instead of SQL: quarter bucketing via strftime is
      dialect-specific, and the data set is one platform's lessons
"""

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import datetime

from lessonbook.core.domain_types import LessonStatus


PARETO_SHARE: float = 0.5


@dataclass(frozen=True)
class LessonFact:
    """The slice of a lesson that reports need."""
    lesson_id: int
    teacher_id: int
    teacher_name: str
    student_id: int
    student_name: str
    instrument: str
    start_date_time: datetime
    price: float
    status: str

    @property
    def billable(self) -> bool:
        return self.status != LessonStatus.CANCELLED.value


def quarter_of(moment: datetime) -> int:
    return (moment.month - 1) // 3 + 1


def _percentage(part: int | float, whole: int | float) -> float:
    if not whole:
        return 0.0
    return round(part / whole * 100, 2)


def quarterly_revenue(lessons: list[LessonFact]) -> list[dict]:
    """Revenue and lesson count per calendar quarter, chronological."""
    buckets: dict[tuple[int, int], list[float]] = defaultdict(list)
    for lesson in lessons:
        if not lesson.billable:
            continue
        key = (lesson.start_date_time.year, quarter_of(lesson.start_date_time))
        buckets[key].append(lesson.price)
    return [
        {
            "quarter": f"{year} Q{quarter}",
            "revenue": round(sum(prices), 2),
            "lesson_count": len(prices),
        }
        for (year, quarter), prices in sorted(buckets.items())
    ]


def popular_instruments(lessons: list[LessonFact]) -> list[dict]:
    counts = Counter(lesson.instrument for lesson in lessons)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [{"instrument": name, "count": count} for name, count in ranked]


def referral_breakdown(counts: dict[str, int]) -> list[dict]:
    """Student referral sources with share of all students."""
    total = sum(counts.values())
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        {
            "referral_source": source,
            "count": count,
            "percentage": _percentage(count, total),
        }
        for source, count in ranked
    ]


def user_metrics(lessons: list[LessonFact]) -> dict:
    """Distinct teachers and students that appear in at least one lesson."""
    teachers = {lesson.teacher_id for lesson in lessons}
    students = {lesson.student_id for lesson in lessons}
    return {
        "total_teachers": len(teachers),
        "total_students": len(students),
        "total_users": len(teachers) + len(students),
    }


def repeat_booking_rate(lessons: list[LessonFact]) -> dict:
    per_student = Counter(lesson.student_id for lesson in lessons)
    repeaters = sum(1 for count in per_student.values() if count > 1)
    return {
        "total_students_with_lessons": len(per_student),
        "students_with_multiple_lessons": repeaters,
        "repeat_rate": _percentage(repeaters, len(per_student)),
    }


def pareto_cutoff(
    ranked: list[tuple[str, float]], total: float, share: float = PARETO_SHARE,
) -> tuple[list[str], float]:
    """Shortest prefix of ranked (name, revenue) whose sum reaches share * total."""
    names: list[str] = []
    running = 0.0
    target = total * share
    for name, revenue in ranked:
        running += revenue
        names.append(name)
        if running >= target:
            break
    return names, round(running, 2)


def _rank_revenue(groups: dict, name_of) -> list[dict]:
    rows = [
        {
            "key": key,
            "name": name_of(key, facts),
            "revenue": round(sum(f.price for f in facts), 2),
            "lesson_count": len(facts),
        }
        for key, facts in groups.items()
    ]
    rows.sort(key=lambda row: (-row["revenue"], row["name"]))
    return rows


def revenue_distribution(lessons: list[LessonFact]) -> dict:
    """Revenue by instrument and by student, with 50% Pareto cutoffs."""
    billable = [lesson for lesson in lessons if lesson.billable]
    total = round(sum(lesson.price for lesson in billable), 2)

    by_instrument: dict[str, list[LessonFact]] = defaultdict(list)
    by_student: dict[int, list[LessonFact]] = defaultdict(list)
    for lesson in billable:
        by_instrument[lesson.instrument].append(lesson)
        by_student[lesson.student_id].append(lesson)

    instruments = _rank_revenue(by_instrument, lambda key, _: key)
    students = _rank_revenue(by_student, lambda _, facts: facts[0].student_name)

    top_instruments, instruments_revenue = pareto_cutoff(
        [(row["name"], row["revenue"]) for row in instruments], total,
    )
    top_students, students_revenue = pareto_cutoff(
        [(row["name"], row["revenue"]) for row in students], total,
    )

    return {
        "total_revenue": total,
        "instrument_distribution": {
            "instruments": [
                {
                    "instrument": row["name"],
                    "revenue": row["revenue"],
                    "lesson_count": row["lesson_count"],
                }
                for row in instruments
            ],
            "instruments_for_50_percent": top_instruments,
            "instruments_count": len(top_instruments),
            "instruments_revenue": instruments_revenue,
        },
        "student_distribution": {
            "students": [
                {
                    "student_id": row["key"],
                    "student_name": row["name"],
                    "revenue": row["revenue"],
                    "lesson_count": row["lesson_count"],
                }
                for row in students
            ],
            "students_for_50_percent": top_students,
            "students_count": len(top_students),
            "students_revenue": students_revenue,
        },
    }
