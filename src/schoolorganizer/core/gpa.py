from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

from schoolorganizer.core.entities import Course, GradeItem
from schoolorganizer.core.grades import get_course_percent, is_number, percent_to_letter_and_gpa

NO_GPA_MESSAGE = "Add courses with credits and grade items to see GPA."
NO_WHAT_IF_MESSAGE = "Add credits/grades for at least one course to compute GPA."


@dataclass(frozen=True)
class CourseStanding:
    course_id: str
    name: str
    credits: float
    percent: Optional[float]
    letter: str
    gpa: Optional[float]

    def describe(self) -> str:
        pct = f"{self.percent:.1f}%" if self.percent is not None else "N/A"
        return f"{self.name}: {pct} ({self.letter})"


@dataclass(frozen=True)
class GpaSummary:
    gpa: Optional[float]
    courses: List[CourseStanding]

    def describe(self) -> str:
        if self.gpa is None:
            return NO_GPA_MESSAGE
        lines = " | ".join(c.describe() for c in self.courses)
        return f"Overall GPA: {self.gpa:.2f}\n{lines}"


def _credited(course: Course) -> bool:
    return is_number(course.credits) and course.credits > 0


def compute_gpa(
    courses: Iterable[Course],
    grade_items: Sequence[GradeItem],
    overrides: Optional[Mapping[str, float]] = None,
) -> Optional[float]:
    """
    Credit-weighted GPA over every course with a grade and positive credits.
    Returns None when no such course exists.
    """
    overrides = overrides or {}
    weighted = 0.0
    total_credits = 0.0
    for course in courses:
        pct = get_course_percent(course.id, grade_items, overrides.get(course.id))
        mark = percent_to_letter_and_gpa(pct)
        if mark.gpa is not None and _credited(course):
            weighted += mark.gpa * course.credits
            total_credits += course.credits
    if total_credits == 0:
        return None
    return weighted / total_credits


def what_if_gpa(
    courses: Iterable[Course],
    grade_items: Sequence[GradeItem],
    course_id: str,
    percent: float,
) -> Optional[float]:
    return compute_gpa(courses, grade_items, {course_id: percent})


def summarize_gpa(
    courses: Sequence[Course],
    grade_items: Sequence[GradeItem],
    overrides: Optional[Mapping[str, float]] = None,
) -> GpaSummary:
    overrides = overrides or {}
    standings: List[CourseStanding] = []
    for course in courses:
        pct = get_course_percent(course.id, grade_items, overrides.get(course.id))
        mark = percent_to_letter_and_gpa(pct)
        standings.append(
            CourseStanding(
                course_id=course.id,
                name=course.name,
                credits=course.credits,
                percent=pct,
                letter=mark.letter,
                gpa=mark.gpa,
            )
        )
    return GpaSummary(gpa=compute_gpa(courses, grade_items, overrides), courses=standings)


def describe_what_if(
    courses: Sequence[Course],
    grade_items: Sequence[GradeItem],
    course_id: str,
    percent: float,
) -> str:
    gpa = what_if_gpa(courses, grade_items, course_id, percent)
    if gpa is None:
        return NO_WHAT_IF_MESSAGE
    letter = percent_to_letter_and_gpa(percent).letter
    course = next((c for c in courses if c.id == course_id), None)
    name = course.name if course else "this course"
    return f"If {name} ended at {percent:.1f}% ({letter}), your overall GPA would be {gpa:.2f}."
