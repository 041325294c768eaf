import math
from dataclasses import dataclass
from typing import Any, Iterable, NamedTuple, Optional, Tuple

from schoolorganizer.core.entities import GradeItem


@dataclass(frozen=True)
class ScaleRow:
    min_percent: float
    letter: str
    gpa: float


GPA_SCALE: Tuple[ScaleRow, ...] = (
    ScaleRow(93, "A", 4.0),
    ScaleRow(90, "A-", 3.7),
    ScaleRow(87, "B+", 3.3),
    ScaleRow(83, "B", 3.0),
    ScaleRow(80, "B-", 2.7),
    ScaleRow(77, "C+", 2.3),
    ScaleRow(73, "C", 2.0),
    ScaleRow(70, "C-", 1.7),
    ScaleRow(60, "D", 1.0),
    ScaleRow(0, "F", 0.0),
)

NO_LETTER = "-"


class GradeMark(NamedTuple):
    letter: str
    gpa: Optional[float]


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def percent_to_letter_and_gpa(percent: Optional[float]) -> GradeMark:
    """
    Map a course percent to its letter and GPA points.
    Ungraded input gives ("-", None), never 0.0.
    """
    if not is_number(percent):
        return GradeMark(NO_LETTER, None)
    for row in GPA_SCALE:
        if percent >= row.min_percent:
            return GradeMark(row.letter, row.gpa)
    return GradeMark("F", 0.0)


def get_course_percent(
    course_id: str,
    grade_items: Iterable[GradeItem],
    override_percent: Optional[float] = None,
) -> Optional[float]:
    """
    Weighted percent earned so far for one course.

    Weights are percentage points of the course grade and the sum is not
    renormalized, so a course with 40 points graded tops out at 40. When no
    item carries a positive weight the plain mean of graded items is used.
    """
    if override_percent is not None:
        return override_percent

    items = [g for g in grade_items if g.course_id == course_id]
    if not items:
        return None

    total_weight = 0.0
    weighted_sum = 0.0
    for item in items:
        weight = item.weight if is_number(item.weight) else 0.0
        if is_number(item.percent) and weight > 0:
            total_weight += weight
            weighted_sum += item.percent * (weight / 100)

    if total_weight == 0:
        graded = [item.percent for item in items if is_number(item.percent)]
        if not graded:
            return None
        return sum(graded) / len(graded)

    # NOTE: zero-weight items are dropped once any item has a positive weight.
    return weighted_sum
