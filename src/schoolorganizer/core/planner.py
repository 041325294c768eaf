from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from schoolorganizer.core.entities import Step, Task, make_id

DEFAULT_STEPS = (
    "Research / Read instructions",
    "Outline or plan",
    "Draft / first attempt",
    "Edit / finalize & submit",
)

TASK_TYPES = ("homework", "project", "exam")
DEFAULT_UPCOMING_DAYS = 3
REMINDER_LEAD = timedelta(hours=1)


def parse_due(value: str | None) -> datetime | None:
    """Parse an ISO-8601 due string; naive values are taken as UTC."""
    if not value or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def classify_assignment(name: str | None) -> str:
    lowered = (name or "").lower()
    if any(word in lowered for word in ("quiz", "test", "exam")):
        return "exam"
    if "project" in lowered or "lab" in lowered:
        return "project"
    return "homework"


def generate_steps_for_task(task: Task, now: datetime | None = None) -> list[Step]:
    current = _now(now)
    due = parse_due(task.due)
    span = due - current if due is not None else None

    steps: list[Step] = []
    for idx, title in enumerate(DEFAULT_STEPS):
        sub_due = None
        if span is not None and span > timedelta(0):
            sub_due = (current + span * (idx + 1) / len(DEFAULT_STEPS)).isoformat()
        steps.append(Step(id=make_id("step"), title=title, done=False, sub_due=sub_due))
    return steps


def _due_sort_key(task: Task):
    due = parse_due(task.due)
    return (due is None, due or datetime.min.replace(tzinfo=timezone.utc))


def filter_tasks(
    tasks: Iterable[Task],
    course_id: Optional[str] = None,
    task_type: Optional[str] = None,
) -> list[Task]:
    selected = [
        t
        for t in tasks
        if (not course_id or t.course_id == course_id) and (not task_type or t.type == task_type)
    ]
    return sorted(selected, key=_due_sort_key)


def upcoming_tasks(
    tasks: Iterable[Task],
    days: int | float | None = DEFAULT_UPCOMING_DAYS,
    now: datetime | None = None,
) -> list[Task]:
    if isinstance(days, bool) or not isinstance(days, (int, float)) or not math.isfinite(days) or days <= 0:
        days = DEFAULT_UPCOMING_DAYS
    start = _now(now)
    end = start + timedelta(days=days)

    upcoming = []
    for task in tasks:
        due = parse_due(task.due)
        if due is not None and start <= due <= end and not task.completed:
            upcoming.append(task)
    return sorted(upcoming, key=_due_sort_key)


def reminder_at(task: Task, now: datetime | None = None) -> datetime | None:
    due = parse_due(task.due)
    if due is None:
        return None
    remind = due - REMINDER_LEAD
    if remind <= _now(now):
        return None
    return remind
