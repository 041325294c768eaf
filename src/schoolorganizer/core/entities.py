from __future__ import annotations

import math
import secrets
import string
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

_ID_ALPHABET = string.digits + string.ascii_lowercase


def make_id(prefix: str) -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"{prefix}_{suffix}"


def to_number(value: Any) -> Optional[float]:
    """Coerce a raw field to a float, or None when it is missing or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class Course:
    id: str
    name: str
    credits: float = 0.0
    canvas_id: Optional[int] = None
    term: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Course":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            credits=to_number(data.get("credits")) or 0.0,
            canvas_id=data.get("canvasId", data.get("canvas_id")),
            term=_optional_str(data.get("term")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name, "credits": self.credits}
        if self.canvas_id is not None:
            data["canvasId"] = self.canvas_id
        if self.term is not None:
            data["term"] = self.term
        return data


@dataclass(frozen=True)
class GradeItem:
    id: str
    course_id: Optional[str]
    name: str
    category: str = ""
    weight: Optional[float] = None
    percent: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GradeItem":
        return cls(
            id=str(data.get("id", "")),
            course_id=_optional_str(data.get("courseId", data.get("course_id"))),
            name=str(data.get("name", "")),
            category=str(data.get("category") or ""),
            weight=to_number(data.get("weight")),
            percent=to_number(data.get("percent")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "courseId": self.course_id,
            "name": self.name,
            "category": self.category,
            "weight": self.weight,
            "percent": self.percent,
        }


@dataclass
class Step:
    id: str
    title: str
    done: bool = False
    sub_due: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            done=bool(data.get("done", False)),
            sub_due=_optional_str(data.get("subDue", data.get("sub_due"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "done": self.done, "subDue": self.sub_due}


@dataclass
class Task:
    id: str
    title: str
    due: str
    course_id: Optional[str] = None
    type: str = "homework"
    estimate_hours: Optional[float] = None
    completed: bool = False
    steps: list[Step] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            due=str(data.get("due") or ""),
            course_id=_optional_str(data.get("courseId", data.get("course_id"))),
            type=str(data.get("type") or "homework"),
            estimate_hours=to_number(data.get("estimateHours", data.get("estimate_hours"))),
            completed=bool(data.get("completed", False)),
            steps=[Step.from_dict(s) for s in data.get("steps") or [] if isinstance(s, dict)],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "courseId": self.course_id,
            "type": self.type,
            "due": self.due,
            "estimateHours": self.estimate_hours,
            "completed": self.completed,
            "steps": [s.to_dict() for s in self.steps],
        }
