from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from schoolorganizer.core.entities import Course, GradeItem, Step, Task, make_id


@dataclass(frozen=True)
class Snapshot:
    courses: Tuple[Course, ...]
    grades: Tuple[GradeItem, ...]


@dataclass
class OrganizerState:
    courses: List[Course] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    grades: List[GradeItem] = field(default_factory=list)
    selected_task_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrganizerState":
        def _records(key: str) -> List[Dict[str, Any]]:
            raw = data.get(key) or []
            return [item for item in raw if isinstance(item, dict)] if isinstance(raw, list) else []

        selected = data.get("selectedTaskId", data.get("selected_task_id"))
        return cls(
            courses=[Course.from_dict(c) for c in _records("courses")],
            tasks=[Task.from_dict(t) for t in _records("tasks")],
            grades=[GradeItem.from_dict(g) for g in _records("grades")],
            selected_task_id=str(selected) if selected else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "courses": [c.to_dict() for c in self.courses],
            "tasks": [t.to_dict() for t in self.tasks],
            "grades": [g.to_dict() for g in self.grades],
            "selectedTaskId": self.selected_task_id,
        }

    def snapshot(self) -> Snapshot:
        return Snapshot(courses=tuple(self.courses), grades=tuple(self.grades))

    def find_course(self, course_id: str) -> Optional[Course]:
        return next((c for c in self.courses if c.id == course_id), None)

    def find_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def upsert_course(self, name: str, credits: float, course_id: Optional[str] = None) -> Course:
        existing = self.find_course(course_id) if course_id else None
        if existing is not None:
            updated = replace(existing, name=name, credits=credits)
            self.courses[self.courses.index(existing)] = updated
            return updated
        course = Course(id=course_id or make_id("course"), name=name, credits=credits)
        self.courses.append(course)
        return course

    def delete_course(self, course_id: str) -> None:
        # Tasks and grade items keep their course_id and become orphaned.
        self.courses = [c for c in self.courses if c.id != course_id]

    def upsert_grade(self, item: GradeItem) -> GradeItem:
        if not item.id:
            item = replace(item, id=make_id("grade"))
        for idx, existing in enumerate(self.grades):
            if existing.id == item.id:
                self.grades[idx] = item
                return item
        self.grades.append(item)
        return item

    def delete_grade(self, grade_id: str) -> None:
        self.grades = [g for g in self.grades if g.id != grade_id]

    def upsert_task(self, task: Task) -> Task:
        if not task.id:
            task.id = make_id("task")
        for idx, existing in enumerate(self.tasks):
            if existing.id == task.id:
                self.tasks[idx] = task
                return task
        self.tasks.append(task)
        return task

    def delete_task(self, task_id: str) -> None:
        self.tasks = [t for t in self.tasks if t.id != task_id]
        if self.selected_task_id == task_id:
            self.selected_task_id = None

    def add_step(self, task_id: str, title: str) -> Optional[Step]:
        task = self.find_task(task_id)
        title = title.strip()
        if task is None or not title:
            return None
        step = Step(id=make_id("step"), title=title)
        task.steps.append(step)
        return step

    def set_step_done(self, task_id: str, step_id: str, done: bool) -> bool:
        task = self.find_task(task_id)
        if task is None:
            return False
        for step in task.steps:
            if step.id == step_id:
                step.done = done
                return True
        return False

    def merge_import(self, courses: Iterable[Course], tasks: Iterable[Task]) -> None:
        for course in courses:
            existing = self.find_course(course.id)
            if existing is not None:
                self.courses[self.courses.index(existing)] = course
            else:
                self.courses.append(course)
        for task in tasks:
            self.upsert_task(task)
