from typing import Any, Dict, List, Optional, Tuple

import requests
from requests import RequestException

from schoolorganizer.config.logger import get_logger
from schoolorganizer.config.settings import settings
from schoolorganizer.core.entities import Course, Task
from schoolorganizer.core.planner import classify_assignment

logger = get_logger("canvas")


class CanvasServiceError(Exception):
    pass


class CanvasService:
    API_PREFIX = "/api/v1"
    PAGE_SIZE = 50

    def __init__(
        self,
        base_url: str,
        access_token: str,
        timeout: int = 15,
        default_credits: int = 3,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url:
            raise CanvasServiceError("Missing CANVAS_BASE_URL in environment")
        if not access_token:
            raise CanvasServiceError("Missing CANVAS_ACCESS_TOKEN in environment")
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}{self.API_PREFIX}"
        self.timeout = timeout
        self.default_credits = default_credits
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {access_token}"})

    @classmethod
    def from_settings(cls) -> "CanvasService":
        return cls(
            settings.canvas_base_url,
            settings.canvas_access_token,
            timeout=settings.canvas_timeout,
            default_credits=settings.canvas_default_credits,
        )

    def _get(self, url: str, params: Optional[Dict[str, Any]]) -> requests.Response:
        try:
            res = self.session.get(url, params=params, timeout=self.timeout)
        except RequestException as exc:
            raise CanvasServiceError(f"CANVAS_UNAVAILABLE: {exc}") from exc
        if res.status_code >= 400:
            raise CanvasServiceError(f"Canvas returned HTTP {res.status_code} for {url}")
        return res

    def fetch_all_pages(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Follow Canvas `Link: rel="next"` pagination and return every record."""
        results: List[Dict[str, Any]] = []
        next_url: Optional[str] = f"{self.api_url}{path}"
        next_params: Optional[Dict[str, Any]] = {"per_page": self.PAGE_SIZE, **(params or {})}

        while next_url:
            res = self._get(next_url, next_params)
            try:
                page = res.json()
            except ValueError as exc:
                raise CanvasServiceError(f"Invalid JSON from Canvas for {next_url}") from exc
            if isinstance(page, list):
                results.extend(page)

            # The next link already carries the query string.
            next_url = res.links.get("next", {}).get("url")
            next_params = None

        return results

    def _active_courses(self) -> List[Dict[str, Any]]:
        courses = self.fetch_all_pages(
            "/courses",
            {"enrollment_state": "active", "include[]": ["term"]},
        )
        return [c for c in courses if not c.get("access_restricted_by_date")]

    @staticmethod
    def _course_name(course: Dict[str, Any]) -> str:
        return course.get("name") or course.get("course_code") or f"Course {course.get('id')}"

    @staticmethod
    def _term_name(course: Dict[str, Any]) -> Optional[str]:
        term = course.get("term")
        return term.get("name") if isinstance(term, dict) else None

    def list_courses(self) -> List[Dict[str, Any]]:
        return [
            {"id": c.get("id"), "name": self._course_name(c), "term": self._term_name(c)}
            for c in self._active_courses()
        ]

    def import_assignments(self) -> Tuple[List[Course], List[Task]]:
        courses: List[Course] = []
        tasks: List[Task] = []

        for raw in self._active_courses():
            local_id = f"canvas_{raw.get('id')}"
            courses.append(
                Course(
                    id=local_id,
                    name=self._course_name(raw),
                    credits=float(self.default_credits),
                    canvas_id=raw.get("id"),
                    term=self._term_name(raw),
                )
            )

            try:
                assignments = self.fetch_all_pages(
                    f"/courses/{raw.get('id')}/assignments",
                    {"include[]": ["submission"]},
                )
            except CanvasServiceError as exc:
                logger.error("Error fetching assignments for course %s: %s", raw.get("id"), exc)
                continue

            for a in assignments:
                if not a.get("due_at"):
                    continue
                tasks.append(
                    Task(
                        id=f"canvas_task_{a.get('id')}",
                        title=a.get("name") or f"Assignment {a.get('id')}",
                        course_id=local_id,
                        type=classify_assignment(a.get("name")),
                        due=a["due_at"],
                        estimate_hours=None,
                        completed=bool(a.get("has_submitted_submissions")),
                        steps=[],
                    )
                )

        logger.info("Imported %d courses and %d tasks from Canvas", len(courses), len(tasks))
        return courses, tasks
