from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from schoolorganizer.config.logger import get_logger
from schoolorganizer.config.settings import Settings, settings
from schoolorganizer.core.entities import Course, GradeItem
from schoolorganizer.core.gpa import describe_what_if, summarize_gpa, what_if_gpa
from schoolorganizer.core.grades import percent_to_letter_and_gpa
from schoolorganizer.services.canvas_service import CanvasService, CanvasServiceError

logger = get_logger("api")

NOT_CONFIGURED = "Canvas not configured on server (.env missing)"


def warn_if_canvas_unconfigured(cfg: Settings = settings) -> bool:
    if cfg.canvas_configured:
        return False
    logger.warning(
        "Missing CANVAS_BASE_URL or CANVAS_ACCESS_TOKEN in .env. Canvas integration will not work."
    )
    return True


warn_if_canvas_unconfigured()


app = FastAPI(title="School Organizer API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class DatasetPayload(BaseModel):
    courses: List[Dict[str, Any]] = Field(default_factory=list)
    grades: List[Dict[str, Any]] = Field(default_factory=list)


class GpaPayload(DatasetPayload):
    overrides: Dict[str, float] = Field(default_factory=dict)


class WhatIfPayload(DatasetPayload):
    course_id: str = Field(min_length=1)
    percent: float


def _canvas() -> CanvasService:
    try:
        return CanvasService.from_settings()
    except CanvasServiceError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=NOT_CONFIGURED) from exc


def _dataset(payload: DatasetPayload):
    courses = [Course.from_dict(c) for c in payload.courses]
    grades = [GradeItem.from_dict(g) for g in payload.grades]
    return courses, grades


@app.get("/api/health")
def health() -> Dict[str, Any]:
    return {"ok": True, "message": "School Organizer server running"}


@app.get("/api/canvas/courses")
def canvas_courses() -> Dict[str, Any]:
    canvas = _canvas()
    try:
        return {"courses": canvas.list_courses()}
    except CanvasServiceError as exc:
        logger.error("Error fetching Canvas courses: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch courses from Canvas",
        ) from exc


@app.get("/api/canvas/assignments")
def canvas_assignments() -> Dict[str, Any]:
    canvas = _canvas()
    try:
        courses, tasks = canvas.import_assignments()
    except CanvasServiceError as exc:
        logger.error("Error in /api/canvas/assignments: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch Canvas assignments",
        ) from exc
    return {
        "courses": [c.to_dict() for c in courses],
        "tasks": [t.to_dict() for t in tasks],
    }


@app.post("/api/gpa")
def gpa(payload: GpaPayload) -> Dict[str, Any]:
    courses, grades = _dataset(payload)
    summary = summarize_gpa(courses, grades, payload.overrides)
    return {
        "gpa": summary.gpa,
        "courses": [
            {
                "id": s.course_id,
                "name": s.name,
                "credits": s.credits,
                "percent": s.percent,
                "letter": s.letter,
                "gpa": s.gpa,
            }
            for s in summary.courses
        ],
        "summary": summary.describe(),
    }


@app.post("/api/gpa/what-if")
def gpa_what_if(payload: WhatIfPayload) -> Dict[str, Optional[Any]]:
    courses, grades = _dataset(payload)
    return {
        "gpa": what_if_gpa(courses, grades, payload.course_id, payload.percent),
        "letter": percent_to_letter_and_gpa(payload.percent).letter,
        "message": describe_what_if(courses, grades, payload.course_id, payload.percent),
    }
