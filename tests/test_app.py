import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from schoolorganizer.app import NOT_CONFIGURED, app, warn_if_canvas_unconfigured
from schoolorganizer.config.settings import Settings
from schoolorganizer.core.entities import Course, Task
from schoolorganizer.services.canvas_service import CanvasServiceError


class ApiTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        res = self.client.get("/api/health")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.json()["ok"])

    def test_gpa(self):
        res = self.client.post(
            "/api/gpa",
            json={
                "courses": [{"id": "c1", "name": "Bio", "credits": 4}, {"id": "c2", "name": "Art", "credits": 0}],
                "grades": [{"id": "g1", "courseId": "c1", "name": "Final", "weight": 100, "percent": 85}],
            },
        )
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertAlmostEqual(body["gpa"], 3.0)
        self.assertEqual(body["courses"][0]["letter"], "B")
        self.assertIsNone(body["courses"][1]["percent"])
        self.assertEqual(body["courses"][1]["letter"], "-")

    def test_gpa_tolerates_junk_numbers(self):
        res = self.client.post(
            "/api/gpa",
            json={
                "courses": [{"id": "c1", "name": "Bio", "credits": "x"}],
                "grades": [{"id": "g1", "courseId": "c1", "weight": "heavy", "percent": None}],
            },
        )
        self.assertEqual(res.status_code, 200)
        self.assertIsNone(res.json()["gpa"])

    def test_what_if(self):
        res = self.client.post(
            "/api/gpa/what-if",
            json={"courses": [{"id": "c1", "name": "Physics", "credits": 3}], "course_id": "c1", "percent": 95},
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(
            res.json(),
            {
                "gpa": 4.0,
                "letter": "A",
                "message": "If Physics ended at 95.0% (A), your overall GPA would be 4.00.",
            },
        )

    def test_canvas_not_configured(self):
        with patch(
            "schoolorganizer.app.CanvasService.from_settings",
            side_effect=CanvasServiceError("Missing CANVAS_BASE_URL in environment"),
        ):
            res = self.client.get("/api/canvas/courses")
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.json()["detail"], NOT_CONFIGURED)

    def test_canvas_courses(self):
        canvas = MagicMock()
        canvas.list_courses.return_value = [{"id": 1, "name": "Bio", "term": None}]
        with patch("schoolorganizer.app.CanvasService.from_settings", return_value=canvas):
            res = self.client.get("/api/canvas/courses")
        self.assertEqual(res.json(), {"courses": [{"id": 1, "name": "Bio", "term": None}]})

    def test_canvas_assignments(self):
        canvas = MagicMock()
        canvas.import_assignments.return_value = (
            [Course("canvas_1", "Bio", 3, canvas_id=1)],
            [Task(id="canvas_task_5", title="HW", due="2026-10-20T09:00:00Z", course_id="canvas_1")],
        )
        with patch("schoolorganizer.app.CanvasService.from_settings", return_value=canvas):
            res = self.client.get("/api/canvas/assignments")
        body = res.json()
        self.assertEqual(body["courses"][0]["canvasId"], 1)
        self.assertEqual(body["tasks"][0]["courseId"], "canvas_1")

    def test_canvas_upstream_failure(self):
        canvas = MagicMock()
        canvas.import_assignments.side_effect = CanvasServiceError("boom")
        with patch("schoolorganizer.app.CanvasService.from_settings", return_value=canvas):
            res = self.client.get("/api/canvas/assignments")
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.json()["detail"], "Failed to fetch Canvas assignments")


class StartupWarningTests(unittest.TestCase):
    def test_warns_when_canvas_missing(self):
        cfg = Settings(canvas_base_url="", canvas_access_token="")
        with self.assertLogs("schoolorganizer.api", level="WARNING") as logs:
            self.assertTrue(warn_if_canvas_unconfigured(cfg))
        self.assertIn("CANVAS_BASE_URL", logs.output[0])

    def test_silent_when_canvas_configured(self):
        cfg = Settings(canvas_base_url="https://canvas.example.edu", canvas_access_token="token")
        self.assertFalse(warn_if_canvas_unconfigured(cfg))


if __name__ == "__main__":
    unittest.main()
