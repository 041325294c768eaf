import unittest
from unittest.mock import MagicMock

from requests import ConnectionError as RequestsConnectionError

from schoolorganizer.services.canvas_service import CanvasService, CanvasServiceError

BASE = "https://canvas.example.edu"


def response(data, next_url=None, status_code=200):
    res = MagicMock()
    res.status_code = status_code
    res.json.return_value = data
    res.links = {"next": {"url": next_url, "rel": "next"}} if next_url else {}
    return res


class CanvasServiceTests(unittest.TestCase):
    def make_service(self, *responses):
        session = MagicMock()
        session.headers = {}
        session.get.side_effect = list(responses)
        return CanvasService(BASE, "token", session=session), session

    def test_requires_configuration(self):
        with self.assertRaises(CanvasServiceError):
            CanvasService("", "token")
        with self.assertRaises(CanvasServiceError):
            CanvasService(BASE, "")

    def test_sets_bearer_header(self):
        service, session = self.make_service()
        self.assertEqual(session.headers["Authorization"], "Bearer token")
        self.assertEqual(service.api_url, f"{BASE}/api/v1")

    def test_fetch_all_pages_follows_next_link(self):
        page2 = f"{BASE}/api/v1/courses?page=2&per_page=50"
        service, session = self.make_service(response([{"id": 1}], next_url=page2), response([{"id": 2}]))

        results = service.fetch_all_pages("/courses", {"enrollment_state": "active"})

        self.assertEqual(results, [{"id": 1}, {"id": 2}])
        first, second = session.get.call_args_list
        self.assertEqual(first.args[0], f"{BASE}/api/v1/courses")
        self.assertEqual(first.kwargs["params"], {"per_page": 50, "enrollment_state": "active"})
        self.assertEqual(second.args[0], page2)
        self.assertIsNone(second.kwargs["params"])

    def test_http_error_raises(self):
        service, _ = self.make_service(response({"errors": []}, status_code=401))
        with self.assertRaises(CanvasServiceError):
            service.fetch_all_pages("/courses")

    def test_invalid_json_raises(self):
        bad = response(None)
        bad.json.side_effect = ValueError("not json")
        service, _ = self.make_service(bad)
        with self.assertRaises(CanvasServiceError):
            service.fetch_all_pages("/courses")

    def test_non_list_page_adds_nothing(self):
        page2 = f"{BASE}/api/v1/courses?page=2"
        service, _ = self.make_service(response({"message": "odd"}, next_url=page2), response([{"id": 7}]))
        self.assertEqual(service.fetch_all_pages("/courses"), [{"id": 7}])

    def test_network_error_raises(self):
        service, session = self.make_service()
        session.get.side_effect = RequestsConnectionError("down")
        with self.assertRaises(CanvasServiceError):
            service.fetch_all_pages("/courses")

    def test_list_courses(self):
        service, _ = self.make_service(
            response(
                [
                    {"id": 1, "name": "Biology", "term": {"name": "Fall"}},
                    {"id": 2, "course_code": "CHEM101"},
                    {"id": 3},
                    {"id": 4, "name": "Locked", "access_restricted_by_date": True},
                ]
            )
        )
        self.assertEqual(
            service.list_courses(),
            [
                {"id": 1, "name": "Biology", "term": "Fall"},
                {"id": 2, "name": "CHEM101", "term": None},
                {"id": 3, "name": "Course 3", "term": None},
            ],
        )

    def test_import_assignments(self):
        service, _ = self.make_service(
            response([{"id": 1, "name": "Biology"}, {"id": 2, "name": "Chem"}]),
            response(
                [
                    {"id": 10, "name": "Unit Quiz", "due_at": "2026-10-20T09:00:00Z"},
                    {"id": 11, "name": "Lab 2", "due_at": "2026-10-21T09:00:00Z", "has_submitted_submissions": True},
                    {"id": 12, "name": "No deadline", "due_at": None},
                ]
            ),
            response({}, status_code=500),
        )

        with self.assertLogs("schoolorganizer.canvas", level="ERROR"):
            courses, tasks = service.import_assignments()

        self.assertEqual([c.id for c in courses], ["canvas_1", "canvas_2"])
        self.assertEqual(courses[0].credits, 3.0)
        self.assertEqual(courses[0].canvas_id, 1)
        self.assertEqual([t.id for t in tasks], ["canvas_task_10", "canvas_task_11"])
        self.assertEqual([t.type for t in tasks], ["exam", "project"])
        self.assertEqual([t.completed for t in tasks], [False, True])
        self.assertTrue(all(t.course_id == "canvas_1" and t.steps == [] for t in tasks))


if __name__ == "__main__":
    unittest.main()
