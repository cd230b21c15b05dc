# payables/tests/test_health.py

from unittest import mock

from django.db.utils import OperationalError
from django.test import TestCase


class HealthCheckTests(TestCase):
    def test_reports_ok_when_database_answers(self):
        response = self.client.get("/health/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok", "db": "ok"})

    def test_reports_degraded_when_database_is_down(self):
        down = mock.MagicMock()
        down.__getitem__.side_effect = OperationalError("connection refused")

        with mock.patch("backend.urls.connections", down):
            response = self.client.get("/health/")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["db"], "down")
