from unittest import mock

from django.test import SimpleTestCase
from django.urls import reverse

from guidance.services.admission_api import AdmissionApiError


class HealthzTests(SimpleTestCase):
    @mock.patch("guidance.views.get_admission_client")
    def test_ok_when_upstream_answers(self, get_client):
        response = self.client.get(reverse("healthz"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["services"]["admission_api"]["status"], "ok")
        get_client.return_value.ping.assert_called_once_with()

    @mock.patch("guidance.views.get_admission_client")
    def test_503_when_upstream_down(self, get_client):
        get_client.return_value.ping.side_effect = AdmissionApiError("Unknown error")

        response = self.client.get(reverse("healthz"))

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "error")
        self.assertEqual(response.json()["services"]["admission_api"]["error"], "Unknown error")
