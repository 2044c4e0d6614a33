from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

QUESTIONS_PAGE = {
    "questions": {
        "data": [
            {"id": 1, "question": "I enjoy parties", "dichotomy": "E/I", "positive_side": "E", "negative_side": "I"},
            {"id": 2, "question": "I trust facts", "dichotomy": "S/N", "positive_side": "S", "negative_side": "N"},
            {"id": 3, "question": "I plan ahead", "dichotomy": "E/I", "positive_side": "E", "negative_side": "I"},
        ],
        "total": 3,
        "current_page": 1,
        "last_page": 1,
        "from": 1,
        "to": 3,
    },
    "personalityTypes": [{"type": "INTJ"}],
}


class PersonalityTestApiTests(SimpleTestCase):
    def setUp(self):
        patcher = mock.patch("guidance.api.views.get_admission_client")
        self.get_client = patcher.start()
        self.addCleanup(patcher.stop)
        self.upstream = self.get_client.return_value
        self.upstream.get.return_value = QUESTIONS_PAGE
        self.client = APIClient()

    def test_page_defaults_to_twenty_per_page(self):
        response = self.client.get(reverse("api-personality-questions"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["items_per_page"], 20)
        self.assertEqual(body["dichotomy_stats"], {"E/I": 2, "S/N": 1, "T/F": 0, "J/P": 0})
        self.assertEqual(body["form"]["positive_side"], "E")
        self.upstream.get.assert_called_once_with(
            "/guidance/personality-questions", params={"per_page": 20, "page": 1}
        )

    def test_url_per_page_used_without_preference(self):
        self.client.get(reverse("api-personality-questions"), {"per_page": "3", "page": "2"})

        self.upstream.get.assert_called_once_with(
            "/guidance/personality-questions", params={"per_page": 5, "page": 2}
        )

    def test_items_per_page_is_clamped_and_remembered(self):
        response = self.client.post(
            reverse("api-personality-per-page"),
            {"items_per_page": "1000", "query": {"page": "3"}},
            format="json",
        )

        self.assertEqual(
            response.json(),
            {"items_per_page": 500, "next_url": "/guidance/personality-test-management?per_page=500"},
        )

        # The stored preference wins over the URL.
        self.client.get(reverse("api-personality-questions"), {"per_page": "50"})
        self.upstream.get.assert_called_once_with(
            "/guidance/personality-questions", params={"per_page": 500, "page": 1}
        )

    def test_non_numeric_items_per_page_means_default(self):
        response = self.client.post(reverse("api-personality-per-page"), {"items_per_page": "lots"}, format="json")
        self.assertEqual(response.json()["items_per_page"], 20)

    def test_create_and_update_question(self):
        form = {"question": "I like lists", "dichotomy": "J/P", "positive_side": "J", "negative_side": "P"}

        created = self.client.post(reverse("api-personality-questions"), form, format="json")
        updated = self.client.put(reverse("api-personality-question-detail", args=[9]), form, format="json")

        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(updated.status_code, status.HTTP_200_OK)
        self.upstream.post.assert_called_once_with("/guidance/personality-questions", form)
        self.upstream.put.assert_called_once_with("/guidance/personality-questions/9", form)

    def test_unknown_dichotomy_rejected(self):
        form = {"question": "?", "dichotomy": "X/Y", "positive_side": "X", "negative_side": "Y"}
        response = self.client.post(reverse("api-personality-questions"), form, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_requires_confirmation(self):
        url = reverse("api-personality-question-detail", args=[9])

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_428_PRECONDITION_REQUIRED)
        response = self.client.delete(url, {"confirm": True}, format="json")

        self.assertEqual(response.json()["message"], "Personality question deleted successfully")
        self.upstream.delete.assert_called_once_with("/guidance/personality-questions/9")

    def test_csv_upload_is_forwarded(self):
        upload = SimpleUploadedFile("questions.csv", b"question,dichotomy\n", content_type="text/csv")

        response = self.client.post(reverse("api-personality-upload"), {"csv_file": upload}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        path, forwarded = self.upstream.upload.call_args[0]
        self.assertEqual(path, "/guidance/personality-questions/upload")
        self.assertEqual(forwarded.name, "questions.csv")
