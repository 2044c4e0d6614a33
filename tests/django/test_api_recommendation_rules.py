from unittest import mock

from django.test import SimpleTestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from guidance.services.admission_api import AdmissionApiError

COURSES = [
    {"id": 1, "course_code": "BSCS", "course_name": "Computer Science", "passing_rate": 85},
    {"id": 2, "course_code": "BSN", "course_name": "Nursing", "passing_rate": 90},
]
TYPES = [
    {"type": "INTJ", "title": "Architect", "description": "Strategic"},
    {"type": "ENFP", "title": "Campaigner", "description": "Enthusiastic"},
    {"type": "ISTJ", "title": "Logistician", "description": "Practical"},
]


def rule(id_, ptype, course, min_score=85, max_score=100):
    return {
        "id": id_,
        "personality_type": {"type": ptype},
        "min_score": min_score,
        "max_score": max_score,
        "recommended_course": course,
    }


def rules_payload(rules):
    return {"rules": rules, "personalityTypes": TYPES, "courses": COURSES}


class RecommendationRulesPageTests(SimpleTestCase):
    def setUp(self):
        patcher = mock.patch("guidance.api.views.get_admission_client")
        self.get_client = patcher.start()
        self.addCleanup(patcher.stop)
        self.upstream = self.get_client.return_value
        self.client = APIClient()

    def test_page_groups_and_stats(self):
        self.upstream.get.return_value = rules_payload(
            [rule(1, "INTJ", COURSES[0]), rule(2, "INTJ", COURSES[1]), rule(3, "ENFP", COURSES[0], 90, 100)]
        )

        body = self.client.get(reverse("api-recommendation-rules")).json()

        self.assertEqual(
            body["stats"],
            {"total_rules": 3, "active_types": 2, "available_courses": 2, "personality_types": 3},
        )
        intj = body["groups"][0]
        self.assertEqual(intj["title"], "Architect")
        # Nursing needs 90 and the range starts at 85.
        self.assertEqual(intj["total_visible"], 1)
        self.assertEqual(intj["ranges"][0]["range"], "85%-100%")
        self.assertEqual([t["type"] for t in body["missing_types"]], ["ISTJ"])
        self.assertEqual(body["form"]["min_score"], 75)
        self.assertIsNone(body["notification"])

    def test_generate_then_notify_once(self):
        before = rules_payload([rule(1, "INTJ", COURSES[0])])
        after = rules_payload(
            [
                rule(1, "INTJ", COURSES[0]),
                rule(2, "INTJ", COURSES[1], 90, 100),
                rule(3, "INTJ", COURSES[0], 95, 100),
                rule(4, "ENFP", COURSES[0]),
            ]
        )
        self.upstream.get.side_effect = [before, after, after]

        generated = self.client.post(reverse("api-generate-all-rules"))
        self.assertEqual(generated.json()["message"], "New recommendation rules added successfully")
        self.upstream.post.assert_called_once_with("/guidance/generate-all-rules")

        notification = self.client.get(reverse("api-recommendation-rules")).json()["notification"]
        self.assertEqual(notification["message"], "New recommendation rules have been generated!")
        self.assertEqual(notification["personality_types"], ["INTJ", "ENFP"])
        self.assertEqual(notification["course_count"], 3)
        self.assertEqual(notification["auto_close_ms"], 30000)

        self.assertIsNone(self.client.get(reverse("api-recommendation-rules")).json()["notification"])

    def test_failed_generation_leaves_nothing_pending(self):
        self.upstream.get.return_value = rules_payload([rule(1, "INTJ", COURSES[0])])
        self.upstream.post.side_effect = AdmissionApiError("Unknown error")

        response = self.client.post(reverse("api-generate-all-rules"))

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertIsNone(self.client.get(reverse("api-recommendation-rules")).json()["notification"])

    def test_expansion_is_remembered(self):
        self.upstream.get.return_value = rules_payload([rule(1, "INTJ", COURSES[0])])

        response = self.client.post(
            reverse("api-recommendation-rules-expansion"), {"personality_type": "INTJ"}, format="json"
        )

        self.assertTrue(response.json()["expanded"])
        body = self.client.get(reverse("api-recommendation-rules")).json()
        self.assertTrue(body["groups"][0]["expanded"])


class RecommendationRuleEditTests(SimpleTestCase):
    def setUp(self):
        patcher = mock.patch("guidance.api.views.get_admission_client")
        self.get_client = patcher.start()
        self.addCleanup(patcher.stop)
        self.upstream = self.get_client.return_value
        self.client = APIClient()

    def test_create_previews_one_rule_per_course(self):
        form = {"personality_type": "INTJ", "min_score": 80, "max_score": 100, "recommended_course_ids": [1, 2]}

        response = self.client.post(reverse("api-recommendation-rules"), form, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertEqual([r["recommended_course_id"] for r in body["rules"]], [1, 2])
        self.assertEqual(body["notification"]["message"], "New recommendation rule created for INTJ!")
        self.upstream.post.assert_called_once()

    def test_create_requires_a_course(self):
        form = {"personality_type": "INTJ", "min_score": 80, "max_score": 100, "recommended_course_ids": []}

        response = self.client.post(reverse("api-recommendation-rules"), form, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.upstream.post.assert_not_called()

    def test_update_and_delete(self):
        form = {"personality_type": "ENFP", "min_score": 70, "max_score": 90, "recommended_course_ids": [2]}
        url = reverse("api-recommendation-rule-detail", args=[5])

        updated = self.client.put(url, form, format="json")
        self.assertEqual(updated.json()["notification"]["message"], "Recommendation rule updated for ENFP!")

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_428_PRECONDITION_REQUIRED)
        deleted = self.client.delete(url, {"confirm": True}, format="json")
        self.assertEqual(deleted.json()["message"], "Recommendation rule deleted successfully")
        self.upstream.delete.assert_called_once_with("/guidance/recommendation-rules/5")
