"""API tests for reminders app."""

from rest_framework import status
from rest_framework.test import APITestCase

from .models import ReminderSetting

API_REMINDER_URL = "/api/v1/reminder/"


class ReminderSettingAPITests(APITestCase):
    """Tests for the reminder toggle endpoint."""

    def test_get_defaults(self):
        response = self.client.get(API_REMINDER_URL)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["enabled"])
        self.assertEqual(response.data["interval_hours"], 3)
        self.assertEqual(response.data["message"], "Hatırlatıcılar devre dışı bırakıldı.")

    def test_enable(self):
        response = self.client.patch(
            API_REMINDER_URL, {"enabled": True, "interval_hours": 2}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["enabled"])
        self.assertEqual(
            response.data["message"], "Her 2 saatte bir hatırlatma alacaksınız."
        )
        self.assertTrue(ReminderSetting.load().enabled)

    def test_partial_update_keeps_interval(self):
        self.client.patch(API_REMINDER_URL, {"interval_hours": 6}, format="json")
        response = self.client.patch(API_REMINDER_URL, {"enabled": True}, format="json")
        self.assertEqual(response.data["interval_hours"], 6)

    def test_interval_out_of_range(self):
        response = self.client.patch(API_REMINDER_URL, {"interval_hours": 0}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["interval_hours"], ["Aralık en az 1 saat olmalı"])

        response = self.client.patch(API_REMINDER_URL, {"interval_hours": 13}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data["interval_hours"], ["Aralık en fazla 12 saat olabilir"]
        )

    def test_post_not_allowed(self):
        response = self.client.post(API_REMINDER_URL, {"enabled": True}, format="json")
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
