"""API tests for babies app."""

from datetime import date, timedelta

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from feedings.models import FeedingRecord

from .models import Baby

API_BABIES_URL = "/api/v1/babies/"
API_BABY_DETAIL = "/api/v1/babies/{pk}/"


class BabyAPITests(APITestCase):
    """Tests for Baby API endpoints."""

    @classmethod
    def setUpTestData(cls):
        cls.baby = Baby.objects.create(name="Ela", birth_date=date(2024, 12, 1))

    def test_list_babies(self):
        response = self.client.get(API_BABIES_URL)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["name"], "Ela")
        self.assertEqual(response.data["results"][0]["id"], str(self.baby.pk))

    def test_create_baby(self):
        response = self.client.post(
            API_BABIES_URL, {"name": "Can", "birth_date": "2025-01-01"}
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["name"], "Can")
        self.assertTrue(Baby.objects.filter(name="Can").exists())

    def test_create_baby_blank_name(self):
        response = self.client.post(
            API_BABIES_URL, {"name": "", "birth_date": "2025-01-01"}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["name"], ["Bebek adı gerekli."])

    def test_create_baby_missing_name(self):
        response = self.client.post(API_BABIES_URL, {"birth_date": "2025-01-01"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["name"], ["Bebek adı gerekli."])

    def test_create_baby_future_birth_date(self):
        tomorrow = timezone.localdate() + timedelta(days=1)
        response = self.client.post(
            API_BABIES_URL, {"name": "Can", "birth_date": tomorrow.isoformat()}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["birth_date"], ["Doğum tarihi gelecekte olamaz."])

    def test_create_baby_born_today(self):
        response = self.client.post(
            API_BABIES_URL,
            {"name": "Can", "birth_date": timezone.localdate().isoformat()},
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_retrieve_baby(self):
        response = self.client.get(API_BABY_DETAIL.format(pk=self.baby.pk))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["birth_date"], "2024-12-01")

    def test_update_baby(self):
        response = self.client.patch(
            API_BABY_DETAIL.format(pk=self.baby.pk), {"name": "Ela Nur"}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.baby.refresh_from_db()
        self.assertEqual(self.baby.name, "Ela Nur")

    def test_delete_baby_cascades(self):
        baby = Baby.objects.create(name="Deniz", birth_date=date(2024, 10, 1))
        FeedingRecord.objects.create(baby=baby, feeding_time=timezone.now(), amount=100)
        response = self.client.delete(API_BABY_DETAIL.format(pk=baby.pk))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Baby.objects.filter(pk=baby.pk).exists())
        self.assertFalse(FeedingRecord.objects.filter(baby_id=baby.pk).exists())

    def test_baby_not_found(self):
        response = self.client.get(
            API_BABY_DETAIL.format(pk="00000000-0000-0000-0000-000000000000")
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
