"""API tests for feedings app."""

from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone
from unittest.mock import patch
from uuid import uuid4

from django.core.cache import cache
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from babies.models import Baby
from django_project.throttles import FeedingCreateThrottle

from .constants import AMOUNT_TOO_LARGE_MESSAGE, AMOUNT_TOO_SMALL_MESSAGE
from .models import FeedingRecord

TEST_DATETIME = "2025-01-15T10:00:00Z"
API_FEEDINGS_URL = "/api/v1/feeding-records/"
API_FEEDING_DETAIL = "/api/v1/feeding-records/{pk}/"
API_NESTED_FEEDINGS_URL = "/api/v1/babies/{baby_pk}/feeding-records/"
API_NESTED_FEEDING_DETAIL = "/api/v1/babies/{baby_pk}/feeding-records/{pk}/"


class FeedingRecordAPITests(APITestCase):
    """Tests for FeedingRecord API endpoints."""

    @classmethod
    def setUpTestData(cls):
        cls.baby = Baby.objects.create(name="Ela", birth_date=date(2024, 12, 1))
        cls.other = Baby.objects.create(name="Can", birth_date=date(2024, 11, 1))

    def setUp(self):
        cache.clear()

    def nested_url(self, baby=None):
        return API_NESTED_FEEDINGS_URL.format(baby_pk=(baby or self.baby).pk)

    def create_test_record(self, baby=None, feeding_time=TEST_DATETIME, amount=100):
        return FeedingRecord.objects.create(
            baby=baby or self.baby, feeding_time=feeding_time, amount=amount
        )

    def test_create_top_level(self):
        response = self.client.post(
            API_FEEDINGS_URL,
            {"baby": str(self.baby.pk), "feeding_time": TEST_DATETIME, "amount": 120},
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["baby"], self.baby.pk)
        self.assertEqual(response.data["baby_name"], "Ela")
        self.assertEqual(response.data["amount"], 120)
        self.assertEqual(FeedingRecord.objects.count(), 1)

    def test_create_nested(self):
        response = self.client.post(
            self.nested_url(),
            {"feeding_time": TEST_DATETIME, "amount": 90, "notes": "Gece"},
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotIn("baby", response.data)
        record = FeedingRecord.objects.get(pk=response.data["id"])
        self.assertEqual(record.baby, self.baby)
        self.assertEqual(record.notes, "Gece")

    def test_create_nested_unknown_baby(self):
        response = self.client.post(
            API_NESTED_FEEDINGS_URL.format(baby_pk=uuid4()),
            {"feeding_time": TEST_DATETIME, "amount": 90},
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_top_level_unknown_baby(self):
        response = self.client.post(
            API_FEEDINGS_URL,
            {"baby": str(uuid4()), "feeding_time": TEST_DATETIME, "amount": 90},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("baby", response.data)

    def test_create_amount_too_small(self):
        response = self.client.post(
            self.nested_url(), {"feeding_time": TEST_DATETIME, "amount": 0}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["amount"], [AMOUNT_TOO_SMALL_MESSAGE])

    def test_create_amount_too_large(self):
        response = self.client.post(
            self.nested_url(), {"feeding_time": TEST_DATETIME, "amount": 501}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["amount"], [AMOUNT_TOO_LARGE_MESSAGE])

    def test_create_amount_bounds(self):
        for amount in (1, 500):
            response = self.client.post(
                self.nested_url(), {"feeding_time": TEST_DATETIME, "amount": amount}
            )
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_create_missing_feeding_time(self):
        response = self.client.post(self.nested_url(), {"amount": 100})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("feeding_time", response.data)

    def test_create_future_feeding_time(self):
        future = timezone.now() + timedelta(hours=1)
        response = self.client.post(
            self.nested_url(), {"feeding_time": future.isoformat(), "amount": 100}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data["feeding_time"], ["Besleme zamanı gelecekte olamaz."]
        )

    def test_create_within_clock_skew(self):
        soon = timezone.now() + timedelta(minutes=2)
        response = self.client.post(
            self.nested_url(), {"feeding_time": soon.isoformat(), "amount": 100}
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_list_nested_only_own_baby(self):
        self.create_test_record()
        self.create_test_record(baby=self.other)
        response = self.client.get(self.nested_url())
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)

    def test_list_nested_unknown_baby(self):
        response = self.client.get(API_NESTED_FEEDINGS_URL.format(baby_pk=uuid4()))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_top_level_all_babies(self):
        self.create_test_record()
        self.create_test_record(baby=self.other)
        response = self.client.get(API_FEEDINGS_URL)
        self.assertEqual(response.data["count"], 2)

    def test_list_top_level_filter_by_baby(self):
        self.create_test_record()
        self.create_test_record(baby=self.other)
        response = self.client.get(API_FEEDINGS_URL, {"baby": str(self.other.pk)})
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["baby_name"], "Can")

    def test_list_invalid_baby_filter(self):
        response = self.client.get(API_FEEDINGS_URL, {"baby": "not-a-uuid"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("baby", response.data)

    def test_list_newest_first(self):
        older = self.create_test_record(feeding_time="2025-01-15T08:00:00Z")
        newer = self.create_test_record(feeding_time="2025-01-15T12:00:00Z")
        response = self.client.get(self.nested_url())
        ids = [item["id"] for item in response.data["results"]]
        self.assertEqual(ids, [str(newer.pk), str(older.pk)])

    def test_list_date_range_filter(self):
        self.create_test_record(feeding_time="2025-01-14T10:00:00Z")
        inside = self.create_test_record(feeding_time="2025-01-15T10:00:00Z")
        self.create_test_record(feeding_time="2025-01-16T10:00:00Z")
        response = self.client.get(
            self.nested_url(),
            {
                "feeding_time__gte": "2025-01-15T00:00:00Z",
                "feeding_time__lt": "2025-01-16T00:00:00Z",
            },
        )
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["id"], str(inside.pk))

    def test_list_invalid_date_filter_ignored(self):
        self.create_test_record()
        response = self.client.get(self.nested_url(), {"feeding_time__gte": "dün"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)

    def test_list_paginated(self):
        start = datetime(2025, 1, 1, tzinfo=dt_timezone.utc)
        FeedingRecord.objects.bulk_create(
            FeedingRecord(baby=self.baby, feeding_time=start + timedelta(hours=i), amount=100)
            for i in range(55)
        )
        response = self.client.get(self.nested_url())
        self.assertEqual(response.data["count"], 55)
        self.assertEqual(len(response.data["results"]), 50)
        self.assertIsNotNone(response.data["next"])

    def test_retrieve(self):
        record = self.create_test_record()
        response = self.client.get(
            API_NESTED_FEEDING_DETAIL.format(baby_pk=self.baby.pk, pk=record.pk)
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["amount"], 100)

    def test_retrieve_under_wrong_baby(self):
        record = self.create_test_record()
        response = self.client.get(
            API_NESTED_FEEDING_DETAIL.format(baby_pk=self.other.pk, pk=record.pk)
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update(self):
        record = self.create_test_record()
        response = self.client.patch(
            API_FEEDING_DETAIL.format(pk=record.pk), {"amount": 180}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        record.refresh_from_db()
        self.assertEqual(record.amount, 180)

    def test_update_invalid_amount(self):
        record = self.create_test_record()
        response = self.client.patch(
            API_FEEDING_DETAIL.format(pk=record.pk), {"amount": 1000}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        record.refresh_from_db()
        self.assertEqual(record.amount, 100)

    def test_delete(self):
        record = self.create_test_record()
        response = self.client.delete(
            API_NESTED_FEEDING_DETAIL.format(baby_pk=self.baby.pk, pk=record.pk)
        )
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(FeedingRecord.objects.filter(pk=record.pk).exists())

    @patch.object(FeedingCreateThrottle, "THROTTLE_RATES", {"feeding_create": "2/hour"})
    def test_create_throttled(self):
        data = {"feeding_time": TEST_DATETIME, "amount": 100}
        for _ in range(2):
            response = self.client.post(self.nested_url(), data)
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post(self.nested_url(), data)
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
