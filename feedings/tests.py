from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone

from django.contrib.admin.sites import site as admin_site
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.test import TestCase

from babies.models import Baby

from .constants import (
    AMOUNT_TOO_LARGE_MESSAGE,
    AMOUNT_TOO_SMALL_MESSAGE,
    MAX_AMOUNT_ML,
    MIN_AMOUNT_ML,
)
from .models import FeedingRecord

FEEDING_TIME = datetime(2025, 1, 15, 10, 0, tzinfo=dt_timezone.utc)


class FeedingRecordModelTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.baby = Baby.objects.create(name="Ela", birth_date=date(2024, 12, 1))

    def test_feeding_creation(self):
        record = FeedingRecord.objects.create(
            baby=self.baby, feeding_time=FEEDING_TIME, amount=120
        )
        self.assertEqual(record.baby, self.baby)
        self.assertEqual(record.amount, 120)
        self.assertEqual(record.notes, "")

    def test_feeding_str(self):
        record = FeedingRecord.objects.create(
            baby=self.baby, feeding_time=FEEDING_TIME, amount=120
        )
        self.assertEqual(str(record), "Ela - 120 ml")

    def test_feeding_ordering_newest_first(self):
        older = FeedingRecord.objects.create(
            baby=self.baby, feeding_time=FEEDING_TIME, amount=100
        )
        newer = FeedingRecord.objects.create(
            baby=self.baby, feeding_time=FEEDING_TIME + timedelta(hours=3), amount=100
        )
        self.assertEqual(list(FeedingRecord.objects.all()), [newer, older])

    def test_feeding_timestamps(self):
        record = FeedingRecord.objects.create(
            baby=self.baby, feeding_time=FEEDING_TIME, amount=100
        )
        self.assertIsNotNone(record.created_at)
        self.assertIsNotNone(record.updated_at)

    def test_amount_validators(self):
        too_small = FeedingRecord(baby=self.baby, feeding_time=FEEDING_TIME, amount=0)
        with self.assertRaises(ValidationError) as ctx:
            too_small.full_clean()
        self.assertIn(AMOUNT_TOO_SMALL_MESSAGE, ctx.exception.message_dict["amount"])

        too_large = FeedingRecord(baby=self.baby, feeding_time=FEEDING_TIME, amount=501)
        with self.assertRaises(ValidationError) as ctx:
            too_large.full_clean()
        self.assertIn(AMOUNT_TOO_LARGE_MESSAGE, ctx.exception.message_dict["amount"])

    def test_amount_bounds_are_valid(self):
        for amount in (1, 500):
            FeedingRecord(
                baby=self.baby, feeding_time=FEEDING_TIME, amount=amount
            ).full_clean()

    def test_amount_constraint(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                FeedingRecord.objects.create(
                    baby=self.baby, feeding_time=FEEDING_TIME, amount=600
                )


    def test_amount_constraint_condition(self):
        constraint = next(
            c
            for c in FeedingRecord._meta.constraints
            if c.name == "feeding_amount_in_range"
        )
        self.assertEqual(
            constraint.condition, Q(amount__gte=MIN_AMOUNT_ML, amount__lte=MAX_AMOUNT_ML)
        )


class FeedingRecordAdminTests(TestCase):
    def test_feeding_admin_registered(self):
        self.assertIn(FeedingRecord, admin_site._registry)
