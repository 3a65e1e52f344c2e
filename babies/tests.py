from datetime import date

from django.contrib.admin.sites import site as admin_site
from django.test import TestCase
from django.utils import timezone

from feedings.models import FeedingRecord

from .constants import DEFAULT_AVATAR_COLOR
from .models import Baby


class BabyModelTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.baby = Baby.objects.create(name="Ela", birth_date=date(2024, 12, 1))

    def test_baby_creation(self):
        self.assertEqual(self.baby.name, "Ela")
        self.assertEqual(self.baby.birth_date, date(2024, 12, 1))
        self.assertIsNotNone(self.baby.pk)

    def test_default_avatar_color(self):
        self.assertEqual(self.baby.avatar_color, DEFAULT_AVATAR_COLOR)

    def test_baby_str(self):
        self.assertEqual(str(self.baby), "Ela")

    def test_ordering_oldest_first(self):
        second = Baby.objects.create(name="Can", birth_date=date(2025, 1, 1))
        self.assertEqual(list(Baby.objects.all()), [self.baby, second])

    def test_cascade_delete(self):
        baby = Baby.objects.create(name="Deniz", birth_date=date(2024, 10, 1))
        FeedingRecord.objects.create(baby=baby, feeding_time=timezone.now(), amount=100)
        baby.delete()
        self.assertFalse(FeedingRecord.objects.filter(baby_id=baby.pk).exists())

    def test_related_name(self):
        FeedingRecord.objects.create(
            baby=self.baby, feeding_time=timezone.now(), amount=90
        )
        self.assertEqual(self.baby.feeding_records.count(), 1)


class BabyAdminTests(TestCase):
    def test_baby_admin_registered(self):
        self.assertIn(Baby, admin_site._registry)
