from django.contrib.admin.sites import site as admin_site
from django.test import TestCase

from .models import DEFAULT_INTERVAL_HOURS, ReminderSetting


class ReminderSettingModelTests(TestCase):
    def test_load_creates_defaults(self):
        setting = ReminderSetting.load()
        self.assertFalse(setting.enabled)
        self.assertEqual(setting.interval_hours, DEFAULT_INTERVAL_HOURS)

    def test_single_row(self):
        ReminderSetting.load()
        ReminderSetting(enabled=True, interval_hours=4).save()
        self.assertEqual(ReminderSetting.objects.count(), 1)
        self.assertTrue(ReminderSetting.load().enabled)

    def test_message_enabled(self):
        setting = ReminderSetting(enabled=True, interval_hours=2)
        self.assertEqual(setting.message, "Her 2 saatte bir hatırlatma alacaksınız.")
        self.assertEqual(str(setting), "Her 2 saatte bir")

    def test_message_disabled(self):
        setting = ReminderSetting(enabled=False)
        self.assertEqual(setting.message, "Hatırlatıcılar devre dışı bırakıldı.")
        self.assertEqual(str(setting), "Kapalı")

    def test_admin_registered(self):
        self.assertIn(ReminderSetting, admin_site._registry)
