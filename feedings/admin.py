from django.contrib import admin

from .models import FeedingRecord


@admin.register(FeedingRecord)
class FeedingRecordAdmin(admin.ModelAdmin):
    list_display = ["baby", "feeding_time", "amount", "notes"]
    list_filter = ["feeding_time", "created_at"]
    search_fields = ["baby__name", "notes"]
    date_hierarchy = "feeding_time"
