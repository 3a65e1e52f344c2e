from django.contrib import admin

from .models import Baby


@admin.register(Baby)
class BabyAdmin(admin.ModelAdmin):
    list_display = ["name", "birth_date", "created_at"]
    search_fields = ["name"]
    date_hierarchy = "birth_date"
