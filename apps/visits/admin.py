"""Admin registration for visits."""

from __future__ import annotations

from django.contrib import admin

from .models import Contractor, ContractorVisit, GuestVisit, Partner


@admin.register(Contractor)
class ContractorAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "type", "email", "phone")
    list_filter = ("type",)
    search_fields = ("name", "company", "email")


@admin.register(Partner)
class PartnerAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "email", "phone")
    search_fields = ("name", "company", "email")


@admin.register(ContractorVisit)
class ContractorVisitAdmin(admin.ModelAdmin):
    list_display = ("contractor", "visit_date", "start_time", "end_time", "status", "is_recurring")
    list_filter = ("status", "is_recurring")
    readonly_fields = ("series_id", "recurrence_pattern", "created_at")


@admin.register(GuestVisit)
class GuestVisitAdmin(admin.ModelAdmin):
    list_display = ("partner_name", "visit_date", "start_time", "end_time", "status", "is_recurring")
    list_filter = ("status", "is_recurring")
    readonly_fields = ("series_id", "recurrence_pattern", "created_at")
