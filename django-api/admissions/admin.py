from django.contrib import admin

from admissions.models import AdmissionToken, DistributionEvent, Registration


class AdmissionTokenInline(admin.TabularInline):
    model = AdmissionToken
    extra = 1
    fields = ["id", "expires_at", "is_active"]
    readonly_fields = ["id"]


@admin.register(DistributionEvent)
class DistributionEventAdmin(admin.ModelAdmin):
    list_display = ["name", "starts_at", "ends_at", "capacity", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name"]
    inlines = [AdmissionTokenInline]


@admin.register(AdmissionToken)
class AdmissionTokenAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "expires_at", "is_active"]
    list_filter = ["is_active", "event"]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["reference_number", "name", "contact", "event", "submitted_at", "pickup_confirmed"]
    list_filter = ["event", "pickup_confirmed"]
    search_fields = ["reference_number", "contact", "name"]
    readonly_fields = ["event", "contact", "reference_number", "submitted_at"]
