from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import Warranty


@admin.register(Warranty)
class WarrantyAdmin(admin.ModelAdmin):
    """
    Admin configuration for tracked warranties
    """

    # =====================================================
    # LIST VIEW
    # =====================================================
    list_display = (
        "product_name",
        "brand",
        "owner",
        "expiry_date",
        "colored_days_left",
        "reminder_preference",
        "last_notified_at",
    )

    list_filter = (
        "reminder_preference",
        "category",
        "expiry_date",
    )

    search_fields = (
        "product_name",
        "brand",
        "serial_number",
        "retailer",
        "owner__username",
        "owner__email",
    )

    ordering = ("expiry_date",)
    list_per_page = 25
    list_select_related = ("owner",)

    # =====================================================
    # FIELDSETS (DETAIL VIEW)
    # =====================================================
    fieldsets = (
        ("Owner", {
            "fields": ("owner",),
        }),
        ("Product", {
            "fields": (
                "product_name",
                "brand",
                "category",
                "retailer",
                "serial_number",
                "notes",
                "image",
            ),
        }),
        ("Dates", {
            "fields": ("purchase_date", "expiry_date"),
        }),
        ("Reminders", {
            "fields": ("reminder_preference", "last_notified_at"),
        }),
        ("Timestamps", {
            "fields": ("created_at", "updated_at"),
        }),
    )

    readonly_fields = (
        "last_notified_at",
        "created_at",
        "updated_at",
    )

    actions = ("clear_last_notified",)

    def get_readonly_fields(self, request, obj=None):
        # owner is fixed once the warranty exists
        if obj is not None:
            return self.readonly_fields + ("owner",)
        return self.readonly_fields

    # =====================================================
    # CUSTOM DISPLAY HELPERS
    # =====================================================
    def colored_days_left(self, obj):
        days = obj.days_until_expiry(timezone.localdate())

        if days < 0:
            color, label = "#6b7280", "expired"
        elif days <= 7:
            color, label = "#dc2626", f"{days} day(s)"
        elif days <= 31:
            color, label = "#f59e0b", f"{days} days"
        else:
            color, label = "#16a34a", f"{days} days"

        return format_html(
            '<span style="color:{}; font-weight:600;">{}</span>',
            color,
            label,
        )

    colored_days_left.short_description = "Days left"

    # =====================================================
    # ADMIN ACTIONS
    # =====================================================
    @admin.action(description="Clear last notified (allow reminder again)")
    def clear_last_notified(self, request, queryset):
        queryset.update(last_notified_at=None)
