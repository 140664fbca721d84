from django.contrib import admin

from addresses.models import Address


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("full_name", "user", "city", "postal_code", "is_default", "created_at")
    list_filter = ("is_default", "state")
    search_fields = ("full_name", "street_address", "city", "postal_code", "user__email")
