# products/admin.py

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "brand", "price", "offer_price", "stock", "owner", "created_at")
    list_filter = ("brand",)
    search_fields = ("name", "brand", "description")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("-created_at",)
