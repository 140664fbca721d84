# products/filters.py

import django_filters
from django.db.models import Q

from products.models import Product


class ProductFilter(django_filters.FilterSet):
    """
    Catalogue filters:
    - ?search=<text>  name / description / brand (case-insensitive)
    - ?brand=<brand>  exact brand (case-insensitive)
    - ?in_stock=true  only products with stock > 0
    """

    search = django_filters.CharFilter(method="filter_search")
    brand = django_filters.CharFilter(field_name="brand", lookup_expr="iexact")
    in_stock = django_filters.BooleanFilter(method="filter_in_stock")

    class Meta:
        model = Product
        fields = ["search", "brand", "in_stock"]

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value)
            | Q(description__icontains=value)
            | Q(brand__icontains=value)
        )

    def filter_in_stock(self, queryset, name, value):
        if value is None:
            return queryset
        return queryset.filter(stock__gt=0) if value else queryset.filter(stock=0)
