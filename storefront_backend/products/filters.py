# products/filters.py

"""
PUBLIC CATALOG FILTERS

Query params:
- category: exact category code (e.g. "electronics")
- sort:     latest | name | popular | price-asc | price-desc (default latest)
"""

from __future__ import annotations

import django_filters

from products.models import Product
from products.services.catalog_store import DEFAULT_SORT, SORT_ORDERINGS, resolve_ordering


class ProductFilter(django_filters.FilterSet):
    category = django_filters.CharFilter(field_name="category", lookup_expr="exact")
    sort = django_filters.ChoiceFilter(
        choices=[(k, k) for k in SORT_ORDERINGS],
        method="filter_sort",
        empty_label=None,
    )

    class Meta:
        model = Product
        fields = ["category", "sort"]

    def filter_sort(self, queryset, name, value):
        # Product.Meta.ordering already matches DEFAULT_SORT when sort is omitted
        return queryset.order_by(*resolve_ordering(value or DEFAULT_SORT))
