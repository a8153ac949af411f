import django_filters
from django.db.models import Q

from .models import Gig


class GigFilter(django_filters.FilterSet):
    """
    Public gig browsing filters.

    Price bounds match a gig when any of its plans falls in range.
    """

    category = django_filters.ChoiceFilter(choices=Gig.Category.choices)
    min_price = django_filters.NumberFilter(field_name="price_plans__price", lookup_expr="gte", distinct=True)
    max_price = django_filters.NumberFilter(field_name="price_plans__price", lookup_expr="lte", distinct=True)
    owner = django_filters.UUIDFilter(field_name="owner__id")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Gig
        fields = ["category", "owner"]

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value) | Q(description__icontains=value) | Q(keywords__icontains=value)
        ).distinct()
