"""
Reusable django-filter filters for the list endpoints
"""
from functools import reduce
import operator

import django_filters
from django.db.models import Q
from django_filters.constants import EMPTY_VALUES

from .exceptions import BadRequestError
from .validators import parse_bool_param, parse_id_param, sanitize_search


class IdFilter(django_filters.CharFilter):
    """Exact match on a related id. A malformed id is a 400, not an empty page."""

    def __init__(self, *args, resource=None, **kwargs):
        self.resource = resource or 'resource'
        super().__init__(*args, **kwargs)

    def filter(self, qs, value):
        if value in EMPTY_VALUES:
            return qs
        return super().filter(qs, parse_id_param(value, self.resource))


class SearchFilter(django_filters.CharFilter):
    """Case-insensitive substring match across several fields"""

    def __init__(self, *args, search_fields=(), **kwargs):
        self.search_fields = search_fields
        super().__init__(*args, **kwargs)

    def filter(self, qs, value):
        term = sanitize_search(value)
        if not term:
            return qs
        conditions = [Q(**{f'{field}__icontains': term}) for field in self.search_fields]
        return qs.filter(reduce(operator.or_, conditions))


class FlagFilter(django_filters.CharFilter):
    """Boolean flag accepting true/false, 1/0, yes/no"""

    def filter(self, qs, value):
        if value in EMPTY_VALUES:
            return qs
        return qs.filter(**{self.field_name: parse_bool_param(value)})


class ChoiceParamFilter(django_filters.CharFilter):
    """Exact match on a choice field, rejecting unknown values"""

    def __init__(self, *args, choices=(), **kwargs):
        self.allowed = [choice[0] for choice in choices]
        super().__init__(*args, **kwargs)

    def filter(self, qs, value):
        if value in EMPTY_VALUES:
            return qs
        value = value.upper()
        if value not in self.allowed:
            raise BadRequestError(f"Invalid {self.field_name}: must be one of {', '.join(self.allowed)}")
        return qs.filter(**{self.field_name: value})


def apply_filters(filterset_class, query_params, queryset):
    """Run a FilterSet the way the list views use it"""
    return filterset_class(query_params, queryset=queryset).qs
