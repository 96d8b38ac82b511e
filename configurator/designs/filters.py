import django_filters

from configurator.core.filters import IdFilter, SearchFilter
from .models import UserDesign


class UserDesignFilter(django_filters.FilterSet):
    shower_type_id = IdFilter(field_name='shower_type_id', resource='shower type')

    class Meta:
        model = UserDesign
        fields = ['shower_type_id']


class AdminUserDesignFilter(UserDesignFilter):
    """Admins may also search across the customer's contact details"""
    search = SearchFilter(search_fields=('user_full_name', 'user_email', 'user_phone', 'user_postal_code'))

    class Meta(UserDesignFilter.Meta):
        fields = ['shower_type_id', 'search']
