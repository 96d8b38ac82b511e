"""
Response envelope and pagination helpers shared by every API handler
"""
import math

from rest_framework import status
from rest_framework.response import Response

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

PUBLIC_CACHE_CONTROL = 'public, s-maxage=3600, stale-while-revalidate=86400'


def success_response(data=None, message=None, status_code=status.HTTP_200_OK):
    body = {'success': True, 'data': data}
    if message:
        body['message'] = message
    return Response(body, status=status_code)


def error_response(message, status_code=status.HTTP_400_BAD_REQUEST, errors=None):
    body = {'success': False, 'message': message}
    if errors:
        body['errors'] = errors
    return Response(body, status=status_code)


def build_pagination(page, limit, total):
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'total_pages': total_pages,
        'has_next_page': page < total_pages,
        'has_previous_page': page > 1,
    }


def paginated_body(data, page, limit, total, message=None):
    body = {
        'success': True,
        'data': data,
        'pagination': build_pagination(page, limit, total),
    }
    if message:
        body['message'] = message
    return body


def paginated_response(data, page, limit, total, message=None):
    return Response(paginated_body(data, page, limit, total, message))


def _parse_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_pagination_params(query_params, default_limit=DEFAULT_PAGE_SIZE):
    """
    Read ``page`` and ``limit`` from the query string.

    Returns (page, limit, skip). Page is at least 1, limit is clamped to
    [1, MAX_PAGE_SIZE] and skip is the offset of the first row on the page.
    """
    page = max(1, _parse_int(query_params.get('page'), 1))
    limit = _parse_int(query_params.get('limit'), default_limit)
    limit = min(MAX_PAGE_SIZE, max(1, limit))
    skip = (page - 1) * limit
    return page, limit, skip


def paginate_queryset(queryset, query_params, default_limit=DEFAULT_PAGE_SIZE):
    """Slice a queryset for the requested page. Returns (rows, page, limit, total)."""
    page, limit, skip = parse_pagination_params(query_params, default_limit)
    total = queryset.count()
    rows = list(queryset[skip:skip + limit])
    return rows, page, limit, total


def add_cache_headers(response):
    """Allow shared caches to keep public catalog listings for an hour"""
    response['Cache-Control'] = PUBLIC_CACHE_CONTROL
    return response
