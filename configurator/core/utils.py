"""Lookup helpers shared by the API views"""
from .exceptions import ConflictError, NotFoundError
from .validators import parse_id_param


def get_object_or_error(queryset, pk, resource):
    """
    Fetch a row by a raw URL id.

    Raises BadRequestError for a malformed id and NotFoundError (``"<resource>
    not found"``) when no row matches.
    """
    object_id = parse_id_param(pk, resource.lower())
    obj = queryset.filter(pk=object_id).first()
    if obj is None:
        raise NotFoundError(resource)
    return obj


def get_related_or_error(model, object_id, resource):
    """Resolve a validated foreign key id from a request body"""
    if object_id is None:
        return None
    obj = model.objects.filter(pk=object_id).first()
    if obj is None:
        raise NotFoundError(resource)
    return obj


def ensure_unique(queryset, message, exclude_pk=None):
    """Raise ConflictError when the queryset already holds a (different) row"""
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    if queryset.exists():
        raise ConflictError(message)


def request_value(validated_data, instance, field):
    """Value a field will have after an update: the submitted one, else the stored one"""
    if field in validated_data:
        return validated_data[field]
    return getattr(instance, field) if instance is not None else None


def validate_request(serializer_class, request, instance=None):
    """Validate a create (POST), full update (PUT) or partial update (PATCH)"""
    serializer = serializer_class(
        instance, data=request.data, partial=request.method == 'PATCH'
    )
    serializer.is_valid(raise_exception=True)
    return serializer
