"""
Typed API errors and the DRF exception handler that turns every failure
into the ``{success: false, message, errors?}`` envelope.
"""
import logging
import re

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions, status

from .responses import error_response

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = 'Unauthorized. Please sign in to access this resource.'


class AppError(Exception):
    """Base class for errors raised deliberately by API handlers"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'An unexpected error occurred'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Bad request'


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = UNAUTHORIZED_MESSAGE


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'Forbidden. You do not have permission to perform this action.'


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource='Resource'):
        super().__init__(f'{resource} not found')


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Resource already exists'


class ImageHostError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = 'Image storage request failed'


_UNIQUE_FIELD_PATTERNS = (
    # sqlite: UNIQUE constraint failed: categories.shower_type_id, categories.slug
    re.compile(r'UNIQUE constraint failed: (?P<fields>[\w., ]+)'),
    # postgres: Key (shower_type_id, slug)=(1, walls) already exists.
    re.compile(r'Key \((?P<fields>[^)]+)\)=.*already exists'),
)


def _unique_field_from(exc):
    text = str(exc)
    for pattern in _UNIQUE_FIELD_PATTERNS:
        match = pattern.search(text)
        if match:
            columns = [part.strip().split('.')[-1] for part in match.group('fields').split(',')]
            columns = [column for column in columns if not column.endswith('_id')] or columns
            return ', '.join(columns)
    return None


def _is_unique_violation(exc):
    text = str(exc).lower()
    return 'unique' in text or 'already exists' in text


def _validation_errors(detail):
    """Normalise DRF error detail into ``{field: [messages]}``"""
    if isinstance(detail, dict):
        errors = {}
        for field, messages in detail.items():
            if isinstance(messages, (list, tuple)):
                errors[field] = [str(message) for message in messages]
            elif isinstance(messages, dict):
                errors[field] = _validation_errors(messages)
            else:
                errors[field] = [str(messages)]
        return errors
    if isinstance(detail, (list, tuple)):
        return {'non_field_errors': [str(message) for message in detail]}
    return {'non_field_errors': [str(detail)]}


def api_exception_handler(exc, context):
    """Map any exception raised inside a view to an envelope response"""
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else 'unknown'

    if isinstance(exc, AppError):
        if exc.status_code >= 500:
            logger.error(f"{view_name}: {exc.message}")
        else:
            logger.warning(f"{view_name}: {exc.message}")
        return error_response(exc.message, exc.status_code)

    if isinstance(exc, exceptions.ValidationError):
        logger.warning(f"{view_name}: validation failed: {exc.detail}")
        return error_response(
            'Validation failed',
            status.HTTP_400_BAD_REQUEST,
            errors=_validation_errors(exc.detail),
        )

    if isinstance(exc, exceptions.ParseError):
        return error_response(
            'Validation failed',
            status.HTTP_400_BAD_REQUEST,
            errors=_validation_errors(exc.detail),
        )

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        response = error_response(UNAUTHORIZED_MESSAGE, status.HTTP_401_UNAUTHORIZED)
        auth_header = getattr(exc, 'auth_header', None)
        if auth_header:
            response['WWW-Authenticate'] = auth_header
        return response

    if isinstance(exc, exceptions.PermissionDenied):
        return error_response(ForbiddenError.default_message, status.HTTP_403_FORBIDDEN)

    if isinstance(exc, (Http404, exceptions.NotFound, ObjectDoesNotExist)):
        return error_response('Resource not found', status.HTTP_404_NOT_FOUND)

    if isinstance(exc, ProtectedError):
        logger.warning(f"{view_name}: delete blocked by related records: {exc}")
        return error_response('Cannot delete record with related records', status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, IntegrityError):
        if _is_unique_violation(exc):
            field = _unique_field_from(exc) or 'value'
            logger.warning(f"{view_name}: unique constraint violated on {field}")
            return error_response(f'A record with this {field} already exists', status.HTTP_409_CONFLICT)
        logger.warning(f"{view_name}: integrity error: {exc}")
        return error_response('Related record not found', status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, exceptions.APIException):
        return error_response(str(exc.detail), exc.status_code)

    logger.exception(f"{view_name}: unhandled error: {exc}")
    message = str(exc) if settings.DEBUG else AppError.default_message
    return error_response(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
