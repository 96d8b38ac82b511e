import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from configurator.catalog.models import ShowerType
from configurator.core.exceptions import UnauthorizedError
from configurator.core.filters import apply_filters
from configurator.core.permissions import is_admin
from configurator.core.responses import paginate_queryset, paginated_response, success_response
from configurator.core.utils import get_object_or_error, get_related_or_error, validate_request
from .filters import AdminUserDesignFilter, UserDesignFilter
from .models import UserDesign
from .serializers import UserDesignSerializer, UserDesignUpdateSerializer

logger = logging.getLogger(__name__)


def _require_admin(request, message=None):
    if not is_admin(request.user):
        raise UnauthorizedError(message)


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def user_design_list_create(request):
    """
    List saved designs or save a new one.

    Customers list their own designs by passing ``email``; listing without an
    email is an admin-only view of every design.
    """
    if request.method == 'GET':
        params = request.query_params
        queryset = UserDesign.objects.select_related('shower_type').order_by('-created_at', '-id')
        email = (params.get('email') or '').strip()
        if email:
            queryset = queryset.filter(user_email__iexact=email)
            filterset_class = UserDesignFilter
        else:
            _require_admin(request, 'Email parameter required or admin authentication needed')
            filterset_class = AdminUserDesignFilter
        queryset = apply_filters(filterset_class, params, queryset)
        rows, page, limit, total = paginate_queryset(queryset, params)
        return paginated_response(UserDesignSerializer(rows, many=True).data, page, limit, total)

    serializer = validate_request(UserDesignSerializer, request)
    get_related_or_error(ShowerType, serializer.validated_data['shower_type_id'], 'Shower type')
    design = serializer.save()
    logger.info(f"Saved user design {design.id} for shower type {design.shower_type_id}")
    return success_response(
        UserDesignSerializer(design).data,
        'Design saved successfully! You can load it anytime using your email address.',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([AllowAny])
def user_design_detail(request, pk):
    """Retrieve or update a design (public), delete it (admin)"""
    design = get_object_or_error(UserDesign.objects.select_related('shower_type'), pk, 'Design')

    if request.method == 'GET':
        return success_response(UserDesignSerializer(design).data)

    if request.method == 'PATCH':
        serializer = validate_request(UserDesignUpdateSerializer, request, design)
        design = serializer.save()
        return success_response(UserDesignSerializer(design).data, 'Design updated successfully')

    _require_admin(request)
    design_id = design.id
    design.delete()
    logger.info(f"Deleted user design {design_id}")
    return success_response({'id': design_id}, 'Design deleted successfully')
