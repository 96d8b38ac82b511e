from rest_framework.permissions import SAFE_METHODS, BasePermission


def is_admin(user):
    return bool(user and user.is_authenticated and user.is_active and user.is_staff)


class IsAdminOrReadOnly(BasePermission):
    """Anyone may read the catalog; only signed-in admins may change it"""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return is_admin(request.user)


class IsAdmin(BasePermission):

    def has_permission(self, request, view):
        return is_admin(request.user)
