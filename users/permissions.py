"""
Users — DRF Permission Classes

Role checks used across the sales, purchase and admin endpoints.

@file users/permissions.py
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class EsAdministrador(BasePermission):
    """User must be superuser or hold the admin role."""

    message = 'Only administrators can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, 'es_administrador', False)


class HasRole(BasePermission):
    """
    Checks that the user holds one of the roles listed in
    ``view.required_roles``.

    Usage::

        class CompraViewSet(viewsets.ModelViewSet):
            permission_classes = [IsAuthenticated, HasRole]
            required_roles = ['admin', 'gerente']
    """

    def has_permission(self, request, view):
        required = getattr(view, 'required_roles', [])
        if not required:
            return True
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_superuser:
            return True
        return user.rol in required


class AdminWriteOrReadOnly(BasePermission):
    """Reads for any authenticated user, writes for administrators."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return getattr(user, 'es_administrador', False)
