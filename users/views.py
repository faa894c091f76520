"""
Users — Views

Auth endpoints (login, refresh, logout, me) and the admin-only user
management ViewSet.

@file users/views.py
"""

import logging

from rest_framework import status, viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from core.constants import AUDIT_ACTION_LOGIN, AUDIT_ACTION_LOGOUT
from core.services import AuditService

from .models import User
from .permissions import EsAdministrador
from .serializers import CustomTokenObtainPairSerializer, UserReadSerializer, UserWriteSerializer
from .services import AuthService, UserService

logger = logging.getLogger('despensa')


# ---------------------------------------------------------------------------
# Auth views
# ---------------------------------------------------------------------------

class LoginView(APIView):
    """POST /api/v1/auth/login/ — Authenticate with email + password, obtain JWT pair."""
    permission_classes = [AllowAny]
    throttle_scope = 'login'

    def post(self, request):
        serializer = CustomTokenObtainPairSerializer(
            data=request.data, context={'request': request},
        )
        serializer.is_valid(raise_exception=True)

        AuthService.log_auth_event(
            action=AUDIT_ACTION_LOGIN,
            user=serializer.user,
            ip_address=AuditService.get_client_ip(request),
            user_agent=request.META.get('HTTP_USER_AGENT', ''),
        )

        return Response({
            'success': True,
            'data': {
                'access': serializer.validated_data['access'],
                'refresh': serializer.validated_data['refresh'],
                'user': serializer.validated_data['user'],
            },
        })


class LogoutView(APIView):
    """POST /api/v1/auth/logout/ — Blacklist the refresh token."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh')
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as exc:
                raise ValidationError({'refresh': [str(exc)]})

        AuthService.log_auth_event(
            action=AUDIT_ACTION_LOGOUT,
            user=request.user,
            ip_address=AuditService.get_client_ip(request),
            user_agent=request.META.get('HTTP_USER_AGENT', ''),
        )
        return Response({'success': True, 'data': None}, status=status.HTTP_200_OK)


class TokenRefreshAPIView(TokenRefreshView):
    """POST /api/v1/auth/refresh/ — Rotate refresh token."""
    pass


class MeView(APIView):
    """GET /api/v1/auth/me/ — Current user."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserReadSerializer(request.user).data)


# ---------------------------------------------------------------------------
# User management ViewSet
# ---------------------------------------------------------------------------

class UserViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, EsAdministrador]
    filterset_fields = ['rol', 'is_active', 'sucursal']
    search_fields = ['email', 'nombre', 'apellido']
    ordering_fields = ['created_at', 'nombre', 'apellido']
    ordering = ['-created_at']

    def get_queryset(self):
        return User.objects.filter(is_deleted=False).select_related('sucursal')

    def get_serializer_class(self):
        if self.action in ('list', 'retrieve'):
            return UserReadSerializer
        return UserWriteSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        user = UserService.create_user(
            email=data.pop('email'),
            password=data.pop('password', None),
            actor=request.user,
            **data,
        )
        return Response(UserReadSerializer(user).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)
        user = UserService.update_user(
            user_id=instance.pk,
            actor=request.user,
            **serializer.validated_data,
        )
        return Response(UserReadSerializer(user).data)

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise ValidationError({'detail': ['You cannot delete your own account.']})
        instance.is_active = False
        instance.save(update_fields=['is_active', 'updated_at'])
        instance.soft_delete(user=self.request.user)
