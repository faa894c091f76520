"""
Despensa — Root conftest for pytest

Shared fixtures available to all test modules.

@file conftest.py
"""

import pytest
from rest_framework.test import APIClient

from core.context import RequestContext
from tests.factories import AdminUserFactory, SucursalPrincipalFactory, UserFactory


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def sucursal(db):
    """Principal branch."""
    return SucursalPrincipalFactory()


@pytest.fixture
def user(db, sucursal):
    """Salesperson attached to the principal branch, password TestPass2026!"""
    return UserFactory(sucursal=sucursal)


@pytest.fixture
def admin_user(db, sucursal):
    """Administrator attached to the principal branch, password TestPass2026!"""
    return AdminUserFactory(sucursal=sucursal)


@pytest.fixture
def authenticated_client(api_client, user):
    """API client authenticated as a regular user."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user):
    """API client authenticated as an administrator."""
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def ctx(admin_user, sucursal):
    """Service-layer context: administrator working at the principal branch."""
    return RequestContext(actor=admin_user, sucursal_id=sucursal.pk)
