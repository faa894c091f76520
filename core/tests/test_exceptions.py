"""
Core — Exception Handler & Envelope Tests

@file core/tests/test_exceptions.py
"""

import uuid
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework.exceptions import ValidationError

from core.context import RequestContext
from core.exceptions import InsufficientStockError, NotFoundError, standard_exception_handler


class TestStandardExceptionHandler:
    def test_insufficient_stock_carries_context(self):
        producto_id = uuid.uuid4()
        exc = InsufficientStockError(producto_id=producto_id, disponible=Decimal('3'), solicitado=Decimal('5'))
        response = standard_exception_handler(exc, {})
        assert response.status_code == 400
        assert response.data['success'] is False
        assert response.data['error'] == 'INSUFFICIENT_STOCK'
        assert response.data['data'] == {
            'producto_id': str(producto_id),
            'disponible': '3',
            'solicitado': '5',
        }

    def test_validation_error_code(self):
        response = standard_exception_handler(ValidationError({'nombre': ['Required.']}), {})
        assert response.status_code == 400
        assert response.data['error'] == 'VALIDATION_ERROR'
        assert response.data['message'] == 'nombre: Required.'

    def test_not_found(self):
        response = standard_exception_handler(NotFoundError(detail='Nope.'), {})
        assert response.status_code == 404
        assert response.data['error'] == 'NOT_FOUND'
        assert response.data['message'] == 'Nope.'

    def test_unhandled_exception_is_500_with_message(self):
        response = standard_exception_handler(RuntimeError('boom'), {})
        assert response.status_code == 500
        assert response.data == {'success': False, 'message': 'boom', 'error': 'INTERNAL_ERROR'}


@pytest.mark.django_db
class TestEnvelope:
    def test_success_envelope_on_list(self, authenticated_client):
        response = authenticated_client.get(reverse('api-v1:sucursales:sucursal-list'))
        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert body['meta']['count'] == 1
        assert len(body['data']) == 1

    def test_unauthenticated_envelope(self, api_client):
        response = api_client.get(reverse('api-v1:ventas:venta-list'))
        assert response.status_code == 401
        body = response.json()
        assert body['success'] is False
        assert body['error'] == 'NOT_AUTHENTICATED'


class TestRequestContext:
    def test_header_overrides_user_branch(self, rf):
        branch = uuid.uuid4()
        request = rf.get('/', HTTP_X_SUCURSAL_ID=str(branch))
        request.user = type('Anon', (), {'is_authenticated': False})()
        ctx = RequestContext.from_request(request)
        assert ctx.actor is None
        assert ctx.sucursal_id == branch

    def test_invalid_branch_header(self, rf):
        request = rf.get('/', HTTP_X_SUCURSAL_ID='not-a-uuid')
        request.user = type('Anon', (), {'is_authenticated': False})()
        with pytest.raises(ValidationError):
            RequestContext.from_request(request)
