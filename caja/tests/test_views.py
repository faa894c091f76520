"""
Caja — API Tests

@file caja/tests/test_views.py
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from tests.factories import MovimientoCajaFactory


@pytest.mark.django_db
class TestCajaEndpoints:

    def test_create(self, authenticated_client, sucursal, user):
        response = authenticated_client.post(
            reverse('api-v1:caja:caja-list'),
            {'tipo': 'egreso', 'monto': '120.50', 'concepto': 'Artículos de limpieza'},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()['data']
        assert data['sucursal_id'] == str(sucursal.pk)
        assert data['usuario'] == str(user.pk)

    def test_list_filtered_by_branch(self, authenticated_client, sucursal):
        propio = MovimientoCajaFactory(sucursal=sucursal)
        MovimientoCajaFactory()
        response = authenticated_client.get(reverse('api-v1:caja:caja-list'), {'sucursal_id': str(sucursal.pk)})
        assert [m['id'] for m in response.json()['data']] == [str(propio.pk)]

    def test_resumen(self, authenticated_client, sucursal):
        MovimientoCajaFactory(sucursal=sucursal, monto=Decimal('800'))
        response = authenticated_client.get(reverse('api-v1:caja:caja-resumen'))
        assert response.status_code == status.HTTP_200_OK
        assert Decimal(str(response.json()['data']['saldo'])) == Decimal('800')

    def test_resumen_bad_date(self, authenticated_client):
        response = authenticated_client.get(reverse('api-v1:caja:caja-resumen'), {'fecha': '18/10/2026'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_saldo_acumulado(self, authenticated_client, sucursal):
        MovimientoCajaFactory(sucursal=sucursal, monto=Decimal('800'))
        MovimientoCajaFactory(sucursal=sucursal, tipo='egreso', monto=Decimal('200'))
        response = authenticated_client.get(reverse('api-v1:caja:caja-saldo-acumulado'))
        assert Decimal(str(response.json()['data']['saldo'])) == Decimal('600')

    def test_verificar_saldo(self, authenticated_client, sucursal):
        MovimientoCajaFactory(sucursal=sucursal, monto=Decimal('800'))
        response = authenticated_client.post(
            reverse('api-v1:caja:caja-verificar-saldo'), {'saldo_fisico': '800.00'}, format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()['data']['coincide'] is True
