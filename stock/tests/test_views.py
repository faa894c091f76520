"""
Stock — API Tests

@file stock/tests/test_views.py
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from stock.services import StockService
from tests.factories import GerenteFactory, StockSucursalFactory, SucursalFactory


@pytest.fixture
def gerente_client(api_client, sucursal):
    api_client.force_authenticate(user=GerenteFactory(sucursal=sucursal))
    return api_client


@pytest.mark.django_db
class TestAjuste:
    def test_vendedor_cannot_adjust(self, authenticated_client):
        registro = StockSucursalFactory()
        response = authenticated_client.post(
            reverse('api-v1:stock:stock-ajustar'),
            {
                'sucursal_id': str(registro.sucursal_id),
                'producto_id': str(registro.producto_id),
                'ajuste': '1',
                'motivo': 'Conteo',
            },
            format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_gerente_adjusts(self, gerente_client):
        registro = StockSucursalFactory(cantidad=Decimal('10'))
        response = gerente_client.post(
            reverse('api-v1:stock:stock-ajustar'),
            {
                'sucursal_id': str(registro.sucursal_id),
                'producto_id': str(registro.producto_id),
                'ajuste': '-3',
                'motivo': 'Vencidos',
            },
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()['data']
        assert Decimal(str(data['stock_nuevo'])) == Decimal('7')

    def test_overdraw_returns_context(self, gerente_client):
        registro = StockSucursalFactory(cantidad=Decimal('2'))
        response = gerente_client.post(
            reverse('api-v1:stock:stock-ajustar'),
            {
                'sucursal_id': str(registro.sucursal_id),
                'producto_id': str(registro.producto_id),
                'ajuste': '-5',
                'motivo': 'Conteo',
            },
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body['error'] == 'INSUFFICIENT_STOCK'
        assert Decimal(body['data']['disponible']) == Decimal('2')


@pytest.mark.django_db
class TestTransferencia:
    def test_transfer_endpoint(self, gerente_client):
        origen = StockSucursalFactory(cantidad=Decimal('10'))
        destino = SucursalFactory()
        response = gerente_client.post(
            reverse('api-v1:stock:stock-transferir'),
            {
                'sucursal_origen_id': str(origen.sucursal_id),
                'sucursal_destino_id': str(destino.pk),
                'productos': [{'producto_id': str(origen.producto_id), 'cantidad': '4'}],
            },
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.json()['data']) == 2
        assert StockService.get_stock(origen.producto_id, destino.pk) == Decimal('4')


@pytest.mark.django_db
class TestConsultas:
    def test_bajo_stock(self, authenticated_client, sucursal):
        bajo = StockSucursalFactory(sucursal=sucursal, cantidad=Decimal('1'))
        StockSucursalFactory(sucursal=sucursal, cantidad=Decimal('40'))
        response = authenticated_client.get(reverse('api-v1:stock:stock-bajo-stock'))
        assert response.status_code == status.HTTP_200_OK
        assert [r['id'] for r in response.json()['data']] == [str(bajo.pk)]

    def test_movimientos_filter_by_reference(self, authenticated_client):
        registro = StockSucursalFactory(cantidad=Decimal('10'))
        StockService.adjust(
            producto_id=registro.producto_id, sucursal_id=registro.sucursal_id,
            ajuste=1, motivo='Conteo',
        )
        response = authenticated_client.get(
            reverse('api-v1:stock:movimiento-list'), {'referencia_tipo': 'ajuste'},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()['meta']['count'] == 1
