"""
Ventas — API Tests

@file ventas/tests/test_views.py
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from stock.services import StockService
from tests.factories import ClienteFactory, ProductoFactory
from ventas.models import Venta
from ventas.services import VentaService


def _producto_con_stock(sucursal, cantidad):
    producto = ProductoFactory(precio_venta=Decimal('100'))
    StockService.apply_delta(
        producto_id=producto.pk, sucursal_id=sucursal.pk,
        cantidad=Decimal(cantidad), motivo='Carga inicial',
    )
    return producto


def _linea(producto, cantidad):
    return {'producto_id': str(producto.pk), 'cantidad': str(cantidad)}


@pytest.mark.django_db
class TestVentaEndpoints:

    def test_create_uses_user_branch(self, authenticated_client, sucursal):
        producto = _producto_con_stock(sucursal, 10)
        response = authenticated_client.post(
            reverse('api-v1:ventas:venta-list'),
            {'detalles': [_linea(producto, 3)]},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()['data']
        assert data['cliente_nombre'] == 'Cliente General'
        assert data['sucursal'] == str(sucursal.pk)
        assert len(data['detalles']) == 1
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('7')

    def test_create_insufficient_stock(self, authenticated_client, sucursal):
        producto = _producto_con_stock(sucursal, 1)
        response = authenticated_client.post(
            reverse('api-v1:ventas:venta-list'),
            {'detalles': [_linea(producto, 2)]},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error'] == 'INSUFFICIENT_STOCK'
        assert not Venta.objects.exists()

    def test_edit_reconciles_stock(self, authenticated_client, ctx, sucursal):
        producto = _producto_con_stock(sucursal, 13)
        venta = VentaService.create_sale(
            ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 3}], metodo_pago='credito',
        )
        url = reverse('api-v1:ventas:venta-detail', args=[venta.pk])

        response = authenticated_client.patch(url, {'detalles': [_linea(producto, 20)]}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error'] == 'INSUFFICIENT_STOCK'
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('10')

        response = authenticated_client.patch(url, {'detalles': [_linea(producto, 7)]}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.json()['data']['total']) == Decimal('700')
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('6')

    def test_edit_cancelled_sale_rejected(self, authenticated_client, ctx, sucursal):
        producto = _producto_con_stock(sucursal, 5)
        venta = VentaService.create_sale(ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 1}])
        VentaService.change_status(venta_id=venta.pk, estado='cancelada', ctx=ctx)
        response = authenticated_client.patch(
            reverse('api-v1:ventas:venta-detail', args=[venta.pk]),
            {'notas': 'tarde'},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error'] == 'INVALID_STATE'

    def test_payments(self, authenticated_client, ctx, sucursal):
        producto = _producto_con_stock(sucursal, 5)
        venta = VentaService.create_sale(
            ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 1}], metodo_pago='credito',
        )
        url = reverse('api-v1:ventas:venta-pagos', args=[venta.pk])
        response = authenticated_client.post(url, {'monto': '40.00', 'metodo_pago': 'tarjeta'}, format='json')
        assert response.status_code == status.HTTP_201_CREATED

        response = authenticated_client.get(url)
        assert [p['metodo_pago'] for p in response.json()['data']] == ['tarjeta']
        venta.refresh_from_db()
        assert venta.saldo_pendiente == Decimal('60.00')

    def test_estado_requires_admin(self, authenticated_client, ctx, sucursal):
        producto = _producto_con_stock(sucursal, 5)
        venta = VentaService.create_sale(ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 1}])
        response = authenticated_client.patch(
            reverse('api-v1:ventas:venta-estado', args=[venta.pk]), {'estado': 'cancelada'}, format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_cancels(self, admin_client, ctx, sucursal):
        producto = _producto_con_stock(sucursal, 5)
        venta = VentaService.create_sale(ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 2}])
        response = admin_client.patch(
            reverse('api-v1:ventas:venta-estado', args=[venta.pk]), {'estado': 'cancelada'}, format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()['data']['estado'] == 'cancelada'
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('5')

    def test_partial_return_and_history(self, authenticated_client, ctx, sucursal, django_capture_on_commit_callbacks):
        producto = _producto_con_stock(sucursal, 5)
        venta = VentaService.create_sale(ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 3}])
        with django_capture_on_commit_callbacks(execute=True):
            response = authenticated_client.post(
                reverse('api-v1:ventas:venta-devolucion-parcial', args=[venta.pk]),
                {'productos': [_linea(producto, 1)], 'motivo': 'Vencido'},
                format='json',
            )
        assert response.status_code == status.HTTP_200_OK
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('3')

        response = authenticated_client.get(reverse('api-v1:ventas:venta-historial', args=[venta.pk]))
        [entrada] = response.json()['data']
        assert entrada['tipo'] == 'devolucion_parcial'
        assert entrada['cambios']['motivo'] == 'Vencido'

    def test_delete_restores_stock_and_is_listed(self, admin_client, ctx, sucursal):
        producto = _producto_con_stock(sucursal, 5)
        venta = VentaService.create_sale(ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 2}])
        url = reverse('api-v1:ventas:venta-detail', args=[venta.pk])

        response = admin_client.delete(url, {'motivo': 'Error de carga'}, format='json')
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('5')

        response = admin_client.get(reverse('api-v1:ventas:venta-eliminadas'))
        [eliminada] = response.json()['data']
        assert eliminada['numero'] == venta.numero
        assert eliminada['motivo_eliminacion'] == 'Error de carga'

    def test_vendedor_cannot_delete(self, authenticated_client, ctx, sucursal):
        producto = _producto_con_stock(sucursal, 5)
        venta = VentaService.create_sale(ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 2}])
        response = authenticated_client.delete(reverse('api-v1:ventas:venta-detail', args=[venta.pk]))
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('3')

    def test_buscar(self, authenticated_client, ctx, sucursal):
        producto = _producto_con_stock(sucursal, 5)
        cliente = ClienteFactory(nombre='Almacén Rivera')
        venta = VentaService.create_sale(
            ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 1}], cliente_id=cliente.pk,
        )
        VentaService.create_sale(ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 1}])

        response = authenticated_client.get(reverse('api-v1:ventas:venta-buscar'), {'q': 'rivera'})
        assert response.status_code == status.HTTP_200_OK
        assert [v['id'] for v in response.json()['data']] == [str(venta.pk)]

        response = authenticated_client.get(reverse('api-v1:ventas:venta-buscar'))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_deleted_client_placeholder(self, authenticated_client, ctx, sucursal):
        producto = _producto_con_stock(sucursal, 5)
        cliente = ClienteFactory()
        venta = VentaService.create_sale(
            ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 1}], cliente_id=cliente.pk,
        )
        cliente.soft_delete()
        response = authenticated_client.get(reverse('api-v1:ventas:venta-detail', args=[venta.pk]))
        assert response.json()['data']['cliente_nombre'] == 'Cliente no encontrado'

    def test_estadisticas_dia(self, authenticated_client, ctx, sucursal):
        producto = _producto_con_stock(sucursal, 5)
        VentaService.create_sale(ctx=ctx, detalles=[{'producto_id': producto.pk, 'cantidad': 2}])
        response = authenticated_client.get(reverse('api-v1:ventas:venta-estadisticas-dia'))
        assert response.status_code == status.HTTP_200_OK
        data = response.json()['data']
        assert data['total_ventas'] == 1
        assert Decimal(str(data['monto_total'])) == Decimal('200')

        response = authenticated_client.get(reverse('api-v1:ventas:venta-estadisticas-dia'), {'fecha': 'ayer'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
