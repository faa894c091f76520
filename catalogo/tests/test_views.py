"""
Catalogo — API Tests

@file catalogo/tests/test_views.py
"""

import pytest
from django.urls import reverse
from rest_framework import status

from catalogo.models import Categoria, Producto
from core.models import AuditLog
from tests.factories import CategoriaFactory, ProductoFactory


@pytest.mark.django_db
class TestCategorias:
    def test_create_requires_nombre(self, authenticated_client):
        response = authenticated_client.post(reverse('api-v1:catalogo:categoria-list'), {}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'nombre' in response.json()['errors']

    def test_list_counts_products(self, authenticated_client):
        categoria = CategoriaFactory()
        ProductoFactory.create_batch(2, categoria=categoria)
        ProductoFactory(categoria=categoria, is_deleted=True)
        response = authenticated_client.get(reverse('api-v1:catalogo:categoria-list'))
        row = next(r for r in response.json()['data'] if r['id'] == str(categoria.pk))
        assert row['cantidad_productos'] == 2

    def test_delete_in_use_rejected(self, authenticated_client):
        categoria = CategoriaFactory()
        ProductoFactory(categoria=categoria)
        response = authenticated_client.delete(
            reverse('api-v1:catalogo:categoria-detail', args=[categoria.pk]),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error'] == 'BUSINESS_RULE_VIOLATION'
        assert Categoria.objects.filter(pk=categoria.pk).exists()

    def test_delete_unused(self, authenticated_client):
        categoria = CategoriaFactory()
        borrado = ProductoFactory(categoria=categoria, is_deleted=True)
        response = authenticated_client.delete(
            reverse('api-v1:catalogo:categoria-detail', args=[categoria.pk]),
        )
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Categoria.objects.filter(pk=categoria.pk).exists()
        borrado.refresh_from_db()
        assert borrado.categoria is None


@pytest.mark.django_db
class TestProductos:
    def test_create_product(self, authenticated_client):
        categoria = CategoriaFactory()
        response = authenticated_client.post(
            reverse('api-v1:catalogo:producto-list'),
            {
                'codigo': '7790001',
                'nombre': 'Yerba 1kg',
                'categoria': str(categoria.pk),
                'precio_costo': '1500.00',
                'precio_venta': '2100.00',
            },
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        producto = Producto.objects.get(codigo='7790001')
        assert AuditLog.objects.filter(model_name='Producto', object_id=str(producto.pk)).exists()

    def test_duplicate_code_rejected(self, authenticated_client):
        ProductoFactory(codigo='ABC')
        response = authenticated_client.post(
            reverse('api-v1:catalogo:producto-list'),
            {'codigo': 'abc', 'nombre': 'Otro', 'precio_costo': '1', 'precio_venta': '2'},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_search_by_code_or_name(self, authenticated_client):
        ProductoFactory(codigo='YER-1', nombre='Yerba')
        ProductoFactory(codigo='AZU-1', nombre='Azucar')
        response = authenticated_client.get(reverse('api-v1:catalogo:producto-list'), {'search': 'yer'})
        nombres = [p['nombre'] for p in response.json()['data']]
        assert nombres == ['Yerba']

    def test_delete_is_soft(self, authenticated_client):
        producto = ProductoFactory()
        response = authenticated_client.delete(reverse('api-v1:catalogo:producto-detail', args=[producto.pk]))
        assert response.status_code == status.HTTP_204_NO_CONTENT
        producto.refresh_from_db()
        assert producto.is_deleted is True
        assert producto.activo is False
        listed = authenticated_client.get(reverse('api-v1:catalogo:producto-list')).json()['data']
        assert str(producto.pk) not in [p['id'] for p in listed]
