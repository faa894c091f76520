"""
Sucursales — Management Command: seed_sucursal_principal

Creates the principal branch on a fresh install so purchases without a
branch have somewhere to land.

Usage::

    python manage.py seed_sucursal_principal --nombre "Casa Central"

Idempotent: does nothing when a principal branch already exists.

@file sucursales/management/commands/seed_sucursal_principal.py
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from sucursales.models import Sucursal
from sucursales.services import SucursalService


class Command(BaseCommand):
    help = 'Create the principal branch if none exists.'

    def add_arguments(self, parser):
        parser.add_argument('--nombre', default='Casa Central')
        parser.add_argument('--direccion', default='')
        parser.add_argument('--telefono', default='')

    @transaction.atomic
    def handle(self, *args, **options):
        existente = SucursalService.principal()
        if existente is not None:
            self.stdout.write(f'  Exists: {existente.nombre}')
            return

        sucursal, created = Sucursal.objects.get_or_create(
            nombre=options['nombre'],
            defaults={
                'direccion': options['direccion'],
                'telefono': options['telefono'],
            },
        )
        SucursalService.set_principal(sucursal_id=sucursal.pk)
        verb = 'Created' if created else 'Promoted'
        self.stdout.write(self.style.SUCCESS(f'{verb} principal branch: {sucursal.nombre}'))
