"""
Despensa — Celery Application

Task modules are discovered from every installed app (ventas.tasks).

@file config/celery.py
"""

import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('despensa')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
