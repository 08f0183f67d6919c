"""
Configuración de pytest para el proyecto.
"""

import os

import pytest

# Configurar Django antes de importar modelos
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "practicas.settings")


@pytest.fixture(autouse=True)
def _sin_canal_tiempo_real(settings):
    """Los tests nunca publican en un Redis real."""
    settings.NOTIFICACIONES_REDIS_URL = ""
    settings.CELERY_TASK_ALWAYS_EAGER = True
