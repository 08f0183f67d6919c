import os

from celery import Celery
from celery.signals import worker_ready

# Set the default Django settings module for the 'celery' program.

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "practicas.settings")

app = Celery("practicas")

# - namespace='CELERY' means all celery-related configuration keys

#   should have a `CELERY_` prefix.

app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.

app.autodiscover_tasks()

# Configuración de tareas periódicas

app.conf.beat_schedule = {
    # Verificar vencimiento de convenios cada 24 horas
    "verificar-convenios-diario": {
        "task": "plataforma.tasks.verificar_convenios_vencimiento",
        "schedule": 60 * 60 * 24,
    },
}

# Configuración de zona horaria

app.conf.timezone = "America/Bogota"


@worker_ready.connect
def verificar_convenios_al_iniciar(sender, **kwargs):
    # La primera verificación corre al arrancar el worker, sin esperar a beat
    sender.app.send_task("plataforma.tasks.verificar_convenios_vencimiento")
