"""
Programador en proceso de la verificación de convenios.

Ejecuta una tarea inmediatamente al iniciar y luego cada ``intervalo``
(24 horas por defecto) en un hilo daemon, hasta que se detiene.
En despliegue la periodicidad la controla Celery beat; este programador
se usa con ``manage.py verificar_convenios --continuo`` o en entornos sin
worker de Celery.
"""

import logging
import threading
from datetime import timedelta
from typing import Callable, Optional

from django.db import close_old_connections

logger = logging.getLogger(__name__)

INTERVALO_DEFAULT = timedelta(hours=24)


class ProgramadorConvenios:
    """
    USO:
        programador = ProgramadorConvenios(servicio.verificar_convenios)
        programador.iniciar()
        ...
        programador.detener()
    """

    def __init__(self, tarea: Callable[[], object], intervalo: timedelta = INTERVALO_DEFAULT):
        if intervalo.total_seconds() <= 0:
            raise ValueError("El intervalo debe ser positivo")

        self._tarea = tarea
        self._intervalo = intervalo
        self._detenido = threading.Event()
        self._hilo: Optional[threading.Thread] = None

    @property
    def activo(self) -> bool:
        return self._hilo is not None and self._hilo.is_alive()

    def iniciar(self) -> None:
        if self.activo:
            if not self._detenido.is_set():
                logger.warning("El programador de convenios ya está en ejecución")
                return
            # Detenido pero con una ejecución en curso
            self._hilo.join()

        self._detenido.clear()
        self._hilo = threading.Thread(target=self._bucle, name="programador-convenios", daemon=True)
        self._hilo.start()
        logger.info("Programador de convenios iniciado (cada %s)", self._intervalo)

    def detener(self, esperar: bool = False, timeout: Optional[float] = None) -> None:
        """Cancela las ejecuciones futuras; una ejecución en curso termina normalmente."""
        self._detenido.set()
        if esperar and self._hilo is not None:
            self._hilo.join(timeout)
        logger.info("Programador de convenios detenido")

    def esperar(self, timeout: Optional[float] = None) -> None:
        """Bloquea hasta que el programador se detenga."""
        if self._hilo is not None:
            self._hilo.join(timeout)

    def _bucle(self) -> None:
        self._ejecutar()
        while not self._detenido.wait(self._intervalo.total_seconds()):
            self._ejecutar()

    def _ejecutar(self) -> None:
        close_old_connections()
        try:
            self._tarea()
        except Exception:
            logger.exception("Error en la verificación programada de convenios")
        finally:
            close_old_connections()
