"""
Publicación de notificaciones en tiempo real (Patrón Strategy + Null Object).

Cada notificación creada se publica en la sala del destinatario
(``user:<id>``) para que los clientes conectados la reciban al instante.
El servicio de notificaciones recibe el publicador por constructor; cuando
no hay un canal configurado se usa PublicadorNulo y las notificaciones se
siguen persistiendo normalmente.

ARQUITECTURA:
- Publicador: interfaz base abstracta
- RedisPublicador: PUBLISH de un mensaje JSON en el canal de la sala
- PublicadorNulo: descarta los eventos

USO:
    publicador = crear_publicador_desde_config()
    publicador.publicar(sala_usuario(15), EVENTO_NUEVA_NOTIFICACION, payload)
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

import redis
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger(__name__)

EVENTO_NUEVA_NOTIFICACION = "nueva-notificacion"


def sala_usuario(usuario_id: int) -> str:
    """Nombre de la sala personal de un usuario."""
    return f"user:{usuario_id}"


# ==============================================================================
# INTERFAZ BASE - PUBLICADOR
# ==============================================================================


class Publicador(ABC):
    """Canal de difusión de eventos hacia los clientes conectados."""

    @abstractmethod
    def publicar(self, sala: str, evento: str, payload: Dict[str, Any]) -> None:
        """
        Publica un evento en una sala. No espera confirmación.

        Args:
            sala: Clave de la sala (ej: 'user:15')
            evento: Nombre del evento (ej: 'nueva-notificacion')
            payload: Datos serializables del evento
        """


class PublicadorNulo(Publicador):
    """Publicador usado cuando no hay canal en tiempo real disponible."""

    def publicar(self, sala: str, evento: str, payload: Dict[str, Any]) -> None:
        logger.debug("Canal en tiempo real no disponible; evento %s para %s descartado", evento, sala)


class RedisPublicador(Publicador):
    """
    Publica los eventos en Redis Pub/Sub.

    El mensaje publicado en el canal ``sala`` es::

        {"evento": "nueva-notificacion", "payload": {...}}
    """

    def __init__(self, cliente: "redis.Redis"):
        self._cliente = cliente

    @classmethod
    def desde_url(cls, url: str) -> "RedisPublicador":
        return cls(redis.Redis.from_url(url))

    def publicar(self, sala: str, evento: str, payload: Dict[str, Any]) -> None:
        mensaje = json.dumps({"evento": evento, "payload": payload}, cls=DjangoJSONEncoder)
        receptores = self._cliente.publish(sala, mensaje)
        logger.debug("Evento %s publicado en %s (%s receptores)", evento, sala, receptores)


# ==============================================================================
# FACTORY
# ==============================================================================


def crear_publicador_desde_config() -> Publicador:
    """
    Crea el publicador según la configuración del proyecto.

    Usa Redis cuando NOTIFICACIONES_REDIS_URL está definido; en caso
    contrario retorna un PublicadorNulo.
    """
    url = getattr(settings, "NOTIFICACIONES_REDIS_URL", "")
    if not url:
        logger.warning("NOTIFICACIONES_REDIS_URL no configurado; notificaciones sin envío en tiempo real")
        return PublicadorNulo()
    return RedisPublicador.desde_url(url)
