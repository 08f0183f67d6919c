"""

Sistema de Notificaciones.

"""

from .correo import CorreoPlantillas, plantilla_para_tipo
from .excepciones import DatosInvalidos, DestinatarioNoEncontrado, NotificacionError
from .publicadores import (
    EVENTO_NUEVA_NOTIFICACION,
    Publicador,
    PublicadorNulo,
    RedisPublicador,
    crear_publicador_desde_config,
    sala_usuario,
)
from .service import NotificacionService
from .tipos import (
    DatosConvenioVencimiento,
    DatosEstadoVacante,
    DatosNuevaVacante,
    PrioridadNotificacion,
    RolDestinatario,
    TipoNotificacion,
    validar_datos,
)

__all__ = [
    "NotificacionService",
    "CorreoPlantillas",
    "plantilla_para_tipo",
    "Publicador",
    "PublicadorNulo",
    "RedisPublicador",
    "crear_publicador_desde_config",
    "sala_usuario",
    "EVENTO_NUEVA_NOTIFICACION",
    "NotificacionError",
    "DestinatarioNoEncontrado",
    "DatosInvalidos",
    "TipoNotificacion",
    "PrioridadNotificacion",
    "RolDestinatario",
    "DatosConvenioVencimiento",
    "DatosNuevaVacante",
    "DatosEstadoVacante",
    "validar_datos",
]
