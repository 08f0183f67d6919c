from .convenios import ConvenioVencimientoService
from .notificaciones import NotificacionService

__all__ = [
    'ConvenioVencimientoService',
    'NotificacionService',
]
