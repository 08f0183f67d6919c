"""Errores del sistema de notificaciones."""

from typing import Dict


class NotificacionError(Exception):
    """Error base al crear o entregar una notificación."""


class DestinatarioNoEncontrado(NotificacionError):
    def __init__(self, destinatario_id: int, rol: str):
        self.destinatario_id = destinatario_id
        self.rol = rol
        super().__init__(f"Destinatario no encontrado: {rol} con ID {destinatario_id}")


class DatosInvalidos(NotificacionError):
    def __init__(self, tipo: str, errores: Dict[str, str]):
        self.tipo = tipo
        self.errores = errores
        detalle = ", ".join(f"{campo}: {mensaje}" for campo, mensaje in errores.items())
        super().__init__(f"Datos inválidos para {tipo}: {detalle}")
