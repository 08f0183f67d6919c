"""
Tipos de datos para las notificaciones.

El campo ``data`` de Notificacion es una unión etiquetada por ``tipo``: cada
familia de notificación declara en una dataclass los campos que su carga
útil requiere. ``validar_datos`` comprueba un diccionario contra la variante
que corresponde a su tipo antes de persistirlo.

USO:
    datos = DatosConvenioVencimiento(
        convenio_id=convenio.pk,
        nombre_convenio=convenio.nombre,
        empresa_nombre=convenio.empresa.nombre,
        empresa_id=convenio.empresa_id,
        fecha_vencimiento=convenio.fecha_fin,
        dias_restantes=15,
    ).a_dict()
"""

from dataclasses import MISSING, asdict, dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional, Type

from plataforma.models import Notificacion
from plataforma.services.base import ResultadoValidacion

TipoNotificacion = Notificacion.Tipo
PrioridadNotificacion = Notificacion.Prioridad
RolDestinatario = Notificacion.Rol


# ==============================================================================
# VARIANTES DE CARGA ÚTIL
# ==============================================================================


@dataclass
class DatosConvenioVencimiento:
    """Datos de CONVENIO_PROXIMO_VENCER y CONVENIO_VENCIDO."""

    convenio_id: int
    nombre_convenio: str
    empresa_nombre: str
    empresa_id: int
    fecha_vencimiento: Optional[datetime]
    dias_restantes: int

    def a_dict(self) -> Dict[str, Any]:
        datos = asdict(self)
        if self.fecha_vencimiento is not None:
            datos["fecha_vencimiento"] = self.fecha_vencimiento.isoformat()
        return datos


@dataclass
class DatosNuevaVacante:
    """Datos de NUEVA_SOLICITUD_VACANTE."""

    vacante_id: int
    titulo_vacante: str
    empresa_nombre: str
    empresa_id: int
    area: str
    modalidad: str

    def a_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DatosEstadoVacante:
    """Datos de VACANTE_APROBADA y VACANTE_RECHAZADA."""

    vacante_id: int
    titulo_vacante: str
    motivo_rechazo: Optional[str] = None

    def a_dict(self) -> Dict[str, Any]:
        return asdict(self)


DATOS_POR_TIPO: Dict[str, Type] = {
    TipoNotificacion.CONVENIO_PROXIMO_VENCER: DatosConvenioVencimiento,
    TipoNotificacion.CONVENIO_VENCIDO: DatosConvenioVencimiento,
    TipoNotificacion.NUEVA_SOLICITUD_VACANTE: DatosNuevaVacante,
    TipoNotificacion.VACANTE_APROBADA: DatosEstadoVacante,
    TipoNotificacion.VACANTE_RECHAZADA: DatosEstadoVacante,
}


def validar_datos(tipo: str, datos: Dict[str, Any]) -> ResultadoValidacion:
    """
    Valida que ``datos`` contenga los campos obligatorios de la variante
    asociada a ``tipo``.

    Returns:
        ResultadoValidacion con un error por cada campo faltante.
    """
    resultado = ResultadoValidacion(es_valido=True)

    clase = DATOS_POR_TIPO.get(tipo)
    if clase is None:
        return resultado.agregar_error("tipo", f"Tipo de notificación desconocido: {tipo}")

    for campo in fields(clase):
        obligatorio = campo.default is MISSING and campo.default_factory is MISSING
        if obligatorio and campo.name not in datos:
            resultado.agregar_error(campo.name, "Campo requerido")

    return resultado
