"""
Servicio de verificación de vencimiento de Convenios.

Recorre los convenios aprobados con fecha de fin y, para cada uno:

- si la fecha de fin ya pasó, lo marca como VENCIDO, deshabilita la empresa
  cuando se queda sin convenios aprobados y notifica a los directores y a la
  empresa;
- si no, notifica su próximo vencimiento cuando los días restantes coinciden
  exactamente con uno de los días de aviso, como máximo una vez al día por
  convenio.

Diseñado para ejecutarse como tarea periódica (Celery beat, el comando
``verificar_convenios`` o ProgramadorConvenios).

USO:
    servicio = ConvenioVencimientoService()
    resumen = servicio.verificar_convenios()
    resumen.a_dict()
    # {'verificados': 12, 'notificados': 2, 'vencidos': 1, 'errores': []}
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.utils import timezone

from plataforma.models import Convenio, Notificacion
from plataforma.services.base import BaseService
from plataforma.services.notificaciones import (
    DatosConvenioVencimiento,
    NotificacionService,
    PrioridadNotificacion,
    RolDestinatario,
    TipoNotificacion,
)

logger = logging.getLogger(__name__)

UN_DIA = timedelta(days=1)

# Avisos fijos además de los umbrales configurables
DIAS_AVISO_ADICIONALES = (3, 1)

UMBRALES_DEFAULT = {"urgente": 7, "alta": 15, "media": 30}


# ==============================================================================
# CONFIGURACIÓN Y RESULTADO
# ==============================================================================


@dataclass(frozen=True)
class ConfiguracionVencimiento:
    """Umbrales (en días) que determinan la prioridad de los avisos."""

    dias_advertencia_urgente: int = UMBRALES_DEFAULT["urgente"]
    dias_advertencia_alta: int = UMBRALES_DEFAULT["alta"]
    dias_advertencia_media: int = UMBRALES_DEFAULT["media"]

    @classmethod
    def desde_config(cls) -> "ConfiguracionVencimiento":
        """
        Lee los umbrales de ConfiguracionSistema; si no existen usa
        settings.CONVENIOS_DIAS_ADVERTENCIA y, por último, 7/15/30.
        """
        umbrales = {**UMBRALES_DEFAULT, **getattr(settings, "CONVENIOS_DIAS_ADVERTENCIA", {})}
        return cls(
            dias_advertencia_urgente=int(BaseService._get_config("DIAS_ADVERTENCIA_URGENTE", umbrales["urgente"])),
            dias_advertencia_alta=int(BaseService._get_config("DIAS_ADVERTENCIA_ALTA", umbrales["alta"])),
            dias_advertencia_media=int(BaseService._get_config("DIAS_ADVERTENCIA_MEDIA", umbrales["media"])),
        )

    @property
    def dias_aviso(self) -> Tuple[int, ...]:
        return (
            self.dias_advertencia_media,
            self.dias_advertencia_alta,
            self.dias_advertencia_urgente,
        ) + DIAS_AVISO_ADICIONALES

    @property
    def es_default(self) -> bool:
        return (
            self.dias_advertencia_urgente,
            self.dias_advertencia_alta,
            self.dias_advertencia_media,
        ) == (UMBRALES_DEFAULT["urgente"], UMBRALES_DEFAULT["alta"], UMBRALES_DEFAULT["media"])

    def prioridad_para(self, dias_restantes: int) -> str:
        """Prioridad del aviso; el umbral más pequeño que se cumpla gana."""
        if dias_restantes <= self.dias_advertencia_urgente:
            return PrioridadNotificacion.URGENTE
        if dias_restantes <= self.dias_advertencia_alta:
            return PrioridadNotificacion.ALTA
        if dias_restantes <= self.dias_advertencia_media:
            return PrioridadNotificacion.MEDIA
        return PrioridadNotificacion.BAJA


@dataclass
class ResumenVerificacion:
    """
    Resultado de una verificación.

    ``notificados`` cuenta convenios avisados (no filas creadas) y
    ``errores`` contiene un mensaje por cada convenio que no se pudo
    procesar.
    """

    verificados: int = 0
    notificados: int = 0
    vencidos: int = 0
    errores: List[str] = field(default_factory=list)

    def a_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calcular_dias_restantes(ahora: datetime, fecha_fin: datetime) -> int:
    """Días hasta ``fecha_fin``; las fracciones de día redondean hacia arriba."""
    return math.ceil((fecha_fin - ahora) / UN_DIA)


# ==============================================================================
# SERVICIO
# ==============================================================================


class ConvenioVencimientoService(BaseService):
    def __init__(self, notificaciones: Optional[NotificacionService] = None):
        self._notificaciones = notificaciones or NotificacionService()

    def verificar_convenios(
        self,
        config: Optional[ConfiguracionVencimiento] = None,
        ahora: Optional[datetime] = None,
    ) -> ResumenVerificacion:
        """
        Verifica todos los convenios aprobados con fecha de fin.

        Un error en un convenio se registra en ``errores`` y la verificación
        continúa con el siguiente. Un error al consultar los convenios se
        propaga.

        Args:
            config: Umbrales de aviso; por defecto los de ConfiguracionSistema
            ahora: Instante de referencia; por defecto timezone.now()

        Returns:
            ResumenVerificacion
        """
        config = config or ConfiguracionVencimiento.desde_config()
        ahora = ahora or timezone.now()

        logger.info("Iniciando verificación de convenios próximos a vencer")
        if not config.es_default:
            logger.warning(
                "Umbrales de aviso personalizados (%s/%s/%s); los avisos fijos de %s días se mantienen",
                config.dias_advertencia_urgente,
                config.dias_advertencia_alta,
                config.dias_advertencia_media,
                " y ".join(str(d) for d in DIAS_AVISO_ADICIONALES),
            )

        convenios = list(Convenio.objects.aprobados_con_fecha_fin().select_related("empresa").order_by("pk"))

        resumen = ResumenVerificacion(verificados=len(convenios))

        for convenio in convenios:
            try:
                dias_restantes = calcular_dias_restantes(ahora, convenio.fecha_fin)

                if dias_restantes < 0:
                    self._manejar_convenio_vencido(convenio)
                    resumen.vencidos += 1
                    continue

                if self._debe_notificar(convenio, dias_restantes, config, ahora):
                    self._notificar_proximo_vencer(convenio, dias_restantes, config.prioridad_para(dias_restantes))
                    resumen.notificados += 1
            except Exception as e:
                logger.exception("Error al procesar convenio %s", convenio.pk)
                resumen.errores.append(f"Convenio {convenio.pk}: {e}")

        logger.info(
            "Verificación completada: %s verificados, %s notificados, %s vencidos, %s errores",
            resumen.verificados,
            resumen.notificados,
            resumen.vencidos,
            len(resumen.errores),
        )
        return resumen

    def _debe_notificar(
        self,
        convenio: Convenio,
        dias_restantes: int,
        config: ConfiguracionVencimiento,
        ahora: datetime,
    ) -> bool:
        if dias_restantes not in config.dias_aviso:
            return False

        inicio_dia = timezone.localtime(ahora).replace(hour=0, minute=0, second=0, microsecond=0)

        ya_notificado = Notificacion.objects.filter(
            tipo=TipoNotificacion.CONVENIO_PROXIMO_VENCER,
            creada_en__gte=inicio_dia,
            creada_en__lt=inicio_dia + UN_DIA,
            data__convenio_id=convenio.pk,
        ).exists()

        return not ya_notificado

    def _datos_convenio(self, convenio: Convenio, dias_restantes: int) -> Dict[str, Any]:
        return DatosConvenioVencimiento(
            convenio_id=convenio.pk,
            nombre_convenio=convenio.nombre,
            empresa_nombre=convenio.empresa.nombre,
            empresa_id=convenio.empresa_id,
            fecha_vencimiento=convenio.fecha_fin,
            dias_restantes=dias_restantes,
        ).a_dict()

    def _notificar_proximo_vencer(self, convenio: Convenio, dias_restantes: int, prioridad: str) -> None:
        empresa = convenio.empresa

        if dias_restantes == 1:
            mensaje = f'El convenio "{convenio.nombre}" con la empresa {empresa.nombre} vence mañana.'
        else:
            mensaje = f'El convenio "{convenio.nombre}" con la empresa {empresa.nombre} vence en {dias_restantes} días.'

        datos = self._datos_convenio(convenio, dias_restantes)

        self._notificaciones.notificar_directores(
            TipoNotificacion.CONVENIO_PROXIMO_VENCER,
            "Convenio próximo a vencer",
            mensaje,
            prioridad,
            datos,
        )

        self._notificaciones.crear_notificacion(
            tipo=TipoNotificacion.CONVENIO_PROXIMO_VENCER,
            titulo="Convenio próximo a vencer",
            mensaje=(
                f'Su convenio "{convenio.nombre}" vence en {dias_restantes} '
                f'{"día" if dias_restantes == 1 else "días"}. Por favor, gestione su renovación.'
            ),
            prioridad=prioridad,
            destinatario_id=empresa.usuario_id,
            destinatario_rol=RolDestinatario.EMPRESA,
            data=datos,
        )

        logger.info("Convenio %s vence en %s días: aviso enviado (%s)", convenio.pk, dias_restantes, prioridad)

    def _manejar_convenio_vencido(self, convenio: Convenio) -> None:
        convenio.estado = Convenio.Estado.VENCIDO
        convenio.save(update_fields=["estado", "fecha_modificacion"])

        empresa = convenio.empresa
        convenios_activos = Convenio.objects.filter(empresa_id=empresa.pk, estado=Convenio.Estado.APROBADO).count()

        if convenios_activos == 0 and empresa.habilitada:
            empresa.habilitada = False
            empresa.save(update_fields=["habilitada", "fecha_modificacion"])
            logger.info("Empresa %s deshabilitada: sin convenios aprobados", empresa.pk)

        datos = self._datos_convenio(convenio, 0)

        self._notificaciones.notificar_directores(
            TipoNotificacion.CONVENIO_VENCIDO,
            "Convenio vencido",
            f'El convenio "{convenio.nombre}" con la empresa {empresa.nombre} ha vencido.',
            PrioridadNotificacion.ALTA,
            datos,
        )

        self._notificaciones.crear_notificacion(
            tipo=TipoNotificacion.CONVENIO_VENCIDO,
            titulo="Convenio vencido",
            mensaje=(
                f'Su convenio "{convenio.nombre}" ha vencido. '
                "Por favor, contacte con la dirección del programa para renovarlo."
            ),
            prioridad=PrioridadNotificacion.ALTA,
            destinatario_id=empresa.usuario_id,
            destinatario_rol=RolDestinatario.EMPRESA,
            data=datos,
        )

        logger.warning("Convenio %s marcado como VENCIDO", convenio.pk)
