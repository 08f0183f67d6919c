"""
Servicio de Notificaciones.

Crea notificaciones persistentes y las entrega en tiempo real y, para los
directores, por correo. También expone las operaciones de lectura usadas
por la API (listar, contar, marcar como leídas, eliminar).

La entrega es de mejor esfuerzo: una vez guardada la notificación, los
fallos del canal en tiempo real o del correo se registran en el log pero no
hacen fallar la creación.
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth.models import User
from django.core.paginator import Paginator
from django.utils import formats, timezone

from plataforma.models import Director, Notificacion
from plataforma.services.base import BaseService, ResultadoOperacion

from .correo import CorreoPlantillas, plantilla_para_tipo
from .excepciones import DatosInvalidos, DestinatarioNoEncontrado
from .publicadores import (
    EVENTO_NUEVA_NOTIFICACION,
    Publicador,
    crear_publicador_desde_config,
    sala_usuario,
)
from .tipos import RolDestinatario, validar_datos

logger = logging.getLogger(__name__)


class NotificacionService(BaseService):
    """
    USO:
        servicio = NotificacionService(publicador=RedisPublicador.desde_url(url))
        servicio.crear_notificacion(
            tipo=TipoNotificacion.CONVENIO_VENCIDO,
            titulo="Convenio vencido",
            mensaje="...",
            prioridad=PrioridadNotificacion.ALTA,
            destinatario_id=empresa.usuario_id,
            destinatario_rol=RolDestinatario.EMPRESA,
            data=datos,
        )
    """

    def __init__(self, publicador: Optional[Publicador] = None, correo: Optional[CorreoPlantillas] = None):
        self._publicador = publicador if publicador is not None else crear_publicador_desde_config()
        self._correo = correo or CorreoPlantillas()

    # ------------------------------------------------------------------
    # Creación y entrega
    # ------------------------------------------------------------------

    def crear_notificacion(
        self,
        *,
        tipo: str,
        titulo: str,
        mensaje: str,
        prioridad: str,
        destinatario_id: int,
        destinatario_rol: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Notificacion:
        """
        Persiste una notificación y la entrega por los canales disponibles.

        Raises:
            DestinatarioNoEncontrado: si no existe un usuario con ese ID.
            DatosInvalidos: si ``data`` no cumple la variante de ``tipo``.
        """
        data = data or {}

        self._validar_destinatario(destinatario_id, destinatario_rol)

        validacion = validar_datos(tipo, data)
        if not validacion.es_valido:
            raise DatosInvalidos(tipo, validacion.errores)

        notificacion = Notificacion.objects.create(
            tipo=tipo,
            titulo=titulo,
            mensaje=mensaje,
            prioridad=prioridad,
            destinatario_id=destinatario_id,
            destinatario_rol=destinatario_rol,
            data=data,
            leida=False,
        )

        self._enviar_tiempo_real(notificacion)

        if destinatario_rol == RolDestinatario.DIRECTOR:
            self._enviar_correo(notificacion)

        return notificacion

    def notificar_directores(
        self,
        tipo: str,
        titulo: str,
        mensaje: str,
        prioridad: str,
        data: Dict[str, Any],
    ) -> int:
        """
        Crea la misma notificación para cada director registrado.

        Returns:
            Cantidad de directores notificados
        """
        usuarios_directores = list(Director.objects.order_by("pk").values_list("usuario_id", flat=True))

        if not usuarios_directores:
            logger.warning("No hay directores para notificar")
            return 0

        for usuario_id in usuarios_directores:
            self.crear_notificacion(
                tipo=tipo,
                titulo=titulo,
                mensaje=mensaje,
                prioridad=prioridad,
                destinatario_id=usuario_id,
                destinatario_rol=RolDestinatario.DIRECTOR,
                data=data,
            )

        return len(usuarios_directores)

    def _validar_destinatario(self, destinatario_id: int, rol: str) -> None:
        # Los IDs son de usuario, sin importar el rol
        if not User.objects.filter(pk=destinatario_id).exists():
            raise DestinatarioNoEncontrado(destinatario_id, rol)

    def _enviar_tiempo_real(self, notificacion: Notificacion) -> None:
        try:
            self._publicador.publicar(
                sala_usuario(notificacion.destinatario_id),
                EVENTO_NUEVA_NOTIFICACION,
                notificacion.a_dict(),
            )
        except Exception:
            logger.exception("Error al enviar la notificación %s en tiempo real", notificacion.pk)

    def _enviar_correo(self, notificacion: Notificacion) -> None:
        try:
            director = Director.objects.select_related("usuario").filter(usuario_id=notificacion.destinatario_id).first()

            if director is None or not director.email:
                logger.warning("No se pudo obtener email del director %s", notificacion.destinatario_id)
                return

            plantilla_id = plantilla_para_tipo(notificacion.tipo)
            if not plantilla_id:
                logger.warning("No hay plantilla configurada para tipo: %s", notificacion.tipo)
                return

            datos = {
                "nombre": director.nombre,
                "titulo": notificacion.titulo,
                "mensaje": notificacion.mensaje,
                "prioridad": notificacion.prioridad,
                "tipo": notificacion.tipo,
                "fecha": formats.date_format(timezone.localdate(), "DATE_FORMAT"),
                **notificacion.data,
            }

            self._correo.enviar_plantilla(director.email, plantilla_id, datos)
            logger.info("Correo de notificación enviado a %s (%s)", director.email, notificacion.tipo)
        except Exception:
            logger.exception("Error al enviar correo de la notificación %s", notificacion.pk)

    # ------------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------------

    def listar(
        self,
        destinatario_id: int,
        tipo: Optional[str] = None,
        leida: Optional[bool] = None,
        prioridad: Optional[str] = None,
        fecha_desde=None,
        fecha_hasta=None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        """
        Notificaciones de un destinatario, más recientes primero.

        Returns:
            Dict con data, total, no_leidas, page, limit y total_pages
        """
        notificaciones = Notificacion.objects.filter(destinatario_id=destinatario_id)

        if tipo:
            notificaciones = notificaciones.filter(tipo=tipo)
        if leida is not None:
            notificaciones = notificaciones.filter(leida=leida)
        if prioridad:
            notificaciones = notificaciones.filter(prioridad=prioridad)
        if fecha_desde:
            notificaciones = notificaciones.filter(creada_en__gte=fecha_desde)
        if fecha_hasta:
            notificaciones = notificaciones.filter(creada_en__lte=fecha_hasta)

        notificaciones = notificaciones.order_by("-creada_en", "-pk")

        paginator = Paginator(notificaciones, limit)
        pagina = paginator.get_page(page)

        return {
            "data": [n.a_dict() for n in pagina.object_list],
            "total": paginator.count,
            "no_leidas": notificaciones.filter(leida=False).count(),
            "page": pagina.number,
            "limit": limit,
            "total_pages": paginator.num_pages,
        }

    def conteo_no_leidas(self, destinatario_id: int) -> int:
        return Notificacion.objects.filter(destinatario_id=destinatario_id, leida=False).count()

    def marcar_como_leida(self, notificacion_id: int, usuario_id: int) -> ResultadoOperacion:
        resultado = self._obtener_propia(notificacion_id, usuario_id, "marcar")
        if not resultado.exitoso:
            return resultado

        notificacion = resultado.objeto
        notificacion.marcar_como_leida()
        return ResultadoOperacion.exito(notificacion, "Notificación marcada como leída")

    def marcar_todas_como_leidas(self, destinatario_id: int) -> int:
        return Notificacion.objects.filter(destinatario_id=destinatario_id, leida=False).update(leida=True)

    def eliminar(self, notificacion_id: int, usuario_id: int) -> ResultadoOperacion:
        resultado = self._obtener_propia(notificacion_id, usuario_id, "eliminar")
        if not resultado.exitoso:
            return resultado

        resultado.objeto.delete()
        return ResultadoOperacion.exito(None, "Notificación eliminada correctamente")

    def _obtener_propia(self, notificacion_id: int, usuario_id: int, accion: str) -> ResultadoOperacion:
        notificacion = Notificacion.objects.filter(pk=notificacion_id).first()

        if notificacion is None:
            return ResultadoOperacion.fallo({"no_encontrado": "notificacion"}, "Notificación no encontrada")

        if notificacion.destinatario_id != usuario_id:
            return ResultadoOperacion.fallo(
                {"permiso": "notificacion"},
                f"No tienes permisos para {accion} esta notificación",
            )

        return ResultadoOperacion.exito(notificacion)
