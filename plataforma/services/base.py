"""
Módulo Base de Servicios de Dominio para la Plataforma de Prácticas.

Define las clases base y los tipos de resultado compartidos por la capa de
servicios. Las operaciones invocadas desde las vistas retornan un
ResultadoOperacion en lugar de lanzar excepciones para el flujo normal
(permisos, recursos inexistentes).

Arquitectura:

    ┌─────────────┐     ┌─────────────┐     ┌─────────────┐
    │   Views     │────▶│  Services   │────▶│   Models    │
    │ (Controller)│     │   (Logic)   │     │(Repository) │
    └─────────────┘     └─────────────┘     └─────────────┘

Example:
    Uso del Result Pattern en un servicio::

        resultado = servicio.marcar_como_leida(notificacion_id, usuario_id)
        if not resultado.exitoso:
            return JsonResponse({"message": resultado.mensaje}, status=403)
"""

from dataclasses import dataclass
from typing import Any, Dict


# =============================================================================
# TIPOS DE RESULTADO - RESULT PATTERN
# =============================================================================


@dataclass
class ResultadoValidacion:
    """
    Encapsula el resultado de una validación de reglas de negocio.

    Permite acumular varios errores por campo.

    Attributes:
        es_valido (bool): Indica si la validación fue exitosa.
        errores (Dict[str, str]): Errores por campo.

    Example:
        >>> resultado = ResultadoValidacion(es_valido=True)
        >>> resultado.agregar_error("convenio_id", "Campo requerido")
        >>> resultado.es_valido
        False
    """

    es_valido: bool
    errores: Dict[str, str] = None

    def __post_init__(self):
        if self.errores is None:
            self.errores = {}

    def agregar_error(self, campo: str, mensaje: str) -> "ResultadoValidacion":
        """Agrega un error y marca el resultado como inválido."""
        self.errores[campo] = mensaje
        self.es_valido = False
        return self


@dataclass
class ResultadoOperacion:
    """
    Encapsula el resultado de una operación de servicio de dominio.

    Attributes:
        exitoso (bool): Indica si la operación se completó correctamente.
        objeto (Any): El objeto resultante en caso de éxito.
        errores (Dict[str, str]): Errores por código en caso de fallo.
            Las vistas traducen los códigos ``no_encontrado`` y ``permiso``
            a respuestas 404 y 403.
        mensaje (str): Mensaje descriptivo para el usuario.
    """

    exitoso: bool
    objeto: Any = None
    errores: Dict[str, str] = None
    mensaje: str = ""

    def __post_init__(self):
        if self.errores is None:
            self.errores = {}

    @classmethod
    def exito(cls, objeto: Any, mensaje: str = "") -> "ResultadoOperacion":
        return cls(exitoso=True, objeto=objeto, mensaje=mensaje)

    @classmethod
    def fallo(cls, errores: Dict[str, str], mensaje: str = "") -> "ResultadoOperacion":
        return cls(exitoso=False, errores=errores, mensaje=mensaje)


# =============================================================================
# CLASE BASE PARA SERVICIOS
# =============================================================================


class BaseService:
    """
    Clase base para los servicios de dominio.

    Proporciona acceso a los parámetros de ConfiguracionSistema.

    Example:
        Creación de un servicio de dominio::

            class ConvenioVencimientoService(BaseService):
                def umbral_urgente(self) -> int:
                    return self._get_config("DIAS_ADVERTENCIA_URGENTE", 7)
    """

    @staticmethod
    def _get_config(clave: str, default: Any) -> Any:
        """
        Obtiene un valor de configuración del sistema.

        Args:
            clave: Nombre de la configuración (ej: 'DIAS_ADVERTENCIA_URGENTE').
            default: Valor por defecto si la configuración no existe.

        Returns:
            El valor tipado de la configuración o el default si no existe.
        """
        from plataforma.models import ConfiguracionSistema

        return ConfiguracionSistema.get_config(clave, default)
