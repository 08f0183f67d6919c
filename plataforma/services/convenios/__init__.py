"""

Gestión del ciclo de vida de Convenios.

"""

from .programador import ProgramadorConvenios
from .vencimiento import (
    ConfiguracionVencimiento,
    ConvenioVencimientoService,
    ResumenVerificacion,
    calcular_dias_restantes,
)

__all__ = [
    "ConvenioVencimientoService",
    "ConfiguracionVencimiento",
    "ResumenVerificacion",
    "calcular_dias_restantes",
    "ProgramadorConvenios",
]
