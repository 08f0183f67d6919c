import logging
from functools import wraps

from django.http import JsonResponse
from django.utils.dateparse import parse_datetime
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .models import Notificacion
from .services.convenios import ConvenioVencimientoService
from .services.notificaciones import NotificacionService

logger = logging.getLogger(__name__)

ESTADOS_ERROR = {
    'no_encontrado': 404,
    'permiso': 403,
}


class ParametroInvalido(ValueError):
    pass


def api_login_required(view_func):
    """Como login_required, pero responde 401 en JSON en lugar de redirigir."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'message': 'Autenticación requerida'}, status=401)
        return view_func(request, *args, **kwargs)
    return _wrapped


def es_director_o_admin(user):
    return user.is_staff or user.is_superuser or hasattr(user, 'director')


def _respuesta_resultado(resultado):
    if resultado.exitoso:
        return None
    estado = next((ESTADOS_ERROR[c] for c in resultado.errores if c in ESTADOS_ERROR), 400)
    return JsonResponse({'message': resultado.mensaje}, status=estado)


def _entero_positivo(valor, nombre, default):
    if valor in (None, ''):
        return default
    try:
        numero = int(valor)
    except (TypeError, ValueError):
        raise ParametroInvalido(f'{nombre} debe ser un número entero')
    if numero < 1:
        raise ParametroInvalido(f'{nombre} debe ser mayor que 0')
    return numero


def _booleano(valor, nombre):
    if valor in (None, ''):
        return None
    if valor.lower() in ('true', '1'):
        return True
    if valor.lower() in ('false', '0'):
        return False
    raise ParametroInvalido(f'{nombre} debe ser true o false')


def _fecha(valor, nombre):
    if valor in (None, ''):
        return None
    fecha = parse_datetime(valor)
    if fecha is None:
        raise ParametroInvalido(f'{nombre} debe ser una fecha ISO 8601')
    return fecha


# ============================================================================
# API DE NOTIFICACIONES
# ============================================================================

@api_login_required
@require_GET
def api_notificaciones(request):
    params = request.GET
    try:
        filtros = {
            'tipo': params.get('tipo') or None,
            'leida': _booleano(params.get('leida'), 'leida'),
            'prioridad': params.get('prioridad') or None,
            'fecha_desde': _fecha(params.get('fecha_desde'), 'fecha_desde'),
            'fecha_hasta': _fecha(params.get('fecha_hasta'), 'fecha_hasta'),
            'page': _entero_positivo(params.get('page'), 'page', 1),
            'limit': min(_entero_positivo(params.get('limit'), 'limit', 20), 100),
        }
    except ParametroInvalido as e:
        return JsonResponse({'message': str(e)}, status=400)

    if filtros['tipo'] and filtros['tipo'] not in Notificacion.Tipo.values:
        return JsonResponse({'message': f"Tipo de notificación desconocido: {filtros['tipo']}"}, status=400)

    resultado = NotificacionService().listar(request.user.pk, **filtros)
    return JsonResponse(resultado)


@api_login_required
@require_GET
def api_notificaciones_conteo(request):
    return JsonResponse({'no_leidas': NotificacionService().conteo_no_leidas(request.user.pk)})


@api_login_required
@require_http_methods(['PATCH'])
def api_notificacion_marcar_leida(request, pk):
    resultado = NotificacionService().marcar_como_leida(pk, request.user.pk)
    error = _respuesta_resultado(resultado)
    if error:
        return error
    return JsonResponse({'message': resultado.mensaje, 'notificacion': resultado.objeto.a_dict()})


@api_login_required
@require_http_methods(['PATCH'])
def api_notificaciones_marcar_todas(request):
    cantidad = NotificacionService().marcar_todas_como_leidas(request.user.pk)
    return JsonResponse({
        'message': 'Todas las notificaciones marcadas como leídas',
        'cantidad_actualizada': cantidad,
    })


@api_login_required
@require_http_methods(['DELETE'])
def api_notificacion_eliminar(request, pk):
    resultado = NotificacionService().eliminar(pk, request.user.pk)
    error = _respuesta_resultado(resultado)
    if error:
        return error
    return JsonResponse({'message': resultado.mensaje})


@api_login_required
@require_POST
def api_verificar_convenios(request):
    """Ejecuta la verificación de convenios de forma síncrona."""
    if not es_director_o_admin(request.user):
        return JsonResponse({'message': 'No tienes permisos para ejecutar esta acción'}, status=403)

    try:
        resumen = ConvenioVencimientoService().verificar_convenios()
    except Exception as e:
        logger.exception('Error en la verificación manual de convenios')
        return JsonResponse({'message': 'Error al verificar convenios', 'error': str(e)}, status=500)

    return JsonResponse({
        'message': 'Verificación de convenios completada',
        'resultado': resumen.a_dict(),
    })
