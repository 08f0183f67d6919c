from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def verificar_convenios_vencimiento(self):
    from .services.convenios import ConvenioVencimientoService

    try:
        logger.info('Iniciando verificación programada de convenios')
        resumen = ConvenioVencimientoService().verificar_convenios()
        logger.info(
            f'Verificación programada completada: {resumen.verificados} verificados, '
            f'{resumen.notificados} notificados, {resumen.vencidos} vencidos'
        )
        return {'status': 'success', **resumen.a_dict()}
    except Exception as e:
        logger.error(f'Error al verificar convenios: {str(e)}')
        raise self.retry(exc=e, countdown=60)
