from datetime import timedelta
from unittest import mock

from django.core import mail
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone

from plataforma.models import ConfiguracionSistema, Convenio, Notificacion
from plataforma.services.convenios import (
    ConfiguracionVencimiento,
    ConvenioVencimientoService,
    calcular_dias_restantes,
)
from plataforma.services.notificaciones import DestinatarioNoEncontrado, NotificacionService, PublicadorNulo

from .datos import crear_convenio, crear_director, crear_empresa

ORDEN_PRIORIDAD = ['BAJA', 'MEDIA', 'ALTA', 'URGENTE']


class CalcularDiasRestantesTest(SimpleTestCase):

    def setUp(self):
        self.ahora = timezone.now()

    def test_fraccion_de_dia_redondea_hacia_arriba(self):
        self.assertEqual(calcular_dias_restantes(self.ahora, self.ahora + timedelta(hours=12)), 1)

    def test_dias_exactos(self):
        self.assertEqual(calcular_dias_restantes(self.ahora, self.ahora + timedelta(days=15)), 15)

    def test_horas_pasadas_del_mismo_dia_son_cero(self):
        self.assertEqual(calcular_dias_restantes(self.ahora, self.ahora - timedelta(hours=2)), 0)

    def test_mas_de_un_dia_pasado_es_negativo(self):
        self.assertEqual(calcular_dias_restantes(self.ahora, self.ahora - timedelta(hours=25)), -1)


class ConfiguracionVencimientoTest(TestCase):

    def test_dias_de_aviso_por_defecto(self):
        config = ConfiguracionVencimiento()
        self.assertEqual(set(config.dias_aviso), {30, 15, 7, 3, 1})
        self.assertTrue(config.es_default)

    def test_prioridad_por_umbral(self):
        config = ConfiguracionVencimiento()
        self.assertEqual(config.prioridad_para(30), 'MEDIA')
        self.assertEqual(config.prioridad_para(15), 'ALTA')
        self.assertEqual(config.prioridad_para(7), 'URGENTE')
        self.assertEqual(config.prioridad_para(3), 'URGENTE')
        self.assertEqual(config.prioridad_para(1), 'URGENTE')
        self.assertEqual(config.prioridad_para(45), 'BAJA')

    def test_prioridad_no_disminuye_al_acercarse_el_vencimiento(self):
        config = ConfiguracionVencimiento()
        for dias in range(1, 40):
            mas_cerca = ORDEN_PRIORIDAD.index(config.prioridad_para(dias))
            mas_lejos = ORDEN_PRIORIDAD.index(config.prioridad_para(dias + 1))
            self.assertGreaterEqual(mas_cerca, mas_lejos, f'{dias} días')

        self.assertGreaterEqual(
            ORDEN_PRIORIDAD.index(config.prioridad_para(5)),
            ORDEN_PRIORIDAD.index(config.prioridad_para(20)),
        )

    def test_desde_config_lee_configuracion_sistema(self):
        ConfiguracionSistema.objects.create(
            clave='DIAS_ADVERTENCIA_URGENTE', valor='10', tipo='entero', categoria='convenios'
        )

        config = ConfiguracionVencimiento.desde_config()

        self.assertEqual(config.dias_advertencia_urgente, 10)
        self.assertEqual(config.dias_advertencia_alta, 15)
        self.assertEqual(config.dias_advertencia_media, 30)

    @override_settings(CONVENIOS_DIAS_ADVERTENCIA={'alta': 20})
    def test_desde_config_usa_settings_como_respaldo(self):
        config = ConfiguracionVencimiento.desde_config()

        self.assertEqual(config.dias_advertencia_alta, 20)
        self.assertEqual(config.dias_advertencia_urgente, 7)


class VerificarConveniosTest(TestCase):
    """Verificación de convenios con el servicio de notificaciones real."""

    def setUp(self):
        self.ahora = timezone.now()
        self.director_1 = crear_director('ana')
        self.director_2 = crear_director('luis')
        self.empresa = crear_empresa('Acme S.A.S.', '900123456', director=self.director_1)
        self.servicio = ConvenioVencimientoService(NotificacionService(publicador=PublicadorNulo()))

    def _convenio_en(self, delta, **kwargs):
        return crear_convenio(self.empresa, self.ahora + delta, **kwargs)

    def _verificar(self, **kwargs):
        return self.servicio.verificar_convenios(ahora=self.ahora, **kwargs)

    def test_dias_de_aviso_notifican_directores_y_empresa(self):
        esperadas = {30: 'MEDIA', 15: 'ALTA', 7: 'URGENTE', 3: 'URGENTE', 1: 'URGENTE'}
        convenios = {
            dias: self._convenio_en(timedelta(days=dias), nombre=f'Convenio {dias}') for dias in esperadas
        }

        resumen = self._verificar()

        self.assertEqual(resumen.verificados, 5)
        self.assertEqual(resumen.notificados, 5)
        self.assertEqual(resumen.vencidos, 0)
        self.assertEqual(resumen.errores, [])

        for dias, convenio in convenios.items():
            notificaciones = Notificacion.objects.filter(data__convenio_id=convenio.pk)
            self.assertEqual(notificaciones.count(), 3)
            self.assertEqual(
                set(notificaciones.values_list('destinatario_id', flat=True)),
                {self.director_1.usuario_id, self.director_2.usuario_id, self.empresa.usuario_id},
            )
            for notificacion in notificaciones:
                self.assertEqual(notificacion.tipo, 'CONVENIO_PROXIMO_VENCER')
                self.assertEqual(notificacion.prioridad, esperadas[dias])
                self.assertEqual(notificacion.data['dias_restantes'], dias)

    def test_dias_fuera_de_aviso_no_notifican(self):
        for dias in (45, 29, 16, 8, 2):
            self._convenio_en(timedelta(days=dias))

        resumen = self._verificar()

        self.assertEqual(resumen.verificados, 5)
        self.assertEqual(resumen.notificados, 0)
        self.assertFalse(Notificacion.objects.exists())

    def test_segunda_ejecucion_del_dia_no_repite_avisos(self):
        convenio = self._convenio_en(timedelta(days=7))

        primera = self._verificar()
        segunda = self._verificar()

        self.assertEqual(primera.notificados, 1)
        self.assertEqual(segunda.notificados, 0)
        self.assertEqual(Notificacion.objects.filter(data__convenio_id=convenio.pk).count(), 3)

    def test_aviso_de_un_dia_anterior_no_bloquea(self):
        convenio = self._convenio_en(timedelta(days=7))
        Notificacion.objects.create(
            tipo='CONVENIO_PROXIMO_VENCER',
            titulo='Convenio próximo a vencer',
            mensaje='Aviso anterior',
            destinatario=self.director_1.usuario,
            destinatario_rol='DIRECTOR',
            data={'convenio_id': convenio.pk},
            creada_en=self.ahora - timedelta(days=1),
        )

        resumen = self._verificar()

        self.assertEqual(resumen.notificados, 1)

    def test_aviso_de_otro_convenio_no_bloquea(self):
        convenio = self._convenio_en(timedelta(days=15))
        otro = self._convenio_en(timedelta(days=15), nombre='Convenio Específico')

        Notificacion.objects.create(
            tipo='CONVENIO_PROXIMO_VENCER',
            titulo='Convenio próximo a vencer',
            mensaje='Aviso de otro convenio',
            destinatario=self.director_1.usuario,
            destinatario_rol='DIRECTOR',
            data={'convenio_id': otro.pk},
        )

        self._verificar()

        self.assertEqual(Notificacion.objects.filter(data__convenio_id=convenio.pk).count(), 3)
        self.assertEqual(Notificacion.objects.filter(data__convenio_id=otro.pk).count(), 1)

    def test_dia_cero_no_vence_ni_notifica(self):
        convenio = self._convenio_en(-timedelta(hours=2))

        resumen = self._verificar()

        convenio.refresh_from_db()
        self.assertEqual(convenio.estado, Convenio.Estado.APROBADO)
        self.assertEqual(resumen.verificados, 1)
        self.assertEqual(resumen.vencidos, 0)
        self.assertEqual(resumen.notificados, 0)
        self.assertFalse(Notificacion.objects.exists())

    def test_convenio_vencido_deshabilita_empresa_sin_otros_aprobados(self):
        convenio = self._convenio_en(-timedelta(days=1))

        resumen = self._verificar()

        convenio.refresh_from_db()
        self.empresa.refresh_from_db()
        self.assertEqual(resumen.vencidos, 1)
        self.assertEqual(resumen.notificados, 0)
        self.assertEqual(convenio.estado, Convenio.Estado.VENCIDO)
        self.assertFalse(self.empresa.habilitada)

        vencidas = Notificacion.objects.filter(tipo='CONVENIO_VENCIDO')
        self.assertEqual(vencidas.count(), 3)
        self.assertEqual(set(vencidas.values_list('prioridad', flat=True)), {'ALTA'})
        self.assertEqual(
            set(vencidas.values_list('destinatario_rol', flat=True)),
            {'DIRECTOR', 'EMPRESA'},
        )
        self.assertTrue(all(n.data['dias_restantes'] == 0 for n in vencidas))

    def test_convenio_vencido_con_otro_aprobado_mantiene_empresa(self):
        vencido = self._convenio_en(-timedelta(days=3))
        self._convenio_en(timedelta(days=100), nombre='Convenio Específico')

        self._verificar()

        vencido.refresh_from_db()
        self.empresa.refresh_from_db()
        self.assertEqual(vencido.estado, Convenio.Estado.VENCIDO)
        self.assertTrue(self.empresa.habilitada)

    def test_convenio_vencido_registra_historial(self):
        convenio = self._convenio_en(-timedelta(days=2))

        self._verificar()

        ultimo = convenio.history.first()
        self.assertEqual(ultimo.estado, Convenio.Estado.VENCIDO)
        self.assertEqual(ultimo.prev_record.estado, Convenio.Estado.APROBADO)

    def test_convenio_vencido_no_se_vuelve_a_procesar(self):
        self._convenio_en(-timedelta(days=1))

        self._verificar()
        segunda = self._verificar()

        self.assertEqual(segunda.verificados, 0)
        self.assertEqual(Notificacion.objects.filter(tipo='CONVENIO_VENCIDO').count(), 3)

    def test_solo_procesa_aprobados_con_fecha_fin(self):
        self._convenio_en(timedelta(days=7), estado=Convenio.Estado.PENDIENTE_FIRMA)
        self._convenio_en(-timedelta(days=7), estado=Convenio.Estado.RECHAZADO)
        crear_convenio(self.empresa, None)

        resumen = self._verificar()

        self.assertEqual(resumen.verificados, 0)
        self.assertFalse(Notificacion.objects.exists())

    def test_mensajes_de_aviso(self):
        self._convenio_en(timedelta(days=1), nombre='Convenio Marco')

        self._verificar()

        director = Notificacion.objects.get(destinatario=self.director_1.usuario)
        empresa = Notificacion.objects.get(destinatario=self.empresa.usuario)
        self.assertEqual(
            director.mensaje,
            'El convenio "Convenio Marco" con la empresa Acme S.A.S. vence mañana.',
        )
        self.assertEqual(
            empresa.mensaje,
            'Su convenio "Convenio Marco" vence en 1 día. Por favor, gestione su renovación.',
        )
        self.assertEqual(empresa.destinatario_rol, 'EMPRESA')

    def test_umbrales_personalizados(self):
        config = ConfiguracionVencimiento(dias_advertencia_urgente=5, dias_advertencia_alta=10, dias_advertencia_media=20)
        a_20 = self._convenio_en(timedelta(days=20))
        self._convenio_en(timedelta(days=30))
        a_3 = self._convenio_en(timedelta(days=3))

        with self.assertLogs('plataforma.services.convenios.vencimiento', level='WARNING'):
            resumen = self._verificar(config=config)

        self.assertEqual(resumen.notificados, 2)
        self.assertEqual(
            set(Notificacion.objects.filter(data__convenio_id=a_20.pk).values_list('prioridad', flat=True)),
            {'MEDIA'},
        )
        self.assertEqual(
            set(Notificacion.objects.filter(data__convenio_id=a_3.pk).values_list('prioridad', flat=True)),
            {'URGENTE'},
        )

    def test_sin_directores_solo_notifica_empresa(self):
        self.director_1.delete()
        self.director_2.delete()
        self.empresa.refresh_from_db()
        self._convenio_en(timedelta(days=30))

        resumen = self._verificar()

        self.assertEqual(resumen.notificados, 1)
        self.assertEqual(Notificacion.objects.count(), 1)
        self.assertEqual(Notificacion.objects.get().destinatario_id, self.empresa.usuario_id)


class VerificarConveniosErroresTest(TestCase):

    def setUp(self):
        self.ahora = timezone.now()
        self.empresa = crear_empresa('Acme S.A.S.', '900123456')
        self.notificaciones = mock.Mock(spec=NotificacionService)
        self.servicio = ConvenioVencimientoService(self.notificaciones)

    def test_error_en_un_convenio_no_detiene_la_verificacion(self):
        primero = crear_convenio(self.empresa, self.ahora + timedelta(days=7))
        crear_convenio(self.empresa, self.ahora + timedelta(days=15), nombre='Otro')
        self.notificaciones.notificar_directores.side_effect = [RuntimeError('sin conexión SMTP'), 2]

        with self.assertLogs('plataforma.services.convenios.vencimiento', level='ERROR'):
            resumen = self.servicio.verificar_convenios(ahora=self.ahora)

        self.assertEqual(resumen.verificados, 2)
        self.assertEqual(resumen.notificados, 1)
        self.assertEqual(resumen.errores, [f'Convenio {primero.pk}: sin conexión SMTP'])

    def test_empresa_sin_usuario_se_registra_como_error(self):
        primero = crear_convenio(self.empresa, self.ahora + timedelta(days=7))
        segundo = crear_convenio(self.empresa, self.ahora + timedelta(days=15), nombre='Otro')
        self.notificaciones.crear_notificacion.side_effect = [
            DestinatarioNoEncontrado(self.empresa.usuario_id, 'EMPRESA'),
            mock.DEFAULT,
        ]

        with self.assertLogs('plataforma.services.convenios.vencimiento', level='ERROR'):
            resumen = self.servicio.verificar_convenios(ahora=self.ahora)

        self.assertEqual(resumen.notificados, 1)
        self.assertEqual(len(resumen.errores), 1)
        self.assertTrue(resumen.errores[0].startswith(f'Convenio {primero.pk}: Destinatario no encontrado'))
        self.assertEqual(self.notificaciones.crear_notificacion.call_count, 2)
        self.assertEqual(
            self.notificaciones.crear_notificacion.call_args.kwargs['data']['convenio_id'], segundo.pk
        )

    def test_error_al_consultar_convenios_se_propaga(self):
        with mock.patch.object(
            Convenio.objects, 'aprobados_con_fecha_fin', side_effect=DatabaseError('base de datos no disponible')
        ):
            with self.assertRaises(DatabaseError):
                self.servicio.verificar_convenios(ahora=self.ahora)

        self.notificaciones.notificar_directores.assert_not_called()


class EscenariosVerificacionTest(TestCase):
    """Escenarios completos: dos directores, una empresa habilitada, un convenio."""

    def setUp(self):
        self.ahora = timezone.now()
        self.directores = [crear_director('ana'), crear_director('luis')]
        self.empresa = crear_empresa('Acme S.A.S.', '900123456', director=self.directores[0])
        self.servicio = ConvenioVencimientoService(NotificacionService(publicador=PublicadorNulo()))

    def test_convenio_que_vence_manana(self):
        convenio = crear_convenio(self.empresa, self.ahora + timedelta(days=1))

        resumen = self.servicio.verificar_convenios(ahora=self.ahora)

        self.empresa.refresh_from_db()
        self.assertEqual(resumen.a_dict(), {'verificados': 1, 'notificados': 1, 'vencidos': 0, 'errores': []})
        self.assertTrue(self.empresa.habilitada)
        self.assertFalse(Convenio.objects.filter(estado=Convenio.Estado.VENCIDO).exists())

        avisos = Notificacion.objects.filter(tipo='CONVENIO_PROXIMO_VENCER', data__convenio_id=convenio.pk)
        self.assertEqual(avisos.count(), 3)
        self.assertEqual(set(avisos.values_list('prioridad', flat=True)), {'URGENTE'})

        # Solo los directores reciben correo
        self.assertEqual(len(mail.outbox), 2)
        self.assertEqual(mail.outbox[0].subject, 'Convenio próximo a vencer')
        self.assertEqual(
            sorted(m.to[0] for m in mail.outbox),
            sorted(d.email for d in self.directores),
        )

    def test_convenio_que_vencio_ayer(self):
        convenio = crear_convenio(self.empresa, self.ahora - timedelta(days=1))

        resumen = self.servicio.verificar_convenios(ahora=self.ahora)

        convenio.refresh_from_db()
        self.empresa.refresh_from_db()
        self.assertEqual(resumen.a_dict(), {'verificados': 1, 'notificados': 0, 'vencidos': 1, 'errores': []})
        self.assertEqual(convenio.estado, Convenio.Estado.VENCIDO)
        self.assertFalse(self.empresa.habilitada)

        vencidas = Notificacion.objects.filter(tipo='CONVENIO_VENCIDO', data__convenio_id=convenio.pk)
        self.assertEqual(vencidas.count(), 3)
        self.assertEqual(
            set(vencidas.values_list('destinatario_id', flat=True)),
            {d.usuario_id for d in self.directores} | {self.empresa.usuario_id},
        )
