import threading
from datetime import timedelta
from unittest import mock

from django.test import SimpleTestCase

from plataforma.services.convenios import ProgramadorConvenios
from plataforma.services.convenios import programador as modulo_programador


@mock.patch.object(modulo_programador, 'close_old_connections')
class ProgramadorConveniosTest(SimpleTestCase):

    def test_ejecuta_inmediatamente_al_iniciar(self, _close):
        ejecutado = threading.Event()
        programador = ProgramadorConvenios(ejecutado.set, timedelta(hours=24))

        programador.iniciar()
        try:
            self.assertTrue(ejecutado.wait(2))
            self.assertTrue(programador.activo)
        finally:
            programador.detener(esperar=True, timeout=2)

        self.assertFalse(programador.activo)

    def test_repite_en_cada_intervalo(self, _close):
        ejecuciones = []
        tres = threading.Event()

        def tarea():
            ejecuciones.append(1)
            if len(ejecuciones) >= 3:
                tres.set()

        programador = ProgramadorConvenios(tarea, timedelta(milliseconds=20))
        programador.iniciar()
        try:
            self.assertTrue(tres.wait(2))
        finally:
            programador.detener(esperar=True, timeout=2)

    def test_error_en_la_tarea_no_detiene_el_programador(self, _close):
        llamadas = []
        segunda = threading.Event()

        def tarea():
            llamadas.append(1)
            if len(llamadas) == 1:
                raise RuntimeError('base de datos no disponible')
            segunda.set()

        programador = ProgramadorConvenios(tarea, timedelta(milliseconds=20))
        with self.assertLogs('plataforma.services.convenios.programador', level='ERROR'):
            programador.iniciar()
            try:
                self.assertTrue(segunda.wait(2))
            finally:
                programador.detener(esperar=True, timeout=2)

    def test_detener_cancela_ejecuciones_futuras(self, _close):
        tarea = mock.Mock()
        programador = ProgramadorConvenios(tarea, timedelta(hours=24))

        programador.iniciar()
        programador.detener(esperar=True, timeout=2)

        self.assertEqual(tarea.call_count, 1)
        self.assertFalse(programador.activo)

    def test_reiniciar_mientras_termina_una_ejecucion(self, _close):
        en_curso = threading.Event()
        liberar = threading.Event()
        segunda = threading.Event()
        llamadas = []

        def tarea():
            llamadas.append(1)
            if len(llamadas) == 1:
                en_curso.set()
                liberar.wait(2)
            else:
                segunda.set()

        programador = ProgramadorConvenios(tarea, timedelta(hours=24))
        programador.iniciar()
        self.assertTrue(en_curso.wait(2))
        programador.detener()

        threading.Timer(0.05, liberar.set).start()
        programador.iniciar()
        try:
            self.assertTrue(segunda.wait(2))
            self.assertTrue(programador.activo)
        finally:
            programador.detener(esperar=True, timeout=2)

        self.assertEqual(len(llamadas), 2)

    def test_iniciar_dos_veces_no_duplica_el_hilo(self, _close):
        tarea = mock.Mock()
        programador = ProgramadorConvenios(tarea, timedelta(hours=24))

        programador.iniciar()
        try:
            with self.assertLogs('plataforma.services.convenios.programador', level='WARNING'):
                programador.iniciar()
        finally:
            programador.detener(esperar=True, timeout=2)

        self.assertEqual(tarea.call_count, 1)

    def test_intervalo_debe_ser_positivo(self, _close):
        with self.assertRaises(ValueError):
            ProgramadorConvenios(mock.Mock(), timedelta(0))
