from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError

from plataforma.services.convenios import (
    ConfiguracionVencimiento,
    ConvenioVencimientoService,
    ProgramadorConvenios,
)


class Command(BaseCommand):

    help = 'Verifica los convenios aprobados: marca los vencidos y avisa los próximos a vencer'

    def add_arguments(self, parser):

        parser.add_argument('--urgente', type=int, help='Días para aviso urgente (default: configuración)')

        parser.add_argument('--alta', type=int, help='Días para aviso de prioridad alta (default: configuración)')

        parser.add_argument('--media', type=int, help='Días para aviso de prioridad media (default: configuración)')

        parser.add_argument(
            '--continuo',
            action='store_true',
            help='Ejecuta ahora y luego cada --intervalo horas hasta interrumpir el proceso',
        )

        parser.add_argument('--intervalo', type=int, default=24, help='Horas entre verificaciones en modo continuo')

    def handle(self, *args, **options):

        config = self._configuracion(options)
        servicio = ConvenioVencimientoService()

        if not options['continuo']:
            self._verificar(servicio, config)
            return

        if options['intervalo'] < 1:
            raise CommandError('--intervalo debe ser al menos 1 hora')

        programador = ProgramadorConvenios(
            lambda: self._verificar(servicio, config),
            timedelta(hours=options['intervalo']),
        )
        self.stdout.write(f"Verificación continua cada {options['intervalo']} horas (Ctrl+C para detener)")
        programador.iniciar()
        try:
            programador.esperar()
        except KeyboardInterrupt:
            programador.detener(esperar=True)
            self.stdout.write(self.style.WARNING('Verificación continua detenida'))

    def _configuracion(self, options):

        base = ConfiguracionVencimiento.desde_config()
        umbrales = {}

        for nombre in ('urgente', 'alta', 'media'):

            valor = options[nombre]

            if valor is None:
                valor = getattr(base, f'dias_advertencia_{nombre}')
            elif valor < 1:
                raise CommandError(f'--{nombre} debe ser al menos 1 día')

            umbrales[f'dias_advertencia_{nombre}'] = valor

        config = ConfiguracionVencimiento(**umbrales)

        if not config.dias_advertencia_urgente <= config.dias_advertencia_alta <= config.dias_advertencia_media:
            raise CommandError('Los umbrales deben cumplir urgente <= alta <= media')

        return config

    def _verificar(self, servicio, config):

        self.stdout.write('Verificando convenios...')

        resumen = servicio.verificar_convenios(config=config)

        self.stdout.write(self.style.SUCCESS(
            f'✓ {resumen.verificados} verificados, {resumen.notificados} notificados, {resumen.vencidos} vencidos'
        ))

        for error in resumen.errores:

            self.stdout.write(self.style.ERROR(f'  {error}'))
