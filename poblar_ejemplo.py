#!/usr/bin/env python
import os
import django

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'practicas.settings')
django.setup()

from datetime import timedelta  # noqa: E402
from django.contrib.auth.models import User  # noqa: E402
from django.utils import timezone  # noqa: E402
from plataforma.models import (  # noqa: E402
    ConfiguracionSistema, Programa, Director, Empresa, Convenio
)

ConfiguracionSistema.inicializar_valores_default()

# Crear usuario administrador si no existe
admin, _ = User.objects.get_or_create(username='admin', defaults={'is_staff': True, 'is_superuser': True})

programa, _ = Programa.objects.get_or_create(nombre='Ingeniería de Sistemas', defaults={'facultad': 'Ingeniería'})

# Crear director
usuario_director, _ = User.objects.get_or_create(
    username='director.sistemas',
    defaults={'first_name': 'Marcela', 'last_name': 'Rincón', 'email': 'director.sistemas@ufps.edu.co'}
)
director, _ = Director.objects.get_or_create(usuario=usuario_director, defaults={'programa': programa})

# Crear empresas con convenios en distintos puntos de su vigencia
ahora = timezone.now()
empresas = [
    ('Acme Software S.A.S.', '900111222', 30),
    ('Globex Ingeniería', '900333444', 7),
    ('Initech Colombia', '900555666', 1),
    ('Umbrella Servicios', '900777888', -2),
]

for nombre, nit, dias in empresas:
    usuario_empresa, _ = User.objects.get_or_create(
        username=f'empresa.{nit}',
        defaults={'email': f'talento@{nit}.example.co'}
    )
    empresa, _ = Empresa.objects.get_or_create(
        nit=nit,
        defaults={'usuario': usuario_empresa, 'nombre': nombre, 'director': director, 'habilitada': True}
    )
    convenio, created = Convenio.objects.get_or_create(
        empresa=empresa,
        nombre=f'Convenio marco {nombre}',
        defaults={
            'director': director,
            'tipo': Convenio.Tipo.MARCO,
            'estado': Convenio.Estado.APROBADO,
            'fecha_inicio': ahora - timedelta(days=365),
            'fecha_fin': ahora + timedelta(days=dias),
        }
    )
    estado = 'creado' if created else 'ya existe'
    print(f'✓ {convenio.nombre} ({estado}): vence en {dias} días')

print('✓ Datos de ejemplo listos. Ejecute: python manage.py verificar_convenios')
