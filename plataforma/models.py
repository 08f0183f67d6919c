from decimal import Decimal

from django.contrib.auth.models import User
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone
from simple_history.models import HistoricalRecords


# ==================== MODELOS ====================


class ConfiguracionSistema(models.Model):
    clave = models.CharField(max_length=100, unique=True, verbose_name="Clave")
    valor = models.CharField(max_length=255, verbose_name="Valor")
    tipo = models.CharField(
        max_length=20,
        choices=[
            ("decimal", "Decimal"),
            ("entero", "Entero"),
            ("texto", "Texto"),
        ],
        default="texto",
        verbose_name="Tipo",
    )
    descripcion = models.TextField(blank=True, verbose_name="Descripción")
    categoria = models.CharField(
        max_length=50,
        choices=[
            ("convenios", "Convenios"),
            ("notificaciones", "Notificaciones"),
            ("general", "General"),
        ],
        default="general",
        verbose_name="Categoría",
    )

    class Meta:
        verbose_name = "Configuración del Sistema"
        verbose_name_plural = "Configuraciones del Sistema"
        ordering = ["categoria", "clave"]

    def __str__(self):
        return f"{self.clave} = {self.valor}"

    def get_valor_tipado(self):
        if self.tipo == "decimal":
            return Decimal(self.valor)
        elif self.tipo == "entero":
            return int(self.valor)
        return self.valor

    @classmethod
    def get_config(cls, clave, default=None):
        try:
            config = cls.objects.get(clave=clave)
            return config.get_valor_tipado()
        except cls.DoesNotExist:
            return default

    @classmethod
    def inicializar_valores_default(cls):
        configs_default = [
            {
                "clave": "DIAS_ADVERTENCIA_URGENTE",
                "valor": "7",
                "tipo": "entero",
                "descripcion": "Días antes del fin de un convenio para notificar con prioridad urgente",
                "categoria": "convenios",
            },
            {
                "clave": "DIAS_ADVERTENCIA_ALTA",
                "valor": "15",
                "tipo": "entero",
                "descripcion": "Días antes del fin de un convenio para notificar con prioridad alta",
                "categoria": "convenios",
            },
            {
                "clave": "DIAS_ADVERTENCIA_MEDIA",
                "valor": "30",
                "tipo": "entero",
                "descripcion": "Días antes del fin de un convenio para notificar con prioridad media",
                "categoria": "convenios",
            },
        ]

        for config_data in configs_default:
            cls.objects.get_or_create(clave=config_data["clave"], defaults=config_data)


class Programa(models.Model):
    """Programa académico al que pertenece un director"""

    nombre = models.CharField(max_length=200, unique=True, verbose_name="Nombre del Programa")
    facultad = models.CharField(max_length=200, blank=True, verbose_name="Facultad")

    class Meta:
        verbose_name = "Programa"
        verbose_name_plural = "Programas"
        ordering = ["nombre"]

    def __str__(self):
        return self.nombre


class Director(models.Model):
    """Director de programa; recibe las notificaciones de convenios"""

    usuario = models.OneToOneField(User, on_delete=models.CASCADE, related_name="director", verbose_name="Usuario")
    programa = models.ForeignKey(
        Programa,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="directores",
        verbose_name="Programa",
    )
    fecha_creacion = models.DateTimeField(auto_now_add=True, verbose_name="Fecha de Creación")

    class Meta:
        verbose_name = "Director"
        verbose_name_plural = "Directores"
        ordering = ["usuario__first_name", "usuario__last_name"]

    def __str__(self):
        return self.nombre

    @property
    def nombre(self):
        return self.usuario.get_full_name() or self.usuario.username

    @property
    def email(self):
        return self.usuario.email


class Empresa(models.Model):
    """Empresa que ofrece prácticas mediante convenios"""

    usuario = models.OneToOneField(User, on_delete=models.CASCADE, related_name="empresa", verbose_name="Usuario")
    nombre = models.CharField(max_length=200, verbose_name="Nombre de la Empresa")
    nit = models.CharField(max_length=20, unique=True, verbose_name="NIT")
    director = models.ForeignKey(
        Director,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="empresas",
        verbose_name="Director",
    )
    habilitada = models.BooleanField(default=False, verbose_name="Habilitada")
    fecha_creacion = models.DateTimeField(auto_now_add=True, verbose_name="Fecha de Creación")
    fecha_modificacion = models.DateTimeField(auto_now=True, verbose_name="Fecha de Modificación")

    history = HistoricalRecords(verbose_name="Historial", verbose_name_plural="Historial de cambios")

    class Meta:
        verbose_name = "Empresa"
        verbose_name_plural = "Empresas"
        ordering = ["nombre"]

    def __str__(self):
        return self.nombre

    @property
    def convenios_aprobados(self):
        return self.convenios.filter(estado=Convenio.Estado.APROBADO)


class ConvenioQuerySet(models.QuerySet):
    def aprobados_con_fecha_fin(self):
        return self.filter(estado=Convenio.Estado.APROBADO, fecha_fin__isnull=False)


class Convenio(models.Model):
    """Convenio entre una empresa y la dirección de un programa"""

    class Estado(models.TextChoices):
        PENDIENTE_FIRMA = "PENDIENTE_FIRMA", "Pendiente de firma"
        PENDIENTE_REVISION = "PENDIENTE_REVISION", "Pendiente de revisión"
        EN_REVISION = "EN_REVISION", "En revisión"
        APROBADO = "APROBADO", "Aprobado"
        RECHAZADO = "RECHAZADO", "Rechazado"
        VENCIDO = "VENCIDO", "Vencido"

    class Tipo(models.TextChoices):
        MARCO = "MARCO", "Marco"
        ESPECIFICO = "ESPECIFICO", "Específico"

    empresa = models.ForeignKey(Empresa, on_delete=models.PROTECT, related_name="convenios", verbose_name="Empresa")
    director = models.ForeignKey(
        Director,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="convenios",
        verbose_name="Director",
    )
    nombre = models.CharField(max_length=200, verbose_name="Nombre del Convenio")
    descripcion = models.TextField(blank=True, verbose_name="Descripción")
    tipo = models.CharField(max_length=20, choices=Tipo.choices, default=Tipo.MARCO, verbose_name="Tipo")
    estado = models.CharField(
        max_length=20,
        choices=Estado.choices,
        default=Estado.PENDIENTE_FIRMA,
        verbose_name="Estado",
    )
    fecha_inicio = models.DateTimeField(null=True, blank=True, verbose_name="Fecha de Inicio")
    fecha_fin = models.DateTimeField(null=True, blank=True, verbose_name="Fecha de Fin")
    fecha_creacion = models.DateTimeField(auto_now_add=True, verbose_name="Fecha de Creación")
    fecha_modificacion = models.DateTimeField(auto_now=True, verbose_name="Fecha de Modificación")

    history = HistoricalRecords(verbose_name="Historial", verbose_name_plural="Historial de cambios")

    objects = ConvenioQuerySet.as_manager()

    class Meta:
        verbose_name = "Convenio"
        verbose_name_plural = "Convenios"
        ordering = ["-fecha_creacion"]
        indexes = [
            models.Index(fields=["estado", "fecha_fin"], name="plataforma__estado_5b0d0c_idx"),
        ]

    def __str__(self):
        return f"{self.nombre} - {self.empresa}"

    @property
    def esta_aprobado(self):
        return self.estado == self.Estado.APROBADO


class Notificacion(models.Model):
    """Mensaje dirigido a un usuario de la plataforma"""

    class Tipo(models.TextChoices):
        CONVENIO_PROXIMO_VENCER = "CONVENIO_PROXIMO_VENCER", "Convenio próximo a vencer"
        CONVENIO_VENCIDO = "CONVENIO_VENCIDO", "Convenio vencido"
        NUEVA_SOLICITUD_VACANTE = "NUEVA_SOLICITUD_VACANTE", "Nueva solicitud de vacante"
        VACANTE_APROBADA = "VACANTE_APROBADA", "Vacante aprobada"
        VACANTE_RECHAZADA = "VACANTE_RECHAZADA", "Vacante rechazada"

    class Prioridad(models.TextChoices):
        BAJA = "BAJA", "Baja"
        MEDIA = "MEDIA", "Media"
        ALTA = "ALTA", "Alta"
        URGENTE = "URGENTE", "Urgente"

    class Rol(models.TextChoices):
        DIRECTOR = "DIRECTOR", "Director"
        EMPRESA = "EMPRESA", "Empresa"
        ESTUDIANTE = "ESTUDIANTE", "Estudiante"
        ADMIN = "ADMIN", "Administrador"

    tipo = models.CharField(max_length=40, choices=Tipo.choices, verbose_name="Tipo")
    titulo = models.CharField(max_length=200, verbose_name="Título")
    mensaje = models.TextField(verbose_name="Mensaje")
    prioridad = models.CharField(
        max_length=10,
        choices=Prioridad.choices,
        default=Prioridad.MEDIA,
        verbose_name="Prioridad",
    )
    destinatario = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="notificaciones",
        verbose_name="Destinatario",
    )
    destinatario_rol = models.CharField(max_length=20, choices=Rol.choices, verbose_name="Rol del Destinatario")
    leida = models.BooleanField(default=False, verbose_name="Leída")
    data = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder, verbose_name="Datos")
    creada_en = models.DateTimeField(default=timezone.now, db_index=True, verbose_name="Fecha de Creación")

    class Meta:
        verbose_name = "Notificación"
        verbose_name_plural = "Notificaciones"
        ordering = ["-creada_en"]
        indexes = [
            models.Index(fields=["destinatario", "leida"], name="plataforma__destina_3c1f2e_idx"),
            models.Index(fields=["tipo", "creada_en"], name="plataforma__tipo_8e7a41_idx"),
        ]

    def __str__(self):
        return f"{self.titulo} - {self.destinatario_id}"

    def marcar_como_leida(self):
        """Marca la notificación como leída"""
        self.leida = True
        self.save(update_fields=["leida"])

    def a_dict(self):
        return {
            "id": self.pk,
            "tipo": self.tipo,
            "titulo": self.titulo,
            "mensaje": self.mensaje,
            "prioridad": self.prioridad,
            "data": self.data,
            "leida": self.leida,
            "creada_en": self.creada_en,
        }
