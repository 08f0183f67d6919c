from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html
from unfold.admin import ModelAdmin
from unfold.decorators import display
from simple_history.admin import SimpleHistoryAdmin
from import_export import resources, fields
from import_export.admin import ImportExportMixin
from import_export.widgets import ForeignKeyWidget
from .models import ConfiguracionSistema, Programa, Director, Empresa, Convenio, Notificacion
from .services.convenios import calcular_dias_restantes


# =============================================================================
# RECURSOS DE IMPORTACIÓN/EXPORTACIÓN
# =============================================================================

class ProgramaResource(resources.ModelResource):
    class Meta:
        model = Programa
        import_id_fields = ['nombre']
        fields = ('nombre', 'facultad')


class EmpresaResource(resources.ModelResource):
    class Meta:
        model = Empresa
        import_id_fields = ['nit']
        fields = ('nombre', 'nit', 'habilitada')
        export_order = fields


class ConvenioResource(resources.ModelResource):
    empresa = fields.Field(
        column_name='empresa',
        attribute='empresa',
        widget=ForeignKeyWidget(Empresa, 'nit')
    )

    class Meta:
        model = Convenio
        fields = ('id', 'nombre', 'empresa', 'tipo', 'estado', 'fecha_inicio', 'fecha_fin')
        export_order = fields


class HistoryModelAdmin(ImportExportMixin, ModelAdmin, SimpleHistoryAdmin):
    """
    Clase base que combina Unfold ModelAdmin con SimpleHistoryAdmin e ImportExportMixin
    para modelos que tienen auditoría de cambios y soporte de importación/exportación.
    """
    history_list_display = ['changed_fields', 'history_user']

    def changed_fields(self, obj):
        """Muestra los campos que cambiaron."""
        if obj.prev_record:
            delta = obj.diff_against(obj.prev_record)
            changed = [change.field for change in delta.changes]
            if changed:
                return ', '.join(changed)
        return 'Creación inicial'
    changed_fields.short_description = 'Campos modificados'


@admin.register(ConfiguracionSistema)
class ConfiguracionSistemaAdmin(ModelAdmin):
    icon_name = "settings"
    list_display = ['clave', 'valor', 'tipo', 'categoria']
    list_filter = ['categoria', 'tipo']
    search_fields = ['clave', 'descripcion']
    list_editable = ['valor']

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Programa)
class ProgramaAdmin(ImportExportMixin, ModelAdmin):
    icon_name = "school"
    resource_class = ProgramaResource
    list_display = ['nombre', 'facultad']
    search_fields = ['nombre', 'facultad']


@admin.register(Director)
class DirectorAdmin(ModelAdmin):
    icon_name = "badge"
    list_display = ['nombre', 'email', 'programa', 'fecha_creacion']
    list_filter = ['programa']
    search_fields = ['usuario__first_name', 'usuario__last_name', 'usuario__email']
    autocomplete_fields = ['usuario']


@admin.register(Empresa)
class EmpresaAdmin(HistoryModelAdmin):
    icon_name = "business"
    resource_class = EmpresaResource
    list_display = ['nombre', 'nit', 'director', 'habilitada', 'fecha_creacion']
    list_filter = ['habilitada', 'director']
    search_fields = ['nombre', 'nit']
    readonly_fields = ['fecha_creacion', 'fecha_modificacion']


@admin.register(Convenio)
class ConvenioAdmin(HistoryModelAdmin):
    icon_name = "handshake"
    resource_class = ConvenioResource
    list_display = ['nombre', 'empresa', 'tipo', 'estado_badge', 'fecha_fin', 'dias_vencer']
    list_filter = ['estado', 'tipo', 'fecha_fin']
    search_fields = ['nombre', 'empresa__nombre', 'empresa__nit']
    readonly_fields = ['fecha_creacion', 'fecha_modificacion']
    date_hierarchy = 'fecha_fin'

    fieldsets = (
        ('Información Básica', {
            'fields': ('nombre', 'empresa', 'director', 'tipo', 'descripcion')
        }),
        ('Vigencia', {
            'fields': ('estado', 'fecha_inicio', 'fecha_fin')
        }),
        ('Auditoría', {
            'fields': ('fecha_creacion', 'fecha_modificacion'),
            'classes': ('collapse',)
        }),
    )

    @display(description='Estado', ordering='estado')
    def estado_badge(self, obj):
        colors = {
            Convenio.Estado.APROBADO: 'green',
            Convenio.Estado.VENCIDO: 'red',
            Convenio.Estado.RECHAZADO: 'gray',
        }
        color = colors.get(obj.estado, 'orange')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            color,
            obj.get_estado_display()
        )

    @display(description='Días para Vencer')
    def dias_vencer(self, obj):
        if not obj.esta_aprobado or obj.fecha_fin is None:
            return '-'
        return f"{calcular_dias_restantes(timezone.now(), obj.fecha_fin)} días"


@admin.register(Notificacion)
class NotificacionAdmin(ModelAdmin):
    icon_name = "notifications"
    list_display = ['titulo', 'tipo', 'prioridad', 'destinatario', 'destinatario_rol', 'leida', 'creada_en']
    list_filter = ['tipo', 'prioridad', 'destinatario_rol', 'leida']
    search_fields = ['titulo', 'mensaje', 'destinatario__username']
    readonly_fields = ['creada_en']
    date_hierarchy = 'creada_en'
