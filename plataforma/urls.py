from django.urls import path
from . import views

urlpatterns = [
    # Notificaciones
    path('api/notificaciones/', views.api_notificaciones, name='api_notificaciones'),
    path('api/notificaciones/no-leidas/conteo/', views.api_notificaciones_conteo, name='api_notificaciones_conteo'),
    path('api/notificaciones/leer-todas/', views.api_notificaciones_marcar_todas, name='api_notificaciones_marcar_todas'),
    path('api/notificaciones/<int:pk>/leer/', views.api_notificacion_marcar_leida, name='api_notificacion_marcar_leida'),
    path('api/notificaciones/<int:pk>/', views.api_notificacion_eliminar, name='api_notificacion_eliminar'),

    # Convenios
    path(
        'api/notificaciones/verificar-convenios/',
        views.api_verificar_convenios,
        name='api_verificar_convenios',
    ),
]
