"""
Envío de correos transaccionales basados en plantillas.

Las plantillas viven en ``templates/emails/<plantilla_id>.html`` y se
renderizan con el sistema de templates de Django; el envío usa el backend
de email configurado en settings.
"""

from typing import Any, Dict, Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.html import strip_tags


class CorreoPlantillas:
    """
    Remitente de correos con plantilla.

    USO:
        correo = CorreoPlantillas()
        correo.enviar_plantilla(
            "director@ufps.edu.co",
            "convenio_proximo_vencer",
            {"titulo": "Convenio próximo a vencer", "nombre": "Ana"},
        )
    """

    def __init__(self, from_email: Optional[str] = None, fail_silently: bool = False):
        self._from_email = from_email or getattr(settings, "DEFAULT_FROM_EMAIL", "noreply@example.com")
        self._fail_silently = fail_silently

    def enviar_plantilla(self, destinatario: str, plantilla_id: str, datos: Dict[str, Any]) -> None:
        """
        Renderiza la plantilla con ``datos`` y la envía a ``destinatario``.

        El asunto se toma de ``datos['titulo']``.
        """
        contenido_html = render_to_string(f"emails/{plantilla_id}.html", datos)

        email = EmailMultiAlternatives(
            subject=datos.get("titulo") or "Notificación",
            body=strip_tags(contenido_html).strip(),
            from_email=self._from_email,
            to=[destinatario],
        )
        email.attach_alternative(contenido_html, "text/html")
        email.send(fail_silently=self._fail_silently)


def plantilla_para_tipo(tipo: str) -> Optional[str]:
    """Plantilla de email configurada para un tipo de notificación."""
    return getattr(settings, "NOTIFICACIONES_EMAIL_TEMPLATES", {}).get(tipo)
