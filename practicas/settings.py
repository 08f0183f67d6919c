"""
Django settings for practicas project.

Los valores sensibles y dependientes del entorno se leen de variables de
entorno; los defaults permiten levantar el proyecto en desarrollo con
SQLite y sin Redis.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(nombre, default=False):
    return os.environ.get(nombre, str(default)).lower() in ("1", "true", "yes", "si")


def _env_list(nombre, default=""):
    return [valor.strip() for valor in os.environ.get(nombre, default).split(",") if valor.strip()]


SECRET_KEY = os.environ.get("SECRET_KEY", "django-insecure-practicas-desarrollo")

DEBUG = _env_bool("DEBUG", True)

ALLOWED_HOSTS = _env_list("ALLOWED_HOSTS", "localhost,127.0.0.1")


# Application definition

INSTALLED_APPS = [
    "unfold",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "simple_history",
    "import_export",
    "plataforma",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "simple_history.middleware.HistoryRequestMiddleware",
]

ROOT_URLCONF = "practicas.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "practicas.wsgi.application"


# Database

if os.environ.get("POSTGRES_DB"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ["POSTGRES_DB"],
            "USER": os.environ.get("POSTGRES_USER", "postgres"),
            "PASSWORD": os.environ.get("POSTGRES_PASSWORD", ""),
            "HOST": os.environ.get("POSTGRES_HOST", "localhost"),
            "PORT": os.environ.get("POSTGRES_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Internationalization

LANGUAGE_CODE = "es-co"

TIME_ZONE = "America/Bogota"

USE_I18N = True

USE_TZ = True


# Static files

STATIC_URL = "static/"

STATIC_ROOT = BASE_DIR / "staticfiles"


# Email

EMAIL_BACKEND = os.environ.get("EMAIL_BACKEND", "django.core.mail.backends.console.EmailBackend")
EMAIL_HOST = os.environ.get("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.environ.get("EMAIL_PORT", "587"))
EMAIL_HOST_USER = os.environ.get("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = _env_bool("EMAIL_USE_TLS", True)
DEFAULT_FROM_EMAIL = os.environ.get("DEFAULT_FROM_EMAIL", "practicas@ufps.edu.co")


# Celery

REDIS_URL = os.environ.get("REDIS_URL", "")

CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", REDIS_URL or "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.environ.get("CELERY_RESULT_BACKEND", CELERY_BROKER_URL)
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_ALWAYS_EAGER = _env_bool("CELERY_TASK_ALWAYS_EAGER", False)


# Notificaciones

# Canal Redis Pub/Sub para envío en tiempo real; vacío = sin tiempo real
NOTIFICACIONES_REDIS_URL = os.environ.get("NOTIFICACIONES_REDIS_URL", REDIS_URL)

# Plantilla de email por tipo de notificación (templates/emails/<plantilla>.html)
NOTIFICACIONES_EMAIL_TEMPLATES = {
    "CONVENIO_PROXIMO_VENCER": os.environ.get("EMAIL_TEMPLATE_CONVENIO_VENCER", "convenio_proximo_vencer"),
    "CONVENIO_VENCIDO": os.environ.get("EMAIL_TEMPLATE_CONVENIO_VENCIDO", "convenio_vencido"),
    "NUEVA_SOLICITUD_VACANTE": os.environ.get("EMAIL_TEMPLATE_NUEVA_VACANTE", "nueva_vacante"),
}


# Convenios

# Umbrales usados cuando ConfiguracionSistema no los define
CONVENIOS_DIAS_ADVERTENCIA = {
    "urgente": int(os.environ.get("CONVENIOS_DIAS_URGENTE", "7")),
    "alta": int(os.environ.get("CONVENIOS_DIAS_ALTA", "15")),
    "media": int(os.environ.get("CONVENIOS_DIAS_MEDIA", "30")),
}


# Admin

UNFOLD = {
    "SITE_TITLE": "Prácticas UFPS",
    "SITE_HEADER": "Plataforma de Prácticas",
}


# Logging

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "plataforma": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "celery": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}


# Seguridad en producción

if not DEBUG:
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True
    SECURE_SSL_REDIRECT = _env_bool("SECURE_SSL_REDIRECT", True)
    SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
    SECURE_HSTS_SECONDS = int(os.environ.get("SECURE_HSTS_SECONDS", "3600"))
