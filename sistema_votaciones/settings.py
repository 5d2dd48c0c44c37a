"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Archivo de configuración global de Django. Contiene configuraciones
               de base de datos, seguridad, aplicaciones instaladas, middleware,
               API REST, sesiones firmadas y logging.
--------------------------------------------------------------------------------
"""

from pathlib import Path
import os
from dotenv import load_dotenv

# -----------------------------------------------------------------------------
# Paths & .env
# -----------------------------------------------------------------------------
# Define el directorio base del proyecto
BASE_DIR = Path(__file__).resolve().parent.parent

# Cargar variables de entorno desde un archivo .env en la raíz del proyecto
load_dotenv(os.path.join(BASE_DIR, '.env'))
import dj_database_url  # Utilidad para configurar DB desde una URL string

# -------------------------------------------------------------------
# Seguridad / Debug
# -------------------------------------------------------------------
# Clave secreta para firma criptográfica (también firma los tokens de sesión)
SECRET_KEY = os.environ.get('SECRET_KEY', default='dev-secret-key-cambiar-en-produccion')
# Modo Debug (True para desarrollo, False para producción)
DEBUG = os.getenv("DEBUG", "True").lower() == "true"

# Lista de hosts/dominios permitidos para servir la aplicación
ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")

# -----------------------------------------------------------------------------
# Apps (Aplicaciones Instaladas)
# -----------------------------------------------------------------------------
INSTALLED_APPS = [
    "django.contrib.admin",       # Panel de administración
    "django.contrib.auth",        # Requerido por el admin de Django
    "django.contrib.contenttypes",# Tipos de contenido genéricos
    "django.contrib.sessions",    # Sesiones del panel admin
    "django.contrib.messages",    # Mensajes flash del admin
    "django.contrib.staticfiles", # Archivos estáticos del admin

    # Project apps (Módulos desarrollados por el equipo)
    "core.apps.CoreConfig",
    "usuarios.apps.UsuariosConfig",
    "votaciones.apps.VotacionesConfig",

    # Terceros (Librerías externas)
    "rest_framework",            # API REST Framework
    "django_filters",            # Filtrado avanzado en API
]

# -----------------------------------------------------------------------------
# Middleware (Procesadores de petición/respuesta)
# -----------------------------------------------------------------------------
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    'sistema_votaciones.middleware.MonitorRendimientoMiddleware', # Mide performance
]

# Archivo principal de rutas URL
ROOT_URLCONF = "sistema_votaciones.urls"

# -----------------------------------------------------------------------------
# Templates (solo las del panel admin)
# -----------------------------------------------------------------------------
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

# Definición de aplicaciones WSGI y ASGI
ASGI_APPLICATION = "sistema_votaciones.asgi.application"
WSGI_APPLICATION = "sistema_votaciones.wsgi.application"

# -----------------------------------------------------------------------------
# Base de datos
# -----------------------------------------------------------------------------
# El motor se elige solo por DATABASE_URL: mysql://, postgres:// o sqlite:///
db_config = dj_database_url.config(
    default=os.getenv('DATABASE_URL', f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
    conn_max_age=600,         # Persistencia de conexiones
    conn_health_checks=True,  # Verificar salud de conexión
)

# Asegurar que el diccionario 'OPTIONS' exista
if 'OPTIONS' not in db_config:
    db_config['OPTIONS'] = {}

# Opciones de compatibilidad para MySQL/TiDB (solo si ese es el motor)
if db_config.get('ENGINE', '').endswith('mysql'):
    # Limpia parámetros que PyMySQL no acepta
    db_config['OPTIONS'].pop('ssl_mode', None)
    db_config['OPTIONS'].pop('ssl-mode', None)
    if os.getenv("DB_SSL", "False").lower() == "true":
        db_config['OPTIONS']['ssl'] = {'ca': None}
    db_config['OPTIONS'].update({
        "connect_timeout": 10,
        "charset": "utf8mb4",
        "init_command": "SET sql_mode='STRICT_TRANS_TABLES'",
    })

# SQLite no tiene SELECT ... FOR UPDATE: cada transacción toma el bloqueo de
# escritura al empezar (BEGIN IMMEDIATE) y las demás esperan en vez de fallar
if db_config.get('ENGINE', '').endswith('sqlite3'):
    db_config['OPTIONS'].setdefault('transaction_mode', 'IMMEDIATE')
    db_config['OPTIONS'].setdefault('timeout', 20)
    # BD de pruebas en archivo para que varios hilos compartan los datos
    db_config['TEST'] = {'NAME': str(BASE_DIR / 'test_db.sqlite3')}

DATABASES = {
    'default': db_config
}

# -----------------------------------------------------------------------------
# Internacionalización y Zona Horaria
# -----------------------------------------------------------------------------
LANGUAGE_CODE = "es-gt" # Español de Guatemala
TIME_ZONE = "America/Guatemala"
USE_I18N = True
USE_TZ = True

# -----------------------------------------------------------------------------
# Archivos estáticos (panel admin)
# -----------------------------------------------------------------------------
STATIC_URL = "static/"
STATIC_ROOT = os.path.join(BASE_DIR, 'staticfiles') # Carpeta para collectstatic

# -----------------------------------------------------------------------------
# Configuración DRF (Django REST Framework)
# -----------------------------------------------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "core.authentication.AutenticacionBearer",   # Authorization: Bearer <token>
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.AllowAny",
    ),
    "DEFAULT_FILTER_BACKENDS": (
        "django_filters.rest_framework.DjangoFilterBackend",
    ),
    "EXCEPTION_HANDLER": "core.excepciones.manejador_errores",
    "UNAUTHENTICATED_USER": None,
}

# -----------------------------------------------------------------------------
# Sesiones firmadas (tokens Bearer)
# -----------------------------------------------------------------------------
# Tiempo de vida del token de sesión
SESION_DURACION_SEGUNDOS = int(os.getenv("SESION_DURACION_MINUTOS", "60")) * 60
# Espacio de nombres de la firma, evita reutilizar firmas de otros usos de SECRET_KEY
SESION_SALT = "sistema_votaciones.sesion"

# Largo mínimo de contraseñas de ingenieros
VOTACIONES_PASSWORD_MIN = 8

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} [{levelname}] {name}: {message}",
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
        "core": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "usuarios": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "votaciones": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "sistema_votaciones": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}

# -----------------------------------------------------------------------------
# Configuración adicional
# -----------------------------------------------------------------------------
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
