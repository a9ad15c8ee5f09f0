"""
Settings for the healthdesk API.

Every value that differs between a laptop and a deployment comes from
the environment; a ``.env`` file next to ``manage.py`` is read first
when present.  Booking rules (daily quota, mapping and ownership
checks) and the default search radius are also environment driven so
they can be tuned per installation.
"""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv  # type: ignore

BASE_DIR = Path(__file__).resolve().parent.parent

_dotenv = BASE_DIR / ".env"
if _dotenv.exists():
    load_dotenv(dotenv_path=_dotenv)


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def env_list(name: str, default: str = "") -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


def env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


# -----------------------------------------------------------------------------
# Deployment
# -----------------------------------------------------------------------------
ENV = os.getenv("ENV", "dev")
DEBUG = env_flag("DEBUG")
ALLOWED_HOSTS: list[str] = env_list("ALLOWED_HOSTS", "127.0.0.1,localhost")

INSECURE_SECRET = "healthdesk-dev-only-secret"
SECRET_KEY = os.getenv("SECRET_KEY") or INSECURE_SECRET

if ENV == "prod":
    problems = []
    if DEBUG:
        problems.append("DEBUG must be off")
    if "*" in ALLOWED_HOSTS:
        problems.append("ALLOWED_HOSTS must list real host names")
    if SECRET_KEY == INSECURE_SECRET:
        problems.append("SECRET_KEY must be provided")
    if problems:
        raise RuntimeError("Refusing to start in prod: " + "; ".join(problems))

# -----------------------------------------------------------------------------
# Apps, middleware, templates
# -----------------------------------------------------------------------------
INSTALLED_APPS = [
    "django_prometheus",
    "corsheaders",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "rest_framework_simplejwt.token_blacklist",
    "drf_yasg",
    "care",
]

# prometheus Before/After must wrap everything that should be timed
MIDDLEWARE = [
    "django_prometheus.middleware.PrometheusBeforeMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "django_prometheus.middleware.PrometheusAfterMiddleware",
]

ROOT_URLCONF = "healthdesk.urls"
WSGI_APPLICATION = "healthdesk.wsgi.application"

# only the admin and the API docs render templates
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
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

# -----------------------------------------------------------------------------
# Database
# -----------------------------------------------------------------------------
DB_CONN_MAX_AGE = env_int("DB_CONN_MAX_AGE", 120)


def _database() -> dict:
    """MySQL from ``MYSQL_*``/``DB_*``, else ``DATABASE_URL``, else SQLite."""
    name = os.getenv("MYSQL_NAME") or os.getenv("DB_NAME")
    user = os.getenv("MYSQL_USER") or os.getenv("DB_USER")
    if name and user:
        return {
            "ENGINE": "django.db.backends.mysql",
            "NAME": name,
            "USER": user,
            "PASSWORD": os.getenv("MYSQL_PASSWORD") or os.getenv("DB_PASSWORD") or "",
            "HOST": os.getenv("MYSQL_HOST") or os.getenv("DB_HOST", "localhost"),
            "PORT": os.getenv("MYSQL_PORT") or os.getenv("DB_PORT", "3306"),
            "CONN_MAX_AGE": DB_CONN_MAX_AGE,
            "OPTIONS": {
                "charset": "utf8mb4",
                "init_command": "SET sql_mode='STRICT_TRANS_TABLES'",
                # SELECT ... FOR UPDATE on the token counter relies on row locks
                "isolation_level": "read committed",
            },
        }

    url = os.getenv("DATABASE_URL", "").strip()
    if url:
        import dj_database_url  # type: ignore

        return dj_database_url.parse(url, conn_max_age=DB_CONN_MAX_AGE)

    # SQLite takes the write lock at BEGIN so booking transactions serialize
    return {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": (BASE_DIR / "db.sqlite3").as_posix(),
        "OPTIONS": {"transaction_mode": "IMMEDIATE"},
        # on disk so that threads in the test suite share one locked database
        "TEST": {"NAME": (BASE_DIR / "test_db.sqlite3").as_posix()},
    }


DATABASES = {"default": _database()}
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------------------------------------------------------
# Accounts
# -----------------------------------------------------------------------------
AUTH_USER_MODEL = "care.User"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
]

SIMPLE_JWT = {
    "AUTH_HEADER_TYPES": ("Bearer",),
    "ROTATE_REFRESH_TOKENS": True,
    "BLACKLIST_AFTER_ROTATION": True,
}

# -----------------------------------------------------------------------------
# Time, static files, uploads
# -----------------------------------------------------------------------------
LANGUAGE_CODE = "en-us"
# booking days and daily quotas are counted in this zone
TIME_ZONE = os.getenv("TIME_ZONE", "Asia/Kolkata")
USE_I18N = False
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
MEDIA_URL = "/media/"
MEDIA_ROOT = Path(os.getenv("MEDIA_ROOT", BASE_DIR / "media"))

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

UPLOAD_MAX_MB = env_int("UPLOAD_MAX_MB", 15)
ALLOWED_UPLOAD_TYPES = env_list("ALLOWED_UPLOAD_TYPES", "image/")

# -----------------------------------------------------------------------------
# REST framework
# -----------------------------------------------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": ["care.authentication.BearerAuthentication"],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.IsAuthenticated"],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.FormParser",
        "rest_framework.parsers.MultiPartParser",
    ],
    "DEFAULT_THROTTLE_CLASSES": [
        "rest_framework.throttling.AnonRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
        "rest_framework.throttling.ScopedRateThrottle",
    ],
    "DEFAULT_THROTTLE_RATES": {
        "anon": os.getenv("THROTTLE_ANON", "60/min"),
        "user": os.getenv("THROTTLE_USER", "240/min"),
        "booking": os.getenv("THROTTLE_BOOKING", "30/hour"),
        "login": os.getenv("THROTTLE_LOGIN", "10/min"),
    },
    # anonymous callers show up as ``request.user is None``
    "UNAUTHENTICATED_USER": None,
    "DATETIME_FORMAT": "%Y-%m-%d %H:%M:%S",
    "EXCEPTION_HANDLER": "care.exceptions.api_exception_handler",
}

SWAGGER_SETTINGS = {"DEFAULT_INFO": "healthdesk.urls.api_info"}

# mobile and admin clients call paths without a trailing slash
APPEND_SLASH = False

# -----------------------------------------------------------------------------
# CORS and transport security
# -----------------------------------------------------------------------------
CORS_ALLOWED_ORIGINS = env_list("CORS_ALLOWED_ORIGINS")
CORS_ALLOW_CREDENTIALS = True

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
USE_X_FORWARDED_HOST = True
if ENV == "prod":
    SECURE_HSTS_SECONDS = env_int("SECURE_HSTS_SECONDS", 3600)
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True
    SECURE_SSL_REDIRECT = env_flag("SECURE_SSL_REDIRECT", "1")

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "stderr": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "root": {"handlers": ["stderr"], "level": "WARNING"},
    "loggers": {
        "care": {"handlers": ["stderr"], "level": LOG_LEVEL, "propagate": False},
        "django.request": {"handlers": ["stderr"], "level": "ERROR", "propagate": False},
    },
}

# -----------------------------------------------------------------------------
# Booking and search rules
# -----------------------------------------------------------------------------
BOOKING_DAILY_LIMIT = env_int("BOOKING_DAILY_LIMIT", 3)
# reject bookings for doctors that are not mapped to the requested hospital
BOOKING_REQUIRE_DOCTOR_MAPPING = env_flag("BOOKING_REQUIRE_DOCTOR_MAPPING")
# require the caller to own (or manage) an appointment before changing it
APPOINTMENT_OWNERSHIP_CHECK = env_flag("APPOINTMENT_OWNERSHIP_CHECK")
NEARBY_DEFAULT_RADIUS_KM = float(os.getenv("NEARBY_DEFAULT_RADIUS_KM", "10"))
