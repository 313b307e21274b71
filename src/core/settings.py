"""Django settings for the wikifarm project."""

import sys
from pathlib import Path

import dj_database_url
from decouple import Csv, config

# Build paths
BASE_DIR = Path(__file__).resolve().parent.parent
VAR_DIR = BASE_DIR.parent / "var"

# Security
SECRET_KEY = config("SECRET_KEY", default="django-insecure-wikifarm-development-key")
DEBUG = config("DEBUG", default=False, cast=bool)
ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="*", cast=Csv())

# Application definition
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "farm.apps.FarmConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "core.urls"

WSGI_APPLICATION = "core.wsgi.application"

# Database
DATABASES = {
    "default": dj_database_url.parse(config("DATABASE_URL", default=f"sqlite:///{VAR_DIR / 'data' / 'farm.db'}"))
}

# Optional read replica for the wiki table
REPLICA_DATABASE_URL = config("REPLICA_DATABASE_URL", default="")
if REPLICA_DATABASE_URL:
    DATABASES["replica"] = dj_database_url.parse(REPLICA_DATABASE_URL)

DEFAULT_AUTO_FIELD = "django.db.models.AutoField"

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Wiki farm JSON cache configuration
FARM_CACHE_DIRECTORY = Path(config("FARM_CACHE_DIRECTORY", default=str(VAR_DIR / "cache")))
FARM_DATABASE = config("FARM_DATABASE", default="replica" if REPLICA_DATABASE_URL else "default")
FARM_CACHE_ALIAS = config("FARM_CACHE_ALIAS", default="default")
FARM_CACHE_NAMESPACE = config("FARM_CACHE_NAMESPACE", default="createwiki")
FARM_JSON_BUILDER = config("FARM_JSON_BUILDER", default="")

# Celery configuration
CELERY_BROKER_URL = config("CELERY_BROKER_URL", default="redis://localhost:6379/1")
CELERY_RESULT_BACKEND = config("CELERY_RESULT_BACKEND", default="redis://localhost:6379/1")
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_TIME_LIMIT = 5 * 60  # 5 min hard limit
CELERY_TASK_SOFT_TIME_LIMIT = 4 * 60  # 4 min soft limit
CELERY_WORKER_PREFETCH_MULTIPLIER = 4

# Test mode - synchronous execution
if "pytest" in sys.modules:
    CELERY_TASK_ALWAYS_EAGER = True
    CELERY_TASK_EAGER_PROPAGATES = True
else:
    CELERY_TASK_ALWAYS_EAGER = config("CELERY_TASK_ALWAYS_EAGER", default=False, cast=bool)

# Cache configuration
# Invalidation timestamps must be shared by every node of the farm, so
# production deployments set REDIS_URL. Local memory is for development only.
REDIS_URL = config("REDIS_URL", default="")
if REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django_redis.cache.RedisCache",
            "LOCATION": REDIS_URL,
            "OPTIONS": {
                "CLIENT_CLASS": "django_redis.client.DefaultClient",
            },
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        }
    }

# Logging
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": config("LOG_LEVEL", default="INFO"),
    },
}
