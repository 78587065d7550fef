"""
CBM – Django Settings (Infrastructure Only)
============================================
Django serves as the persistence and HTTP container for the cash book
manager. Domain rules live in core/ and engines/, not here.

Every deploy-time value comes from the environment:

    CBM_SECRET_KEY      signing key (dev default below)
    CBM_DEBUG           "1" / "0"
    CBM_DB_PATH         SQLite file, default <project root>/db.sqlite3
    CBM_LOG_LEVEL       level for the "cbm" logger tree, default INFO
    CBM_ALLOWED_HOSTS   comma separated
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("CBM_SECRET_KEY", "cbm-dev-key-replace-before-deployment")

DEBUG = os.environ.get("CBM_DEBUG", "1") == "1"

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("CBM_ALLOWED_HOSTS", "").split(",")
    if host.strip()
]

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # ── CBM Modules ───────────────────────────────────────
    "core.cashbook_store",
]

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL & WSGI ────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("CBM_DB_PATH") or BASE_DIR / "db.sqlite3",
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-in"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Default Primary Key ──────────────────────────────────────
# CBM uses UUIDs explicitly. This is a Django fallback only.
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Logging ──────────────────────────────────────────────────
CBM_LOG_LEVEL = os.environ.get("CBM_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "cbm": {
            "handlers": ["console"],
            "level": CBM_LOG_LEVEL,
            "propagate": True,
        },
    },
}
