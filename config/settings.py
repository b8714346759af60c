"""Django settings for the cogtrials project."""
import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "cogtrials-insecure-development-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "false").lower() in ("1", "true", "yes")
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

TESTING = "pytest" in sys.modules

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "huey.contrib.djhuey",
    "cogtrials.tasks",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("COGTRIALS_DB_PATH", str(BASE_DIR / "cogtrials.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
USE_TZ = True
TIME_ZONE = "UTC"

# Background queue. Kept in its own sqlite file so a retry can be queued while
# the main database is unavailable.
HUEY = {
    "huey_class": "huey.MemoryHuey" if TESTING else "huey.SqliteHuey",
    "name": "cogtrials",
    "immediate": TESTING or DEBUG,
}
if not TESTING:
    HUEY["filename"] = os.environ.get("COGTRIALS_QUEUE_PATH", str(BASE_DIR / "cogtrials-queue.sqlite3"))

# Site-wide engine overrides, merged over PARADIGM_REGISTRY:
# {"defaults": {...}, "<paradigm>": {...}} with any of practice_trials,
# main_trials, response_timeout_ms, fixation_delay_ms, inter_trial_delay_ms,
# feedback_duration_ms.
TRIAL_ENGINE = {}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(levelname)s %(asctime)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {"level": "WARNING", "handlers": ["console"]},
    "loggers": {
        "cogtrials": {
            "level": os.environ.get("COGTRIALS_LOG_LEVEL", "INFO"),
            "handlers": ["console"],
            "propagate": False,
        },
        "huey": {"level": "INFO", "handlers": ["console"], "propagate": False},
    },
}
