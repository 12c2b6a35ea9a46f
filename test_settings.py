"""
These settings are here to use during tests, because django requires them.

In a real-world use case, apps in this project are installed into other
Django applications, so these settings will not be used.
"""

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": "default.db",
        "USER": "",
        "PASSWORD": "",
        "HOST": "",
        "PORT": "",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    },
    "isolated": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "umbraco-isolated",
    },
}

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    # Our own apps
    "umbraco_core.apps.persistence.apps.PersistenceConfig",
]

SECRET_KEY = "insecure-secret-key"

USE_TZ = True

######################### UMBRACO CORE SETTINGS ########################

UMBRACO_CORE = {
    "RUNTIME_CACHE": "default",
    "ISOLATED_CACHE": "isolated",
}
