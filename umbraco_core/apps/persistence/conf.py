"""
Settings for the persistence app.

Everything is read from the ``UMBRACO_CORE`` dict in Django settings, falling
back to the defaults below, e.g.::

    UMBRACO_CORE = {
        "SQL_BATCH_SIZE": 500,
        "RUNTIME_CACHE": "umbraco-runtime",
    }
"""
from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    # Max number of ids in one ``IN (...)`` when loading property data.
    "SQL_BATCH_SIZE": 2000,
    # Max number of member ids checked against a role per query.
    "ROLE_BATCH_SIZE": 1000,
    # Sliding expiration (seconds) of member groups looked up by name.
    "GROUP_BY_NAME_TIMEOUT": 300,
    # Django cache alias for short lived, shared lookups.
    "RUNTIME_CACHE": "default",
    # Django cache alias for entities cached by id by the repositories.
    "ISOLATED_CACHE": "default",
    "PRE_VALUE_CACHE_KEY_PREFIX": "UmbracoPreVal",
}


def get_setting(name: str) -> Any:
    """
    Return the configured value of ``name``, or its default.
    """
    if name not in DEFAULTS:
        raise KeyError(f"Unknown UMBRACO_CORE setting: {name}")
    return getattr(settings, "UMBRACO_CORE", {}).get(name, DEFAULTS[name])
