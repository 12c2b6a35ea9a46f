"""
This is the public API for members and member groups in Umbraco Core.

This is the single ``api`` module that code outside of the
``umbraco_core.apps.*`` packages should import from.
"""
# This wildcard import is okay because the api module declares __all__.
# pylint: disable=wildcard-import
from ..apps.persistence.api import *
from ..apps.persistence.constants import ValueStorageType
from ..apps.persistence.query import Query, StringPropertyMatchType
from ..apps.persistence.sorting import Direction
