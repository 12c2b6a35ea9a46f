"""
Data types and their pre-values.
"""
from __future__ import annotations

import re
from typing import Mapping

from django.core.cache import BaseCache, caches
from django.db import transaction
from django.utils import timezone

from .. import models
from ..conf import get_setting
from ..constants import ROOT_NODE_ID, ROOT_NODE_PATH, ObjectTypes
from ..entities import DataTypeDefinition
from ..factories import build_data_type


def pre_value_cache_key(data_type_id: int, pre_value_id: int) -> str:
    return f"{get_setting('PRE_VALUE_CACHE_KEY_PREFIX')}{data_type_id}-{pre_value_id}"


def pre_value_cache_key_regex(data_type_id: int) -> re.Pattern:
    """
    Matches the cache keys of every pre-value of one data type.
    """
    prefix = re.escape(get_setting("PRE_VALUE_CACHE_KEY_PREFIX"))
    return re.compile(rf"^{prefix}{data_type_id}-(?P<pre_value_id>\d+)$")


class DataTypeRepository:
    """
    Creates data types and reads their configuration.
    """
    def __init__(self, runtime_cache: BaseCache | None = None):
        self.runtime_cache = runtime_cache or caches[get_setting("RUNTIME_CACHE")]

    def get(self, data_type_id: int) -> DataTypeDefinition | None:
        row = (
            models.DataType.objects
            .select_related("node")
            .filter(node_id=data_type_id, node__node_object_type=ObjectTypes.DATA_TYPE)
            .first()
        )
        return build_data_type(row) if row else None

    def get_by_editor_alias(self, property_editor_alias: str) -> list[DataTypeDefinition]:
        rows = models.DataType.objects.select_related("node").filter(property_editor_alias=property_editor_alias)
        return [build_data_type(row) for row in rows.order_by("node_id")]

    def save(self, data_type: DataTypeDefinition, pre_values: Mapping[str, str] | None = None) -> None:
        """
        Insert or update a data type, replacing its pre-values if given.
        """
        with transaction.atomic():
            if data_type.has_identity:
                models.Node.objects.filter(id=data_type.id).update(text=data_type.name)
                models.DataType.objects.filter(node_id=data_type.id).update(
                    property_editor_alias=data_type.property_editor_alias,
                    db_type=data_type.storage_type.value,
                )
            else:
                self._insert(data_type)
            if pre_values is not None:
                self._replace_pre_values(data_type.id, pre_values)

    def _insert(self, data_type: DataTypeDefinition) -> None:
        sort_order = models.Node.objects.filter(
            parent_id=ROOT_NODE_ID, node_object_type=ObjectTypes.DATA_TYPE,
        ).count()
        node = models.Node.objects.create(
            parent_id=ROOT_NODE_ID,
            level=1,
            path=ROOT_NODE_PATH,
            sort_order=sort_order,
            unique_id=data_type.key,
            text=data_type.name,
            node_object_type=ObjectTypes.DATA_TYPE,
            create_date=timezone.now(),
        )
        node.path = f"{ROOT_NODE_PATH},{node.id}"
        node.save(update_fields=["path"])
        models.DataType.objects.create(
            node=node,
            property_editor_alias=data_type.property_editor_alias,
            db_type=data_type.storage_type.value,
        )
        data_type.id = node.id

    def _replace_pre_values(self, data_type_id: int, pre_values: Mapping[str, str]) -> None:
        existing = models.DataTypePreValue.objects.filter(data_type_id=data_type_id)
        for pre_value_id in existing.values_list("id", flat=True):
            self.runtime_cache.delete(pre_value_cache_key(data_type_id, pre_value_id))
        existing.delete()
        models.DataTypePreValue.objects.bulk_create(
            models.DataTypePreValue(data_type_id=data_type_id, alias=alias, value=value, sort_order=index)
            for index, (alias, value) in enumerate(pre_values.items())
        )

    def get_pre_values(self, data_type_id: int) -> dict[str, str]:
        rows = models.DataTypePreValue.objects.filter(data_type_id=data_type_id).order_by("sort_order", "id")
        return {row.alias or str(row.sort_order): row.value or "" for row in rows}

    def get_pre_value_as_string(self, data_type_id: int, pre_value_id: int) -> str | None:
        key = pre_value_cache_key(data_type_id, pre_value_id)
        value = self.runtime_cache.get(key)
        if value is None:
            value = (
                models.DataTypePreValue.objects
                .filter(id=pre_value_id, data_type_id=data_type_id)
                .values_list("value", flat=True)
                .first()
            )
            if value is not None:
                self.runtime_cache.set(key, value)
        return value
