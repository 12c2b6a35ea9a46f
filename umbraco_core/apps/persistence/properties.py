"""
Batch loading of versioned property values.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Iterable, Sequence
from uuid import UUID

from attrs import frozen

from ...lib.batching import fetch_by_groups
from . import models
from .conf import get_setting
from .editors import tag_support_for
from .entities import MemberType, PropertyCollection, PropertyTags, PropertyType
from .factories import PropertyFactory

log = logging.getLogger(__name__)


@frozen
class DocumentDefinition:
    """
    One version of one node whose properties are to be loaded.
    """
    id: int
    version: UUID
    version_date: datetime
    create_date: datetime
    composition: MemberType


class PreValues:
    """
    Pre-values of a set of data types, fetched on first use only.

    Most loads have no tag properties at all and never need pre-values.
    """
    def __init__(self, data_type_ids: Iterable[int], batch_size: int):
        self._data_type_ids = list(dict.fromkeys(data_type_ids))
        self._batch_size = batch_size
        self._by_data_type: dict[int, dict[str, str]] | None = None

    def for_data_type(self, data_type_id: int | None) -> dict[str, str]:
        if self._by_data_type is None:
            self._by_data_type = defaultdict(dict)
            rows = fetch_by_groups(
                self._data_type_ids,
                self._batch_size,
                lambda ids: models.DataTypePreValue.objects.filter(data_type_id__in=ids).order_by("sort_order", "id"),
            )
            for row in rows:
                self._by_data_type[row.data_type_id][row.alias or str(row.sort_order)] = row.value or ""
        return self._by_data_type.get(data_type_id, {})


class PropertyCollectionLoader:
    """
    Loads the property collections of many versions in as few queries as the
    parameter limit allows.
    """
    def __init__(self, batch_size: int | None = None):
        self.batch_size = batch_size or get_setting("SQL_BATCH_SIZE")

    def load(self, definitions: Sequence[DocumentDefinition]) -> dict[int, PropertyCollection]:
        """
        Property collections by node id.

        Every property type of a definition's composition gets a property,
        empty if nothing is stored for it. Tag enabled properties also get the
        tags parsed out of their stored value.
        """
        if not definitions:
            return {}

        versions = list(dict.fromkeys(definition.version for definition in definitions))
        rows = fetch_by_groups(
            versions,
            self.batch_size,
            lambda batch: models.PropertyData.objects.filter(version_id__in=batch),
        )
        rows_by_version: dict[tuple[int, UUID], list[models.PropertyData]] = defaultdict(list)
        for row in rows:
            rows_by_version[(row.node_id, row.version_id)].append(row)

        pre_values = PreValues(
            (
                property_type.data_type_id
                for definition in definitions
                for property_type in definition.composition.property_types
            ),
            self.batch_size,
        )

        def parse_tags(property_type: PropertyType, value: Any) -> PropertyTags | None:
            support = tag_support_for(property_type.property_editor_alias)
            if support is None:
                return None
            tags = support.extract(value, pre_values.for_data_type(property_type.data_type_id))
            return PropertyTags(support.behavior, frozenset(tags))

        collections: dict[int, PropertyCollection] = {}
        for definition in definitions:
            factory = PropertyFactory(definition.composition.property_types, definition.version, definition.id)
            properties = factory.build_entities(rows_by_version[(definition.id, definition.version)], parse_tags)
            if definition.id in collections:
                log.warning(
                    f"The query returned multiple property sets for document definition {definition.id}, "
                    f"{definition.composition.alias}"
                )
            collections[definition.id] = PropertyCollection(properties)
        return collections
