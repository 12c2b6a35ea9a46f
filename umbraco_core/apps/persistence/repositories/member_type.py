"""
Member types: the content types of members.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from django.db.models import Max, QuerySet

from .. import models
from ..constants import ROOT_NODE_ID, ROOT_NODE_PATH, ObjectTypes
from ..entities import MemberType
from ..factories import build_member_type, build_property_type_row
from ..query import Query
from .base import RepositoryBase


class MemberTypeRepository(RepositoryBase[MemberType]):
    """
    A member type is a node, a content type row and its property type rows.

    Property types removed from a member type in memory are not deleted on
    save; their stored values would go with them.
    """
    entity_type = MemberType
    object_type = ObjectTypes.MEMBER_TYPE
    id_path = "node_id"
    query_fields = {
        "id": "node_id",
        "key": "node__unique_id",
        "name": "node__text",
        "alias": "alias",
    }
    delete_clauses = (
        (models.PropertyType, "content_type_id"),
        (models.ContentType, "node_id"),
        (models.Node, "id"),
    )

    def get_base_queryset(self) -> QuerySet:
        return models.ContentType.objects.select_related("node").filter(node__node_object_type=self.object_type)

    def _map(self, content_types: Iterable[models.ContentType]) -> list[MemberType]:
        content_types = list(content_types)
        property_types = defaultdict(list)
        rows = models.PropertyType.objects.select_related("data_type").filter(
            content_type_id__in=[row.node_id for row in content_types],
        )
        for row in rows:
            property_types[row.content_type_id].append(row)
        return [build_member_type(row, property_types[row.node_id]) for row in content_types]

    def perform_get(self, entity_id: int) -> MemberType | None:
        return next(iter(self._map(self.get_base_queryset().filter(node_id=entity_id))), None)

    def perform_get_all(self, entity_ids: Iterable[int]) -> list[MemberType]:
        content_types = self.get_base_queryset()
        entity_ids = list(entity_ids)
        if entity_ids:
            content_types = content_types.filter(node_id__in=entity_ids)
        return self._map(content_types.order_by("node_id"))

    def perform_get_by_query(self, query: Query) -> list[MemberType]:
        content_types = self.get_base_queryset().filter(self.translator.translate(query))
        return self._map(content_types.order_by("node_id"))

    def get_by_alias(self, alias: str) -> MemberType | None:
        return next(iter(self.perform_get_by_query(Query().where(alias=alias))), None)

    def persist_new_item(self, entity: MemberType) -> None:
        entity.adding_entity()
        sort_order = models.Node.objects.filter(
            parent_id=ROOT_NODE_ID, node_object_type=self.object_type,
        ).count()
        node = models.Node.objects.create(
            parent_id=ROOT_NODE_ID,
            level=1,
            path=ROOT_NODE_PATH,
            sort_order=sort_order,
            unique_id=entity.key,
            text=entity.name,
            node_object_type=self.object_type,
            create_date=entity.create_date,
        )
        node.path = f"{ROOT_NODE_PATH},{node.id}"
        node.save(update_fields=["path"])
        entity.id = node.id

        models.ContentType.objects.create(
            node=node,
            alias=entity.alias,
            icon=entity.icon,
            description=entity.description,
        )
        self._persist_property_types(entity)
        entity.reset_dirty_properties()

    def persist_updated_item(self, entity: MemberType) -> None:
        entity.updating_entity()
        models.Node.objects.filter(id=entity.id).update(text=entity.name)
        models.ContentType.objects.filter(node_id=entity.id).update(
            alias=entity.alias,
            icon=entity.icon,
            description=entity.description,
        )
        self._persist_property_types(entity)
        entity.reset_dirty_properties()

    def _persist_property_types(self, entity: MemberType) -> None:
        next_sort_order = (
            models.PropertyType.objects.filter(content_type_id=entity.id).aggregate(m=Max("sort_order"))["m"] or 0
        )
        for property_type in entity.property_types:
            if property_type.data_type_id is None:
                raise ValueError(f"Property type {property_type.alias!r} has no data type")
            if not property_type.has_identity and not property_type.sort_order:
                next_sort_order += 1
                property_type.sort_order = next_sort_order
            row = build_property_type_row(property_type, entity.id)
            row.save(force_insert=row.id is None)
            property_type.id = row.id
