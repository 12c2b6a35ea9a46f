"""
Tags and their assignment to the properties of nodes.
"""
from __future__ import annotations

from typing import Iterable

from attrs import frozen
from django.db import transaction

from .. import models


@frozen
class TaggedValue:
    """
    A tag as assigned to an entity.
    """
    text: str
    group: str
    id: int | None = None


class TagRepository:
    """
    Reads and writes ``cmsTags`` and ``cmsTagRelationship``.

    Tags are shared: removing the last assignment of a tag leaves the tag row
    in place.
    """

    def _ensure_tags(self, tags: Iterable[tuple[str, str]]) -> list[models.Tag]:
        rows = []
        for text, group in dict.fromkeys(tags):
            row, _created = models.Tag.objects.get_or_create(tag=text, group=group)
            rows.append(row)
        return rows

    def assign_tags_to_property(
        self,
        node_id: int,
        property_type_id: int,
        tags: Iterable[tuple[str, str]],
        replace_tags: bool = True,
    ) -> None:
        """
        Assign (text, group) tags to a property of a node.

        With ``replace_tags``, assignments not in ``tags`` are removed first.
        Assignments that already exist are left alone either way.
        """
        with transaction.atomic():
            tag_rows = self._ensure_tags(tags)
            assigned = models.TagRelationship.objects.filter(node_id=node_id, property_type_id=property_type_id)
            if replace_tags:
                assigned.exclude(tag_id__in=[row.id for row in tag_rows]).delete()
            existing = set(assigned.values_list("tag_id", flat=True))
            models.TagRelationship.objects.bulk_create(
                models.TagRelationship(node_id=node_id, property_type_id=property_type_id, tag_id=row.id)
                for row in tag_rows
                if row.id not in existing
            )

    def remove_tags_from_property(
        self,
        node_id: int,
        property_type_id: int,
        tags: Iterable[tuple[str, str]],
    ) -> None:
        tag_ids = []
        for text, group in tags:
            tag_ids.extend(models.Tag.objects.filter(tag=text, group=group).values_list("id", flat=True))
        models.TagRelationship.objects.filter(
            node_id=node_id,
            property_type_id=property_type_id,
            tag_id__in=tag_ids,
        ).delete()

    def clear_tags_from_entity(self, node_id: int) -> None:
        models.TagRelationship.objects.filter(node_id=node_id).delete()

    def get_tags_for_entity(self, node_id: int, group: str | None = None) -> list[TaggedValue]:
        rows = models.Tag.objects.filter(relationships__node_id=node_id)
        if group is not None:
            rows = rows.filter(group=group)
        return [
            TaggedValue(text=row.tag, group=row.group, id=row.id)
            for row in rows.distinct().order_by("group", "tag")
        ]

    def get_tags_for_property(self, node_id: int, property_alias: str, group: str | None = None) -> list[TaggedValue]:
        rows = models.Tag.objects.filter(
            relationships__node_id=node_id,
            relationships__property_type__alias=property_alias,
        )
        if group is not None:
            rows = rows.filter(group=group)
        return [
            TaggedValue(text=row.tag, group=row.group, id=row.id)
            for row in rows.distinct().order_by("group", "tag")
        ]
