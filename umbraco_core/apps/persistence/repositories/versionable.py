"""
Version aware repositories: entities backed by a node, a content row, a
content type and one or more content versions.

The base queryset of a versionable repository is rooted at
``ContentVersion``: one row per version, with the node, content and
type-specific rows reachable through ``content``. Reads go through
``latest_only`` so that each entity appears once, at its newest version.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, ClassVar, Mapping, Sequence
from uuid import UUID

from django.db import transaction
from django.db.models import Exists, OuterRef, Q, QuerySet

from .. import models
from ..constants import ROOT_NODE_ID
from ..editors import PropertyTagBehavior, TagSupport, tag_support_for
from ..entities import ContentBase, MemberType, Property, PropertyCollection, PropertyTags
from ..factories import PropertyFactory
from ..properties import DocumentDefinition, PreValues, PropertyCollectionLoader
from ..query import Query
from ..sorting import SYSTEM_FIELDS, Direction, apply_ordering
from .base import RepositoryBase, TEntity
from .tag import TagRepository

log = logging.getLogger(__name__)


def latest_only(versions: QuerySet) -> QuerySet:
    """
    Keep only the newest version of each content item.

    Newest means latest ``version_date``, ties broken by the highest id.
    """
    newer = models.ContentVersion.objects.filter(
        Q(version_date__gt=OuterRef("version_date"))
        | Q(version_date=OuterRef("version_date"), id__gt=OuterRef("id")),
        content_id=OuterRef("content_id"),
    )
    return versions.filter(~Exists(newer))


class VersionableRepositoryBase(RepositoryBase[TEntity]):
    """
    Version lifecycle, counts, paging and property loading for content
    backed entities.
    """
    # Paths on the ContentVersion rooted base queryset.
    id_path: ClassVar[str] = "content_id"
    node_path: ClassVar[str] = "content_id"
    version_path: ClassVar[str] = "version_id"

    # (table, column) -> path, for ordering by system fields.
    column_paths: ClassVar[Mapping[tuple[str, str], str]] = {
        ("cmsContentVersion", "versionDate"): "version_date",
        ("umbracoNode", "createDate"): "content__node__create_date",
        ("umbracoNode", "text"): "content__node__text",
        ("umbracoNode", "nodeUser"): "content__node__node_user",
        ("umbracoNode", "path"): "content__node__path",
        ("umbracoNode", "sortOrder"): "content__node__sort_order",
        ("umbracoNode", "id"): "content_id",
    }
    system_fields: ClassVar[Mapping[str, tuple[str, str]]] = SYSTEM_FIELDS

    # The table custom property sorts match property rows on.
    sort_table: ClassVar[str] = "cmsContentVersion"

    # Columns the free text filter of paged queries looks in.
    filter_paths: ClassVar[Sequence[str]] = ("content__node__text",)

    def __init__(
        self,
        *,
        tag_repository: TagRepository | None = None,
        property_loader: PropertyCollectionLoader | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.tag_repository = tag_repository or TagRepository()
        self.property_loader = property_loader or PropertyCollectionLoader()

    # Versions

    def get_by_version(self, version_id: UUID) -> TEntity | None:
        raise NotImplementedError

    def perform_delete_version(self, entity_id: int, version_id: UUID) -> None:
        raise NotImplementedError

    def _versions(self, entity_id: int) -> QuerySet:
        return models.ContentVersion.objects.filter(content_id=entity_id).order_by("-version_date", "-id")

    def get_all_versions(self, entity_id: int) -> list[TEntity]:
        """
        Every version of an entity, newest first.
        """
        entities = []
        for version_id in self._versions(entity_id).values_list("version_id", flat=True):
            entity = self.get_by_version(version_id)
            if entity is not None:
                entities.append(entity)
        return entities

    def get_version_ids(self, entity_id: int, max_rows: int) -> list[UUID]:
        return list(self._versions(entity_id).values_list("version_id", flat=True)[:max_rows])

    def delete_version(self, version_id: UUID | str) -> None:
        """
        Delete one version. The newest version of an entity is never deleted.
        """
        with transaction.atomic():
            version = models.ContentVersion.objects.filter(version_id=version_id).first()
            if version is None:
                return
            latest = self._versions(version.content_id).first()
            if latest.pk == version.pk:
                log.debug(f"Not deleting version {version.version_id}: it is the latest of {version.content_id}")
                return
            self.perform_delete_version(version.content_id, version.version_id)

    def delete_versions(self, entity_id: int, before: datetime) -> None:
        """
        Delete the versions of an entity dated strictly before ``before``,
        except the newest one.
        """
        with transaction.atomic():
            latest = self._versions(entity_id).first()
            if latest is None:
                return
            version_ids = list(
                self._versions(entity_id)
                .filter(version_date__lt=before)
                .exclude(version_id=latest.version_id)
                .values_list("version_id", flat=True)
            )
            for version_id in version_ids:
                self.perform_delete_version(entity_id, version_id)
        if version_ids:
            log.info(f"Deleted {len(version_ids)} versions of {entity_id} older than {before.isoformat()}")

    # Counts

    def get_count_by_query(self, query: Query) -> int:
        return latest_only(self.get_base_queryset()).filter(self.translator.translate(query)).count()

    def _nodes(self, content_type_alias: str | None) -> QuerySet:
        nodes = models.Node.objects.filter(node_object_type=self.object_type)
        if content_type_alias:
            nodes = nodes.filter(content__content_type__alias=content_type_alias)
        return nodes

    def count(self, content_type_alias: str | None = None) -> int:
        return self._nodes(content_type_alias).count()

    def count_children(self, parent_id: int, content_type_alias: str | None = None) -> int:
        return self._nodes(content_type_alias).filter(parent_id=parent_id).count()

    def count_descendants(self, parent_id: int, content_type_alias: str | None = None) -> int:
        path_match = f"{ROOT_NODE_ID}," if parent_id == ROOT_NODE_ID else f",{parent_id},"
        return self._nodes(content_type_alias).filter(path__contains=path_match).count()

    # Paging

    def filter_q(self, text: str) -> Q:
        q = Q()
        for path in self.filter_paths:
            q |= Q(**{f"{path}__icontains": text})
        return q

    def get_paged_results_by_query(
        self,
        query: Query | None,
        page_index: int,
        page_size: int,
        order_by: str | None,
        direction: Direction = Direction.ASCENDING,
        order_by_system_field: bool = True,
        filter: str | None = None,  # pylint: disable=redefined-builtin
    ) -> tuple[list[TEntity], int]:
        """
        One page of the entities matching ``query``, and how many match in all.

        ``page_index`` is zero based. ``order_by`` names a system field, or
        with ``order_by_system_field=False`` a property alias. Rows are always
        ordered by node id last, so consecutive pages never overlap.
        ``filter`` is a case-insensitive substring matched against the
        ``filter_paths`` columns.
        """
        if page_index < 0 or page_size < 1:
            raise ValueError(f"Invalid page: index {page_index}, size {page_size}")

        versions = latest_only(self.get_base_queryset()).filter(self.translator.translate(query))
        if filter:
            versions = versions.filter(self.filter_q(filter))

        total = versions.count()
        if total == 0:
            return [], 0

        versions = apply_ordering(
            versions,
            order_by,
            direction,
            order_by_system_field,
            column_paths=self.column_paths,
            table=self.sort_table,
            node_path=self.node_path,
            version_path=self.version_path,
            system_fields=self.system_fields,
        )
        start = page_index * page_size
        return self.map_rows(versions[start:start + page_size]), total

    # Properties

    def get_property_collection(self, definitions: Sequence[DocumentDefinition]) -> dict[int, PropertyCollection]:
        return self.property_loader.load(definitions)

    def get_content_types(self, content_type_ids: set[int]) -> Mapping[int, MemberType]:
        raise NotImplementedError

    def build_entity(
        self,
        version: models.ContentVersion,
        definition: DocumentDefinition,
        properties: PropertyCollection,
    ) -> TEntity:
        raise NotImplementedError

    def map_rows(self, versions) -> list[TEntity]:
        """
        Entities for ContentVersion rows, with their properties, in row order.
        """
        rows = list(versions)
        content_types = self.get_content_types({row.content.content_type_id for row in rows})
        definitions = [
            DocumentDefinition(
                id=row.content_id,
                version=row.version_id,
                version_date=row.version_date,
                create_date=row.content.node.create_date,
                composition=content_types[row.content.content_type_id],
            )
            for row in rows
        ]
        collections = self.get_property_collection(definitions)
        return [
            self.build_entity(row, definition, collections.get(definition.id, PropertyCollection()))
            for row, definition in zip(rows, definitions)
        ]

    def persist_properties(self, entity: ContentBase, new_version: bool) -> None:
        """
        Write the properties of ``entity`` for its current version.

        Only properties declared by the entity's content type are written.
        With ``new_version`` every property gets a new row.
        """
        declared = {property_type.id for property_type in entity.content_type.property_types if property_type.id}
        properties = [prop for prop in entity.properties if prop.property_type.id in declared]
        if new_version:
            for prop in properties:
                prop.id = None
        factory = PropertyFactory(entity.content_type.property_types, entity.version, entity.id)
        for prop, row in zip(properties, factory.build_rows(properties)):
            row.save(force_insert=row.id is None)
            prop.id = row.id

    # Tags

    def _tags_to_save(self, prop: Property, support: TagSupport) -> PropertyTags:
        if prop.tags is not None and (prop.is_property_dirty("tags") or not prop.is_property_dirty("value")):
            return prop.tags
        data_type_id = prop.property_type.data_type_id
        pre_values = PreValues([data_type_id], self.property_loader.batch_size).for_data_type(data_type_id)
        return PropertyTags(support.behavior, frozenset(support.extract(prop.value, pre_values)))

    def update_entity_tags(self, entity: ContentBase) -> None:
        """
        Bring the stored tags of every tag enabled property in line with it.
        """
        for prop in entity.properties:
            support = tag_support_for(prop.property_type.property_editor_alias)
            if support is None or not prop.property_type.has_identity:
                continue
            tags = self._tags_to_save(prop, support)
            if tags.behavior == PropertyTagBehavior.REMOVE:
                self.tag_repository.remove_tags_from_property(entity.id, prop.property_type.id, tags.tags)
            else:
                self.tag_repository.assign_tags_to_property(
                    entity.id,
                    prop.property_type.id,
                    tags.tags,
                    replace_tags=tags.behavior == PropertyTagBehavior.REPLACE,
                )
            prop.tags = tags

    def clear_entity_tags(self, entity: ContentBase) -> None:
        self.tag_repository.clear_tags_from_entity(entity.id)

    def has_tag_property(self, entity: ContentBase) -> bool:
        return any(tag_support_for(prop.property_type.property_editor_alias) for prop in entity.properties)

    def refreshed(self, entity: Any) -> None:
        self.events.refreshed_entity.send(sender=type(self), entity=entity)
