"""
The member repository.
"""
from __future__ import annotations

import logging
from typing import Iterable, Mapping
from uuid import UUID

from django.db.models import Max, QuerySet

from ....lib.batching import fetch_by_groups, in_groups_of
from .. import models
from ..conf import get_setting
from ..constants import ObjectTypes
from ..entities import Member, MemberType, PropertyCollection
from ..factories import MemberFactory
from ..properties import DocumentDefinition
from ..query import Query, StringPropertyMatchType
from ..sorting import SYSTEM_FIELDS
from .member_group import MemberGroupRepository
from .member_type import MemberTypeRepository
from .versionable import VersionableRepositoryBase, latest_only

log = logging.getLogger(__name__)


class MemberRepository(VersionableRepositoryBase[Member]):
    """
    Versioned CRUD for members, plus lookups by role.

    A member is stored as a node, a content row, one content version per
    version, a ``cmsMember`` row with its login details, and property data per
    version. The login details are not versioned.
    """
    entity_type = Member
    object_type = ObjectTypes.MEMBER
    sort_table = "cmsMember"

    column_paths = {
        **VersionableRepositoryBase.column_paths,
        ("cmsMember", "Email"): "content__member__email",
        ("cmsMember", "LoginName"): "content__member__login_name",
    }
    system_fields = {
        **SYSTEM_FIELDS,
        "EMAIL": ("cmsMember", "Email"),
        "LOGINNAME": ("cmsMember", "LoginName"),
        "USERNAME": ("cmsMember", "LoginName"),
    }
    filter_paths = ("content__node__text", "content__member__login_name")

    query_fields = {
        "id": "content_id",
        "key": "content__node__unique_id",
        "name": "content__node__text",
        "parent_id": "content__node__parent_id",
        "path": "content__node__path",
        "level": "content__node__level",
        "sort_order": "content__node__sort_order",
        "trashed": "content__node__trashed",
        "creator_id": "content__node__node_user",
        "create_date": "content__node__create_date",
        "update_date": "version_date",
        "version": "version_id",
        "content_type_id": "content__content_type_id",
        "content_type_alias": "content__content_type__alias",
        "email": "content__member__email",
        "username": "content__member__login_name",
        "raw_password_value": "content__member__password",
    }

    # Deleted in this order when a member is deleted. Rows in the first five
    # tables belong to other parts of the system but point at the node.
    delete_clauses = (
        (models.Task, "node_id"),
        (models.User2NodeNotify, "node_id"),
        (models.User2NodePermission, "node_id"),
        (models.Relation, "parent_id"),
        (models.Relation, "child_id"),
        (models.TagRelationship, "node_id"),
        (models.PropertyData, "node_id"),
        (models.Member2MemberGroup, "member_id"),
        (models.Member, "content_id"),
        (models.ContentVersion, "content_id"),
        (models.ContentXml, "content_id"),
        (models.Content, "node_id"),
        (models.Node, "id"),
    )

    def __init__(
        self,
        *,
        member_type_repository: MemberTypeRepository | None = None,
        member_group_repository: MemberGroupRepository | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.member_type_repository = member_type_repository or MemberTypeRepository()
        self.member_group_repository = member_group_repository or MemberGroupRepository()
        self.factory = MemberFactory()

    def get_base_queryset(self) -> QuerySet:
        return (
            models.ContentVersion.objects
            .select_related("content__node", "content__member")
            .filter(content__node__node_object_type=self.object_type)
        )

    def get_content_types(self, content_type_ids: set[int]) -> Mapping[int, MemberType]:
        return {content_type_id: self.member_type_repository.get(content_type_id) for content_type_id in content_type_ids}

    def build_entity(
        self,
        version: models.ContentVersion,
        definition: DocumentDefinition,
        properties: PropertyCollection,
    ) -> Member:
        return self.factory.build_entity(version, definition.composition, properties)

    # Reads

    def perform_get(self, entity_id: int) -> Member | None:
        versions = self.get_base_queryset().filter(content_id=entity_id).order_by("-version_date", "-id")[:1]
        return next(iter(self.map_rows(versions)), None)

    def perform_get_all(self, entity_ids: Iterable[int]) -> list[Member]:
        entity_ids = list(entity_ids)
        versions = latest_only(self.get_base_queryset())
        if not entity_ids:
            return self.map_rows(versions.order_by("content_id"))
        rows = fetch_by_groups(
            entity_ids,
            get_setting("SQL_BATCH_SIZE"),
            lambda ids: versions.filter(content_id__in=ids),
        )
        return self.map_rows(sorted(rows, key=lambda row: row.content_id))

    def perform_get_by_query(self, query: Query) -> list[Member]:
        versions = latest_only(self.get_base_queryset()).filter(self.translator.translate(query))
        return self.map_rows(versions.order_by("content__node__sort_order", "content_id"))

    def get_by_version(self, version_id: UUID) -> Member | None:
        return next(iter(self.map_rows(self.get_base_queryset().filter(version_id=version_id))), None)

    def get_by_username(self, username: str) -> Member | None:
        return next(iter(self.get_by_query(Query().where(username=username))), None)

    def exists(self, username: str) -> bool:
        return self.get_base_queryset().filter(content__member__login_name=username).exists()

    def get_by_member_group(self, group_name: str) -> list[Member]:
        """
        Every member of the group named ``group_name``.

        Newest version date first, then by sort order.
        """
        group = next(iter(self.member_group_repository.get_by_query(Query().where(name=group_name))), None)
        if group is None:
            return []
        member_ids = models.Member2MemberGroup.objects.filter(member_group_id=group.id).values("member_id")
        versions = latest_only(self.get_base_queryset()).filter(content_id__in=member_ids)
        return self.map_rows(versions.order_by("-version_date", "content__node__sort_order", "content_id"))

    def find_members_in_role(
        self,
        role_name: str,
        username_to_match: str,
        match_type: StringPropertyMatchType = StringPropertyMatchType.STARTS_WITH,
    ) -> list[Member]:
        """
        Members of the role ``role_name`` whose username matches.

        Usernames are matched first, then the matches are checked against the
        role's membership a batch at a time.
        """
        group = next(iter(self.member_group_repository.get_by_query(Query().where(name=role_name))), None)
        if group is None:
            return []

        matches = self.get_by_query(Query().where_string("username", username_to_match, match_type))
        in_role: set[int] = set()
        for member_ids in in_groups_of([member.id for member in matches], get_setting("ROLE_BATCH_SIZE")):
            in_role.update(
                models.Member2MemberGroup.objects
                .filter(member_group_id=group.id, member_id__in=member_ids)
                .values_list("member_id", flat=True)
            )
        return [member for member in matches if member.id in in_role]

    # Writes

    def persist_new_item(self, entity: Member) -> None:
        if entity.content_type_id is None:
            raise ValueError(f"Cannot save member {entity.username!r}: its member type was never saved")
        entity.adding_entity()

        parent = models.Node.objects.get(id=entity.parent_id)
        entity.level = parent.level + 1
        entity.sort_order = models.Node.objects.filter(
            parent_id=entity.parent_id, node_object_type=self.object_type,
        ).count()
        entity.path = parent.path

        node = self.factory.build_node_row(entity)
        node.save(force_insert=True)
        entity.id = node.id
        entity.path = f"{parent.path},{node.id}"
        models.Node.objects.filter(id=node.id).update(path=entity.path)

        models.Content.objects.create(node_id=node.id, content_type_id=entity.content_type_id)
        models.ContentVersion.objects.create(
            content_id=node.id,
            version_id=entity.version,
            version_date=entity.update_date,
        )
        self.factory.build_member_row(entity).save(force_insert=True)
        self.persist_properties(entity, new_version=True)

        self.update_entity_tags(entity)
        self.refreshed(entity)
        entity.reset_dirty_properties()

    def persist_updated_item(self, entity: Member) -> None:
        entity.updating_entity()

        if entity.is_property_dirty("parent_id"):
            parent = models.Node.objects.get(id=entity.parent_id)
            entity.path = f"{parent.path},{entity.id}"
            entity.level = parent.level + 1
            max_sort_order = models.Node.objects.filter(
                parent_id=entity.parent_id, node_object_type=self.object_type,
            ).aggregate(max_sort_order=Max("sort_order"))["max_sort_order"]
            entity.sort_order = (max_sort_order or 0) + 1

        self.factory.build_node_row(entity).save(force_update=True)

        content = models.Content.objects.get(node_id=entity.id)
        if content.content_type_id != entity.content_type_id:
            content.content_type_id = entity.content_type_id
            content.save(update_fields=["content_type"])

        new_version = entity.is_property_dirty("version")
        if new_version:
            models.ContentVersion.objects.create(
                content_id=entity.id,
                version_id=entity.version,
                version_date=entity.update_date,
            )
        else:
            models.ContentVersion.objects.filter(version_id=entity.version).update(version_date=entity.update_date)

        # Only write login details that changed. The password is only ever
        # replaced, never cleared.
        changes = {}
        if entity.is_property_dirty("email"):
            changes["email"] = entity.email
        if entity.is_property_dirty("username"):
            changes["login_name"] = entity.username
        if entity.is_property_dirty("raw_password_value") and entity.raw_password_value:
            changes["password"] = entity.raw_password_value
        if changes:
            models.Member.objects.filter(content_id=entity.id).update(**changes)

        self.persist_properties(entity, new_version=new_version)

        self.update_entity_tags(entity)
        self.refreshed(entity)
        entity.reset_dirty_properties()

    def persist_deleted_item(self, entity: Member) -> None:
        self.events.removing_entity.send(sender=type(self), entity=entity)
        super().persist_deleted_item(entity)

    def perform_delete_version(self, entity_id: int, version_id: UUID) -> None:
        self.events.removing_version.send(sender=type(self), entity_id=entity_id, version_id=version_id)
        models.PropertyData.objects.filter(node_id=entity_id, version_id=version_id).delete()
        models.ContentVersion.objects.filter(content_id=entity_id, version_id=version_id).delete()
