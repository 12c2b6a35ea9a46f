"""
The member group (role) repository.
"""
from __future__ import annotations

import logging
from typing import Iterable

from django.core.cache import BaseCache, caches
from django.db import transaction
from django.db.models import QuerySet

from ....lib.batching import fetch_by_groups, in_groups_of
from ....lib.cache import get_sliding
from .. import models
from ..conf import get_setting
from ..constants import ROOT_NODE_PATH, ObjectTypes
from ..entities import MemberGroup
from ..factories import MemberGroupFactory
from ..query import Query
from .base import RepositoryBase

log = logging.getLogger(__name__)


class MemberGroupRepository(RepositoryBase[MemberGroup]):
    """
    Member groups are plain named nodes, with no versions and no table of
    their own. Membership is stored in ``cmsMember2MemberGroup``.
    """
    entity_type = MemberGroup
    object_type = ObjectTypes.MEMBER_GROUP
    query_fields = {
        "id": "id",
        "key": "unique_id",
        "name": "text",
        "parent_id": "parent_id",
        "path": "path",
        "level": "level",
        "sort_order": "sort_order",
        "creator_id": "node_user",
        "create_date": "create_date",
    }
    delete_clauses = (
        (models.User2NodeNotify, "node_id"),
        (models.User2NodePermission, "node_id"),
        (models.Relation, "parent_id"),
        (models.Relation, "child_id"),
        (models.TagRelationship, "node_id"),
        (models.Member2MemberGroup, "member_group_id"),
        (models.Node, "id"),
    )

    def __init__(self, *, runtime_cache: BaseCache | None = None, **kwargs):
        super().__init__(**kwargs)
        self.runtime_cache = runtime_cache or caches[get_setting("RUNTIME_CACHE")]
        self.factory = MemberGroupFactory()

    def get_base_queryset(self) -> QuerySet:
        return models.Node.objects.filter(node_object_type=self.object_type)

    def _map(self, nodes: Iterable[models.Node]) -> list[MemberGroup]:
        return [self.factory.build_entity(node) for node in nodes]

    # Reads

    def perform_get(self, entity_id: int) -> MemberGroup | None:
        return next(iter(self._map(self.get_base_queryset().filter(id=entity_id))), None)

    def perform_get_all(self, entity_ids: Iterable[int]) -> list[MemberGroup]:
        nodes = self.get_base_queryset()
        entity_ids = list(entity_ids)
        if entity_ids:
            nodes = nodes.filter(id__in=entity_ids)
        return self._map(nodes.order_by("id"))

    def perform_get_by_query(self, query: Query) -> list[MemberGroup]:
        return self._map(self.get_base_queryset().filter(self.translator.translate(query)).order_by("id"))

    @staticmethod
    def name_cache_key(name: str) -> str:
        return f"{MemberGroup.__module__}.{MemberGroup.__qualname__}.{name}"

    def get_by_name(self, name: str) -> MemberGroup | None:
        """
        The group named ``name``, cached with a sliding expiration.

        Renaming or deleting a group does not invalidate this cache.
        """
        return get_sliding(
            self.runtime_cache,
            self.name_cache_key(name),
            lambda: next(iter(self.get_by_query(Query().where(name=name))), None),
            get_setting("GROUP_BY_NAME_TIMEOUT"),
        )

    def get_member_groups_for_member(self, member_id: int) -> list[MemberGroup]:
        nodes = self.get_base_queryset().filter(member_links__member_id=member_id)
        return self._map(nodes.distinct().order_by("text", "id"))

    def get_member_groups_for_username(self, username: str) -> list[MemberGroup]:
        nodes = self.get_base_queryset().filter(member_links__member__login_name=username)
        return self._map(nodes.distinct().order_by("text", "id"))

    # Writes

    def create_if_not_exists(self, role_name: str) -> MemberGroup | None:
        """
        Create the group ``role_name``.

        Returns ``None`` if the group already exists or a ``saving`` receiver
        cancelled it.
        """
        with transaction.atomic():
            if self.get_base_queryset().filter(text=role_name).exists():
                return None
            group = MemberGroup(role_name)
            if self.events.send_saving(type(self), [group]):
                return None
            self.persist_new_item(group)
            self.events.saved.send(sender=type(self), entities=[group])
        return group

    def persist_new_item(self, entity: MemberGroup) -> None:
        entity.adding_entity()
        entity.path = ROOT_NODE_PATH
        node = self.factory.build_node_row(entity)
        node.save(force_insert=True)
        entity.id = node.id
        entity.path = f"{ROOT_NODE_PATH},{node.id}"
        models.Node.objects.filter(id=node.id).update(path=entity.path)
        entity.reset_dirty_properties()

    def persist_updated_item(self, entity: MemberGroup) -> None:
        entity.updating_entity()
        self.factory.build_node_row(entity).save(force_update=True)
        entity.reset_dirty_properties()

    def _member_ids_for_usernames(self, usernames: Iterable[str]) -> list[int]:
        return fetch_by_groups(
            list(dict.fromkeys(usernames)),
            get_setting("SQL_BATCH_SIZE"),
            lambda names: models.Member.objects.filter(login_name__in=names).values_list("content_id", flat=True),
        )

    def assign_roles(self, usernames: Iterable[str], role_names: Iterable[str]) -> None:
        self.assign_roles_by_member_ids(self._member_ids_for_usernames(usernames), role_names)

    def dissociate_roles(self, usernames: Iterable[str], role_names: Iterable[str]) -> None:
        self.dissociate_roles_by_member_ids(self._member_ids_for_usernames(usernames), role_names)

    def assign_roles_by_member_ids(self, member_ids: Iterable[int], role_names: Iterable[str]) -> None:
        """
        Add every member to every role, creating roles that don't exist yet.

        Existing memberships are left alone, so assigning the same roles twice
        is the same as assigning them once. If a ``saving`` receiver cancels
        the creation of missing roles, nothing is assigned.
        """
        member_ids = list(dict.fromkeys(member_ids))
        role_names = list(dict.fromkeys(role_names))
        if not member_ids or not role_names:
            return

        with transaction.atomic():
            group_ids = dict(self.get_base_queryset().filter(text__in=role_names).values_list("text", "id"))
            missing = [MemberGroup(name) for name in role_names if name not in group_ids]
            if missing:
                if self.events.send_saving(type(self), missing):
                    return
                for group in missing:
                    self.persist_new_item(group)
                    group_ids[group.name] = group.id
                log.info(f"Created member groups {[group.name for group in missing]}")
                self.events.saved.send(sender=type(self), entities=missing)

            wanted_group_ids = [group_ids[name] for name in role_names]
            batch_size = get_setting("ROLE_BATCH_SIZE")
            for batch in in_groups_of(member_ids, batch_size):
                assigned = set(
                    models.Member2MemberGroup.objects
                    .filter(member_id__in=batch, member_group_id__in=wanted_group_ids)
                    .values_list("member_id", "member_group_id")
                )
                models.Member2MemberGroup.objects.bulk_create(
                    models.Member2MemberGroup(member_id=member_id, member_group_id=group_id)
                    for member_id in batch
                    for group_id in wanted_group_ids
                    if (member_id, group_id) not in assigned
                )

    def dissociate_roles_by_member_ids(self, member_ids: Iterable[int], role_names: Iterable[str]) -> None:
        """
        Remove every member from every role. Unknown roles are ignored.
        """
        member_ids = list(dict.fromkeys(member_ids))
        group_ids = list(
            self.get_base_queryset().filter(text__in=list(role_names)).values_list("id", flat=True)
        )
        if not member_ids or not group_ids:
            return
        with transaction.atomic():
            for batch in in_groups_of(member_ids, get_setting("ROLE_BATCH_SIZE")):
                models.Member2MemberGroup.objects.filter(member_id__in=batch, member_group_id__in=group_ids).delete()
