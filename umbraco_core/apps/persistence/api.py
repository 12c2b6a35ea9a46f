"""
Members and member groups API.

This module provides functions to manage members, their types, their versions
and the roles (member groups) they are assigned to. Each function builds the
repositories it needs, so callers that want to receive repository events or to
bypass caching should construct the repositories in ``.repositories``
themselves.

Please look at the models.py file for more information about the kinds of
data are stored in this app.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping
from uuid import UUID

from django.db.transaction import atomic

from .constants import ROOT_NODE_ID, ValueStorageType
from .entities import DataTypeDefinition, Member, MemberGroup, MemberType, PropertyType
from .query import Query, StringPropertyMatchType
from .repositories import (
    DataTypeRepository,
    MemberGroupRepository,
    MemberRepository,
    MemberTypeRepository,
    TaggedValue,
    TagRepository,
)
from .sorting import Direction

# The public API that will be re-exported by umbraco_core.api.persistence
# is listed in the __all__ entries below. Internal helper functions that are
# private to this module should start with an underscore. If a function does not
# start with an underscore AND it is not in __all__, that function is considered
# to be callable only by other apps in the persistence package.
__all__ = [
    "create_data_type",
    "create_member_type",
    "get_member_type",
    "get_member_type_by_alias",
    "create_member",
    "save_member",
    "get_member",
    "get_member_by_username",
    "get_members",
    "get_members_by_query",
    "member_exists",
    "count_members",
    "get_paged_members",
    "delete_member",
    "get_member_versions",
    "delete_member_version",
    "delete_member_versions",
    "create_role",
    "get_role",
    "get_roles_for_username",
    "assign_roles",
    "dissociate_roles",
    "find_members_in_role",
    "get_members_in_role",
    "get_tags_for_member",
]


def create_data_type(
    name: str,
    property_editor_alias: str,
    storage_type: ValueStorageType = ValueStorageType.NVARCHAR,
    pre_values: Mapping[str, str] | None = None,
) -> DataTypeDefinition:
    """
    Create a data type: a property editor bound to a storage column kind.
    """
    data_type = DataTypeDefinition(name, property_editor_alias, storage_type)
    DataTypeRepository().save(data_type, pre_values)
    return data_type


def create_member_type(
    alias: str,
    name: str,
    properties: Iterable[tuple[DataTypeDefinition, str, str]] = (),
) -> MemberType:
    """
    Create a member type.

    ``properties`` is a sequence of (data type, alias, name) triples, one for
    each property type to add, in order.
    """
    member_type = MemberType(
        alias,
        name,
        [
            PropertyType.for_data_type(data_type, property_alias, property_name, sort_order=index)
            for index, (data_type, property_alias, property_name) in enumerate(properties, start=1)
        ],
    )
    MemberTypeRepository().save(member_type)
    return member_type


def get_member_type(member_type_id: int, /) -> MemberType | None:
    return MemberTypeRepository().get(member_type_id)


def get_member_type_by_alias(alias: str, /) -> MemberType | None:
    return MemberTypeRepository().get_by_alias(alias)


def create_member(
    member_type: MemberType,
    name: str,
    email: str,
    username: str,
    raw_password_value: str | None = None,
    *,
    parent_id: int = ROOT_NODE_ID,
    values: Mapping[str, Any] | None = None,
) -> Member:
    """
    Create and save a member, with optional property ``values`` by alias.
    """
    member = Member(name, email, username, member_type, raw_password_value=raw_password_value, parent_id=parent_id)
    for alias, value in (values or {}).items():
        member.set_value(alias, value)
    MemberRepository().save(member)
    return member


def save_member(member: Member, /) -> None:
    """
    Save a member.

    Only fields that changed are written. A blank ``raw_password_value`` never
    overwrites the stored password. Call ``member.start_new_version()`` first
    to keep the current version and store the changes as a new one.
    """
    MemberRepository().save(member)


def get_member(member_id: int, /) -> Member | None:
    return MemberRepository().get(member_id)


def get_member_by_username(username: str, /) -> Member | None:
    return MemberRepository().get_by_username(username)


def get_members(*member_ids: int) -> list[Member]:
    """
    The members with the given ids, or every member if none are given.
    """
    return MemberRepository().get_all(*member_ids)


def get_members_by_query(query: Query, /) -> list[Member]:
    return MemberRepository().get_by_query(query)


def member_exists(username: str, /) -> bool:
    return MemberRepository().exists(username)


def count_members(member_type_alias: str | None = None) -> int:
    return MemberRepository().count(member_type_alias)


def get_paged_members(
    page_index: int,
    page_size: int,
    order_by: str = "Name",
    direction: Direction = Direction.ASCENDING,
    order_by_system_field: bool = True,
    filter: str | None = None,  # pylint: disable=redefined-builtin
    query: Query | None = None,
) -> tuple[list[Member], int]:
    """
    One page of members, and the total number of members matching.
    """
    return MemberRepository().get_paged_results_by_query(
        query, page_index, page_size, order_by, direction, order_by_system_field, filter,
    )


def delete_member(member: Member, /) -> None:
    MemberRepository().delete(member)


def get_member_versions(member_id: int, /) -> list[Member]:
    return MemberRepository().get_all_versions(member_id)


def delete_member_version(version_id: UUID | str, /) -> None:
    """
    Delete one version of a member. The newest version is never deleted.
    """
    MemberRepository().delete_version(version_id)


def delete_member_versions(member_id: int, before: datetime) -> None:
    MemberRepository().delete_versions(member_id, before)


def create_role(role_name: str, /) -> MemberGroup | None:
    """
    Create a role, or return None if it already exists.
    """
    return MemberGroupRepository().create_if_not_exists(role_name)


def get_role(role_name: str, /) -> MemberGroup | None:
    return MemberGroupRepository().get_by_name(role_name)


def get_roles_for_username(username: str, /) -> list[str]:
    return [group.name for group in MemberGroupRepository().get_member_groups_for_username(username)]


def assign_roles(usernames: Iterable[str], role_names: Iterable[str]) -> None:
    """
    Add the members with ``usernames`` to the roles, creating missing roles.
    """
    with atomic():
        MemberGroupRepository().assign_roles(usernames, role_names)


def dissociate_roles(usernames: Iterable[str], role_names: Iterable[str]) -> None:
    with atomic():
        MemberGroupRepository().dissociate_roles(usernames, role_names)


def find_members_in_role(
    role_name: str,
    username_to_match: str,
    match_type: StringPropertyMatchType = StringPropertyMatchType.STARTS_WITH,
) -> list[Member]:
    return MemberRepository().find_members_in_role(role_name, username_to_match, match_type)


def get_members_in_role(role_name: str, /) -> list[Member]:
    return MemberRepository().get_by_member_group(role_name)


def get_tags_for_member(member_id: int, group: str | None = None) -> list[TaggedValue]:
    return TagRepository().get_tags_for_entity(member_id, group)
