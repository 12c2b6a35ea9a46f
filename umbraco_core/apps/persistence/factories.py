"""
Mapping between entities and the rows they are stored in.

``build_entity`` functions take rows (with their relations selected) and
return hydrated entities. ``build_*_row`` functions go the other way and
return unsaved model instances; whether they end up inserted or updated is up
to the repository.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable
from uuid import UUID

from django.utils.dateparse import parse_datetime

from . import models
from .constants import ObjectTypes, ValueStorageType
from .entities import (
    DataTypeDefinition,
    Member,
    MemberGroup,
    MemberType,
    Property,
    PropertyCollection,
    PropertyTags,
    PropertyType,
)

# Column of cmsPropertyData holding values of each storage type.
STORAGE_COLUMNS = {
    ValueStorageType.INTEGER: "data_int",
    ValueStorageType.DECIMAL: "data_decimal",
    ValueStorageType.DATE: "data_date",
    ValueStorageType.NVARCHAR: "data_nvarchar",
    ValueStorageType.NTEXT: "data_ntext",
}


def _to_storage(storage_type: ValueStorageType, value: Any) -> Any:
    if value is None or value == "":
        return None
    if storage_type == ValueStorageType.INTEGER:
        return int(value)
    if storage_type == ValueStorageType.DECIMAL:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    if storage_type == ValueStorageType.DATE:
        return value if isinstance(value, datetime) else parse_datetime(str(value))
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(str(item) for item in value)
    return str(value)


class PropertyFactory:
    """
    Maps the property data rows of one version of one node.
    """
    def __init__(self, property_types: Iterable[PropertyType], version: UUID, node_id: int):
        self.property_types = list(property_types)
        self.version = version
        self.node_id = node_id

    def build_entities(
        self,
        rows: Iterable[models.PropertyData],
        parse_tags: Callable[[PropertyType, Any], PropertyTags | None] | None = None,
    ) -> list[Property]:
        """
        One property per property type, whether or not it has a stored row.
        """
        rows_by_type = {row.property_type_id: row for row in rows}
        properties = []
        for property_type in self.property_types:
            row = rows_by_type.get(property_type.id)
            value = getattr(row, STORAGE_COLUMNS[property_type.storage_type]) if row else None
            tags = parse_tags(property_type, value) if parse_tags else None
            properties.append(
                Property.hydrate(property_type, value, id=row.id if row else None, tags=tags)
            )
        return properties

    def build_rows(self, properties: Iterable[Property]) -> list[models.PropertyData]:
        """
        Rows for the given properties. Rows of new properties have no id.
        """
        rows = []
        for prop in properties:
            row = models.PropertyData(
                id=prop.id,
                node_id=self.node_id,
                version_id=self.version,
                property_type_id=prop.property_type.id,
            )
            setattr(
                row,
                STORAGE_COLUMNS[prop.property_type.storage_type],
                _to_storage(prop.property_type.storage_type, prop.value),
            )
            rows.append(row)
        return rows


def build_property_type(row: models.PropertyType) -> PropertyType:
    """
    Needs ``data_type`` selected.
    """
    return PropertyType(
        alias=row.alias,
        name=row.name,
        property_editor_alias=row.data_type.property_editor_alias,
        storage_type=ValueStorageType(row.data_type.db_type),
        data_type_id=row.data_type_id,
        id=row.id,
        key=row.unique_id,
        sort_order=row.sort_order,
        mandatory=row.mandatory,
        description=row.description,
        validation_reg_exp=row.validation_reg_exp,
    )


def build_property_type_row(property_type: PropertyType, content_type_id: int) -> models.PropertyType:
    return models.PropertyType(
        id=property_type.id,
        data_type_id=property_type.data_type_id,
        content_type_id=content_type_id,
        alias=property_type.alias,
        name=property_type.name,
        sort_order=property_type.sort_order,
        mandatory=property_type.mandatory,
        validation_reg_exp=property_type.validation_reg_exp,
        description=property_type.description,
        unique_id=property_type.key,
    )


def build_data_type(row: models.DataType) -> DataTypeDefinition:
    """
    Needs ``node`` selected.
    """
    return DataTypeDefinition(
        name=row.node.text,
        property_editor_alias=row.property_editor_alias,
        storage_type=ValueStorageType(row.db_type),
        id=row.node_id,
        key=row.node.unique_id,
    )


def build_member_type(
    content_type: models.ContentType,
    property_types: Iterable[models.PropertyType],
) -> MemberType:
    """
    Needs ``node`` selected on the content type and ``data_type`` on the
    property types.
    """
    node = content_type.node
    return MemberType.hydrate(
        alias=content_type.alias,
        name=node.text,
        property_types=[
            build_property_type(row) for row in sorted(property_types, key=lambda row: (row.sort_order, row.id))
        ],
        description=content_type.description,
        icon=content_type.icon,
        id=node.id,
        key=node.unique_id,
        create_date=node.create_date,
        update_date=node.create_date,
    )


class MemberFactory:
    """
    Maps a member to and from its node, content, version and member rows.
    """
    object_type = ObjectTypes.MEMBER

    @staticmethod
    def build_entity(
        version: models.ContentVersion,
        member_type: MemberType,
        properties: PropertyCollection,
    ) -> Member:
        """
        Needs ``content__node`` and ``content__member`` selected.
        """
        node = version.content.node
        member = version.content.member
        return Member.hydrate(
            name=node.text,
            email=member.email,
            username=member.login_name,
            member_type=member_type,
            raw_password_value=member.password,
            properties=properties,
            id=node.id,
            key=node.unique_id,
            version=version.version_id,
            parent_id=node.parent_id,
            path=node.path,
            level=node.level,
            sort_order=node.sort_order,
            trashed=node.trashed,
            creator_id=node.node_user or 0,
            create_date=node.create_date,
            update_date=version.version_date,
        )

    def build_node_row(self, entity: Member) -> models.Node:
        return models.Node(
            id=entity.id,
            trashed=entity.trashed,
            parent_id=entity.parent_id,
            node_user=entity.creator_id,
            level=entity.level,
            path=entity.path,
            sort_order=entity.sort_order,
            unique_id=entity.key,
            text=entity.name,
            node_object_type=self.object_type,
            create_date=entity.create_date,
        )

    @staticmethod
    def build_member_row(entity: Member) -> models.Member:
        return models.Member(
            content_id=entity.id,
            email=entity.email,
            login_name=entity.username,
            password=entity.raw_password_value,
        )


class MemberGroupFactory:
    """
    Maps a member group to and from its node row. That's all there is to it.
    """
    object_type = ObjectTypes.MEMBER_GROUP

    @staticmethod
    def build_entity(node: models.Node) -> MemberGroup:
        return MemberGroup.hydrate(
            name=node.text,
            id=node.id,
            key=node.unique_id,
            parent_id=node.parent_id,
            path=node.path,
            level=node.level,
            sort_order=node.sort_order,
            creator_id=node.node_user or 0,
            create_date=node.create_date,
            update_date=node.create_date,
        )

    def build_node_row(self, entity: MemberGroup) -> models.Node:
        return models.Node(
            id=entity.id,
            trashed=False,
            parent_id=entity.parent_id,
            node_user=entity.creator_id,
            level=entity.level,
            path=entity.path,
            sort_order=entity.sort_order,
            unique_id=entity.key,
            text=entity.name,
            node_object_type=self.object_type,
            create_date=entity.create_date,
        )
