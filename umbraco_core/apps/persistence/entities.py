"""
Domain entities handed out by the repositories.

These are plain Python objects, not Django models: one Member spans rows in
five tables plus its property data, and callers work with it as a whole.

Every entity tracks which of its fields changed since it was created or last
saved, so that saving can write only what changed. There are two ways to build
one:

* Calling the class, e.g. ``Member(...)``, makes a new entity. Every field
  assigned in ``__init__`` counts as changed.
* ``Member.hydrate(...)`` rebuilds an entity from stored state. Tracking is
  switched on only after all the state is assigned, so a freshly read entity
  is never dirty.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Iterable, Iterator
from uuid import UUID, uuid4

from attrs import define, field, frozen
from django.utils import timezone

from .constants import ROOT_NODE_ID, STANDARD_MEMBER_PROPERTIES, ValueStorageType
from .editors import PropertyTagBehavior


class TracksChanges:
    """
    Mixin recording which of ``tracked_fields`` were assigned a new value.
    """
    tracked_fields: ClassVar[frozenset[str]] = frozenset()

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.tracked_fields and self.__dict__.get("_tracking", True):
            if name not in self.__dict__ or self.__dict__[name] != value:
                self.__dict__.setdefault("_dirty", set()).add(name)
        super().__setattr__(name, value)

    @classmethod
    def hydrate(cls, *args, **kwargs):
        """
        Build an instance from stored state, with no field marked as changed.
        """
        instance = cls.__new__(cls)
        instance._tracking = False
        instance.__init__(*args, **kwargs)
        instance._tracking = True
        return instance

    @property
    def dirty_properties(self) -> frozenset[str]:
        return frozenset(self.__dict__.get("_dirty", ()))

    def is_dirty(self) -> bool:
        return bool(self.__dict__.get("_dirty"))

    def is_property_dirty(self, name: str) -> bool:
        return name in self.__dict__.get("_dirty", ())

    def reset_dirty_properties(self) -> None:
        self.__dict__.get("_dirty", set()).clear()


class EntityBase(TracksChanges):
    """
    Identity and timestamps common to every entity.
    """
    tracked_fields = frozenset({"id", "key", "create_date", "update_date"})

    def __init__(
        self,
        *,
        id: int | None = None,  # pylint: disable=redefined-builtin
        key: UUID | None = None,
        create_date: datetime | None = None,
        update_date: datetime | None = None,
    ):
        self.id = id
        self.key = key or uuid4()
        self.create_date = create_date
        self.update_date = update_date

    @property
    def has_identity(self) -> bool:
        return self.id is not None

    def adding_entity(self) -> None:
        """
        Stamp the dates of an entity about to be inserted.

        Dates the caller set explicitly are kept.
        """
        now = timezone.now()
        if not self.is_property_dirty("create_date") or self.create_date is None:
            self.create_date = now
        if not self.is_property_dirty("update_date") or self.update_date is None:
            self.update_date = now

    def updating_entity(self) -> None:
        """
        Stamp the update date of an entity about to be updated.
        """
        if not self.is_property_dirty("update_date") or self.update_date is None:
            self.update_date = timezone.now()

    def __repr__(self):
        return f"<{type(self).__name__} {self.id}>"


@define
class DataTypeDefinition:
    """
    A property editor plus the column its values are stored in.
    """
    name: str
    property_editor_alias: str
    storage_type: ValueStorageType = ValueStorageType.NVARCHAR
    id: int | None = None
    key: UUID = field(factory=uuid4)

    @property
    def has_identity(self) -> bool:
        return self.id is not None


@define
class PropertyType:
    """
    One named field declared on a member type.

    ``data_type_id`` is the node id of the data type. Property types built in
    memory for standard member properties the member type doesn't declare have
    neither, and are never persisted.
    """
    alias: str
    name: str
    property_editor_alias: str
    storage_type: ValueStorageType
    data_type_id: int | None = None
    id: int | None = None
    key: UUID = field(factory=uuid4)
    sort_order: int = 0
    mandatory: bool = False
    description: str | None = None
    validation_reg_exp: str | None = None

    @property
    def has_identity(self) -> bool:
        return self.id is not None

    @classmethod
    def for_data_type(cls, data_type: DataTypeDefinition, alias: str, name: str, **kwargs) -> PropertyType:
        return cls(
            alias=alias,
            name=name,
            property_editor_alias=data_type.property_editor_alias,
            storage_type=data_type.storage_type,
            data_type_id=data_type.id,
            **kwargs,
        )


@frozen
class PropertyTags:
    """
    Tags to apply to a property when its entity is saved.
    """
    behavior: PropertyTagBehavior
    tags: frozenset[tuple[str, str]] = frozenset()


class Property(TracksChanges):
    """
    The value of one property type on one version of an entity.
    """
    tracked_fields = frozenset({"id", "value", "tags"})

    def __init__(
        self,
        property_type: PropertyType,
        value: Any = None,
        *,
        id: int | None = None,  # pylint: disable=redefined-builtin
        tags: PropertyTags | None = None,
    ):
        self.property_type = property_type
        self.id = id
        self.value = value
        self.tags = tags

    @property
    def alias(self) -> str:
        return self.property_type.alias

    @property
    def has_identity(self) -> bool:
        return self.id is not None

    def assign_tags(self, tags: Iterable[str], replace: bool = True, group: str = "default") -> None:
        behavior = PropertyTagBehavior.REPLACE if replace else PropertyTagBehavior.MERGE
        self.tags = PropertyTags(behavior, frozenset((tag, group) for tag in tags))

    def remove_tags(self, tags: Iterable[str], group: str = "default") -> None:
        self.tags = PropertyTags(PropertyTagBehavior.REMOVE, frozenset((tag, group) for tag in tags))

    def __repr__(self):
        return f"<Property {self.alias}={self.value!r}>"


class PropertyCollection:
    """
    The properties of an entity, by property type alias.
    """
    def __init__(self, properties: Iterable[Property] = ()):
        self._properties: dict[str, Property] = {}
        for prop in properties:
            self.add(prop)

    def add(self, prop: Property) -> None:
        self._properties[prop.alias] = prop

    def __getitem__(self, alias: str) -> Property:
        return self._properties[alias]

    def __contains__(self, alias: str) -> bool:
        return alias in self._properties

    def __iter__(self) -> Iterator[Property]:
        return iter(self._properties.values())

    def __len__(self) -> int:
        return len(self._properties)

    @property
    def aliases(self) -> list[str]:
        return list(self._properties)

    def is_dirty(self) -> bool:
        return any(prop.is_dirty() for prop in self)

    def reset_dirty_properties(self) -> None:
        for prop in self:
            prop.reset_dirty_properties()


class MemberType(EntityBase):
    """
    The content type of members: which properties they carry.
    """
    tracked_fields = EntityBase.tracked_fields | {"alias", "name", "description", "icon"}

    def __init__(
        self,
        alias: str,
        name: str,
        property_types: Iterable[PropertyType] = (),
        *,
        description: str | None = None,
        icon: str = "icon-user",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.alias = alias
        self.name = name
        self.description = description
        self.icon = icon
        self.property_types = list(property_types)

    def property_type(self, alias: str) -> PropertyType | None:
        for property_type in self.property_types:
            if property_type.alias == alias:
                return property_type
        return None


def _standard_property_type(alias: str) -> PropertyType:
    name, editor_alias, storage_type = STANDARD_MEMBER_PROPERTIES[alias]
    return PropertyType(alias=alias, name=name, property_editor_alias=editor_alias, storage_type=storage_type)


class ContentBase(EntityBase):
    """
    Fields of any node that has a content type and versions.
    """
    tracked_fields = EntityBase.tracked_fields | {
        "name",
        "parent_id",
        "path",
        "level",
        "sort_order",
        "trashed",
        "creator_id",
        "content_type",
        "version",
        "properties",
    }

    def __init__(
        self,
        name: str,
        content_type: MemberType,
        *,
        parent_id: int = ROOT_NODE_ID,
        properties: PropertyCollection | None = None,
        version: UUID | None = None,
        path: str | None = None,
        level: int | None = None,
        sort_order: int = 0,
        trashed: bool = False,
        creator_id: int = 0,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.name = name
        self.content_type = content_type
        self.parent_id = parent_id
        self.version = version or uuid4()
        self.path = path
        self.level = level
        self.sort_order = sort_order
        self.trashed = trashed
        self.creator_id = creator_id
        if properties is None:
            properties = PropertyCollection(Property.hydrate(pt) for pt in content_type.property_types)
        self.properties = properties

    @property
    def content_type_id(self) -> int | None:
        return self.content_type.id

    def is_dirty(self) -> bool:
        return super().is_dirty() or self.properties.is_dirty()

    def reset_dirty_properties(self) -> None:
        super().reset_dirty_properties()
        self.properties.reset_dirty_properties()

    def get_value(self, alias: str) -> Any:
        if alias not in self.properties:
            return None
        return self.properties[alias].value

    def set_value(self, alias: str, value: Any) -> None:
        """
        Set the value of a property, which must exist on the content type.
        """
        if alias not in self.properties:
            raise ValueError(f"No property type with alias {alias!r} on {self.content_type.alias!r}")
        self.properties[alias].value = value

    def start_new_version(self) -> None:
        """
        Make the next save write a new version instead of updating this one.
        """
        self.version = uuid4()


class Member(ContentBase):
    """
    A member: a login, an email, and the properties of its member type.

    Every member also carries the standard member properties (approved, locked
    out, last login date, ...). Those its member type doesn't declare are kept
    in memory only.
    """
    tracked_fields = ContentBase.tracked_fields | {"email", "username", "raw_password_value"}

    def __init__(
        self,
        name: str,
        email: str,
        username: str,
        member_type: MemberType,
        *,
        raw_password_value: str | None = None,
        properties: PropertyCollection | None = None,
        **kwargs,
    ):
        if properties is None:
            properties = PropertyCollection(Property.hydrate(pt) for pt in member_type.property_types)
        else:
            # The standard properties are added to a copy; the caller's
            # collection is left as it was.
            properties = PropertyCollection(properties)
        for alias in STANDARD_MEMBER_PROPERTIES:
            if alias not in properties:
                properties.add(Property.hydrate(_standard_property_type(alias)))
        super().__init__(name, member_type, properties=properties, **kwargs)
        self.email = email
        self.username = username
        self.raw_password_value = raw_password_value

    @property
    def content_type_alias(self) -> str:
        return self.content_type.alias

    def __repr__(self):
        return f"<Member {self.id}: {self.username}>"


class MemberGroup(EntityBase):
    """
    A named role members can be assigned to.
    """
    tracked_fields = EntityBase.tracked_fields | {"name", "parent_id", "path", "level", "sort_order", "creator_id"}

    def __init__(
        self,
        name: str,
        *,
        parent_id: int = ROOT_NODE_ID,
        path: str | None = None,
        level: int = 1,
        sort_order: int = 0,
        creator_id: int = 0,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.name = name
        self.parent_id = parent_id
        self.path = path
        self.level = level
        self.sort_order = sort_order
        self.creator_id = creator_id

    def __repr__(self):
        return f"<MemberGroup {self.id}: {self.name}>"
