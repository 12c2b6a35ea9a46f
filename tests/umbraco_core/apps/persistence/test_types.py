"""
Tests of data types and member types.
"""
from __future__ import annotations

import pytest
from django.core.cache import caches

from umbraco_core.apps.persistence import api as persistence_api
from umbraco_core.apps.persistence import models
from umbraco_core.apps.persistence.constants import PropertyEditors, ValueStorageType
from umbraco_core.apps.persistence.entities import MemberType, PropertyType
from umbraco_core.apps.persistence.repositories import DataTypeRepository, MemberTypeRepository
from umbraco_core.apps.persistence.repositories.data_type import pre_value_cache_key, pre_value_cache_key_regex

from .base import MemberTestCase


class DataTypeTestCase(MemberTestCase):
    """
    Data types and their pre-values.
    """

    def setUp(self) -> None:
        super().setUp()
        self.data_types = DataTypeRepository()

    def test_get(self) -> None:
        data_type = self.data_types.get(self.numeric.id)
        assert data_type.name == "Numeric"
        assert data_type.property_editor_alias == PropertyEditors.INTEGER
        assert data_type.storage_type == ValueStorageType.INTEGER
        assert data_type.key == self.numeric.key
        assert self.data_types.get(self.member_type.id) is None

    def test_get_by_editor_alias(self) -> None:
        more_tags = persistence_api.create_data_type("More Tags", PropertyEditors.TAGS)
        data_types = self.data_types.get_by_editor_alias(PropertyEditors.TAGS)
        assert [data_type.id for data_type in data_types] == [self.tags.id, more_tags.id]

    def test_update(self) -> None:
        data_type = self.data_types.get(self.textbox.id)
        data_type.name = "Text"
        data_type.storage_type = ValueStorageType.NTEXT
        self.data_types.save(data_type, {"maxChars": "100"})

        data_type = self.data_types.get(self.textbox.id)
        assert (data_type.name, data_type.storage_type) == ("Text", ValueStorageType.NTEXT)
        assert self.data_types.get_pre_values(self.textbox.id) == {"maxChars": "100"}

    def test_pre_value_as_string(self) -> None:
        pre_value = models.DataTypePreValue.objects.get(data_type_id=self.tags.id)
        assert self.data_types.get_pre_value_as_string(self.tags.id, pre_value.id) == "interests"
        key = pre_value_cache_key(self.tags.id, pre_value.id)
        assert caches["default"].get(key) == "interests"
        assert self.data_types.get_pre_value_as_string(self.tags.id, pre_value.id + 1000) is None

        # Replacing the pre-values evicts the cached ones.
        self.data_types.save(self.data_types.get(self.tags.id), {"group": "hobbies"})
        assert caches["default"].get(key) is None

    def test_pre_value_cache_keys(self) -> None:
        assert pre_value_cache_key(1050, 7) == "UmbracoPreVal1050-7"
        regex = pre_value_cache_key_regex(1050)
        assert regex.match("UmbracoPreVal1050-7").group("pre_value_id") == "7"
        assert not regex.match("UmbracoPreVal10501-7")
        assert not regex.match("UmbracoPreVal1050-")


class MemberTypeTestCase(MemberTestCase):
    """
    Member types and their property types.
    """

    def setUp(self) -> None:
        super().setUp()
        self.member_types = MemberTypeRepository()
        self.member_types.set_no_cache_policy()

    def test_round_trip(self) -> None:
        member_type = self.member_types.get(self.member_type.id)
        assert member_type.alias == "standardMember"
        assert member_type.name == "Standard Member"
        assert member_type.icon == "icon-user"
        assert [pt.alias for pt in member_type.property_types] == ["city", "age", "birthday", "interests"]
        assert member_type.property_type("age").storage_type == ValueStorageType.INTEGER
        assert member_type.property_type("interests").data_type_id == self.tags.id
        assert not member_type.is_dirty()

    def test_get_by_alias(self) -> None:
        assert self.member_types.get_by_alias("standardMember").id == self.member_type.id
        assert self.member_types.get_by_alias("nope") is None
        assert persistence_api.get_member_type_by_alias("standardMember").id == self.member_type.id

    def test_add_property_type(self) -> None:
        member_type = self.member_types.get(self.member_type.id)
        member_type.property_types.append(PropertyType.for_data_type(self.textbox, "nickname", "Nickname"))
        member_type.description = "Members with nicknames"
        self.member_types.save(member_type)

        loaded = self.member_types.get(self.member_type.id)
        assert loaded.description == "Members with nicknames"
        assert loaded.property_types[-1].alias == "nickname"
        assert loaded.property_types[-1].sort_order == 5

    def test_property_type_needs_data_type(self) -> None:
        member_type = MemberType(
            "broken",
            "Broken",
            [PropertyType("x", "X", PropertyEditors.TEXTBOX, ValueStorageType.NVARCHAR)],
        )
        with pytest.raises(ValueError):
            self.member_types.save(member_type)
        assert self.member_types.get_by_alias("broken") is None

    def test_members_of_new_type(self) -> None:
        member = persistence_api.create_member(
            self.member_types.get(self.member_type.id), "Alice", "alice@example.com", "alice", values={"age": 3},
        )
        assert persistence_api.get_member(member.id).get_value("age") == 3
        assert persistence_api.count_members("standardMember") == 1
