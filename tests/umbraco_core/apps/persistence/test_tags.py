"""
Tests of tag support: editors, parsing, and keeping stored tags in sync.
"""
from __future__ import annotations

import ddt  # type: ignore[import]

from umbraco_core.apps.persistence import api as persistence_api
from umbraco_core.apps.persistence import models
from umbraco_core.apps.persistence.constants import PropertyEditors
from umbraco_core.apps.persistence.editors import (
    PropertyEditor,
    PropertyTagBehavior,
    TagCacheStorageType,
    TagSupport,
    get_registry,
    tag_support_for,
)
from umbraco_core.apps.persistence.repositories import TaggedValue, TagRepository
from umbraco_core.lib.test_utils import TestCase

from .base import MemberTestCase


@ddt.ddt
class TagSupportTestCase(TestCase):
    """
    Which editors produce tags, and how values are parsed.
    """

    def test_builtin_editors(self) -> None:
        assert tag_support_for(PropertyEditors.TAGS) is not None
        assert tag_support_for(PropertyEditors.TEXTBOX) is None
        assert tag_support_for("Some.Unknown.Editor") is None
        assert PropertyEditors.TAGS in get_registry()
        assert "Some.Unknown.Editor" not in get_registry()

    def test_registering_editor(self) -> None:
        class KeywordsEditor(PropertyEditor):
            alias = "Test.Keywords"
            tag_support = TagSupport(delimiter=";", replace_tags=False)

        assert tag_support_for("Test.Keywords") is None
        get_registry().register(KeywordsEditor())
        support = tag_support_for("Test.Keywords")
        assert support.behavior == PropertyTagBehavior.MERGE
        assert support.extract("a; b", {}) == {("a", "default"), ("b", "default")}

    @ddt.data(
        ("cats, dogs,,cats", {}, {("cats", "default"), ("dogs", "default")}),
        ("cats", {"group": "pets"}, {("cats", "pets")}),
        ('["cats", " dogs "]', {"storageType": "Json"}, {("cats", "default"), ("dogs", "default")}),
        (["cats", "dogs"], {}, {("cats", "default"), ("dogs", "default")}),
        ("", {}, set()),
        (None, {"group": "pets"}, set()),
    )
    @ddt.unpack
    def test_extract(self, value, pre_values, expected) -> None:
        assert TagSupport().extract(value, pre_values) == expected

    def test_json_storage(self) -> None:
        support = TagSupport(storage_type=TagCacheStorageType.JSON)
        assert support.extract('["a"]', {}) == {("a", "default")}
        assert support.extract("a,b", {"storageType": "Csv"}) == {("a", "default"), ("b", "default")}


class TagRepositoryTestCase(MemberTestCase):
    """
    Assigning tags to the properties of members directly.
    """

    def setUp(self) -> None:
        super().setUp()
        self.tags = TagRepository()
        self.alice = self.create_member("alice")
        self.interests_id = self.member_type.property_type("interests").id
        self.city_id = self.member_type.property_type("city").id

    def texts(self, **kwargs):
        return [tag.text for tag in self.tags.get_tags_for_entity(self.alice.id, **kwargs)]

    def test_assign_replace_and_merge(self) -> None:
        self.tags.assign_tags_to_property(self.alice.id, self.interests_id, [("a", "x"), ("b", "x")])
        self.tags.assign_tags_to_property(self.alice.id, self.interests_id, [("c", "x")], replace_tags=False)
        assert self.texts() == ["a", "b", "c"]
        self.tags.assign_tags_to_property(self.alice.id, self.interests_id, [("c", "x")])
        assert self.texts() == ["c"]

    def test_remove_and_clear(self) -> None:
        self.tags.assign_tags_to_property(self.alice.id, self.interests_id, [("a", "x"), ("b", "x")])
        self.tags.assign_tags_to_property(self.alice.id, self.city_id, [("a", "y")])
        self.tags.remove_tags_from_property(self.alice.id, self.interests_id, [("a", "x")])
        assert self.tags.get_tags_for_entity(self.alice.id) == [
            TaggedValue("b", "x", models.Tag.objects.get(tag="b").id),
            TaggedValue("a", "y", models.Tag.objects.get(tag="a", group="y").id),
        ]

        self.tags.clear_tags_from_entity(self.alice.id)
        assert self.texts() == []
        # Tags are shared and outlive their assignments.
        assert models.Tag.objects.count() == 3

    def test_filters(self) -> None:
        self.tags.assign_tags_to_property(self.alice.id, self.interests_id, [("a", "x"), ("b", "y")])
        self.tags.assign_tags_to_property(self.alice.id, self.city_id, [("c", "x")])
        assert self.texts(group="x") == ["a", "c"]
        assert [tag.text for tag in self.tags.get_tags_for_property(self.alice.id, "interests")] == ["a", "b"]
        assert [tag.text for tag in self.tags.get_tags_for_property(self.alice.id, "interests", "y")] == ["b"]


class MemberTagsTestCase(MemberTestCase):
    """
    Saving a member keeps the tags of its tag properties in line.
    """

    def tags_of(self, member):
        return [(tag.text, tag.group) for tag in persistence_api.get_tags_for_member(member.id)]

    def test_tags_from_value(self) -> None:
        alice = self.create_member("alice", interests="cats, dogs", city="no, tags, here")
        # The group comes from the data type's pre-values.
        assert self.tags_of(alice) == [("cats", "interests"), ("dogs", "interests")]
        assert self.repository.has_tag_property(alice)

    def test_changed_value_replaces_tags(self) -> None:
        alice = self.create_member("alice", interests="cats,dogs")
        loaded = self.uncached_repository().get(alice.id)
        assert loaded.properties["interests"].tags.tags == {("cats", "interests"), ("dogs", "interests")}

        loaded.set_value("interests", "dogs,fish")
        self.repository.save(loaded)
        assert self.tags_of(alice) == [("dogs", "interests"), ("fish", "interests")]

    def test_explicit_tag_changes(self) -> None:
        alice = self.create_member("alice", interests="cats,dogs")

        alice.properties["interests"].remove_tags(["cats"], group="interests")
        self.repository.save(alice)
        assert self.tags_of(alice) == [("dogs", "interests")]

        alice.properties["interests"].assign_tags(["birds"], replace=False, group="interests")
        self.repository.save(alice)
        assert self.tags_of(alice) == [("birds", "interests"), ("dogs", "interests")]

    def test_unchanged_save_keeps_tags(self) -> None:
        alice = self.create_member("alice", interests="cats")
        alice.name = "Alice L."
        self.repository.save(alice)
        assert self.tags_of(alice) == [("cats", "interests")]

    def test_clear_entity_tags(self) -> None:
        alice = self.create_member("alice", interests="cats")
        self.repository.clear_entity_tags(alice)
        assert self.tags_of(alice) == []
