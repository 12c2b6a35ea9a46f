"""
Tests of the tables and the seeded root node.
"""
from __future__ import annotations

import pytest
from django.core.exceptions import ValidationError

from umbraco_core.apps.persistence import models
from umbraco_core.apps.persistence.constants import ROOT_NODE_ID, ROOT_NODE_PATH, ObjectTypes

from .base import MemberTestCase


class RootNodeTestCase(MemberTestCase):
    """
    The node every other node descends from.
    """

    def test_root_node(self) -> None:
        root = models.Node.objects.get(id=ROOT_NODE_ID)
        assert root.path == ROOT_NODE_PATH
        assert root.level == 0
        assert root.node_object_type == ObjectTypes.SYSTEM_ROOT

    def test_children(self) -> None:
        alice = self.create_member("alice")
        root = models.Node.objects.get(id=ROOT_NODE_ID)
        assert alice.id in set(root.children.values_list("id", flat=True))

    def test_invalid_path(self) -> None:
        node = models.Node.objects.get(id=ROOT_NODE_ID)
        node.path = "1050,-1"
        with pytest.raises(ValidationError):
            node.full_clean()


class MemberRowsTestCase(MemberTestCase):
    """
    Relations between the rows of a member.
    """

    def test_relations(self) -> None:
        alice = self.create_member("alice", city="Aarhus")
        self.groups.assign_roles(["alice"], ["Editors"])

        member = models.Member.objects.select_related("content__node").get(content_id=alice.id)
        assert member.content.node.text == "Alice"
        assert member.content.content_type.alias == "standardMember"
        assert member.content.versions.get().version_id == alice.version
        assert [link.member_group.text for link in member.group_links.all()] == ["Editors"]
        assert member.content.node.member_links.count() == 0
        city = models.PropertyData.objects.get(node_id=alice.id, property_type__alias="city")
        assert city.data_nvarchar == "Aarhus"
        assert city.version.version_id == alice.version
