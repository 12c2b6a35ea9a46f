"""
Tests of member groups (roles) and role membership.
"""
from __future__ import annotations

from datetime import datetime, timezone

from django.core.cache import caches
from django.test import override_settings

from umbraco_core.apps.persistence import api as persistence_api
from umbraco_core.apps.persistence import models
from umbraco_core.apps.persistence.events import RepositoryEvents
from umbraco_core.apps.persistence.query import StringPropertyMatchType
from umbraco_core.apps.persistence.repositories import MemberGroupRepository, MemberRepository

from .base import MemberTestCase


class CreateGroupTestCase(MemberTestCase):
    """
    Creating groups, and the events that go with it.
    """

    def setUp(self) -> None:
        super().setUp()
        self.group_events = RepositoryEvents()
        self.groups = MemberGroupRepository(events=self.group_events)

    def test_create_if_not_exists(self) -> None:
        editors = self.groups.create_if_not_exists("Editors")
        assert editors.has_identity
        assert editors.path == f"-1,{editors.id}"
        assert editors.level == 1
        assert models.Node.objects.get(id=editors.id).text == "Editors"

        assert self.groups.create_if_not_exists("Editors") is None
        assert models.Node.objects.filter(text="Editors").count() == 1

    def test_saving_can_cancel(self) -> None:
        def receiver(sender, args, **kwargs):
            args.cancel()

        self.group_events.saving.connect(receiver)
        assert self.groups.create_if_not_exists("Editors") is None
        assert not models.Node.objects.filter(text="Editors").exists()

    def test_saved_event(self) -> None:
        saved = []

        def receiver(sender, entities, **kwargs):
            saved.extend(group.name for group in entities)

        self.group_events.saved.connect(receiver)
        self.groups.create_if_not_exists("Editors")
        self.groups.assign_roles_by_member_ids([self.create_member("alice").id], ["Editors", "Writers"])
        assert saved == ["Editors", "Writers"]

    def test_rename(self) -> None:
        editors = self.groups.create_if_not_exists("Editors")
        editors.name = "Writers"
        self.groups.save(editors)

        self.groups.set_no_cache_policy()
        assert self.groups.get(editors.id).name == "Writers"

    def test_delete(self) -> None:
        editors = self.groups.create_if_not_exists("Editors")
        alice = self.create_member("alice")
        self.groups.assign_roles(["alice"], ["Editors"])

        self.groups.delete(editors)

        assert not models.Node.objects.filter(id=editors.id).exists()
        assert not models.Member2MemberGroup.objects.filter(member_id=alice.id).exists()
        assert self.repository.get(alice.id) is not None


class GroupByNameTestCase(MemberTestCase):
    """
    Looking groups up by name, through the runtime cache.
    """

    def test_get_by_name(self) -> None:
        editors = self.groups.create_if_not_exists("Editors")
        assert self.groups.get_by_name("Editors").id == editors.id
        assert self.groups.get_by_name("Nobody") is None

    def test_cache_key(self) -> None:
        assert MemberGroupRepository.name_cache_key("Editors") == (
            "umbraco_core.apps.persistence.entities.MemberGroup.Editors"
        )

    def test_found_groups_are_cached(self) -> None:
        editors = self.groups.create_if_not_exists("Editors")
        self.groups.get_by_name("Editors")
        assert caches["default"].get(MemberGroupRepository.name_cache_key("Editors")).id == editors.id

        # The cache is not invalidated by changes made elsewhere.
        models.Node.objects.filter(id=editors.id).update(text="Renamed")
        assert self.groups.get_by_name("Editors").id == editors.id

    def test_misses_are_not_cached(self) -> None:
        assert self.groups.get_by_name("Editors") is None
        editors = self.groups.create_if_not_exists("Editors")
        assert self.groups.get_by_name("Editors").id == editors.id


class AssignRolesTestCase(MemberTestCase):
    """
    Adding members to roles and removing them again.
    """

    def setUp(self) -> None:
        super().setUp()
        self.alice = self.create_member("alice")
        self.bob = self.create_member("bob")

    def test_editors_scenario(self) -> None:
        persistence_api.assign_roles(["alice"], ["Editors"])
        assert persistence_api.get_roles_for_username("alice") == ["Editors"]
        assert persistence_api.get_roles_for_username("bob") == []

        persistence_api.dissociate_roles(["alice"], ["Editors"])
        assert persistence_api.get_roles_for_username("alice") == []
        assert persistence_api.get_role("Editors") is not None

    def test_assign_is_idempotent(self) -> None:
        self.groups.assign_roles(["alice", "bob"], ["Editors", "Writers"])
        self.groups.assign_roles(["alice", "bob", "alice"], ["Writers", "Editors"])

        assert models.Member2MemberGroup.objects.count() == 4
        assert models.Node.objects.filter(text__in=["Editors", "Writers"]).count() == 2

    def test_unknown_usernames_are_ignored(self) -> None:
        self.groups.assign_roles(["alice", "nobody"], ["Editors"])
        assert models.Member2MemberGroup.objects.count() == 1

    def test_cancelled_creation_assigns_nothing(self) -> None:
        events = RepositoryEvents()
        groups = MemberGroupRepository(events=events)

        def receiver(sender, args, **kwargs):
            args.cancel()

        events.saving.connect(receiver)
        groups.assign_roles(["alice"], ["Editors"])

        assert not models.Member2MemberGroup.objects.exists()
        assert not models.Node.objects.filter(text="Editors").exists()

    def test_existing_roles_send_no_saving_event(self) -> None:
        self.groups.create_if_not_exists("Editors")
        events = RepositoryEvents()
        sent = []

        def receiver(sender, args, **kwargs):
            sent.append(args)

        events.saving.connect(receiver)
        MemberGroupRepository(events=events).assign_roles(["alice"], ["Editors"])
        assert not sent
        assert models.Member2MemberGroup.objects.count() == 1

    def test_dissociate_only_listed_roles(self) -> None:
        self.groups.assign_roles(["alice", "bob"], ["Editors", "Writers"])
        self.groups.dissociate_roles(["alice"], ["Writers", "NoSuchRole"])

        assert [group.name for group in self.groups.get_member_groups_for_member(self.alice.id)] == ["Editors"]
        assert [group.name for group in self.groups.get_member_groups_for_username("bob")] == ["Editors", "Writers"]

    def test_by_member_ids(self) -> None:
        self.groups.assign_roles_by_member_ids([self.alice.id, self.bob.id], ["Editors"])
        self.groups.dissociate_roles_by_member_ids([self.bob.id], ["Editors"])
        assert persistence_api.get_roles_for_username("alice") == ["Editors"]
        assert persistence_api.get_roles_for_username("bob") == []

    def test_nothing_to_do(self) -> None:
        self.groups.assign_roles([], ["Editors"])
        self.groups.assign_roles(["alice"], [])
        assert not models.Node.objects.filter(text="Editors").exists()


class MembersInRoleTestCase(MemberTestCase):
    """
    Finding the members of a role.
    """

    def test_get_by_member_group(self) -> None:
        alice = self.create_member("alice", update_date=datetime(2020, 1, 1, tzinfo=timezone.utc))
        bob = self.create_member("bob", update_date=datetime(2021, 1, 1, tzinfo=timezone.utc))
        self.create_member("carol")
        self.groups.assign_roles(["alice", "bob"], ["Editors"])

        members = self.repository.get_by_member_group("Editors")
        assert [member.id for member in members] == [bob.id, alice.id]
        assert self.repository.get_by_member_group("NoSuchRole") == []

    @override_settings(UMBRACO_CORE={"ROLE_BATCH_SIZE": 2})
    def test_find_members_in_role(self) -> None:
        for username in ("alice", "alicia", "albert", "malice", "alistair"):
            self.create_member(username)
        self.groups.assign_roles(["alice", "albert", "malice", "alistair"], ["Editors"])

        found = self.repository.find_members_in_role("Editors", "ali")
        assert [member.username for member in found] == ["alice", "alistair"]

        found = self.repository.find_members_in_role("Editors", "lic", StringPropertyMatchType.CONTAINS)
        assert [member.username for member in found] == ["alice", "malice"]

        assert self.repository.find_members_in_role("NoSuchRole", "ali") == []

    def test_find_members_in_role_with_many_matches(self) -> None:
        plain = persistence_api.create_member_type("plainMember", "Plain Member")
        repository = MemberRepository(member_group_repository=self.groups)
        in_role = ["alice", "malicious"]
        self.create_member("alice", member_type=plain)
        self.create_member("malicious", member_type=plain)
        for i in range(1000):
            username = f"alibaba{i:04}"
            self.create_member(username, member_type=plain)
            if i % 2 == 0:
                in_role.append(username)
        self.groups.assign_roles(in_role, ["Editors"])

        found = repository.find_members_in_role("Editors", "ali")

        assert len(found) == 501
        assert found[0].username == "alice"
        assert "malicious" not in {member.username for member in found}
        assert all(member.username == "alice" or int(member.username[-4:]) % 2 == 0 for member in found)
