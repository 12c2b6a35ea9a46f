"""
Tests of entity queries and their translation into ORM filters.
"""
from __future__ import annotations

import ddt  # type: ignore[import]
import pytest
from django.db.models import Q

from umbraco_core.apps.persistence.query import Query, QueryTranslator, StringPropertyMatchType, string_match

from .base import MemberTestCase


@ddt.ddt
class StringMatchTestCase(MemberTestCase):
    """
    Case-insensitive string predicates.
    """

    @ddt.data(
        (StringPropertyMatchType.EXACT, "Alice", ["alice"]),
        (StringPropertyMatchType.STARTS_WITH, "ALI", ["alice", "alicia"]),
        (StringPropertyMatchType.ENDS_WITH, "ice", ["alice", "malice"]),
        (StringPropertyMatchType.CONTAINS, "lic", ["alice", "alicia", "malice"]),
        (StringPropertyMatchType.WILDCARD, "a?ic*", ["alice", "alicia"]),
    )
    @ddt.unpack
    def test_match_usernames(self, match_type, value, expected) -> None:
        for username in ("alice", "alicia", "malice", "bob"):
            self.create_member(username)
        members = self.repository.get_by_query(Query().where_string("username", value, match_type))
        assert sorted(member.username for member in members) == expected

    def test_unsupported_match_type(self) -> None:
        with pytest.raises(ValueError):
            string_match("username", "alice", "Fuzzy")


class QueryTranslatorTestCase(MemberTestCase):
    """
    Mapping entity attributes onto lookups of the base queryset.
    """

    def test_translate_maps_attributes(self) -> None:
        translator = QueryTranslator({"username": "content__member__login_name"})
        q = translator.translate(Query().where(username__istartswith="ali"))
        assert q == Q(content__member__login_name__istartswith="ali")

    def test_translate_keeps_nesting(self) -> None:
        translator = QueryTranslator({"username": "login_name", "email": "mail"})
        query = Query().where(Q(username="a") | ~Q(email="b"))
        assert translator.translate(query) == Q(login_name="a") | ~Q(mail="b")

    def test_empty_query(self) -> None:
        translator = QueryTranslator({})
        assert translator.translate(None) == Q()
        assert translator.translate(Query()) == Q()
        assert not Query()

    def test_unknown_field(self) -> None:
        with pytest.raises(ValueError):
            self.repository.get_by_query(Query().where(shoe_size=42))

    def test_property_query_needs_versions(self) -> None:
        translator = QueryTranslator({"name": "text"})
        with pytest.raises(ValueError):
            translator.translate(Query().where_property("city", "Aarhus"))

    def test_to_sql(self) -> None:
        query = Query().where(username__istartswith="ali")
        sql, params = self.repository.translator.to_sql(self.repository.get_base_queryset(), query)
        assert "cmsMember" in sql
        assert "LoginName" in sql
        assert any("ali" in str(param) for param in params)


class PropertyQueryTestCase(MemberTestCase):
    """
    Predicates on property values.
    """

    def setUp(self) -> None:
        super().setUp()
        self.alice = self.create_member("alice", city="Aarhus", age=31)
        self.bob = self.create_member("bob", city="Odense", age=45)

    def test_text_property(self) -> None:
        members = self.repository.get_by_query(Query().where_property("city", "Aarhus"))
        assert [member.username for member in members] == ["alice"]

    def test_integer_property(self) -> None:
        members = self.repository.get_by_query(Query().where_property("age", 40, "gt"))
        assert [member.username for member in members] == ["bob"]

    def test_only_latest_version_matches(self) -> None:
        self.alice.start_new_version()
        self.alice.set_value("city", "Copenhagen")
        self.repository.save(self.alice)

        assert not self.repository.get_by_query(Query().where_property("city", "Aarhus"))
        assert self.repository.get_count_by_query(Query().where_property("city", "Copenhagen")) == 1

    def test_combined_with_attributes(self) -> None:
        query = Query().where(email__iendswith="@example.com").where_property("age", 31)
        members = self.repository.get_by_query(query)
        assert [member.id for member in members] == [self.alice.id]
