"""
Tests of paged member queries.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import ddt  # type: ignore[import]
import pytest

from umbraco_core.apps.persistence import api as persistence_api
from umbraco_core.apps.persistence.constants import PropertyEditors, ValueStorageType
from umbraco_core.apps.persistence.query import Query
from umbraco_core.apps.persistence.sorting import Direction

from .base import MemberTestCase


@ddt.ddt
class PagingTestCase(MemberTestCase):
    """
    Pages over rows with equal sort keys.
    """

    def setUp(self) -> None:
        super().setUp()
        self.members = [self.create_member(f"member{i}", name="Same Name", city="Same City") for i in range(5)]
        self.ids = [member.id for member in self.members]

    def pages(self, page_size, **kwargs):
        pages = []
        for page_index in range(len(self.ids) // page_size + 1):
            members, total = self.repository.get_paged_results_by_query(None, page_index, page_size, **kwargs)
            assert total == len(self.ids)
            pages.append([member.id for member in members])
        return pages

    @ddt.data(
        {"order_by": "Name"},
        {"order_by": "Name", "direction": Direction.DESCENDING},
        {"order_by": "city", "order_by_system_field": False},
        {"order_by": None},
    )
    def test_pages_do_not_overlap(self, kwargs) -> None:
        pages = self.pages(2, **kwargs)
        assert [len(page) for page in pages] == [2, 2, 1]
        assert [member_id for page in pages for member_id in page] == self.ids

    def test_page_past_the_end(self) -> None:
        members, total = self.repository.get_paged_results_by_query(None, 10, 2, "Name")
        assert members == []
        assert total == 5

    @ddt.data((-1, 10), (0, 0))
    @ddt.unpack
    def test_invalid_page(self, page_index, page_size) -> None:
        with pytest.raises(ValueError):
            self.repository.get_paged_results_by_query(None, page_index, page_size, "Name")

    def test_no_matches(self) -> None:
        members, total = self.repository.get_paged_results_by_query(
            Query().where(username="nobody"), 0, 10, "Name",
        )
        assert (members, total) == ([], 0)


class OrderingTestCase(MemberTestCase):
    """
    Ordering pages by system fields and by property values.
    """

    def setUp(self) -> None:
        super().setUp()
        self.carol = self.create_member("carol", email="c@example.com", age=300, city="Aarhus")
        self.alice = self.create_member("alice", email="b@example.com", age=5, city="Odense")
        self.bob = self.create_member("bob", email="a@example.com", age=40)
        self.dave = self.create_member("dave", email="d@example.com", city="Copenhagen")

    def usernames(self, order_by, direction=Direction.ASCENDING, order_by_system_field=True, **kwargs):
        members, _total = self.repository.get_paged_results_by_query(
            kwargs.pop("query", None), 0, 10, order_by, direction, order_by_system_field, **kwargs,
        )
        return [member.username for member in members]

    def test_order_by_name(self) -> None:
        assert self.usernames("Name") == ["alice", "bob", "carol", "dave"]
        assert self.usernames("name", Direction.DESCENDING) == ["dave", "carol", "bob", "alice"]

    def test_order_by_member_fields(self) -> None:
        assert self.usernames("Email") == ["bob", "alice", "carol", "dave"]
        assert self.usernames("LoginName", Direction.DESCENDING) == ["dave", "carol", "bob", "alice"]
        assert self.usernames("username") == ["alice", "bob", "carol", "dave"]

    def test_order_by_integer_property(self) -> None:
        # Numbers sort as numbers, and a missing value sorts first.
        assert self.usernames("age", order_by_system_field=False) == ["dave", "alice", "bob", "carol"]
        assert self.usernames("age", Direction.DESCENDING, False) == ["carol", "bob", "alice", "dave"]

    def test_order_by_text_property(self) -> None:
        assert self.usernames("city", order_by_system_field=False) == ["bob", "carol", "dave", "alice"]

    def test_order_by_latest_property_value(self) -> None:
        self.bob.start_new_version()
        self.bob.set_value("age", 1)
        self.repository.save(self.bob)
        assert self.usernames("age", order_by_system_field=False) == ["dave", "bob", "alice", "carol"]

    def test_filter(self) -> None:
        self.create_member("zed", name="Natalie")
        assert self.usernames("Name", filter="ALI") == ["alice", "zed"]

    def test_filter_and_query(self) -> None:
        query = Query().where_property("age", 10, "gt")
        assert self.usernames("Name", query=query) == ["bob", "carol"]
        assert self.usernames("Name", query=query, filter="car") == ["carol"]


class OrderingByTypedPropertyTestCase(MemberTestCase):
    """
    Ordering by decimal and date properties, and by integers of any width.
    """

    @classmethod
    def setUpTestData(cls) -> None:
        super().setUpTestData()
        decimal = persistence_api.create_data_type("Decimal", PropertyEditors.DECIMAL, ValueStorageType.DECIMAL)
        cls.measured_type = persistence_api.create_member_type(
            "measuredMember", "Measured Member", [(decimal, "height", "Height")],
        )

    def usernames(self, alias, direction=Direction.ASCENDING):
        members, _total = self.repository.get_paged_results_by_query(None, 0, 10, alias, direction, False)
        return [member.username for member in members]

    def test_order_by_decimal_property(self) -> None:
        # Different numbers of fraction digits still sort numerically.
        self.create_member("ann", member_type=self.measured_type, height=Decimal("1.5"))
        self.create_member("ben", member_type=self.measured_type, height=Decimal("1.25"))
        self.create_member("cat", member_type=self.measured_type, height=Decimal("10.5"))
        self.create_member("dan", member_type=self.measured_type, height=Decimal("9.75"))

        assert self.usernames("height") == ["ben", "ann", "dan", "cat"]
        assert self.usernames("height", Direction.DESCENDING) == ["cat", "dan", "ann", "ben"]

    def test_order_by_date_property(self) -> None:
        self.create_member("ann", birthday=datetime(1990, 6, 1, tzinfo=timezone.utc))
        self.create_member("ben", birthday=datetime(1985, 1, 1, tzinfo=timezone.utc))
        self.create_member("cat")
        self.create_member("dan", birthday=datetime(2001, 12, 31, tzinfo=timezone.utc))

        assert self.usernames("birthday") == ["cat", "ben", "ann", "dan"]

    def test_order_by_wide_integer_property(self) -> None:
        self.create_member("ann", age=123456789)
        self.create_member("ben", age=99999999)
        self.create_member("cat", age=2147483647)

        assert self.usernames("age") == ["ben", "ann", "cat"]
