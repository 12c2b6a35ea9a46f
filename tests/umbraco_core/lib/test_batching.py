"""
Tests of splitting lookups into batches.
"""
from __future__ import annotations

import pytest

from umbraco_core.lib.batching import fetch_by_groups, in_groups_of
from umbraco_core.lib.test_utils import TestCase


class BatchingTestCase(TestCase):
    """
    in_groups_of and fetch_by_groups.
    """

    def test_in_groups_of(self) -> None:
        assert list(in_groups_of(range(5), 2)) == [[0, 1], [2, 3], [4]]
        assert list(in_groups_of([], 2)) == []
        assert list(in_groups_of(iter("abc"), 3)) == [["a", "b", "c"]]

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError):
            list(in_groups_of([1], 0))

    def test_fetch_by_groups(self) -> None:
        fetched = []

        def fetch(group):
            fetched.append(group)
            return [value * 10 for value in group]

        assert fetch_by_groups(range(2001), 1000, fetch) == [value * 10 for value in range(2001)]
        assert [len(group) for group in fetched] == [1000, 1000, 1]
