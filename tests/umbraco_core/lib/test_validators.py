"""
Tests of the validators.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import ddt  # type: ignore[import]
import pytest
from django.core.exceptions import ValidationError

from umbraco_core.lib.test_utils import TestCase
from umbraco_core.lib.validators import validate_node_path, validate_utc_datetime


@ddt.ddt
class ValidatorsTestCase(TestCase):
    """
    Node paths and UTC datetimes.
    """

    @ddt.data("-1", "-1,1050", "-1,1050,1062")
    def test_valid_paths(self, path) -> None:
        validate_node_path(path)

    @ddt.data("", "1050", "-1,", "-1,,1050", "-1,abc", "-2,1050")
    def test_invalid_paths(self, path) -> None:
        with pytest.raises(ValidationError):
            validate_node_path(path)

    def test_utc_datetime(self) -> None:
        validate_utc_datetime(datetime(2020, 1, 1, tzinfo=timezone.utc))
        with pytest.raises(ValidationError):
            validate_utc_datetime(datetime(2020, 1, 1, tzinfo=timezone(timedelta(hours=2))))
