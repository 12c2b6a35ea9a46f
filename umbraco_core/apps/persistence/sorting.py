"""
Ordering paged results by a system field or by a custom property.

A sort is requested with an ``order_by`` string and a flag saying whether it
names a system field (a column every entity has, like its name or create date)
or the alias of a property type. Either way, the result is always ordered by
node id last, so that pages over rows with equal sort keys never overlap or
skip rows.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Mapping

from django.db import connection
from django.db.models import (
    BigIntegerField,
    Case,
    CharField,
    DecimalField,
    ExpressionWrapper,
    F,
    OrderBy,
    OuterRef,
    QuerySet,
    Subquery,
    Value,
    When,
)
from django.db.models.expressions import Expression, RawSQL
from django.db.models.functions import Cast, Coalesce, Concat, Floor, LPad, Round

from .models import ContentVersion, PropertyData

# Name of the annotation holding the sort value of a custom property.
CUSTOM_SORT_ANNOTATION = "custom_sort_value"

# Sort values of integers are zero padded to this width, enough for any 32 bit
# value. Decimals are written with a fixed number of fraction digits and
# padded to DECIMAL_WIDTH in all, dot included.
INTEGER_WIDTH = 10
DECIMAL_WIDTH = 20
DECIMAL_SCALE = 9


class Direction(Enum):
    ASCENDING = "Ascending"
    DESCENDING = "Descending"


# System field name (upper case) -> (table, column)
SYSTEM_FIELDS: dict[str, tuple[str, str]] = {
    "VERSIONDATE": ("cmsContentVersion", "versionDate"),
    "UPDATEDATE": ("cmsContentVersion", "versionDate"),
    "CREATEDATE": ("umbracoNode", "createDate"),
    "NAME": ("umbracoNode", "text"),
    "PUBLISHED": ("cmsDocument", "published"),
    "OWNER": ("umbracoNode", "nodeUser"),
    "PATH": ("umbracoNode", "path"),
    "SORTORDER": ("umbracoNode", "sortOrder"),
}

_INVALID_ORDER_BY_CHARS = re.compile(r"[^\w\.,`\[\]@-]")


def sanitize_order_by(order_by: str) -> str:
    """
    Strip everything but word characters and ``.,`[]@-`` from ``order_by``.
    """
    return _INVALID_ORDER_BY_CHARS.sub("", order_by)


def get_database_field_name_for_order_by(
    order_by: str,
    system_fields: Mapping[str, tuple[str, str]] = SYSTEM_FIELDS,
) -> tuple[str, str] | str:
    """
    The (table, column) of a known system field, else the sanitized name.
    """
    column = system_fields.get(order_by.upper())
    if column is not None:
        return column
    return sanitize_order_by(order_by)


def system_field_expression(
    order_by: str,
    column_paths: Mapping[tuple[str, str], str],
    system_fields: Mapping[str, tuple[str, str]] = SYSTEM_FIELDS,
) -> Expression:
    """
    Expression ordering by a system field.

    ``column_paths`` maps the (table, column) pairs the base queryset can
    reach onto lookup paths. Anything else, including unknown field names,
    is passed on as raw SQL.
    """
    column = get_database_field_name_for_order_by(order_by, system_fields)
    if isinstance(column, tuple):
        path = column_paths.get(column)
        if path is not None:
            return F(path)
        table, name = column
        return RawSQL(f"{connection.ops.quote_name(table)}.{connection.ops.quote_name(name)}", ())
    if not column:
        raise ValueError(f"Cannot order by {order_by!r}")
    return RawSQL(column, ())


def _zero_padded(expression, width: int) -> LPad:
    return LPad(Cast(expression, CharField()), width, Value("0"))


def _fixed_scale(column: str) -> Concat:
    """
    ``column`` as text with exactly DECIMAL_SCALE fraction digits, so that
    1.5 and 1.25 come out as 0000000001.500000000 and 0000000001.250000000.

    Negative values don't sort numerically.
    """
    whole = Floor(column)
    fraction = ExpressionWrapper((F(column) - whole) * Value(10 ** DECIMAL_SCALE), output_field=DecimalField())
    return Concat(
        _zero_padded(Cast(whole, BigIntegerField()), DECIMAL_WIDTH - DECIMAL_SCALE - 1),
        Value("."),
        _zero_padded(Cast(Round(fraction), BigIntegerField()), DECIMAL_SCALE),
        output_field=CharField(),
    )


def orderable_value() -> Case:
    """
    One sortable string per property data row.

    The typed columns are checked in a fixed order, integer, decimal, date and
    then short text. Numbers are zero padded to a fixed width so they sort as
    strings.
    """
    return Case(
        When(data_int__isnull=False, then=_zero_padded("data_int", INTEGER_WIDTH)),
        When(data_decimal__isnull=False, then=_fixed_scale("data_decimal")),
        When(data_date__isnull=False, then=Cast("data_date", CharField())),
        default=Coalesce("data_nvarchar", Value("")),
        output_field=CharField(),
    )


def custom_property_expression(alias: str, table: str, node_path: str, version_path: str) -> Subquery:
    """
    The sort value of the property with ``alias``, per row of the outer query.

    ``table`` says what property rows are matched on: ``cmsMember`` matches
    any version of the node, ``cmsContentVersion`` the row's own version. The
    newest matching version wins.
    """
    if table == "cmsMember":
        match = {"node_id": OuterRef(node_path)}
    elif table == "cmsContentVersion":
        match = {"node_id": OuterRef(node_path), "version_id": OuterRef(version_path)}
    else:
        raise ValueError(f"Sorting by a custom property is not supported for table {table!r}")

    # The version date comes from its own subquery. Ordering through the
    # ``version`` relation would join cmsContentVersion unaliased, hiding the
    # outer query's table of the same name from OuterRef.
    version_date = ContentVersion.objects.filter(version_id=OuterRef("version_id")).values("version_date")[:1]
    rows = (
        PropertyData.objects
        .filter(property_type__alias=alias, **match)
        .annotate(orderable=orderable_value(), version_date=Subquery(version_date))
        .order_by("-version_date", "-id")
        .values("orderable")[:1]
    )
    return Subquery(rows, output_field=CharField())


def apply_ordering(
    queryset: QuerySet,
    order_by: str | None,
    direction: Direction,
    order_by_system_field: bool,
    *,
    column_paths: Mapping[tuple[str, str], str],
    table: str,
    node_path: str,
    version_path: str,
    system_fields: Mapping[str, tuple[str, str]] = SYSTEM_FIELDS,
) -> QuerySet:
    """
    Order ``queryset`` as requested, then by node id.
    """
    if not order_by:
        return queryset.order_by(node_path)

    if order_by_system_field:
        expression = system_field_expression(order_by, column_paths, system_fields)
    else:
        queryset = queryset.annotate(
            **{CUSTOM_SORT_ANNOTATION: custom_property_expression(order_by, table, node_path, version_path)}
        )
        expression = F(CUSTOM_SORT_ANNOTATION)

    ordering: OrderBy = expression.desc() if direction == Direction.DESCENDING else expression.asc()
    return queryset.order_by(ordering, node_path)
