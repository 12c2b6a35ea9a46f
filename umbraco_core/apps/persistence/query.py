"""
Predicates over entities, and their translation into ORM filters.

Callers describe what they want in terms of entity attributes::

    query = Query().where(username__istartswith="ali").where_property("city", "Aarhus")

Each repository owns a ``QueryTranslator`` that knows how those attributes map
onto the lookups of its own base queryset. A predicate naming an attribute the
translator doesn't know raises ``ValueError`` rather than silently matching
everything.
"""
from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from django.db.models import Exists, OuterRef, Q, QuerySet
from django.db.models.constants import LOOKUP_SEP

from .models import PropertyData


class StringPropertyMatchType(Enum):
    """
    How a string predicate compares, e.g. usernames in ``find_members_in_role``.
    """
    EXACT = "Exact"
    CONTAINS = "Contains"
    STARTS_WITH = "StartsWith"
    ENDS_WITH = "EndsWith"
    # "*" matches any run of characters, "?" exactly one.
    WILDCARD = "Wildcard"


def _wildcard_regex(pattern: str) -> str:
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return "^" + "".join(parts) + "$"


def string_match(attribute: str, value: str, match_type: StringPropertyMatchType) -> Q:
    """
    Case-insensitive predicate comparing ``attribute`` with ``value``.
    """
    if match_type == StringPropertyMatchType.EXACT:
        return Q(**{f"{attribute}__iexact": value})
    if match_type == StringPropertyMatchType.CONTAINS:
        return Q(**{f"{attribute}__icontains": value})
    if match_type == StringPropertyMatchType.STARTS_WITH:
        return Q(**{f"{attribute}__istartswith": value})
    if match_type == StringPropertyMatchType.ENDS_WITH:
        return Q(**{f"{attribute}__iendswith": value})
    if match_type == StringPropertyMatchType.WILDCARD:
        return Q(**{f"{attribute}__iregex": _wildcard_regex(value)})
    raise ValueError(f"Unsupported string match type: {match_type!r}")


class Query:
    """
    A conjunction of predicates over one kind of entity.
    """
    def __init__(self):
        self.clauses: list[Q] = []
        self.property_clauses: list[tuple[str, Any, str]] = []

    def where(self, *conditions: Q, **lookups) -> Query:
        """
        AND in conditions over entity attributes, Django lookup syntax.
        """
        self.clauses.extend(conditions)
        if lookups:
            self.clauses.append(Q(**lookups))
        return self

    def where_string(self, attribute: str, value: str, match_type: StringPropertyMatchType) -> Query:
        return self.where(string_match(attribute, value, match_type))

    def where_property(self, alias: str, value: Any, lookup: str = "exact") -> Query:
        """
        AND in a condition on the value of the property with ``alias``.

        The stored column compared against is picked from the type of
        ``value``. Strings match either text column.
        """
        self.property_clauses.append((alias, value, lookup))
        return self

    def __bool__(self):
        return bool(self.clauses or self.property_clauses)


def _property_value_q(value: Any, lookup: str) -> Q:
    if isinstance(value, bool):
        return Q(**{f"data_int__{lookup}": int(value)})
    if isinstance(value, int):
        return Q(**{f"data_int__{lookup}": value})
    if isinstance(value, (Decimal, float)):
        return Q(**{f"data_decimal__{lookup}": value})
    if isinstance(value, datetime):
        return Q(**{f"data_date__{lookup}": value})
    return Q(**{f"data_nvarchar__{lookup}": value}) | Q(**{f"data_ntext__{lookup}": value})


class QueryTranslator:
    """
    Rewrites a ``Query`` into a ``Q`` for one repository's base queryset.

    ``field_map`` maps entity attribute names to lookup paths, e.g.
    ``{"username": "content__member__login_name"}``. ``version_path`` is the
    path to the version guid, which property predicates are matched against.
    """
    def __init__(self, field_map: Mapping[str, str], version_path: str | None = None):
        self.field_map = dict(field_map)
        self.version_path = version_path

    def translate(self, query: Query | None) -> Q:
        result = Q()
        if query is None:
            return result
        for clause in query.clauses:
            result &= self._rewrite(clause)
        for alias, value, lookup in query.property_clauses:
            result &= self._property_q(alias, value, lookup)
        return result

    def to_sql(self, queryset: QuerySet, query: Query) -> tuple[str, tuple]:
        """
        The parameterized SQL text and positional arguments for ``query``.
        """
        return queryset.filter(self.translate(query)).query.sql_with_params()

    def _rewrite(self, clause: Q) -> Q:
        children = []
        for child in clause.children:
            if isinstance(child, Q):
                children.append(self._rewrite(child))
            elif isinstance(child, tuple):
                lookup, value = child
                children.append((self._map_lookup(lookup), value))
            else:
                # Expressions such as Exists() are already resolved against
                # the base queryset.
                children.append(child)
        return Q(*children, _connector=clause.connector, _negated=clause.negated)

    def _map_lookup(self, lookup: str) -> str:
        attribute, sep, rest = lookup.partition(LOOKUP_SEP)
        try:
            path = self.field_map[attribute]
        except KeyError:
            raise ValueError(f"Cannot query on unknown field {attribute!r}") from None
        return f"{path}{sep}{rest}"

    def _property_q(self, alias: str, value: Any, lookup: str) -> Q:
        if self.version_path is None:
            raise ValueError(f"Cannot query on property {alias!r}: entity has no properties")
        rows = PropertyData.objects.filter(
            _property_value_q(value, lookup),
            version_id=OuterRef(self.version_path),
            property_type__alias=alias,
        )
        return Q(Exists(rows))
