"""
Helpers for splitting large ``IN (...)`` lookups into bounded batches.

Database engines cap the number of parameters in one statement (SQL Server at
2100, older SQLite builds at 999), so any lookup keyed on a caller-supplied
list of ids goes through ``fetch_by_groups``.
"""
from __future__ import annotations

from itertools import islice
from typing import Callable, Iterable, Iterator, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def in_groups_of(values: Iterable[T], size: int) -> Iterator[list[T]]:
    """
    Yield successive lists of at most ``size`` items from ``values``.
    """
    if size < 1:
        raise ValueError(f"Group size must be positive, got {size}")
    iterator = iter(values)
    while group := list(islice(iterator, size)):
        yield group


def fetch_by_groups(values: Iterable[T], size: int, fetch: Callable[[list[T]], Iterable[R]]) -> list[R]:
    """
    Call ``fetch`` once per group of ``values`` and concatenate the results.
    """
    results: list[R] = []
    for group in in_groups_of(values, size):
        results.extend(fetch(group))
    return results
