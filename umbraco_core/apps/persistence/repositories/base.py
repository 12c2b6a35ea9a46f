"""
What every repository has in common: reads through a cache policy, writes
inside a transaction, deletes through an explicit ordered cascade.
"""
from __future__ import annotations

import logging
from typing import Callable, ClassVar, Generic, Iterable, Sequence, TypeVar
from uuid import UUID

from django.core.cache import BaseCache, caches
from django.db import transaction
from django.db.models import Model, QuerySet

from ..conf import get_setting
from ..entities import EntityBase
from ..events import RepositoryEvents
from ..query import Query, QueryTranslator

log = logging.getLogger(__name__)

TEntity = TypeVar("TEntity", bound=EntityBase)


class RepositoryCachePolicy(Generic[TEntity]):
    """
    Decides how entities read by id are cached.
    """
    def get(self, entity_id: int, perform_get: Callable[[int], TEntity | None]) -> TEntity | None:
        raise NotImplementedError

    def refresh(self, entity: TEntity) -> None:
        raise NotImplementedError

    def remove(self, entity: TEntity) -> None:
        raise NotImplementedError


class DefaultRepositoryCachePolicy(RepositoryCachePolicy[TEntity]):
    """
    Read-through cache of entities by id, in the isolated cache.

    Saving an entity replaces its cached copy and deleting it evicts it. The
    cache backend pickles entities, so callers never share an instance with
    the cache or with each other.
    """
    def __init__(self, entity_type: type, cache: BaseCache | None = None):
        self.entity_type = entity_type
        self.cache = cache or caches[get_setting("ISOLATED_CACHE")]

    def cache_key(self, entity_id: int) -> str:
        return f"uRepo_{self.entity_type.__name__}_{entity_id}"

    def get(self, entity_id, perform_get):
        key = self.cache_key(entity_id)
        entity = self.cache.get(key)
        if entity is not None:
            return entity
        entity = perform_get(entity_id)
        if entity is not None:
            self.cache.set(key, entity)
        return entity

    def refresh(self, entity):
        self.cache.set(self.cache_key(entity.id), entity)

    def remove(self, entity):
        self.cache.delete(self.cache_key(entity.id))


class NoCacheRepositoryCachePolicy(RepositoryCachePolicy[TEntity]):
    """
    Always goes to the database.
    """
    def get(self, entity_id, perform_get):
        return perform_get(entity_id)

    def refresh(self, entity):
        pass

    def remove(self, entity):
        pass


class RepositoryBase(Generic[TEntity]):
    """
    CRUD for one kind of entity.

    Subclasses set ``entity_type`` and ``object_type`` and implement the
    ``perform_*`` and ``persist_*`` hooks. ``delete_clauses`` lists the
    (model, lookup) pairs deleted, in order, when an entity is deleted; the
    lookup is compared with the entity's id.
    """
    entity_type: ClassVar[type]
    object_type: ClassVar[UUID]
    delete_clauses: ClassVar[Sequence[tuple[type[Model], str]]] = ()

    # Entity attribute -> lookup path on the base queryset, for queries.
    query_fields: ClassVar[dict[str, str]] = {}

    def __init__(
        self,
        *,
        events: RepositoryEvents | None = None,
        cache_policy: RepositoryCachePolicy | None = None,
    ):
        self.events = events or RepositoryEvents()
        self.cache_policy = cache_policy or DefaultRepositoryCachePolicy(self.entity_type)
        self.translator = QueryTranslator(self.query_fields, getattr(self, "version_path", None))

    def set_no_cache_policy(self) -> None:
        self.cache_policy = NoCacheRepositoryCachePolicy()

    # Reads

    def get(self, entity_id: int) -> TEntity | None:
        return self.cache_policy.get(entity_id, self.perform_get)

    def get_all(self, *entity_ids: int) -> list[TEntity]:
        return self.perform_get_all(entity_ids)

    def get_by_query(self, query: Query) -> list[TEntity]:
        return self.perform_get_by_query(query)

    def exists_by_id(self, entity_id: int) -> bool:
        return self.get_base_queryset().filter(**{self.id_path: entity_id}).exists()

    def get_count_by_query(self, query: Query) -> int:
        return self.get_base_queryset().filter(self.translator.translate(query)).count()

    # Writes

    def save(self, entity: TEntity) -> None:
        with transaction.atomic():
            if entity.has_identity:
                self.persist_updated_item(entity)
            else:
                self.persist_new_item(entity)
        self.cache_policy.refresh(entity)

    def delete(self, entity: TEntity) -> None:
        with transaction.atomic():
            self.persist_deleted_item(entity)
        self.cache_policy.remove(entity)

    def persist_deleted_item(self, entity: TEntity) -> None:
        for model, lookup in self.delete_clauses:
            model.objects.filter(**{lookup: entity.id}).delete()

    # Hooks

    id_path: ClassVar[str] = "id"

    def get_base_queryset(self) -> QuerySet:
        raise NotImplementedError

    def perform_get(self, entity_id: int) -> TEntity | None:
        raise NotImplementedError

    def perform_get_all(self, entity_ids: Iterable[int]) -> list[TEntity]:
        raise NotImplementedError

    def perform_get_by_query(self, query: Query) -> list[TEntity]:
        raise NotImplementedError

    def persist_new_item(self, entity: TEntity) -> None:
        raise NotImplementedError

    def persist_updated_item(self, entity: TEntity) -> None:
        raise NotImplementedError
