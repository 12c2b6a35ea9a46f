"""
Convenience functions to make consistent field conventions easier.

Unlike a greenfield Django app, every table here has a fixed name and mixed
case column names that other Umbraco installations already depend on. So each
helper takes the ``db_column`` to map onto, and there is no freedom to pick
Django's own naming conventions.
"""
from __future__ import annotations

import uuid

from django.db import models

from .validators import validate_node_path, validate_utc_datetime


def immutable_uuid_field(db_column: str) -> models.UUIDField:
    """
    Stable, randomly-generated UUIDs.

    Nodes, versions and property types all carry one of these next to their
    integer id. Other systems reference entities by this key, since integer
    ids differ between installations.
    """
    return models.UUIDField(
        db_column=db_column,
        default=uuid.uuid4,
        blank=False,
        null=False,
        editable=False,
        unique=True,
        verbose_name="UUID",  # Just makes the Django admin output properly capitalized
    )


def object_type_field() -> models.UUIDField:
    """
    The discriminator telling what kind of entity a node row backs.

    The well known values are in ``constants.ObjectTypes``.
    """
    return models.UUIDField(db_column="nodeObjectType", null=True, db_index=True)


def node_path_field() -> models.CharField:
    """
    Comma separated ancestor ids from the root (-1) down to the node itself.

    Descendant queries are substring matches against this column, so it must
    always be kept in step with the parent chain.
    """
    return models.CharField(
        max_length=150,
        null=False,
        validators=[validate_node_path],
    )


def manual_date_time_field(db_column: str) -> models.DateTimeField:
    """
    DateTimeField that does not auto-generate values.

    The datetimes entered for this field *must be UTC* or it will raise a
    ValidationError.

    Entities stamp their own create/update dates before they are persisted
    (see ``EntityBase.adding_entity``), and a caller may set them explicitly,
    so the database never fills these in on its own.
    """
    return models.DateTimeField(
        db_column=db_column,
        auto_now=False,
        auto_now_add=False,
        null=False,
        validators=[
            validate_utc_datetime,
        ],
    )
