"""
Content, its type, and its versions.
"""
from django.db import models

from ....lib.fields import immutable_uuid_field, manual_date_time_field
from .node import Node

__all__ = [
    "ContentType",
    "Content",
    "ContentVersion",
]


class ContentType(models.Model):
    """
    The type row for a node that defines a content type (e.g. a member type).

    Other tables reference a content type by its node id (``node_id``), never
    by this table's own primary key.
    """
    id = models.AutoField(primary_key=True, db_column="pk")
    node = models.OneToOneField(
        Node,
        on_delete=models.DO_NOTHING,
        db_column="nodeId",
        related_name="content_type_definition",
    )
    alias = models.CharField(max_length=255, null=True)
    icon = models.CharField(max_length=255, null=True)
    thumbnail = models.CharField(max_length=255, default="folder.png")
    description = models.CharField(max_length=1500, null=True)
    is_container = models.BooleanField(db_column="isContainer", default=False)
    allow_at_root = models.BooleanField(db_column="allowAtRoot", default=False)

    class Meta:
        db_table = "cmsContentType"

    def __str__(self):
        return f"{self.node_id}: {self.alias}"


class Content(models.Model):
    """
    1:1 extension of a node that has a content type and versions.
    """
    id = models.AutoField(primary_key=True, db_column="pk")
    node = models.OneToOneField(
        Node,
        on_delete=models.DO_NOTHING,
        db_column="nodeId",
        related_name="content",
    )
    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.DO_NOTHING,
        to_field="node",
        db_column="contentType",
        related_name="+",
    )

    class Meta:
        db_table = "cmsContent"


class ContentVersion(models.Model):
    """
    A timestamped snapshot of a piece of content.

    The row with the newest ``version_date`` for a given content id is the
    current version. Property values (``PropertyData``) point at the version
    they belong to through ``version_id``, the guid, not the integer id.
    """
    id = models.AutoField(primary_key=True)

    # ContentId holds the node id.
    content = models.ForeignKey(
        Content,
        on_delete=models.DO_NOTHING,
        to_field="node",
        db_column="ContentId",
        related_name="versions",
    )
    version_id = immutable_uuid_field(db_column="VersionId")
    version_date = manual_date_time_field(db_column="VersionDate")

    class Meta:
        db_table = "cmsContentVersion"
        indexes = [
            models.Index(
                fields=["content", "version_date"],
                name="umb_version_content_date_idx",
            ),
        ]

    def __str__(self):
        return f"{self.content_id}: {self.version_id}"
