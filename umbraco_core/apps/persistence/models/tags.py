"""
Tags and their assignment to node properties.
"""
from django.db import models

from .data_types import PropertyType
from .node import Node

__all__ = [
    "Tag",
    "TagRelationship",
]


class Tag(models.Model):
    """
    A free text label, unique within its group.
    """
    id = models.AutoField(primary_key=True)
    tag = models.CharField(max_length=200, null=True)
    group = models.CharField(max_length=100)

    class Meta:
        db_table = "cmsTags"
        constraints = [
            models.UniqueConstraint(fields=["tag", "group"], name="umb_tags_tag_group_uniq"),
        ]

    def __str__(self):
        return f"{self.group}/{self.tag}"


class TagRelationship(models.Model):
    """
    Assigns a tag to one property of one node.
    """
    pk = models.CompositePrimaryKey("node_id", "property_type_id", "tag_id")
    node = models.ForeignKey(
        Node,
        on_delete=models.DO_NOTHING,
        db_column="nodeId",
        related_name="+",
    )
    tag = models.ForeignKey(
        Tag,
        on_delete=models.DO_NOTHING,
        db_column="tagId",
        related_name="relationships",
    )
    property_type = models.ForeignKey(
        PropertyType,
        on_delete=models.DO_NOTHING,
        db_column="propertyTypeId",
        related_name="+",
    )

    class Meta:
        db_table = "cmsTagRelationship"
