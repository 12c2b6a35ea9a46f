"""
Tables owned by other parts of Umbraco that reference nodes.

The repositories here never read these, but deleting a node has to clear them
out first, in a fixed order, so they are modeled just enough to do that.
"""
from django.db import models

from .content import Content
from .node import Node

__all__ = [
    "Task",
    "User2NodeNotify",
    "User2NodePermission",
    "Relation",
    "ContentXml",
]


class Task(models.Model):
    id = models.AutoField(primary_key=True)
    closed = models.BooleanField(default=False)
    task_type_id = models.SmallIntegerField(db_column="taskTypeId")
    node = models.ForeignKey(Node, on_delete=models.DO_NOTHING, db_column="nodeId", related_name="+")
    parent_user_id = models.IntegerField(db_column="parentUserId")
    user_id = models.IntegerField(db_column="userId")
    date_time = models.DateTimeField(db_column="DateTime")
    comment = models.CharField(max_length=500, db_column="Comment", null=True)

    class Meta:
        db_table = "cmsTask"


class User2NodeNotify(models.Model):
    pk = models.CompositePrimaryKey("user_id", "node_id", "action")
    user_id = models.IntegerField(db_column="userId")
    node = models.ForeignKey(Node, on_delete=models.DO_NOTHING, db_column="nodeId", related_name="+")
    action = models.CharField(max_length=1)

    class Meta:
        db_table = "umbracoUser2NodeNotify"


class User2NodePermission(models.Model):
    pk = models.CompositePrimaryKey("user_id", "node_id", "permission")
    user_id = models.IntegerField(db_column="userId")
    node = models.ForeignKey(Node, on_delete=models.DO_NOTHING, db_column="nodeId", related_name="+")
    permission = models.CharField(max_length=255)

    class Meta:
        db_table = "umbracoUser2NodePermission"


class Relation(models.Model):
    """
    A typed relation between two nodes, e.g. "copied from".
    """
    id = models.AutoField(primary_key=True)
    parent = models.ForeignKey(Node, on_delete=models.DO_NOTHING, db_column="parentId", related_name="+")
    child = models.ForeignKey(Node, on_delete=models.DO_NOTHING, db_column="childId", related_name="+")
    rel_type = models.IntegerField(db_column="relType")
    datetime = models.DateTimeField()
    comment = models.CharField(max_length=1000)

    class Meta:
        db_table = "umbracoRelation"


class ContentXml(models.Model):
    """
    Serialized XML cache of a content item.
    """
    content = models.OneToOneField(
        Content,
        on_delete=models.DO_NOTHING,
        to_field="node",
        primary_key=True,
        db_column="nodeId",
        related_name="xml",
    )
    xml = models.TextField()

    class Meta:
        db_table = "cmsContentXml"
