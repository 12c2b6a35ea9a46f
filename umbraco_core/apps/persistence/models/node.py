"""
The node table every addressable entity hangs off of.
"""
from django.db import models

from ....lib.fields import immutable_uuid_field, manual_date_time_field, node_path_field, object_type_field

__all__ = [
    "Node",
]


class Node(models.Model):
    """
    The base row shared by members, member groups, member types, data types...

    Entity specific tables (``cmsContent``, ``cmsMember``, ``cmsDataType``,
    etc.) are all 1:1 extensions keyed on this table's id. The kind of entity a
    row backs is given by ``node_object_type``, see ``constants.ObjectTypes``.

    Invariants kept by the repositories, not by the database:

    * ``path`` is the parent's path + "," + ``id``
    * ``level`` is the parent's level + 1
    * top level nodes have ``parent_id == -1``, the seeded root node.
    """
    id = models.AutoField(primary_key=True)
    trashed = models.BooleanField(default=False)

    # The root node (-1) is its own parent.
    parent = models.ForeignKey(
        "self",
        on_delete=models.DO_NOTHING,
        db_column="parentID",
        related_name="children",
    )
    node_user = models.IntegerField(db_column="nodeUser", null=True)
    level = models.SmallIntegerField()
    path = node_path_field()
    sort_order = models.IntegerField(db_column="sortOrder")
    unique_id = immutable_uuid_field(db_column="uniqueID")

    # The display name, e.g. a member's name or a member group's role name.
    text = models.CharField(max_length=255, null=True)
    node_object_type = object_type_field()
    create_date = manual_date_time_field(db_column="createDate")

    class Meta:
        db_table = "umbracoNode"
        indexes = [
            models.Index(
                fields=["parent", "node_object_type"],
                name="umb_node_parent_type_idx",
            ),
        ]

    def __str__(self):
        return f"{self.id}: {self.text}"
