"""
Members and their membership of member groups.
"""
from django.db import models

from .content import Content
from .node import Node

__all__ = [
    "Member",
    "Member2MemberGroup",
]


class Member(models.Model):
    """
    Login details of a member.

    This table is not versioned: it is shared by every version of the member.
    Its primary key is the member's node id.
    """
    content = models.OneToOneField(
        Content,
        on_delete=models.DO_NOTHING,
        to_field="node",
        primary_key=True,
        db_column="nodeId",
        related_name="member",
    )
    email = models.CharField(max_length=1000, db_column="Email", default="")
    login_name = models.CharField(max_length=1000, db_column="LoginName", default="")
    password = models.CharField(max_length=1000, db_column="Password", null=True)

    class Meta:
        db_table = "cmsMember"
        indexes = [
            models.Index(fields=["login_name"], name="umb_member_login_name_idx"),
        ]

    def __str__(self):
        return f"{self.content_id}: {self.login_name}"


class Member2MemberGroup(models.Model):
    """
    Links a member to a member group (role).

    Member groups have no table of their own: they're plain nodes with the
    member group object type, so ``member_group`` points at the node table.
    """
    pk = models.CompositePrimaryKey("member_id", "member_group_id")
    member = models.ForeignKey(
        Member,
        on_delete=models.DO_NOTHING,
        db_column="Member",
        related_name="group_links",
    )
    member_group = models.ForeignKey(
        Node,
        on_delete=models.DO_NOTHING,
        db_column="MemberGroup",
        related_name="member_links",
    )

    class Meta:
        db_table = "cmsMember2MemberGroup"
