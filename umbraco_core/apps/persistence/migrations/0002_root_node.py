"""
Seed the system root node every other node descends from.
"""
from datetime import datetime, timezone
from uuid import UUID

from django.db import migrations

ROOT_UNIQUE_ID = UUID("916724a5-173d-4619-b97e-b9de133dd6f5")
SYSTEM_ROOT_OBJECT_TYPE = UUID("ea7d8624-4cfe-4578-a871-24aa946bf34d")


def create_root_node(apps, schema_editor):
    Node = apps.get_model("umb_persistence", "Node")
    Node.objects.get_or_create(
        id=-1,
        defaults={
            "parent_id": -1,
            "trashed": False,
            "level": 0,
            "path": "-1",
            "sort_order": 0,
            "unique_id": ROOT_UNIQUE_ID,
            "text": "SYSTEM DATA: umbraco master root",
            "node_object_type": SYSTEM_ROOT_OBJECT_TYPE,
            "create_date": datetime(2004, 9, 30, 14, 1, 49, tzinfo=timezone.utc),
        },
    )


def delete_root_node(apps, schema_editor):
    Node = apps.get_model("umb_persistence", "Node")
    Node.objects.filter(id=-1).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("umb_persistence", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_root_node, delete_root_node),
    ]
