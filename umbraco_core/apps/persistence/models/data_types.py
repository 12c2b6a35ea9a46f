"""
Data types, property types and the versioned property values they describe.
"""
from django.db import models

from ....lib.fields import immutable_uuid_field
from .content import ContentType, ContentVersion
from .node import Node

__all__ = [
    "DataType",
    "DataTypePreValue",
    "PropertyType",
    "PropertyData",
]


class DataType(models.Model):
    """
    Binds a property editor to a storage column kind.

    ``db_type`` is one of ``constants.ValueStorageType`` and decides which
    ``cmsPropertyData`` column values of this data type are stored in.
    """
    id = models.AutoField(primary_key=True, db_column="pk")
    node = models.OneToOneField(
        Node,
        on_delete=models.DO_NOTHING,
        db_column="nodeId",
        related_name="data_type",
    )
    property_editor_alias = models.CharField(max_length=255, db_column="propertyEditorAlias")
    db_type = models.CharField(max_length=50, db_column="dbType")

    class Meta:
        db_table = "cmsDataType"

    def __str__(self):
        return f"{self.node_id}: {self.property_editor_alias}"


class DataTypePreValue(models.Model):
    """
    Configuration values for a data type, e.g. the tag group of a tags editor.
    """
    id = models.AutoField(primary_key=True)
    data_type = models.ForeignKey(
        DataType,
        on_delete=models.DO_NOTHING,
        to_field="node",
        db_column="datatypeNodeId",
        related_name="pre_values",
    )
    value = models.TextField(null=True)
    sort_order = models.IntegerField(db_column="sortorder", default=0)
    alias = models.CharField(max_length=50, null=True)

    class Meta:
        db_table = "cmsDataTypePreValues"


class PropertyType(models.Model):
    """
    Declares one named field on a content type.
    """
    id = models.AutoField(primary_key=True)
    data_type = models.ForeignKey(
        DataType,
        on_delete=models.DO_NOTHING,
        to_field="node",
        db_column="dataTypeId",
        related_name="property_types",
    )
    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.DO_NOTHING,
        to_field="node",
        db_column="contentTypeId",
        related_name="property_types",
    )
    alias = models.CharField(max_length=255, db_column="Alias")
    name = models.CharField(max_length=255, db_column="Name", null=True)
    sort_order = models.IntegerField(db_column="sortOrder", default=0)
    mandatory = models.BooleanField(default=False)
    validation_reg_exp = models.CharField(max_length=255, db_column="validationRegExp", null=True)
    description = models.CharField(max_length=2000, db_column="Description", null=True)
    unique_id = immutable_uuid_field(db_column="UniqueID")

    class Meta:
        db_table = "cmsPropertyType"
        constraints = [
            models.UniqueConstraint(
                fields=["content_type", "alias"],
                name="umb_property_type_alias_uniq",
            ),
        ]

    def __str__(self):
        return f"{self.content_type_id}: {self.alias}"


class PropertyData(models.Model):
    """
    The value of one property type for one version of one node.

    Only the column matching the data type's storage kind is filled in, the
    others stay NULL.
    """
    id = models.AutoField(primary_key=True)
    node = models.ForeignKey(
        Node,
        on_delete=models.DO_NOTHING,
        db_column="contentNodeId",
        related_name="property_data",
    )
    version = models.ForeignKey(
        ContentVersion,
        on_delete=models.DO_NOTHING,
        to_field="version_id",
        db_column="versionId",
        null=True,
        related_name="property_data",
    )
    property_type = models.ForeignKey(
        PropertyType,
        on_delete=models.DO_NOTHING,
        db_column="propertytypeid",
        related_name="+",
    )
    data_int = models.IntegerField(db_column="dataInt", null=True)
    data_decimal = models.DecimalField(db_column="dataDecimal", max_digits=38, decimal_places=6, null=True)
    data_date = models.DateTimeField(db_column="dataDate", null=True)
    data_nvarchar = models.CharField(max_length=500, db_column="dataNvarchar", null=True)
    data_ntext = models.TextField(db_column="dataNtext", null=True)

    class Meta:
        db_table = "cmsPropertyData"
        constraints = [
            models.UniqueConstraint(
                fields=["version", "property_type"],
                name="umb_property_data_version_type_uniq",
            ),
        ]
