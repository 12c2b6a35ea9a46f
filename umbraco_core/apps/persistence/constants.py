"""
Well known identifiers shared by every Umbraco installation.
"""
from __future__ import annotations

from enum import StrEnum
from uuid import UUID

ROOT_NODE_ID = -1
ROOT_NODE_PATH = "-1"
ROOT_NODE_TEXT = "SYSTEM DATA: umbraco master root"


class ObjectTypes:
    """
    Values of ``umbracoNode.nodeObjectType``.
    """
    SYSTEM_ROOT = UUID("ea7d8624-4cfe-4578-a871-24aa946bf34d")
    MEMBER = UUID("39eb0f98-b348-42a1-8662-e7eb18487560")
    MEMBER_GROUP = UUID("366e63b9-880f-4e13-a61c-98069b029728")
    MEMBER_TYPE = UUID("9b5416fb-e72f-45a9-a07b-5a9a2709ce43")
    DATA_TYPE = UUID("30a2a501-1978-4ddb-a57b-f7efed43ba3c")


class ValueStorageType(StrEnum):
    """
    Which ``cmsPropertyData`` column holds the value of a property type.

    The values are what ``cmsDataType.dbType`` stores.
    """
    INTEGER = "Integer"
    DECIMAL = "Decimal"
    DATE = "Date"
    NVARCHAR = "Nvarchar"
    NTEXT = "Ntext"


class PropertyEditors:
    """
    Aliases of the property editors registered at startup.
    """
    TAGS = "Umbraco.Tags"
    TEXTBOX = "Umbraco.Textbox"
    TEXTAREA = "Umbraco.TextboxMultiple"
    TRUE_FALSE = "Umbraco.TrueFalse"
    INTEGER = "Umbraco.Integer"
    DECIMAL = "Umbraco.Decimal"
    DATE = "Umbraco.Date"
    NO_EDIT = "Umbraco.NoEdit"


# Properties every member carries, whether or not its member type declares
# them. alias -> (name, editor alias, storage type)
STANDARD_MEMBER_PROPERTIES: dict[str, tuple[str, str, ValueStorageType]] = {
    "umbracoMemberComments": ("Comments", PropertyEditors.TEXTAREA, ValueStorageType.NTEXT),
    "umbracoMemberFailedPasswordAttempts": (
        "Failed Password Attempts", PropertyEditors.NO_EDIT, ValueStorageType.INTEGER,
    ),
    "umbracoMemberApproved": ("Is Approved", PropertyEditors.TRUE_FALSE, ValueStorageType.INTEGER),
    "umbracoMemberLockedOut": ("Is Locked Out", PropertyEditors.TRUE_FALSE, ValueStorageType.INTEGER),
    "umbracoMemberLastLockoutDate": ("Last Lockout Date", PropertyEditors.NO_EDIT, ValueStorageType.DATE),
    "umbracoMemberLastLogin": ("Last Login Date", PropertyEditors.NO_EDIT, ValueStorageType.DATE),
    "umbracoMemberLastPasswordChangeDate": (
        "Last Password Change Date", PropertyEditors.NO_EDIT, ValueStorageType.DATE,
    ),
}
