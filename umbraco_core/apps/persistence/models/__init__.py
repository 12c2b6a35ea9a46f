"""
The data models here map the fixed Umbraco table layout used by members and
member groups:

* Nodes, the base row of every addressable entity, and their paths.
* Content, its content type, and its versions.
* Data types, property types and versioned property values.
* Members and their membership of member groups.
* Tags assigned to node properties.
* Tables owned by other parts of the system that reference nodes, modeled
  only so that deletes can cascade through them.
"""

from .content import Content, ContentType, ContentVersion
from .data_types import DataType, DataTypePreValue, PropertyData, PropertyType
from .member import Member, Member2MemberGroup
from .node import Node
from .node_links import ContentXml, Relation, Task, User2NodeNotify, User2NodePermission
from .tags import Tag, TagRelationship
