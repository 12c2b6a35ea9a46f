"""
Property editors and their tag capability.

Which editors produce tags is declared explicitly: an editor class sets
``tag_support`` to a ``TagSupport`` describing how its stored value is split
into tags, and leaves it as ``None`` otherwise. The registry is filled once at
startup (see ``PersistenceConfig.ready``) and capability lookups are memoized
per editor alias from then on.
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Mapping

from attrs import define, field, frozen

from ...lib.cache import lru_cache
from .constants import PropertyEditors

log = logging.getLogger(__name__)

DEFAULT_TAG_GROUP = "default"


class TagCacheStorageType(Enum):
    """
    How a tag enabled property stores its tags in its own value.
    """
    CSV = "Csv"
    JSON = "Json"


class PropertyTagBehavior(Enum):
    """
    What saving a property does with the tags already assigned to it.
    """
    # Replace all tags of the property with the given ones.
    REPLACE = "Replace"
    # Add the given tags, keeping the existing ones.
    MERGE = "Merge"
    # Remove the given tags.
    REMOVE = "Remove"


@frozen
class TagSupport:
    """
    Describes how an editor's stored value maps to tags.
    """
    delimiter: str = ","
    storage_type: TagCacheStorageType = TagCacheStorageType.CSV
    replace_tags: bool = True

    def extract(self, value: Any, pre_values: Mapping[str, str]) -> set[tuple[str, str]]:
        """
        Parse a raw property value into a set of (tag text, tag group) pairs.

        The data type's pre-values can override the tag group ("group") and
        the storage type ("storageType").
        """
        group = pre_values.get("group") or DEFAULT_TAG_GROUP
        storage_type = self.storage_type
        if pre_values.get("storageType"):
            storage_type = TagCacheStorageType(pre_values["storageType"])

        if value is None or value == "":
            return set()
        if isinstance(value, str):
            if storage_type == TagCacheStorageType.JSON:
                values = json.loads(value)
            else:
                values = value.split(self.delimiter)
        else:
            values = list(value)

        return {(str(text).strip(), group) for text in values if str(text).strip()}

    @property
    def behavior(self) -> PropertyTagBehavior:
        return PropertyTagBehavior.REPLACE if self.replace_tags else PropertyTagBehavior.MERGE


class PropertyEditor:
    """
    Base class of all property editors.

    Subclasses set ``alias`` and, if they produce tags, ``tag_support``.
    """
    alias: str = ""
    name: str = ""
    tag_support: TagSupport | None = None

    @property
    def has_tag_support(self) -> bool:
        return self.tag_support is not None


class TagsEditor(PropertyEditor):
    alias = PropertyEditors.TAGS
    name = "Tags"
    tag_support = TagSupport()


class TextboxEditor(PropertyEditor):
    alias = PropertyEditors.TEXTBOX
    name = "Textbox"


class TextAreaEditor(PropertyEditor):
    alias = PropertyEditors.TEXTAREA
    name = "Textarea"


class TrueFalseEditor(PropertyEditor):
    alias = PropertyEditors.TRUE_FALSE
    name = "True/false"


class IntegerEditor(PropertyEditor):
    alias = PropertyEditors.INTEGER
    name = "Numeric"


class DecimalEditor(PropertyEditor):
    alias = PropertyEditors.DECIMAL
    name = "Decimal"


class DateEditor(PropertyEditor):
    alias = PropertyEditors.DATE
    name = "Date"


class NoEditEditor(PropertyEditor):
    alias = PropertyEditors.NO_EDIT
    name = "Label"


@define
class PropertyEditorRegistry:
    """
    Property editors by alias.

    Aliases nothing registered for resolve to a plain ``PropertyEditor``
    without tag support, since a data type can outlive the editor it was
    created with.
    """
    _editors: dict[str, PropertyEditor] = field(factory=dict)

    def register(self, editor: PropertyEditor) -> None:
        if editor.alias in self._editors:
            log.debug(f"Replacing property editor registered for {editor.alias!r}")
        self._editors[editor.alias] = editor
        tag_support_for.cache_clear()

    def get(self, alias: str) -> PropertyEditor:
        editor = self._editors.get(alias)
        if editor is None:
            editor = PropertyEditor()
            editor.alias = alias
        return editor

    def __contains__(self, alias: str) -> bool:
        return alias in self._editors

    def tag_support_for(self, alias: str) -> TagSupport | None:
        return self.get(alias).tag_support


_registry = PropertyEditorRegistry()


def get_registry() -> PropertyEditorRegistry:
    return _registry


@lru_cache(maxsize=None)
def tag_support_for(alias: str) -> TagSupport | None:
    """
    The tag capability of the editor registered under ``alias``, if any.
    """
    return _registry.tag_support_for(alias)


def register_builtin_editors() -> None:
    for editor_class in (
        TagsEditor,
        TextboxEditor,
        TextAreaEditor,
        TrueFalseEditor,
        IntegerEditor,
        DecimalEditor,
        DateEditor,
        NoEditEditor,
    ):
        _registry.register(editor_class())
