"""
Notifications repositories send to the service layer that owns them.

Each repository gets its own ``RepositoryEvents`` at construction time instead
of sharing module level signals, so two repositories (or two tests) never see
each other's receivers. Receivers connect the usual Django way::

    events = RepositoryEvents()
    events.saving.connect(my_receiver)
    groups = MemberGroupRepository(events=events)
"""
from __future__ import annotations

from typing import Any, Iterable

from attrs import define, field
from django.dispatch import Signal


@define
class SaveEventArgs:
    """
    Sent with a cancelable save. A receiver vetoes the save with ``cancel()``.
    """
    entities: list[Any] = field(factory=list, converter=list)
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class RepositoryEvents:
    """
    The signals one repository sends.
    """

    def __init__(self):
        # Sent BEFORE new member groups are saved. Receivers get ``args``, a
        # SaveEventArgs, and may cancel it, in which case nothing is saved.
        #
        # providing_args=[
        #     'args', # SaveEventArgs
        # ]
        self.saving = Signal()

        # Sent AFTER new member groups were saved.
        #
        # providing_args=[
        #     'entities', # list of the saved entities
        # ]
        self.saved = Signal()

        # Sent AFTER an entity was inserted or updated, in the same transaction.
        #
        # providing_args=[
        #     'entity',
        # ]
        self.refreshed_entity = Signal()

        # Sent BEFORE the rows of an entity are deleted, while they can still
        # be read. Cannot be vetoed.
        #
        # providing_args=[
        #     'entity',
        # ]
        self.removing_entity = Signal()

        # Sent BEFORE one version of an entity is deleted.
        #
        # providing_args=[
        #     'entity_id',
        #     'version_id',
        # ]
        self.removing_version = Signal()

    def send_saving(self, sender: Any, entities: Iterable[Any]) -> bool:
        """
        Send ``saving`` and return whether any receiver cancelled the save.
        """
        args = SaveEventArgs(entities)
        self.saving.send(sender=sender, args=args)
        return args.cancelled
