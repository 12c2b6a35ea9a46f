"""
Django management command to prune old versions of a member.
"""
import logging
from datetime import timezone as dt_timezone

from django.core.management import CommandError
from django.core.management.base import BaseCommand
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from umbraco_core.apps.persistence.api import delete_member_versions, get_member, get_member_versions

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """
    Django management command to delete the old versions of a member.
    """
    help = 'Delete the versions of a member older than a date. The latest version is always kept.'

    def add_arguments(self, parser):
        parser.add_argument('member_id', type=int, help='The node id of the member')
        parser.add_argument(
            '--before',
            type=str,
            help='ISO 8601 date and time; versions dated before it are deleted. Defaults to now.',
            default=None,
        )

    def handle(self, *args, **options):
        member_id = options['member_id']
        before = timezone.now()
        if options['before']:
            before = parse_datetime(options['before'])
            if before is None:
                raise CommandError(f"Invalid date: {options['before']!r}")
            if timezone.is_naive(before):
                before = timezone.make_aware(before, dt_timezone.utc)

        if get_member(member_id) is None:
            raise CommandError(f"Member {member_id} not found")

        count_before = len(get_member_versions(member_id))
        try:
            delete_member_versions(member_id, before)
        except Exception as e:
            logger.exception("Failed to delete versions of member %s", member_id)
            raise CommandError(f"Failed to delete versions of member {member_id}: {e}") from e
        deleted = count_before - len(get_member_versions(member_id))
        self.stdout.write(self.style.SUCCESS(f'Deleted {deleted} versions of member {member_id}'))
