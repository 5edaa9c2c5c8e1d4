"""Management command to recompute storage usage from stored files."""

import logging
from typing import Any, final, override

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from server.apps.files.logic.quota_operations import recalculate_usage

User = get_user_model()
logger = logging.getLogger(__name__)


@final
class Command(BaseCommand):
    """Reset used bytes of every quota to the sum of the user's files."""

    help = 'Recalculate storage usage from stored files'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--username',
            type=str,
            default=None,
            help='Only recalculate this user (default: all users)',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the recalculation.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        users = User.objects.order_by('id')
        if options['username']:
            users = users.filter(username=options['username'])
            if not users.exists():
                raise CommandError(
                    f'User not found: {options["username"]}',
                )

        changed = 0
        for user in users:
            old_usage, new_usage = recalculate_usage(user.id)
            if old_usage != new_usage:
                changed += 1
                self.stdout.write(
                    f'{user.username}: {old_usage} -> {new_usage} bytes',
                )

        self.stdout.write(
            self.style.SUCCESS(
                f'Recalculated {users.count()} users, {changed} changed',
            ),
        )
