"""Print the top performers from the configured store.

Only stores that can rank records (the REST backend) support this command.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from core.composition import store_config_from_settings
from stores import RemoteError, build_store, supports_ranking


class Command(BaseCommand):
    """List the highest-scoring records."""

    help = "Print the top performers reported by the configured store."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "--limit",
            type=int,
            default=5,
            help="Number of records to print (default: 5).",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        limit: int = options["limit"]
        if limit < 1:
            raise CommandError("--limit must be at least 1.")

        config = store_config_from_settings()
        store = build_store(config)
        if not supports_ranking(store):
            raise CommandError(f"The {config.backend} backend cannot rank records.")

        try:
            records = store.top_performers(limit)
        except RemoteError as exc:
            raise CommandError(str(exc)) from exc

        if not records:
            self.stdout.write("No records yet.")
            return None
        for rank, record in enumerate(records, start=1):
            self.stdout.write(f"{rank}. {record.name}: {record.marks}")
        return None
