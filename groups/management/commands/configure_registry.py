"""
Management command to configure the group registry or print its state.

    python manage.py configure_registry --authority ST2TEST.registry --fee 2000
    python manage.py configure_registry            # show current settings
"""
from django.core.management.base import BaseCommand, CommandError

from groups.errors import RegistryError
from groups.services import build_registry


class Command(BaseCommand):
    help = "Set the authority contract, creation fee or group ceiling"

    def add_arguments(self, parser):
        parser.add_argument(
            "--authority",
            type=str,
            help="Authority contract principal (can only be set once)",
        )
        parser.add_argument(
            "--fee",
            type=int,
            help="Creation fee charged on each new group",
        )
        parser.add_argument(
            "--max-groups",
            type=int,
            help="Maximum number of group ids the registry will issue",
        )

    def handle(self, *args, **options):
        registry = build_registry()

        try:
            if options.get("authority"):
                registry.set_authority_contract(options["authority"])
                self.stdout.write(
                    self.style.SUCCESS(f"Authority contract set to {options['authority']}")
                )

            if options.get("fee") is not None:
                registry.set_creation_fee(options["fee"])
                self.stdout.write(self.style.SUCCESS(f"Creation fee set to {options['fee']}"))

            if options.get("max_groups") is not None:
                registry.set_max_groups(options["max_groups"])
                self.stdout.write(
                    self.style.SUCCESS(f"Group ceiling set to {options['max_groups']}")
                )
        except RegistryError as exc:
            raise CommandError(f"{exc.name} ({exc.code}): {exc.detail}")

        self.stdout.write(f"Authority contract: {registry.get_authority_contract() or '-'}")
        self.stdout.write(f"Creation fee: {registry.get_creation_fee()}")
        self.stdout.write(f"Max groups: {registry.get_max_groups()}")
        self.stdout.write(f"Groups issued: {registry.get_group_count()}")
