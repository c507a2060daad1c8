"""
Audit material stock against the ledger.

Reports every material whose cached current_stock differs from
Σ in − Σ out of its transactions.

Usage:
    python manage.py check_material_ledger
    python manage.py check_material_ledger --shop example.myshopify.com
    python manage.py check_material_ledger --fail   # exit 1 on drift
"""

from django.core.management.base import BaseCommand, CommandError

from fulfillman.models import Shop
from fulfillman.services.ledger import drifted_materials


class Command(BaseCommand):
    help = "Compare Material.current_stock with its transaction ledger"

    def add_arguments(self, parser):
        parser.add_argument(
            "--shop",
            help="Only check materials of this shop domain",
        )
        parser.add_argument(
            "--fail",
            action="store_true",
            help="Exit with an error when any material drifts",
        )

    def handle(self, *args, **options):
        shop = None
        if options["shop"]:
            try:
                shop = Shop.objects.get(shop_domain=options["shop"])
            except Shop.DoesNotExist:
                raise CommandError(f"Unknown shop: {options['shop']}")

        drifted = drifted_materials(shop=shop)

        if not drifted:
            self.stdout.write(self.style.SUCCESS("✓ All materials match their ledger"))
            return

        for material, balance in drifted:
            self.stdout.write(
                self.style.ERROR(
                    f"✗ {material.name} (#{material.pk}): "
                    f"current_stock={material.current_stock} ledger={balance} "
                    f"diff={material.current_stock - balance}"
                )
            )

        summary = f"{len(drifted)} material(s) drift from their ledger"
        if options["fail"]:
            raise CommandError(summary)
        self.stdout.write(self.style.WARNING(summary))
