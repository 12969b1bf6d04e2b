"""
Load the default access groups for Labman.

Creates the four lab roles with their modules:
- Administratori: every module, administration included
- Management: orders, invoices, clients, employees
- Productie: orders, products, raw materials
- Vanzari: orders, invoices, clients

Usage:
    python manage.py load_labman_groups
    python manage.py load_labman_groups --reset
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from labman.models import AccessGroup, Module

DEFAULT_GROUPS = [
    (
        "Administratori",
        "Acces complet la toate modulele aplicației, inclusiv administrare",
        list(Module.values),
    ),
    (
        "Management",
        "Acces la comenzi, facturi, clienți, angajați și rapoarte",
        [Module.DASHBOARD, Module.ORDERS, Module.INVOICES, Module.CLIENTS, Module.EMPLOYEES],
    ),
    (
        "Producție",
        "Acces la produse, materii prime și comenzi",
        [Module.DASHBOARD, Module.ORDERS, Module.PRODUCTS, Module.MATERIALS],
    ),
    (
        "Vânzări",
        "Acces la comenzi, facturi și clienți",
        [Module.DASHBOARD, Module.ORDERS, Module.INVOICES, Module.CLIENTS],
    ),
]


class Command(BaseCommand):
    help = "Creates the default Labman access groups"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Restore description and modules of groups that already exist",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("🔐 Loading access groups...")

        for name, description, modules in DEFAULT_GROUPS:
            modules = [str(m) for m in modules]
            group, created = AccessGroup.objects.get_or_create(
                name=name,
                defaults={"description": description, "modules": modules},
            )
            if created:
                self.stdout.write(f"   ✓ {name} created")
            elif options["reset"]:
                group.description = description
                group.modules = modules
                group.save()
                self.stdout.write(f"   ↻ {name} reset")
            else:
                self.stdout.write(f"   • {name} already exists")

        self.stdout.write(self.style.SUCCESS(f"Done: {AccessGroup.objects.count()} groups."))
