# costing/management/commands/seed_nyamoya.py

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from contacts.models import Supplier
from contacts.services.contact_service import create_supplier
from materials.models import RawMaterial
from materials.services.ledger import create_material
from products.models import Product
from products.services.ledger import create_product
from users.models import ROLE_ADMIN, ROLE_STAFF

User = get_user_model()

DEFAULT_PASSWORD = "Pass1234!"  # dev only; change for production

USERS = [
    (ROLE_ADMIN, "admin@nyamoya.example.com", "Nyamoya", "Admin"),
    (ROLE_STAFF, "staff@nyamoya.example.com", "Nyamoya", "Staff"),
]

SUPPLIERS = [
    ("Gulu Farmers Co-op", "Peanuts"),
    ("Kampala Packaging Ltd", "Packaging"),
    ("City Fuel Depot", "Fuel"),
]

# name, unit, opening stock, opening cost
MATERIALS = [
    ("Roasted Peanuts", "kg", Decimal("100"), Decimal("6500")),
    ("Salt", "kg", Decimal("10"), Decimal("1200")),
    ("Sugar", "kg", Decimal("20"), Decimal("4000")),
    ("Glass Jar 400g", "pcs", Decimal("500"), Decimal("900")),
    ("Label", "pcs", Decimal("500"), Decimal("150")),
]

# name, selling price
PRODUCTS = [
    ("Nyamoya Smooth 400g", Decimal("8000")),
    ("Nyamoya Crunchy 400g", Decimal("8500")),
]


class Command(BaseCommand):
    help = "Seed demo users, suppliers, raw materials (with opening balances) and products."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            default=DEFAULT_PASSWORD,
            help="Password for the seeded users (dev only).",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options["password"]

        created_users = 0
        for role, email, first_name, last_name in USERS:
            if User.objects.filter(email=email).exists():
                continue
            User.objects.create_user(
                email=email,
                password=password,
                role=role,
                first_name=first_name,
                last_name=last_name,
                is_staff=role == ROLE_ADMIN,
            )
            created_users += 1

        admin = User.objects.filter(email=USERS[0][1]).first()

        created_suppliers = 0
        for name, category in SUPPLIERS:
            if not Supplier.objects.filter(name=name).exists():
                create_supplier(name=name, category=category, user=admin)
                created_suppliers += 1

        created_materials = 0
        for name, unit, stock, cost in MATERIALS:
            if not RawMaterial.objects.filter(name=name).exists():
                create_material(
                    name=name,
                    unit=unit,
                    opening_stock=stock,
                    opening_cost=cost,
                    user=admin,
                )
                created_materials += 1

        created_products = 0
        for name, price in PRODUCTS:
            if not Product.objects.filter(name=name).exists():
                create_product(name=name, price=price, user=admin)
                created_products += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {created_users} users, {created_suppliers} suppliers, "
                f"{created_materials} raw materials, {created_products} products."
            )
        )
        if created_users:
            self.stdout.write(f"Password for new users: {password}")
