"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 3 users (admin, an owner and a cashier)
- 1 shop with the owner and cashier attached
- Menu products across categories
- Stock items (cups, cones, toppings) with usage rules
- A handful of sales and expenses for today's business day
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from decimal import Decimal

from apps.accounts.models import User, Shop, UserRole
from apps.products.models import Product, ProductCategory
from apps.stock.models import StockItem, ProductStockUsage
from apps.transactions.models import Transaction, TransactionType
from apps.transactions.services import record_transaction


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        shop = self.create_shop(users)
        products = self.create_products(shop)
        self.create_stock(shop, products)

        if not Transaction.objects.filter(shop=shop).exists():
            self.create_transactions(users, products)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  sari@example.com / password123 (owner)')
        self.stdout.write('  budi@example.com / password123 (cashier)')

    def clear_data(self):
        """Clear all data from the database."""
        Transaction.objects.all().delete()
        ProductStockUsage.objects.all().delete()
        StockItem.objects.all().delete()
        Product.objects.all().delete()
        User.objects.update(shop=None)
        Shop.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'full_name': 'Admin User',
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        owner, _ = User.objects.get_or_create(
            email='sari@example.com',
            defaults={
                'full_name': 'Sari Wulandari',
                'role': UserRole.OWNER,
            }
        )
        owner.set_password('password123')
        owner.save()

        cashier, _ = User.objects.get_or_create(
            email='budi@example.com',
            defaults={
                'full_name': 'Budi Santoso',
                'role': UserRole.STAFF,
            }
        )
        cashier.set_password('password123')
        cashier.save()

        return {
            'admin': admin,
            'owner': owner,
            'cashier': cashier,
        }

    def create_shop(self, users):
        """Create the shop and attach the owner and the cashier."""
        self.stdout.write('  Creating shop...')

        shop, _ = Shop.objects.get_or_create(
            owner=users['owner'],
            defaults={
                'name': "D'Creamy",
                'address': 'Jl. Kaliurang Km 5, Yogyakarta',
                'phone': '0274555123',
            }
        )

        User.objects.filter(id__in=[users['owner'].id, users['cashier'].id]).update(shop=shop)
        users['owner'].refresh_from_db()
        users['cashier'].refresh_from_db()

        return shop

    def create_products(self, shop):
        """Create the menu."""
        self.stdout.write('  Creating products...')

        products_data = [
            ('Cone Sundae', ProductCategory.ICE_CREAM, '🍦', '3500', '8000'),
            ('Cup Vanilla', ProductCategory.ICE_CREAM, '🍨', '4000', '10000'),
            ('Boba Sundae', ProductCategory.ICE_CREAM, '🧋', '6000', '15000'),
            ('Es Teh', ProductCategory.DRINK, '🧊', '1500', '5000'),
            ('Kentang Goreng', ProductCategory.SNACK, '🍟', '5000', '12000'),
        ]

        products = {}
        for name, category, emoji, buy_price, sell_price in products_data:
            product, _ = Product.objects.get_or_create(
                shop=shop,
                name=name,
                defaults={
                    'category': category,
                    'emoji': emoji,
                    'buy_price': Decimal(buy_price),
                    'sell_price': Decimal(sell_price),
                }
            )
            products[name] = product

        return products

    def create_stock(self, shop, products):
        """Create stock items and link them to the products that use them."""
        self.stdout.write('  Creating stock items...')

        stock_data = [
            ('Cone', 'pcs', 120, 30),
            ('Cup 8oz', 'pcs', 200, 50),
            ('Sedotan', 'pcs', 15, 40),
            ('Topping Boba', 'porsi', 25, 10),
        ]

        items = {}
        for name, unit, quantity, min_stock in stock_data:
            item, _ = StockItem.objects.get_or_create(
                shop=shop,
                name=name,
                defaults={
                    'unit': unit,
                    'quantity': quantity,
                    'min_stock': min_stock,
                }
            )
            items[name] = item

        usage_data = [
            ('Cone Sundae', 'Cone', 1),
            ('Cup Vanilla', 'Cup 8oz', 1),
            ('Boba Sundae', 'Cup 8oz', 1),
            ('Boba Sundae', 'Sedotan', 1),
            ('Boba Sundae', 'Topping Boba', 2),
            ('Es Teh', 'Sedotan', 1),
        ]

        for product_name, item_name, quantity_used in usage_data:
            ProductStockUsage.objects.get_or_create(
                product=products[product_name],
                stock_item=items[item_name],
                defaults={'quantity_used': quantity_used}
            )

        return items

    def create_transactions(self, users, products):
        """Record sales and expenses through the service so stock is deducted."""
        self.stdout.write('  Creating transactions...')

        sales = [
            (users['cashier'], 'Cone Sundae', 3, 'cash'),
            (users['cashier'], 'Boba Sundae', 2, 'qris'),
            (users['owner'], 'Es Teh', 4, 'cash'),
            (users['cashier'], 'Kentang Goreng', 1, 'transfer'),
        ]
        for user, product_name, quantity, payment_method in sales:
            _, result = record_transaction(
                user=user,
                type=TransactionType.INCOME,
                product_id=products[product_name].id,
                quantity=quantity,
                payment_method=payment_method,
            )
            if result and result.insufficient_items:
                self.stdout.write(self.style.WARNING(
                    f"    Low stock after {product_name}: {', '.join(result.insufficient_items)}"
                ))

        expenses = [
            (Decimal('45000'), 'Bahan Baku', 'Susu UHT 5 liter'),
            (Decimal('20000'), 'Operasional', 'Es batu'),
        ]
        for amount, category, note in expenses:
            record_transaction(
                user=users['owner'],
                type=TransactionType.EXPENSE,
                amount=amount,
                category=category,
                note=note,
            )
