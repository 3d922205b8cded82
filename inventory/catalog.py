"""
Fixed demonstration catalog.

Each entry is (item_number, name, price, weight in pounds, size class).
"""

from collections import namedtuple
from decimal import Decimal

from .models import SizeClass

CatalogEntry = namedtuple('CatalogEntry', ['item_number', 'name', 'price', 'weight', 'size_class'])


CATALOG = [
    CatalogEntry('ITM-001', 'Wireless Mouse', Decimal('27.99'), Decimal('0.25'), SizeClass.SMALL),
    CatalogEntry('ITM-002', 'Keyboard', Decimal('52.99'), Decimal('1.50'), SizeClass.MEDIUM),
    CatalogEntry('ITM-003', 'Monitor', Decimal('215.99'), Decimal('12.50'), SizeClass.LARGE),
    CatalogEntry('ITM-004', 'HDMI Cable', Decimal('14.99'), Decimal('0.30'), SizeClass.SMALL),
    CatalogEntry('ITM-005', 'USB Cable', Decimal('9.99'), Decimal('0.20'), SizeClass.SMALL),
    CatalogEntry('ITM-006', 'Webcam', Decimal('77.99'), Decimal('0.80'), SizeClass.SMALL),
    CatalogEntry('ITM-007', 'USB Hub', Decimal('29.99'), Decimal('0.40'), SizeClass.SMALL),
    CatalogEntry('ITM-008', 'Headphones', Decimal('54.99'), Decimal('0.60'), SizeClass.MEDIUM),
    CatalogEntry('ITM-009', 'Mouse Pad', Decimal('12.99'), Decimal('0.30'), SizeClass.SMALL),
    CatalogEntry('ITM-010', 'Laptop Stand', Decimal('34.99'), Decimal('2.00'), SizeClass.MEDIUM),
    CatalogEntry('ITM-011', 'External SSD', Decimal('99.99'), Decimal('0.50'), SizeClass.SMALL),
    CatalogEntry('ITM-012', 'Phone Charger', Decimal('21.99'), Decimal('0.30'), SizeClass.SMALL),
    CatalogEntry('ITM-013', 'Desk Lamp', Decimal('42.99'), Decimal('1.80'), SizeClass.MEDIUM),
    CatalogEntry('ITM-014', 'Cable Organizer', Decimal('14.99'), Decimal('0.20'), SizeClass.SMALL),
    CatalogEntry('ITM-015', 'Laptop Bag', Decimal('54.99'), Decimal('1.20'), SizeClass.MEDIUM),
    CatalogEntry('ITM-016', 'Wireless Keyboard', Decimal('64.99'), Decimal('1.30'), SizeClass.MEDIUM),
    CatalogEntry('ITM-017', 'Gaming Mouse', Decimal('49.99'), Decimal('0.30'), SizeClass.SMALL),
    CatalogEntry('ITM-018', 'USB Microphone', Decimal('89.99'), Decimal('1.50'), SizeClass.MEDIUM),
    CatalogEntry('ITM-019', 'Monitor Arm', Decimal('129.99'), Decimal('5.00'), SizeClass.LARGE),
    CatalogEntry('ITM-020', 'Ethernet Cable', Decimal('12.99'), Decimal('0.40'), SizeClass.SMALL),
    CatalogEntry('ITM-021', 'Laptop Cooling Pad', Decimal('34.99'), Decimal('1.00'), SizeClass.MEDIUM),
    CatalogEntry('ITM-022', 'Wireless Charger', Decimal('29.99'), Decimal('0.50'), SizeClass.SMALL),
    CatalogEntry('ITM-023', 'Bluetooth Speaker', Decimal('44.99'), Decimal('0.80'), SizeClass.SMALL),
    CatalogEntry('ITM-024', 'Drawing Tablet', Decimal('79.99'), Decimal('1.20'), SizeClass.MEDIUM),
    CatalogEntry('ITM-025', 'Document Scanner', Decimal('149.99'), Decimal('3.50'), SizeClass.MEDIUM),
]

# Seeded orders draw their lines from this prefix of the catalog
ORDERABLE_ITEM_COUNT = 15


def serial_number(item_number, sequence):
    """ITM-001, 7 -> ITM-001-0007"""
    return f"{item_number}-{sequence:04d}"
