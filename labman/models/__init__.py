"""
Labman Models.

Core models for lab management:
- RawMaterial: Priced raw material with stock
- Product: Product or service, optionally derived from a base product
- ProductComponent: Raw material line of a product's own BOM
- Client / Employee: People the lab works with
- Order / OrderLine: Client orders with a computed total
- Invoice / InvoiceLine: Invoices issued from orders
- AccessGroup: Module access per user group
- CodeSequence: Atomic counters for order and invoice codes
"""

from labman.models.access import AccessGroup, Module
from labman.models.invoice import Invoice, InvoiceLine, InvoiceStatus
from labman.models.material import RawMaterial
from labman.models.order import Order, OrderLine, OrderStatus, PaymentMethod
from labman.models.party import Client, Employee
from labman.models.product import Product, ProductComponent, ProductKind
from labman.models.sequence import CodeSequence

__all__ = [
    "RawMaterial",
    "Product",
    "ProductComponent",
    "ProductKind",
    "Client",
    "Employee",
    "Order",
    "OrderLine",
    "OrderStatus",
    "PaymentMethod",
    "Invoice",
    "InvoiceLine",
    "InvoiceStatus",
    "AccessGroup",
    "Module",
    "CodeSequence",
]
