"""
Labman REST API.

Provides DRF ViewSets for:
- RawMaterial, Client, Employee (CRUD)
- Product (CRUD + price, derived, check-duplicate, quote)
- Order (CRUD + status, recalculate)
- Invoice (read-only + issue, status)
- Dashboard (analytics summary)
"""
