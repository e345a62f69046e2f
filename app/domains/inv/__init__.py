# app/domains/inv/__init__.py

"""
'inv' domain package (PostgreSQL 'inv' schema).

Juice, packaging and base fruit purchases, and the inventory availability
derived from them.
"""

__title__ = "Cidery Inventory Domain"
__description__ = "Purchasing and inventory availability."
__version__ = "0.1.0"
__all__ = []
