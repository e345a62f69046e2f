# app/domains/var/__init__.py

"""
'var' domain package (PostgreSQL 'var' schema).

Catalogue of the four variety kinds a vendor can supply: base fruit,
additives, juice and packaging. Names are unique per kind among live
(not soft-deleted) rows, compared case-insensitively.
"""

__title__ = "Cidery Variety Domain"
__description__ = "Base fruit, additive, juice and packaging varieties."
__version__ = "0.1.0"
__all__ = []
