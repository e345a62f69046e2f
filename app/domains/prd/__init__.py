# app/domains/prd/__init__.py

"""
'prd' domain package (PostgreSQL 'prd' schema).

Production records the reports are computed from: press runs with their
per-variety loads, and fermentation batches.
"""

__title__ = "Cidery Production Domain"
__description__ = "Press runs, press run loads and batches."
__version__ = "0.1.0"
__all__ = []
