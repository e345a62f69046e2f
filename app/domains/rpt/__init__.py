# app/domains/rpt/__init__.py

"""
'rpt' domain package. Read-only production reports over a date range.

Submodules:
- `schemas.py`: report response models.
- `crud.py`: yield analysis, fermentation metrics and production summary.
- `routers.py`: API endpoints.

The domain owns no tables; it aggregates the 'prd' and 'var' schemas.
"""

__title__ = "Cidery Reporting Domain"
__description__ = "Production and fermentation reports."
__version__ = "0.1.0"
__all__ = []
