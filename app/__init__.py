# app/__init__.py

"""
Cidery Production API main package.

The package holds the FastAPI entry point (main.py), the core subpackage
(settings, database, security, shared helpers) and the domains subpackage,
one module group per business domain / PostgreSQL schema.
"""

APP_NAME = "Cidery Production API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # common route prefix (applied in main.py)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Purchasing, inventory, vendor-variety linking and audit API for cidery production."
__all__ = []
