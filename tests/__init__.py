# tests/__init__.py

"""
Test suite of the Cidery Production API.

- `conftest.py`: shared fixtures (per-test database, role-specific clients,
  vendor and variety factories).
- `domains/`: one test module per business domain.
"""

__title__ = "Cidery API Tests"
__description__ = "Test suite for the Cidery Production API."
__version__ = "0.1.0"
__all__ = []
