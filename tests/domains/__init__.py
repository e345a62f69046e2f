# tests/domains/__init__.py

"""
Per-domain tests: usr, var, ven (including vendor-variety links), inv and aud.
"""

__title__ = "Cidery Domain Tests"
__description__ = "Tests for each business domain of the Cidery Production API."
__version__ = "0.1.0"
__all__ = []
