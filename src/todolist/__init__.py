"""Multi-tenant to-do API."""

__version__ = "0.1.0"
