"""REST service for customers, bank accounts and their transactions."""

__version__ = "0.1.0"
__all__ = ["__version__"]