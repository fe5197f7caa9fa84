"""QuickBooks Online Query Tool.

A read-only command-line client for the QuickBooks Online accounting API with
OAuth2 token management and paginated entity queries.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
