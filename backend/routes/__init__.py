"""API route modules for the MBS rules backend.

Routers:
- rules: Catalog lookup and refresh
"""

from .rules import router as rules_router

__all__ = ["rules_router"]
