"""API version 1."""

from civic_admin.api.v1.router import api_router

__all__ = ["api_router"]
