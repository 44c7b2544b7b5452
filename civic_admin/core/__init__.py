"""Core: settings, lifespan, error mapping and service wiring."""

from civic_admin.core.config import get_settings

__all__ = ["get_settings"]
