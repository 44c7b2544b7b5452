"""Outbound integrations (push gateway, image analysis)."""
