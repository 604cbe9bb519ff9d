"""Marketplace backend client."""

from .client import ZoneServiceClient, ZoneServiceError, check_health

__all__ = ["ZoneServiceClient", "ZoneServiceError", "check_health"]
