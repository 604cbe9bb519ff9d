"""Delivery zone import service."""
