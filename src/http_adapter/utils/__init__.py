"""Helpers shared by the adapter modules."""

from .sanitizer import mask_sensitive_data

__all__ = ["mask_sensitive_data"]
