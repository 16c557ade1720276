"""
Load adapter configuration from .env files and environment variables.

Example:
    >>> from http_adapter.core.env_config import load_from_env
    >>> config = load_from_env()
"""

from .loader import load_from_env
from .validator import AdapterSettings

__all__ = [
    "load_from_env",
    "AdapterSettings",
]
