"""
Version 1 of the HTTP API.
"""

from src.api.v1 import catalog, optimization

__all__ = [
    "catalog",
    "optimization",
]
