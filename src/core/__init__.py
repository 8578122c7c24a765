"""
Core functionality for the Maturity Optimizer service.

This package contains service configuration shared by the API layer.
"""

from src.core.config import settings

__all__ = [
    "settings",
]
