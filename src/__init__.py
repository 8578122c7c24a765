"""
Maturity Optimizer - Source Package

This package contains the genetic algorithm that plans cybersecurity maturity
for an asset, its case files, and the HTTP API that exposes it.
"""

__version__ = "1.0.0"

# Package-level imports for convenience
from src.core.config import settings

__all__ = [
    "settings",
    "__version__",
]
