"""
Jupiter Swap Protocol

Provides quote and swap transaction building via the Jupiter aggregator.
"""

from .api import JupiterAPI

__all__ = [
    "JupiterAPI",
]
