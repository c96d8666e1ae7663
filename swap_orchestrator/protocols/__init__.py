"""
Aggregator protocol clients
"""

from .jupiter import JupiterAPI

__all__ = [
    "JupiterAPI",
]
