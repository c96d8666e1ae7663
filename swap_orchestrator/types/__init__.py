"""
Type definitions for Swap Orchestrator
"""

from .common import AssetSymbol, AssetConfig, ASSETS, parse_amount
from .result import TxResult, TxStatus, QuoteResult, QuoteOutcome
from .state import SwapFormState, Notification, NotificationLevel

__all__ = [
    "AssetSymbol",
    "AssetConfig",
    "ASSETS",
    "parse_amount",
    "TxResult",
    "TxStatus",
    "QuoteResult",
    "QuoteOutcome",
    "SwapFormState",
    "Notification",
    "NotificationLevel",
]
