"""
Functional modules for SwapOrchestrator

Provides:
- BalanceReader: Balance of the asset being sold
- QuoteFetcher: Typed amount to normalized quote
- SwapExecutor: Accepted quote to confirmed transaction
- ViewState: Form state and derived display values
"""

from .balance import BalanceReader
from .quote import QuoteFetcher, QUOTE_FAILED_MESSAGE
from .swap import SwapExecutor, is_signer_failure
from .view import ViewState

__all__ = [
    "BalanceReader",
    "QuoteFetcher",
    "QUOTE_FAILED_MESSAGE",
    "SwapExecutor",
    "is_signer_failure",
    "ViewState",
]
