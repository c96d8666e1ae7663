"""
Swap Orchestrator - headless SOL/USDC swap form backed by Jupiter

Provides:
- Balance reads for the connected wallet
- Debounced quote requests (latest request wins)
- Swap execution: aggregator transaction, wallet signing, submission, confirmation
- Form state with derived exchange rate and price impact
"""

from .orchestrator import SwapOrchestrator
from .types import (
    AssetSymbol,
    AssetConfig,
    ASSETS,
    QuoteResult,
    QuoteOutcome,
    SwapFormState,
    TxResult,
    TxStatus,
    Notification,
    NotificationLevel,
)
from .errors import (
    ErrorCode,
    SwapOrchestratorError,
    RpcError,
    ApiError,
    TransactionError,
    PreconditionFailed,
    SignerError,
    ConfigurationError,
)
from .infra import RpcClient, RpcClientConfig, Wallet, KeypairWallet, Debouncer
from .protocols import JupiterAPI

__all__ = [
    # Entry point
    "SwapOrchestrator",
    # Types
    "AssetSymbol",
    "AssetConfig",
    "ASSETS",
    "QuoteResult",
    "QuoteOutcome",
    "SwapFormState",
    "TxResult",
    "TxStatus",
    "Notification",
    "NotificationLevel",
    # Errors
    "ErrorCode",
    "SwapOrchestratorError",
    "RpcError",
    "ApiError",
    "TransactionError",
    "PreconditionFailed",
    "SignerError",
    "ConfigurationError",
    # Infrastructure
    "RpcClient",
    "RpcClientConfig",
    "Wallet",
    "KeypairWallet",
    "Debouncer",
    "JupiterAPI",
]

__version__ = "0.1.0"
