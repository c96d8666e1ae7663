"""
Infrastructure layer for Swap Orchestrator

Provides:
- RpcClient: Async Solana JSON-RPC wrapper with retry logic
- Wallet: Wallet capability protocol, KeypairWallet implementation
- Debouncer: Single-slot delayed task scheduler
- CorrelationContext: Correlation IDs for swap log tracing
"""

from .rpc import RpcClient, RpcClientConfig
from .wallet import Wallet, KeypairWallet
from .debounce import Debouncer
from .correlation import CorrelationContext, get_correlation_id, log_with_correlation

__all__ = [
    "RpcClient",
    "RpcClientConfig",
    "Wallet",
    "KeypairWallet",
    "Debouncer",
    "CorrelationContext",
    "get_correlation_id",
    "log_with_correlation",
]
