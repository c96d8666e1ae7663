"""
Error definitions for Swap Orchestrator
"""

from .exceptions import (
    ErrorCode,
    SwapOrchestratorError,
    RpcError,
    ApiError,
    TransactionError,
    PreconditionFailed,
    SignerError,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "SwapOrchestratorError",
    "RpcError",
    "ApiError",
    "TransactionError",
    "PreconditionFailed",
    "SignerError",
    "ConfigurationError",
]
