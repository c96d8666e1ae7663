"""
Exception definitions for Swap Orchestrator
"""

from enum import Enum
from typing import Optional
from decimal import Decimal


class ErrorCode(Enum):
    """
    Unified error codes for swap operations

    1xxx - Remote errors (RPC node, aggregator API)
    2xxx - Transaction errors
    3xxx - Precondition errors
    6xxx - Signer errors
    9xxx - Configuration errors
    """
    # Remote errors (recoverable)
    RPC_CONNECTION_FAILED = "1001"
    RPC_TIMEOUT = "1002"
    RPC_RATE_LIMITED = "1003"
    RPC_INVALID_RESPONSE = "1004"
    API_REQUEST_FAILED = "1101"
    API_INVALID_RESPONSE = "1102"

    # Transaction errors
    TX_SEND_FAILED = "2002"
    TX_CONFIRMATION_FAILED = "2003"
    TX_EXPIRED = "2005"
    TX_DECODE_FAILED = "2006"

    # Precondition errors
    WALLET_NOT_CONNECTED = "3001"
    OPERATION_IN_PROGRESS = "3002"
    INVALID_AMOUNT = "3003"
    INSUFFICIENT_BALANCE = "3004"
    NO_QUOTE = "3005"

    # Signer errors
    SIGNER_NOT_CAPABLE = "6001"
    SIGNER_FAILED = "6002"
    SIGNER_DECLINED = "6003"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class SwapOrchestratorError(Exception):
    """
    Base exception for all swap orchestrator errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


class RpcError(SwapOrchestratorError):
    """
    RPC-related errors - typically recoverable

    Raised when:
    - Connection to RPC endpoint fails
    - Request times out
    - Rate limit is hit
    - Node returns a JSON-RPC error object
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details={"endpoint": endpoint} if endpoint else None,
        )
        self.endpoint = endpoint

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "RpcError":
        return cls(
            f"Failed to connect to RPC endpoint: {endpoint}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def timeout(cls, endpoint: str, timeout_seconds: float) -> "RpcError":
        return cls(
            f"RPC request timed out after {timeout_seconds}s",
            ErrorCode.RPC_TIMEOUT,
            endpoint=endpoint,
        )

    @classmethod
    def rate_limited(cls, endpoint: str) -> "RpcError":
        return cls(
            "RPC rate limit exceeded",
            ErrorCode.RPC_RATE_LIMITED,
            endpoint=endpoint,
        )


class ApiError(SwapOrchestratorError):
    """
    Aggregator API errors - recoverable by the user, never retried automatically

    Raised when:
    - Quote or swap endpoint is unreachable
    - Endpoint answers with a non-success status
    - Response body does not match the expected structure
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.API_REQUEST_FAILED,
        original_error: Optional[Exception] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details={"url": url, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code

    @classmethod
    def request_failed(cls, url: str, error: Exception) -> "ApiError":
        return cls(
            f"Request to {url} failed: {error}",
            original_error=error,
            url=url,
        )

    @classmethod
    def bad_status(cls, url: str, status_code: int, body: str = "") -> "ApiError":
        return cls(
            f"HTTP {status_code} from {url}: {body[:200]}",
            url=url,
            status_code=status_code,
        )

    @classmethod
    def invalid_response(cls, url: str, reason: str) -> "ApiError":
        return cls(
            f"Invalid response from {url}: {reason}",
            ErrorCode.API_INVALID_RESPONSE,
            url=url,
        )


class TransactionError(SwapOrchestratorError):
    """
    Transaction execution errors

    Raised when:
    - Returned transaction payload cannot be decoded
    - Transaction send fails
    - Transaction fails on-chain or expires before confirmation
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_SEND_FAILED,
        signature: Optional[str] = None,
        recoverable: bool = False,
    ):
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            details={"signature": signature},
        )
        self.signature = signature

    @classmethod
    def decode_failed(cls, error: Exception) -> "TransactionError":
        return cls(
            f"Cannot decode swap transaction: {error}",
            ErrorCode.TX_DECODE_FAILED,
        )

    @classmethod
    def send_failed(cls, error: str) -> "TransactionError":
        recoverable = "timeout" in error.lower() or "connection" in error.lower()
        return cls(
            f"Failed to send transaction: {error}",
            ErrorCode.TX_SEND_FAILED,
            recoverable=recoverable,
        )

    @classmethod
    def confirmation_failed(cls, signature: str, error: str) -> "TransactionError":
        return cls(
            f"Transaction confirmation failed: {error}",
            ErrorCode.TX_CONFIRMATION_FAILED,
            signature=signature,
        )

    @classmethod
    def expired(cls, signature: str, last_valid_block_height: int) -> "TransactionError":
        return cls(
            f"Transaction {signature} expired: block height exceeded {last_valid_block_height}",
            ErrorCode.TX_EXPIRED,
            signature=signature,
            recoverable=True,
        )


class PreconditionFailed(SwapOrchestratorError):
    """
    A swap was requested in a state where it cannot run

    Raised before any network call. The message is short and user-facing.
    """

    def __init__(self, message: str, code: ErrorCode, details: Optional[dict] = None):
        super().__init__(message, code, recoverable=True, details=details)

    @classmethod
    def wallet_not_connected(cls) -> "PreconditionFailed":
        return cls("Connect your wallet", ErrorCode.WALLET_NOT_CONNECTED)

    @classmethod
    def in_progress(cls, operation: str) -> "PreconditionFailed":
        return cls(
            f"A {operation} is already in progress",
            ErrorCode.OPERATION_IN_PROGRESS,
            details={"operation": operation},
        )

    @classmethod
    def signer_not_capable(cls) -> "PreconditionFailed":
        return cls("Connect your wallet", ErrorCode.SIGNER_NOT_CAPABLE)

    @classmethod
    def invalid_amount(cls) -> "PreconditionFailed":
        return cls("Enter a valid amount", ErrorCode.INVALID_AMOUNT)

    @classmethod
    def insufficient_balance(cls, token: str, required: Decimal, available: Decimal) -> "PreconditionFailed":
        return cls(
            "Insufficient balance",
            ErrorCode.INSUFFICIENT_BALANCE,
            details={"token": token, "required": str(required), "available": str(available)},
        )

    @classmethod
    def no_quote(cls) -> "PreconditionFailed":
        return cls("Connect your wallet", ErrorCode.NO_QUOTE)


class SignerError(SwapOrchestratorError):
    """
    Signing-related errors

    Raised when:
    - Connected wallet has no signing capability
    - Wallet refuses to sign
    - Signing operation fails
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SIGNER_FAILED,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, code, recoverable=False, original_error=original_error)

    @classmethod
    def not_capable(cls) -> "SignerError":
        return cls("Wallet cannot sign transactions", ErrorCode.SIGNER_NOT_CAPABLE)

    @classmethod
    def declined(cls, reason: str = "request rejected") -> "SignerError":
        return cls(f"Signing declined: {reason}", ErrorCode.SIGNER_DECLINED)

    @classmethod
    def failed(cls, reason: str, error: Optional[Exception] = None) -> "SignerError":
        return cls(f"Signing failed: {reason}", ErrorCode.SIGNER_FAILED, original_error=error)


class ConfigurationError(SwapOrchestratorError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
