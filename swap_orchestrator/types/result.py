"""
Result type definitions for quotes and swap transactions
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional


class TxStatus(Enum):
    """Swap execution status"""
    SUCCESS = "success"
    FAILED = "failed"
    REJECTED = "rejected"  # Precondition failed, nothing was sent
    SKIPPED = "skipped"  # Another operation in flight, nothing was attempted


@dataclass
class TxResult:
    """
    Swap execution result

    Attributes:
        status: Execution status
        signature: Transaction signature (base58)
        error: Error message if failed or rejected
        recoverable: Whether the user may simply retry
        error_code: Error code for programmatic handling
        explorer_url: Link to the transaction on a block explorer
    """
    status: TxStatus
    signature: Optional[str] = None
    error: Optional[str] = None
    recoverable: bool = False
    error_code: Optional[str] = None
    explorer_url: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == TxStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.status == TxStatus.FAILED

    @property
    def is_rejected(self) -> bool:
        return self.status == TxStatus.REJECTED

    @property
    def is_skipped(self) -> bool:
        return self.status == TxStatus.SKIPPED

    @classmethod
    def success(cls, signature: str, **kwargs) -> "TxResult":
        """Create successful result"""
        return cls(status=TxStatus.SUCCESS, signature=signature, **kwargs)

    @classmethod
    def failed(cls, error: str, signature: str = None, **kwargs) -> "TxResult":
        """Create failed result"""
        return cls(status=TxStatus.FAILED, signature=signature, error=error, **kwargs)

    @classmethod
    def rejected(cls, error: str, error_code: str) -> "TxResult":
        """Create result for a swap refused before any network call"""
        return cls(status=TxStatus.REJECTED, error=error, error_code=error_code, recoverable=True)

    @classmethod
    def skipped(cls, reason: str = "Operation in progress", **kwargs) -> "TxResult":
        """Create skipped result (nothing was attempted)"""
        return cls(status=TxStatus.SKIPPED, error=reason, **kwargs)

    def __str__(self) -> str:
        if self.is_success:
            sig_display = f"{self.signature[:16]}..." if self.signature else "no signature"
            return f"TxResult(SUCCESS, {sig_display})"
        return f"TxResult({self.status.value}, error={self.error})"


_REQUIRED_QUOTE_FIELDS = ("inputMint", "inAmount", "outputMint", "outAmount", "otherAmountThreshold")


@dataclass(frozen=True)
class QuoteResult:
    """
    Swap quote result

    Attributes:
        input_mint: Input token mint
        in_amount: Input amount (raw)
        output_mint: Output token mint
        out_amount: Output amount (raw)
        other_amount_threshold: Minimum acceptable output after slippage (raw)
        slippage_bps: Applied slippage in basis points
        price_impact_pct: Price impact as reported by the aggregator
        swap_mode: "ExactIn" or "ExactOut"
        route: Labels of the AMMs on the route
        raw_response: Unmodified API response, posted back for the swap transaction
    """
    input_mint: str
    in_amount: int
    output_mint: str
    out_amount: int
    other_amount_threshold: int
    slippage_bps: int
    price_impact_pct: Decimal = Decimal(0)
    swap_mode: str = "ExactIn"
    route: List[str] = field(default_factory=list)
    raw_response: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, data: Any) -> "QuoteResult":
        """
        Build a quote from the aggregator's JSON body

        Raises:
            ValueError: If the body is not an object or a field is missing or malformed
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected JSON object, got {type(data).__name__}")
        missing = [name for name in _REQUIRED_QUOTE_FIELDS if data.get(name) in (None, "")]
        if missing:
            raise ValueError(f"missing fields: {', '.join(missing)}")

        try:
            in_amount = int(data["inAmount"])
            out_amount = int(data["outAmount"])
            threshold = int(data["otherAmountThreshold"])
            slippage_bps = int(data.get("slippageBps", 0))
            price_impact = Decimal(str(data.get("priceImpactPct") or 0))
        except (TypeError, ValueError, InvalidOperation) as e:
            raise ValueError(f"malformed numeric field: {e}") from e

        if in_amount <= 0 or out_amount < 0 or threshold < 0:
            raise ValueError(f"amounts out of range: in={in_amount} out={out_amount}")

        route = [
            step.get("swapInfo", {}).get("label", "")
            for step in data.get("routePlan") or []
            if isinstance(step, dict)
        ]

        return cls(
            input_mint=str(data["inputMint"]),
            in_amount=in_amount,
            output_mint=str(data["outputMint"]),
            out_amount=out_amount,
            other_amount_threshold=threshold,
            slippage_bps=slippage_bps,
            price_impact_pct=price_impact,
            swap_mode=str(data.get("swapMode", "ExactIn")),
            route=route,
            raw_response=data,
        )

    @property
    def exchange_rate(self) -> Decimal:
        """Output per input, in raw units"""
        if self.in_amount == 0:
            return Decimal(0)
        return Decimal(self.out_amount) / Decimal(self.in_amount)

    def __str__(self) -> str:
        return f"Quote({self.in_amount} -> {self.out_amount}, impact={self.price_impact_pct}%)"


@dataclass(frozen=True)
class QuoteOutcome:
    """
    What a quote fetch produced

    An empty outcome (no quote, no error) means the input was not a usable
    amount; it is the zero state, not a failure.
    """
    quote: Optional[QuoteResult] = None
    output_amount: str = ""
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.quote is None and self.error is None

    @classmethod
    def empty(cls) -> "QuoteOutcome":
        return cls()

    @classmethod
    def failed(cls, error: str) -> "QuoteOutcome":
        return cls(error=error)
