"""
Form state and user notifications
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Optional

from .common import AssetSymbol
from .result import QuoteResult


@dataclass
class SwapFormState:
    """
    Everything the swap form displays

    Attributes:
        input_amount: Amount text as typed by the user
        output_amount: Quoted output, display only
        input_asset: Asset being sold
        output_asset: Asset being bought
        balance: Last-read balance of input_asset in UI units
        quote: Latest quote matching the fields above, or None
        quote_loading: A quote request is in flight
        swap_loading: A swap execution is in flight
        error: Last error message shown to the user
        last_signature: Signature of the last confirmed swap
    """
    input_amount: str = ""
    output_amount: str = ""
    input_asset: AssetSymbol = AssetSymbol.SOL
    output_asset: AssetSymbol = AssetSymbol.USDC
    balance: Decimal = Decimal(0)
    quote: Optional[QuoteResult] = None
    quote_loading: bool = False
    swap_loading: bool = False
    error: Optional[str] = None
    last_signature: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.quote_loading or self.swap_loading

    def snapshot(self) -> "SwapFormState":
        """Copy handed to collaborators so they never mutate the live state"""
        return replace(self)


class NotificationLevel(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A toast for the presentation layer"""
    level: NotificationLevel
    message: str
    link: Optional[str] = None

    @classmethod
    def success(cls, message: str, link: Optional[str] = None) -> "Notification":
        return cls(NotificationLevel.SUCCESS, message, link)

    @classmethod
    def error(cls, message: str) -> "Notification":
        return cls(NotificationLevel.ERROR, message)
