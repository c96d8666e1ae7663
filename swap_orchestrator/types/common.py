"""
Common type definitions
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_FLOOR, localcontext
from enum import Enum
from typing import Dict, Optional, Union


class AssetSymbol(Enum):
    """Assets the swap form can trade"""
    SOL = "SOL"
    USDC = "USDC"

    @property
    def config(self) -> "AssetConfig":
        return ASSETS[self]

    @property
    def other(self) -> "AssetSymbol":
        """The asset on the opposite side of the pair"""
        return AssetSymbol.USDC if self == AssetSymbol.SOL else AssetSymbol.SOL


@dataclass(frozen=True)
class AssetConfig:
    """
    Asset information

    Attributes:
        mint: Token mint address (base58)
        symbol: Token symbol (e.g., "SOL", "USDC")
        decimals: Number of decimal places
        native: True for the chain's native asset (balance read via getBalance)
        name: Full token name
    """
    mint: str
    symbol: str
    decimals: int
    native: bool = False
    name: str = ""

    def __str__(self) -> str:
        return self.symbol

    def __repr__(self) -> str:
        return f"AssetConfig({self.symbol}, {self.mint[:8]}...)"

    def ui_amount(self, raw_amount: int) -> Decimal:
        """
        Convert raw amount to UI amount with full precision

        Args:
            raw_amount: Raw token amount (smallest units)

        Returns:
            UI amount as Decimal for precision
        """
        return Decimal(raw_amount) / Decimal(10 ** self.decimals)

    def raw_amount(self, ui_amount: Union[Decimal, float, int, str]) -> int:
        """
        Convert UI amount to raw amount, always rounding down

        Args:
            ui_amount: UI amount (can be Decimal, float, int, or str)

        Returns:
            Raw token amount (smallest units)
        """
        if not isinstance(ui_amount, Decimal):
            ui_amount = Decimal(str(ui_amount))
        # Exact product, so the floor truncates instead of rounding
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, len(ui_amount.as_tuple().digits) + self.decimals + 1)
            scaled = ui_amount * Decimal(10 ** self.decimals)
        return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


ASSETS: Dict[AssetSymbol, AssetConfig] = {
    AssetSymbol.SOL: AssetConfig(
        mint="So11111111111111111111111111111111111111112",
        symbol="SOL",
        decimals=9,
        native=True,
        name="Solana",
    ),
    AssetSymbol.USDC: AssetConfig(
        mint="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
        symbol="USDC",
        decimals=6,
        name="USD Coin",
    ),
}


def parse_amount(text: Optional[str]) -> Optional[Decimal]:
    """
    Parse a user-entered amount

    Returns:
        The amount as Decimal, or None when the text is empty, not a number,
        not finite, or not strictly positive
    """
    if text is None or not text.strip():
        return None
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not value.is_finite() or value <= 0:
        return None
    return value
