"""
View Module

Owns the swap form state and the values derived from it.
"""

import logging
from decimal import Decimal
from typing import Optional

from ..types import AssetSymbol, QuoteOutcome, SwapFormState

logger = logging.getLogger(__name__)


class ViewState:
    """
    Swap form state holder

    All mutations go through this class. Collaborators get snapshots via
    snapshot() and hand results back through the apply/clear methods.
    """

    def __init__(
        self,
        input_asset: AssetSymbol = AssetSymbol.SOL,
        output_asset: AssetSymbol = AssetSymbol.USDC,
    ):
        if input_asset == output_asset:
            output_asset = input_asset.other
        self._state = SwapFormState(input_asset=input_asset, output_asset=output_asset)

    @property
    def state(self) -> SwapFormState:
        return self._state

    def snapshot(self) -> SwapFormState:
        return self._state.snapshot()

    # =========================================================================
    # Derived values
    # =========================================================================

    @property
    def exchange_rate(self) -> Optional[str]:
        """Output per one input unit, 4 decimals; None without quote and both amounts"""
        state = self._state
        if state.quote is None or not state.input_amount or not state.output_amount:
            return None
        quote = state.quote
        if quote.in_amount == 0:
            return None
        ui_in = state.input_asset.config.ui_amount(quote.in_amount)
        ui_out = state.output_asset.config.ui_amount(quote.out_amount)
        return f"{ui_out / ui_in:.4f}"

    @property
    def rate_label(self) -> Optional[str]:
        rate = self.exchange_rate
        if rate is None:
            return None
        return f"1 {self._state.input_asset.value} = {rate} {self._state.output_asset.value}"

    @property
    def price_impact(self) -> Optional[str]:
        """Quote's price impact percentage, 2 decimals"""
        if self._state.quote is None:
            return None
        return f"{self._state.quote.price_impact_pct:.2f}"

    def action_label(self, connected: bool) -> str:
        """Text of the submit button"""
        if not connected:
            return "Connect Wallet"
        return "Swapping..." if self._state.swap_loading else "Swap"

    # =========================================================================
    # Mutations
    # =========================================================================

    def set_input_amount(self, text: str) -> bool:
        """
        Replace the typed amount and drop the quote it invalidates

        Returns:
            False if a swap is in flight and the edit was ignored
        """
        if self._state.swap_loading:
            return False
        self._state.input_amount = text
        self.clear_quote()
        return True

    def clear_quote(self) -> None:
        self._state.quote = None
        self._state.output_amount = ""

    def apply_quote_outcome(self, outcome: QuoteOutcome) -> None:
        """Store what a quote fetch produced"""
        self._state.quote = outcome.quote
        self._state.output_amount = outcome.output_amount
        self._state.error = outcome.error

    def set_balance(self, balance: Decimal) -> None:
        self._state.balance = balance

    def set_quote_loading(self, loading: bool) -> None:
        self._state.quote_loading = loading

    def set_swap_loading(self, loading: bool) -> None:
        self._state.swap_loading = loading

    def set_error(self, message: Optional[str]) -> None:
        self._state.error = message

    def reverse(self) -> bool:
        """
        Swap direction: exchange assets and amount texts, discard the quote

        Returns:
            False if rejected because a quote fetch or swap is in flight
        """
        state = self._state
        if state.busy:
            logger.debug("Reverse ignored, operation in progress")
            return False

        state.input_asset, state.output_asset = state.output_asset, state.input_asset
        state.input_amount, state.output_amount = state.output_amount, state.input_amount
        state.quote = None
        return True

    def select_input_asset(self, asset: AssetSymbol) -> bool:
        """
        Change the asset being sold

        Picking the asset already on the output side reverses the pair.

        Returns:
            False if rejected because an operation is in flight
        """
        if asset == self._state.input_asset:
            return True
        if asset == self._state.output_asset:
            return self.reverse()
        if self._state.busy:
            return False
        self._state.input_asset = asset
        self.clear_quote()
        return True

    def select_output_asset(self, asset: AssetSymbol) -> bool:
        """Change the asset being bought, same rules as select_input_asset"""
        if asset == self._state.output_asset:
            return True
        if asset == self._state.input_asset:
            return self.reverse()
        if self._state.busy:
            return False
        self._state.output_asset = asset
        self.clear_quote()
        return True

    def reset_amounts(self) -> None:
        """Clear both amounts and the quote after a completed swap"""
        self._state.input_amount = ""
        self.clear_quote()

    def record_swap(self, signature: str) -> None:
        self._state.last_signature = signature
        self._state.error = None
