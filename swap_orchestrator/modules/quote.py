"""
Quote Module

Turns a typed amount into a Jupiter quote request and normalizes the answer.
"""

import logging
from typing import Optional

from ..config import SWAP_POLICY
from ..errors import SwapOrchestratorError
from ..protocols.jupiter import JupiterAPI
from ..types import AssetSymbol, QuoteOutcome, parse_amount

logger = logging.getLogger(__name__)

QUOTE_FAILED_MESSAGE = "Failed to fetch quote. Please try again."


def format_output_amount(raw_amount: int, asset: AssetSymbol) -> str:
    """Raw output amount as UI text with 6 fixed decimals"""
    return f"{asset.config.ui_amount(raw_amount):.6f}"


class QuoteFetcher:
    """
    Quote requests for the swap form

    fetch() never raises: unusable input yields an empty outcome without
    touching the network, and remote failures yield an outcome carrying a
    generic message.

    Usage:
        fetcher = QuoteFetcher(api)
        outcome = await fetcher.fetch("1.5", AssetSymbol.SOL, AssetSymbol.USDC)
    """

    def __init__(self, api: JupiterAPI, slippage_bps: Optional[int] = None):
        self._api = api
        self._slippage_bps = slippage_bps if slippage_bps is not None else SWAP_POLICY.slippage_bps

    @property
    def slippage_bps(self) -> int:
        return self._slippage_bps

    async def fetch(
        self,
        amount_text: str,
        input_asset: AssetSymbol,
        output_asset: AssetSymbol,
    ) -> QuoteOutcome:
        """
        Get a quote for selling amount_text of input_asset

        Args:
            amount_text: Amount in UI units as typed
            input_asset: Asset being sold
            output_asset: Asset being bought

        Returns:
            QuoteOutcome with quote and formatted output, empty, or failed
        """
        amount = parse_amount(amount_text)
        if amount is None:
            return QuoteOutcome.empty()

        try:
            raw_amount = input_asset.config.raw_amount(amount)
        except ArithmeticError:
            # Too large to represent in smallest units
            return QuoteOutcome.empty()
        if raw_amount <= 0:
            # Below the smallest unit of the asset
            return QuoteOutcome.empty()

        try:
            quote = await self._api.get_quote(
                input_mint=input_asset.config.mint,
                output_mint=output_asset.config.mint,
                amount=raw_amount,
                slippage_bps=self._slippage_bps,
            )
        except SwapOrchestratorError as e:
            logger.error(f"Failed to fetch quote: {e}")
            return QuoteOutcome.failed(QUOTE_FAILED_MESSAGE)
        except Exception as e:
            logger.exception(f"Unexpected error fetching quote: {e}")
            return QuoteOutcome.failed(QUOTE_FAILED_MESSAGE)

        return QuoteOutcome(
            quote=quote,
            output_amount=format_output_amount(quote.out_amount, output_asset),
        )
