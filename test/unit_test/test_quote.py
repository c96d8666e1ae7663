"""
Quote Module Unit Tests
"""

from unittest.mock import AsyncMock

import pytest

from conftest import make_quote, SOL_MINT, USDC_MINT
from swap_orchestrator.errors import ApiError
from swap_orchestrator.modules import QUOTE_FAILED_MESSAGE, QuoteFetcher
from swap_orchestrator.modules.quote import format_output_amount
from swap_orchestrator.types import AssetSymbol


def test_format_output_amount():
    assert format_output_amount(150_000_000, AssetSymbol.USDC) == "150.000000"
    assert format_output_amount(1_234_567_891, AssetSymbol.SOL) == "1.234568"
    assert format_output_amount(0, AssetSymbol.USDC) == "0.000000"


class TestQuoteFetcher:
    """Tests for QuoteFetcher.fetch"""

    @pytest.mark.asyncio
    async def test_requests_raw_amount(self, mock_api):
        fetcher = QuoteFetcher(mock_api)

        outcome = await fetcher.fetch("1.5", AssetSymbol.SOL, AssetSymbol.USDC)

        mock_api.get_quote.assert_awaited_once_with(
            input_mint=SOL_MINT,
            output_mint=USDC_MINT,
            amount=1_500_000_000,
            slippage_bps=50,
        )
        assert outcome.quote is not None
        assert outcome.output_amount == "150.000000"
        assert outcome.error is None

    @pytest.mark.asyncio
    async def test_reverse_direction(self, mock_api):
        mock_api.get_quote = AsyncMock(return_value=make_quote(
            in_amount=10_000_000,
            out_amount=66_000_000,
            input_mint=USDC_MINT,
            output_mint=SOL_MINT,
        ))
        fetcher = QuoteFetcher(mock_api)

        outcome = await fetcher.fetch("10", AssetSymbol.USDC, AssetSymbol.SOL)

        assert mock_api.get_quote.await_args.kwargs["amount"] == 10_000_000
        assert outcome.output_amount == "0.066000"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "abc", "0", "-2", "0.0000000001"])
    async def test_unusable_input_skips_network(self, mock_api, text):
        fetcher = QuoteFetcher(mock_api)

        outcome = await fetcher.fetch(text, AssetSymbol.SOL, AssetSymbol.USDC)

        assert outcome.is_empty
        assert outcome.output_amount == ""
        mock_api.get_quote.assert_not_called()

    @pytest.mark.asyncio
    async def test_unrepresentable_amount_skips_network(self, mock_api):
        fetcher = QuoteFetcher(mock_api)

        outcome = await fetcher.fetch("9e999999", AssetSymbol.SOL, AssetSymbol.USDC)

        assert outcome.is_empty
        mock_api.get_quote.assert_not_called()

    @pytest.mark.asyncio
    async def test_api_failure_gives_generic_message(self, mock_api):
        mock_api.get_quote = AsyncMock(side_effect=ApiError.bad_status("https://jup", 500, "boom"))
        fetcher = QuoteFetcher(mock_api)

        outcome = await fetcher.fetch("1", AssetSymbol.SOL, AssetSymbol.USDC)

        assert outcome.quote is None
        assert outcome.output_amount == ""
        assert outcome.error == QUOTE_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_unexpected_failure_gives_generic_message(self, mock_api):
        mock_api.get_quote = AsyncMock(side_effect=RuntimeError("socket closed"))
        fetcher = QuoteFetcher(mock_api)

        outcome = await fetcher.fetch("1", AssetSymbol.SOL, AssetSymbol.USDC)

        assert outcome.error == QUOTE_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_custom_slippage(self, mock_api):
        fetcher = QuoteFetcher(mock_api, slippage_bps=100)

        await fetcher.fetch("1", AssetSymbol.SOL, AssetSymbol.USDC)

        assert fetcher.slippage_bps == 100
        assert mock_api.get_quote.await_args.kwargs["slippage_bps"] == 100
