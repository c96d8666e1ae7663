"""
View Module Unit Tests
"""

from decimal import Decimal

from conftest import make_quote, SOL_MINT, USDC_MINT
from swap_orchestrator.modules import ViewState
from swap_orchestrator.types import AssetSymbol, QuoteOutcome


def quoted_view() -> ViewState:
    view = ViewState()
    view.set_input_amount("1.5")
    view.apply_quote_outcome(QuoteOutcome(quote=make_quote(), output_amount="150.000000"))
    return view


class TestDerivedValues:
    """Tests for exchange rate, price impact and the action label"""

    def test_exchange_rate(self):
        view = quoted_view()

        assert view.exchange_rate == "100.0000"
        assert view.rate_label == "1 SOL = 100.0000 USDC"

    def test_exchange_rate_absent(self):
        view = ViewState()
        assert view.exchange_rate is None
        assert view.rate_label is None

        view = quoted_view()
        view.state.output_amount = ""
        assert view.exchange_rate is None

    def test_exchange_rate_reverse_direction(self):
        view = ViewState(AssetSymbol.USDC, AssetSymbol.SOL)
        view.set_input_amount("10")
        quote = make_quote(
            in_amount=10_000_000,
            out_amount=66_000_000,
            input_mint=USDC_MINT,
            output_mint=SOL_MINT,
        )
        view.apply_quote_outcome(QuoteOutcome(quote=quote, output_amount="0.066000"))

        assert view.exchange_rate == "0.0066"

    def test_price_impact(self):
        assert quoted_view().price_impact == "0.01"
        assert ViewState().price_impact is None

    def test_action_label(self):
        view = ViewState()

        assert view.action_label(connected=False) == "Connect Wallet"
        assert view.action_label(connected=True) == "Swap"
        view.set_swap_loading(True)
        assert view.action_label(connected=True) == "Swapping..."


class TestMutations:
    """Tests for form edits"""

    def test_same_assets_corrected(self):
        view = ViewState(AssetSymbol.USDC, AssetSymbol.USDC)
        assert view.state.output_asset == AssetSymbol.SOL

    def test_input_edit_clears_quote(self):
        view = quoted_view()

        assert view.set_input_amount("2")
        assert view.state.quote is None
        assert view.state.output_amount == ""

    def test_input_edit_ignored_during_swap(self):
        view = quoted_view()
        view.set_swap_loading(True)

        assert view.set_input_amount("2") is False
        assert view.state.input_amount == "1.5"
        assert view.state.quote is not None

    def test_reverse(self):
        view = quoted_view()

        assert view.reverse()
        state = view.state
        assert state.input_asset == AssetSymbol.USDC
        assert state.output_asset == AssetSymbol.SOL
        assert state.input_amount == "150.000000"
        assert state.output_amount == "1.5"
        assert state.quote is None

    def test_reverse_rejected_while_busy(self):
        view = quoted_view()
        view.set_quote_loading(True)

        assert view.reverse() is False
        assert view.state.input_asset == AssetSymbol.SOL
        assert view.state.input_amount == "1.5"

        view.set_quote_loading(False)
        view.set_swap_loading(True)
        assert view.reverse() is False

    def test_select_opposite_asset_reverses(self):
        view = ViewState()

        assert view.select_input_asset(AssetSymbol.USDC)
        assert view.state.input_asset == AssetSymbol.USDC
        assert view.state.output_asset == AssetSymbol.SOL

        assert view.select_output_asset(AssetSymbol.USDC)
        assert view.state.input_asset == AssetSymbol.SOL
        assert view.state.output_asset == AssetSymbol.USDC

    def test_select_same_asset_is_noop(self):
        view = quoted_view()

        assert view.select_input_asset(AssetSymbol.SOL)
        assert view.state.quote is not None

    def test_reset_after_swap(self):
        view = quoted_view()
        view.set_error("old")
        view.set_balance(Decimal("3"))

        view.record_swap("5igSig")
        view.reset_amounts()

        assert view.state.input_amount == ""
        assert view.state.output_amount == ""
        assert view.state.quote is None
        assert view.state.error is None
        assert view.state.last_signature == "5igSig"
        assert view.state.balance == Decimal("3")

    def test_failed_outcome_sets_error(self):
        view = quoted_view()
        view.apply_quote_outcome(QuoteOutcome.failed("Failed to fetch quote. Please try again."))

        assert view.state.quote is None
        assert view.state.output_amount == ""
        assert view.state.error == "Failed to fetch quote. Please try again."
