"""
SwapOrchestrator - Unified entry point for the swap form

Sequences balance reads, debounced quote requests and swap execution while
keeping the form state consistent. The presentation layer reads `state` and
the derived values, calls the operations, and renders notifications.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, List, Optional, Union

from .config import SWAP_POLICY, config as global_config
from .errors import ErrorCode, PreconditionFailed
from .infra import Debouncer, RpcClient, Wallet
from .modules import BalanceReader, QuoteFetcher, SwapExecutor, ViewState, is_signer_failure
from .protocols.jupiter import JupiterAPI
from .types import (
    AssetSymbol,
    Notification,
    QuoteOutcome,
    SwapFormState,
    TxResult,
    parse_amount,
)

logger = logging.getLogger(__name__)

SWAP_FAILED_MESSAGE = "Swap failed. Please try again."
SWAP_SUCCESS_MESSAGE = "Swap successful"

Notifier = Callable[[Notification], None]
StateListener = Callable[[SwapFormState], None]


def _log_notification(notification: Notification) -> None:
    logger.info(f"[{notification.level.value}] {notification.message}")


class SwapOrchestrator:
    """
    Swap form orchestrator

    Composes:
    - view: form state and derived values
    - balances: balance of the asset being sold
    - quotes: debounced quote requests, latest request wins
    - executor: swap submission and confirmation

    Usage:
        async with SwapOrchestrator(notifier=show_toast) as swap:
            await swap.connect_wallet(wallet)
            swap.set_input_amount("1.5")
            await swap.wait_for_quote()
            print(swap.state.output_amount, swap.exchange_rate)
            result = await swap.swap()
    """

    def __init__(
        self,
        rpc_url: Optional[Union[str, List[str]]] = None,
        rpc: Optional[RpcClient] = None,
        api: Optional[JupiterAPI] = None,
        notifier: Optional[Notifier] = None,
        on_change: Optional[StateListener] = None,
        debounce_seconds: Optional[float] = None,
        input_asset: AssetSymbol = AssetSymbol.SOL,
        output_asset: AssetSymbol = AssetSymbol.USDC,
    ):
        """
        Initialize SwapOrchestrator

        Args:
            rpc_url: RPC endpoint URL or list of URLs (default from config)
            rpc: Prebuilt RPC client, takes precedence over rpc_url
            api: Prebuilt Jupiter API client
            notifier: Receives user-facing notifications
            on_change: Called with the live state after every update
            debounce_seconds: Quote settle delay (default from policy)
            input_asset: Initially sold asset
            output_asset: Initially bought asset
        """
        self._rpc = rpc or RpcClient(rpc_url or global_config.rpc.url)
        self._api = api or JupiterAPI()

        self._view = ViewState(input_asset, output_asset)
        self._balances = BalanceReader(self._rpc)
        self._quotes = QuoteFetcher(self._api)
        self._executor = SwapExecutor(self._api, self._rpc)
        self._debouncer = Debouncer(
            debounce_seconds if debounce_seconds is not None else SWAP_POLICY.debounce_seconds
        )

        self._notifier = notifier or _log_notification
        self._on_change = on_change
        self._wallet: Optional[Wallet] = None
        self._quote_seq = 0

    # =========================================================================
    # State access
    # =========================================================================

    @property
    def state(self) -> SwapFormState:
        return self._view.state

    @property
    def view(self) -> ViewState:
        return self._view

    @property
    def wallet(self) -> Optional[Wallet]:
        return self._wallet

    @property
    def connected(self) -> bool:
        return self._wallet is not None and self._wallet.connected

    @property
    def exchange_rate(self) -> Optional[str]:
        return self._view.exchange_rate

    @property
    def rate_label(self) -> Optional[str]:
        return self._view.rate_label

    @property
    def price_impact(self) -> Optional[str]:
        return self._view.price_impact

    @property
    def action_label(self) -> str:
        return self._view.action_label(self.connected)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self._view.state)

    def _notify(self, notification: Notification) -> None:
        self._notifier(notification)

    # =========================================================================
    # Wallet and balance
    # =========================================================================

    async def connect_wallet(self, wallet: Wallet) -> None:
        """Connect a wallet and read its balance"""
        if not wallet.connected:
            await wallet.connect()
        self._wallet = wallet
        logger.info(f"Wallet connected: {wallet.pubkey}")
        await self.refresh_balance()

    async def disconnect_wallet(self) -> None:
        """Disconnect the current wallet, balance drops to zero"""
        wallet, self._wallet = self._wallet, None
        if wallet is not None and wallet.connected:
            await wallet.disconnect()
        await self.refresh_balance()

    async def refresh_balance(self) -> Decimal:
        """Re-read the balance of the asset currently being sold"""
        asset = self._view.state.input_asset
        balance = await self._balances.read(self._wallet, asset)
        # The sold asset may have changed while the query was in flight
        if self._view.state.input_asset == asset:
            self._view.set_balance(balance)
            self._changed()
        return balance

    # =========================================================================
    # Form edits
    # =========================================================================

    def set_input_amount(self, text: str) -> bool:
        """
        Update the typed amount and schedule a quote after the settle delay

        Must be called from within the running event loop.

        Returns:
            False if ignored because a swap is in flight
        """
        if not self._view.set_input_amount(text):
            logger.debug("Amount edit ignored, swap in progress")
            return False
        self._changed()
        self._schedule_quote()
        return True

    async def reverse(self) -> bool:
        """
        Swap the direction of the trade

        Returns:
            False if rejected because a quote request or swap is in flight
        """
        if not self._view.reverse():
            return False
        self._changed()
        self._schedule_quote()
        await self.refresh_balance()
        return True

    async def select_input_asset(self, asset: AssetSymbol) -> bool:
        """Choose the asset to sell"""
        previous = self._view.state.input_asset
        if not self._view.select_input_asset(asset):
            return False
        if self._view.state.input_asset != previous:
            self._changed()
            self._schedule_quote()
            await self.refresh_balance()
        return True

    async def select_output_asset(self, asset: AssetSymbol) -> bool:
        """Choose the asset to buy"""
        previous_in = self._view.state.input_asset
        previous_out = self._view.state.output_asset
        if not self._view.select_output_asset(asset):
            return False
        if self._view.state.output_asset != previous_out:
            self._changed()
            self._schedule_quote()
            if self._view.state.input_asset != previous_in:
                await self.refresh_balance()
        return True

    # =========================================================================
    # Quotes
    # =========================================================================

    def _schedule_quote(self) -> None:
        self._debouncer.schedule(self.refresh_quote)

    async def wait_for_quote(self) -> None:
        """Wait until the pending debounced quote request has completed"""
        await self._debouncer.flush()

    async def refresh_quote(self) -> None:
        """
        Fetch a quote for the current form values now

        Only the most recently issued request may update the state; an
        older response arriving late is dropped.
        """
        if self._view.state.swap_loading:
            logger.debug("Quote request suppressed, swap in progress")
            return

        self._quote_seq += 1
        request_id = self._quote_seq
        request = self._view.snapshot()

        if parse_amount(request.input_amount) is None:
            self._view.apply_quote_outcome(QuoteOutcome.empty())
            # This request is now the latest, so it owns the loading flag
            self._view.set_quote_loading(False)
            self._changed()
            return

        self._view.set_quote_loading(True)
        self._changed()
        try:
            outcome = await self._quotes.fetch(
                request.input_amount,
                request.input_asset,
                request.output_asset,
            )
        finally:
            if request_id == self._quote_seq:
                self._view.set_quote_loading(False)

        if not self._is_current(request_id, request):
            logger.debug(f"Discarding stale quote response #{request_id}")
            return

        self._view.apply_quote_outcome(outcome)
        self._changed()
        if outcome.error:
            self._notify(Notification.error(outcome.error))

    def _is_current(self, request_id: int, request: SwapFormState) -> bool:
        current = self._view.state
        return (
            request_id == self._quote_seq
            and request.input_amount == current.input_amount
            and request.input_asset == current.input_asset
            and request.output_asset == current.output_asset
        )

    # =========================================================================
    # Swap
    # =========================================================================

    async def swap(self) -> TxResult:
        """
        Execute the current quote

        Returns:
            TxResult; SKIPPED when another operation is in flight, REJECTED
            when a precondition failed, otherwise the execution result
        """
        snapshot = self._view.snapshot()
        try:
            self._executor.check_preconditions(snapshot, self._wallet)
        except PreconditionFailed as e:
            if e.code == ErrorCode.OPERATION_IN_PROGRESS:
                logger.debug(f"Swap ignored: {e.message}")
                return TxResult.skipped(e.message)
            logger.info(f"Swap rejected: {e.message}")
            self._view.set_error(e.message)
            self._changed()
            self._notify(Notification.error(e.message))
            return TxResult.rejected(e.message, e.code.value)

        self._view.set_swap_loading(True)
        self._view.set_error(None)
        self._changed()
        try:
            result = await self._executor.execute(snapshot.quote, self._wallet)
        finally:
            self._view.set_swap_loading(False)

        if result.is_success:
            self._view.record_swap(result.signature)
            self._view.reset_amounts()
            self._changed()
            self._notify(Notification.success(SWAP_SUCCESS_MESSAGE, result.explorer_url))
            await self.refresh_balance()
        else:
            message = result.error if is_signer_failure(result) else SWAP_FAILED_MESSAGE
            self._view.set_error(message)
            self._changed()
            self._notify(Notification.error(message))

        return result

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def close(self):
        """Cancel the pending quote timer and release HTTP clients"""
        await self._debouncer.cancel()
        await self._api.close()
        await self._rpc.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        pubkey = self._wallet.pubkey if self._wallet is not None else None
        return f"SwapOrchestrator(endpoint={self._rpc.endpoint}, wallet={pubkey})"
