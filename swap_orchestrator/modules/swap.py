"""
Swap Module

Executes an accepted Jupiter quote:
- Precondition checks (no network effect when they fail)
- Swap transaction from the aggregator
- Wallet signing
- Submission with preflight skipped
- Confirmation keyed on the latest blockhash
"""

from __future__ import annotations

import logging
from typing import Optional

from solders.transaction import VersionedTransaction

from ..config import SWAP_POLICY, config as global_config
from ..errors import (
    ErrorCode,
    PreconditionFailed,
    SignerError,
    SwapOrchestratorError,
    TransactionError,
)
from ..infra import CorrelationContext, RpcClient, Wallet, log_with_correlation
from ..protocols.jupiter import JupiterAPI
from ..types import QuoteResult, SwapFormState, TxResult, parse_amount

logger = logging.getLogger(__name__)


class SwapExecutor:
    """
    Swap execution for the swap form

    execute() never raises: every failure becomes a failed TxResult that
    carries the error code, and nothing is retried automatically.

    Usage:
        executor = SwapExecutor(api, rpc)
        executor.check_preconditions(state.snapshot(), wallet)
        result = await executor.execute(state.quote, wallet)
    """

    def __init__(self, api: JupiterAPI, rpc: RpcClient):
        self._api = api
        self._rpc = rpc

    def check_preconditions(self, state: SwapFormState, wallet: Optional[Wallet]) -> None:
        """
        Validate that a swap may start from this state

        Raises:
            PreconditionFailed: With a short user-facing message
        """
        if state.swap_loading:
            raise PreconditionFailed.in_progress("swap")
        if state.quote_loading:
            raise PreconditionFailed.in_progress("quote request")

        if wallet is None or not wallet.connected or not wallet.pubkey:
            raise PreconditionFailed.wallet_not_connected()
        if not getattr(wallet, "can_sign", False):
            raise PreconditionFailed.signer_not_capable()
        if state.quote is None:
            raise PreconditionFailed.no_quote()

        amount = parse_amount(state.input_amount)
        if amount is None:
            raise PreconditionFailed.invalid_amount()

        if amount > state.balance:
            raise PreconditionFailed.insufficient_balance(
                state.input_asset.value, amount, state.balance
            )

    async def execute(self, quote: QuoteResult, wallet: Wallet) -> TxResult:
        """
        Run the swap for a quote the user accepted

        Args:
            quote: Quote obtained for the current form values
            wallet: Connected wallet

        Returns:
            TxResult, success carries the signature and an explorer link
        """
        with CorrelationContext("swap"):
            log_with_correlation(logger, logging.INFO, f"Executing {quote} for {wallet.pubkey}")
            try:
                signature = await self._execute(quote, wallet)
            except SwapOrchestratorError as e:
                log_with_correlation(logger, logging.ERROR, f"Swap failed: {e}")
                return TxResult.failed(
                    e.message,
                    signature=e.details.get("signature"),
                    recoverable=e.recoverable,
                    error_code=e.code.value,
                )
            except Exception as e:
                logger.exception(f"Unexpected swap failure: {e}")
                return TxResult.failed(str(e))

            log_with_correlation(logger, logging.INFO, f"Swap confirmed: {signature}")
            return TxResult.success(
                signature,
                explorer_url=global_config.explorer.link(signature),
            )

    async def _execute(self, quote: QuoteResult, wallet: Wallet) -> str:
        unsigned_bytes = await self._api.get_swap_transaction(
            quote,
            wallet.pubkey,
            wrap_and_unwrap_sol=SWAP_POLICY.wrap_and_unwrap_sol,
        )

        try:
            transaction = VersionedTransaction.from_bytes(unsigned_bytes)
        except Exception as e:
            raise TransactionError.decode_failed(e) from e

        signed = await self._sign(transaction, wallet)

        signature = await self._rpc.send_raw_transaction(
            bytes(signed),
            skip_preflight=SWAP_POLICY.skip_preflight,
            max_retries=SWAP_POLICY.send_max_retries,
        )
        log_with_correlation(logger, logging.INFO, f"Transaction sent: {signature}")

        latest = await self._rpc.get_latest_blockhash()
        await self._rpc.confirm_transaction(
            signature,
            blockhash=latest["blockhash"],
            last_valid_block_height=latest["lastValidBlockHeight"],
        )
        return signature

    async def _sign(self, transaction: VersionedTransaction, wallet: Wallet) -> VersionedTransaction:
        """Delegate signing to the wallet"""
        if not getattr(wallet, "can_sign", False):
            raise SignerError.not_capable()

        try:
            signed = await wallet.sign_transaction(transaction)
        except SignerError:
            raise
        except Exception as e:
            raise SignerError.failed(str(e), e) from e

        if signed is None:
            raise SignerError.declined()
        return signed


def is_signer_failure(result: TxResult) -> bool:
    """True when the swap failed because the wallet could not or would not sign"""
    return result.error_code in (
        ErrorCode.SIGNER_NOT_CAPABLE.value,
        ErrorCode.SIGNER_DECLINED.value,
        ErrorCode.SIGNER_FAILED.value,
    )
