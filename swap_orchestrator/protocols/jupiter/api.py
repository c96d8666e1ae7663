"""
Jupiter API Client

Async REST client for the Jupiter swap aggregator.
"""

import base64
import binascii
import logging
from typing import Any, Dict, Optional

import httpx

from ...types import QuoteResult
from ...config import config as global_config
from ...errors import ApiError

logger = logging.getLogger(__name__)


class JupiterAPI:
    """
    Jupiter REST API client

    Provides:
    - Swap quotes
    - Swap transaction building

    Requests are made once; a failure is reported to the caller and never
    retried here.

    Usage:
        async with JupiterAPI() as api:
            quote = await api.get_quote(SOL_MINT, USDC_MINT, 1_000_000_000)
            tx_bytes = await api.get_swap_transaction(quote, user_pubkey)
    """

    def __init__(
        self,
        timeout: float = None,
        quote_url: str = None,
        swap_url: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Jupiter API client

        Args:
            timeout: Request timeout in seconds (default from config)
            quote_url: Quote API URL (default from config)
            swap_url: Swap API URL (default from config)
            transport: Optional httpx transport (used by tests)
        """
        self._timeout = timeout if timeout is not None else global_config.jupiter.timeout
        self._quote_url = quote_url if quote_url is not None else global_config.jupiter.quote_url
        self._swap_url = swap_url if swap_url is not None else global_config.jupiter.swap_url
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        """Send a request and return the decoded JSON body"""
        client = self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError.request_failed(url, e) from e

        if not response.is_success:
            raise ApiError.bad_status(url, response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError.invalid_response(url, f"body is not JSON ({e})") from e

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int,
    ) -> QuoteResult:
        """
        Get swap quote from Jupiter

        Args:
            input_mint: Input token mint address
            output_mint: Output token mint address
            amount: Amount in smallest units (lamports for SOL)
            slippage_bps: Slippage tolerance in basis points

        Returns:
            QuoteResult with swap details

        Raises:
            ApiError: On transport failure, non-success status or malformed body
        """
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": slippage_bps,
        }
        logger.debug(f"Requesting quote: {params}")
        data = await self._request("GET", self._quote_url, params=params)

        try:
            quote = QuoteResult.from_response(data)
        except ValueError as e:
            raise ApiError.invalid_response(self._quote_url, str(e)) from e

        if quote.input_mint != input_mint or quote.output_mint != output_mint:
            raise ApiError.invalid_response(
                self._quote_url,
                f"quote is for {quote.input_mint} -> {quote.output_mint}, "
                f"requested {input_mint} -> {output_mint}",
            )

        logger.info(f"Jupiter quote: {quote}")
        return quote

    async def get_swap_transaction(
        self,
        quote: QuoteResult,
        user_pubkey: str,
        wrap_and_unwrap_sol: bool = True,
    ) -> bytes:
        """
        Get swap transaction from Jupiter

        The quote's original response is posted back unmodified so the route
        and price are exactly the ones the user saw.

        Args:
            quote: Quote result from get_quote()
            user_pubkey: User wallet public key
            wrap_and_unwrap_sol: Auto wrap/unwrap SOL

        Returns:
            Serialized transaction bytes (base64 decoded)

        Raises:
            ApiError: On transport failure, non-success status or missing payload
        """
        swap_request: Dict[str, Any] = {
            "quoteResponse": quote.raw_response,
            "userPublicKey": user_pubkey,
            "wrapAndUnwrapSol": wrap_and_unwrap_sol,
        }

        data = await self._request("POST", self._swap_url, json=swap_request)

        swap_transaction = data.get("swapTransaction") if isinstance(data, dict) else None
        if not swap_transaction or not isinstance(swap_transaction, str):
            raise ApiError.invalid_response(self._swap_url, "no swapTransaction in response")

        try:
            return base64.b64decode(swap_transaction, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ApiError.invalid_response(self._swap_url, f"swapTransaction is not base64 ({e})") from e

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
