"""
Async RPC Client for Solana

Provides the JSON-RPC calls the swap flow needs with:
- Multiple endpoint fallback
- Retry logic
- Rate limit handling
- Request timeout management
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Dict, List, Optional, Union
from dataclasses import dataclass

import httpx

from ..errors import ErrorCode, RpcError, ConfigurationError, TransactionError
from ..config import config as global_config

logger = logging.getLogger(__name__)

# SPL Token program, default filter for token account lookups
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"


@dataclass
class RpcClientConfig:
    """
    RPC client runtime configuration

    Allows per-client overrides while pulling defaults from the global
    config (swap_orchestrator.config.RpcConfig).

    Usage:
        # Use all defaults from environment
        client = RpcClient(endpoint)

        # Override specific settings
        config = RpcClientConfig(timeout_seconds=60, max_retries=5)
        client = RpcClient(endpoint, config=config)
    """
    timeout_seconds: float = None
    max_retries: int = None
    retry_delay_seconds: float = None
    commitment: str = None
    confirm_poll_interval: float = None

    def __post_init__(self):
        """Apply defaults from global config for any unset values"""
        if self.timeout_seconds is None:
            self.timeout_seconds = global_config.rpc.timeout_seconds
        if self.max_retries is None:
            self.max_retries = global_config.rpc.max_retries
        if self.retry_delay_seconds is None:
            self.retry_delay_seconds = global_config.rpc.retry_delay_seconds
        if self.commitment is None:
            self.commitment = global_config.rpc.commitment
        if self.confirm_poll_interval is None:
            self.confirm_poll_interval = global_config.rpc.confirm_poll_interval


class RpcClient:
    """
    Async Solana RPC client

    Supports:
    - Multiple RPC endpoints with automatic fallback
    - Retry logic for transient failures
    - Rate limit handling with backoff
    - Configurable timeouts

    Usage:
        async with RpcClient("https://api.mainnet-beta.solana.com") as rpc:
            lamports = await rpc.get_balance("Address...")
            result = await rpc.call("getSlot", [])
    """

    def __init__(
        self,
        endpoint: Union[str, List[str]],
        config: Optional[RpcClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize RPC client

        Args:
            endpoint: RPC endpoint URL or list of URLs (for fallback)
            config: RPC configuration options
            transport: Optional httpx transport (used by tests)
        """
        self._endpoints = [endpoint] if isinstance(endpoint, str) else list(endpoint)
        if not self._endpoints:
            raise ConfigurationError.missing("RPC endpoint")

        self._config = config or RpcClientConfig()
        self._transport = transport
        self._current_endpoint_idx = 0
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def endpoint(self) -> str:
        """Current active endpoint"""
        return self._endpoints[self._current_endpoint_idx]

    @property
    def commitment(self) -> str:
        """Default commitment level"""
        return self._config.commitment

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    def _rotate_endpoint(self):
        """Rotate to next endpoint on failure"""
        if len(self._endpoints) > 1:
            self._current_endpoint_idx = (self._current_endpoint_idx + 1) % len(self._endpoints)
            logger.info(f"Rotating to RPC endpoint: {self.endpoint}")

    async def call(
        self,
        method: str,
        params: List[Any],
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make JSON-RPC call

        Args:
            method: RPC method name
            params: RPC parameters
            timeout: Optional timeout override

        Returns:
            RPC result

        Raises:
            RpcError: On RPC failure
        """
        client = self._get_client()
        body = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params,
        }

        last_error: Optional[Exception] = None
        timeout_val = timeout or self._config.timeout_seconds

        for _ in range(len(self._endpoints)):
            for attempt in range(self._config.max_retries):
                try:
                    response = await client.post(self.endpoint, json=body, timeout=timeout_val)

                    if response.status_code == 429:
                        logger.warning(f"Rate limited by {self.endpoint}")
                        last_error = RpcError.rate_limited(self.endpoint)
                        await asyncio.sleep(self._config.retry_delay_seconds * (attempt + 1))
                        continue

                    response.raise_for_status()
                    result = response.json()

                    if "error" in result:
                        error = result["error"]
                        rpc_error = RpcError(
                            f"RPC error: {error.get('message', str(error))}",
                            endpoint=self.endpoint,
                        )
                        rpc_error.details["rpc_error_code"] = error.get("code")
                        rpc_error.details["rpc_error_data"] = error.get("data")
                        raise rpc_error

                    return result.get("result")

                except httpx.TimeoutException:
                    last_error = RpcError.timeout(self.endpoint, timeout_val)
                    logger.warning(f"RPC timeout (attempt {attempt + 1}): {self.endpoint}")

                except httpx.HTTPStatusError as e:
                    last_error = RpcError(
                        f"HTTP error {e.response.status_code}",
                        endpoint=self.endpoint,
                    )
                    logger.warning(f"RPC HTTP error (attempt {attempt + 1}): {e}")

                except httpx.RequestError as e:
                    last_error = RpcError.connection_failed(self.endpoint, e)
                    logger.warning(f"RPC connection error (attempt {attempt + 1}): {e}")

                if attempt < self._config.max_retries - 1:
                    await asyncio.sleep(self._config.retry_delay_seconds * (attempt + 1))

            self._rotate_endpoint()

        raise last_error or RpcError("All RPC endpoints failed")

    async def get_balance(self, address: str, commitment: Optional[str] = None) -> int:
        """
        Get SOL balance in lamports

        Args:
            address: Account address

        Returns:
            Balance in lamports
        """
        params = [address, {"commitment": commitment or self.commitment}]
        result = await self.call("getBalance", params)
        return result.get("value", 0) if result else 0

    async def get_token_accounts_by_owner(
        self,
        owner: str,
        mint: Optional[str] = None,
        program_id: Optional[str] = None,
        encoding: str = "jsonParsed",
        commitment: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get token accounts owned by address

        Args:
            owner: Owner address
            mint: Optional mint filter
            program_id: Optional program filter (defaults to SPL Token)
            encoding: Data encoding

        Returns:
            List of token account info
        """
        if mint:
            filter_param = {"mint": mint}
        else:
            filter_param = {"programId": program_id or TOKEN_PROGRAM_ID}

        params = [
            owner,
            filter_param,
            {
                "encoding": encoding,
                "commitment": commitment or self.commitment,
            },
        ]
        result = await self.call("getTokenAccountsByOwner", params)
        return result.get("value", []) if result else []

    async def get_latest_blockhash(self, commitment: Optional[str] = None) -> Dict[str, Any]:
        """
        Get latest blockhash

        Returns:
            Dict with blockhash and lastValidBlockHeight
        """
        params = [{"commitment": commitment or self.commitment}]
        result = await self.call("getLatestBlockhash", params)
        value = result.get("value", {}) if result else {}
        if not value.get("blockhash") or value.get("lastValidBlockHeight") is None:
            raise RpcError(
                "getLatestBlockhash returned no blockhash",
                code=ErrorCode.RPC_INVALID_RESPONSE,
                endpoint=self.endpoint,
            )
        return value

    async def get_block_height(self, commitment: Optional[str] = None) -> int:
        """Get current block height"""
        params = [{"commitment": commitment or self.commitment}]
        return await self.call("getBlockHeight", params)

    async def get_signature_status(self, signature: str) -> Optional[Dict[str, Any]]:
        """Get status of a single signature, None if the node has not seen it"""
        result = await self.call("getSignatureStatuses", [[signature]])
        if result and result.get("value"):
            return result["value"][0]
        return None

    async def send_raw_transaction(
        self,
        transaction: bytes,
        skip_preflight: bool = False,
        preflight_commitment: Optional[str] = None,
        max_retries: Optional[int] = None,
    ) -> str:
        """
        Send signed transaction

        Args:
            transaction: Signed transaction bytes
            skip_preflight: Skip preflight simulation
            preflight_commitment: Preflight commitment level
            max_retries: Max times the node rebroadcasts the transaction

        Returns:
            Transaction signature (base58)
        """
        tx_data = base64.b64encode(transaction).decode("ascii")

        options: Dict[str, Any] = {
            "skipPreflight": skip_preflight,
            "preflightCommitment": preflight_commitment or self.commitment,
            "encoding": "base64",
        }
        if max_retries is not None:
            options["maxRetries"] = max_retries

        try:
            signature = await self.call("sendTransaction", [tx_data, options])
        except RpcError as e:
            raise TransactionError.send_failed(e.message) from e

        if not signature:
            raise TransactionError.send_failed("node returned no signature")
        return signature

    async def confirm_transaction(
        self,
        signature: str,
        blockhash: str,
        last_valid_block_height: int,
        commitment: Optional[str] = None,
    ) -> bool:
        """
        Wait until the transaction reaches the requested commitment

        There is no wall-clock timeout: the wait ends when the transaction
        confirms, fails on-chain, or the blockhash it was sent under expires.

        Args:
            signature: Transaction signature
            blockhash: Blockhash the confirmation is keyed on
            last_valid_block_height: Height after which the blockhash is invalid
            commitment: Commitment level

        Returns:
            True once confirmed

        Raises:
            TransactionError: If the transaction failed on-chain or expired
        """
        target = commitment or self.commitment
        accepted = ("finalized",) if target == "finalized" else ("confirmed", "finalized")
        logger.debug(
            f"Waiting for {signature} ({target}), blockhash={blockhash}, "
            f"lastValidBlockHeight={last_valid_block_height}"
        )

        while True:
            try:
                status = await self.get_signature_status(signature)
            except RpcError as e:
                logger.debug(f"Error checking transaction status: {e}")
                status = None

            if status:
                if status.get("err"):
                    logger.warning(f"Transaction {signature} failed on-chain: {status.get('err')}")
                    raise TransactionError.confirmation_failed(signature, str(status.get("err")))
                if status.get("confirmationStatus") in accepted:
                    return True

            try:
                block_height = await self.get_block_height()
            except RpcError as e:
                logger.debug(f"Error checking block height: {e}")
                block_height = None

            if block_height is not None and block_height > last_valid_block_height:
                logger.warning(f"Transaction {signature} expired at block height {block_height}")
                raise TransactionError.expired(signature, last_valid_block_height)

            await asyncio.sleep(self._config.confirm_poll_interval)

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
