"""
Balance Module

Reads the connected account's holdings of the asset being sold.
"""

import logging
from decimal import Decimal
from typing import Optional

from ..infra import RpcClient, Wallet
from ..types import AssetSymbol

logger = logging.getLogger(__name__)


class BalanceReader:
    """
    Balance queries for the swap form

    A failed read is logged and reported as zero so the form stays usable.

    Usage:
        reader = BalanceReader(rpc)
        sol = await reader.read(wallet, AssetSymbol.SOL)
    """

    def __init__(self, rpc: RpcClient):
        self._rpc = rpc

    async def read(self, wallet: Optional[Wallet], asset: AssetSymbol) -> Decimal:
        """
        Get balance of asset in UI units

        Args:
            wallet: Connected wallet, or None
            asset: Asset to read

        Returns:
            Balance, Decimal(0) if no wallet is connected or the query failed
        """
        if wallet is None or not wallet.connected or not wallet.pubkey:
            return Decimal(0)

        try:
            raw = await self.read_raw(wallet.pubkey, asset)
        except Exception as e:
            logger.warning(f"Balance query for {asset.value} failed: {e}")
            return Decimal(0)

        balance = asset.config.ui_amount(raw)
        logger.debug(f"Balance of {wallet.pubkey}: {balance} {asset.value}")
        return balance

    async def read_raw(self, owner: str, asset: AssetSymbol) -> int:
        """
        Get raw balance (in smallest units)

        Native SOL comes from getBalance; SPL tokens sum every token
        account the owner holds for the mint.
        """
        config = asset.config
        if config.native:
            return await self._rpc.get_balance(owner)

        accounts = await self._rpc.get_token_accounts_by_owner(owner, mint=config.mint)

        total = 0
        for account in accounts:
            info = account.get("account", {}).get("data", {}).get("parsed", {}).get("info", {})
            amount = info.get("tokenAmount", {}).get("amount")
            if amount:
                total += int(amount)

        return total
