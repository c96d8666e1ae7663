"""
Shared fixtures for unit tests

Nothing here touches the network: HTTP is served by httpx.MockTransport and
collaborators are AsyncMock instances.
"""

import sys
from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.signature import Signature
from solders.transaction import VersionedTransaction

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from swap_orchestrator.types import ASSETS, AssetSymbol, QuoteResult

SOL_MINT = ASSETS[AssetSymbol.SOL].mint
USDC_MINT = ASSETS[AssetSymbol.USDC].mint


def make_quote_payload(
    in_amount: int = 1_500_000_000,
    out_amount: int = 150_000_000,
    input_mint: str = SOL_MINT,
    output_mint: str = USDC_MINT,
    price_impact: str = "0.0123",
) -> dict:
    """Quote body shaped like the Jupiter v1 quote endpoint response"""
    return {
        "inputMint": input_mint,
        "inAmount": str(in_amount),
        "outputMint": output_mint,
        "outAmount": str(out_amount),
        "otherAmountThreshold": str(out_amount * 995 // 1000),
        "swapMode": "ExactIn",
        "slippageBps": 50,
        "priceImpactPct": price_impact,
        "routePlan": [{"swapInfo": {"label": "Whirlpool"}, "percent": 100}],
    }


def make_quote(**kwargs) -> QuoteResult:
    return QuoteResult.from_response(make_quote_payload(**kwargs))


def make_unsigned_transaction(payer: Keypair) -> VersionedTransaction:
    """Minimal v0 transaction with the payer as the only required signer"""
    message = MessageV0.try_compile(payer.pubkey(), [], [], Hash.default())
    return VersionedTransaction.populate(message, [Signature.default()])


class FakeWallet:
    """Wallet double with configurable capabilities"""

    def __init__(
        self,
        keypair: Optional[Keypair] = None,
        connected: bool = True,
        can_sign: bool = True,
    ):
        self.keypair = keypair or Keypair()
        self._connected = connected
        self._can_sign = can_sign
        self.sign_calls = 0

    @property
    def pubkey(self) -> Optional[str]:
        return str(self.keypair.pubkey()) if self._connected else None

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def can_sign(self) -> bool:
        return self._can_sign

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def sign_transaction(self, transaction: VersionedTransaction) -> VersionedTransaction:
        self.sign_calls += 1
        return VersionedTransaction(transaction.message, [self.keypair])


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture
def mock_api():
    """JupiterAPI double"""
    api = MagicMock()
    api.get_quote = AsyncMock(return_value=make_quote())
    api.get_swap_transaction = AsyncMock()
    api.close = AsyncMock()
    return api


@pytest.fixture
def mock_rpc():
    """RpcClient double"""
    rpc = MagicMock()
    rpc.endpoint = "https://rpc.example.com"
    rpc.get_balance = AsyncMock(return_value=2_000_000_000)
    rpc.get_token_accounts_by_owner = AsyncMock(return_value=[])
    rpc.send_raw_transaction = AsyncMock(return_value="5igSig")
    rpc.get_latest_blockhash = AsyncMock(
        return_value={"blockhash": "Bhash111", "lastValidBlockHeight": 1000}
    )
    rpc.confirm_transaction = AsyncMock(return_value=True)
    rpc.close = AsyncMock()
    return rpc
