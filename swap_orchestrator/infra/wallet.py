"""
Wallet capability abstractions

Defines the interface the orchestrator expects from any wallet provider and
a keypair-backed implementation for scripts and tests.
"""

from __future__ import annotations

import json
import os
import logging
from typing import Optional, Protocol, runtime_checkable

import base58
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from ..errors import SignerError, ConfigurationError

logger = logging.getLogger(__name__)


@runtime_checkable
class Wallet(Protocol):
    """
    Protocol for wallet providers

    Implementations must provide:
    - pubkey: The account's public key (base58), None while disconnected
    - connected: Whether the account is currently connected
    - can_sign: Whether the provider exposes transaction signing
    - connect() / disconnect()
    - sign_transaction(): Sign a versioned transaction
    """

    @property
    def pubkey(self) -> Optional[str]:
        ...

    @property
    def connected(self) -> bool:
        ...

    @property
    def can_sign(self) -> bool:
        ...

    async def connect(self) -> None:
        ...

    async def disconnect(self) -> None:
        ...

    async def sign_transaction(self, transaction: VersionedTransaction) -> VersionedTransaction:
        """
        Sign a transaction

        Raises:
            SignerError: If the user or provider refuses to sign
        """
        ...


def message_bytes_for_signing(transaction: VersionedTransaction) -> bytes:
    """
    Bytes a signer must sign for this transaction

    For MessageV0 the version prefix (0x80) is part of the signed payload:
    the raw format is [sig_count][signatures][version_prefix][message].
    """
    message = transaction.message
    message_bytes = bytes(message)
    if isinstance(message, MessageV0):
        message_bytes = bytes([0x80]) + message_bytes
    return message_bytes


class KeypairWallet:
    """
    Wallet backed by a local Solana keypair

    Usage:
        wallet = KeypairWallet.from_file("~/.config/solana/id.json")
        await wallet.connect()
        signed = await wallet.sign_transaction(tx)
    """

    def __init__(self, keypair: Keypair):
        """
        Initialize with keypair

        Args:
            keypair: solders.keypair.Keypair instance
        """
        self._keypair = keypair
        self._connected = False

    @property
    def pubkey(self) -> Optional[str]:
        """Public key as base58 string, None until connected"""
        return str(self._keypair.pubkey()) if self._connected else None

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def can_sign(self) -> bool:
        return True

    async def connect(self) -> None:
        self._connected = True
        logger.info(f"Wallet connected: {self._keypair.pubkey()}")

    async def disconnect(self) -> None:
        self._connected = False
        logger.info("Wallet disconnected")

    async def sign_transaction(self, transaction: VersionedTransaction) -> VersionedTransaction:
        """
        Sign versioned transaction

        Keeps any signatures already present for other required signers and
        fills in ours at the slot matching our public key.
        """
        if not self._connected:
            raise SignerError.declined("wallet is not connected")

        message = transaction.message
        signature = self._keypair.sign_message(message_bytes_for_signing(transaction))

        num_required_signatures = message.header.num_required_signatures
        account_keys = message.account_keys
        our_pubkey = self._keypair.pubkey()

        # The first num_required_signatures account keys are the signers
        signer_index = None
        for i in range(min(num_required_signatures, len(account_keys))):
            if account_keys[i] == our_pubkey:
                signer_index = i
                break

        if signer_index is None:
            raise SignerError.failed(
                f"wallet {our_pubkey} is not in the required signers list"
            )

        existing = list(transaction.signatures)
        signatures = [
            existing[i] if i < len(existing) else Signature.default()
            for i in range(num_required_signatures)
        ]
        signatures[signer_index] = signature

        return VersionedTransaction.populate(message, signatures)

    @classmethod
    def from_bytes(cls, secret_key: bytes) -> "KeypairWallet":
        """Create wallet from secret key bytes (64 bytes)"""
        return cls(Keypair.from_bytes(secret_key))

    @classmethod
    def from_base58(cls, secret_key: str) -> "KeypairWallet":
        """Create wallet from base58 secret key"""
        return cls.from_bytes(base58.b58decode(secret_key))

    @classmethod
    def from_file(cls, path: str) -> "KeypairWallet":
        """
        Create wallet from keypair file

        Supports:
        - JSON array format (Solana CLI): [1,2,3,...]
        - Raw bytes file (64 bytes)
        """
        with open(os.path.expanduser(path), "rb") as f:
            content = f.read()

        try:
            data = json.loads(content.decode("utf-8"))
            if isinstance(data, list):
                return cls.from_bytes(bytes(data))
        except (json.JSONDecodeError, UnicodeDecodeError):
            pass

        if len(content) == 64:
            return cls.from_bytes(content)

        raise ConfigurationError.invalid("keypair_file", f"Cannot parse keypair file: {path}")
