"""Signing identity derived from a private key using eth-account."""

from __future__ import annotations

import re
from dataclasses import dataclass

from eth_account import Account
from eth_account.signers.local import LocalAccount

from xdc_agent_plugin.errors import MissingCredentialError

_PRIVATE_KEY_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def is_valid_private_key(value: object) -> bool:
    """Cheap shape check: a string beginning with ``0x``."""
    return isinstance(value, str) and value.startswith("0x")


@dataclass(frozen=True)
class WalletIdentity:
    """The wallet's key pair. Immutable for the lifetime of the process."""

    account: LocalAccount

    @property
    def address(self) -> str:
        return self.account.address


def load_identity(private_key: str | None) -> WalletIdentity:
    """Derive a :class:`WalletIdentity` from a hex private key.

    Parameters
    ----------
    private_key:
        ``0x``-prefixed 32-byte hex string, usually the ``XDC_PRIVATE_KEY``
        setting.

    Raises
    ------
    MissingCredentialError
        If the key is absent or not a ``0x``-prefixed 64-hex-digit string.
    """
    if not private_key:
        raise MissingCredentialError("XDC_PRIVATE_KEY is missing")
    if not is_valid_private_key(private_key) or not _PRIVATE_KEY_RE.match(private_key):
        raise MissingCredentialError(
            "XDC_PRIVATE_KEY must be a 0x-prefixed 32-byte hex string"
        )
    return WalletIdentity(account=Account.from_key(private_key))
