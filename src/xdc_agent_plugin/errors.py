"""Exception hierarchy for the XDC agent plugin.

Validation errors (addresses, chains, credentials) are raised before any RPC
call is issued. RPC and contract failures are wrapped in the operation-level
error and chained to the underlying cause with ``raise ... from exc``.
"""

from __future__ import annotations


class XDCPluginError(Exception):
    """Base class for every error raised by this package."""


class InvalidAddressError(XDCPluginError, ValueError):
    """An address is neither ``0x`` nor ``xdc`` followed by 40 hex characters."""


class InvalidChainError(XDCPluginError, KeyError):
    """A chain name has no known configuration or template."""

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable.
        return str(self.args[0]) if self.args else ""


class MissingCredentialError(XDCPluginError):
    """No usable signing key is configured."""


class TransferError(XDCPluginError):
    """A transfer or approval failed during parsing, simulation or submission."""


class BalanceQueryError(XDCPluginError):
    """A balance query names a token in an unsupported format."""


class PortfolioError(XDCPluginError):
    """The native-balance step of a portfolio lookup failed."""
