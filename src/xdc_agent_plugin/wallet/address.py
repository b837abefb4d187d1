"""Helpers for normalizing XDC addresses and token identifiers.

XDC tooling prints addresses with an ``xdc`` prefix instead of ``0x``; the
20-byte payload is identical. Everything that reaches the RPC layer uses the
``0x`` form.
"""

from __future__ import annotations

import re

from xdc_agent_plugin.errors import BalanceQueryError, InvalidAddressError

NATIVE_TOKEN_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_TOKEN_SYMBOL = "XDC"

XDC_PREFIX = "xdc"
HEX_PREFIX = "0x"

_HEX_PAYLOAD_RE = re.compile(r"^[0-9a-fA-F]{40}$")


def has_xdc_prefix(value: str) -> bool:
    return value[:3].lower() == XDC_PREFIX


def normalize_address(value: str | None) -> str:
    """Return the ``0x`` form of *value*.

    Accepts ``0x`` + 40 hex characters or ``xdc`` + 40 hex characters. The
    payload's letter case is preserved.

    Raises
    ------
    InvalidAddressError
        If *value* is empty, carries another prefix, or the payload is not
        exactly 40 hex characters.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidAddressError("Empty address")

    raw = value.strip()
    if raw[:2].lower() == HEX_PREFIX:
        payload = raw[2:]
    elif has_xdc_prefix(raw):
        payload = raw[3:]
    else:
        raise InvalidAddressError(f"Invalid address '{raw}': expected a 0x or xdc prefix")

    normalized = HEX_PREFIX + payload
    if len(normalized) != 42 or not _HEX_PAYLOAD_RE.match(payload):
        raise InvalidAddressError(
            f"Invalid address '{raw}': expected 40 hex characters after the prefix"
        )
    return normalized


def to_xdc_address(value: str) -> str:
    """Render an address in the ``xdc``-prefixed notation."""
    return XDC_PREFIX + normalize_address(value)[2:]


def is_native_token(token: str | None) -> bool:
    """True when *token* designates the chain's base currency.

    ``None``, the empty string, the symbol ``XDC`` (any case) and the
    all-zero address in either notation are all treated as native.
    """
    if token is None:
        return True
    value = token.strip()
    if not value or value.lower() == NATIVE_TOKEN_SYMBOL.lower():
        return True
    try:
        return normalize_address(value).lower() == NATIVE_TOKEN_ADDRESS
    except InvalidAddressError:
        return False


def resolve_token_address(token: str | None) -> str | None:
    """Resolve a token identifier to an ERC-20 contract address.

    Returns ``None`` for the native token. Only ``0x`` and ``xdc`` addresses
    are accepted for ERC-20 tokens; symbols other than ``XDC`` are rejected.
    """
    if is_native_token(token):
        return None
    value = token.strip()
    if value[:2].lower() == HEX_PREFIX or has_xdc_prefix(value):
        return normalize_address(value)
    raise BalanceQueryError(
        "Only token addresses starting with 0x or xdc are supported. "
        "For native XDC token, use 'XDC' as token symbol."
    )
