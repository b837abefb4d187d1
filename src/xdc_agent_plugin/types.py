"""Pydantic models for action parameters and responses."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_untrusted(value: Any) -> Optional[str]:
    """Coerce one extracted field into a stripped string or ``None``.

    Parameter extraction is done by a language model, so fields may arrive as
    numbers, ``"null"`` strings, lists or nested objects.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or text.lower() in ("null", "none", "undefined"):
        return None
    return text


class _ExtractedParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _untrusted(cls, value: Any) -> Optional[str]:
        return _clean_untrusted(value)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TransferParams(_ExtractedParams):
    recipient: Optional[str] = None
    amount: Optional[str] = None
    token: Optional[str] = None
    chain: Optional[str] = None


class GetBalanceParams(_ExtractedParams):
    chain: Optional[str] = None
    address: Optional[str] = None
    token: Optional[str] = None


class GetPortfolioParams(_ExtractedParams):
    chain: Optional[str] = None
    address: Optional[str] = None


class TransactionOptions(BaseModel):
    """Overrides applied to a submitted transaction.

    Only fee and calldata fields exist here; contract-call arguments are
    always assembled by the wallet client itself.
    """

    model_config = ConfigDict(extra="forbid")

    gas: Optional[int] = Field(default=None, gt=0)
    gas_price: Optional[int] = Field(default=None, gt=0)
    data: Optional[str] = None  # native transfers only


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class TokenBalance(BaseModel):
    token: str
    amount: str
    symbol: Optional[str] = None


class TransferResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tx_hash: str = Field(alias="txHash")
    recipient: str
    amount: str  # decimal string, same units the user asked for
    token: str
    data: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class GetBalanceResponse(BaseModel):
    chain: str
    address: str
    balance: Optional[TokenBalance] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Portfolio(BaseModel):
    chain: str
    address: str
    balances: list[TokenBalance] = Field(default_factory=list)


class GetPortfolioResponse(BaseModel):
    portfolio: Portfolio

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump()
