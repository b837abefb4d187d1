"""Configuration system for the XDC agent plugin.

Loads plugin config from ``.xdc-agent/config.yaml``, supports environment
variable expansion, and exposes the flat setting keys that actions read
through ``runtime.get_setting``.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Environment-variable expansion helper
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def _expand_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with their environment values.

    If the variable is not set the placeholder is left as-is so that
    validation can catch it later.
    """

    def _replace(match: re.Match) -> str:
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))

    return _ENV_VAR_RE.sub(_replace, value)


def _expand_env_recursive(obj: object) -> object:
    """Walk an arbitrary nested structure and expand env vars in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _expand_env_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_recursive(item) for item in obj]
    return obj


def _is_unresolved(value: str) -> bool:
    return bool(_ENV_VAR_RE.search(value))


# ---------------------------------------------------------------------------
# Pydantic v2 models
# ---------------------------------------------------------------------------


class LLMProviderConfig(BaseModel):
    """Configuration for a single LLM provider (Anthropic, OpenAI, etc.)."""

    api_key: str = ""
    model: str = ""
    base_url: Optional[str] = None  # For OpenAI-compatible endpoints
    max_tokens: int = 1024


class LLMConfig(BaseModel):
    """LLM used to extract action parameters from chat messages."""

    default_provider: str = "anthropic"
    anthropic: Optional[LLMProviderConfig] = None
    openai: Optional[LLMProviderConfig] = None


class WalletConfig(BaseModel):
    """Signing key settings."""

    private_key: str = ""           # ${XDC_PRIVATE_KEY}


class KnownToken(BaseModel):
    address: str
    symbol: str


class NetworkConfig(BaseModel):
    """Which XDC network to use and how to reach it."""

    # "mainnet", "testnet" or "apothem"; unset falls back to XDC_NETWORK, then mainnet
    network: Optional[str] = None
    xdc_rpc_url: Optional[str] = None
    apothem_rpc_url: Optional[str] = None
    # Extra ERC-20 tokens listed in portfolios, keyed by chain name
    known_tokens: dict[str, list[KnownToken]] = Field(default_factory=dict)


class CacheConfig(BaseModel):
    # Unset falls back to XDC_PORTFOLIO_CACHE_TTL, then 60 seconds
    portfolio_ttl_seconds: Optional[float] = None


class PluginConfig(BaseModel):
    """Root configuration object for the plugin."""

    agent_name: str = "XDC Agent"
    wallet: WalletConfig = Field(default_factory=WalletConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    def _settings(self) -> dict[str, Any]:
        return {
            "XDC_PRIVATE_KEY": self.wallet.private_key,
            "XDC_NETWORK": self.network.network,
            "XDC_RPC_URL": self.network.xdc_rpc_url,
            "APOTHEM_RPC_URL": self.network.apothem_rpc_url,
            "XDC_PORTFOLIO_CACHE_TTL": self.cache.portfolio_ttl_seconds,
            "XDC_KNOWN_TOKENS": {
                chain: [t.model_dump() for t in tokens]
                for chain, tokens in self.network.known_tokens.items()
            },
        }

    def get_setting(self, key: str) -> Any:
        """Look up a setting by its flat key, falling back to ``os.environ``.

        Values still containing an unexpanded ``${VAR}`` placeholder count as
        unset.
        """
        value = self._settings().get(key)
        if isinstance(value, str) and _is_unresolved(value):
            value = None
        if value:
            return value

        env_value = os.environ.get(key)
        if env_value and key == "XDC_KNOWN_TOKENS":
            try:
                return json.loads(env_value)
            except json.JSONDecodeError:
                return None
        return env_value or None


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def get_config_path(base: Path | None = None) -> Path:
    """Return the default config file path, ``.xdc-agent/config.yaml``.

    Parameters
    ----------
    base:
        Directory that contains (or will contain) the ``.xdc-agent/`` folder.
        Defaults to the current working directory.
    """
    if base is None:
        base = Path.cwd()
    return base / ".xdc-agent" / "config.yaml"


def load_config(path: Path) -> PluginConfig:
    """Load and validate a plugin configuration from a YAML file.

    Environment variable placeholders (``${VAR}``) are expanded before
    validation.
    """
    raw_text = path.read_text(encoding="utf-8")
    raw_data = yaml.safe_load(raw_text) or {}
    expanded = _expand_env_recursive(raw_data)
    return PluginConfig.model_validate(expanded)


def load_config_or_default(path: Path | None = None) -> PluginConfig:
    """Load *path* (or the default path) if it exists, else return defaults."""
    path = path or get_config_path()
    if path.exists():
        return load_config(path)
    return PluginConfig()


def save_config(config: PluginConfig, path: Path) -> None:
    """Serialize a :class:`PluginConfig` to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="python", exclude_none=True)
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(data, fh, default_flow_style=False, sort_keys=False)
