"""LLM provider router that maps provider names to concrete instances."""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from xdc_agent_plugin.config import LLMConfig
from xdc_agent_plugin.llm.base import BaseLLMProvider

if TYPE_CHECKING:
    from xdc_agent_plugin.config import LLMProviderConfig

logger = logging.getLogger(__name__)

# Imports are deferred so the optional SDKs are only needed when used.
_PROVIDER_FACTORIES: dict[str, str] = {
    "anthropic": "xdc_agent_plugin.llm.anthropic.AnthropicProvider",
    "openai": "xdc_agent_plugin.llm.openai.OpenAIProvider",
}


def _import_provider_class(dotted_path: str) -> type[BaseLLMProvider]:
    """Dynamically import a provider class from its fully-qualified path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    if not (isinstance(cls, type) and issubclass(cls, BaseLLMProvider)):
        raise TypeError(
            f"Expected a BaseLLMProvider subclass at '{dotted_path}', "
            f"got {cls!r}"
        )
    return cls


class LLMRouter:
    """Creates and caches the configured LLM provider.

    Parameters
    ----------
    llm_config:
        The ``LLMConfig`` section from the plugin configuration.
    """

    def __init__(self, llm_config: LLMConfig):
        self._config = llm_config
        self._providers: dict[str, BaseLLMProvider] = {}

    def _get_provider_config(self, provider_name: str) -> "LLMProviderConfig":
        config_block = getattr(self._config, provider_name, None)
        if config_block is None:
            raise ValueError(
                f"Provider '{provider_name}' is not configured. "
                f"Add a '{provider_name}' section under 'llm' in your configuration."
            )
        return config_block

    def get_provider(self, provider_name: str | None = None) -> BaseLLMProvider:
        """Get or create a provider instance.

        Raises
        ------
        ValueError
            If the provider is unknown, not configured, or lacks an API key
            or model.
        """
        name = provider_name or self._config.default_provider
        if name in self._providers:
            return self._providers[name]

        if name not in _PROVIDER_FACTORIES:
            raise ValueError(
                f"Unknown provider '{name}'. "
                f"Supported providers: {sorted(_PROVIDER_FACTORIES.keys())}"
            )

        provider_config = self._get_provider_config(name)
        if not provider_config.api_key:
            raise ValueError(
                f"API key for provider '{name}' is empty. "
                f"Set it in your configuration file or via environment "
                f"variables (e.g. ${{ANTHROPIC_API_KEY}})."
            )
        if not provider_config.model:
            raise ValueError(f"No model specified for provider '{name}'.")

        provider_cls = _import_provider_class(_PROVIDER_FACTORIES[name])
        provider = provider_cls(
            api_key=provider_config.api_key,
            model=provider_config.model,
            base_url=provider_config.base_url,
            max_tokens=provider_config.max_tokens,
        )

        self._providers[name] = provider
        logger.info(
            "Created %s provider (model=%s, base_url=%s)",
            name,
            provider_config.model,
            provider_config.base_url or "default",
        )
        return provider
