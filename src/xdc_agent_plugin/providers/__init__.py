from xdc_agent_plugin.providers.wallet import WalletContextProvider, xdc_wallet_provider

__all__ = ["WalletContextProvider", "xdc_wallet_provider"]
