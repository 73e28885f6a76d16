from typing import Optional, Tuple
from scanner.models.token import PROVIDER_GOPLUS, PROVIDER_RUGCHECK

# Map DexScreener chain IDs to GoPlus chain IDs
GOPLUS_CHAIN_IDS = {
    "ethereum": "1",
    "bsc": "56",
    "polygon": "137",
    "arbitrum": "42161",
    "avalanche": "43114",
    "base": "8453",
    "optimism": "10",
    "fantom": "250",
    "cronos": "25",
    "zkSync": "324",
    "scroll": "534352",
    "linea": "59144",
    "mantle": "5000",
    "blast": "81457",
    "solana": "solana",
}

# RugCheck only knows Solana mints
RUGCHECK_CHAIN_IDS = {
    "solana": "solana",
}

# BubbleMaps chain labels (zkSync, scroll, linea, mantle, blast unsupported)
BUBBLEMAPS_CHAINS = {
    "ethereum": "ethereum",
    "bsc": "bsc",
    "polygon": "polygon",
    "arbitrum": "arbitrum",
    "base": "base",
    "avalanche": "avalanche",
    "fantom": "fantom",
    "cronos": "cronos",
    "solana": "solana",
}


def get_goplus_chain_id(network: str) -> Optional[str]:
    return GOPLUS_CHAIN_IDS.get(network)


def get_rugcheck_chain_id(network: str) -> Optional[str]:
    return RUGCHECK_CHAIN_IDS.get(network)


def select_providers(network: str, rugcheck_enabled: bool) -> Tuple[Optional[str], Optional[str]]:
    """
    Returns (primary, secondary) provider names for a network.

    RugCheck leads wherever it is mapped and enabled, with GoPlus as the
    secondary. Everywhere else GoPlus is the only provider. A provider with no
    chain mapping is left out (None) and must not be called.
    """
    goplus = PROVIDER_GOPLUS if get_goplus_chain_id(network) else None
    if rugcheck_enabled and get_rugcheck_chain_id(network):
        return PROVIDER_RUGCHECK, goplus
    return goplus, None


def bubblemaps_url(network: str, address: str) -> Optional[str]:
    chain = BUBBLEMAPS_CHAINS.get(network)
    if not chain:
        return None
    return f"https://app.bubblemaps.io/{chain}/token/{address}"
