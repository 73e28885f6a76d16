from scanner.analyzer.chains import (
    get_goplus_chain_id,
    get_rugcheck_chain_id,
    select_providers,
    bubblemaps_url,
)


def test_goplus_chain_ids():
    assert get_goplus_chain_id("ethereum") == "1"
    assert get_goplus_chain_id("bsc") == "56"
    assert get_goplus_chain_id("base") == "8453"
    assert get_goplus_chain_id("solana") == "solana"
    assert get_goplus_chain_id("sui") is None


def test_rugcheck_only_covers_solana():
    assert get_rugcheck_chain_id("solana") == "solana"
    assert get_rugcheck_chain_id("ethereum") is None


def test_provider_selection():
    assert select_providers("solana", rugcheck_enabled=True) == ("rugcheck", "goplus")
    assert select_providers("solana", rugcheck_enabled=False) == ("goplus", None)
    assert select_providers("ethereum", rugcheck_enabled=True) == ("goplus", None)
    assert select_providers("sui", rugcheck_enabled=True) == (None, None)


def test_bubblemaps_link():
    assert bubblemaps_url("bsc", "0xabc") == "https://app.bubblemaps.io/bsc/token/0xabc"
    assert bubblemaps_url("blast", "0xabc") is None
