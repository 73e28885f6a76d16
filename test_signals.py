import pytest

from scanner.models.token import GoPlusPayload, RugCheckPayload
from scanner.analyzer.signals import (
    RiskSignals,
    normalize,
    normalize_goplus,
    normalize_rugcheck,
    merge_signals,
    combine,
    MERGE_OVERRIDE_FIELDS,
)


def test_goplus_flags_and_taxes():
    gp = GoPlusPayload.from_dict({
        "is_honeypot": "1",
        "buy_tax": "0.05",
        "sell_tax": "0.2",
        "is_mintable": "1",
        "can_take_back_ownership": "0",
        "hidden_owner": "1",
        "is_proxy": "1",
        "is_blacklisted": "1",
        "is_whitelisted": "0",
        "anti_whale": "1",
        "trading_cooldown": "1",
        "transfer_pausable": "1",
        "holders": [{"address": "0xabc", "percent": "0.5"}],
    })
    s = normalize_goplus(gp)

    assert s.source_kind == "goplus"
    assert s.honeypot and s.is_mintable and s.hidden_owner and s.is_proxy
    assert s.can_blacklist and s.has_anti_whale and s.has_cooldown and s.is_trading_disabled
    assert not s.owner_can_retake and not s.can_whitelist
    assert s.buy_tax == 0.05 and s.sell_tax == 0.2
    assert s.lp_lock_percent is None
    # Unused fields are kept for display, not dropped
    assert gp.extra["holders"][0]["address"] == "0xabc"


def test_goplus_missing_fields_default_safe_except_lp_lock():
    s = normalize_goplus(GoPlusPayload.from_dict({}))
    assert s.buy_tax == 0 and s.sell_tax == 0
    assert not s.honeypot and not s.is_mintable
    assert s.lp_lock_percent is None


def test_goplus_unparseable_tax_is_zero():
    s = normalize_goplus(GoPlusPayload.from_dict({"buy_tax": "", "sell_tax": "n/a"}))
    assert s.buy_tax == 0 and s.sell_tax == 0


def test_goplus_numeric_one_counts_as_flag():
    s = normalize_goplus(GoPlusPayload.from_dict({"is_honeypot": 1}))
    assert s.honeypot


def test_rugcheck_mapping():
    rc = RugCheckPayload.from_dict({
        "risk": "danger",
        "riskDetails": {"mintAuthorityActive": True, "freezeAuthorityActive": True, "top10HolderPercent": 80},
        "markets": [],
    })
    s = normalize_rugcheck(rc)

    assert s.source_kind == "rugcheck"
    assert s.honeypot
    assert s.is_mintable and s.mint_authority_active and s.freeze_authority_active
    assert s.buy_tax == 0 and not s.can_blacklist
    assert s.lp_lock_percent is None
    assert rc.to_dict()["riskDetails"]["top10HolderPercent"] == 80


def test_rugcheck_without_details():
    s = normalize_rugcheck(RugCheckPayload.from_dict({"risk": "good"}))
    assert not s.honeypot and not s.mint_authority_active and not s.freeze_authority_active


def test_normalize_dispatches_on_payload_kind():
    assert normalize(GoPlusPayload()).source_kind == "goplus"
    assert normalize(RugCheckPayload()).source_kind == "rugcheck"
    with pytest.raises(TypeError):
        normalize({"is_honeypot": "1"})


def test_merge_takes_override_fields_from_secondary():
    primary = RiskSignals(source_kind="rugcheck", buy_tax=0.0, is_mintable=True, mint_authority_active=True)
    secondary = RiskSignals(source_kind="goplus", buy_tax=0.2, sell_tax=0.3, can_blacklist=True,
                            is_mintable=False, has_cooldown=True)
    merged = merge_signals(primary, secondary)

    assert merged.source_kind == "merged"
    assert merged.buy_tax == 0.2
    assert merged.sell_tax == 0.3
    assert merged.can_blacklist and merged.has_cooldown
    # Fields outside the override list stay with the primary
    assert merged.is_mintable and merged.mint_authority_active


def test_merge_secondary_wins_even_when_it_is_clean():
    primary = RiskSignals(source_kind="rugcheck", hidden_owner=True, is_proxy=True)
    secondary = RiskSignals(source_kind="goplus")
    merged = merge_signals(primary, secondary)
    for name in MERGE_OVERRIDE_FIELDS:
        assert getattr(merged, name) == getattr(secondary, name)


def test_merge_honeypot_is_or_of_both():
    clean = RiskSignals(source_kind="rugcheck")
    flagged = RiskSignals(source_kind="goplus", honeypot=True)
    assert merge_signals(clean, flagged).honeypot
    assert merge_signals(flagged, clean).honeypot
    assert not merge_signals(clean, clean).honeypot


def test_combine_with_single_provider_is_unchanged():
    only = RiskSignals(source_kind="goplus", buy_tax=0.4)
    assert combine(only, None) is only
    assert combine(None, only) is only
    assert combine(None, None) is None
