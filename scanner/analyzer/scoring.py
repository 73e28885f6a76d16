import time
from typing import Dict, Optional, List, Tuple
from scanner.models.token import (
    Listing,
    ScoreResult,
    VERDICT_OK,
    VERDICT_CAUTION,
    VERDICT_RISKY,
)
from scanner.analyzer.signals import RiskSignals

# --- Flag Definitions ---
FLAGS: Dict[str, Dict[str, str]] = {
    "low_liquidity": {"label": "Low Liq.", "tooltip": "Liquidity is very low, increasing price volatility and risk."},
    "very_new": {"label": "New", "tooltip": "The token or pair was created less than 24 hours ago."},
    "honeypot_signals": {"label": "Honeypot", "tooltip": "Indicators suggest this token may be a honeypot (buyable but not sellable)."},
    "high_tax": {"label": "High Tax", "tooltip": "Buy or sell tax is over 10%."},
    "blacklist_enabled": {"label": "Blacklist", "tooltip": "A blacklist function exists, allowing the owner to prevent addresses from trading."},
    "anti_whale": {"label": "Anti-Whale", "tooltip": "An anti-whale mechanism is in place, which may restrict trading."},
    "cooldown": {"label": "Cooldown", "tooltip": "A trading cooldown function exists."},
    "trading_disabled": {"label": "Trading Paused", "tooltip": "Trading is currently disabled or pausable."},
    "owner_can_retake": {"label": "Retakable Own.", "tooltip": "Ownership can be taken back by the creator."},
    "hidden_owner": {"label": "Hidden Owner", "tooltip": "The true owner of the contract may be hidden."},
    "proxy_upgradable": {"label": "Proxy", "tooltip": "The contract is a proxy and can be upgraded, changing its logic."},
    "mintable_supply": {"label": "Mintable", "tooltip": "New tokens can be minted, potentially diluting supply."},
    "mint_authority_active": {"label": "Mint Active", "tooltip": "The mint authority is still active for this Solana token."},
    "freeze_authority_active": {"label": "Freeze Active", "tooltip": "The freeze authority is still active for this Solana token."},
    "lp_unlocked_or_unknown": {"label": "Unlocked LP", "tooltip": "A significant portion of the liquidity pool is not locked or burned."},
    "manual_holder_concentration": {"label": "Holders", "tooltip": "Manually flagged for risky holder concentration."},
}

MAX_SCORE = 100
RISKY_THRESHOLD = 60
CAUTION_THRESHOLD = 30
HIGH_TAX = 0.10
LP_LOCK_MIN_PERCENT = 50
VERY_NEW_HOURS = 24


def _signal_checks(s: RiskSignals) -> List[Tuple[bool, int, str]]:
    # Order matters: it fixes the order flags are appended in.
    return [
        (s.honeypot, 60, "honeypot_signals"),
        (s.buy_tax > HIGH_TAX or s.sell_tax > HIGH_TAX, 15, "high_tax"),
        (s.can_blacklist, 10, "blacklist_enabled"),
        (s.has_anti_whale, 10, "anti_whale"),
        (s.has_cooldown, 10, "cooldown"),
        (s.is_trading_disabled, 40, "trading_disabled"),
        (s.owner_can_retake, 25, "owner_can_retake"),
        (s.hidden_owner, 25, "hidden_owner"),
        (s.is_proxy, 10, "proxy_upgradable"),
        (s.is_mintable, 20, "mintable_supply"),
        (s.mint_authority_active, 20, "mint_authority_active"),
        (s.freeze_authority_active, 15, "freeze_authority_active"),
        (s.lp_lock_percent is None or s.lp_lock_percent < LP_LOCK_MIN_PERCENT, 15, "lp_unlocked_or_unknown"),
    ]


def pair_age_hours(listing: Listing, now_ms: Optional[float] = None) -> float:
    """
    Age of the pair in hours. A missing creation time counts as infinitely old.
    """
    if not listing.pair_created_at:
        return float("inf")
    if now_ms is None:
        now_ms = time.time() * 1000
    return (now_ms - listing.pair_created_at) / 1000 / 3600


def verdict_for(score: int) -> str:
    if score >= RISKY_THRESHOLD:
        return VERDICT_RISKY
    if score >= CAUTION_THRESHOLD:
        return VERDICT_CAUTION
    return VERDICT_OK


def score_listing(listing: Listing, signals: Optional[RiskSignals], now_ms: Optional[float] = None) -> ScoreResult:
    """
    Turns a listing and its merged signals into a 0-100 risk score, a verdict
    and the set of flags that fired. Higher is riskier.
    """
    score = 0
    flags: List[str] = []

    if signals is not None:
        for fired, weight, flag in _signal_checks(signals):
            if fired:
                score += weight
                flags.append(flag)

    liquidity = listing.liquidity_usd or 0
    if liquidity < 1000:
        score += 30
        flags.append("low_liquidity")
    elif liquidity < 5000:
        score += 20
        flags.append("low_liquidity")

    if pair_age_hours(listing, now_ms) < VERY_NEW_HOURS:
        score += 10
        flags.append("very_new")

    score = min(MAX_SCORE, score)
    return ScoreResult(score=score, verdict=verdict_for(score), flags=frozenset(flags))
