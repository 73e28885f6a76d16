from dataclasses import dataclass, replace
from typing import Optional
from scanner.models.token import (
    GoPlusPayload,
    RugCheckPayload,
    PROVIDER_GOPLUS,
    PROVIDER_RUGCHECK,
)

SOURCE_MERGED = "merged"

# Fields the secondary provider always supplies when both providers answered.
# The primary on those networks does not report them reliably.
MERGE_OVERRIDE_FIELDS = (
    "buy_tax",
    "sell_tax",
    "owner_can_retake",
    "hidden_owner",
    "is_proxy",
    "can_blacklist",
    "can_whitelist",
    "has_anti_whale",
    "has_cooldown",
    "is_trading_disabled",
)


@dataclass(frozen=True)
class RiskSignals:
    """
    Provider-agnostic risk indicators.
    lp_lock_percent is None when unknown, which is not the same as 0.
    """
    source_kind: str  # "goplus", "rugcheck" or "merged"
    honeypot: bool = False
    buy_tax: float = 0.0
    sell_tax: float = 0.0
    is_mintable: bool = False
    owner_can_retake: bool = False
    hidden_owner: bool = False
    is_proxy: bool = False
    can_blacklist: bool = False
    can_whitelist: bool = False
    has_anti_whale: bool = False
    has_cooldown: bool = False
    is_trading_disabled: bool = False
    lp_lock_percent: Optional[float] = None
    # Solana only
    mint_authority_active: bool = False
    freeze_authority_active: bool = False


def _flag(value: Optional[str]) -> bool:
    return value == "1"


def _tax(value: Optional[str]) -> float:
    try:
        return float(value) if value not in (None, "") else 0.0
    except (TypeError, ValueError):
        return 0.0


def normalize_goplus(gp: GoPlusPayload) -> RiskSignals:
    return RiskSignals(
        source_kind=PROVIDER_GOPLUS,
        honeypot=_flag(gp.is_honeypot),
        buy_tax=_tax(gp.buy_tax),
        sell_tax=_tax(gp.sell_tax),
        is_mintable=_flag(gp.is_mintable),
        owner_can_retake=_flag(gp.can_take_back_ownership),
        hidden_owner=_flag(gp.hidden_owner),
        is_proxy=_flag(gp.is_proxy),
        can_blacklist=_flag(gp.is_blacklisted),
        can_whitelist=_flag(gp.is_whitelisted),
        has_anti_whale=_flag(gp.anti_whale),
        has_cooldown=_flag(gp.trading_cooldown),
        is_trading_disabled=_flag(gp.transfer_pausable),
        lp_lock_percent=None,  # GoPlus has no simple lock percentage
    )


def normalize_rugcheck(rc: RugCheckPayload) -> RiskSignals:
    # RugCheck reports no taxes or ownership flags; they stay at their defaults.
    return RiskSignals(
        source_kind=PROVIDER_RUGCHECK,
        honeypot=rc.risk == "danger",
        is_mintable=rc.mint_authority_active,
        lp_lock_percent=None,
        mint_authority_active=rc.mint_authority_active,
        freeze_authority_active=rc.freeze_authority_active,
    )


def normalize(payload) -> RiskSignals:
    if isinstance(payload, GoPlusPayload):
        return normalize_goplus(payload)
    if isinstance(payload, RugCheckPayload):
        return normalize_rugcheck(payload)
    raise TypeError(f"Unknown risk payload: {type(payload).__name__}")


def merge_signals(primary: RiskSignals, secondary: RiskSignals) -> RiskSignals:
    """
    Primary signals, with honeypot OR-ed across both providers and the
    MERGE_OVERRIDE_FIELDS taken from the secondary.
    """
    overrides = {name: getattr(secondary, name) for name in MERGE_OVERRIDE_FIELDS}
    return replace(
        primary,
        source_kind=SOURCE_MERGED,
        honeypot=primary.honeypot or secondary.honeypot,
        **overrides,
    )


def combine(primary: Optional[RiskSignals], secondary: Optional[RiskSignals]) -> Optional[RiskSignals]:
    if primary is not None and secondary is not None:
        return merge_signals(primary, secondary)
    return primary if primary is not None else secondary
