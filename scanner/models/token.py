from dataclasses import dataclass, field
from typing import Optional, Dict, Any, FrozenSet, Union

PROVIDER_GOPLUS = "goplus"
PROVIDER_RUGCHECK = "rugcheck"

VERDICT_OK = "OK"
VERDICT_CAUTION = "CAUTION"
VERDICT_RISKY = "RISKY"


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        if value is None or isinstance(value, (dict, list)):
            return default
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any, default: str = "") -> str:
    if value is None or isinstance(value, (dict, list)):
        return default
    return str(value) or default


@dataclass(frozen=True)
class Listing:
    """
    A freshly created trading pair as reported by DexScreener.
    Identity is (network_id, base_token_address).
    """
    network_id: str
    pair_address: str
    base_token_address: str
    base_token_name: str
    base_token_symbol: str
    liquidity_usd: float
    volume_h24: float
    pair_created_at: Optional[int]  # Timestamp in ms
    url: str
    dex_id: str = ""
    price_usd: float = 0.0
    fdv: float = 0.0

    @property
    def token_id(self) -> str:
        return make_token_id(self.network_id, self.base_token_address)

    @classmethod
    def from_pair(cls, data: Dict[str, Any]) -> "Listing":
        """
        Converts a raw DexScreener pair dict into a Listing.
        Nulls and wrongly typed fields fall back to defaults.
        """
        base = _as_dict(data.get("baseToken"))
        return cls(
            network_id=_as_str(data.get("chainId"), "unknown"),
            pair_address=_as_str(data.get("pairAddress")),
            base_token_address=_as_str(base.get("address")),
            base_token_name=_as_str(base.get("name"), "Unknown"),
            base_token_symbol=_as_str(base.get("symbol"), "UNK"),
            liquidity_usd=_to_float(_as_dict(data.get("liquidity")).get("usd")),
            volume_h24=_to_float(_as_dict(data.get("volume")).get("h24")),
            pair_created_at=int(_to_float(data.get("pairCreatedAt"))) or None,
            url=_as_str(data.get("url")),
            dex_id=_as_str(data.get("dexId")),
            price_usd=_to_float(data.get("priceUsd")),
            fdv=_to_float(data.get("fdv")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "networkId": self.network_id,
            "pairAddress": self.pair_address,
            "baseToken": {
                "address": self.base_token_address,
                "name": self.base_token_name,
                "symbol": self.base_token_symbol,
            },
            "liquidityUsd": self.liquidity_usd,
            "volumeH24": self.volume_h24,
            "pairCreatedAt": self.pair_created_at,
            "url": self.url,
            "dexId": self.dex_id,
            "priceUsd": self.price_usd,
            "fdv": self.fdv,
        }


# GoPlus reports every flag as a "0"/"1" string.
GOPLUS_FIELDS = (
    "is_honeypot",
    "buy_tax",
    "sell_tax",
    "is_mintable",
    "can_take_back_ownership",
    "hidden_owner",
    "is_proxy",
    "is_blacklisted",
    "is_whitelisted",
    "anti_whale",
    "trading_cooldown",
    "transfer_pausable",
)


@dataclass(frozen=True)
class GoPlusPayload:
    is_honeypot: Optional[str] = None
    buy_tax: Optional[str] = None
    sell_tax: Optional[str] = None
    is_mintable: Optional[str] = None
    can_take_back_ownership: Optional[str] = None
    hidden_owner: Optional[str] = None
    is_proxy: Optional[str] = None
    is_blacklisted: Optional[str] = None
    is_whitelisted: Optional[str] = None
    anti_whale: Optional[str] = None
    trading_cooldown: Optional[str] = None
    transfer_pausable: Optional[str] = None
    # Fields the normalizer never reads (holders, dex, owner_address, ...)
    extra: Dict[str, Any] = field(default_factory=dict)

    kind = PROVIDER_GOPLUS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GoPlusPayload":
        known = {}
        for name in GOPLUS_FIELDS:
            value = data.get(name)
            known[name] = None if value is None else str(value)
        extra = {k: v for k, v in data.items() if k not in GOPLUS_FIELDS}
        return cls(extra=extra, **known)

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        for name in GOPLUS_FIELDS:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out


@dataclass(frozen=True)
class RugCheckPayload:
    risk: Optional[str] = None
    mint_authority_active: bool = False
    freeze_authority_active: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    kind = PROVIDER_RUGCHECK

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RugCheckPayload":
        details = data.get("riskDetails") or {}
        extra = {k: v for k, v in data.items() if k not in ("risk", "riskDetails")}
        leftover_details = {
            k: v for k, v in details.items()
            if k not in ("mintAuthorityActive", "freezeAuthorityActive")
        }
        if leftover_details:
            extra["riskDetails"] = leftover_details
        return cls(
            risk=data.get("risk"),
            mint_authority_active=bool(details.get("mintAuthorityActive", False)),
            freeze_authority_active=bool(details.get("freezeAuthorityActive", False)),
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        details = dict(out.get("riskDetails") or {})
        details["mintAuthorityActive"] = self.mint_authority_active
        details["freezeAuthorityActive"] = self.freeze_authority_active
        out["riskDetails"] = details
        if self.risk is not None:
            out["risk"] = self.risk
        return out


RawRiskPayload = Union[GoPlusPayload, RugCheckPayload]

STATUS_OK = "ok"
STATUS_ABSENT = "absent"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class ProviderResult:
    """
    Outcome of one provider call. Adapters never raise; they report why a
    payload is missing instead.
    """
    provider: str
    status: str
    payload: Optional[RawRiskPayload] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, provider: str, payload: RawRiskPayload) -> "ProviderResult":
        return cls(provider=provider, status=STATUS_OK, payload=payload)

    @classmethod
    def absent(cls, provider: str, reason: str) -> "ProviderResult":
        return cls(provider=provider, status=STATUS_ABSENT, reason=reason)

    @classmethod
    def error(cls, provider: str, reason: str) -> "ProviderResult":
        return cls(provider=provider, status=STATUS_ERROR, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status == STATUS_OK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "status": self.status,
            "reason": self.reason,
            "data": self.payload.to_dict() if self.payload is not None else None,
        }


@dataclass(frozen=True)
class ScoreResult:
    score: int
    verdict: str  # "OK", "CAUTION", "RISKY"
    flags: FrozenSet[str]


@dataclass(frozen=True)
class EnrichedToken:
    """
    One scored listing. A later scan produces a new instance with the same id
    rather than updating this one.
    """
    id: str
    listing: Listing
    risk: ScoreResult
    signals: Optional[Any] = None  # RiskSignals, None when no provider answered
    primary_provider: Optional[str] = None
    primary_result: Optional[ProviderResult] = None
    secondary_provider: Optional[str] = None
    secondary_result: Optional[ProviderResult] = None

    @property
    def primary_risk_data(self) -> Optional[RawRiskPayload]:
        return self.primary_result.payload if self.primary_result else None

    @property
    def secondary_risk_data(self) -> Optional[RawRiskPayload]:
        return self.secondary_result.payload if self.secondary_result else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "listing": self.listing.to_dict(),
            "risk": {
                "score": self.risk.score,
                "verdict": self.risk.verdict,
                "flags": sorted(self.risk.flags),
            },
            "signalSource": self.signals.source_kind if self.signals else None,
            "primaryRiskProvider": self.primary_provider,
            "primaryRisk": self.primary_result.to_dict() if self.primary_result else None,
            "secondaryRiskProvider": self.secondary_provider,
            "secondaryRisk": self.secondary_result.to_dict() if self.secondary_result else None,
        }


def make_token_id(network_id: str, token_address: str) -> str:
    return f"{network_id}-{token_address}"
