from typing import Iterable, List
from colorama import Fore, Style
from scanner.models.token import EnrichedToken, VERDICT_RISKY, VERDICT_CAUTION
from scanner.analyzer.scoring import FLAGS
from scanner.analyzer.chains import bubblemaps_url


def filter_tokens(tokens: Iterable[EnrichedToken], network: str = "all", query: str = "") -> List[EnrichedToken]:
    """
    Network tab + free-text search over symbol, name and address.
    """
    filtered = list(tokens)
    if network and network != "all":
        filtered = [t for t in filtered if t.listing.network_id == network]
    if query:
        q = query.lower()
        filtered = [
            t for t in filtered
            if q in t.listing.base_token_symbol.lower()
            or q in t.listing.base_token_name.lower()
            or q in t.listing.base_token_address.lower()
        ]
    return filtered


def verdict_color(verdict: str) -> str:
    if verdict == VERDICT_RISKY:
        return Fore.RED
    if verdict == VERDICT_CAUTION:
        return Fore.YELLOW
    return Fore.GREEN


class ConsoleReport:
    @staticmethod
    def format_token(token: EnrichedToken) -> str:
        listing = token.listing
        color = verdict_color(token.risk.verdict)
        labels = ", ".join(FLAGS[f]["label"] if f in FLAGS else f for f in sorted(token.risk.flags)) or "None"
        lines = [
            f"{color}{'=' * 50}",
            f"{Style.BRIGHT}Token: {listing.base_token_name} ({listing.base_token_symbol})",
            f"{color}Score: {token.risk.score}/100 [{token.risk.verdict}]",
            f"{Fore.WHITE}Chain: {listing.network_id} | Provider: {token.primary_provider or 'none'}"
            + (f" + {token.secondary_provider}" if token.secondary_provider else ""),
            f"CA: {listing.base_token_address}",
            f"Liq: ${listing.liquidity_usd:,.0f} | 24h Vol: ${listing.volume_h24:,.0f}",
            f"Risks: {labels}",
            f"Chart: {listing.url}",
        ]
        holders = bubblemaps_url(listing.network_id, listing.base_token_address)
        if holders:
            lines.append(f"Holders: {holders}")
        return "\n".join(lines)

    @staticmethod
    def print_tokens(tokens: Iterable[EnrichedToken]):
        ranked = sorted(tokens, key=lambda t: t.risk.score)
        for token in ranked:
            print(ConsoleReport.format_token(token))
        print(f"{Style.RESET_ALL}{len(ranked)} tokens")
