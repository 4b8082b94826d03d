"""
Symbol search over the universe for autocomplete.
"""

from stockscope.schemas.market import SymbolMeta


def search_symbols(universe: list[SymbolMeta], query: str, limit: int = 25) -> list[SymbolMeta]:
    """
    Search symbols by symbol or name.

    Args:
        universe: Symbols to search
        query: Search query (case-insensitive partial match)
        limit: Maximum results to return

    Returns:
        Matches in universe order
    """
    query = query.strip().lower()

    if not query:
        return []

    results = [
        meta
        for meta in universe
        if query in meta.symbol.lower() or (meta.name and query in meta.name.lower())
    ]
    return results[:limit]


def get_sectors(universe: list[SymbolMeta]) -> list[str]:
    """Distinct non-empty sectors, sorted."""
    return sorted({meta.sector for meta in universe if meta.sector})
