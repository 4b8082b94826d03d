"""
Crossover Detection

Shared by MACD (MACD line vs signal line) and moving averages
(golden/death crosses between EMAs of adjacent periods).
"""

from datetime import datetime
from typing import Optional, Sequence

from stockscope.schemas.indicators import CrossoverEvent, CrossoverType


def detect_crossover(
    line1: Sequence[float],
    line2: Sequence[float],
    index: Optional[int] = None,
    date: Optional[datetime] = None,
) -> Optional[CrossoverEvent]:
    """
    Compare the last two tail-aligned points of two series.

    Bullish when line1 moves from at-or-below line2 to above it,
    bearish when it moves from at-or-above to below.

    Args:
        line1: First series (e.g. MACD line, shorter-period EMA)
        line2: Second series (e.g. signal line, longer-period EMA)
        index: Anchor for the event; defaults to line1's last position
        date: Optional date of the anchoring record

    Returns:
        CrossoverEvent, or None when there is no crossover or either
        series has fewer than 2 points
    """
    if len(line1) < 2 or len(line2) < 2:
        return None

    prev1, curr1 = float(line1[-2]), float(line1[-1])
    prev2, curr2 = float(line2[-2]), float(line2[-1])

    if prev1 <= prev2 and curr1 > curr2:
        crossover = CrossoverType.BULLISH
    elif prev1 >= prev2 and curr1 < curr2:
        crossover = CrossoverType.BEARISH
    else:
        return None

    return CrossoverEvent(
        type=crossover,
        index=len(line1) - 1 if index is None else index,
        date=date,
    )
