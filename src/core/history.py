"""Consumption history — series selection and chart scaling.

No I/O: this module only transforms data.
"""

from __future__ import annotations

from typing import Sequence

from src.core.recommendation import round_half_up
from src.data.defaults import HISTORY
from src.data.models import HistoryMode, HistorySeries

BAR_MAX_PX = 140
BAR_MIN_PX = 18


def select(mode: HistoryMode | str) -> HistorySeries:
    """Return the fixed 7-sample series for *mode* ("daily" or "weekly").

    Raises ValueError on an unknown mode.
    """
    return HISTORY[HistoryMode(mode)]


def scale_of(values: Sequence[float], guard_zero: bool = True) -> float:
    """Return the value bars are normalized against: the series maximum.

    With guard_zero (the default) an empty or all-zero series scales to 1,
    so dividing by the result is always safe. Without it the raw maximum
    is returned: 0 for an all-zero series, and an empty series raises
    ValueError.
    """
    if not guard_zero:
        return max(values)
    if not values:
        return 1
    peak = max(values)
    return peak if peak > 0 else 1


def bar_heights(
    series: HistorySeries | Sequence[float],
    max_px: int = BAR_MAX_PX,
    min_px: int = BAR_MIN_PX,
) -> list[int]:
    """Pixel height per sample, relative to the series maximum, at least *min_px*."""
    values = series.values if isinstance(series, HistorySeries) else series
    scale = scale_of(values)
    return [max(min_px, round_half_up(v / scale * max_px)) for v in values]
