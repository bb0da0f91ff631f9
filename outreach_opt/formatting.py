# outreach_opt/formatting.py
from __future__ import annotations

import math
from typing import Optional

from .metrics import UNREACHABLE_SAVE_RATE, is_unreachable

NOT_APPLICABLE = "—"


def format_money(n: float) -> str:
    sign = "-" if n < 0 else ""
    return f"{sign}${abs(n):,.0f}"


def format_pct(x: Optional[float]) -> str:
    if x is None or not math.isfinite(x):
        return NOT_APPLICABLE
    return f"{x * 100:.1f}%"


def format_roi(value: Optional[float]) -> str:
    if value is None:
        return NOT_APPLICABLE
    return f"{value:.2f}×"


def format_break_even(rate: Optional[float], ceiling: float = UNREACHABLE_SAVE_RATE) -> str:
    if rate is None:
        return NOT_APPLICABLE
    if is_unreachable(rate, ceiling):
        return f">{ceiling * 100:.0f}%"
    return format_pct(rate)
