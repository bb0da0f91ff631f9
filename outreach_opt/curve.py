# outreach_opt/curve.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

import pandas as pd

from .profit import PolicyEvaluator

TARGET_POINTS = 40
MIN_STEP = 1


@dataclass(frozen=True)
class CurvePoint:
    capacity: int
    profit: float


def curve_capacities(n: int, target_points: int = TARGET_POINTS, min_step: int = MIN_STEP) -> List[int]:
    """
    0, step, 2*step, ... plus n itself as the last capacity.
    step = max(min_step, n // target_points).
    """
    step = max(int(min_step), 1, n // max(1, int(target_points)))
    caps = list(range(0, n + 1, step))
    if caps[-1] != n:
        caps.append(n)
    return caps


class ProfitCurve:
    """
    Profit of the top-N policy sampled over capacity.

    Lazy and restartable: each iteration re-evaluates from scratch with the
    parameters captured at construction.
    """

    def __init__(
        self,
        evaluator: PolicyEvaluator,
        contact_cost: Any,
        churn_loss: Any,
        save_rate: Any,
        target_points: int = TARGET_POINTS,
        min_step: int = MIN_STEP,
    ):
        self.evaluator = evaluator
        self.contact_cost = contact_cost
        self.churn_loss = churn_loss
        self.save_rate = save_rate
        self.target_points = target_points
        self.min_step = min_step

    def capacities(self) -> List[int]:
        return curve_capacities(len(self.evaluator.population), self.target_points, self.min_step)

    def __iter__(self) -> Iterator[CurvePoint]:
        for cap in self.capacities():
            res = self.evaluator.evaluate(cap, self.contact_cost, self.churn_loss, self.save_rate)
            yield CurvePoint(capacity=res.contacts, profit=res.profit)

    def points(self) -> List[CurvePoint]:
        return list(self)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [{"capacity": p.capacity, "profit": p.profit} for p in self],
            columns=["capacity", "profit"],
        )

    def peak(self) -> Optional[CurvePoint]:
        """First sampled point with the highest profit."""
        best: Optional[CurvePoint] = None
        for p in self:
            if best is None or p.profit > best.profit:
                best = p
        return best


def profit_curve(
    evaluator: PolicyEvaluator,
    contact_cost: Any,
    churn_loss: Any,
    save_rate: Any,
    target_points: int = TARGET_POINTS,
    min_step: int = MIN_STEP,
) -> ProfitCurve:
    return ProfitCurve(evaluator, contact_cost, churn_loss, save_rate, target_points, min_step)
