# outreach_opt/profit.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .population import RankedPopulation


def to_number(x: Any, fallback: float = 0.0) -> float:
    try:
        value = float(x)
    except (TypeError, ValueError, OverflowError):
        return fallback
    return value if math.isfinite(value) else fallback


def clamp_capacity(capacity: Any, size: int) -> int:
    """Floor to an int in [0, size]; +inf (or an int too big for a float) means everyone."""
    try:
        value = float(capacity)
    except OverflowError:
        value = math.inf if capacity > 0 else -math.inf
    except (TypeError, ValueError):
        return 0
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return int(size) if value > 0 else 0
    return int(max(0, min(int(size), math.floor(value))))


def coerce_money(contact_cost: Any, churn_loss: Any, save_rate: Any) -> Tuple[float, float, float]:
    """Costs and losses floored at 0; save_rate passed through."""
    return (
        max(0.0, to_number(contact_cost)),
        max(0.0, to_number(churn_loss)),
        to_number(save_rate),
    )


@dataclass(frozen=True)
class BaselineResult:
    profit: float
    cost: float
    expected_true_positives: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "profit": self.profit,
            "cost": self.cost,
            "expected_true_positives": self.expected_true_positives,
        }


@dataclass(frozen=True)
class EvaluationResult:
    contacts: int
    expected_true_positives: float
    cost: float
    profit: float
    contacted: RankedPopulation

    def to_dict(self) -> Dict[str, float]:
        return {
            "contacts": self.contacts,
            "expected_true_positives": self.expected_true_positives,
            "cost": self.cost,
            "profit": self.profit,
        }


class PolicyEvaluator:
    """
    Incremental profit of contact policies relative to 'do nothing':

      profit = expected_TP * (save_rate * churn_loss) - contacts * contact_cost

    expected_TP is the exact churner count among contacted customers when the
    population is labeled, otherwise the sum of their churn probabilities.
    Inputs are coerced, never rejected: capacity is clamped to
    [0, len(population)], money inputs are floored at 0 and anything
    non-numeric counts as 0. save_rate is taken as given.
    """

    def __init__(self, population: RankedPopulation):
        self.population = population

    def evaluate(self, capacity: Any, contact_cost: Any, churn_loss: Any, save_rate: Any) -> EvaluationResult:
        """Contact the top-N customers by risk."""
        n = clamp_capacity(capacity, len(self.population))
        contact_cost, churn_loss, save_rate = coerce_money(contact_cost, churn_loss, save_rate)

        tp = float(self.population.hits(n))
        cost = n * contact_cost
        profit = tp * (save_rate * churn_loss) - cost
        return EvaluationResult(
            contacts=n,
            expected_true_positives=tp,
            cost=float(cost),
            profit=float(profit),
            contacted=self.population.head(n),
        )

    def random_baseline(self, capacity: Any, contact_cost: Any, churn_loss: Any, save_rate: Any) -> BaselineResult:
        """Same capacity, customers drawn uniformly at random (hit rate = base rate)."""
        n = clamp_capacity(capacity, len(self.population))
        contact_cost, churn_loss, save_rate = coerce_money(contact_cost, churn_loss, save_rate)

        tp = n * self.population.base_rate
        cost = n * contact_cost
        profit = tp * (save_rate * churn_loss) - cost
        return BaselineResult(profit=float(profit), cost=float(cost), expected_true_positives=float(tp))

    @staticmethod
    def do_nothing_baseline() -> BaselineResult:
        return BaselineResult(profit=0.0, cost=0.0, expected_true_positives=0.0)
