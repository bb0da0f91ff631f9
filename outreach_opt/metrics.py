# outreach_opt/metrics.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .population import RankedPopulation

# Break-even save rates above this are economically meaningless (1000%).
UNREACHABLE_SAVE_RATE = 10.0


@dataclass(frozen=True)
class PrecisionRecall:
    """All fields are None when the population carries no labels."""
    precision: Optional[float]
    recall: Optional[float]
    true_positives: Optional[int]
    false_positives: Optional[int]
    total_positives: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "precision": self.precision,
            "recall": self.recall,
            "true_positives": self.true_positives,
            "false_positives": self.false_positives,
            "total_positives": self.total_positives,
        }


NOT_LABELED = PrecisionRecall(None, None, None, None, None)


def roi(profit: float, cost: float) -> Optional[float]:
    """profit / cost, or None when nothing was spent."""
    if cost <= 0:
        return None
    return profit / cost


def precision_recall(contacted: RankedPopulation, population: RankedPopulation) -> PrecisionRecall:
    """
    Precision/recall of the contacted slice against the full population.

    - precision = 0 when nobody is contacted
    - recall = 0 when the population has no positives
    """
    if not population.labeled or not contacted.labeled:
        return NOT_LABELED

    total_pos = population.total_positives
    tp = contacted.total_positives
    fp = len(contacted) - tp

    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / total_pos if total_pos > 0 else 0.0
    return PrecisionRecall(
        precision=float(precision),
        recall=float(recall),
        true_positives=tp,
        false_positives=fp,
        total_positives=total_pos,
    )


def break_even_save_rate(
    expected_true_positives: float,
    capacity: int,
    churn_loss: float,
    contact_cost: float,
) -> Optional[float]:
    """
    Smallest save_rate with non-negative profit:
      save_rate >= capacity * contact_cost / (expected_TP * churn_loss)

    None when expected_TP <= 0 or churn_loss <= 0 (no save rate helps).
    The raw value is returned even above 100%; see is_unreachable().
    """
    if expected_true_positives <= 0 or churn_loss <= 0:
        return None
    return (capacity * contact_cost) / (expected_true_positives * churn_loss)


def is_unreachable(save_rate: Optional[float], ceiling: float = UNREACHABLE_SAVE_RATE) -> bool:
    return save_rate is not None and save_rate > ceiling
