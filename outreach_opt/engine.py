# outreach_opt/engine.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import pandas as pd

from .curve import ProfitCurve, profit_curve
from .data import load_population
from .formatting import NOT_APPLICABLE, format_pct
from .metrics import PrecisionRecall, break_even_save_rate, precision_recall, roi
from .narrative import Recommendation, executive_summary, interpretation_text, marginal_step, recommend
from .population import RankedPopulation
from .profit import BaselineResult, EvaluationResult, PolicyEvaluator, clamp_capacity, coerce_money
from .scenarios import PolicyParameters

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 25


def preview_frame(population: RankedPopulation, capacity: int, limit: int = PREVIEW_ROWS) -> pd.DataFrame:
    """
    First `limit` ranked customers with whether they fall inside the current capacity.
    Blank ids are shown as '(row i)'.
    """
    rows = []
    for i in range(min(limit, len(population))):
        c = population[i]
        rows.append({
            "customer_id": c.customer_id or f"(row {i})",
            "churn_probability": round(c.churn_probability, 3),
            "contact": "Yes" if i < capacity else "No",
            "actual_churn": str(c.actual_churn) if population.labeled else NOT_APPLICABLE,
        })
    return pd.DataFrame(rows, columns=["customer_id", "churn_probability", "contact", "actual_churn"])


@dataclass(frozen=True)
class DecisionReport:
    """Everything derived from one (population, parameters) pair."""
    parameters: PolicyParameters
    population_size: int
    labeled: bool
    base_rate: float
    evaluation: EvaluationResult
    random: BaselineResult
    nothing: BaselineResult
    roi: Optional[float]
    precision_recall: PrecisionRecall
    break_even_save_rate: Optional[float]
    curve: ProfitCurve
    recommendation: Recommendation

    def comparison_table(self) -> pd.DataFrame:
        n = self.evaluation.contacts
        return pd.DataFrame([
            {
                "strategy": "Model ranking (top-N risk)",
                "contacts": n,
                "expected_true_positives": self.evaluation.expected_true_positives,
                "profit": self.evaluation.profit,
            },
            {
                "strategy": "Random targeting (same capacity)",
                "contacts": n,
                "expected_true_positives": self.random.expected_true_positives,
                "profit": self.random.profit,
            },
            {
                "strategy": "Do nothing",
                "contacts": 0,
                "expected_true_positives": self.nothing.expected_true_positives,
                "profit": self.nothing.profit,
            },
        ])

    def interpretation(self) -> str:
        return interpretation_text(self.recommendation)

    def summary(self) -> Tuple[str, str, str]:
        return executive_summary(self.evaluation, self.precision_recall, self.labeled)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameters": {
                "capacity": self.parameters.capacity,
                "contact_cost": self.parameters.contact_cost,
                "churn_loss": self.parameters.churn_loss,
                "save_rate": self.parameters.save_rate,
            },
            "population_size": self.population_size,
            "labeled": self.labeled,
            "base_rate": self.base_rate,
            "evaluation": self.evaluation.to_dict(),
            "random_baseline": self.random.to_dict(),
            "do_nothing_baseline": self.nothing.to_dict(),
            "metrics": {
                "roi": self.roi,
                "break_even_save_rate": self.break_even_save_rate,
                **self.precision_recall.to_dict(),
            },
            "curve": [{"capacity": p.capacity, "profit": p.profit} for p in self.curve],
            "recommendation": self.recommendation.to_dict(),
            "interpretation": self.interpretation(),
        }


class DecisionEngine:
    """
    Owns one ranked population for the lifetime of a loaded dataset.
    analyze() is a pure recomputation; nothing about the parameters is kept.
    """

    def __init__(self, population: RankedPopulation):
        self.population = population
        self.evaluator = PolicyEvaluator(population)

    @classmethod
    def from_csv(cls, path: Union[str, Path]) -> "DecisionEngine":
        return cls(load_population(path))

    def __len__(self) -> int:
        return len(self.population)

    def describe(self) -> str:
        return f"{len(self.population):,} customers • base churn {format_pct(self.population.base_rate)}"

    def preview(self, capacity: Any = 0, limit: int = PREVIEW_ROWS) -> pd.DataFrame:
        return preview_frame(self.population, clamp_capacity(capacity, len(self.population)), limit)

    def curve(self, contact_cost: Any, churn_loss: Any, save_rate: Any) -> ProfitCurve:
        return profit_curve(self.evaluator, contact_cost, churn_loss, save_rate)

    def analyze(self, params: PolicyParameters) -> DecisionReport:
        contact_cost, churn_loss, save_rate = coerce_money(params.contact_cost, params.churn_loss, params.save_rate)
        size = len(self.population)

        here = self.evaluator.evaluate(params.capacity, contact_cost, churn_loss, save_rate)
        nxt = self.evaluator.evaluate(
            min(size, here.contacts + marginal_step(size)), contact_cost, churn_loss, save_rate
        )

        report = DecisionReport(
            parameters=PolicyParameters(here.contacts, contact_cost, churn_loss, save_rate),
            population_size=size,
            labeled=self.population.labeled,
            base_rate=self.population.base_rate,
            evaluation=here,
            random=self.evaluator.random_baseline(here.contacts, contact_cost, churn_loss, save_rate),
            nothing=self.evaluator.do_nothing_baseline(),
            roi=roi(here.profit, here.cost),
            precision_recall=precision_recall(here.contacted, self.population),
            break_even_save_rate=break_even_save_rate(
                here.expected_true_positives, here.contacts, churn_loss, contact_cost
            ),
            curve=self.curve(contact_cost, churn_loss, save_rate),
            recommendation=recommend(here, nxt, churn_loss, contact_cost),
        )
        logger.debug(
            "capacity=%d profit=%.2f cost=%.2f expected_tp=%.2f",
            here.contacts, here.profit, here.cost, here.expected_true_positives,
        )
        return report
