# outreach_opt/narrative.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .formatting import format_money, format_pct, format_roi
from .metrics import PrecisionRecall, break_even_save_rate, roi
from .profit import EvaluationResult, coerce_money

MIN_MARGINAL_STEP = 200
MARGINAL_STEP_DIVISOR = 50

LEVERS: Tuple[str, ...] = (
    "reduce contact cost (cheaper channel)",
    "increase save rate (better offer / messaging)",
    "focus on fewer customers (lower capacity)",
)


def marginal_step(population_size: int) -> int:
    return max(MIN_MARGINAL_STEP, int(population_size) // MARGINAL_STEP_DIVISOR)


@dataclass(frozen=True)
class Recommendation:
    profitable: bool
    capacity: int
    profit: float
    marginal_step: int
    marginal_delta: float
    roi: Optional[float]
    break_even_save_rate: Optional[float]
    levers: Tuple[str, ...] = ()

    @property
    def direction(self) -> str:
        return "increase" if self.marginal_delta >= 0 else "decrease"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profitable": self.profitable,
            "capacity": self.capacity,
            "profit": self.profit,
            "marginal_step": self.marginal_step,
            "marginal_delta": self.marginal_delta,
            "direction": self.direction,
            "roi": self.roi,
            "break_even_save_rate": self.break_even_save_rate,
            "levers": list(self.levers),
        }


def recommend(here: EvaluationResult, nxt: EvaluationResult, churn_loss: Any, contact_cost: Any) -> Recommendation:
    """
    Verdict for the current capacity given the evaluation one step further.

    Profitable (profit >= 0): marginal delta, ROI and break-even save rate.
    Otherwise: the fixed levers only. No capacity is proposed either way;
    that is read off the profit curve.
    """
    step = nxt.contacts - here.contacts
    delta = nxt.profit - here.profit

    if here.profit < 0:
        return Recommendation(
            profitable=False,
            capacity=here.contacts,
            profit=here.profit,
            marginal_step=step,
            marginal_delta=delta,
            roi=None,
            break_even_save_rate=None,
            levers=LEVERS,
        )

    contact_cost, churn_loss, _ = coerce_money(contact_cost, churn_loss, 0.0)
    be = break_even_save_rate(here.expected_true_positives, here.contacts, churn_loss, contact_cost)
    return Recommendation(
        profitable=True,
        capacity=here.contacts,
        profit=here.profit,
        marginal_step=step,
        marginal_delta=delta,
        roi=roi(here.profit, here.cost),
        break_even_save_rate=be,
    )


def interpretation_text(rec: Recommendation) -> str:
    if not rec.profitable:
        fix1, fix2, fix3 = rec.levers
        return (
            "Under these assumptions, the outreach policy is not expected to be profitable at this capacity. "
            f"Consider: {fix1}, {fix2}, or {fix3}. "
            "The chart helps identify a capacity where profit turns positive."
        )

    if rec.marginal_step == 0:
        marginal = "Capacity already covers every scored customer."
    elif rec.marginal_delta >= 0:
        marginal = (
            f"Increasing capacity by ~{rec.marginal_step:,} would likely increase profit "
            f"by about {format_money(rec.marginal_delta)} (on this scored data)."
        )
    else:
        marginal = (
            f"Increasing capacity by ~{rec.marginal_step:,} would likely reduce profit "
            f"by about {format_money(abs(rec.marginal_delta))}; marginal contacts look less cost-effective."
        )

    be_line = "" if rec.break_even_save_rate is None else (
        f" Break-even save rate at this capacity is {format_pct(rec.break_even_save_rate)}."
    )
    roi_line = "" if rec.roi is None else f" Current ROI is about {format_roi(rec.roi)}."

    return (
        "Under these assumptions, the outreach policy is expected to be profitable. "
        f"{marginal}{be_line}{roi_line}"
    )


def executive_summary(evaluation: EvaluationResult, pr: PrecisionRecall, labeled: bool) -> Tuple[str, str, str]:
    """(recommended action, expected retained value, caveat) lines."""
    profit_str = format_money(evaluation.profit)
    action = (
        f"Recommended action: Contact the top {evaluation.contacts:,} at-risk customers "
        "(ranked by churn risk)."
    )

    if labeled:
        value = (
            f"Expected retained value: You would contact about {pr.true_positives:,} true churners "
            f"(precision {format_pct(pr.precision)}), with an estimated {profit_str} incremental profit "
            "under these assumptions."
        )
        caveat = (
            "Note: precision/recall are estimated on a held-out scored dataset (proxy). "
            "Real results depend on campaign execution."
        )
    else:
        value = (
            f"Expected retained value: Among contacted customers, the model predicts about "
            f"{evaluation.expected_true_positives:.0f} churners (expected), with an estimated {profit_str} "
            "incremental profit under these assumptions."
        )
        caveat = "Note: this run estimates impact from predicted probabilities (no ground-truth labels loaded)."

    return action, value, caveat
