# outreach_opt/__init__.py
from __future__ import annotations

from .population import CustomerScore, RankedPopulation, build_population
from .profit import BaselineResult, EvaluationResult, PolicyEvaluator
from .scenarios import PRESETS, PolicyParameters
from .engine import DecisionEngine, DecisionReport

__all__ = [
    "BaselineResult",
    "CustomerScore",
    "DecisionEngine",
    "DecisionReport",
    "EvaluationResult",
    "PolicyEvaluator",
    "PolicyParameters",
    "PRESETS",
    "RankedPopulation",
    "build_population",
]
