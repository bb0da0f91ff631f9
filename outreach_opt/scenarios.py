# outreach_opt/scenarios.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict

from .profit import clamp_capacity


@dataclass(frozen=True)
class PolicyParameters:
    capacity: int
    contact_cost: float
    churn_loss: float
    save_rate: float

    def for_population(self, size: int) -> "PolicyParameters":
        """Cap capacity at the population size."""
        return replace(self, capacity=clamp_capacity(self.capacity, size))


DEFAULT_PARAMETERS = PolicyParameters(capacity=1000, contact_cost=20.0, churn_loss=200.0, save_rate=0.25)

# Example economics for common retention channels.
PRESETS: Dict[str, PolicyParameters] = {
    "saas":    PolicyParameters(capacity=5000, contact_cost=2.0,  churn_loss=120.0, save_rate=0.08),
    "telecom": PolicyParameters(capacity=1000, contact_cost=20.0, churn_loss=200.0, save_rate=0.25),
    "bank":    PolicyParameters(capacity=1500, contact_cost=10.0, churn_loss=400.0, save_rate=0.15),
}


def get_preset(name: str) -> PolicyParameters:
    key = str(name).strip().lower()
    if key not in PRESETS:
        raise ValueError(f"Unknown preset: {name}. Use one of {sorted(PRESETS)}.")
    return PRESETS[key]
