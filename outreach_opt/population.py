# outreach_opt/population.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import numpy as np
import pandas as pd

from .exceptions import PopulationLoadError


@dataclass(frozen=True)
class CustomerScore:
    customer_id: str
    churn_probability: float
    actual_churn: Optional[int] = None


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


class RankedPopulation:
    """
    Scored customers ordered by churn_probability (descending, stable).

    Arrays are read-only. Slices taken with head() share memory with the
    parent and inherit its base_rate and labeled flag.
    """

    def __init__(
        self,
        customer_ids: np.ndarray,
        probabilities: np.ndarray,
        labels: Optional[np.ndarray],
        base_rate: float,
    ):
        self._ids = customer_ids
        self._probs = probabilities
        self._labels = labels
        self._base_rate = float(base_rate)

        hits = labels if labels is not None else probabilities
        # _cum_hits[n] = expected true positives among the top n
        self._cum_hits = _readonly(np.concatenate([[0], np.cumsum(hits)]))

    def __len__(self) -> int:
        return len(self._probs)

    def __iter__(self) -> Iterator[CustomerScore]:
        for i in range(len(self)):
            yield self[i]

    def __getitem__(self, i: int) -> CustomerScore:
        label = None if self._labels is None else int(self._labels[i])
        return CustomerScore(str(self._ids[i]), float(self._probs[i]), label)

    @property
    def labeled(self) -> bool:
        return self._labels is not None

    @property
    def base_rate(self) -> float:
        """Positive rate when labeled, mean churn_probability otherwise."""
        return self._base_rate

    @property
    def customer_ids(self) -> np.ndarray:
        return self._ids

    @property
    def probabilities(self) -> np.ndarray:
        return self._probs

    @property
    def labels(self) -> Optional[np.ndarray]:
        return self._labels

    @property
    def total_positives(self) -> Optional[int]:
        if self._labels is None:
            return None
        return int(self._labels.sum())

    def hits(self, n: int):
        """Label count (labeled) or probability sum (unlabeled) over the top n."""
        value = self._cum_hits[n]
        return int(value) if self.labeled else float(value)

    def head(self, n: int) -> "RankedPopulation":
        labels = None if self._labels is None else self._labels[:n]
        return RankedPopulation(self._ids[:n], self._probs[:n], labels, self._base_rate)

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame({
            "customer_id": self._ids.astype(str),
            "churn_probability": self._probs,
        })
        if self._labels is not None:
            df["actual_churn"] = self._labels
        return df


def build_population(scores: Sequence[CustomerScore]) -> RankedPopulation:
    """
    Rank validated scores once.

    - labels are all-or-nothing: one labeled record makes the dataset labeled,
      and any record without a label is then rejected
    - ties keep input order
    - base rate is computed over the whole population (0.0 when empty)
    """
    scores = list(scores)
    labeled = any(s.actual_churn is not None for s in scores)

    if labeled:
        missing = [i for i, s in enumerate(scores) if s.actual_churn is None]
        if missing:
            raise PopulationLoadError(
                f"dataset is partially labeled: {len(missing)} record(s) without actual_churn "
                f"(first at row {missing[0]})"
            )

    ids = np.array([s.customer_id for s in scores], dtype=object)
    probs = np.array([s.churn_probability for s in scores], dtype=float)
    labels = np.array([int(s.actual_churn) for s in scores], dtype=int) if labeled else None

    n = len(scores)
    if n == 0:
        base_rate = 0.0
    elif labeled:
        base_rate = float(labels.sum()) / n
    else:
        base_rate = float(probs.mean())

    order = np.argsort(-probs, kind="stable")
    return RankedPopulation(
        _readonly(ids[order]),
        _readonly(probs[order]),
        _readonly(labels[order]) if labeled else None,
        base_rate,
    )
