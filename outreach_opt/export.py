# outreach_opt/export.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from .population import RankedPopulation

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "churn_targets.csv"
PROBABILITY_DECIMALS = 6


def targets_frame(contacted: RankedPopulation) -> pd.DataFrame:
    """
    Export table for the contacted slice, in ranked order:
      customer_id, churn_probability (fixed 6 decimals)[, actual_churn]
    The label column is present only for labeled data with at least one row.
    """
    df = pd.DataFrame({
        "customer_id": [str(c) for c in contacted.customer_ids],
        "churn_probability": [f"{p:.{PROBABILITY_DECIMALS}f}" for p in contacted.probabilities],
    }, columns=["customer_id", "churn_probability"])

    if contacted.labeled and len(contacted) > 0:
        df["actual_churn"] = [int(v) for v in contacted.labels]
    return df


def targets_csv(contacted: RankedPopulation) -> str:
    """CSV text, '\\n' between lines and no trailing newline."""
    text = targets_frame(contacted).to_csv(index=False, lineterminator="\n")
    return text.rstrip("\n")


def write_targets_csv(contacted: RankedPopulation, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(targets_csv(contacted))
    logger.info("Wrote %d targets to %s", len(contacted), path)
    return path
