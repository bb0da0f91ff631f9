# outreach_opt/data.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

import numpy as np
import pandas as pd

from .exceptions import PopulationLoadError
from .population import CustomerScore, RankedPopulation, build_population

logger = logging.getLogger(__name__)

# Accepted header spellings, first match wins.
ID_COLUMNS = ("customer_id", "Customer_ID", "customerID", "id", "row_index")
PROBABILITY_COLUMNS = ("churn_probability", "score", "proba", "prob")
LABEL_COLUMNS = ("actual_churn",)

_LABEL_WORDS = {"yes": 1, "true": 1, "no": 0, "false": 0}


def _first_present(columns: Iterable[str], candidates: Iterable[str]) -> Optional[str]:
    present = set(columns)
    for c in candidates:
        if c in present:
            return c
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and np.isnan(value):
        return ""
    return str(value).strip()


def _coerce_probabilities(raw: pd.Series) -> np.ndarray:
    """Non-numeric or non-finite scores fall back to 0.0."""
    p = pd.to_numeric(raw.map(_as_text), errors="coerce").astype(float)
    p = p.replace([np.inf, -np.inf], np.nan).fillna(0.0)
    return p.to_numpy()


def _coerce_labels(raw: pd.Series, source: Optional[str]) -> List[Optional[int]]:
    """
    Map label cells to 0/1, blank -> None.
    Accepts 0/1 numerics, booleans and yes/no/true/false (case-insensitive).
    """
    text = raw.map(_as_text).astype(str).str.lower()
    words = text.map(_LABEL_WORDS)
    numeric = pd.to_numeric(text.where(words.isna(), ""), errors="coerce")
    values = words.where(words.notna(), numeric)

    blank = text.eq("")
    invalid = ~blank & ~values.isin([0, 1])
    if invalid.any():
        row = int(np.flatnonzero(invalid.to_numpy())[0])
        raise PopulationLoadError(
            f"actual_churn must be 0/1 (row {row} has {raw.iloc[row]!r})", source=source
        )

    return [None if b else int(v) for b, v in zip(blank, values)]


def frame_to_scores(df: pd.DataFrame, source: Optional[str] = None) -> List[CustomerScore]:
    """
    Validate a scored table into CustomerScore records.

    - column names are stripped, then resolved against the alias tables above
    - a probability column is required; a missing id column yields blank ids
    - a label column with only blank cells means the dataset is unlabeled
    """
    df = df.rename(columns=lambda c: str(c).strip())

    prob_col = _first_present(df.columns, PROBABILITY_COLUMNS)
    if prob_col is None:
        raise PopulationLoadError(
            f"missing probability column (expected one of {list(PROBABILITY_COLUMNS)})", source=source
        )

    id_col = _first_present(df.columns, ID_COLUMNS)
    if id_col is None:
        logger.warning("No customer id column found%s; ids left blank", f" in {source}" if source else "")
        ids = [""] * len(df)
    else:
        ids = df[id_col].map(_as_text).tolist()

    probs = _coerce_probabilities(df[prob_col])

    label_col = _first_present(df.columns, LABEL_COLUMNS)
    if label_col is None:
        labels: List[Optional[int]] = [None] * len(df)
    else:
        labels = _coerce_labels(df[label_col], source)

    return [CustomerScore(cid, float(p), lab) for cid, p, lab in zip(ids, probs, labels)]


def records_to_scores(records: Iterable[Mapping[str, Any]]) -> List[CustomerScore]:
    # object dtype keeps int ids as ints when another record has no id
    return frame_to_scores(pd.DataFrame(list(records), dtype=object))


def load_scores_csv(path: Union[str, Path]) -> List[CustomerScore]:
    """
    Read a scored-customer CSV (one row per customer).
    Every cell is read as text so blanks stay blank instead of becoming NaN.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"{path} not found. Export scores to this path or set CHURN_SCORES_PATH.")

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise PopulationLoadError(str(e), source=str(path)) from e

    return frame_to_scores(df, source=str(path))


def load_population(path: Union[str, Path]) -> RankedPopulation:
    try:
        population = build_population(load_scores_csv(path))
    except PopulationLoadError as e:
        if e.source is None:
            raise PopulationLoadError(str(e), source=str(path)) from e
        raise

    logger.info(
        "Loaded %d scored customers from %s (labeled=%s, base_rate=%.4f)",
        len(population), path, population.labeled, population.base_rate,
    )
    return population
