# outreach_opt/exceptions.py
from __future__ import annotations

from typing import Optional


class PopulationLoadError(ValueError):
    """
    Raised when a scored population cannot be turned into CustomerScore records
    (missing columns, partially labeled data, label values other than 0/1).
    """

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)
