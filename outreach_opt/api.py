# outreach_opt/api.py
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from .engine import PREVIEW_ROWS, DecisionEngine
from .exceptions import PopulationLoadError
from .export import EXPORT_FILENAME, targets_csv
from .scenarios import DEFAULT_PARAMETERS, PRESETS, PolicyParameters

logger = logging.getLogger(__name__)

# -----------------------
# Paths (repo-root based)
# -----------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]
DATA_PATH = Path(os.environ.get("CHURN_SCORES_PATH", PROJECT_ROOT / "data" / "churn_scores.csv"))

# If True, API will refuse to start unless the scores CSV loads.
FAIL_FAST_ON_MISSING_FILES = False


# -----------------------
# Schemas
# -----------------------
class DecisionRequest(BaseModel):
    capacity: float = DEFAULT_PARAMETERS.capacity
    contact_cost: float = DEFAULT_PARAMETERS.contact_cost
    churn_loss: float = DEFAULT_PARAMETERS.churn_loss
    save_rate: float = DEFAULT_PARAMETERS.save_rate
    preset: Optional[str] = None


class PresetsResponse(BaseModel):
    presets: Dict[str, Dict[str, float]]


class PopulationResponse(BaseModel):
    size: int
    labeled: bool
    base_rate: float
    description: str
    preview: List[Dict[str, Any]]


class CurveResponse(BaseModel):
    points: List[Dict[str, float]]
    peak: Optional[Dict[str, float]]


# -----------------------
# Utilities
# -----------------------
def _params_from_request(req: DecisionRequest, size: int) -> PolicyParameters:
    if req.preset:
        key = req.preset.strip().lower()
        if key not in PRESETS:
            raise HTTPException(status_code=404, detail=f"Preset '{req.preset}' not found")
        return PRESETS[key].for_population(size)
    return PolicyParameters(req.capacity, req.contact_cost, req.churn_loss, req.save_rate)


def _ensure_engine(request: Request) -> DecisionEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        error = getattr(request.app.state, "load_error", None) or "no population loaded"
        raise HTTPException(status_code=503, detail=f"Scores unavailable: {error}")
    return engine


def _load_engine(app: FastAPI, data_path: Path) -> None:
    try:
        app.state.engine = DecisionEngine.from_csv(data_path)
        app.state.load_error = None
    except (FileNotFoundError, PopulationLoadError) as e:
        app.state.engine = None
        app.state.load_error = str(e)
        if FAIL_FAST_ON_MISSING_FILES:
            raise RuntimeError(str(e)) from e
        logger.warning("Data load failed: %s", e)


def create_app(
    data_path: Union[str, Path, None] = None,
    engine: Optional[DecisionEngine] = None,
) -> FastAPI:
    """
    Build the decision API. Pass an engine directly (tests, notebooks) or let
    the app load `data_path` (default DATA_PATH) on startup.
    """
    path = Path(data_path) if data_path is not None else DATA_PATH

    # -----------------------
    # Startup
    # -----------------------
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.engine is None:
            _load_engine(app, path)
        yield

    app = FastAPI(title="Churn Outreach Decision API", version="1.0", lifespan=lifespan)
    app.state.engine = engine
    app.state.load_error = None

    # -----------------------
    # Endpoints
    # -----------------------
    @app.get("/")
    def root():
        return {
            "service": "Churn Outreach Decision API",
            "version": "1.0",
            "endpoints": {
                "health": "/health",
                "docs": "/docs",
                "presets": "/presets",
                "population": "/population?capacity=...",
                "evaluate": "POST /evaluate",
                "curve": "POST /curve",
                "targets": "POST /targets.csv",
            },
            "data_path": str(path),
        }

    @app.get("/health")
    def health():
        return {"status": "ok", "population_loaded": app.state.engine is not None}

    @app.get("/presets", response_model=PresetsResponse)
    def list_presets():
        return {
            "presets": {
                name: {
                    "capacity": p.capacity,
                    "contact_cost": p.contact_cost,
                    "churn_loss": p.churn_loss,
                    "save_rate": p.save_rate,
                }
                for name, p in PRESETS.items()
            }
        }

    @app.get("/population", response_model=PopulationResponse)
    def population(request: Request, capacity: float = 0, limit: int = PREVIEW_ROWS):
        """
        Dataset summary plus the top of the ranked list.
        """
        eng = _ensure_engine(request)
        pop = eng.population
        return {
            "size": len(pop),
            "labeled": pop.labeled,
            "base_rate": pop.base_rate,
            "description": eng.describe(),
            "preview": eng.preview(capacity, max(0, limit)).to_dict(orient="records"),
        }

    @app.post("/evaluate")
    def evaluate(req: DecisionRequest, request: Request):
        """
        Full decision report for one parameter set:
        - top-N evaluation vs random targeting and do nothing
        - ROI, precision/recall, break-even save rate (null when not applicable)
        - profit curve and recommendation
        """
        eng = _ensure_engine(request)
        report = eng.analyze(_params_from_request(req, len(eng)))
        out = report.to_dict()
        action, value, caveat = report.summary()
        out["summary"] = {"action": action, "value": value, "caveat": caveat}
        out["comparison"] = report.comparison_table().to_dict(orient="records")
        return out

    @app.post("/curve", response_model=CurveResponse)
    def curve(req: DecisionRequest, request: Request):
        eng = _ensure_engine(request)
        params = _params_from_request(req, len(eng))
        c = eng.curve(params.contact_cost, params.churn_loss, params.save_rate)
        peak = c.peak()
        return {
            "points": [{"capacity": p.capacity, "profit": p.profit} for p in c],
            "peak": None if peak is None else {"capacity": peak.capacity, "profit": peak.profit},
        }

    @app.post("/targets.csv", response_class=PlainTextResponse)
    def targets(req: DecisionRequest, request: Request):
        """
        Contacted customers in ranked order, as CSV.
        """
        eng = _ensure_engine(request)
        params = _params_from_request(req, len(eng))
        res = eng.evaluator.evaluate(params.capacity, params.contact_cost, params.churn_loss, params.save_rate)
        return PlainTextResponse(
            targets_csv(res.contacted),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
        )

    return app


app = create_app()
