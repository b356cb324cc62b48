#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Editable JSON data: start studio, stock catalog, simulation settings.

Missing or undecodable files fall back to the in-code defaults (a missing file
is written out so it can be edited). Rows that decode but do not validate
raise pydantic's ValidationError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import orjson
from pydantic import BaseModel, ConfigDict, Field

from config import FIXED_TIME_STEP_MS, MAX_FRAME_TIME_MS
from model import GameState, Stock

DATA_DIR = Path(__file__).parent / "data"
SIM_SETTINGS_NAME = "sim_settings.json"
START_STATE_NAME = "start_state.json"
STOCKS_NAME = "stocks.json"


class SimSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    seed: int = 42
    game_speed: int = Field(default=1, ge=0)
    fixed_time_step_ms: float = Field(default=FIXED_TIME_STEP_MS, gt=0.0)
    max_frame_time_ms: float = Field(default=MAX_FRAME_TIME_MS, gt=0.0)


DEFAULT_STOCKS: List[Dict[str, object]] = [
    {"id": "pxl", "symbol": "PXL", "name": "Pixel Forge Interactive", "sector": "gaming",
     "current_price": 42.5, "volatility": 0.04, "trend": 1.0, "dividend_yield": 0.02},
    {"id": "qbt", "symbol": "QBT", "name": "Quantum Bit Systems", "sector": "tech",
     "current_price": 118.0, "volatility": 0.03, "trend": 1.0, "dividend_yield": 0.01},
    {"id": "slc", "symbol": "SLC", "name": "Silicon Crest", "sector": "hardware",
     "current_price": 76.25, "volatility": 0.035, "trend": 1.0, "dividend_yield": 0.015},
    {"id": "str", "symbol": "STR", "name": "StreamHouse Media", "sector": "media",
     "current_price": 31.8, "volatility": 0.025, "trend": 1.0, "dividend_yield": 0.03},
    {"id": "blk", "symbol": "BLK", "name": "BlockLedger Coin", "sector": "crypto",
     "current_price": 12.4, "volatility": 0.08, "trend": 1.0},
]

DEFAULT_START_STATE: Dict[str, object] = {
    "current_date": {"day": 1, "month": 1, "year": 2024},
    "game_speed": 1,
    "money": 50_000.0,
    "reputation": 50.0,
    "morale": 75.0,
    "employees": [
        {"id": "e1", "name": "Alex Chen", "type": "Developer",
         "skills": {"programming": 70, "design": 40, "testing": 55},
         "personality": ["Innovative"], "salary": 4_500, "productivity": 1.0,
         "assigned_project_id": "p1"},
        {"id": "e2", "name": "Sam Rivera", "type": "Designer",
         "skills": {"programming": 30, "design": 80, "testing": 45},
         "personality": ["Creative"], "salary": 3_800, "productivity": 1.1,
         "assigned_project_id": "p1"},
        {"id": "e3", "name": "Jordan Lee", "type": "Artist",
         "skills": {"art": 75, "design": 60},
         "personality": ["Perfectionist"], "salary": 3_500, "productivity": 0.9},
    ],
    "projects": [
        {"id": "p1", "name": "Starlight Runner", "size": 1, "platform": "PC", "genre": "Action",
         "phase": "Production", "status": "in-progress", "progress": 0.0,
         "estimated_days": 30, "estimated_revenue": 60_000,
         "required_skills": ["programming", "design", "testing"]},
    ],
    "platforms": [
        {"name": "PC", "unlocked": True},
        {"name": "Mobile", "unlocked": False},
        {"name": "Console", "unlocked": False},
        {"name": "Web", "unlocked": False},
        {"name": "VR", "unlocked": False},
    ],
}


def _write_json(path: Path, obj: object) -> None:
    path.write_bytes(orjson.dumps(obj, option=orjson.OPT_INDENT_2))


def _read_json(path: Path, fallback: object) -> object:
    try:
        return orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError):
        return fallback


def ensure_data_files(data_dir: Path = DATA_DIR) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    defaults = {
        data_dir / SIM_SETTINGS_NAME: SimSettings().model_dump(mode="json"),
        data_dir / START_STATE_NAME: DEFAULT_START_STATE,
        data_dir / STOCKS_NAME: DEFAULT_STOCKS,
    }
    for path, value in defaults.items():
        if not path.exists():
            _write_json(path, value)


def load_sim_settings(data_dir: Path = DATA_DIR) -> SimSettings:
    ensure_data_files(data_dir)
    raw = _read_json(data_dir / SIM_SETTINGS_NAME, {})
    return SimSettings.model_validate(raw if isinstance(raw, dict) else {})


def save_sim_settings(settings: SimSettings, data_dir: Path = DATA_DIR) -> None:
    ensure_data_files(data_dir)
    _write_json(data_dir / SIM_SETTINGS_NAME, settings.model_dump(mode="json"))


def load_stock_catalog(data_dir: Path = DATA_DIR) -> List[Stock]:
    ensure_data_files(data_dir)
    raw = _read_json(data_dir / STOCKS_NAME, DEFAULT_STOCKS)
    rows = raw if isinstance(raw, list) else DEFAULT_STOCKS
    return [Stock.model_validate(row) for row in rows]


def load_start_state(data_dir: Path = DATA_DIR, stocks: Optional[List[Stock]] = None) -> GameState:
    """Initial studio snapshot; an empty stock list is filled from the catalog."""
    ensure_data_files(data_dir)
    raw = _read_json(data_dir / START_STATE_NAME, DEFAULT_START_STATE)
    state = GameState.model_validate(raw if isinstance(raw, dict) else DEFAULT_START_STATE)
    if not state.stocks:
        catalog = stocks if stocks is not None else load_stock_catalog(data_dir)
        state = state.model_copy(update={"stocks": list(catalog)})
    return state


def save_start_state(state: GameState, data_dir: Path = DATA_DIR) -> None:
    ensure_data_files(data_dir)
    _write_json(data_dir / START_STATE_NAME, state.model_dump(mode="json"))
