#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Data model (Enums + pydantic snapshot records).

Pure model layer, independent of any host/UI. The tick engine only reads these
records; changes are proposed through `tick_processor.TickChanges`.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from config import BASE_MORALE, DAYS_PER_MONTH, DEFAULT_REPUTATION, DEFAULT_VOLATILITY, MONTHS_PER_YEAR


# =============================
# Enums
# =============================
class EmployeeType(str, Enum):
    DEVELOPER = "Developer"
    DESIGNER = "Designer"
    MARKETER = "Marketer"
    ARTIST = "Artist"
    SOUND_DESIGNER = "Sound Designer"
    PRODUCER = "Producer"


class ProjectPhase(str, Enum):
    CONCEPT = "Concept"
    PRE_PRODUCTION = "Pre-production"
    PRODUCTION = "Production"
    ALPHA = "Alpha"
    BETA = "Beta"
    RELEASE = "Release"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    SHIPPED = "shipped"


class GameSize(int, Enum):
    A = 1
    AA = 2
    AAA = 3


class StockSector(str, Enum):
    GAMING = "gaming"
    TECH = "tech"
    HARDWARE = "hardware"
    MEDIA = "media"
    CRYPTO = "crypto"


class AlertDirection(str, Enum):
    ABOVE = "above"
    BELOW = "below"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


# =============================
# Calendar
# =============================
class GameDate(BaseModel):
    """Normalized in-game date: day in [1, 30], month in [1, 12]."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    day: int = Field(default=1, ge=1, le=DAYS_PER_MONTH)
    month: int = Field(default=1, ge=1, le=MONTHS_PER_YEAR)
    year: int = 2024


# =============================
# Studio
# =============================
class Employee(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    name: str = ""
    type: EmployeeType = EmployeeType.DEVELOPER
    skills: Dict[str, float] = Field(default_factory=dict)
    personality: List[str] = Field(default_factory=list)
    salary: float = 0.0
    productivity: float = 1.0
    assigned_project_id: Optional[str] = None


class Project(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    name: str = ""
    size: GameSize = GameSize.A
    platform: str = "PC"
    genre: str = "Action"
    phase: Optional[ProjectPhase] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    completed: bool = False
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    estimated_days: float = 30.0
    estimated_revenue: Optional[float] = None
    required_skills: Optional[List[str]] = None
    revenue: Optional[int] = None
    completed_date: Optional[GameDate] = None
    completed_at: Optional[float] = None


class Platform(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    unlocked: bool = False


class Achievement(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    title: str
    description: str
    reward: int = 0
    category: str = "milestone"
    unlocked_at: float = 0.0


# =============================
# Market
# =============================
class Stock(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    symbol: str
    name: str = ""
    sector: StockSector
    current_price: float = Field(gt=0.0)
    volatility: float = DEFAULT_VOLATILITY
    trend: float = 1.0
    dividend_yield: Optional[float] = None
    historical_prices: List[float] = Field(default_factory=list)


class Holding(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    stock_id: str
    quantity: int = 0
    average_purchase_price: float = 0.0
    last_dividend_date: Optional[GameDate] = None


class PriceAlert(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    stock_id: str
    target_price: float
    direction: AlertDirection
    triggered: bool = False


class Portfolio(BaseModel):
    model_config = ConfigDict(extra="forbid")

    holdings: List[Holding] = Field(default_factory=list)
    total_invested: float = 0.0
    realized_gain_loss: float = 0.0
    total_dividends_received: float = 0.0
    watchlist: List[str] = Field(default_factory=list)
    price_alerts: List[PriceAlert] = Field(default_factory=list)


class Notification(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str
    type: NotificationType = NotificationType.INFO


# =============================
# Snapshot
# =============================
class GameState(BaseModel):
    """Read-only snapshot handed to the tick engine."""

    model_config = ConfigDict(extra="forbid")

    current_date: GameDate = Field(default_factory=GameDate)
    game_speed: int = Field(default=1, ge=0)
    money: float = 10_000.0
    reputation: float = DEFAULT_REPUTATION
    morale: float = BASE_MORALE
    employees: List[Employee] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    completed_projects: List[Project] = Field(default_factory=list)
    platforms: List[Platform] = Field(default_factory=list)
    achievements: List[Achievement] = Field(default_factory=list)
    stocks: List[Stock] = Field(default_factory=list)
    portfolio: Portfolio = Field(default_factory=Portfolio)

    def active_projects(self) -> List[Project]:
        return [p for p in self.projects if p.status == ProjectStatus.IN_PROGRESS and not p.completed]

    def employees_on(self, project_id: str) -> List[Employee]:
        return [e for e in self.employees if e.assigned_project_id == project_id]

    def stock_by_id(self, stock_id: str) -> Optional[Stock]:
        for stock in self.stocks:
            if stock.id == stock_id:
                return stock
        return None
