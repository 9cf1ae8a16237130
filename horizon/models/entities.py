"""Agents, portfolios and teams scoped to a horizon.

The stored models carry ownership and soft-delete fields; the *Summary
models are the plain shapes denormalized into the horizon read view.
"""

from enum import Enum

from pydantic import BaseModel

from horizon.models.node import CAMEL_CONFIG


class AgentSystem(str, Enum):
    """System 1 agents fetch data, system 2 agents analyze it."""

    data = "data"
    analyzer = "analyzer"


class AgentSummary(BaseModel):
    model_config = CAMEL_CONFIG

    id: str
    name: str
    type: str
    system: AgentSystem
    category: str | None = None
    icon: str | None = None
    color: str | None = None
    is_builtin: bool = False
    description: str = ""
    model: str | None = None
    system_prompt: str = ""
    enable_thinking: bool = False
    max_iterations: int = 5


class AgentCreate(BaseModel):
    """request body for registering an agent on a horizon."""

    model_config = CAMEL_CONFIG

    name: str
    type: str = "custom"
    system: AgentSystem = AgentSystem.data
    category: str | None = None
    icon: str = "MdSmartToy"
    color: str = "blue"
    is_builtin: bool = False
    description: str = ""
    model: str | None = None
    system_prompt: str = ""
    enable_thinking: bool = False
    max_iterations: int = 5


class Agent(AgentCreate):
    id: str
    horizon_id: str
    user_id: str
    is_active: bool = True
    created_at: str
    updated_at: str

    def summary(self) -> AgentSummary:
        return AgentSummary.model_validate(self.model_dump())


class PortfolioSummary(BaseModel):
    model_config = CAMEL_CONFIG

    id: str
    name: str
    description: str = ""
    stocks: list[str] = []
    created_at: str


class PortfolioCreate(BaseModel):
    model_config = CAMEL_CONFIG

    name: str
    description: str = ""
    stocks: list[str] = []


class Portfolio(PortfolioCreate):
    id: str
    horizon_id: str
    user_id: str
    is_active: bool = True
    created_at: str
    updated_at: str

    def summary(self) -> PortfolioSummary:
        return PortfolioSummary.model_validate(self.model_dump())


class TeamSummary(BaseModel):
    model_config = CAMEL_CONFIG

    id: str
    name: str
    description: str = ""
    tags: list[str] = []
    created_at: str


class TeamCreate(BaseModel):
    model_config = CAMEL_CONFIG

    name: str
    description: str = ""
    tags: list[str] = []


class Team(TeamCreate):
    id: str
    horizon_id: str
    user_id: str
    is_active: bool = True
    created_at: str
    updated_at: str

    def summary(self) -> TeamSummary:
        return TeamSummary.model_validate(self.model_dump())
