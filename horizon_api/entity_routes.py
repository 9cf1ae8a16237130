"""API routes for agents, portfolios and teams attached to a horizon."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from horizon.models.entities import (
    Agent,
    AgentCreate,
    Portfolio,
    PortfolioCreate,
    Team,
    TeamCreate,
)
from horizon.utils.identifiers import generate_entity_id, utc_timestamp
from horizon_api import entity_db, graph_engine
from horizon_api.db import transaction
from horizon_api.guards import current_user, require_workspace

router = APIRouter()


def _create(
    horizon_id: str,
    user_id: str,
    kind: str,
    model: type[BaseModel],
    request: BaseModel,
) -> BaseModel:
    now = utc_timestamp()
    with transaction() as conn:
        workspace = require_workspace(conn, horizon_id, user_id, "editor")
        entity = model(
            **request.model_dump(),
            id=generate_entity_id(),
            horizon_id=workspace.id,
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )
        entity_db.upsert_entity(conn, kind, entity)
        graph_engine.refresh_stats(conn, workspace)
    return entity


def _list(horizon_id: str, user_id: str, kind: str) -> list:
    with transaction() as conn:
        require_workspace(conn, horizon_id, user_id, "viewer")
        return entity_db.list_entities(conn, kind, horizon_id)


def _delete(horizon_id: str, user_id: str, kind: str, entity_id: str) -> dict:
    with transaction() as conn:
        workspace = require_workspace(conn, horizon_id, user_id, "editor")
        entity = entity_db.get_entity(conn, kind, entity_id)
        if entity is None or not entity.is_active or entity.horizon_id != horizon_id:
            raise HTTPException(status_code=404, detail=f"{kind.capitalize()} not found: {entity_id}")
        entity.is_active = False
        entity.updated_at = utc_timestamp()
        entity_db.upsert_entity(conn, kind, entity)
        graph_engine.refresh_stats(conn, workspace)
    return {"deleted": entity_id}


@router.post("/horizons/{horizon_id}/agents", status_code=201)
def create_agent(horizon_id: str, request: AgentCreate, user_id: str = Depends(current_user)) -> Agent:
    return _create(horizon_id, user_id, "agent", Agent, request)


@router.get("/horizons/{horizon_id}/agents")
def list_agents(horizon_id: str, user_id: str = Depends(current_user)) -> list[Agent]:
    return _list(horizon_id, user_id, "agent")


@router.delete("/horizons/{horizon_id}/agents/{agent_id}")
def delete_agent(horizon_id: str, agent_id: str, user_id: str = Depends(current_user)) -> dict:
    return _delete(horizon_id, user_id, "agent", agent_id)


@router.post("/horizons/{horizon_id}/portfolios", status_code=201)
def create_portfolio(
    horizon_id: str,
    request: PortfolioCreate,
    user_id: str = Depends(current_user),
) -> Portfolio:
    return _create(horizon_id, user_id, "portfolio", Portfolio, request)


@router.get("/horizons/{horizon_id}/portfolios")
def list_portfolios(horizon_id: str, user_id: str = Depends(current_user)) -> list[Portfolio]:
    return _list(horizon_id, user_id, "portfolio")


@router.delete("/horizons/{horizon_id}/portfolios/{portfolio_id}")
def delete_portfolio(horizon_id: str, portfolio_id: str, user_id: str = Depends(current_user)) -> dict:
    return _delete(horizon_id, user_id, "portfolio", portfolio_id)


@router.post("/horizons/{horizon_id}/teams", status_code=201)
def create_team(horizon_id: str, request: TeamCreate, user_id: str = Depends(current_user)) -> Team:
    return _create(horizon_id, user_id, "team", Team, request)


@router.get("/horizons/{horizon_id}/teams")
def list_teams(horizon_id: str, user_id: str = Depends(current_user)) -> list[Team]:
    return _list(horizon_id, user_id, "team")


@router.delete("/horizons/{horizon_id}/teams/{team_id}")
def delete_team(horizon_id: str, team_id: str, user_id: str = Depends(current_user)) -> dict:
    return _delete(horizon_id, user_id, "team", team_id)
