"""
Matchup Parser - FastAPI Backend

Main entry point for the API server that resolves team names and parses
free-text bet descriptions into structured matchups.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Dict, Any, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from config import get_settings
from services import (
    AliasIndex,
    League,
    MatchupParser,
    TeamResolver,
    validate_parsed_matchup,
)

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Global state, built once at startup and read-only afterwards
class AppState:
    alias_index: Optional[AliasIndex] = None
    resolver: Optional[TeamResolver] = None
    parser: Optional[MatchupParser] = None
    started_at: Optional[datetime] = None


state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the alias index, resolver and parser."""
    logger.info("Initializing application...")

    state.alias_index = AliasIndex.build()
    state.resolver = TeamResolver(state.alias_index)
    state.parser = MatchupParser(state.resolver)
    state.started_at = datetime.utcnow()

    logger.info("Application initialized successfully")

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title="Matchup Parser",
    description="Resolve team names and parse free-text bets into structured matchups",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic models for API requests/responses
class HealthResponse(BaseModel):
    status: str
    timestamp: str
    teams: int
    aliases: int


class TeamsResponse(BaseModel):
    league: Optional[str]
    count: int
    teams: List[Dict[str, Any]]


class ParseRequest(BaseModel):
    text: str


class ParseResponse(BaseModel):
    success: bool
    parsed: Optional[Dict[str, Any]]
    failure: Optional[str]
    error: Optional[str]
    clarification_needed: List[str]
    resolution_failures: List[Dict[str, Any]]
    validation: Optional[Dict[str, Any]] = None


def _league_param(league: Optional[str]) -> Optional[League]:
    """Map a league query parameter to a League, 400 on unknown values."""
    if league is None:
        return None
    try:
        return League.from_value(league)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# Health endpoints
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Check API health and index size."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow().isoformat(),
        teams=len(state.alias_index.teams()),
        aliases=state.alias_index.size
    )


@app.get("/api/status")
async def get_status():
    """Get the active calibration constants."""
    settings = get_settings()

    return {
        "status": "operational",
        "started_at": state.started_at.isoformat() if state.started_at else None,
        "leagues": [league.value for league in state.alias_index.leagues],
        "resolver": {
            "min_confidence": state.resolver.min_confidence,
            "min_fuzzy_gap": state.resolver.min_fuzzy_gap,
            "contains_score": state.resolver.contains_score,
            "min_contains_length": state.resolver.min_contains_length,
            "require_anchor": state.resolver.require_anchor
        },
        "parser": {
            "spread_min_magnitude": state.parser.spread_min_magnitude,
            "spread_max_magnitude": state.parser.spread_max_magnitude,
            "venue_proximity_window": state.parser.venue_proximity_window,
            "default_american_odds": state.parser.default_american_odds
        },
        "log_level": settings.log_level
    }


# Team endpoints
@app.get("/api/teams", response_model=TeamsResponse)
async def list_teams(league: Optional[str] = Query(None)):
    """
    List roster teams.

    Args:
        league: Restrict to one league (nfl, nba, nhl)
    """
    selected = _league_param(league)
    teams = [team.to_dict() for team in state.alias_index.teams(selected)]
    return TeamsResponse(
        league=selected.value if selected else None,
        count=len(teams),
        teams=teams
    )


@app.get("/api/teams/resolve")
async def resolve_team(
    q: str = Query(..., min_length=1),
    league: Optional[str] = Query(None)
):
    """
    Resolve one team mention.

    A rejected resolution is returned as a typed failure, not an error status.
    """
    result = state.resolver.resolve(q, _league_param(league))
    return result.to_dict()


# Matchup endpoints
@app.post("/api/matchups/parse", response_model=ParseResponse)
async def parse_matchup(request: ParseRequest):
    """
    Parse a free-text matchup description.

    A failed parse is a normal response carrying the failure and the fields
    to ask the user about.
    """
    result = state.parser.parse(request.text)
    body = result.to_dict()
    if result.success:
        body["validation"] = validate_parsed_matchup(result.parsed).to_dict()
    return ParseResponse(**body)


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=True
    )
