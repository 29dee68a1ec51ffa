"""Business logic services."""
from .roster import League, LeagueCategory, TeamRecord, DEFAULT_ROSTER, is_home_venue, league_from_keywords
from .alias_index import AliasEntry, AliasIndex, get_alias_index
from .team_resolver import (
    MatchKind,
    ResolutionFailure,
    ResolutionFailureReason,
    ResolvedTeam,
    TeamResolver,
    get_team_resolver,
)
from .matchup_parser import (
    MatchupParser,
    ParsedMatchup,
    ParseFailure,
    ParsingResult,
    Venue,
    get_matchup_parser,
    parse_matchup_request,
)
from .validator import ValidationResult, validate_parsed_matchup

__all__ = [
    "League",
    "LeagueCategory",
    "TeamRecord",
    "DEFAULT_ROSTER",
    "is_home_venue",
    "league_from_keywords",
    "AliasEntry",
    "AliasIndex",
    "get_alias_index",
    "MatchKind",
    "ResolutionFailure",
    "ResolutionFailureReason",
    "ResolvedTeam",
    "TeamResolver",
    "get_team_resolver",
    "MatchupParser",
    "ParsedMatchup",
    "ParseFailure",
    "ParsingResult",
    "Venue",
    "get_matchup_parser",
    "parse_matchup_request",
    "ValidationResult",
    "validate_parsed_matchup",
]
