"""
Team Resolver

Turns a free-text team mention ("Chiefs", "KC", "LA Clippers") into a roster
team, or a typed failure explaining why it would not guess.

Scoring per alias:
1. Exact abbreviation -> 1.0
2. Exact alias (name, city, nickname) -> 1.0
3. Alias contained whole-word in the query -> 0.97
4. Otherwise normalized Levenshtein similarity
"""
import logging
from typing import Dict, List, Optional, Union
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from config import get_settings
from services.alias_index import AliasEntry, AliasIndex, alias_similarity, get_alias_index
from services.roster import League, TeamRecord
from utils.text import find_alias_spans, normalize_text

logger = logging.getLogger(__name__)


class MatchKind(Enum):
    """How a resolution was reached."""
    ABBREVIATION = "abbreviation"
    ALIAS = "alias"
    CONTAINS = "contains"
    FUZZY = "fuzzy"


class ResolutionFailureReason(Enum):
    """Why a resolution was rejected."""
    NO_CONFIDENT_MATCH = "no-confident-match"
    AMBIGUOUS_MATCH = "ambiguous-match"
    UNANCHORED_MATCH = "unanchored-match"


@dataclass(frozen=True)
class ResolvedTeam:
    """A confident resolution."""
    team: TeamRecord
    matched_alias: str
    confidence: float
    match_kind: MatchKind

    @property
    def league(self) -> League:
        return self.team.league

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {
            "success": True,
            "team": self.team.to_dict(),
            "league": self.league.value,
            "matched_alias": self.matched_alias,
            "confidence": round(self.confidence, 4),
            "match_kind": self.match_kind.value,
        }


@dataclass(frozen=True)
class ResolutionFailure:
    """A rejected resolution. ``message`` quotes the query as written."""
    reason: ResolutionFailureReason
    query: str
    message: str

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {
            "success": False,
            "reason": self.reason.value,
            "query": self.query,
            "message": self.message,
        }


Resolution = Union[ResolvedTeam, ResolutionFailure]


@dataclass
class _Candidate:
    entry: AliasEntry
    score: float
    kind: MatchKind


class TeamResolver:
    """
    Resolve team mentions against an alias index.

    Thresholds default to the values in settings; pass them explicitly to
    calibrate against a different roster.
    """

    def __init__(
        self,
        index: Optional[AliasIndex] = None,
        min_confidence: Optional[float] = None,
        min_fuzzy_gap: Optional[float] = None,
        contains_score: Optional[float] = None,
        min_contains_length: Optional[int] = None,
        require_anchor: Optional[bool] = None,
    ):
        settings = get_settings()
        self.index = index if index is not None else get_alias_index()
        self.min_confidence = settings.resolver_min_confidence if min_confidence is None else min_confidence
        self.min_fuzzy_gap = settings.resolver_min_fuzzy_gap if min_fuzzy_gap is None else min_fuzzy_gap
        self.contains_score = settings.resolver_contains_score if contains_score is None else contains_score
        self.min_contains_length = (
            settings.resolver_min_contains_length if min_contains_length is None else min_contains_length
        )
        self.require_anchor = settings.resolver_require_anchor if require_anchor is None else require_anchor

    def score(self, normalized: str, entry: AliasEntry) -> _Candidate:
        """Score one alias entry against an already-normalized query."""
        if normalized == entry.alias:
            kind = MatchKind.ABBREVIATION if entry.is_abbreviation else MatchKind.ALIAS
            return _Candidate(entry, 1.0, kind)

        if len(entry.alias) >= self.min_contains_length and find_alias_spans(normalized, entry.alias):
            return _Candidate(entry, self.contains_score, MatchKind.CONTAINS)

        return _Candidate(entry, alias_similarity(normalized, entry.alias), MatchKind.FUZZY)

    def rank(self, normalized: str, league: Optional[League] = None) -> List[_Candidate]:
        """Best candidate per team, highest score first, ties in league priority order."""
        best_per_team: Dict[str, _Candidate] = {}
        for entry in self.index.entries(league):
            candidate = self.score(normalized, entry)
            current = best_per_team.get(entry.team.key)
            if current is None or candidate.score > current.score:
                best_per_team[entry.team.key] = candidate
        return sorted(best_per_team.values(), key=lambda c: c.score, reverse=True)

    def resolve(self, text: str, league: Optional[League] = None) -> Resolution:
        """Resolve ``text`` to a team, optionally scoped to one league."""
        query = (text or "").strip()
        normalized = normalize_text(query)
        scope = f" in {league.name}" if league else ""

        if not normalized:
            return self._fail(ResolutionFailureReason.NO_CONFIDENT_MATCH, query, "No team name given")

        ranked = self.rank(normalized, league)
        if not ranked:
            return self._fail(
                ResolutionFailureReason.NO_CONFIDENT_MATCH, query, f"No teams to match '{query}'{scope}"
            )

        best = ranked[0]
        runner_up = ranked[1] if len(ranked) > 1 else None

        if best.score < self.min_confidence:
            return self._fail(
                ResolutionFailureReason.NO_CONFIDENT_MATCH,
                query,
                f"Could not identify team '{query}'{scope}",
            )

        if (
            best.kind == MatchKind.FUZZY
            and runner_up is not None
            and best.score - runner_up.score < self.min_fuzzy_gap
        ):
            return self._ambiguous(query, best, runner_up)

        if (
            runner_up is not None
            and runner_up.score == best.score
            and runner_up.entry.alias == best.entry.alias
            and best.kind != MatchKind.ABBREVIATION
        ):
            return self._ambiguous(query, best, runner_up)

        if (
            best.kind == MatchKind.FUZZY
            and self.require_anchor
            and not find_alias_spans(normalized, best.entry.alias)
        ):
            return self._fail(
                ResolutionFailureReason.UNANCHORED_MATCH,
                query,
                f"'{query}' looks like {best.entry.team.full_name} but does not name it; check the spelling",
            )

        return ResolvedTeam(
            team=best.entry.team,
            matched_alias=best.entry.alias,
            confidence=best.score,
            match_kind=best.kind,
        )

    def find_team(self, query: str, league: Optional[League] = None) -> Optional[TeamRecord]:
        """Return the team ``query`` confidently names, or None."""
        result = self.resolve(query, league)
        return result.team if isinstance(result, ResolvedTeam) else None

    def _ambiguous(self, query: str, best: _Candidate, runner_up: _Candidate) -> ResolutionFailure:
        first = best.entry.team
        second = runner_up.entry.team
        return self._fail(
            ResolutionFailureReason.AMBIGUOUS_MATCH,
            query,
            f"'{query}' is ambiguous: could be {first.full_name} ({first.league.name}) "
            f"or {second.full_name} ({second.league.name})",
        )

    @staticmethod
    def _fail(reason: ResolutionFailureReason, query: str, message: str) -> ResolutionFailure:
        logger.debug(f"Resolution rejected ({reason.value}): {message}")
        return ResolutionFailure(reason=reason, query=query, message=message)


@lru_cache()
def get_team_resolver() -> TeamResolver:
    """Get the cached resolver over the default alias index."""
    return TeamResolver(get_alias_index())
