"""
Alias Index

Flattens the roster into searchable (alias -> team) entries. Every alias is
stored normalized, so lookups and fuzzy comparisons run on the same text the
parser scans.
"""
import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple
from dataclasses import dataclass
from functools import lru_cache

from rapidfuzz.distance import Levenshtein

from services.roster import DEFAULT_ROSTER, League, TeamRecord
from utils.text import normalize_text

logger = logging.getLogger(__name__)

# Search order when no league is given. Only matters for exact ties,
# e.g. "ATL" resolves to the Hawks before the Falcons.
LEAGUE_PRIORITY: Tuple[League, ...] = (League.NBA, League.NHL, League.NFL)

# Aliases that are also everyday words. Free-text scans only count them when
# written in capitals ("NO -3" is the Saints, "no way" is not).
COMMON_WORD_ALIASES: Set[str] = {
    "no", "was", "ten", "car", "min", "sea", "den", "pit", "van", "col", "ana",
    "oil",
}


@dataclass(frozen=True)
class AliasEntry:
    """One normalized alias pointing at one team."""
    alias: str
    team: TeamRecord
    is_abbreviation: bool = False

    @property
    def league(self) -> League:
        return self.team.league

    @property
    def requires_uppercase(self) -> bool:
        return self.alias in COMMON_WORD_ALIASES


def alias_similarity(a: str, b: str) -> float:
    """Normalized Levenshtein similarity: 1 - distance / max(len)."""
    if not a and not b:
        return 1.0
    return Levenshtein.normalized_similarity(a, b)


class AliasIndex:
    """
    Index of every alias in a roster.

    Built once from the roster and never mutated afterwards.
    """

    def __init__(self, roster: Dict[League, Sequence[TeamRecord]]):
        if not roster or not any(roster.values()):
            raise ValueError("Cannot build an alias index from an empty roster")

        self._by_league: Dict[League, List[AliasEntry]] = {}
        self._by_team: Dict[str, List[AliasEntry]] = {}
        self._teams: Dict[League, List[TeamRecord]] = {}
        self._exact: Dict[str, List[AliasEntry]] = {}

        for league in self._ordered_leagues(roster):
            entries: List[AliasEntry] = []
            for team in roster[league]:
                team_entries = self._entries_for(team)
                entries.extend(team_entries)
                self._by_team[team.key] = team_entries
                for entry in team_entries:
                    self._exact.setdefault(entry.alias, []).append(entry)
            self._by_league[league] = entries
            self._teams[league] = list(roster[league])

        logger.info(
            f"Alias index built: {self.size} aliases across "
            f"{sum(len(t) for t in self._teams.values())} teams"
        )

    @classmethod
    def build(cls, roster: Optional[Dict[League, Sequence[TeamRecord]]] = None) -> "AliasIndex":
        """Build an index over ``roster``, or the default roster when omitted."""
        return cls(DEFAULT_ROSTER if roster is None else roster)

    @staticmethod
    def _ordered_leagues(roster: Dict[League, Sequence[TeamRecord]]) -> List[League]:
        ordered = [league for league in LEAGUE_PRIORITY if league in roster]
        ordered.extend(league for league in roster if league not in ordered)
        return ordered

    @staticmethod
    def _entries_for(team: TeamRecord) -> List[AliasEntry]:
        abbreviation = normalize_text(team.abbreviation)
        candidates = [team.name, team.city, team.full_name, team.abbreviation, *team.aliases]

        entries: List[AliasEntry] = []
        seen: Set[str] = set()
        for candidate in candidates:
            alias = normalize_text(candidate)
            if not alias or alias in seen:
                continue
            seen.add(alias)
            entries.append(AliasEntry(alias, team, is_abbreviation=(alias == abbreviation)))
        return entries

    @property
    def size(self) -> int:
        return sum(len(entries) for entries in self._by_league.values())

    @property
    def leagues(self) -> List[League]:
        return list(self._by_league.keys())

    def entries(self, league: Optional[League] = None) -> List[AliasEntry]:
        """All entries, restricted to ``league`` when given, in priority order."""
        if league is not None:
            return list(self._by_league.get(league, []))
        return [entry for entries in self._by_league.values() for entry in entries]

    def entries_for_team(self, team: TeamRecord) -> List[AliasEntry]:
        return list(self._by_team.get(team.key, []))

    def teams(self, league: Optional[League] = None) -> List[TeamRecord]:
        if league is not None:
            return list(self._teams.get(league, []))
        return [team for teams in self._teams.values() for team in teams]

    def lookup(self, alias: str, league: Optional[League] = None) -> List[AliasEntry]:
        """Entries whose alias equals ``alias`` after normalization."""
        matches = self._exact.get(normalize_text(alias), [])
        if league is not None:
            return [entry for entry in matches if entry.league == league]
        return list(matches)


@lru_cache()
def get_alias_index() -> AliasIndex:
    """Get the cached index over the default roster."""
    return AliasIndex.build()
