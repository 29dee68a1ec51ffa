"""
Matchup Parser

Parses free-text bet descriptions such as

    "Chiefs -3.5 vs Bills, I'm taking Chiefs, home game, odds -110"

into a structured matchup: league, pick team, opponent, spread from the pick
team's perspective, venue and odds.

The parse runs as a pipeline of stages:
1. League detection
2. Team extraction
3. Spread extraction and attachment
4. Pick extraction and orientation
5. Venue extraction
6. Odds extraction

Stages 1-3 can fail the parse; the rest fall back to an assumption and record
a note saying so.
"""
import re
import logging
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache

from config import get_settings
from services.roster import League, LeagueCategory, TeamRecord, is_home_venue, league_from_keywords
from services.team_resolver import (
    MatchKind,
    ResolutionFailure,
    ResolutionFailureReason,
    ResolvedTeam,
    TeamResolver,
    get_team_resolver,
)
from utils.text import find_alias_spans, format_spread, lower_text, mask_text, possessive

logger = logging.getLogger(__name__)


class Venue(Enum):
    """Where the game is played, from the pick team's perspective."""
    HOME = "home"
    AWAY = "away"
    NEUTRAL = "neutral"


class ParseFailure(Enum):
    """Why a parse was rejected."""
    MISSING_LEAGUE = "missing-league"
    MISSING_TEAMS = "missing-teams"
    MISSING_SPREAD = "missing-spread"


# Fields a caller should re-prompt for after each failure
CLARIFICATION_FIELDS: Dict[ParseFailure, List[str]] = {
    ParseFailure.MISSING_LEAGUE: ["league"],
    ParseFailure.MISSING_TEAMS: ["teams"],
    ParseFailure.MISSING_SPREAD: ["spread"],
}


@dataclass(frozen=True)
class ParsedMatchup:
    """
    A parsed bet.

    ``spread`` is always from the pick team's perspective (negative means the
    pick is favored). Fields are optional so partially built values can be
    validated; the parser itself only returns complete ones.
    """
    league: Optional[League]
    pick_team: Optional[TeamRecord]
    opponent_team: Optional[TeamRecord]
    spread: Optional[float]
    venue: Venue = Venue.NEUTRAL
    venue_assumed: bool = True
    american_odds: Optional[int] = None
    raw_text: str = ""
    parsing_notes: Tuple[str, ...] = ()

    @property
    def league_category(self) -> Optional[LeagueCategory]:
        return self.league.category if self.league else None

    def odds_or_default(self, default: Optional[int] = None) -> int:
        """Parsed odds, or ``default`` (settings value when omitted)."""
        if self.american_odds is not None:
            return self.american_odds
        return get_settings().default_american_odds if default is None else default

    def to_dict(self) -> dict:
        return {
            "league": self.league.value if self.league else None,
            "league_category": self.league_category.value if self.league_category else None,
            "pick_team": self.pick_team.to_dict() if self.pick_team else None,
            "opponent_team": self.opponent_team.to_dict() if self.opponent_team else None,
            "spread": self.spread,
            "venue": self.venue.value,
            "venue_assumed": self.venue_assumed,
            "american_odds": self.american_odds,
            "raw_text": self.raw_text,
            "parsing_notes": list(self.parsing_notes),
        }


@dataclass
class ParsingResult:
    """Outcome of a parse: a matchup, or a typed failure with clarification hints."""
    success: bool
    parsed: Optional[ParsedMatchup] = None
    failure: Optional[ParseFailure] = None
    error: Optional[str] = None
    clarification_needed: List[str] = field(default_factory=list)
    resolution_failures: List[ResolutionFailure] = field(default_factory=list)

    @classmethod
    def ok(cls, parsed: ParsedMatchup) -> "ParsingResult":
        return cls(success=True, parsed=parsed)

    @classmethod
    def fail(
        cls,
        failure: ParseFailure,
        error: str,
        resolution_failures: Optional[List[ResolutionFailure]] = None,
    ) -> "ParsingResult":
        return cls(
            success=False,
            failure=failure,
            error=error,
            clarification_needed=list(CLARIFICATION_FIELDS[failure]),
            resolution_failures=list(resolution_failures or []),
        )

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "parsed": self.parsed.to_dict() if self.parsed else None,
            "failure": self.failure.value if self.failure else None,
            "error": self.error,
            "clarification_needed": list(self.clarification_needed),
            "resolution_failures": [f.to_dict() for f in self.resolution_failures],
        }


@dataclass(frozen=True)
class TeamMention:
    """An alias occurrence in the text. Offsets index the raw text."""
    team: TeamRecord
    alias: str
    start: int
    end: int


@dataclass(frozen=True)
class SpreadMatch:
    """
    A spread found in the text, as written.

    ``start``/``end`` cover the whole phrase ("-3.5", "favored by 3").
    """
    value: float
    start: int
    end: int
    note: Optional[str] = None


def _number(text: str) -> float:
    return float(text.replace("−", "-"))


_MINUS = "-−"
_SIGN_CHARS = r"+\-−"
_SIGN = rf"[{_SIGN_CHARS}]"
_NUMERAL = r"\d{1,2}(?:\.\d+)?"

# Side of an "A at B" / "A vs B" matchup, over lower-cased raw text
_SIDE = r"(?<![a-z0-9])[a-z0-9][a-z0-9 \t.'&+\-]{0,39}?"
_SIDE_END = r"(?=\s*(?:[,;:!?()\n]|\.(?:\s|$)|$))"

_SPELLED_NUMBERS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6, "seven": 7,
}


class MatchupParser:
    """
    Parser for natural-language matchup descriptions.

    Each stage is a public method so it can be exercised on its own;
    ``parse`` chains them and accumulates notes.
    """

    # Structured matchups, tried in order
    MATCHUP_PATTERNS = [
        re.compile(rf"(?P<a>{_SIDE})(?:[ \t]+at[ \t]+|[ \t]*@[ \t]*)(?P<b>{_SIDE}){_SIDE_END}"),
        re.compile(rf"(?P<a>{_SIDE})[ \t]+(?:vs\.?|v\.?|versus)[ \t]+(?P<b>{_SIDE}){_SIDE_END}"),
    ]

    SIGNED_SPREAD = re.compile(
        rf"(?<![0-9.])({_SIGN})\s?({_NUMERAL})(?![\d%]|\.\d)(?:\s*(?:pts?|points?)\b)?"
    )
    FAVORED_BY = re.compile(rf"\bfavou?red\s+by\s+({_NUMERAL})(?![\d%]|\.\d)(?:\s*(?:pts?|points?)\b)?")
    POINT_FAVORITE = re.compile(rf"(?<![\d.])({_NUMERAL})\s*-?\s*(?:(?:points?|pts?)\s*-?\s*)?favou?rites?\b")
    POINT_UNDERDOG = re.compile(rf"(?<![\d.])({_NUMERAL})\s*-?\s*(?:(?:points?|pts?)\s*-?\s*)?(?:under)?dogs?\b")
    SPELLED_SPREAD = re.compile(
        r"\b(minus|plus)\s+(one|two|three|four|five|six|seven)(\s+and\s+a\s+half)?\b"
    )
    UNSIGNED_SPREAD = re.compile(
        rf"(?<![a-z0-9.:/{_SIGN_CHARS}])({_NUMERAL})(?![\d%:/]|\.\d)(?:\s*(?:pts?|points?)\b|(?![a-z]))"
    )

    # Text allowed between a team alias and the spread it owns
    LEFT_OF_SPREAD = re.compile(r"[\s(]*(?:(?:is|are)\s+)?[\s(]*")
    RIGHT_OF_SPREAD = re.compile(r"[\s()]*(?:for\s+(?:the\s+)?)?")

    PICK_PATTERNS = [
        re.compile(r"\btak(?:e|ing)\s+"),
        re.compile(r"\bmy\s+pick\s*(?:is\s+)?:?\s*"),
        re.compile(r"\bpick(?:ing)?\s*:?\s+"),
        re.compile(r"\bbet(?:ting)?\s+(?:on\s+)?"),
        re.compile(r"\bgo(?:ing)?\s+with\s+"),
        re.compile(r"\bi\s+(?:like|want|choose|love)\s+"),
        re.compile(r"\bbacking\s+"),
    ]
    ARTICLE = re.compile(r"the\s+")

    NEUTRAL_SITE = re.compile(r"\bneutral[\s-]+(?:site|venue|field|court|ice|rink|ground)\b")
    PLACE_PREFIX = re.compile(r"(?<![a-z0-9])(?:at|in)\s+|@\s*")
    HOME_AWAY = re.compile(
        r"\b(at\s+home|home|hosting|hosts?|away|on\s+the\s+road|road|visiting|visitors?)\b"
    )
    HOME_AWAY_FOR = re.compile(r"\b(home|away|road)\s+(?:game\s+)?for\s+(?:the\s+)?")
    SENTENCE_END = re.compile(r"[;!?\n]|\.(?:\s|$)")
    HOME_WORDS = {"home", "at home", "hosting", "host", "hosts"}

    ODDS_PATTERNS = [
        re.compile(rf"\bodds?\s*(?:of\s+)?:?\s*({_SIGN}?\d{{3,4}})(?!\d)"),
        re.compile(rf"\bat\s+({_SIGN}?\d{{3,4}})(?!\d)"),
        re.compile(rf"(?<![a-z0-9.])({_SIGN}\d{{3,4}})(?!\d)\s*odds?\b"),
        re.compile(rf"(?<![a-z0-9.])({_SIGN}\d{{3}})(?![\d.])"),
    ]

    def __init__(
        self,
        resolver: Optional[TeamResolver] = None,
        spread_min_magnitude: Optional[float] = None,
        spread_max_magnitude: Optional[float] = None,
        venue_proximity_window: Optional[int] = None,
        default_american_odds: Optional[int] = None,
    ):
        settings = get_settings()
        self.resolver = resolver if resolver is not None else get_team_resolver()
        self.index = self.resolver.index
        self.spread_min_magnitude = (
            settings.spread_min_magnitude if spread_min_magnitude is None else spread_min_magnitude
        )
        self.spread_max_magnitude = (
            settings.spread_max_magnitude if spread_max_magnitude is None else spread_max_magnitude
        )
        self.venue_proximity_window = (
            settings.venue_proximity_window if venue_proximity_window is None else venue_proximity_window
        )
        self.default_american_odds = (
            settings.default_american_odds if default_american_odds is None else default_american_odds
        )

    # =========================================================================
    # PIPELINE
    # =========================================================================

    def parse(self, text: str) -> ParsingResult:
        """Parse a free-text matchup description."""
        raw = text or ""
        notes: List[str] = []

        league, inferred = self.detect_league(raw)
        if league is None:
            return self._fail(
                ParseFailure.MISSING_LEAGUE,
                "Could not determine the league; please say NFL, NBA or NHL",
            )
        if inferred:
            notes.append(f"League inferred as {league.name} from team names")

        teams, failures = self.extract_teams(raw, league)
        if teams is None:
            error = failures[0].message if failures else f"Could not identify two {league.name} teams"
            return self._fail(ParseFailure.MISSING_TEAMS, error, failures)

        first, second = teams
        for resolved in teams:
            if resolved.match_kind == MatchKind.FUZZY:
                notes.append(
                    f"{resolved.team.full_name} was matched by approximate spelling; please confirm"
                )

        spread = self.extract_spread(raw)
        if spread is None:
            return self._fail(ParseFailure.MISSING_SPREAD, "Could not find a point spread")
        if spread.note:
            notes.append(spread.note)

        pair = (first.team, second.team)
        spread_team = self.find_spread_team(raw, spread, league, pair)

        pick = self.extract_pick(raw, league, pair)
        if pick is None:
            if spread_team is not None:
                pick = spread_team
                notes.append(f"Pick assumed to be {pick.name} (team mentioned with spread)")
            else:
                pick = first.team
                notes.append(f"Pick assumed to be {pick.name} (first team mentioned)")
        opponent = second.team if pick == first.team else first.team

        value = spread.value
        if spread_team is not None and spread_team != pick:
            value = -value
            notes.append(f"Spread adjusted to {format_spread(value)} from {possessive(pick.name)} perspective")

        venue, venue_assumed = self.extract_venue(raw, league, pick, opponent)
        if venue_assumed:
            notes.append("Venue assumed neutral (not explicitly stated)")

        odds = self.extract_odds(raw, spread)
        if odds is None:
            notes.append(
                f"Odds not provided; caller should apply the default of {self.default_american_odds}"
            )

        parsed = ParsedMatchup(
            league=league,
            pick_team=pick,
            opponent_team=opponent,
            spread=value,
            venue=venue,
            venue_assumed=venue_assumed,
            american_odds=odds,
            raw_text=raw,
            parsing_notes=tuple(notes),
        )
        logger.debug(
            f"Parsed {league.name}: {pick.name} {format_spread(value)} vs {opponent.name} ({venue.value})"
        )
        return ParsingResult.ok(parsed)

    def _fail(
        self,
        failure: ParseFailure,
        error: str,
        resolution_failures: Optional[List[ResolutionFailure]] = None,
    ) -> ParsingResult:
        logger.info(f"Parse failed ({failure.value}): {error}")
        return ParsingResult.fail(failure, error, resolution_failures)

    # =========================================================================
    # STAGES
    # =========================================================================

    def detect_league(self, text: str) -> Tuple[Optional[League], bool]:
        """
        Detect the league. Returns (league, inferred).

        An explicit keyword wins. Otherwise the league comes from the teams:
        first from a structured "A at/vs B" pair, then from whichever league
        has the most distinct teams mentioned. Mixed or tied evidence yields
        no league.
        """
        league = league_from_keywords(text)
        if league is not None:
            return league, False

        for left, right in self._structured_sides(text):
            a = self.resolver.resolve(left)
            b = self.resolver.resolve(right)
            if isinstance(a, ResolvedTeam) and isinstance(b, ResolvedTeam):
                if a.league == b.league:
                    return a.league, True
                logger.debug(f"Teams from different leagues: {a.team.full_name}, {b.team.full_name}")
                return None, True

        counts = {
            league: len({m.team.key for m in self._scan_mentions(text, league)})
            for league in self.index.leagues
        }
        top = max(counts.values()) if counts else 0
        leaders = [league for league, count in counts.items() if count == top]
        if top > 0 and len(leaders) == 1:
            return leaders[0], True
        return None, True

    def extract_teams(
        self, text: str, league: League
    ) -> Tuple[Optional[Tuple[ResolvedTeam, ResolvedTeam]], List[ResolutionFailure]]:
        """
        Find the two teams, in the order they appear.

        Structured patterns come first; if no pattern yields two distinct
        teams, the first two distinct confident mentions are used.
        """
        failures: List[ResolutionFailure] = []
        same_team: Optional[TeamRecord] = None

        for left, right in self._structured_sides(text):
            a = self.resolver.resolve(left, league)
            b = self.resolver.resolve(right, league)
            for result in (a, b):
                if isinstance(result, ResolutionFailure):
                    failures.append(result)
            if isinstance(a, ResolvedTeam) and isinstance(b, ResolvedTeam):
                if a.team != b.team:
                    return (a, b), failures
                same_team = a.team

        found: List[ResolvedTeam] = []
        for mention in self._scan_mentions(text, league):
            if any(r.team == mention.team for r in found):
                continue
            result = self.resolver.resolve(mention.alias, league)
            if isinstance(result, ResolvedTeam) and result.team == mention.team:
                found.append(result)
            if len(found) == 2:
                return (found[0], found[1]), failures

        if same_team is not None:
            failures.insert(
                0,
                ResolutionFailure(
                    reason=ResolutionFailureReason.AMBIGUOUS_MATCH,
                    query=text,
                    message=f"Both sides of the matchup name the {same_team.full_name}",
                ),
            )
        return None, failures

    def extract_spread(self, text: str) -> Optional[SpreadMatch]:
        """Find the point spread, trying each notation in priority order."""
        lowered = lower_text(text)

        for match in self.SIGNED_SPREAD.finditer(lowered):
            magnitude = _number(match.group(2))
            if self._plausible(magnitude):
                sign = -1.0 if match.group(1) in _MINUS else 1.0
                return SpreadMatch(sign * magnitude, match.start(), match.end())

        for pattern in (self.FAVORED_BY, self.POINT_FAVORITE):
            for match in pattern.finditer(lowered):
                magnitude = _number(match.group(1))
                if self._plausible(magnitude):
                    return SpreadMatch(-magnitude, match.start(), match.end())

        for match in self.POINT_UNDERDOG.finditer(lowered):
            magnitude = _number(match.group(1))
            if self._plausible(magnitude):
                return SpreadMatch(magnitude, match.start(), match.end())

        match = self.SPELLED_SPREAD.search(lowered)
        if match:
            magnitude = _SPELLED_NUMBERS[match.group(2)] + (0.5 if match.group(3) else 0.0)
            sign = -1.0 if match.group(1) == "minus" else 1.0
            return SpreadMatch(sign * magnitude, match.start(), match.end())

        for match in self.UNSIGNED_SPREAD.finditer(lowered):
            magnitude = _number(match.group(1))
            if self._plausible(magnitude):
                return SpreadMatch(
                    magnitude,
                    match.start(),
                    match.end(),
                    note=f"Spread '{match.group(1)}' has no sign; read as {format_spread(magnitude)}",
                )

        return None

    def find_spread_team(
        self,
        text: str,
        spread: SpreadMatch,
        league: League,
        teams: Tuple[TeamRecord, TeamRecord],
    ) -> Optional[TeamRecord]:
        """Team whose alias sits right next to the spread as written, if any."""
        lowered = lower_text(text)
        mentions = [m for m in self._scan_mentions(text, league) if m.team in teams]
        literal = lowered[spread.start:spread.end]

        for start in self._occurrences(lowered, literal):
            end = start + len(literal)
            left = [
                m for m in mentions
                if m.end <= start and self.LEFT_OF_SPREAD.fullmatch(lowered[m.end:start])
            ]
            if left:
                return left[-1].team
            right = [
                m for m in mentions
                if m.start >= end and self.RIGHT_OF_SPREAD.fullmatch(lowered[end:m.start])
            ]
            if right:
                return right[0].team
        return None

    def extract_pick(
        self, text: str, league: League, teams: Tuple[TeamRecord, TeamRecord]
    ) -> Optional[TeamRecord]:
        """Team named right after an explicit pick phrase ("taking X", "my pick is X")."""
        lowered = lower_text(text)
        starts = {m.start: m.team for m in self._scan_mentions(text, league) if m.team in teams}

        positions = sorted(
            match.end() for pattern in self.PICK_PATTERNS for match in pattern.finditer(lowered)
        )
        for position in positions:
            article = self.ARTICLE.match(lowered, position)
            if article:
                position = article.end()
            if position in starts:
                return starts[position]
        return None

    def extract_venue(
        self, text: str, league: League, pick: TeamRecord, opponent: TeamRecord
    ) -> Tuple[Venue, bool]:
        """Venue from the pick team's perspective. Returns (venue, assumed)."""
        lowered = lower_text(text)
        masked = mask_text(text)

        if self.NEUTRAL_SITE.search(lowered):
            return Venue.NEUTRAL, False

        # "at Arrowhead", "in Atlanta"
        for match in self.PLACE_PREFIX.finditer(lowered):
            place = " ".join(masked[match.end():match.end() + 60].split()[:4])
            pick_home = is_home_venue(place, pick)
            opponent_home = is_home_venue(place, opponent)
            if pick_home != opponent_home:
                return (Venue.HOME if pick_home else Venue.AWAY), False

        mentions = [m for m in self._scan_mentions(text, league) if m.team in (pick, opponent)]
        starts = {m.start: m.team for m in mentions}

        # "home game for the Chiefs"
        for match in self.HOME_AWAY_FOR.finditer(lowered):
            team = starts.get(match.end())
            if team is not None:
                is_home = match.group(1) == "home"
                if team != pick:
                    is_home = not is_home
                return (Venue.HOME if is_home else Venue.AWAY), False

        # "Chiefs, home game", "Pistons are away"
        for mention in mentions:
            if mention.team != pick:
                continue
            window_end = min(len(lowered), mention.end + self.venue_proximity_window)
            stop = self.SENTENCE_END.search(lowered, mention.end)
            if stop and stop.start() < window_end:
                window_end = stop.start()
            for other in mentions:
                if other.team == opponent and mention.end <= other.start < window_end:
                    window_end = other.start
                    break
            hit = self.HOME_AWAY.search(lowered, mention.end, window_end)
            if hit:
                phrase = " ".join(hit.group(1).split())
                return (Venue.HOME if phrase in self.HOME_WORDS else Venue.AWAY), False

        # "at Chiefs", "@ LA Clippers"
        venues = set()
        for match in self.PLACE_PREFIX.finditer(lowered):
            position = match.end()
            article = self.ARTICLE.match(lowered, position)
            if article:
                position = article.end()
            team = starts.get(position)
            if team is not None:
                venues.add(Venue.HOME if team == pick else Venue.AWAY)
        if len(venues) == 1:
            return venues.pop(), False

        return Venue.NEUTRAL, True

    def extract_odds(self, text: str, spread: Optional[SpreadMatch] = None) -> Optional[int]:
        """American odds, if written. Never overlaps the spread."""
        lowered = lower_text(text)
        for pattern in self.ODDS_PATTERNS:
            for match in pattern.finditer(lowered):
                start, end = match.span(1)
                if spread is not None and start < spread.end and end > spread.start:
                    continue
                value = int(_number(match.group(1)))
                if abs(value) >= 100:
                    return value
        return None

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _plausible(self, magnitude: float) -> bool:
        return self.spread_min_magnitude <= magnitude <= self.spread_max_magnitude

    def _structured_sides(self, text: str) -> List[Tuple[str, str]]:
        """(left, right) raw side texts for each structured pattern that matches."""
        lowered = lower_text(text)
        sides = []
        for pattern in self.MATCHUP_PATTERNS:
            match = pattern.search(lowered)
            if match:
                sides.append((text[match.start("a"):match.end("a")], text[match.start("b"):match.end("b")]))
        return sides

    def _scan_mentions(self, text: str, league: League) -> List[TeamMention]:
        """
        Non-overlapping alias occurrences in text order.

        Only aliases that name exactly one team in the league count, and the
        longest alias wins where several start at the same place.
        """
        masked = mask_text(text)
        found: List[TeamMention] = []
        for entry in self.index.entries(league):
            owners = {e.team.key for e in self.index.lookup(entry.alias, league)}
            if len(owners) != 1:
                continue
            for start, end in find_alias_spans(masked, entry.alias):
                if entry.requires_uppercase and not text[start:end].isupper():
                    continue
                found.append(TeamMention(entry.team, entry.alias, start, end))

        found.sort(key=lambda m: (m.start, m.start - m.end))
        mentions: List[TeamMention] = []
        last_end = -1
        for mention in found:
            if mention.start >= last_end:
                mentions.append(mention)
                last_end = mention.end
        return mentions

    @staticmethod
    def _occurrences(haystack: str, needle: str) -> List[int]:
        positions = []
        start = haystack.find(needle) if needle else -1
        while start != -1:
            positions.append(start)
            start = haystack.find(needle, start + 1)
        return positions


@lru_cache()
def get_matchup_parser() -> MatchupParser:
    """Get the cached parser over the default roster."""
    return MatchupParser(get_team_resolver())


def parse_matchup_request(text: str, parser: Optional[MatchupParser] = None) -> ParsingResult:
    """Parse ``text`` with ``parser``, or the default parser."""
    return (parser or get_matchup_parser()).parse(text)
