# tests/conftest.py
import pytest

from services.alias_index import AliasIndex, get_alias_index
from services.matchup_parser import MatchupParser, get_matchup_parser
from services.roster import League, TeamRecord
from services.team_resolver import TeamResolver, get_team_resolver


def team(league, name, city, abbreviation, venue, home_city, *aliases):
    return TeamRecord(league, name, city, abbreviation, venue, home_city, tuple(aliases))


@pytest.fixture(scope="session")
def synthetic_roster():
    """A tiny two-league roster with a deliberately shared city."""
    return {
        League.NBA: (
            team(League.NBA, "Lakers", "Los Angeles", "LAL", "Crypto.com Arena", "Los Angeles", "la"),
            team(League.NBA, "Clippers", "Los Angeles", "LAC", "Intuit Dome", "Inglewood", "la", "clips"),
            team(League.NBA, "Celtics", "Boston", "BOS", "TD Garden", "Boston"),
        ),
        League.NFL: (
            team(League.NFL, "Rams", "Los Angeles", "LAR", "SoFi Stadium", "Inglewood", "la"),
            team(League.NFL, "Patriots", "New England", "NE", "Gillette Stadium", "Foxborough", "pats"),
        ),
    }


@pytest.fixture(scope="session")
def synthetic_index(synthetic_roster):
    return AliasIndex(synthetic_roster)


@pytest.fixture(scope="session")
def synthetic_resolver(synthetic_index):
    return TeamResolver(synthetic_index)


@pytest.fixture(scope="session")
def index():
    return get_alias_index()


@pytest.fixture(scope="session")
def resolver():
    return get_team_resolver()


@pytest.fixture(scope="session")
def parser():
    return get_matchup_parser()


@pytest.fixture(scope="session")
def lenient_parser(index):
    """Parser whose resolver accepts unanchored fuzzy matches."""
    return MatchupParser(TeamResolver(index, require_anchor=False))


@pytest.fixture
def parse(parser):
    def _parse(text):
        result = parser.parse(text)
        assert result.success, result.error
        return result.parsed
    return _parse
