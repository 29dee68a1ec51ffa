import pytest

from services.matchup_parser import ParsedMatchup, Venue
from services.roster import League
from services.validator import validate_parsed_matchup


@pytest.fixture
def complete(resolver):
    return ParsedMatchup(
        league=League.NFL,
        pick_team=resolver.find_team("Chiefs"),
        opponent_team=resolver.find_team("Bills"),
        spread=-3.5,
        venue=Venue.HOME,
        venue_assumed=False,
    )


def _without(matchup, **changes):
    fields = {name: getattr(matchup, name) for name in matchup.__dataclass_fields__}
    fields.update(changes)
    return ParsedMatchup(**fields)


def test_complete_matchup_is_valid(complete):
    result = validate_parsed_matchup(complete)
    assert result.valid
    assert result.errors == []


def test_parser_output_is_valid(parse):
    assert validate_parsed_matchup(parse("Bills at Chiefs, taking Bills +3.5")).valid


@pytest.mark.parametrize("field,error", [
    ("pick_team", "Missing pick team"),
    ("opponent_team", "Missing opponent team"),
    ("league", "Missing league"),
    ("spread", "Missing spread"),
])
def test_missing_field(complete, field, error):
    result = validate_parsed_matchup(_without(complete, **{field: None}))
    assert not result.valid
    assert result.errors == [error]


def test_all_missing(complete):
    result = validate_parsed_matchup(
        _without(complete, pick_team=None, opponent_team=None, league=None, spread=None)
    )
    assert result.errors == ["Missing pick team", "Missing opponent team", "Missing league", "Missing spread"]


def test_zero_spread_is_present(complete):
    assert validate_parsed_matchup(_without(complete, spread=0.0)).valid


def test_no_matchup():
    result = validate_parsed_matchup(None)
    assert not result.valid
    assert result.to_dict() == {"valid": False, "errors": ["Missing parsed matchup"]}
