import pytest

from services.roster import League, LeagueCategory
from services.team_resolver import (
    MatchKind,
    ResolutionFailure,
    ResolutionFailureReason,
    ResolvedTeam,
    TeamResolver,
)


class TestExactMatches:
    def test_nickname(self, resolver):
        result = resolver.resolve("Lakers")
        assert isinstance(result, ResolvedTeam)
        assert result.team.name == "Lakers"
        assert result.league is League.NBA
        assert result.league.category is LeagueCategory.BASKETBALL
        assert result.confidence == 1.0
        assert result.match_kind is MatchKind.ALIAS

    def test_full_name(self, resolver):
        result = resolver.resolve("Kansas City Chiefs")
        assert result.team.abbreviation == "KC"
        assert result.match_kind is MatchKind.ALIAS

    def test_abbreviation(self, resolver):
        result = resolver.resolve("KC")
        assert result.team.name == "Chiefs"
        assert result.match_kind is MatchKind.ABBREVIATION

    def test_abbreviation_tie_prefers_basketball(self, resolver):
        # ATL is both the Hawks and the Falcons
        result = resolver.resolve("ATL")
        assert isinstance(result, ResolvedTeam)
        assert result.team.name == "Hawks"

    def test_league_hint_scopes_search(self, resolver):
        assert resolver.resolve("ATL", League.NFL).team.name == "Falcons"
        assert resolver.resolve("Kings", League.NHL).team.city == "Los Angeles"
        assert resolver.resolve("Kings", League.NBA).team.city == "Sacramento"

    def test_punctuation_and_case(self, resolver):
        assert resolver.resolve("  st. LOUIS blues!! ").team.name == "Blues"


class TestContains:
    def test_alias_inside_longer_text(self, resolver):
        result = resolver.resolve("Chiefs -3.5", League.NFL)
        assert result.team.name == "Chiefs"
        assert result.match_kind is MatchKind.CONTAINS
        assert result.confidence == pytest.approx(0.97)

    def test_two_teams_with_distinct_aliases_returns_best(self, resolver):
        # Equal scores on different aliases are not a tie; league order decides
        result = resolver.resolve("Pistons at Clippers", League.NBA)
        assert isinstance(result, ResolvedTeam)
        assert result.team.name == "Pistons"
        assert result.match_kind is MatchKind.CONTAINS

    def test_distinct_aliases_without_league(self, resolver):
        result = resolver.resolve("Heat Celtics")
        assert isinstance(result, ResolvedTeam)
        assert result.team.name == "Celtics"
        assert result.confidence == pytest.approx(0.97)

    def test_identical_alias_inside_text_is_ambiguous(self, resolver):
        result = resolver.resolve("the Kings tonight")
        assert isinstance(result, ResolutionFailure)
        assert result.reason is ResolutionFailureReason.AMBIGUOUS_MATCH


class TestRejections:
    def test_shared_city_code_is_ambiguous(self, resolver):
        result = resolver.resolve("LA")
        assert isinstance(result, ResolutionFailure)
        assert result.reason is ResolutionFailureReason.AMBIGUOUS_MATCH
        assert not result.success

    def test_shared_nickname_is_ambiguous(self, resolver):
        result = resolver.resolve("Kings")
        assert result.reason is ResolutionFailureReason.AMBIGUOUS_MATCH

    def test_near_tie_typo_is_ambiguous(self, resolver):
        # "los angeles" is both the Lakers and the Clippers
        result = resolver.resolve("Los Angles", League.NBA)
        assert result.reason is ResolutionFailureReason.AMBIGUOUS_MATCH

    def test_typo_is_unanchored(self, resolver):
        result = resolver.resolve("Clipprs", League.NBA)
        assert result.reason is ResolutionFailureReason.UNANCHORED_MATCH
        assert "'Clipprs'" in result.message

    def test_unknown_team(self, resolver):
        result = resolver.resolve("Yankees", League.NBA)
        assert result.reason is ResolutionFailureReason.NO_CONFIDENT_MATCH

    def test_wrong_league(self, resolver):
        result = resolver.resolve("Chiefs", League.NBA)
        assert result.reason is ResolutionFailureReason.NO_CONFIDENT_MATCH

    @pytest.mark.parametrize("text", ["", "   ", "!!!", None])
    def test_empty_query(self, resolver, text):
        result = resolver.resolve(text)
        assert result.reason is ResolutionFailureReason.NO_CONFIDENT_MATCH

    def test_failure_to_dict(self, resolver):
        data = resolver.resolve("LA").to_dict()
        assert data["success"] is False
        assert data["reason"] == "ambiguous-match"
        assert data["query"] == "LA"


class TestCalibration:
    """Calibration points: thresholds are empirical and may be revised."""

    def test_single_letter_typo_needs_anchor(self, resolver):
        result = resolver.resolve("lakrs")
        assert result.reason is ResolutionFailureReason.UNANCHORED_MATCH

    def test_single_letter_typo_without_anchor(self, index):
        lenient = TeamResolver(index, require_anchor=False)
        result = lenient.resolve("lakrs")
        assert isinstance(result, ResolvedTeam)
        assert result.team.name == "Lakers"
        assert result.match_kind is MatchKind.FUZZY
        assert result.confidence == pytest.approx(5 / 6)

    def test_raised_floor_rejects_typo(self, index):
        strict = TeamResolver(index, min_confidence=0.9, require_anchor=False)
        result = strict.resolve("lakrs")
        assert result.reason is ResolutionFailureReason.NO_CONFIDENT_MATCH

    def test_wider_gap_rejects_typo(self, index):
        cautious = TeamResolver(index, min_fuzzy_gap=0.3, require_anchor=False)
        result = cautious.resolve("lakrs")
        assert result.reason is ResolutionFailureReason.AMBIGUOUS_MATCH

    def test_defaults_from_settings(self, resolver):
        assert resolver.min_confidence == 0.8
        assert resolver.min_fuzzy_gap == 0.2
        assert resolver.require_anchor is True


class TestSyntheticRoster:
    def test_shared_alias_across_leagues(self, synthetic_resolver):
        assert synthetic_resolver.resolve("LA").reason is ResolutionFailureReason.AMBIGUOUS_MATCH

    def test_scoped_unique_alias(self, synthetic_resolver):
        assert synthetic_resolver.resolve("LA", League.NFL).team.name == "Rams"

    def test_find_team(self, synthetic_resolver):
        assert synthetic_resolver.find_team("pats").name == "Patriots"
        assert synthetic_resolver.find_team("Clippers").abbreviation == "LAC"
        assert synthetic_resolver.find_team("Yankees") is None

    def test_resolved_to_dict(self, synthetic_resolver):
        data = synthetic_resolver.resolve("Celtics").to_dict()
        assert data["success"] is True
        assert data["league"] == "nba"
        assert data["match_kind"] == "alias"
        assert data["team"]["abbreviation"] == "BOS"
