"""
Team Roster

Static reference data for every supported league: one record per team with
its canonical name, city, abbreviation, home venue and a curated list of the
nicknames people actually type.

This module is the only configuration surface of the parser. Nothing here is
mutated after import; the alias index is derived from these records.
"""
from typing import Dict, Iterable, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

from utils.text import normalize_text


class LeagueCategory(Enum):
    """Sport family a league belongs to."""
    FOOTBALL = "football"
    BASKETBALL = "basketball"
    HOCKEY = "hockey"


class League(Enum):
    """Supported leagues."""
    NFL = "nfl"
    NBA = "nba"
    NHL = "nhl"

    @property
    def category(self) -> LeagueCategory:
        return _LEAGUE_CATEGORIES[self]

    @classmethod
    def from_value(cls, value: str) -> "League":
        """Look up a league by value or name, case-insensitively."""
        key = (value or "").strip().lower()
        for league in cls:
            if league.value == key:
                return league
        raise ValueError(f"Unknown league: {value!r}")


_LEAGUE_CATEGORIES: Dict[League, LeagueCategory] = {
    League.NFL: LeagueCategory.FOOTBALL,
    League.NBA: LeagueCategory.BASKETBALL,
    League.NHL: LeagueCategory.HOCKEY,
}

# Keywords that name a league outright (matched whole-word on normalized text)
LEAGUE_KEYWORDS: Dict[League, Tuple[str, ...]] = {
    League.NFL: ("nfl", "pro football", "football"),
    League.NBA: ("nba", "pro basketball", "basketball"),
    League.NHL: ("nhl", "hockey"),
}


@dataclass(frozen=True)
class TeamRecord:
    """A team as defined in the roster."""
    league: League
    name: str           # Nickname, e.g. "Chiefs"
    city: str           # City/region as used in the full name, e.g. "Kansas City"
    abbreviation: str   # Standard abbreviation, e.g. "KC"
    home_venue: str     # Stadium/arena name
    home_city: str      # City where home games are actually played
    aliases: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def full_name(self) -> str:
        return f"{self.city} {self.name}"

    @property
    def key(self) -> str:
        """Unique identifier across leagues, e.g. ``nfl:KC``."""
        return f"{self.league.value}:{self.abbreviation}"

    def to_dict(self) -> dict:
        return {
            "league": self.league.value,
            "name": self.name,
            "city": self.city,
            "full_name": self.full_name,
            "abbreviation": self.abbreviation,
            "home_venue": self.home_venue,
            "home_city": self.home_city,
            "aliases": list(self.aliases),
        }


def _roster(league: League, rows: Iterable[tuple]) -> Tuple[TeamRecord, ...]:
    return tuple(
        TeamRecord(league, name, city, abbreviation, venue, home_city, tuple(aliases))
        for name, city, abbreviation, venue, home_city, aliases in rows
    )


# =============================================================================
# NFL TEAMS
# (name, city, abbreviation, home venue, home city, aliases)
# =============================================================================
NFL_TEAMS: Tuple[TeamRecord, ...] = _roster(League.NFL, [
    # AFC East
    ("Bills", "Buffalo", "BUF", "Highmark Stadium", "Orchard Park", ["buffalo", "bills", "buf"]),
    ("Dolphins", "Miami", "MIA", "Hard Rock Stadium", "Miami Gardens", ["miami", "dolphins", "fins", "mia"]),
    ("Patriots", "New England", "NE", "Gillette Stadium", "Foxborough",
     ["new england", "patriots", "pats", "ne", "boston"]),
    ("Jets", "New York", "NYJ", "MetLife Stadium", "East Rutherford", ["jets", "nyj", "ny jets", "new york jets"]),

    # AFC North
    ("Ravens", "Baltimore", "BAL", "M&T Bank Stadium", "Baltimore", ["baltimore", "ravens", "bal"]),
    ("Bengals", "Cincinnati", "CIN", "Paycor Stadium", "Cincinnati", ["cincinnati", "bengals", "cincy", "cin"]),
    ("Browns", "Cleveland", "CLE", "Huntington Bank Field", "Cleveland", ["cleveland", "browns", "cle"]),
    ("Steelers", "Pittsburgh", "PIT", "Acrisure Stadium", "Pittsburgh", ["pittsburgh", "steelers", "pit"]),

    # AFC South
    ("Texans", "Houston", "HOU", "NRG Stadium", "Houston", ["houston", "texans", "hou"]),
    ("Colts", "Indianapolis", "IND", "Lucas Oil Stadium", "Indianapolis", ["indianapolis", "colts", "indy", "ind"]),
    ("Jaguars", "Jacksonville", "JAX", "EverBank Stadium", "Jacksonville",
     ["jacksonville", "jaguars", "jags", "jax"]),
    ("Titans", "Tennessee", "TEN", "Nissan Stadium", "Nashville", ["tennessee", "titans", "ten", "nashville"]),

    # AFC West
    ("Broncos", "Denver", "DEN", "Empower Field at Mile High", "Denver", ["denver", "broncos", "den"]),
    ("Chiefs", "Kansas City", "KC", "Arrowhead Stadium", "Kansas City", ["kansas city", "chiefs", "kc"]),
    ("Raiders", "Las Vegas", "LV", "Allegiant Stadium", "Las Vegas", ["las vegas", "raiders", "lv", "vegas"]),
    ("Chargers", "Los Angeles", "LAC", "SoFi Stadium", "Inglewood",
     ["chargers", "lac", "la", "la chargers", "los angeles chargers", "bolts"]),

    # NFC East
    ("Cowboys", "Dallas", "DAL", "AT&T Stadium", "Arlington", ["dallas", "cowboys", "dal", "boys"]),
    ("Giants", "New York", "NYG", "MetLife Stadium", "East Rutherford",
     ["giants", "nyg", "ny giants", "new york giants", "big blue"]),
    ("Eagles", "Philadelphia", "PHI", "Lincoln Financial Field", "Philadelphia",
     ["philadelphia", "eagles", "phi", "philly", "birds"]),
    ("Commanders", "Washington", "WAS", "Northwest Stadium", "Landover",
     ["washington", "commanders", "was", "commies"]),

    # NFC North
    ("Bears", "Chicago", "CHI", "Soldier Field", "Chicago", ["chicago", "bears", "chi"]),
    ("Lions", "Detroit", "DET", "Ford Field", "Detroit", ["detroit", "lions", "det"]),
    ("Packers", "Green Bay", "GB", "Lambeau Field", "Green Bay", ["green bay", "packers", "gb", "pack"]),
    ("Vikings", "Minnesota", "MIN", "U.S. Bank Stadium", "Minneapolis", ["minnesota", "vikings", "min", "vikes"]),

    # NFC South
    ("Falcons", "Atlanta", "ATL", "Mercedes-Benz Stadium", "Atlanta", ["atlanta", "falcons", "atl"]),
    ("Panthers", "Carolina", "CAR", "Bank of America Stadium", "Charlotte",
     ["carolina", "panthers", "car", "charlotte"]),
    ("Saints", "New Orleans", "NO", "Caesars Superdome", "New Orleans", ["new orleans", "saints", "no", "nola"]),
    ("Buccaneers", "Tampa Bay", "TB", "Raymond James Stadium", "Tampa",
     ["tampa bay", "buccaneers", "bucs", "tb", "tampa"]),

    # NFC West
    ("Cardinals", "Arizona", "ARI", "State Farm Stadium", "Glendale",
     ["arizona", "cardinals", "ari", "cards", "phoenix"]),
    ("Rams", "Los Angeles", "LAR", "SoFi Stadium", "Inglewood", ["rams", "lar", "la", "la rams", "los angeles rams"]),
    ("49ers", "San Francisco", "SF", "Levi's Stadium", "Santa Clara", ["san francisco", "49ers", "niners", "sf"]),
    ("Seahawks", "Seattle", "SEA", "Lumen Field", "Seattle", ["seattle", "seahawks", "sea"]),
])

# =============================================================================
# NBA TEAMS
# =============================================================================
NBA_TEAMS: Tuple[TeamRecord, ...] = _roster(League.NBA, [
    # Atlantic
    ("Celtics", "Boston", "BOS", "TD Garden", "Boston", ["boston", "celtics", "bos", "celts"]),
    ("Nets", "Brooklyn", "BKN", "Barclays Center", "Brooklyn", ["brooklyn", "nets", "bkn"]),
    ("Knicks", "New York", "NYK", "Madison Square Garden", "New York", ["new york", "knicks", "nyk", "ny knicks"]),
    ("76ers", "Philadelphia", "PHI", "Wells Fargo Center", "Philadelphia",
     ["philadelphia", "76ers", "sixers", "phi", "philly"]),
    ("Raptors", "Toronto", "TOR", "Scotiabank Arena", "Toronto", ["toronto", "raptors", "tor", "raps"]),

    # Central
    ("Bulls", "Chicago", "CHI", "United Center", "Chicago", ["chicago", "bulls", "chi"]),
    ("Cavaliers", "Cleveland", "CLE", "Rocket Mortgage FieldHouse", "Cleveland",
     ["cleveland", "cavaliers", "cavs", "cle"]),
    ("Pistons", "Detroit", "DET", "Little Caesars Arena", "Detroit", ["detroit", "pistons", "det"]),
    ("Pacers", "Indiana", "IND", "Gainbridge Fieldhouse", "Indianapolis",
     ["indiana", "pacers", "ind", "indianapolis"]),
    ("Bucks", "Milwaukee", "MIL", "Fiserv Forum", "Milwaukee", ["milwaukee", "bucks", "mil"]),

    # Southeast
    ("Hawks", "Atlanta", "ATL", "State Farm Arena", "Atlanta", ["atlanta", "hawks", "atl"]),
    ("Hornets", "Charlotte", "CHA", "Spectrum Center", "Charlotte", ["charlotte", "hornets", "cha"]),
    ("Heat", "Miami", "MIA", "Kaseya Center", "Miami", ["miami", "heat", "mia"]),
    ("Magic", "Orlando", "ORL", "Kia Center", "Orlando", ["orlando", "magic", "orl"]),
    ("Wizards", "Washington", "WAS", "Capital One Arena", "Washington", ["washington", "wizards", "was", "wsh"]),

    # Northwest
    ("Nuggets", "Denver", "DEN", "Ball Arena", "Denver", ["denver", "nuggets", "den"]),
    ("Timberwolves", "Minnesota", "MIN", "Target Center", "Minneapolis",
     ["minnesota", "timberwolves", "wolves", "min", "twolves"]),
    ("Thunder", "Oklahoma City", "OKC", "Paycom Center", "Oklahoma City", ["oklahoma city", "thunder", "okc"]),
    ("Trail Blazers", "Portland", "POR", "Moda Center", "Portland",
     ["portland", "trail blazers", "blazers", "por"]),
    ("Jazz", "Utah", "UTA", "Delta Center", "Salt Lake City", ["utah", "jazz", "uta", "salt lake"]),

    # Pacific
    ("Warriors", "Golden State", "GSW", "Chase Center", "San Francisco",
     ["golden state", "warriors", "gsw", "gs", "dubs", "san francisco"]),
    ("Clippers", "Los Angeles", "LAC", "Intuit Dome", "Inglewood", ["clippers", "lac", "la", "la clippers", "clips"]),
    ("Lakers", "Los Angeles", "LAL", "Crypto.com Arena", "Los Angeles", ["lakers", "lal", "la", "la lakers"]),
    ("Suns", "Phoenix", "PHX", "Footprint Center", "Phoenix", ["phoenix", "suns", "phx"]),
    ("Kings", "Sacramento", "SAC", "Golden 1 Center", "Sacramento", ["sacramento", "kings", "sac"]),

    # Southwest
    ("Mavericks", "Dallas", "DAL", "American Airlines Center", "Dallas", ["dallas", "mavericks", "mavs", "dal"]),
    ("Rockets", "Houston", "HOU", "Toyota Center", "Houston", ["houston", "rockets", "hou"]),
    ("Grizzlies", "Memphis", "MEM", "FedExForum", "Memphis", ["memphis", "grizzlies", "grizz", "mem"]),
    ("Pelicans", "New Orleans", "NOP", "Smoothie King Center", "New Orleans",
     ["new orleans", "pelicans", "pels", "nop", "nola"]),
    ("Spurs", "San Antonio", "SAS", "Frost Bank Center", "San Antonio", ["san antonio", "spurs", "sas"]),
])

# =============================================================================
# NHL TEAMS
# =============================================================================
NHL_TEAMS: Tuple[TeamRecord, ...] = _roster(League.NHL, [
    # Atlantic Division
    ("Bruins", "Boston", "BOS", "TD Garden", "Boston", ["boston", "bruins", "bos"]),
    ("Sabres", "Buffalo", "BUF", "KeyBank Center", "Buffalo", ["buffalo", "sabres", "buf"]),
    ("Red Wings", "Detroit", "DET", "Little Caesars Arena", "Detroit", ["detroit", "red wings", "wings", "det"]),
    ("Panthers", "Florida", "FLA", "Amerant Bank Arena", "Sunrise", ["florida", "panthers", "fla", "cats"]),
    ("Canadiens", "Montreal", "MTL", "Bell Centre", "Montreal", ["montreal", "canadiens", "habs", "mtl"]),
    ("Senators", "Ottawa", "OTT", "Canadian Tire Centre", "Ottawa", ["ottawa", "senators", "sens", "ott"]),
    ("Lightning", "Tampa Bay", "TBL", "Amalie Arena", "Tampa", ["tampa bay", "lightning", "bolts", "tbl", "tampa"]),
    ("Maple Leafs", "Toronto", "TOR", "Scotiabank Arena", "Toronto", ["toronto", "maple leafs", "leafs", "tor"]),

    # Metropolitan Division
    ("Hurricanes", "Carolina", "CAR", "Lenovo Center", "Raleigh", ["carolina", "hurricanes", "canes", "car"]),
    ("Blue Jackets", "Columbus", "CBJ", "Nationwide Arena", "Columbus",
     ["columbus", "blue jackets", "jackets", "cbj"]),
    ("Devils", "New Jersey", "NJD", "Prudential Center", "Newark", ["new jersey", "devils", "njd", "nj"]),
    ("Islanders", "New York", "NYI", "UBS Arena", "Elmont", ["islanders", "isles", "nyi", "ny islanders"]),
    ("Rangers", "New York", "NYR", "Madison Square Garden", "New York", ["rangers", "nyr", "ny rangers", "blueshirts"]),
    ("Flyers", "Philadelphia", "PHI", "Wells Fargo Center", "Philadelphia",
     ["philadelphia", "flyers", "phi", "philly"]),
    ("Penguins", "Pittsburgh", "PIT", "PPG Paints Arena", "Pittsburgh", ["pittsburgh", "penguins", "pens", "pit"]),
    ("Capitals", "Washington", "WSH", "Capital One Arena", "Washington", ["washington", "capitals", "caps", "wsh"]),

    # Central Division
    ("Blackhawks", "Chicago", "CHI", "United Center", "Chicago", ["chicago", "blackhawks", "chi"]),
    ("Avalanche", "Colorado", "COL", "Ball Arena", "Denver", ["colorado", "avalanche", "avs", "col"]),
    ("Stars", "Dallas", "DAL", "American Airlines Center", "Dallas", ["dallas", "stars", "dal"]),
    ("Wild", "Minnesota", "MIN", "Xcel Energy Center", "Saint Paul", ["minnesota", "wild", "min"]),
    ("Predators", "Nashville", "NSH", "Bridgestone Arena", "Nashville", ["nashville", "predators", "preds", "nsh"]),
    ("Blues", "St. Louis", "STL", "Enterprise Center", "St. Louis", ["st louis", "saint louis", "blues", "stl"]),
    ("Mammoth", "Utah", "UTA", "Delta Center", "Salt Lake City", ["utah", "mammoth", "utah hockey club", "uta"]),
    ("Jets", "Winnipeg", "WPG", "Canada Life Centre", "Winnipeg", ["winnipeg", "jets", "wpg"]),

    # Pacific Division
    ("Ducks", "Anaheim", "ANA", "Honda Center", "Anaheim", ["anaheim", "ducks", "ana"]),
    ("Flames", "Calgary", "CGY", "Scotiabank Saddledome", "Calgary", ["calgary", "flames", "cgy"]),
    ("Oilers", "Edmonton", "EDM", "Rogers Place", "Edmonton", ["edmonton", "oilers", "oil", "edm"]),
    ("Kings", "Los Angeles", "LAK", "Crypto.com Arena", "Los Angeles", ["kings", "lak", "la", "la kings"]),
    ("Sharks", "San Jose", "SJS", "SAP Center", "San Jose", ["san jose", "sharks", "sjs"]),
    ("Kraken", "Seattle", "SEA", "Climate Pledge Arena", "Seattle", ["seattle", "kraken", "sea"]),
    ("Canucks", "Vancouver", "VAN", "Rogers Arena", "Vancouver", ["vancouver", "canucks", "nucks", "van"]),
    ("Golden Knights", "Vegas", "VGK", "T-Mobile Arena", "Las Vegas",
     ["vegas", "golden knights", "knights", "vgk", "las vegas"]),
])

DEFAULT_ROSTER: Dict[League, Tuple[TeamRecord, ...]] = {
    League.NFL: NFL_TEAMS,
    League.NBA: NBA_TEAMS,
    League.NHL: NHL_TEAMS,
}

# Words that never identify a place on their own
GENERIC_PLACE_WORDS = {
    "the", "home", "city", "center", "centre", "arena", "stadium", "field",
    "garden", "park", "state", "bank", "new", "san", "st", "saint", "los", "las",
}


def league_from_keywords(text: str) -> Optional[League]:
    """
    Return the league named outright in ``text`` (``"NBA: ..."``, ``"hockey"``).

    When several leagues are named, the earliest mention wins.
    """
    normalized = normalize_text(text)
    if not normalized:
        return None

    padded = f" {normalized} "
    found: Optional[Tuple[int, League]] = None
    for league, keywords in LEAGUE_KEYWORDS.items():
        for keyword in keywords:
            index = padded.find(f" {keyword} ")
            if index != -1 and (found is None or index < found[0]):
                found = (index, league)
    return found[1] if found else None


def is_home_venue(place: str, team: TeamRecord) -> bool:
    """
    Determine if a place string names the home of a team.

    Compares the leading words of ``place`` against the team's home city,
    home venue and city. A place may be a shortened venue ("Arrowhead") but
    never a generic word ("the city", "the arena").
    """
    words = normalize_text(place).split()
    if words and words[0] == "the":
        words = words[1:]
    if not words:
        return False

    terms = {
        normalize_text(team.home_city),
        normalize_text(team.home_venue),
        normalize_text(team.city),
    }
    prefixes = [" ".join(words[:n]) for n in range(1, min(len(words), 3) + 1)]

    for prefix in prefixes:
        for term in terms:
            if prefix == term:
                return True
            if (
                len(prefix) >= 4
                and prefix not in GENERIC_PLACE_WORDS
                and term.startswith(prefix + " ")
            ):
                return True
    return False
