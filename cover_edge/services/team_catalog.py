"""
Static team catalogue: NBA, NFL and the major college programs.

This is the single source of truth for team names, abbreviations, aliases
and home venues.  Rows are plain tuples so the table stays readable; call
``build_catalog()`` to get immutable ``Team`` records.

City names and nicknames are added to each team's alias set automatically.
Only colloquial forms ("niners", "pats", "philly") need to be listed.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from cover_edge.core.sport_config import League
from cover_edge.models import Team

# (nickname, city, abbreviation, aliases, home venue, home city)
_ProRow = Tuple[str, str, str, Tuple[str, ...], str, str]

NFL_TEAMS: List[_ProRow] = [
    # AFC East
    ("Bills", "Buffalo", "BUF", ("buffalo bills",), "Highmark Stadium", "Orchard Park"),
    ("Dolphins", "Miami", "MIA", ("fins", "phins"), "Hard Rock Stadium", "Miami Gardens"),
    ("Patriots", "New England", "NE", ("pats", "boston"), "Gillette Stadium", "Foxborough"),
    ("Jets", "New York", "NYJ", ("ny jets", "gang green"), "MetLife Stadium", "East Rutherford"),
    # AFC North
    ("Ravens", "Baltimore", "BAL", (), "M&T Bank Stadium", "Baltimore"),
    ("Bengals", "Cincinnati", "CIN", ("cincy",), "Paycor Stadium", "Cincinnati"),
    ("Browns", "Cleveland", "CLE", (), "Huntington Bank Field", "Cleveland"),
    ("Steelers", "Pittsburgh", "PIT", (), "Acrisure Stadium", "Pittsburgh"),
    # AFC South
    ("Texans", "Houston", "HOU", (), "NRG Stadium", "Houston"),
    ("Colts", "Indianapolis", "IND", ("indy",), "Lucas Oil Stadium", "Indianapolis"),
    ("Jaguars", "Jacksonville", "JAX", ("jags",), "EverBank Stadium", "Jacksonville"),
    ("Titans", "Tennessee", "TEN", ("nashville",), "Nissan Stadium", "Nashville"),
    # AFC West
    ("Broncos", "Denver", "DEN", (), "Empower Field at Mile High", "Denver"),
    ("Chiefs", "Kansas City", "KC", ("kc chiefs",), "Arrowhead Stadium", "Kansas City"),
    ("Raiders", "Las Vegas", "LV", ("vegas",), "Allegiant Stadium", "Las Vegas"),
    ("Chargers", "Los Angeles", "LAC", ("la chargers", "bolts"), "SoFi Stadium", "Inglewood"),
    # NFC East
    ("Cowboys", "Dallas", "DAL", ("boys",), "AT&T Stadium", "Arlington"),
    ("Giants", "New York", "NYG", ("ny giants", "big blue"), "MetLife Stadium", "East Rutherford"),
    ("Eagles", "Philadelphia", "PHI", ("philly", "birds"), "Lincoln Financial Field", "Philadelphia"),
    ("Commanders", "Washington", "WAS", (), "Northwest Stadium", "Landover"),
    # NFC North
    ("Bears", "Chicago", "CHI", (), "Soldier Field", "Chicago"),
    ("Lions", "Detroit", "DET", (), "Ford Field", "Detroit"),
    ("Packers", "Green Bay", "GB", ("pack",), "Lambeau Field", "Green Bay"),
    ("Vikings", "Minnesota", "MIN", ("vikes",), "U.S. Bank Stadium", "Minneapolis"),
    # NFC South
    ("Falcons", "Atlanta", "ATL", (), "Mercedes-Benz Stadium", "Atlanta"),
    ("Panthers", "Carolina", "CAR", ("charlotte",), "Bank of America Stadium", "Charlotte"),
    ("Saints", "New Orleans", "NO", ("nola",), "Caesars Superdome", "New Orleans"),
    ("Buccaneers", "Tampa Bay", "TB", ("bucs", "tampa"), "Raymond James Stadium", "Tampa"),
    # NFC West
    ("Cardinals", "Arizona", "ARI", ("cards",), "State Farm Stadium", "Glendale"),
    ("Rams", "Los Angeles", "LAR", ("la rams",), "SoFi Stadium", "Inglewood"),
    ("49ers", "San Francisco", "SF", ("niners", "sf 49ers"), "Levi's Stadium", "Santa Clara"),
    ("Seahawks", "Seattle", "SEA", ("hawks",), "Lumen Field", "Seattle"),
]

NBA_TEAMS: List[_ProRow] = [
    # Atlantic
    ("Celtics", "Boston", "BOS", (), "TD Garden", "Boston"),
    ("Nets", "Brooklyn", "BKN", (), "Barclays Center", "Brooklyn"),
    ("Knicks", "New York", "NYK", ("ny knicks",), "Madison Square Garden", "New York"),
    ("76ers", "Philadelphia", "PHI", ("sixers", "philly"), "Wells Fargo Center", "Philadelphia"),
    ("Raptors", "Toronto", "TOR", ("raps",), "Scotiabank Arena", "Toronto"),
    # Central
    ("Bulls", "Chicago", "CHI", (), "United Center", "Chicago"),
    ("Cavaliers", "Cleveland", "CLE", ("cavs",), "Rocket Arena", "Cleveland"),
    ("Pistons", "Detroit", "DET", (), "Little Caesars Arena", "Detroit"),
    ("Pacers", "Indiana", "IND", ("indianapolis",), "Gainbridge Fieldhouse", "Indianapolis"),
    ("Bucks", "Milwaukee", "MIL", (), "Fiserv Forum", "Milwaukee"),
    # Southeast
    ("Hawks", "Atlanta", "ATL", (), "State Farm Arena", "Atlanta"),
    ("Hornets", "Charlotte", "CHA", (), "Spectrum Center", "Charlotte"),
    ("Heat", "Miami", "MIA", (), "Kaseya Center", "Miami"),
    ("Magic", "Orlando", "ORL", (), "Kia Center", "Orlando"),
    ("Wizards", "Washington", "WAS", ("wiz",), "Capital One Arena", "Washington"),
    # Northwest
    ("Nuggets", "Denver", "DEN", ("nugs",), "Ball Arena", "Denver"),
    ("Timberwolves", "Minnesota", "MIN", ("wolves", "twolves"), "Target Center", "Minneapolis"),
    ("Thunder", "Oklahoma City", "OKC", (), "Paycom Center", "Oklahoma City"),
    ("Trail Blazers", "Portland", "POR", ("blazers",), "Moda Center", "Portland"),
    ("Jazz", "Utah", "UTA", ("salt lake",), "Delta Center", "Salt Lake City"),
    # Pacific
    ("Warriors", "Golden State", "GSW", ("dubs", "san francisco"), "Chase Center", "San Francisco"),
    ("Clippers", "Los Angeles", "LAC", ("la clippers", "clips"), "Intuit Dome", "Inglewood"),
    ("Lakers", "Los Angeles", "LAL", ("la lakers",), "Crypto.com Arena", "Los Angeles"),
    ("Suns", "Phoenix", "PHX", (), "Footprint Center", "Phoenix"),
    ("Kings", "Sacramento", "SAC", (), "Golden 1 Center", "Sacramento"),
    # Southwest
    ("Mavericks", "Dallas", "DAL", ("mavs",), "American Airlines Center", "Dallas"),
    ("Rockets", "Houston", "HOU", (), "Toyota Center", "Houston"),
    ("Grizzlies", "Memphis", "MEM", ("grizz",), "FedExForum", "Memphis"),
    ("Pelicans", "New Orleans", "NOP", ("pels", "nola"), "Smoothie King Center", "New Orleans"),
    ("Spurs", "San Antonio", "SAS", (), "Frost Bank Center", "San Antonio"),
]

# (school, mascot, abbreviation, aliases, home city, football venue, basketball venue)
_SchoolRow = Tuple[str, str, str, Tuple[str, ...], str, Optional[str], Optional[str]]

COLLEGE_PROGRAMS: List[_SchoolRow] = [
    ("Alabama", "Crimson Tide", "ALA", ("bama", "roll tide"), "Tuscaloosa",
     "Bryant-Denny Stadium", "Coleman Coliseum"),
    ("Auburn", "Tigers", "AUB", ("war eagle",), "Auburn",
     "Jordan-Hare Stadium", "Neville Arena"),
    ("Georgia", "Bulldogs", "UGA", ("dawgs",), "Athens",
     "Sanford Stadium", "Stegeman Coliseum"),
    ("Florida", "Gators", "FLA", (), "Gainesville",
     "Ben Hill Griffin Stadium", "O'Connell Center"),
    ("LSU", "Tigers", "LSU", ("louisiana state",), "Baton Rouge",
     "Tiger Stadium", "Pete Maravich Assembly Center"),
    ("Tennessee", "Volunteers", "TENN", ("vols",), "Knoxville",
     "Neyland Stadium", "Thompson-Boling Arena"),
    ("Texas", "Longhorns", "TEX", ("horns",), "Austin",
     "Darrell K Royal Stadium", "Moody Center"),
    ("Texas A&M", "Aggies", "TAMU", ("a&m",), "College Station",
     "Kyle Field", "Reed Arena"),
    ("Oklahoma", "Sooners", "OU", (), "Norman",
     "Gaylord Family Oklahoma Memorial Stadium", "Lloyd Noble Center"),
    ("Ohio State", "Buckeyes", "OSU", ("ohio st", "tosu"), "Columbus",
     "Ohio Stadium", "Value City Arena"),
    ("Michigan", "Wolverines", "MICH", (), "Ann Arbor",
     "Michigan Stadium", "Crisler Center"),
    ("Michigan State", "Spartans", "MSU", ("michigan st", "sparty"), "East Lansing",
     "Spartan Stadium", "Breslin Center"),
    ("Penn State", "Nittany Lions", "PSU", ("penn st",), "State College",
     "Beaver Stadium", "Bryce Jordan Center"),
    ("Notre Dame", "Fighting Irish", "ND", ("irish",), "South Bend",
     "Notre Dame Stadium", "Purcell Pavilion"),
    ("Clemson", "Tigers", "CLEM", (), "Clemson",
     "Memorial Stadium", "Littlejohn Coliseum"),
    ("Florida State", "Seminoles", "FSU", ("noles", "florida st"), "Tallahassee",
     "Doak Campbell Stadium", "Donald L. Tucker Center"),
    ("Oregon", "Ducks", "ORE", (), "Eugene",
     "Autzen Stadium", "Matthew Knight Arena"),
    ("USC", "Trojans", "USC", ("southern cal",), "Los Angeles",
     "Los Angeles Memorial Coliseum", "Galen Center"),
    ("UCLA", "Bruins", "UCLA", (), "Los Angeles",
     "Rose Bowl", "Pauley Pavilion"),
    ("Wisconsin", "Badgers", "WIS", (), "Madison",
     "Camp Randall Stadium", "Kohl Center"),
    ("Iowa", "Hawkeyes", "IOWA", (), "Iowa City",
     "Kinnick Stadium", "Carver-Hawkeye Arena"),
    ("Duke", "Blue Devils", "DUKE", (), "Durham",
     "Wallace Wade Stadium", "Cameron Indoor Stadium"),
    ("North Carolina", "Tar Heels", "UNC", ("heels",), "Chapel Hill",
     "Kenan Memorial Stadium", "Dean Smith Center"),
    ("Kansas", "Jayhawks", "KU", (), "Lawrence",
     "David Booth Kansas Memorial Stadium", "Allen Fieldhouse"),
    ("Kentucky", "Wildcats", "UK", (), "Lexington",
     "Kroger Field", "Rupp Arena"),
    ("Arizona", "Wildcats", "ARIZ", ("zona",), "Tucson",
     "Arizona Stadium", "McKale Center"),
    ("Baylor", "Bears", "BAY", (), "Waco",
     "McLane Stadium", "Foster Pavilion"),
    ("Purdue", "Boilermakers", "PUR", ("boilers",), "West Lafayette",
     "Ross-Ade Stadium", "Mackey Arena"),
    ("UConn", "Huskies", "CONN", ("connecticut",), "Storrs",
     None, "Gampel Pavilion"),
    ("Gonzaga", "Bulldogs", "GONZ", ("zags",), "Spokane",
     None, "McCarthey Athletic Center"),
    ("Villanova", "Wildcats", "NOVA", ("nova",), "Villanova",
     None, "Finneran Pavilion"),
    ("Marquette", "Golden Eagles", "MARQ", (), "Milwaukee",
     None, "Fiserv Forum"),
    ("Creighton", "Bluejays", "CREI", ("jays",), "Omaha",
     None, "CHI Health Center"),
    ("Iowa State", "Cyclones", "ISU", ("iowa st", "clones"), "Ames",
     "Jack Trice Stadium", "Hilton Coliseum"),
]


def _markers(*places: Optional[str]) -> frozenset:
    return frozenset(p.lower() for p in places if p)


def _pro_teams(rows: List[_ProRow], league: League) -> List[Team]:
    return [
        Team(
            name=name,
            city=city,
            abbreviation=abbr,
            league=league,
            aliases=frozenset(a.lower() for a in aliases),
            home_markers=_markers(city, home_city, venue),
        )
        for name, city, abbr, aliases, venue, home_city in rows
    ]


def _college_teams(league: League) -> List[Team]:
    teams: List[Team] = []
    for school, mascot, abbr, aliases, home_city, fb_venue, bb_venue in COLLEGE_PROGRAMS:
        venue = fb_venue if league is League.CFB else bb_venue
        if venue is None:
            continue
        teams.append(
            Team(
                name=mascot,
                city=school,
                abbreviation=abbr,
                league=league,
                aliases=frozenset(a.lower() for a in aliases),
                home_markers=_markers(home_city, venue),
            )
        )
    return teams


def build_catalog() -> Tuple[Team, ...]:
    """Return every shipped team, NFL first, then NBA, CFB, CBB."""
    return tuple(
        _pro_teams(NFL_TEAMS, League.NFL)
        + _pro_teams(NBA_TEAMS, League.NBA)
        + _college_teams(League.CFB)
        + _college_teams(League.CBB)
    )
