"""Pytest configuration and shared fixtures for VGC Corner tests."""

import pytest
from pathlib import Path
import tempfile

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))


# ====================
# Configuration Fixtures
# ====================

@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ====================
# Battle Log Fixtures
# ====================

SINGLES_LOG = """|j|☆Player1
|j|☆Player2
|html|<table width="100%"><tr><td align="left">Player1</td><td align="right">Player2</td></tr></table>
|t:|1763188046
|gametype|doubles
|player|p1|Player1|giovanni|1487
|player|p2|Player2|steven|1398
|gen|9
|tier|[Gen 9] VGC 2025 Reg H (Bo3)
|rated|
|rule|Species Clause: Limit one of each Pokémon
|rule|Item Clause: Limit 1 of each item
|clearpoke
|poke|p1|Pikachu, L50, M|
|poke|p1|Charizard, L50, M|
|poke|p2|Blastoise, L50, M|
|poke|p2|Dragonite, L50, M|
|teampreview|2
|teamsize|p1|2
|teamsize|p2|2
|start
|switch|p1a: Pikachu|Pikachu, L50, M|100/100
|switch|p2a: Blastoise|Blastoise, L50, M|100/100
|turn|1
|move|p1a: Pikachu|Thunderbolt|p2a: Blastoise
|-supereffective|p2a: Blastoise
|-damage|p2a: Blastoise|65/100
|move|p2a: Blastoise|Hydro Pump|p1a: Pikachu
|-supereffective|p1a: Pikachu
|-damage|p1a: Pikachu|30/100
|upkeep
|turn|2
|move|p1a: Pikachu|Thunder Wave|p2a: Blastoise
|-damage|p2a: Blastoise|60/100
|move|p2a: Blastoise|Protect|p2a: Blastoise
|-singleturn|p2a: Blastoise|Protect
|upkeep
|turn|3
|switch|p1a: Charizard|Charizard, L50, M|100/100
|move|p2a: Blastoise|Ice Beam|p1a: Charizard
|-supereffective|p1a: Charizard
|-damage|p1a: Charizard|40/100
|upkeep
|turn|4
|move|p1a: Charizard|Flamethrower|p2a: Blastoise
|-resisted|p2a: Blastoise
|-damage|p2a: Blastoise|30/100
|move|p2a: Blastoise|Waterfall|p1a: Charizard
|-supereffective|p1a: Charizard
|-damage|p1a: Charizard|0 fnt
|faint|p1a: Charizard
|upkeep
|
|switch|p1a: Pikachu|Pikachu, L50, M|30/100
|turn|5
|move|p1a: Pikachu|Quick Attack|p2a: Blastoise
|-damage|p2a: Blastoise|20/100
|move|p2a: Blastoise|Waterfall|p1a: Pikachu
|-supereffective|p1a: Pikachu
|-damage|p1a: Pikachu|0 fnt
|faint|p1a: Pikachu
|upkeep
|
|win|Player2"""


SWITCHES_LOG = """|j|☆Player1
|j|☆Player2
|player|p1|Player1|test|1500
|player|p2|Player2|test|1500
|tier|[Gen 9] VGC 2025 Reg H (Bo3)
|poke|p1|Poke1, L50|
|poke|p1|Poke2, L50|
|poke|p1|Poke3, L50|
|poke|p2|Poke1, L50|
|poke|p2|Poke2, L50|
|teamsize|p1|3
|teamsize|p2|2
|start
|turn|1
|switch|p1a: Poke1|Poke1, L50|100/100
|switch|p2a: Poke1|Poke1, L50|100/100
|move|p1a: Poke1|Tackle|p2a: Poke1
|move|p2a: Poke1|Tackle|p1a: Poke1
|upkeep
|turn|2
|switch|p1a: Poke2|Poke2, L50|100/100
|switch|p2a: Poke2|Poke2, L50|100/100
|move|p1a: Poke2|Tackle|p2a: Poke2
|move|p2a: Poke2|Tackle|p1a: Poke2
|upkeep
|win|Player1"""


MULTIPLE_FAINTS_LOG = """|j|☆Player1
|j|☆Player2
|player|p1|Player1|test|1500
|player|p2|Player2|test|1500
|tier|[Gen 9] VGC 2025 Reg H (Bo3)
|poke|p1|Poke1, L50|
|poke|p1|Poke2, L50|
|poke|p2|Poke1, L50|
|poke|p2|Poke2, L50|
|poke|p2|Poke3, L50|
|teamsize|p1|2
|teamsize|p2|3
|start
|turn|1
|move|p1a: Poke1|Tackle|p2a: Poke1
|-damage|p2a: Poke1|0 fnt
|faint|p2a: Poke1
|move|p2a: Poke2|Tackle|p1a: Poke1
|upkeep
|turn|2
|switch|p2a: Poke3|Poke3, L50|100/100
|move|p1a: Poke1|Tackle|p2a: Poke3
|-damage|p2a: Poke3|0 fnt
|faint|p2a: Poke3
|move|p2a: Poke2|Tackle|p1a: Poke1
|-damage|p1a: Poke1|0 fnt
|faint|p1a: Poke1
|upkeep
|turn|3
|switch|p1a: Poke2|Poke2, L50|100/100
|move|p1a: Poke2|Tackle|p2a: Poke2
|move|p2a: Poke2|Tackle|p1a: Poke2
|upkeep
|win|Player1"""


MALFORMED_LOG = """this is not a valid showdown log
it has no pipe delimiters
and no proper structure"""


DOUBLES_LOG = """|j|☆Alice
|t:|1700000000
|gametype|doubles
|player|p1|Alice|1|
|player|p2|Bob|2|
|gen|9
|tier|[Gen 9] VGC 2024 Reg G
|poke|p1|Whimsicott, L50, F|
|poke|p1|Incineroar, L50, M|
|poke|p1|Rillaboom, L50, M|
|poke|p1|Urshifu-Rapid-Strike, L50, M|
|poke|p2|Torkoal, L50, M|
|poke|p2|Dusclops, L50, F|
|poke|p2|Farigiraf, L50, M|
|poke|p2|Ursaluna, L50, M|
|teampreview|4
|showteam|p1|Whimsicott||Focus Sash|Prankster|Tailwind,Moonblast,Encore,Protect|||F|||50|,,,,,Ghost]Incineroar||Sitrus Berry|Intimidate|Fake Out,Flare Blitz,Parting Shot,Knock Off|||M|||50|,,,,,Grass]Rillaboom||Assault Vest|Grassy Surge|Grassy Glide,Wood Hammer,U-turn,Fake Out|||M|||50|,,,,,Fire]Urshifu-Rapid-Strike||Choice Scarf|Unseen Fist|Surging Strikes,Close Combat,Aqua Jet,U-turn|||M|||50|,,,,,Water
|teamsize|p1|4
|teamsize|p2|4
|start
|switch|p1a: Whimsicott|Whimsicott, L50, F|100/100
|switch|p1b: Incineroar|Incineroar, L50, M|100/100
|switch|p2a: Torkoal|Torkoal, L50, M|100/100
|switch|p2b: Dusclops|Dusclops, L50, F|100/100
|-weather|SunnyDay|[from] ability: Drought|[of] p2a: Torkoal
|-ability|p1b: Incineroar|Intimidate|boost
|-unboost|p2a: Torkoal|atk|1
|turn|1
|move|p1b: Incineroar|Fake Out|p2b: Dusclops
|-damage|p2b: Dusclops|94/100
|cant|p2b: Dusclops|flinch
|move|p1a: Whimsicott|Tailwind|p1a: Whimsicott
|-sidestart|p1: Alice|move: Tailwind
|move|p2a: Torkoal|Eruption|p1b: Incineroar|[spread] p1a,p1b
|-crit|p1a: Whimsicott
|-damage|p1a: Whimsicott|0 fnt
|-damage|p1b: Incineroar|52/100
|faint|p1a: Whimsicott
|-weather|SunnyDay|[upkeep]
|upkeep
|
|switch|p1a: Urshifu|Urshifu-Rapid-Strike, L50, M|100/100
|turn|2
|move|p1a: Urshifu|Surging Strikes|p2b: Dusclops
|-crit|p2b: Dusclops
|-damage|p2b: Dusclops|40/100
|move|p2b: Dusclops|Trick Room|p2b: Dusclops
|-fieldstart|move: Trick Room|[of] p2b: Dusclops
|move|p1b: Incineroar|Parting Shot|p2a: Torkoal
|-unboost|p2a: Torkoal|atk|1
|-unboost|p2a: Torkoal|spa|1
|switch|p1b: Rillaboom|Rillaboom, L50, M|100/100
|-fieldstart|move: Grassy Terrain|[from] ability: Grassy Surge|[of] p1b: Rillaboom
|move|p2a: Torkoal|Protect|p2a: Torkoal
|-singleturn|p2a: Torkoal|Protect
|-heal|p2b: Dusclops|52/100|[from] Grassy Terrain
|upkeep
|turn|3
|move|p1b: Rillaboom|Grassy Glide|p2b: Dusclops
|-damage|p2b: Dusclops|0 fnt
|faint|p2b: Dusclops
|move|p2a: Torkoal|Heat Wave|p1a: Urshifu|[spread] p1a,p1b
|-resisted|p1a: Urshifu
|-damage|p1a: Urshifu|70/100
|-damage|p1b: Rillaboom|10/100
|-status|p1b: Rillaboom|brn
|upkeep
|
|switch|p2b: Ursaluna|Ursaluna, L50, M|100/100
|turn|4
|move|p2b: Ursaluna|Blood Moon|p1b: Rillaboom
|-damage|p1b: Rillaboom|0 fnt
|faint|p1b: Rillaboom
|move|p1a: Urshifu|Surging Strikes|p2a: Torkoal
|-supereffective|p2a: Torkoal
|-damage|p2a: Torkoal|0 fnt
|faint|p2a: Torkoal
|upkeep
|-message|Bob forfeited.
|
|win|Alice"""


@pytest.fixture
def singles_log() -> str:
    """Five-turn battle won by Player2 after both of Player1's members faint."""
    return SINGLES_LOG


@pytest.fixture
def switches_log() -> str:
    """Two turns with four switch actions split across both sides."""
    return SWITCHES_LOG


@pytest.fixture
def multiple_faints_log() -> str:
    """Battle with two faints on side 2 and one on side 1."""
    return MULTIPLE_FAINTS_LOG


@pytest.fixture
def malformed_log() -> str:
    """Text with no delimiter-prefixed lines."""
    return MALFORMED_LOG


@pytest.fixture
def doubles_log() -> str:
    """Four-turn doubles battle with team sheets, field effects and spread moves."""
    return DOUBLES_LOG
