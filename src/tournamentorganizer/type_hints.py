"""Type hints used in Tournament Organizer."""

from typing import Dict, List, Literal, Optional, Tuple

TournamentFormat = Literal[
    "single_elimination",
    "double_elimination",
    "swiss",
    "round_robin",
    "double_round_robin",
]
PlayoffFormat = Literal["none", "single_elimination", "double_elimination"]
CutType = Literal["rank", "points"]
Sorting = Literal["ascending", "descending", "none"]
MatchStatus = Literal["pending", "complete"]
Stage = Literal["main", "playoffs"]

TiebreakMethod = Literal[
    "median_buchholz",
    "solkoff",
    "sonneborn_berger",
    "cumulative",
    "versus",
    "game_win_percentage",
    "opponent_game_win_percentage",
    "opponent_match_win_percentage",
    "opponent_opponent_match_win_percentage",
]

# Player id, or None for an empty bracket slot / bye
MaybePlayerId = Optional[str]
# One scheduled pairing by player id
PairingIDs = Tuple[str, MaybePlayerId]
# All pairings for one round
RoundSchedule = List[PairingIDs]
TiebreakValues = Dict[str, float]

#  LocalWords:  PairingIDs RoundSchedule
