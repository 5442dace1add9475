from tournamentorganizer.controllers.tournament.result_recorder import ResultRecorder
from tournamentorganizer.controllers.tournament.round_manager import RoundManager
from tournamentorganizer.controllers.tournament.standings_calculator import (
    StandingsCalculator,
)
from tournamentorganizer.controllers.tournament.tiebreak_calculator import (
    PlayerRecord,
    TiebreakCalculator,
)

__all__ = [
    "PlayerRecord",
    "ResultRecorder",
    "RoundManager",
    "StandingsCalculator",
    "TiebreakCalculator",
]
