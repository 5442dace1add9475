from tournamentorganizer.models.tournament.match import Match
from tournamentorganizer.models.tournament.pairing_history import PairingHistory
from tournamentorganizer.models.tournament.round_data import RoundData
from tournamentorganizer.models.tournament.standing import PlayerStanding
from tournamentorganizer.models.tournament.tournament_config import (
    CutRule,
    PlayoffConfig,
    ScoringConfig,
    TournamentConfig,
)

__all__ = [
    "CutRule",
    "Match",
    "PairingHistory",
    "PlayerStanding",
    "PlayoffConfig",
    "RoundData",
    "ScoringConfig",
    "TournamentConfig",
]
