"""Tournament Organizer - pairings, results and standings for competitive events.

Supports single and double elimination, Swiss, and single and double round
robin, with an optional elimination playoff after a Swiss or round robin
stage.
"""

# Tournament Organizer
# Copyright (C) 2025  Tournament Organizer developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from tournamentorganizer.exceptions import (
    DuplicateIdException,
    DuplicatePlayerException,
    IncompleteRoundException,
    InsufficientPlayersException,
    InvalidConfigurationException,
    InvalidPlayerDataException,
    InvalidResultException,
    MatchAlreadyCompleteException,
    NoPlayoffEligibleException,
    PairingException,
    RoundLimitExceededException,
    TournamentOrganizerException,
    TournamentStateException,
    UnknownMatchException,
    UnknownPlayerException,
    UnknownTournamentException,
    ValidationException,
)
from tournamentorganizer.manager import Manager
from tournamentorganizer.models.enums import TournamentState
from tournamentorganizer.models.player import Player
from tournamentorganizer.models.tournament import (
    CutRule,
    Match,
    PlayerStanding,
    PlayoffConfig,
    RoundData,
    ScoringConfig,
    TournamentConfig,
)
from tournamentorganizer.models.tournament.tournament import Tournament

__version__ = "0.1.0"

__all__ = [
    "CutRule",
    "DuplicateIdException",
    "DuplicatePlayerException",
    "IncompleteRoundException",
    "InsufficientPlayersException",
    "InvalidConfigurationException",
    "InvalidPlayerDataException",
    "InvalidResultException",
    "Manager",
    "Match",
    "MatchAlreadyCompleteException",
    "NoPlayoffEligibleException",
    "PairingException",
    "Player",
    "PlayerStanding",
    "PlayoffConfig",
    "RoundData",
    "RoundLimitExceededException",
    "ScoringConfig",
    "Tournament",
    "TournamentConfig",
    "TournamentOrganizerException",
    "TournamentState",
    "TournamentStateException",
    "UnknownMatchException",
    "UnknownPlayerException",
    "UnknownTournamentException",
    "ValidationException",
]
