"""Exceptions for use in Tournament Organizer"""

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

from typing import Optional

# ========== Base Application Exception ==========


class TournamentOrganizerException(Exception):
    """Base exception for all Tournament Organizer errors.

    All custom exceptions in the library inherit from this class, so callers
    can catch every library error with a single except clause.

    Parameters
    ----------
    message : str
        Human readable description of the problem.
    tournament_id : str, optional
        Tournament the failed operation targeted.
    entity_id : str, optional
        Offending player or match identifier.
    """

    def __init__(
        self,
        message: str = "",
        tournament_id: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.tournament_id = tournament_id
        self.entity_id = entity_id


# ========== Validation Exceptions ==========


class ValidationException(TournamentOrganizerException):
    """Malformed configuration or result data, rejected before any mutation."""

    pass


class InvalidConfigurationException(ValidationException):
    """Raised when configuration data is invalid."""

    pass


class InvalidResultException(ValidationException):
    """Raised when game counts are inconsistent with the best-of setting."""

    pass


class UnknownPlayerException(ValidationException):
    """Raised when a player id is not part of the tournament."""

    pass


class UnknownMatchException(ValidationException):
    """Raised when a match id is not part of the tournament."""

    pass


class UnknownTournamentException(ValidationException):
    """Raised when a tournament id is not registered with the manager."""

    pass


class DuplicatePlayerException(ValidationException):
    """Raised when attempting to add a player that already exists."""

    pass


class DuplicateIdException(ValidationException):
    """Raised when a tournament id is already registered."""

    pass


class InvalidPlayerDataException(ValidationException):
    """Raised when player data is invalid or incomplete."""

    pass


# ========== State Exceptions ==========


class TournamentStateException(TournamentOrganizerException):
    """Raised when tournament is in an invalid state for the requested operation."""

    pass


class MatchAlreadyCompleteException(TournamentStateException):
    """Raised when recording a result on a match that is already complete."""

    pass


class IncompleteRoundException(TournamentStateException):
    """Raised when advancing before every match of the round is resolved."""

    pass


# ========== Pairing Exceptions ==========


class PairingException(TournamentOrganizerException):
    """Base exception for pairing-related errors."""

    pass


class InsufficientPlayersException(PairingException):
    """Raised when fewer than two active players are available."""

    pass


class RoundLimitExceededException(PairingException):
    """Raised when a round is requested beyond the planned total."""

    pass


class NoPlayoffEligibleException(PairingException):
    """Raised when the playoff cut leaves nobody eligible."""

    pass
