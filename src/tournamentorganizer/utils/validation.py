"""Validation utilities for Tournament Organizer.

This module provides reusable validation functions with consistent error handling.
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

import math
from typing import Any, Iterable, Optional

from tournamentorganizer.constants import TIEBREAK_METHODS
from tournamentorganizer.exceptions import (
    InvalidConfigurationException,
    InvalidResultException,
)

# Outcomes reported by validate_game_counts
OUTCOME_PLAYER_ONE = "player_one"
OUTCOME_PLAYER_TWO = "player_two"
OUTCOME_DRAW = "draw"


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Any = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


def _invalid(message: str) -> ValidationResult:
    return ValidationResult(is_valid=False, error_message=message)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ========== Configuration Validation ==========


def validate_best_of(value: Any) -> ValidationResult:
    """Validate the number of games per match (a positive integer)."""
    if not isinstance(value, int) or isinstance(value, bool):
        return _invalid(f"best_of must be an integer, got {value!r}")
    if value < 1:
        return _invalid(f"best_of must be at least 1, got {value}")
    return ValidationResult(is_valid=True, sanitized_value=value)


def validate_points(name: str, value: Any) -> ValidationResult:
    """Validate a point value. Zero and negative values are legitimate."""
    if not _is_number(value) or not math.isfinite(value):
        return _invalid(f"{name} points must be a finite number, got {value!r}")
    return ValidationResult(is_valid=True, sanitized_value=float(value))


def validate_tiebreaks(methods: Iterable[Any]) -> ValidationResult:
    """Validate an ordered list of tiebreak keys.

    Unknown keys and repeated keys are rejected.
    """
    if isinstance(methods, str):
        return _invalid("tiebreaks must be a list of method names, not a string")
    seen = []
    for method in methods:
        if method not in TIEBREAK_METHODS:
            return _invalid(f"Unknown tiebreak method: {method!r}")
        if method in seen:
            return _invalid(f"Tiebreak method listed twice: {method!r}")
        seen.append(method)
    return ValidationResult(is_valid=True, sanitized_value=tuple(seen))


def validate_choice(name: str, value: Any, choices: Iterable[str]) -> ValidationResult:
    """Validate that ``value`` is one of ``choices``."""
    choices = tuple(choices)
    if value not in choices:
        return _invalid(f"{name} must be one of {', '.join(choices)}; got {value!r}")
    return ValidationResult(is_valid=True, sanitized_value=value)


def require_valid(result: ValidationResult, tournament_id: Optional[str] = None):
    """Return the sanitized value or raise InvalidConfigurationException."""
    if not result.is_valid:
        raise InvalidConfigurationException(
            result.error_message, tournament_id=tournament_id
        )
    return result.sanitized_value


# ========== Result Validation ==========


def validate_game_counts(
    player_one_wins: Any, player_two_wins: Any, draws: Any, best_of: int
) -> ValidationResult:
    """Validate game counts against a best-of setting and decide the outcome.

    A side reaching the majority (``best_of // 2 + 1``) wins. Without a
    majority the result is only accepted once every game is accounted for,
    in which case more game wins decides and equal wins is a draw.

    Returns:
        ValidationResult whose ``sanitized_value`` is ``OUTCOME_PLAYER_ONE``,
        ``OUTCOME_PLAYER_TWO`` or ``OUTCOME_DRAW``.

    Example:
        >>> validate_game_counts(3, 1, 0, 5).sanitized_value
        'player_one'
    """
    for label, count in (
        ("player one wins", player_one_wins),
        ("player two wins", player_two_wins),
        ("draws", draws),
    ):
        if not isinstance(count, int) or isinstance(count, bool):
            return _invalid(f"{label} must be an integer, got {count!r}")
        if count < 0:
            return _invalid(f"{label} cannot be negative, got {count}")

    played = player_one_wins + player_two_wins + draws
    if played > best_of:
        return _invalid(
            f"{played} games reported but the match is best of {best_of}"
        )

    majority = best_of // 2 + 1
    if player_one_wins >= majority:
        return ValidationResult(is_valid=True, sanitized_value=OUTCOME_PLAYER_ONE)
    if player_two_wins >= majority:
        return ValidationResult(is_valid=True, sanitized_value=OUTCOME_PLAYER_TWO)

    if played < best_of:
        return _invalid(
            f"Result {player_one_wins}-{player_two_wins}-{draws} is undecided: "
            f"{majority} game wins or all {best_of} games are required"
        )
    if player_one_wins > player_two_wins:
        return ValidationResult(is_valid=True, sanitized_value=OUTCOME_PLAYER_ONE)
    if player_two_wins > player_one_wins:
        return ValidationResult(is_valid=True, sanitized_value=OUTCOME_PLAYER_TWO)
    return ValidationResult(is_valid=True, sanitized_value=OUTCOME_DRAW)


def validate_game_counts_strict(
    player_one_wins: int,
    player_two_wins: int,
    draws: int,
    best_of: int,
    tournament_id: Optional[str] = None,
    match_id: Optional[str] = None,
) -> str:
    """Validate game counts and raise if invalid.

    Raises:
        InvalidResultException: If the counts do not describe a finished match
    """
    result = validate_game_counts(player_one_wins, player_two_wins, draws, best_of)
    if not result.is_valid:
        raise InvalidResultException(
            result.error_message, tournament_id=tournament_id, entity_id=match_id
        )
    return result.sanitized_value
