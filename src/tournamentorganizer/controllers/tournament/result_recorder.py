"""Result recording and validation for tournaments.

This module handles recording match results with proper validation and error checking.
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

from typing import Dict, List, Optional, Tuple

from tournamentorganizer.exceptions import (
    InvalidResultException,
    MatchAlreadyCompleteException,
    TournamentStateException,
    UnknownMatchException,
)
from tournamentorganizer.models.tournament.match import Match
from tournamentorganizer.models.tournament.round_data import RoundData
from tournamentorganizer.utils import setup_logger
from tournamentorganizer.utils.validation import OUTCOME_DRAW, validate_game_counts

logger = setup_logger(__name__)


class ResultRecorder:
    """Handles recording and validating match results.

    This class is responsible for:
    - Recording game counts on a match and deciding its winner
    - Recording a whole round in one all-or-nothing batch
    - Forfeiting the pending match of a dropped player
    - Clearing a result so it can be entered again
    """

    def __init__(self, best_of: int, tournament_id: Optional[str] = None) -> None:
        self.best_of = best_of
        self.tournament_id = tournament_id

    def record_result(
        self, match: Match, player_one_wins: int, player_two_wins: int, draws: int = 0
    ) -> Match:
        """Record one result.

        Raises:
            MatchAlreadyCompleteException: If the match already has a result
            InvalidResultException: If the counts are inconsistent
        """
        match.record_result(
            player_one_wins,
            player_two_wins,
            draws,
            self.best_of,
            tournament_id=self.tournament_id,
        )
        outcome = "draw" if match.is_draw else f"winner {match.winner}"
        logger.debug(
            f"Recorded {match.id}: {match.player_one} {player_one_wins}-"
            f"{player_two_wins}-{draws} {match.player_two} ({outcome})"
        )
        return match

    def record_round_results(
        self,
        round_data: RoundData,
        results_data: List[Tuple[str, int, int, int]],
    ) -> List[Match]:
        """Record several results of one round at once.

        Every entry is validated before any match changes, so either all
        results are recorded or none is.

        Args:
            round_data: The round the results belong to
            results_data: ``(match_id, player_one_wins, player_two_wins, draws)``

        Raises:
            UnknownMatchException: If a match id is not part of the round
            MatchAlreadyCompleteException: If a match already has a result
            InvalidResultException: On inconsistent counts or a duplicate entry
        """
        matches: Dict[str, Match] = {m.id: m for m in round_data.matches}
        seen = set()
        for match_id, p1_wins, p2_wins, draws in results_data:
            match = matches.get(match_id)
            if match is None:
                raise UnknownMatchException(
                    f"Match {match_id} is not part of round {round_data.round_number}",
                    tournament_id=self.tournament_id,
                    entity_id=match_id,
                )
            if match_id in seen:
                raise InvalidResultException(
                    f"Result for {match_id} listed twice",
                    tournament_id=self.tournament_id,
                    entity_id=match_id,
                )
            if match.is_complete:
                raise MatchAlreadyCompleteException(
                    f"Match {match_id} is already complete",
                    tournament_id=self.tournament_id,
                    entity_id=match_id,
                )
            result = validate_game_counts(p1_wins, p2_wins, draws, self.best_of)
            if not result.is_valid:
                raise InvalidResultException(
                    result.error_message,
                    tournament_id=self.tournament_id,
                    entity_id=match_id,
                )
            if result.sanitized_value == OUTCOME_DRAW and match.bracket is not None:
                raise InvalidResultException(
                    f"Elimination match {match_id} cannot end in a draw",
                    tournament_id=self.tournament_id,
                    entity_id=match_id,
                )
            seen.add(match_id)

        recorded = []
        for match_id, p1_wins, p2_wins, draws in results_data:
            recorded.append(
                self.record_result(matches[match_id], p1_wins, p2_wins, draws)
            )
        logger.info(
            f"Round {round_data.round_number}: recorded {len(recorded)} results, "
            f"{len(round_data.pending_match_ids)} pending"
        )
        return recorded

    def forfeit(self, match: Match, player_id: str) -> Match:
        """Award a pending match to the opponent of ``player_id``."""
        match.forfeit(player_id, self.best_of, self.tournament_id)
        logger.info(f"{player_id} forfeits {match.id}; {match.winner} wins")
        return match

    def clear_result(self, match: Match) -> Match:
        """Return a completed match to pending.

        Raises:
            InvalidResultException: For a bye
            TournamentStateException: If the match has no result yet
        """
        if not match.is_bye and not match.is_complete:
            raise TournamentStateException(
                f"Match {match.id} has no result to clear",
                tournament_id=self.tournament_id,
                entity_id=match.id,
            )
        match.clear_result(self.tournament_id)
        logger.info(f"Cleared result of {match.id}")
        return match
