"""Round management for tournaments.

This module turns the pairings of the active pairing system into matches
and keeps track of which system drives the current stage.
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

from typing import Container, List, Optional

from tournamentorganizer.exceptions import TournamentStateException
from tournamentorganizer.models.tournament.match import Match
from tournamentorganizer.models.tournament.round_data import RoundData
from tournamentorganizer.pairing import (
    PairingContext,
    PairingSystem,
    create_pairing_system,
)
from tournamentorganizer.utils import setup_logger

logger = setup_logger(__name__)


def match_id_for(round_number: int, table: int) -> str:
    """Match ids read ``R{round}-{table}``."""
    return f"R{round_number}-{table}"


class RoundManager:
    """Manages round progression and pairing generation for tournaments.

    This class is responsible for:
    - Choosing the pairing system when a stage starts
    - Generating the next round's matches from the pairing system
    - Answering whether the current stage has run its course

    It never mutates the tournament: :meth:`create_round` returns new
    matches and the caller commits them.
    """

    def __init__(self, pairing_system: Optional[PairingSystem] = None) -> None:
        self.pairing_system = pairing_system

    @property
    def total_rounds(self) -> int:
        if self.pairing_system is None:
            return 0
        return self.pairing_system.total_rounds

    def build_pairing_system(
        self,
        tournament_format: str,
        entrants: List[str],
        num_rounds: int = 0,
        consolation: bool = False,
    ) -> PairingSystem:
        """Create (but do not install) the pairing system for a new stage."""
        logger.info(
            f"Creating {tournament_format} pairing for {len(entrants)} players"
        )
        return create_pairing_system(
            tournament_format, entrants, num_rounds=num_rounds, consolation=consolation
        )

    def create_round(
        self,
        context: PairingContext,
        stage: str,
        known_players: Container[str],
        tournament_id: Optional[str] = None,
        pairing_system: Optional[PairingSystem] = None,
    ) -> RoundData:
        """Generate the matches of round ``context.round_number``.

        Args:
            context: Snapshot of the stage so far
            stage: ``"main"`` or ``"playoffs"``
            known_players: Registered player ids
            tournament_id: For error context
            pairing_system: System to use instead of the installed one

        Returns:
            RoundData holding the new matches, byes already complete

        Raises:
            RoundLimitExceededException: If the stage has no round left
            TournamentStateException: If no pairing system is installed
        """
        system = pairing_system or self.pairing_system
        if system is None:
            raise TournamentStateException(
                "No pairing system selected", tournament_id=tournament_id
            )

        if context.tournament_id is None:
            context.tournament_id = tournament_id
        round_number = context.round_number
        pairings = system.generate_next_round(context)
        matches = [
            Match.create(
                match_id_for(round_number, table),
                round_number,
                pairing.player_one,
                pairing.player_two,
                known_players,
                tournament_id=tournament_id,
                stage=stage,
                bracket=pairing.bracket,
                bracket_round=pairing.bracket_round,
                position=pairing.position,
            )
            for table, pairing in enumerate(pairings, start=1)
        ]

        round_data = RoundData(round_number=round_number, matches=matches, stage=stage)
        logger.info(
            f"Created round {round_number} ({stage}): {len(round_data.pairings)} "
            f"matches, byes: {round_data.bye_player_ids or 'None'}"
        )
        return round_data

    def is_stage_complete(self, context: PairingContext) -> bool:
        if self.pairing_system is None:
            return False
        return self.pairing_system.is_complete(context)
