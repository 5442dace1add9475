"""Registry of the tournaments run by one organizer."""

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

from typing import Any, Dict, List, Mapping, Optional, Union

from tournamentorganizer.exceptions import (
    DuplicateIdException,
    UnknownTournamentException,
)
from tournamentorganizer.models.enums import TournamentState
from tournamentorganizer.models.tournament.tournament import Tournament
from tournamentorganizer.models.tournament.tournament_config import TournamentConfig
from tournamentorganizer.utils import generate_id, setup_logger

logger = setup_logger(__name__)


class Manager:
    """Keeps tournaments by id.

    Tournament ids are unique within a manager. A configuration without an
    ``id`` gets a generated one.
    """

    def __init__(self) -> None:
        self._tournaments: Dict[str, Tournament] = {}

    def __len__(self) -> int:
        return len(self._tournaments)

    def __contains__(self, tournament_id: object) -> bool:
        return tournament_id in self._tournaments

    @property
    def tournaments(self) -> List[Tournament]:
        return list(self._tournaments.values())

    def create_tournament(
        self, config: Optional[Union[TournamentConfig, Mapping[str, Any]]] = None
    ) -> Tournament:
        """Create and register a tournament.

        Raises:
            DuplicateIdException: If the id is already registered
            InvalidConfigurationException: If the configuration is invalid
        """
        if not isinstance(config, TournamentConfig):
            data = dict(config or {})
            if not data.get("id"):
                data["id"] = self._new_id()
            config = TournamentConfig.from_dict(data)

        self._check_unique(config.id)
        tournament = Tournament(config)
        self._tournaments[tournament.id] = tournament
        logger.info(f"Registered tournament {tournament.id} ({tournament.format})")
        return tournament

    def load_tournament(self, data: Mapping[str, Any]) -> Tournament:
        """Register a tournament rebuilt from ``Tournament.to_dict`` output."""
        tournament = Tournament.from_dict(data)
        self._check_unique(tournament.id)
        self._tournaments[tournament.id] = tournament
        logger.info(
            f"Loaded tournament {tournament.id} at round {tournament.current_round}"
        )
        return tournament

    def get_tournament(self, tournament_id: str) -> Tournament:
        tournament = self._tournaments.get(tournament_id)
        if tournament is None:
            raise UnknownTournamentException(
                f"Tournament {tournament_id} was not found", tournament_id=tournament_id
            )
        return tournament

    def delete_tournament(self, tournament_id: str) -> Tournament:
        """Remove a tournament, aborting it first unless it is over."""
        tournament = self.get_tournament(tournament_id)
        if not tournament.state.is_terminal:
            tournament.abort()
        del self._tournaments[tournament_id]
        logger.info(f"Removed tournament {tournament_id} ({tournament.state.value})")
        return tournament

    def list_tournaments(
        self, state: Optional[TournamentState] = None
    ) -> List[Tournament]:
        return [t for t in self._tournaments.values() if state is None or t.state == state]

    def _check_unique(self, tournament_id: str) -> None:
        if tournament_id in self._tournaments:
            raise DuplicateIdException(
                f"A tournament with id {tournament_id} already exists",
                tournament_id=tournament_id,
                entity_id=tournament_id,
            )

    def _new_id(self) -> str:
        tournament_id = generate_id("tournament")
        while tournament_id in self._tournaments:
            tournament_id = generate_id("tournament")
        return tournament_id
