"""Common interface of the pairing systems.

A pairing system is chosen once when a stage starts and stays fixed for the
stage. It receives a read-only :class:`PairingContext` describing the stage
so far and returns the pairings of the next round; it never touches the
tournament's matches itself.
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

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from tournamentorganizer.models.pairing import Pairing
from tournamentorganizer.models.player import Player
from tournamentorganizer.models.tournament.match import Match
from tournamentorganizer.models.tournament.standing import PlayerStanding


@dataclass
class PairingContext:
    """Everything a pairing system may look at when building a round.

    Attributes
    ----------
    round_number : int
        Tournament round number of the round being generated.
    players : list of Player
        Every registered player in seeded order, dropped players included.
    matches : list of Match
        Matches of the current stage only.
    standings : list of PlayerStanding
        Standings over ``matches``, best first.
    rounds_played : int
        Rounds already generated in this stage.
    tournament_id : str, optional
        Attached to the errors a pairing system raises.
    """

    round_number: int
    rounds_played: int = 0
    players: List[Player] = field(default_factory=list)
    matches: List[Match] = field(default_factory=list)
    standings: List[PlayerStanding] = field(default_factory=list)
    tournament_id: Optional[str] = None

    @property
    def active_ids(self) -> Set[str]:
        return {p.id for p in self.players if p.is_active}

    @property
    def all_matches_complete(self) -> bool:
        return all(m.is_complete for m in self.matches)

    def seed_index(self) -> Dict[str, int]:
        return {p.id: index for index, p in enumerate(self.players)}


class PairingSystem(ABC):
    """Base class of the pairing strategies."""

    #: Key stored in :meth:`to_dict` so the system can be restored
    system_type: str = ""

    @property
    @abstractmethod
    def total_rounds(self) -> int:
        """Planned number of rounds for the stage."""

    @abstractmethod
    def generate_next_round(self, context: PairingContext) -> List[Pairing]:
        """Return the pairings of the next round.

        Raises:
            RoundLimitExceededException: If the stage has no round left
        """

    @abstractmethod
    def is_complete(self, context: PairingContext) -> bool:
        """Whether the stage's end condition holds for ``context``."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Serialize the system state."""
