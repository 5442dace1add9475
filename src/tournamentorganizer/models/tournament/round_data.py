"""Data model for tournament round."""

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

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from tournamentorganizer.constants import STAGE_MAIN
from tournamentorganizer.models.tournament.match import Match


@dataclass
class RoundData:
    """Snapshot of all matches sharing one round number.

    A round is never stored by the tournament; it is assembled on demand
    from the match set, so it always reflects the current results.

    Attributes
    ----------
    round_number : int
        Round number (1-indexed).
    matches : list of Match
        Matches of the round, byes included, in table order.
    stage : str
        ``"main"`` or ``"playoffs"``.
    """

    round_number: int
    matches: List[Match] = field(default_factory=list)
    stage: str = STAGE_MAIN

    @property
    def pairings(self) -> List[Tuple[str, str]]:
        """(player_one, player_two) ids of the matches that are not byes."""
        return [(m.player_one, m.player_two) for m in self.matches if not m.is_bye]

    @property
    def bye_player_ids(self) -> List[str]:
        """IDs of players who received a bye this round."""
        return [m.player_one for m in self.matches if m.is_bye]

    @property
    def is_completed(self) -> bool:
        """Whether every match of the round has a result."""
        return all(m.is_complete for m in self.matches)

    @property
    def pending_match_ids(self) -> List[str]:
        return [m.id for m in self.matches if not m.is_complete]

    def find_match(self, player_id: str) -> Optional[Match]:
        """Return the match ``player_id`` plays this round, if any."""
        for match in self.matches:
            if match.involves(player_id):
                return match
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize round data to dictionary."""
        return {
            "round_number": self.round_number,
            "stage": self.stage,
            "matches": [m.to_dict() for m in self.matches],
            "is_completed": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundData":
        """Deserialize round data from dictionary."""
        return cls(
            round_number=data["round_number"],
            matches=[Match.from_dict(m) for m in data.get("matches", [])],
            stage=data.get("stage", STAGE_MAIN),
        )
