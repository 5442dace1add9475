"""A competitor registered in a tournament."""

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
from typing import Any, Dict, List, Optional

from tournamentorganizer.exceptions import InvalidPlayerDataException


@dataclass(slots=True)
class Player:
    """
    Player entity owned by a tournament.

    The player is a passive record: points, tiebreaks and ranks are computed
    by the standings calculator from the tournament's matches and are never
    stored here.

    Attributes
    ----------
    id : str
        Identifier, unique within the tournament.
    name : str
        Display name.
    seed : float or None
        Rating or seed number used to order players before round 1 when the
        tournament sorts by seed.
    is_active : bool
        ``False`` once the player dropped. Dropped players stay in the
        history but are excluded from future pairings and from standings.
    match_ids : list of str
        Chronological match references. Never contains duplicates.

    Examples
    --------
    ::

        player = Player(id="p1", name="Alice", seed=1850)
        player.add_match("R1-1")
    """

    id: str
    name: str
    seed: Optional[float] = None
    is_active: bool = True
    match_ids: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise InvalidPlayerDataException(
                f"Player id must be a non-empty string, got {self.id!r}"
            )
        if self.seed is not None and (
            isinstance(self.seed, bool) or not isinstance(self.seed, (int, float))
        ):
            raise InvalidPlayerDataException(
                f"Seed for {self.id} must be a number, got {self.seed!r}",
                entity_id=self.id,
            )

    def add_match(self, match_id: str) -> None:
        """Append a match reference, rejecting duplicates."""
        if match_id in self.match_ids:
            raise InvalidPlayerDataException(
                f"Match {match_id} is already linked to player {self.id}",
                entity_id=self.id,
            )
        self.match_ids.append(match_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize player to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "seed": self.seed,
            "is_active": self.is_active,
            "match_ids": list(self.match_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Deserialize player from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            seed=data.get("seed"),
            is_active=data.get("is_active", True),
            match_ids=list(data.get("match_ids", [])),
        )
