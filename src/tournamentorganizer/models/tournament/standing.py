"""PlayerStanding data class."""

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

from tournamentorganizer.type_hints import TiebreakValues


@dataclass
class PlayerStanding:
    """One row of the standings table.

    Attributes
    ----------
    player_id : str
    name : str
    points : float
        Match points including byes.
    match_wins, match_losses, match_draws : int
        Decided match counts; byes are counted separately.
    byes : int
    games_won, games_lost, games_drawn : int
        Game counts over played matches (byes excluded).
    opponents : list of str
        Opponent ids in round order.
    tiebreaks : dict of str to float
        Value of every configured tiebreak method.
    rank : int
        Competition rank (1, 2, 2, 4); tied players share a rank.
    """

    player_id: str
    name: str
    seed: Optional[float] = None
    points: float = 0.0
    match_wins: int = 0
    match_losses: int = 0
    match_draws: int = 0
    byes: int = 0
    games_won: int = 0
    games_lost: int = 0
    games_drawn: int = 0
    opponents: List[str] = field(default_factory=list)
    tiebreaks: TiebreakValues = field(default_factory=dict)
    rank: int = 0

    @property
    def matches_played(self) -> int:
        return self.match_wins + self.match_losses + self.match_draws

    @property
    def games_played(self) -> int:
        return self.games_won + self.games_lost + self.games_drawn

    def to_dict(self) -> Dict[str, Any]:
        """Serialize standing to dictionary."""
        return {
            "player_id": self.player_id,
            "name": self.name,
            "seed": self.seed,
            "points": self.points,
            "match_wins": self.match_wins,
            "match_losses": self.match_losses,
            "match_draws": self.match_draws,
            "byes": self.byes,
            "games_won": self.games_won,
            "games_lost": self.games_lost,
            "games_drawn": self.games_drawn,
            "opponents": list(self.opponents),
            "tiebreaks": dict(self.tiebreaks),
            "rank": self.rank,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerStanding":
        """Deserialize standing from dictionary."""
        return cls(
            player_id=data["player_id"],
            name=data.get("name", ""),
            seed=data.get("seed"),
            points=data.get("points", 0.0),
            match_wins=data.get("match_wins", 0),
            match_losses=data.get("match_losses", 0),
            match_draws=data.get("match_draws", 0),
            byes=data.get("byes", 0),
            games_won=data.get("games_won", 0),
            games_lost=data.get("games_lost", 0),
            games_drawn=data.get("games_drawn", 0),
            opponents=list(data.get("opponents", [])),
            tiebreaks=dict(data.get("tiebreaks", {})),
            rank=data.get("rank", 0),
        )
