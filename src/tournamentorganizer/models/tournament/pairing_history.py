"""Pairing history used to avoid rematches and spread byes."""

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
from typing import Dict, Iterable, Set

from tournamentorganizer.models.tournament.match import Match


@dataclass
class PairingHistory:
    """
    Tracks historical pairings to prevent repeat matches.

    Attributes
    ----------
    previous_matches : set of frozenset of str
        Set containing frozensets of player ID pairs representing
        matches that have already been paired.
    bye_counts : dict of str to int
        Number of byes each player has received.
    """

    previous_matches: Set[frozenset] = field(default_factory=set)
    bye_counts: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_matches(cls, matches: Iterable[Match]) -> "PairingHistory":
        """Build the history from an existing match set."""
        history = cls()
        for match in matches:
            if match.is_bye:
                history.add_bye(match.player_one)
            else:
                history.add_pairing(match.player_one, match.player_two)
        return history

    def add_pairing(self, player1_id: str, player2_id: str) -> None:
        """Record that two players have been paired."""
        self.previous_matches.add(frozenset({player1_id, player2_id}))

    def add_bye(self, player_id: str) -> None:
        """Record a bye for a player."""
        self.bye_counts[player_id] = self.bye_counts.get(player_id, 0) + 1

    def have_played(self, player1_id: str, player2_id: str) -> bool:
        """Check if two players have previously played each other."""
        return frozenset({player1_id, player2_id}) in self.previous_matches

    def byes_for(self, player_id: str) -> int:
        """Number of byes ``player_id`` has received."""
        return self.bye_counts.get(player_id, 0)
