"""Round robin pairing (single and double).

The whole schedule is built with the circle method when the stage starts;
generating a round is a lookup into that schedule.
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

from typing import Any, Dict, List, Optional

from tournamentorganizer.exceptions import RoundLimitExceededException
from tournamentorganizer.models.pairing import Pairing
from tournamentorganizer.pairing.base import PairingContext, PairingSystem
from tournamentorganizer.type_hints import RoundSchedule
from tournamentorganizer.utils import setup_logger

logger = setup_logger(__name__)


def build_circle_schedule(entrants: List[str], double: bool = False) -> List[RoundSchedule]:
    """Build a round robin schedule with the circle method.

    The first entrant stays fixed while the others rotate one place per
    round. With an odd number of entrants a ``None`` placeholder is added,
    and whoever faces it has the bye. The fixed entrant alternates sides so
    nobody is always listed first.

    Args:
        entrants: Player ids in seeded order
        double: Append every round again with the sides swapped

    Returns:
        One list of ``(player_one, player_two)`` per round; ``player_two`` is
        ``None`` for a bye.

    Example:
        >>> build_circle_schedule(["a", "b", "c", "d"])[0]
        [('a', 'd'), ('b', 'c')]
    """
    circle: List[Optional[str]] = list(entrants)
    if len(circle) % 2 == 1:
        circle.append(None)

    size = len(circle)
    schedule: List[RoundSchedule] = []
    for round_index in range(size - 1):
        round_pairs: RoundSchedule = []
        for table in range(size // 2):
            first, second = circle[table], circle[size - 1 - table]
            if table == 0 and round_index % 2 == 1:
                first, second = second, first
            if first is None:
                first, second = second, None
            if first is None:
                continue
            round_pairs.append((first, second))
        # Byes go last.
        round_pairs.sort(key=lambda pair: pair[1] is None)
        schedule.append(round_pairs)
        circle = [circle[0], circle[-1]] + circle[1:-1]

    if double:
        schedule += [
            [(b, a) if b is not None else (a, None) for a, b in round_pairs]
            for round_pairs in list(schedule)
        ]
    return schedule


class RoundRobinPairing(PairingSystem):
    """Everyone meets everyone once, or twice with sides reversed.

    Attributes
    ----------
    entrants : list of str
        Player ids in seeded order when the stage started.
    double : bool
        Double round robin.
    schedule : list of list of tuple
        Pre-computed pairings for every round.
    """

    system_type = "round_robin"

    def __init__(self, entrants: List[str], double: bool = False) -> None:
        self.entrants = list(entrants)
        self.double = double
        self.schedule = build_circle_schedule(self.entrants, double)
        logger.info(
            f"Built {'double ' if double else ''}round robin schedule: "
            f"{len(self.entrants)} players, {len(self.schedule)} rounds"
        )

    @property
    def total_rounds(self) -> int:
        return len(self.schedule)

    def generate_next_round(self, context: PairingContext) -> List[Pairing]:
        """Look up the next scheduled round.

        A pairing with a dropped player becomes a bye for the other player;
        a pairing between two dropped players is skipped.
        """
        round_index = context.rounds_played
        if round_index >= self.total_rounds:
            raise RoundLimitExceededException(
                f"Round robin schedule has only {self.total_rounds} rounds",
                tournament_id=context.tournament_id,
            )

        active = context.active_ids
        pairings: List[Pairing] = []
        byes: List[Pairing] = []
        for first, second in self.schedule[round_index]:
            players = [p for p in (first, second) if p is not None and p in active]
            if not players:
                continue
            if len(players) == 1:
                if second is not None:
                    logger.info(
                        f"Round {context.round_number}: {players[0]} gets a bye, "
                        "scheduled opponent has dropped"
                    )
                byes.append(Pairing(players[0], None))
            else:
                pairings.append(Pairing(first, second))

        result = pairings + byes
        for position, pairing in enumerate(result, start=1):
            pairing.position = position
        return result

    def is_complete(self, context: PairingContext) -> bool:
        return context.rounds_played >= self.total_rounds and context.all_matches_complete

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.system_type,
            "entrants": list(self.entrants),
            "double": self.double,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundRobinPairing":
        return cls(data["entrants"], double=data.get("double", False))
