"""Single and double elimination brackets.

The bracket is fixed by the seeded entrant list when the stage starts. It is
padded to a power of two; the top seeds face the empty slots and advance
without a match. Every later round is re-derived from the completed matches
(keyed by bracket, bracket round and position), so the pairing system holds
no mutable state of its own.

Double elimination layout for a bracket of ``2**k`` slots:

* losers round 1 pairs the losers of winners round 1;
* losers round ``2j - 2`` (``j = 2..k``) sets the survivors against the
  losers of winners round ``j``, in reversed order on every other round;
* losers round ``2j - 1`` (``j < k``) pairs those survivors among themselves;
* the grand final meets the two bracket champions, with a reset match when
  the losers' champion wins it.
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

from typing import Any, Dict, List, Optional, Set, Tuple

from tournamentorganizer.constants import (
    BRACKET_CONSOLATION,
    BRACKET_GRAND_FINAL,
    BRACKET_LOSERS,
    BRACKET_WINNERS,
)
from tournamentorganizer.exceptions import (
    IncompleteRoundException,
    RoundLimitExceededException,
)
from tournamentorganizer.models.pairing import Pairing
from tournamentorganizer.models.tournament.match import Match
from tournamentorganizer.pairing.base import PairingContext, PairingSystem
from tournamentorganizer.utils import setup_logger

logger = setup_logger(__name__)

# Marks a bracket slot whose occupant is not known yet
UNRESOLVED = object()


def next_power_of_two(count: int) -> int:
    size = 2
    while size < count:
        size *= 2
    return size


def seeding_order(bracket_size: int) -> List[int]:
    """Standard bracket order of seed numbers.

    Seed ``s`` meets seed ``size + 1 - s`` in the first round and the top
    two seeds can only meet in the final.

    Example:
        >>> seeding_order(8)
        [1, 8, 4, 5, 2, 7, 3, 6]
    """
    order = [1]
    while len(order) < bracket_size:
        mirror = 2 * len(order) + 1
        order = [seed for top in order for seed in (top, mirror - top)]
    return order


class _BracketWalk:
    """Resolves every bracket node from the matches of one stage.

    A node resolves to ``(winner, loser)``. Each side is a player id,
    ``None`` for an empty slot, or ``UNRESOLVED``. Nodes whose two players
    are known but have no match yet are collected in ``ready``.
    """

    def __init__(self, matches: List[Match], active: Set[str]) -> None:
        self.active = active
        self.matches: Dict[Tuple[str, int, int], Match] = {
            (m.bracket, m.bracket_round, m.position): m
            for m in matches
            if m.bracket is not None
        }
        self.ready: List[Pairing] = []

    def _present(self, player_id):
        # Dropped players leave their slot empty.
        if player_id is None or player_id not in self.active:
            return None
        return player_id

    def node(self, bracket: str, bracket_round: int, position: int, first, second) -> tuple:
        if first is UNRESOLVED or second is UNRESOLVED:
            return UNRESOLVED, UNRESOLVED

        match = self.matches.get((bracket, bracket_round, position))
        if match is not None:
            if not match.is_complete:
                return UNRESOLVED, UNRESOLVED
            return match.winner, match.loser

        first, second = self._present(first), self._present(second)
        if first is None or second is None:
            return (first if first is not None else second), None

        self.ready.append(Pairing(first, second, bracket, bracket_round, position))
        return UNRESOLVED, UNRESOLVED


class EliminationPairing(PairingSystem):
    """Single or double elimination bracket.

    Attributes
    ----------
    entrants : list of str
        Player ids in seeded order (seed 1 first).
    double : bool
        Double elimination.
    consolation : bool
        Third-place match between the semifinal losers (single elimination
        only).
    """

    system_type = "elimination"

    def __init__(
        self, entrants: List[str], double: bool = False, consolation: bool = False
    ) -> None:
        self.entrants = list(entrants)
        self.double = double
        self.consolation = consolation and not double
        self.bracket_size = next_power_of_two(len(self.entrants))
        self.winners_rounds = self.bracket_size.bit_length() - 1
        self.slots: List[Optional[str]] = [
            self.entrants[seed - 1] if seed <= len(self.entrants) else None
            for seed in seeding_order(self.bracket_size)
        ]
        logger.info(
            f"{'Double' if double else 'Single'} elimination bracket of "
            f"{self.bracket_size} for {len(self.entrants)} players"
        )

    @property
    def total_rounds(self) -> int:
        if self.double:
            return 2 * self.winners_rounds + 1
        return self.winners_rounds

    @property
    def losers_rounds(self) -> int:
        return max(0, 2 * self.winners_rounds - 2) if self.double else 0

    # ========== Bracket resolution ==========

    def _walk(self, context: PairingContext) -> Tuple[_BracketWalk, Any]:
        """Resolve the whole bracket and return the walk and the champion."""
        walk = _BracketWalk(context.matches, context.active_ids)
        k = self.winners_rounds

        # Winners bracket
        winners: Dict[int, List[tuple]] = {}
        previous = [(slot, None) for slot in self.slots]
        for bracket_round in range(1, k + 1):
            current = []
            for position in range(len(previous) // 2):
                current.append(
                    walk.node(
                        BRACKET_WINNERS,
                        bracket_round,
                        position,
                        previous[2 * position][0],
                        previous[2 * position + 1][0],
                    )
                )
            winners[bracket_round] = current
            previous = current
        winners_champion = winners[k][0][0]

        if not self.double:
            if self.consolation and k >= 2:
                semifinals = winners[k - 1]
                walk.node(
                    BRACKET_CONSOLATION, k, 0, semifinals[0][1], semifinals[1][1]
                )
            return walk, winners_champion

        # Losers bracket
        if k == 1:
            losers_champion = winners[1][0][1]
        else:
            first_round = winners[1]
            survivors = [
                walk.node(
                    BRACKET_LOSERS,
                    1,
                    position,
                    first_round[2 * position][1],
                    first_round[2 * position + 1][1],
                )
                for position in range(len(first_round) // 2)
            ]
            for j in range(2, k + 1):
                dropping = [loser for _, loser in winners[j]]
                if j % 2 == 0:
                    dropping.reverse()
                major = 2 * j - 2
                survivors = [
                    walk.node(BRACKET_LOSERS, major, position, survivor[0], dropped)
                    for position, (survivor, dropped) in enumerate(
                        zip(survivors, dropping)
                    )
                ]
                if j < k:
                    survivors = [
                        walk.node(
                            BRACKET_LOSERS,
                            major + 1,
                            position,
                            survivors[2 * position][0],
                            survivors[2 * position + 1][0],
                        )
                        for position in range(len(survivors) // 2)
                    ]
            losers_champion = survivors[0][0]

        # Grand final and reset
        final_winner, final_loser = walk.node(
            BRACKET_GRAND_FINAL, 1, 0, winners_champion, losers_champion
        )
        if final_winner is UNRESOLVED:
            return walk, UNRESOLVED
        final_played = (BRACKET_GRAND_FINAL, 1, 0) in walk.matches
        if final_played and final_winner == losers_champion:
            reset_winner, _ = walk.node(
                BRACKET_GRAND_FINAL, 2, 0, winners_champion, losers_champion
            )
            return walk, reset_winner
        return walk, final_winner

    def champion(self, context: PairingContext) -> Optional[str]:
        """Bracket winner, or ``None`` while the bracket is still running."""
        _, champion = self._walk(context)
        if champion is UNRESOLVED:
            return None
        return champion

    # ========== PairingSystem ==========

    def generate_next_round(self, context: PairingContext) -> List[Pairing]:
        """Pair the lowest ready round of each bracket.

        Bracket rounds whose matches all resolve through empty slots are
        skipped without producing matches.

        Raises:
            RoundLimitExceededException: If the bracket is decided
            IncompleteRoundException: If results are still missing
        """
        walk, champion = self._walk(context)
        if not walk.ready:
            if champion is not UNRESOLVED:
                raise RoundLimitExceededException(
                    "The bracket is complete", tournament_id=context.tournament_id
                )
            raise IncompleteRoundException(
                "The bracket is waiting for pending results",
                tournament_id=context.tournament_id,
            )

        pairings: List[Pairing] = []
        for bracket in (BRACKET_WINNERS, BRACKET_LOSERS):
            rounds = [p.bracket_round for p in walk.ready if p.bracket == bracket]
            if rounds:
                lowest = min(rounds)
                pairings.extend(
                    p
                    for p in walk.ready
                    if p.bracket == bracket and p.bracket_round == lowest
                )
        pairings.extend(
            p
            for p in walk.ready
            if p.bracket in (BRACKET_GRAND_FINAL, BRACKET_CONSOLATION)
        )

        played = sorted({(p.bracket, p.bracket_round) for p in pairings})
        logger.info(
            f"Round {context.round_number}: {len(pairings)} bracket matches ("
            + ", ".join(f"{bracket} {number}" for bracket, number in played)
            + ")"
        )
        return pairings

    def is_complete(self, context: PairingContext) -> bool:
        walk, champion = self._walk(context)
        return (
            champion is not UNRESOLVED
            and not walk.ready
            and context.all_matches_complete
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.system_type,
            "entrants": list(self.entrants),
            "double": self.double,
            "consolation": self.consolation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EliminationPairing":
        return cls(
            data["entrants"],
            double=data.get("double", False),
            consolation=data.get("consolation", False),
        )
