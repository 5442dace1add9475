"""Swiss-system pairing.

Players are ordered by points, then by their current standing, then by
seed. Within a score group the top half meets the bottom half; rematches
are avoided with a bounded backtracking search that may float players into
neighbouring score groups. Rematches are only accepted, with a warning,
when no legal pairing exists at all.
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

import math
from typing import Any, Dict, List, Optional, Tuple

from tournamentorganizer.constants import TIEBREAK_PRECISION
from tournamentorganizer.exceptions import RoundLimitExceededException
from tournamentorganizer.models.pairing import Pairing
from tournamentorganizer.models.tournament.pairing_history import PairingHistory
from tournamentorganizer.pairing.base import PairingContext, PairingSystem
from tournamentorganizer.utils import setup_logger

logger = setup_logger(__name__)

# Upper bound on recursive steps per backtracking search
MAX_SEARCH_STEPS = 20000


def default_swiss_rounds(player_count: int) -> int:
    """``ceil(log2(players))``, at least one round."""
    if player_count <= 2:
        return 1
    return max(1, math.ceil(math.log2(player_count)))


class _SearchBudget:
    """Step counter shared by one backtracking search."""

    def __init__(self, limit: int = MAX_SEARCH_STEPS) -> None:
        self.remaining = limit

    def spend(self) -> bool:
        self.remaining -= 1
        return self.remaining >= 0


def _order_players(context: PairingContext) -> Tuple[List[str], Dict[str, float], Dict[str, int]]:
    """Active player ids sorted by (-points, rank, seed index)."""
    seed_index = context.seed_index()
    points = {s.player_id: round(s.points, TIEBREAK_PRECISION) for s in context.standings}
    ranks = {s.player_id: s.rank for s in context.standings}
    active = [p.id for p in context.players if p.is_active]
    fallback_rank = len(context.players) + 1
    active.sort(
        key=lambda pid: (
            -points.get(pid, 0.0),
            ranks.get(pid, fallback_rank),
            seed_index[pid],
        )
    )
    return active, points, ranks


def _candidate_order(player_id: str, remaining: List[str], points: Dict[str, float]) -> List[str]:
    """Opponents for ``player_id`` in preference order.

    Same score group first, starting at the fold position so the top half
    meets the bottom half, then everyone else in standings order.
    """
    score = points.get(player_id, 0.0)
    group = [pid for pid in remaining if points.get(pid, 0.0) == score]
    others = [pid for pid in remaining if points.get(pid, 0.0) != score]
    if group:
        fold = max(0, (len(group) + 1) // 2 - 1)
        group = group[fold:] + group[:fold]
    return group + others


def _pair_without_rematches(
    ordered: List[str],
    points: Dict[str, float],
    history: PairingHistory,
    budget: _SearchBudget,
) -> Optional[List[Tuple[str, str]]]:
    """Pair ``ordered`` with no repeated pairing, or ``None`` if impossible."""
    if not ordered:
        return []
    if not budget.spend():
        return None

    player_id, remaining = ordered[0], ordered[1:]
    for opponent in _candidate_order(player_id, remaining, points):
        if history.have_played(player_id, opponent):
            continue
        rest = [pid for pid in remaining if pid != opponent]
        paired = _pair_without_rematches(rest, points, history, budget)
        if paired is not None:
            return [(player_id, opponent)] + paired
        if budget.remaining < 0:
            return None
    return None


def _create_fallback_pairings(
    ordered: List[str], points: Dict[str, float], history: PairingHistory
) -> List[Tuple[str, str]]:
    """Greedy pairing that accepts rematches when nothing else is left."""
    pairings = []
    remaining = list(ordered)
    while len(remaining) >= 2:
        player_id = remaining.pop(0)
        candidates = _candidate_order(player_id, remaining, points)
        opponent = next(
            (pid for pid in candidates if not history.have_played(player_id, pid)),
            candidates[0],
        )
        if history.have_played(player_id, opponent):
            logger.warning(f"Repeat pairing accepted: {player_id} vs {opponent}")
        remaining.remove(opponent)
        pairings.append((player_id, opponent))
    return pairings


def _bye_candidates(
    ordered: List[str], points: Dict[str, float], history: PairingHistory
) -> List[str]:
    """Bye priority: lowest points, fewest byes, lowest ranked."""
    position = {pid: index for index, pid in enumerate(ordered)}
    return sorted(
        ordered,
        key=lambda pid: (points.get(pid, 0.0), history.byes_for(pid), -position[pid]),
    )


class SwissPairing(PairingSystem):
    """Swiss-system pairing for a fixed number of rounds."""

    system_type = "swiss"

    def __init__(self, total_rounds: int) -> None:
        self._total_rounds = total_rounds

    @classmethod
    def for_entrants(cls, player_count: int, num_rounds: int = 0) -> "SwissPairing":
        """Fix the round count: ``num_rounds`` if set, else ``ceil(log2(n))``."""
        total = num_rounds if num_rounds > 0 else default_swiss_rounds(player_count)
        logger.info(f"Swiss stage with {player_count} players over {total} rounds")
        return cls(total)

    @property
    def total_rounds(self) -> int:
        return self._total_rounds

    def generate_next_round(self, context: PairingContext) -> List[Pairing]:
        """Pair the next Swiss round.

        Raises:
            RoundLimitExceededException: If every planned round was generated
        """
        if context.rounds_played >= self._total_rounds:
            raise RoundLimitExceededException(
                f"Swiss stage is limited to {self._total_rounds} rounds",
                tournament_id=context.tournament_id,
            )

        ordered, points, _ = _order_players(context)
        history = PairingHistory.from_matches(context.matches)

        bye_player = None
        pairs = None
        if len(ordered) % 2 == 1:
            for candidate in _bye_candidates(ordered, points, history):
                rest = [pid for pid in ordered if pid != candidate]
                pairs = _pair_without_rematches(rest, points, history, _SearchBudget())
                if pairs is not None:
                    bye_player = candidate
                    break
            if bye_player is None:
                bye_player = _bye_candidates(ordered, points, history)[0]
        else:
            pairs = _pair_without_rematches(ordered, points, history, _SearchBudget())

        if pairs is None:
            logger.warning(
                f"Round {context.round_number}: no pairing without rematches, "
                "falling back to greedy pairing"
            )
            rest = [pid for pid in ordered if pid != bye_player]
            pairs = _create_fallback_pairings(rest, points, history)

        if bye_player is not None and history.byes_for(bye_player) > 0:
            logger.warning(f"Round {context.round_number}: second bye for {bye_player}")

        result = [
            Pairing(first, second, position=table)
            for table, (first, second) in enumerate(pairs, start=1)
        ]
        if bye_player is not None:
            result.append(Pairing(bye_player, None, position=len(result) + 1))

        logger.info(
            f"Round {context.round_number}: {len(pairs)} Swiss pairings, "
            f"bye: {bye_player or 'None'}"
        )
        return result

    def is_complete(self, context: PairingContext) -> bool:
        return context.rounds_played >= self._total_rounds and context.all_matches_complete

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.system_type, "total_rounds": self._total_rounds}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SwissPairing":
        return cls(data["total_rounds"])
