"""Tiebreak calculation for tournaments.

This module computes the tiebreak values used to order players with equal
points. Every value is derived from :class:`PlayerRecord` objects built by
the standings calculator, so nothing is stored on the players themselves.
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

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from tournamentorganizer.constants import (
    PERCENTAGE_FLOOR,
    TB_CUMULATIVE,
    TB_GAME_WIN_PERCENTAGE,
    TB_MEDIAN_BUCHHOLZ,
    TB_OPP_GAME_WIN_PERCENTAGE,
    TB_OPP_MATCH_WIN_PERCENTAGE,
    TB_OPP_OPP_MATCH_WIN_PERCENTAGE,
    TB_SOLKOFF,
    TB_SONNEBORN_BERGER,
    TB_VERSUS,
)
from tournamentorganizer.models.tournament.tournament_config import ScoringConfig
from tournamentorganizer.type_hints import TiebreakValues
from tournamentorganizer.utils import setup_logger

logger = setup_logger(__name__)

# Result of a played match from one player's side
RESULT_WIN = 1.0
RESULT_DRAW = 0.5
RESULT_LOSS = 0.0


@dataclass
class PlayerRecord:
    """Per-player totals over the completed matches.

    Attributes
    ----------
    player_id : str
    points : float
        Match points including byes.
    rounds_played : int
        Completed matches, byes included.
    games_won, games_lost, games_drawn : int
        Game counts over played matches (byes excluded).
    results : list of (str, float, float)
        ``(opponent id, result, points earned)`` per played match, where the
        result is 1 for a win, 0.5 for a draw and 0 for a loss.
    round_points : list of float
        Points earned in each round the player took part in, in round order.
    """

    player_id: str
    points: float = 0.0
    rounds_played: int = 0
    match_wins: int = 0
    match_losses: int = 0
    match_draws: int = 0
    byes: int = 0
    games_won: int = 0
    games_lost: int = 0
    games_drawn: int = 0
    results: List[Tuple[str, float, float]] = field(default_factory=list)
    round_points: List[float] = field(default_factory=list)

    @property
    def opponents(self) -> List[str]:
        return [opponent for opponent, _, _ in self.results]


class TiebreakCalculator:
    """Calculates tiebreak scores for tournament standings.

    Supported methods:

    - Median Buchholz: opponents' points without the highest and lowest
    - Solkoff: sum of opponents' points
    - Sonneborn-Berger: opponents' points weighted by the result against them
    - Cumulative: sum of the player's running totals after each round
    - Versus: head-to-head points inside a tied group (see
      :meth:`versus_scores`)
    - Game win percentage, and the opponents' game and match win
      percentages used by card game events. Opponent percentages never go
      below one third.
    """

    def __init__(self, scoring: ScoringConfig) -> None:
        self.scoring = scoring

    def calculate_all_tiebreaks(
        self, records: Dict[str, PlayerRecord]
    ) -> Dict[str, TiebreakValues]:
        """Calculate the configured tiebreaks for every player.

        ``versus`` depends on the tied group and is filled in with ``0.0``
        here; the standings calculator overwrites it where it applies.

        Args:
            records: Records of every player, dropped players included, so
                their results still count for their opponents

        Returns:
            Mapping of player id to ``{method: value}``
        """
        methods = {
            TB_MEDIAN_BUCHHOLZ: self._calculate_median_buchholz,
            TB_SOLKOFF: self._calculate_solkoff,
            TB_SONNEBORN_BERGER: self._calculate_sonneborn_berger,
            TB_CUMULATIVE: self._calculate_cumulative,
            TB_GAME_WIN_PERCENTAGE: self._calculate_game_win_percentage,
            TB_OPP_GAME_WIN_PERCENTAGE: self._calculate_opp_game_win_percentage,
            TB_OPP_MATCH_WIN_PERCENTAGE: self._calculate_opp_match_win_percentage,
            TB_OPP_OPP_MATCH_WIN_PERCENTAGE: self._calculate_opp_opp_match_win_percentage,
        }

        tiebreaks: Dict[str, TiebreakValues] = {}
        for player_id, record in records.items():
            values = {}
            for method in self.scoring.tiebreaks:
                if method == TB_VERSUS:
                    values[method] = 0.0
                else:
                    values[method] = methods[method](record, records)
            tiebreaks[player_id] = values
        return tiebreaks

    # ========== Opponent score based ==========

    def _opponent_points(
        self, record: PlayerRecord, records: Dict[str, PlayerRecord]
    ) -> List[float]:
        return [records[opponent].points for opponent in record.opponents]

    def _calculate_median_buchholz(
        self, record: PlayerRecord, records: Dict[str, PlayerRecord]
    ) -> float:
        """Sum of opponents' points dropping the highest and the lowest.

        With two opponents or fewer nothing is dropped.
        """
        scores = sorted(self._opponent_points(record, records))
        if len(scores) <= 2:
            return float(sum(scores))
        return float(sum(scores[1:-1]))

    def _calculate_solkoff(
        self, record: PlayerRecord, records: Dict[str, PlayerRecord]
    ) -> float:
        return float(sum(self._opponent_points(record, records)))

    def _calculate_sonneborn_berger(
        self, record: PlayerRecord, records: Dict[str, PlayerRecord]
    ) -> float:
        return float(
            sum(
                records[opponent].points * result
                for opponent, result, _ in record.results
            )
        )

    def _calculate_cumulative(
        self, record: PlayerRecord, records: Dict[str, PlayerRecord]
    ) -> float:
        total = 0.0
        cumulative = 0.0
        for points in record.round_points:
            total += points
            cumulative += total
        return cumulative

    # ========== Percentages ==========

    def game_win_percentage(self, record: PlayerRecord) -> float:
        """Games won over games played; byes do not count as games."""
        played = record.games_won + record.games_lost + record.games_drawn
        if played == 0:
            return 0.0
        return record.games_won / played

    def match_win_percentage(self, record: PlayerRecord) -> float:
        """Points over the maximum points available in the rounds played."""
        maximum = record.rounds_played * self.scoring.win
        if maximum <= 0:
            return 0.0
        return record.points / maximum

    def _mean_with_floor(self, values: Sequence[float]) -> float:
        if not values:
            return 0.0
        return sum(max(value, PERCENTAGE_FLOOR) for value in values) / len(values)

    def _calculate_game_win_percentage(
        self, record: PlayerRecord, records: Dict[str, PlayerRecord]
    ) -> float:
        return self.game_win_percentage(record)

    def _calculate_opp_game_win_percentage(
        self, record: PlayerRecord, records: Dict[str, PlayerRecord]
    ) -> float:
        return self._mean_with_floor(
            [self.game_win_percentage(records[o]) for o in record.opponents]
        )

    def _calculate_opp_match_win_percentage(
        self, record: PlayerRecord, records: Dict[str, PlayerRecord]
    ) -> float:
        return self._mean_with_floor(
            [self.match_win_percentage(records[o]) for o in record.opponents]
        )

    def _calculate_opp_opp_match_win_percentage(
        self, record: PlayerRecord, records: Dict[str, PlayerRecord]
    ) -> float:
        opponents = record.opponents
        if not opponents:
            return 0.0
        values = [
            self._calculate_opp_match_win_percentage(records[o], records)
            for o in opponents
        ]
        return sum(values) / len(values)

    # ========== Head to head ==========

    def versus_scores(
        self, group: Sequence[str], records: Dict[str, PlayerRecord]
    ) -> Optional[TiebreakValues]:
        """Mini-table of points scored against the other members of ``group``.

        Returns ``None`` unless every pair in the group has played, in which
        case the method does not apply and ordering falls through to the next
        tiebreak.
        """
        members = set(group)
        for player_id in group:
            met = set(records[player_id].opponents) & members
            if len(met) < len(members) - 1:
                return None

        scores = {}
        for player_id in group:
            scores[player_id] = float(
                sum(
                    points
                    for opponent, _, points in records[player_id].results
                    if opponent in members
                )
            )
        logger.debug(f"Head-to-head among {sorted(group)}: {scores}")
        return scores
