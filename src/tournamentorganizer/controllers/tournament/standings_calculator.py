"""Standings calculation for tournaments.

Standings are a pure function of the scoring configuration, the players and
the matches: calling :meth:`StandingsCalculator.calculate` twice on the same
history gives identical results.
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

from itertools import groupby
from typing import Dict, Iterable, List, Sequence

from tournamentorganizer.constants import TB_VERSUS, TIEBREAK_PRECISION
from tournamentorganizer.controllers.tournament.tiebreak_calculator import (
    RESULT_DRAW,
    RESULT_LOSS,
    RESULT_WIN,
    PlayerRecord,
    TiebreakCalculator,
)
from tournamentorganizer.models.player import Player
from tournamentorganizer.models.tournament.match import Match
from tournamentorganizer.models.tournament.standing import PlayerStanding
from tournamentorganizer.models.tournament.tournament_config import ScoringConfig
from tournamentorganizer.utils import setup_logger

logger = setup_logger(__name__)


def _rounded(value: float) -> float:
    return round(value, TIEBREAK_PRECISION)


class StandingsCalculator:
    """Builds ordered standings from players and matches.

    Ordering is points descending, then the configured tiebreaks in order:
    the first method that separates a tied group decides, and the remaining
    methods only split what is still tied. Players tied on everything share
    a rank (1, 2, 2, 4) and are listed by player id.
    """

    def __init__(self, scoring: ScoringConfig) -> None:
        self.scoring = scoring
        self.tiebreak_calculator = TiebreakCalculator(scoring)

    def build_records(
        self, players: Iterable[Player], matches: Iterable[Match]
    ) -> Dict[str, PlayerRecord]:
        """Aggregate the completed matches into one record per player."""
        records = {p.id: PlayerRecord(player_id=p.id) for p in players}
        round_totals: Dict[str, Dict[int, float]] = {pid: {} for pid in records}

        ordered = sorted(matches, key=lambda m: (m.round_number, m.position, m.id))
        for match in ordered:
            if not match.is_complete:
                continue

            if match.is_bye:
                record = records[match.player_one]
                record.points += self.scoring.bye
                record.byes += 1
                record.rounds_played += 1
                totals = round_totals[match.player_one]
                totals[match.round_number] = (
                    totals.get(match.round_number, 0.0) + self.scoring.bye
                )
                continue

            for player_id in match.player_ids:
                record = records[player_id]
                opponent = match.opponent_of(player_id)
                won, lost, drawn = match.games_for(player_id)
                record.games_won += won
                record.games_lost += lost
                record.games_drawn += drawn
                record.rounds_played += 1

                if match.is_draw:
                    result, points = RESULT_DRAW, self.scoring.draw
                    record.match_draws += 1
                elif match.winner == player_id:
                    result, points = RESULT_WIN, self.scoring.win
                    record.match_wins += 1
                else:
                    result, points = RESULT_LOSS, self.scoring.loss
                    record.match_losses += 1

                record.points += points
                record.results.append((opponent, result, points))
                totals = round_totals[player_id]
                totals[match.round_number] = totals.get(match.round_number, 0.0) + points

        for player_id, totals in round_totals.items():
            records[player_id].round_points = [totals[r] for r in sorted(totals)]
        return records

    def calculate(
        self, players: Sequence[Player], matches: Sequence[Match]
    ) -> List[PlayerStanding]:
        """Compute ranked standings for the active players.

        Dropped players are left out of the table but their results still
        count towards their opponents' tiebreaks.
        """
        records = self.build_records(players, matches)
        tiebreaks = self.tiebreak_calculator.calculate_all_tiebreaks(records)

        standings = {}
        for player in players:
            if not player.is_active:
                continue
            record = records[player.id]
            standings[player.id] = PlayerStanding(
                player_id=player.id,
                name=player.name,
                seed=player.seed,
                points=record.points,
                match_wins=record.match_wins,
                match_losses=record.match_losses,
                match_draws=record.match_draws,
                byes=record.byes,
                games_won=record.games_won,
                games_lost=record.games_lost,
                games_drawn=record.games_drawn,
                opponents=record.opponents,
                tiebreaks=tiebreaks[player.id],
            )

        by_points = sorted(
            standings.values(), key=lambda s: (-_rounded(s.points), s.player_id)
        )
        blocks: List[List[PlayerStanding]] = []
        for _, group in groupby(by_points, key=lambda s: _rounded(s.points)):
            blocks.extend(
                self._split_group(list(group), list(self.scoring.tiebreaks), records)
            )

        ordered: List[PlayerStanding] = []
        for block in blocks:
            rank = len(ordered) + 1
            for standing in sorted(block, key=lambda s: s.player_id):
                standing.rank = rank
                ordered.append(standing)
        return ordered

    def _split_group(
        self,
        group: List[PlayerStanding],
        methods: List[str],
        records: Dict[str, PlayerRecord],
    ) -> List[List[PlayerStanding]]:
        """Split a group tied on points into blocks, best block first."""
        if len(group) <= 1 or not methods:
            return [group]

        method, remaining = methods[0], methods[1:]
        if method == TB_VERSUS:
            scores = self.tiebreak_calculator.versus_scores(
                [s.player_id for s in group], records
            )
            if scores is None:
                return self._split_group(group, remaining, records)
            for standing in group:
                standing.tiebreaks[TB_VERSUS] = scores[standing.player_id]

        def key(standing: PlayerStanding) -> float:
            return _rounded(standing.tiebreaks.get(method, 0.0))

        blocks: List[List[PlayerStanding]] = []
        for _, tied in groupby(sorted(group, key=lambda s: -key(s)), key=key):
            blocks.extend(self._split_group(list(tied), remaining, records))
        return blocks
