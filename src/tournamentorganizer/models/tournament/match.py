"""Match data class."""

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

from dataclasses import dataclass
from typing import Any, Container, Dict, Optional

from tournamentorganizer.constants import MATCH_COMPLETE, MATCH_PENDING, STAGE_MAIN
from tournamentorganizer.exceptions import (
    InvalidPlayerDataException,
    InvalidResultException,
    MatchAlreadyCompleteException,
    UnknownPlayerException,
)
from tournamentorganizer.type_hints import MatchStatus, Stage
from tournamentorganizer.utils.validation import (
    OUTCOME_DRAW,
    OUTCOME_PLAYER_ONE,
    validate_game_counts_strict,
)


@dataclass
class Match:
    """Represents a single match between two players, or a bye.

    Attributes
    ----------
    id : str
        Match identifier, unique within the tournament.
    round_number : int
        Tournament round the match belongs to (1-indexed).
    player_one : str
        ID of the first player.
    player_two : str or None
        ID of the second player, ``None`` for a bye.
    player_one_wins, player_two_wins, draws : int
        Game counts.
    status : str
        ``"pending"`` or ``"complete"``.
    winner : str or None
        Winning player id once complete; ``None`` while pending or on a draw.
    is_draw : bool
        Whether the completed match was drawn.
    stage : str
        ``"main"`` or ``"playoffs"``.
    bracket : str or None
        Elimination bracket label (``winners``, ``losers``, ``grand_final``,
        ``consolation``); ``None`` for Swiss and round robin matches.
    bracket_round : int
        Round inside the bracket (elimination only).
    position : int
        Slot index inside the bracket round, or table number otherwise.
    """

    id: str
    round_number: int
    player_one: str
    player_two: Optional[str] = None
    player_one_wins: int = 0
    player_two_wins: int = 0
    draws: int = 0
    status: MatchStatus = MATCH_PENDING
    winner: Optional[str] = None
    is_draw: bool = False
    stage: Stage = STAGE_MAIN
    bracket: Optional[str] = None
    bracket_round: int = 0
    position: int = 0

    @classmethod
    def create(
        cls,
        match_id: str,
        round_number: int,
        player_one: str,
        player_two: Optional[str],
        known_players: Container[str],
        tournament_id: Optional[str] = None,
        **metadata: Any,
    ) -> "Match":
        """Create a match after checking both players belong to the tournament.

        A match without a second player is a bye and is created complete,
        with ``player_one`` as the winner.

        Raises:
            UnknownPlayerException: If a player id is not in ``known_players``
            InvalidPlayerDataException: If a player is paired with themselves
        """
        for player_id in (player_one, player_two):
            if player_id is not None and player_id not in known_players:
                raise UnknownPlayerException(
                    f"Player {player_id} is not registered in the tournament",
                    tournament_id=tournament_id,
                    entity_id=player_id,
                )
        if player_one == player_two:
            raise InvalidPlayerDataException(
                f"Player {player_one} cannot be paired against themselves",
                tournament_id=tournament_id,
                entity_id=player_one,
            )

        match = cls(
            id=match_id,
            round_number=round_number,
            player_one=player_one,
            player_two=player_two,
            **metadata,
        )
        if player_two is None:
            match.status = MATCH_COMPLETE
            match.winner = player_one
        return match

    # ========== Properties ==========

    @property
    def is_bye(self) -> bool:
        """True when the match has no second player."""
        return self.player_two is None

    @property
    def is_complete(self) -> bool:
        """True once a result has been recorded (byes are always complete)."""
        return self.status == MATCH_COMPLETE

    @property
    def loser(self) -> Optional[str]:
        """Losing player id of a decided, non-bye match."""
        if not self.is_complete or self.is_draw or self.is_bye:
            return None
        return self.player_two if self.winner == self.player_one else self.player_one

    @property
    def player_ids(self) -> tuple:
        """IDs of the players taking part (one for a bye)."""
        if self.player_two is None:
            return (self.player_one,)
        return (self.player_one, self.player_two)

    def involves(self, player_id: str) -> bool:
        """Whether ``player_id`` plays in this match."""
        return player_id in self.player_ids

    def opponent_of(
        self, player_id: str, tournament_id: Optional[str] = None
    ) -> Optional[str]:
        """Return the opponent of ``player_id`` (``None`` for a bye)."""
        if player_id == self.player_one:
            return self.player_two
        if player_id == self.player_two:
            return self.player_one
        raise UnknownPlayerException(
            f"Player {player_id} does not play in match {self.id}",
            tournament_id=tournament_id,
            entity_id=player_id,
        )

    def games_for(self, player_id: str, tournament_id: Optional[str] = None) -> tuple:
        """Return ``(won, lost, drawn)`` game counts from one player's side."""
        if player_id == self.player_one:
            return self.player_one_wins, self.player_two_wins, self.draws
        if player_id == self.player_two:
            return self.player_two_wins, self.player_one_wins, self.draws
        raise UnknownPlayerException(
            f"Player {player_id} does not play in match {self.id}",
            tournament_id=tournament_id,
            entity_id=player_id,
        )

    # ========== Results ==========

    def record_result(
        self,
        player_one_wins: int,
        player_two_wins: int,
        draws: int,
        best_of: int,
        tournament_id: Optional[str] = None,
    ) -> None:
        """Record game counts and decide the winner.

        Raises:
            MatchAlreadyCompleteException: If the match (or bye) is complete
            InvalidResultException: If the counts are inconsistent with
                ``best_of``, or an elimination match would end drawn
        """
        if self.is_complete:
            raise MatchAlreadyCompleteException(
                f"Match {self.id} is already complete",
                tournament_id=tournament_id,
                entity_id=self.id,
            )

        outcome = validate_game_counts_strict(
            player_one_wins,
            player_two_wins,
            draws,
            best_of,
            tournament_id=tournament_id,
            match_id=self.id,
        )
        if outcome == OUTCOME_DRAW and self.bracket is not None:
            raise InvalidResultException(
                f"Elimination match {self.id} cannot end in a draw",
                tournament_id=tournament_id,
                entity_id=self.id,
            )

        self.player_one_wins = player_one_wins
        self.player_two_wins = player_two_wins
        self.draws = draws
        self.status = MATCH_COMPLETE
        self.is_draw = outcome == OUTCOME_DRAW
        if self.is_draw:
            self.winner = None
        elif outcome == OUTCOME_PLAYER_ONE:
            self.winner = self.player_one
        else:
            self.winner = self.player_two

    def forfeit(
        self, player_id: str, best_of: int, tournament_id: Optional[str] = None
    ) -> None:
        """Award a pending match to the opponent of ``player_id``."""
        if self.is_complete:
            raise MatchAlreadyCompleteException(
                f"Match {self.id} is already complete",
                tournament_id=tournament_id,
                entity_id=self.id,
            )
        majority = best_of // 2 + 1
        if player_id == self.player_one:
            self.record_result(0, majority, 0, best_of, tournament_id)
        else:
            self.opponent_of(player_id, tournament_id)
            self.record_result(majority, 0, 0, best_of, tournament_id)

    def clear_result(self, tournament_id: Optional[str] = None) -> None:
        """Return a played match to pending. Byes cannot be cleared."""
        if self.is_bye:
            raise InvalidResultException(
                f"Bye {self.id} has no result to clear",
                tournament_id=tournament_id,
                entity_id=self.id,
            )
        self.player_one_wins = 0
        self.player_two_wins = 0
        self.draws = 0
        self.status = MATCH_PENDING
        self.winner = None
        self.is_draw = False

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "round_number": self.round_number,
            "player_one": self.player_one,
            "player_two": self.player_two,
            "player_one_wins": self.player_one_wins,
            "player_two_wins": self.player_two_wins,
            "draws": self.draws,
            "status": self.status,
            "winner": self.winner,
            "is_draw": self.is_draw,
            "stage": self.stage,
            "bracket": self.bracket,
            "bracket_round": self.bracket_round,
            "position": self.position,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        return cls(
            id=data["id"],
            round_number=data["round_number"],
            player_one=data["player_one"],
            player_two=data.get("player_two"),
            player_one_wins=data.get("player_one_wins", 0),
            player_two_wins=data.get("player_two_wins", 0),
            draws=data.get("draws", 0),
            status=data.get("status", MATCH_PENDING),
            winner=data.get("winner"),
            is_draw=data.get("is_draw", False),
            stage=data.get("stage", STAGE_MAIN),
            bracket=data.get("bracket"),
            bracket_round=data.get("bracket_round", 0),
            position=data.get("position", 0),
        )
