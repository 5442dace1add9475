"""Main Tournament class - orchestrates all tournament operations.

This is the primary interface for tournament management. It owns the players
and matches, enforces the lifecycle

    setup -> active -> (playoffs)? -> finished      (or -> aborted)

and delegates pairing, result entry and standings to the controllers.
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

import copy
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from tournamentorganizer.constants import (
    CUT_RANK,
    SORT_ASCENDING,
    SORT_DESCENDING,
    STAGE_MAIN,
    STAGE_PLAYOFFS,
    TIEBREAK_PRECISION,
)
from tournamentorganizer.controllers.tournament import (
    ResultRecorder,
    RoundManager,
    StandingsCalculator,
)
from tournamentorganizer.exceptions import (
    DuplicatePlayerException,
    IncompleteRoundException,
    InsufficientPlayersException,
    InvalidConfigurationException,
    NoPlayoffEligibleException,
    TournamentStateException,
    UnknownMatchException,
    UnknownPlayerException,
)
from tournamentorganizer.models.enums import TournamentState
from tournamentorganizer.models.player import Player
from tournamentorganizer.models.tournament.match import Match
from tournamentorganizer.models.tournament.round_data import RoundData
from tournamentorganizer.models.tournament.standing import PlayerStanding
from tournamentorganizer.models.tournament.tournament_config import TournamentConfig
from tournamentorganizer.pairing import (
    PairingContext,
    PairingSystem,
    pairing_system_from_dict,
)
from tournamentorganizer.utils import setup_logger

logger = setup_logger(__name__)

# Configuration keys that may change once the tournament has started
_LIVE_CONFIG_KEYS = ("id", "name")


class Tournament:
    """Main tournament management class.

    This class coordinates all tournament operations through specialized
    controllers:
    - RoundManager: selects the pairing system and creates rounds
    - ResultRecorder: validates and records results
    - StandingsCalculator: computes points, tiebreaks and ranks

    Every mutating method validates first and only then changes state, so a
    failed call leaves the tournament untouched. Read accessors return copies.

    Example:
        >>> tournament = Tournament({"id": "t1", "format": "swiss"})
        >>> for pid in ("a", "b", "c", "d"):
        ...     _ = tournament.register_player(pid, pid.upper())
        >>> first_round = tournament.start()
    """

    def __init__(self, config: Union[TournamentConfig, Mapping[str, Any]]) -> None:
        """Initialize a new tournament in the setup state.

        Args:
            config: A TournamentConfig, or a mapping accepted by
                ``TournamentConfig.from_dict``

        Raises:
            InvalidConfigurationException: If the configuration is invalid
        """
        if not isinstance(config, TournamentConfig):
            config = TournamentConfig.from_dict(config)
        self._config = config
        self.state = TournamentState.SETUP
        self.stage = STAGE_MAIN
        self.current_round = 0
        self.total_rounds = 0
        # Rounds played before the current stage began
        self._stage_offset = 0

        self._players: Dict[str, Player] = {}
        self._matches: Dict[str, Match] = {}

        self.round_manager = RoundManager()
        logger.info(f"Created tournament {self.id} ({self.format})")

    # ========== Properties ==========

    @property
    def id(self) -> str:
        return self._config.id

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def format(self) -> str:
        return self._config.format

    @property
    def options(self) -> TournamentConfig:
        """Read-only view of the configuration (a frozen dataclass)."""
        return self._config

    @property
    def is_active(self) -> bool:
        """True while rounds are being played."""
        return self.state.is_running

    @property
    def pairing_system(self) -> Optional[PairingSystem]:
        return self.round_manager.pairing_system

    def _result_recorder(self) -> ResultRecorder:
        return ResultRecorder(self._config.scoring.best_of, self.id)

    def _standings_calculator(self) -> StandingsCalculator:
        return StandingsCalculator(self._config.scoring)

    def _require_state(self, action: str, *states: TournamentState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise TournamentStateException(
                f"Cannot {action} while the tournament is {self.state.value} "
                f"(allowed: {allowed})",
                tournament_id=self.id,
            )

    def _require_running(self, action: str) -> None:
        self._require_state(action, TournamentState.ACTIVE, TournamentState.PLAYOFFS)

    # ========== Configuration ==========

    def update_config(self, update: Mapping[str, Any]) -> TournamentConfig:
        """Apply a sparse configuration update.

        Anything may change during setup; afterwards only the name.

        Raises:
            TournamentStateException: When changing locked settings
            InvalidConfigurationException: On invalid values
        """
        if self.state != TournamentState.SETUP:
            locked = sorted(k for k in update if k not in _LIVE_CONFIG_KEYS)
            if locked:
                raise TournamentStateException(
                    f"Cannot change {', '.join(locked)} after setup",
                    tournament_id=self.id,
                )
        self._config = self._config.patch(update)
        logger.info(f"Tournament {self.id}: configuration updated ({', '.join(update)})")
        return self._config

    # ========== Player Management ==========

    def register_player(
        self, player_id: str, name: str, seed: Optional[float] = None
    ) -> Player:
        """Add a player during setup.

        Raises:
            TournamentStateException: If the tournament has started
            DuplicatePlayerException: If the id is already registered
            InvalidPlayerDataException: If the player data is invalid
        """
        self._require_state("register players", TournamentState.SETUP)
        if player_id in self._players:
            raise DuplicatePlayerException(
                f"Player {player_id} is already registered",
                tournament_id=self.id,
                entity_id=player_id,
            )
        player = Player(id=player_id, name=name, seed=seed)
        self._players[player_id] = player
        logger.info(f"Added player: {name} ({player_id})")
        return copy.deepcopy(player)

    def remove_player(self, player_id: str) -> Player:
        """Remove a player during setup."""
        self._require_state("remove players", TournamentState.SETUP)
        player = self._get_player(player_id)
        del self._players[player_id]
        logger.info(f"Removed player: {player.name} ({player_id})")
        return copy.deepcopy(player)

    def drop_player(self, player_id: str) -> Player:
        """Withdraw a player from future pairings.

        The player's history is kept. A pending match of the current round is
        forfeited to the opponent.

        Raises:
            TournamentStateException: If the tournament is finished or aborted
            UnknownPlayerException: If the player is not registered
        """
        if self.state.is_terminal:
            raise TournamentStateException(
                f"Cannot drop players from a {self.state.value} tournament",
                tournament_id=self.id,
            )
        player = self._get_player(player_id)
        if not player.is_active:
            logger.debug(f"Player {player_id} has already dropped")
            return copy.deepcopy(player)

        if self.state.is_running:
            match = self._round_data(self.current_round).find_match(player_id)
            if match is not None and not match.is_bye and not match.is_complete:
                self._result_recorder().forfeit(match, player_id)

        player.is_active = False
        logger.info(f"Dropped player: {player.name} ({player_id})")
        return copy.deepcopy(player)

    def _get_player(self, player_id: str) -> Player:
        player = self._players.get(player_id)
        if player is None:
            raise UnknownPlayerException(
                f"Player {player_id} is not registered",
                tournament_id=self.id,
                entity_id=player_id,
            )
        return player

    def get_player(self, player_id: str) -> Player:
        return copy.deepcopy(self._get_player(player_id))

    def get_players(self, active_only: bool = False) -> List[Player]:
        """Get list of tournament players in registration order.

        Args:
            active_only: If True, only return active players
        """
        players = [p for p in self._players.values() if p.is_active or not active_only]
        return copy.deepcopy(players)

    def seeded_players(self) -> List[Player]:
        """Players in the order used to seed round 1.

        ``ascending`` puts the lowest seed value first and ``descending`` the
        highest; players without a seed come last. Ties keep registration
        order.
        """
        players = list(self._players.values())
        sorting = self._config.sorting
        if sorting == SORT_ASCENDING:
            players.sort(key=lambda p: (p.seed is None, p.seed or 0))
        elif sorting == SORT_DESCENDING:
            players.sort(key=lambda p: (p.seed is None, -(p.seed or 0)))
        return players

    # ========== Match Access ==========

    def _get_match(self, match_id: str) -> Match:
        match = self._matches.get(match_id)
        if match is None:
            raise UnknownMatchException(
                f"Match {match_id} does not exist",
                tournament_id=self.id,
                entity_id=match_id,
            )
        return match

    def get_match(self, match_id: str) -> Match:
        return copy.deepcopy(self._get_match(match_id))

    def get_matches(
        self, round_number: Optional[int] = None, stage: Optional[str] = None
    ) -> List[Match]:
        """All matches, optionally filtered by round number and stage."""
        matches = [
            m
            for m in self._matches.values()
            if (round_number is None or m.round_number == round_number)
            and (stage is None or m.stage == stage)
        ]
        return copy.deepcopy(matches)

    def _round_data(self, round_number: int) -> RoundData:
        matches = [m for m in self._matches.values() if m.round_number == round_number]
        stage = matches[0].stage if matches else self.stage
        return RoundData(round_number=round_number, matches=matches, stage=stage)

    def get_round(self, round_number: int) -> RoundData:
        """Get a copy of the matches of one round.

        Raises:
            TournamentStateException: If the round has not been generated
        """
        if not 1 <= round_number <= self.current_round:
            raise TournamentStateException(
                f"Round {round_number} has not been generated "
                f"(current round: {self.current_round})",
                tournament_id=self.id,
            )
        return copy.deepcopy(self._round_data(round_number))

    @property
    def current_round_data(self) -> Optional[RoundData]:
        if self.current_round == 0:
            return None
        return self.get_round(self.current_round)

    # ========== Results ==========

    def submit_result(
        self, match_id: str, player_one_wins: int, player_two_wins: int, draws: int = 0
    ) -> Match:
        """Record game counts for a match.

        Returns:
            A copy of the completed match

        Raises:
            TournamentStateException: If the tournament is not running
            UnknownMatchException: If the match does not exist
            MatchAlreadyCompleteException: If the match already has a result
            InvalidResultException: If the counts are inconsistent
        """
        self._require_running("submit results")
        match = self._get_match(match_id)
        self._result_recorder().record_result(
            match, player_one_wins, player_two_wins, draws
        )
        return copy.deepcopy(match)

    def submit_round_results(
        self, results: List[Tuple[str, int, int, int]]
    ) -> List[Match]:
        """Record several results of the current round, all or nothing."""
        self._require_running("submit results")
        recorded = self._result_recorder().record_round_results(
            self._round_data(self.current_round), results
        )
        return copy.deepcopy(recorded)

    def clear_result(self, match_id: str) -> Match:
        """Return a result of the current round to pending.

        Raises:
            TournamentStateException: For matches of earlier rounds or
                matches without a result
            InvalidResultException: For a bye
        """
        self._require_running("clear results")
        match = self._get_match(match_id)
        if match.round_number != self.current_round:
            raise TournamentStateException(
                f"Match {match_id} belongs to round {match.round_number}; only "
                f"round {self.current_round} results can be cleared",
                tournament_id=self.id,
                entity_id=match_id,
            )
        self._result_recorder().clear_result(match)
        return copy.deepcopy(match)

    # ========== Standings ==========

    def get_standings(self, stage: Optional[str] = None) -> List[PlayerStanding]:
        """Ranked standings of the active players.

        Args:
            stage: Only count matches of this stage (``"main"`` or
                ``"playoffs"``); all matches by default
        """
        matches = [
            m for m in self._matches.values() if stage is None or m.stage == stage
        ]
        return self._standings_calculator().calculate(
            list(self._players.values()), matches
        )

    # ========== Lifecycle ==========

    def _context(self, round_number: int) -> PairingContext:
        matches = [m for m in self._matches.values() if m.stage == self.stage]
        players = self.seeded_players()
        return PairingContext(
            round_number=round_number,
            rounds_played=round_number - 1 - self._stage_offset,
            players=copy.deepcopy(players),
            matches=copy.deepcopy(matches),
            standings=self._standings_calculator().calculate(players, matches),
            tournament_id=self.id,
        )

    def _commit_round(self, round_data: RoundData) -> None:
        for match in round_data.matches:
            self._matches[match.id] = match
            for player_id in match.player_ids:
                self._players[player_id].add_match(match.id)
        self.current_round = round_data.round_number

    def _require_round_complete(self) -> None:
        if self.current_round == 0:
            return
        round_data = self._round_data(self.current_round)
        if not round_data.is_completed:
            raise IncompleteRoundException(
                f"Round {self.current_round} has pending matches: "
                f"{', '.join(round_data.pending_match_ids)}",
                tournament_id=self.id,
            )

    def start(self) -> RoundData:
        """Start the tournament and generate round 1.

        Raises:
            TournamentStateException: If the tournament is not in setup
            InsufficientPlayersException: With fewer than two active players
        """
        self._require_state("start", TournamentState.SETUP)
        entrants = [p.id for p in self.seeded_players() if p.is_active]
        if len(entrants) < 2:
            raise InsufficientPlayersException(
                f"At least 2 active players are required, got {len(entrants)}",
                tournament_id=self.id,
            )

        system = self.round_manager.build_pairing_system(
            self.format,
            entrants,
            num_rounds=self._config.num_rounds,
            consolation=self._config.consolation,
        )
        round_data = self.round_manager.create_round(
            self._context(1), STAGE_MAIN, self._players, self.id, pairing_system=system
        )

        self.round_manager.pairing_system = system
        self.total_rounds = system.total_rounds
        self.state = TournamentState.ACTIVE
        self._commit_round(round_data)
        logger.info(
            f"Tournament {self.id} started: {len(entrants)} players, "
            f"{self.total_rounds} rounds planned"
        )
        return copy.deepcopy(round_data)

    def advance_round(self) -> RoundData:
        """Generate the next round of the current stage.

        Raises:
            IncompleteRoundException: If the current round has pending matches
            RoundLimitExceededException: If the stage is over; call
                :meth:`cut_to_playoffs` or :meth:`finish` instead
        """
        self._require_running("advance")
        self._require_round_complete()
        round_data = self.round_manager.create_round(
            self._context(self.current_round + 1), self.stage, self._players, self.id
        )
        self._commit_round(round_data)
        return copy.deepcopy(round_data)

    def is_stage_complete(self) -> bool:
        """Whether the current stage's end condition holds."""
        if not self.state.is_running:
            return False
        return self.round_manager.is_stage_complete(self._context(self.current_round + 1))

    def playoff_entrants(self) -> List[str]:
        """Player ids that make the playoff cut, in standings order."""
        standings = self.get_standings(stage=STAGE_MAIN)
        cut = self._config.playoffs.cut
        if cut is None:
            return [s.player_id for s in standings]
        if cut.type == CUT_RANK:
            return [s.player_id for s in standings[: cut.value]]
        threshold = round(cut.value, TIEBREAK_PRECISION)
        return [
            s.player_id
            for s in standings
            if round(s.points, TIEBREAK_PRECISION) >= threshold
        ]

    def cut_to_playoffs(self) -> RoundData:
        """Close the main stage and start the elimination playoffs.

        Raises:
            TournamentStateException: Without a playoff format, or while the
                main stage still has rounds left
            IncompleteRoundException: If the current round has pending matches
            NoPlayoffEligibleException: If nobody makes the cut
            InsufficientPlayersException: If only one player makes the cut
        """
        self._require_state("cut to playoffs", TournamentState.ACTIVE)
        playoffs = self._config.playoffs
        if not playoffs.enabled:
            raise TournamentStateException(
                "No playoff stage is configured", tournament_id=self.id
            )
        self._require_round_complete()
        if not self.is_stage_complete():
            raise TournamentStateException(
                f"The main stage is not over: round {self.current_round} of "
                f"{self.total_rounds}",
                tournament_id=self.id,
            )

        entrants = self.playoff_entrants()
        if not entrants:
            raise NoPlayoffEligibleException(
                "No player made the playoff cut", tournament_id=self.id
            )
        if len(entrants) == 1:
            raise InsufficientPlayersException(
                f"Only {entrants[0]} made the playoff cut", tournament_id=self.id
            )

        system = self.round_manager.build_pairing_system(
            playoffs.format, entrants, consolation=self._config.consolation
        )
        round_number = self.current_round + 1
        players = self.seeded_players()
        context = PairingContext(
            round_number=round_number,
            players=copy.deepcopy(players),
            tournament_id=self.id,
        )
        round_data = self.round_manager.create_round(
            context, STAGE_PLAYOFFS, self._players, self.id, pairing_system=system
        )

        self.stage = STAGE_PLAYOFFS
        self._stage_offset = self.current_round
        self.round_manager.pairing_system = system
        self.total_rounds = self.current_round + system.total_rounds
        self.state = TournamentState.PLAYOFFS
        self._commit_round(round_data)
        logger.info(
            f"Tournament {self.id} cut to playoffs: {len(entrants)} players, "
            f"{system.total_rounds} rounds planned"
        )
        return copy.deepcopy(round_data)

    def finish(self) -> None:
        """Mark the tournament finished.

        Raises:
            IncompleteRoundException: If the current round has pending matches
            TournamentStateException: If the stage has rounds left, or the
                configured playoff stage has not been played
        """
        self._require_running("finish")
        self._require_round_complete()
        if not self.is_stage_complete():
            raise TournamentStateException(
                f"The {self.stage} stage is not over: round {self.current_round} "
                f"of {self.total_rounds}",
                tournament_id=self.id,
            )
        if self.state == TournamentState.ACTIVE and self._config.playoffs.enabled:
            raise TournamentStateException(
                "The playoff stage has not been played", tournament_id=self.id
            )
        self.state = TournamentState.FINISHED
        logger.info(f"Tournament {self.id} finished after {self.current_round} rounds")

    def abort(self) -> None:
        """Abort the tournament, keeping its history.

        Raises:
            TournamentStateException: If already finished or aborted
        """
        if self.state.is_terminal:
            raise TournamentStateException(
                f"Cannot abort a {self.state.value} tournament", tournament_id=self.id
            )
        self.state = TournamentState.ABORTED
        logger.info(f"Tournament {self.id} aborted in round {self.current_round}")

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize tournament to dictionary."""
        system = self.round_manager.pairing_system
        return {
            "config": self._config.to_dict(),
            "state": self.state.value,
            "stage": self.stage,
            "rounds": {"current": self.current_round, "total": self.total_rounds},
            "stage_offset": self._stage_offset,
            "players": [p.to_dict() for p in self._players.values()],
            "matches": [m.to_dict() for m in self._matches.values()],
            "pairing_system": system.to_dict() if system else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Tournament":
        """Deserialize tournament from dictionary.

        Raises:
            InvalidConfigurationException: If the data is malformed
        """
        try:
            tournament = cls(TournamentConfig.from_dict(data["config"]))
            tournament.state = TournamentState(data.get("state", "setup"))
            tournament.stage = data.get("stage", STAGE_MAIN)
            rounds = data.get("rounds", {})
            tournament.current_round = rounds.get("current", 0)
            tournament.total_rounds = rounds.get("total", 0)
            tournament._stage_offset = data.get("stage_offset", 0)
            for player_data in data.get("players", []):
                player = Player.from_dict(player_data)
                tournament._players[player.id] = player
            for match_data in data.get("matches", []):
                match = Match.from_dict(match_data)
                tournament._matches[match.id] = match
            tournament.round_manager.pairing_system = pairing_system_from_dict(
                data.get("pairing_system")
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidConfigurationException(
                f"Malformed tournament data: {e}"
            ) from e
        return tournament
