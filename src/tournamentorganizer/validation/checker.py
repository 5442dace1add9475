"""Tournament Checker - structural validation of a serialized tournament.

The checker reads the output of ``Tournament.to_dict()`` and reports which
structural rules hold: every player meets at most one opponent per round,
results agree with their game counts, round robins cover every pair, and
elimination brackets produce the expected number of matches.
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

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Any, Dict, List, Mapping, Optional

from tournamentorganizer.constants import (
    BRACKET_CONSOLATION,
    BRACKET_WINNERS,
    DEFAULT_BEST_OF,
    ELIMINATION_FORMATS,
    FORMAT_DOUBLE_ROUND_ROBIN,
    ROUND_ROBIN_FORMATS,
    STAGE_MAIN,
)
from tournamentorganizer.models.player import Player
from tournamentorganizer.models.tournament.match import Match
from tournamentorganizer.utils import setup_logger
from tournamentorganizer.utils.validation import (
    OUTCOME_DRAW,
    OUTCOME_PLAYER_ONE,
    validate_game_counts,
)

logger = setup_logger(__name__)


class CriterionStatus(Enum):
    """Status of a single structural check."""

    COMPLIANT = "COMPLIANT"
    VIOLATION = "VIOLATION"
    NOT_APPLICABLE = "NOT_APPLICABLE"


@dataclass
class CriterionResult:
    """Result of validating a single criterion."""

    criterion: str
    status: CriterionStatus
    description: str = ""
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def is_violation(self) -> bool:
        return self.status == CriterionStatus.VIOLATION


@dataclass
class ValidationReport:
    """Complete validation report for one tournament."""

    total_criteria: int
    compliant_count: int
    violations: List[CriterionResult]
    overall_status: CriterionStatus
    summary: str
    criteria_results: List[CriterionResult] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def compliance_percentage(self) -> float:
        """Share of applicable criteria that hold."""
        if self.total_criteria == 0:
            return 100.0
        return (self.compliant_count / self.total_criteria) * 100.0


def _compliant(criterion: str, description: str) -> CriterionResult:
    return CriterionResult(criterion, CriterionStatus.COMPLIANT, description)


def _not_applicable(criterion: str, description: str) -> CriterionResult:
    return CriterionResult(criterion, CriterionStatus.NOT_APPLICABLE, description)


def _violation(criterion: str, description: str, **details) -> CriterionResult:
    return CriterionResult(criterion, CriterionStatus.VIOLATION, description, details)


class TournamentChecker:
    """Runs every structural check over a serialized tournament."""

    # ========== Per-match rules ==========

    def check_one_match_per_round(self, matches: List[Match]) -> CriterionResult:
        """A player appears in at most one match per round."""
        seen: Counter = Counter()
        for match in matches:
            for player_id in match.player_ids:
                seen[(match.round_number, player_id)] += 1
        repeated = sorted(
            f"{player_id} (round {round_number})"
            for (round_number, player_id), count in seen.items()
            if count > 1
        )
        if repeated:
            return _violation(
                "one_match_per_round",
                f"Players paired more than once in a round: {', '.join(repeated)}",
                players=repeated,
            )
        return _compliant("one_match_per_round", "Every player plays once per round")

    def check_no_self_pairing(self, matches: List[Match]) -> CriterionResult:
        offending = [m.id for m in matches if m.player_one == m.player_two]
        if offending:
            return _violation(
                "no_self_pairing",
                f"Players paired against themselves in {', '.join(offending)}",
                matches=offending,
            )
        return _compliant("no_self_pairing", "No player meets themselves")

    def check_result_consistency(
        self, matches: List[Match], best_of: int
    ) -> CriterionResult:
        """Winners and draw flags agree with the recorded game counts."""
        problems = []
        for match in matches:
            if match.is_bye:
                if not match.is_complete or match.winner != match.player_one:
                    problems.append(f"{match.id}: bye not awarded to {match.player_one}")
                continue
            if not match.is_complete:
                if match.winner is not None or match.is_draw:
                    problems.append(f"{match.id}: pending match has an outcome")
                continue

            result = validate_game_counts(
                match.player_one_wins, match.player_two_wins, match.draws, best_of
            )
            if not result.is_valid:
                problems.append(f"{match.id}: {result.error_message}")
                continue
            if result.sanitized_value == OUTCOME_DRAW:
                expected = None
            elif result.sanitized_value == OUTCOME_PLAYER_ONE:
                expected = match.player_one
            else:
                expected = match.player_two
            if match.winner != expected or match.is_draw != (expected is None):
                problems.append(f"{match.id}: winner does not match the game counts")

        if problems:
            return _violation(
                "result_consistency",
                f"{len(problems)} inconsistent results",
                problems=problems,
            )
        return _compliant("result_consistency", "All results agree with game counts")

    def check_player_match_refs(
        self, players: List[Player], matches: List[Match]
    ) -> CriterionResult:
        """Match references on players mirror the match set."""
        by_player: Dict[str, set] = {p.id: set(p.match_ids) for p in players}
        problems = []
        for match in matches:
            for player_id in match.player_ids:
                if player_id not in by_player:
                    problems.append(f"{match.id}: unknown player {player_id}")
                elif match.id not in by_player[player_id]:
                    problems.append(f"{match.id}: missing from {player_id}")
        match_players = {m.id: set(m.player_ids) for m in matches}
        for player in players:
            for match_id in player.match_ids:
                if player.id not in match_players.get(match_id, set()):
                    problems.append(f"{player.id}: stray reference {match_id}")

        if problems:
            return _violation(
                "player_match_refs",
                f"{len(problems)} broken match references",
                problems=problems,
            )
        return _compliant("player_match_refs", "Player match references are intact")

    # ========== Stage rules ==========

    def check_round_sequence(
        self, matches: List[Match], current_round: int, total_rounds: int
    ) -> CriterionResult:
        """Rounds are numbered without gaps and stay within the plan."""
        numbers = {m.round_number for m in matches}
        outside = sorted(n for n in numbers if not 1 <= n <= current_round)
        if outside:
            return _violation(
                "round_sequence",
                f"Matches in rounds {outside} outside 1..{current_round}",
                rounds=outside,
            )
        if current_round > total_rounds:
            return _violation(
                "round_sequence",
                f"Round {current_round} exceeds the planned {total_rounds}",
            )
        return _compliant("round_sequence", f"{current_round} of {total_rounds} rounds")

    def check_rematches(
        self, matches: List[Match], tournament_format: str
    ) -> CriterionResult:
        """Count repeated pairings in a Swiss or round robin main stage."""
        if tournament_format in ELIMINATION_FORMATS:
            return _not_applicable("rematches", "Brackets may pair players again")

        allowed = 2 if tournament_format == FORMAT_DOUBLE_ROUND_ROBIN else 1
        meetings = Counter(
            frozenset(m.player_ids)
            for m in matches
            if m.stage == STAGE_MAIN and not m.is_bye
        )
        repeated = sorted(
            "-".join(sorted(pair)) for pair, count in meetings.items() if count > allowed
        )
        if repeated:
            return _violation(
                "rematches",
                f"{len(repeated)} pairings repeated: {', '.join(repeated)}",
                pairs=repeated,
            )
        return _compliant("rematches", "No pairing repeated")

    def check_round_robin_coverage(
        self,
        players: List[Player],
        matches: List[Match],
        tournament_format: str,
        stage_finished: bool,
    ) -> CriterionResult:
        """Every pair of players who never dropped met the expected times."""
        if tournament_format not in ROUND_ROBIN_FORMATS:
            return _not_applicable("round_robin_coverage", "Not a round robin")
        if not stage_finished:
            return _not_applicable("round_robin_coverage", "Schedule not finished")

        expected = 2 if tournament_format == FORMAT_DOUBLE_ROUND_ROBIN else 1
        meetings = Counter(
            frozenset(m.player_ids)
            for m in matches
            if m.stage == STAGE_MAIN and not m.is_bye
        )
        active = sorted(p.id for p in players if p.is_active)
        missing = [
            f"{a}-{b}"
            for a, b in combinations(active, 2)
            if meetings[frozenset((a, b))] != expected
        ]
        if missing:
            return _violation(
                "round_robin_coverage",
                f"{len(missing)} pairs did not meet {expected} time(s)",
                pairs=missing,
            )
        return _compliant("round_robin_coverage", "Every pair met")

    def check_elimination_match_count(
        self,
        players: List[Player],
        matches: List[Match],
        pairing_system: Optional[Mapping[str, Any]],
        stage: str,
        stage_finished: bool,
    ) -> CriterionResult:
        """A finished bracket without drops has the expected match count.

        Single elimination takes one match per eliminated player. Double
        elimination takes two per eliminated player plus an optional reset.
        """
        if not pairing_system or pairing_system.get("type") != "elimination":
            return _not_applicable("elimination_match_count", "No bracket")
        if not stage_finished:
            return _not_applicable("elimination_match_count", "Bracket not finished")

        entrants = pairing_system.get("entrants", [])
        active = {p.id for p in players if p.is_active}
        if any(player_id not in active for player_id in entrants):
            return _not_applicable("elimination_match_count", "Players dropped")

        bracket_matches = [
            m
            for m in matches
            if m.stage == stage and m.bracket not in (None, BRACKET_CONSOLATION)
        ]
        played = len(bracket_matches)
        eliminated = len(entrants) - 1
        if pairing_system.get("double"):
            valid = played in (2 * eliminated, 2 * eliminated + 1)
            expected = f"{2 * eliminated} or {2 * eliminated + 1}"
        else:
            winners = [m for m in bracket_matches if m.bracket == BRACKET_WINNERS]
            valid = played == len(winners) == eliminated
            expected = str(eliminated)
        if not valid:
            return _violation(
                "elimination_match_count",
                f"{played} bracket matches, expected {expected}",
                played=played,
            )
        return _compliant("elimination_match_count", f"{played} bracket matches")

    # ========== Report ==========

    def validate_tournament(self, tournament_data: Mapping[str, Any]) -> ValidationReport:
        """Validate a tournament serialized with ``Tournament.to_dict()``."""
        logger.info("Starting tournament structure validation")

        config = tournament_data.get("config", {})
        players = [Player.from_dict(p) for p in tournament_data.get("players", [])]
        matches = [Match.from_dict(m) for m in tournament_data.get("matches", [])]
        if not players or not matches:
            return ValidationReport(
                total_criteria=0,
                compliant_count=0,
                violations=[],
                overall_status=CriterionStatus.NOT_APPLICABLE,
                summary="No tournament data provided for validation",
            )

        tournament_format = config.get("format", "")
        best_of = config.get("scoring", {}).get("best_of", DEFAULT_BEST_OF)
        rounds = tournament_data.get("rounds", {})
        current_round = rounds.get("current", 0)
        total_rounds = rounds.get("total", current_round)
        stage = tournament_data.get("stage", STAGE_MAIN)
        stage_finished = tournament_data.get("state") == "finished" or (
            stage != STAGE_MAIN
        )

        results = [
            self.check_one_match_per_round(matches),
            self.check_no_self_pairing(matches),
            self.check_result_consistency(matches, best_of),
            self.check_player_match_refs(players, matches),
            self.check_round_sequence(matches, current_round, total_rounds),
            self.check_rematches(matches, tournament_format),
            self.check_round_robin_coverage(
                players, matches, tournament_format, stage_finished
            ),
            self.check_elimination_match_count(
                players,
                matches,
                tournament_data.get("pairing_system"),
                stage,
                tournament_data.get("state") == "finished",
            ),
        ]

        applicable = [r for r in results if r.status != CriterionStatus.NOT_APPLICABLE]
        violations = [r for r in applicable if r.is_violation]
        compliant_count = len(applicable) - len(violations)
        if violations:
            overall_status = CriterionStatus.VIOLATION
            summary = (
                f"Tournament validation complete - {len(violations)} violations "
                f"({' '.join(v.criterion for v in violations)})"
            )
            logger.warning(summary)
        else:
            overall_status = CriterionStatus.COMPLIANT
            summary = "Tournament validation complete"

        return ValidationReport(
            total_criteria=len(applicable),
            compliant_count=compliant_count,
            violations=violations,
            overall_status=overall_status,
            summary=summary,
            criteria_results=results,
        )


def create_checker() -> TournamentChecker:
    """Create a tournament checker instance."""
    return TournamentChecker()


def validate_tournament_data(tournament_data: Mapping[str, Any]) -> ValidationReport:
    """Quick structural validation of a serialized tournament."""
    return create_checker().validate_tournament(tournament_data)
