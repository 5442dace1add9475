"""TournamentConfig data class."""

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

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from tournamentorganizer.constants import (
    BYE_SCORE,
    CUT_RANK,
    CUT_TYPES,
    DEFAULT_BEST_OF,
    DEFAULT_TOURNAMENT_NAME,
    DRAW_SCORE,
    ELIMINATION_FORMATS,
    FORMAT_SINGLE_ELIMINATION,
    FORMAT_SWISS,
    LOSS_SCORE,
    PLAYOFF_FORMATS,
    PLAYOFFS_NONE,
    SORT_NONE,
    SORTING_OPTIONS,
    TOURNAMENT_FORMATS,
    WIN_SCORE,
    default_tiebreaks,
)
from tournamentorganizer.exceptions import InvalidConfigurationException
from tournamentorganizer.type_hints import (
    CutType,
    PlayoffFormat,
    Sorting,
    TiebreakMethod,
    TournamentFormat,
)
from tournamentorganizer.utils.validation import (
    require_valid,
    validate_best_of,
    validate_choice,
    validate_points,
    validate_tiebreaks,
)

_SCORING_KEYS = ("best_of", "win", "draw", "loss", "bye", "tiebreaks")
_TOP_LEVEL_KEYS = (
    "name",
    "format",
    "consolation",
    "sorting",
    "rounds",
    "scoring",
    "playoffs",
)


def _reject_unknown(section: str, data: Mapping[str, Any], allowed) -> None:
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise InvalidConfigurationException(
            f"Unknown {section} option(s): {', '.join(unknown)}"
        )


def _parse_rounds(value: Any) -> int:
    """Accept either ``n`` or ``{"total": n}``."""
    if isinstance(value, Mapping):
        _reject_unknown("rounds", value, ("total", "current"))
        value = value.get("total", 0)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise InvalidConfigurationException(
            f"Total rounds must be a non-negative integer, got {value!r}"
        )
    return value


@dataclass(frozen=True)
class ScoringConfig:
    """Point values and tiebreak order.

    Attributes
    ----------
    best_of : int
        Games per match.
    win, draw, loss, bye : float
        Points for each match outcome. Zero is a legitimate value.
    tiebreaks : tuple of str
        Tiebreak keys applied in order.
    """

    best_of: int = DEFAULT_BEST_OF
    win: float = WIN_SCORE
    draw: float = DRAW_SCORE
    loss: float = LOSS_SCORE
    bye: float = BYE_SCORE
    tiebreaks: Tuple[TiebreakMethod, ...] = ()

    def __post_init__(self) -> None:
        require_valid(validate_best_of(self.best_of))
        for name in ("win", "draw", "loss", "bye"):
            object.__setattr__(
                self, name, require_valid(validate_points(name, getattr(self, name)))
            )
        object.__setattr__(
            self, "tiebreaks", require_valid(validate_tiebreaks(self.tiebreaks))
        )

    def patch(self, update: Mapping[str, Any]) -> "ScoringConfig":
        """Return a copy with the keys present in ``update`` replaced."""
        _reject_unknown("scoring", update, _SCORING_KEYS)
        return replace(self, **dict(update))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "best_of": self.best_of,
            "win": self.win,
            "draw": self.draw,
            "loss": self.loss,
            "bye": self.bye,
            "tiebreaks": list(self.tiebreaks),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], tournament_format: str) -> "ScoringConfig":
        _reject_unknown("scoring", data, _SCORING_KEYS)
        values = dict(data)
        values.setdefault("tiebreaks", default_tiebreaks(tournament_format))
        return cls(**values)


@dataclass(frozen=True)
class CutRule:
    """Which players qualify for the playoffs.

    ``type="rank"`` keeps the first ``value`` players of the standings,
    ``type="points"`` keeps players with at least ``value`` points.
    """

    type: CutType = CUT_RANK
    value: float = 0

    def __post_init__(self) -> None:
        require_valid(validate_choice("cut type", self.type, CUT_TYPES))
        if self.type == CUT_RANK:
            if (
                not isinstance(self.value, int)
                or isinstance(self.value, bool)
                or self.value < 1
            ):
                raise InvalidConfigurationException(
                    f"Rank cut must be a positive integer, got {self.value!r}"
                )
        else:
            require_valid(validate_points("cut", self.value))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value}

    @classmethod
    def from_value(cls, value: Any) -> Optional["CutRule"]:
        """Parse ``None``, ``"none"``, a mapping, or an existing CutRule."""
        if value is None or value == PLAYOFFS_NONE:
            return None
        if isinstance(value, CutRule):
            return value
        if not isinstance(value, Mapping):
            raise InvalidConfigurationException(f"Invalid cut rule: {value!r}")
        _reject_unknown("cut", value, ("type", "value"))
        return cls(**dict(value))


@dataclass(frozen=True)
class PlayoffConfig:
    """Playoff stage settings: bracket format and cut rule."""

    format: PlayoffFormat = PLAYOFFS_NONE
    cut: Optional[CutRule] = None

    def __post_init__(self) -> None:
        require_valid(validate_choice("playoff format", self.format, PLAYOFF_FORMATS))

    @property
    def enabled(self) -> bool:
        return self.format != PLAYOFFS_NONE

    def patch(self, update: Mapping[str, Any]) -> "PlayoffConfig":
        _reject_unknown("playoffs", update, ("format", "cut"))
        values = dict(update)
        if "cut" in values:
            values["cut"] = CutRule.from_value(values["cut"])
        return replace(self, **values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.format,
            "cut": self.cut.to_dict() if self.cut else PLAYOFFS_NONE,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlayoffConfig":
        return cls().patch(data)


@dataclass(frozen=True)
class TournamentConfig:
    """Tournament configuration settings.

    Instances are immutable; :meth:`patch` returns an updated copy. Every
    field is validated on construction so an invalid configuration can never
    reach the pairing engine.

    Attributes
    ----------
    id : str
        Tournament identifier. Generating unique ids is the caller's job.
    name : str
        Tournament name.
    format : str
        One of ``single_elimination``, ``double_elimination``, ``swiss``,
        ``round_robin``, ``double_round_robin``.
    consolation : bool
        Play a third-place match in single elimination brackets. Needs a
        single elimination main stage or playoff stage.
    sorting : str
        Seed order before round 1: ``ascending`` (lowest seed value first),
        ``descending`` (highest first) or ``none`` (registration order).
    num_rounds : int
        Planned Swiss rounds; ``0`` lets the format decide. Other formats
        only accept ``0``.
    scoring : ScoringConfig
        Best-of, point values and tiebreak order. Defaults to the format's
        default tiebreaks.
    playoffs : PlayoffConfig
        Optional elimination stage after Swiss or round robin.
    """

    id: str
    name: str = DEFAULT_TOURNAMENT_NAME
    format: TournamentFormat = FORMAT_SINGLE_ELIMINATION
    consolation: bool = False
    sorting: Sorting = SORT_NONE
    num_rounds: int = 0
    scoring: Optional[ScoringConfig] = None
    playoffs: PlayoffConfig = field(default_factory=PlayoffConfig)

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise InvalidConfigurationException(
                f"Tournament id must be a non-empty string, got {self.id!r}"
            )
        if not isinstance(self.name, str):
            raise InvalidConfigurationException(
                f"Tournament name must be a string, got {self.name!r}",
                tournament_id=self.id,
            )
        require_valid(validate_choice("format", self.format, TOURNAMENT_FORMATS), self.id)
        require_valid(validate_choice("sorting", self.sorting, SORTING_OPTIONS), self.id)
        if not isinstance(self.consolation, bool):
            raise InvalidConfigurationException(
                f"consolation must be a boolean, got {self.consolation!r}",
                tournament_id=self.id,
            )
        _parse_rounds(self.num_rounds)
        if self.num_rounds and self.format != FORMAT_SWISS:
            raise InvalidConfigurationException(
                f"Only Swiss tournaments take a round count, not {self.format}",
                tournament_id=self.id,
            )
        if self.scoring is None:
            object.__setattr__(
                self, "scoring", ScoringConfig(tiebreaks=default_tiebreaks(self.format))
            )
        if self.playoffs.enabled and self.format in ELIMINATION_FORMATS:
            raise InvalidConfigurationException(
                "Playoffs require a Swiss or round robin main stage",
                tournament_id=self.id,
            )
        if self.consolation and FORMAT_SINGLE_ELIMINATION not in (
            self.format,
            self.playoffs.format,
        ):
            raise InvalidConfigurationException(
                "A consolation match needs a single elimination bracket",
                tournament_id=self.id,
            )

    @property
    def is_elimination(self) -> bool:
        return self.format in ELIMINATION_FORMATS

    def patch(self, update: Mapping[str, Any]) -> "TournamentConfig":
        """Apply a sparse update and return the new configuration.

        Only keys present in ``update`` change, so ``0``, ``False`` and empty
        values are applied rather than ignored. The tournament id cannot be
        patched.

        Changing the format also swaps in the new format's default tiebreaks
        while the old defaults are still in place.

        Raises:
            InvalidConfigurationException: On unknown keys or invalid values
        """
        if not isinstance(update, Mapping):
            raise InvalidConfigurationException(
                f"Configuration update must be a mapping, got {update!r}",
                tournament_id=self.id,
            )
        if "id" in update and update["id"] != self.id:
            raise InvalidConfigurationException(
                "The tournament id cannot be changed", tournament_id=self.id
            )
        _reject_unknown(
            "tournament",
            {k: v for k, v in update.items() if k != "id"},
            _TOP_LEVEL_KEYS,
        )

        changes: Dict[str, Any] = {}
        for key in ("name", "format", "consolation", "sorting"):
            if key in update:
                changes[key] = update[key]
        if "rounds" in update:
            changes["num_rounds"] = _parse_rounds(update["rounds"])
        if "scoring" in update:
            changes["scoring"] = self.scoring.patch(update["scoring"])
        if "playoffs" in update:
            changes["playoffs"] = self.playoffs.patch(update["playoffs"])
        if "format" in update and "tiebreaks" not in update.get("scoring", {}):
            scoring = changes.get("scoring", self.scoring)
            if list(scoring.tiebreaks) == default_tiebreaks(self.format):
                changes["scoring"] = replace(
                    scoring, tiebreaks=default_tiebreaks(update["format"])
                )
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "format": self.format,
            "consolation": self.consolation,
            "sorting": self.sorting,
            "rounds": self.num_rounds,
            "scoring": self.scoring.to_dict(),
            "playoffs": self.playoffs.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TournamentConfig":
        """Deserialize configuration from dictionary.

        Raises:
            InvalidConfigurationException: On missing id, unknown keys or
                invalid values
        """
        if "id" not in data:
            raise InvalidConfigurationException("Tournament configuration needs an id")
        _reject_unknown("tournament", data, _TOP_LEVEL_KEYS + ("id",))
        tournament_format = data.get("format", FORMAT_SINGLE_ELIMINATION)
        return cls(
            id=data["id"],
            name=data.get("name", DEFAULT_TOURNAMENT_NAME),
            format=tournament_format,
            consolation=data.get("consolation", False),
            sorting=data.get("sorting", SORT_NONE),
            num_rounds=_parse_rounds(data.get("rounds", 0)),
            scoring=ScoringConfig.from_dict(data.get("scoring", {}), tournament_format),
            playoffs=PlayoffConfig.from_dict(data.get("playoffs", {})),
        )
