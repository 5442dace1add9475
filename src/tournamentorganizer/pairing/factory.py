"""Factory for the pairing systems."""

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

from tournamentorganizer.constants import (
    FORMAT_DOUBLE_ELIMINATION,
    FORMAT_DOUBLE_ROUND_ROBIN,
    FORMAT_ROUND_ROBIN,
    FORMAT_SINGLE_ELIMINATION,
    FORMAT_SWISS,
)
from tournamentorganizer.exceptions import InvalidConfigurationException
from tournamentorganizer.pairing.base import PairingSystem
from tournamentorganizer.pairing.elimination import EliminationPairing
from tournamentorganizer.pairing.round_robin import RoundRobinPairing
from tournamentorganizer.pairing.swiss import SwissPairing

PAIRING_SYSTEMS = {
    system.system_type: system
    for system in (SwissPairing, RoundRobinPairing, EliminationPairing)
}


def create_pairing_system(
    tournament_format: str,
    entrants: List[str],
    num_rounds: int = 0,
    consolation: bool = False,
) -> PairingSystem:
    """Build the pairing system for a stage.

    Args:
        tournament_format: One of the tournament formats
        entrants: Active player ids in seeded order
        num_rounds: Configured Swiss rounds, ``0`` for the default
        consolation: Add a third-place match to single elimination

    Raises:
        InvalidConfigurationException: For an unknown format
    """
    if tournament_format == FORMAT_SWISS:
        return SwissPairing.for_entrants(len(entrants), num_rounds)
    if tournament_format == FORMAT_ROUND_ROBIN:
        return RoundRobinPairing(entrants, double=False)
    if tournament_format == FORMAT_DOUBLE_ROUND_ROBIN:
        return RoundRobinPairing(entrants, double=True)
    if tournament_format == FORMAT_SINGLE_ELIMINATION:
        return EliminationPairing(entrants, double=False, consolation=consolation)
    if tournament_format == FORMAT_DOUBLE_ELIMINATION:
        return EliminationPairing(entrants, double=True)
    raise InvalidConfigurationException(
        f"Pairing system for format '{tournament_format}' is not implemented"
    )


def pairing_system_from_dict(data: Optional[Dict[str, Any]]) -> Optional[PairingSystem]:
    """Restore a pairing system serialized with ``to_dict``."""
    if data is None:
        return None
    system = PAIRING_SYSTEMS.get(data.get("type"))
    if system is None:
        raise InvalidConfigurationException(
            f"Unknown pairing system: {data.get('type')!r}"
        )
    return system.from_dict(data)
