"""Pairing systems: elimination brackets, Swiss and round robin."""

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

from tournamentorganizer.pairing.base import PairingContext, PairingSystem
from tournamentorganizer.pairing.elimination import EliminationPairing, seeding_order
from tournamentorganizer.pairing.factory import (
    create_pairing_system,
    pairing_system_from_dict,
)
from tournamentorganizer.pairing.round_robin import (
    RoundRobinPairing,
    build_circle_schedule,
)
from tournamentorganizer.pairing.swiss import SwissPairing, default_swiss_rounds

__all__ = [
    "PairingContext",
    "PairingSystem",
    "EliminationPairing",
    "RoundRobinPairing",
    "SwissPairing",
    "build_circle_schedule",
    "create_pairing_system",
    "default_swiss_rounds",
    "pairing_system_from_dict",
    "seeding_order",
]
