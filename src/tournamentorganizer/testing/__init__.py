"""Testing module for Tournament Organizer.

This module provides simulation tooling:
- Random Tournament Generator (RTG) for every format
- Structural validation of the generated tournaments

Use the unified CLI: tournament-sim
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

from tournamentorganizer.testing.rtg import (
    RandomTournamentGenerator,
    ResultPattern,
    RTGConfig,
    SeedDistribution,
)

__all__ = [
    "RandomTournamentGenerator",
    "RTGConfig",
    "ResultPattern",
    "SeedDistribution",
]
