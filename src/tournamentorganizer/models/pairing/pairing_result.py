"""Pairing data class."""

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
from typing import Optional


@dataclass(slots=True)
class Pairing:
    """One pairing produced by a pairing system.

    ``player_two`` is ``None`` for a bye. Elimination systems fill in the
    bracket coordinates so the bracket can be re-derived from the matches.
    """

    player_one: str
    player_two: Optional[str] = None
    bracket: Optional[str] = None
    bracket_round: int = 0
    position: int = 0

    @property
    def is_bye(self) -> bool:
        return self.player_two is None


#  LocalWords:  Pairing
