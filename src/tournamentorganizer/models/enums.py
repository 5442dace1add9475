"""Enumerations shared by the tournament models."""

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

from enum import Enum


class TournamentState(Enum):
    """Lifecycle state of a tournament.

    setup -> active -> (playoffs)? -> finished; any non-terminal state may
    move to aborted.
    """

    SETUP = "setup"
    ACTIVE = "active"
    PLAYOFFS = "playoffs"
    FINISHED = "finished"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (TournamentState.FINISHED, TournamentState.ABORTED)

    @property
    def is_running(self) -> bool:
        """True while rounds are being played."""
        return self in (TournamentState.ACTIVE, TournamentState.PLAYOFFS)
