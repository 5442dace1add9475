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

# --- Tournament formats ---
FORMAT_SINGLE_ELIMINATION = "single_elimination"
FORMAT_DOUBLE_ELIMINATION = "double_elimination"
FORMAT_SWISS = "swiss"
FORMAT_ROUND_ROBIN = "round_robin"
FORMAT_DOUBLE_ROUND_ROBIN = "double_round_robin"

TOURNAMENT_FORMATS = (
    FORMAT_SINGLE_ELIMINATION,
    FORMAT_DOUBLE_ELIMINATION,
    FORMAT_SWISS,
    FORMAT_ROUND_ROBIN,
    FORMAT_DOUBLE_ROUND_ROBIN,
)
ELIMINATION_FORMATS = (FORMAT_SINGLE_ELIMINATION, FORMAT_DOUBLE_ELIMINATION)
ROUND_ROBIN_FORMATS = (FORMAT_ROUND_ROBIN, FORMAT_DOUBLE_ROUND_ROBIN)

# Playoff stage
PLAYOFFS_NONE = "none"
PLAYOFF_FORMATS = (PLAYOFFS_NONE, FORMAT_SINGLE_ELIMINATION, FORMAT_DOUBLE_ELIMINATION)

CUT_RANK = "rank"
CUT_POINTS = "points"
CUT_TYPES = (CUT_RANK, CUT_POINTS)

# Seed sorting
SORT_ASCENDING = "ascending"
SORT_DESCENDING = "descending"
SORT_NONE = "none"
SORTING_OPTIONS = (SORT_ASCENDING, SORT_DESCENDING, SORT_NONE)

# Match status
MATCH_PENDING = "pending"
MATCH_COMPLETE = "complete"

# Tournament stages (a match belongs to one)
STAGE_MAIN = "main"
STAGE_PLAYOFFS = "playoffs"

# Bracket labels used by elimination matches
BRACKET_WINNERS = "winners"
BRACKET_LOSERS = "losers"
BRACKET_GRAND_FINAL = "grand_final"
BRACKET_CONSOLATION = "consolation"

# --- Default scoring ---
WIN_SCORE = 1.0
DRAW_SCORE = 0.5
LOSS_SCORE = 0.0
BYE_SCORE = 1.0
DEFAULT_BEST_OF = 1

DEFAULT_TOURNAMENT_NAME = "New Tournament"

# Opponent percentage tiebreaks never count an opponent below this value
PERCENTAGE_FLOOR = 1.0 / 3.0

# Tiebreak values are compared after rounding to this many decimals
TIEBREAK_PRECISION = 9

# --- Tiebreak keys ---
TB_MEDIAN_BUCHHOLZ = "median_buchholz"
TB_SOLKOFF = "solkoff"
TB_SONNEBORN_BERGER = "sonneborn_berger"
TB_CUMULATIVE = "cumulative"
TB_VERSUS = "versus"
TB_GAME_WIN_PERCENTAGE = "game_win_percentage"
TB_OPP_GAME_WIN_PERCENTAGE = "opponent_game_win_percentage"
TB_OPP_MATCH_WIN_PERCENTAGE = "opponent_match_win_percentage"
TB_OPP_OPP_MATCH_WIN_PERCENTAGE = "opponent_opponent_match_win_percentage"

TIEBREAK_NAMES = {
    TB_MEDIAN_BUCHHOLZ: "Median Buchholz",
    TB_SOLKOFF: "Solkoff",
    TB_SONNEBORN_BERGER: "Sonneborn-Berger",
    TB_CUMULATIVE: "Cumulative",
    TB_VERSUS: "Versus",
    TB_GAME_WIN_PERCENTAGE: "Game Win %",
    TB_OPP_GAME_WIN_PERCENTAGE: "Opp Game Win %",
    TB_OPP_MATCH_WIN_PERCENTAGE: "Opp Match Win %",
    TB_OPP_OPP_MATCH_WIN_PERCENTAGE: "Opp Opp Match Win %",
}

TIEBREAK_METHODS = tuple(TIEBREAK_NAMES)

# Default order used for sorting if not configured otherwise
DEFAULT_SWISS_TIEBREAK_ORDER = [TB_SOLKOFF, TB_CUMULATIVE]
DEFAULT_ROUND_ROBIN_TIEBREAK_ORDER = [TB_SONNEBORN_BERGER, TB_VERSUS]
DEFAULT_ELIMINATION_TIEBREAK_ORDER = []


def default_tiebreaks(tournament_format: str) -> list:
    """Return the default tiebreak order for a tournament format."""
    if tournament_format == FORMAT_SWISS:
        return list(DEFAULT_SWISS_TIEBREAK_ORDER)
    if tournament_format in ROUND_ROBIN_FORMATS:
        return list(DEFAULT_ROUND_ROBIN_TIEBREAK_ORDER)
    return list(DEFAULT_ELIMINATION_TIEBREAK_ORDER)
