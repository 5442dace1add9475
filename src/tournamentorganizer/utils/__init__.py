"""Shared utilities: logging setup."""

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

import logging
import os
import uuid
from typing import Union

ROOT_LOGGER_NAME = "tournamentorganizer"
LOG_LEVEL_ENV_VAR = "TOURNAMENTORGANIZER_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL = logging.WARNING


def _parse_level(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value}")
    return level


def _level_from_env() -> int:
    value = os.environ.get(LOG_LEVEL_ENV_VAR)
    if not value:
        return DEFAULT_LOG_LEVEL
    try:
        return _parse_level(value)
    except ValueError:
        return DEFAULT_LOG_LEVEL


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(_level_from_env())
    return root


def setup_logger(name: str) -> logging.Logger:
    """Return a logger for ``name`` below the package root logger.

    The package root gets one stream handler the first time this is called;
    its level comes from the ``TOURNAMENTORGANIZER_LOG_LEVEL`` environment
    variable (default ``WARNING``).
    """
    _root_logger()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(level: Union[int, str]) -> None:
    """Change the level of every Tournament Organizer logger at runtime."""
    _root_logger().setLevel(_parse_level(level))


def generate_id(prefix: str) -> str:
    """Return a random identifier such as ``tournament_3f9c2a71d0``."""
    return f"{prefix.lower()}_{uuid.uuid4().hex[:10]}"
