# Copyright (C) 2023-2025 The pdenlp developers
#
# This file is part of pdenlp.
#
# pdenlp is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# pdenlp is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with pdenlp.  If not, see <https://www.gnu.org/licenses/>.

"""Inputs and outputs."""

from pdenlp.io import config
from pdenlp.io import output
from pdenlp.io.config import Config
from pdenlp.io.config import load_config
from pdenlp.io.output import OutputManager
from pdenlp.io.output import read_checkpoint
from pdenlp.io.output import write_checkpoint

__all__ = [
    "config",
    "output",
    "Config",
    "load_config",
    "OutputManager",
    "read_checkpoint",
    "write_checkpoint",
]
