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

"""Command line interfaces of pdenlp."""

from pdenlp._cli._compare import compare

__all__ = ["compare"]
