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
import fenics
import pytest

import pdenlp


def test_regular_box_mesh():
    mesh, _, boundaries, dx, ds, _ = pdenlp.regular_box_mesh(
        4, start_x=-1.0, start_y=-1.0, end_x=1.0, end_y=1.0
    )

    assert mesh.num_cells() == 2 * 4 * 4
    assert fenics.assemble(1 * dx) == pytest.approx(4.0, rel=1e-14)
    assert fenics.assemble(1 * ds) == pytest.approx(8.0, rel=1e-14)
    for marker in [1, 2, 3, 4]:
        assert fenics.assemble(1 * ds(marker)) == pytest.approx(2.0, rel=1e-14)


def test_regular_mesh_aspect_ratio():
    mesh, _, _, dx, ds, _ = pdenlp.regular_mesh(2, length_x=2.0, length_y=1.0)

    assert mesh.num_vertices() == 5 * 3
    assert fenics.assemble(1 * dx) == pytest.approx(2.0, rel=1e-14)
    assert fenics.assemble(1 * ds(2)) == pytest.approx(1.0, rel=1e-14)
    assert fenics.assemble(1 * ds(4)) == pytest.approx(2.0, rel=1e-14)


def test_mesh_generation_is_logged(caplog):
    with caplog.at_level(pdenlp.log.INFO, logger="pdenlp"):
        pdenlp.regular_mesh(2)

    if fenics.MPI.rank(fenics.MPI.comm_world) == 0:
        assert "Start: Generating mesh." in caplog.text
        assert "Mesh contains 9 vertices and 8 cells" in caplog.text
    fenics.MPI.barrier(fenics.MPI.comm_world)
