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
import io
import logging

import fenics
import pytest

import pdenlp
from pdenlp.log import critical
from pdenlp.log import debug
from pdenlp.log import error
from pdenlp.log import info
from pdenlp.log import warning


def issue_messages():
    debug("abc")
    info("def")
    warning("ghi")
    error("jkl")
    critical("mno")


@pytest.fixture
def console():
    stream = io.StringIO()
    handler = pdenlp.log.pdenlp_logger._handler
    old_stream = handler.setStream(stream)
    yield stream
    handler.setStream(old_stream)
    pdenlp.set_log_level(pdenlp.log.INFO)


def read(stream):
    text = stream.getvalue()
    stream.seek(0)
    stream.truncate(0)
    return text


def test_set_log_level(console):
    pdenlp.set_log_level(pdenlp.log.DEBUG)
    issue_messages()
    err = read(console)
    if fenics.MPI.rank(fenics.MPI.comm_world) == 0:
        for message in ["abc", "def", "ghi", "jkl", "mno"]:
            assert message in err
    fenics.MPI.barrier(fenics.MPI.comm_world)

    pdenlp.set_log_level(pdenlp.log.WARNING)
    issue_messages()
    err = read(console)
    if fenics.MPI.rank(fenics.MPI.comm_world) == 0:
        assert "abc" not in err
        assert "def" not in err
        assert "ghi" in err
        assert "jkl" in err
        assert "mno" in err
    fenics.MPI.barrier(fenics.MPI.comm_world)

    pdenlp.set_log_level(pdenlp.log.CRITICAL)
    issue_messages()
    err = read(console)
    if fenics.MPI.rank(fenics.MPI.comm_world) == 0:
        assert "jkl" not in err
        assert "mno" in err
    fenics.MPI.barrier(fenics.MPI.comm_world)


def test_trace_level(caplog):
    with caplog.at_level(pdenlp.log.TRACE, logger="pdenlp"):
        pdenlp.log.trace("iteration output")
    if fenics.MPI.rank(fenics.MPI.comm_world) == 0:
        assert caplog.records[-1].levelname == "TRACE"
        assert "iteration output" in caplog.text
    fenics.MPI.barrier(fenics.MPI.comm_world)


def test_silenced(caplog):
    with caplog.at_level(logging.DEBUG, logger="pdenlp"):
        with pdenlp.log.silenced():
            pdenlp.log.begin("hidden block")
            info("hidden message")
        info("visible message")

    assert "hidden" not in caplog.text
    if fenics.MPI.rank(fenics.MPI.comm_world) == 0:
        assert "visible message" in caplog.text
        # blocks opened in a silenced context do not change the indentation
        assert "| visible message" in caplog.text
    fenics.MPI.barrier(fenics.MPI.comm_world)


def test_begin_end_block(caplog):
    with caplog.at_level(logging.INFO, logger="pdenlp"):
        pdenlp.log.begin("Outer block.")
        info("nested")
        pdenlp.log.end()

    if fenics.MPI.rank(fenics.MPI.comm_world) == 0:
        assert "Start: Outer block." in caplog.text
        assert "  nested" in caplog.text
        assert "Finish: Outer block. -- Elapsed time:" in caplog.text
    fenics.MPI.barrier(fenics.MPI.comm_world)


def test_logfile(tmp_path):
    logfile = str(tmp_path / "pdenlp.log")
    handler = pdenlp.log.add_logfile(logfile, mode="w", level=pdenlp.log.DEBUG)
    debug("written to file")
    handler.flush()

    if fenics.MPI.rank(fenics.MPI.comm_world) == 0:
        with open(logfile, encoding="utf-8") as file:
            assert "written to file" in file.read()
    fenics.MPI.barrier(fenics.MPI.comm_world)
    pdenlp.log.pdenlp_logger._log.removeHandler(handler)
