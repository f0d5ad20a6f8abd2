"""Shared fixtures for the smoke simulation tests."""

import pytest

from smoke_ca.model.engine import SimulationEngine

# Two-room layout with an escape on the east wall
ROOM = (
    "///////",
    "/00/00/",
    "/00000:",
    "/00/00/",
    "///////",
)


def make_engine(rows, emitter_row, emitter_col, **settings):
    """Build an engine from a list of layout rows."""
    engine = SimulationEngine(len(rows[0]), len(rows), "".join(rows),
                              emitter_row, emitter_col)
    for name, value in settings.items():
        setattr(engine, name, value)
    return engine


@pytest.fixture
def corridor():
    """1x3 corridor: emitter, floor, escape."""
    return make_engine(["00:"], 0, 0, emitter_rate=1.0, escape_rate=1.0,
                       use_precalculated_weights=True)


@pytest.fixture
def room():
    return make_engine(list(ROOM), 2, 1)
