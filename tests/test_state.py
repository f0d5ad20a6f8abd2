"""Tests for the reach field, metrics and snapshots."""

import numpy as np
import pytest

from smoke_ca.model.grid import KIND_CODES
from smoke_ca.model.cell import CellKind
from smoke_ca.model.reach import ReachField
from smoke_ca.model.state import compute_metrics, snapshot, METRIC_FIELDS

from conftest import make_engine, ROOM


def test_reach_distances_respect_walls():
    walls = np.array([
        [False, True, False],
        [False, True, False],
        [False, False, False],
    ])
    reach = ReachField(3, 3)
    reach.compute(walls, [(0, 0)])
    assert reach.field[0, 0] == 0
    assert reach.field[2, 0] == 2
    assert reach.field[0, 2] == 6
    assert reach.field[0, 1] == np.inf


def test_reach_unreachable_region():
    walls = np.array([[False, True, False]])
    reach = ReachField(3, 1)
    reach.compute(walls, [(0, 0)])
    assert reach.field[0, 2] == np.inf
    assert reach.front_distance(np.array([[True, False, True]])) == 0.0


def test_front_distance_empty_mask():
    reach = ReachField(2, 1)
    reach.compute(np.zeros((1, 2), dtype=bool), [(0, 0)])
    assert reach.front_distance(np.zeros((1, 2), dtype=bool)) == 0.0
    assert reach.front_distance(np.ones((1, 2), dtype=bool)) == 1.0


def test_metrics_on_corridor(corridor):
    corridor.step()
    reach = ReachField(3, 1)
    reach.compute(corridor.grid.walls(), [(0, 0)])
    metrics = compute_metrics(corridor.grid.densities(),
                              corridor.grid.kinds(), reach)
    assert metrics['total_smoke'] == 1.0
    assert metrics['mean_density'] == 1.0
    assert metrics['max_density'] == 1.0
    assert metrics['smoke_coverage'] == 1.0
    assert metrics['plume_count'] == 1
    assert metrics['front_distance'] == 1.0


def test_metrics_without_floor():
    density = np.array([[1.0, 0.0]])
    kinds = np.array([[KIND_CODES[CellKind.EMITTER],
                       KIND_CODES[CellKind.ESCAPE]]])
    reach = ReachField(2, 1)
    reach.compute(np.zeros((1, 2), dtype=bool), [(0, 0)])
    metrics = compute_metrics(density, kinds, reach)
    assert metrics['total_smoke'] == 0.0
    assert metrics['plume_count'] == 0
    assert metrics['front_distance'] == 0.0


def test_plumes_are_counted_separately():
    floor = KIND_CODES[CellKind.FLOOR]
    kinds = np.full((1, 5), floor)
    density = np.array([[0.5, 0.0, 0.5, 0.5, 0.0]])
    reach = ReachField(5, 1)
    reach.compute(np.zeros((1, 5), dtype=bool), [(0, 0)])
    metrics = compute_metrics(density, kinds, reach)
    assert metrics['plume_count'] == 2
    assert metrics['smoke_coverage'] == pytest.approx(0.6)
    assert metrics['front_distance'] == 3.0


def test_snapshot_is_detached():
    engine = make_engine(list(ROOM), 2, 1, use_precalculated_weights=True)
    reach = ReachField(engine.grid.width, engine.grid.height)
    reach.compute(engine.grid.walls(), [engine.emitter.position])
    engine.step()
    state = snapshot(engine, reach)
    before = state.density.copy()
    engine.step()
    assert np.array_equal(state.density, before)
    assert state.tick == 1
    assert state.pixels.shape == (len(ROOM), len(ROOM[0]), 4)

    row = state.to_csv_row()
    assert list(row) == ['tick'] + METRIC_FIELDS
    assert row['tick'] == 1
