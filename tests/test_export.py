"""Tests for CSV, image and report export."""

import csv

from PIL import Image

from smoke_ca.export import CSVWriter, Reporter, Visualizer
from smoke_ca.model.reach import ReachField
from smoke_ca.model.state import snapshot

from conftest import make_engine, ROOM


def run_states(ticks=6):
    engine = make_engine(list(ROOM), 2, 1, use_precalculated_weights=True)
    reach = ReachField(engine.grid.width, engine.grid.height)
    reach.compute(engine.grid.walls(), [engine.emitter.position])
    states = []
    for _ in range(ticks):
        engine.step()
        states.append(snapshot(engine, reach))
    return states


def test_csv_writer(tmp_path):
    states = run_states(3)
    path = tmp_path / "out" / "log.csv"
    with CSVWriter(path) as writer:
        for state in states:
            writer.append(state)

    with open(path, newline='') as f:
        rows = list(csv.DictReader(f))
    assert [int(r['tick']) for r in rows] == [1, 2, 3]
    assert float(rows[0]['total_smoke']) > 0


def test_csv_writer_opens_lazily(tmp_path):
    writer = CSVWriter(tmp_path / "log.csv")
    writer.append(run_states(1)[0])
    writer.close()
    assert (tmp_path / "log.csv").read_text().startswith("tick,")


def test_snapshot_and_raw_images(tmp_path):
    state = run_states(2)[-1]
    visualizer = Visualizer(len(ROOM[0]), len(ROOM))
    visualizer.save_snapshot(state, tmp_path / "final.png")
    visualizer.save_raw(state, tmp_path / "raw.png")
    assert (tmp_path / "final.png").stat().st_size > 0
    with Image.open(tmp_path / "raw.png") as img:
        assert img.size == (len(ROOM[0]), len(ROOM))


def test_gif_generation(tmp_path):
    visualizer = Visualizer(len(ROOM[0]), len(ROOM))
    for state in run_states(2):
        visualizer.buffer_frame(state)
    assert len(visualizer.frames) == 2
    visualizer.generate_gif(tmp_path / "anim.gif", fps=5)
    assert (tmp_path / "anim.gif").exists()
    visualizer.clear_frames()
    assert visualizer.frames == []


def test_gif_without_frames_writes_nothing(tmp_path):
    Visualizer(3, 3).generate_gif(tmp_path / "anim.gif")
    assert not (tmp_path / "anim.gif").exists()


def test_reporter_summary(tmp_path):
    reporter = Reporter("configs/default.yaml", "layouts/default.txt")
    states = run_states(6)
    for state in states:
        reporter.update(state)
    assert len(reporter.tick_metrics) == 6
    assert reporter.peak_smoke >= states[-1].metrics['total_smoke']

    report = reporter.generate_summary(states[-1], tmp_path, True, False, False)
    assert "SMOKE PROPAGATION SIMULATION REPORT" in report
    assert "Total Ticks:           6" in report
    assert "Snapshot:   (disabled)" in report


def test_reporter_detects_steady_state():
    engine = make_engine(["00"], 0, 0, use_precalculated_weights=True)
    reach = ReachField(2, 1)
    reach.compute(engine.grid.walls(), [(0, 0)])
    reporter = Reporter("cfg", "layout")
    for _ in range(3):
        engine.step()
        reporter.update(snapshot(engine, reach))
    assert reporter.saturation_tick == 2
    assert reporter.max_front == 1.0
