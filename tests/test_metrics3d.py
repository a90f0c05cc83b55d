from cloth3d import PBDCloth3D
from metrics3d import BenchmarkResults, ResolutionTiming, SubstepTiming, run_benchmark, run_frames


def test_run_frames_records_one_time_per_frame():
    cloth = PBDCloth3D(1.0, 1.0, 4, 4)
    initial = cloth.read_positions()

    frame_times = run_frames(cloth, 5, substeps=2)

    assert len(frame_times) == 5
    assert all(t >= 0.0 for t in frame_times)
    assert (cloth.read_positions() != initial).any()


def test_run_frames_matches_direct_stepping():
    driven = PBDCloth3D(2.0, 2.0, 5, 5)
    stepped = PBDCloth3D(2.0, 2.0, 5, 5)

    run_frames(driven, 3, dt=1 / 30, substeps=4)
    for _ in range(3):
        stepped.step(1 / 30, 4)

    assert (driven.read_positions() == stepped.read_positions()).all()


def test_run_benchmark_sweeps_resolutions_and_substeps():
    results = run_benchmark(resolutions=(2, 3), substeps=(1, 4), frames=2)

    assert [entry.resolution for entry in results.resolutions] == [2, 3]
    assert [entry.substeps for entry in results.substeps] == [1, 4]
    assert all(entry.time_ms >= 0.0 for entry in results.resolutions + results.substeps)


def test_summary_lists_every_entry():
    results = BenchmarkResults(
        resolutions=[ResolutionTiming(5, 1.5), ResolutionTiming(10, 3.25)],
        substeps=[SubstepTiming(2, 0.75)],
    )

    summary = results.summary()

    assert "resolution" in summary
    assert "substeps" in summary
    assert "3.25" in summary
    assert len(summary.splitlines()) == 6


def test_run_benchmark_uses_size_and_damping(monkeypatch):
    import metrics3d

    built = []
    original = metrics3d.PBDCloth3D

    def recording_cloth(*args, **kwargs):
        cloth = original(*args, **kwargs)
        built.append(cloth)
        return cloth

    monkeypatch.setattr(metrics3d, "PBDCloth3D", recording_cloth)
    run_benchmark(resolutions=(2,), substeps=(1,), frames=1, size=3.0, damping=0.95)

    assert [(c.width, c.px, c.damping) for c in built] == [(3.0, 3, 0.95), (3.0, 16, 0.95)]
