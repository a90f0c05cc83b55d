"""Timing harness for the cloth simulation."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Sequence

from cloth3d import PBDCloth3D

logger = logging.getLogger(__name__)


@dataclass
class ResolutionTiming:
    resolution: int
    time_ms: float


@dataclass
class SubstepTiming:
    substeps: int
    time_ms: float


@dataclass
class BenchmarkResults:
    resolutions: List[ResolutionTiming] = field(default_factory=list)
    substeps: List[SubstepTiming] = field(default_factory=list)

    def summary(self) -> str:
        lines = ["resolution  time [ms]"]
        for entry in self.resolutions:
            lines.append(f"{entry.resolution:>10d}  {entry.time_ms:9.2f}")
        lines.append("")
        lines.append("  substeps  time [ms]")
        for entry in self.substeps:
            lines.append(f"{entry.substeps:>10d}  {entry.time_ms:9.2f}")
        return "\n".join(lines)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def run_frames(
    cloth: PBDCloth3D,
    frames: int,
    dt: float = 1 / 60,
    substeps: int = 10,
) -> List[float]:
    """Steps ``cloth`` once per frame and returns each frame's duration in ms."""

    frame_times: List[float] = []
    for _ in range(frames):
        start = time.perf_counter()
        cloth.step(dt, substeps)
        frame_times.append(_elapsed_ms(start))
    return frame_times


def run_benchmark(
    resolutions: Sequence[int] = (5, 10, 15, 20),
    substeps: Sequence[int] = (1, 2, 5, 10),
    frames: int = 100,
    size: float = 10.0,
    dt: float = 1 / 60,
    damping: float = 0.999,
) -> BenchmarkResults:
    """Times the simulation across lattice resolutions and substep counts.

    A resolution ``r`` uses a fresh ``(r + 1) x (r + 1)`` lattice stepped with
    10 substeps.  The substep sweep runs every substep count in turn on one
    shared ``16 x 16`` lattice.  All runs execute sequentially.
    """

    results = BenchmarkResults()

    for resolution in resolutions:
        start = time.perf_counter()
        cloth = PBDCloth3D(size, size, resolution + 1, resolution + 1, damping=damping)
        run_frames(cloth, frames, dt=dt, substeps=10)
        entry = ResolutionTiming(resolution=resolution, time_ms=_elapsed_ms(start))
        logger.info("resolution %d: %.2f ms for %d frames", resolution, entry.time_ms, frames)
        results.resolutions.append(entry)

    cloth = PBDCloth3D(size, size, 16, 16, damping=damping)
    for steps in substeps:
        start = time.perf_counter()
        run_frames(cloth, frames, dt=dt, substeps=steps)
        entry = SubstepTiming(substeps=steps, time_ms=_elapsed_ms(start))
        logger.info("substeps %d: %.2f ms for %d frames", steps, entry.time_ms, frames)
        results.substeps.append(entry)

    return results
