"""Headless driver for the position-based cloth simulation."""
from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import List, Optional

import numpy as np

_MODULE_DIR = pathlib.Path(__file__).resolve().parent
if str(_MODULE_DIR) not in sys.path:
    sys.path.insert(0, str(_MODULE_DIR))

from cloth3d import PBDCloth3D
from metrics3d import run_benchmark, run_frames

logger = logging.getLogger("run_cloth")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """Configures the root logger with a stdout handler and an optional file handler."""

    root = logging.getLogger()
    root.setLevel(level)
    if root.hasHandlers():
        root.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Position-based dynamics cloth simulation")
    parser.add_argument("--width", type=float, default=10.0, help="Cloth extent along x")
    parser.add_argument("--height", type=float, default=10.0, help="Cloth extent along z")
    parser.add_argument("--px", type=int, default=16, help="Particles per row")
    parser.add_argument("--py", type=int, default=16, help="Particles per column")
    parser.add_argument("--damping", type=float, default=0.9991, help="Velocity damping in (0, 1]")
    parser.add_argument("--substeps", type=int, default=5, help="Substeps per frame")
    parser.add_argument("--frames", type=int, default=300, help="Number of frames to simulate")
    parser.add_argument("--dt", type=float, default=1 / 60.0, help="Frame time step")
    parser.add_argument(
        "--benchmark",
        action="store_true",
        help=(
            "Run the resolution and substep timing sweep instead of a single cloth; "
            "uses square lattices of side --width and ignores --height, --px, --py and --substeps"
        ),
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="INFO",
    )
    parser.add_argument("--log-file", default=None, help="Optional path to also write the log to")
    return parser.parse_args(argv)


def simulate(args: argparse.Namespace) -> PBDCloth3D:
    cloth = PBDCloth3D(
        width=args.width,
        height=args.height,
        px=args.px,
        py=args.py,
        damping=args.damping,
    )
    frame_times = run_frames(cloth, args.frames, dt=args.dt, substeps=args.substeps)

    if frame_times:
        logger.info(
            "%d frames, mean frame time %.3f ms (max %.3f ms)",
            len(frame_times),
            float(np.mean(frame_times)),
            float(np.max(frame_times)),
        )
    if not cloth.is_finite():
        logger.warning("Particle positions contain non-finite values")
    logger.info(
        "constraint error %.6f, lowest particle at y=%.4f",
        cloth.constraint_error(),
        float(cloth.read_positions()[:, 1].min()),
    )
    return cloth


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    if args.benchmark:
        results = run_benchmark(dt=args.dt, frames=args.frames, size=args.width, damping=args.damping)
        print(results.summary())
    else:
        simulate(args)


if __name__ == "__main__":
    main()
