#!/usr/bin/env python3
"""
Stroke & Align - CLI Demo

Scripts a stroke over the demo scene, runs the repositioning animation
with a fixed time step and writes frames, a video, a path plot and data
exports. For the interactive web UI, use: python main.py

Usage:
    # Preset stroke shapes
    python run_demo.py --shape arc
    python run_demo.py --shape zigzag --step 0.05

    # Screen points directly (x,y image pixels)
    python run_demo.py --points "150,450" "400,380" "650,450"
"""

import argparse
import logging
import os
import sys

import cv2
import numpy as np

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import config
from strokealign.core import DrawingSession, FixedStepClock, PointerPhase

logger = logging.getLogger("run_demo")


def parse_args():
    parser = argparse.ArgumentParser(description="Stroke & Align demo (CLI)")
    parser.add_argument(
        "--shape",
        type=str,
        default="arc",
        choices=["arc", "zigzag", "line"],
        help="Preset stroke shape (ignored when --points is given)",
    )
    parser.add_argument(
        "--points",
        type=str,
        nargs="+",
        help='Stroke as screen points "x,y" (e.g., --points "100,400" "300,350")',
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=40,
        help="Pointer samples for preset shapes",
    )
    parser.add_argument(
        "--step",
        type=float,
        default=config.animation.fixed_step,
        help="Seconds per tick",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=config.paths.exports_dir,
        help="Directory for video, plot and data exports",
    )
    parser.add_argument(
        "--save-frames",
        action="store_true",
        help="Also save every rendered frame as PNG",
    )
    return parser.parse_args()


def parse_points(values):
    points = []
    for value in values:
        try:
            x, y = (float(v) for v in value.split(","))
        except ValueError:
            raise SystemExit(f"Invalid point {value!r}, expected x,y")
        points.append((x, y))
    return points


def preset_stroke(shape: str, width: int, height: int, samples: int):
    """Screen-space stroke over the lower part of the image."""
    s = np.linspace(0.0, 1.0, max(2, samples))
    xs = width * (0.15 + 0.7 * s)
    if shape == "arc":
        ys = height * (0.78 - 0.18 * np.sin(np.pi * s))
    elif shape == "zigzag":
        ys = height * (0.62 + 0.16 * np.abs((4 * s) % 2 - 1))
    else:
        ys = np.full_like(s, height * 0.7)
    return list(zip(xs.tolist(), ys.tolist()))


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S"
    )
    args = parse_args()
    try:
        clock = FixedStepClock(args.step)
    except ValueError as e:
        raise SystemExit(f"--step: {e}")

    session = DrawingSession.from_config(config.scene, config.capture, clock=clock)
    width, height = config.scene.image_width, config.scene.image_height

    if args.points:
        stroke = parse_points(args.points)
    else:
        stroke = preset_stroke(args.shape, width, height, args.samples)

    os.makedirs(args.output, exist_ok=True)
    frames = [session.render("Start")]

    # One pointer event per tick, like a touch stream
    for i, (x, y) in enumerate(stroke):
        phase = PointerPhase.BEGAN if i == 0 else PointerPhase.MOVED
        session.pointer(phase, x, y)
        session.step()
        frames.append(session.render(f"Drawing: {session.capture.session.point_count} pts"))

    n_points = session.capture.session.point_count
    session.pointer(PointerPhase.ENDED, *stroke[-1])
    session.step()
    frames.append(session.render("Released", show_stroke=True))

    if not session.is_animating:
        logger.warning("No animation started (%d stroke points accepted)", n_points)

    def on_frame(tick):
        frames.append(session.render(f"Animating: tick {tick}", show_stroke=True))

    ticks = session.run_until_idle(on_frame=on_frame)
    frames.append(session.render("Done", show_stroke=True))

    print("=" * 60)
    print("Stroke & Align")
    print("=" * 60)
    print(f"Stroke: {len(stroke)} samples, {n_points} accepted")
    print(f"Animation: {ticks} ticks @ {args.step:.4f}s")
    for target in session.targets:
        print(f"  {target!r}")

    if args.save_frames:
        frames_dir = config.paths.frames_dir
        os.makedirs(frames_dir, exist_ok=True)
        for idx, frame in enumerate(frames):
            cv2.imwrite(os.path.join(frames_dir, f"frame_{idx:05d}.png"), frame)
        print(f"Frames: {frames_dir}")

    _, msg = session.renderer.write_video(
        frames, os.path.join(args.output, "stroke_align.mp4"),
        fps=config.animation.video_fps)
    print(f"Video:  {msg}")

    points = session.stroke_points
    if len(points) > 0:
        plot_path = os.path.join(args.output, "paths.png")
        session.renderer.plot_paths(points, session.recorder, plot_path)
        print(f"Plot:   {plot_path}")
        print(session.renderer.export_data(
            points, session.recorder,
            os.path.join(args.output, "motion.json"),
            os.path.join(args.output, "motion.csv")))
    print("=" * 60)


if __name__ == "__main__":
    main()
