#!/usr/bin/env python3
"""
Stroke & Align - Main Entry Point

Usage:
    python main.py                    # Launch Gradio web UI
    python main.py --port 8080        # Custom port
    python main.py --share            # Public Gradio link
"""

import argparse
import logging
import sys
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import config
from strokealign.ui import create_app


def parse_args():
    parser = argparse.ArgumentParser(
        description="Draw a stroke over a 3D scene and slide targets onto it"
    )
    parser.add_argument(
        "--host",
        type=str,
        default=config.ui.server_name,
        help=f"Server host (default: {config.ui.server_name})"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=config.ui.server_port,
        help=f"Server port (default: {config.ui.server_port})"
    )
    parser.add_argument(
        "--share",
        action="store_true",
        help="Create public Gradio link"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log rejected hits and other debug detail"
    )
    return parser.parse_args()


def main():
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    print("=" * 60)
    print("Stroke & Align")
    print("=" * 60)
    print(f"Targets: {len(config.scene.targets)}")
    print(f"Server:  http://{args.host}:{args.port}")
    print("=" * 60)

    app = create_app(
        output_dir=config.paths.output_dir,
        exports_dir=config.paths.exports_dir,
        scene_cfg=config.scene,
        capture_cfg=config.capture,
        animation_cfg=config.animation,
    )

    app.launch(
        server_name=args.host,
        server_port=args.port,
        share=args.share or config.ui.share
    )


if __name__ == "__main__":
    main()
