"""Utility functions for drawing."""

from .drawing import blank_canvas, draw_circle, draw_polygon, draw_text

__all__ = ["blank_canvas", "draw_circle", "draw_polygon", "draw_text"]
