"""Axis-aligned collision geometry built on pymunk's bounding boxes.

Every static object in a level is an axis-aligned box (``pymunk.BB``) and the
player is one too. Motion is resolved one axis at a time with a swept test, so
the player stops exactly at first contact and can never pass through an
obstacle within a tick, whatever its speed.

Coordinates follow pymunk: x grows to the right, y grows upwards.
"""

import math
from typing import Iterable, Tuple

import pymunk


# Overlap tolerance. Boxes that merely share an edge (up to float rounding)
# do not block motion along that edge.
EPSILON = 1e-6


def box(center: Tuple[float, float], width: float, height: float) -> pymunk.BB:
    """Build the bounding box of a ``width`` x ``height`` rectangle at ``center``."""
    x, y = center
    half_w, half_h = width / 2, height / 2
    return pymunk.BB(x - half_w, y - half_h, x + half_w, y + half_h)


def translate(bb: pymunk.BB, dx: float, dy: float) -> pymunk.BB:
    """Shift a bounding box by (dx, dy)."""
    return pymunk.BB(bb.left + dx, bb.bottom + dy, bb.right + dx, bb.top + dy)


def sweep_x(
    moving: pymunk.BB, dx: float, obstacles: Iterable[pymunk.BB]
) -> Tuple[float, bool]:
    """Clamp a horizontal displacement so ``moving`` stops at the first obstacle.

    Args:
        moving: Box being moved.
        dx: Requested displacement along x.
        obstacles: Static boxes.

    Returns:
        (dx, blocked): the allowed displacement and whether it was clamped.
    """
    if dx == 0.0:
        return 0.0, False

    blocked = False
    for ob in obstacles:
        # Only boxes that share a vertical span with the mover can be hit.
        if moving.bottom >= ob.top - EPSILON or moving.top <= ob.bottom + EPSILON:
            continue
        if dx > 0 and moving.right <= ob.left + EPSILON:
            limit = ob.left - moving.right
            if dx > limit:
                dx = max(limit, 0.0)
                blocked = True
        elif dx < 0 and moving.left >= ob.right - EPSILON:
            limit = ob.right - moving.left
            if dx < limit:
                dx = min(limit, 0.0)
                blocked = True
    return dx, blocked


def sweep_y(
    moving: pymunk.BB, dy: float, obstacles: Iterable[pymunk.BB]
) -> Tuple[float, bool]:
    """Clamp a vertical displacement so ``moving`` stops at the first obstacle.

    Same contract as :func:`sweep_x`, along y.
    """
    if dy == 0.0:
        return 0.0, False

    blocked = False
    for ob in obstacles:
        if moving.left >= ob.right - EPSILON or moving.right <= ob.left + EPSILON:
            continue
        if dy > 0 and moving.top <= ob.bottom + EPSILON:
            limit = ob.bottom - moving.top
            if dy > limit:
                dy = max(limit, 0.0)
                blocked = True
        elif dy < 0 and moving.bottom >= ob.top - EPSILON:
            limit = ob.top - moving.bottom
            if dy < limit:
                dy = min(limit, 0.0)
                blocked = True
    return dy, blocked


def boxes_overlap(a: pymunk.BB, b: pymunk.BB) -> bool:
    """Inclusive overlap test: boxes that touch count as overlapping."""
    return a.intersects(b)


def box_distance(a: pymunk.BB, b: pymunk.BB) -> float:
    """Euclidean gap between two boxes, exactly 0.0 when they overlap or touch."""
    gap_x = max(b.left - a.right, a.left - b.right, 0.0)
    gap_y = max(b.bottom - a.top, a.bottom - b.top, 0.0)
    return math.hypot(gap_x, gap_y)
