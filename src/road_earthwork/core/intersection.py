"""
Slope Intersection Module

Finds where a side slope cast from a formation edge meets the ground.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .ground import GroundProfile, ProfilePoint

# Horizontal reach of the synthetic slope ray and of the flat ground extension
SLOPE_RAY_EXTENT = 1000.0

# Toes this close inside the edge still count as "beyond" it
EDGE_TOLERANCE = 0.001


def segment_intersection(
    p1: ProfilePoint,
    p2: ProfilePoint,
    p3: ProfilePoint,
    p4: ProfilePoint,
) -> Optional[ProfilePoint]:
    """
    Intersection of closed segments p1-p2 and p3-p4.

    Returns:
        The intersection point, or None if the segments do not meet or are
        parallel (including collinear overlaps).
    """
    x1, y1 = p1.offset, p1.elevation
    x2, y2 = p2.offset, p2.elevation
    x3, y3 = p3.offset, p3.elevation
    x4, y4 = p4.offset, p4.elevation

    denom = (y4 - y3) * (x2 - x1) - (x4 - x3) * (y2 - y1)
    if denom == 0:
        return None

    ua = ((x4 - x3) * (y1 - y3) - (y4 - y3) * (x1 - x3)) / denom
    ub = ((x2 - x1) * (y1 - y3) - (y2 - y1) * (x1 - x3)) / denom

    if 0 <= ua <= 1 and 0 <= ub <= 1:
        return ProfilePoint(x1 + ua * (x2 - x1), y1 + ua * (y2 - y1))
    return None


def find_toe(
    edge: ProfilePoint,
    gradient: float,
    direction: int,
    ground: GroundProfile,
    extent: float = SLOPE_RAY_EXTENT,
) -> ProfilePoint:
    """
    Locate the toe of a side slope.

    A ray is cast from the formation edge outward (``direction`` -1 for
    left, +1 for right) over ``extent`` meters along ``gradient`` and
    intersected with the ground extended flat to the same extent. Ground
    segments are scanned in ascending offset order and the first hit lying
    at or beyond the edge on that side is accepted, even when a nearer hit
    exists further along the scan.

    Args:
        edge: Formation edge point the slope starts from
        gradient: dy/dx of the slope line
        direction: -1 for the left side, +1 for the right side
        ground: Ground profile of the station
        extent: Horizontal reach of ray and ground extension

    Returns:
        Toe point. When nothing is hit the toe degenerates to the edge
        offset at ground level (zero-width slope).
    """
    dx = direction * extent
    ray_end = ProfilePoint(edge.offset + dx, edge.elevation + gradient * dx)

    polyline: Sequence[ProfilePoint] = ground.extended(extent)

    for seg_start, seg_end in zip(polyline, polyline[1:]):
        hit = segment_intersection(edge, ray_end, seg_start, seg_end)
        if hit is None:
            continue
        if direction < 0 and hit.offset <= edge.offset + EDGE_TOLERANCE:
            return hit
        if direction > 0 and hit.offset >= edge.offset - EDGE_TOLERANCE:
            return hit

    return ProfilePoint(edge.offset, ground.elevation_at(edge.offset))
