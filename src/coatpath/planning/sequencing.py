"""
Segment sequencing across a batch.

Orders coating segments to keep non-coating travel short: a greedy
nearest-neighbour walk that may traverse any segment in either direction.
"""

from typing import List, Optional, Sequence

import numpy as np

from coatpath.core.geometry import Point, Segment


def order_segments(segments: Sequence[Segment], start: Optional[Point] = None) -> List[Segment]:
    """
    Reorder segments to minimize travel moves.

    Uses a greedy nearest-neighbor approach with bi-directional traversal:
    from the current position, the segment whose start or end is closest is
    taken next, reversed when its end was the closer one. Ties keep the
    earliest segment, start before end.

    Args:
        segments: Segments to order
        start: Position of the head before the first segment (origin if None)

    Returns:
        New list with every input segment exactly once
    """
    if not segments:
        return []

    remaining = list(segments)
    starts = np.array([[s.start.x, s.start.y] for s in remaining], dtype=float)
    ends = np.array([[s.end.x, s.end.y] for s in remaining], dtype=float)
    used = np.zeros(len(remaining), dtype=bool)

    current = np.array([start.x, start.y] if start is not None else [0.0, 0.0])
    ordered: List[Segment] = []

    for _ in range(len(remaining)):
        d_start = np.hypot(*(starts - current).T)
        d_end = np.hypot(*(ends - current).T)
        d_start[used] = np.inf
        d_end[used] = np.inf

        i_start = int(np.argmin(d_start))
        i_end = int(np.argmin(d_end))
        if d_end[i_end] < d_start[i_start]:
            seg = remaining[i_end].reversed()
            used[i_end] = True
            current = starts[i_end]
        else:
            seg = remaining[i_start]
            used[i_start] = True
            current = ends[i_start]
        ordered.append(seg)

    return ordered


def travel_distance(segments: Sequence[Segment], start: Optional[Point] = None) -> float:
    """Total non-coating distance between consecutive segments."""
    if not segments:
        return 0.0
    ends = np.array([[s.end.x, s.end.y] for s in segments[:-1]], dtype=float).reshape(-1, 2)
    starts = np.array([[s.start.x, s.start.y] for s in segments[1:]], dtype=float).reshape(-1, 2)
    distance = float(np.hypot(*(starts - ends).T).sum())
    if start is not None:
        distance += start.distance_to(segments[0].start)
    return distance


def total_length(segments: Sequence[Segment]) -> float:
    """Total coating distance."""
    if not segments:
        return 0.0
    coords = np.array(
        [[s.start.x, s.start.y, s.end.x, s.end.y] for s in segments], dtype=float
    )
    return float(np.hypot(coords[:, 2] - coords[:, 0], coords[:, 3] - coords[:, 1]).sum())
