"""Recursive quadrant splitting of complex polygons.

A polygon whose ring has more vertices than the budget is cut into four
pieces by the axis-aligned lines through its centroid, clipped to its
envelope, and each piece is split again until it fits. Using the centroid
rather than the envelope centre as the cut point keeps the pieces balanced
on skewed shapes. The union of the pieces reproduces the input.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Iterator, List, Optional

from shapely.errors import GEOSException
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from .core.errors import ConfigurationError, RepairError, SplitWarning
from .core.geometry_utils import iter_polygons, quadrant_boxes, vertex_count
from .core.types import VertexCountMode
from .repair import needs_repair, repair_polygon

# A closed ring needs at least 4 coordinates, so smaller budgets can never be met.
MIN_VERTICES = 4

# A quadrant cut adds up to two cut points and one box corner, so pieces this
# small cannot be reduced further by cutting.
STALL_VERTICES = MIN_VERTICES + 3

DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_STALLED = 2


@dataclass(frozen=True)
class _SplitLimits:
    max_vertices: int
    max_depth: Optional[int]
    max_stalled: Optional[int]
    vertex_mode: VertexCountMode
    verbose: bool


def validate_split_limits(
    max_vertices: int,
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    max_stalled: Optional[int] = DEFAULT_MAX_STALLED,
) -> None:
    """Raise ConfigurationError if the split parameters are unusable."""
    if max_vertices < MIN_VERTICES:
        raise ConfigurationError(
            f"max_vertices must be at least {MIN_VERTICES}, got {max_vertices}"
        )
    if max_depth is not None and max_depth < 0:
        raise ConfigurationError(f"max_depth must be non-negative, got {max_depth}")
    if max_stalled is not None and max_stalled < 0:
        raise ConfigurationError(f"max_stalled must be non-negative, got {max_stalled}")


def iter_split(
    geometry: Optional[BaseGeometry],
    max_vertices: int,
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    max_stalled: Optional[int] = DEFAULT_MAX_STALLED,
    vertex_mode: VertexCountMode = VertexCountMode.EXTERIOR,
    verbose: bool = False,
) -> Iterator[Polygon]:
    """Lazily split a (multi)polygon into pieces within a vertex budget.

    MultiPolygons are split part by part, empty geometries and non-polygonal
    geometries produce nothing. Invalid polygons are repaired with buffer(0)
    before being cut. Geometry engine failures end the affected branch
    without raising.

    Recursion is guarded in two ways. A piece that is still over budget at
    ``max_depth`` is emitted as-is, and so is a piece that is already as small
    as a quadrant cut can make it (at most ``STALL_VERTICES`` coordinates)
    and has not shrunk for more than ``max_stalled`` consecutive levels (a
    square with a budget of 4 is the simplest example). Both cases emit a
    :class:`SplitWarning`. Pass None to disable either guard.

    Args:
        geometry: Polygon or MultiPolygon to split (None is tolerated)
        max_vertices: Maximum ring coordinates per piece, closing point included
        max_depth: Maximum recursion depth (default: 64)
        max_stalled: Consecutive irreducible levels tolerated (default: 2)
        vertex_mode: Whether holes count against the budget (default: EXTERIOR)
        verbose: Print diagnostic information (default: False)

    Returns:
        Iterator over the pieces, each a simple valid Polygon unless the
        input was already within budget

    Raises:
        ConfigurationError: If the limits are out of range

    Examples:
        >>> circle = Point(0, 0).buffer(10, quad_segs=64)
        >>> pieces = list(iter_split(circle, 50))
        >>> all(len(p.exterior.coords) <= 50 for p in pieces)
        True
    """
    validate_split_limits(max_vertices, max_depth, max_stalled)

    if geometry is None:
        warnings.warn("None geometry passed to split", SplitWarning, stacklevel=2)
        return iter(())

    limits = _SplitLimits(
        max_vertices=max_vertices,
        max_depth=max_depth,
        max_stalled=max_stalled,
        vertex_mode=vertex_mode,
        verbose=verbose,
    )
    return _split(geometry, limits, depth=0, parent_count=None, stalled=0)


def split_polygon(
    geometry: Optional[BaseGeometry],
    max_vertices: int,
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    max_stalled: Optional[int] = DEFAULT_MAX_STALLED,
    vertex_mode: VertexCountMode = VertexCountMode.EXTERIOR,
    verbose: bool = False,
) -> List[Polygon]:
    """Split a (multi)polygon into a list of pieces within a vertex budget.

    Eager version of :func:`iter_split`, see there for details.

    Examples:
        >>> square = Polygon([(0, 0), (10, 0), (10, 10), (0, 10)])
        >>> split_polygon(square, 6) == [square]
        True
    """
    if geometry is None:
        validate_split_limits(max_vertices, max_depth, max_stalled)
        warnings.warn("None geometry passed to split", SplitWarning, stacklevel=2)
        return []

    return list(iter_split(
        geometry,
        max_vertices,
        max_depth=max_depth,
        max_stalled=max_stalled,
        vertex_mode=vertex_mode,
        verbose=verbose,
    ))


def _split(
    geometry: BaseGeometry,
    limits: _SplitLimits,
    depth: int,
    parent_count: Optional[int],
    stalled: int,
) -> Iterator[Polygon]:
    for polygon in iter_polygons(geometry):
        yield from _split_single(polygon, limits, depth, parent_count, stalled)


def _split_single(
    polygon: Polygon,
    limits: _SplitLimits,
    depth: int,
    parent_count: Optional[int],
    stalled: int,
) -> Iterator[Polygon]:
    count = vertex_count(polygon, limits.vertex_mode)
    if count <= limits.max_vertices:
        yield polygon
        return

    if parent_count is not None and parent_count <= count <= STALL_VERTICES:
        stalled += 1
    else:
        stalled = 0

    if limits.max_stalled is not None and stalled > limits.max_stalled:
        warnings.warn(
            f"Polygon with {count} vertices stopped shrinking after {stalled} "
            f"levels; emitting it over the budget of {limits.max_vertices}",
            SplitWarning,
            stacklevel=2,
        )
        yield polygon
        return

    if limits.max_depth is not None and depth >= limits.max_depth:
        warnings.warn(
            f"Maximum split depth {limits.max_depth} reached; emitting polygon "
            f"with {count} vertices over the budget of {limits.max_vertices}",
            SplitWarning,
            stacklevel=2,
        )
        yield polygon
        return

    if needs_repair(polygon):
        try:
            repaired = repair_polygon(polygon, verbose=limits.verbose)
        except RepairError as e:
            if limits.verbose:
                print(f"Dropping polygon: {e}")
            return
        for part in iter_polygons(repaired):
            yield from _quarter(part, limits, depth, count, stalled)
    else:
        yield from _quarter(polygon, limits, depth, count, stalled)


def _quarter(
    polygon: Polygon,
    limits: _SplitLimits,
    depth: int,
    count: int,
    stalled: int,
) -> Iterator[Polygon]:
    """Cut a polygon at its centroid and split each quadrant piece."""
    centroid = polygon.centroid
    if centroid.is_empty:
        return

    for mask in quadrant_boxes(polygon.bounds, (centroid.x, centroid.y)):
        try:
            piece = mask.intersection(polygon)
        except GEOSException as e:
            if limits.verbose:
                print(f"Intersection failed, skipping quadrant: {e}")
            continue
        yield from _split(piece, limits, depth + 1, count, stalled)


__all__ = [
    'MIN_VERTICES',
    'STALL_VERTICES',
    'DEFAULT_MAX_DEPTH',
    'DEFAULT_MAX_STALLED',
    'validate_split_limits',
    'iter_split',
    'split_polygon',
]
