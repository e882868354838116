"""Common geometry utilities used by the splitter.

This module collects the small geometry primitives the recursive splitter
is built from: vertex counting, envelope quadrants and polygon extraction
from mixed intersection results.
"""

from typing import Iterator, List, Tuple

from shapely.geometry import Polygon, MultiPolygon, GeometryCollection, box
from shapely.geometry.base import BaseGeometry

from .types import VertexCountMode

Bounds = Tuple[float, float, float, float]


def vertex_count(
    polygon: Polygon,
    mode: VertexCountMode = VertexCountMode.EXTERIOR
) -> int:
    """Count the ring coordinates of a polygon that count against a budget.

    The closing coordinate is included, so a triangle counts 4 and a
    square 5.

    Args:
        polygon: Polygon to measure
        mode: Whether to count only the exterior ring or holes as well

    Returns:
        Number of coordinates

    Examples:
        >>> vertex_count(Polygon([(0, 0), (1, 0), (1, 1), (0, 1)]))
        5
    """
    if polygon.is_empty:
        return 0

    count = len(polygon.exterior.coords)
    if mode == VertexCountMode.ALL_RINGS:
        count += sum(len(ring.coords) for ring in polygon.interiors)
    return count


def quadrant_boxes(bounds: Bounds, origin: Tuple[float, float]) -> List[Polygon]:
    """Cut an envelope into four rectangular masks at ``origin``.

    Args:
        bounds: Envelope as (minx, miny, maxx, maxy)
        origin: Split point (x0, y0), normally inside the envelope

    Returns:
        Four box polygons, lower-left, upper-left, lower-right, upper-right

    Examples:
        >>> masks = quadrant_boxes((0, 0, 4, 4), (1, 3))
        >>> masks[0].bounds
        (0.0, 0.0, 1.0, 3.0)
    """
    minx, miny, maxx, maxy = bounds
    x0, y0 = origin

    return [
        box(minx, miny, x0, y0),
        box(minx, y0, x0, maxy),
        box(x0, miny, maxx, y0),
        box(x0, y0, maxx, maxy),
    ]


def iter_polygons(geometry: BaseGeometry) -> Iterator[Polygon]:
    """Yield the polygon parts of a geometry.

    Polygons are yielded as-is, MultiPolygons and GeometryCollections are
    unpacked (recursively) and every other geometry type is dropped.

    Examples:
        >>> mixed = GeometryCollection([poly, LineString([(0, 0), (1, 1)])])
        >>> list(iter_polygons(mixed)) == [poly]
        True
    """
    if geometry is None or geometry.is_empty:
        return

    if isinstance(geometry, Polygon):
        yield geometry
    elif isinstance(geometry, (MultiPolygon, GeometryCollection)):
        for part in geometry.geoms:
            yield from iter_polygons(part)


__all__ = [
    'Bounds',
    'vertex_count',
    'quadrant_boxes',
    'iter_polygons',
]
