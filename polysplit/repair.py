"""Best-effort repair of invalid polygons before splitting.

Only the buffer(0) trick is used: it collapses self-intersections and
degenerate spikes, at the cost of occasionally dropping slivers or one lobe
of a bowtie. That approximation is accepted, the splitter only needs a
valid polygon to intersect against.
"""

from shapely.errors import GEOSException
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry
from shapely.validation import explain_validity

from .core.errors import RepairError


def needs_repair(polygon: Polygon) -> bool:
    """Return True if the polygon is invalid or has non-simple rings."""
    return not (polygon.is_valid and polygon.is_simple)


def repair_polygon(polygon: Polygon, verbose: bool = False) -> BaseGeometry:
    """Repair an invalid or non-simple polygon with buffer(0).

    Valid, simple polygons are returned unchanged (the same object). The
    repaired result can be a Polygon, a MultiPolygon or an empty geometry,
    and may differ slightly in shape from the input.

    Args:
        polygon: Polygon to repair
        verbose: Print the validity problem before repairing (default: False)

    Returns:
        Valid geometry covering the polygon's well-defined area

    Raises:
        RepairError: If GEOS fails to buffer the polygon

    Examples:
        >>> bowtie = Polygon([(0, 0), (2, 2), (2, 0), (0, 2)])
        >>> repair_polygon(bowtie).is_valid
        True
    """
    if not needs_repair(polygon):
        return polygon

    if verbose:
        print(f"Repairing polygon: {explain_validity(polygon)}")

    try:
        return polygon.buffer(0)
    except GEOSException as e:
        raise RepairError(f"Buffer repair failed: {e}") from e


__all__ = ['needs_repair', 'repair_polygon']
