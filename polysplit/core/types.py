"""Type definitions for polysplit operations.

This module defines enums for strategy parameters throughout the library.
"""

from enum import Enum


class VertexCountMode(Enum):
    """Which rings count against the vertex budget.

    Attributes:
        EXTERIOR: Only the exterior ring is counted (default)
        ALL_RINGS: Exterior ring plus every hole

    Examples:
        >>> from polysplit import split_polygon, VertexCountMode
        >>> pieces = split_polygon(poly, 50, vertex_mode=VertexCountMode.ALL_RINGS)
    """
    EXTERIOR = 'exterior'
    ALL_RINGS = 'all_rings'


__all__ = [
    'VertexCountMode',
]
