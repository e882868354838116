"""Core types and utilities for polysplit.

This module provides type definitions, enums, exceptions, and core utilities
used throughout the library.
"""

from .types import VertexCountMode

from .errors import (
    PolysplitError,
    ConfigurationError,
    RepairError,
    FeatureSourceError,
    FeatureSinkError,
    SplitWarning,
)

from .geometry_utils import (
    vertex_count,
    quadrant_boxes,
    iter_polygons,
)

__all__ = [
    # Enums
    'VertexCountMode',

    # Exceptions and warnings
    'PolysplitError',
    'ConfigurationError',
    'RepairError',
    'FeatureSourceError',
    'FeatureSinkError',
    'SplitWarning',

    # Geometry helpers
    'vertex_count',
    'quadrant_boxes',
    'iter_polygons',
]
