"""Polysplit - split complex polygons into pieces with bounded vertex counts.

Polygons and multipolygons whose rings have too many vertices are cut
recursively into quadrants around their centroid until every piece fits the
vertex budget. The union of the pieces reproduces the input, which makes
them suitable for fast point-in-polygon indexing.
"""


# Splitting functions
from .split import (
    iter_split,
    split_polygon,
    validate_split_limits,
)

# Geometry repair functions
from .repair import needs_repair, repair_polygon

# Feature-level pipeline
from .pipeline import (
    SplitConfig,
    Feature,
    OutputPiece,
    SplitStats,
    split_feature,
    split_features,
)

# Core types, exceptions and helpers
from .core import (
    VertexCountMode,
    PolysplitError,
    ConfigurationError,
    RepairError,
    FeatureSourceError,
    FeatureSinkError,
    SplitWarning,
    vertex_count,
)

__all__ = [

    # Splitting
    'iter_split',
    'split_polygon',
    'validate_split_limits',

    # Geometry repair
    'needs_repair',
    'repair_polygon',

    # Pipeline
    'SplitConfig',
    'Feature',
    'OutputPiece',
    'SplitStats',
    'split_feature',
    'split_features',

    # Core types
    'VertexCountMode',
    'vertex_count',

    # Exceptions and warnings
    'PolysplitError',
    'ConfigurationError',
    'RepairError',
    'FeatureSourceError',
    'FeatureSinkError',
    'SplitWarning',
]
