"""Feature-level splitting: pairs every piece with its source feature id."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from .core.errors import SplitWarning
from .core.types import VertexCountMode
from .split import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_STALLED,
    iter_split,
    validate_split_limits,
)

DEFAULT_MAX_VERTICES = 250


@dataclass
class SplitConfig:
    """Settings shared by every split in a run."""

    max_vertices: int = DEFAULT_MAX_VERTICES
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH
    max_stalled: Optional[int] = DEFAULT_MAX_STALLED
    vertex_mode: VertexCountMode = VertexCountMode.EXTERIOR
    verbose: bool = False

    def validate(self) -> None:
        """Raise ConfigurationError if the settings are unusable."""
        validate_split_limits(self.max_vertices, self.max_depth, self.max_stalled)


@dataclass
class Feature:
    """An input record: integer identifier plus an optional geometry."""

    id: int
    geometry: Optional[BaseGeometry]


@dataclass
class OutputPiece:
    """A split polygon tagged with the id of the feature it came from."""

    id: int
    polygon: Polygon


@dataclass
class SplitStats:
    """Running counts of features consumed and pieces produced."""

    features_read: int = 0
    features_written: int = 0


def split_feature(feature: Feature, config: SplitConfig) -> Iterator[OutputPiece]:
    """Split one feature's geometry, tagging each piece with the feature id.

    A feature without geometry produces no pieces and a :class:`SplitWarning`
    naming the feature.
    """
    if feature.geometry is None:
        warnings.warn(f"Feature {feature.id} has no geometry", SplitWarning, stacklevel=2)
        return

    pieces = iter_split(
        feature.geometry,
        config.max_vertices,
        max_depth=config.max_depth,
        max_stalled=config.max_stalled,
        vertex_mode=config.vertex_mode,
        verbose=config.verbose,
    )
    for polygon in pieces:
        yield OutputPiece(feature.id, polygon)


def split_features(
    features: Iterable[Feature],
    config: SplitConfig,
    stats: Optional[SplitStats] = None,
) -> Iterator[OutputPiece]:
    """Split a stream of features lazily.

    The config is validated before the first feature is read. When ``stats``
    is given it is updated as pieces are yielded: ``features_written`` per
    piece, ``features_read`` once a feature is exhausted.

    Examples:
        >>> stats = SplitStats()
        >>> pieces = list(split_features([Feature(42, poly)], SplitConfig(), stats))
        >>> stats.features_read
        1
    """
    config.validate()
    if stats is None:
        stats = SplitStats()

    for feature in features:
        for piece in split_feature(feature, config):
            stats.features_written += 1
            yield piece
        stats.features_read += 1


__all__ = [
    "DEFAULT_MAX_VERTICES",
    "SplitConfig",
    "Feature",
    "OutputPiece",
    "SplitStats",
    "split_feature",
    "split_features",
]
