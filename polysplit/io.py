"""Vector dataset input and output through Fiona.

These are thin adapters between OGR-readable datasets and the
:class:`~polysplit.pipeline.Feature` / :class:`~polysplit.pipeline.OutputPiece`
records the pipeline works with.
"""

from __future__ import annotations

from typing import Iterator, Optional

import fiona
from fiona.errors import FionaError
from fiona.model import Feature as FionaFeature
from shapely.geometry import mapping, shape

from .core.errors import FeatureSinkError, FeatureSourceError
from .pipeline import Feature, OutputPiece

DEFAULT_DRIVER = "ESRI Shapefile"
DEFAULT_ID_FIELD = "id"

_INTEGER_TYPES = ("int", "int32", "int64")


def _is_integer_field(field_type: str) -> bool:
    # Fiona reports widths as e.g. "int:10"
    return field_type.split(":")[0] in _INTEGER_TYPES


class FeatureSource:
    """Read features from a vector dataset.

    The first layer is used unless ``layer`` is given. Feature ids come from
    the integer field ``id_field`` when one is named, otherwise from the
    dataset's feature ids.

    Examples:
        >>> with FeatureSource("parcels.shp", id_field="parcel_id") as source:
        ...     for feature in source:
        ...         print(feature.id, feature.geometry.geom_type)
    """

    def __init__(self, path: str, layer: Optional[str] = None, id_field: Optional[str] = None):
        self.path = path
        self.layer = layer
        self.id_field = id_field
        self._collection = None

    def __enter__(self) -> "FeatureSource":
        try:
            self._collection = fiona.open(self.path, layer=self.layer)
        except (FionaError, ValueError, OSError) as e:
            raise FeatureSourceError(f"Opening {self.path} failed: {e}") from e

        try:
            self._check_id_field()
        except FeatureSourceError:
            self.close()
            raise
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._collection is not None:
            self._collection.close()
            self._collection = None

    @property
    def crs(self):
        return self._require_open().crs

    def __len__(self) -> int:
        return len(self._require_open())

    def __iter__(self) -> Iterator[Feature]:
        for record in self._require_open():
            yield self._to_feature(record)

    def _require_open(self):
        if self._collection is None:
            raise FeatureSourceError(f"{self.path} is not open")
        return self._collection

    def _check_id_field(self) -> None:
        if self.id_field is None:
            return
        properties = self._collection.schema["properties"]
        if self.id_field not in properties:
            raise FeatureSourceError(f"Can't find ID field {self.id_field}.")
        if not _is_integer_field(properties[self.id_field]):
            raise FeatureSourceError(f"ID field {self.id_field} isn't integer type!")

    def _to_feature(self, record: FionaFeature) -> Feature:
        if self.id_field is None:
            feature_id = int(record.id)
        else:
            value = record.properties[self.id_field]
            # Null ids are written as 0, matching OGR's integer accessor
            feature_id = int(value) if value is not None else 0

        geometry = shape(record.geometry) if record.geometry is not None else None
        return Feature(feature_id, geometry)


class FeatureSink:
    """Write split pieces to a new Polygon layer with one integer id field.

    Examples:
        >>> with FeatureSink("out.shp", id_field="parcel_id") as sink:
        ...     sink.write(OutputPiece(42, polygon))
    """

    def __init__(
        self,
        path: str,
        driver: str = DEFAULT_DRIVER,
        layer: Optional[str] = None,
        id_field: Optional[str] = None,
        crs=None,
    ):
        self.path = path
        self.driver = driver
        self.layer = layer
        self.id_field = id_field or DEFAULT_ID_FIELD
        self.crs = crs
        self._collection = None

    def __enter__(self) -> "FeatureSink":
        schema = {
            "geometry": "Polygon",
            "properties": {self.id_field: "int"},
        }
        try:
            self._collection = fiona.open(
                self.path,
                "w",
                driver=self.driver,
                schema=schema,
                crs=self.crs,
                layer=self.layer,
            )
        except (FionaError, ValueError, OSError) as e:
            raise FeatureSinkError(f"Creation of output file {self.path} failed: {e}") from e
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._collection is not None:
            self._collection.close()
            self._collection = None

    def write(self, piece: OutputPiece) -> None:
        """Write one piece; raises FeatureSinkError on failure."""
        if self._collection is None:
            raise FeatureSinkError(f"{self.path} is not open")

        record = FionaFeature.from_dict({
            "geometry": mapping(piece.polygon),
            "properties": {self.id_field: int(piece.id)},
        })
        try:
            self._collection.write(record)
        except (FionaError, ValueError, OSError) as e:
            raise FeatureSinkError(f"Failed to create feature in output: {e}") from e


__all__ = [
    "DEFAULT_DRIVER",
    "DEFAULT_ID_FIELD",
    "FeatureSource",
    "FeatureSink",
]
