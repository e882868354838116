"""End-to-end tests for dataset I/O and the command line."""

import warnings

import fiona
import numpy as np
import pytest
from fiona.model import Feature as FionaFeature
from shapely.geometry import Polygon, mapping, shape

from polysplit import FeatureSinkError, FeatureSourceError, OutputPiece, SplitWarning
from polysplit.cli import main
from polysplit.io import FeatureSink, FeatureSource
from polysplit.pipeline import SplitConfig, split_features


def _square(x=0.0, y=0.0, size=10.0) -> Polygon:
    return Polygon([(x, y), (x + size, y), (x + size, y + size), (x, y + size)])


def _circle(n=400, radius=50.0) -> Polygon:
    angles = np.linspace(0, 2 * np.pi, n, endpoint=False)
    return Polygon(np.column_stack([radius * np.cos(angles), radius * np.sin(angles)]))


def _write_input(path, records):
    """Write (parcel_id, name, geometry) records to a GeoJSON file."""
    schema = {
        "geometry": "Polygon",
        "properties": {"parcel_id": "int", "name": "str"},
    }
    with fiona.open(path, "w", driver="GeoJSON", schema=schema) as dst:
        for parcel_id, name, geometry in records:
            dst.write(FionaFeature.from_dict({
                "geometry": mapping(geometry) if geometry is not None else None,
                "properties": {"parcel_id": parcel_id, "name": name},
            }))
    return str(path)


def _read_output(path):
    with fiona.open(path) as src:
        return [(dict(f.properties), shape(f.geometry)) for f in src]


@pytest.fixture
def input_path(tmp_path):
    return _write_input(tmp_path / "parcels.geojson", [
        (42, "round", _circle()),
        (7, "square", _square(x=100)),
    ])


class TestFeatureSource:

    def test_reads_id_field(self, input_path):
        with FeatureSource(input_path, id_field="parcel_id") as source:
            features = list(source)
            assert len(source) == 2

        assert [f.id for f in features] == [42, 7]
        assert features[1].geometry.equals(_square(x=100))

    def test_falls_back_to_feature_ids(self, input_path):
        with fiona.open(input_path) as src:
            fids = [int(f.id) for f in src]

        with FeatureSource(input_path) as source:
            assert [f.id for f in source] == fids

    def test_missing_id_field(self, input_path):
        with pytest.raises(FeatureSourceError, match="Can't find ID field"):
            with FeatureSource(input_path, id_field="nope"):
                pass

    def test_non_integer_id_field(self, input_path):
        with pytest.raises(FeatureSourceError, match="isn't integer type"):
            with FeatureSource(input_path, id_field="name"):
                pass

    def test_missing_file(self, tmp_path):
        with pytest.raises(FeatureSourceError, match="Opening"):
            with FeatureSource(str(tmp_path / "missing.shp")):
                pass

    def test_null_geometry(self, tmp_path):
        path = _write_input(tmp_path / "nulls.geojson", [(1, "empty", None), (2, "sq", _square())])

        with FeatureSource(path, id_field="parcel_id") as source:
            with pytest.warns(SplitWarning):
                pieces = list(split_features(source, SplitConfig()))

        assert [p.id for p in pieces] == [2]


class TestFeatureSink:

    def test_round_trip(self, tmp_path):
        path = str(tmp_path / "out.geojson")
        with FeatureSink(path, driver="GeoJSON", id_field="parcel_id") as sink:
            sink.write(OutputPiece(42, _square()))
            sink.write(OutputPiece(42, _square(x=10)))

        rows = _read_output(path)
        assert [props["parcel_id"] for props, _ in rows] == [42, 42]
        assert rows[1][1].equals(_square(x=10))

    def test_unknown_driver(self, tmp_path):
        with pytest.raises(FeatureSinkError, match="Creation of output file"):
            with FeatureSink(str(tmp_path / "out.xyz"), driver="NoSuchDriver"):
                pass

    def test_write_when_closed(self, tmp_path):
        sink = FeatureSink(str(tmp_path / "out.geojson"), driver="GeoJSON")
        with pytest.raises(FeatureSinkError):
            sink.write(OutputPiece(1, _square()))


class TestMain:

    def test_split_dataset(self, input_path, tmp_path, capsys):
        output = str(tmp_path / "split.geojson")

        code = main(["-f", "GeoJSON", "-n", "parcel_id", "-m", "50", input_path, output])

        assert code == 0
        rows = _read_output(output)
        round_pieces = [geom for props, geom in rows if props["parcel_id"] == 42]
        square_pieces = [geom for props, geom in rows if props["parcel_id"] == 7]

        assert len(round_pieces) > 1
        assert all(len(geom.exterior.coords) <= 50 for geom in round_pieces)
        assert sum(geom.area for geom in round_pieces) == pytest.approx(_circle().area)
        assert len(square_pieces) == 1

        err = capsys.readouterr().err
        assert f"2 features read, {len(rows)} written." in err

    def test_default_id_field(self, input_path, tmp_path):
        output = str(tmp_path / "split.shp")
        with fiona.open(input_path) as src:
            fids = {int(f.id) for f in src}

        assert main([input_path, output]) == 0

        ids = {props["id"] for props, _ in _read_output(output)}
        assert ids == fids

    def test_verbose_progress(self, input_path, tmp_path, capsys):
        output = str(tmp_path / "split.geojson")
        main(["-v", "-f", "GeoJSON", "-m", "50", input_path, output])
        assert "2 / 2" in capsys.readouterr().err

    def test_budget_too_small(self, input_path, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(["-m", "5", input_path, str(tmp_path / "out.shp")])
        assert excinfo.value.code == 2

    def test_missing_id_field_fails(self, input_path, tmp_path, capsys):
        code = main(["-f", "GeoJSON", "-n", "nope", input_path, str(tmp_path / "out.geojson")])
        assert code == 1
        assert "Can't find ID field nope." in capsys.readouterr().err

    def test_bad_driver_fails(self, input_path, tmp_path, capsys):
        code = main(["-f", "NoSuchDriver", input_path, str(tmp_path / "out.xyz")])
        assert code == 1
        assert "Creation of output file" in capsys.readouterr().err

    def test_each_null_geometry_reported(self, tmp_path, capsys):
        path = _write_input(tmp_path / "nulls.geojson", [
            (5, "a", None),
            (5, "b", None),
            (5, "c", None),
        ])

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("once", SplitWarning)
            code = main(["-f", "GeoJSON", "-n", "parcel_id", path, str(tmp_path / "out.geojson")])

        assert code == 0
        messages = [str(w.message) for w in caught if issubclass(w.category, SplitWarning)]
        assert messages == ["Feature 5 has no geometry"] * 3
        assert "3 features read, 0 written." in capsys.readouterr().err
