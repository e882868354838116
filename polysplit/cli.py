"""Command-line interface: split every polygon of a vector dataset.

Usage:
    polysplit [options] <input> <output>

Example:
    polysplit -n parcel_id -m 100 parcels.shp parcels_split.shp
"""

import argparse
import sys
import warnings
from typing import Iterable, Iterator, List, Optional

from .core.errors import FeatureSinkError, FeatureSourceError, SplitWarning
from .io import DEFAULT_DRIVER, FeatureSink, FeatureSource
from .pipeline import (
    DEFAULT_MAX_VERTICES,
    Feature,
    SplitConfig,
    SplitStats,
    split_features,
)

# Smallest budget accepted on the command line; the splitter itself allows 4.
MIN_CLI_VERTICES = 6


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='polysplit',
        description='Split complex polygons into pieces with a bounded number of vertices',
    )
    parser.add_argument('input', help='Input vector dataset')
    parser.add_argument('output', help='Output vector dataset')
    parser.add_argument('-i', dest='input_layer', default=None,
                        help='Input layer name (default: first layer)')
    parser.add_argument('-o', dest='output_layer', default=None,
                        help='Output layer name')
    parser.add_argument('-f', dest='driver', default=DEFAULT_DRIVER,
                        help=f'OGR output driver name (default: {DEFAULT_DRIVER})')
    parser.add_argument('-n', dest='id_field', default=None,
                        help='ID field name, must be integer type (default: feature id)')
    parser.add_argument('-m', dest='max_vertices', type=int, default=DEFAULT_MAX_VERTICES,
                        help=f'Max vertices per output polygon (default: {DEFAULT_MAX_VERTICES})')
    parser.add_argument('-v', dest='verbose', action='store_true',
                        help='Verbose mode')

    args = parser.parse_args(argv)
    if args.max_vertices < MIN_CLI_VERTICES:
        parser.error(f'-m must be at least {MIN_CLI_VERTICES}')
    return args


def _with_progress(features: Iterable[Feature], total: int, verbose: bool) -> Iterator[Feature]:
    for count, feature in enumerate(features, 1):
        yield feature
        # Resumed only once the previous feature has been fully split
        if verbose:
            print(f"{count} / {total}", end="\r", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    config = SplitConfig(max_vertices=args.max_vertices, verbose=args.verbose)
    stats = SplitStats()

    try:
        with warnings.catch_warnings(), \
                FeatureSource(args.input, layer=args.input_layer, id_field=args.id_field) as source:
            # Every skipped feature is reported, not only the first
            warnings.simplefilter("always", SplitWarning)
            total = len(source)
            with FeatureSink(
                args.output,
                driver=args.driver,
                layer=args.output_layer,
                id_field=args.id_field,
                crs=source.crs,
            ) as sink:
                features = _with_progress(source, total, args.verbose)
                for piece in split_features(features, config, stats):
                    sink.write(piece)
    except (FeatureSourceError, FeatureSinkError) as e:
        print(e, file=sys.stderr)
        return 1

    print(f"{stats.features_read} features read, {stats.features_written} written.",
          file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
