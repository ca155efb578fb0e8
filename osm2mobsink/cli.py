import argparse
import sys

from .config import ConversionConfig, DimensionPolicy, GapPolicy
from .converter import convert


def positive_int(text):
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {text}")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="osm2mobsink",
        description="Convert an OpenStreetMap XML file into a MobSink XML network."
    )
    parser.add_argument("-i", "--input", required=True, help="load OSM XML data from input file")
    parser.add_argument("-o", "--output", required=True, help="save MobSink XML network to output file")
    parser.add_argument("--width", type=positive_int, help="network width (derived from the bounds if omitted)")
    parser.add_argument("--height", type=positive_int, help="network height (derived from the bounds if omitted)")
    parser.add_argument("--speed-limit", type=positive_int, help="default network speed limit")
    parser.add_argument(
        "--dimension-policy",
        choices=[p.value for p in DimensionPolicy],
        default=DimensionPolicy.ASPECT.value,
        help="how a missing width/height is derived (default: aspect)"
    )
    parser.add_argument(
        "--gap-policy",
        choices=[p.value for p in GapPolicy],
        default=GapPolicy.BRIDGE.value,
        help="bridge or split a way at references to unknown nodes (default: bridge)"
    )
    parser.add_argument(
        "--highway",
        action="append",
        metavar="TYPE",
        help="only export ways with this highway=* value (repeatable; default: all)"
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    config = ConversionConfig(
        dimension_policy=DimensionPolicy(args.dimension_policy),
        gap_policy=GapPolicy(args.gap_policy),
        highway_types=frozenset(args.highway) if args.highway else None,
    )

    print("[INFO] OpenStreetMap file:", args.input)
    print("[INFO] MobSink file:", args.output)

    result = convert(
        args.input,
        args.output,
        width=args.width,
        height=args.height,
        speed_limit=args.speed_limit,
        config=config,
    )

    diag = result.diagnostics
    for warning in diag.warnings:
        print(f"[WARN] {warning}")

    if not result.success:
        print(f"[ERROR] Conversion failed ({result.failure}): {result.error}")
        return 1

    dims = result.network.dimensions
    print(f"[INFO] Network: {dims.width} x {dims.height}, speed limit {dims.speed_limit}")
    print(f"     Nodes read      : {diag.nodes_read} ({diag.nodes_out_of_bounds} out of bounds)")
    print(f"     Ways read       : {diag.ways_read} ({diag.ways_discarded} discarded)")
    print(f"     Missing refs    : {diag.missing_references}")
    print(f"     Paths written   : {diag.segments_written}")
    print("[DONE] MobSink network saved to:", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
