"""Main entry point for blockminmax."""

import argparse
import sys
from typing import Any, Dict, Optional, Sequence

from blockminmax.config import Config
from blockminmax.errors import BlockMinMaxError
from blockminmax.formatter import FORMATS
from blockminmax.pipeline import grid_file

USAGE_NOTES = """\
notes:
  Points outside the region are snapped to the nearest edge cell, except with
  --gmtbin, which drops them. Only cells that received at least one point are
  written. A region with a negative xmin must be attached to the flag,
  e.g. -R-10/10/-5/5.
"""


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser; flags follow the legacy tools' spelling."""
    parser = argparse.ArgumentParser(
        prog="blockminmax",
        description="Report the minimum (or maximum) z of every occupied grid cell",
        epilog=USAGE_NOTES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False
    )
    parser.add_argument("input", nargs='?', help="Input x y z file")
    parser.add_argument("-PATH", "-path", "--path", dest="path", help="Input x y z file")
    parser.add_argument("-R", dest="region", metavar="xmin/xmax/ymin/ymax",
                        help="Region bounds (inclusive)")
    parser.add_argument("-I", dest="spacing", type=float, metavar="inc",
                        help="Grid increment (default: 1)")
    parser.add_argument("-MAX", "--max", dest="find_max", action="store_true",
                        help="Compute maxima instead of minima")
    parser.add_argument("-o", "--output", dest="output",
                        help="Output file (default: <input>.min or <input>.max)")
    parser.add_argument("--config", help="JSON configuration file; flags override its values")

    # Legacy compatibility
    addressing = parser.add_mutually_exclusive_group()
    addressing.add_argument("--tclround", action="store_true",
                            help="Snap to the nearest node with ties going lower")
    addressing.add_argument("--gmtbin", action="store_true",
                            help="Gridline registration; drop points outside the region")
    parser.add_argument("--tclfmt", action="store_true",
                        help="Print x y with one decimal and z exactly as read")
    parser.add_argument("--format", dest="fmt", choices=FORMATS,
                        help="Output layout (default: gmt with --gmtbin, otherwise compact)")
    parser.add_argument("--legacy-update", action="store_true",
                        help="Reproduce the legacy last-writer update rule (parity testing only)")

    # Diagnostics
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    parser.add_argument("--plot", metavar="PNG", help="Also render the result to an image")
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    """
    Build the run configuration from parsed arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        Validated Config
    """
    config = Config.load(args.config) if args.config else Config()

    overrides: Dict[str, Dict[str, Any]] = {
        "grid": {},
        "aggregation": {},
        "output": {},
        "system": {},
    }
    if args.region is not None:
        overrides["grid"]["region"] = args.region
    if args.spacing is not None:
        overrides["grid"]["spacing"] = args.spacing
    if args.find_max:
        overrides["aggregation"]["mode"] = "max"
    if args.tclround:
        overrides["aggregation"]["addressing"] = "tie-low"
    elif args.gmtbin:
        overrides["aggregation"]["addressing"] = "gridline"
    if args.legacy_update:
        overrides["aggregation"]["update"] = "legacy"
    if args.tclfmt:
        overrides["output"]["format"] = "legacy"
    elif args.fmt is not None:
        overrides["output"]["format"] = args.fmt
    elif args.gmtbin and config.get("output", "format") == "compact":
        # GMT-style runs print x y with one decimal unless a layout was chosen
        overrides["output"]["format"] = "gmt"
    if args.progress:
        overrides["system"]["show_progress"] = True
    if args.verbose:
        overrides["system"]["verbose"] = True

    merged = config.to_dict()
    for section, params in overrides.items():
        merged[section].update(params)
    return Config(merged)


def cli_main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Command-line interface entry point.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.input and args.path:
        parser.error(f"unexpected argument: {args.input}")
    input_file = args.path or args.input
    if input_file is None:
        parser.error("missing input path (-PATH)")

    try:
        config = config_from_args(args)
        result = grid_file(input_file, args.output, config)

        if args.plot:
            from blockminmax import visualization
            grid = visualization.triplets_to_grid(
                visualization.load_triplets(result["output_file"]), config.region, config.spacing)
            fig = visualization.plot_lattice(grid, config.region, config.spacing, title=input_file)
            visualization.save_figure(fig, args.plot)
    except BlockMinMaxError as e:
        print(f"blockminmax: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        stats = result["stats"]
        print(f"Records processed: {stats['records_processed']}", file=sys.stderr)
        print(f"Points dropped: {stats['points_dropped']}", file=sys.stderr)
        print(f"Cells written: {stats['lines_written']}", file=sys.stderr)
        print(f"Total time: {stats['total_time']:.2f} seconds", file=sys.stderr)

    return 0


def main() -> None:
    """Main entry point when run as a script or module."""
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
