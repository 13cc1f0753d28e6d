"""
Comparison of gridded outputs.

Outputs are compared as sorted line sets so files produced with different
walk orders (row-major here, column-major in the legacy Tcl tool) can be
checked for identity. Sorting is by raw bytes, matching ``LC_ALL=C sort``.
"""

import argparse
import sys
from collections import Counter
from typing import List, NamedTuple, Optional, Sequence

from blockminmax.errors import BlockMinMaxError, ResourceError


class Comparison(NamedTuple):
    """Result of comparing two output files."""
    left: str
    right: str
    left_count: int
    right_count: int
    only_left: List[str]
    only_right: List[str]

    @property
    def identical(self) -> bool:
        return not self.only_left and not self.only_right


def sorted_lines(filepath: str) -> List[str]:
    """
    Read a file and return its non-empty lines in byte order.

    Raises:
        ResourceError: If the file cannot be read
    """
    try:
        with open(filepath, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise ResourceError(f"Failed to open '{filepath}': {e.strerror or e}") from e

    lines = sorted(line for line in data.splitlines() if line.strip())
    return [line.decode("utf-8", "surrogateescape") for line in lines]


def compare_files(left: str, right: str) -> Comparison:
    """
    Compare two output files as multisets of lines.

    Args:
        left: Path to the first file
        right: Path to the second file

    Returns:
        Comparison with line counts and the lines found on only one side
    """
    a = sorted_lines(left)
    b = sorted_lines(right)
    ca, cb = Counter(a), Counter(b)
    only_left = sorted((ca - cb).elements())
    only_right = sorted((cb - ca).elements())
    return Comparison(left, right, len(a), len(b), only_left, only_right)


def cli_main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point: pairwise comparison of two or more output files."""
    parser = argparse.ArgumentParser(
        prog="blockminmax-compare",
        description="Compare gridded x y z outputs after sorting their lines"
    )
    parser.add_argument("files", nargs='+', help="Output files to compare (at least two)")
    parser.add_argument("--show", type=int, default=5, metavar="N",
                        help="Show up to N differing lines per side (default: 5)")
    parser.add_argument("--plot", action="store_true",
                        help="Render each file to <file>.png on a common z scale (requires -R and -I)")
    parser.add_argument("-R", dest="region", help="Region xmin/xmax/ymin/ymax for --plot")
    parser.add_argument("-I", dest="spacing", type=float, help="Grid spacing for --plot")

    args = parser.parse_args(argv)
    if len(args.files) < 2:
        parser.error("at least two files are required")
    if args.plot and (args.region is None or args.spacing is None):
        parser.error("--plot requires -R and -I")

    try:
        all_identical = True
        for i, left in enumerate(args.files):
            for right in args.files[i + 1:]:
                result = compare_files(left, right)
                verdict = "IDENTICAL" if result.identical else "DIFFER"
                print(f"{left} vs {right}: {verdict}")
                if not result.identical:
                    all_identical = False
                    for line in result.only_left[:args.show]:
                        print(f"  < {line}")
                    for line in result.only_right[:args.show]:
                        print(f"  > {line}")

        print("Counts (lines):")
        for path in args.files:
            print(f"  {path}: {len(sorted_lines(path)):9d}")

        if args.plot:
            from blockminmax import visualization
            written = visualization.plot_files(args.files, args.region, args.spacing)
            for path in written:
                print(f"Visualization saved to {path}")
    except BlockMinMaxError as e:
        print(f"blockminmax-compare: {e}", file=sys.stderr)
        return 2

    return 0 if all_identical else 1


def main() -> None:
    """Console script entry point."""
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
