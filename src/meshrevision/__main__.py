"""Command-line interface."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from meshrevision.config import DEFAULT_COLLAPSE_EPS, DEFAULT_MIN_ELEM_DIM
from meshrevision.editing import MeshRevision
from meshrevision.logging_config import setup_logging
from meshrevision.mesh import Mesh
from meshrevision.mesh.io import MeshIO

logger = logging.getLogger("meshrevision.cli")

COMMANDS = ("collapse", "simplify", "subdivide", "count")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse the CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="meshrevision",
        description="Collapse nodes, simplify degenerate elements or subdivide non-planar elements of a mesh.",
    )
    parser.add_argument("command", choices=COMMANDS, help="Revision to run")
    parser.add_argument("input_path", help="Input mesh (.msh read with gmsh, other suffixes with pyvista)")
    parser.add_argument(
        "-o",
        "--output",
        dest="output_path",
        default=None,
        help="Output mesh; the suffix selects the format (required except for 'count')",
    )
    parser.add_argument(
        "--eps",
        dest="eps",
        type=float,
        default=DEFAULT_COLLAPSE_EPS,
        help="Distance below which nodes are collapsed (default: %(default)s)",
    )
    parser.add_argument(
        "--min-dim",
        dest="min_elem_dim",
        type=int,
        choices=(1, 2, 3),
        default=DEFAULT_MIN_ELEM_DIM,
        help="Lowest element dimension kept by 'simplify' (default: %(default)s)",
    )
    parser.add_argument(
        "--name",
        dest="name",
        default=None,
        help="Name of the resulting mesh (default: output file stem)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="INFO",
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument("--log-file", dest="log_file", default=None, help="Also write the log to this file")
    parser.add_argument("--plot", dest="plot", action="store_true", help="Plot the resulting mesh")

    args = parser.parse_args(argv)
    if args.command != "count" and args.output_path is None:
        parser.error(f"the following arguments are required for '{args.command}': -o/--output")
    if args.eps < 0:
        parser.error("--eps must be non-negative")
    return args


def _log_summary(label: str, mesh: Mesh) -> None:
    counts = ", ".join(f"{t.value}: {n}" for t, n in sorted(mesh.element_type_counts().items()))
    logger.info(f"{label} '{mesh.name}': {mesh.n_nodes} nodes, {mesh.n_elements} elements ({counts or 'none'}).")


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    try:
        mesh = MeshIO.read(args.input_path)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    _log_summary("Input", mesh)
    revision = MeshRevision(mesh)

    if args.command == "count":
        n = revision.count_collapsible_nodes(args.eps)
        print(n)
        logger.info(f"{n} nodes of '{mesh.name}' collapse with eps={args.eps}.")
        return 0

    name = args.name or MeshIO.stem(args.output_path)
    if args.command == "collapse":
        result = revision.collapse_nodes(name, args.eps)
    elif args.command == "simplify":
        result = revision.simplify_mesh(name, args.eps, args.min_elem_dim)
    else:
        result = revision.subdivide_mesh(name)

    if result is None:
        logger.error(f"'{args.command}' produced no mesh.")
        return 1

    _log_summary("Output", result)
    MeshIO.write(result, args.output_path)
    if args.plot:
        result.plot()
    return 0


if __name__ == "__main__":
    sys.exit(main())
