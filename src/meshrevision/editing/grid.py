"""
Spatial Grid
============
Uniform bucketing of node coordinates and the collapse map built on it.

The grid resolution only affects speed: cells are sized from the bounding box
so that each holds about ``GRID_MAX_POINTS_PER_CELL`` points on average.
"""
from __future__ import annotations

import logging
import math
from collections import defaultdict
from itertools import product
from typing import TYPE_CHECKING, Sequence

import numpy as np

from meshrevision.config import GRID_MAX_POINTS_PER_CELL

if TYPE_CHECKING:
    import numpy.typing as npt
    from meshrevision.mesh.node import Node

logger = logging.getLogger(__name__)


class Grid:
    """Axis-aligned uniform grid over a point cloud."""

    def __init__(
        self,
        points: npt.ArrayLike,
        max_points_per_cell: int = GRID_MAX_POINTS_PER_CELL,
    ) -> None:
        """
        Build the grid and bucket the points.

        Args:
            points: (N, 3) point coordinates.
            max_points_per_cell: Average number of points per cell.
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        self.points = points

        if len(points) == 0:
            self.min_corner = np.zeros(3)
            self.max_corner = np.zeros(3)
        else:
            self.min_corner = points.min(axis=0)
            self.max_corner = points.max(axis=0)

        extent = self.max_corner - self.min_corner
        n_cells = max(1, math.ceil(len(points) / max(1, max_points_per_cell)))
        active, edge = self._active_axes(extent, n_cells)

        if active.any():
            shape = np.where(active, np.maximum(1, np.ceil(extent / edge)), 1).astype(np.int64)
        else:
            shape = np.ones(3, dtype=np.int64)

        self.shape = shape
        self.cell_size = np.where(active, extent / shape, 1.0)

        self._cells: dict[tuple[int, int, int], list[int]] = defaultdict(list)
        if len(points):
            for i, cell in enumerate(map(tuple, self.cell_index(points))):
                self._cells[cell].append(i)

        logger.debug(
            f"Grid with {tuple(int(s) for s in self.shape)} cells for {len(points)} points."
        )

    @staticmethod
    def _active_axes(
        extent: npt.NDArray[np.float64],
        n_cells: int,
    ) -> tuple[npt.NDArray[np.bool_], float]:
        """
        Axes the grid subdivides and the edge length of its cubic cells.

        An axis thinner than one cell is flat: it gets a single layer of
        cells and the edge is recomputed over the remaining axes, so rounding
        noise on a planar point cloud does not shrink the cells.

        Args:
            extent: Bounding box size per axis.
            n_cells: Target number of cells.
        """
        active = extent > 0.0
        edge = 0.0
        while active.any():
            edge = (float(np.prod(extent[active])) / n_cells) ** (1.0 / int(active.sum()))
            thin = active & (extent < edge)
            if not thin.any():
                break
            active &= ~thin
        return active, edge

    @property
    def n_cells(self) -> int:
        return int(np.prod(self.shape))

    def cell_index(self, coords: npt.ArrayLike) -> npt.NDArray[np.int64]:
        """Cell indices of the given coordinates, clamped to the grid."""
        coords = np.asarray(coords, dtype=np.float64)
        index = np.floor((coords - self.min_corner) / self.cell_size).astype(np.int64)
        return np.clip(index, 0, self.shape - 1)

    def points_in_cube(self, center: npt.ArrayLike, half_width: float) -> npt.NDArray[np.int64]:
        """
        Indices of the points stored in all cells touching a cube.

        The result is a superset of the points inside the cube.

        Args:
            center: Cube center [X, Y, Z].
            half_width: Half of the cube edge length.
        """
        center = np.asarray(center, dtype=np.float64)
        lo = self.cell_index(center - half_width)
        hi = self.cell_index(center + half_width)

        found: list[int] = []
        if int(np.prod(hi - lo + 1)) > len(self._cells):
            # Large cube: filter the occupied cells instead of walking the range
            for cell, indices in self._cells.items():
                if all(a <= c <= b for a, c, b in zip(lo, cell, hi)):
                    found.extend(indices)
        else:
            for cell in product(*(range(int(a), int(b) + 1) for a, b in zip(lo, hi))):
                found.extend(self._cells.get(cell, ()))
        return np.array(found, dtype=np.int64)


def collapse_node_indices(nodes: Sequence[Node], eps: float) -> npt.NDArray[np.int64]:
    """
    Map every node onto the node it collapses into.

    Nodes are visited by position. A node that is still its own representative
    absorbs every later, not yet absorbed node closer than ``eps``; earlier
    nodes always win, so the result does not depend on the grid layout.

    Args:
        nodes: Nodes in mesh order; positions serve as identifiers.
        eps: Collapse distance; nodes strictly closer are merged.

    Returns:
        Array ``id_map`` with ``id_map[k]`` the position of the representative
        of node k. Representatives map onto themselves.

    Raises:
        ValueError: If ``eps`` is negative.
    """
    if eps < 0:
        raise ValueError(f"Collapse distance must be non-negative, got {eps}.")

    n = len(nodes)
    id_map = np.arange(n, dtype=np.int64)
    if n == 0:
        return id_map

    coords = np.array([node.coords for node in nodes], dtype=np.float64).reshape(-1, 3)
    grid = Grid(coords)
    sqr_eps = eps * eps

    for k in range(n):
        if id_map[k] != k:
            continue
        candidates = grid.points_in_cube(coords[k], eps)
        candidates = candidates[(candidates > k)]
        candidates = candidates[id_map[candidates] == candidates]
        if len(candidates) == 0:
            continue
        diff = coords[candidates] - coords[k]
        close = candidates[np.einsum("ij,ij->i", diff, diff) < sqr_eps]
        id_map[close] = k

    logger.debug(f"{int(np.count_nonzero(id_map != np.arange(n)))} of {n} nodes collapse with eps={eps}.")
    return id_map
