from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


class Node:
    """
    Represents a mesh node: a 3-D point with a mutable identifier.
    """
    def __init__(
        self,
        index: int,
        coords: list[float] | npt.NDArray[np.float64],
    ) -> None:
        """
        Initialize the node with coordinates.

        Args:
            index: Identifier of the node, normally its position in the owning mesh.
            coords: Coordinates of the node in the global system [X, Y, Z].
                Two-dimensional input is padded with Z = 0.
        """
        coords = np.asarray(coords, dtype=np.float64).ravel()
        if coords.size == 2:
            coords = np.append(coords, 0.0)
        if coords.size != 3:
            raise ValueError(f"Node coordinates must have 2 or 3 components, got {coords.size}.")
        self.coords = coords
        self.uid = index

    def __repr__(self) -> str:
        """String representation of the node."""
        return f"{self.__class__.__name__}(id={self.uid}, coords={self.coords})"

    @property
    def x(self) -> float:
        """X-coordinate of the node."""
        return float(self.coords[0])

    @property
    def y(self) -> float:
        """Y-coordinate of the node."""
        return float(self.coords[1])

    @property
    def z(self) -> float:
        """Z-coordinate of the node."""
        return float(self.coords[2])

    def copy(self, index: int) -> Node:
        """Independent copy of the node with a new identifier."""
        return Node(index=index, coords=self.coords.copy())
