from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Flag, StrEnum, auto
from typing import TYPE_CHECKING, ClassVar, Sequence

import numpy as np

from meshrevision.config import ZERO_CONTENT_TOLERANCE

if TYPE_CHECKING:
    import numpy.typing as npt
    from meshrevision.mesh.node import Node


class MeshElemType(StrEnum):
    LINE = "line"
    TRIANGLE = "triangle"
    QUAD = "quad"
    TETRAHEDRON = "tetrahedron"
    HEXAHEDRON = "hexahedron"
    PYRAMID = "pyramid"
    PRISM = "prism"


class ElementErrorFlag(Flag):
    """Result of :meth:`Element.validate`; an empty flag means the element is valid."""
    ZERO_VOLUME = auto()
    NON_COPLANAR = auto()
    NON_CONVEX = auto()

    @classmethod
    def none(cls) -> ElementErrorFlag:
        return cls(0)


class Element(ABC):
    """
    Abstract base class for mesh elements.

    Concrete classes fix the number of nodes and carry the local topology
    (faces and edges) as class-level tables. The node order of an element is
    significant: it encodes which nodes form which face and edge.
    """
    geom_type: ClassVar[MeshElemType]
    n_all_nodes: ClassVar[int]
    dimension: ClassVar[int]
    face_nodes: ClassVar[tuple[tuple[int, ...], ...]] = ()
    edge_nodes: ClassVar[tuple[tuple[int, int], ...]] = ()

    def __init__(
        self,
        nodes: Sequence[Node],
        material: int = 0,
        index: int = 0,
    ) -> None:
        """
        Initialize the element.

        Args:
            nodes: Nodes of the element in local order. The element references
                the nodes, it does not own them.
            material: Material (region) value, opaque to the revision algorithms.
            index: Element index.
        """
        if len(nodes) != self.n_all_nodes:
            raise ValueError(
                f"{self.__class__.__name__} requires {self.n_all_nodes} nodes, got {len(nodes)}."
            )
        self.nodes: tuple[Node, ...] = tuple(nodes)
        self.material = int(material)
        self.id = index

    def __repr__(self) -> str:
        """String representation of the element."""
        node_ids = [node.uid for node in self.nodes]
        return f"{self.__class__.__name__}(id={self.id}, nodes={node_ids}, material={self.material})"

    @property
    def n_nodes(self) -> int:
        """Number of nodes in the element."""
        return len(self.nodes)

    @property
    def n_faces(self) -> int:
        return len(self.face_nodes)

    @property
    def coords(self) -> npt.NDArray[np.float64]:
        """Node coordinates as an (n_nodes, 3) array."""
        return np.array([node.coords for node in self.nodes], dtype=np.float64)

    @property
    def center(self) -> npt.NDArray[np.float64]:
        """Arithmetic mean of the node coordinates."""
        return self.coords.mean(axis=0)

    def node(self, i: int) -> Node:
        """Node at local index i."""
        return self.nodes[i]

    def local_index(self, node: Node) -> int:
        """
        Local index of a node of this element.

        Raises:
            ValueError: If the node is not referenced by the element.
        """
        for i, n in enumerate(self.nodes):
            if n is node:
                return i
        raise ValueError(f"{node!r} is not a node of {self!r}.")

    def is_edge(self, i: int, j: int) -> bool:
        """Whether the local nodes i and j are connected by an edge."""
        return (i, j) in self.edge_nodes or (j, i) in self.edge_nodes

    def face(self, i: int) -> Element:
        """
        Transient element spanning face i.

        The face shares the node references of this element; it is not part
        of any mesh.
        """
        if not 0 <= i < self.n_faces:
            raise IndexError(f"{self.__class__.__name__} has no face {i}.")
        return self._make_face([self.nodes[k] for k in self.face_nodes[i]])

    def _make_face(self, nodes: list[Node]) -> Element:
        raise NotImplementedError(f"{self.__class__.__name__} has no faces.")

    @property
    @abstractmethod
    def content(self) -> float:
        """Length, area or volume of the element."""
        pass

    def validate(self) -> ElementErrorFlag:
        """
        Check the element geometry.

        Returns:
            Flags describing every detected defect.
        """
        error = ElementErrorFlag.none()
        if self.content < ZERO_CONTENT_TOLERANCE:
            error |= ElementErrorFlag.ZERO_VOLUME
        return error
