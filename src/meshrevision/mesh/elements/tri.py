from __future__ import annotations

from typing import TYPE_CHECKING

from meshrevision.geometry_utils import triangle_area
from meshrevision.mesh.elements.element import Element, MeshElemType
from meshrevision.mesh.elements.line import Line

if TYPE_CHECKING:
    from meshrevision.mesh.node import Node


class Tri(Element):
    """
    Represents a three-node linear triangle.
    """
    geom_type = MeshElemType.TRIANGLE
    n_all_nodes = 3
    dimension = 2
    face_nodes = ((0, 1), (1, 2), (2, 0))
    edge_nodes = ((0, 1), (1, 2), (2, 0))

    def _make_face(self, nodes: list[Node]) -> Element:
        return Line(nodes)

    @property
    def content(self) -> float:
        """Area of the triangle."""
        a, b, c = (node.coords for node in self.nodes)
        return triangle_area(a, b, c)
