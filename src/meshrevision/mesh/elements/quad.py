from __future__ import annotations

from typing import TYPE_CHECKING

from meshrevision.geometry_utils import divided_by_line, is_coplanar, triangle_area
from meshrevision.mesh.elements.element import Element, ElementErrorFlag, MeshElemType
from meshrevision.mesh.elements.line import Line

if TYPE_CHECKING:
    from meshrevision.mesh.node import Node


class Quad(Element):
    """
    Represents a four-node linear quadrilateral.

    Nodes are ordered around the boundary; a valid quad is planar and convex.
    """
    geom_type = MeshElemType.QUAD
    n_all_nodes = 4
    dimension = 2
    face_nodes = ((0, 1), (1, 2), (2, 3), (3, 0))
    edge_nodes = ((0, 1), (1, 2), (2, 3), (3, 0))

    def _make_face(self, nodes: list[Node]) -> Element:
        return Line(nodes)

    @property
    def content(self) -> float:
        """Area of the quad as the sum of the triangles (0, 1, 2) and (0, 2, 3)."""
        a, b, c, d = (node.coords for node in self.nodes)
        return triangle_area(a, b, c) + triangle_area(a, c, d)

    def is_coplanar(self) -> bool:
        a, b, c, d = (node.coords for node in self.nodes)
        return is_coplanar(a, b, c, d)

    def is_convex(self) -> bool:
        """Both diagonals separate the two remaining corners."""
        a, b, c, d = (node.coords for node in self.nodes)
        return divided_by_line(a, c, b, d) and divided_by_line(b, d, a, c)

    def validate(self) -> ElementErrorFlag:
        error = super().validate()
        if not self.is_coplanar():
            error |= ElementErrorFlag.NON_COPLANAR
        if not self.is_convex():
            error |= ElementErrorFlag.NON_CONVEX
        return error
