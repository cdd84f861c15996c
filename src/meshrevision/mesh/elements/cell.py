from __future__ import annotations

from typing import TYPE_CHECKING

from meshrevision.mesh.elements.element import Element, ElementErrorFlag
from meshrevision.mesh.elements.quad import Quad
from meshrevision.mesh.elements.tri import Tri

if TYPE_CHECKING:
    from meshrevision.mesh.node import Node


class Cell(Element):
    """
    Base class for three-dimensional elements.

    Faces are triangles or quads; a cell is valid when it has a volume and all
    of its quad faces are planar and convex.
    """
    dimension = 3

    def _make_face(self, nodes: list[Node]) -> Element:
        if len(nodes) == 3:
            return Tri(nodes, material=self.material)
        return Quad(nodes, material=self.material)

    def validate(self) -> ElementErrorFlag:
        error = super().validate()
        for i, face_nodes in enumerate(self.face_nodes):
            if len(face_nodes) == 4:
                error |= self.face(i).validate()
        return error
