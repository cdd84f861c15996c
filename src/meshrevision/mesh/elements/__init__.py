from meshrevision.mesh.elements.element import Element, ElementErrorFlag, MeshElemType
from meshrevision.mesh.elements.cell import Cell
from meshrevision.mesh.elements.line import Line
from meshrevision.mesh.elements.tri import Tri
from meshrevision.mesh.elements.quad import Quad
from meshrevision.mesh.elements.tet import Tet
from meshrevision.mesh.elements.hex import Hex
from meshrevision.mesh.elements.pyramid import Pyramid
from meshrevision.mesh.elements.prism import Prism

ELEMENT_TYPE_MAP: dict[MeshElemType, type[Element]] = {
    MeshElemType.LINE: Line,
    MeshElemType.TRIANGLE: Tri,
    MeshElemType.QUAD: Quad,
    MeshElemType.TETRAHEDRON: Tet,
    MeshElemType.HEXAHEDRON: Hex,
    MeshElemType.PYRAMID: Pyramid,
    MeshElemType.PRISM: Prism,
}

__all__ = [
    "ELEMENT_TYPE_MAP",
    "Cell",
    "Element",
    "ElementErrorFlag",
    "Hex",
    "Line",
    "MeshElemType",
    "Prism",
    "Pyramid",
    "Quad",
    "Tet",
    "Tri",
]
