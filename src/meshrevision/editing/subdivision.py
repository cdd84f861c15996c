"""
Element Subdivision
Splits non-planar or non-convex elements into triangles and tetrahedra.
"""
from __future__ import annotations

import logging

from meshrevision.errors import UnknownElementTypeError
from meshrevision.geometry_utils import divided_by_line
from meshrevision.mesh.elements import Element, MeshElemType, Prism, Tet, Tri

logger = logging.getLogger(__name__)

_PYRAMID_TETS = ((0, 1, 2, 4), (0, 2, 3, 4))
_PRISM_TETS = ((0, 1, 2, 3), (3, 2, 4, 5), (2, 1, 3, 4))
_HEX_PRISMS = ((0, 2, 1, 4, 6, 5), (4, 6, 7, 0, 2, 3))


def _children(element: Element, element_class: type[Element], patterns) -> list[Element]:
    return [
        element_class([element.node(i) for i in local], material=element.material)
        for local in patterns
    ]


def subdivide_quad(element: Element) -> list[Element]:
    """Two triangles split along the diagonal that separates the other corners."""
    a, b, c, d = (node.coords for node in element.nodes)
    if divided_by_line(a, c, b, d):
        return _children(element, Tri, ((0, 1, 2), (0, 2, 3)))
    return _children(element, Tri, ((0, 1, 3), (1, 2, 3)))


def subdivide_pyramid(element: Element) -> list[Element]:
    return _children(element, Tet, _PYRAMID_TETS)


def subdivide_prism(element: Element) -> list[Element]:
    return _children(element, Tet, _PRISM_TETS)


def subdivide_hex(element: Element) -> list[Element]:
    """Six tetrahedra from the two prisms on either side of the diagonal plane (0, 2, 6, 4)."""
    tets: list[Element] = []
    for prism in _children(element, Prism, _HEX_PRISMS):
        tets.extend(subdivide_prism(prism))
    return tets


_SUBDIVISION_RULES = {
    MeshElemType.QUAD: subdivide_quad,
    MeshElemType.PYRAMID: subdivide_pyramid,
    MeshElemType.PRISM: subdivide_prism,
    MeshElemType.HEXAHEDRON: subdivide_hex,
}


def subdivide_element(element: Element) -> list[Element]:
    """
    Split an element into planar, convex sub-elements sharing its nodes.

    Every child carries the material of the element.

    Raises:
        UnknownElementTypeError: If no subdivision rule exists for the type.
    """
    rule = _SUBDIVISION_RULES.get(element.geom_type)
    if rule is None:
        raise UnknownElementTypeError(element.geom_type, "subdivision")
    children = rule(element)
    logger.debug(f"Subdivided {element!r} into {len(children)} elements.")
    return children
