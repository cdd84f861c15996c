"""
Hexahedron and Prism Topology Tables
====================================
Constant lookup tables describing how a hexahedron is cut by the plane through
a collapsed edge, and which nodes share a prism triangle.

Local corner numbering follows :class:`meshrevision.mesh.elements.Hex` and
:class:`meshrevision.mesh.elements.Prism`.
"""
from __future__ import annotations

from types import MappingProxyType

from meshrevision.errors import UnsupportedDegeneracyError

_DIAMETRAL_NODES: tuple[int, ...] = (6, 7, 4, 5, 2, 3, 0, 1)

# Edge (a, b) -> quad (c0, c1, c2, c3) splitting the hexahedron so that the
# edge lies on one side. c0 and c3 are adjacent to a, c1 and c2 to b.
_CUTTING_QUADS = MappingProxyType({
    (0, 1): (3, 2, 5, 4),
    (1, 2): (0, 3, 6, 5),
    (2, 3): (1, 0, 7, 6),
    (3, 0): (2, 1, 4, 7),
    (4, 5): (0, 1, 6, 7),
    (5, 6): (1, 2, 7, 4),
    (6, 7): (2, 3, 4, 5),
    (7, 4): (3, 0, 5, 6),
    (0, 4): (3, 7, 5, 1),
    (1, 5): (0, 4, 6, 2),
    (2, 6): (1, 5, 7, 3),
    (3, 7): (2, 6, 4, 0),
    (1, 0): (2, 3, 4, 5),
    (2, 1): (3, 0, 5, 6),
    (3, 2): (0, 1, 6, 7),
    (0, 3): (1, 2, 7, 4),
    (5, 4): (1, 0, 7, 6),
    (6, 5): (2, 1, 4, 7),
    (7, 6): (3, 2, 5, 4),
    (4, 7): (0, 3, 6, 5),
    (4, 0): (7, 3, 1, 5),
    (5, 1): (4, 0, 2, 6),
    (6, 2): (5, 1, 3, 7),
    (7, 3): (6, 2, 0, 4),
})

_PRISM_TRIANGLE_THIRD_NODE = MappingProxyType({
    frozenset((0, 1)): 2,
    frozenset((1, 2)): 0,
    frozenset((0, 2)): 1,
    frozenset((3, 4)): 5,
    frozenset((4, 5)): 3,
    frozenset((3, 5)): 4,
})


def diametral_node(i: int) -> int:
    """Hexahedron corner opposite to corner i through the center."""
    return _DIAMETRAL_NODES[i]


def cutting_quad_nodes(i: int, j: int) -> tuple[int, int, int, int]:
    """
    Corners of the quad that cuts a hexahedron next to edge (i, j).

    Args:
        i, j: Local corners connected by a hexahedron edge.

    Returns:
        ``(c0, c1, c2, c3)`` where c0 and c3 are neighbours of i and c1 and
        c2 are neighbours of j.

    Raises:
        UnsupportedDegeneracyError: If (i, j) is not a hexahedron edge.
    """
    try:
        return _CUTTING_QUADS[(i, j)]
    except KeyError:
        raise UnsupportedDegeneracyError(
            f"Hexahedron corners {i} and {j} are not connected by an edge."
        ) from None


def hex_back_nodes(i: int, j: int, k: int, l: int) -> tuple[int, int] | None:
    """
    Edge of a hexahedron lying opposite to two collapsed edges.

    Given the collapsed edges (i, j) and (k, l), returns the corners of the
    edge along which the hexahedron splits into two prisms, each containing
    one of the collapsed edges. Handles parallel edges across the diagonal
    and edges sharing a corner.

    Returns:
        The two corners, or ``None`` if the edges are in no such configuration.
    """
    if diametral_node(i) == k:
        return i, diametral_node(l)
    if diametral_node(i) == l:
        return i, diametral_node(k)
    if diametral_node(j) == k:
        return j, diametral_node(l)
    if diametral_node(j) == l:
        return j, diametral_node(k)

    if i == k:
        return diametral_node(l), j
    if i == l:
        return diametral_node(k), j
    if j == k:
        return diametral_node(l), i
    if j == l:
        return diametral_node(k), i

    return None


def prism_third_node(i: int, j: int) -> int | None:
    """Third corner of the prism triangle containing i and j, or ``None``."""
    return _PRISM_TRIANGLE_THIRD_NODE.get(frozenset((i, j)))
