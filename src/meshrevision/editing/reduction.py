"""
Element Reduction
=================
Rewrites elements that lost nodes through collapsing as valid elements built
from the surviving unique nodes.

The result depends on the element type and on the number of unique nodes:

========== ====== ===============================================
Type       Unique Result
========== ====== ===============================================
hexahedron 7      pyramid + prism
hexahedron 6      prism, or tetrahedra of two half prisms
hexahedron 5      two tetrahedra sharing an apex
prism      5      two tetrahedra
hex/pyr/   4      quad if coplanar, tetrahedron otherwise
prism
any        3      triangle if ``min_elem_dim < 3``
any        2      line if ``min_elem_dim == 1``
========== ====== ===============================================
"""
from __future__ import annotations

import logging
from itertools import combinations, permutations, product
from typing import TYPE_CHECKING, Sequence

from meshrevision.config import DEFAULT_MIN_ELEM_DIM
from meshrevision.editing.topology import (
    cutting_quad_nodes,
    diametral_node,
    hex_back_nodes,
    prism_third_node,
)
from meshrevision.errors import UnknownElementTypeError, UnsupportedDegeneracyError
from meshrevision.geometry_utils import is_coplanar, tetrahedron_signed_volume
from meshrevision.mesh.elements import (
    Element,
    Hex,
    Line,
    MeshElemType,
    Prism,
    Pyramid,
    Quad,
    Tet,
    Tri,
)

if TYPE_CHECKING:
    import numpy as np
    import numpy.typing as npt
    from meshrevision.mesh.node import Node

logger = logging.getLogger(__name__)

# Corners of the undeformed unit hexahedron, for the orientation of its sub-tetrahedra
_REFERENCE_HEX = (
    (0.0, 0.0, 0.0),
    (1.0, 0.0, 0.0),
    (1.0, 1.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 1.0),
    (1.0, 0.0, 1.0),
    (1.0, 1.0, 1.0),
    (0.0, 1.0, 1.0),
)

# The six conforming splits of a prism into three tetrahedra, one per order of
# its bottom triangle
_PRISM_STAIRCASES = tuple(
    ((p, q, r, p + 3), (q, r, p + 3, q + 3), (r, p + 3, q + 3, r + 3))
    for p, q, r in permutations(range(3))
)


def count_unique_nodes(element: Element, node_ids: npt.NDArray[np.int64]) -> int:
    """Number of distinct new nodes an element refers to after collapsing."""
    return len({int(node_ids[node.uid]) for node in element.nodes})


class ElementReducer:
    """
    Builds replacement elements for collapsed elements.

    Source elements reference the nodes of the source mesh; replacements
    reference ``new_nodes`` through ``node_ids`` (see :func:`copy_nodes`).
    """

    def __init__(
        self,
        new_nodes: Sequence[Node],
        node_ids: npt.NDArray[np.int64],
        min_elem_dim: int = DEFAULT_MIN_ELEM_DIM,
    ) -> None:
        """
        Args:
            new_nodes: Nodes of the mesh under construction.
            node_ids: Source node position -> position in ``new_nodes``.
            min_elem_dim: Elements of lower dimension are not produced.
        """
        if min_elem_dim not in (1, 2, 3):
            raise ValueError(f"Minimum element dimension must be 1, 2 or 3, got {min_elem_dim}.")
        self.new_nodes = new_nodes
        self.node_ids = node_ids
        self.min_elem_dim = min_elem_dim

    # --- node helpers ---

    def _new_id(self, element: Element, i: int) -> int:
        return int(self.node_ids[element.node(i).uid])

    def _new_node(self, element: Element, i: int) -> Node:
        return self.new_nodes[self._new_id(element, i)]

    def _collapsed(self, element: Element, i: int, j: int) -> bool:
        return self._new_id(element, i) == self._new_id(element, j)

    def _unique_local_nodes(self, element: Element) -> list[int]:
        """Local indices of the first occurrence of every unique new node."""
        seen: set[int] = set()
        unique: list[int] = []
        for i in range(element.n_nodes):
            new_id = self._new_id(element, i)
            if new_id not in seen:
                seen.add(new_id)
                unique.append(i)
        return unique

    def _first_collapsed_pair(self, element: Element) -> tuple[int, int]:
        for i, j in combinations(range(element.n_nodes), 2):
            if self._collapsed(element, i, j):
                return i, j
        raise UnsupportedDegeneracyError(f"{element!r} has no collapsed node pair.")

    def _build(self, element_class: type[Element], element: Element, local: Sequence[int]) -> Element:
        return element_class([self._new_node(element, i) for i in local], material=element.material)

    # --- public ---

    def reduce(self, element: Element, n_unique: int | None = None) -> list[Element]:
        """
        Replace a collapsed element.

        Args:
            element: Source element with at least one collapsed node pair.
            n_unique: Number of unique nodes, computed when omitted.

        Returns:
            The replacement elements; empty when the result would fall below
            the minimum element dimension.

        Raises:
            UnknownElementTypeError: If the element type cannot be reduced.
            UnsupportedDegeneracyError: If the collapse pattern has no
                defined reduction.
        """
        if n_unique is None:
            n_unique = count_unique_nodes(element, self.node_ids)

        geom_type = element.geom_type
        if geom_type == MeshElemType.HEXAHEDRON:
            reduced = self._reduce_hex(element, n_unique)
        elif geom_type == MeshElemType.PRISM:
            reduced = self._reduce_prism(element, n_unique)
        elif geom_type in (
            MeshElemType.LINE,
            MeshElemType.TRIANGLE,
            MeshElemType.QUAD,
            MeshElemType.TETRAHEDRON,
            MeshElemType.PYRAMID,
        ):
            reduced = self._reduce_low(element, n_unique)
        else:
            raise UnknownElementTypeError(geom_type, "reduction")

        logger.debug(
            f"Reduced {geom_type} with {n_unique} unique nodes to "
            f"{[e.geom_type.value for e in reduced]}."
        )
        return reduced

    # --- generic cases ---

    def _reduce_low(self, element: Element, n_unique: int) -> list[Element]:
        """Reductions to four, three or two unique nodes."""
        unique = self._unique_local_nodes(element)
        if n_unique == 4 and element.n_nodes > 4:
            return self._four_node_element(element, unique)
        if n_unique == 3:
            if self.min_elem_dim < 3:
                return [self._build(Tri, element, unique[:3])]
            logger.debug(f"Dropping {element!r}: triangle below minimum dimension {self.min_elem_dim}.")
            return []
        if n_unique == 2:
            if self.min_elem_dim == 1:
                return [self._build(Line, element, unique[:2])]
            logger.debug(f"Dropping {element!r}: line below minimum dimension {self.min_elem_dim}.")
            return []
        raise UnsupportedDegeneracyError(
            f"No reduction of a {element.geom_type} to {n_unique} unique nodes."
        )

    def _four_node_element(self, element: Element, unique: Sequence[int]) -> list[Element]:
        """Quad if the four unique nodes are coplanar, tetrahedron otherwise."""
        a, b, c, d = (self._new_node(element, i) for i in unique[:4])
        if not is_coplanar(a.coords, b.coords, c.coords, d.coords):
            return [Tet([a, b, c, d], material=element.material)]

        if self.min_elem_dim == 3:
            logger.debug(f"Dropping {element!r}: quad below minimum dimension {self.min_elem_dim}.")
            return []

        quad = None
        for nodes in ((a, b, c, d), (a, c, b, d), (a, c, d, b)):
            quad = Quad(nodes, material=element.material)
            if not quad.validate():
                return [quad]
        logger.warning(f"No valid node order found for the quad reduced from {element!r}.")
        return [quad]

    # --- hexahedron ---

    def _reduce_hex(self, element: Element, n_unique: int) -> list[Element]:
        if n_unique == 7:
            return self._hex_seven(element)
        if n_unique == 6:
            return self._hex_six(element)
        if n_unique == 5:
            return self._hex_five(element)
        return self._reduce_low(element, n_unique)

    def _hex_seven(self, element: Element) -> list[Element]:
        """Pyramid on the cutting quad with the collapsed corner as apex, plus the opposite prism."""
        i, j = self._first_collapsed_pair(element)
        if not element.is_edge(i, j):
            raise UnsupportedDegeneracyError(
                f"Collapsed hexahedron corners {i} and {j} of {element!r} are not connected by an edge."
            )
        c0, c1, c2, c3 = cutting_quad_nodes(i, j)
        pyramid = self._build(Pyramid, element, (c0, c1, c2, c3, i))
        prism = self._build(Prism, element, (diametral_node(j), c0, c3, diametral_node(i), c1, c2))
        return [pyramid, prism]

    def _hex_six(self, element: Element) -> list[Element]:
        # A face with two opposite edges collapsed leaves a single prism
        for face in Hex.face_nodes:
            f0, f1, f2, f3 = face
            if self._collapsed(element, f1, f2) and self._collapsed(element, f3, f0):
                f0, f1, f2, f3 = f3, f0, f1, f2
            if self._collapsed(element, f0, f1) and self._collapsed(element, f2, f3):
                prism = self._build(
                    Prism,
                    element,
                    (diametral_node(f0), diametral_node(f1), f2, diametral_node(f3), diametral_node(f2), f0),
                )
                return [prism]

        # Two collapsed edges elsewhere: split into two prisms holding one edge each
        collapsed_edges = [
            (i, j) for i, j in combinations(range(8), 2)
            if element.is_edge(i, j) and self._collapsed(element, i, j)
        ]
        if len(collapsed_edges) != 2:
            raise UnsupportedDegeneracyError(
                f"{element!r} collapsed along {len(collapsed_edges)} edges; exactly two are supported."
            )
        (i, j), (k, l) = collapsed_edges
        back = hex_back_nodes(i, j, k, l)
        if back is None:
            raise UnsupportedDegeneracyError(
                f"Collapsed edges ({i}, {j}) and ({k}, {l}) of {element!r} do not split into prisms."
            )

        a, b = back
        c0, c1, c2, c3 = cutting_quad_nodes(a, b)
        halves = (
            (a, c0, c3, b, c1, c2),
            (diametral_node(b), c0, c3, diametral_node(a), c1, c2),
        )
        return self._split_prism_halves(element, halves)

    def _split_prism_halves(
        self,
        element: Element,
        halves: tuple[tuple[int, ...], tuple[int, ...]],
    ) -> list[Element]:
        """
        Tetrahedra filling two half prisms of a collapsed hexahedron.

        The halves share their lateral face (1, 2, 5, 4), which is warped
        after collapsing, so both are split along the same diagonal of it.
        Tetrahedra that lost a node or became flat are dropped. A split is
        accepted only if every remaining tetrahedron keeps its orientation
        from the undeformed hexahedron, so no two of them overlap; the
        accepted split with the largest volume is returned.

        Args:
            element: The collapsed hexahedron.
            halves: Local hexahedron corners of both prisms.

        Raises:
            UnsupportedDegeneracyError: If every split inverts a tetrahedron.
        """
        best: list[tuple[int, ...]] | None = None
        best_volume = 0.0
        for first, second in product(_PRISM_STAIRCASES, repeat=2):
            if _cuts_along_first_diagonal(first) != _cuts_along_first_diagonal(second):
                continue
            tets = [
                tuple(half[n] for n in tet)
                for half, staircase in zip(halves, (first, second))
                for tet in staircase
            ]
            accepted = self._oriented_tets(element, tets)
            if accepted is not None and accepted[0] > best_volume:
                best_volume, best = accepted

        if best is None:
            raise UnsupportedDegeneracyError(
                f"No split of {element!r} into tetrahedra keeps their orientation."
            )
        return [self._build(Tet, element, tet) for tet in best]

    def _oriented_tets(
        self,
        element: Element,
        tets: list[tuple[int, ...]],
    ) -> tuple[float, list[tuple[int, ...]]] | None:
        """Volume and non-degenerate tetrahedra of a split, or ``None`` if their orientations disagree."""
        kept: list[tuple[int, ...]] = []
        same_orientation: set[bool] = set()
        volume = 0.0
        for tet in tets:
            if len({self._new_id(element, n) for n in tet}) < 4:
                continue
            coords = [self._new_node(element, n).coords for n in tet]
            if is_coplanar(*coords):
                continue
            signed = tetrahedron_signed_volume(*coords)
            reference = tetrahedron_signed_volume(*(_REFERENCE_HEX[n] for n in tet))
            same_orientation.add((signed > 0.0) == (reference > 0.0))
            kept.append(tet)
            volume += abs(signed)
        if len(same_orientation) != 1:
            return None
        return volume, kept

    def _hex_five(self, element: Element) -> list[Element]:
        """Two tetrahedra on a planar base of four unique nodes and the remaining apex."""
        unique = self._unique_local_nodes(element)
        for apex in unique:
            base = [n for n in unique if n != apex]
            coords = [self._new_node(element, n).coords for n in base]
            if not is_coplanar(*coords):
                continue

            b0, b1, b2, b3 = base
            for order in ((b0, b1, b2, b3), (b0, b2, b1, b3), (b0, b2, b3, b1)):
                if not self._build(Quad, element, order).validate():
                    break
            q0, q1, q2, q3 = order
            return [
                self._build(Tet, element, (q0, q1, q2, apex)),
                self._build(Tet, element, (q0, q2, q3, apex)),
            ]

        # No planar base: split the five nodes into two tetrahedra sharing a face
        u0, u1, u2, u3, u4 = unique
        return [
            self._build(Tet, element, (u0, u1, u2, u3)),
            self._build(Tet, element, (u1, u2, u3, u4)),
        ]

    # --- prism ---

    def _reduce_prism(self, element: Element, n_unique: int) -> list[Element]:
        if n_unique == 5:
            return self._prism_five(element)
        return self._reduce_low(element, n_unique)

    def _prism_five(self, element: Element) -> list[Element]:
        i, j = self._first_collapsed_pair(element)

        if j == i + 3:
            # Lateral edge collapsed: pyramid on the opposite quad face
            a, b = (i + 1) % 3, (i + 2) % 3
            return [
                self._build(Tet, element, (a, b, i, a + 3)),
                self._build(Tet, element, (a + 3, b, i, b + 3)),
            ]

        k = prism_third_node(i, j)
        if k is None:
            raise UnsupportedDegeneracyError(
                f"Collapsed prism corners {i} and {j} of {element!r} lie on different triangles."
            )

        # Triangle edge collapsed: the opposite triangle plus one tetrahedron
        offset = -3 if i > 2 else 3
        tet1 = self._build(Tet, element, (i + offset, j + offset, k + offset, i))
        face_coords = [self._new_node(element, n).coords for n in (i + offset, k + offset, i, k)]
        l = j if is_coplanar(*face_coords) else i
        tet2 = self._build(Tet, element, (l + offset, k + offset, i, k))
        return [tet1, tet2]


def _cuts_along_first_diagonal(staircase: tuple[tuple[int, ...], ...]) -> bool:
    """Whether a prism split cuts the lateral face (1, 2, 5, 4) along 1-5 rather than 2-4."""
    return any(1 in tet and 5 in tet for tet in staircase)
