import logging

import numpy as np
import pytest

from meshrevision.editing import MeshRevision
from meshrevision.editing.revision import SUBDIVISION_FLAGS
from meshrevision.mesh import Mesh, Node
from meshrevision.mesh.elements import Hex, Line, MeshElemType, Prism, Pyramid, Quad, Tet, Tri

from conftest import UNIT_CUBE, UNIT_PRISM, UNIT_SQUARE


def type_counts(mesh: Mesh) -> dict[MeshElemType, int]:
    return mesh.element_type_counts()


class TestScenarios:
    def test_hexahedron_with_one_collapsed_edge(self, make_single):
        mesh = make_single(Hex, UNIT_CUBE, moves={1: 0}, material=4)
        collapsed = MeshRevision(mesh).collapse_nodes("collapsed", 1e-3)
        simplified = MeshRevision(mesh).simplify_mesh("simplified", 1e-3)

        assert simplified.n_elements == 2
        assert type_counts(simplified) == {MeshElemType.PYRAMID: 1, MeshElemType.PRISM: 1}
        assert simplified.content == pytest.approx(collapsed.content)
        assert simplified.n_nodes == 7

    def test_quad_with_coincident_corners(self, make_single):
        mesh = make_single(Quad, UNIT_SQUARE, moves={2: 1})
        simplified = MeshRevision(mesh).simplify_mesh("simplified", 1e-6)
        assert type_counts(simplified) == {MeshElemType.TRIANGLE: 1}
        triangle = simplified.elements[0]
        assert sorted(map(tuple, triangle.coords.tolist())) == [(0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 0.0, 0.0)]

    def test_subdivide_non_planar_quad(self, make_single):
        coords = [(0, 0, 0), (1, 0, 0), (1, 1, 0.5), (0, 1, 0)]
        mesh = make_single(Quad, coords)
        subdivided = MeshRevision(mesh).subdivide_mesh("subdivided")
        assert type_counts(subdivided) == {MeshElemType.TRIANGLE: 2}
        covered = {tuple(node.coords) for e in subdivided.elements for node in e.nodes}
        assert covered == {tuple(map(float, c)) for c in coords}
        assert subdivided.content == pytest.approx(mesh.elements[0].content)

    def test_empty_mesh(self):
        mesh = Mesh("empty", [Node(0, [0, 0, 0])], [])
        revision = MeshRevision(mesh)
        assert revision.simplify_mesh("simplified", 1e-3) is None
        assert revision.subdivide_mesh("subdivided") is None

    def test_prism_with_collapsed_triangle_edge(self, make_single):
        mesh = make_single(Prism, UNIT_PRISM, moves={1: 0})
        simplified = MeshRevision(mesh).simplify_mesh("simplified", 1e-6)
        assert type_counts(simplified) == {MeshElemType.TETRAHEDRON: 2}
        assert simplified.content == pytest.approx(1 / 3)


class TestCollapseNodes:
    def test_keeps_every_element(self, make_single):
        mesh = make_single(Hex, UNIT_CUBE, moves={1: 0})
        collapsed = MeshRevision(mesh).collapse_nodes("collapsed", 1e-3)
        assert collapsed.name == "collapsed"
        assert collapsed.n_nodes == 7
        assert type_counts(collapsed) == {MeshElemType.HEXAHEDRON: 1}
        hexahedron = collapsed.elements[0]
        assert hexahedron.nodes[0] is hexahedron.nodes[1]

    def test_is_idempotent(self, rng):
        nodes = [Node(i, c) for i, c in enumerate(rng.random((400, 3)))]
        elements = [Line([nodes[i], nodes[i + 1]]) for i in range(0, 398, 2)]
        once = MeshRevision(Mesh("cloud", nodes, elements)).collapse_nodes("once", 0.05)
        twice = MeshRevision(once).collapse_nodes("twice", 0.05)
        assert twice.n_nodes == once.n_nodes
        assert once.n_nodes < 400

    def test_new_mesh_is_independent(self, unit_hex_mesh):
        collapsed = MeshRevision(unit_hex_mesh).collapse_nodes("copy", 1e-3)
        collapsed.nodes[0].coords[0] = 42.0
        assert unit_hex_mesh.nodes[0].x == 0.0
        assert all(a is not b for a, b in zip(collapsed.nodes, unit_hex_mesh.nodes))

    def test_count_matches_collapse(self, make_single):
        mesh = make_single(Hex, UNIT_CUBE, moves={1: 0, 7: 6})
        revision = MeshRevision(mesh)
        assert revision.count_collapsible_nodes(1e-3) == 2
        assert revision.collapse_nodes("collapsed", 1e-3).n_nodes == 6


class TestSimplifyMesh:
    def test_preserves_materials(self, make_mesh):
        coords = list(UNIT_CUBE) + [(2, 0, 0), (2, 1, 0), (3, 0, 0)]
        coords[1] = (0.0, 0.0, 0.0)
        cells = [
            (Hex, range(8), 11),
            (Quad, (0, 8, 9, 2), 12),
            (Tri, (8, 10, 9), 13),
        ]
        mesh = make_mesh(coords, cells)
        simplified = MeshRevision(mesh).simplify_mesh("simplified", 1e-6)

        materials = sorted(simplified.material_ids().tolist())
        assert materials == [11, 11, 12, 13]
        for element in simplified.elements:
            if element.geom_type in (MeshElemType.PYRAMID, MeshElemType.PRISM):
                assert element.material == 11

    def test_unchanged_mesh_is_copied(self, mixed_mesh):
        simplified = MeshRevision(mixed_mesh).simplify_mesh("simplified", 1e-6)
        assert simplified.n_nodes == mixed_mesh.n_nodes
        assert type_counts(simplified) == type_counts(mixed_mesh)
        np.testing.assert_array_equal(simplified.material_ids(), mixed_mesh.material_ids())
        assert simplified.content == pytest.approx(mixed_mesh.content)

    def test_minimum_dimension_drops_lower_elements(self, mixed_mesh):
        simplified = MeshRevision(mixed_mesh).simplify_mesh("solid", 1e-6, min_elem_dim=3)
        assert type_counts(simplified) == {MeshElemType.HEXAHEDRON: 1, MeshElemType.PRISM: 1}

    def test_invalid_elements_are_subdivided(self, make_single):
        coords = [list(c) for c in UNIT_CUBE]
        coords[6] = [1.0, 1.0, 1.5]
        simplified = MeshRevision(make_single(Hex, coords)).simplify_mesh("simplified", 1e-6)
        assert type_counts(simplified) == {MeshElemType.TETRAHEDRON: 6}

    def test_everything_dropped(self, make_mesh):
        mesh = make_mesh([(0, 0, 0), (1, 0, 0), (1, 1, 0)], [(Tri, (0, 1, 2), 0)])
        assert MeshRevision(mesh).simplify_mesh("solid", 1e-6, min_elem_dim=3) is None

    def test_unsupported_degeneracy_returns_none(self, make_single, caplog):
        mesh = make_single(Prism, UNIT_PRISM, moves={4: 0})
        for node in mesh.nodes:
            node.uid = 100 + node.uid
        with caplog.at_level(logging.ERROR, logger="meshrevision"):
            assert MeshRevision(mesh).simplify_mesh("simplified", 1e-6) is None
        assert "lie on different triangles" in caplog.text
        assert [n.uid for n in mesh.nodes] == list(range(mesh.n_nodes))

    def test_fully_collapsed_element_is_an_invariant_violation(self, make_mesh, caplog):
        mesh = make_mesh([(0, 0, 0), (0, 0, 1e-9), (1, 0, 0)], [(Line, (0, 1), 0), (Line, (1, 2), 0)])
        with caplog.at_level(logging.ERROR, logger="meshrevision"):
            assert MeshRevision(mesh).simplify_mesh("simplified", 1e-6) is None
        assert "1 unique nodes out of 2" in caplog.text

    def test_source_mesh_is_unchanged(self, make_single):
        mesh = make_single(Hex, UNIT_CUBE, moves={1: 0})
        coords = np.array([n.coords for n in mesh.nodes])
        nodes = list(mesh.elements[0].nodes)
        MeshRevision(mesh).simplify_mesh("simplified", 1e-3)
        np.testing.assert_array_equal([n.coords for n in mesh.nodes], coords)
        assert list(mesh.elements[0].nodes) == nodes
        assert mesh.n_elements == 1

    def test_invalid_minimum_dimension(self, unit_hex_mesh):
        with pytest.raises(ValueError):
            MeshRevision(unit_hex_mesh).simplify_mesh("simplified", 1e-3, min_elem_dim=4)


class TestSubdivideMesh:
    def test_valid_elements_are_copied(self, mixed_mesh):
        subdivided = MeshRevision(mixed_mesh).subdivide_mesh("subdivided")
        assert type_counts(subdivided) == type_counts(mixed_mesh)
        assert all(a is not b for a, b in zip(subdivided.elements, mixed_mesh.elements))
        assert subdivided.n_nodes == mixed_mesh.n_nodes

    def test_result_is_valid(self, make_mesh):
        coords = [list(c) for c in UNIT_CUBE] + [[2.0, 0.0, 0.0], [2.0, 1.0, 0.3]]
        coords[6] = [1.0, 1.0, 1.3]
        cells = [
            (Hex, range(8), 1),
            (Quad, (1, 8, 9, 2), 2),
            (Pyramid, (0, 1, 2, 3, 6), 3),
        ]
        mesh = make_mesh(coords, cells)
        subdivided = MeshRevision(mesh).subdivide_mesh("subdivided")
        assert all(not (e.validate() & SUBDIVISION_FLAGS) for e in subdivided.elements)
        assert type_counts(subdivided) == {
            MeshElemType.TETRAHEDRON: 6,
            MeshElemType.TRIANGLE: 2,
            MeshElemType.PYRAMID: 1,
        }

    def test_materials_follow_their_source(self, make_single):
        coords = [list(c) for c in UNIT_CUBE]
        coords[5] = [1.0, 0.0, 1.2]
        subdivided = MeshRevision(make_single(Hex, coords, material=9)).subdivide_mesh("subdivided")
        assert all(isinstance(e, Tet) and e.material == 9 for e in subdivided.elements)
