import numpy as np
import pytest
import pyvista as pv

from meshrevision.mesh import Mesh
from meshrevision.mesh.io import MeshIO
from meshrevision.mesh.vtk_utils import VtkUtils


def gmsh_available() -> bool:
    try:
        import gmsh  # noqa: F401
    except (ImportError, OSError):
        return False
    return True


requires_gmsh = pytest.mark.skipif(not gmsh_available(), reason="gmsh is not available")


def assert_same_mesh(a: Mesh, b: Mesh) -> None:
    assert a.n_nodes == b.n_nodes
    assert a.element_type_counts() == b.element_type_counts()
    assert sorted(a.material_ids().tolist()) == sorted(b.material_ids().tolist())
    assert a.content == pytest.approx(b.content)


class TestVtkUtils:
    def test_to_pyvista(self, mixed_mesh):
        grid = VtkUtils.to_pyvista(mixed_mesh)
        assert grid.n_points == 10
        assert grid.n_cells == 3
        assert list(grid.celltypes) == [pv.CellType.HEXAHEDRON, pv.CellType.WEDGE, pv.CellType.QUAD]
        np.testing.assert_array_equal(grid.cell_data["MaterialIDs"], [1, 2, 3])

    def test_roundtrip(self, mixed_mesh):
        mesh = VtkUtils.from_pyvista(VtkUtils.to_pyvista(mixed_mesh), name="back")
        assert mesh.name == "back"
        assert_same_mesh(mesh, mixed_mesh)
        for old, new in zip(mixed_mesh.elements, mesh.elements):
            assert [n.uid for n in new.nodes] == [n.uid for n in old.nodes]

    def test_missing_materials_default_to_zero(self, unit_hex_mesh):
        grid = VtkUtils.to_pyvista(unit_hex_mesh)
        del grid.cell_data["MaterialIDs"]
        mesh = VtkUtils.from_pyvista(grid)
        assert mesh.material_ids().tolist() == [0]

    def test_unsupported_cells_are_skipped(self):
        grid = pv.UnstructuredGrid(
            np.array([1, 0, 2, 0, 1], dtype=np.int64),
            np.array([pv.CellType.VERTEX, pv.CellType.LINE], dtype=np.uint8),
            np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]]),
        )
        mesh = VtkUtils.from_pyvista(grid)
        assert mesh.n_elements == 1
        assert mesh.elements[0].content == pytest.approx(1.0)


class TestMeshIO:
    def test_vtu_roundtrip(self, mixed_mesh, tmp_path):
        path = tmp_path / "mixed.vtu"
        MeshIO.write(mixed_mesh, path)
        mesh = MeshIO.read(path)
        assert mesh.name == "mixed"
        assert_same_mesh(mesh, mixed_mesh)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            MeshIO.read(tmp_path / "missing.vtu")

    def test_suffix(self):
        assert MeshIO.is_gmsh("a/b/mesh.MSH")
        assert not MeshIO.is_gmsh("mesh.vtu")
        assert MeshIO.stem("a/b/mesh.msh") == "mesh"

    @requires_gmsh
    def test_gmsh_roundtrip(self, mixed_mesh, tmp_path):
        path = tmp_path / "mixed.msh"
        MeshIO.write(mixed_mesh, path)
        mesh = MeshIO.read(path, name="reloaded")
        assert mesh.name == "reloaded"
        assert_same_mesh(mesh, mixed_mesh)

    @requires_gmsh
    def test_gmsh_without_material(self, unit_quad_mesh, tmp_path):
        unit_quad_mesh.elements[0].material = 0
        path = tmp_path / "quad.msh"
        unit_quad_mesh.to_file(str(path))
        mesh = Mesh.from_file(str(path))
        assert mesh.material_ids().tolist() == [0]
        assert mesh.content == pytest.approx(1.0)
