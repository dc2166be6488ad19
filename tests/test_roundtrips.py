"""
Round-trip converter tests to catch regressions

These tests ensure converters don't lose information when doing:
- OBJ → CEM → OBJ
- OBJ → CEM bytes → CEM → OBJ

We check mesh equivalence (positions, attributes, face topology) rather than
exact text equality, since export emits one v/vn/vt triple per unified vertex.
"""
import pytest
from cemconv import convert_bytes
from cemconv.converters import export_obj, import_obj_text, parse_obj
from cemconv.schema.obj import PrimitiveKind


# Cube with per-face normals and shared texture corners
GOLDEN_OBJ = """
o crate
v -1 -1 -1
v 1 -1 -1
v 1 1 -1
v -1 1 -1
v -1 -1 1
v 1 -1 1
v 1 1 1
v -1 1 1
vt 0 0
vt 1 0
vt 1 1
vt 0 1
vn 0 0 -1
vn 0 0 1
vn 0 -1 0
vn 0 1 0
vn -1 0 0
vn 1 0 0
f 1/1/1 4/4/1 3/3/1 2/2/1
f 5/1/2 6/2/2 7/3/2 8/4/2
f 1/1/3 2/2/3 6/3/3 5/4/3
f 4/1/4 8/4/4 7/3/4 3/2/4
f 1/1/5 5/2/5 8/3/5 4/4/5
f 2/1/6 3/4/6 7/3/6 6/2/6
"""


def corners(text):
    """Resolve every triangle corner of the first object to its attribute values."""
    obj = parse_obj(text).objects[0]
    result = []
    for primitive in obj.primitives():
        if primitive.kind is not PrimitiveKind.triangle:
            continue
        triangle = []
        for ref in primitive.vertices:
            texture = obj.tex_vertices[ref.texture][:2] if ref.texture is not None else (0.0, 0.0)
            normal = obj.normals[ref.normal] if ref.normal is not None else (1.0, 0.0, 0.0)
            triangle.append((obj.vertices[ref.position], texture, normal))
        result.append(tuple(triangle))
    return result


class TestObjRoundtrip:
    """OBJ → CEM → OBJ preserves geometry"""

    def test_cube_roundtrip(self):
        exported = export_obj(import_obj_text(GOLDEN_OBJ))
        assert corners(exported) == corners(GOLDEN_OBJ)

    def test_cube_vertex_count(self):
        """24 distinct (position, texture, normal) corners in a cube with face normals"""
        model = import_obj_text(GOLDEN_OBJ)
        assert len(model.frames[0].vertices) == 24
        assert len(model.lod_levels[0]) == 12
        assert model.center == (0.0, 0.0, 0.0)

    def test_roundtrip_is_fixed_point(self):
        """Exporting a re-imported export gives the same text"""
        first = export_obj(import_obj_text(GOLDEN_OBJ))
        second = export_obj(import_obj_text(first))
        assert first == second

    @pytest.mark.parametrize("position", [
        (1.0, 2.0, 3.0),
        (-0.5, 0.25, 12.75),
        (0.0, -4.0, 0.0),
    ])
    def test_axis_identity(self, position):
        """Import swaps Y/Z and export swaps them back"""
        x, y, z = position
        text = f"v {x} {y} {z}\nv 0 0 0\nv 1 1 1\nf 1 2 3\n"
        model = import_obj_text(text)
        assert model.frames[0].vertices[0].position == (x, z, y)

        first_line = export_obj(model).splitlines()[0]
        assert [float(c) for c in first_line.split()[1:]] == [x, y, z]


class TestBinaryRoundtrip:
    """OBJ → CEM bytes → OBJ through the codec"""

    def test_cube_through_bytes(self):
        cem = convert_bytes(GOLDEN_OBJ.encode(), "obj", "cem")
        exported = convert_bytes(cem, "cem", "obj").decode()
        assert corners(exported) == corners(GOLDEN_OBJ)

    def test_same_text_as_direct_export(self):
        cem = convert_bytes(GOLDEN_OBJ.encode(), "obj", "cem")
        via_bytes = convert_bytes(cem, "cem", "obj").decode()
        assert via_bytes == export_obj(import_obj_text(GOLDEN_OBJ))
