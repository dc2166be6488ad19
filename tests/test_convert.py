"""
Tests for the conversion API
"""
import os
import tempfile

import pytest
from cemconv import convert, convert_bytes, convert_stream
from cemconv.converters.cem.codec import HEADER, scene_from_bytes
from cemconv.converters.convert import Format, detect_format, parse_format
from cemconv.exceptions import InputError, UnsupportedFormatError


SAMPLE_OBJ = b"""
v 0 0 0
v 1 0 0
v 0 1 0
v 1 1 0
f 1 2 3
f 2 4 3
"""


class TestFormatNames:
    """Format names and extension detection"""

    @pytest.mark.parametrize("name, expected", [
        ("obj", Format.OBJ),
        ("cem", Format.CEM_2),
        ("cem2", Format.CEM_2),
        ("ssmf", Format.CEM_2),
        ("cem1.3", Format.CEM_1_3),
        ("OBJ", Format.OBJ),
    ])
    def test_parse_format(self, name, expected):
        assert parse_format(name) is expected

    def test_unknown_format(self):
        with pytest.raises(ValueError) as exc_info:
            parse_format("fbx")
        assert "Unrecognized" in str(exc_info.value)

    def test_detect_format(self):
        assert detect_format("ship.OBJ") is Format.OBJ
        assert detect_format("ship.cem") is Format.CEM_2
        assert detect_format("ship.ssmf") is Format.CEM_2
        assert detect_format("ship.bin") is None


class TestConvertBytes:
    """Dispatch between format pairs"""

    def test_obj_to_cem(self):
        data = convert_bytes(SAMPLE_OBJ, "obj", "cem")
        assert data[:4] == b"ssmf"
        model = scene_from_bytes(data).model
        assert model.lod_levels == [[(0, 1, 2), (1, 3, 2)]]

    def test_cem_to_obj(self):
        cem = convert_bytes(SAMPLE_OBJ, "obj", "cem")
        text = convert_bytes(cem, "cem", "obj").decode()
        faces = [line for line in text.splitlines() if line.startswith("f ")]
        assert faces == ["f 1/1/1 2/2/2 3/3/3", "f 2/2/2 4/4/4 3/3/3"]

    def test_cem_rewrite(self):
        cem = convert_bytes(SAMPLE_OBJ, Format.OBJ, Format.CEM_2)
        assert convert_bytes(cem, None, "cem2") == cem

    def test_default_input_is_cem(self):
        cem = convert_bytes(SAMPLE_OBJ, "obj", "cem")
        assert convert_bytes(cem, output_format="obj").startswith(b"v 0 0 0\n")

    @pytest.mark.parametrize("input_format, output_format", [
        ("obj", "obj"),
        ("obj", "cem1.3"),
        ("cem", "cem1.3"),
    ])
    def test_unsupported_pairs(self, input_format, output_format):
        with pytest.raises(UnsupportedFormatError):
            convert_bytes(SAMPLE_OBJ, input_format, output_format)

    @pytest.mark.parametrize("output_format", ["obj", "cem"])
    def test_older_cem_revision(self, output_format):
        data = HEADER.pack(b"ssmf", 1, 3) + b"\x00" * 32
        with pytest.raises(UnsupportedFormatError):
            convert_bytes(data, "cem1.3", output_format)

    def test_empty_geometry(self):
        with pytest.raises(InputError):
            convert_bytes(b"v 0 0 0\nv 1 0 0\nl 1 2\n", "obj", "cem")

    def test_output_format_required(self):
        with pytest.raises(ValueError):
            convert_bytes(SAMPLE_OBJ, "obj", None)


class TestConvertStreamsAndPaths:
    """Module-level convert() and convert_stream()"""

    def test_convert_stream(self):
        import io
        output = io.BytesIO()
        convert_stream(io.BytesIO(SAMPLE_OBJ), output, "obj", "cem")
        assert output.getvalue()[:4] == b"ssmf"

    def test_convert_paths_detect_formats(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            obj_path = os.path.join(tmpdir, "model.obj")
            cem_path = os.path.join(tmpdir, "model.cem")
            back_path = os.path.join(tmpdir, "back.obj")

            with open(obj_path, 'wb') as f:
                f.write(SAMPLE_OBJ)

            convert(obj_path, cem_path)
            convert(cem_path, back_path)

            with open(back_path, 'r') as f:
                text = f.read()
            assert text.count("\nf ") == 2

    def test_explicit_formats_override_extensions(self, tmp_path):
        source = tmp_path / "model.txt"
        target = tmp_path / "model.bin"
        source.write_bytes(SAMPLE_OBJ)

        convert(str(source), str(target), input_format="obj", output_format="ssmf")
        assert target.read_bytes()[:4] == b"ssmf"

    def test_convert_invalid_input_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            convert("nonexistent.obj", str(tmp_path / "out.cem"))

    def test_convert_unsupported_extension(self, tmp_path):
        source = tmp_path / "model.obj"
        source.write_bytes(SAMPLE_OBJ)
        with pytest.raises(ValueError) as exc_info:
            convert(str(source), str(tmp_path / "model.xyz"))
        assert "Unsupported" in str(exc_info.value)

    def test_failed_conversion_writes_nothing(self, tmp_path):
        """No partial output when the input is rejected"""
        source = tmp_path / "lines.obj"
        target = tmp_path / "lines.cem"
        source.write_bytes(b"v 0 0 0\nv 1 0 0\nl 1 2\n")

        with pytest.raises(InputError):
            convert(str(source), str(target))
        assert not target.exists()


class TestOutOfRangeCoordinates:
    """Coordinates too large for a 32-bit float still convert"""

    def test_obj_to_cem_saturates(self):
        data = convert_bytes(b"v 1e39 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n", "obj", "cem")
        model = scene_from_bytes(data).model
        assert model.frames[0].vertices[0].position[0] == float("inf")
