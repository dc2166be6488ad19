"""
Format conversion utilities

Dispatches between OBJ text and CEM binary scenes. Works on bytes, on binary
streams, or on file paths with formats detected from extensions.
"""

import io
import logging
import os
from enum import Enum
from typing import BinaryIO, Optional

from cemconv.converters.cem.codec import read_header, read_scene_without_header, scene_to_bytes
from cemconv.converters.obj.exporter import export_obj
from cemconv.converters.obj.importer import import_obj_text
from cemconv.exceptions import UnsupportedFormatError
from cemconv.schema.cem import V2_HEADER, Scene

logger = logging.getLogger(__name__)


class Format(str, Enum):
    CEM_1_3 = "cem1.3"
    CEM_2 = "cem2"
    OBJ = "obj"


FORMAT_NAMES = {
    'cem1.3': Format.CEM_1_3,
    'cem2': Format.CEM_2,
    'cem': Format.CEM_2,
    'ssmf': Format.CEM_2,
    'obj': Format.OBJ,
}

EXTENSION_FORMATS = {
    '.obj': Format.OBJ,
    '.cem': Format.CEM_2,
    '.ssmf': Format.CEM_2,
}

CEM_FORMATS = (Format.CEM_1_3, Format.CEM_2)


def parse_format(name: str) -> Format:
    """Resolve a format name (obj, cem, cem2, cem1.3, ssmf)."""
    try:
        return FORMAT_NAMES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unrecognized format {name!r}. "
            f"Supported: {', '.join(FORMAT_NAMES)}"
        )


def detect_format(path: str) -> Optional[Format]:
    """Detect format from file extension; None when the extension is unknown"""
    return EXTENSION_FORMATS.get(os.path.splitext(path)[1].lower())


def _resolve(fmt, fallback: Optional[Format]) -> Optional[Format]:
    if fmt is None:
        return fallback
    if isinstance(fmt, Format):
        return fmt
    return parse_format(fmt)


def convert_bytes(data: bytes, input_format=None, output_format=Format.CEM_2) -> bytes:
    """
    Convert a complete input document to the output format.

    Args:
        data: Input bytes (OBJ text or CEM binary)
        input_format: Format or format name; defaults to CEM v2
        output_format: Format or format name

    Returns:
        Output bytes (UTF-8 OBJ text or CEM binary)

    Raises:
        InputError: If the input is malformed or has no triangles
        UnsupportedFormatError: If the format pairing is not implemented
        ValueError: If a format name is unknown
    """
    input_format = _resolve(input_format, Format.CEM_2)
    output_format = _resolve(output_format, None)
    if output_format is None:
        raise ValueError("An output format is required")

    logger.info(f"Converting {input_format.value} → {output_format.value}")

    if input_format is Format.OBJ and output_format is Format.CEM_2:
        model = import_obj_text(data)
        return scene_to_bytes(Scene.root(model))

    if input_format in CEM_FORMATS and output_format is Format.CEM_2:
        scene = _read_v2_scene(data, "rewrite")
        return scene_to_bytes(scene)

    if input_format in CEM_FORMATS and output_format is Format.OBJ:
        scene = _read_v2_scene(data, "convert to OBJ")
        return export_obj(scene.model).encode('utf-8')

    raise UnsupportedFormatError(
        f"Converting from {input_format.value} to {output_format.value} is not supported"
    )


def _read_v2_scene(data: bytes, action: str) -> Scene:
    stream = io.BytesIO(data)
    header = read_header(stream)
    if header != V2_HEADER:
        raise UnsupportedFormatError(f"Cannot {action} CEM v{header.version} files, only v2.0")
    return read_scene_without_header(stream)


def convert_stream(
    input_stream: BinaryIO,
    output_stream: BinaryIO,
    input_format=None,
    output_format=Format.CEM_2
) -> None:
    """Read the whole input stream, convert, then write the result in one piece."""
    result = convert_bytes(input_stream.read(), input_format, output_format)
    output_stream.write(result)


def convert(
    input_path: str,
    output_path: str,
    input_format=None,
    output_format=None
) -> None:
    """
    Convert a model file from one format to another.

    Formats not given explicitly are detected from the file extensions
    (.obj, .cem, .ssmf). An input with an unknown extension is read as CEM v2.

    Args:
        input_path: Path to input file
        output_path: Path to output file
        input_format: Optional format name overriding detection
        output_format: Optional format name overriding detection

    Raises:
        FileNotFoundError: If input file doesn't exist
        ValueError: If the output format cannot be determined

    Examples:
        >>> convert("model.obj", "model.cem")
        >>> convert("model.cem", "model.obj")
    """
    if not os.path.exists(input_path):
        raise FileNotFoundError(f"Input file not found: {input_path}")

    input_format = _resolve(input_format, detect_format(input_path))
    output_format = _resolve(output_format, detect_format(output_path))
    if output_format is None:
        raise ValueError(
            f"Unsupported file format: {os.path.splitext(output_path)[1]}. "
            f"Supported: .obj, .cem, .ssmf"
        )

    with open(input_path, 'rb') as f:
        data = f.read()

    result = convert_bytes(data, input_format, output_format)

    with open(output_path, 'wb') as f:
        f.write(result)
