"""
cemconv - Convert 3D models between CEM (ssmf) binary scenes and Wavefront OBJ

OBJ faces are deduplicated into CEM's unified vertex layout on import, and
CEM models are flattened back into separately indexed OBJ streams on export.
"""

from cemconv.converters.convert import convert, convert_bytes, convert_stream
from cemconv.converters.obj import export_obj, import_obj, parse_obj
from cemconv.exceptions import ConversionError, InputError, ObjParseError, UnsupportedFormatError

__version__ = "0.1.0"
__all__ = [
    "convert",
    "convert_bytes",
    "convert_stream",
    "export_obj",
    "import_obj",
    "parse_obj",
    "ConversionError",
    "InputError",
    "ObjParseError",
    "UnsupportedFormatError",
]
