"""Format converters for CEM models"""

from cemconv.converters.obj.importer import import_obj, import_obj_set, import_obj_text
from cemconv.converters.obj.exporter import export_obj
from cemconv.converters.obj.parser import parse_obj
from cemconv.converters.cem.codec import read_header, read_scene, write_scene
from cemconv.converters.center import CenterBuilder

__all__ = [
    "import_obj",
    "import_obj_set",
    "import_obj_text",
    "export_obj",
    "parse_obj",
    "read_header",
    "read_scene",
    "write_scene",
    "CenterBuilder",
]
