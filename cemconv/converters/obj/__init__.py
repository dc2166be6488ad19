"""
OBJ ↔ CEM Converters

Parser plus import/export functions for Wavefront .obj documents.
"""

from .parser import parse_obj
from .importer import ObjImporter, import_obj, import_obj_set, import_obj_text
from .exporter import export_obj

__all__ = ['parse_obj', 'ObjImporter', 'import_obj', 'import_obj_set', 'import_obj_text', 'export_obj']
