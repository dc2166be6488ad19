"""
OBJ text parser

Reads a Wavefront OBJ document into the object graph in cemconv.schema.obj.

Supported statements: v, vt, vn, f, l, p, o, g, s, usemtl, mtllib.
Faces with more than three corners are fan-triangulated. Vertex data belongs
to the object it appears in, and face indices are rebased accordingly.
"""

import logging
from typing import List, Optional

from cemconv.exceptions import ObjParseError
from cemconv.schema.obj import (
    Geometry,
    ObjObject,
    ObjSet,
    Primitive,
    Shape,
    VTNIndex,
)

logger = logging.getLogger(__name__)


class _ParseState:
    """Tracks the current object, geometry run, groups and global offsets."""

    def __init__(self):
        self.obj_set = ObjSet()
        self.current: Optional[ObjObject] = None
        self.geometry: Optional[Geometry] = None
        self.material_name: Optional[str] = None
        self.groups = ()
        self.smoothing_groups = ()

        # Counts of vertex data owned by objects before the current one
        self.position_base = 0
        self.texture_base = 0
        self.normal_base = 0

    def begin_object(self, name: str) -> None:
        if self.current is not None:
            self.position_base += len(self.current.vertices)
            self.texture_base += len(self.current.tex_vertices)
            self.normal_base += len(self.current.normals)
        self.current = ObjObject(name=name)
        self.obj_set.objects.append(self.current)
        self.geometry = None

    def object(self) -> ObjObject:
        if self.current is None:
            self.begin_object("")
        return self.current

    def add_shape(self, primitive: Primitive) -> None:
        obj = self.object()
        if self.geometry is None:
            self.geometry = Geometry(material_name=self.material_name)
            obj.geometry.append(self.geometry)
        self.geometry.shapes.append(Shape(primitive, self.groups, self.smoothing_groups))


def parse_obj(text: str) -> ObjSet:
    """
    Parse an OBJ document.

    Args:
        text: OBJ source

    Returns:
        ObjSet with one ObjObject per `o` statement (or a single unnamed one)

    Raises:
        ObjParseError: On malformed statements, with the 1-based line number
    """
    state = _ParseState()

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.split('#', 1)[0].strip()
        if not line:
            continue

        keyword, *args = line.split()
        try:
            _parse_statement(state, keyword, args)
        except ValueError as e:
            raise ObjParseError(line_number, str(e)) from e

    logger.debug(f"Parsed OBJ document with {len(state.obj_set.objects)} objects")
    return state.obj_set


def _parse_statement(state: _ParseState, keyword: str, args: List[str]) -> None:
    if keyword == 'v':
        state.object().vertices.append(_parse_floats(keyword, args, 3, 4)[:3])
    elif keyword == 'vt':
        coords = _parse_floats(keyword, args, 1, 3)
        state.object().tex_vertices.append(tuple(coords) + (0.0,) * (3 - len(coords)))
    elif keyword == 'vn':
        state.object().normals.append(_parse_floats(keyword, args, 3, 3))
    elif keyword == 'f':
        corners = _parse_corners(state, args, minimum=3)
        # Fan triangulation around the first corner
        for i in range(1, len(corners) - 1):
            state.add_shape(Primitive.triangle(corners[0], corners[i], corners[i + 1]))
    elif keyword == 'l':
        corners = _parse_corners(state, args, minimum=2)
        for a, b in zip(corners, corners[1:]):
            state.add_shape(Primitive.line(a, b))
    elif keyword == 'p':
        for corner in _parse_corners(state, args, minimum=1):
            state.add_shape(Primitive.point(corner))
    elif keyword == 'o':
        state.begin_object(' '.join(args))
    elif keyword == 'g':
        state.groups = tuple(args)
    elif keyword == 's':
        state.smoothing_groups = _parse_smoothing(args)
    elif keyword == 'usemtl':
        if not args:
            raise ValueError("usemtl requires a material name")
        state.material_name = ' '.join(args)
        state.geometry = None
    elif keyword == 'mtllib':
        state.obj_set.material_libraries.extend(args)
    else:
        logger.debug(f"Ignoring unsupported OBJ statement '{keyword}'")


def _parse_floats(keyword: str, args: List[str], minimum: int, maximum: int) -> tuple:
    if not minimum <= len(args) <= maximum:
        expected = str(minimum) if minimum == maximum else f"{minimum}-{maximum}"
        raise ValueError(f"'{keyword}' expects {expected} numbers, got {len(args)}")
    try:
        return tuple(float(arg) for arg in args)
    except ValueError:
        raise ValueError(f"'{keyword}' has a non-numeric component: {' '.join(args)}")


def _parse_smoothing(args: List[str]) -> tuple:
    if len(args) != 1:
        raise ValueError("'s' expects a single group number or 'off'")
    if args[0] == 'off':
        return (0,)
    try:
        return (int(args[0]),)
    except ValueError:
        raise ValueError(f"Invalid smoothing group: {args[0]}")


def _parse_corners(state: _ParseState, args: List[str], minimum: int) -> List[VTNIndex]:
    if len(args) < minimum:
        raise ValueError(f"Expected at least {minimum} vertices, got {len(args)}")

    obj = state.object()
    corners = []
    for arg in args:
        parts = arg.split('/')
        if len(parts) > 3 or not parts[0]:
            raise ValueError(f"Malformed vertex reference: {arg}")

        position = _resolve(parts[0], len(obj.vertices), state.position_base)
        texture = None
        normal = None
        if len(parts) > 1 and parts[1]:
            texture = _resolve(parts[1], len(obj.tex_vertices), state.texture_base)
        if len(parts) > 2 and parts[2]:
            normal = _resolve(parts[2], len(obj.normals), state.normal_base)

        corners.append(VTNIndex(position, texture, normal))
    return corners


def _resolve(token: str, count: int, base: int) -> int:
    """Convert a 1-based (or negative, relative) OBJ index to a 0-based object-local one."""
    try:
        index = int(token)
    except ValueError:
        raise ValueError(f"Invalid index: {token}")

    if index == 0:
        raise ValueError("OBJ indices start at 1")
    if index < 0:
        return count + index
    return index - 1 - base
