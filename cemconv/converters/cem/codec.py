"""
CEM binary codec

Reads and writes "ssmf" scene streams. All values are little-endian.

Header:   magic b"ssmf", u16 major, u16 minor
V2 body:  u32 lod_count, material_count, tag_point_count, frame_count, vertex_count
          f32[3] center
          per LOD:       u32 triangle_count, u32[3] per triangle
          per material:  str name, u32 texture, u32 selection_count,
                         (u32 offset, u32 length) per selection,
                         u32 vertex_offset, u32 vertex_count, str texture_name
          per tag point: str name
          per frame:     f32 radius, f32[3] bounds_min, f32[3] bounds_max,
                         per vertex f32[3] position, f32[3] normal, f32[2] texture,
                         per tag point f32[3] position
Strings are a u32 byte length followed by UTF-8 bytes.
"""

import io
import logging
import struct
from typing import BinaryIO

from pydantic import ValidationError

from cemconv.exceptions import InputError, UnsupportedFormatError
from cemconv.schema.cem import (
    CEM_MAGIC,
    V2_HEADER,
    CemModel,
    Frame,
    Material,
    ModelHeader,
    Scene,
    TriangleSelection,
    Vertex,
    to_f32,
)

logger = logging.getLogger(__name__)

HEADER = struct.Struct('<4sHH')
VERTEX = struct.Struct('<8f')


class CemReader:
    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def read_bytes(self, size: int) -> bytes:
        data = self.stream.read(size)
        if len(data) != size:
            raise InputError(f"Unexpected end of CEM data (wanted {size} bytes, got {len(data)})")
        return data

    def unpack(self, fmt: struct.Struct) -> tuple:
        return fmt.unpack(self.read_bytes(fmt.size))

    def read_u32(self) -> int:
        return self.read_u32s(1)[0]

    def read_u32s(self, count: int) -> tuple:
        return struct.unpack(f'<{count}I', self.read_bytes(4 * count))

    def read_f32(self) -> float:
        return self.read_f32s(1)[0]

    def read_f32s(self, count: int) -> tuple:
        return struct.unpack(f'<{count}f', self.read_bytes(4 * count))

    def read_string(self) -> str:
        data = self.read_bytes(self.read_u32())
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise InputError(f"Invalid UTF-8 string in CEM data: {e}") from e


class CemWriter:
    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def write_u32(self, *values: int) -> None:
        self.stream.write(struct.pack(f'<{len(values)}I', *values))

    def write_f32(self, *values: float) -> None:
        self.stream.write(struct.pack(f'<{len(values)}f', *to_f32(values)))

    def write_string(self, value: str) -> None:
        data = value.encode('utf-8')
        self.write_u32(len(data))
        self.stream.write(data)


#########################
# HEADER
#########################

def read_header(stream: BinaryIO) -> ModelHeader:
    """Read and identify the stream header. Any revision is accepted."""
    magic, major, minor = CemReader(stream).unpack(HEADER)
    if magic != CEM_MAGIC:
        raise InputError(f"Not a CEM file (magic {magic!r}, expected {CEM_MAGIC!r})")
    return ModelHeader(magic=magic, major=major, minor=minor)


def write_header(header: ModelHeader, stream: BinaryIO) -> None:
    stream.write(HEADER.pack(header.magic, header.major, header.minor))


#########################
# V2 BODY
#########################

def read_scene_without_header(stream: BinaryIO) -> Scene:
    """Read a v2 scene body; the header must already have been consumed."""
    reader = CemReader(stream)

    lod_count, material_count, tag_point_count, frame_count, vertex_count = reader.read_u32s(5)
    center = reader.read_f32s(3)

    lod_levels = []
    for _ in range(lod_count):
        flat = reader.read_u32s(3 * reader.read_u32())
        lod_levels.append([flat[i:i + 3] for i in range(0, len(flat), 3)])

    materials = [_read_material(reader) for _ in range(material_count)]
    tag_points = [reader.read_string() for _ in range(tag_point_count)]
    frames = [_read_frame(reader, vertex_count, tag_point_count) for _ in range(frame_count)]

    try:
        model = CemModel(
            center=center,
            materials=materials,
            lod_levels=lod_levels,
            tag_points=tag_points,
            frames=frames,
        )
    except ValidationError as e:
        raise InputError(f"Invalid CEM model: {e}") from e

    logger.debug(
        f"Read CEM v2 model: {lod_count} LOD levels, {material_count} materials, "
        f"{frame_count} frames, {vertex_count} vertices"
    )
    return Scene.root(model)


def _read_material(reader: CemReader) -> Material:
    name = reader.read_string()
    texture = reader.read_u32()
    selections = [
        TriangleSelection(offset=reader.read_u32(), length=reader.read_u32())
        for _ in range(reader.read_u32())
    ]
    vertex_offset, vertex_count = reader.read_u32s(2)
    texture_name = reader.read_string()
    return Material(
        name=name,
        texture=texture,
        triangles=selections,
        vertex_offset=vertex_offset,
        vertex_count=vertex_count,
        texture_name=texture_name,
    )


def _read_frame(reader: CemReader, vertex_count: int, tag_point_count: int) -> Frame:
    radius = reader.read_f32()
    bounds_min = reader.read_f32s(3)
    bounds_max = reader.read_f32s(3)

    vertices = []
    for _ in range(vertex_count):
        px, py, pz, nx, ny, nz, u, v = reader.unpack(VERTEX)
        vertices.append(Vertex(position=(px, py, pz), normal=(nx, ny, nz), texture=(u, v)))

    tag_points = [reader.read_f32s(3) for _ in range(tag_point_count)]
    return Frame(
        radius=radius,
        bounds_min=bounds_min,
        bounds_max=bounds_max,
        vertices=vertices,
        tag_points=tag_points,
    )


def read_scene(stream: BinaryIO) -> Scene:
    """Read a complete scene, rejecting revisions other than 2.0."""
    header = read_header(stream)
    if header != V2_HEADER:
        raise UnsupportedFormatError(f"Cannot read CEM v{header.version} models, only v2.0")
    return read_scene_without_header(stream)


def write_scene(scene: Scene, stream: BinaryIO) -> None:
    """Write a scene with the v2 header."""
    model = scene.model
    writer = CemWriter(stream)
    vertex_count = len(model.frames[0].vertices) if model.frames else 0

    write_header(V2_HEADER, stream)
    writer.write_u32(
        len(model.lod_levels),
        len(model.materials),
        len(model.tag_points),
        len(model.frames),
        vertex_count,
    )
    writer.write_f32(*model.center)

    for lod in model.lod_levels:
        writer.write_u32(len(lod))
        for triangle in lod:
            writer.write_u32(*triangle)

    for material in model.materials:
        writer.write_string(material.name)
        writer.write_u32(material.texture, len(material.triangles))
        for selection in material.triangles:
            writer.write_u32(selection.offset, selection.length)
        writer.write_u32(material.vertex_offset, material.vertex_count)
        writer.write_string(material.texture_name)

    for name in model.tag_points:
        writer.write_string(name)

    for frame in model.frames:
        writer.write_f32(frame.radius, *frame.bounds_min, *frame.bounds_max)
        for vertex in frame.vertices:
            stream.write(VERTEX.pack(*to_f32(vertex.position + vertex.normal + vertex.texture)))
        for position in frame.tag_points:
            writer.write_f32(*position)

    logger.debug(f"Wrote CEM v2 model: {len(model.lod_levels)} LOD levels, {vertex_count} vertices")


def scene_to_bytes(scene: Scene) -> bytes:
    buffer = io.BytesIO()
    write_scene(scene, buffer)
    return buffer.getvalue()


def scene_from_bytes(data: bytes) -> Scene:
    return read_scene(io.BytesIO(data))
