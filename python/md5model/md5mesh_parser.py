"""
MD5 mesh (.md5mesh) parser.

Decodes the header, the bind-pose joint list and every mesh block with
its vertices, triangles and weights. Each grammar rule is a function
``parse_x(data, pos) -> (value, new_pos)``; Md5MeshParser wraps the
full-document rule.
"""

import logging
from typing import List, Optional, Tuple, Union

from .config import ParseConfig, check_count
from .data_structs import Joint, Vertex, Triangle, Weight, Mesh, Md5Mesh
from .decoders import (
    parse_index_triple,
    parse_paren_quaternion,
    parse_paren_vector2,
    parse_paren_vector3,
)
from .errors import BiasRangeError, StructuralError
from .primitives import (
    at_end,
    delimited,
    expect_tag,
    many,
    optional,
    parse_comment,
    parse_decimal,
    parse_quoted_string,
    parse_signed,
    parse_unsigned,
    skip_ws,
    tagged,
)

logger = logging.getLogger(__name__)


def parse_header(data: bytes, pos: int) -> Tuple[Tuple[int, str], int]:
    """MD5Version <u8> commandline "<text>" """
    version, pos = tagged(b'MD5Version', lambda d, p: parse_unsigned(d, p, bits=8), data, pos)
    command_line, pos = tagged(b'commandline', parse_quoted_string, data, pos)
    return (version, command_line), pos


def parse_joint(data: bytes, pos: int) -> Tuple[Joint, int]:
    """"name" parent ( px py pz ) ( qw qx qy ) [// comment]"""
    name, pos = parse_quoted_string(data, pos)
    parent_index, pos = parse_signed(data, pos)
    position, pos = parse_paren_vector3(data, pos)
    orientation, pos = parse_paren_quaternion(data, pos)
    _, pos = optional(parse_comment, data, pos)
    return Joint(name, parent_index, position, orientation), pos


def parse_joints(data: bytes, pos: int) -> Tuple[List[Joint], int]:
    pos = expect_tag(data, pos, b'joints')
    return delimited(data, pos, b'{', lambda d, p: many(parse_joint, d, p), b'}')


def parse_vertex(data: bytes, pos: int) -> Tuple[Vertex, int]:
    """vert index ( u v ) start_weight weight_count"""
    index, pos = tagged(b'vert', parse_unsigned, data, pos)
    tex_coords, pos = parse_paren_vector2(data, pos)
    start_weight, pos = parse_unsigned(data, pos)
    weight_count, pos = parse_unsigned(data, pos)
    return Vertex(index, tex_coords, start_weight, weight_count), pos


def parse_vertices(data: bytes, pos: int, config: Optional[ParseConfig] = None) -> Tuple[List[Vertex], int]:
    declared, pos = tagged(b'numverts', parse_unsigned, data, pos)
    start = pos
    vertices, pos = many(parse_vertex, data, pos)
    check_count(config, 'numverts', declared, len(vertices), skip_ws(data, start))
    return sorted(vertices, key=lambda v: v.index), pos


def parse_triangle(data: bytes, pos: int) -> Tuple[Triangle, int]:
    """tri index v0 v1 v2"""
    index, pos = tagged(b'tri', parse_unsigned, data, pos)
    vertex_indices, pos = parse_index_triple(data, pos)
    return Triangle(index, vertex_indices), pos


def parse_triangles(data: bytes, pos: int, config: Optional[ParseConfig] = None) -> Tuple[List[Triangle], int]:
    declared, pos = tagged(b'numtris', parse_unsigned, data, pos)
    start = pos
    triangles, pos = many(parse_triangle, data, pos)
    check_count(config, 'numtris', declared, len(triangles), skip_ws(data, start))
    return sorted(triangles, key=lambda t: t.index), pos


def parse_bias(data: bytes, pos: int) -> Tuple[float, int]:
    """A decimal constrained to [-1, 1]"""
    start = skip_ws(data, pos)
    bias, pos = parse_decimal(data, pos)
    if abs(bias) > 1.0:
        raise BiasRangeError(bias, start)
    return bias, pos


def parse_weight(data: bytes, pos: int) -> Tuple[Weight, int]:
    """weight index joint bias ( x y z ) [// comment]"""
    index, pos = tagged(b'weight', parse_unsigned, data, pos)
    joint_index, pos = parse_unsigned(data, pos)
    bias, pos = parse_bias(data, pos)
    position, pos = parse_paren_vector3(data, pos)
    _, pos = optional(parse_comment, data, pos)
    return Weight(index, joint_index, bias, position), pos


def parse_weights(data: bytes, pos: int, config: Optional[ParseConfig] = None) -> Tuple[List[Weight], int]:
    declared, pos = tagged(b'numweights', parse_unsigned, data, pos)
    start = pos
    weights, pos = many(parse_weight, data, pos)
    check_count(config, 'numweights', declared, len(weights), skip_ws(data, start))
    return sorted(weights, key=lambda w: w.index), pos


def parse_mesh(data: bytes, pos: int, config: Optional[ParseConfig] = None) -> Tuple[Mesh, int]:
    """mesh { shader "name" numverts ... numtris ... numweights ... }"""
    pos = expect_tag(data, pos, b'mesh')
    pos = expect_tag(data, pos, b'{')
    shader, pos = tagged(b'shader', parse_quoted_string, data, pos)
    vertices, pos = parse_vertices(data, pos, config)
    triangles, pos = parse_triangles(data, pos, config)
    weights, pos = parse_weights(data, pos, config)
    pos = expect_tag(data, pos, b'}')
    return Mesh(shader, tuple(vertices), tuple(triangles), tuple(weights)), pos


def parse_meshes(data: bytes, pos: int, config: Optional[ParseConfig] = None) -> Tuple[List[Mesh], int]:
    return many(lambda d, p: parse_mesh(d, p, config), data, pos)


def parse_md5mesh(data: Union[bytes, str], config: Optional[ParseConfig] = None) -> Md5Mesh:
    """
    Parse a complete .md5mesh document.

    Args:
        data: Whole document contents
        config: Parse options (default: permissive)

    Returns:
        Md5Mesh document

    Raises:
        ParseError: on any failure, including trailing non-whitespace data
    """
    if isinstance(data, str):
        data = data.encode('utf-8')

    (version, command_line), pos = parse_header(data, 0)
    num_joints, pos = tagged(b'numJoints', parse_unsigned, data, pos)
    num_meshes, pos = tagged(b'numMeshes', parse_unsigned, data, pos)
    joints_start = skip_ws(data, pos)
    joints, pos = parse_joints(data, pos)
    check_count(config, 'numJoints', num_joints, len(joints), joints_start)
    meshes_start = skip_ws(data, pos)
    meshes, pos = parse_meshes(data, pos, config)
    check_count(config, 'numMeshes', num_meshes, len(meshes), meshes_start)

    if not at_end(data, pos):
        raise StructuralError("unexpected data after last mesh", skip_ws(data, pos))

    logger.debug("Parsed md5mesh v%d: %d joints, %d meshes", version, len(joints), len(meshes))
    return Md5Mesh(version, command_line, tuple(joints), tuple(meshes))


class Md5MeshParser:
    """Parser for MD5 mesh (.md5mesh) documents"""

    def __init__(self, config: Optional[ParseConfig] = None):
        self.config = config or ParseConfig()

    def parse(self, data: Union[bytes, str]) -> Md5Mesh:
        """
        Parse an in-memory .md5mesh document.

        Args:
            data: Document contents

        Returns:
            Md5Mesh document
        """
        return parse_md5mesh(data, self.config)
