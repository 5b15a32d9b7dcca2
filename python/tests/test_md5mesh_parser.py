"""
test_md5mesh_parser.py - Tests for the .md5mesh grammar.

Usage:
    pytest python/tests/test_md5mesh_parser.py
"""

import sys
import os

import pytest

# Add the python directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from md5model import md5mesh_parser
from md5model.config import ParseConfig
from md5model.data_structs import Joint, Vertex, Triangle, Weight, Mesh, Md5Mesh
from md5model.decoders import complete_quaternion
from md5model.errors import (
    BiasRangeError,
    CountMismatchError,
    IncompleteInputError,
    NumericConversionError,
    SemanticValidationError,
    StructuralError,
)
from md5model.md5mesh_parser import Md5MeshParser, parse_md5mesh
from md5model.vec_math import Vector2, Vector3, Quaternion


COMMAND_LINE = "Exported from Blender by io_export_md5.py by Paul Zirkle"

BOB_MESH = b"""MD5Version 10
commandline "Exported from Blender by io_export_md5.py by Paul Zirkle"

numJoints 33
numMeshes 6

joints {
\t"origin"\t-1 ( -0.000000 0.001643 -0.000604 ) ( -0.707107 -0.000242 -0.707107 )\t\t//comment
}

mesh {
    shader "bob_body"

    numverts 1
    vert 0 ( 0.683594 0.455078 ) 0 3

    numtris 1
    tri 0 0 2 1

    numweights 1
    weight 0 16 0.333333 ( -0.194917 0.111128 -0.362937 )
}

"""

MINIMAL_MESH = b"""MD5Version 10
commandline "x"
numJoints 1
numMeshes 1
joints { "origin" -1 ( 0 0 0 ) ( 0 0 0 ) }
mesh { shader "s" numverts 1 vert 0 ( 0 0 ) 0 1 numtris 1 tri 0 0 0 0 numweights 1 weight 0 0 0.5 ( 0 0 0 ) }
"""

ORIGIN = Joint(
    name="origin",
    parent_index=-1,
    position=Vector3(-0.0, 0.001643, -0.000604),
    orientation=Quaternion(-0.707107, Vector3(-0.000242, -0.707107, 0.0)),
)

BOB_VERTEX = Vertex(index=0, tex_coords=Vector2(0.683594, 0.455078), start_weight=0, weight_count=3)
BOB_TRIANGLE = Triangle(index=0, vertex_indices=(0, 2, 1))
BOB_WEIGHT = Weight(index=0, joint_index=16, bias=0.333333,
                    position=Vector3(-0.194917, 0.111128, -0.362937))
BOB_BODY = Mesh(shader="bob_body", vertices=(BOB_VERTEX,), triangles=(BOB_TRIANGLE,), weights=(BOB_WEIGHT,))


def test_parse_header():
    data = b'MD5Version 10\n            commandline "' + COMMAND_LINE.encode() + b'"'
    assert md5mesh_parser.parse_header(data, 0) == ((10, COMMAND_LINE), len(data))


def test_parse_header_version_width():
    with pytest.raises(NumericConversionError):
        md5mesh_parser.parse_header(b'MD5Version 300 commandline ""', 0)


def test_parse_joints():
    data = b"""joints {
            \t"origin"\t-1 ( -0.000000 0.001643 -0.000604 ) ( -0.707107 -0.000242 -0.707107 )\t\t// comment
            \t"sheath"\t0 ( 1.100481 -0.317714 3.170247 ) ( 0.307041 -0.578615 0.354181 )\t\t// comment
              }"""
    sheath = Joint(
        name="sheath",
        parent_index=0,
        position=Vector3(1.100481, -0.317714, 3.170247),
        orientation=complete_quaternion(0.307041, -0.578615, 0.354181),
    )
    assert md5mesh_parser.parse_joints(data, 0) == ([ORIGIN, sheath], len(data))


def test_parse_joints_empty_block():
    assert md5mesh_parser.parse_joints(b"joints { }", 0) == ([], 10)


def test_parent_index_is_not_range_checked():
    joint, _ = md5mesh_parser.parse_joint(b'"a" 99 ( 0 0 0 ) ( 0 0 0 )', 0)
    assert joint.parent_index == 99


def test_parse_vertex():
    data = b"vert 0 ( 0.683594 0.455078 ) 0 3"
    assert md5mesh_parser.parse_vertex(data, 0) == (BOB_VERTEX, len(data))


def test_parse_triangle():
    data = b"tri 0 0 2 1"
    assert md5mesh_parser.parse_triangle(data, 0) == (BOB_TRIANGLE, len(data))


def test_parse_weight_with_comment():
    data = b"weight 0 16 0.333333 ( -0.194917 0.111128 -0.362937 ) // spine\n"
    assert md5mesh_parser.parse_weight(data, 0) == (BOB_WEIGHT, len(data))


def test_parse_mesh():
    data = b"""mesh {
                shader "bob_body"

                numverts 1
                vert 0 ( 0.683594 0.455078 ) 0 3

                numtris 628
            \ttri 0 0 2 1

                numweights 859
                weight 0 16 0.333333 ( -0.194917 0.111128 -0.362937 )
            }"""
    assert md5mesh_parser.parse_mesh(data, 0) == (BOB_BODY, len(data))


def test_mesh_entries_sorted_by_declared_index():
    data = b"""mesh {
        shader "s"
        numverts 3
        vert 2 ( 0.2 0.2 ) 2 1
        vert 0 ( 0.0 0.0 ) 0 1
        vert 1 ( 0.1 0.1 ) 1 1
        numtris 3
        tri 1 1 1 1
        tri 2 2 2 2
        tri 0 0 0 0
        numweights 3
        weight 1 0 1.0 ( 1 1 1 )
        weight 2 0 1.0 ( 2 2 2 )
        weight 0 0 1.0 ( 0 0 0 )
    }"""
    mesh, _ = md5mesh_parser.parse_mesh(data, 0)
    assert [v.index for v in mesh.vertices] == [0, 1, 2]
    assert [t.index for t in mesh.triangles] == [0, 1, 2]
    assert [w.index for w in mesh.weights] == [0, 1, 2]
    assert mesh.vertices[1].tex_coords == Vector2(0.1, 0.1)
    assert mesh.triangles[2].vertex_indices == (2, 2, 2)
    assert mesh.weights[0].position == Vector3(0.0, 0.0, 0.0)


def test_duplicate_indices_are_kept_in_file_order():
    data = b"numtris 2 tri 0 1 1 1 tri 0 2 2 2"
    triangles, _ = md5mesh_parser.parse_triangles(data, 0)
    assert [t.vertex_indices for t in triangles] == [(1, 1, 1), (2, 2, 2)]


def test_bias_range():
    for bias in [b"1.0", b"-1.0", b"1", b"0.000000"]:
        weight, _ = md5mesh_parser.parse_weight(b"weight 0 0 " + bias + b" ( 0 0 0 )", 0)
        assert abs(weight.bias) <= 1.0

    for bias in [b"1.5", b"-1.0001"]:
        with pytest.raises(BiasRangeError) as exc:
            md5mesh_parser.parse_weight(b"weight 0 0 " + bias + b" ( 0 0 0 )", 0)
        assert exc.value.offset == 11
        assert isinstance(exc.value, SemanticValidationError)
        assert not isinstance(exc.value, StructuralError)


def test_bias_failure_propagates_through_document():
    data = MINIMAL_MESH.replace(b"0.5", b"1.5")
    with pytest.raises(BiasRangeError) as exc:
        parse_md5mesh(data)
    assert exc.value.bias == 1.5


def test_parse_md5mesh():
    expected = Md5Mesh(version=10, command_line=COMMAND_LINE, joints=(ORIGIN,), meshes=(BOB_BODY,))
    assert parse_md5mesh(BOB_MESH) == expected


def test_minimal_document():
    mesh_doc = parse_md5mesh(MINIMAL_MESH)

    assert mesh_doc.version == 10
    assert mesh_doc.command_line == "x"
    assert mesh_doc.joints == (Joint("origin", -1, Vector3(0.0, 0.0, 0.0),
                                     Quaternion(0.0, Vector3(0.0, 0.0, 1.0))),)
    assert mesh_doc.num_meshes == 1
    mesh = mesh_doc.meshes[0]
    assert mesh.shader == "s"
    assert mesh.vertices == (Vertex(0, Vector2(0.0, 0.0), 0, 1),)
    assert mesh.triangles == (Triangle(0, (0, 0, 0)),)
    assert mesh.weights == (Weight(0, 0, 0.5, Vector3(0.0, 0.0, 0.0)),)
    assert mesh.vertex_weights(mesh.vertices[0]) == mesh.weights


def test_declared_counts_are_not_enforced_by_default():
    # BOB_MESH declares 33 joints and 6 meshes but has one of each
    mesh_doc = parse_md5mesh(BOB_MESH)
    assert mesh_doc.num_joints == 1
    assert mesh_doc.num_meshes == 1


def test_strict_counts():
    with pytest.raises(CountMismatchError) as exc:
        parse_md5mesh(BOB_MESH, ParseConfig.strict())
    assert exc.value.field == "numJoints"
    assert exc.value.declared == 33
    assert exc.value.actual == 1

    assert parse_md5mesh(MINIMAL_MESH, ParseConfig.strict()).num_joints == 1

    data = MINIMAL_MESH.replace(b"numtris 1", b"numtris 2")
    with pytest.raises(CountMismatchError) as exc:
        parse_md5mesh(data, ParseConfig.strict())
    assert exc.value.field == "numtris"


def test_document_without_meshes():
    data = b'MD5Version 10 commandline "" numJoints 0 numMeshes 0 joints { }\n'
    assert parse_md5mesh(data) == Md5Mesh(10, "", (), ())


def test_trailing_data_rejected():
    with pytest.raises(StructuralError) as exc:
        parse_md5mesh(MINIMAL_MESH + b"stray text")
    assert exc.value.offset == len(MINIMAL_MESH)

    assert parse_md5mesh(MINIMAL_MESH + b"\n\n \t ").num_meshes == 1


def test_missing_tag_is_structural():
    data = MINIMAL_MESH.replace(b"numMeshes", b"numMesh")
    with pytest.raises(StructuralError) as exc:
        parse_md5mesh(data)
    line, column = exc.value.locate(data)
    assert (line, column) == (4, 1)


def test_truncated_document_is_incomplete():
    data = MINIMAL_MESH.rstrip()[:-1]
    with pytest.raises(IncompleteInputError):
        parse_md5mesh(data)
    with pytest.raises(IncompleteInputError):
        parse_md5mesh(MINIMAL_MESH[:40])


def test_parser_class_accepts_text():
    parser = Md5MeshParser()
    assert parser.parse(MINIMAL_MESH.decode('utf-8')) == parse_md5mesh(MINIMAL_MESH)
    assert parser.config.validate_counts is False
