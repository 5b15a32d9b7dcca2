"""
MD5 animation (.md5anim) parser.

Decodes the header, joint hierarchy, per-frame bounds, base frame and
the raw channel values of every frame. Channel values are kept exactly
as listed; mapping them onto joints is left to the consumer.
"""

import logging
from typing import List, Optional, Tuple, Union

from .config import ParseConfig, check_count
from .data_structs import HierarchyJoint, Bound, BaseFrame, Frame, Md5Anim
from .decoders import parse_paren_quaternion, parse_paren_vector3
from .errors import StructuralError
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
from .vec_math import Vector3, Quaternion

logger = logging.getLogger(__name__)

HEADER_COUNT_TAGS = (b'numFrames', b'numJoints', b'frameRate', b'numAnimatedComponents')


def parse_header(data: bytes, pos: int) -> Tuple[Tuple[int, str, int, int, int, int], int]:
    """
    MD5Version, commandline, numFrames, numJoints, frameRate and
    numAnimatedComponents, in that order.
    """
    version, pos = tagged(b'MD5Version', parse_signed, data, pos)
    command_line, pos = tagged(b'commandline', parse_quoted_string, data, pos)
    counts = []
    for tag in HEADER_COUNT_TAGS:
        value, pos = tagged(tag, parse_signed, data, pos)
        counts.append(value)
    num_frames, num_joints, frame_rate, num_components = counts
    return (version, command_line, num_frames, num_joints, frame_rate, num_components), pos


def parse_hierarchy_joint(data: bytes, pos: int) -> Tuple[HierarchyJoint, int]:
    """"name" parent flags start_index [// comment]"""
    name, pos = parse_quoted_string(data, pos)
    parent_index, pos = parse_signed(data, pos)
    flags, pos = parse_signed(data, pos)
    start_index, pos = parse_signed(data, pos)
    _, pos = optional(parse_comment, data, pos)
    return HierarchyJoint(name, parent_index, flags, start_index), pos


def parse_hierarchy(data: bytes, pos: int) -> Tuple[List[HierarchyJoint], int]:
    pos = expect_tag(data, pos, b'hierarchy')
    return delimited(data, pos, b'{', lambda d, p: many(parse_hierarchy_joint, d, p, minimum=1), b'}')


def parse_bound(data: bytes, pos: int) -> Tuple[Bound, int]:
    """( min ) ( max )"""
    minimum, pos = parse_paren_vector3(data, pos)
    maximum, pos = parse_paren_vector3(data, pos)
    return Bound(minimum, maximum), pos


def parse_bounds(data: bytes, pos: int) -> Tuple[List[Bound], int]:
    pos = expect_tag(data, pos, b'bounds')
    return delimited(data, pos, b'{', lambda d, p: many(parse_bound, d, p, minimum=1), b'}')


def parse_pose_entry(data: bytes, pos: int) -> Tuple[Tuple[Vector3, Quaternion], int]:
    """( position ) ( orientation )"""
    position, pos = parse_paren_vector3(data, pos)
    orientation, pos = parse_paren_quaternion(data, pos)
    return (position, orientation), pos


def parse_base_frame(data: bytes, pos: int) -> Tuple[BaseFrame, int]:
    pos = expect_tag(data, pos, b'baseframe')
    entries, pos = delimited(data, pos, b'{', lambda d, p: many(parse_pose_entry, d, p, minimum=1), b'}')
    positions = tuple(position for position, _ in entries)
    orientations = tuple(orientation for _, orientation in entries)
    return BaseFrame(positions, orientations), pos


def parse_frame(data: bytes, pos: int) -> Tuple[Frame, int]:
    """frame <n> { value value ... }"""
    frame_number, pos = tagged(b'frame', parse_unsigned, data, pos)
    values, pos = delimited(data, pos, b'{', lambda d, p: many(parse_decimal, d, p), b'}')
    return Frame(frame_number, tuple(values)), pos


def parse_frames(data: bytes, pos: int) -> Tuple[List[Frame], int]:
    return many(parse_frame, data, pos, minimum=1)


def _validate_counts(config: Optional[ParseConfig], header, hierarchy, bounds, base_frame, frames, offsets):
    _, _, num_frames, num_joints, _, num_components = header
    hierarchy_at, bounds_at, base_frame_at, frames_at = offsets
    check_count(config, 'numJoints', num_joints, len(hierarchy), hierarchy_at)
    # One bound per frame
    check_count(config, 'numFrames (bounds)', num_frames, len(bounds), bounds_at)
    check_count(config, 'numJoints (baseframe)', num_joints, len(base_frame.positions), base_frame_at)
    check_count(config, 'numFrames', num_frames, len(frames), frames_at)
    for frame in frames:
        check_count(config, f'numAnimatedComponents (frame {frame.frame_number})',
                    num_components, len(frame.values), frames_at)


def parse_md5anim(data: Union[bytes, str], config: Optional[ParseConfig] = None) -> Md5Anim:
    """
    Parse a complete .md5anim document.

    Args:
        data: Whole document contents
        config: Parse options (default: permissive)

    Returns:
        Md5Anim document

    Raises:
        ParseError: on any failure, including trailing non-whitespace data
    """
    if isinstance(data, str):
        data = data.encode('utf-8')

    header, pos = parse_header(data, 0)
    hierarchy_at = skip_ws(data, pos)
    hierarchy, pos = parse_hierarchy(data, pos)
    bounds_at = skip_ws(data, pos)
    bounds, pos = parse_bounds(data, pos)
    base_frame_at = skip_ws(data, pos)
    base_frame, pos = parse_base_frame(data, pos)
    frames_at = skip_ws(data, pos)
    frames, pos = parse_frames(data, pos)

    if not at_end(data, pos):
        raise StructuralError("unexpected data after last frame", skip_ws(data, pos))

    _validate_counts(config, header, hierarchy, bounds, base_frame, frames,
                     (hierarchy_at, bounds_at, base_frame_at, frames_at))

    version, command_line, num_frames, num_joints, frame_rate, num_components = header
    logger.debug("Parsed md5anim v%d: %d joints, %d frames at %d fps",
                 version, len(hierarchy), len(frames), frame_rate)
    return Md5Anim(
        version=version,
        command_line=command_line,
        num_frames=num_frames,
        num_joints=num_joints,
        frame_rate=frame_rate,
        num_animated_components=num_components,
        hierarchy=tuple(hierarchy),
        bounds=tuple(bounds),
        base_frame=base_frame,
        frames=tuple(frames),
    )


class Md5AnimParser:
    """Parser for MD5 animation (.md5anim) documents"""

    def __init__(self, config: Optional[ParseConfig] = None):
        self.config = config or ParseConfig()

    def parse(self, data: Union[bytes, str]) -> Md5Anim:
        """
        Parse an in-memory .md5anim document.

        Args:
            data: Document contents

        Returns:
            Md5Anim document
        """
        return parse_md5anim(data, self.config)
