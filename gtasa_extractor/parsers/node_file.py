"""
Path Node File (nodes*.dat) Parser

Parses the per-area path files that hold the vehicle and pedestrian
path-finding graph of one 750x750 map area.

File format (little-endian throughout):
- Header (20 bytes):
  - u32 number_of_nodes
  - u32 number_of_vehicle_nodes
  - u32 number_of_ped_nodes
  - u32 number_of_navi_nodes
  - u32 number_of_links
- Path nodes (28 bytes each, number_of_nodes):
  - [0..8)   unused (runtime memory address)
  - [8..14)  i16 x, y, z (fixed point, 1/8)
  - [14..16) unused (heuristic cost)
  - [16..22) u16 link_id, area_id, node_id
  - [22]     u8 path_width
  - [23]     u8 flood_fill
  - [24]     link_count:4, traffic_level:2, -, boats:1
  - [25]     emergency_vehicle_only:1, -, -, -, is_not_highway:1, is_highway:1
  - [26]     bit 5 parking
  - [27]     unused
- Navigation nodes (14 bytes each, number_of_navi_nodes):
  - i16 x, y (1/8), u16 area_id, node_id, i8 direction x, y (1/100),
    u8 path_node_width, packed lane/traffic light bits in [11] and [12]
- Links (4 bytes each, number_of_links): u16 area_id, u16 node_id
- Filler (768 bytes)
- Navigation links (2 bytes each, number_of_links)
- Link lengths (1 byte each, number_of_links)
- Path intersection flags (1 byte each, number_of_links)
- Unknown data (384 bytes)

Vehicle nodes come first: a node whose index is below number_of_vehicle_nodes
is a car or boat node, everything after it is a pedestrian node.

Bitfield modes:
    Several sub-byte fields were historically extracted as value & (mask >> shift)
    instead of (value & mask) >> shift. The default decodes the bit ranges the
    masks describe. Pass legacy_bitfields=True to get the historical values.
"""

import struct
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union
from dataclasses import dataclass

import numpy as np

from ..constants import (
    HEADER_SIZE,
    NODE_SIZE,
    NAVIGATION_NODE_SIZE,
    LINK_SIZE,
    FILLER_SIZE,
    NAVIGATION_LINK_SIZE,
    LINK_LENGTH_SIZE,
    PATH_INTERSECTION_FLAGS_SIZE,
    UNKNOWN_DATA_SIZE,
    COORDINATE_SCALE,
    DIRECTION_SCALE,
)
from ..utils import logDebug
from .base import ByteCursor, UnexpectedFileSizeError


_HEADER_STRUCT = struct.Struct('<5I')
# x, y, z, link_id, area_id, node_id, path_width, flood_fill, flags[24..26]
_NODE_STRUCT = struct.Struct('<8x3h2x3H5Bx')
# x, y, area_id, node_id, dir_x, dir_y, path_node_width, flags[11], flags[12]
_NAVIGATION_NODE_STRUCT = struct.Struct('<2h2H2b3Bx')
_LINK_STRUCT = struct.Struct('<2H')
_NAVIGATION_LINK_STRUCT = struct.Struct('<H')


class NodeType(Enum):
    """Path node classification."""
    CAR = "Car"
    BOAT = "Boat"
    PED = "Ped"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PathHeader:
    """Record counts from the 20-byte file header."""
    number_of_nodes: int
    number_of_vehicle_nodes: int
    number_of_ped_nodes: int
    number_of_navi_nodes: int
    number_of_links: int


@dataclass(frozen=True)
class PathNode:
    """Path node (graph vertex) for cars, boats or pedestrians."""
    node_type: NodeType
    x: float
    y: float
    z: float
    link_id: int  # first index into the file's link arrays
    area_id: int
    node_id: int
    path_width: int
    flood_fill: int
    link_count: int  # number of links starting at link_id
    traffic_level: int
    emergency_vehicle_only: bool
    is_not_highway: bool
    is_highway: bool
    parking: bool

    @property
    def key(self) -> Tuple[int, int]:
        """(area_id, node_id) identifier used by links in any file."""
        return (self.area_id, self.node_id)

    @property
    def position(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class NavigationNode:
    """Navigation node data."""
    x: float
    y: float
    area_id: int
    node_id: int
    direction_x: float
    direction_y: float
    path_node_width: int
    number_of_left_lanes: int
    number_of_right_lanes: int
    traffic_light_direction_behavior: int
    traffic_light_behavior: int
    train_crossing: int


@dataclass(frozen=True)
class Link:
    """Edge target: the path node a link points at."""
    area_id: int
    node_id: int


@dataclass(frozen=True)
class NavigationLink:
    """Navigation node attached to a link."""
    navigation_node_id: int
    area_id: int


@dataclass(frozen=True)
class LinkLength:
    """Length of a link."""
    length: int


@dataclass(frozen=True)
class PathIntersectionFlags:
    """Intersection flags of a link."""
    road_crossing: bool
    pedestrian_traffic_light: bool


@dataclass(frozen=True)
class NodeFile:
    """
    Fully decoded path node file.

    The four link arrays share indexing: entry i of links, navigation_links,
    link_lengths and path_intersection_flags all describe the same edge.
    """
    header: PathHeader
    nodes: Tuple[PathNode, ...]
    navigation_nodes: Tuple[NavigationNode, ...]
    links: Tuple[Link, ...]
    navigation_links: Tuple[NavigationLink, ...]
    link_lengths: Tuple[LinkLength, ...]
    path_intersection_flags: Tuple[PathIntersectionFlags, ...]

    @property
    def area_id(self) -> Optional[int]:
        """Area of the first path node, or None for an empty file."""
        if not self.nodes:
            return None
        return self.nodes[0].area_id

    def node_links(self, node: PathNode) -> Tuple[Tuple[Link, NavigationLink, LinkLength, PathIntersectionFlags], ...]:
        """
        Get the links owned by a node.

        The range [link_id, link_id + link_count) is clipped to the link arrays,
        so a node with out-of-range link data yields fewer entries.

        Args:
            node: A node from this file

        Returns:
            Tuple of (Link, NavigationLink, LinkLength, PathIntersectionFlags)
        """
        start = node.link_id
        end = min(start + node.link_count, len(self.links))
        return tuple(
            (self.links[i], self.navigation_links[i], self.link_lengths[i], self.path_intersection_flags[i])
            for i in range(start, end)
        )

    def get_all_positions(self) -> np.ndarray:
        """
        Get all path node positions as a numpy array.

        Returns:
            Nx3 float32 array of (x, y, z) positions in file order
        """
        positions = np.zeros((len(self.nodes), 3), dtype=np.float32)
        for i, node in enumerate(self.nodes):
            positions[i] = (node.x, node.y, node.z)
        return positions


def _bits(value: int, mask: int, shift: int, legacy: bool) -> int:
    """Extract a bit range; legacy mode shifts the mask instead of the value."""
    if legacy:
        return value & (mask >> shift)
    return (value & mask) >> shift


def read_path_header(cursor: ByteCursor) -> PathHeader:
    """Read the five record counts."""
    counts = _HEADER_STRUCT.unpack(cursor.read(HEADER_SIZE, "header"))
    return PathHeader(*counts)


def read_path_nodes(cursor: ByteCursor, header: PathHeader, legacy_bitfields: bool = False) -> Tuple[PathNode, ...]:
    """
    Read number_of_nodes path node records.

    Output order is the file order; the index decides the node type.
    """
    nodes = []

    for index in range(header.number_of_nodes):
        (x, y, z, link_id, area_id, node_id, path_width, flood_fill,
         flags0, flags1, flags2) = _NODE_STRUCT.unpack(cursor.read(NODE_SIZE, f"path node {index}"))

        boats = (flags0 & 0b1000_0000) != 0
        if index < header.number_of_vehicle_nodes:
            node_type = NodeType.BOAT if boats else NodeType.CAR
        else:
            node_type = NodeType.PED

        nodes.append(PathNode(
            node_type=node_type,
            x=x / COORDINATE_SCALE,
            y=y / COORDINATE_SCALE,
            z=z / COORDINATE_SCALE,
            link_id=link_id,
            area_id=area_id,
            node_id=node_id,
            path_width=path_width,
            flood_fill=flood_fill,
            link_count=flags0 & 0b0000_1111,
            traffic_level=_bits(flags0, 0b0011_0000, 4, legacy_bitfields),
            emergency_vehicle_only=(flags1 & 0b0000_0001) != 0,
            is_not_highway=(flags1 & 0b0001_0000) != 0,
            is_highway=(flags1 & 0b0010_0000) != 0,
            parking=(flags2 & 0b0010_0000) != 0,
        ))

    return tuple(nodes)


def read_navigation_nodes(cursor: ByteCursor, header: PathHeader,
                          legacy_bitfields: bool = False) -> Tuple[NavigationNode, ...]:
    """Read number_of_navi_nodes navigation node records."""
    nodes = []

    for index in range(header.number_of_navi_nodes):
        (x, y, area_id, node_id, direction_x, direction_y, path_node_width,
         flags0, flags1) = _NAVIGATION_NODE_STRUCT.unpack(
            cursor.read(NAVIGATION_NODE_SIZE, f"navigation node {index}"))

        nodes.append(NavigationNode(
            x=x / COORDINATE_SCALE,
            y=y / COORDINATE_SCALE,
            area_id=area_id,
            node_id=node_id,
            direction_x=direction_x / DIRECTION_SCALE,
            direction_y=direction_y / DIRECTION_SCALE,
            path_node_width=path_node_width,
            number_of_left_lanes=_bits(flags0, 0b1110_0000, 5, legacy_bitfields),
            number_of_right_lanes=_bits(flags0, 0b0001_1100, 2, legacy_bitfields),
            traffic_light_direction_behavior=_bits(flags0, 0b0000_0010, 1, legacy_bitfields),
            traffic_light_behavior=_bits(flags1, 0b1100_0000, 6, legacy_bitfields),
            train_crossing=_bits(flags1, 0b0010_0000, 5, legacy_bitfields),
        ))

    return tuple(nodes)


def read_path_links(cursor: ByteCursor, header: PathHeader) -> Tuple[Link, ...]:
    """Read number_of_links link records."""
    links = []
    for index in range(header.number_of_links):
        area_id, node_id = _LINK_STRUCT.unpack(cursor.read(LINK_SIZE, f"link {index}"))
        links.append(Link(area_id=area_id, node_id=node_id))
    return tuple(links)


def read_navigation_links(cursor: ByteCursor, header: PathHeader,
                          legacy_bitfields: bool = False) -> Tuple[NavigationLink, ...]:
    """Read number_of_links navigation link records."""
    links = []
    for index in range(header.number_of_links):
        value = _NAVIGATION_LINK_STRUCT.unpack(
            cursor.read(NAVIGATION_LINK_SIZE, f"navigation link {index}"))[0]
        links.append(NavigationLink(
            navigation_node_id=_bits(value, 0b1111_1111_1100_0000, 6, legacy_bitfields),
            area_id=(value >> 8) & 0b0011_1111,
        ))
    return tuple(links)


def read_link_lengths(cursor: ByteCursor, header: PathHeader) -> Tuple[LinkLength, ...]:
    """Read number_of_links link lengths."""
    return tuple(
        LinkLength(length=cursor.read(LINK_LENGTH_SIZE, f"link length {index}")[0])
        for index in range(header.number_of_links)
    )


def read_path_intersection_flags(cursor: ByteCursor, header: PathHeader,
                                 legacy_bitfields: bool = False) -> Tuple[PathIntersectionFlags, ...]:
    """Read number_of_links intersection flag bytes."""
    flags = []
    for index in range(header.number_of_links):
        value = cursor.read(PATH_INTERSECTION_FLAGS_SIZE, f"path intersection flags {index}")[0]
        flags.append(PathIntersectionFlags(
            road_crossing=_bits(value, 0b1000_0000, 7, legacy_bitfields) != 0,
            pedestrian_traffic_light=_bits(value, 0b0100_0000, 6, legacy_bitfields) != 0,
        ))
    return tuple(flags)


def parse_node_file(data: bytes, legacy_bitfields: bool = False) -> NodeFile:
    """
    Decode a complete path node file.

    Args:
        data: Entire file contents
        legacy_bitfields: Reproduce the historical sub-byte field values

    Returns:
        NodeFile

    Raises:
        TruncatedInputError: A region ends past the end of the data
        UnexpectedFileSizeError: Data remains after the last region
    """
    cursor = ByteCursor(data)

    header = read_path_header(cursor)
    nodes = read_path_nodes(cursor, header, legacy_bitfields)
    navigation_nodes = read_navigation_nodes(cursor, header, legacy_bitfields)
    links = read_path_links(cursor, header)
    cursor.skip(FILLER_SIZE, "filler")
    navigation_links = read_navigation_links(cursor, header, legacy_bitfields)
    link_lengths = read_link_lengths(cursor, header)
    path_intersection_flags = read_path_intersection_flags(cursor, header, legacy_bitfields)
    cursor.skip(UNKNOWN_DATA_SIZE, "unknown data")

    if not cursor.at_end:
        raise UnexpectedFileSizeError(expected=len(data), found=cursor.offset)

    return NodeFile(
        header=header,
        nodes=nodes,
        navigation_nodes=navigation_nodes,
        links=links,
        navigation_links=navigation_links,
        link_lengths=link_lengths,
        path_intersection_flags=path_intersection_flags,
    )


def parse_path_file(filepath: Union[str, Path], legacy_bitfields: bool = False) -> Optional[NodeFile]:
    """
    Load and decode a path node file.

    Args:
        filepath: Path to the nodes*.dat file
        legacy_bitfields: Reproduce the historical sub-byte field values

    Returns:
        NodeFile, or None if the file cannot be opened

    Raises:
        PathFileError: The file was read but its layout is invalid
    """
    filepath = Path(filepath)
    try:
        with open(filepath, 'rb') as f:
            data = f.read()
    except OSError as e:
        logDebug(f"Cannot open {filepath}: {e}")
        return None

    node_file = parse_node_file(data, legacy_bitfields=legacy_bitfields)
    logDebug(f"{filepath.name}: {len(node_file.nodes)} nodes, "
             f"{len(node_file.navigation_nodes)} navigation nodes, {len(node_file.links)} links")
    return node_file
