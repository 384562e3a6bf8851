# tests/test_node_file.py
import dataclasses

import numpy as np
import pytest

from gtasa_extractor.constants import expected_file_size
from gtasa_extractor.parsers import (
    NodeType,
    PathFileError,
    TruncatedInputError,
    UnexpectedFileSizeError,
    parse_node_file,
    parse_path_file,
)

from file_builder import build_node_file, pack_navigation_node, pack_node


def _sample_file():
    return build_node_file(
        nodes=[pack_node(node_id=i) for i in range(3)],
        navigation_nodes=[pack_navigation_node(node_id=i) for i in range(2)],
        links=[(0, 1), (0, 2), (0, 0), (0, 1)],
    )


# ---- layout ----
def test_file_length_matches_header_counts():
    data = _sample_file()
    node_file = parse_node_file(data)

    assert len(data) == 20 + 28 * 3 + 14 * 2 + 4 * 4 + 768 + 2 * 4 + 4 + 4 + 384
    assert len(data) == expected_file_size(node_file.header)


def test_empty_file_decodes():
    data = build_node_file()
    node_file = parse_node_file(data)

    assert len(data) == 20 + 768 + 384
    assert node_file.nodes == ()
    assert node_file.links == ()
    assert node_file.area_id is None


def test_header_counts():
    node_file = parse_node_file(build_node_file(
        nodes=[pack_node() for _ in range(5)],
        navigation_nodes=[pack_navigation_node()],
        links=[(0, 0)] * 2,
        vehicle_nodes=3,
    ))
    header = node_file.header

    assert header.number_of_nodes == 5
    assert header.number_of_vehicle_nodes == 3
    assert header.number_of_ped_nodes == 2
    assert header.number_of_navi_nodes == 1
    assert header.number_of_links == 2


def test_link_arrays_have_equal_length():
    node_file = parse_node_file(_sample_file())
    count = node_file.header.number_of_links

    assert len(node_file.links) == count
    assert len(node_file.navigation_links) == count
    assert len(node_file.link_lengths) == count
    assert len(node_file.path_intersection_flags) == count


# ---- path nodes ----
def test_node_classification():
    node_file = parse_node_file(build_node_file(
        nodes=[
            pack_node(flags0=0x80),
            pack_node(flags0=0x00),
            pack_node(flags0=0x80),
            pack_node(flags0=0x00),
        ],
        vehicle_nodes=2,
    ))
    types = [n.node_type for n in node_file.nodes]

    assert types == [NodeType.BOAT, NodeType.CAR, NodeType.PED, NodeType.PED]
    for index, node in enumerate(node_file.nodes):
        is_vehicle = node.node_type in (NodeType.CAR, NodeType.BOAT)
        assert is_vehicle == (index < node_file.header.number_of_vehicle_nodes)


def test_node_type_str():
    assert str(NodeType.CAR) == "Car"
    assert str(NodeType.BOAT) == "Boat"
    assert str(NodeType.PED) == "Ped"


def test_node_position_scaling():
    node = parse_node_file(build_node_file(nodes=[pack_node(x=800, y=-16, z=4)])).nodes[0]

    assert node.x == 100.0
    assert node.y == -2.0
    assert node.z == 0.5
    assert node.position == (100.0, -2.0, 0.5)


def test_node_fields():
    node = parse_node_file(build_node_file(nodes=[pack_node(
        link_id=7, area_id=3, node_id=42, path_width=9, flood_fill=2,
        flags0=0b0010_0101, flags1=0b0010_0001, flags2=0b0010_0000,
    )])).nodes[0]

    assert node.link_id == 7
    assert node.area_id == 3
    assert node.node_id == 42
    assert node.key == (3, 42)
    assert node.path_width == 9
    assert node.flood_fill == 2
    assert node.link_count == 5
    assert node.traffic_level == 2
    assert node.emergency_vehicle_only is True
    assert node.is_not_highway is False
    assert node.is_highway is True
    assert node.parking is True


def test_node_flags_clear():
    node = parse_node_file(build_node_file(nodes=[pack_node(flags1=0b0001_0000)])).nodes[0]

    assert node.emergency_vehicle_only is False
    assert node.is_not_highway is True
    assert node.is_highway is False
    assert node.parking is False


def test_node_order_preserved():
    node_file = parse_node_file(build_node_file(nodes=[pack_node(node_id=i) for i in (9, 3, 7)]))
    assert [n.node_id for n in node_file.nodes] == [9, 3, 7]


# ---- navigation nodes ----
def test_navigation_node_fields():
    nav = parse_node_file(build_node_file(navigation_nodes=[pack_navigation_node(
        x=800, y=-8, area_id=4, node_id=11, direction_x=50, direction_y=-100,
        path_node_width=6, flags0=0b1010_1110, flags1=0b1110_0000,
    )])).navigation_nodes[0]

    assert nav.x == 100.0
    assert nav.y == -1.0
    assert nav.area_id == 4
    assert nav.node_id == 11
    assert nav.direction_x == pytest.approx(0.5)
    assert nav.direction_y == pytest.approx(-1.0)
    assert nav.path_node_width == 6
    assert nav.number_of_left_lanes == 5
    assert nav.number_of_right_lanes == 3
    assert nav.traffic_light_direction_behavior == 1
    assert nav.traffic_light_behavior == 3
    assert nav.train_crossing == 1


# ---- links ----
def test_links_share_indexing():
    node_file = parse_node_file(build_node_file(
        links=[(1, 10), (2, 20), (3, 30)],
        navigation_links=[(100 + i) << 6 for i in range(3)],
        link_lengths=[11, 22, 33],
        intersection_flags=[0x80, 0x40, 0xC0],
    ))

    for i in range(3):
        assert node_file.links[i].area_id == i + 1
        assert node_file.links[i].node_id == (i + 1) * 10
        assert node_file.navigation_links[i].navigation_node_id == 100 + i
        assert node_file.link_lengths[i].length == (i + 1) * 11

    flags = node_file.path_intersection_flags
    assert (flags[0].road_crossing, flags[0].pedestrian_traffic_light) == (True, False)
    assert (flags[1].road_crossing, flags[1].pedestrian_traffic_light) == (False, True)
    assert (flags[2].road_crossing, flags[2].pedestrian_traffic_light) == (True, True)


def test_navigation_link_fields():
    nav_link = parse_node_file(build_node_file(links=[(0, 0)], navigation_links=[0x17C5])).navigation_links[0]

    assert nav_link.navigation_node_id == 95
    assert nav_link.area_id == 23


def test_node_links_slice():
    node_file = parse_node_file(build_node_file(
        nodes=[pack_node(link_id=1, flags0=2), pack_node(link_id=3, flags0=4)],
        links=[(0, 0), (0, 1), (0, 2), (0, 3)],
        link_lengths=[1, 2, 3, 4],
    ))

    first = node_file.node_links(node_file.nodes[0])
    assert [(link.node_id, length.length) for link, _, length, _ in first] == [(1, 2), (2, 3)]

    # link_id 3 + link_count 4 runs past the arrays
    second = node_file.node_links(node_file.nodes[1])
    assert [link.node_id for link, _, _, _ in second] == [3]


def test_get_all_positions():
    node_file = parse_node_file(build_node_file(nodes=[pack_node(x=8, y=16, z=24), pack_node(x=-8)]))
    positions = node_file.get_all_positions()

    assert positions.shape == (2, 3)
    assert positions.dtype == np.float32
    assert positions[0].tolist() == [1.0, 2.0, 3.0]
    assert positions[1].tolist() == [-1.0, 0.0, 0.0]


def test_records_are_immutable():
    node_file = parse_node_file(build_node_file(nodes=[pack_node()]))
    with pytest.raises(dataclasses.FrozenInstanceError):
        node_file.nodes[0].node_id = 5


# ---- failures ----
def test_short_header_is_truncated():
    with pytest.raises(TruncatedInputError) as excinfo:
        parse_node_file(b'\x00' * 10)
    assert excinfo.value.what == "header"


def test_missing_node_records_are_truncated():
    data = build_node_file(nodes=[pack_node()] * 2, header=(5, 5, 0, 0, 0))
    with pytest.raises(TruncatedInputError):
        parse_node_file(data)


def test_missing_trailing_bytes_are_truncated():
    data = _sample_file()
    with pytest.raises(TruncatedInputError):
        parse_node_file(data[:-1])


def test_extra_trailing_bytes_fail():
    data = _sample_file()
    with pytest.raises(UnexpectedFileSizeError) as excinfo:
        parse_node_file(data + b'\x00\x00')

    assert excinfo.value.expected == len(data) + 2
    assert excinfo.value.found == len(data)


def test_errors_are_value_errors():
    assert issubclass(TruncatedInputError, PathFileError)
    assert issubclass(UnexpectedFileSizeError, PathFileError)
    assert issubclass(PathFileError, ValueError)


# ---- files ----
def test_parse_path_file(tmp_path):
    path = tmp_path / "nodes0.dat"
    path.write_bytes(_sample_file())

    node_file = parse_path_file(path)
    assert node_file is not None
    assert len(node_file.nodes) == 3


def test_missing_file_returns_none(tmp_path):
    assert parse_path_file(tmp_path / "nodes99.dat") is None


def test_directory_returns_none(tmp_path):
    assert parse_path_file(tmp_path) is None


def test_corrupt_file_raises(tmp_path):
    path = tmp_path / "nodes1.dat"
    path.write_bytes(_sample_file() + b'\x00')
    with pytest.raises(UnexpectedFileSizeError):
        parse_path_file(path)
