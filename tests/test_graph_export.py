# tests/test_graph_export.py
import json

import pytest

from gtasa_extractor.graph import PathGraph
from gtasa_extractor.parsers import parse_node_file
from gtasa_extractor.serialization import batch_count, export_graph, iter_batches

from file_builder import build_node_file, pack_node


def test_iter_batches():
    assert list(iter_batches(list(range(5)), 2)) == [[0, 1], [2, 3], [4]]
    assert list(iter_batches([], 3)) == []
    assert batch_count(5, 2) == 3
    assert batch_count(0, 2) == 0


def test_iter_batches_rejects_non_positive_size():
    with pytest.raises(ValueError):
        list(iter_batches([1, 2], 0))


def _graph():
    node_file = parse_node_file(build_node_file(
        nodes=[pack_node(area_id=0, node_id=i, link_id=i, flags0=1) for i in range(3)],
        links=[(0, 1), (0, 2), (0, 0)],
        link_lengths=[10, 20, 30],
    ))
    return PathGraph.from_node_files([node_file])


def test_export_writes_batches(tmp_path):
    out = tmp_path / "export"
    written = export_graph(_graph(), out, batch_size=2)

    assert [p.name for p in written] == [
        "nodes_0001.json", "nodes_0002.json", "links_0001.json", "links_0002.json", "summary.json",
    ]

    nodes = json.loads((out / "nodes_0001.json").read_text()) + json.loads((out / "nodes_0002.json").read_text())
    assert [n["node_id"] for n in nodes] == [0, 1, 2]
    assert nodes[0]["type"] == "Car"

    links = json.loads((out / "links_0001.json").read_text())
    assert links[0] == {"from_area_id": 0, "from_node_id": 0, "to_area_id": 0, "to_node_id": 1, "length": 10}

    summary = json.loads((out / "summary.json").read_text())
    assert summary["vertex_count"] == 3
    assert summary["edge_count"] == 3
    assert summary["dangling_edges"] == 0
    assert summary["batch_size"] == 2


def test_export_rejects_non_positive_batch_size(tmp_path):
    with pytest.raises(ValueError):
        export_graph(_graph(), tmp_path, batch_size=0)
