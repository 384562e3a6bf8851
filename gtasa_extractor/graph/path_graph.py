#!/usr/bin/env python3
"""
Path Graph

Joins decoded path node files into a single directed graph.

Vertices are path nodes keyed by (area_id, node_id). Each node owns the
links [link_id, link_id + link_count) of its file; every such link becomes
an edge from the node to the link target, weighted by the link length.
Link targets may live in another area, so edges are resolved only after
all files are loaded.
"""

from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from ..parsers import NodeFile, NodeType
from ..utils import logWarning

VertexKey = Tuple[int, int]


@dataclass
class PathVertex:
    """Graph vertex built from a path node."""
    node_type: NodeType
    x: float
    y: float
    z: float
    link_id: int
    area_id: int
    node_id: int
    path_width: int
    flood_fill: int
    link_count: int
    traffic_level: int
    emergency_vehicle_only: bool
    is_not_highway: bool
    is_highway: bool
    parking: bool

    @property
    def key(self) -> VertexKey:
        return (self.area_id, self.node_id)

    def to_dict(self) -> dict:
        return {
            "type": str(self.node_type),
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "link_id": self.link_id,
            "area_id": self.area_id,
            "node_id": self.node_id,
            "path_width": self.path_width,
            "flood_fill": self.flood_fill,
            "link_count": self.link_count,
            "traffic_level": self.traffic_level,
            "emergency_vehicle_only": self.emergency_vehicle_only,
            "is_not_highway": self.is_not_highway,
            "is_highway": self.is_highway,
            "parking": self.parking,
        }


@dataclass
class PathEdge:
    """Directed edge between two path nodes."""
    from_area_id: int
    from_node_id: int
    to_area_id: int
    to_node_id: int
    length: int

    @property
    def source(self) -> VertexKey:
        return (self.from_area_id, self.from_node_id)

    @property
    def target(self) -> VertexKey:
        return (self.to_area_id, self.to_node_id)

    def to_dict(self) -> dict:
        return {
            "from_area_id": self.from_area_id,
            "from_node_id": self.from_node_id,
            "to_area_id": self.to_area_id,
            "to_node_id": self.to_node_id,
            "length": self.length,
        }


class PathGraph:
    """
    Directed path graph over one or more decoded files.

    Usage:
        graph = PathGraph.from_node_files(node_files)
        vertex = graph.get_vertex((0, 12))
        neighbours = graph.get_neighbours((0, 12))
        hops = graph.bfs_distances((0, 12))
    """

    def __init__(self, vertices: List[PathVertex], edges: List[PathEdge], skipped_links: int = 0):
        """
        Args:
            vertices: Vertices with unique keys
            edges: Edges, targets may be outside the vertex set
            skipped_links: Node links that pointed outside their file's link arrays
        """
        self.vertices = vertices
        self.edges = edges
        self.skipped_links = skipped_links

        self._key_to_index: Dict[VertexKey, int] = {v.key: i for i, v in enumerate(vertices)}
        self._edge_destinations: Optional[np.ndarray] = None
        self._edge_lengths: Optional[np.ndarray] = None
        self._row_ptr: Optional[np.ndarray] = None
        self.dangling_edges = 0

        self._build_adjacency()

    @classmethod
    def from_node_files(cls, node_files: Iterable[NodeFile]) -> 'PathGraph':
        """
        Build the graph from decoded files.

        Args:
            node_files: Decoded files, typically one per area

        Returns:
            PathGraph instance
        """
        vertices: List[PathVertex] = []
        edges: List[PathEdge] = []
        seen = set()
        skipped_links = 0

        for node_file in node_files:
            link_limit = min(len(node_file.links), len(node_file.link_lengths), len(node_file.navigation_links))
            file_skipped = 0

            for node in node_file.nodes:
                if node.key in seen:
                    logWarning(f"Duplicate path node {node.key}, keeping the first")
                    continue
                seen.add(node.key)

                vertices.append(PathVertex(
                    node_type=node.node_type,
                    x=node.x,
                    y=node.y,
                    z=node.z,
                    link_id=node.link_id,
                    area_id=node.area_id,
                    node_id=node.node_id,
                    path_width=node.path_width,
                    flood_fill=node.flood_fill,
                    link_count=node.link_count,
                    traffic_level=node.traffic_level,
                    emergency_vehicle_only=node.emergency_vehicle_only,
                    is_not_highway=node.is_not_highway,
                    is_highway=node.is_highway,
                    parking=node.parking,
                ))

                for link_index in range(node.link_id, node.link_id + node.link_count):
                    if link_index >= link_limit:
                        file_skipped += 1
                        continue

                    link = node_file.links[link_index]
                    edges.append(PathEdge(
                        from_area_id=node.area_id,
                        from_node_id=node.node_id,
                        to_area_id=link.area_id,
                        to_node_id=link.node_id,
                        length=node_file.link_lengths[link_index].length,
                    ))

            if file_skipped:
                logWarning(f"Area {node_file.area_id}: {file_skipped} link(s) outside the link arrays skipped")
                skipped_links += file_skipped

        return cls(vertices, edges, skipped_links)

    def _build_adjacency(self):
        """Build CSR adjacency over edges whose target vertex is loaded."""
        vertex_count = len(self.vertices)
        resolved = []

        for edge in self.edges:
            src = self._key_to_index.get(edge.source)
            dst = self._key_to_index.get(edge.target)
            if src is None or dst is None:
                self.dangling_edges += 1
                continue
            resolved.append((src, dst, edge.length))

        resolved.sort(key=lambda x: x[0])

        self._edge_destinations = np.array([dst for _, dst, _ in resolved], dtype=np.uint32)
        self._edge_lengths = np.array([length for _, _, length in resolved], dtype=np.uint8)
        self._row_ptr = np.zeros(vertex_count + 1, dtype=np.uint32)

        for src, _, _ in resolved:
            self._row_ptr[src + 1] += 1
        self._row_ptr = np.cumsum(self._row_ptr, dtype=np.uint32)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def get_vertex(self, key: VertexKey) -> Optional[PathVertex]:
        """Get a vertex by (area_id, node_id)."""
        index = self._key_to_index.get(tuple(key))
        if index is None:
            return None
        return self.vertices[index]

    def get_neighbours(self, key: VertexKey) -> List[Tuple[VertexKey, int]]:
        """
        Get loaded successors of a vertex.

        Args:
            key: (area_id, node_id)

        Returns:
            List of ((area_id, node_id), length) pairs
        """
        index = self._key_to_index.get(tuple(key))
        if index is None:
            return []

        start = self._row_ptr[index]
        end = self._row_ptr[index + 1]
        return [
            (self.vertices[int(dst)].key, int(length))
            for dst, length in zip(self._edge_destinations[start:end], self._edge_lengths[start:end])
        ]

    def get_all_positions(self) -> np.ndarray:
        """
        Get all vertex positions.

        Returns:
            Nx3 float32 array in vertex order
        """
        positions = np.zeros((len(self.vertices), 3), dtype=np.float32)
        for i, vertex in enumerate(self.vertices):
            positions[i] = (vertex.x, vertex.y, vertex.z)
        return positions

    def bfs_distances(self, start: VertexKey, max_distance: Optional[int] = None) -> np.ndarray:
        """
        Calculate hop distances from a vertex to all other vertices.

        Args:
            start: (area_id, node_id) of the start vertex
            max_distance: Optional maximum distance to search (in edge hops)

        Returns:
            Array where distances[i] is the hop distance to vertices[i],
            or UINT32_MAX if unreachable
        """
        start_index = self._key_to_index.get(tuple(start))
        if start_index is None:
            raise KeyError(f"Unknown path node {start}")

        INFINITY = np.iinfo(np.uint32).max
        distances = np.full(len(self.vertices), INFINITY, dtype=np.uint32)
        distances[start_index] = 0

        current_fringe = deque([start_index])
        curr_dist = 0

        while current_fringe:
            if max_distance is not None and curr_dist >= max_distance:
                break

            next_fringe = deque()
            for vertex in current_fringe:
                begin = self._row_ptr[vertex]
                end = self._row_ptr[vertex + 1]

                for neighbour in self._edge_destinations[begin:end]:
                    if distances[neighbour] == INFINITY:
                        distances[neighbour] = curr_dist + 1
                        next_fringe.append(int(neighbour))

            current_fringe = next_fringe
            curr_dist += 1

        return distances
